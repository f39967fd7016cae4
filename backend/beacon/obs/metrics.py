"""Central registry for Prometheus metrics used across the responder."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

log = logging.getLogger(__name__)


REQUEST_COUNTER = Counter(
	"beacon_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"beacon_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

ALIAS_RESOLUTIONS = Counter(
	"beacon_alias_resolutions_total",
	"Directory queries by alias kind and outcome",
	["kind", "outcome"],
)

ALIAS_CACHE_EVENTS = Counter(
	"beacon_alias_cache_events_total",
	"Redirect cache lookups (hit, miss, coalesced, expired)",
	["event"],
)

UPSTREAM_LOOKUPS = Counter(
	"beacon_upstream_lookups_total",
	"Upstream directory lookups by outcome",
	["outcome"],
)

UPSTREAM_LATENCY = Histogram(
	"beacon_upstream_lookup_duration_seconds",
	"Upstream directory lookup latency in seconds",
	buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def record_resolution(kind: str, outcome: str) -> None:
	ALIAS_RESOLUTIONS.labels(kind=kind, outcome=outcome).inc()


def record_cache_event(event: str) -> None:
	ALIAS_CACHE_EVENTS.labels(event=event).inc()


def record_upstream(outcome: str, elapsed_seconds: float) -> None:
	UPSTREAM_LOOKUPS.labels(outcome=outcome).inc()
	UPSTREAM_LATENCY.observe(elapsed_seconds)
