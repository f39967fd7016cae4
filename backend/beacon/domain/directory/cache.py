"""Single-flight, time-boxed memo for redirected alias lookups."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from beacon.domain.directory.errors import UpstreamError
from beacon.domain.directory.schemas import ResolvedAlias
from beacon.domain.directory.upstream import DirectoryFetcher
from beacon.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]

DEFAULT_TTL_SECONDS = 3600.0


@dataclass(frozen=True)
class CacheEntry:
	created_at: float
	value: Optional[ResolvedAlias] = None
	error: Optional[UpstreamError] = None

	def unwrap(self) -> ResolvedAlias:
		if self.error is not None:
			# Reset so repeated raises don't pile frames onto one traceback.
			raise self.error.with_traceback(None)
		assert self.value is not None
		return self.value.model_copy(deep=True)


class ResolutionCache:
	"""Memoise ``fetcher.fetch`` per ``(home_server, room_name)``.

	Completed entries, successes and upstream failures alike, stay valid for
	``ttl_seconds`` and are dropped lazily on the next access after that. While
	a key has no live entry, exactly one fetch runs for it; concurrent callers
	await the same task. The task is shielded so a disconnecting caller cannot
	cancel a lookup other callers are waiting on.
	"""

	def __init__(
		self,
		fetcher: DirectoryFetcher,
		*,
		ttl_seconds: float = DEFAULT_TTL_SECONDS,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		self.fetcher = fetcher
		self.ttl_seconds = ttl_seconds
		self._clock = clock
		self._entries: dict[CacheKey, CacheEntry] = {}
		self._inflight: dict[CacheKey, asyncio.Task[CacheEntry]] = {}

	def __len__(self) -> int:
		return len(self._entries)

	def _live_entry(self, key: CacheKey) -> Optional[CacheEntry]:
		entry = self._entries.get(key)
		if entry is None:
			return None
		if self._clock() - entry.created_at >= self.ttl_seconds:
			del self._entries[key]
			obs_metrics.record_cache_event("expired")
			return None
		return entry

	async def get_or_compute(self, home_server: str, room_name: str) -> ResolvedAlias:
		key = (home_server, room_name)
		entry = self._live_entry(key)
		if entry is not None:
			obs_metrics.record_cache_event("hit")
			return entry.unwrap()

		task = self._inflight.get(key)
		if task is None:
			obs_metrics.record_cache_event("miss")
			task = asyncio.create_task(self._compute(key), name=f"alias-lookup:{home_server}")
			self._inflight[key] = task
		else:
			obs_metrics.record_cache_event("coalesced")
		entry = await asyncio.shield(task)
		return entry.unwrap()

	async def _compute(self, key: CacheKey) -> CacheEntry:
		home_server, room_name = key
		try:
			value = await self.fetcher.fetch(home_server, room_name)
			entry = CacheEntry(created_at=self._clock(), value=value)
		except UpstreamError as exc:
			logger.error(
				"Error during resolution of %s from %s",
				room_name,
				home_server,
				exc_info=exc,
				extra={"home_server": home_server, "room_name": room_name},
			)
			entry = CacheEntry(created_at=self._clock(), error=exc)
		finally:
			self._inflight.pop(key, None)
		self._entries[key] = entry
		return entry
