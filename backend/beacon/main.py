"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI

from beacon import __version__
from beacon import obs
from beacon.api import federation, ops, wellknown
from beacon.api.errors import install_error_handlers
from beacon.domain.directory import (
	AliasResolver,
	DirectoryConfig,
	ResolutionCache,
	UpstreamDirectoryClient,
	load_config,
)
from beacon.domain.directory.errors import ConfigError
from beacon.obs import logging as obs_logging
from beacon.settings import settings

logger = logging.getLogger(__name__)


def create_app(
	config: DirectoryConfig,
	*,
	http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
	"""Build the responder around an already-validated directory config.

	When ``http_client`` is omitted the application owns one for upstream
	directory lookups and closes it on shutdown.
	"""
	owns_client = http_client is None
	client = http_client or httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		logger.info(
			"beacon_started",
			extra={
				"delegate_url": config.delegate_url,
				"public_rooms": len(config.public_rooms),
				"aliases": len(config.aliases),
			},
		)
		try:
			yield
		finally:
			if owns_client:
				await client.aclose()

	app = FastAPI(title="matrix-beacon", version=__version__, lifespan=lifespan)
	fetcher = UpstreamDirectoryClient(
		http=client,
		scheme=settings.upstream_scheme,
		request_timeout=settings.upstream_timeout_seconds,
	)
	cache = ResolutionCache(fetcher, ttl_seconds=settings.alias_cache_ttl_seconds)
	app.state.config = config
	app.state.resolver = AliasResolver(config, cache)

	obs.init(app)
	install_error_handlers(app)
	app.include_router(wellknown.router)
	app.include_router(federation.router)
	app.include_router(ops.router)
	return app


def run() -> None:
	"""Console entrypoint: load the directory config, then serve it."""
	obs_logging.configure_logging()
	try:
		config = load_config(settings.config_path)
	except ConfigError as exc:
		logger.error("config_load_failed: %s", exc)
		sys.exit(1)
	app = create_app(config)
	uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
	run()
