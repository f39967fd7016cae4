"""Observability package bootstrap."""

from __future__ import annotations

from fastapi import FastAPI

from beacon.obs import middleware
from beacon.settings import settings


def init(app: FastAPI) -> None:
	"""Install request instrumentation; logging is configured by the process entrypoint."""
	middleware.install(app, enabled=settings.obs_enabled)


__all__ = ["init"]
