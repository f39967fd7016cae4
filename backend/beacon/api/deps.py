"""Request dependencies exposing the per-application directory state."""

from __future__ import annotations

from fastapi import Request

from beacon.domain.directory import AliasResolver, DirectoryConfig


def get_config(request: Request) -> DirectoryConfig:
	return request.app.state.config


def get_resolver(request: Request) -> AliasResolver:
	return request.app.state.resolver
