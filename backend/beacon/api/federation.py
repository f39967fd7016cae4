"""Federation read endpoints: version, public rooms and alias queries."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from beacon import __version__
from beacon.api.deps import get_config, get_resolver
from beacon.domain.directory import AliasResolver, DirectoryConfig, paginate
from beacon.domain.directory.schemas import (
	MatrixErrorBody,
	PublicRoomsPage,
	ResolvedAlias,
	ServerVersion,
	VersionResponse,
)
from beacon.settings import settings

router = APIRouter(prefix="/_matrix/federation/v1", tags=["federation"])

_ERRORS = {400: {"model": MatrixErrorBody}, 500: {"model": MatrixErrorBody}}


@router.get("/version", response_model=VersionResponse)
async def server_version() -> VersionResponse:
	return VersionResponse(server=ServerVersion(name=settings.server_name, version=__version__))


@router.get(
	"/publicRooms",
	response_model=PublicRoomsPage,
	response_model_exclude_none=True,
	responses=_ERRORS,
)
async def public_rooms(
	include_all_networks: bool = Query(default=False),
	limit: int = Query(default=0, ge=0),
	since: Optional[str] = Query(default=None),
	config: DirectoryConfig = Depends(get_config),
) -> PublicRoomsPage:
	return paginate(
		config.public_rooms,
		since=since,
		limit=limit,
		include_all_networks=include_all_networks,
	)


@router.get("/query/directory", response_model=ResolvedAlias, responses=_ERRORS)
async def query_directory(
	room_alias: str = Query(...),
	resolver: AliasResolver = Depends(get_resolver),
) -> ResolvedAlias:
	return await resolver.resolve(room_alias)
