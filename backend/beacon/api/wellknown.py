"""Well-known discovery documents."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from beacon.api.deps import get_config
from beacon.domain.directory import DirectoryConfig
from beacon.domain.directory.schemas import WellKnownServer, WellKnownSupport

router = APIRouter(prefix="/.well-known/matrix", tags=["well-known"])


@router.get("/server", response_model=WellKnownServer, response_model_by_alias=True)
async def well_known_server(config: DirectoryConfig = Depends(get_config)) -> WellKnownServer:
	return WellKnownServer(server=config.delegate_url)


@router.get("/support", response_model=WellKnownSupport)
async def well_known_support(config: DirectoryConfig = Depends(get_config)) -> WellKnownSupport:
	contacts = [config.contact] if config.contact is not None else []
	return WellKnownSupport(support_page=None, contacts=contacts)
