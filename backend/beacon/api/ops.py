"""Operations endpoints: liveness and Prometheus exposition."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from beacon.settings import settings

router = APIRouter(prefix="", tags=["ops"])


async def require_metrics_access() -> None:
	if not settings.metrics_public:
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="metrics are not public")


@router.get("/health/live")
async def health_live() -> dict[str, str]:
	return {"status": "ok"}


@router.get("/metrics")
async def prometheus_metrics(_: None = Depends(require_metrics_access)) -> Response:
	payload = generate_latest()
	return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
