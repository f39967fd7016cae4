"""Translate failures into Matrix ``{errcode, error}`` envelopes."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from beacon.domain.directory.errors import DirectoryError

logger = logging.getLogger(__name__)

UNKNOWN = "M_UNKNOWN"

_HTTP_ERRCODES = {
	status.HTTP_403_FORBIDDEN: "M_FORBIDDEN",
	status.HTTP_404_NOT_FOUND: "M_UNRECOGNIZED",
	status.HTTP_405_METHOD_NOT_ALLOWED: "M_UNRECOGNIZED",
}


def matrix_error(status_code: int, errcode: str, error: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={"errcode": errcode, "error": error})


def translate(exc: DirectoryError) -> JSONResponse:
	"""Expected failures go out as-is; everything else is logged and collapsed."""
	if exc.expected:
		logger.info(
			"directory_request_rejected",
			extra={"errcode": exc.errcode, "error": exc.message},
		)
		return matrix_error(exc.status_code, exc.errcode, exc.message)
	logger.error("directory_request_failed: %s", exc, exc_info=exc)
	return matrix_error(status.HTTP_500_INTERNAL_SERVER_ERROR, UNKNOWN, str(exc))


def _describe_validation(exc: RequestValidationError) -> tuple[str, str]:
	errors = exc.errors()
	errcode = "M_MISSING_PARAM" if any(err.get("type") == "missing" for err in errors) else "M_INVALID_PARAM"
	parts = []
	for err in errors:
		loc = [str(item) for item in err.get("loc", ()) if item not in ("query", "path")]
		parts.append(f"{'.'.join(loc) or 'request'}: {err.get('msg', 'invalid')}")
	return errcode, "; ".join(parts) or "invalid request"


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(DirectoryError)
	async def directory_exc_handler(request: Request, exc: DirectoryError):  # type: ignore[override]
		return translate(exc)

	@app.exception_handler(RequestValidationError)
	async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
		errcode, message = _describe_validation(exc)
		return matrix_error(status.HTTP_400_BAD_REQUEST, errcode, message)

	@app.exception_handler(StarletteHTTPException)
	async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
		errcode = _HTTP_ERRCODES.get(exc.status_code, UNKNOWN)
		return matrix_error(exc.status_code, errcode, str(exc.detail))

	@app.exception_handler(Exception)
	async def unhandled_exc_handler(request: Request, exc: Exception):  # type: ignore[override]
		logger.error("unhandled_error: %s", exc, exc_info=exc)
		return matrix_error(status.HTTP_500_INTERNAL_SERVER_ERROR, UNKNOWN, str(exc))
