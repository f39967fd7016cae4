"""Failure taxonomy for alias resolution and the public room directory."""

from __future__ import annotations


class ConfigError(RuntimeError):
	"""Raised when the directory artifact cannot be read or validated."""


class DirectoryError(RuntimeError):
	"""Base class for request-time failures.

	``expected`` failures are caused by the caller and are returned verbatim
	with their own ``errcode``. Anything else is an internal failure that the
	API layer logs and reports as ``M_UNKNOWN``.
	"""

	errcode = "M_UNKNOWN"
	status_code = 500
	expected = False

	def __init__(self, message: str | None = None) -> None:
		super().__init__(message or self.errcode)
		self.message = message or self.errcode


class AliasNotFound(DirectoryError):
	errcode = "M_NOT_FOUND"
	status_code = 400
	expected = True

	def __init__(self, alias: str) -> None:
		super().__init__(f"could not find alias for room {alias}")
		self.alias = alias


class InvalidCursor(DirectoryError):
	errcode = "M_INVALID_PARAM"
	status_code = 400
	expected = True

	def __init__(self, since: str) -> None:
		super().__init__(f"invalid pagination token {since!r}")
		self.since = since


class CursorOutOfRange(DirectoryError):
	errcode = "M_INVALID_PARAM"
	status_code = 400
	expected = True

	def __init__(self, offset: int, total: int) -> None:
		super().__init__(f"pagination token {offset} is past the end of the room list ({total})")
		self.offset = offset
		self.total = total


class UpstreamError(DirectoryError):
	"""Failure while asking another server's directory; cached like a result."""

	def __init__(self, home_server: str, room_name: str, message: str) -> None:
		super().__init__(message)
		self.home_server = home_server
		self.room_name = room_name


class UpstreamUnavailable(UpstreamError):
	pass


class MalformedUpstreamResponse(UpstreamError):
	pass


class ResolutionFailed(DirectoryError):
	def __init__(self, alias: str) -> None:
		super().__init__(f"Failed to resolve redirect alias {alias}")
		self.alias = alias
