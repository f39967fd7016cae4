"""Offset pagination over the static public room list."""

from __future__ import annotations

from typing import Optional, Sequence

from beacon.domain.directory.errors import CursorOutOfRange, InvalidCursor
from beacon.domain.directory.schemas import PublicRoom, PublicRoomsPage


def decode_since(since: Optional[str]) -> int:
	"""Turn a batch token into an offset; tokens are plain decimal integers."""
	if since is None:
		return 0
	if not since.isascii() or not since.isdigit():
		raise InvalidCursor(since)
	try:
		return int(since)
	except ValueError as exc:
		raise InvalidCursor(since) from exc


def paginate(
	rooms: Sequence[PublicRoom],
	since: Optional[str] = None,
	limit: int = 0,
	include_all_networks: bool = False,
) -> PublicRoomsPage:
	"""Slice ``rooms`` into one page.

	``limit == 0`` returns everything from the offset on and never emits batch
	tokens. Cross-network listings are suppressed wholesale: without
	``include_all_networks`` the chunk is empty but the total is still the real
	room count.
	"""
	offset = decode_since(since)
	total = len(rooms)
	if offset > total:
		raise CursorOutOfRange(offset, total)
	bounded = limit > 0
	end = offset + limit if bounded else total

	chunk = list(rooms[offset:min(end, total)]) if include_all_networks else []

	prev_batch: Optional[str] = None
	next_batch: Optional[str] = None
	if bounded and chunk:
		if offset > 0:
			prev_batch = str(max(offset - limit, 0))
		if end < total:
			next_batch = str(offset + len(chunk))
	return PublicRoomsPage(
		chunk=chunk,
		prev_batch=prev_batch,
		next_batch=next_batch,
		total_room_count_estimate=total,
	)
