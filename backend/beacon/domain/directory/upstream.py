"""Client for another homeserver's room directory API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Protocol
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from beacon.domain.directory.errors import MalformedUpstreamResponse, UpstreamUnavailable
from beacon.domain.directory.schemas import ResolvedAlias
from beacon.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

DIRECTORY_PATH = "/_matrix/client/v3/directory/room/"


class DirectoryFetcher(Protocol):
	"""Anything able to resolve a room name against a home server."""

	async def fetch(self, home_server: str, room_name: str) -> ResolvedAlias:
		...


class _DirectoryPayload(BaseModel):
	room_id: str
	servers: List[str]


def directory_url(home_server: str, room_name: str, *, scheme: str = "https") -> str:
	# safe="" keeps '/', '#', ':' and friends inside the single path segment
	return f"{scheme}://{home_server}{DIRECTORY_PATH}{quote(room_name, safe='')}"


def normalise(home_server: str, room_name: str, payload: _DirectoryPayload) -> ResolvedAlias:
	"""Qualify a bare room id with the first listed server."""
	if not payload.servers:
		raise MalformedUpstreamResponse(
			home_server,
			room_name,
			f"missing servers in server list for {room_name}",
		)
	room_id = payload.room_id
	if ":" not in room_id:
		room_id = f"{room_id}:{payload.servers[0]}"
	return ResolvedAlias(room_id=room_id, servers=list(payload.servers))


@dataclass
class UpstreamDirectoryClient(DirectoryFetcher):
	"""Single-attempt directory lookup over a shared ``httpx.AsyncClient``."""

	http: httpx.AsyncClient
	scheme: str = "https"
	request_timeout: float = 5.0

	async def fetch(self, home_server: str, room_name: str) -> ResolvedAlias:
		url = directory_url(home_server, room_name, scheme=self.scheme)
		start = time.perf_counter()
		outcome = "error"
		try:
			payload = await self._get(home_server, room_name, url)
			result = normalise(home_server, room_name, payload)
			outcome = "ok"
			return result
		except MalformedUpstreamResponse:
			outcome = "malformed"
			raise
		finally:
			obs_metrics.record_upstream(outcome, time.perf_counter() - start)

	async def _get(self, home_server: str, room_name: str, url: str) -> _DirectoryPayload:
		try:
			response = await self.http.get(url, timeout=self.request_timeout)
		except (httpx.HTTPError, httpx.InvalidURL) as exc:
			raise UpstreamUnavailable(
				home_server,
				room_name,
				f"directory lookup against {home_server} failed: {exc}",
			) from exc
		if not response.is_success:
			raise UpstreamUnavailable(
				home_server,
				room_name,
				f"directory lookup against {home_server} returned HTTP {response.status_code}",
			)
		try:
			return _DirectoryPayload.model_validate_json(response.content)
		except ValidationError as exc:
			raise UpstreamUnavailable(
				home_server,
				room_name,
				f"undecodable directory response from {home_server}",
			) from exc
