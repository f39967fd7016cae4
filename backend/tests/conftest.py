import asyncio
import json
import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from beacon.domain.directory.config import parse_config
from beacon.domain.directory.schemas import ResolvedAlias
from beacon.main import create_app


def make_room(index: int, **overrides) -> dict:
	room = {
		"room_id": f"!room{index}:example.org",
		"num_joined_members": index,
		"room_type": "m.space" if index % 2 else "m.room",
		"guest_can_join": False,
		"world_readable": True,
		"name": f"Room {index}",
	}
	room.update(overrides)
	return room


CONFIG_DOCUMENT = {
	"contact": {
		"matrix_id": "@admin:example.org",
		"email_address": None,
		"role": "m.role.admin",
	},
	"delegate_url": "matrix.example.org:443",
	"public_rooms": [make_room(i) for i in range(10)],
	"aliases": {
		"#lobby:example.org": {"room_id": "!lobby:example.org", "servers": ["example.org", "backup.org"]},
		"#help:example.org": {"room_name": "#help:upstream.org", "home_server": "upstream.org"},
		"#also-help:example.org": {"room_name": "#help:upstream.org", "home_server": "upstream.org"},
		"#broken:example.org": {"room_name": "#gone:down.org", "home_server": "down.org"},
	},
}


class FakeClock:
	def __init__(self, start: float = 1000.0) -> None:
		self.now = start

	def __call__(self) -> float:
		return self.now

	def advance(self, seconds: float) -> None:
		self.now += seconds


class GatedFetcher:
	"""Directory fetcher that blocks until released and records every call."""

	def __init__(self, result: ResolvedAlias | None = None, error: Exception | None = None) -> None:
		self.calls: list[tuple[str, str]] = []
		self.gate = asyncio.Event()
		self.gate.set()
		self.result = result or ResolvedAlias(room_id="!help:upstream.org", servers=["upstream.org"])
		self.error = error

	async def fetch(self, home_server: str, room_name: str) -> ResolvedAlias:
		self.calls.append((home_server, room_name))
		await self.gate.wait()
		if self.error is not None:
			raise self.error
		return self.result.model_copy(deep=True)


@pytest.fixture
def config_document() -> dict:
	return json.loads(json.dumps(CONFIG_DOCUMENT))


@pytest.fixture
def directory_config(config_document):
	return parse_config(json.dumps(config_document))


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()


@pytest.fixture
def upstream_requests() -> list:
	return []


@pytest.fixture
def upstream_transport(upstream_requests):
	def handler(request: httpx.Request) -> httpx.Response:
		upstream_requests.append(request)
		if request.url.host == "upstream.org":
			return httpx.Response(200, json={"room_id": "!help", "servers": ["upstream.org", "mirror.org"]})
		return httpx.Response(502, json={"errcode": "M_UNKNOWN", "error": "bad gateway"})

	return httpx.MockTransport(handler)


@pytest_asyncio.fixture
async def api_client(directory_config, upstream_transport):
	upstream = httpx.AsyncClient(transport=upstream_transport)
	app = create_app(directory_config, http_client=upstream)
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
	await upstream.aclose()


@pytest.fixture
def gated_fetcher():
	return GatedFetcher
