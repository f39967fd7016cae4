import asyncio

import pytest

from beacon.domain.directory.cache import ResolutionCache
from beacon.domain.directory.errors import AliasNotFound, ResolutionFailed, UpstreamUnavailable
from beacon.domain.directory.resolver import AliasResolver


@pytest.fixture
def fetcher(gated_fetcher):
	return gated_fetcher()


@pytest.fixture
def resolver(directory_config, fetcher, clock):
	return AliasResolver(directory_config, ResolutionCache(fetcher, clock=clock))


@pytest.mark.asyncio
async def test_direct_alias_answers_from_config(resolver, fetcher):
	result = await resolver.resolve("#lobby:example.org")
	assert result.room_id == "!lobby:example.org"
	assert result.servers == ["example.org", "backup.org"]
	assert fetcher.calls == []


@pytest.mark.asyncio
async def test_unknown_alias_is_not_found(resolver, fetcher):
	with pytest.raises(AliasNotFound) as excinfo:
		await resolver.resolve("#missing:example.org")
	assert "#missing:example.org" in str(excinfo.value)
	assert excinfo.value.errcode == "M_NOT_FOUND"
	assert fetcher.calls == []


@pytest.mark.asyncio
async def test_lookup_is_exact_match(resolver):
	with pytest.raises(AliasNotFound):
		await resolver.resolve("#LOBBY:example.org")


@pytest.mark.asyncio
async def test_redirect_alias_asks_home_server(resolver, fetcher):
	result = await resolver.resolve("#help:example.org")
	assert result.room_id == "!help:upstream.org"
	assert fetcher.calls == [("upstream.org", "#help:upstream.org")]


@pytest.mark.asyncio
async def test_redirects_sharing_a_target_share_the_cache(resolver, fetcher):
	await resolver.resolve("#help:example.org")
	await resolver.resolve("#also-help:example.org")
	await resolver.resolve("#help:example.org")
	assert len(fetcher.calls) == 1


@pytest.mark.asyncio
async def test_concurrent_redirects_fetch_once(resolver, fetcher):
	fetcher.gate.clear()
	first = asyncio.create_task(resolver.resolve("#help:example.org"))
	second = asyncio.create_task(resolver.resolve("#also-help:example.org"))
	for _ in range(5):
		await asyncio.sleep(0)
	fetcher.gate.set()
	results = await asyncio.gather(first, second)
	assert results[0] == results[1]
	assert len(fetcher.calls) == 1


@pytest.mark.asyncio
async def test_redirect_after_ttl_fetches_again(resolver, fetcher, clock):
	await resolver.resolve("#help:example.org")
	clock.advance(3600)
	await resolver.resolve("#help:example.org")
	assert len(fetcher.calls) == 2


@pytest.mark.asyncio
async def test_upstream_failure_is_wrapped(resolver, fetcher):
	fetcher.error = UpstreamUnavailable("down.org", "#gone:down.org", "connect failed")
	with pytest.raises(ResolutionFailed) as excinfo:
		await resolver.resolve("#broken:example.org")
	assert isinstance(excinfo.value.__cause__, UpstreamUnavailable)
	assert excinfo.value.expected is False
	assert "#broken:example.org" in str(excinfo.value)

	with pytest.raises(ResolutionFailed):
		await resolver.resolve("#broken:example.org")
	assert len(fetcher.calls) == 1
