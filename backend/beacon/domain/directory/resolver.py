"""Alias resolution against the static config and delegated directories."""

from __future__ import annotations

import logging

from beacon.domain.directory.cache import ResolutionCache
from beacon.domain.directory.config import DirectAlias, DirectoryConfig
from beacon.domain.directory.errors import AliasNotFound, ResolutionFailed, UpstreamError
from beacon.domain.directory.schemas import ResolvedAlias
from beacon.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class AliasResolver:
	def __init__(self, config: DirectoryConfig, cache: ResolutionCache) -> None:
		self.config = config
		self.cache = cache

	async def resolve(self, alias: str) -> ResolvedAlias:
		"""Map ``alias`` to a room id and routing servers.

		Direct records answer from config without touching the network.
		Redirect records go through the cache, which asks the record's home
		server for its own directory entry at most once per TTL window.
		"""
		record = self.config.aliases.get(alias)
		if record is None:
			obs_metrics.record_resolution("unknown", "not_found")
			raise AliasNotFound(alias)

		if isinstance(record, DirectAlias):
			obs_metrics.record_resolution(record.kind, "ok")
			return ResolvedAlias(room_id=record.room_id, servers=list(record.servers))

		try:
			result = await self.cache.get_or_compute(record.home_server, record.room_name)
		except UpstreamError as exc:
			obs_metrics.record_resolution(record.kind, "failed")
			raise ResolutionFailed(alias) from exc
		obs_metrics.record_resolution(record.kind, "ok")
		return result
