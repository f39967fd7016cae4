"""Static directory configuration loaded once at startup.

The artifact is a single JSON document::

    {
      "contact": {"matrix_id": "@admin:example.org", "role": "m.role.admin"},
      "delegate_url": "matrix.example.org:443",
      "public_rooms": [{"room_id": "!abc:example.org", ...}],
      "aliases": {
        "#lobby:example.org": {"room_id": "!abc:example.org", "servers": ["example.org"]},
        "#help:example.org": {"room_name": "#help:upstream.org", "home_server": "upstream.org"}
      }
    }

Alias records are told apart by their keys: ``room_id`` + ``servers`` is a
direct mapping, ``room_name`` + ``home_server`` redirects to another server's
directory. Anything else is rejected here rather than at request time.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from beacon.domain.directory.errors import ConfigError
from beacon.domain.directory.schemas import PublicRoom, SupportContact

_DIRECT_KEYS = frozenset({"room_id", "servers"})
_REDIRECT_KEYS = frozenset({"room_name", "home_server"})


class DirectAlias(BaseModel):
	model_config = ConfigDict(frozen=True, extra="forbid")

	room_id: str
	servers: Tuple[str, ...] = Field(..., min_length=1)

	@property
	def kind(self) -> Literal["direct"]:
		return "direct"

	@field_validator("room_id")
	def _qualified(cls, value: str) -> str:  # type: ignore[override]
		if ":" not in value:
			raise ValueError("room_id must be domain-qualified (contain ':')")
		return value


class RedirectAlias(BaseModel):
	model_config = ConfigDict(frozen=True, extra="forbid")

	room_name: str
	home_server: str = Field(..., min_length=1)

	@property
	def kind(self) -> Literal["redirect"]:
		return "redirect"


AliasRecord = Union[DirectAlias, RedirectAlias]


def _classify_alias(alias: str, raw: Any) -> AliasRecord:
	if not isinstance(raw, dict):
		raise ValueError(f"alias {alias!r} must be an object")
	keys = set(raw)
	direct = bool(keys & _DIRECT_KEYS)
	redirect = bool(keys & _REDIRECT_KEYS)
	if direct == redirect:
		raise ValueError(
			f"alias {alias!r} must define either room_id/servers or room_name/home_server"
		)
	model = DirectAlias if direct else RedirectAlias
	try:
		return model.model_validate(raw)
	except ValidationError as exc:
		raise ValueError(f"alias {alias!r}: {exc}") from exc


class DirectoryConfig(BaseModel):
	"""Immutable snapshot shared read-only by every handler."""

	model_config = ConfigDict(frozen=True)

	contact: Optional[SupportContact] = None
	delegate_url: str
	public_rooms: Tuple[PublicRoom, ...] = ()
	aliases: Dict[str, AliasRecord] = Field(default_factory=dict)

	@field_validator("aliases", mode="before")
	def _parse_aliases(cls, value: Any) -> Any:  # type: ignore[override]
		if not isinstance(value, dict):
			return value
		return {alias: _classify_alias(alias, raw) for alias, raw in value.items()}


def parse_config(text: str | bytes, *, source: str = "<memory>") -> DirectoryConfig:
	try:
		return DirectoryConfig.model_validate_json(text)
	except ValidationError as exc:
		raise ConfigError(f"invalid directory config {source}: {exc}") from exc


def load_config(path: str | Path) -> DirectoryConfig:
	"""Read and validate the directory artifact at ``path``."""
	target = Path(path)
	try:
		text = target.read_text(encoding="utf-8")
	except OSError as exc:
		raise ConfigError(f"cannot read directory config {target}: {exc}") from exc
	return parse_config(text, source=str(target))
