import json

import pytest

from beacon.domain.directory.config import DirectAlias, RedirectAlias, load_config, parse_config
from beacon.domain.directory.errors import ConfigError


def _with_aliases(config_document, aliases):
	config_document["aliases"] = aliases
	return json.dumps(config_document)


def test_alias_shapes_are_told_apart(directory_config):
	lobby = directory_config.aliases["#lobby:example.org"]
	help_alias = directory_config.aliases["#help:example.org"]
	assert isinstance(lobby, DirectAlias)
	assert lobby.kind == "direct"
	assert lobby.servers == ("example.org", "backup.org")
	assert isinstance(help_alias, RedirectAlias)
	assert help_alias.kind == "redirect"
	assert help_alias.home_server == "upstream.org"


def test_public_rooms_keep_order_and_optionals(directory_config):
	rooms = directory_config.public_rooms
	assert [room.room_id for room in rooms][:3] == ["!room0:example.org", "!room1:example.org", "!room2:example.org"]
	assert rooms[0].topic is None
	assert rooms[1].room_type == "m.space"


@pytest.mark.parametrize(
	"record",
	[
		{"room_id": "!a:b.org", "servers": ["b.org"], "room_name": "#x:b.org", "home_server": "b.org"},
		{"room_id": "!a:b.org", "home_server": "b.org"},
		{},
		{"something": "else"},
		{"room_id": "!a:b.org"},
		{"room_name": "#x:b.org"},
		{"room_id": "!a:b.org", "servers": ["b.org"], "extra": True},
		"!a:b.org",
	],
)
def test_ambiguous_or_partial_alias_records_are_rejected(config_document, record):
	with pytest.raises(ConfigError):
		parse_config(_with_aliases(config_document, {"#bad:example.org": record}))


def test_direct_alias_needs_qualified_room_and_servers(config_document):
	with pytest.raises(ConfigError):
		parse_config(_with_aliases(config_document, {"#a:x": {"room_id": "bare", "servers": ["x"]}}))
	with pytest.raises(ConfigError):
		parse_config(_with_aliases(config_document, {"#a:x": {"room_id": "!a:x", "servers": []}}))


def test_missing_delegate_url_is_rejected(config_document):
	del config_document["delegate_url"]
	with pytest.raises(ConfigError) as excinfo:
		parse_config(json.dumps(config_document), source="test.json")
	assert "test.json" in str(excinfo.value)


def test_invalid_json_is_rejected():
	with pytest.raises(ConfigError):
		parse_config("{not json")


def test_minimal_config_defaults():
	config = parse_config('{"delegate_url": "m.example.org:443"}')
	assert config.contact is None
	assert config.public_rooms == ()
	assert config.aliases == {}


def test_load_config_reads_file(tmp_path, config_document):
	path = tmp_path / "config.json"
	path.write_text(json.dumps(config_document), encoding="utf-8")
	config = load_config(path)
	assert config.delegate_url == "matrix.example.org:443"
	assert len(config.public_rooms) == 10


def test_load_config_missing_file(tmp_path):
	with pytest.raises(ConfigError):
		load_config(tmp_path / "nope.json")
