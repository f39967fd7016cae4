import json
import logging

from beacon.obs import logging as obs_logging


def _record(msg="hello", **extra):
	record = logging.LogRecord("beacon.test", logging.ERROR, __file__, 1, msg, None, None)
	for key, value in extra.items():
		setattr(record, key, value)
	return record


def test_formatter_includes_bound_request_context():
	tokens = obs_logging.bind_context(request_id="rid-1", route="/x", client_ip="10.0.0.1")
	try:
		payload = json.loads(obs_logging.JSONLogFormatter().format(_record()))
	finally:
		obs_logging.reset_context(tokens)
	assert payload["msg"] == "hello"
	assert payload["level"] == "error"
	assert payload["request_id"] == "rid-1"
	assert payload["route"] == "/x"
	assert payload["ip"] == "10.0.0.1"
	assert "request_id" not in json.loads(obs_logging.JSONLogFormatter().format(_record()))


def test_formatter_redacts_and_truncates_extra_fields():
	record = _record(home_server="upstream.org", auth_token="abc", room_name="r" * 400)
	payload = json.loads(obs_logging.JSONLogFormatter().format(record))
	assert payload["home_server"] == "upstream.org"
	assert payload["auth_token"] == "[redacted]"
	assert len(payload["room_name"]) == 257
