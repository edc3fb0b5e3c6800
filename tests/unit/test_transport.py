import logging
from unittest.mock import MagicMock, patch

import requests
from requests.adapters import HTTPAdapter

from cfprovider.transport import LoggingTransport, default_session


def test_default_session_mounts_logging_transport():
    session = default_session()

    assert isinstance(session.get_adapter("https://api.cloudflare.com/client/v4"), LoggingTransport)
    assert isinstance(session.get_adapter("http://localhost"), LoggingTransport)


def test_send_logs_request_and_response_at_debug(caplog):
    transport = LoggingTransport("Cloudflare")
    req = requests.Request(
        "GET",
        "https://api.cloudflare.com/client/v4/zones",
        headers={"X-Auth-Email": "a@b.com", "X-Auth-Key": "super-secret"},
    ).prepare()
    resp = MagicMock(status_code=200)

    caplog.set_level(logging.DEBUG, logger="cfprovider.transport")
    with patch.object(HTTPAdapter, "send", return_value=resp):
        out = transport.send(req)

    assert out is resp
    messages = [r.getMessage() for r in caplog.records if r.name == "cfprovider.transport"]
    assert any("request: GET https://api.cloudflare.com/client/v4/zones" in m for m in messages)
    assert any("-> 200" in m for m in messages)
    assert all(r.levelno == logging.DEBUG for r in caplog.records if r.name == "cfprovider.transport")
    assert "super-secret" not in caplog.text


def test_send_quiet_above_debug(caplog):
    transport = LoggingTransport()
    req = requests.Request("GET", "https://api.cloudflare.com/client/v4/zones").prepare()

    caplog.set_level(logging.INFO, logger="cfprovider.transport")
    with patch.object(HTTPAdapter, "send", return_value=MagicMock(status_code=200)):
        transport.send(req)

    assert not [r for r in caplog.records if r.name == "cfprovider.transport"]
