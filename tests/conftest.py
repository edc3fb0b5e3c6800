from unittest.mock import MagicMock

import pytest

from cfprovider.api import CloudflareAPI, Organization, Owner, Zone
from cfprovider.config import Credentials

_CF_VARS = [
    "CLOUDFLARE_EMAIL",
    "CLOUDFLARE_TOKEN",
    "CLOUDFLARE_RPS",
    "CLOUDFLARE_RETRIES",
    "CLOUDFLARE_MIN_BACKOFF",
    "CLOUDFLARE_MAX_BACKOFF",
    "CLOUDFLARE_API_CLIENT_LOGGING",
    "CLOUDFLARE_ORG_ZONE",
    "CLOUDFLARE_ORG_ID",
    "CLOUDFLARE_API_URL",
    "CLOUDFLARE_ALWAYS_REBUILD",
    "TF_CLI_VERSION",
    "TF_APPEND_USER_AGENT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own CLOUDFLARE_* settings out of every test."""
    for var in _CF_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def creds():
    return Credentials(email="a@b.com", token="t")


def _api_response(result=None, *, status=200, success=True, errors=None):
    """Build a mocked requests.Response carrying a Cloudflare envelope."""
    r = MagicMock()
    r.status_code = status
    r.json.return_value = {
        "success": success,
        "errors": errors or [],
        "messages": [],
        "result": result,
    }
    r.text = str(result)
    return r


@pytest.fixture
def lookup_client():
    """A stand-in for the first-pass client with canned zone/org lookups."""

    def _make(owner_id="org1", org_ids=("org1", "org2"), zone_id="z1"):
        client = MagicMock(spec=CloudflareAPI)
        client.user_agent = "cfprovider/test"
        client.zone_id_by_name.return_value = zone_id
        client.zone_details.return_value = Zone(
            id=zone_id, name="example.com", owner=Owner(id=owner_id, type="organization", name="Org")
        )
        client.list_organizations.return_value = [Organization(id=i) for i in org_ids]
        return client

    return _make


@pytest.fixture
def api_response():
    return _api_response
