"""Tests for cfprovider.options."""

import logging
from unittest.mock import MagicMock

import requests

from cfprovider.config import PolicyConfig
from cfprovider.options import (
    ClientOptions,
    HTTPClient,
    RateLimit,
    RetryPolicy,
    UserAgent,
    UsingLogger,
    UsingOrganization,
    build_policy_options,
)
from cfprovider.transport import LoggingTransport


class TestBuildPolicyOptions:
    def test_order_without_logging(self):
        opts = build_policy_options(PolicyConfig(rps=7, retries=2, min_backoff=1, max_backoff=9))

        kinds = [type(o) for o in opts]
        assert kinds == [RateLimit, RetryPolicy, HTTPClient]
        assert opts.items[0] == RateLimit(7.0)
        assert opts.items[1] == RetryPolicy(2, 1, 9)

    def test_logging_directive_before_transport(self):
        opts = build_policy_options(PolicyConfig(api_client_logging=True))

        kinds = [type(o) for o in opts]
        assert kinds == [RateLimit, RetryPolicy, UsingLogger, HTTPClient]
        assert opts.items[2].logger.name == "cfprovider.api.requests"

    def test_transport_always_wrapped(self):
        opts = build_policy_options(PolicyConfig(api_client_logging=False))
        (http,) = opts.of_type(HTTPClient)

        assert isinstance(http.session, requests.Session)
        assert isinstance(http.session.get_adapter("https://api.cloudflare.com"), LoggingTransport)

    def test_each_call_gets_its_own_session(self):
        a = build_policy_options(PolicyConfig()).of_type(HTTPClient)[0]
        b = build_policy_options(PolicyConfig()).of_type(HTTPClient)[0]
        assert a.session is not b.session


class TestClientOptions:
    def test_with_option_returns_new_value(self):
        base = ClientOptions((RateLimit(1.0),))

        extended = base.with_option(UsingOrganization("org1"))

        assert len(base) == 1
        assert len(extended) == 2
        assert extended.of_type(UsingOrganization) == (UsingOrganization("org1"),)

    def test_duplicates_are_kept_in_order(self):
        opts = ClientOptions().with_option(UserAgent("a")).with_option(UserAgent("b"))
        assert [o.user_agent for o in opts.of_type(UserAgent)] == ["a", "b"]


class TestRetryPolicyBackoff:
    def test_exponential_then_capped(self):
        policy = RetryPolicy(max_retries=5, min_backoff=1, max_backoff=5)

        assert [policy.backoff(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_zero_floor(self):
        assert RetryPolicy(3, 0, 30).backoff(3) == 0.0


def test_using_logger_default_logger():
    assert UsingLogger().logger is logging.getLogger("cfprovider.api.requests")


class TestHTTPClientApply:
    def test_replaced_default_session_is_closed(self, creds):
        from cfprovider.api import CloudflareAPI

        api = CloudflareAPI(creds)
        default = MagicMock()
        api.session = default
        session = requests.Session()

        HTTPClient(session).apply(api)

        default.close.assert_called_once()
        assert api.session is session

    def test_reapplying_same_session_keeps_it_open(self, creds):
        from cfprovider.api import CloudflareAPI

        api = CloudflareAPI(creds)
        session = MagicMock(spec=requests.Session)
        api.session = session

        HTTPClient(session).apply(api)

        session.close.assert_not_called()
