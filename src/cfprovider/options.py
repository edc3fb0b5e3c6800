"""Option directives consumed by :func:`cfprovider.api.new_client`.

Each directive is a small frozen value with an ``apply(api)`` method. The
client applies them in order, so for single-valued settings (organization,
user agent, session) the last one wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Tuple, Type, TypeVar

import requests

from .config import PolicyConfig
from .ratelimit import RateLimiter
from .transport import default_session

# Client-side request log (INFO); separate from the DEBUG transport log.
REQUEST_LOGGER = "cfprovider.api.requests"

if TYPE_CHECKING:  # pragma: no cover
    from .api import CloudflareAPI


class ClientOption:
    """Base class for client construction directives."""

    def apply(self, api: CloudflareAPI) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class RateLimit(ClientOption):
    rps: float

    def apply(self, api: CloudflareAPI) -> None:
        api.rate_limiter = RateLimiter(self.rps)


@dataclass(frozen=True)
class RetryPolicy(ClientOption):
    max_retries: int
    min_backoff: int
    max_backoff: int

    def apply(self, api: CloudflareAPI) -> None:
        api.retry_policy = self

    def backoff(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (1-based), clamped to the bounds."""
        delay = self.min_backoff * (2 ** max(attempt - 1, 0))
        return float(min(max(delay, self.min_backoff), self.max_backoff))


@dataclass(frozen=True)
class UsingLogger(ClientOption):
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(REQUEST_LOGGER))

    def apply(self, api: CloudflareAPI) -> None:
        api.request_logger = self.logger


@dataclass(frozen=True)
class HTTPClient(ClientOption):
    session: requests.Session = field(compare=False)

    def apply(self, api: CloudflareAPI) -> None:
        # The client's own default session is replaced, so release its pool.
        if api.session is not self.session:
            api.session.close()
        api.session = self.session


@dataclass(frozen=True)
class UsingOrganization(ClientOption):
    org_id: str

    def apply(self, api: CloudflareAPI) -> None:
        api.organization_id = self.org_id


@dataclass(frozen=True)
class UserAgent(ClientOption):
    user_agent: str

    def apply(self, api: CloudflareAPI) -> None:
        api.user_agent = self.user_agent


_O = TypeVar("_O", bound=ClientOption)


@dataclass(frozen=True)
class ClientOptions:
    """Immutable, ordered list of client directives."""

    items: Tuple[ClientOption, ...] = ()

    def with_option(self, option: ClientOption) -> ClientOptions:
        return ClientOptions(self.items + (option,))

    def of_type(self, kind: Type[_O]) -> Tuple[_O, ...]:
        return tuple(o for o in self.items if isinstance(o, kind))

    def __iter__(self) -> Iterator[ClientOption]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def build_policy_options(policy: PolicyConfig) -> ClientOptions:
    """Translate policy knobs into the base client directives.

    Order: rate limit, retry policy, request logger (only when enabled),
    HTTP client with the diagnostic logging transport (always).
    """
    options = ClientOptions(
        (
            RateLimit(float(policy.rps)),
            RetryPolicy(policy.retries, policy.min_backoff, policy.max_backoff),
        )
    )
    if policy.api_client_logging:
        options = options.with_option(UsingLogger())
    return options.with_option(HTTPClient(default_session("Cloudflare")))
