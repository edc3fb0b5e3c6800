from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import requests

from . import __version__
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_BACKOFF,
    DEFAULT_MIN_BACKOFF,
    DEFAULT_RETRIES,
    DEFAULT_RPS,
    Credentials,
)
from .exceptions import AuthConfigError, CloudflareAPIError
from .options import ClientOption, RetryPolicy
from .ratelimit import RateLimiter

__author__ = "Kevin Steptoe"
__copyright__ = "Kevin Steptoe"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"cfprovider/{__version__}"

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


# ----------------------------------------------------------------------
# Response records
# ----------------------------------------------------------------------
@dataclass
class Owner:
    id: str = ""
    type: str = ""
    name: str = ""

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Owner:
        data = data or {}
        return cls(
            id=data.get("id") or "",
            type=data.get("type") or "",
            name=data.get("name") or data.get("email") or "",
        )


@dataclass
class Zone:
    id: str
    name: str
    status: str = ""
    owner: Owner = field(default_factory=Owner)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Zone:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            status=data.get("status", ""),
            owner=Owner.from_api(data.get("owner")),
        )


@dataclass
class Organization:
    id: str
    name: str = ""
    status: str = ""
    roles: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Organization:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            status=data.get("status", ""),
            roles=list(data.get("roles") or []),
        )


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class CloudflareAPI:
    """Minimal Cloudflare v4 API client using email + API key authentication.

    Behaviour (rate limit, retries, logging, session, organization, user
    agent) is set by the option directives applied in :func:`new_client`.
    """

    def __init__(self, credentials: Credentials, *, base_url: str = DEFAULT_BASE_URL) -> None:
        missing = credentials.missing()
        if missing:
            raise AuthConfigError(missing)

        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.rate_limiter = RateLimiter(DEFAULT_RPS)
        self.retry_policy = RetryPolicy(DEFAULT_RETRIES, DEFAULT_MIN_BACKOFF, DEFAULT_MAX_BACKOFF)
        self.request_logger: Optional[logging.Logger] = None
        self.organization_id: Optional[str] = None
        self.user_agent: str = DEFAULT_USER_AGENT

    def __repr__(self) -> str:
        return (
            f"CloudflareAPI(email={self.credentials.email!r}, "
            f"organization_id={self.organization_id!r}, user_agent={self.user_agent!r})"
        )

    # --------------------------- Public methods -----------------------

    def zone_id_by_name(self, name: str) -> str:
        """Return the id of the zone called ``name``."""
        payload = self._get("/zones", params={"name": name, "per_page": 50})
        zones = payload.get("result") or []
        for zone in zones:
            if zone.get("name") == name:
                return zone["id"]
        raise CloudflareAPIError(f"Zone {name!r} could not be found", status_code=404)

    def zone_details(self, zone_id: str) -> Zone:
        """Return the zone record, including its owner."""
        payload = self._get(f"/zones/{zone_id}")
        return Zone.from_api(payload.get("result") or {})

    def list_organizations(self) -> List[Organization]:
        """Return the organizations the current user is a member of."""
        payload = self._get("/user/organizations")
        return [Organization.from_api(o) for o in payload.get("result") or []]

    def account_path(self, suffix: str = "") -> str:
        """Path prefix for account-scoped calls: the bound organization or the user."""
        if self.organization_id:
            return f"/organizations/{self.organization_id}{suffix}"
        return f"/user{suffix}"

    # --------------------------- HTTP wrappers -----------------------

    def _get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("GET", path, params=params)

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Auth-Email": self.credentials.email,
            "X-Auth-Key": self.credentials.token,
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Generic request with rate limiting, retry and logging."""
        url = f"{self.base_url}{path}"
        attempts = self.retry_policy.max_retries + 1

        for attempt in range(1, attempts + 1):
            self.rate_limiter.acquire()
            try:
                r = self.session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self._headers(),
                    timeout=timeout,
                )
            except requests.RequestException as e:
                _logger.warning("Request error (attempt %d/%d): %s", attempt, attempts, e)
                if attempt == attempts:
                    raise CloudflareAPIError(f"{method} {path} failed: {e}") from e
                time.sleep(self.retry_policy.backoff(attempt))
                continue

            if self.request_logger is not None:
                self.request_logger.info("%s %s -> HTTP %s", method, url, r.status_code)

            if r.status_code in RETRYABLE_STATUS and attempt < attempts:
                delay = self.retry_policy.backoff(attempt)
                _logger.warning(
                    "HTTP %s -> retrying %d/%d in %.1fs", r.status_code, attempt, attempts - 1, delay
                )
                time.sleep(delay)
                continue

            return self._unwrap(method, path, r)
        raise CloudflareAPIError("Exceeded maximum retries.")

    @staticmethod
    def _unwrap(method: str, path: str, r: requests.Response) -> Dict[str, Any]:
        """Return the JSON envelope, raising on HTTP or API-level failure."""
        try:
            payload = r.json()
        except ValueError:
            raise CloudflareAPIError(
                f"{method} {path}: HTTP {r.status_code} with non-JSON body: {r.text[:200]}",
                status_code=r.status_code,
            ) from None

        if r.status_code >= 400 or not payload.get("success", True):
            errors = payload.get("errors") or []
            detail = "; ".join(_format_error(e) for e in errors) or "unknown error"
            _logger.error("HTTP %s error for %s %s: %s", r.status_code, method, path, detail)
            raise CloudflareAPIError(
                f"{method} {path}: HTTP {r.status_code}: {detail}",
                status_code=r.status_code,
                errors=errors,
            )
        return payload


def _format_error(error: Any) -> str:
    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message", "")
        return f"{code}: {message}" if code is not None else str(message)
    return str(error)


# ----------------------------------------------------------------------
# Client factory
# ----------------------------------------------------------------------
def new_client(
    credentials: Credentials,
    options: Iterable[ClientOption],
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> CloudflareAPI:
    """Build an independent client and apply ``options`` in order.

    Raises AuthConfigError when email or token is empty.
    """
    api = CloudflareAPI(credentials, base_url=base_url)
    for option in options:
        option.apply(api)
    _logger.debug("Built %r", api)
    return api
