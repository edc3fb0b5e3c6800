from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigError

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"

DEFAULT_RPS = 4
DEFAULT_RETRIES = 3
DEFAULT_MIN_BACKOFF = 1
DEFAULT_MAX_BACKOFF = 30

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


# ----------------------------------------------------------------------
# Env parsing helpers
# ----------------------------------------------------------------------
def _env_str(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = _env_str(env, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _env_str(env, name)
    if raw is None:
        return default
    if raw.lower() in _TRUE:
        return True
    if raw.lower() in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


# ----------------------------------------------------------------------
# Configuration records
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Credentials:
    """Cloudflare account email and API key."""

    email: str
    token: str = field(repr=False)

    def missing(self) -> list[str]:
        return [name for name, value in (("email", self.email), ("token", self.token)) if not value]


@dataclass(frozen=True)
class PolicyConfig:
    """Rate-limit, retry and logging knobs for the API client."""

    rps: int = DEFAULT_RPS
    retries: int = DEFAULT_RETRIES
    min_backoff: int = DEFAULT_MIN_BACKOFF
    max_backoff: int = DEFAULT_MAX_BACKOFF
    api_client_logging: bool = False

    def __post_init__(self) -> None:
        for name in ("rps", "retries", "min_backoff", "max_backoff"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.max_backoff < self.min_backoff:
            raise ConfigError(
                f"max_backoff ({self.max_backoff}) must be >= min_backoff ({self.min_backoff})"
            )


@dataclass(frozen=True)
class OrgSelector:
    """Which organization the client should be pinned to.

    ``org_id`` wins over ``use_org_from_zone`` when both are set.
    """

    org_id: Optional[str] = None
    use_org_from_zone: Optional[str] = None

    NONE = "none"
    EXPLICIT = "explicit"
    ZONE = "zone"

    @property
    def kind(self) -> str:
        if self.org_id:
            return self.EXPLICIT
        if self.use_org_from_zone:
            return self.ZONE
        return self.NONE


@dataclass(frozen=True)
class ProviderConfig:
    """Everything needed to bootstrap a Cloudflare client for one provider run."""

    credentials: Credentials
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    org: OrgSelector = field(default_factory=OrgSelector)
    base_url: str = DEFAULT_BASE_URL

    # Terraform CLI version, used for the host part of the User-Agent.
    host_version: Optional[str] = None

    # Rebuild the client (and its User-Agent) even when no organization was bound.
    always_rebuild: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> ProviderConfig:
        """Load configuration from CLOUDFLARE_* environment variables."""
        env = os.environ if env is None else env
        return cls(
            credentials=Credentials(
                email=_env_str(env, "CLOUDFLARE_EMAIL") or "",
                token=_env_str(env, "CLOUDFLARE_TOKEN") or "",
            ),
            policy=PolicyConfig(
                rps=_env_int(env, "CLOUDFLARE_RPS", DEFAULT_RPS),
                retries=_env_int(env, "CLOUDFLARE_RETRIES", DEFAULT_RETRIES),
                min_backoff=_env_int(env, "CLOUDFLARE_MIN_BACKOFF", DEFAULT_MIN_BACKOFF),
                max_backoff=_env_int(env, "CLOUDFLARE_MAX_BACKOFF", DEFAULT_MAX_BACKOFF),
                api_client_logging=_env_bool(env, "CLOUDFLARE_API_CLIENT_LOGGING", False),
            ),
            org=OrgSelector(
                org_id=_env_str(env, "CLOUDFLARE_ORG_ID"),
                use_org_from_zone=_env_str(env, "CLOUDFLARE_ORG_ZONE"),
            ),
            base_url=_env_str(env, "CLOUDFLARE_API_URL") or DEFAULT_BASE_URL,
            host_version=_env_str(env, "TF_CLI_VERSION"),
            always_rebuild=_env_bool(env, "CLOUDFLARE_ALWAYS_REBUILD", False),
        )

    def describe(self) -> Dict[str, Any]:
        """Return a JSON-friendly view with the token masked."""
        token = self.credentials.token
        return {
            "email": self.credentials.email,
            "token": (token[:4] + "..." if len(token) > 8 else "***") if token else None,
            "rps": self.policy.rps,
            "retries": self.policy.retries,
            "min_backoff": self.policy.min_backoff,
            "max_backoff": self.policy.max_backoff,
            "api_client_logging": self.policy.api_client_logging,
            "org_id": self.org.org_id,
            "use_org_from_zone": self.org.use_org_from_zone,
            "base_url": self.base_url,
        }
