from __future__ import annotations

from typing import Any, Dict, List, Optional


class CloudflareProviderError(RuntimeError):
    """Base class for every error raised while configuring the provider."""


class ConfigError(CloudflareProviderError):
    """Raised when a configuration value is missing or malformed."""


class AuthConfigError(ConfigError):
    """Raised when the required Cloudflare credentials are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required credentials: " + ", ".join(missing))


class CloudflareAPIError(CloudflareProviderError):
    """Raised when the Cloudflare API answers with an error envelope or HTTP error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)


class OrgResolutionError(CloudflareProviderError):
    """A remote lookup failed while resolving the organization context."""

    step = "resolve organization"

    def __init__(self, message: str):
        super().__init__(f"{self.step}: {message}")


class ZoneLookupError(OrgResolutionError):
    step = "zone lookup"


class ZoneDetailError(OrgResolutionError):
    step = "zone details"


class OrgListError(OrgResolutionError):
    step = "list organizations"
