from __future__ import annotations

import logging
import time
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter

TRANSPORT_LOGGER = "cfprovider.transport"

_REDACTED_HEADERS = {"x-auth-key", "authorization"}


def _safe_headers(headers: Any) -> dict:
    return {k: ("<redacted>" if k.lower() in _REDACTED_HEADERS else v) for k, v in headers.items()}


class LoggingTransport(HTTPAdapter):
    """HTTPAdapter that traces every request/response pair at DEBUG level.

    This is the wire-level diagnostic log; the client's own request logger
    (see ``UsingLogger``) is separate and logs at INFO.
    """

    def __init__(self, name: str = "Cloudflare", logger: Optional[logging.Logger] = None, **kwargs: Any):
        self.name = name
        self.logger = logger or logging.getLogger(TRANSPORT_LOGGER)
        super().__init__(**kwargs)

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "[%s] request: %s %s headers=%s",
                self.name,
                request.method,
                request.url,
                _safe_headers(request.headers),
            )
        started = time.perf_counter()
        response = super().send(request, **kwargs)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "[%s] response: %s %s -> %s (%.1f ms)",
                self.name,
                request.method,
                request.url,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response


def default_session(name: str = "Cloudflare") -> requests.Session:
    """Return a fresh Session whose transport is wrapped in a LoggingTransport."""
    session = requests.Session()
    adapter = LoggingTransport(name)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session
