from __future__ import annotations

import os
from typing import Optional

from . import __version__

PRODUCT_TOKEN = "terraform-provider-cloudflare"
HOST_URL = "https://www.terraform.io"
APPEND_USER_AGENT_ENV = "TF_APPEND_USER_AGENT"


def host_user_agent(host_version: Optional[str] = None) -> str:
    """Identity of the hosting Terraform process, e.g. ``Terraform/1.5.7 (+https://www.terraform.io)``.

    Anything in TF_APPEND_USER_AGENT is appended, as Terraform itself does.
    """
    product = f"Terraform/{host_version}" if host_version else "Terraform"
    ua = f"{product} (+{HOST_URL})"
    extra = os.getenv(APPEND_USER_AGENT_ENV, "").strip()
    if extra:
        ua = f"{ua} {extra}"
    return ua


def compose_user_agent(
    host_identity: str,
    provider_version: str = __version__,
    client_identity: str = "",
) -> str:
    """Join host identity, provider token and the client's own identity with single spaces."""
    parts = [
        (host_identity or "").strip(),
        f"{PRODUCT_TOKEN}/{provider_version}",
        (client_identity or "").strip(),
    ]
    return " ".join(p for p in parts if p).strip()
