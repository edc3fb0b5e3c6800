from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from . import __version__
from .api import CloudflareAPI, new_client
from .config import OrgSelector, ProviderConfig
from .options import ClientOptions, UserAgent, build_policy_options
from .org import ResolvedOrgContext, resolve_org_context
from .user_agent import compose_user_agent, host_user_agent

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootstrapResult:
    """The configured client plus how its organization context was decided."""

    client: CloudflareAPI
    org_context: ResolvedOrgContext
    options: ClientOptions


def configure_provider(
    config: ProviderConfig,
    *,
    logger: Optional[logging.Logger] = None,
) -> BootstrapResult:
    """Build the Cloudflare client for one provider run.

    1. policy options -> first client, used only for lookups;
    2. resolve the organization context through that client;
    3. add the composed User-Agent and build the final client.

    When neither ``org_id`` nor ``use_org_from_zone`` is configured the first
    client is returned as-is, unless ``config.always_rebuild`` is set. A zone
    whose owner is not visible still gets the rebuilt client, just without an
    organization. Errors from any step propagate and no
    client is returned.
    """
    logger = logger or _logger

    options = build_policy_options(config.policy)
    client = new_client(config.credentials, options, base_url=config.base_url)

    context, options = resolve_org_context(client, config.org, options, logger=logger)
    if config.org.kind == OrgSelector.NONE and not config.always_rebuild:
        logger.debug("No organization configured; using the initial Cloudflare client")
        return BootstrapResult(client, context, options)

    user_agent = compose_user_agent(
        host_user_agent(config.host_version), __version__, client.user_agent
    )
    options = options.with_option(UserAgent(user_agent))
    logger.debug("Cloudflare client User-Agent: %s", user_agent)

    client = new_client(config.credentials, options, base_url=config.base_url)
    return BootstrapResult(client, context, options)
