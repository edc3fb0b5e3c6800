"""Resolve which organization the Cloudflare client should be bound to.

Order, first match wins:

1. an explicit ``org_id``;
2. the owner of the zone named by ``use_org_from_zone``, provided the current
   user can see that organization (otherwise fall back to no organization);
3. no organization.

Lookup failures in step 2 are fatal and are not retried here; the client's
own retry policy is the only retry applied to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import requests

from .api import CloudflareAPI
from .config import OrgSelector
from .exceptions import CloudflareAPIError, OrgListError, ZoneDetailError, ZoneLookupError
from .options import ClientOptions, UsingOrganization

_logger = logging.getLogger(__name__)

# Remote failures and malformed payloads; anything else propagates unwrapped.
_LOOKUP_ERRORS = (CloudflareAPIError, requests.RequestException, KeyError)


@dataclass(frozen=True)
class ResolvedOrgContext:
    """The organization bound to the client, and where it came from."""

    source: str = OrgSelector.NONE
    org_id: Optional[str] = None

    @classmethod
    def explicit(cls, org_id: str) -> ResolvedOrgContext:
        return cls(OrgSelector.EXPLICIT, org_id)

    @classmethod
    def zone_inferred(cls, org_id: str) -> ResolvedOrgContext:
        return cls(OrgSelector.ZONE, org_id)

    @property
    def bound(self) -> bool:
        return self.org_id is not None


UNBOUND = ResolvedOrgContext()


def _org_from_zone(
    client: CloudflareAPI, zone_name: str, logger: logging.Logger
) -> ResolvedOrgContext:
    try:
        zone_id = client.zone_id_by_name(zone_name)
    except _LOOKUP_ERRORS as err:
        raise ZoneLookupError(f"error finding zone {zone_name!r}: {err}") from err

    try:
        zone = client.zone_details(zone_id)
    except _LOOKUP_ERRORS as err:
        raise ZoneDetailError(f"error fetching zone {zone_id!r}: {err}") from err
    logger.debug("Looked up zone to match organization details to: %r", zone)

    try:
        orgs = client.list_organizations()
    except _LOOKUP_ERRORS as err:
        raise OrgListError(f"error listing organizations: {err}") from err
    logger.debug("Found organizations for current user: %r", orgs)

    owner_id = zone.owner.id
    if owner_id and owner_id in {o.id for o in orgs}:
        logger.info(
            "Using organization %s (%s) owning zone %s in Cloudflare provider",
            owner_id,
            zone.owner.name or zone.owner.type,
            zone_name,
        )
        return ResolvedOrgContext.zone_inferred(owner_id)

    logger.info(
        "Zone ownership specified but organization owner not found. "
        "Falling back to using user API for Cloudflare provider"
    )
    return UNBOUND


def resolve_org_context(
    client: CloudflareAPI,
    selector: OrgSelector,
    options: ClientOptions,
    *,
    logger: Optional[logging.Logger] = None,
) -> Tuple[ResolvedOrgContext, ClientOptions]:
    """Decide the organization context using ``client`` for any lookups.

    Returns the context and ``options`` with a UsingOrganization directive
    appended when an organization was bound.
    """
    logger = logger or _logger

    if selector.kind == OrgSelector.EXPLICIT:
        logger.info("Using specified organization id %s in Cloudflare provider", selector.org_id)
        context = ResolvedOrgContext.explicit(selector.org_id)  # type: ignore[arg-type]
    elif selector.kind == OrgSelector.ZONE:
        context = _org_from_zone(client, selector.use_org_from_zone, logger)  # type: ignore[arg-type]
    else:
        context = UNBOUND

    if context.bound:
        options = options.with_option(UsingOrganization(context.org_id))  # type: ignore[arg-type]
    return context, options
