"""Multi-site project operations.

A project holds an ordered list of 1 to ``max_sites_per_project`` sites.
Operations return new lists; ``order`` is kept contiguous from 0.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from rpas_sites.core.config import PlanningConfig
from rpas_sites.core.exceptions import SiteLimitError, ValidationError
from rpas_sites.models.site import Site, create_default_site

logger = logging.getLogger("rpas_sites.planning.project")


def reorder_sites(sites: Sequence[Site]) -> list[Site]:
    """Renumber ``order`` to match list position."""
    return [
        site if site.order == index else dataclasses.replace(site, order=index)
        for index, site in enumerate(sites)
    ]


def add_site(
    sites: Sequence[Site],
    site: Site | None = None,
    *,
    name: str | None = None,
    created_by: str | None = None,
    config: PlanningConfig | None = None,
) -> list[Site]:
    """Append ``site`` (or a new default site) to the project.

    Raises:
        SiteLimitError: If the project already holds the maximum number
            of sites.
    """
    limit = (config or PlanningConfig()).max_sites_per_project
    if len(sites) >= limit:
        raise SiteLimitError(limit)

    if site is None:
        site = create_default_site(
            name=name or f"Site {len(sites) + 1}",
            order=len(sites),
            created_by=created_by,
        )
    logger.info("Site added | site=%s | count=%d/%d", site.id, len(sites) + 1, limit)
    return reorder_sites([*sites, site])


def remove_site(sites: Sequence[Site], site_id: str) -> list[Site]:
    """Drop ``site_id``; unknown ids leave the list unchanged.

    Raises:
        ValidationError: If ``site_id`` is the project's only site.
    """
    remaining = [s for s in sites if s.id != site_id]
    if len(remaining) == len(sites):
        logger.warning("Site not found for removal | site=%s", site_id)
    elif not remaining:
        msg = f"Cannot remove {site_id!r}, a project needs at least one site"
        raise ValidationError(msg, stage="project", code="LAST_SITE")
    return reorder_sites(remaining)


def find_site(sites: Sequence[Site], site_id: str) -> Site | None:
    return next((s for s in sites if s.id == site_id), None)


def replace_site(sites: Sequence[Site], site: Site) -> list[Site]:
    """Swap in the site whose id matches ``site.id``."""
    return [site if s.id == site.id else s for s in sites]
