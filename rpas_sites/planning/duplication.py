"""Site duplication with full identity regeneration.

A duplicate has the same shape as its original and disjoint identity:
the site, every map element, every mission and every waypoint get new
ids.  Derived polygons are re-pointed at the copied source polygon, so
provenance never crosses from one site to another.
"""

from __future__ import annotations

import copy
import dataclasses
import logging

from rpas_sites.core.constants import COLLECTION_SLOTS, DEFAULT_SITE_STATUS, DERIVED_SLOTS
from rpas_sites.models.elements import AnyElement
from rpas_sites.models.mission import Mission
from rpas_sites.models.site import SLOT_ATTRIBUTES, Site, SiteMapData
from rpas_sites.utils.helpers import new_id, utc_now_iso

logger = logging.getLogger("rpas_sites.planning.duplication")

_ID_PREFIXES: dict[str, str] = {
    "obstacles": "obstacle",
    "musterPoints": "muster",
    "evacuationRoutes": "route",
}


def _regenerate_element(
    slot: str, element: AnyElement, now: str, id_map: dict[str, str]
) -> AnyElement:
    element_id = new_id(_ID_PREFIXES.get(slot, element.kind))
    id_map[element.id] = element_id
    return dataclasses.replace(element, id=element_id, updated_at=now)


def _remap_source(element: AnyElement | None, id_map: dict[str, str]) -> AnyElement | None:
    if element is None or element.properties.source_polygon_id not in id_map:
        return element
    properties = dataclasses.replace(
        element.properties, source_polygon_id=id_map[element.properties.source_polygon_id]
    )
    return dataclasses.replace(element, properties=properties)


def _regenerate_map_data(map_data: SiteMapData, now: str) -> SiteMapData:
    id_map: dict[str, str] = {}
    result = map_data
    for slot in SLOT_ATTRIBUTES:
        value = map_data.get_slot(slot)
        if slot in COLLECTION_SLOTS:
            result = result.with_slot(
                slot, [_regenerate_element(slot, e, now, id_map) for e in value]
            )
        elif value is not None:
            result = result.with_slot(slot, _regenerate_element(slot, value, now, id_map))

    for slot in DERIVED_SLOTS:
        result = result.with_slot(slot, _remap_source(result.get_slot(slot), id_map))
    return result


def _regenerate_mission(mission: Mission, now: str) -> Mission:
    waypoints = [dataclasses.replace(wp, id=new_id("wp")) for wp in mission.flight_path.waypoints]
    return dataclasses.replace(
        mission,
        id=new_id("mission"),
        flight_path=dataclasses.replace(mission.flight_path, waypoints=waypoints),
        created_at=now,
        updated_at=now,
    )


def duplicate_site(
    site: Site,
    *,
    name: str | None = None,
    order: int | None = None,
    created_by: str | None = None,
) -> Site:
    """Deep-copy ``site`` with fresh ids throughout.

    The copy is named ``"<name> (Copy)"`` unless ``name`` is given, is
    reset to draft status and placed after the original unless ``order``
    is given.  Labels, styles, geometry and form sections are copied
    unchanged.
    """
    now = utc_now_iso()
    cloned = copy.deepcopy(site)
    duplicate = dataclasses.replace(
        cloned,
        id=new_id("site"),
        name=name or f"{site.name} (Copy)",
        status=DEFAULT_SITE_STATUS,
        order=site.order + 1 if order is None else order,
        map_data=_regenerate_map_data(cloned.map_data, now),
        missions=[_regenerate_mission(m, now) for m in cloned.missions],
        created_at=now,
        updated_at=now,
        created_by=created_by,
    )
    logger.info("Site duplicated | source=%s | copy=%s", site.id, duplicate.id)
    return duplicate
