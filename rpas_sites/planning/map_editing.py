"""Editing operations on a site's map data.

Each operation takes a ``Site`` and returns a new ``Site`` with the
change applied and ``updated_at`` refreshed; the input is never
modified.  Element types may be given in the singular form drawing
tools use (``"obstacle"``, ``"musterPoint"``, ``"evacuationRoute"``).

Single slots are replaced on every ``set_*`` call.  Collection slots
append, and the first muster point / evacuation route added to an empty
collection becomes the primary one.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from rpas_sites.core.constants import (
    COLLECTION_SLOTS,
    MAP_ELEMENT_STYLES,
    MAP_LAYERS,
    MIN_LINE_POINTS,
    MIN_POLYGON_POINTS,
    OBSTACLE_LABELS,
    resolve_element_type,
)
from rpas_sites.core.exceptions import UnknownElementTypeError, ValidationError
from rpas_sites.models.elements import (
    AnyElement,
    ElementProperties,
    build_properties,
    create_evacuation_route,
    create_map_marker,
    create_map_polygon,
    create_muster_point,
    create_obstacle,
    style_properties,
)
from rpas_sites.models.geometry import create_geo_polygon
from rpas_sites.models.site import Site, SiteMapData
from rpas_sites.spatial.measurements import calculate_line_length, calculate_polygon_area
from rpas_sites.utils.helpers import close_ring, open_ring, utc_now_iso

logger = logging.getLogger("rpas_sites.planning.map_editing")

_PRIMARY_SLOTS = frozenset({"musterPoints", "evacuationRoutes"})
_IMMUTABLE_FIELDS = frozenset({"id", "kind", "element_type", "created_at"})


def _slot_for(element_type: str, kind: str) -> str:
    """Resolve ``element_type`` to a slot whose style draws ``kind`` geometry.

    Raises:
        UnknownElementTypeError: If there is no style for the type.
        ValidationError: If the slot holds a different kind of geometry.
    """
    slot = resolve_element_type(element_type)
    style = MAP_ELEMENT_STYLES.get(slot)
    if style is None:
        raise UnknownElementTypeError(element_type)
    if style["type"] != kind:
        msg = f"{slot!r} holds {style['type']} elements, not {kind} elements"
        raise ValidationError(msg, stage="map_editing", code="WRONG_ELEMENT_KIND")
    return slot


def _with_map_data(site: Site, map_data: SiteMapData) -> Site:
    return dataclasses.replace(site, map_data=map_data, updated_at=utc_now_iso())


def _append(site: Site, slot: str, element: AnyElement) -> Site:
    existing = list(site.map_data.get_slot(slot))
    if slot in _PRIMARY_SLOTS and not existing:
        element = dataclasses.replace(element, is_primary=True)
    logger.debug("Element added | site=%s | slot=%s | id=%s", site.id, slot, element.id)
    return _with_map_data(site, site.map_data.with_slot(slot, [*existing, element]))


def _elect_primary(elements: list[AnyElement]) -> list[AnyElement]:
    """Promote the first element when none of ``elements`` is primary."""
    if not elements or any(e.is_primary for e in elements):
        return elements
    return [dataclasses.replace(elements[0], is_primary=True), *elements[1:]]


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_element(site: Site, element_id: str) -> tuple[str, AnyElement] | None:
    """Return ``(slot, element)`` for ``element_id``, or ``None``."""
    for slot, element in site.map_data.iter_slots():
        if element.id == element_id:
            return slot, element
    return None


def get_layer_elements(site: Site, layer_id: str) -> list[AnyElement]:
    """Elements of one map layer, in slot order.

    Raises:
        ValidationError: If ``layer_id`` is not one of ``MAP_LAYERS``.
    """
    layer = MAP_LAYERS.get(layer_id)
    if layer is None:
        msg = f"Unknown map layer {layer_id!r}: expected one of {sorted(MAP_LAYERS)}"
        raise ValidationError(msg, stage="map_editing", code="UNKNOWN_LAYER")
    slots = layer["elements"]
    return [element for slot, element in site.map_data.iter_slots() if slot in slots]


# ---------------------------------------------------------------------------
# Single slots
# ---------------------------------------------------------------------------


def set_marker(site: Site, element_type: str, lng: float, lat: float, **options: Any) -> Site:
    """Place a marker, replacing any existing one in a single slot.

    Obstacles and muster points are appended to their collections.

    Raises:
        UnknownElementTypeError: If ``element_type`` has no style.
        ValidationError: If the slot does not hold markers.
    """
    slot = _slot_for(element_type, "marker")
    if slot == "obstacles":
        return add_obstacle(site, lng, lat, **options)
    if slot == "musterPoints":
        return add_muster_point(site, lng, lat, **options)

    marker = create_map_marker(
        lng, lat, element_type=slot, **{**style_properties(slot), **options}
    )
    logger.debug("Marker set | site=%s | slot=%s | id=%s", site.id, slot, marker.id)
    return _with_map_data(site, site.map_data.with_slot(slot, marker))


def set_polygon(
    site: Site,
    element_type: str,
    coordinates: list[tuple[float, float]] | list[list[float]],
    **options: Any,
) -> Site:
    """Place a polygon, replacing the slot's existing one.

    The ring is closed if needed and its area recorded.  Fewer than 3
    distinct vertices leaves the site unchanged.

    Raises:
        UnknownElementTypeError: If ``element_type`` has no style.
        ValidationError: If the slot does not hold polygons.
    """
    slot = _slot_for(element_type, "polygon")
    if len(open_ring(coordinates)) < MIN_POLYGON_POINTS:
        logger.warning(
            "Polygon ignored, too few vertices | site=%s | slot=%s | vertices=%d",
            site.id,
            slot,
            len(coordinates),
        )
        return site

    ring = close_ring(coordinates)
    area = calculate_polygon_area(create_geo_polygon(ring))
    polygon = create_map_polygon(
        ring, element_type=slot, **{**style_properties(slot), "area": area, **options}
    )
    logger.debug("Polygon set | site=%s | slot=%s | id=%s", site.id, slot, polygon.id)
    return _with_map_data(site, site.map_data.with_slot(slot, polygon))


# ---------------------------------------------------------------------------
# Collection slots
# ---------------------------------------------------------------------------


def add_obstacle(site: Site, lng: float, lat: float, **options: Any) -> Site:
    """Append an obstacle; ``options`` may set ``obstacle_type``, ``height``, etc.

    The label defaults to the display name of the obstacle type.
    """
    obstacle_type = options.get("obstacle_type", "other")
    label = OBSTACLE_LABELS.get(obstacle_type, OBSTACLE_LABELS["other"])
    obstacle = create_obstacle(
        lng, lat, **{**style_properties("obstacles"), "label": label, **options}
    )
    return _append(site, "obstacles", obstacle)


def add_muster_point(site: Site, lng: float, lat: float, **options: Any) -> Site:
    """Append a muster point; the first one becomes primary."""
    muster = create_muster_point(lng, lat, **{**style_properties("musterPoints"), **options})
    return _append(site, "musterPoints", muster)


def add_evacuation_route(
    site: Site,
    coordinates: list[tuple[float, float]] | list[list[float]],
    **options: Any,
) -> Site:
    """Append an evacuation route; the first one becomes primary.

    Fewer than 2 vertices leaves the site unchanged.
    """
    if len(coordinates) < MIN_LINE_POINTS:
        logger.warning(
            "Evacuation route ignored, too few vertices | site=%s | vertices=%d",
            site.id,
            len(coordinates),
        )
        return site
    route = create_evacuation_route(
        coordinates, **{**style_properties("evacuationRoutes"), **options}
    )
    return _append(site, "evacuationRoutes", route)


# ---------------------------------------------------------------------------
# Remove / update
# ---------------------------------------------------------------------------


def remove_element(site: Site, element_id: str) -> Site:
    """Remove an element from whichever slot holds it.

    Removing the primary muster point or route promotes the first
    remaining one.  Unknown ids leave the site unchanged.
    """
    found = find_element(site, element_id)
    if found is None:
        logger.warning("Element not found for removal | site=%s | id=%s", site.id, element_id)
        return site

    slot, _element = found
    if slot in COLLECTION_SLOTS:
        remaining = [e for e in site.map_data.get_slot(slot) if e.id != element_id]
        if slot in _PRIMARY_SLOTS:
            remaining = _elect_primary(remaining)
        map_data = site.map_data.with_slot(slot, remaining)
    else:
        map_data = site.map_data.with_slot(slot, None)

    logger.debug("Element removed | site=%s | slot=%s | id=%s", site.id, slot, element_id)
    return _with_map_data(site, map_data)


def _merge_properties(properties: ElementProperties, changes: dict[str, Any]) -> ElementProperties:
    current = {f.name: getattr(properties, f.name) for f in dataclasses.fields(ElementProperties)}
    return build_properties(**{**current, **changes})


def _measure(kind: str, geometry: Any) -> dict[str, float | None]:
    if kind == "polygon":
        return {"area": calculate_polygon_area(geometry)}
    if kind == "line":
        return {"distance": calculate_line_length(geometry)}
    return {}


def update_element(site: Site, element_id: str, **changes: Any) -> Site:
    """Shallow-merge ``changes`` into an element and refresh its ``updated_at``.

    Names of element attributes (``height``, ``is_primary``,
    ``geometry``, ...) replace those attributes; any other name is
    merged into the element's properties.  A new ``geometry`` re-measures
    polygon ``area`` and line ``distance`` unless the change sets them
    explicitly.

    Raises:
        ValidationError: If ``changes`` touches an identity field
            (``id``, ``kind``, ``element_type``, ``created_at``).
    """
    blocked = _IMMUTABLE_FIELDS.intersection(changes)
    if blocked:
        msg = f"Cannot change {sorted(blocked)} of element {element_id!r}"
        raise ValidationError(msg, stage="map_editing", code="IMMUTABLE_FIELD")

    found = find_element(site, element_id)
    if found is None:
        logger.warning("Element not found for update | site=%s | id=%s", site.id, element_id)
        return site

    slot, element = found
    field_names = {f.name for f in dataclasses.fields(element)}
    attribute_changes = {k: v for k, v in changes.items() if k in field_names}
    property_changes = {k: v for k, v in changes.items() if k not in field_names}
    if "geometry" in changes:
        property_changes = {**_measure(element.kind, changes["geometry"]), **property_changes}
    if property_changes:
        attribute_changes["properties"] = _merge_properties(
            attribute_changes.get("properties", element.properties), property_changes
        )
    attribute_changes["updated_at"] = utc_now_iso()
    updated = dataclasses.replace(element, **attribute_changes)

    if slot in COLLECTION_SLOTS:
        value: Any = [updated if e.id == element_id else e for e in site.map_data.get_slot(slot)]
    else:
        value = updated
    return _with_map_data(site, site.map_data.with_slot(slot, value))
