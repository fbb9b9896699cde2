"""Bounding boxes over site map data.

Bounds are ``((min_lng, min_lat), (max_lng, max_lat))``, the shape web
map ``fitBounds`` calls take.  Every populated map-data slot contributes
(markers, polygons and lines across all three layers); mission flight
paths do not.  ``None`` means there was nothing to bound.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from rpas_sites.models.elements import MapElement
from rpas_sites.models.geometry import GeoLine, GeoPoint, GeoPolygon
from rpas_sites.models.site import Site

logger = logging.getLogger("rpas_sites.spatial.bounds")

Bounds = tuple[tuple[float, float], tuple[float, float]]


def _element_coords(element: MapElement) -> list[tuple[float, float]]:
    geometry = element.geometry
    if isinstance(geometry, GeoPoint):
        return [(geometry.lng, geometry.lat)]
    if isinstance(geometry, GeoPolygon):
        return list(geometry.ring)
    if isinstance(geometry, GeoLine):
        return list(geometry.points)
    return []


def _bounds_of(coords: Sequence[tuple[float, float]]) -> Bounds | None:
    if not coords:
        return None
    lons = [c[0] for c in coords]
    lats = [c[1] for c in coords]
    return ((min(lons), min(lats)), (max(lons), max(lats)))


def _union(bounds: Iterable[Bounds | None]) -> Bounds | None:
    corners: list[tuple[float, float]] = []
    for b in bounds:
        if b is not None:
            corners.extend(b)
    return _bounds_of(corners)


def get_element_bounds(element: MapElement | None) -> Bounds | None:
    """Bounds of one element's geometry."""
    if element is None:
        return None
    return _bounds_of(_element_coords(element))


def get_site_bounds(site: Site) -> Bounds | None:
    """Bounds across every populated map-data slot of ``site``."""
    coords: list[tuple[float, float]] = []
    for element in site.map_data.iter_elements():
        coords.extend(_element_coords(element))
    bounds = _bounds_of(coords)
    if bounds is None:
        logger.debug("Site has no geometry to bound | site=%s", site.id)
    return bounds


def get_project_bounds(sites: Iterable[Site]) -> Bounds | None:
    """Union of ``get_site_bounds`` over ``sites``; ``None`` if no site has geometry."""
    return _union(get_site_bounds(site) for site in sites)
