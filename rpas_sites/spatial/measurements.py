"""Distance, area and centre measurements over map geometry.

All distances are metres and all areas square metres.  Functions accept
incomplete input (``None``, a polygon with too few vertices, a missing
geometry) and return ``None`` instead of raising, because sites are
filled in incrementally and in any order.

Area accuracy
-------------
``calculate_polygon_area`` is a spherical approximation (radius
6,371 km): the ring is treated as closed and

    area = |Σ Δλ · (2 + sin φ₁ + sin φ₂)| · R² / 2

is summed over consecutive vertices.  Against the WGS 84 ellipsoidal
area from ``calculate_geodesic_area`` it stays within 1 % for polygons
whose extent (``polygon_extent_km``) is below
``PlanningConfig.area_approximation_max_extent_km`` (100 km by default);
the difference is dominated by the sphere-vs-ellipsoid radius, not by
polygon size.  Use ``calculate_geodesic_area`` when exact figures matter.
Wider polygons are still measured but logged at WARNING.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from pyproj import Geod

from rpas_sites.core.config import PlanningConfig
from rpas_sites.core.constants import EARTH_RADIUS_M, MIN_POLYGON_POINTS
from rpas_sites.models.elements import MapElement
from rpas_sites.models.geometry import GeoLine, GeoPoint, GeoPolygon, LatLng
from rpas_sites.utils.helpers import open_ring

logger = logging.getLogger("rpas_sites.spatial.measurements")

_GEOD = Geod(ellps="WGS84")


class HasLatLng(Protocol):
    lat: float
    lng: float


# ---------------------------------------------------------------------------
# Geometry access
# ---------------------------------------------------------------------------


def polygon_ring(polygon: MapElement | GeoPolygon | None) -> list[tuple[float, float]]:
    """Open ``(lng, lat)`` ring of a polygon element or geometry.

    Returns an empty list for ``None`` or non-polygon geometry.
    """
    geometry = polygon.geometry if isinstance(polygon, MapElement) else polygon
    if not isinstance(geometry, GeoPolygon):
        return []
    return open_ring(geometry.ring)


def point_of(element: MapElement | GeoPoint | None) -> LatLng | None:
    """``LatLng`` of a point element or geometry, else ``None``."""
    geometry = element.geometry if isinstance(element, MapElement) else element
    if not isinstance(geometry, GeoPoint):
        return None
    return geometry.to_lat_lng()


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------


def calculate_distance(point1: HasLatLng, point2: HasLatLng) -> float:
    """Great-circle (haversine) distance in metres on a 6,371 km sphere."""
    lat1 = math.radians(point1.lat)
    lat2 = math.radians(point2.lat)
    delta_lat = math.radians(point2.lat - point1.lat)
    delta_lng = math.radians(point2.lng - point1.lng)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance_between(
    element1: MapElement | GeoPoint | None,
    element2: MapElement | GeoPoint | None,
) -> float | None:
    """Distance in metres between two point elements, or ``None`` if either is missing."""
    p1 = point_of(element1)
    p2 = point_of(element2)
    if p1 is None or p2 is None:
        return None
    return calculate_distance(p1, p2)


def calculate_line_length(line: MapElement | GeoLine | None) -> float | None:
    """Summed segment length of a line in metres; ``None`` below two vertices."""
    geometry = line.geometry if isinstance(line, MapElement) else line
    if not isinstance(geometry, GeoLine) or len(geometry.points) < 2:
        return None
    total = 0.0
    for (lng1, lat1), (lng2, lat2) in zip(geometry.points, geometry.points[1:], strict=False):
        total += calculate_distance(LatLng(lat1, lng1), LatLng(lat2, lng2))
    return total


# ---------------------------------------------------------------------------
# Area
# ---------------------------------------------------------------------------


def calculate_polygon_area(
    polygon: MapElement | GeoPolygon | None,
    *,
    config: PlanningConfig | None = None,
) -> float | None:
    """Spherical polygon area in square metres.

    Returns ``None`` when the ring has fewer than 3 vertices.  Winding
    order does not matter.  Polygons wider than
    ``config.area_approximation_max_extent_km`` are still measured, with
    a WARNING that ``calculate_geodesic_area`` is the accurate figure.
    """
    ring = polygon_ring(polygon)
    if len(ring) < MIN_POLYGON_POINTS:
        return None

    limit_km = (config or PlanningConfig()).area_approximation_max_extent_km
    extent_km = polygon_extent_km(polygon)
    if extent_km is not None and extent_km > limit_km:
        logger.warning(
            "Polygon exceeds spherical area accuracy range | extent=%.1f km | limit=%.1f km",
            extent_km,
            limit_km,
        )

    total = 0.0
    closed = [*ring, ring[0]]
    for (lng1, lat1), (lng2, lat2) in zip(closed, closed[1:], strict=False):
        d_lng = math.radians(lng2 - lng1)
        total += d_lng * (2 + math.sin(math.radians(lat1)) + math.sin(math.radians(lat2)))

    return abs(total * EARTH_RADIUS_M * EARTH_RADIUS_M / 2)


def calculate_geodesic_area(polygon: MapElement | GeoPolygon | None) -> float | None:
    """Ellipsoidal (WGS 84) polygon area in square metres via ``pyproj.Geod``."""
    ring = polygon_ring(polygon)
    if len(ring) < MIN_POLYGON_POINTS:
        return None
    lons = [c[0] for c in ring]
    lats = [c[1] for c in ring]
    area_m2, _perimeter = _GEOD.polygon_area_perimeter(lons, lats)
    return abs(area_m2)


def polygon_extent_km(polygon: MapElement | GeoPolygon | None) -> float | None:
    """Diagonal of the polygon's bounding box in kilometres."""
    ring = polygon_ring(polygon)
    if not ring:
        return None
    lons = [c[0] for c in ring]
    lats = [c[1] for c in ring]
    sw = LatLng(min(lats), min(lons))
    ne = LatLng(max(lats), max(lons))
    return calculate_distance(sw, ne) / 1000.0


def get_polygon_center(polygon: MapElement | GeoPolygon | None) -> LatLng | None:
    """Vertex average of the ring (closing duplicate excluded)."""
    ring = polygon_ring(polygon)
    if not ring:
        return None
    return LatLng(
        lat=sum(c[1] for c in ring) / len(ring),
        lng=sum(c[0] for c in ring) / len(ring),
    )


# ---------------------------------------------------------------------------
# Flight area measurements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FlightAreaMeasurements:
    """Areas (m²) and distances (m) shown next to the flight plan map.

    Every field is ``None`` when its inputs are not on the map yet.
    """

    flight_geography_area: float | None = None
    contingency_volume_area: float | None = None
    ground_risk_buffer_area: float | None = None
    launch_to_recovery_distance: float | None = None
    pilot_to_launch_distance: float | None = None
    pilot_to_recovery_distance: float | None = None
    max_distance_from_pilot: float | None = None


def calculate_flight_area_measurements(flight_plan: object) -> FlightAreaMeasurements:
    """Measure a ``FlightPlanLayer``.

    ``max_distance_from_pilot`` is the farthest flight geography vertex
    from the pilot position.
    """
    flight_geography = getattr(flight_plan, "flight_geography", None)
    launch = getattr(flight_plan, "launch_point", None)
    recovery = getattr(flight_plan, "recovery_point", None)
    pilot = getattr(flight_plan, "pilot_position", None)

    max_from_pilot = None
    pilot_point = point_of(pilot)
    ring = polygon_ring(flight_geography)
    if pilot_point is not None and ring:
        max_from_pilot = max(calculate_distance(pilot_point, LatLng(lat, lng)) for lng, lat in ring)

    return FlightAreaMeasurements(
        flight_geography_area=calculate_polygon_area(flight_geography),
        contingency_volume_area=calculate_polygon_area(
            getattr(flight_plan, "contingency_volume", None)
        ),
        ground_risk_buffer_area=calculate_polygon_area(
            getattr(flight_plan, "ground_risk_buffer", None)
        ),
        launch_to_recovery_distance=distance_between(launch, recovery),
        pilot_to_launch_distance=distance_between(pilot, launch),
        pilot_to_recovery_distance=distance_between(pilot, recovery),
        max_distance_from_pilot=max_from_pilot,
    )
