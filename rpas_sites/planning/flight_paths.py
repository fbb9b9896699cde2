"""Mission flight paths: waypoint editing, path analysis and pattern generation.

Waypoint lists are treated as values: every editing function returns a
new list whose ``order`` runs contiguously from 0, with labels
(``WP1``, ``WP2``, ...) and types (``start`` / ``waypoint`` / ``end``)
recomputed to match.

Pattern generation (grid, corridor, perimeter) works in the local UTM
zone of the source geometry so spacings and widths are true metres.
Generation failures are logged and produce empty results.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import shapely
from pyproj import Geod
from shapely import affinity
from shapely.geometry import LineString, Point, Polygon

from rpas_sites.core.config import PlanningConfig
from rpas_sites.core.constants import MIN_LINE_POINTS, MIN_POLYGON_POINTS
from rpas_sites.core.exceptions import ValidationError
from rpas_sites.models.elements import MapElement
from rpas_sites.models.geometry import (
    GeoLine,
    GeoPolygon,
    LatLng,
    create_geo_line,
    create_geo_polygon,
)
from rpas_sites.models.mission import (
    DEFAULT_MISSION_ALTITUDE_M,
    FlightPath,
    Mission,
    Waypoint,
    create_waypoint,
)
from rpas_sites.spatial.measurements import calculate_distance, get_polygon_center, polygon_ring
from rpas_sites.spatial.projection import LocalProjection
from rpas_sites.utils.helpers import close_ring, utc_now_iso

logger = logging.getLogger("rpas_sites.planning.flight_paths")

_GEOD = Geod(ellps="WGS84")

DEFAULT_CORRIDOR_WIDTH_M = 50.0
DEFAULT_CORRIDOR_ALTITUDE_M = 80.0
DEFAULT_WAYPOINT_SPACING_M = 100.0
DEFAULT_AVERAGE_SPEED_MPS = 10.0


# ---------------------------------------------------------------------------
# Ordering helpers
# ---------------------------------------------------------------------------


def _sorted(waypoints: Sequence[Waypoint]) -> list[Waypoint]:
    return sorted(waypoints, key=lambda wp: wp.order)


def _position_type(index: int, count: int) -> str:
    if index == 0:
        return "start"
    if index == count - 1:
        return "end"
    return "waypoint"


def _renumber(waypoints: Sequence[Waypoint]) -> list[Waypoint]:
    """Assign contiguous order, labels and position types in list order."""
    count = len(waypoints)
    return [
        dataclasses.replace(
            wp,
            order=index,
            label=f"WP{index + 1}",
            waypoint_type=_position_type(index, count),
        )
        for index, wp in enumerate(waypoints)
    ]


# ---------------------------------------------------------------------------
# Waypoint editing
# ---------------------------------------------------------------------------


def coordinates_to_waypoints(
    coordinates: Sequence[Sequence[float]],
    altitude: float = DEFAULT_MISSION_ALTITUDE_M,
) -> list[Waypoint]:
    """One waypoint per ``[lng, lat]`` pair, all at ``altitude``."""
    count = len(coordinates)
    return [
        create_waypoint(c[0], c[1], altitude, index, waypoint_type=_position_type(index, count))
        for index, c in enumerate(coordinates)
    ]


def insert_waypoint(
    waypoints: Sequence[Waypoint],
    after_order: int,
    lng: float,
    lat: float,
    altitude: float,
) -> list[Waypoint]:
    """Insert a new waypoint after ``after_order`` (``-1`` inserts first).

    Raises:
        ValidationError: If ``after_order`` is below -1.
    """
    if after_order < -1:
        msg = f"after_order={after_order}: must be >= -1"
        raise ValidationError(msg, stage="flight_paths", code="WAYPOINT_ORDER_OUT_OF_RANGE")
    ordered = _sorted(waypoints)
    position = min(after_order + 1, len(ordered))
    new_wp = create_waypoint(lng, lat, altitude, position)
    return _renumber([*ordered[:position], new_wp, *ordered[position:]])


def remove_waypoint(waypoints: Sequence[Waypoint], waypoint_id: str) -> list[Waypoint]:
    return _renumber([wp for wp in _sorted(waypoints) if wp.id != waypoint_id])


def move_waypoint(
    waypoints: Sequence[Waypoint],
    waypoint_id: str,
    lng: float,
    lat: float,
    altitude: float | None = None,
) -> list[Waypoint]:
    """Move one waypoint; its altitude is kept unless ``altitude`` is given."""
    return [
        dataclasses.replace(
            wp,
            lng=float(lng),
            lat=float(lat),
            altitude=wp.altitude if altitude is None else float(altitude),
        )
        if wp.id == waypoint_id
        else wp
        for wp in waypoints
    ]


def update_waypoint_altitude(
    waypoints: Sequence[Waypoint], waypoint_id: str, altitude: float
) -> list[Waypoint]:
    return [
        dataclasses.replace(wp, altitude=float(altitude)) if wp.id == waypoint_id else wp
        for wp in waypoints
    ]


def reorder_waypoints(
    waypoints: Sequence[Waypoint], from_order: int, to_order: int
) -> list[Waypoint]:
    """Move the waypoint at position ``from_order`` to ``to_order``.

    Raises:
        ValidationError: If either position is outside the path.
    """
    ordered = _sorted(waypoints)
    for name, value in (("from_order", from_order), ("to_order", to_order)):
        if not 0 <= value < len(ordered):
            msg = f"{name}={value}: must be in [0, {len(ordered) - 1}]"
            raise ValidationError(msg, stage="flight_paths", code="WAYPOINT_ORDER_OUT_OF_RANGE")
    moved = ordered.pop(from_order)
    ordered.insert(to_order, moved)
    return _renumber(ordered)


# ---------------------------------------------------------------------------
# Path analysis
# ---------------------------------------------------------------------------


def waypoints_to_line(waypoints: Sequence[Waypoint]) -> GeoLine | None:
    """2D line through the waypoints in order; ``None`` below two waypoints."""
    if len(waypoints) < MIN_LINE_POINTS:
        return None
    return create_geo_line([(wp.lng, wp.lat) for wp in _sorted(waypoints)])


def _leg_distances(ordered: list[Waypoint]) -> list[float]:
    return [
        calculate_distance(LatLng(a.lat, a.lng), LatLng(b.lat, b.lng))
        for a, b in zip(ordered, ordered[1:], strict=False)
    ]


def calculate_path_distance(waypoints: Sequence[Waypoint]) -> float:
    """Horizontal path length in metres (0 below two waypoints)."""
    return sum(_leg_distances(_sorted(waypoints)))


def calculate_flight_duration(
    waypoints: Sequence[Waypoint],
    average_speed: float = DEFAULT_AVERAGE_SPEED_MPS,
) -> float:
    """Estimated flight time in seconds at ``average_speed`` m/s.

    Raises:
        ValidationError: If ``average_speed`` is not positive.
    """
    if average_speed <= 0:
        msg = f"average_speed={average_speed}: must be > 0 (m/s)"
        raise ValidationError(msg, stage="flight_paths")
    return calculate_path_distance(waypoints) / average_speed


@dataclass(frozen=True, slots=True)
class AltitudeRange:
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0


def get_altitude_range(waypoints: Sequence[Waypoint]) -> AltitudeRange:
    if not waypoints:
        return AltitudeRange()
    altitudes = [wp.altitude for wp in waypoints]
    return AltitudeRange(
        min=min(altitudes),
        max=max(altitudes),
        average=sum(altitudes) / len(altitudes),
    )


@dataclass(frozen=True, slots=True)
class ProfilePoint:
    """One point of an altitude profile chart.

    ``distance`` is cumulative horizontal distance in metres from the
    first waypoint.
    """

    distance: float
    altitude: float
    waypoint_id: str
    label: str
    order: int


def generate_altitude_profile(waypoints: Sequence[Waypoint]) -> list[ProfilePoint]:
    ordered = _sorted(waypoints)
    cumulative = [0.0]
    for leg in _leg_distances(ordered):
        cumulative.append(cumulative[-1] + leg)
    return [
        ProfilePoint(
            distance=distance,
            altitude=wp.altitude,
            waypoint_id=wp.id,
            label=wp.label,
            order=wp.order,
        )
        for wp, distance in zip(ordered, cumulative, strict=True)
    ]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WaypointCheck:
    """Result of a waypoint validation; ``waypoint_ids`` lists the offenders."""

    valid: bool
    waypoint_ids: list[str] = field(default_factory=list)


def validate_waypoint_order(waypoints: Sequence[Waypoint]) -> bool:
    """``True`` when orders are exactly ``0..n-1``."""
    return sorted(wp.order for wp in waypoints) == list(range(len(waypoints)))


def validate_waypoints_in_boundary(
    waypoints: Sequence[Waypoint],
    boundary: MapElement | GeoPolygon | None,
) -> WaypointCheck:
    """Check every waypoint lies inside (or on) ``boundary``.

    A missing or degenerate boundary passes everything.
    """
    ring = polygon_ring(boundary)
    if len(ring) < MIN_POLYGON_POINTS:
        return WaypointCheck(valid=True)
    shape = Polygon(ring)
    outside = [wp.id for wp in waypoints if not shape.covers(Point(wp.lng, wp.lat))]
    return WaypointCheck(valid=not outside, waypoint_ids=outside)


def validate_max_altitude(
    waypoints: Sequence[Waypoint],
    max_altitude: float | None = None,
    *,
    config: PlanningConfig | None = None,
) -> WaypointCheck:
    """Check no waypoint is above ``max_altitude`` (default from config)."""
    ceiling = max_altitude if max_altitude is not None else (
        config or PlanningConfig()
    ).max_waypoint_altitude_m
    exceeding = [wp.id for wp in waypoints if wp.altitude > ceiling]
    return WaypointCheck(valid=not exceeding, waypoint_ids=exceeding)


# ---------------------------------------------------------------------------
# Pattern generation
# ---------------------------------------------------------------------------


def _grid_sweeps(metric_area: Polygon, spacing: float) -> list[tuple[Point, Point]]:
    """West-to-east sweep segments of horizontal lines clipped to ``metric_area``."""
    minx, miny, maxx, maxy = metric_area.bounds
    height = maxy - miny
    count = max(1, math.floor(height / spacing))
    margin = (height - (count - 1) * spacing) / 2

    sweeps: list[tuple[Point, Point]] = []
    for i in range(count):
        y = miny + margin + i * spacing
        clipped = metric_area.intersection(LineString([(minx - 1, y), (maxx + 1, y)]))
        coords = shapely.get_coordinates(clipped)
        if len(coords) < 2:
            continue
        xs = coords[:, 0]
        sweeps.append((Point(xs.min(), y), Point(xs.max(), y)))
    return sweeps


def generate_grid_pattern(
    area: MapElement | GeoPolygon | None,
    *,
    line_spacing: float = 30.0,
    grid_angle: float = 0.0,
    altitude: float = DEFAULT_MISSION_ALTITUDE_M,
) -> list[Waypoint]:
    """Serpentine mapping lines ``line_spacing`` metres apart across ``area``.

    Lines run at ``grid_angle`` degrees counter-clockwise from east.  Each
    line contributes its two clipped end points; alternate lines are
    flown in reverse.
    """
    ring = polygon_ring(area)
    if len(ring) < MIN_POLYGON_POINTS or line_spacing <= 0:
        return []

    try:
        projection = LocalProjection.for_coords(ring)
        metric = projection.to_metric(Polygon(ring))
        origin = metric.centroid
        aligned = affinity.rotate(metric, -grid_angle, origin=origin)
        sweeps = _grid_sweeps(aligned, line_spacing)

        points: list[tuple[Point, str]] = []
        for index, (start, end) in enumerate(sweeps):
            if index % 2 == 1:
                start, end = end, start
            is_last = index == len(sweeps) - 1
            points.append((start, "start" if index == 0 else "turn"))
            points.append((end, "end" if is_last else "waypoint"))

        waypoints = []
        for order, (metric_point, waypoint_type) in enumerate(points):
            rotated_back = affinity.rotate(metric_point, grid_angle, origin=origin)
            lon_lat = projection.to_lon_lat(rotated_back)
            waypoints.append(
                create_waypoint(lon_lat.x, lon_lat.y, altitude, order, waypoint_type=waypoint_type)
            )
    except Exception:
        logger.exception(
            "Grid pattern generation failed | spacing=%.1f m | angle=%.1f", line_spacing, grid_angle
        )
        return []

    logger.info(
        "Grid pattern generated | lines=%d | waypoints=%d | spacing=%.1f m",
        len(sweeps),
        len(waypoints),
        line_spacing,
    )
    return waypoints


@dataclass(frozen=True, slots=True)
class CorridorPath:
    """Waypoints along a corridor line plus the corridor polygon around it."""

    waypoints: list[Waypoint] = field(default_factory=list)
    corridor_buffer: GeoPolygon | None = None
    path_length: float = 0.0


def _heading(a: Point, b: Point) -> float:
    azimuth, _back, _dist = _GEOD.inv(a.x, a.y, b.x, b.y)
    return azimuth % 360


def generate_corridor_path(
    line: MapElement | GeoLine | None,
    *,
    width: float = DEFAULT_CORRIDOR_WIDTH_M,
    waypoint_spacing: float = DEFAULT_WAYPOINT_SPACING_M,
    altitude: float = DEFAULT_CORRIDOR_ALTITUDE_M,
    config: PlanningConfig | None = None,
) -> CorridorPath:
    """Waypoints every ``waypoint_spacing`` metres along ``line``.

    ``width`` is the corridor half-width in metres on each side of the
    line.  The line's last vertex is always a waypoint.  Each waypoint
    except the last carries the heading (degrees from north) to the next.
    """
    geometry = line.geometry if isinstance(line, MapElement) else line
    if not isinstance(geometry, GeoLine) or len(geometry.points) < MIN_LINE_POINTS:
        return CorridorPath()
    if waypoint_spacing <= 0:
        return CorridorPath()

    cfg = config or PlanningConfig()
    try:
        projection = LocalProjection.for_coords(geometry.points)
        metric = projection.to_metric(LineString(geometry.points))
        length = metric.length

        distances = [i * waypoint_spacing for i in range(int(length // waypoint_spacing) + 1)]
        if length - distances[-1] > 1e-6:
            distances.append(length)
        points = [projection.to_lon_lat(metric.interpolate(d)) for d in distances]

        waypoints = []
        for order, point in enumerate(points):
            heading = _heading(point, points[order + 1]) if order + 1 < len(points) else None
            waypoints.append(create_waypoint(point.x, point.y, altitude, order, heading=heading))

        corridor = None
        if width > 0:
            metric_corridor = metric.buffer(width, quad_segs=cfg.buffer_quad_segments)
            buffered = projection.to_lon_lat(metric_corridor)
            corridor = create_geo_polygon(close_ring(list(buffered.exterior.coords)))
    except Exception:
        logger.exception(
            "Corridor path generation failed | width=%.1f m | spacing=%.1f m",
            width,
            waypoint_spacing,
        )
        return CorridorPath()

    return CorridorPath(
        waypoints=_renumber(waypoints), corridor_buffer=corridor, path_length=length
    )


def generate_perimeter_path(
    area: MapElement | GeoPolygon | None,
    *,
    altitude: float = DEFAULT_MISSION_ALTITUDE_M,
    inset: float = 0.0,
) -> list[Waypoint]:
    """One waypoint per boundary vertex, optionally ``inset`` metres inside.

    If the inset collapses the polygon the original boundary is used.
    """
    ring = polygon_ring(area)
    if len(ring) < MIN_POLYGON_POINTS:
        return []

    coords = ring
    if inset > 0:
        try:
            projection = LocalProjection.for_coords(ring)
            shrunk = projection.to_metric(Polygon(ring)).buffer(-inset)
            if isinstance(shrunk, Polygon) and not shrunk.is_empty:
                inner = projection.to_lon_lat(shrunk)
                coords = [(x, y) for x, y in inner.exterior.coords][:-1]
            else:
                logger.warning(
                    "Perimeter inset collapses the area, using boundary | inset=%.1f m", inset
                )
        except Exception:
            logger.exception("Perimeter inset failed | inset=%.1f m", inset)
            return []

    return coordinates_to_waypoints(coords, altitude)


def build_mission_flight_path(
    mission: Mission,
    *,
    corridor_line: MapElement | GeoLine | None = None,
    config: PlanningConfig | None = None,
) -> Mission:
    """Regenerate a mission's waypoints from its area and settings.

    - ``mapping``: grid over ``area_geography``
    - ``perimeter``: boundary of ``area_geography``
    - ``corridor``: along ``corridor_line`` with the mission's corridor width
    - ``point``: a single hover waypoint at the area centre
    - ``freeform``: waypoints are hand-placed; the mission is returned as is

    Missions without the geometry their type needs are returned unchanged.
    """
    settings = mission.settings
    altitude = mission.default_altitude
    corridor_width = mission.flight_path.corridor_buffer_width

    if mission.mission_type == "mapping":
        waypoints = generate_grid_pattern(
            mission.area_geography,
            line_spacing=settings.line_spacing,
            grid_angle=settings.grid_angle,
            altitude=altitude,
        )
    elif mission.mission_type == "perimeter":
        waypoints = generate_perimeter_path(mission.area_geography, altitude=altitude)
    elif mission.mission_type == "corridor":
        corridor = generate_corridor_path(
            corridor_line,
            width=corridor_width if corridor_width is not None else DEFAULT_CORRIDOR_WIDTH_M,
            altitude=altitude,
            config=config,
        )
        waypoints = corridor.waypoints
    elif mission.mission_type == "point":
        centre = get_polygon_center(mission.area_geography)
        waypoints = []
        if centre is not None:
            waypoints.append(
                create_waypoint(
                    centre.lng, centre.lat, altitude, 0, waypoint_type="start", action="hover"
                )
            )
    else:
        return mission

    if not waypoints:
        logger.warning(
            "No flight path generated | mission=%s | type=%s", mission.id, mission.mission_type
        )
        return mission

    flight_path = FlightPath(waypoints=waypoints, corridor_buffer_width=corridor_width)
    return dataclasses.replace(mission, flight_path=flight_path, updated_at=utc_now_iso())
