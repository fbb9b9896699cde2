"""Buffer polygon generation for SORA risk volumes.

The flight geography polygon is buffered outward twice:

1. **Contingency volume**: by the distance the aircraft covers during
   the pilot's reaction time (max speed x reaction seconds).
2. **Ground risk buffer**: by the maximum planned altitude (1:1 rule),
   measured from the *contingency volume*, so the ground risk buffer
   always encloses it.  If the contingency volume could not be generated
   the flight geography is used instead.

Buffering happens in metres: the source ring is projected into the UTM
zone of its centre, buffered with shapely and projected back to WGS 84.
The result keeps its exterior ring only.

Insufficient input (no polygon, fewer than 3 vertices, non-positive
distance) returns ``None`` silently.  A failed computation returns
``None`` with an ERROR log; nothing here raises to the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from shapely.geometry import Polygon
from shapely.validation import explain_validity, make_valid

from rpas_sites.core.config import PlanningConfig
from rpas_sites.core.constants import MIN_POLYGON_POINTS
from rpas_sites.core.exceptions import GeometryError
from rpas_sites.models.elements import MapElement, create_map_polygon, style_properties
from rpas_sites.models.geometry import create_geo_polygon
from rpas_sites.spatial.measurements import calculate_polygon_area, polygon_ring
from rpas_sites.spatial.projection import LocalProjection
from rpas_sites.utils.helpers import close_ring, utc_now_iso

logger = logging.getLogger("rpas_sites.spatial.buffers")


@dataclass(frozen=True, slots=True)
class SoraVolumes:
    """Derived SORA polygons; either may be ``None`` if generation failed."""

    contingency_volume: MapElement | None = None
    ground_risk_buffer: MapElement | None = None


def _in_range(lng: float, lat: float) -> bool:
    return (
        math.isfinite(lng)
        and math.isfinite(lat)
        and -180.0 <= lng <= 180.0
        and -90.0 <= lat <= 90.0
    )


def _buffer_ring(
    ring: list[tuple[float, float]],
    distance_m: float,
    *,
    quad_segs: int,
) -> list[tuple[float, float]]:
    """Buffer an open ``(lng, lat)`` ring outward by ``distance_m`` metres.

    Raises:
        GeometryError: If the ring has no area or the buffer is not a
            single polygon, or if the buffer reaches past the valid
            longitude / latitude range.
    """
    projection = LocalProjection.for_coords(ring)
    shape = Polygon(ring)

    if not shape.is_valid:
        logger.warning(
            "Repairing invalid source polygon | reason=%s", explain_validity(shape)
        )
        shape = make_valid(shape)

    metric = projection.to_metric(shape)
    if metric.is_empty or metric.area <= 0:
        msg = "Source polygon has no area after projection"
        raise GeometryError(msg, stage="buffers", code="BUFFER_DEGENERATE_SOURCE")

    buffered = metric.buffer(distance_m, quad_segs=quad_segs)
    if buffered.is_empty or not isinstance(buffered, Polygon):
        msg = f"Buffer produced {buffered.geom_type}, expected a single Polygon"
        raise GeometryError(msg, stage="buffers", code="BUFFER_NOT_POLYGON")

    result = projection.to_lon_lat(Polygon(buffered.exterior))
    coords = list(result.exterior.coords)
    if not all(_in_range(lng, lat) for lng, lat in coords):
        msg = f"Buffer of {distance_m:.0f} m leaves the valid coordinate range"
        raise GeometryError(msg, stage="buffers", code="BUFFER_OUT_OF_RANGE")
    return close_ring(coords)


def generate_buffer_polygon(
    source_polygon: MapElement | None,
    buffer_distance: float | None,
    element_type: str,
    *,
    config: PlanningConfig | None = None,
) -> MapElement | None:
    """Buffer ``source_polygon`` outward by ``buffer_distance`` metres.

    Args:
        source_polygon: Polygon element to buffer.
        buffer_distance: Outward distance in metres; must be > 0.
        element_type: Slot tag for the new element
            (``"contingencyVolume"`` or ``"groundRiskBuffer"``).
        config: Planning configuration (buffer smoothness).

    Returns:
        A new polygon element carrying ``source_polygon_id``,
        ``buffer_distance`` and ``generated_at``, or ``None``.
    """
    ring = polygon_ring(source_polygon)
    if len(ring) < MIN_POLYGON_POINTS:
        return None
    if buffer_distance is None or not buffer_distance > 0:
        return None

    cfg = config or PlanningConfig()
    try:
        buffered = _buffer_ring(ring, buffer_distance, quad_segs=cfg.buffer_quad_segments)
        area = calculate_polygon_area(create_geo_polygon(buffered))
        properties = {
            **style_properties(element_type),
            "area": area,
            "source_polygon_id": source_polygon.id,
            "buffer_distance": buffer_distance,
            "generated_at": utc_now_iso(),
        }
        element = create_map_polygon(buffered, element_type=element_type, **properties)
    except Exception:
        logger.exception(
            "Buffer generation failed | element_type=%s | source=%s | distance=%.1f m",
            element_type,
            source_polygon.id,
            buffer_distance,
        )
        return None

    logger.info(
        "Buffer generated | element_type=%s | source=%s | distance=%.1f m | area=%.0f m2",
        element_type,
        source_polygon.id,
        buffer_distance,
        area or 0.0,
    )
    return element


def generate_contingency_volume(
    flight_geography: MapElement | None,
    buffer_distance: float | None,
    *,
    config: PlanningConfig | None = None,
) -> MapElement | None:
    """Contingency volume around the flight geography."""
    return generate_buffer_polygon(
        flight_geography, buffer_distance, "contingencyVolume", config=config
    )


def generate_ground_risk_buffer(
    source_polygon: MapElement | None,
    buffer_distance: float | None,
    *,
    config: PlanningConfig | None = None,
) -> MapElement | None:
    """Ground risk buffer around ``source_polygon`` (normally the contingency volume)."""
    return generate_buffer_polygon(
        source_polygon, buffer_distance, "groundRiskBuffer", config=config
    )


def generate_sora_volumes(
    flight_geography: MapElement | None,
    contingency_buffer: float | None,
    ground_risk_buffer: float | None,
    *,
    config: PlanningConfig | None = None,
) -> SoraVolumes:
    """Generate the contingency volume, then the ground risk buffer around it.

    The ground risk buffer is sourced from the contingency volume
    whenever that succeeds, and from the flight geography otherwise.
    """
    contingency = generate_contingency_volume(flight_geography, contingency_buffer, config=config)
    if contingency is None and flight_geography is not None:
        logger.warning(
            "Contingency volume unavailable, buffering flight geography for ground risk "
            "| flight_geography=%s",
            flight_geography.id,
        )
    ground_risk = generate_ground_risk_buffer(
        contingency or flight_geography, ground_risk_buffer, config=config
    )
    return SoraVolumes(contingency_volume=contingency, ground_risk_buffer=ground_risk)
