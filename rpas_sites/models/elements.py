"""Map element records: markers, polygons and lines placed on a site map.

A ``MapElement`` pairs a geometry with display properties and an
element-type tag naming the map-data slot it lives in
(``"siteLocation"``, ``"obstacles"``, ``"flightGeography"``, ...).
``Obstacle``, ``MusterPoint`` and ``EvacuationRoute`` add the domain
attributes the site survey and emergency plan record.

Derived polygons (contingency volume, ground risk buffer) are ordinary
polygon elements whose properties carry provenance:
``source_polygon_id``, ``buffer_distance`` and ``generated_at``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from rpas_sites.core.constants import MAP_ELEMENT_STYLES
from rpas_sites.models.geometry import (
    Geometry,
    GeoLine,
    GeoPoint,
    GeoPolygon,
    create_geo_line,
    create_geo_point,
    create_geo_polygon,
    geometry_from_dict,
)
from rpas_sites.utils.helpers import new_id, utc_now_iso

# Python attribute name -> document key for the well-known property fields.
_PROPERTY_KEYS: dict[str, str] = {
    "label": "label",
    "description": "description",
    "icon": "icon",
    "color": "color",
    "fill_opacity": "fillOpacity",
    "stroke_width": "strokeWidth",
    "stroke_style": "strokeStyle",
    "arrow_end": "arrowEnd",
    "area": "area",
    "distance": "distance",
    "source_polygon_id": "sourcePolygonId",
    "buffer_distance": "bufferDistance",
    "generated_at": "generatedAt",
}
_DOCUMENT_KEYS: dict[str, str] = {v: k for k, v in _PROPERTY_KEYS.items()}


@dataclass(frozen=True, slots=True)
class ElementProperties:
    """Display and provenance properties of a map element.

    Well-known fields are typed; anything else lives in ``extra``.

    Attributes:
        label: Display label.
        description: Free-text description.
        icon: Marker icon name.
        color: Stroke / marker colour (hex).
        fill_opacity: Polygon fill opacity (0-1).
        stroke_width: Stroke width in pixels.
        stroke_style: ``"solid"``, ``"dashed"`` or ``"dotted"``.
        arrow_end: Whether a line is drawn with an arrow head.
        area: Polygon area in square metres.
        distance: Line length in metres.
        source_polygon_id: For derived polygons, the id of the buffered source.
        buffer_distance: For derived polygons, the buffer distance in metres.
        generated_at: For derived polygons, ISO 8601 generation time.
        extra: Extension properties not covered above.
    """

    label: str = ""
    description: str = ""
    icon: str | None = None
    color: str | None = None
    fill_opacity: float | None = None
    stroke_width: float | None = None
    stroke_style: str | None = None
    arrow_end: bool | None = None
    area: float | None = None
    distance: float | None = None
    source_polygon_id: str | None = None
    buffer_distance: float | None = None
    generated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise, omitting unset optional fields."""
        out: dict[str, Any] = {"label": self.label, "description": self.description}
        for attr, key in _PROPERTY_KEYS.items():
            if attr in ("label", "description"):
                continue
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        out.update(self.extra)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ElementProperties:
        """Deserialise; unknown keys are preserved in ``extra``."""
        if not isinstance(data, dict):
            msg = f"properties must be a dict, got {type(data).__name__}"
            raise TypeError(msg)
        return build_properties(
            **{_DOCUMENT_KEYS.get(k, k): v for k, v in data.items()},
        )


def build_properties(**values: Any) -> ElementProperties:
    """Build properties from keyword values, routing unknown names to ``extra``."""
    known: dict[str, Any] = {}
    extra: dict[str, Any] = dict(values.pop("extra", None) or {})
    for name, value in values.items():
        if name in _PROPERTY_KEYS:
            known[name] = value
        else:
            extra[name] = value
    known["label"] = known.get("label") or ""
    known["description"] = known.get("description") or ""
    return ElementProperties(**known, extra=extra)


def style_properties(element_type: str) -> dict[str, Any]:
    """Display defaults for an element type from ``MAP_ELEMENT_STYLES``."""
    style = MAP_ELEMENT_STYLES.get(element_type, {})
    return {k: v for k, v in style.items() if k not in ("type", "layer")}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MapElement:
    """A generic map element owned by exactly one site.

    Attributes:
        id: Unique identifier.
        kind: ``"marker"``, ``"polygon"`` or ``"line"``.
        element_type: Slot tag (``"launchPoint"``, ``"obstacles"``, ...).
        geometry: Point, polygon or line geometry.
        properties: Display / provenance properties.
        created_at: ISO 8601 creation time.
        updated_at: ISO 8601 last-update time.
    """

    id: str
    kind: str
    element_type: str
    geometry: Geometry
    properties: ElementProperties = field(default_factory=ElementProperties)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "elementType": self.element_type,
            "geometry": self.geometry.to_dict(),
            "properties": self.properties.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True, slots=True)
class Obstacle(MapElement):
    """An identified obstacle (tower, wire, building, tree, terrain, other).

    ``height`` is metres AGL, ``radius`` is the avoidance radius in metres.
    """

    obstacle_type: str = "other"
    height: float | None = None
    radius: float | None = None
    lighted: bool = False
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = MapElement.to_dict(self)
        out.update(
            {
                "obstacleType": self.obstacle_type,
                "height": self.height,
                "radius": self.radius,
                "lighted": self.lighted,
                "notes": self.notes,
            }
        )
        return out


@dataclass(frozen=True, slots=True)
class MusterPoint(MapElement):
    """An emergency assembly location."""

    is_primary: bool = False
    capacity: int | None = None
    accessibility: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = MapElement.to_dict(self)
        out.update(
            {
                "isPrimary": self.is_primary,
                "capacity": self.capacity,
                "accessibility": self.accessibility,
                "notes": self.notes,
            }
        )
        return out


@dataclass(frozen=True, slots=True)
class EvacuationRoute(MapElement):
    """An evacuation path; ``estimated_time`` is in minutes."""

    is_primary: bool = False
    surface_type: str = ""
    estimated_time: float | None = None
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = MapElement.to_dict(self)
        out.update(
            {
                "isPrimary": self.is_primary,
                "surfaceType": self.surface_type,
                "estimatedTime": self.estimated_time,
                "notes": self.notes,
            }
        )
        return out


AnyElement = MapElement | Obstacle | MusterPoint | EvacuationRoute


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def create_map_marker(
    lng: float,
    lat: float,
    *,
    element_type: str = "generic",
    element_id: str | None = None,
    altitude: float | None = None,
    **properties: Any,
) -> MapElement:
    """Create a point marker element."""
    now = utc_now_iso()
    props = {"icon": "map-pin", "color": "#3B82F6", **properties}
    return MapElement(
        id=element_id or new_id("marker"),
        kind="marker",
        element_type=element_type,
        geometry=create_geo_point(lng, lat, altitude),
        properties=build_properties(**props),
        created_at=now,
        updated_at=now,
    )


def create_map_polygon(
    coordinates: list[tuple[float, float]] | list[list[float]],
    *,
    element_type: str = "generic",
    element_id: str | None = None,
    **properties: Any,
) -> MapElement:
    """Create a polygon element from a flat ring of ``[lng, lat]`` pairs."""
    now = utc_now_iso()
    props = {
        "color": "#3B82F6",
        "fill_opacity": 0.1,
        "stroke_width": 2,
        "stroke_style": "solid",
        **properties,
    }
    return MapElement(
        id=element_id or new_id("polygon"),
        kind="polygon",
        element_type=element_type,
        geometry=create_geo_polygon(coordinates),
        properties=build_properties(**props),
        created_at=now,
        updated_at=now,
    )


def create_map_line(
    coordinates: list[tuple[float, float]] | list[list[float]],
    *,
    element_type: str = "generic",
    element_id: str | None = None,
    **properties: Any,
) -> MapElement:
    """Create a line element from an ordered list of ``[lng, lat]`` pairs."""
    now = utc_now_iso()
    props = {
        "color": "#EF4444",
        "stroke_width": 3,
        "stroke_style": "solid",
        "arrow_end": False,
        **properties,
    }
    return MapElement(
        id=element_id or new_id("line"),
        kind="line",
        element_type=element_type,
        geometry=create_geo_line(coordinates),
        properties=build_properties(**props),
        created_at=now,
        updated_at=now,
    )


def _base_fields(element: MapElement) -> dict[str, Any]:
    return {f.name: getattr(element, f.name) for f in dataclasses.fields(MapElement)}


def create_obstacle(
    lng: float,
    lat: float,
    *,
    obstacle_type: str = "other",
    height: float | None = None,
    radius: float | None = None,
    lighted: bool = False,
    notes: str = "",
    element_id: str | None = None,
    **properties: Any,
) -> Obstacle:
    """Create an obstacle marker in the ``obstacles`` slot."""
    props = {"icon": "alert-triangle", "color": "#F59E0B", **properties}
    marker = create_map_marker(
        lng, lat, element_type="obstacles", element_id=element_id or new_id("obstacle"), **props
    )
    return Obstacle(
        **_base_fields(marker),
        obstacle_type=obstacle_type,
        height=height,
        radius=radius,
        lighted=lighted,
        notes=notes,
    )


def create_muster_point(
    lng: float,
    lat: float,
    *,
    is_primary: bool = False,
    capacity: int | None = None,
    accessibility: str = "",
    notes: str = "",
    element_id: str | None = None,
    **properties: Any,
) -> MusterPoint:
    """Create a muster point marker in the ``musterPoints`` slot."""
    props = {"icon": "flag", "color": "#EF4444", **properties}
    marker = create_map_marker(
        lng, lat, element_type="musterPoints", element_id=element_id or new_id("muster"), **props
    )
    return MusterPoint(
        **_base_fields(marker),
        is_primary=is_primary,
        capacity=capacity,
        accessibility=accessibility,
        notes=notes,
    )


def create_evacuation_route(
    coordinates: list[tuple[float, float]] | list[list[float]],
    *,
    is_primary: bool = False,
    surface_type: str = "",
    estimated_time: float | None = None,
    notes: str = "",
    element_id: str | None = None,
    **properties: Any,
) -> EvacuationRoute:
    """Create an evacuation route line in the ``evacuationRoutes`` slot."""
    props = {"color": "#EF4444", "stroke_width": 3, "arrow_end": True, **properties}
    line = create_map_line(
        coordinates,
        element_type="evacuationRoutes",
        element_id=element_id or new_id("route"),
        **props,
    )
    return EvacuationRoute(
        **_base_fields(line),
        is_primary=is_primary,
        surface_type=surface_type,
        estimated_time=estimated_time,
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Deserialisation
# ---------------------------------------------------------------------------

_KIND_BY_GEOMETRY: dict[type, str] = {GeoPoint: "marker", GeoPolygon: "polygon", GeoLine: "line"}


def element_from_dict(data: dict[str, Any]) -> AnyElement:
    """Deserialise a stored map element, choosing the subclass by element type.

    Raises:
        TypeError: If ``data`` or its geometry is not a dict.
        ContractError: If the geometry type is unsupported.
    """
    if not isinstance(data, dict):
        msg = f"map element must be a dict, got {type(data).__name__}"
        raise TypeError(msg)
    geometry_raw = data.get("geometry")
    if not isinstance(geometry_raw, dict):
        msg = f"geometry must be a dict, got {type(geometry_raw).__name__}"
        raise TypeError(msg)
    geometry = geometry_from_dict(geometry_raw)

    base: dict[str, Any] = {
        "id": str(data.get("id", "")),
        "kind": str(data.get("type") or _KIND_BY_GEOMETRY[type(geometry)]),
        "element_type": str(data.get("elementType", "generic")),
        "geometry": geometry,
        "properties": ElementProperties.from_dict(data.get("properties") or {}),
        "created_at": str(data.get("createdAt", "")),
        "updated_at": str(data.get("updatedAt", "")),
    }

    element_type = base["element_type"]
    if element_type == "obstacles":
        return Obstacle(
            **base,
            obstacle_type=str(data.get("obstacleType") or "other"),
            height=data.get("height"),
            radius=data.get("radius"),
            lighted=bool(data.get("lighted", False)),
            notes=str(data.get("notes", "")),
        )
    if element_type == "musterPoints":
        return MusterPoint(
            **base,
            is_primary=bool(data.get("isPrimary", False)),
            capacity=data.get("capacity"),
            accessibility=str(data.get("accessibility", "")),
            notes=str(data.get("notes", "")),
        )
    if element_type == "evacuationRoutes":
        return EvacuationRoute(
            **base,
            is_primary=bool(data.get("isPrimary", False)),
            surface_type=str(data.get("surfaceType", "")),
            estimated_time=data.get("estimatedTime"),
            notes=str(data.get("notes", "")),
        )
    return MapElement(**base)
