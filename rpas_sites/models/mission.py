"""Mission and waypoint records.

A ``Mission`` is the unit that owns a concrete flight path inside a
site: an ordered list of 3D waypoints (altitude AGL) plus an optional
corridor buffer width.  Waypoint order is significant and must be
contiguous from 0 for the path to be flown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rpas_sites.core.exceptions import ValidationError
from rpas_sites.models.geometry import GeoPolygon, create_geo_polygon
from rpas_sites.utils.helpers import new_id, utc_now_iso

MISSION_TYPES: frozenset[str] = frozenset({"mapping", "corridor", "point", "perimeter", "freeform"})
WAYPOINT_ACTIONS: frozenset[str] = frozenset({"hover", "photo", "video"})
WAYPOINT_TYPES: frozenset[str] = frozenset({"start", "waypoint", "turn", "end"})

DEFAULT_MISSION_ALTITUDE_M = 120.0


def _check(model: str, name: str, ok: bool, value: object, message: str) -> None:
    if not ok:
        msg = f"{model}.{name}={value!r}: {message}"
        raise ValidationError(msg, stage="models")


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A 3D waypoint.

    Attributes:
        id: Unique identifier.
        lng: Longitude in degrees.
        lat: Latitude in degrees.
        altitude: Altitude in metres AGL.
        order: Zero-based position in the flight path.
        label: Display label (``"WP1"`` for order 0).
        waypoint_type: ``"start"``, ``"waypoint"``, ``"turn"`` or ``"end"``.
        speed: Optional speed override in m/s.
        heading: Optional heading override in degrees.
        action: Optional ``"hover"``, ``"photo"`` or ``"video"`` action.
        action_duration: Action duration in seconds.
        created_at: ISO 8601 creation time.
    """

    id: str
    lng: float
    lat: float
    altitude: float
    order: int
    label: str = ""
    waypoint_type: str = "waypoint"
    speed: float | None = None
    heading: float | None = None
    action: str | None = None
    action_duration: float = 0.0
    created_at: str = ""

    def __post_init__(self) -> None:
        _check("Waypoint", "order", self.order >= 0, self.order, "must be >= 0")
        _check(
            "Waypoint",
            "waypoint_type",
            self.waypoint_type in WAYPOINT_TYPES,
            self.waypoint_type,
            f"must be one of {sorted(WAYPOINT_TYPES)}",
        )
        _check(
            "Waypoint",
            "action",
            self.action is None or self.action in WAYPOINT_ACTIONS,
            self.action,
            f"must be one of {sorted(WAYPOINT_ACTIONS)}",
        )
        _check(
            "Waypoint",
            "action_duration",
            self.action_duration >= 0,
            self.action_duration,
            "must be >= 0 (seconds)",
        )
        if self.speed is not None:
            _check("Waypoint", "speed", self.speed > 0, self.speed, "must be > 0 (m/s)")

    @property
    def coordinates(self) -> tuple[float, float, float]:
        return (self.lng, self.lat, self.altitude)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "coordinates": list(self.coordinates),
            "order": self.order,
            "label": self.label,
            "type": self.waypoint_type,
            "speed": self.speed,
            "heading": self.heading,
            "action": self.action,
            "actionDuration": self.action_duration,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Waypoint:
        coords = data.get("coordinates", [])
        if not isinstance(coords, list) or len(coords) < 2:
            msg = f"waypoint coordinates must be [lng, lat, alt], got {coords!r}"
            raise TypeError(msg)
        altitude = coords[2] if len(coords) > 2 else 0.0
        return cls(
            id=str(data.get("id", "")),
            lng=float(coords[0]),
            lat=float(coords[1]),
            altitude=float(altitude),
            order=int(data.get("order", 0)),
            label=str(data.get("label", "")),
            waypoint_type=str(data.get("type", "waypoint")),
            speed=data.get("speed"),
            heading=data.get("heading"),
            action=data.get("action"),
            action_duration=float(data.get("actionDuration", 0.0)),
            created_at=str(data.get("createdAt", "")),
        )


@dataclass(frozen=True, slots=True)
class FlightPath:
    """Ordered waypoints, plus a corridor half-width in metres for corridor missions."""

    waypoints: list[Waypoint] = field(default_factory=list)
    corridor_buffer_width: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "waypoints": [wp.to_dict() for wp in self.waypoints],
            "corridorBufferWidth": self.corridor_buffer_width,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlightPath:
        raw = data.get("waypoints", [])
        if not isinstance(raw, list):
            msg = f"waypoints must be a list, got {type(raw).__name__}"
            raise TypeError(msg)
        return cls(
            waypoints=[Waypoint.from_dict(wp) for wp in raw],
            corridor_buffer_width=data.get("corridorBufferWidth"),
        )


@dataclass(frozen=True, slots=True)
class MissionSettings:
    """Flight settings for a mission.

    Attributes:
        speed: Cruise speed in m/s.
        front_overlap: Forward photo overlap in percent.
        side_overlap: Side photo overlap in percent.
        line_spacing: Distance between mapping lines in metres.
        grid_angle: Mapping line rotation in degrees from east.
    """

    speed: float = 10.0
    front_overlap: float = 70.0
    side_overlap: float = 70.0
    line_spacing: float = 30.0
    grid_angle: float = 0.0

    def __post_init__(self) -> None:
        _check("MissionSettings", "speed", self.speed > 0, self.speed, "must be > 0 (m/s)")
        for name in ("front_overlap", "side_overlap"):
            value = getattr(self, name)
            _check("MissionSettings", name, 0 <= value < 100, value, "must be in [0, 100) percent")
        _check(
            "MissionSettings",
            "line_spacing",
            self.line_spacing > 0,
            self.line_spacing,
            "must be > 0 (metres)",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "speed": self.speed,
            "frontOverlap": self.front_overlap,
            "sideOverlap": self.side_overlap,
            "lineSpacing": self.line_spacing,
            "gridAngle": self.grid_angle,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MissionSettings:
        return cls(
            speed=float(data.get("speed", 10.0)),
            front_overlap=float(data.get("frontOverlap", 70.0)),
            side_overlap=float(data.get("sideOverlap", 70.0)),
            line_spacing=float(data.get("lineSpacing", 30.0)),
            grid_angle=float(data.get("gridAngle", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class Mission:
    """A named flight-path unit within a site."""

    id: str
    name: str
    mission_type: str = "mapping"
    area_geography: GeoPolygon | None = None
    default_altitude: float = DEFAULT_MISSION_ALTITUDE_M
    flight_path: FlightPath = field(default_factory=FlightPath)
    settings: MissionSettings = field(default_factory=MissionSettings)
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        _check(
            "Mission",
            "mission_type",
            self.mission_type in MISSION_TYPES,
            self.mission_type,
            f"must be one of {sorted(MISSION_TYPES)}",
        )
        _check(
            "Mission",
            "default_altitude",
            self.default_altitude > 0,
            self.default_altitude,
            "must be > 0 (metres AGL)",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "missionType": self.mission_type,
            "areaGeography": self.area_geography.to_dict() if self.area_geography else None,
            "defaultAltitude": self.default_altitude,
            "flightPath": self.flight_path.to_dict(),
            "settings": self.settings.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mission:
        area_raw = data.get("areaGeography")
        area = None
        if isinstance(area_raw, dict):
            coords = area_raw.get("coordinates") or [[]]
            area = create_geo_polygon(coords[0])
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            mission_type=str(data.get("missionType", "mapping")),
            area_geography=area,
            default_altitude=float(data.get("defaultAltitude", DEFAULT_MISSION_ALTITUDE_M)),
            flight_path=FlightPath.from_dict(data.get("flightPath") or {}),
            settings=MissionSettings.from_dict(data.get("settings") or {}),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
        )


def create_waypoint(
    lng: float,
    lat: float,
    altitude: float,
    order: int,
    *,
    waypoint_id: str | None = None,
    label: str | None = None,
    waypoint_type: str = "waypoint",
    speed: float | None = None,
    heading: float | None = None,
    action: str | None = None,
    action_duration: float = 0.0,
) -> Waypoint:
    """Create a waypoint; the label defaults to ``WP<order + 1>``."""
    return Waypoint(
        id=waypoint_id or new_id("wp"),
        lng=float(lng),
        lat=float(lat),
        altitude=float(altitude),
        order=order,
        label=label if label is not None else f"WP{order + 1}",
        waypoint_type=waypoint_type,
        speed=speed,
        heading=heading,
        action=action,
        action_duration=action_duration,
        created_at=utc_now_iso(),
    )


def create_mission(
    name: str = "New Mission",
    mission_type: str = "mapping",
    *,
    area_geography: GeoPolygon | None = None,
    default_altitude: float = DEFAULT_MISSION_ALTITUDE_M,
    settings: MissionSettings | None = None,
    corridor_buffer_width: float | None = None,
    mission_id: str | None = None,
) -> Mission:
    """Create an empty mission (no waypoints yet)."""
    now = utc_now_iso()
    return Mission(
        id=mission_id or new_id("mission"),
        name=name,
        mission_type=mission_type,
        area_geography=area_geography,
        default_altitude=default_altitude,
        flight_path=FlightPath(corridor_buffer_width=corridor_buffer_width),
        settings=settings or MissionSettings(),
        created_at=now,
        updated_at=now,
    )
