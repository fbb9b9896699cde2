"""Canonical payload contracts for the stored site document.

Every ``to_dict()`` output that crosses into the document store is
declared here as a ``TypedDict``.  Drift-detection tests compare these
declarations with the serialised keys, so renaming a field in one place
and not the other fails the suite.

Design notes:
- ``TypedDict`` rather than ``dataclass``: the document store speaks
  plain JSON dicts, so the contract describes exactly that shape.
- Keys are camelCase to match documents written by the web client.
"""

from __future__ import annotations

from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Geometry and map elements
# ---------------------------------------------------------------------------


class GeometryPayload(TypedDict):
    """GeoJSON geometry (``Point``, ``Polygon`` or ``LineString``)."""

    type: str
    coordinates: list[Any]


class MapElementPayload(TypedDict):
    """Serialised ``MapElement``."""

    id: str
    type: str
    elementType: str
    geometry: GeometryPayload
    properties: dict[str, Any]
    createdAt: str
    updatedAt: str


class ObstaclePayload(MapElementPayload):
    obstacleType: str
    height: float | None
    radius: float | None
    lighted: bool
    notes: str


class MusterPointPayload(MapElementPayload):
    isPrimary: bool
    capacity: int | None
    accessibility: str
    notes: str


class EvacuationRoutePayload(MapElementPayload):
    isPrimary: bool
    surfaceType: str
    estimatedTime: float | None
    notes: str


# ---------------------------------------------------------------------------
# Missions
# ---------------------------------------------------------------------------


class WaypointPayload(TypedDict):
    id: str
    coordinates: list[float]
    order: int
    label: str
    type: str
    speed: float | None
    heading: float | None
    action: str | None
    actionDuration: float
    createdAt: str


class FlightPathPayload(TypedDict):
    waypoints: list[WaypointPayload]
    corridorBufferWidth: float | None


class MissionPayload(TypedDict):
    id: str
    name: str
    missionType: str
    areaGeography: GeometryPayload | None
    defaultAltitude: float
    flightPath: FlightPathPayload
    settings: dict[str, float]
    createdAt: str
    updatedAt: str


# ---------------------------------------------------------------------------
# Site
# ---------------------------------------------------------------------------


class SiteMapDataPayload(TypedDict):
    siteSurvey: dict[str, Any]
    flightPlan: dict[str, Any]
    emergency: dict[str, Any]


class SitePayload(TypedDict):
    """Serialised ``Site`` as written to the document store."""

    id: str
    name: str
    description: str
    status: str
    order: int
    mapData: SiteMapDataPayload
    missions: list[MissionPayload]
    siteSurvey: dict[str, Any]
    flightPlan: dict[str, Any]
    emergency: dict[str, Any]
    soraAssessment: dict[str, Any]
    createdAt: str
    updatedAt: str
    createdBy: str | None
