"""Shared site-planning constants.

Centralises limits, display styles, map layer membership and SORA
population categories that the models and planning helpers share.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

# ---------------------------------------------------------------------------
# Limits and physical constants
# ---------------------------------------------------------------------------

MAX_SITES_PER_PROJECT: int = 10
"""Maximum number of sites a single project may hold."""

EARTH_RADIUS_M: float = 6_371_000.0
"""Mean earth radius used by the spherical distance and area formulas."""

MIN_POLYGON_POINTS: int = 3
"""Distinct vertices needed before a ring has an area or can be buffered."""

MIN_LINE_POINTS: int = 2

WGS84_CRS: str = "EPSG:4326"

# ---------------------------------------------------------------------------
# Site status
# ---------------------------------------------------------------------------

SITE_STATUS: MappingProxyType[str, dict[str, str]] = MappingProxyType(
    {
        "draft": {"label": "Draft", "color": "bg-gray-100 text-gray-700"},
        "surveyed": {"label": "Surveyed", "color": "bg-blue-100 text-blue-700"},
        "planned": {"label": "Planned", "color": "bg-yellow-100 text-yellow-700"},
        "approved": {"label": "Approved", "color": "bg-green-100 text-green-700"},
        "completed": {"label": "Completed", "color": "bg-purple-100 text-purple-700"},
    }
)

DEFAULT_SITE_STATUS: str = "draft"

# ---------------------------------------------------------------------------
# Map layers and element slots
# ---------------------------------------------------------------------------

MAP_LAYERS: MappingProxyType[str, dict[str, Any]] = MappingProxyType(
    {
        "siteSurvey": {
            "id": "siteSurvey",
            "label": "Site Survey",
            "description": "Location, boundary, obstacles",
            "color": "#3B82F6",
            "elements": ("siteLocation", "operationsBoundary", "obstacles"),
        },
        "flightPlan": {
            "id": "flightPlan",
            "label": "Flight Plan",
            "description": "Launch, recovery, flight geography",
            "color": "#22C55E",
            "elements": (
                "launchPoint",
                "recoveryPoint",
                "pilotPosition",
                "flightGeography",
                "contingencyVolume",
                "groundRiskBuffer",
            ),
        },
        "emergency": {
            "id": "emergency",
            "label": "Emergency",
            "description": "Muster points, evacuation routes",
            "color": "#EF4444",
            "elements": ("musterPoints", "evacuationRoutes"),
        },
    }
)

COLLECTION_SLOTS: frozenset[str] = frozenset({"obstacles", "musterPoints", "evacuationRoutes"})
"""Slots holding zero or more elements; every other slot holds at most one."""

DERIVED_SLOTS: frozenset[str] = frozenset({"contingencyVolume", "groundRiskBuffer"})
"""Polygon slots whose geometry is computed from a source polygon."""

# Singular names used by drawing tools, mapped to their slot names.
ELEMENT_TYPE_ALIASES: MappingProxyType[str, str] = MappingProxyType(
    {
        "obstacle": "obstacles",
        "musterPoint": "musterPoints",
        "evacuationRoute": "evacuationRoutes",
    }
)

MAP_ELEMENT_STYLES: MappingProxyType[str, dict[str, Any]] = MappingProxyType(
    {
        # Site survey
        "siteLocation": {
            "type": "marker",
            "layer": "siteSurvey",
            "label": "Site Location",
            "color": "#3B82F6",
            "icon": "map-pin",
            "description": "Center point of the operation site",
        },
        "operationsBoundary": {
            "type": "polygon",
            "layer": "siteSurvey",
            "label": "Operations Boundary",
            "color": "#3B82F6",
            "fill_opacity": 0.1,
            "stroke_width": 2,
            "stroke_style": "solid",
            "description": "Area where operations will take place",
        },
        "obstacles": {
            "type": "marker",
            "layer": "siteSurvey",
            "label": "Obstacle",
            "color": "#F59E0B",
            "icon": "alert-triangle",
            "description": "Identified obstacles (towers, wires, etc.)",
        },
        # Flight plan
        "launchPoint": {
            "type": "marker",
            "layer": "flightPlan",
            "label": "Launch Point",
            "color": "#22C55E",
            "icon": "plane-takeoff",
            "description": "RPAS launch/takeoff location",
        },
        "recoveryPoint": {
            "type": "marker",
            "layer": "flightPlan",
            "label": "Recovery Point",
            "color": "#F97316",
            "icon": "plane-landing",
            "description": "RPAS landing/recovery location",
        },
        "pilotPosition": {
            "type": "marker",
            "layer": "flightPlan",
            "label": "Pilot Position",
            "color": "#8B5CF6",
            "icon": "user",
            "description": "Remote pilot operating position",
        },
        "flightGeography": {
            "type": "polygon",
            "layer": "flightPlan",
            "label": "Flight Geography",
            "color": "#22C55E",
            "fill_opacity": 0.05,
            "stroke_width": 2,
            "stroke_style": "dashed",
            "description": "Intended flight area (SORA)",
        },
        "contingencyVolume": {
            "type": "polygon",
            "layer": "flightPlan",
            "label": "Contingency Volume",
            "color": "#EAB308",
            "fill_opacity": 0.05,
            "stroke_width": 2,
            "stroke_style": "dotted",
            "description": "Buffer for abnormal situations (SORA)",
        },
        "groundRiskBuffer": {
            "type": "polygon",
            "layer": "flightPlan",
            "label": "Ground Risk Buffer",
            "color": "#F97316",
            "fill_opacity": 0.03,
            "stroke_width": 1,
            "stroke_style": "dotted",
            "description": "Extended ground risk area (SORA)",
        },
        # Emergency
        "musterPoints": {
            "type": "marker",
            "layer": "emergency",
            "label": "Muster Point",
            "color": "#EF4444",
            "icon": "flag",
            "description": "Emergency assembly location",
        },
        "evacuationRoutes": {
            "type": "line",
            "layer": "emergency",
            "label": "Evacuation Route",
            "color": "#EF4444",
            "stroke_width": 3,
            "stroke_style": "solid",
            "arrow_end": True,
            "description": "Primary evacuation path",
        },
    }
)

# ---------------------------------------------------------------------------
# SORA population categories
# ---------------------------------------------------------------------------

POPULATION_CATEGORIES: MappingProxyType[str, dict[str, str]] = MappingProxyType(
    {
        "controlled": {
            "id": "controlled",
            "label": "Controlled Ground",
            "description": "Access strictly controlled, no uninvolved people",
            "density": "0",
        },
        "remote": {
            "id": "remote",
            "label": "Remote/Uninhabited",
            "description": "Wilderness, no permanent structures",
            "density": "< 1/km²",
        },
        "lightly": {
            "id": "lightly",
            "label": "Lightly Populated",
            "description": "Rural areas, scattered buildings",
            "density": "1-50/km²",
        },
        "sparsely": {
            "id": "sparsely",
            "label": "Sparsely Populated",
            "description": "Small towns, light residential",
            "density": "50-500/km²",
        },
        "suburban": {
            "id": "suburban",
            "label": "Suburban",
            "description": "Residential neighborhoods",
            "density": "500-5000/km²",
        },
        "highdensity": {
            "id": "highdensity",
            "label": "High Density Urban",
            "description": "Urban centers, high-rise areas",
            "density": "> 5000/km²",
        },
        "assembly": {
            "id": "assembly",
            "label": "Assembly of People",
            "description": "Events, stadiums, gatherings",
            "density": "Variable",
        },
    }
)

# ---------------------------------------------------------------------------
# Flight plan enumerations
# ---------------------------------------------------------------------------

GROUND_RISK_BUFFER_METHODS: frozenset[str] = frozenset({"altitude", "fixed", "manual"})

OBSTACLE_LABELS: MappingProxyType[str, str] = MappingProxyType(
    {
        "tower": "Tower/Antenna",
        "wire": "Power Lines",
        "building": "Building",
        "tree": "Trees",
        "terrain": "Terrain",
        "crane": "Crane",
        "water": "Water Tower",
        "other": "Obstacle",
    }
)
"""Default display label per obstacle type."""


def resolve_element_type(element_type: str) -> str:
    """Map a singular drawing-tool name onto its slot name.

    ``"obstacle"`` becomes ``"obstacles"``; slot names pass through.
    """
    return ELEMENT_TYPE_ALIASES.get(element_type, element_type)
