"""Site aggregate: identity, map data layers, missions and form sections.

``SiteMapData`` groups map elements into three logical layers:

- **siteSurvey**: site location, operations boundary, obstacles
- **flightPlan**: launch / recovery / pilot points, flight geography,
  contingency volume, ground risk buffer
- **emergency**: muster points, evacuation routes

Each single slot holds at most one element; ``obstacles``,
``musterPoints`` and ``evacuationRoutes`` hold zero or more.

All default factories return fresh values on every call.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from rpas_sites.core.constants import COLLECTION_SLOTS, DEFAULT_SITE_STATUS, SITE_STATUS
from rpas_sites.core.exceptions import ValidationError
from rpas_sites.models.elements import (
    AnyElement,
    EvacuationRoute,
    MapElement,
    MusterPoint,
    Obstacle,
    element_from_dict,
)
from rpas_sites.models.mission import Mission
from rpas_sites.models.sections import (
    SiteEmergencyData,
    SiteFlightPlanData,
    SiteSoraData,
    SiteSurveyData,
)
from rpas_sites.utils.helpers import new_id, utc_now_iso

# ---------------------------------------------------------------------------
# Map data layers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SiteSurveyLayer:
    site_location: MapElement | None = None
    operations_boundary: MapElement | None = None
    obstacles: list[Obstacle] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FlightPlanLayer:
    launch_point: MapElement | None = None
    recovery_point: MapElement | None = None
    pilot_position: MapElement | None = None
    flight_geography: MapElement | None = None
    contingency_volume: MapElement | None = None
    ground_risk_buffer: MapElement | None = None


@dataclass(frozen=True, slots=True)
class EmergencyLayer:
    muster_points: list[MusterPoint] = field(default_factory=list)
    evacuation_routes: list[EvacuationRoute] = field(default_factory=list)


# slot name -> (layer attribute, slot attribute)
SLOT_ATTRIBUTES: dict[str, tuple[str, str]] = {
    "siteLocation": ("site_survey", "site_location"),
    "operationsBoundary": ("site_survey", "operations_boundary"),
    "obstacles": ("site_survey", "obstacles"),
    "launchPoint": ("flight_plan", "launch_point"),
    "recoveryPoint": ("flight_plan", "recovery_point"),
    "pilotPosition": ("flight_plan", "pilot_position"),
    "flightGeography": ("flight_plan", "flight_geography"),
    "contingencyVolume": ("flight_plan", "contingency_volume"),
    "groundRiskBuffer": ("flight_plan", "ground_risk_buffer"),
    "musterPoints": ("emergency", "muster_points"),
    "evacuationRoutes": ("emergency", "evacuation_routes"),
}

# document layer key -> python layer attribute
_LAYER_KEYS: dict[str, str] = {
    "siteSurvey": "site_survey",
    "flightPlan": "flight_plan",
    "emergency": "emergency",
}


@dataclass(frozen=True, slots=True)
class SiteMapData:
    """All map elements of a site, grouped by layer."""

    site_survey: SiteSurveyLayer = field(default_factory=SiteSurveyLayer)
    flight_plan: FlightPlanLayer = field(default_factory=FlightPlanLayer)
    emergency: EmergencyLayer = field(default_factory=EmergencyLayer)

    def get_slot(self, slot: str) -> Any:
        """Return the element (or list of elements) stored in ``slot``.

        Raises:
            KeyError: If ``slot`` is not a map-data slot name.
        """
        layer_attr, slot_attr = SLOT_ATTRIBUTES[slot]
        return getattr(getattr(self, layer_attr), slot_attr)

    def with_slot(self, slot: str, value: Any) -> SiteMapData:
        """Return a copy with ``slot`` replaced by ``value``."""
        layer_attr, slot_attr = SLOT_ATTRIBUTES[slot]
        layer = dataclasses.replace(getattr(self, layer_attr), **{slot_attr: value})
        return dataclasses.replace(self, **{layer_attr: layer})

    def iter_slots(self) -> Iterator[tuple[str, AnyElement]]:
        """Yield ``(slot, element)`` for every populated slot, in layer order."""
        for slot in SLOT_ATTRIBUTES:
            value = self.get_slot(slot)
            if slot in COLLECTION_SLOTS:
                for element in value:
                    yield slot, element
            elif value is not None:
                yield slot, value

    def iter_elements(self) -> Iterator[AnyElement]:
        for _slot, element in self.iter_slots():
            yield element

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {key: {} for key in _LAYER_KEYS}
        layer_key_by_attr = {v: k for k, v in _LAYER_KEYS.items()}
        for slot, (layer_attr, _slot_attr) in SLOT_ATTRIBUTES.items():
            value = self.get_slot(slot)
            layer_key = layer_key_by_attr[layer_attr]
            if slot in COLLECTION_SLOTS:
                out[layer_key][slot] = [e.to_dict() for e in value]
            else:
                out[layer_key][slot] = value.to_dict() if value is not None else None
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SiteMapData:
        """Deserialise stored map data; missing layers and slots default to empty.

        Raises:
            TypeError: If a layer or collection has the wrong type.
        """
        map_data = cls()
        if not data:
            return map_data
        if not isinstance(data, dict):
            msg = f"mapData must be a dict, got {type(data).__name__}"
            raise TypeError(msg)
        for slot, (layer_attr, _slot_attr) in SLOT_ATTRIBUTES.items():
            layer_key = next(k for k, v in _LAYER_KEYS.items() if v == layer_attr)
            layer = data.get(layer_key) or {}
            if not isinstance(layer, dict):
                msg = f"mapData.{layer_key} must be a dict, got {type(layer).__name__}"
                raise TypeError(msg)
            raw = layer.get(slot)
            if slot in COLLECTION_SLOTS:
                raw = raw or []
                if not isinstance(raw, list):
                    msg = f"mapData.{layer_key}.{slot} must be a list, got {type(raw).__name__}"
                    raise TypeError(msg)
                map_data = map_data.with_slot(slot, [element_from_dict(e) for e in raw if e])
            elif raw:
                map_data = map_data.with_slot(slot, element_from_dict(raw))
        return map_data


# ---------------------------------------------------------------------------
# Site
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Site:
    """Top-level site aggregate.

    Attributes:
        id: Unique identifier.
        name: Display name.
        description: Free-text description.
        status: One of ``SITE_STATUS`` (``"draft"`` … ``"completed"``).
        order: Position of the site within its project.
        map_data: Geospatial elements grouped by layer.
        missions: Missions flown at this site.
        site_survey: Survey form section.
        flight_plan: Flight plan parameters.
        emergency: Emergency information.
        sora_assessment: SORA inputs and results.
        created_at: ISO 8601 creation time.
        updated_at: ISO 8601 last-update time.
        created_by: User id of the creator, if known.
    """

    id: str
    name: str = "New Site"
    description: str = ""
    status: str = DEFAULT_SITE_STATUS
    order: int = 0
    map_data: SiteMapData = field(default_factory=SiteMapData)
    missions: list[Mission] = field(default_factory=list)
    site_survey: SiteSurveyData = field(default_factory=SiteSurveyData)
    flight_plan: SiteFlightPlanData = field(default_factory=SiteFlightPlanData)
    emergency: SiteEmergencyData = field(default_factory=SiteEmergencyData)
    sora_assessment: SiteSoraData = field(default_factory=SiteSoraData)
    created_at: str = ""
    updated_at: str = ""
    created_by: str | None = None

    def __post_init__(self) -> None:
        if self.status not in SITE_STATUS:
            msg = f"Site.status={self.status!r}: must be one of {sorted(SITE_STATUS)}"
            raise ValidationError(msg, stage="models")

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the stored document shape."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "order": self.order,
            "mapData": self.map_data.to_dict(),
            "missions": [m.to_dict() for m in self.missions],
            "siteSurvey": self.site_survey.to_dict(),
            "flightPlan": self.flight_plan.to_dict(),
            "emergency": self.emergency.to_dict(),
            "soraAssessment": self.sora_assessment.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "createdBy": self.created_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Site:
        """Deserialise a stored site document.

        Missing sections are defaulted rather than raising.

        Raises:
            TypeError: If field values have unexpected types.
        """
        if not isinstance(data, dict):
            msg = f"site must be a dict, got {type(data).__name__}"
            raise TypeError(msg)
        missions_raw = data.get("missions") or []
        if not isinstance(missions_raw, list):
            msg = f"missions must be a list, got {type(missions_raw).__name__}"
            raise TypeError(msg)
        return cls(
            id=str(data.get("id") or new_id("site")),
            name=str(data.get("name", "New Site")),
            description=str(data.get("description", "")),
            status=str(data.get("status") or DEFAULT_SITE_STATUS),
            order=int(data.get("order", 0)),
            map_data=SiteMapData.from_dict(data.get("mapData")),
            missions=[Mission.from_dict(m) for m in missions_raw],
            site_survey=SiteSurveyData.model_validate(data.get("siteSurvey") or {}),
            flight_plan=SiteFlightPlanData.model_validate(data.get("flightPlan") or {}),
            emergency=SiteEmergencyData.model_validate(data.get("emergency") or {}),
            sora_assessment=SiteSoraData.model_validate(data.get("soraAssessment") or {}),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
            created_by=data.get("createdBy"),
        )


# ---------------------------------------------------------------------------
# Default factories
# ---------------------------------------------------------------------------


def get_default_site_map_data() -> SiteMapData:
    return SiteMapData()


def get_default_site_survey_data() -> SiteSurveyData:
    return SiteSurveyData()


def get_default_site_flight_plan_data() -> SiteFlightPlanData:
    return SiteFlightPlanData()


def get_default_site_emergency_data() -> SiteEmergencyData:
    return SiteEmergencyData()


def get_default_site_sora_data() -> SiteSoraData:
    return SiteSoraData()


def create_default_site(
    *,
    site_id: str | None = None,
    name: str = "New Site",
    description: str = "",
    status: str = DEFAULT_SITE_STATUS,
    order: int = 0,
    created_by: str | None = None,
) -> Site:
    """Create a site with empty map data and default form sections."""
    now = utc_now_iso()
    return Site(
        id=site_id or new_id("site"),
        name=name,
        description=description,
        status=status,
        order=order,
        map_data=get_default_site_map_data(),
        missions=[],
        site_survey=get_default_site_survey_data(),
        flight_plan=get_default_site_flight_plan_data(),
        emergency=get_default_site_emergency_data(),
        sora_assessment=get_default_site_sora_data(),
        created_at=now,
        updated_at=now,
        created_by=created_by,
    )
