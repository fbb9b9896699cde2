"""Pydantic models for the non-geospatial sections of a site document.

Each site carries four form-backed sections next to its map data:

- **siteSurvey**: location text, airspace, population (SORA), surroundings, access
- **flightPlan**: operation parameters that size the SORA buffers
- **emergency**: nearest services and site-specific procedures
- **soraAssessment**: iGRC / ARC / SAIL inputs and outputs

Fields are snake_case in Python and camelCase in the stored document.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class _Section(BaseModel):
    """Base for site sections: camelCase document keys, snake_case attributes."""

    model_config = {"populate_by_name": True, "alias_generator": to_camel}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Site survey
# ---------------------------------------------------------------------------


class AirspaceInfo(_Section):
    classification: str = "G"
    restrictions: list[str] = Field(default_factory=list)
    nearest_aerodrome: str = ""
    aerodrome_distance: float | None = None
    aerodrome_direction: str = ""
    notams: list[str] = Field(default_factory=list)


class PopulationAssessment(_Section):
    """SORA population density assessment.

    ``category`` and ``adjacent_category`` are keys of
    ``POPULATION_CATEGORIES``.
    """

    category: str | None = None
    adjacent_category: str | None = None
    density: float | None = None
    justification: str = ""
    assessment_date: str | None = None


class Surroundings(_Section):
    terrain: str = ""
    vegetation: str = ""
    structures: str = ""
    water_features: str = ""
    wildlife: str = ""


class SiteAccess(_Section):
    vehicle_access: bool = True
    parking_available: bool = True
    permissions_required: list[str] = Field(default_factory=list)
    land_owner: str = ""
    access_notes: str = ""


class SiteSurveyData(_Section):
    """Text side of the site survey; complements the map markers."""

    location_name: str = ""
    address: str = ""
    access_instructions: str = ""
    airspace: AirspaceInfo = Field(default_factory=AirspaceInfo)
    population: PopulationAssessment = Field(default_factory=PopulationAssessment)
    surroundings: Surroundings = Field(default_factory=Surroundings)
    access: SiteAccess = Field(default_factory=SiteAccess)
    photos: list[dict[str, Any]] = Field(default_factory=list)
    survey_date: str | None = None
    surveyed_by: str | None = None
    notes: str = ""


# ---------------------------------------------------------------------------
# Flight plan
# ---------------------------------------------------------------------------


class SiteFlightPlanData(_Section):
    """Operation parameters for a site.

    Attributes:
        operation_type: ``"VLOS"``, ``"EVLOS"`` or ``"BVLOS"``.
        max_altitude_agl: Maximum planned altitude in metres AGL.
        max_distance_from_pilot: Maximum planned range in metres.
        flight_geography_method: ``"manual"`` or ``"auto"``.
        contingency_buffer: Reaction time in seconds at max speed.
        ground_risk_buffer_method: ``"altitude"`` (1:1), ``"fixed"`` or
            ``"manual"`` (drawn by hand, never regenerated).
        ground_risk_buffer: Fixed ground risk buffer in metres
            (used by the ``"fixed"`` method).
        aircraft_max_speed: Aircraft max speed in m/s, when known.
    """

    operation_type: str = "VLOS"
    max_altitude_agl: float = 120.0
    max_distance_from_pilot: float | None = None
    flight_geography_method: str = "manual"
    contingency_buffer: float = 15.0
    ground_risk_buffer_method: str = "altitude"
    ground_risk_buffer: float | None = None
    aircraft_max_speed: float | None = None
    local_weather_factors: str = ""
    site_contingencies: list[dict[str, Any]] = Field(default_factory=list)
    notes: str = ""


# ---------------------------------------------------------------------------
# Emergency
# ---------------------------------------------------------------------------


class NearestHospital(_Section):
    name: str = ""
    address: str = ""
    distance: float | None = None
    estimated_time: float | None = None
    phone: str = ""


class NearestFireStation(_Section):
    name: str = ""
    distance: float | None = None
    phone: str = ""


class SiteEmergencyData(_Section):
    local_emergency_notes: str = ""
    nearest_hospital: NearestHospital = Field(default_factory=NearestHospital)
    nearest_fire_station: NearestFireStation = Field(default_factory=NearestFireStation)
    site_evacuation_procedure: str = ""
    fly_away_procedure: str = ""
    notes: str = ""


# ---------------------------------------------------------------------------
# SORA assessment
# ---------------------------------------------------------------------------


class SiteSoraData(_Section):
    """Per-site SORA assessment inputs and calculated outputs."""

    population_category: str | None = None
    adjacent_population: str | None = None
    operation_type: str = "VLOS"
    max_altitude_agl: float = 120.0
    ua_characteristic: str | None = None
    i_grc: int | None = Field(default=None, alias="iGRC")
    f_grc: int | None = Field(default=None, alias="fGRC")
    initial_arc: str | None = Field(default=None, alias="initialARC")
    residual_arc: str | None = Field(default=None, alias="residualARC")
    sail: str | None = None
    mitigation_overrides: dict[str, Any] = Field(default_factory=dict)
    calculation_date: str | None = None
    is_valid: bool = False
    validation_notes: str = ""
