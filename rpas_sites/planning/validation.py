"""Site completeness checks and summary statistics.

``validate_site_completeness`` never raises: sites are filled in
incrementally, so it reports what is missing as a list of issues that a
caller can render as partial progress.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rpas_sites.core.constants import POPULATION_CATEGORIES
from rpas_sites.models.site import Site
from rpas_sites.spatial.measurements import calculate_polygon_area

SECTIONS: tuple[str, ...] = ("siteSurvey", "flightPlan", "emergency")


@dataclass(frozen=True, slots=True)
class CompletenessIssue:
    section: str
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"section": self.section, "field": self.field, "message": self.message}


@dataclass(frozen=True, slots=True)
class CompletenessReport:
    """Outcome of ``validate_site_completeness``.

    Attributes:
        is_complete: ``True`` when there are no issues.
        issues: Missing items, in check order.
        completeness: Per-section flag, ``True`` when the section has no issues.
    """

    is_complete: bool
    issues: list[CompletenessIssue] = field(default_factory=list)
    completeness: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "isComplete": self.is_complete,
            "issues": [i.to_dict() for i in self.issues],
            "completeness": dict(self.completeness),
        }


def validate_site_completeness(site: Site) -> CompletenessReport:
    """Check that a site has what an operations plan needs.

    Required: site location and population category (site survey),
    launch and recovery points (flight plan), at least one muster
    point (emergency).
    """
    map_data = site.map_data
    issues: list[CompletenessIssue] = []

    if map_data.site_survey.site_location is None:
        issues.append(CompletenessIssue("siteSurvey", "siteLocation", "Site location not set"))
    category = site.site_survey.population.category
    if not category:
        issues.append(
            CompletenessIssue("siteSurvey", "population", "Population category not assessed")
        )
    elif category not in POPULATION_CATEGORIES:
        issues.append(
            CompletenessIssue(
                "siteSurvey", "population", f"Unknown population category {category!r}"
            )
        )

    if map_data.flight_plan.launch_point is None:
        issues.append(CompletenessIssue("flightPlan", "launchPoint", "Launch point not set"))
    if map_data.flight_plan.recovery_point is None:
        issues.append(CompletenessIssue("flightPlan", "recoveryPoint", "Recovery point not set"))

    if not map_data.emergency.muster_points:
        issues.append(CompletenessIssue("emergency", "musterPoints", "No muster points defined"))

    flagged = {issue.section for issue in issues}
    return CompletenessReport(
        is_complete=not issues,
        issues=issues,
        completeness={section: section not in flagged for section in SECTIONS},
    )


@dataclass(frozen=True, slots=True)
class SiteStats:
    has_location: bool
    has_boundary: bool
    obstacle_count: int
    has_launch_point: bool
    has_recovery_point: bool
    has_pilot_position: bool
    has_flight_geography: bool
    muster_point_count: int
    evacuation_route_count: int
    boundary_area: float | None


def get_site_stats(site: Site) -> SiteStats:
    """Presence flags and element counts for a site summary card."""
    survey = site.map_data.site_survey
    flight = site.map_data.flight_plan
    emergency = site.map_data.emergency
    return SiteStats(
        has_location=survey.site_location is not None,
        has_boundary=survey.operations_boundary is not None,
        obstacle_count=len(survey.obstacles),
        has_launch_point=flight.launch_point is not None,
        has_recovery_point=flight.recovery_point is not None,
        has_pilot_position=flight.pilot_position is not None,
        has_flight_geography=flight.flight_geography is not None,
        muster_point_count=len(emergency.muster_points),
        evacuation_route_count=len(emergency.evacuation_routes),
        boundary_area=calculate_polygon_area(survey.operations_boundary),
    )
