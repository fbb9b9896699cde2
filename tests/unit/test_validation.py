"""Tests for site completeness validation and site statistics."""

from __future__ import annotations

import dataclasses

import pytest

from rpas_sites.models.site import Site
from rpas_sites.planning.map_editing import remove_element
from rpas_sites.planning.validation import (
    SECTIONS,
    CompletenessIssue,
    get_site_stats,
    validate_site_completeness,
)
from rpas_sites.spatial.measurements import calculate_polygon_area


def _assessed(site: Site, category: str = "sparsely") -> Site:
    population = site.site_survey.population.model_copy(update={"category": category})
    survey = site.site_survey.model_copy(update={"population": population})
    return dataclasses.replace(site, site_survey=survey)


def _without(site: Site, slot: str) -> Site:
    for candidate, element in site.map_data.iter_slots():
        if candidate == slot:
            site = remove_element(site, element.id)
    return site


class TestValidateSiteCompleteness:
    def test_empty_site_lists_every_issue(self, empty_site: Site) -> None:
        report = validate_site_completeness(empty_site)
        assert report.is_complete is False
        assert [i.field for i in report.issues] == [
            "siteLocation",
            "population",
            "launchPoint",
            "recoveryPoint",
            "musterPoints",
        ]
        assert report.completeness == {section: False for section in SECTIONS}

    def test_complete_site(self, populated_site: Site) -> None:
        report = validate_site_completeness(_assessed(populated_site))
        assert report.is_complete is True
        assert report.issues == []
        assert all(report.completeness.values())

    def test_population_not_assessed(self, populated_site: Site) -> None:
        report = validate_site_completeness(populated_site)
        assert report.issues == [
            CompletenessIssue("siteSurvey", "population", "Population category not assessed")
        ]
        assert report.completeness == {
            "siteSurvey": False,
            "flightPlan": True,
            "emergency": True,
        }

    @pytest.mark.parametrize(
        ("slot", "section", "message"),
        [
            ("siteLocation", "siteSurvey", "Site location not set"),
            ("launchPoint", "flightPlan", "Launch point not set"),
            ("recoveryPoint", "flightPlan", "Recovery point not set"),
            ("musterPoints", "emergency", "No muster points defined"),
        ],
    )
    def test_missing_slot(
        self, populated_site: Site, slot: str, section: str, message: str
    ) -> None:
        report = validate_site_completeness(_without(_assessed(populated_site), slot))
        assert report.is_complete is False
        assert [(i.section, i.field, i.message) for i in report.issues] == [
            (section, slot, message)
        ]
        assert report.completeness[section] is False

    def test_optional_slots_not_required(self, populated_site: Site) -> None:
        """Pilot position, boundary and flight geography are not required."""
        site = _assessed(populated_site)
        for slot in ("pilotPosition", "operationsBoundary", "flightGeography", "obstacles"):
            site = _without(site, slot)
        assert validate_site_completeness(site).is_complete is True

    def test_to_dict_shape(self, empty_site: Site) -> None:
        payload = validate_site_completeness(empty_site).to_dict()
        assert set(payload) == {"isComplete", "issues", "completeness"}
        assert payload["issues"][0] == {
            "section": "siteSurvey",
            "field": "siteLocation",
            "message": "Site location not set",
        }

    def test_unknown_population_category(self, populated_site: Site) -> None:
        report = validate_site_completeness(_assessed(populated_site, category="crowded"))
        assert [i.message for i in report.issues] == ["Unknown population category 'crowded'"]
        assert report.completeness["siteSurvey"] is False


class TestGetSiteStats:
    def test_populated_site(self, populated_site: Site) -> None:
        stats = get_site_stats(populated_site)
        assert stats.has_location
        assert stats.has_boundary
        assert stats.obstacle_count == 1
        assert stats.has_launch_point
        assert stats.has_recovery_point
        assert stats.has_pilot_position
        assert stats.has_flight_geography
        assert stats.muster_point_count == 2
        assert stats.evacuation_route_count == 1
        assert stats.boundary_area == pytest.approx(
            calculate_polygon_area(populated_site.map_data.site_survey.operations_boundary)
        )

    def test_empty_site(self, empty_site: Site) -> None:
        stats = get_site_stats(empty_site)
        assert not stats.has_location
        assert stats.obstacle_count == 0
        assert stats.muster_point_count == 0
        assert stats.boundary_area is None
