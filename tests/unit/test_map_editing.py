"""Tests for map-data editing operations.

Covers:
- Single slots are replaced, collection slots appended
- Primary muster point / evacuation route election
- Polygon ring closing and area recording
- Unknown and mismatched element types
- Shallow-merge updates and identity protection
- Inputs are never modified
"""

from __future__ import annotations

import logging

import pytest

from rpas_sites.core.exceptions import UnknownElementTypeError, ValidationError
from rpas_sites.models.elements import MusterPoint, Obstacle
from rpas_sites.models.geometry import create_geo_line, create_geo_point, create_geo_polygon
from rpas_sites.models.site import Site
from rpas_sites.planning.map_editing import (
    add_evacuation_route,
    add_muster_point,
    add_obstacle,
    find_element,
    get_layer_elements,
    remove_element,
    set_marker,
    set_polygon,
    update_element,
)
from rpas_sites.spatial.measurements import calculate_line_length, calculate_polygon_area

EDITING_LOGGER = "rpas_sites.planning.map_editing"

TRIANGLE = [(-123.10, 49.28), (-123.09, 49.28), (-123.09, 49.29)]


# ===========================================================================
# Single slots
# ===========================================================================


class TestSetMarker:
    def test_places_marker_with_style(self, empty_site: Site) -> None:
        site = set_marker(empty_site, "launchPoint", -123.0990, 49.2805)
        launch = site.map_data.flight_plan.launch_point
        assert launch.kind == "marker"
        assert launch.element_type == "launchPoint"
        assert launch.properties.label == "Launch Point"
        assert launch.properties.color == "#22C55E"
        assert launch.properties.icon == "plane-takeoff"

    def test_replaces_existing(self, empty_site: Site) -> None:
        first = set_marker(empty_site, "pilotPosition", -123.0, 49.0)
        second = set_marker(first, "pilotPosition", -123.5, 49.5)
        old_id = first.map_data.flight_plan.pilot_position.id
        pilot = second.map_data.flight_plan.pilot_position
        assert pilot.id != old_id
        assert (pilot.geometry.lng, pilot.geometry.lat) == (-123.5, 49.5)

    def test_options_override_style(self, empty_site: Site) -> None:
        site = set_marker(empty_site, "siteLocation", -123.0, 49.0, label="North Pad")
        assert site.map_data.site_survey.site_location.properties.label == "North Pad"

    def test_altitude_kept(self, empty_site: Site) -> None:
        site = set_marker(empty_site, "launchPoint", -123.0, 49.0, altitude=310.0)
        assert site.map_data.flight_plan.launch_point.geometry.alt == 310.0

    def test_obstacle_alias_appends(self, empty_site: Site) -> None:
        site = set_marker(empty_site, "obstacle", -123.0, 49.0, obstacle_type="wire")
        site = set_marker(site, "obstacles", -123.1, 49.1)
        obstacles = site.map_data.site_survey.obstacles
        assert len(obstacles) == 2
        assert isinstance(obstacles[0], Obstacle)
        assert obstacles[0].obstacle_type == "wire"

    def test_muster_point_alias_appends(self, empty_site: Site) -> None:
        site = set_marker(empty_site, "musterPoint", -123.0, 49.0)
        assert isinstance(site.map_data.emergency.muster_points[0], MusterPoint)

    def test_unknown_type_raises(self, empty_site: Site) -> None:
        with pytest.raises(UnknownElementTypeError) as exc_info:
            set_marker(empty_site, "helipad", -123.0, 49.0)
        assert exc_info.value.element_type == "helipad"

    def test_polygon_slot_rejected(self, empty_site: Site) -> None:
        with pytest.raises(ValidationError) as exc_info:
            set_marker(empty_site, "flightGeography", -123.0, 49.0)
        assert exc_info.value.code == "WRONG_ELEMENT_KIND"

    def test_input_not_modified(self, empty_site: Site) -> None:
        set_marker(empty_site, "launchPoint", -123.0, 49.0)
        assert empty_site.map_data.flight_plan.launch_point is None

    def test_updated_at_refreshed(self, empty_site: Site) -> None:
        site = set_marker(empty_site, "launchPoint", -123.0, 49.0)
        assert site.updated_at >= empty_site.updated_at
        assert site.id == empty_site.id


class TestSetPolygon:
    def test_ring_closed(self, empty_site: Site) -> None:
        site = set_polygon(empty_site, "flightGeography", TRIANGLE)
        ring = site.map_data.flight_plan.flight_geography.geometry.ring
        assert len(ring) == 4
        assert ring[0] == ring[-1]

    def test_closed_ring_not_doubled(self, empty_site: Site) -> None:
        site = set_polygon(empty_site, "flightGeography", [*TRIANGLE, TRIANGLE[0]])
        assert len(site.map_data.flight_plan.flight_geography.geometry.ring) == 4

    def test_area_recorded(self, empty_site: Site) -> None:
        site = set_polygon(empty_site, "operationsBoundary", TRIANGLE)
        boundary = site.map_data.site_survey.operations_boundary
        assert boundary.properties.area == pytest.approx(calculate_polygon_area(boundary))
        assert boundary.properties.area > 0

    def test_style_applied(self, empty_site: Site) -> None:
        site = set_polygon(empty_site, "flightGeography", TRIANGLE)
        props = site.map_data.flight_plan.flight_geography.properties
        assert props.label == "Flight Geography"
        assert props.stroke_style == "dashed"
        assert props.fill_opacity == 0.05

    def test_too_few_vertices_unchanged(
        self, empty_site: Site, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger=EDITING_LOGGER):
            site = set_polygon(empty_site, "flightGeography", TRIANGLE[:2])
        assert site is empty_site
        assert any("too few vertices" in r.message for r in caplog.records)

    def test_replaces_existing(self, populated_site: Site) -> None:
        old_id = populated_site.map_data.flight_plan.flight_geography.id
        site = set_polygon(populated_site, "flightGeography", TRIANGLE)
        assert site.map_data.flight_plan.flight_geography.id != old_id

    def test_marker_slot_rejected(self, empty_site: Site) -> None:
        with pytest.raises(ValidationError):
            set_polygon(empty_site, "launchPoint", TRIANGLE)


# ===========================================================================
# Collection slots
# ===========================================================================


class TestCollections:
    def test_first_muster_point_primary(self, empty_site: Site) -> None:
        site = add_muster_point(empty_site, -123.0, 49.0)
        site = add_muster_point(site, -123.1, 49.1)
        assert [m.is_primary for m in site.map_data.emergency.muster_points] == [True, False]

    def test_first_route_primary(self, empty_site: Site) -> None:
        site = add_evacuation_route(empty_site, TRIANGLE[:2])
        site = add_evacuation_route(site, TRIANGLE[1:])
        assert [r.is_primary for r in site.map_data.emergency.evacuation_routes] == [True, False]

    def test_route_needs_two_points(self, empty_site: Site) -> None:
        assert add_evacuation_route(empty_site, TRIANGLE[:1]) is empty_site

    def test_route_style(self, empty_site: Site) -> None:
        site = add_evacuation_route(empty_site, TRIANGLE[:2])
        route = site.map_data.emergency.evacuation_routes[0]
        assert route.kind == "line"
        assert route.properties.arrow_end is True
        assert route.properties.label == "Evacuation Route"

    def test_obstacle_attributes(self, empty_site: Site) -> None:
        site = add_obstacle(empty_site, -123.0, 49.0, obstacle_type="tower", height=45.0)
        obstacle = site.map_data.site_survey.obstacles[0]
        assert obstacle.obstacle_type == "tower"
        assert obstacle.height == 45.0
        assert obstacle.properties.label == "Tower/Antenna"
        assert obstacle.id.startswith("obstacle_")

    @pytest.mark.parametrize(
        ("obstacle_type", "label"),
        [("wire", "Power Lines"), ("crane", "Crane"), ("other", "Obstacle"), ("kite", "Obstacle")],
    )
    def test_obstacle_label_from_type(
        self, empty_site: Site, obstacle_type: str, label: str
    ) -> None:
        site = add_obstacle(empty_site, -123.0, 49.0, obstacle_type=obstacle_type)
        assert site.map_data.site_survey.obstacles[0].properties.label == label

    def test_obstacle_label_override(self, empty_site: Site) -> None:
        site = add_obstacle(empty_site, -123.0, 49.0, obstacle_type="tree", label="Old oak")
        assert site.map_data.site_survey.obstacles[0].properties.label == "Old oak"


# ===========================================================================
# Lookup / remove
# ===========================================================================


class TestFindAndRemove:
    def test_find_element(self, populated_site: Site) -> None:
        launch = populated_site.map_data.flight_plan.launch_point
        assert find_element(populated_site, launch.id) == ("launchPoint", launch)

    def test_find_unknown(self, populated_site: Site) -> None:
        assert find_element(populated_site, "marker_missing") is None

    def test_remove_single_slot(self, populated_site: Site) -> None:
        launch_id = populated_site.map_data.flight_plan.launch_point.id
        site = remove_element(populated_site, launch_id)
        assert site.map_data.flight_plan.launch_point is None
        assert find_element(site, launch_id) is None

    def test_remove_from_collection(self, populated_site: Site) -> None:
        obstacle_id = populated_site.map_data.site_survey.obstacles[0].id
        site = remove_element(populated_site, obstacle_id)
        assert site.map_data.site_survey.obstacles == []

    def test_removing_primary_promotes_next(self, populated_site: Site) -> None:
        primary, secondary = populated_site.map_data.emergency.muster_points
        site = remove_element(populated_site, primary.id)
        remaining = site.map_data.emergency.muster_points
        assert [m.id for m in remaining] == [secondary.id]
        assert remaining[0].is_primary is True

    def test_removing_secondary_keeps_primary(self, populated_site: Site) -> None:
        primary, secondary = populated_site.map_data.emergency.muster_points
        site = remove_element(populated_site, secondary.id)
        assert site.map_data.emergency.muster_points == [primary]

    def test_remove_unknown_unchanged(
        self, populated_site: Site, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger=EDITING_LOGGER):
            site = remove_element(populated_site, "marker_missing")
        assert site is populated_site
        assert any("not found" in r.message for r in caplog.records)


# ===========================================================================
# Update
# ===========================================================================


class TestUpdateElement:
    def test_property_merge(self, populated_site: Site) -> None:
        launch = populated_site.map_data.flight_plan.launch_point
        site = update_element(populated_site, launch.id, label="Pad A", surface="gravel")
        updated = site.map_data.flight_plan.launch_point
        assert updated.properties.label == "Pad A"
        assert updated.properties.color == launch.properties.color
        assert updated.properties.extra == {"surface": "gravel"}

    def test_attribute_replaced(self, populated_site: Site) -> None:
        obstacle = populated_site.map_data.site_survey.obstacles[0]
        site = update_element(populated_site, obstacle.id, height=60.0, lighted=True)
        updated = site.map_data.site_survey.obstacles[0]
        assert updated.height == 60.0
        assert updated.lighted is True
        assert updated.obstacle_type == "tower"

    def test_geometry_replaced(self, populated_site: Site) -> None:
        recovery = populated_site.map_data.flight_plan.recovery_point
        site = update_element(populated_site, recovery.id, geometry=create_geo_point(-123.2, 49.3))
        assert site.map_data.flight_plan.recovery_point.geometry.lng == -123.2

    def test_polygon_geometry_remeasured(self, populated_site: Site) -> None:
        flight_geography = populated_site.map_data.flight_plan.flight_geography
        larger = create_geo_polygon(
            [(-123.3, 49.2), (-123.0, 49.2), (-123.0, 49.4), (-123.3, 49.4)]
        )
        site = update_element(populated_site, flight_geography.id, geometry=larger)
        updated = site.map_data.flight_plan.flight_geography
        assert updated.properties.area == pytest.approx(calculate_polygon_area(larger))
        assert updated.properties.area > flight_geography.properties.area * 100
        assert updated.to_dict()["properties"]["area"] == updated.properties.area

    def test_explicit_area_wins(self, populated_site: Site) -> None:
        flight_geography = populated_site.map_data.flight_plan.flight_geography
        site = update_element(
            populated_site,
            flight_geography.id,
            geometry=create_geo_polygon(TRIANGLE),
            area=1.0,
        )
        assert site.map_data.flight_plan.flight_geography.properties.area == 1.0

    def test_line_geometry_remeasured(self, populated_site: Site) -> None:
        route = populated_site.map_data.emergency.evacuation_routes[0]
        rerouted = create_geo_line([(-123.1010, 49.2790), (-123.1100, 49.2700)])
        site = update_element(populated_site, route.id, geometry=rerouted)
        updated = site.map_data.emergency.evacuation_routes[0]
        assert updated.properties.distance == pytest.approx(calculate_line_length(rerouted))

    def test_updated_at_refreshed(self, populated_site: Site) -> None:
        launch = populated_site.map_data.flight_plan.launch_point
        site = update_element(populated_site, launch.id, label="Pad A")
        updated = site.map_data.flight_plan.launch_point
        assert updated.updated_at >= launch.updated_at
        assert updated.created_at == launch.created_at

    def test_collection_order_preserved(self, populated_site: Site) -> None:
        first, second = populated_site.map_data.emergency.muster_points
        site = update_element(populated_site, second.id, capacity=50)
        muster_points = site.map_data.emergency.muster_points
        assert [m.id for m in muster_points] == [first.id, second.id]
        assert muster_points[1].capacity == 50

    @pytest.mark.parametrize("field", ["id", "kind", "element_type", "created_at"])
    def test_identity_fields_rejected(self, populated_site: Site, field: str) -> None:
        launch = populated_site.map_data.flight_plan.launch_point
        with pytest.raises(ValidationError) as exc_info:
            update_element(populated_site, launch.id, **{field: "x"})
        assert exc_info.value.code == "IMMUTABLE_FIELD"

    def test_unknown_id_unchanged(self, populated_site: Site) -> None:
        assert update_element(populated_site, "marker_missing", label="x") is populated_site

    def test_input_not_modified(self, populated_site: Site) -> None:
        launch = populated_site.map_data.flight_plan.launch_point
        update_element(populated_site, launch.id, label="Pad A")
        assert populated_site.map_data.flight_plan.launch_point.properties.label == "Launch Point"


# ===========================================================================
# Layers
# ===========================================================================


class TestLayerElements:
    def test_site_survey_layer(self, populated_site: Site) -> None:
        elements = get_layer_elements(populated_site, "siteSurvey")
        assert [e.element_type for e in elements] == [
            "siteLocation",
            "operationsBoundary",
            "obstacles",
        ]

    def test_emergency_layer(self, populated_site: Site) -> None:
        elements = get_layer_elements(populated_site, "emergency")
        assert [e.element_type for e in elements] == [
            "musterPoints",
            "musterPoints",
            "evacuationRoutes",
        ]

    def test_empty_layer(self, empty_site: Site) -> None:
        assert get_layer_elements(empty_site, "flightPlan") == []

    def test_unknown_layer_raises(self, empty_site: Site) -> None:
        with pytest.raises(ValidationError) as exc_info:
            get_layer_elements(empty_site, "weather")
        assert exc_info.value.code == "UNKNOWN_LAYER"
