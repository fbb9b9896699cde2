"""Shared pytest fixtures for the RPAS site planning test suite."""

from __future__ import annotations

import pytest

from rpas_sites.models.elements import MapElement, create_map_polygon
from rpas_sites.models.site import Site, create_default_site
from rpas_sites.planning.map_editing import (
    add_evacuation_route,
    add_muster_point,
    add_obstacle,
    set_marker,
    set_polygon,
)

# ---------------------------------------------------------------------------
# Reference geometry (North Vancouver / Burnaby area, UTM zone 10N)
# ---------------------------------------------------------------------------

# ~500 m x ~500 m square, open ring
FLIGHT_SQUARE = [
    (-123.1000, 49.2800),
    (-123.0931, 49.2800),
    (-123.0931, 49.2845),
    (-123.1000, 49.2845),
]

# Operations boundary enclosing the flight square
BOUNDARY_SQUARE = [
    (-123.1050, 49.2770),
    (-123.0880, 49.2770),
    (-123.0880, 49.2875),
    (-123.1050, 49.2875),
    (-123.1050, 49.2770),
]

# Self-intersecting "bow tie"
BOWTIE = [
    (-123.1000, 49.2800),
    (-123.0931, 49.2845),
    (-123.0931, 49.2800),
    (-123.1000, 49.2845),
]


@pytest.fixture()
def flight_geography() -> MapElement:
    """Square flight geography polygon element (~0.25 km²)."""
    return create_map_polygon(FLIGHT_SQUARE, element_type="flightGeography")


@pytest.fixture()
def empty_site() -> Site:
    """A default site with no map geometry."""
    return create_default_site(name="Empty Site")


@pytest.fixture()
def populated_site() -> Site:
    """A site with every map-data slot populated except the derived polygons."""
    site = create_default_site(name="Burnaby Mountain", created_by="user_1")
    site = set_marker(site, "siteLocation", -123.0965, 49.2822, label="Site")
    site = set_polygon(site, "operationsBoundary", BOUNDARY_SQUARE)
    site = add_obstacle(site, -123.0950, 49.2830, obstacle_type="tower", height=45.0)
    site = set_marker(site, "launchPoint", -123.0990, 49.2805)
    site = set_marker(site, "recoveryPoint", -123.0940, 49.2805)
    site = set_marker(site, "pilotPosition", -123.0995, 49.2802)
    site = set_polygon(site, "flightGeography", FLIGHT_SQUARE)
    site = add_muster_point(site, -123.1010, 49.2790, capacity=20)
    site = add_muster_point(site, -123.0870, 49.2790)
    return add_evacuation_route(site, [(-123.1010, 49.2790), (-123.1040, 49.2760)])
