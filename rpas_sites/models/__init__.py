"""Data models.

- geometry: GeoJSON point / polygon / line containers
- elements: Map elements (markers, polygons, lines) and their domain subtypes
- mission: Missions, flight paths and waypoints
- sections: Pydantic form sections of a site (survey, flight plan, emergency, SORA)
- site: Site aggregate and default factories
- contracts: TypedDict shapes of the stored document
"""

from rpas_sites.models.elements import (
    ElementProperties,
    EvacuationRoute,
    MapElement,
    MusterPoint,
    Obstacle,
    create_evacuation_route,
    create_map_line,
    create_map_marker,
    create_map_polygon,
    create_muster_point,
    create_obstacle,
)
from rpas_sites.models.geometry import (
    GeoLine,
    GeoPoint,
    GeoPolygon,
    LatLng,
    create_geo_line,
    create_geo_point,
    create_geo_polygon,
)
from rpas_sites.models.mission import (
    FlightPath,
    Mission,
    MissionSettings,
    Waypoint,
    create_mission,
    create_waypoint,
)
from rpas_sites.models.site import (
    EmergencyLayer,
    FlightPlanLayer,
    Site,
    SiteMapData,
    SiteSurveyLayer,
    create_default_site,
    get_default_site_emergency_data,
    get_default_site_flight_plan_data,
    get_default_site_map_data,
    get_default_site_sora_data,
    get_default_site_survey_data,
)

__all__ = [
    "ElementProperties",
    "EmergencyLayer",
    "EvacuationRoute",
    "FlightPath",
    "FlightPlanLayer",
    "GeoLine",
    "GeoPoint",
    "GeoPolygon",
    "LatLng",
    "MapElement",
    "Mission",
    "MissionSettings",
    "MusterPoint",
    "Obstacle",
    "Site",
    "SiteMapData",
    "SiteSurveyLayer",
    "Waypoint",
    "create_default_site",
    "create_evacuation_route",
    "create_geo_line",
    "create_geo_point",
    "create_geo_polygon",
    "create_map_line",
    "create_map_marker",
    "create_map_polygon",
    "create_mission",
    "create_muster_point",
    "create_obstacle",
    "create_waypoint",
    "get_default_site_emergency_data",
    "get_default_site_flight_plan_data",
    "get_default_site_map_data",
    "get_default_site_sora_data",
    "get_default_site_survey_data",
]
