"""Pure geometric computations over site map data.

- projection: WGS 84 to local UTM transformers for metric work
- measurements: distance, polygon area, centre, flight area measurements
- bounds: element / site / project bounding boxes
- buffers: buffer polygons and SORA volume generation
"""

from rpas_sites.spatial.bounds import get_element_bounds, get_project_bounds, get_site_bounds
from rpas_sites.spatial.buffers import (
    SoraVolumes,
    generate_buffer_polygon,
    generate_contingency_volume,
    generate_ground_risk_buffer,
    generate_sora_volumes,
)
from rpas_sites.spatial.measurements import (
    FlightAreaMeasurements,
    calculate_distance,
    calculate_flight_area_measurements,
    calculate_geodesic_area,
    calculate_line_length,
    calculate_polygon_area,
    distance_between,
    get_polygon_center,
    polygon_extent_km,
)

__all__ = [
    "FlightAreaMeasurements",
    "SoraVolumes",
    "calculate_distance",
    "calculate_flight_area_measurements",
    "calculate_geodesic_area",
    "calculate_line_length",
    "calculate_polygon_area",
    "distance_between",
    "generate_buffer_polygon",
    "generate_contingency_volume",
    "generate_ground_risk_buffer",
    "generate_sora_volumes",
    "get_element_bounds",
    "get_polygon_center",
    "get_project_bounds",
    "get_site_bounds",
    "polygon_extent_km",
]
