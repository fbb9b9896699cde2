"""RPAS site planning geospatial library.

Canonical site, mission and map element records for drone field
operations, plus the geometry that goes with them: great-circle
distance, polygon area, bounding boxes, and the SORA contingency
volume / ground risk buffer polygons derived from a flight geography.
"""

__version__ = "0.1.0"
