"""Local metric projection helpers.

Metric work (buffering, line spacing, corridor widths) is done by
projecting WGS 84 geometry into the UTM zone of its centre, operating
in metres, and projecting back.  Degrees are never used as a distance
unit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import shapely
from pyproj import Transformer
from shapely.geometry.base import BaseGeometry

from rpas_sites.core.constants import WGS84_CRS


def get_utm_crs(lon: float, lat: float) -> str:
    """Determine the UTM CRS for a given WGS 84 coordinate.

    Returns an EPSG code like ``"EPSG:32610"`` (UTM zone 10N) or
    ``"EPSG:32710"`` (UTM zone 10S).
    """
    # UTM zone number: 1-based, 6° wide, starting at -180°
    zone_number = int((lon + 180) / 6) + 1
    zone_number = max(1, min(60, zone_number))

    if lat >= 0:
        return f"EPSG:{32600 + zone_number}"
    return f"EPSG:{32700 + zone_number}"


@dataclass(frozen=True, slots=True)
class LocalProjection:
    """Forward / inverse transformers between WGS 84 and one UTM zone."""

    crs: str
    to_utm: Transformer
    to_wgs: Transformer

    @classmethod
    def for_point(cls, lon: float, lat: float) -> LocalProjection:
        utm_crs = get_utm_crs(lon, lat)
        return cls(
            crs=utm_crs,
            to_utm=Transformer.from_crs(WGS84_CRS, utm_crs, always_xy=True),
            to_wgs=Transformer.from_crs(utm_crs, WGS84_CRS, always_xy=True),
        )

    @classmethod
    def for_coords(cls, coords: Sequence[Sequence[float]]) -> LocalProjection:
        """Projection for the UTM zone containing the bounding-box centre of ``coords``."""
        lons = [c[0] for c in coords]
        lats = [c[1] for c in coords]
        centre_lon = (min(lons) + max(lons)) / 2
        centre_lat = (min(lats) + max(lats)) / 2
        return cls.for_point(centre_lon, centre_lat)

    def to_metric(self, geom: BaseGeometry) -> BaseGeometry:
        return shapely.transform(geom, self.to_utm.transform, interleaved=False)

    def to_lon_lat(self, geom: BaseGeometry) -> BaseGeometry:
        return shapely.transform(geom, self.to_wgs.transform, interleaved=False)
