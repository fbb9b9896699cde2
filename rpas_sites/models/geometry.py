"""GeoJSON-compatible geometry containers.

Coordinates are longitude first (``[lng, lat]`` or ``[lng, lat, alt]``),
matching the web-map interchange format stored in site documents.
Polygons carry a single outer ring; holes are not represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from rpas_sites.core.exceptions import ContractError


class LatLng(NamedTuple):
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A point with optional altitude in metres."""

    lng: float
    lat: float
    alt: float | None = None

    @property
    def coordinates(self) -> list[float]:
        if self.alt is None:
            return [self.lng, self.lat]
        return [self.lng, self.lat, self.alt]

    def to_lat_lng(self) -> LatLng:
        return LatLng(self.lat, self.lng)

    def to_dict(self) -> dict[str, object]:
        return {"type": "Point", "coordinates": self.coordinates}


@dataclass(frozen=True, slots=True)
class GeoPolygon:
    """A polygon with a single outer ring of ``(lng, lat)`` vertices.

    The ring is stored as given.  Whether or not the last vertex repeats
    the first, operations treat the ring as closed.
    """

    ring: list[tuple[float, float]] = field(default_factory=list)

    @property
    def coordinates(self) -> list[list[list[float]]]:
        return [[list(c) for c in self.ring]]

    def to_dict(self) -> dict[str, object]:
        return {"type": "Polygon", "coordinates": self.coordinates}


@dataclass(frozen=True, slots=True)
class GeoLine:
    """An ordered list of ``(lng, lat)`` vertices."""

    points: list[tuple[float, float]] = field(default_factory=list)

    @property
    def coordinates(self) -> list[list[float]]:
        return [list(c) for c in self.points]

    def to_dict(self) -> dict[str, object]:
        return {"type": "LineString", "coordinates": self.coordinates}


Geometry = GeoPoint | GeoPolygon | GeoLine


def create_geo_point(lng: float, lat: float, alt: float | None = None) -> GeoPoint:
    """Point geometry; altitude is kept only when given."""
    return GeoPoint(lng=float(lng), lat=float(lat), alt=None if alt is None else float(alt))


def create_geo_polygon(coordinates: list[tuple[float, float]] | list[list[float]]) -> GeoPolygon:
    """Polygon geometry from a flat list of ``[lng, lat]`` pairs."""
    return GeoPolygon(ring=[(float(c[0]), float(c[1])) for c in coordinates])


def create_geo_line(coordinates: list[tuple[float, float]] | list[list[float]]) -> GeoLine:
    """LineString geometry from an ordered list of ``[lng, lat]`` pairs."""
    return GeoLine(points=[(float(c[0]), float(c[1])) for c in coordinates])


def geometry_from_dict(data: dict[str, object]) -> Geometry:
    """Deserialise a GeoJSON geometry dict.

    Raises:
        ContractError: If the geometry type is not Point, Polygon or LineString.
        TypeError: If the coordinates are not lists.
    """
    geom_type = data.get("type")
    coords = data.get("coordinates", [])
    if not isinstance(coords, list):
        msg = f"coordinates must be a list, got {type(coords).__name__}"
        raise TypeError(msg)

    if geom_type == "Point":
        if len(coords) < 2:
            msg = f"Point needs at least 2 coordinates, got {len(coords)}"
            raise ContractError(msg, stage="models")
        alt = coords[2] if len(coords) > 2 else None
        return create_geo_point(coords[0], coords[1], alt)
    if geom_type == "Polygon":
        ring = coords[0] if coords else []
        return create_geo_polygon(ring)
    if geom_type == "LineString":
        return create_geo_line(coords)

    msg = f"Unsupported geometry type {geom_type!r}"
    raise ContractError(msg, stage="models")
