"""
Planar area approximation for building footprints

Coordinates are projected with a sinusoidal approximation (per-vertex
longitude scaling by cos(latitude)) and measured with the shoelace formula.
"""

import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from .config import get_config
from .errors import UnresolvedNodeError
from .models import BuildingWay, NodeCoordinate


def degree_length(earth_radius_m: Optional[float] = None) -> float:
    """Length of one degree of arc in meters"""
    radius = earth_radius_m if earth_radius_m is not None else get_config().earth_radius_m
    return math.pi * radius / 180.0


def project(lon: float, lat: float, earth_radius_m: Optional[float] = None) -> Tuple[float, float]:
    """Convert a lon/lat pair in degrees to planar x/y meters"""
    length = degree_length(earth_radius_m)
    y = lat * length
    x = lon * length * math.cos(math.radians(lat))
    return (x, y)


def project_ring(
    coords: Iterable[Tuple[float, float]],
    earth_radius_m: Optional[float] = None
) -> List[Tuple[float, float]]:
    """Project a sequence of (lon, lat) pairs"""
    return [project(lon, lat, earth_radius_m) for lon, lat in coords]


def polygon_area(coords: Sequence[Tuple[float, float]]) -> float:
    """
    Area of a planar ring via the shoelace formula.

    The ring is closed implicitly by the wrap-around term, so the last vertex
    does not need to repeat the first.
    """
    if len(coords) < 3:
        return 0.0

    n = len(coords)
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += coords[i][0] * coords[j][1]
        area -= coords[j][0] * coords[i][1]

    return abs(area) / 2.0


def way_area(
    way: BuildingWay,
    coordinates: Mapping[int, NodeCoordinate],
    earth_radius_m: Optional[float] = None
) -> float:
    """
    Area of a selected way in square meters

    Raises:
        UnresolvedNodeError: If a node of the way has no resolved coordinate
    """
    ring = []
    for node_id in way.node_ids:
        coordinate = coordinates.get(node_id)
        if coordinate is None:
            raise UnresolvedNodeError(node_id, way.way_id)
        ring.append(project(coordinate.lon, coordinate.lat, earth_radius_m))
    return polygon_area(ring)


def compute_way_areas(
    ways: Mapping[int, BuildingWay],
    coordinates: Mapping[int, NodeCoordinate],
    earth_radius_m: Optional[float] = None
) -> Dict[int, float]:
    """Compute way id -> area for every selected way of a bin"""
    return {
        way.way_id: way_area(way, coordinates, earth_radius_m)
        for way in ways.values()
    }


def rings_area(
    outer: Sequence[Tuple[float, float]],
    inners: Iterable[Sequence[Tuple[float, float]]] = (),
    earth_radius_m: Optional[float] = None
) -> float:
    """
    Area of one outer ring minus its holes, from (lon, lat) rings

    Used for assembled areas, where ring topology comes from the source.
    """
    shell = project_ring(outer, earth_radius_m)
    if len(shell) < 3:
        return 0.0
    holes = [project_ring(inner, earth_radius_m) for inner in inners]
    holes = [hole for hole in holes if len(hole) >= 3]
    return Polygon(shell, holes).area
