"""
In-memory OSM elements

Data classes mirroring the accessors pyosmium exposes on its objects, so the
passes can run unchanged over a replayed list of elements
"""

from typing import List, Dict, Optional
from dataclasses import dataclass, field


@dataclass
class Location:
    """Node location; lon/lat are None when unknown"""
    lon: Optional[float] = None
    lat: Optional[float] = None

    def valid(self) -> bool:
        return self.lon is not None and self.lat is not None


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    location: Location
    version: int = 1
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def at(cls, id: int, lon: float, lat: float, version: int = 1) -> "OSMNode":
        return cls(id=id, location=Location(lon, lat), version=version)


@dataclass
class OSMNodeRef:
    """Reference from a way or ring to a node"""
    ref: int
    lon: Optional[float] = None
    lat: Optional[float] = None


@dataclass
class OSMWay:
    """Represents an OSM way (line or polygon)"""
    id: int
    nodes: List[OSMNodeRef]
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 1

    @classmethod
    def of(cls, id: int, node_ids: List[int], tags: Optional[Dict[str, str]] = None,
           version: int = 1) -> "OSMWay":
        return cls(id=id, nodes=[OSMNodeRef(n) for n in node_ids], tags=tags or {}, version=version)


@dataclass
class OSMMember:
    """Relation member; type is 'n', 'w' or 'r' as in pyosmium"""
    type: str
    ref: int
    role: str = ""


@dataclass
class OSMRelation:
    """Represents an OSM relation"""
    id: int
    members: List[OSMMember]
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 1


@dataclass
class OSMArea:
    """
    Assembled area (closed way or multipolygon relation)

    Method names follow pyosmium's Area so handlers accept both.
    """
    orig: int
    is_way: bool
    outer: List[List[OSMNodeRef]]
    inner: Dict[int, List[List[OSMNodeRef]]] = field(default_factory=dict)  # outer index -> rings
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 1

    @property
    def id(self) -> int:
        # pyosmium area ids: 2 * way id for ways, 2 * relation id + 1 for relations
        return self.orig * 2 + (0 if self.is_way else 1)

    def from_way(self) -> bool:
        return self.is_way

    def orig_id(self) -> int:
        return self.orig

    def outer_rings(self) -> List[List[OSMNodeRef]]:
        return self.outer

    def inner_rings(self, outer_ring: List[OSMNodeRef]) -> List[List[OSMNodeRef]]:
        for index, ring in enumerate(self.outer):
            if ring is outer_ring:
                return self.inner.get(index, [])
        return []
