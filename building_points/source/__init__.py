"""
Dataset sources

Sequential, replayable passes over OSM data:
- OSMFileSource: pyosmium-backed file reader
- MemorySource: in-memory replay with the same handler interface
- Models: in-memory element types mirroring pyosmium's accessors
"""

from .models import Location, OSMArea, OSMMember, OSMNode, OSMNodeRef, OSMRelation, OSMWay
from .reader import MemorySource, OSMFileSource

__all__ = [
    "Location",
    "OSMArea",
    "OSMMember",
    "OSMNode",
    "OSMNodeRef",
    "OSMRelation",
    "OSMWay",
    "MemorySource",
    "OSMFileSource",
]
