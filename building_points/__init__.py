"""
Building Points Extractor

Representative point per OpenStreetMap building, extracted in bounded memory
by splitting building ways into bins and making several passes per bin.
"""

from .config import ExtractionConfig, get_config, validate_config
from .errors import DatasetError, UnresolvedNodeError
from .models import BuildingCounters, BuildingRelation, BuildingWay, NodeCoordinate, RunSummary
from .pipeline import BinStage, ExtractionPipeline
from .source import MemorySource, OSMFileSource

__version__ = "1.0.0"

__all__ = [
    "ExtractionConfig",
    "get_config",
    "validate_config",
    "DatasetError",
    "UnresolvedNodeError",
    "BuildingCounters",
    "BuildingRelation",
    "BuildingWay",
    "NodeCoordinate",
    "RunSummary",
    "BinStage",
    "ExtractionPipeline",
    "MemorySource",
    "OSMFileSource",
]
