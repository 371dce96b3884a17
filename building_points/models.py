"""
Data structures for the extraction pipeline

Dataclasses for the per-pass records and counters, pydantic models for the
run summary written with --summary
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, Field


BuildingKind = Literal["way", "relation"]


# ============================================================
# Pass records
# ============================================================

@dataclass(frozen=True)
class BuildingRelation:
    """Multipolygon building reduced to a single outer way"""
    id: int
    version: int
    representative_outer_way_id: int


@dataclass(frozen=True)
class BuildingWay:
    """
    Building selected in the current bin.

    For kind="relation" the id and version belong to the relation while
    node_ids and way_id come from its representative outer way.
    """
    kind: BuildingKind
    id: int
    version: int
    representative_node_id: int
    node_ids: Tuple[int, ...]
    way_id: int


@dataclass(frozen=True)
class NodeCoordinate:
    """Resolved node location in degrees"""
    id: int
    lon: float
    lat: float


@dataclass
class BuildingCounters:
    """Counters accumulated by a stage and merged by the orchestrator"""
    buildings: int = 0
    ways: int = 0
    relations: int = 0
    skipped: int = 0
    unlocated: int = 0
    collisions: int = 0

    def merge(self, other: "BuildingCounters") -> "BuildingCounters":
        """Return a new counter set holding the sum of both"""
        return BuildingCounters(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
        })

    def skipped_percentage(self) -> Optional[float]:
        """Share of candidate buildings dropped by the area filter, None if there were none"""
        candidates = self.buildings + self.skipped
        if candidates == 0:
            return None
        return 100.0 * self.skipped / candidates


@dataclass(frozen=True)
class WaySelection:
    """Result of the way selection pass for one bin"""
    ways: Dict[int, BuildingWay]  # keyed by representative (first) node id
    node_owners: Dict[int, int]   # node id -> id of the selected way that references it
    collisions: int = 0


# ============================================================
# Run summary
# ============================================================

class CounterSummary(BaseModel):
    buildings: int
    ways: int
    relations: int
    skipped: int
    unlocated: int
    collisions: int
    skipped_percentage: Optional[float] = None

    @classmethod
    def from_counters(cls, counters: BuildingCounters, filtered: bool = True) -> "CounterSummary":
        """Percentage is only reported when an area filter was active"""
        return cls(
            buildings=counters.buildings,
            ways=counters.ways,
            relations=counters.relations,
            skipped=counters.skipped,
            unlocated=counters.unlocated,
            collisions=counters.collisions,
            skipped_percentage=counters.skipped_percentage() if filtered else None
        )


class BinSummary(BaseModel):
    bin_index: int
    output_path: str
    selected_ways: int
    resolved_nodes: int = 0
    buildings: int = 0
    skipped: int = 0


class RunSummary(BaseModel):
    configuration: Literal["binned", "assembled"]
    source: str
    bin_count: int = 1
    min_area_sqm: Optional[float] = None
    relations_selected: int = 0
    counters: CounterSummary
    bins: List[BinSummary] = Field(default_factory=list)
    elapsed_s: float = 0.0
    finished_at: str = Field(default_factory=lambda: datetime.now().isoformat())
