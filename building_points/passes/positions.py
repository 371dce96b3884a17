"""
Building position emission (last pass of a bin)
"""

from typing import Any, Mapping, Optional
from loguru import logger

from ..models import BuildingCounters, BuildingWay
from ..writer import PositionWriter


class PositionEmitter:
    """
    Writes one row per selected building, located at its first node.

    With min_area set, buildings whose way area is below it are counted as
    skipped instead of written.
    """

    def __init__(
        self,
        ways: Mapping[int, BuildingWay],
        writer: PositionWriter,
        areas: Optional[Mapping[int, float]] = None,
        min_area: Optional[float] = None
    ):
        if min_area is not None and areas is None:
            raise ValueError("areas are required when min_area is set")
        self.ways = ways
        self.writer = writer
        self.areas = areas
        self.min_area = min_area
        self.counters = BuildingCounters()

    def on_node(self, node: Any):
        building = self.ways.get(node.id)
        if building is None:
            return

        if self.min_area is not None and self.areas[building.way_id] < self.min_area:
            self.counters.skipped += 1
            return

        location = node.location
        if not location.valid():
            logger.warning(f"Node {node.id} of {building.kind} {building.id} has no location")
            self.counters.unlocated += 1
            return

        if building.kind == "relation":
            self.counters.relations += 1
        else:
            self.counters.ways += 1
        self.counters.buildings += 1

        self.writer.write(building.kind, building.id, building.version, location.lon, location.lat)


def emit_positions(
    source: Any,
    ways: Mapping[int, BuildingWay],
    writer: PositionWriter,
    bin_index: int,
    areas: Optional[Mapping[int, float]] = None,
    min_area: Optional[float] = None,
    pass_number: int = 2
) -> BuildingCounters:
    """Run the emission pass for one bin and return its counters"""
    emitter = PositionEmitter(ways, writer, areas=areas, min_area=min_area)
    logger.info(f"\tPass {pass_number}...")
    source.apply(emitter, label=f"bin {bin_index} pass {pass_number}")
    logger.info(f"\tPass {pass_number} done")
    return emitter.counters
