"""
Single-pass emission from assembled areas

The source assembles closed ways and multipolygon relations into areas,
including their holes, so no binning or relation reduction is needed.
"""

from typing import Any, Optional
from loguru import logger

from ..config import ExtractionConfig, get_config
from ..geometry import rings_area
from ..models import BuildingCounters
from ..writer import PositionWriter
from .tags import is_building


class AssembledPositionEmitter:
    """Writes one row per building area, located at the first node of its first outer ring"""

    def __init__(
        self,
        writer: PositionWriter,
        min_area: Optional[float] = None,
        config: Optional[ExtractionConfig] = None
    ):
        self.config = config or get_config()
        self.writer = writer
        self.min_area = min_area
        self.counters = BuildingCounters()

    def area_sqm(self, area: Any) -> float:
        total = 0.0
        for outer in area.outer_rings():
            inners = [[(n.lon, n.lat) for n in inner] for inner in area.inner_rings(outer)]
            total += rings_area([(n.lon, n.lat) for n in outer], inners, self.config.earth_radius_m)
        return total

    def on_area(self, area: Any):
        if not is_building(area.tags, self.config):
            return

        first_node = None
        for outer in area.outer_rings():
            for node in outer:
                first_node = node
                break
            break
        if first_node is None:
            logger.debug(f"Area {area.id} has no outer ring")
            return

        if self.min_area is not None and self.area_sqm(area) < self.min_area:
            self.counters.skipped += 1
            return

        kind = "way" if area.from_way() else "relation"
        if kind == "relation":
            self.counters.relations += 1
        else:
            self.counters.ways += 1
        self.counters.buildings += 1

        self.writer.write(kind, area.orig_id(), area.version, first_node.lon, first_node.lat)


def emit_assembled_positions(
    source: Any,
    writer: PositionWriter,
    min_area: Optional[float] = None,
    config: Optional[ExtractionConfig] = None
) -> BuildingCounters:
    """Run the area pass and return its counters"""
    emitter = AssembledPositionEmitter(writer, min_area=min_area, config=config)
    logger.info("Area pass...")
    areas = source.apply_areas(emitter, label="area pass")
    logger.info("Area pass done")
    logger.info(f"{areas} areas assembled")
    return emitter.counters
