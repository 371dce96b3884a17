"""
Bin partitioning and building way selection (pass 1)
"""

from typing import Any, Dict, Mapping, Optional
from loguru import logger

from ..config import ExtractionConfig, get_config
from ..models import BuildingRelation, BuildingWay, WaySelection
from .tags import is_building


def in_bin(way_id: int, bin_index: int, bin_count: int) -> bool:
    """True if way_id belongs to bin_index out of bin_count bins"""
    return way_id % bin_count == bin_index


class WaySelector:
    """
    Selects the building ways of one bin and records their node lists.

    Ways are indexed by their first node id. Two selected ways starting at
    the same node collide and only the later one is kept; collisions are
    counted but not resolved.
    """

    def __init__(
        self,
        bin_index: int,
        bin_count: int,
        relations: Mapping[int, BuildingRelation],
        config: Optional[ExtractionConfig] = None
    ):
        if bin_count <= 0:
            raise ValueError(f"bin_count must be positive, got {bin_count}")
        if not 0 <= bin_index < bin_count:
            raise ValueError(f"bin_index must be in [0, {bin_count}), got {bin_index}")
        self.config = config or get_config()
        self.bin_index = bin_index
        self.bin_count = bin_count
        self.relations = relations
        self._ways: Dict[int, BuildingWay] = {}
        self._node_owners: Dict[int, int] = {}
        self._collisions = 0

    def on_way(self, way: Any):
        if len(way.nodes) == 0 or not in_bin(way.id, self.bin_index, self.bin_count):
            return

        node_ids = tuple(n.ref for n in way.nodes)
        building = None

        if is_building(way.tags, self.config):
            building = BuildingWay(
                kind="way",
                id=way.id,
                version=way.version,
                representative_node_id=node_ids[0],
                node_ids=node_ids,
                way_id=way.id
            )
        else:
            relation = self.relations.get(way.id)
            if relation is not None:
                building = BuildingWay(
                    kind="relation",
                    id=relation.id,
                    version=relation.version,
                    representative_node_id=node_ids[0],
                    node_ids=node_ids,
                    way_id=way.id
                )

        if building is None:
            return

        previous = self._ways.get(building.representative_node_id)
        if previous is not None:
            self._collisions += 1
            logger.debug(
                f"{building.kind} {building.id} replaces {previous.kind} {previous.id} "
                f"at first node {building.representative_node_id}"
            )
        self._ways[building.representative_node_id] = building
        for node_id in node_ids:
            self._node_owners[node_id] = way.id

    def result(self) -> WaySelection:
        """Hand the working set over to the caller; the selector starts empty again"""
        selection = WaySelection(
            ways=self._ways,
            node_owners=self._node_owners,
            collisions=self._collisions
        )
        self._ways, self._node_owners, self._collisions = {}, {}, 0
        return selection


def select_ways(
    source: Any,
    bin_index: int,
    bin_count: int,
    relations: Mapping[int, BuildingRelation],
    config: Optional[ExtractionConfig] = None
) -> WaySelection:
    """Run pass 1 for one bin and return its way selection"""
    selector = WaySelector(bin_index, bin_count, relations, config=config)
    logger.info("\tPass 1...")
    source.apply(selector, label=f"bin {bin_index} pass 1")
    selection = selector.result()
    logger.info("\tPass 1 done")
    logger.info(f"\t{len(selection.ways)} building ways selected in bin {bin_index}")
    return selection
