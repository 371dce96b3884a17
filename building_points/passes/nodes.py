"""
Node location resolution (pass 2 of a filtered bin)
"""

from typing import Any, Dict, Mapping
from loguru import logger

from ..models import NodeCoordinate


class NodeLocationResolver:
    """Captures coordinates only for nodes referenced by the bin's selected ways"""

    def __init__(self, node_owners: Mapping[int, int]):
        self.node_owners = node_owners
        self._coordinates: Dict[int, NodeCoordinate] = {}

    def on_node(self, node: Any):
        if node.id not in self.node_owners:
            return
        location = node.location
        if not location.valid():
            return
        self._coordinates[node.id] = NodeCoordinate(id=node.id, lon=location.lon, lat=location.lat)

    def result(self) -> Dict[int, NodeCoordinate]:
        coordinates, self._coordinates = self._coordinates, {}
        return coordinates


def resolve_nodes(source: Any, node_owners: Mapping[int, int], bin_index: int) -> Dict[int, NodeCoordinate]:
    """Run the node pass for one bin and return node id -> NodeCoordinate"""
    resolver = NodeLocationResolver(node_owners)
    logger.info("\tPass 2...")
    source.apply(resolver, label=f"bin {bin_index} pass 2")
    coordinates = resolver.result()
    logger.info("\tPass 2 done")
    logger.info(f"\t{len(coordinates)} of {len(node_owners)} node locations resolved in bin {bin_index}")
    return coordinates
