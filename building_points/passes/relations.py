"""
Relation reduction (pass 0)

Reduces every multipolygon building relation to one representative outer way
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from loguru import logger

from ..config import ExtractionConfig, get_config
from ..models import BuildingRelation
from .tags import is_building


class RelationReducer:
    """
    Collects building relations keyed by their representative way id.

    Only the first way member is kept; further outer rings of the same
    relation are ignored, so buildings with several outer rings are
    represented by their first ring only.
    """

    def __init__(self, require_outer_role: Optional[bool] = None, config: Optional[ExtractionConfig] = None):
        self.config = config or get_config()
        self.require_outer_role = (
            self.config.require_outer_role if require_outer_role is None else require_outer_role
        )
        self._relations: Dict[int, BuildingRelation] = {}

    def on_relation(self, relation: Any):
        if not self.is_building_multipolygon(relation):
            return

        for member in relation.members:
            if member.type != "w":
                continue
            if self.require_outer_role and member.role != "outer":
                continue
            self._relations[member.ref] = BuildingRelation(
                id=relation.id,
                version=relation.version,
                representative_outer_way_id=member.ref
            )
            break

    def is_building_multipolygon(self, relation: Any) -> bool:
        tags = relation.tags
        # Relations without a "type" tag are not multipolygons
        if tags.get("type") != self.config.multipolygon_type:
            return False
        if not is_building(tags, self.config):
            return False
        return len(relation.members) > 0

    def result(self) -> Mapping[int, BuildingRelation]:
        """Read-only view of way id -> BuildingRelation"""
        relations, self._relations = self._relations, {}
        return MappingProxyType(relations)


def reduce_relations(
    source: Any,
    require_outer_role: Optional[bool] = None,
    config: Optional[ExtractionConfig] = None
) -> Mapping[int, BuildingRelation]:
    """Run pass 0 over source and return the relation index"""
    reducer = RelationReducer(require_outer_role=require_outer_role, config=config)
    logger.info("Pass 0...")
    source.apply(reducer, label="pass 0")
    relations = reducer.result()
    logger.info("Pass 0 done")
    logger.info(f"{len(relations)} relations selected")
    return relations
