"""
Dataset passes

Each pass is a stage handler fed by a dataset source, plus a function that
runs it and returns the stage's result:
- relations: multipolygon building relations -> representative way index
- ways: building ways of one bin, indexed by first node
- nodes: coordinates of the nodes referenced by the bin's ways
- positions: CSV rows at each building's first node
- assembled: single-pass rows from source-assembled areas
"""

from .relations import RelationReducer, reduce_relations
from .ways import WaySelector, in_bin, select_ways
from .nodes import NodeLocationResolver, resolve_nodes
from .positions import PositionEmitter, emit_positions
from .assembled import AssembledPositionEmitter, emit_assembled_positions

__all__ = [
    "RelationReducer",
    "reduce_relations",
    "WaySelector",
    "in_bin",
    "select_ways",
    "NodeLocationResolver",
    "resolve_nodes",
    "PositionEmitter",
    "emit_positions",
    "AssembledPositionEmitter",
    "emit_assembled_positions",
]
