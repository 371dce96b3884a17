"""
Dataset sources

A source performs complete, independent passes over an OSM dataset and feeds
every element to a stage handler. A handler implements any subset of:

    on_node(node)          node.id, node.location.lon/.lat/.valid()
    on_way(way)            way.id, way.version, way.tags, way.nodes[i].ref
    on_relation(relation)  relation.id, relation.version, relation.tags,
                           relation.members[i].type/.ref/.role
    on_area(area)          assembled areas, only delivered by apply_areas()

OSMFileSource reads files through pyosmium, MemorySource replays elements
held in memory (see .models).
"""

import os
from typing import Any, Callable, List, Optional

import osmium
from loguru import logger

from ..config import ExtractionConfig, get_config
from ..errors import DatasetError
from .models import OSMArea, OSMNode, OSMRelation, OSMWay


class _PassProgress:
    """Counts visited elements and logs a DEBUG line every `every` elements"""

    def __init__(self, label: str, every: int):
        self.label = label
        self.every = every
        self.count = 0

    def tick(self):
        self.count += 1
        if self.count % self.every == 0:
            logger.debug(f"{self.label}: {self.count:,} elements read")


def _bind(handler: Any, name: str) -> Optional[Callable[[Any], None]]:
    callback = getattr(handler, name, None)
    return callback if callable(callback) else None


class _ElementAdapter(osmium.SimpleHandler):
    """Routes pyosmium callbacks to a stage handler"""

    def __init__(self, handler: Any, progress: _PassProgress):
        super().__init__()
        self._on_node = _bind(handler, "on_node")
        self._on_way = _bind(handler, "on_way")
        self._on_relation = _bind(handler, "on_relation")
        self._progress = progress

    def node(self, n):
        self._progress.tick()
        if self._on_node:
            self._on_node(n)

    def way(self, w):
        self._progress.tick()
        if self._on_way:
            self._on_way(w)

    def relation(self, r):
        self._progress.tick()
        if self._on_relation:
            self._on_relation(r)


class _AreaAdapter(osmium.SimpleHandler):
    """Routes assembled areas to a stage handler"""

    def __init__(self, handler: Any, progress: _PassProgress):
        super().__init__()
        self._on_area = _bind(handler, "on_area")
        self._progress = progress

    def area(self, a):
        self._progress.tick()
        if self._on_area:
            self._on_area(a)


class OSMFileSource:
    """
    OSM file (.osm.pbf, .osm, .osm.bz2, ...) read with pyosmium

    The file is reopened for every pass, so passes never share reader state.
    """

    def __init__(self, path: str, config: Optional[ExtractionConfig] = None):
        self.path = str(path)
        self.config = config or get_config()

    @property
    def name(self) -> str:
        return self.path

    def _check(self):
        if not os.path.exists(self.path):
            raise DatasetError(f"OSM file not found: {self.path}")

    def apply(self, handler: Any, label: str = "pass") -> int:
        """
        Run one complete pass, feeding nodes, ways and relations to handler

        Returns:
            Number of elements read

        Raises:
            DatasetError: If the file is missing or cannot be decoded
        """
        self._check()
        progress = _PassProgress(label, self.config.progress_every)
        adapter = _ElementAdapter(handler, progress)
        try:
            adapter.apply_file(self.path)
        except DatasetError:
            raise
        except (RuntimeError, OSError) as e:
            raise DatasetError(f"Failed to read {self.path} during {label}: {e}") from e
        return progress.count

    def apply_areas(self, handler: Any, label: str = "area pass") -> int:
        """
        Run pyosmium's area assembly (with node locations) and feed every
        area to handler.on_area

        Returns:
            Number of areas assembled
        """
        self._check()
        progress = _PassProgress(label, self.config.progress_every)
        adapter = _AreaAdapter(handler, progress)
        try:
            adapter.apply_file(self.path, locations=True)
        except DatasetError:
            raise
        except (RuntimeError, OSError) as e:
            raise DatasetError(f"Failed to assemble areas from {self.path}: {e}") from e
        return progress.count


class MemorySource:
    """Replays in-memory elements in file order: nodes, ways, relations"""

    def __init__(
        self,
        nodes: Optional[List[OSMNode]] = None,
        ways: Optional[List[OSMWay]] = None,
        relations: Optional[List[OSMRelation]] = None,
        areas: Optional[List[OSMArea]] = None,
        name: str = "<memory>"
    ):
        self.nodes = nodes or []
        self.ways = ways or []
        self.relations = relations or []
        self.areas = areas or []
        self.name = name
        self.passes = 0

    def apply(self, handler: Any, label: str = "pass") -> int:
        self.passes += 1
        count = 0
        for attr, elements in (
            ("on_node", self.nodes),
            ("on_way", self.ways),
            ("on_relation", self.relations),
        ):
            callback = _bind(handler, attr)
            count += len(elements)
            if callback is None:
                continue
            for element in elements:
                callback(element)
        logger.debug(f"{label}: {count:,} elements replayed")
        return count

    def apply_areas(self, handler: Any, label: str = "area pass") -> int:
        self.passes += 1
        callback = _bind(handler, "on_area")
        if callback:
            for area in self.areas:
                callback(area)
        return len(self.areas)
