"""
Extraction Pipeline Orchestrator

Binned configuration:

  0. Reduce multipolygon building relations to one outer way (once)
  For every bin k of bin_count:
  1. SELECT_WAYS     - building ways with id % bin_count == k
  2. RESOLVE_NODES   - coordinates of their nodes (area filter only)
  3. COMPUTE_AREAS   - planar footprint areas (area filter only)
  4. EMIT_POSITIONS  - one CSV row per building at its first node
  5. DONE            - <output_dir>/<k>.csv closed, working set dropped

Assembled configuration:

  One area pass; the source assembles building polygons and rows go to a
  single stream.
"""

import json
import os
import time
from enum import Enum
from typing import Any, Mapping, Optional, TextIO, Tuple
from loguru import logger

from .config import ExtractionConfig, get_config, validate_config
from .geometry import compute_way_areas
from .models import BinSummary, BuildingCounters, BuildingRelation, CounterSummary, RunSummary
from .passes import emit_assembled_positions, emit_positions, reduce_relations, resolve_nodes, select_ways
from .writer import PositionWriter


class BinStage(Enum):
    SELECT_WAYS = "select_ways"
    RESOLVE_NODES = "resolve_nodes"
    COMPUTE_AREAS = "compute_areas"
    EMIT_POSITIONS = "emit_positions"
    DONE = "done"


class ExtractionPipeline:
    """
    Extract building positions from an OSM dataset in bounded memory

    Usage:
        pipeline = ExtractionPipeline()
        summary = pipeline.run_binned(OSMFileSource("planet.osm.pbf"), 16, "out", min_area=50)
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or get_config()
        validate_config(self.config)

    def run_binned(
        self,
        source: Any,
        bin_count: int,
        output_dir: str,
        min_area: Optional[float] = None
    ) -> RunSummary:
        """
        Run the binned configuration

        Args:
            source: Dataset source (OSMFileSource or MemorySource)
            bin_count: Number of bins, must be positive
            output_dir: Directory receiving one <bin>.csv per bin
            min_area: Minimum footprint in square meters, None disables the area stages

        Returns:
            RunSummary with the merged counters
        """
        if bin_count <= 0:
            raise ValueError(f"bin_count must be a positive integer, got {bin_count}")
        if min_area is not None and min_area < 0:
            raise ValueError(f"min_area must not be negative, got {min_area}")

        start = time.time()
        os.makedirs(output_dir, exist_ok=True)

        relations = reduce_relations(
            source, require_outer_role=self.config.require_outer_role, config=self.config
        )

        counters = BuildingCounters()
        bins = []
        for bin_index in range(bin_count):
            logger.info(f"Bin {bin_index + 1}/{bin_count}")
            bin_summary, bin_counters = self._process_bin(
                source, bin_index, bin_count, relations, output_dir, min_area
            )
            bins.append(bin_summary)
            counters = counters.merge(bin_counters)

        self._log_totals(counters, filtered=min_area is not None)

        return RunSummary(
            configuration="binned",
            source=str(getattr(source, "name", source)),
            bin_count=bin_count,
            min_area_sqm=min_area,
            relations_selected=len(relations),
            counters=CounterSummary.from_counters(counters, filtered=min_area is not None),
            bins=bins,
            elapsed_s=round(time.time() - start, 3)
        )

    def _process_bin(
        self,
        source: Any,
        bin_index: int,
        bin_count: int,
        relations: Mapping[int, BuildingRelation],
        output_dir: str,
        min_area: Optional[float]
    ) -> Tuple[BinSummary, BuildingCounters]:
        """Drive one bin through its stages; all working sets are local to this call"""
        file_path = os.path.join(output_dir, f"{bin_index}.csv")
        filtered = min_area is not None

        stage = BinStage.SELECT_WAYS
        logger.debug(f"Bin {bin_index}: {stage.value}")
        selection = select_ways(source, bin_index, bin_count, relations, config=self.config)

        coordinates = {}
        areas = None
        if filtered:
            stage = BinStage.RESOLVE_NODES
            logger.debug(f"Bin {bin_index}: {stage.value}")
            coordinates = resolve_nodes(source, selection.node_owners, bin_index)

            stage = BinStage.COMPUTE_AREAS
            logger.debug(f"Bin {bin_index}: {stage.value}")
            areas = compute_way_areas(selection.ways, coordinates, self.config.earth_radius_m)

        stage = BinStage.EMIT_POSITIONS
        logger.debug(f"Bin {bin_index}: {stage.value}")
        with open(file_path, "w", newline="", encoding="utf-8") as output_file:
            writer = PositionWriter(output_file, self.config.flush_every, config=self.config)
            writer.write_header()
            counters = emit_positions(
                source,
                selection.ways,
                writer,
                bin_index,
                areas=areas,
                min_area=min_area,
                pass_number=3 if filtered else 2
            )

        stage = BinStage.DONE
        logger.debug(f"Bin {bin_index}: {stage.value}, wrote {file_path}")
        counters.collisions += selection.collisions

        bin_summary = BinSummary(
            bin_index=bin_index,
            output_path=file_path,
            selected_ways=len(selection.ways),
            resolved_nodes=len(coordinates),
            buildings=counters.buildings,
            skipped=counters.skipped
        )
        return bin_summary, counters

    def run_assembled(self, source: Any, stream: TextIO, min_area: Optional[float] = None) -> RunSummary:
        """
        Run the single-pass configuration, writing rows to stream

        Holes and multiple outer rings are handled by the source's area assembly.
        """
        if min_area is not None and min_area < 0:
            raise ValueError(f"min_area must not be negative, got {min_area}")

        start = time.time()
        writer = PositionWriter(stream, self.config.flush_every, config=self.config)
        writer.write_header()
        counters = emit_assembled_positions(source, writer, min_area=min_area, config=self.config)
        stream.flush()

        self._log_totals(counters, filtered=min_area is not None)

        return RunSummary(
            configuration="assembled",
            source=str(getattr(source, "name", source)),
            min_area_sqm=min_area,
            counters=CounterSummary.from_counters(counters, filtered=min_area is not None),
            elapsed_s=round(time.time() - start, 3)
        )

    def _log_totals(self, counters: BuildingCounters, filtered: bool):
        logger.info(
            f"{counters.buildings} buildings ({counters.ways} ways, {counters.relations} relations)"
        )
        if filtered:
            percentage = counters.skipped_percentage()
            if percentage is None:
                logger.info(f"{counters.skipped} buildings skipped")
            else:
                logger.info(f"{counters.skipped} buildings skipped ({percentage:.2f}% of candidates)")
        if counters.unlocated:
            logger.warning(f"{counters.unlocated} buildings without a located first node")
        if counters.collisions:
            logger.info(f"{counters.collisions} buildings shared a first node with another building")

    def save_summary(self, summary: RunSummary, output_path: str) -> str:
        """Save run summary to JSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(summary.model_dump(), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved run summary to {output_path}")
        return output_path
