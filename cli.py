#!/usr/bin/env python
"""
Command-line interface for the Building Points Extractor

Usage:
    extract planet.osm.pbf out/                # single pass, CSV on stdout
    extract planet.osm.pbf 16 out/             # 16 bins -> out/0.csv ... out/15.csv
    extract planet.osm.pbf 16 50 out/          # same, buildings under 50 m² dropped
"""

import os
import sys
import argparse

from loguru import logger

from building_points.config import get_config, load_env_overrides, validate_config
from building_points.errors import DatasetError, UnresolvedNodeError
from building_points.pipeline import ExtractionPipeline
from building_points.source import OSMFileSource


USAGE = "extract [options] osm_file [bin_count [min_area]] output_dir"


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extract",
        usage=USAGE,
        description="Extract one representative point per OSM building",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Single pass with assembled areas, CSV on stdout:
    extract planet.osm.pbf out/ > buildings.csv

  Binned, one CSV per bin:
    extract planet.osm.pbf 16 out/

  Binned, buildings smaller than 50 m² dropped:
    extract planet.osm.pbf 16 50 out/
        """
    )
    parser.add_argument("arguments", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--outer-only", action="store_true",
                        help="Only use relation members with role=outer as building geometry")
    parser.add_argument("--flush-every", type=int, help="Flush output every N rows")
    parser.add_argument("--min-area", type=float,
                        help="Minimum area in m² for the single pass configuration")
    parser.add_argument("--summary", action="store_true", help="Write summary.json to output_dir")
    return parser


def _parse_bin_count(value: str) -> int:
    try:
        bin_count = int(value)
    except ValueError:
        raise ValueError(f"bin_count must be a positive integer, got {value!r}") from None
    if bin_count <= 0:
        raise ValueError(f"bin_count must be a positive integer, got {bin_count}")
    return bin_count


def _parse_min_area(value) -> float:
    try:
        min_area = float(value)
    except ValueError:
        raise ValueError(f"min_area must be a number, got {value!r}") from None
    if min_area < 0:
        raise ValueError(f"min_area must not be negative, got {min_area}")
    return min_area


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_intermixed_args(argv)

    positional = args.arguments
    if len(positional) not in (2, 3, 4):
        parser.print_usage(sys.stderr)
        return 1

    setup_logging(args.verbose)

    source_path = positional[0]
    output_dir = positional[-1]
    try:
        bin_count = _parse_bin_count(positional[1]) if len(positional) >= 3 else None
        min_area = _parse_min_area(positional[2]) if len(positional) == 4 else None
        if args.min_area is not None:
            if bin_count is not None:
                raise ValueError("--min-area only applies to the single pass configuration")
            min_area = _parse_min_area(args.min_area)

        config = load_env_overrides(get_config())
        if args.outer_only:
            config.require_outer_role = True
        if args.flush_every is not None:
            config.flush_every = args.flush_every
        validate_config(config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    pipeline = ExtractionPipeline(config)
    source = OSMFileSource(source_path, config)

    try:
        if bin_count is None:
            summary = pipeline.run_assembled(source, sys.stdout, min_area=min_area)
        else:
            summary = pipeline.run_binned(source, bin_count, output_dir, min_area=min_area)
    except (DatasetError, UnresolvedNodeError, OSError) as e:
        logger.error(f"Extraction failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if args.summary:
        pipeline.save_summary(summary, os.path.join(output_dir, "summary.json"))

    return 0


if __name__ == "__main__":
    sys.exit(main())
