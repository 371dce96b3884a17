"""
Configuration settings for the Building Points Extractor
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List
import os

from dotenv import load_dotenv
from loguru import logger


@dataclass
class ExtractionConfig:
    """Extraction configuration"""
    # Mean Earth radius used by the planar area approximation (meters)
    earth_radius_m: float = 6371009.0

    # Output settings
    coordinate_precision: int = 7
    csv_header: List[str] = field(default_factory=lambda: [
        "object_type", "id", "version", "longitude", "latitude"
    ])
    flush_every: int = 1000  # Force a flush after this many emitted rows

    # Diagnostics
    progress_every: int = 10_000_000  # Elements per DEBUG progress line

    # Building selection
    building_tag: str = "building"
    excluded_tags: List[str] = field(default_factory=lambda: [
        "roof:material"
    ])
    multipolygon_type: str = "multipolygon"
    require_outer_role: bool = False  # Only accept ways with role=outer as relation geometry


# Global config instance
config = ExtractionConfig()


def get_config() -> ExtractionConfig:
    """Get global configuration"""
    return config


def load_env_overrides(config: ExtractionConfig) -> ExtractionConfig:
    """
    Apply BUILDING_POINTS_* environment variables to a config.

    A .env file in the project root or the current directory is loaded first
    without overriding variables already set.
    """
    env_paths = [
        Path(__file__).parent.parent / ".env",  # Project root
        Path.cwd() / ".env",
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path, override=False)
            logger.debug(f"Loaded .env file from {env_path}")
            break

    if "BUILDING_POINTS_FLUSH_EVERY" in os.environ:
        config.flush_every = int(os.environ["BUILDING_POINTS_FLUSH_EVERY"])

    if "BUILDING_POINTS_PROGRESS_EVERY" in os.environ:
        config.progress_every = int(os.environ["BUILDING_POINTS_PROGRESS_EVERY"])

    if "BUILDING_POINTS_OUTER_ONLY" in os.environ:
        config.require_outer_role = os.environ["BUILDING_POINTS_OUTER_ONLY"].lower() in ("1", "true", "yes")

    return config


def validate_config(config: ExtractionConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.earth_radius_m is None or config.earth_radius_m <= 0:
        errors.append(f"earth_radius_m must be positive, got {config.earth_radius_m}")

    if config.flush_every is None or config.flush_every <= 0:
        errors.append(f"flush_every must be positive, got {config.flush_every}")

    if config.progress_every is None or config.progress_every <= 0:
        errors.append(f"progress_every must be positive, got {config.progress_every}")

    if config.coordinate_precision is None or config.coordinate_precision < 0:
        errors.append(f"coordinate_precision must be non-negative, got {config.coordinate_precision}")

    if not config.building_tag:
        errors.append("building_tag is required in config but not set")

    if len(config.csv_header) != 5:
        errors.append(f"csv_header must name 5 columns, got {len(config.csv_header)}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
