import math
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from building_points import config as config_module
from building_points.config import ExtractionConfig
from building_points.source import MemorySource, OSMMember, OSMNode, OSMRelation, OSMWay

# One degree of arc with R = 6 371 009 m
DEGREE_M = math.pi * 6371009.0 / 180.0


def offset(meters: float) -> float:
    """Meters along a meridian (or the equator) in degrees"""
    return meters / DEGREE_M


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Every test sees default configuration, even if a test mutates it"""
    cfg = ExtractionConfig()
    monkeypatch.setattr(config_module, "config", cfg)
    return cfg


@pytest.fixture
def scenario_source() -> MemorySource:
    """
    One 10 m x 10 m building way near the equator and one multipolygon
    building relation whose outer way is a triangle with 5 m legs
    (12.5 m²), plus elements that must never be selected.
    """
    d = offset(10)
    e = offset(5)
    nodes = [
        OSMNode.at(1, 0.0, 0.0),
        OSMNode.at(2, d, 0.0),
        OSMNode.at(3, d, d),
        OSMNode.at(4, 0.0, d),
        OSMNode.at(5, 0.01, 0.01),
        OSMNode.at(6, 0.01 + e, 0.01),
        OSMNode.at(7, 0.01, 0.01 + e),
        OSMNode.at(8, 0.02, 0.02),
        OSMNode.at(9, 0.03, 0.03),
    ]
    ways = [
        OSMWay.of(10, [1, 2, 3, 4, 1], {"building": "yes"}, version=3),
        OSMWay.of(20, [5, 6, 7], {}, version=2),
        OSMWay.of(40, [8, 9], {"highway": "residential"}),
        OSMWay.of(50, [9, 8, 9], {"building": "yes", "roof:material": "tiles"}),
        OSMWay.of(60, [], {"building": "yes"}),
    ]
    relations = [
        OSMRelation(
            id=30,
            members=[OSMMember("w", 20, "outer")],
            tags={"type": "multipolygon", "building": "yes"},
            version=5
        ),
        OSMRelation(
            id=70,
            members=[OSMMember("w", 40, "outer")],
            tags={"building": "yes"}
        ),
    ]
    return MemorySource(nodes=nodes, ways=ways, relations=relations, name="scenario")


def read_rows(path: Path):
    return path.read_text(encoding="utf-8").splitlines()
