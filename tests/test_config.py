import pytest

from building_points.config import ExtractionConfig, get_config, load_env_overrides, validate_config
from building_points.models import BuildingCounters


def test_defaults_are_valid():
    config = get_config()

    validate_config(config)
    assert config.earth_radius_m == 6371009.0
    assert config.flush_every == 1000
    assert config.require_outer_role is False


def test_validation_lists_every_problem():
    config = ExtractionConfig(flush_every=0, earth_radius_m=-1, building_tag="")

    with pytest.raises(ValueError) as excinfo:
        validate_config(config)

    message = str(excinfo.value)
    assert "flush_every" in message
    assert "earth_radius_m" in message
    assert "building_tag" in message


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BUILDING_POINTS_FLUSH_EVERY", "25")
    monkeypatch.setenv("BUILDING_POINTS_OUTER_ONLY", "true")

    config = load_env_overrides(ExtractionConfig())

    assert config.flush_every == 25
    assert config.require_outer_role is True


def test_counters_merge_and_percentage():
    total = BuildingCounters(buildings=3, ways=2, relations=1).merge(
        BuildingCounters(buildings=1, ways=1, skipped=4, collisions=2)
    )

    assert (total.buildings, total.ways, total.relations, total.skipped, total.collisions) == (4, 3, 1, 4, 2)
    assert total.skipped_percentage() == pytest.approx(50.0)
    assert BuildingCounters().skipped_percentage() is None
