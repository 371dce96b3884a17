import pytest

import cli
from conftest import read_rows

# Berlin, 10 m x 10 m building way and a 5 m triangle relation outline
OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="tests">
  <node id="1" version="1" lat="52.5000000" lon="13.4000000"/>
  <node id="2" version="1" lat="52.5000000" lon="13.4001477"/>
  <node id="3" version="1" lat="52.5000899" lon="13.4001477"/>
  <node id="4" version="1" lat="52.5000899" lon="13.4000000"/>
  <node id="5" version="1" lat="52.6000000" lon="13.5000000"/>
  <node id="6" version="1" lat="52.6000000" lon="13.5000739"/>
  <node id="7" version="1" lat="52.6000450" lon="13.5000000"/>
  <way id="10" version="3">
    <nd ref="1"/><nd ref="2"/><nd ref="3"/><nd ref="4"/><nd ref="1"/>
    <tag k="building" v="yes"/>
  </way>
  <way id="20" version="2">
    <nd ref="5"/><nd ref="6"/><nd ref="7"/><nd ref="5"/>
  </way>
  <relation id="30" version="5">
    <member type="way" ref="20" role="outer"/>
    <tag k="type" v="multipolygon"/>
    <tag k="building" v="yes"/>
  </relation>
</osm>
"""

HEADER = "object_type,id,version,longitude,latitude"


@pytest.fixture
def osm_file(tmp_path):
    path = tmp_path / "buildings.osm"
    path.write_text(OSM_XML, encoding="utf-8")
    return path


@pytest.mark.parametrize("argv", [[], ["only.osm"], ["a.osm", "1", "2", "3", "out"]])
def test_wrong_argument_count(argv, capsys):
    assert cli.main(argv) == 1

    captured = capsys.readouterr()
    assert "usage:" in captured.err
    assert captured.out == ""


@pytest.mark.parametrize("bin_count", ["0", "-3", "two"])
def test_bin_count_rejected(bin_count, osm_file, tmp_path):
    assert cli.main([str(osm_file), bin_count, str(tmp_path / "out")]) == 1
    assert not (tmp_path / "out").exists()


def test_negative_min_area_rejected(osm_file, tmp_path):
    assert cli.main([str(osm_file), "1", "-5", str(tmp_path / "out")]) == 1


def test_missing_source_fails(tmp_path):
    assert cli.main([str(tmp_path / "missing.osm.pbf"), "2", str(tmp_path / "out")]) == 1


def test_binned_with_area_filter(osm_file, tmp_path):
    out = tmp_path / "out"

    assert cli.main([str(osm_file), "1", "50", str(out), "--summary"]) == 0

    assert read_rows(out / "0.csv") == [HEADER, "way,10,3,13.4000000,52.5000000"]
    assert (out / "summary.json").exists()


def test_binned_without_filter(osm_file, tmp_path):
    out = tmp_path / "out"

    assert cli.main([str(osm_file), "2", str(out)]) == 0

    assert read_rows(out / "0.csv") == [
        HEADER,
        "way,10,3,13.4000000,52.5000000",
        "relation,30,5,13.5000000,52.6000000",
    ]
    assert read_rows(out / "1.csv") == [HEADER]


def test_options_between_positionals(osm_file, tmp_path):
    out = tmp_path / "out"

    assert cli.main([str(osm_file), "--outer-only", "1", str(out)]) == 0

    assert read_rows(out / "0.csv")[0] == HEADER


def test_single_pass_writes_to_stdout(osm_file, tmp_path, capsys):
    assert cli.main([str(osm_file), str(tmp_path)]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == HEADER
    identities = sorted(tuple(line.split(",")[:3]) for line in lines[1:])
    assert identities == [("relation", "30", "5"), ("way", "10", "3")]


def test_single_pass_min_area(osm_file, tmp_path, capsys):
    assert cli.main([str(osm_file), str(tmp_path), "--min-area", "50"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert [line.split(",")[0] for line in lines[1:]] == ["way"]


def test_min_area_option_rejected_for_bins(osm_file, tmp_path):
    assert cli.main([str(osm_file), "1", str(tmp_path), "--min-area", "50"]) == 1
