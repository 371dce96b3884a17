import io

import pytest

from building_points.models import BuildingWay
from building_points.passes import NodeLocationResolver, PositionEmitter, resolve_nodes
from building_points.source import Location, MemorySource, OSMNode
from building_points.writer import PositionWriter


def _building(kind, id, version, first_node, way_id):
    return BuildingWay(
        kind=kind, id=id, version=version, representative_node_id=first_node,
        node_ids=(first_node, first_node + 1, first_node + 2), way_id=way_id
    )


class _CountingStream(io.StringIO):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


def test_resolver_only_keeps_referenced_nodes():
    source = MemorySource(nodes=[
        OSMNode.at(1, 1.0, 2.0),
        OSMNode.at(2, 3.0, 4.0),
        OSMNode(id=3, location=Location()),
        OSMNode.at(4, 5.0, 6.0),
    ])

    coordinates = resolve_nodes(source, {1: 10, 3: 10, 4: 11}, bin_index=0)

    assert set(coordinates) == {1, 4}
    assert (coordinates[4].lon, coordinates[4].lat) == (5.0, 6.0)


def test_resolver_hands_over_its_working_set():
    resolver = NodeLocationResolver({1: 10})
    resolver.on_node(OSMNode.at(1, 1.0, 2.0))

    assert len(resolver.result()) == 1
    assert resolver.result() == {}


def test_row_format():
    stream = io.StringIO()
    writer = PositionWriter(stream)
    writer.write_header()
    writer.write("way", 42, 7, 13.4, -52.123456789)

    assert stream.getvalue() == (
        "object_type,id,version,longitude,latitude\n"
        "way,42,7,13.4000000,-52.1234568\n"
    )


def test_writer_flushes_periodically():
    stream = _CountingStream()
    writer = PositionWriter(stream, flush_every=2)
    for i in range(5):
        writer.write("way", i, 1, 0.0, 0.0)

    assert stream.flushes == 2


def test_emits_unconditionally_without_threshold():
    stream = io.StringIO()
    ways = {1: _building("way", 10, 3, 1, 10), 5: _building("relation", 30, 5, 5, 20)}
    emitter = PositionEmitter(ways, PositionWriter(stream))

    for node in (OSMNode.at(1, 1.5, 2.5), OSMNode.at(2, 0.0, 0.0), OSMNode.at(5, 3.5, 4.5)):
        emitter.on_node(node)

    assert stream.getvalue().splitlines() == [
        "way,10,3,1.5000000,2.5000000",
        "relation,30,5,3.5000000,4.5000000",
    ]
    counters = emitter.counters
    assert (counters.buildings, counters.ways, counters.relations, counters.skipped) == (2, 1, 1, 0)


@pytest.mark.parametrize("area,emitted", [(49.99, False), (50.0, True), (120.0, True)])
def test_threshold_filtering(area, emitted):
    stream = io.StringIO()
    ways = {1: _building("way", 10, 1, 1, 10)}
    emitter = PositionEmitter(ways, PositionWriter(stream), areas={10: area}, min_area=50.0)

    emitter.on_node(OSMNode.at(1, 0.0, 0.0))

    assert bool(stream.getvalue()) is emitted
    assert emitter.counters.buildings == (1 if emitted else 0)
    assert emitter.counters.skipped == (0 if emitted else 1)


def test_relation_rows_use_relation_identity():
    stream = io.StringIO()
    ways = {5: _building("relation", 30, 5, 5, 20)}
    emitter = PositionEmitter(ways, PositionWriter(stream), areas={20: 500.0}, min_area=10.0)

    emitter.on_node(OSMNode.at(5, 0.0, 0.0))

    kind, id, version = stream.getvalue().split(",")[:3]
    assert (kind, id, version) == ("relation", "30", "5")


def test_unlocated_first_node_is_counted():
    stream = io.StringIO()
    emitter = PositionEmitter({1: _building("way", 10, 1, 1, 10)}, PositionWriter(stream))

    emitter.on_node(OSMNode(id=1, location=Location()))

    assert stream.getvalue() == ""
    assert emitter.counters.unlocated == 1
    assert emitter.counters.buildings == 0


def test_threshold_requires_areas():
    with pytest.raises(ValueError):
        PositionEmitter({}, PositionWriter(io.StringIO()), min_area=10.0)
