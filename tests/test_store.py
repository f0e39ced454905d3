"""Tests for the sqlite op store."""
import logging

from region.coords import RegionCoords
from region.data import RegionData
from region.op import Op
from region.quantum import SpaceSegment, TimeSegment, Topology
import store


def test_integrate_ops_skips_duplicates(make_store):
    """Re-integrating an op with the same hash is a no-op."""
    op_store = make_store(Topology.unit_zero())
    ops = [Op.fake(10, 5, 3), Op.fake(20, 6, 4)]

    assert op_store.integrate_ops(ops) == 2
    assert op_store.integrate_ops(ops) == 0
    assert op_store.integrate_op(Op.fake(10, 5, 3)) is False
    assert op_store.count() == 2


def test_query_region_coords_sums_matching_ops(make_store):
    """Only ops inside both the spatial and temporal bounds count."""
    topo = Topology.unit_zero()
    op_store = make_store(topo)
    inside = [Op.fake(0, 4, 10), Op.fake(255, 7, 20)]
    outside = [Op.fake(256, 4, 10), Op.fake(0, 8, 10)]
    op_store.integrate_ops(inside + outside)

    coords = RegionCoords(SpaceSegment(8, 0), TimeSegment(2, 1))  # locs 0..255, quanta 4..7
    data = op_store.query_region_coords(coords)

    assert data.count == 2
    assert data.size == 30
    assert data == inside[0].region_data().combine(inside[1].region_data())


def test_query_empty_region_is_zero(make_store):
    """A region with no ops has the zero digest."""
    op_store = make_store(Topology.unit_zero())
    coords = RegionCoords(SpaceSegment(8, 3), TimeSegment(0, 0))
    assert op_store.query_region_coords(coords) == RegionData.zero()


def test_query_wrapping_region(make_store):
    """Locations near the top of the ring belong to wrapped segments."""
    topo = Topology.unit_zero()
    op_store = make_store(topo)
    op_store.integrate_ops([Op.fake(-1, 0, 5), Op.fake(-256, 0, 6), Op.fake(0, 0, 7)])

    top = RegionCoords(SpaceSegment(8, 2**24 - 1), TimeSegment(0, 0))
    assert op_store.query_region_coords(top).size == 11

    bottom = RegionCoords(SpaceSegment(8, 2**24), TimeSegment(0, 0))
    assert op_store.query_region_coords(bottom).size == 7


def test_digests_of_disjoint_regions_combine(make_store):
    """digest(R1) combined with digest(R2) equals digest(R1 ∪ R2)."""
    topo = Topology.unit_zero()
    op_store = make_store(topo)
    op_store.integrate_ops([Op.fake(x, t, x + t) for x in (1, 100, 300) for t in range(8)])

    space = SpaceSegment(9, 0)
    left = op_store.query_region_coords(RegionCoords(space, TimeSegment(1, 0)))
    right = op_store.query_region_coords(RegionCoords(space, TimeSegment(1, 1)))
    union = op_store.query_region_coords(RegionCoords(space, TimeSegment(2, 0)))

    assert left.combine(right) == union
    assert right.combine(left) == union
    assert union.count == 12


def test_ops_in_region(make_store):
    """ops_in_region() lists the ops behind a region's digest, oldest first."""
    topo = Topology.unit_zero()
    op_store = make_store(topo)
    newer = Op.fake(3, 6, 1)
    older = Op.fake(5, 2, 1)
    op_store.integrate_ops([newer, older, Op.fake(3, 9, 1)])

    rows = op_store.ops_in_region(RegionCoords(SpaceSegment(4, 0), TimeSegment(3, 0)))

    assert [bytes(r['op_hash']) for r in rows] == [older.hash, newer.hash]


def test_batch_mode_silences_per_op_logging(make_store, caplog):
    """Batch mode drops per-op debug logs but keeps the summary."""
    op_store = make_store(Topology.unit_zero())
    store.set_batch_mode(True)
    with caplog.at_level(logging.DEBUG, logger='store'):
        op_store.integrate_ops([Op.fake(i, i, 1) for i in range(5)])

    messages = [r.getMessage() for r in caplog.records if r.name == 'store']
    assert not any('stored op' in m for m in messages)
    assert any('integrated 5 new ops' in m for m in messages)


def test_store_on_shared_db_fixture(db):
    """OpStore works on any database with the schema loaded."""
    op_store = store.OpStore(db, Topology.unit_zero())
    op_store.integrate_op(Op.fake(1, 1, 1))
    assert db.query_one("SELECT COUNT(*) AS n FROM ops")['n'] == 1


def test_open_database_creates_ops_table(tmp_path):
    """open_database() creates the schema in a fresh file."""
    from db import open_database
    path = str(tmp_path / "ops.db")
    db = open_database(path)
    store.OpStore(db, Topology.unit_zero()).integrate_ops([Op.fake(1, 1, 1)])
    db.close()

    reopened = open_database(path)
    assert store.OpStore(reopened, Topology.unit_zero()).count() == 1
    reopened.close()


def test_ops_before_origin_count_in_first_window(make_store):
    """An op timestamped before the origin lands in the quantum 0 region digest."""
    topo = Topology.unit(1000)
    op_store = make_store(topo)
    early = Op.fake(5, 10, 7)
    op_store.integrate_op(early)

    first = RegionCoords(SpaceSegment(8, 0), TimeSegment(0, 0))
    assert first.contains(topo, early.loc, early.timestamp)
    assert op_store.query_region_coords(first) == early.region_data()
    assert [bytes(r['op_hash']) for r in op_store.ops_in_region(first)] == [early.hash]

    later = RegionCoords(SpaceSegment(8, 0), TimeSegment(0, 1))
    assert op_store.query_region_coords(later) == RegionData.zero()
