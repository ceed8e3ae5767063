from weighscope.core.groups import group_for_t, group_mode_series, partition
from weighscope.core.store import SampleStore


def make_store(n, kg=70.0):
    return SampleStore([(i * 100, kg) for i in range(n)])


def test_partition_covers_visible_range():
    store = make_store(25)
    groups = partition(store, 0, 25, groups=10)
    assert sum(g.count for g in groups) == 25
    assert groups[0].start_index == 0
    assert groups[-1].end_index == 24
    assert all(g.count <= 3 for g in groups)
    for prev, nxt in zip(groups, groups[1:]):
        assert nxt.start_index == prev.end_index + 1


def test_equal_groups():
    store = make_store(20)
    groups = partition(store, 0, 20, groups=10)
    assert len(groups) == 10
    assert [g.count for g in groups] == [2] * 10
    assert groups[3].start_t == 600.0
    assert groups[3].end_t == 700.0


def test_fewer_samples_than_groups():
    store = make_store(4)
    groups = partition(store, 0, 4, groups=10)
    assert len(groups) == 4
    assert all(g.count == 1 for g in groups)


def test_empty_range():
    assert partition(make_store(10), 5, 5) == []
    assert partition(SampleStore([]), 0, 0) == []


def test_indices_are_relative_to_visible_range():
    store = make_store(30)
    groups = partition(store, 10, 20, groups=5)
    assert [(g.start_index, g.end_index) for g in groups] == [(0, 1), (2, 3), (4, 5), (6, 7), (8, 9)]
    assert groups[0].start_t == 1000.0
    assert groups[-1].end_t == 1900.0


def test_group_modes():
    samples = [(i, 70.0) for i in range(5)] + [(5 + i, 80.04) for i in range(5)]
    store = SampleStore(samples)
    groups = partition(store, 0, 10, groups=2)
    assert [g.mode_kg for g in groups] == [70.0, 80.0]
    assert group_mode_series(groups) == [(2.0, 70.0), (7.0, 80.0)]


def test_group_for_t():
    store = make_store(20)
    groups = partition(store, 0, 20, groups=10)
    assert group_for_t(groups, 650) is groups[3]
    # boundary shared by nobody: between 700 and 800 lies a gap
    assert group_for_t(groups, 750) is None
    assert group_for_t(groups, 0) is groups[0]
    assert group_for_t(groups, 5000) is None
    assert group_for_t([], 10) is None
