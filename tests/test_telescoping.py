"""Tests for telescoping time windows."""
from dataclasses import dataclass

import pytest

from region import constants
from region.telescoping import TelescopingTimes


@dataclass(frozen=True)
class Tally:
    """Minimal digest: a number of ops."""
    n: int

    def combine(self, other: 'Tally') -> 'Tally':
        return Tally(self.n + other.n)


def widths(time: int) -> list[int]:
    return [seg.num_quanta() for seg in TelescopingTimes(time).segments()]


def test_telescoping_widths():
    """Window widths follow the binary digits of time + 1."""
    assert widths(0) == []
    assert widths(1) == [1]
    assert widths(2) == [1, 1]
    assert widths(3) == [2, 1]
    assert widths(4) == [2, 1, 1]
    assert widths(5) == [2, 2, 1]
    assert widths(6) == [2, 2, 1, 1]
    assert widths(7) == [4, 2, 1]
    assert widths(15) == [8, 4, 2, 1]
    assert widths(20) == [8, 4, 4, 2, 1, 1]
    assert widths(21) == [8, 4, 4, 2, 2, 1]
    assert widths(30) == [8, 8, 4, 4, 2, 2, 1, 1]


def test_telescoping_windows_cover_history():
    """Windows are contiguous from quantum 0 up to just before time."""
    for time in [1, 2, 9, 100, 1000, 11000, 123456]:
        segs = TelescopingTimes(time).segments()
        position = 0
        for seg in segs:
            start, end = seg.quantum_bounds()
            assert start == position
            position = end + 1
        assert position == time
        # Most recent window is the narrowest
        assert segs[-1].num_quanta() == 1


def test_telescoping_window_count_is_bounded():
    """The window count stays logarithmic up to the largest time quantum."""
    segs = TelescopingTimes(constants.MAX_TIME_QUANTUM - 1).segments()
    assert len(segs) <= constants.MAX_TIME_WINDOWS
    assert len(TelescopingTimes(2**20).segments()) <= 2 * 20


def test_telescoping_time_out_of_range():
    """Time quanta must fit in 32 bits."""
    with pytest.raises(ValueError):
        TelescopingTimes(2**32)
    with pytest.raises(ValueError):
        TelescopingTimes(-1)


def test_empty_and_limit():
    """empty() has no windows; limit() keeps the oldest n."""
    assert TelescopingTimes.empty().segments() == []
    tt = TelescopingTimes(30)
    assert tt.limit(3).segments() == tt.segments()[:3]
    assert tt.limit(0).segments() == []
    assert tt.limit(100).segments() == tt.segments()


def test_telescoping_ordering():
    """Later "now" sorts greater; a limited copy sorts after the unlimited one."""
    assert TelescopingTimes(20) < TelescopingTimes(21)
    assert TelescopingTimes(30) > TelescopingTimes(20)
    assert TelescopingTimes(20) < TelescopingTimes(20).limit(5)
    assert TelescopingTimes(20).limit(3) < TelescopingTimes(20).limit(5)
    assert TelescopingTimes(20) == TelescopingTimes(20)
    assert sorted([TelescopingTimes(9), TelescopingTimes(3)]) == [TelescopingTimes(3), TelescopingTimes(9)]


def test_rectify_merges_finer_windows():
    """Finer windows are summed until they line up with the coarser side."""
    a_times, b_times = TelescopingTimes(20), TelescopingTimes(30)
    # One op per quantum, so each digest equals its window width
    a = [Tally(seg.num_quanta()) for seg in a_times.segments()]
    b = [Tally(seg.num_quanta()) for seg in b_times.segments()]

    n = TelescopingTimes.rectify((a_times, a), (b_times, b))

    assert n == 3
    assert a == [Tally(8), Tally(8), Tally(4)]
    assert b == [Tally(8), Tally(8), Tally(4)]


def test_rectify_argument_order_irrelevant():
    """Either side can be passed first."""
    a_times, b_times = TelescopingTimes(21), TelescopingTimes(20)
    a = [Tally(seg.num_quanta()) for seg in a_times.segments()]
    b = [Tally(seg.num_quanta()) for seg in b_times.segments()]

    n = TelescopingTimes.rectify((a_times, a), (b_times, b))

    assert n == 5
    assert a == b == [Tally(8), Tally(4), Tally(4), Tally(2), Tally(2)]


def test_rectify_stops_at_misaligned_window():
    """A trailing window the finer side can't fill is dropped from both."""
    a_times, b_times = TelescopingTimes(5), TelescopingTimes(7)  # [2, 2, 1] vs [4, 2, 1]
    a = [Tally(2), Tally(2), Tally(1)]
    b = [Tally(4), Tally(2), Tally(1)]

    n = TelescopingTimes.rectify((a_times, a), (b_times, b))

    assert n == 1
    assert a == [Tally(4)]
    assert b == [Tally(4)]


def test_rectify_equal_times_is_noop():
    """Identical windows stay as they are."""
    times = TelescopingTimes(13)
    a = [Tally(i) for i in range(len(times.segments()))]
    b = list(a)
    n = TelescopingTimes.rectify((times, a), (times, b))
    assert n == len(times.segments())
    assert a == b


def test_telescoping_rejects_non_integers():
    """Time and limit must be plain integers."""
    with pytest.raises(ValueError):
        TelescopingTimes(1.5)
    with pytest.raises(ValueError):
        TelescopingTimes(True)
    with pytest.raises(ValueError):
        TelescopingTimes(20, 2.0)
