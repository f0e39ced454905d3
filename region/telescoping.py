"""Telescoping time windows.

The history [0, time) is split into windows that halve in width as they
approach the present, so the number of windows grows with log2(time)
rather than with time:

    time    widths (oldest first)
    1       [1]
    2       [1, 1]
    3       [2, 1]
    4       [2, 1, 1]
    5       [2, 2, 1]
    7       [4, 2, 1]
    20      [8, 4, 4, 2, 1, 1]
    21      [8, 4, 4, 2, 2, 1]

The widths follow the binary digits of time + 1: below the leading bit,
each bit position contributes one window of that width, and a second one
when the bit is set.
"""
from dataclasses import dataclass, replace
from functools import total_ordering
from typing import Any, Optional

from . import constants
from .quantum import TimeSegment


@total_ordering
@dataclass(frozen=True)
class TelescopingTimes:
    """Telescoping windows covering time quanta [0, time).

    Args:
        time: The "now" quantum; windows end just before it
        max_segments: Keep only the first (oldest) max_segments windows
    """
    time: int
    max_segments: Optional[int] = None

    def __post_init__(self):
        if type(self.time) is not int:
            raise ValueError(f"Time quantum must be an integer, got {self.time!r}")
        if self.max_segments is not None and type(self.max_segments) is not int:
            raise ValueError(f"Segment limit must be an integer, got {self.max_segments!r}")
        if not 0 <= self.time <= constants.MAX_TIME_QUANTUM:
            raise ValueError(f"Time quantum {self.time} outside 32-bit range")
        if self.max_segments is not None and self.max_segments < 0:
            raise ValueError(f"Segment limit must be non-negative, got {self.max_segments}")

    @classmethod
    def empty(cls) -> 'TelescopingTimes':
        return cls(0)

    def limit(self, n: int) -> 'TelescopingTimes':
        """Same windows, truncated to the first n."""
        return replace(self, max_segments=n)

    def segments(self) -> list[TimeSegment]:
        """Window list, oldest (widest) first."""
        n = self.time + 1
        top = n.bit_length() - 1
        segs = []
        position = 0
        for power in range(top - 1, -1, -1):
            width = 2 ** power
            repeats = 2 if n & width else 1
            for _ in range(repeats):
                segs.append(TimeSegment(power, position // width))
                position += width
        if self.max_segments is not None:
            segs = segs[:self.max_segments]
        return segs

    def _sort_key(self) -> tuple[int, int, int]:
        # No limit sorts before any limit
        if self.max_segments is None:
            return (self.time, 0, 0)
        return (self.time, 1, self.max_segments)

    def __lt__(self, other: 'TelescopingTimes') -> bool:
        if not isinstance(other, TelescopingTimes):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    @staticmethod
    def rectify(a: tuple['TelescopingTimes', list[Any]], b: tuple['TelescopingTimes', list[Any]]) -> int:
        """Bring two window/digest lists onto the same windows, in place.

        The side with the lesser times has the finer recent windows; its
        adjacent digests are combined until each merged window ends exactly
        where the other side's window ends. Both lists are then cut to the
        aligned prefix.

        Args:
            a: (times, digests) for one side, one digest per window
            b: (times, digests) for the other side

        Returns:
            Number of windows both lists now share
        """
        if a[0] > b[0]:
            a, b = b, a
        (fine_times, fine), (coarse_times, coarse) = a, b
        fine_segs = fine_times.segments()[:len(fine)]
        coarse_segs = coarse_times.segments()[:len(coarse)]

        merged = []
        i = 0
        for seg in coarse_segs:
            if i >= len(fine_segs):
                break
            target_end = seg.quantum_bounds()[1]
            acc = fine[i]
            end = fine_segs[i].quantum_bounds()[1]
            i += 1
            while end < target_end and i < len(fine_segs):
                acc = acc.combine(fine[i])
                end = fine_segs[i].quantum_bounds()[1]
                i += 1
            if end != target_end:
                # The finer side stops short of (or straddles) this window
                break
            merged.append(acc)

        fine[:] = merged
        del coarse[len(merged):]
        return len(merged)
