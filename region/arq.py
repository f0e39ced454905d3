"""Quantized arcs of the location ring.

An Arq covers count chunks of 2^power space quanta, starting at space
quantum `start` and wrapping around the ring. Each chunk is one spatial
segment of the region grid.
"""
from dataclasses import dataclass
from typing import Iterator

from . import constants
from .quantum import SpaceSegment, Topology, to_loc


@dataclass(frozen=True)
class Arq:
    """A run of equal power-of-two segments over the ring.

    Args:
        start: First covered space quantum, aligned to 2^power
        power: log2 of the number of space quanta per segment
        count: Number of segments (0 covers nothing)
    """
    start: int
    power: int
    count: int

    def __post_init__(self):
        for name in ("start", "power", "count"):
            value = getattr(self, name)
            if type(value) is not int:
                raise ValueError(f"Arq {name} must be an integer, got {value!r}")
        if self.power > constants.LOC_BITS:
            raise ValueError(f"Arq power {self.power} exceeds the ring width of {constants.LOC_BITS} bits")
        if self.power < 0 or self.count < 0:
            raise ValueError(f"Arq power and count must be non-negative, got power={self.power}, count={self.count}")
        if not 0 <= self.start < constants.LOC_SPACE:
            raise ValueError(f"Arq start must be a space quantum, got {self.start}")
        if self.start % (2 ** self.power) != 0:
            raise ValueError(f"Arq start {self.start} is not aligned to 2^{self.power}")

    @classmethod
    def from_loc(cls, topo: Topology, loc: int, power: int, count: int) -> 'Arq':
        """Quantize a location-based arc, rounding its start down to a chunk boundary."""
        q = topo.space_quantum(loc)
        chunk = 2 ** power
        return cls(start=(q // chunk) * chunk, power=power, count=count)

    def chunk_size(self) -> int:
        """Space quanta per segment."""
        return 2 ** self.power

    def segments(self) -> Iterator[SpaceSegment]:
        """Yield the count contiguous segments, in ring order from start."""
        first = self.start // self.chunk_size()
        for i in range(self.count):
            yield SpaceSegment(self.power, first + i)

    def absolute_length(self, topo: Topology) -> int:
        """Number of locations covered."""
        return self.count * self.chunk_size() * topo.space.quantum

    def to_edge_locs(self, topo: Topology) -> tuple[int, int]:
        """First and last covered location.

        For an empty arq the last location is the one just before start.
        """
        first = topo.space_quantum_bounds(self.start)[0]
        return first, to_loc(first + self.absolute_length(topo) - 1)


@dataclass(frozen=True)
class ArqBoundsSet:
    """Ordered arcs covered by one side of a reconciliation."""
    arqs: tuple[Arq, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'arqs', tuple(self.arqs))

    @classmethod
    def empty(cls) -> 'ArqBoundsSet':
        return cls(())

    @classmethod
    def single(cls, arq: Arq) -> 'ArqBoundsSet':
        return cls((arq,))

    def segment_count(self) -> int:
        """Total spatial segments across all arqs."""
        return sum(arq.count for arq in self.arqs)

    def segments(self) -> Iterator[SpaceSegment]:
        for arq in self.arqs:
            yield from arq.segments()
