"""Rectangles of the spacetime grid."""
from dataclasses import dataclass
from typing import Generic, TypeVar

from .quantum import SpaceSegment, SpacetimeQuanta, TimeSegment, Topology

D = TypeVar('D')


@dataclass(frozen=True)
class RegionBounds:
    """Raw inclusive bounds of a region.

    x is a (first, last) location pair; first > last means the range wraps
    past the top of the ring. t is a (first, last) timestamp pair.
    """
    x: tuple[int, int]
    t: tuple[int, int]


@dataclass(frozen=True)
class RegionCoords:
    """One spatial segment crossed with one time window."""
    space: SpaceSegment
    time: TimeSegment

    def contains_quanta(self, topo: Topology, quanta: SpacetimeQuanta) -> bool:
        return self.space.contains_quantum(topo, quanta.space) and self.time.contains_quantum(quanta.time)

    def contains(self, topo: Topology, loc: int, timestamp: int) -> bool:
        """Whether a raw (location, timestamp) point falls inside this region."""
        return self.contains_quanta(topo, topo.spacetime_quanta(loc, timestamp))

    def to_bounds(self, topo: Topology) -> RegionBounds:
        return RegionBounds(self.space.loc_bounds(topo), self.time.timestamp_bounds(topo))


@dataclass(frozen=True)
class Region(Generic[D]):
    """Region coordinates paired with the digest of the ops inside."""
    coords: RegionCoords
    digest: D
