"""Region sets: the unit of exchange in a historical gossip round.

Each side of a round builds a RegionSetXtcs ("eXponential Time, Constant
Space") over the arcs both peers agreed on: one row per spatial segment,
one column per telescoping time window, one digest per cell. Only the
generating parameters and the digest grid go over the wire.

The two sides usually pick different "now" quanta, so before comparing
cells they are rectified onto the same time windows; diff then reports
every cell whose digests disagree.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

from .arq import ArqBoundsSet
from .coords import Region, RegionCoords
from .errors import ArqSetMismatchForDiff, GossipError
from .quantum import SpaceSegment, TimeSegment
from .telescoping import TelescopingTimes

log = logging.getLogger(__name__)

D = TypeVar('D')

# ((spatial index, temporal index), coords)
IndexedCoords = tuple[tuple[int, int], RegionCoords]


def _row(ix: int, x: SpaceSegment, time_segs: list[TimeSegment]) -> Iterator[IndexedCoords]:
    for it, t in enumerate(time_segs):
        yield (ix, it), RegionCoords(x, t)


@dataclass(frozen=True)
class RegionCoordSetXtcs:
    """Generator of the region grid: every arq segment crossed with every time window.

    Spatial indices run across all arqs in order, so row i is the i-th
    segment of the arq set.
    """
    times: TelescopingTimes
    arq_set: ArqBoundsSet

    @classmethod
    def empty(cls) -> 'RegionCoordSetXtcs':
        return cls(TelescopingTimes.empty(), ArqBoundsSet.empty())

    def shape(self) -> tuple[int, int]:
        """(rows, columns) of the grid this generates."""
        return self.arq_set.segment_count(), len(self.times.segments())

    def region_coords_nested(self) -> Iterator[Iterator[IndexedCoords]]:
        """One iterator per spatial segment, each over every time window."""
        time_segs = self.times.segments()
        for ix, x in enumerate(self.arq_set.segments()):
            yield _row(ix, x, time_segs)

    def region_coords_flat(self) -> Iterator[IndexedCoords]:
        """All coords in row-major order, tagged with their grid index."""
        for row in self.region_coords_nested():
            yield from row

    def into_region_set(self, f: Callable[[tuple[int, int], RegionCoords], D]) -> 'RegionSetXtcs[D]':
        """Compute every cell's digest with f and pack them into a region set.

        Any exception raised by f propagates immediately; no partial set is
        returned.
        """
        data = [[f(index, coords) for index, coords in row] for row in self.region_coords_nested()]
        return RegionSetXtcs.from_data(self, data)


@dataclass
class RegionSetXtcs(Generic[D]):
    """A digest for every region generated by coords.

    data[i][j] is the digest of spatial segment i during time window j.
    """
    coords: RegionCoordSetXtcs
    data: list[list[D]]
    # Flat coords as generated; filled on first use, never compared or sent
    _region_coords: Optional[list[RegionCoords]] = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def empty(cls) -> 'RegionSetXtcs[D]':
        return cls(RegionCoordSetXtcs.empty(), [])

    @classmethod
    def from_data(cls, coords: RegionCoordSetXtcs, data: list[list[D]]) -> 'RegionSetXtcs[D]':
        return cls(coords, data)

    @classmethod
    def from_store(cls, store: Any, coords: RegionCoordSetXtcs) -> 'RegionSetXtcs[D]':
        """Ask the op store for the digest of every region in the grid.

        Args:
            store: Anything with query_region_coords(RegionCoords) -> digest
            coords: Grid to compute
        """
        rows, cols = coords.shape()
        log.debug(f"RegionSetXtcs.from_store() querying {rows}x{cols} regions")
        data = [
            [store.query_region_coords(c) for _, c in row]
            for row in coords.region_coords_nested()
        ]
        return cls(coords, data)

    def count(self) -> int:
        """Number of regions (rows x columns)."""
        if not self.data:
            return 0
        return len(self.data) * len(self.data[0])

    def region_coords(self) -> list[RegionCoords]:
        """Flat coords in row-major order (cached)."""
        if self._region_coords is None:
            self._region_coords = [c for _, c in self.coords.region_coords_flat()]
        return self._region_coords

    def regions(self) -> Iterator[Region[D]]:
        """Yield every region with its digest, in row-major order."""
        for (ix, it), c in self.coords.region_coords_flat():
            yield Region(c, self.data[ix][it])

    def clone(self) -> 'RegionSetXtcs[D]':
        """Copy with its own grid rows; digests are immutable and shared."""
        return RegionSetXtcs(self.coords, [list(row) for row in self.data])

    def _swap(self, other: 'RegionSetXtcs[D]') -> None:
        self.coords, other.coords = other.coords, self.coords
        self.data, other.data = other.data, self.data
        self._region_coords, other._region_coords = other._region_coords, self._region_coords

    def rectify(self, other: 'RegionSetXtcs[D]') -> bool:
        """Reshape both sets in place onto the same time windows.

        Afterwards both have equal coords and grid shape, so cell [i][j]
        denotes the same region on each side. The set with the greater
        telescoping times defines the windows; the other side's finer
        windows are merged to match, and both are cut to the windows they
        share.

        Returns:
            True if the contents of self and other were swapped so that self
            holds the set with the lesser times

        Raises:
            ArqSetMismatchForDiff: The sets cover different arcs. Neither is modified.
        """
        if self.coords.arq_set != other.coords.arq_set:
            log.warning(
                f"rectify() arq sets differ: {len(self.coords.arq_set.arqs)} arqs vs "
                f"{len(other.coords.arq_set.arqs)} arqs"
            )
            raise ArqSetMismatchForDiff(
                f"Cannot rectify region sets over different arcs: "
                f"{self.coords.arq_set} != {other.coords.arq_set}"
            )

        swapped = self.coords.times > other.coords.times
        if swapped:
            self._swap(other)

        length = 0
        for da, db in zip(self.data, other.data):
            length = TelescopingTimes.rectify((self.coords.times, da), (other.coords.times, db))

        times = other.coords.times.limit(length)
        self.coords = RegionCoordSetXtcs(times, self.coords.arq_set)
        other.coords = RegionCoordSetXtcs(times, other.coords.arq_set)
        self._region_coords = None
        other._region_coords = None
        log.debug(f"rectify() common windows={length}, swapped={swapped}")
        return swapped

    def diff(self, other: 'RegionSetXtcs[D]') -> list[Region[D]]:
        """Regions whose digests differ between self and other.

        Both sets are rectified in place; clone them first to keep the
        originals. Each returned region carries self's digest (as passed in,
        regardless of any swap during rectify).

        Raises:
            ArqSetMismatchForDiff: The sets cover different arcs.
        """
        swapped = self.rectify(other)
        ours, theirs = (other, self) if swapped else (self, other)
        regions = [
            a for a, b in zip(ours.regions(), theirs.regions())
            if a.digest != b.digest
        ]
        log.debug(f"diff() {len(regions)} of {ours.count()} regions differ")
        return regions


class RegionSetKind(Enum):
    """Representations a RegionSet can take."""
    XTCS = 'xtcs'  # eXponential Time, Constant Space


@dataclass
class RegionSet(Generic[D]):
    """A set of regions, tagged with its representation.

    Only the XTCS representation exists; the tag leaves room for a more
    general one (e.g. a plain list of regions) without changing callers.
    """
    inner: RegionSetXtcs[D]
    kind: RegionSetKind = RegionSetKind.XTCS

    @classmethod
    def xtcs(cls, inner: RegionSetXtcs[D]) -> 'RegionSet[D]':
        return cls(inner, RegionSetKind.XTCS)

    def count(self) -> int:
        return self.inner.count()

    def region_coords(self) -> list[RegionCoords]:
        return self.inner.region_coords()

    def regions(self) -> Iterator[Region[D]]:
        return self.inner.regions()

    def diff(self, other: 'RegionSet[D]') -> list[Region[D]]:
        """Regions which differ between the two sets (see RegionSetXtcs.diff)."""
        if self.kind is RegionSetKind.XTCS and other.kind is RegionSetKind.XTCS:
            return self.inner.diff(other.inner)
        raise GossipError(f"Cannot diff region sets of kinds {self.kind} and {other.kind}")
