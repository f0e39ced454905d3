"""Ops as seen by region gossip: a point in spacetime with a size and a hash."""
from dataclasses import dataclass

import crypto
from .data import RegionData
from .quantum import SpacetimeQuanta, Topology, to_loc


@dataclass(frozen=True)
class Op:
    """An item stored in the DHT.

    Only its coordinates and its digest contribution matter here; the
    content itself is never inspected.
    """
    loc: int
    timestamp: int  # Microseconds
    size: int
    hash: bytes

    @classmethod
    def fake(cls, loc: int, timestamp: int, size: int) -> 'Op':
        """Build an op whose hash is derived from its coordinates and size."""
        loc = to_loc(loc)
        material = crypto.canonicalize_json({'loc': loc, 'timestamp': timestamp, 'size': size})
        return cls(loc=loc, timestamp=timestamp, size=size, hash=crypto.hash(material))

    def quanta(self, topo: Topology) -> SpacetimeQuanta:
        return topo.spacetime_quanta(self.loc, self.timestamp)

    def region_data(self) -> RegionData:
        """This op's contribution to any region containing it."""
        return RegionData(hash=self.hash, size=self.size, count=1)
