"""Quantization of locations and timestamps.

A Topology fixes how raw coordinates map onto discrete quanta:
- space: a location on the 32-bit ring maps to space quantum loc // quantum
- time: a timestamp (microseconds) maps to (timestamp - origin) // quantum

Segments are power-of-two runs of quanta. Space segments wrap around the
ring; time segments never do.
"""
from dataclasses import dataclass
from typing import Any

from . import constants


def to_loc(x: int) -> int:
    """Wrap any integer (negative included) onto the location ring."""
    return x % constants.LOC_SPACE


@dataclass(frozen=True)
class Dimension:
    """Quantization parameters for one axis."""
    quantum: int        # Raw units per quantum
    quantum_power: int  # log2(quantum) when quantum is a power of two, else 0
    bit_depth: int      # Number of bits needed to index every quantum

    @classmethod
    def unit_space(cls) -> 'Dimension':
        return cls(quantum=1, quantum_power=0, bit_depth=constants.LOC_BITS)

    @classmethod
    def unit_time(cls) -> 'Dimension':
        return cls(quantum=1, quantum_power=0, bit_depth=constants.TIME_BITS)

    @classmethod
    def space(cls, quantum_power: int) -> 'Dimension':
        if not 0 <= quantum_power < constants.LOC_BITS:
            raise ValueError(f"Space quantum power {quantum_power} out of range")
        return cls(
            quantum=2 ** quantum_power,
            quantum_power=quantum_power,
            bit_depth=constants.LOC_BITS - quantum_power,
        )

    @classmethod
    def time(cls, quantum_us: int) -> 'Dimension':
        if quantum_us <= 0:
            raise ValueError(f"Time quantum must be positive, got {quantum_us}")
        return cls(quantum=quantum_us, quantum_power=0, bit_depth=constants.TIME_BITS)

    @property
    def quantum_count(self) -> int:
        return 2 ** self.bit_depth


@dataclass(frozen=True)
class Topology:
    """Space and time quantization for a gossip network."""
    space: Dimension
    time: Dimension
    time_origin: int = 0  # Timestamp (us) of time quantum 0
    time_cutoff: int = 0  # Recent span (us) left out of historical rounds

    @classmethod
    def unit(cls, time_origin: int = 0) -> 'Topology':
        """One location per space quantum, one microsecond per time quantum."""
        return cls(Dimension.unit_space(), Dimension.unit_time(), time_origin, 0)

    @classmethod
    def unit_zero(cls) -> 'Topology':
        return cls.unit(0)

    @classmethod
    def standard(cls, time_origin: int = 0, time_cutoff: int = 0) -> 'Topology':
        return cls(
            Dimension.space(constants.STANDARD_SPACE_QUANTUM_POWER),
            Dimension.time(constants.STANDARD_TIME_QUANTUM_US),
            time_origin,
            time_cutoff,
        )

    @classmethod
    def standard_zero(cls) -> 'Topology':
        return cls.standard(0, 0)

    @classmethod
    def from_config(cls, config: Any = None) -> 'Topology':
        """Build a topology from a GossipConfig (the global one by default)."""
        if config is None:
            import gossip_config
            config = gossip_config.get_gossip_config()
        return cls(
            Dimension.space(config.space_quantum_power),
            Dimension.time(config.time_quantum_us),
            config.time_origin_us,
            config.recent_cutoff_us,
        )

    def space_quantum(self, loc: int) -> int:
        return to_loc(loc) // self.space.quantum

    def time_quantum(self, timestamp: int) -> int:
        """Time quantum containing timestamp; timestamps before the origin map to 0."""
        return max(0, timestamp - self.time_origin) // self.time.quantum

    def spacetime_quanta(self, loc: int, timestamp: int) -> 'SpacetimeQuanta':
        return SpacetimeQuanta(self.space_quantum(loc), self.time_quantum(timestamp))

    def space_quantum_bounds(self, q: int) -> tuple[int, int]:
        """First and last location of space quantum q (inclusive)."""
        start = to_loc(q * self.space.quantum)
        return start, to_loc(start + self.space.quantum - 1)

    def time_quantum_bounds(self, q: int) -> tuple[int, int]:
        """First and last timestamp of time quantum q (inclusive)."""
        start = self.time_origin + q * self.time.quantum
        return start, start + self.time.quantum - 1


@dataclass(frozen=True)
class SpacetimeQuanta:
    """Quantized coordinates of a single point."""
    space: int
    time: int


@dataclass(frozen=True)
class SpaceSegment:
    """2^power consecutive space quanta starting at quantum offset * 2^power, wrapping."""
    power: int
    offset: int

    def num_quanta(self) -> int:
        return 2 ** self.power

    def quantum_bounds(self, topo: Topology) -> tuple[int, int]:
        count = topo.space.quantum_count
        start = (self.offset * self.num_quanta()) % count
        return start, (start + self.num_quanta() - 1) % count

    def contains_quantum(self, topo: Topology, q: int) -> bool:
        q = q % topo.space.quantum_count
        start, end = self.quantum_bounds(topo)
        if start <= end:
            return start <= q <= end
        # Wraps past the top of the ring
        return q >= start or q <= end

    def loc_bounds(self, topo: Topology) -> tuple[int, int]:
        start, end = self.quantum_bounds(topo)
        return topo.space_quantum_bounds(start)[0], topo.space_quantum_bounds(end)[1]


@dataclass(frozen=True)
class TimeSegment:
    """2^power consecutive time quanta starting at quantum offset * 2^power."""
    power: int
    offset: int

    def num_quanta(self) -> int:
        return 2 ** self.power

    def quantum_bounds(self) -> tuple[int, int]:
        start = self.offset * self.num_quanta()
        return start, start + self.num_quanta() - 1

    def contains_quantum(self, q: int) -> bool:
        start, end = self.quantum_bounds()
        return start <= q <= end

    def timestamp_bounds(self, topo: Topology) -> tuple[int, int]:
        start, end = self.quantum_bounds()
        return topo.time_quantum_bounds(start)[0], topo.time_quantum_bounds(end)[1]
