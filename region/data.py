"""Region digests.

A digest summarizes every op inside a region. Any digest type works as
long as it can be compared for equality and combined: combining the
digests of two disjoint op sets must give the digest of their union.
"""
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import crypto
from . import constants

D = TypeVar('D', bound='Digest')


class Digest(Protocol):
    """Equality plus a commutative, associative combine()."""

    def __eq__(self, other: object) -> bool:
        ...

    def combine(self: D, other: D) -> D:
        ...


@dataclass(frozen=True)
class RegionData:
    """Rollup of the ops in a region: XOR of op hashes, total size, op count."""
    hash: bytes
    size: int
    count: int

    @classmethod
    def zero(cls) -> 'RegionData':
        """Digest of an empty region."""
        return cls(crypto.zero_hash(constants.REGION_HASH_SIZE), 0, 0)

    def combine(self, other: 'RegionData') -> 'RegionData':
        return RegionData(
            hash=crypto.xor(self.hash, other.hash),
            size=self.size + other.size,
            count=self.count + other.count,
        )

    def __add__(self, other: 'RegionData') -> 'RegionData':
        return self.combine(other)

    def to_dict(self) -> dict[str, Any]:
        return {'hash': crypto.b64encode(self.hash), 'size': self.size, 'count': self.count}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> 'RegionData':
        h = crypto.b64decode(d['hash'])
        if len(h) != constants.REGION_HASH_SIZE:
            raise ValueError(f"Region hash must be {constants.REGION_HASH_SIZE} bytes, got {len(h)}")
        size, count = d['size'], d['count']
        if type(size) is not int or type(count) is not int or size < 0 or count < 0:
            raise ValueError(f"Region size and count must be non-negative integers, got {size!r}, {count!r}")
        return cls(hash=h, size=size, count=count)
