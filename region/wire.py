"""Wire encoding for region sets.

A region set travels as its generating parameters plus the digest grid:

    {"times": {"time": 20, "limit": null},
     "arqs": [[start, power, count], ...],
     "data": [[digest, ...], ...]}

Coordinates are regenerated by the receiver, so the payload grows with the
number of regions, not with the number of ops.
"""
from typing import Any

import crypto
from .arq import Arq, ArqBoundsSet
from .data import RegionData
from .errors import WireFormatError
from .region_set import RegionCoordSetXtcs, RegionSetXtcs
from .telescoping import TelescopingTimes


def region_set_to_dict(rset: RegionSetXtcs) -> dict[str, Any]:
    times = rset.coords.times
    return {
        'times': {'time': times.time, 'limit': times.max_segments},
        'arqs': [[arq.start, arq.power, arq.count] for arq in rset.coords.arq_set.arqs],
        'data': [[d.to_dict() for d in row] for row in rset.data],
    }


def encode_region_set(rset: RegionSetXtcs) -> bytes:
    """Serialize a region set (digests must provide to_dict())."""
    return crypto.canonicalize_json(region_set_to_dict(rset))


def region_set_from_dict(obj: Any, digest_type: Any = RegionData) -> RegionSetXtcs:
    """Rebuild a region set, checking the grid matches its coordinates.

    Raises:
        WireFormatError: Missing fields, invalid values, or a grid whose shape
            doesn't match the arqs and telescoping times
    """
    try:
        times = TelescopingTimes(obj['times']['time'], obj['times']['limit'])
        arq_set = ArqBoundsSet(tuple(Arq(start, power, count) for start, power, count in obj['arqs']))
        data = [[digest_type.from_dict(d) for d in row] for row in obj['data']]
        coords = RegionCoordSetXtcs(times, arq_set)
        rows, cols = coords.shape()
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise WireFormatError(f"Malformed region set: {e}") from e

    if len(data) != rows or any(len(row) != cols for row in data):
        raise WireFormatError(
            f"Region grid shape does not match coords: expected {rows}x{cols}, "
            f"got {len(data)} rows with lengths {sorted({len(row) for row in data})}"
        )
    return RegionSetXtcs.from_data(coords, data)


def decode_region_set(blob: bytes, digest_type: Any = RegionData) -> RegionSetXtcs:
    """Deserialize a region set produced by encode_region_set()."""
    try:
        obj = crypto.parse_json(blob)
    except (UnicodeDecodeError, ValueError) as e:
        raise WireFormatError(f"Region set is not valid JSON: {e}") from e
    return region_set_from_dict(obj, digest_type)
