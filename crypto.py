"""Hashing and encoding helpers for ops and region digests."""
from typing import Any
import base64
import json

import nacl.encoding
import nacl.hash

# ===== Constants =====

OP_HASH_SIZE = 32  # bytes (256 bits), width of op hashes and region hash rollups

# ===== Hashing =====

def hash(data: bytes, size: int = OP_HASH_SIZE) -> bytes:
    """BLAKE2b hash. Default 32 bytes (256 bits) for op hashes."""
    return nacl.hash.blake2b(data, digest_size=size, encoder=nacl.encoding.RawEncoder)


def xor(a: bytes, b: bytes) -> bytes:
    """XOR two equal-length hashes.

    XOR is commutative, associative and self-inverse, so a rollup of op
    hashes doesn't depend on the order ops were added in.
    """
    if len(a) != len(b):
        raise ValueError(f"Cannot XOR hashes of different lengths ({len(a)} vs {len(b)})")
    return (int.from_bytes(a, 'big') ^ int.from_bytes(b, 'big')).to_bytes(len(a), 'big')


def zero_hash(size: int = OP_HASH_SIZE) -> bytes:
    """Identity for xor()."""
    return bytes(size)

# ===== Encoding =====

def b64encode(data: bytes) -> str:
    """Encode bytes to base64 ASCII string."""
    return base64.b64encode(data).decode('ascii')


def b64decode(data: str) -> bytes:
    """Decode base64 ASCII string to bytes."""
    return base64.b64decode(data, validate=True)


def canonicalize_json(obj: Any) -> bytes:
    """Canonicalize a JSON value to bytes so equal values encode identically."""
    return json.dumps(obj, sort_keys=True, separators=(',', ':')).encode('utf-8')


def parse_json(data: bytes) -> Any:
    """Parse JSON from bytes."""
    return json.loads(data.decode('utf-8'))
