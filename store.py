"""Op store backed by sqlite.

Answers the one question region gossip asks of storage: what is the
combined digest of all ops whose location and timestamp fall inside a
region?
"""
from typing import Any, Iterable
import logging

from db import Database
from region.coords import RegionCoords
from region.data import RegionData
from region.op import Op
from region.quantum import Topology

log = logging.getLogger(__name__)

# Batch mode flag for reducing logging during bulk operations
_batch_mode = False


def set_batch_mode(enabled: bool) -> None:
    """Silence per-op logging while integrating large batches."""
    global _batch_mode
    _batch_mode = enabled


class OpStore:
    """Ops held locally, queryable by region."""

    def __init__(self, db: Database, topo: Topology):
        self.db = db
        self.topo = topo

    def integrate_op(self, op: Op) -> bool:
        """Store an op. Returns False if an op with the same hash is already stored."""
        existing = self.db.query_one("SELECT 1 FROM ops WHERE op_hash = ?", (op.hash,))
        if existing:
            if not _batch_mode:
                log.debug(f"store.integrate_op() duplicate op skipped: loc={op.loc}, timestamp={op.timestamp}")
            return False
        self.db.execute(
            "INSERT INTO ops (op_hash, loc, timestamp, size) VALUES (?, ?, ?, ?)",
            (op.hash, op.loc, op.timestamp, op.size)
        )
        if not _batch_mode:
            log.debug(f"store.integrate_op() stored op: loc={op.loc}, timestamp={op.timestamp}, size={op.size}")
        return True

    def integrate_ops(self, ops: Iterable[Op]) -> int:
        """Store many ops in one transaction. Returns how many were new."""
        added = 0
        for op in ops:
            if self.integrate_op(op):
                added += 1
        self.db.commit()
        log.info(f"store.integrate_ops() integrated {added} new ops")
        return added

    def count(self) -> int:
        row = self.db.query_one("SELECT COUNT(*) AS n FROM ops")
        return row['n'] if row else 0

    def _region_filter(self, coords: RegionCoords) -> tuple[str, tuple[int, ...]]:
        """WHERE clause and params selecting the ops inside a region."""
        bounds = coords.to_bounds(self.topo)
        x0, x1 = bounds.x
        t0, t1 = bounds.t
        if x0 <= x1:
            loc_clause = "loc BETWEEN ? AND ?"
        else:
            # Location range wraps past the top of the ring
            loc_clause = "(loc >= ? OR loc <= ?)"
        if coords.time.quantum_bounds()[0] == 0:
            # Timestamps before the origin quantize to time quantum 0
            return f"{loc_clause} AND timestamp <= ?", (x0, x1, t1)
        return f"{loc_clause} AND timestamp BETWEEN ? AND ?", (x0, x1, t0, t1)

    def query_region_coords(self, coords: RegionCoords) -> RegionData:
        """Combined digest of every op inside the region."""
        where, params = self._region_filter(coords)
        rows = self.db.query(f"SELECT op_hash, size FROM ops WHERE {where}", params)
        data = RegionData.zero()
        for row in rows:
            data = data.combine(RegionData(hash=bytes(row['op_hash']), size=row['size'], count=1))
        return data

    def ops_in_region(self, coords: RegionCoords) -> list[dict[str, Any]]:
        """Ops inside a region, oldest first, for exchanging a mismatched region."""
        where, params = self._region_filter(coords)
        return self.db.query(
            f"SELECT op_hash, loc, timestamp, size FROM ops WHERE {where} ORDER BY timestamp, loc",
            params
        )
