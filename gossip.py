"""Historical gossip round: build, exchange and compare region sets.

A round looks like:
1. Each peer builds a region set over the agreed arcs from its own store
   (local_region_set) and sends it to the other (encode_region_set).
2. On receipt, reconcile() diffs the peer's set against the local one.
3. Each mismatched region is followed up by exchanging the ops inside it.

Transport is handled elsewhere; this module only deals in bytes.
"""
import logging

from region.arq import ArqBoundsSet
from region.coords import Region
from region.errors import WireFormatError
from region.quantum import Topology
from region.region_set import RegionCoordSetXtcs, RegionSetXtcs
from region.telescoping import TelescopingTimes
from region.wire import decode_region_set, encode_region_set

log = logging.getLogger(__name__)


def round_now_quantum(topo: Topology, t_us: int) -> int:
    """Time quantum a round started at t_us treats as "now".

    Ops newer than the topology's cutoff are left to recent gossip.
    """
    return topo.time_quantum(t_us - topo.time_cutoff)


def round_coords(topo: Topology, arq_set: ArqBoundsSet, t_us: int) -> RegionCoordSetXtcs:
    """Region grid for a round started at t_us."""
    return RegionCoordSetXtcs(TelescopingTimes(round_now_quantum(topo, t_us)), arq_set)


def local_region_set(store, arq_set: ArqBoundsSet, t_us: int) -> RegionSetXtcs:
    """Region set over arq_set computed from the local op store.

    Args:
        store: OpStore (or anything with query_region_coords and topo)
        arq_set: Arcs agreed with the peer
        t_us: Round start time in microseconds
    """
    coords = round_coords(store.topo, arq_set, t_us)
    rset = RegionSetXtcs.from_store(store, coords)
    log.info(
        f"gossip.local_region_set() built {rset.count()} regions "
        f"over {len(arq_set.arqs)} arqs, now={coords.times.time}"
    )
    return rset


def outgoing_region_set(store, arq_set: ArqBoundsSet, t_us: int) -> bytes:
    """Serialized local region set, ready to send to a peer."""
    return encode_region_set(local_region_set(store, arq_set, t_us))


def reconcile(local: RegionSetXtcs, remote_blob: bytes) -> list[Region]:
    """Regions where the peer's set disagrees with ours.

    The local set is left untouched. Returned regions carry local digests.

    Raises:
        WireFormatError: remote_blob is not a valid region set
        ArqSetMismatchForDiff: The peer used different arcs
    """
    try:
        remote = decode_region_set(remote_blob)
    except WireFormatError as e:
        log.warning(f"gossip.reconcile() rejected peer region set ({len(remote_blob)}B): {e}")
        raise
    regions = local.clone().diff(remote)
    if regions:
        log.info(f"gossip.reconcile() {len(regions)} regions differ from peer")
    else:
        log.debug("gossip.reconcile() peer is congruent with local store")
    return regions
