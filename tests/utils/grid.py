"""Uniform grids of ops."""
from typing import Iterable

from region.arq import Arq
from region.op import Op
from region.quantum import Topology


def op_grid(topo: Topology, arq: Arq, time_quanta: Iterable[int], size: int = 10) -> list[Op]:
    """One op at the first location of every arq segment, at the start of every given time quantum."""
    time_quanta = list(time_quanta)
    ops = []
    for seg in arq.segments():
        x = seg.loc_bounds(topo)[0]
        for t in time_quanta:
            ts = topo.time_quantum_bounds(t)[0]
            ops.append(Op.fake(x, ts, size))
    return ops
