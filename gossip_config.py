"""Quantization settings for historical gossip.

Peers must agree on these to produce comparable region sets: the size of a
space quantum, the length of a time quantum, and where time quantum 0
starts. recent_cutoff_us keeps ops still settling out of historical rounds.
"""
from dataclasses import dataclass

from region import constants


@dataclass
class GossipConfig:
    """Topology parameters shared by every peer in a network."""
    space_quantum_power: int = constants.STANDARD_SPACE_QUANTUM_POWER  # 2^12 locations per space quantum
    time_quantum_us: int = constants.STANDARD_TIME_QUANTUM_US          # 5 minutes
    time_origin_us: int = 0                                            # Start of time quantum 0
    recent_cutoff_us: int = 0                                          # Ops newer than now - cutoff wait for a later round


_config = GossipConfig()


def set_gossip_config(config: GossipConfig) -> None:
    """Replace the quantization settings used by Topology.from_config()."""
    global _config
    _config = config


def get_gossip_config() -> GossipConfig:
    return _config


def reset_gossip_config() -> None:
    """Back to the standard topology (tests call this between cases)."""
    global _config
    _config = GossipConfig()
