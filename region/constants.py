"""Constants for region-based gossip.

Locations live on a 32-bit ring; time quanta are counted from the
topology's origin and must also fit in 32 bits.
"""

# Ring space
LOC_BITS = 32
LOC_SPACE = 2 ** LOC_BITS  # Number of distinct locations on the ring

# Time quanta
TIME_BITS = 32
MAX_TIME_QUANTUM = 2 ** TIME_BITS - 1
# A telescoping sequence emits at most two windows per bit below the top one
MAX_TIME_WINDOWS = 2 * (TIME_BITS - 1)

# Standard topology
STANDARD_SPACE_QUANTUM_POWER = 12  # 4096 locations per space quantum
STANDARD_TIME_QUANTUM_US = 5 * 60 * 1_000_000  # 5 minutes in microseconds

# Digest parameters
REGION_HASH_SIZE = 32  # bytes, BLAKE2b-256 op hashes
