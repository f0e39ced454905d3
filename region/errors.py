"""Errors raised during region-set reconciliation."""


class GossipError(Exception):
    """Base class for reconciliation failures."""
    pass


class ArqSetMismatchForDiff(GossipError):
    """Raised when two region sets cover different arcs and can't be diffed."""
    pass


class WireFormatError(GossipError):
    """Raised when a serialized region set is malformed."""
    pass
