"""Test utilities for region gossip tests."""
from .grid import op_grid

__all__ = ['op_grid']
