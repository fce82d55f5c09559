"""
Test package for Chess Drill.

This package contains unit tests for the move tree and its cursor, the
python-chess rules adapter, PGN record loading, the drill session and the
terminal front end.
"""

# Import test modules for easier discovery
from . import test_tree
from . import test_drill

__all__ = [
    "test_tree",
    "test_drill",
]
