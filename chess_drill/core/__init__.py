"""
Core package for Chess Drill.

This package contains the move tree and its navigation cursor, the boundary
to the python-chess rules engine, PGN record loading and the drill session
built on top of them.
"""

from .models import (
    Move,
    DrillConfig,
    BoardState
)

from .tree import (
    Tree,
    TreeIterator,
    Node,
    TreeError,
    InvalidRecord,
    InconsistentRoot,
    InvalidMove
)

from .records import (
    read_records,
    load_records
)

from .drill import DrillSession

__all__ = [
    # Data models
    "Move",
    "DrillConfig",
    "BoardState",

    # Move tree
    "Tree",
    "TreeIterator",
    "Node",
    "TreeError",
    "InvalidRecord",
    "InconsistentRoot",
    "InvalidMove",

    # Records
    "read_records",
    "load_records",

    # Drill
    "DrillSession",
]
