"""
Chess Drill - practise chess lines from a branching move tree.

This package merges annotated game lines that share a starting position into
one move tree, walks it with a rules-validated cursor, and drills the
mainline in the terminal.
"""

__version__ = "0.1.0"
__author__ = "Chess Drill Team"
__license__ = "MIT"

# Core imports
from .core.models import Move, DrillConfig, BoardState
from .core.tree import Tree, TreeIterator, InvalidRecord, InconsistentRoot, InvalidMove
from .core.drill import DrillSession
from .cli import main

__all__ = [
    "Move",
    "DrillConfig",
    "BoardState",
    "Tree",
    "TreeIterator",
    "InvalidRecord",
    "InconsistentRoot",
    "InvalidMove",
    "DrillSession",
    "main",
]
