"""
UI package for Chess Drill.

This package contains the Rich terminal rendering of drill positions and
move trees.
"""

from .board import (
    ChessBoardRenderer,
    PieceStyle,
    BoardColors,
    render_variations
)

__all__ = [
    "ChessBoardRenderer",
    "PieceStyle",
    "BoardColors",
    "render_variations",
]
