"""
Core data models for Chess Drill.

This module defines the small value types shared by the move tree, the drill
session and the terminal front end: moves, drill configuration and the board
snapshot handed to renderers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import chess

# Drill modes
MODE_DRILL = "drill"
MODE_REVIEW = "review"
MODES = (MODE_DRILL, MODE_REVIEW)

# Status of the last user move
STATUS_NEW = "new"
STATUS_MAINLINE = "mainline"
STATUS_VARIATION = "variation"
STATUS_MISTAKE = "mistake"

# Drill outcome
RESULT_INCOMPLETE = "incomplete"
RESULT_SUCCESS = "success"
RESULT_FAILURE = "failure"

# Navigation targets
NAVIGATION = ("first", "prev", "next", "last")

PROMOTION_PIECES = ("queen", "rook", "bishop", "knight")


@dataclass(frozen=True)
class Move:
    """
    Identity of a move inside the tree.

    Two moves are the same move iff origin, destination and promotion piece
    all match. Instances are hashable and used directly as child keys.
    """

    orig: str                        # origin square, e.g. "e2"
    dest: str                        # destination square, e.g. "e4"
    promotion: Optional[str] = None  # "queen", "rook", "bishop", "knight"

    def __post_init__(self):
        """Validate square names and promotion piece."""
        for square in (self.orig, self.dest):
            if square not in chess.SQUARE_NAMES:
                raise ValueError(f"Invalid square: {square!r}")
        if self.promotion is not None and self.promotion not in PROMOTION_PIECES:
            raise ValueError(f"Invalid promotion piece: {self.promotion!r}")

    @classmethod
    def from_chess(cls, move: chess.Move) -> Move:
        """Build a Move from a python-chess move."""
        promotion = chess.piece_name(move.promotion) if move.promotion else None
        return cls(
            chess.square_name(move.from_square),
            chess.square_name(move.to_square),
            promotion,
        )

    @classmethod
    def from_uci(cls, uci: str) -> Move:
        """Build a Move from UCI notation such as ``e7e8q``."""
        return cls.from_chess(chess.Move.from_uci(uci))

    def to_chess(self) -> chess.Move:
        """Convert to a python-chess move."""
        promotion = chess.PIECE_NAMES.index(self.promotion) if self.promotion else None
        return chess.Move(
            chess.parse_square(self.orig),
            chess.parse_square(self.dest),
            promotion=promotion,
        )

    def uci(self) -> str:
        return self.to_chess().uci()

    def __str__(self) -> str:
        return f"{self.orig}-{self.dest}" + (f"={self.promotion}" if self.promotion else "")


@dataclass
class DrillConfig:
    """Configuration settings for a drill session."""

    # Move-sequence records (PGN movetext, optionally with headers)
    lines: List[str] = field(default_factory=list)
    mode: str = MODE_DRILL

    # Terminal UI settings
    response_delay: float = 0.5  # seconds before the reply is played
    flip_board: bool = False
    show_coordinates: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.mode not in MODES:
            raise ValueError(f"Unsupported mode '{self.mode}', expected one of {', '.join(MODES)}")
        if self.response_delay < 0:
            raise ValueError("Response delay cannot be negative")

    @property
    def is_review(self) -> bool:
        """True if the drill is only replayed, never played."""
        return self.mode == MODE_REVIEW

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            field.name: getattr(self, field.name)
            for field in self.__dataclass_fields__.values()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DrillConfig:
        """Create config from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class BoardState:
    """Everything a front end needs to draw the current drill position."""

    fen: str
    turn_color: str                  # "white" or "black"
    check: bool = False
    view_only: bool = False
    last_move: Optional[Move] = None
    annotation: Optional[str] = None
    destinations: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def last_move_squares(self) -> Optional[List[str]]:
        """Origin and destination of the last move, for highlighting."""
        if self.last_move is None:
            return None
        return [self.last_move.orig, self.last_move.dest]
