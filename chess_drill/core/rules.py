"""
Rules engine boundary for Chess Drill.

Everything that needs to know the laws of chess goes through python-chess.
This module wraps the few pieces of it the move tree relies on: reading a
game record, recovering the record's starting position, and a replay board
that can apply and undo tree moves while answering position queries.
"""

from __future__ import annotations

import io
import logging
from typing import Dict, List, Optional, Tuple

import chess
import chess.pgn as chess_pgn

from .models import Move

logger = logging.getLogger(__name__)


class RecordParseError(ValueError):
    """Raised when a game record cannot be read by the rules engine."""
    pass


def parse_record(text: str) -> chess_pgn.Game:
    """
    Parse a single move-sequence record.

    Args:
        text: PGN movetext, optionally preceded by headers (including a
            ``SetUp``/``FEN`` pair for non-standard starting positions)

    Returns:
        The parsed game

    Raises:
        RecordParseError: If no game is found or python-chess reported errors
            while reading it (illegal or ambiguous moves, bad FEN header)
    """
    game = chess_pgn.read_game(io.StringIO(text))
    if game is None:
        raise RecordParseError("No game found in record")
    if game.errors:
        raise RecordParseError(f"Invalid record: {game.errors[0]}")
    return game


def record_moves(game: chess_pgn.Game) -> Tuple[chess.Board, List[Tuple[chess.Move, Optional[str]]]]:
    """
    Split a parsed game into its starting position and its mainline.

    The starting position is recovered by replaying the record to its end and
    taking every move back again.

    Returns:
        A tuple of (starting board, [(move, comment or None), ...])
    """
    board = game.end().board()
    while board.move_stack:
        board.pop()

    moves = []
    for node in game.mainline():
        comment = node.comment.strip() if node.comment else ""
        moves.append((node.move, comment or None))
    return board, moves


class ReplayBoard:
    """
    A rules-validated board that replays tree moves.

    Owned by a single tree iterator; every push is checked for legality by
    python-chess so the position can never drift from the recorded line.
    """

    def __init__(self, fen: str = chess.STARTING_FEN):
        self._board = chess.Board(fen)

    def push(self, move: Move) -> None:
        """Apply a move, raising ``chess.IllegalMoveError`` if it is illegal."""
        chess_move = move.to_chess()
        if not self._board.is_legal(chess_move):
            raise chess.IllegalMoveError(f"illegal move {move.uci()} in {self._board.fen()}")
        self._board.push(chess_move)

    def pop(self) -> Optional[Move]:
        """Undo the last move; returns it, or None if nothing was played."""
        if not self._board.move_stack:
            return None
        return Move.from_chess(self._board.pop())

    def fen(self) -> str:
        return self._board.fen()

    def turn_color(self) -> str:
        """Side to move, ``"white"`` or ``"black"``."""
        return chess.COLOR_NAMES[self._board.turn]

    def is_check(self) -> bool:
        return self._board.is_check()

    def destinations(self) -> Dict[str, List[str]]:
        """
        Legal destination squares grouped by origin square.

        Promotions to different pieces share a destination, which is listed
        only once.
        """
        dests: Dict[str, List[str]] = {}
        for move in self._board.legal_moves:
            orig = chess.square_name(move.from_square)
            dest = chess.square_name(move.to_square)
            squares = dests.setdefault(orig, [])
            if dest not in squares:
                squares.append(dest)
        return dests

    def history(self) -> List[Move]:
        """Moves played on this board, oldest first."""
        return [Move.from_chess(move) for move in self._board.move_stack]

    def piece_at(self, square: str) -> Optional[chess.Piece]:
        return self._board.piece_at(chess.parse_square(square))

    def is_promotion(self, orig: str, dest: str) -> bool:
        """True if moving the piece on ``orig`` to ``dest`` promotes a pawn."""
        piece = self.piece_at(orig)
        if piece is None or piece.piece_type != chess.PAWN:
            return False
        last_rank = 7 if piece.color == chess.WHITE else 0
        return chess.square_rank(chess.parse_square(dest)) == last_rank

    def parse_move(self, text: str) -> Move:
        """
        Read a user move in UCI (``e2e4``, ``e7e8q``) or SAN (``Nf3``).

        A pawn move to the last rank may leave out the promotion piece; the
        caller is expected to ask for it.

        Raises:
            ValueError: If the text is not a legal move in this position
        """
        text = text.strip()
        try:
            move = chess.Move.from_uci(text)
        except ValueError:
            return Move.from_chess(self._board.parse_san(text))

        if self._board.is_legal(move):
            return Move.from_chess(move)
        if not move.promotion and self._board.is_legal(chess.Move(move.from_square, move.to_square, chess.QUEEN)):
            return Move.from_chess(move)
        raise chess.IllegalMoveError(f"illegal move {text} in {self._board.fen()}")

    def copy(self) -> chess.Board:
        """A copy of the underlying board, safe to hand to renderers."""
        return self._board.copy()

    def __len__(self) -> int:
        return len(self._board.move_stack)
