"""
Terminal rendering for Chess Drill.

This module draws drill positions with Unicode pieces and Rich colors,
highlights the last move and a checked king, and shows the whole move tree
as a Rich tree with the mainline first at every branch.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Set
from dataclasses import dataclass

import chess
from rich.box import ROUNDED
from rich.console import Group
from rich.panel import Panel
from rich.align import Align
from rich.table import Table
from rich.text import Text
from rich.tree import Tree as RichTree

from ..core.models import BoardState, Move
from ..core.tree import Node, Tree


class PieceStyle(Enum):
    """Chess piece display styles."""
    UNICODE = "unicode"
    LETTERS = "letters"


@dataclass
class BoardColors:
    """Color scheme for chess board rendering."""
    white_square: str = "white"
    black_square: str = "grey23"
    white_piece: str = "bright_white"
    black_piece: str = "grey0"
    highlight_check: str = "red"
    highlight_last_move: str = "green"
    border: str = "cyan"
    coordinates: str = "dim white"
    mainline: str = "bold"
    variation: str = "dim"
    annotation: str = "italic yellow"


class ChessBoardRenderer:
    """
    Chess board renderer with Unicode pieces and colors.

    Renders the position of a drill together with its last move, check
    status and the comment recorded for the move that led there.
    """

    UNICODE_PIECES = {
        chess.PAWN: {"white": "♙", "black": "♟"},
        chess.ROOK: {"white": "♖", "black": "♜"},
        chess.KNIGHT: {"white": "♘", "black": "♞"},
        chess.BISHOP: {"white": "♗", "black": "♝"},
        chess.QUEEN: {"white": "♕", "black": "♛"},
        chess.KING: {"white": "♔", "black": "♚"},
    }

    LETTER_PIECES = {
        chess.PAWN: {"white": "P", "black": "p"},
        chess.ROOK: {"white": "R", "black": "r"},
        chess.KNIGHT: {"white": "N", "black": "n"},
        chess.BISHOP: {"white": "B", "black": "b"},
        chess.QUEEN: {"white": "Q", "black": "q"},
        chess.KING: {"white": "K", "black": "k"},
    }

    def __init__(
        self,
        piece_style: PieceStyle = PieceStyle.UNICODE,
        colors: Optional[BoardColors] = None,
        flip_board: bool = False,
        show_coordinates: bool = True,
    ):
        """
        Initialize the chess board renderer.

        Args:
            piece_style: Style for chess pieces
            colors: Color scheme for the board
            flip_board: If True, display from black's perspective
            show_coordinates: Whether to show file/rank labels
        """
        self.piece_style = piece_style
        self.colors = colors or BoardColors()
        self.flip_board = flip_board
        self.show_coordinates = show_coordinates

        if piece_style == PieceStyle.UNICODE:
            self.pieces = self.UNICODE_PIECES
        else:
            self.pieces = self.LETTER_PIECES

    def render_board(self, board: chess.Board, last_move: Optional[Move] = None) -> Panel:
        """
        Render a chess position as a Rich Panel.

        Args:
            board: Chess position to render
            last_move: Last move to highlight

        Returns:
            Rich Panel containing the rendered board
        """
        highlighted: Set[chess.Square] = set()
        if last_move:
            highlighted.add(chess.parse_square(last_move.orig))
            highlighted.add(chess.parse_square(last_move.dest))

        checked = board.king(board.turn) if board.is_check() else None

        table = Table.grid(padding=0)
        if self.show_coordinates:
            table.add_column(justify="center", width=2)
        for _ in range(8):
            table.add_column(justify="center", width=3)
        if self.show_coordinates:
            table.add_column(justify="center", width=2)

        if self.show_coordinates:
            table.add_row(*self._file_row())

        ranks = range(8, 0, -1) if not self.flip_board else range(1, 9)
        for rank in ranks:
            row_parts = []
            if self.show_coordinates:
                row_parts.append(Text(str(rank), style=self.colors.coordinates))

            files = range(8) if not self.flip_board else range(7, -1, -1)
            for file in files:
                square = chess.square(file, rank - 1)
                row_parts.append(self._render_square(board, square, highlighted, checked))

            if self.show_coordinates:
                row_parts.append(Text(str(rank), style=self.colors.coordinates))
            table.add_row(*row_parts)

        if self.show_coordinates:
            table.add_row(*self._file_row())

        return Panel(
            Align.center(table),
            title=self._create_board_title(board, last_move),
            border_style=self.colors.border,
            box=ROUNDED,
            padding=(0, 1),
        )

    def render_state(self, state: BoardState) -> Group:
        """Render a drill snapshot: the board and the move comment, if any."""
        parts = [self.render_board(chess.Board(state.fen), state.last_move)]
        if state.annotation:
            parts.append(Text(state.annotation, style=self.colors.annotation))
        return Group(*parts)

    def render_variations(self, tree: Tree, title: str = "Variations") -> RichTree:
        """
        Render the move tree with SAN moves.

        Mainline continuations are drawn first and in bold, side variations
        dimmed beneath them.
        """
        root = RichTree(Text(title, style=self.colors.mainline), guide_style=self.colors.border)
        self._add_children(root, tree.root, chess.Board(tree.root.position))
        return root

    def _add_children(self, parent: RichTree, node: Node, board: chess.Board) -> None:
        for index, (move, child) in enumerate(node.children.items()):
            chess_move = move.to_chess()
            label = Text(self._move_label(board, chess_move),
                         style=self.colors.mainline if index == 0 else self.colors.variation)
            if child.annotation:
                label.append(f"  {child.annotation}", style=self.colors.annotation)

            branch = parent.add(label)
            board.push(chess_move)
            self._add_children(branch, child, board)
            board.pop()

    def _move_label(self, board: chess.Board, move: chess.Move) -> str:
        """Format as "3. Bc4" or "3... Bc5"."""
        san = board.san(move)
        if board.turn == chess.WHITE:
            return f"{board.fullmove_number}. {san}"
        return f"{board.fullmove_number}... {san}"

    def _file_row(self) -> List:
        files = "abcdefgh"
        if self.flip_board:
            files = files[::-1]
        row: List = ["  "]
        for file_char in files:
            row.append(Text(file_char, style=self.colors.coordinates))
        row.append("  ")
        return row

    def _render_square(
        self,
        board: chess.Board,
        square: chess.Square,
        highlighted: Set[chess.Square],
        checked: Optional[chess.Square],
    ) -> Text:
        """Render a single chess square with piece and background."""
        piece = board.piece_at(square)
        is_light_square = (chess.square_file(square) + chess.square_rank(square)) % 2 == 1

        if square == checked:
            bg_color = self.colors.highlight_check
        elif square in highlighted:
            bg_color = self.colors.highlight_last_move
        elif is_light_square:
            bg_color = self.colors.white_square
        else:
            bg_color = self.colors.black_square

        if piece:
            piece_char = self._get_piece_char(piece)
            piece_color = self.colors.white_piece if piece.color == chess.WHITE else self.colors.black_piece
        else:
            piece_char = " "
            piece_color = "white"

        return Text(f" {piece_char} ", style=f"{piece_color} on {bg_color}")

    def _get_piece_char(self, piece: chess.Piece) -> str:
        """Get the character representation of a chess piece."""
        color_key = "white" if piece.color == chess.WHITE else "black"
        return self.pieces[piece.piece_type][color_key]

    def _create_board_title(self, board: chess.Board, last_move: Optional[Move]) -> str:
        """Create an informative title for the board."""
        turn = "White" if board.turn == chess.WHITE else "Black"
        title_parts = [f"Move {board.fullmove_number}"]

        if last_move:
            title_parts.append(f"Last: {last_move.uci()}")
        title_parts.append(f"To play: {turn}")

        if board.is_checkmate():
            winner = "Black" if board.turn == chess.WHITE else "White"
            title_parts.append(f"Checkmate - {winner} wins!")
        elif board.is_stalemate():
            title_parts.append("Stalemate")
        elif board.is_check():
            title_parts.append("Check!")

        return " | ".join(title_parts)


def render_variations(tree: Tree) -> RichTree:
    """Render a move tree with the default renderer."""
    return ChessBoardRenderer().render_variations(tree)
