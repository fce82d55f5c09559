"""
Move tree and navigation cursor.

A Tree folds any number of game records that share a starting position into
one branching structure: identical prefixes collapse onto the same path and
divergences become sibling branches, ordered by the order in which they were
first seen. The first child at every node is the mainline.

A TreeIterator walks a Tree while keeping a private replay board in step with
the node it points at, so board queries (side to move, check, legal
destinations, history) always describe the current position.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import chess

from .models import Move
from .rules import RecordParseError, ReplayBoard, parse_record, record_moves

logger = logging.getLogger(__name__)


class TreeError(Exception):
    """Base class for move tree errors."""
    pass


class InvalidRecord(TreeError):
    """A move-sequence record could not be parsed."""
    pass


class InconsistentRoot(TreeError):
    """A record starts from a different position than the tree root."""
    pass


class InvalidMove(TreeError):
    """A move was pushed that is not a recorded continuation."""
    pass


class Node:
    """One position in the tree and the moves recorded from it."""

    def __init__(self, position: str, annotation: Optional[str] = None):
        self.position = position
        self.annotation = annotation
        self.children: Dict[Move, Node] = {}

    def find(self, move: Move) -> Optional[Node]:
        return self.children.get(move)

    def insert_or_get(self, move: Move, position: str, annotation: Optional[str] = None) -> Node:
        """
        Return the child reached by ``move``, creating it if needed.

        An existing child keeps its position and annotation.
        """
        child = self.children.get(move)
        if child is None:
            child = Node(position, annotation)
            self.children[move] = child
        return child

    def moves(self) -> List[Move]:
        """Recorded continuations, mainline first."""
        return list(self.children)

    def __repr__(self) -> str:
        return f"Node({self.position!r}, children={len(self.children)})"


class Tree:
    """
    A move tree built from an ordered list of game records.

    The tree is built once and never modified afterwards; any number of
    independent iterators can walk it.
    """

    def __init__(self, variations: Iterable[str]):
        """
        Build the tree.

        Args:
            variations: Move-sequence records (PGN movetext with optional
                headers), in priority order

        Raises:
            InvalidRecord: If a record cannot be parsed
            InconsistentRoot: If a record starts from a different position
                than the first one
        """
        root: Optional[Node] = None
        count = 0

        for index, variation in enumerate(variations):
            try:
                game = parse_record(variation)
            except RecordParseError as e:
                raise InvalidRecord(f"invalid pgn (record {index + 1}): {e}") from e

            board, moves = record_moves(game)

            if root is None:
                root = Node(board.fen())
            elif board.fen() != root.position:
                raise InconsistentRoot(
                    f"invalid variation (record {index + 1}): starts from {board.fen()}, "
                    f"expected {root.position}"
                )

            node = root
            for chess_move, comment in moves:
                board.push(chess_move)
                node = node.insert_or_get(Move.from_chess(chess_move), board.fen(), comment)

            count += 1
            logger.debug(f"Added record {index + 1} with {len(moves)} moves")

        if root is None:
            root = Node(chess.STARTING_FEN)

        self.root = root
        logger.debug(f"Built move tree from {count} records")

    def __iter__(self) -> TreeIterator:
        return self.iterator()

    def iterator(self) -> TreeIterator:
        """Create a fresh cursor positioned at the root."""
        return TreeIterator(self.root)

    def mainline(self) -> List[Move]:
        """The first-choice line from the root."""
        return self.iterator().mainline()


class Link:
    """One step of a cursor's history."""

    def __init__(self, node: Node, move: Optional[Move] = None):
        self.node = node
        self.move = move
        self.prev: Optional[Link] = None
        self.next: Optional[Link] = None


class TreeIterator:
    """
    A cursor over a Tree.

    ``push`` steps into one of the recorded continuations and starts a new
    forward history from there; ``prev``/``next``/``first``/``last`` move along
    the history already walked. Stepping past either end is a no-op.

    Not safe for concurrent use; create one iterator per caller.
    """

    def __init__(self, root: Node):
        self.root = root
        self.link = Link(root)
        self.line = ReplayBoard(root.position)

    def __iter__(self) -> TreeIterator:
        return self

    def __next__(self) -> Move:
        move = self.next()
        if move is None:
            raise StopIteration
        return move

    def next(self) -> Optional[Move]:
        """Step forward along the walked history; returns the move or None."""
        if self.link.next is None:
            return None
        self.link = self.link.next
        self.line.push(self.link.move)
        return self.link.move

    def prev(self) -> None:
        if self.link.prev is not None:
            self.link = self.link.prev
            self.line.pop()

    def first(self) -> None:
        while self.link.prev is not None:
            self.prev()

    def last(self) -> None:
        while self.link.next is not None:
            self.next()

    def peek(self) -> List[Move]:
        """Continuations recorded at the current position, mainline first."""
        return self.link.node.moves()

    def push(self, move: Move) -> None:
        """
        Play one of the recorded continuations.

        Any forward history from the current position is discarded.

        Raises:
            InvalidMove: If ``move`` is not in ``peek()``; the cursor is left
                unchanged
        """
        node = self.link.node.find(move)
        if node is None:
            raise InvalidMove(f"invalid move {move} at {self.link.node.position}")

        self.line.push(move)
        link = Link(node, move)
        link.prev = self.link
        self.link.next = link
        self.link = link
        logger.debug(f"Pushed {move}, ply {len(self.line)}")

    def fen(self) -> str:
        return self.link.node.position

    def annotation(self) -> Optional[str]:
        """Comment attached to the move that led to the current position."""
        return self.link.node.annotation

    def color(self) -> str:
        return self.line.turn_color()

    def check(self) -> bool:
        return self.line.is_check()

    def destinations(self) -> Dict[str, List[str]]:
        return self.line.destinations()

    def lastmove(self) -> Optional[Move]:
        return self.link.move

    def history(self) -> List[Move]:
        return self.line.history()

    def ply(self) -> int:
        return len(self.line)

    def board(self) -> chess.Board:
        return self.line.copy()

    def is_promotion(self, orig: str, dest: str) -> bool:
        """True if ``orig`` to ``dest`` is a legal pawn move to the last rank."""
        if dest not in self.line.destinations().get(orig, []):
            return False
        return self.line.is_promotion(orig, dest)

    def parse_move(self, text: str) -> Move:
        """
        Read a move typed in UCI or SAN against the current position.

        Raises:
            ValueError: If the text is not a legal move here
        """
        return self.line.parse_move(text)

    def mainline(self) -> List[Move]:
        """The first-choice line from the root, wherever the cursor is."""
        line: List[Move] = []
        node = self.root
        while True:
            moves = node.moves()
            if not moves:
                break
            line.append(moves[0])
            node = node.children[moves[0]]
        return line
