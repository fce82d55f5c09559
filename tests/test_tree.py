"""
Unit tests for the move tree and its cursor.

Every cursor position is checked against an independent python-chess board
that replays the same moves.
"""

import unittest

import chess

from chess_drill.core.models import Move
from chess_drill.core.tree import (
    InconsistentRoot,
    InvalidMove,
    InvalidRecord,
    Node,
    Tree,
    TreeError,
)

from .fixtures import (
    AFTER_D4,
    FOOLS_MATE,
    GIUOCO_PIANO,
    ITALIAN,
    PROMOTION_FEN,
    PROMOTION_KNIGHT,
    PROMOTION_QUEEN,
    SCANDINAVIAN,
)


def mkmove(text: str) -> Move:
    """Build a move from "e2-e4" notation."""
    orig, dest = text.split("-")
    return Move(orig, dest)


def history_of(board: chess.Board):
    return [Move.from_chess(move) for move in board.move_stack]


class NodeTests(unittest.TestCase):
    """Test Node lookup and insertion."""

    def test_insert_keeps_order(self):
        """Test children are returned in insertion order."""
        node = Node(chess.STARTING_FEN)
        node.insert_or_get(Move("e2", "e4"), "fen-e4")
        node.insert_or_get(Move("d2", "d4"), "fen-d4")
        node.insert_or_get(Move("c2", "c4"), "fen-c4")

        self.assertEqual(node.moves(), [Move("e2", "e4"), Move("d2", "d4"), Move("c2", "c4")])

    def test_insert_existing_is_not_overwritten(self):
        """Test an existing child keeps its position and annotation."""
        node = Node(chess.STARTING_FEN)
        first = node.insert_or_get(Move("e2", "e4"), "fen-e4", "best by test")
        second = node.insert_or_get(Move("e2", "e4"), "other", "other comment")

        self.assertIs(first, second)
        self.assertEqual(second.position, "fen-e4")
        self.assertEqual(second.annotation, "best by test")
        self.assertEqual(len(node.children), 1)

    def test_find(self):
        """Test lookup by move identity."""
        node = Node(chess.STARTING_FEN)
        child = node.insert_or_get(Move("e7", "e8", "queen"), "fen")

        self.assertIs(node.find(Move("e7", "e8", "queen")), child)
        self.assertIsNone(node.find(Move("e7", "e8")))
        self.assertIsNone(node.find(Move("e7", "e8", "knight")))


class TreeConstructionTests(unittest.TestCase):
    """Test building trees from records."""

    def test_empty(self):
        """Test an empty list gives a bare root at the initial position."""
        tree = Tree([])
        self.assertEqual(tree.root.position, chess.STARTING_FEN)
        self.assertEqual(tree.iterator().peek(), [])
        self.assertEqual(list(tree), [])

    def test_invalid_record(self):
        """Test an unparseable record fails construction."""
        with self.assertRaises(InvalidRecord) as context:
            Tree(["1. Ke2"])
        self.assertIn("invalid pgn", str(context.exception))

    def test_empty_record(self):
        """Test a record without a game fails construction."""
        with self.assertRaises(InvalidRecord):
            Tree([""])

    def test_invalid_record_after_valid_ones(self):
        """Test construction aborts on a later bad record."""
        with self.assertRaises(InvalidRecord):
            Tree([GIUOCO_PIANO, "1. e4 e5 2. Ke3 *"])

    def test_inconsistent_root(self):
        """Test records with different starting positions are rejected."""
        with self.assertRaises(InconsistentRoot) as context:
            Tree(["1. e4 e5", AFTER_D4])
        self.assertIn("invalid variation", str(context.exception))

    def test_errors_share_base_class(self):
        """Test all construction errors are TreeErrors."""
        self.assertTrue(issubclass(InvalidRecord, TreeError))
        self.assertTrue(issubclass(InconsistentRoot, TreeError))
        self.assertTrue(issubclass(InvalidMove, TreeError))

    def test_setup_position_becomes_root(self):
        """Test a FEN header sets the root position."""
        tree = Tree([AFTER_D4])
        board = chess.Board("rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b KQkq - 0 1")

        self.assertEqual(tree.root.position, board.fen())
        self.assertEqual(tree.iterator().peek(), [Move("d7", "d5")])

    def test_shared_prefix_collapses(self):
        """Test identical records share one path."""
        tree = Tree([GIUOCO_PIANO, GIUOCO_PIANO])
        self.assertEqual(len(tree.mainline()), 6)
        self.assertEqual(tree.iterator().peek(), [Move("e2", "e4")])

    def test_italian_branches(self):
        """Test divergences become siblings in record order."""
        tree = Tree(ITALIAN)
        line = tree.iterator()

        for text in ["e2-e4", "e7-e5", "g1-f3", "b8-c6", "f1-c4", "f8-c5", "c2-c3", "g8-f6"]:
            line.push(mkmove(text))
        self.assertEqual(line.peek(), [mkmove("d2-d4"), mkmove("d2-d3")])

        line.push(mkmove("d2-d4"))
        line.push(mkmove("e5-d4"))
        self.assertEqual(line.peek(), [mkmove("c3-d4"), mkmove("e4-e5")])

    def test_annotations(self):
        """Test comments are attached to the node the move leads to."""
        tree = Tree([
            "1. e4 {King's pawn} e5 2. Nf3 { develops } *",
            "1. e4 {ignored} c5 *",
        ])
        line = tree.iterator()
        self.assertIsNone(line.annotation())

        line.push(Move("e2", "e4"))
        self.assertEqual(line.annotation(), "King's pawn")

        line.push(Move("c7", "c5"))
        self.assertIsNone(line.annotation())

        line.prev()
        line.push(Move("e7", "e5"))
        self.assertIsNone(line.annotation())

        line.push(Move("g1", "f3"))
        self.assertEqual(line.annotation(), "develops")

    def test_promotion_moves_are_distinct(self):
        """Test promotions to different pieces are different moves."""
        tree = Tree([PROMOTION_QUEEN, PROMOTION_KNIGHT])
        line = tree.iterator()

        self.assertEqual(line.peek(), [Move("e7", "e8", "queen"), Move("e7", "e8", "knight")])

        with self.assertRaises(InvalidMove):
            line.push(Move("e7", "e8"))

        line.push(Move("e7", "e8", "knight"))
        board = chess.Board(PROMOTION_FEN)
        board.push_uci("e7e8n")
        self.assertEqual(line.fen(), board.fen())


class TreeIteratorTests(unittest.TestCase):
    """Test cursor navigation and position queries."""

    def assertMatchesBoard(self, line, board: chess.Board):
        self.assertEqual(line.fen(), board.fen())
        self.assertEqual(line.history(), history_of(board))
        self.assertEqual(line.color(), chess.COLOR_NAMES[board.turn])
        self.assertEqual(line.check(), board.is_check())

    def test_single(self):
        """Test following a single record reproduces its moves."""
        tree = Tree([GIUOCO_PIANO])
        line = tree.iterator()
        self.assertEqual(list(line), [])

        board = chess.Board()
        moves = [mkmove(m) for m in ["e2-e4", "e7-e5", "g1-f3", "b8-c6", "f1-c4", "f8-c5"]]
        for move in moves:
            self.assertEqual(line.peek(), [move])

            line.push(move)
            board.push(move.to_chess())

            self.assertEqual(line.lastmove(), move)
            self.assertMatchesBoard(line, board)

        self.assertEqual(line.peek(), [])
        self.assertEqual(line.ply(), 6)

    def test_multiple(self):
        """Test every branch of the Italian tree against a replayed board."""
        tree = Tree(ITALIAN)
        line = tree.iterator()
        board = chess.Board()

        branches = {
            "e2-e4": {"e7-e5": {"g1-f3": {"b8-c6": {"f1-c4": {"f8-c5": {"c2-c3": {"g8-f6": {
                "d2-d4": {"e5-d4": {"c3-d4": True, "e4-e5": True}},
                "d2-d3": True,
            }}}}}}}},
        }

        def validate(branch):
            moves = [mkmove(m) for m in branch]
            self.assertEqual(line.peek(), moves)

            for move in moves:
                before = line.fen()
                line.push(move)
                board.push(move.to_chess())

                self.assertEqual(line.lastmove(), move)
                self.assertMatchesBoard(line, board)

                path = branch[f"{move.orig}-{move.dest}"]
                if path is not True:
                    validate(path)
                else:
                    self.assertEqual(line.peek(), [])

                line.prev()
                board.pop()
                self.assertEqual(line.fen(), before)

        validate(branches)

    def test_navigation(self):
        """Test first/next/prev/last along a walked line."""
        tree = Tree([SCANDINAVIAN])
        line = tree.iterator()
        moves = [mkmove(m) for m in ["e2-e4", "d7-d5", "e4-d5", "d8-d5", "b1-c3", "d5-d8"]]
        self.assertEqual(line.mainline(), moves)

        while line.peek():
            line.push(line.peek()[0])
        self.assertEqual(line.lastmove(), moves[-1])

        line.first()
        self.assertIsNone(line.lastmove())
        self.assertEqual(line.fen(), tree.root.position)
        self.assertEqual(line.history(), [])

        board = chess.Board()
        for move in moves:
            self.assertEqual(line.next(), move)
            self.assertEqual(line.lastmove(), move)
            board.push(move.to_chess())
            self.assertEqual(line.fen(), board.fen())
        self.assertEqual(line.history(), history_of(board))

        while board.move_stack:
            board.pop()
            line.prev()
            self.assertEqual(line.fen(), board.fen())

        line.prev()
        self.assertEqual(line.fen(), chess.STARTING_FEN)
        self.assertIsNone(line.lastmove())

    def test_last(self):
        """Test last() replays the whole walked history."""
        tree = Tree([SCANDINAVIAN])
        line = tree.iterator()
        for move in line.mainline():
            line.push(move)
        line.first()

        line.last()
        self.assertEqual(line.lastmove(), Move("d5", "d8"))
        self.assertEqual(line.ply(), 6)

        line.last()
        self.assertIsNone(line.next())
        self.assertEqual(line.ply(), 6)

    def test_iteration_protocol(self):
        """Test iterating a cursor follows the walked history."""
        tree = Tree([SCANDINAVIAN])
        line = tree.iterator()
        for move in tree.mainline():
            line.push(move)
        line.first()

        self.assertEqual(list(line), tree.mainline())
        self.assertEqual(list(line), [])

    def test_push_discards_forward_history(self):
        """Test pushing from an earlier point truncates the old future."""
        tree = Tree(ITALIAN)
        line = tree.iterator()
        for move in tree.mainline():
            line.push(move)

        for _ in range(3):
            line.prev()
        line.push(Move("d2", "d3"))

        self.assertIsNone(line.next())
        self.assertEqual(line.lastmove(), Move("d2", "d3"))

        line.first()
        line.last()
        self.assertEqual(line.lastmove(), Move("d2", "d3"))
        self.assertEqual(line.ply(), 9)

    def test_push_invalid_move(self):
        """Test pushing an unrecorded move fails and leaves the cursor alone."""
        tree = Tree([GIUOCO_PIANO])
        line = tree.iterator()
        line.push(Move("e2", "e4"))
        fen = line.fen()

        with self.assertRaises(InvalidMove):
            line.push(Move("d7", "d5"))

        self.assertEqual(line.fen(), fen)
        self.assertEqual(line.lastmove(), Move("e2", "e4"))
        self.assertEqual(line.history(), [Move("e2", "e4")])

        with self.assertRaises(InvalidMove):
            tree.iterator().push(Move("d2", "d4"))

    def test_mainline_independent_of_cursor(self):
        """Test mainline() neither depends on nor moves the cursor."""
        tree = Tree(ITALIAN)
        line = tree.iterator()
        for text in ["e2-e4", "e7-e5", "g1-f3"]:
            line.push(mkmove(text))

        mainline = line.mainline()
        self.assertEqual(len(mainline), 11)
        self.assertEqual(mainline[-1], mkmove("c3-d4"))
        self.assertEqual(line.lastmove(), mkmove("g1-f3"))
        self.assertEqual(line.ply(), 3)

    def test_destinations(self):
        """Test legal destinations come from the replay board."""
        line = Tree([GIUOCO_PIANO]).iterator()
        dests = line.destinations()

        self.assertEqual(len(dests), 10)
        self.assertEqual(sorted(dests["e2"]), ["e3", "e4"])
        self.assertEqual(sorted(dests["g1"]), ["f3", "h3"])
        self.assertNotIn("e1", dests)

    def test_move_input(self):
        """Test typed moves and promotion checks against the cursor position."""
        line = Tree([PROMOTION_QUEEN]).iterator()
        self.assertTrue(line.is_promotion("e7", "e8"))
        self.assertFalse(line.is_promotion("e7", "d8"))
        self.assertFalse(line.is_promotion("e1", "d1"))
        self.assertEqual(line.parse_move("e8=Q"), Move("e7", "e8", "queen"))
        with self.assertRaises(ValueError):
            line.parse_move("Ke3")

    def test_check(self):
        """Test check and side to move after a mating line."""
        line = Tree([FOOLS_MATE]).iterator()
        line.last()
        self.assertFalse(line.check())

        for move in line.mainline():
            line.push(move)

        self.assertTrue(line.check())
        self.assertEqual(line.color(), "white")
        self.assertEqual(line.destinations(), {})

    def test_independent_iterators(self):
        """Test cursors over the same tree do not affect each other."""
        tree = Tree(ITALIAN)
        first = tree.iterator()
        second = tree.iterator()

        first.push(Move("e2", "e4"))
        self.assertIsNone(second.lastmove())
        self.assertEqual(second.fen(), chess.STARTING_FEN)
        self.assertEqual(second.color(), "white")


if __name__ == "__main__":
    unittest.main()
