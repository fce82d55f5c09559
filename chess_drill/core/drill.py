"""
Drill session: practising a move tree against its recorded lines.

The session owns a Tree and one cursor over it. In drill mode the user plays
one side: a move equal to the mainline continuation is accepted and answered
with the recorded reply, a move that is only a side variation is acknowledged
but not played, and anything else ends the drill as a failure. Reaching the
end of the line is a success. In review mode the mainline is walked in advance
and the position can only be navigated.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import (
    BoardState,
    DrillConfig,
    Move,
    NAVIGATION,
    RESULT_FAILURE,
    RESULT_INCOMPLETE,
    RESULT_SUCCESS,
    STATUS_MAINLINE,
    STATUS_MISTAKE,
    STATUS_NEW,
    STATUS_VARIATION,
)
from .tree import Tree

logger = logging.getLogger(__name__)


class DrillSession:
    """
    Drives one drill over a move tree.

    The session is synchronous: ``check_move`` classifies and plays the
    user's move, ``respond`` plays the reply. A front end that wants to pace
    the reply waits between the two calls.
    """

    def __init__(self, config: DrillConfig):
        """
        Build the tree and position the cursor.

        Raises:
            TreeError: If the configured lines do not form a valid tree
        """
        self.config = config
        self.status = STATUS_NEW
        self.result = RESULT_INCOMPLETE
        self.pending_promotion: Optional[Move] = None
        self.reply_pending = False

        self.tree = Tree(config.lines)
        self.line = self.tree.iterator()

        if config.is_review:
            for move in self.line.mainline():
                self.line.push(move)
            self.line.first()

        logger.info(f"Started {config.mode} session over {len(config.lines)} lines")

    @property
    def color(self) -> str:
        """Side to move."""
        return self.line.color()

    @property
    def annotation(self) -> Optional[str]:
        return self.line.annotation()

    @property
    def view_only(self) -> bool:
        """True when the board accepts no moves."""
        return self.config.is_review or self.result != RESULT_INCOMPLETE

    @property
    def is_finished(self) -> bool:
        return self.result != RESULT_INCOMPLETE

    def state(self) -> BoardState:
        """Snapshot of the current position for the front end."""
        return BoardState(
            fen=self.line.fen(),
            turn_color=self.line.color(),
            check=self.line.check(),
            view_only=self.view_only,
            last_move=self.line.lastmove(),
            annotation=self.line.annotation(),
            destinations=self.line.destinations(),
        )

    def navigate(self, position: str) -> BoardState:
        """
        Move the cursor along the walked history.

        Args:
            position: One of "first", "prev", "next", "last"
        """
        if position not in NAVIGATION:
            raise ValueError(f"Unknown navigation target '{position}'")
        self.reply_pending = False
        getattr(self.line, position)()
        return self.state()

    def needs_promotion(self, orig: str, dest: str) -> bool:
        """True if the legal move ``orig`` to ``dest`` must name a promotion piece."""
        return self.line.is_promotion(orig, dest)

    def check_move(self, orig: str, dest: str, promotion: Optional[str] = None) -> str:
        """
        Classify and, if it is the mainline, play a user move.

        A pawn reaching the last rank without a promotion piece is held in
        ``pending_promotion`` until ``promotion_finish`` or
        ``promotion_cancel`` is called.

        Returns:
            The new status
        """
        if self.view_only:
            logger.warning(f"Ignoring move {orig}-{dest}: board is view-only")
            return self.status

        self.pending_promotion = None
        if promotion is None and self.needs_promotion(orig, dest):
            self.pending_promotion = Move(orig, dest)
            logger.debug(f"Awaiting promotion piece for {orig}-{dest}")
            return self.status

        self._update_status(Move(orig, dest, promotion))
        return self.status

    def promotion_finish(self, piece: str) -> str:
        """Complete a pending promotion with the chosen piece."""
        pending = self.pending_promotion
        self.pending_promotion = None
        if pending is None:
            return self.status
        return self.check_move(pending.orig, pending.dest, piece)

    def promotion_cancel(self) -> None:
        self.pending_promotion = None

    def respond(self) -> Optional[Move]:
        """
        Play the recorded reply after an accepted mainline move.

        Each accepted move is answered at most once; navigating in between
        drops the reply.

        Returns:
            The reply played, or None if there was nothing to answer
        """
        if not self.reply_pending or self.result != RESULT_INCOMPLETE:
            return None
        self.reply_pending = False

        reply = None
        continuations = self.line.peek()
        if continuations:
            reply = continuations[0]
            self.line.push(reply)
            continuations = self.line.peek()
        if not continuations:
            self._set_result(RESULT_SUCCESS)
        return reply

    def hint(self) -> Optional[Move]:
        """The mainline move expected at the current position."""
        moves = self.line.peek()
        return moves[0] if moves else None

    def parse_move(self, text: str) -> Move:
        """
        Read a move typed by the user in UCI or SAN.

        Raises:
            ValueError: If the text is not a legal move in this position
        """
        return self.line.parse_move(text)

    def _set_result(self, result: str) -> None:
        if self.result == RESULT_INCOMPLETE:
            self.result = result
            logger.info(f"Drill finished: {result}")

    def _update_status(self, move: Move) -> None:
        moves = self.line.peek()
        mainline, variations = (moves[0], moves[1:]) if moves else (None, [])
        self.reply_pending = False

        if move == mainline:
            self.status = STATUS_MAINLINE
            self.line.push(move)
            self.reply_pending = True
        elif move in variations:
            self.status = STATUS_VARIATION
        else:
            self._set_result(RESULT_FAILURE)
            self.status = STATUS_MISTAKE
        logger.debug(f"Move {move}: {self.status}")

