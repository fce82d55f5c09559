"""
Command-line interface for Chess Drill.

This module provides the main entry point and argument parsing for the
terminal drill: it loads PGN lines into a move tree and either prints the
tree or runs an interactive drill or review over it.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .core.drill import DrillSession
from .core.models import (
    DrillConfig,
    MODES,
    MODE_DRILL,
    NAVIGATION,
    RESULT_SUCCESS,
    STATUS_MAINLINE,
    STATUS_MISTAKE,
    STATUS_VARIATION,
)
from .core.records import load_records
from .core.tree import TreeError
from .ui.board import ChessBoardRenderer, render_variations

logger = logging.getLogger(__name__)

console = Console()

QUIT_COMMANDS = ("quit", "exit", "q")

PROMOTION_KEYS = {"q": "queen", "r": "rook", "b": "bishop", "n": "knight"}


def setup_logging(verbose: bool = False) -> None:
    """Setup logging that doesn't interfere with the board display."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if verbose:
        root_logger.addHandler(RichHandler(console=console, show_path=False))
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.INFO)


class DrillRunner:
    """
    Interactive terminal loop over a drill session.

    Reads moves and navigation commands from the console, feeds them to the
    session and redraws the board after every change.
    """

    def __init__(self, session: DrillSession, console: Console):
        self.session = session
        self.console = console
        self.renderer = ChessBoardRenderer(
            flip_board=session.config.flip_board,
            show_coordinates=session.config.show_coordinates,
        )

    def run(self) -> None:
        """Run until the user quits."""
        self._show_help()
        self.redraw()

        while True:
            prompt = "[bold cyan]navigate>[/bold cyan] " if self.session.view_only else "[bold cyan]your move>[/bold cyan] "
            try:
                text = self.console.input(prompt).strip()
            except EOFError:
                break

            if not text:
                continue
            if text.lower() in QUIT_COMMANDS:
                break
            if not self.handle(text):
                continue
            self.redraw()

    def handle(self, text: str) -> bool:
        """
        Process one line of input.

        Returns:
            True if the position changed and should be redrawn
        """
        command = text.lower()
        if command in NAVIGATION:
            self.session.navigate(command)
            return True
        if command == "hint":
            hint = self.session.hint()
            self.console.print(f"[yellow]Hint: {hint.uci() if hint else 'end of line'}[/yellow]")
            return False
        if self.session.view_only:
            self.console.print(f"[red]Board is view-only, use {', '.join(NAVIGATION)} or quit[/red]")
            return False

        try:
            move = self.session.parse_move(text)
        except ValueError as e:
            self.console.print(f"[red]Not a legal move: {text} ({e})[/red]")
            return False

        status = self.session.check_move(move.orig, move.dest, move.promotion)
        if self.session.pending_promotion is not None:
            status = self._ask_promotion()
            if status is None:
                return False

        return self._report(status)

    def redraw(self) -> None:
        self.console.print(self.renderer.render_state(self.session.state()))

    def _ask_promotion(self) -> Optional[str]:
        choices = "/".join(PROMOTION_KEYS)
        key = self.console.input(f"Promote to ({choices})? ").strip().lower()
        piece = PROMOTION_KEYS.get(key[:1])
        if piece is None:
            self.session.promotion_cancel()
            self.console.print("[yellow]Promotion cancelled[/yellow]")
            return None
        return self.session.promotion_finish(piece)

    def _report(self, status: str) -> bool:
        if status == STATUS_VARIATION:
            self.console.print("[yellow]Playable, but not the main line. Try again.[/yellow]")
            return False
        if status == STATUS_MISTAKE:
            self.console.print("[bold red]Mistake! The drill is over.[/bold red]")
            return True
        if status == STATUS_MAINLINE:
            self.console.print("[green]Correct[/green]")
            self.redraw()
            time.sleep(self.session.config.response_delay)
            reply = self.session.respond()
            if reply is not None:
                self.console.print(f"Reply: [bold]{reply.uci()}[/bold]")
            if self.session.result == RESULT_SUCCESS:
                self.console.print("[bold green]Line complete![/bold green]")
        return True

    def _show_help(self) -> None:
        if self.session.view_only:
            self.console.print(f"Commands: {', '.join(NAVIGATION)}, quit")
        else:
            self.console.print(
                f"Enter moves in UCI (e2e4) or SAN (Nf3). Commands: {', '.join(NAVIGATION)}, hint, quit"
            )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Chess Drill - practise opening lines from PGN files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Drill the lines of a repertoire file
  %(prog)s italian.pgn

  # Step through the mainline without playing
  %(prog)s italian.pgn --mode review

  # Show every variation and exit
  %(prog)s italian.pgn sidelines.pgn --tree
        """
    )

    parser.add_argument(
        "files",
        nargs="+",
        help="PGN files whose games form the lines of the drill"
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default=MODE_DRILL,
        help="Play the lines (drill) or only step through them (review) (default: %(default)s)"
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Print the variation tree and exit"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Seconds to wait before the reply is played (default: %(default)s)"
    )
    parser.add_argument(
        "--flip",
        action="store_true",
        help="Show the board from black's side"
    )
    parser.add_argument(
        "--no-coordinates",
        action="store_true",
        help="Hide file and rank labels"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log tree and session activity"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = DrillConfig(
            lines=load_records(args.files),
            mode=args.mode,
            response_delay=args.delay,
            flip_board=args.flip,
            show_coordinates=not args.no_coordinates,
        )
        session = DrillSession(config)
    except (OSError, ValueError, TreeError) as e:
        console.print(f"[bold red]Cannot load drill: {e}[/bold red]")
        logger.debug("Drill setup failed", exc_info=True)
        return 1

    if args.tree:
        console.print(render_variations(session.tree))
        return 0

    try:
        DrillRunner(session, console).run()
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Interrupted by user[/bold yellow]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
