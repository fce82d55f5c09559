"""
Loading move-sequence records from PGN files.

A PGN file may hold many games; the move tree wants one record per line of
play. Each game is re-exported on its own, headers included, so a SetUp/FEN
pair travels with its moves.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable, List, TextIO, Union

import chess.pgn as chess_pgn

from .tree import InvalidRecord

logger = logging.getLogger(__name__)


def read_records(source: Union[str, TextIO], name: str = "<string>") -> List[str]:
    """
    Split PGN text into single-game records.

    Args:
        source: PGN text or an open text stream
        name: Label used in error messages

    Returns:
        One PGN string per game, in file order

    Raises:
        InvalidRecord: If a game in the source cannot be read
    """
    handle = io.StringIO(source) if isinstance(source, str) else source
    records = []

    while True:
        game = chess_pgn.read_game(handle)
        if game is None:
            break
        if game.errors:
            raise InvalidRecord(f"{name}: game {len(records) + 1} is invalid: {game.errors[0]}")

        exporter = chess_pgn.StringExporter(headers=True, variations=False, comments=True)
        records.append(game.accept(exporter))

    logger.debug(f"Read {len(records)} records from {name}")
    return records


def load_records(paths: Iterable[Union[str, Path]]) -> List[str]:
    """Read the records of several PGN files, in the order given."""
    records: List[str] = []
    for path in paths:
        path = Path(path)
        with open(path, encoding="utf-8-sig") as f:
            records.extend(read_records(f, name=str(path)))
    logger.info(f"Loaded {len(records)} records")
    return records
