#!/usr/bin/env python3
"""
Chess Drill - Main Entry Point

Practise chess lines stored as PGN games. Games that share a starting
position are merged into one move tree; the drill asks for the mainline move
at every turn and answers with the recorded reply.

Quick Examples:
    # Drill a repertoire
    python main.py italian.pgn

    # Step through the mainline
    python main.py italian.pgn --mode review

    # Print all variations
    python main.py italian.pgn --tree

Installation:
    pip install -e .
"""

import sys
from pathlib import Path

# Add the project root to the Python path so we can import our package
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from chess_drill.cli import main

if __name__ == "__main__":
    sys.exit(main())
