#!/usr/bin/env python3
"""
Chess Puzzler - Main Entry Point

Turns recorded chess games into puzzles: the position where one side
blundered, followed by Stockfish's best continuation as the solution.

Quick Examples:
    # One medium puzzle per game
    python main.py games.pgn

    # Hard puzzles as JSON
    python main.py games.pgn --level hard --format json -o puzzles.json

Requirements:
    - Python 3.9+
    - Stockfish chess engine installed and in PATH (or STOCKFISH_PATH set)
"""

import sys

from chess_puzzler.cli import main

if __name__ == "__main__":
    sys.exit(main())
