"""
Puzzle generation from recorded games.

- selector: blunder detection over a random scan window and solution assembly
- generator: service tying validation, the shared engine and the selector
- pgn: multi-game PGN splitting and filtering
- export: text and JSON output
"""

from .selector import PuzzleSelector, compute_delta, rand_range_of_moves
from .generator import PuzzleGenerator, GameTooShortError
from .pgn import GameRecord, split_games, read_games, filter_games, load_games
from .export import format_puzzles, write_puzzles

__all__ = [
    'PuzzleSelector',
    'compute_delta',
    'rand_range_of_moves',
    'PuzzleGenerator',
    'GameTooShortError',
    'GameRecord',
    'split_games',
    'read_games',
    'filter_games',
    'load_games',
    'format_puzzles',
    'write_puzzles'
]
