"""
Chess Puzzler - turns recorded chess games into puzzles.

Each game's move text is validated and converted to coordinate notation, then
a UCI engine is used to find the position where one side blundered hardest and
to extend it with the best continuation as the puzzle's solution.
"""

__version__ = "0.1.0"
__author__ = "Chess Puzzler Team"
__license__ = "MIT"

# Core imports
from .core.models import Move, Evaluation, PuzzleLevel, Puzzle, Config
from .core.notation import NotationValidator, NotationError
from .core.engine import EngineSession, SharedEngine, EngineError
from .puzzle.selector import PuzzleSelector
from .puzzle.generator import PuzzleGenerator
from .cli import main

__all__ = [
    "Move",
    "Evaluation",
    "PuzzleLevel",
    "Puzzle",
    "Config",
    "NotationValidator",
    "NotationError",
    "EngineSession",
    "SharedEngine",
    "EngineError",
    "PuzzleSelector",
    "PuzzleGenerator",
    "main",
]
