"""
Core package for the chess puzzle generator.

This package contains the data models, the notation validator, the
python-chess replay helpers and the engine session management.
"""

from .models import (
    Move,
    Evaluation,
    PuzzleLevel,
    PuzzleCandidate,
    Puzzle,
    Config
)

from .board import (
    ConsistencyFault,
    position_id,
    replay
)

from .notation import (
    NotationValidator,
    NotationError,
    TokenError,
    validate
)

from .engine import (
    EngineSession,
    SharedEngine,
    PuzzleEngine,
    EngineError,
    EngineTimeoutError,
    autodetect_stockfish,
    get_friendly_stockfish_hint
)

__all__ = [
    # Data models
    "Move",
    "Evaluation",
    "PuzzleLevel",
    "PuzzleCandidate",
    "Puzzle",
    "Config",

    # Board replay
    "ConsistencyFault",
    "position_id",
    "replay",

    # Notation
    "NotationValidator",
    "NotationError",
    "TokenError",
    "validate",

    # Engine components
    "EngineSession",
    "SharedEngine",
    "PuzzleEngine",
    "EngineError",
    "EngineTimeoutError",
    "autodetect_stockfish",
    "get_friendly_stockfish_hint",
]
