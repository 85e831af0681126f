"""
Core data models for the chess puzzle generator.

This module defines the value types passed between the notation validator,
the engine session and the puzzle selector, plus the global configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import chess

FILES = "abcdefgh"
PROMOTION_PIECES = "qrbn"
# Fewest full moves a game may have; the scan window needs four half-moves
MIN_GAME_MOVES = 2


@dataclass(frozen=True)
class Move:
    """A move in coordinate notation: origin, destination, optional promotion."""

    from_square: str
    to_square: str
    promotion: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> Move:
        """
        Parse a 4 or 5 character coordinate move such as ``e2e4`` or ``e7e8q``.

        Ranks up to 9 are tolerated; the notation validator is stricter.

        Raises:
            ValueError: If the text is not a coordinate move
        """
        text = text.strip()
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid move format: {text!r} (expected 4 or 5 characters)")

        for idx in (0, 2):
            if text[idx] not in FILES:
                raise ValueError(f"Invalid move format: {text!r} (bad file {text[idx]!r})")
        for idx in (1, 3):
            if text[idx] not in "123456789":
                raise ValueError(f"Invalid move format: {text!r} (bad rank {text[idx]!r})")

        promotion = None
        if len(text) == 5:
            promotion = text[4].lower()
            if promotion not in PROMOTION_PIECES:
                raise ValueError(f"Invalid move format: {text!r} (bad promotion {text[4]!r})")

        return cls(text[0:2], text[2:4], promotion)

    @property
    def uci(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"from": self.from_square, "to": self.to_square, "promotion": self.promotion}

    def __str__(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"


@dataclass(frozen=True)
class Evaluation:
    """
    Static evaluation reported by the engine.

    Either the side to move is in check (``score`` is None) or a numeric
    score in pawns, positive favoring White and negative favoring Black.
    """

    score: Optional[float] = None

    @classmethod
    def in_check(cls) -> Evaluation:
        return cls(None)

    @classmethod
    def score_of(cls, value: float) -> Evaluation:
        return cls(float(value))

    @property
    def is_check(self) -> bool:
        return self.score is None

    def __str__(self) -> str:
        return "in check" if self.score is None else f"{self.score}"


class PuzzleLevel(Enum):
    """Puzzle difficulty; controls how many solution half-moves are appended."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def multiplier(self) -> int:
        return {PuzzleLevel.EASY: 1, PuzzleLevel.MEDIUM: 2, PuzzleLevel.HARD: 3}[self]

    @property
    def solution_length(self) -> int:
        """Number of half-moves in the solution (easy: 2, medium: 4, hard: 6)."""
        return self.multiplier * 2

    @classmethod
    def from_name(cls, name: str) -> PuzzleLevel:
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(level.value for level in cls)
            raise ValueError(f"Unknown puzzle level {name!r} (expected one of: {choices})")

    def __str__(self) -> str:
        return self.value


@dataclass
class PuzzleCandidate:
    """One scanned position: the move actually played versus the engine's choice."""

    move_index: int             # Index of the played move in the game
    position_id: str            # FEN after the played move
    move: str                   # Played move (coordinate notation)
    actual_eval: Evaluation     # Evaluation after the played move
    best_move: str              # Engine suggestion in the resulting position
    best_eval: Evaluation       # Evaluation after the engine suggestion
    delta: float                # Evaluation swing between the two
    side_to_move: chess.Color   # Side to move after the played move


@dataclass(frozen=True)
class Puzzle:
    """
    A generated puzzle.

    ``moves`` holds the whole line: the game moves up to and including the
    blunder, followed by the engine's solution moves.
    """

    level: PuzzleLevel
    start_position: str         # Move immediately preceding the blunder
    start_index: int            # Index of start_position within moves
    blunder_index: int          # Index of the blunder within moves
    moves: List[Move] = field(default_factory=list)

    @property
    def setup_moves(self) -> List[Move]:
        return self.moves[:self.blunder_index]

    @property
    def blunder_move(self) -> Move:
        return self.moves[self.blunder_index]

    @property
    def solution_moves(self) -> List[Move]:
        return self.moves[self.blunder_index + 1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "startPositionOfPuzzle": self.start_position,
            "startIndex": self.start_index,
            "moves": [move.to_dict() for move in self.moves],
        }

    def __str__(self) -> str:
        return f"{self.level}|{self.start_position}|{' '.join(str(m) for m in self.moves)}"


@dataclass
class Config:
    """Configuration settings for puzzle generation."""

    # Engine settings
    stockfish_path: Optional[str] = None
    scan_depth: int = 1             # Depth for best-move searches while scanning
    solution_depth: int = 5         # Depth for the solution line
    engine_timeout: Optional[float] = 120.0  # Seconds per puzzle, None disables

    # Puzzle settings
    level: str = "medium"
    min_game_moves: int = 15        # Full moves; shorter games are skipped, at least 2
    max_puzzles: Optional[int] = None
    seed: Optional[int] = None

    # Output settings
    output_format: str = "text"     # "text" or "json"

    def __post_init__(self):
        self.min_game_moves = max(self.min_game_moves, MIN_GAME_MOVES)
        PuzzleLevel.from_name(self.level)
        if self.output_format not in ("text", "json"):
            raise ValueError(f"Unsupported output format: {self.output_format}")
        if self.scan_depth < 1 or self.solution_depth < 1:
            raise ValueError("Search depths must be positive")

    @property
    def puzzle_level(self) -> PuzzleLevel:
        return PuzzleLevel.from_name(self.level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            item.name: getattr(self, item.name)
            for item in self.__dataclass_fields__.values()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Config:
        """Create config from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> Config:
        """Create config from ``STOCKFISH_PATH`` and ``PUZZLER_*`` environment variables."""
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        if env.get("STOCKFISH_PATH"):
            data["stockfish_path"] = env["STOCKFISH_PATH"]
        if env.get("PUZZLER_LEVEL"):
            data["level"] = env["PUZZLER_LEVEL"]
        for key in ("scan_depth", "solution_depth", "min_game_moves"):
            value = env.get(f"PUZZLER_{key.upper()}")
            if value:
                data[key] = int(value)

        timeout = env.get("PUZZLER_ENGINE_TIMEOUT")
        if timeout:
            data["engine_timeout"] = None if timeout.lower() in ("0", "none", "off") else float(timeout)

        return cls.from_dict(data)
