"""
PGN ingestion.

Splits multi-game PGN text into per-game move text, validates each game and
drops games that are invalid or too short to make a puzzle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..core.models import Move
from ..core.notation import NotationError, NotationValidator

logger = logging.getLogger(__name__)

GAME_END_MARKERS = ("1-0", "0-1", "1/2")


@dataclass
class GameRecord:
    """A validated game ready for puzzle generation."""

    index: int          # 0-based position of the game in its source
    text: str           # Raw move text
    moves: List[Move]

    @property
    def full_moves(self) -> int:
        return len(self.moves) // 2


def split_games(pgn_text: str) -> List[str]:
    """
    Split PGN text into the move text of each game.

    Tag pairs and blank lines are dropped; lines are accumulated until one
    contains a game result. Trailing text without a result is ignored.
    """
    games = []
    lines: List[str] = []

    for line in pgn_text.splitlines():
        line = line.strip()
        if not line or line.startswith("["):
            continue
        lines.append(line)
        if any(marker in line for marker in GAME_END_MARKERS):
            games.append(" ".join(lines))
            lines = []

    if lines:
        logger.debug(f"Ignoring {len(lines)} trailing line(s) without a result")
    return games


def read_games(path: Union[str, Path]) -> List[str]:
    """Read a PGN file and return the move text of each game."""
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    games = split_games(text)
    logger.info(f"Read {len(games)} game(s) from {path}")
    return games


def filter_games(games: List[str], validator: Optional[NotationValidator] = None,
                 min_full_moves: int = 15) -> List[GameRecord]:
    """Validate games and keep those with at least ``min_full_moves`` full moves."""
    validator = validator or NotationValidator()
    records = []

    for index, text in enumerate(games):
        try:
            moves = validator.validate(text)
        except NotationError as e:
            logger.warning(f"Dropping game {index + 1}: {e}")
            continue

        record = GameRecord(index=index, text=text, moves=moves)
        if record.full_moves < min_full_moves:
            logger.info(
                f"Dropping game {index + 1}: {record.full_moves} full moves, "
                f"fewer than {min_full_moves}"
            )
            continue
        records.append(record)

    logger.info(f"Validated {len(records)} of {len(games)} game(s)")
    return records


def load_games(path: Union[str, Path], validator: Optional[NotationValidator] = None,
               min_full_moves: int = 15) -> List[GameRecord]:
    """Read, validate and filter the games of a PGN file."""
    return filter_games(read_games(path), validator, min_full_moves)
