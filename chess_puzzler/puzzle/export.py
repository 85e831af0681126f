"""Serialization of generated puzzles."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence, Union

from ..core.models import Puzzle

logger = logging.getLogger(__name__)

FORMATS = ("text", "json")


def format_puzzles(puzzles: Sequence[Puzzle], fmt: str = "text") -> str:
    """
    Render puzzles as text.

    ``text`` gives one ``level|start|moves`` line per puzzle, ``json`` a JSON array.
    """
    if fmt == "text":
        return "".join(f"{puzzle}\n" for puzzle in puzzles)
    if fmt == "json":
        return json.dumps([puzzle.to_dict() for puzzle in puzzles], indent=2) + "\n"
    raise ValueError(f"Unsupported output format: {fmt}")


def write_puzzles(puzzles: Sequence[Puzzle], path: Union[str, Path], fmt: str = "text") -> Path:
    """Write puzzles to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_puzzles(puzzles, fmt), encoding="utf-8")
    logger.info(f"Wrote {len(puzzles)} puzzle(s) to {path}")
    return path
