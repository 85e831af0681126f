"""
Puzzle generation service.

Ties the notation validator, the shared engine and the puzzle selector
together. Generation is blocking; the async entry point runs it in a worker
thread and enforces a deadline, killing the engine when it is exceeded.
"""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from typing import Optional, Union

from ..core.engine import EngineTimeoutError, SharedEngine
from ..core.models import Config, Puzzle, PuzzleLevel
from ..core.notation import NotationValidator
from .selector import PuzzleSelector

logger = logging.getLogger(__name__)


class GameTooShortError(ValueError):
    """The game has too few moves to make a puzzle."""
    pass


class PuzzleGenerator:
    """Generates puzzles from raw move text using one shared engine."""

    def __init__(self, engine: SharedEngine, config: Optional[Config] = None,
                 selector: Optional[PuzzleSelector] = None,
                 validator: Optional[NotationValidator] = None):
        self.engine = engine
        self.config = config or Config()
        self.selector = selector or PuzzleSelector(
            scan_depth=self.config.scan_depth,
            solution_depth=self.config.solution_depth,
            rng=random.Random(self.config.seed),
        )
        self.validator = validator or NotationValidator()

    def generate(self, raw_text: str, level: Union[PuzzleLevel, str, None] = None,
                 cancelled: Optional[threading.Event] = None) -> Puzzle:
        """
        Generate a puzzle from one game's move text.

        Args:
            raw_text: Move text of a single game
            level: Puzzle level, defaults to the configured level
            cancelled: Request token checked once the engine lock is taken

        Raises:
            NotationError: If the move text is invalid
            GameTooShortError: If the game is shorter than ``config.min_game_moves``
            EngineError: If the engine fails; the session is recreated next time
            EngineTimeoutError: If ``cancelled`` was set before the engine was free
        """
        level = self._resolve_level(level)
        moves = self.validator.validate(raw_text)

        full_moves = len(moves) // 2
        if full_moves < self.config.min_game_moves:
            raise GameTooShortError(
                f"Game has {full_moves} full moves, at least "
                f"{self.config.min_game_moves} are needed"
            )

        with self.engine.acquire(cancelled) as session:
            return self.selector.select(level, moves, session)

    async def generate_async(self, raw_text: str,
                             level: Union[PuzzleLevel, str, None] = None,
                             timeout: Optional[float] = None) -> Puzzle:
        """
        Generate a puzzle without blocking the event loop.

        Args:
            raw_text: Move text of a single game
            level: Puzzle level, defaults to the configured level
            timeout: Seconds before giving up, defaults to ``config.engine_timeout``

        Raises:
            EngineTimeoutError: If the deadline passed. The engine is killed only
                if this request was using it; a request still queued is abandoned.
        """
        timeout = self.config.engine_timeout if timeout is None else timeout
        cancelled = threading.Event()
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.generate, raw_text, level, cancelled),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Puzzle generation exceeded {timeout}s")
            cancelled.set()
            self.engine.poison(cancelled)
            raise EngineTimeoutError(f"Puzzle generation timed out after {timeout}s")

    def _resolve_level(self, level: Union[PuzzleLevel, str, None]) -> PuzzleLevel:
        if level is None:
            return self.config.puzzle_level
        if isinstance(level, PuzzleLevel):
            return level
        return PuzzleLevel.from_name(level)
