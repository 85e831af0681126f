"""
Chess engine management for the puzzle generator.

This module drives a UCI engine (Stockfish) over its line protocol through
process pipes. Besides standard UCI commands it uses Stockfish's ``eval``
command for static evaluations, which is why the protocol is spoken directly
instead of through ``chess.engine``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol, Sequence, Union

from .models import Evaluation, Move

logger = logging.getLogger(__name__)

# A FEN string, or the moves played from the standard start position
Position = Union[str, Sequence[Union[Move, str]]]

READY_MARKER = "readyok"
BESTMOVE_MARKER = "bestmove"
EVAL_MARKER = "Final"
CHECK_MARKER = "in check"
QUIT_TIMEOUT = 5.0


class EngineError(Exception):
    """Custom exception for engine-related errors."""
    pass


class EngineTimeoutError(EngineError):
    """The engine did not answer before the caller's deadline."""
    pass


class PuzzleEngine(Protocol):
    """The engine capabilities the puzzle selector relies on."""

    def new_game(self) -> None: ...

    def evaluate(self, position: Position) -> Evaluation: ...

    def best_move(self, position: Position, depth: int) -> str: ...


def position_command(position: Position) -> str:
    """Build the UCI ``position`` command for a FEN or a move list."""
    if isinstance(position, str):
        return f"position fen {position}"
    moves = " ".join(str(move) for move in position)
    return f"position startpos moves {moves}" if moves else "position startpos"


class EngineSession:
    """
    Owns one engine subprocess and exposes a blocking request/response API.

    The session is half-duplex: callers must not issue overlapping requests.
    Use SharedEngine to serialize access across threads.
    """

    def __init__(self, engine_path: str):
        """
        Spawn the engine.

        Args:
            engine_path: Path to the UCI engine executable

        Raises:
            EngineError: If the process cannot be started
        """
        self.engine_path = engine_path
        try:
            self._process = subprocess.Popen(
                [engine_path],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise EngineError(f"Failed to start engine at {engine_path}: {e}") from e

        self._closed = False
        logger.info(f"Started engine: {engine_path} (pid {self._process.pid})")

    def new_game(self) -> None:
        """Discard previous search state and wait until the engine is ready."""
        self._write("ucinewgame")
        self._write("isready")
        self._read_until(READY_MARKER)

    def evaluate(self, position: Position) -> Evaluation:
        """
        Static evaluation of a position.

        Args:
            position: FEN string or moves from the start position

        Returns:
            Evaluation.in_check() when the side to move is in check, else the score

        Raises:
            EngineError: On process failure or unparseable output
        """
        self.new_game()
        self._write(position_command(position))
        self._write("eval")
        line = self._read_until(EVAL_MARKER)

        if CHECK_MARKER in line:
            return Evaluation.in_check()

        fields = line.split()
        if len(fields) < 3:
            raise EngineError(f"Missing score in evaluation line: {line!r}")
        try:
            return Evaluation.score_of(float(fields[2]))
        except ValueError as e:
            raise EngineError(f"Could not parse score {fields[2]!r}: {e}") from e

    def best_move(self, position: Position, depth: int) -> str:
        """
        Search a position to a fixed depth.

        Returns:
            The best move in coordinate notation

        Raises:
            EngineError: On process failure, missing move or ``bestmove (none)``
        """
        self.new_game()
        self._write(position_command(position))
        self._write(f"go depth {depth}")
        line = self._read_until(BESTMOVE_MARKER)

        fields = line.split()
        if len(fields) < 2:
            raise EngineError(f"Missing move in bestmove line: {line!r}")
        if fields[1] == "(none)":
            raise EngineError("Engine has no move in a finished position")
        return fields[1]

    def close(self) -> None:
        """Send ``quit`` and wait for the process; problems are logged, not raised."""
        if self._closed:
            return
        self._closed = True

        try:
            self._write("quit")
        except EngineError as e:
            logger.warning(f"Error sending quit to engine: {e}")

        try:
            self._process.wait(timeout=QUIT_TIMEOUT)
            logger.info("Engine stopped successfully")
        except subprocess.TimeoutExpired:
            logger.warning("Engine did not exit after quit, killing it")
            self._process.kill()
            self._process.wait()

    def kill(self) -> None:
        """Terminate the process at once, unblocking any pending read."""
        self._closed = True
        try:
            self._process.kill()
            self._process.wait(timeout=QUIT_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Error killing engine: {e}")
        logger.info("Engine killed")

    @property
    def is_running(self) -> bool:
        """True if the engine process has not exited."""
        return not self._closed and self._process.poll() is None

    def _write(self, command: str) -> None:
        logger.debug(f">> {command}")
        try:
            self._process.stdin.write(f"{command}\n")
            self._process.stdin.flush()
        except (OSError, ValueError) as e:
            raise EngineError(f"Failed to write {command!r} to engine: {e}") from e

    def _read_until(self, marker: str) -> str:
        """Read lines until one equals or contains ``marker`` and return it."""
        while True:
            try:
                line = self._process.stdout.readline()
            except (OSError, ValueError) as e:
                raise EngineError(f"Failed to read from engine: {e}") from e

            if not line:
                raise EngineError(f"Engine closed its output before {marker!r}")

            line = line.strip()
            if not line:
                continue
            logger.debug(f"<< {line}")
            if line == marker or marker in line:
                return line

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SharedEngine:
    """
    One lazily created EngineSession guarded by a lock.

    The lock is held for a whole puzzle run so that consecutive engine calls
    see a coherent engine state. A session that failed is discarded and a new
    one is created for the next run.

    Callers may pass a ``threading.Event`` to ``acquire`` as their request
    token. A request whose token is set before it gets the lock gives up
    without touching the engine, and ``poison(token)`` only kills the session
    while that request holds it.
    """

    def __init__(self, factory: Callable[[], EngineSession]):
        self._factory = factory
        self._run_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._session: Optional[EngineSession] = None
        self._holder: Optional[threading.Event] = None

    @classmethod
    def for_path(cls, engine_path: str) -> SharedEngine:
        return cls(lambda: EngineSession(engine_path))

    @contextmanager
    def acquire(self, cancelled: Optional[threading.Event] = None) -> Iterator[EngineSession]:
        """
        Exclusive access to the engine for the duration of the block.

        Args:
            cancelled: Request token; if set by the time the lock is taken the
                request is abandoned

        Raises:
            EngineTimeoutError: If ``cancelled`` was set while waiting for the lock
        """
        with self._run_lock:
            with self._state_lock:
                if cancelled is not None and cancelled.is_set():
                    logger.info("Request cancelled while waiting for the engine")
                    raise EngineTimeoutError("Request cancelled while waiting for the engine")
                if self._session is None:
                    self._session = self._factory()
                session = self._session
                self._holder = cancelled
            try:
                yield session
            except EngineError:
                logger.warning("Engine failed, discarding session")
                self._discard(session)
                raise
            finally:
                with self._state_lock:
                    self._holder = None

    def poison(self, owner: Optional[threading.Event] = None) -> None:
        """
        Kill the current session from any thread; the next run starts a new one.

        With ``owner`` the session is only killed while the request holding
        that token is using it; a request still waiting for the lock leaves
        the running one alone.
        """
        with self._state_lock:
            if owner is not None and self._holder is not owner:
                return
            session, self._session = self._session, None
        if session is not None:
            logger.warning("Engine session poisoned, killing process")
            session.kill()

    def close(self) -> None:
        with self._state_lock:
            session, self._session = self._session, None
        if session is not None:
            session.close()

    def _discard(self, session: EngineSession) -> None:
        with self._state_lock:
            if self._session is session:
                self._session = None
        session.kill()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def autodetect_stockfish(cli_path: Optional[str] = None) -> Optional[str]:
    """
    Auto-detect Stockfish installation path.

    Search order:
    1. Explicit CLI path argument
    2. STOCKFISH_PATH environment variable
    3. System PATH lookup
    4. Common installation directories

    Args:
        cli_path: Explicitly provided path (highest priority)

    Returns:
        Path to Stockfish executable if found, None otherwise
    """
    if cli_path and Path(cli_path).exists():
        return cli_path

    env_path = os.getenv("STOCKFISH_PATH")
    if env_path and Path(env_path).exists():
        return env_path

    which_path = shutil.which("stockfish")
    if which_path:
        return which_path

    common_paths = [
        "/usr/local/bin/stockfish",
        "/usr/bin/stockfish",
        "/usr/games/stockfish",
        "/opt/homebrew/bin/stockfish",
        "C:/Program Files/Stockfish/stockfish.exe",
    ]

    for path in common_paths:
        if Path(path).exists():
            return path

    return None


def get_friendly_stockfish_hint() -> str:
    """
    Get a user-friendly message about how to install Stockfish.

    Returns:
        Formatted installation instructions
    """
    return (
        "Stockfish not found. Install it and try again:\n"
        "• macOS:    brew install stockfish\n"
        "• Ubuntu:   sudo apt-get install stockfish\n"
        "• Windows:  choco install stockfish\n"
        "• Manual:   Download from https://stockfishchess.org/\n"
        "\nOr set environment variable: export STOCKFISH_PATH=/path/to/stockfish"
    )
