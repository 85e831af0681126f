"""
Blunder detection and puzzle assembly.

The selector scans a random window of a validated game. For every move in
the window it compares the engine's evaluation of the position reached by the
move actually played with the position reached by the engine's suggestion,
picks the largest swing for the hunted side, and extends that position with
the engine's principal variation as the solution.
"""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Sequence, Tuple

import chess

from ..core.board import ConsistencyFault, play, position_id, replay, to_chess_move
from ..core.engine import EngineError, PuzzleEngine
from ..core.models import Evaluation, Move, Puzzle, PuzzleCandidate, PuzzleLevel

logger = logging.getLogger(__name__)

MIN_SCAN_LENGTH = 4


def compute_delta(actual: Evaluation, best: Evaluation) -> float:
    """
    Evaluation swing between the move played and the engine's move.

    Both numeric: absolute difference. Only the best-move evaluation numeric:
    its absolute value. Otherwise the swing is unbounded.
    """
    if not actual.is_check and not best.is_check:
        return abs(actual.score - best.score)
    if not best.is_check:
        return abs(best.score)
    return math.inf


def rand_range_of_moves(length: int, rng: Optional[random.Random] = None) -> Tuple[int, int]:
    """
    Pick the scan window ``[from, to)`` for a game of ``length`` half-moves.

    ``from`` skips the first third of the game; ``to`` is drawn uniformly so
    that ``from < to <= length - 2``.

    Raises:
        ValueError: If the game is too short for a window
    """
    if length < MIN_SCAN_LENGTH:
        raise ValueError(f"Need at least {MIN_SCAN_LENGTH} moves to scan, got {length}")
    rng = rng or random
    start = length // 3
    end = rng.randrange(start + 1, length - 1)
    return start, end


def highest_delta_candidate(candidates: Sequence[PuzzleCandidate],
                            side_to_move: chess.Color) -> PuzzleCandidate:
    """Largest swing among candidates with ``side_to_move``; first one wins ties."""
    best: Optional[PuzzleCandidate] = None
    for candidate in candidates:
        if candidate.side_to_move != side_to_move:
            continue
        if best is None or candidate.delta > best.delta:
            best = candidate
    if best is None:
        raise ValueError("No candidate for the side to move")
    return best


class PuzzleSelector:
    """Finds the biggest blunder in a game and builds a puzzle around it."""

    def __init__(self, scan_depth: int = 1, solution_depth: int = 5,
                 rng: Optional[random.Random] = None):
        """
        Args:
            scan_depth: Search depth for the engine suggestion at each scanned move
            solution_depth: Search depth for each solution move
            rng: Random source for the scan window
        """
        self.scan_depth = scan_depth
        self.solution_depth = solution_depth
        self.rng = rng or random.Random()

    def select(self, level: PuzzleLevel, moves: Sequence[Move],
               engine: PuzzleEngine) -> Puzzle:
        """
        Generate a puzzle from a validated game.

        Args:
            level: Puzzle difficulty
            moves: Validated game moves, White first
            engine: Engine used for evaluations and best moves; the caller
                must hold exclusive access for the whole call

        Returns:
            The puzzle

        Raises:
            ValueError: If the game is too short to scan
            EngineError: If the engine fails or suggests an unplayable move
            ConsistencyFault: If a game move cannot be replayed
        """
        start, end = rand_range_of_moves(len(moves), self.rng)
        logger.info(f"Scanning moves {start}..{end} of {len(moves)} for a {level} puzzle")

        candidates = self.scan(moves, start, end, engine)
        hunted_side = candidates[-1].side_to_move
        chosen = highest_delta_candidate(candidates, hunted_side)
        logger.info(
            f"Blunder at move {chosen.move_index} ({chosen.move}): "
            f"played {chosen.actual_eval}, engine {chosen.best_move} -> {chosen.best_eval}, "
            f"delta {chosen.delta}"
        )

        prefix = self.prefix_to_position(moves, chosen.position_id)
        return self.finalize(level, prefix, engine)

    def scan(self, moves: Sequence[Move], start: int, end: int,
             engine: PuzzleEngine) -> List[PuzzleCandidate]:
        """Evaluate every move in ``[start, end)`` against the engine's suggestion."""
        board = replay(moves[:start])
        candidates = []

        for index in range(start, end):
            play(board, moves[index], index, moves)
            fen = position_id(board)
            actual_eval = engine.evaluate(fen)

            suggestion = engine.best_move(fen, self.scan_depth)
            suggested_board = board.copy(stack=False)
            self._play_engine_move(suggested_board, suggestion)
            best_eval = engine.evaluate(position_id(suggested_board))

            candidate = PuzzleCandidate(
                move_index=index,
                position_id=fen,
                move=str(moves[index]),
                actual_eval=actual_eval,
                best_move=suggestion,
                best_eval=best_eval,
                delta=compute_delta(actual_eval, best_eval),
                side_to_move=board.turn,
            )
            logger.debug(
                f"move {index} {candidate.move}: {actual_eval} vs "
                f"{suggestion} {best_eval} (delta {candidate.delta})"
            )
            candidates.append(candidate)

        return candidates

    def prefix_to_position(self, moves: Sequence[Move], fen: str) -> List[Move]:
        """Game moves up to and including the first one that reaches ``fen``."""
        board = chess.Board()
        for index, move in enumerate(moves):
            play(board, move, index, moves)
            if position_id(board) == fen:
                return list(moves[:index + 1])
        raise ConsistencyFault(str(moves[-1]), len(moves) - 1, moves,
                               f"position {fen} is never reached")

    def finalize(self, level: PuzzleLevel, prefix: Sequence[Move],
                 engine: PuzzleEngine) -> Puzzle:
        """Append the engine's continuation to ``prefix`` and build the puzzle."""
        board = replay(prefix)
        notation = list(prefix)

        for _ in range(level.solution_length):
            if board.is_checkmate() or board.is_stalemate():
                logger.info("Game over before the full solution length")
                break
            suggestion = engine.best_move(position_id(board), self.solution_depth)
            chess_move = self._play_engine_move(board, suggestion)
            notation.append(Move.parse(chess_move.uci()))

        blunder_index = len(prefix) - 1
        start_index = blunder_index - 1
        return Puzzle(
            level=level,
            start_position=str(notation[start_index]),
            start_index=start_index,
            blunder_index=blunder_index,
            moves=notation,
        )

    @staticmethod
    def _play_engine_move(board: chess.Board, suggestion: str) -> chess.Move:
        chess_move = to_chess_move(board, suggestion)
        if chess_move is None:
            raise EngineError(f"Engine suggested unplayable move {suggestion!r} in {board.fen()}")
        board.push(chess_move)
        return chess_move
