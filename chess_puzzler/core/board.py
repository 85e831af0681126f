"""
Board replay helpers built on python-chess.

python-chess is the rules oracle for the whole package: it decides whether a
coordinate move can be played, applies it, resolves SAN and renders FEN.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

import chess

from .models import Move

logger = logging.getLogger(__name__)

MoveLike = Union[Move, str]


class ConsistencyFault(RuntimeError):
    """A previously validated move could not be replayed on the board."""

    def __init__(self, move: str, index: int, moves: Sequence[MoveLike], reason: str = ""):
        self.move = move
        self.index = index
        self.moves = [str(m) for m in moves]
        detail = f": {reason}" if reason else ""
        super().__init__(f"Move {move} at index {index} cannot be replayed{detail}")


def position_id(board: chess.Board) -> str:
    """Canonical FEN of a position, en passant square only when capturable."""
    return board.fen(en_passant="legal")


def to_chess_move(board: chess.Board, move: MoveLike) -> Optional[chess.Move]:
    """Return the python-chess move if it is legal on ``board``, otherwise None."""
    try:
        candidate = chess.Move.from_uci(str(move))
    except ValueError:
        return None
    return candidate if board.is_legal(candidate) else None


def play(board: chess.Board, move: MoveLike, index: int, moves: Sequence[MoveLike]) -> None:
    """
    Apply a recorded move, raising ConsistencyFault if the board rejects it.

    Args:
        board: Board to update in place
        move: Move to apply
        index: Index of the move within ``moves``
        moves: Full move list, kept for diagnostics
    """
    chess_move = to_chess_move(board, move)
    if chess_move is None:
        logger.error(
            f"Replay rejected move {move} at index {index} in position {board.fen()}; "
            f"moves -> {[str(m) for m in moves]}"
        )
        raise ConsistencyFault(str(move), index, moves, f"illegal in {board.fen()}")
    board.push(chess_move)


def replay(moves: Sequence[MoveLike], board: Optional[chess.Board] = None) -> chess.Board:
    """Replay ``moves`` from the start position (or ``board``) and return the board."""
    board = chess.Board() if board is None else board
    for index, move in enumerate(moves):
        play(board, move, index, moves)
    return board
