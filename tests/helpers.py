"""Shared fixtures for the puzzle tests: a sample game and a deterministic engine."""

import chess

from chess_puzzler.core.engine import EngineError
from chess_puzzler.core.models import Evaluation

PIECE_VALUES = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0,
}


def board_for(position) -> chess.Board:
    if isinstance(position, str):
        return chess.Board(position)
    board = chess.Board()
    for move in position:
        board.push_uci(str(move))
    return board


def material(board: chess.Board) -> float:
    score = 0
    for piece in board.piece_map().values():
        value = PIECE_VALUES[piece.piece_type]
        score += value if piece.color == chess.WHITE else -value
    return float(score)


class FakeEngine:
    """
    Evaluates by material balance and always plays the first legal move in
    coordinate order. Every call is recorded in ``calls``.
    """

    def __init__(self):
        self.calls = []

    def new_game(self) -> None:
        self.calls.append(("new_game",))

    def evaluate(self, position) -> Evaluation:
        board = board_for(position)
        self.calls.append(("evaluate", board.fen()))
        if board.is_check():
            return Evaluation.in_check()
        return Evaluation.score_of(material(board))

    def best_move(self, position, depth: int) -> str:
        board = board_for(position)
        self.calls.append(("best_move", board.fen(), depth))
        moves = sorted(move.uci() for move in board.legal_moves)
        if not moves:
            raise EngineError("Engine has no move in a finished position")
        return moves[0]

    def close(self) -> None:
        self.calls.append(("close",))

    def kill(self) -> None:
        self.calls.append(("kill",))


# Morphy vs. Duke Karl / Count Isouard, Paris 1858
OPERA_GAME = (
    "1. e4 e5 2. Nf3 d6 3. d4 Bg4 4. dxe5 Bxf3 5. Qxf3 dxe5 6. Bc4 Nf6 "
    "7. Qb3 Qe7 8. Nc3 c6 9. Bg5 b5 10. Nxb5 cxb5 11. Bxb5+ Nbd7 "
    "12. O-O-O Rd8 13. Rxd7 Rxd7 14. Rd1 Qe6 15. Bxd7+ Nxd7 16. Qb8+ Nxb8 "
    "17. Rd8# 1-0"
)
