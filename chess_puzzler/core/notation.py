"""
Move notation validation.

Recorded games arrive as algebraic move text: SAN tokens interleaved with move
numbers, comments and result markers. The validator checks the shape of every
token, resolves short SAN against a python-chess board that replays the game,
and produces coordinate moves. All token problems are collected and reported
together so a whole game can be fixed in one pass.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import chess

from .board import to_chess_move
from .models import FILES, PROMOTION_PIECES, Move

logger = logging.getLogger(__name__)

RANKS = "12345678"
RESULT_MARKERS = {"1-0", "0-1", "1/2-1/2", "*"}
DECORATIONS = "x+#=-"

CASTLING = {
    (chess.WHITE, "O-O"): "e1g1",
    (chess.WHITE, "O-O-O"): "e1c1",
    (chess.BLACK, "O-O"): "e8g8",
    (chess.BLACK, "O-O-O"): "e8c8",
}
BAD_CASTLING = {"o-o", "o-o-o", "0-0", "0-0-0"}

_COMMENT_RE = re.compile(r"\{[^}]*\}|;[^\n]*")
_MOVE_NUMBER_RE = re.compile(r"^\d+\.+$")
_MOVE_NUMBER_PREFIX_RE = re.compile(r"^\d+\.+")
_NAG_RE = re.compile(r"^\$\d+$")


@dataclass(frozen=True)
class TokenError:
    """A single rejected token."""

    move_number: int    # 1-based position of the token in the move sequence
    token: str
    message: str

    def __str__(self) -> str:
        return f"move {self.move_number} ({self.token}): {self.message}"


class NotationError(ValueError):
    """Raised when one or more move tokens are invalid."""

    def __init__(self, errors: Sequence[TokenError]):
        self.errors = list(errors)
        lines = "\n".join(str(error) for error in self.errors)
        super().__init__(f"Invalid move notation ({len(self.errors)} problem(s)):\n{lines}")


@dataclass
class _Checked:
    """Outcome of checking one token: a coordinate move or a list of problems."""

    coordinate: Optional[str] = None
    san: Optional[str] = None
    problems: Tuple[str, ...] = ()


def tokenize(raw_text: str) -> List[str]:
    """
    Split raw move text into move tokens.

    Comments, move numbers, ellipses, NAGs and result markers are dropped;
    a move number glued to a move (``1.e4``) is stripped from it.
    """
    tokens = []
    for token in _COMMENT_RE.sub(" ", raw_text).split():
        if token == "..." or _MOVE_NUMBER_RE.match(token) or _NAG_RE.match(token):
            continue
        if token in RESULT_MARKERS:
            continue
        token = _MOVE_NUMBER_PREFIX_RE.sub("", token)
        if token:
            tokens.append(token)
    return tokens


def sanitize(token: str) -> str:
    """Strip a leading piece letter and capture/check/promotion decorations."""
    if token[:1].isupper():
        token = token[1:]
    return "".join(c for c in token if c not in DECORATIONS)


def _file_problem(c: str) -> Optional[str]:
    if c not in FILES:
        return f"file must be a character between a-h, but got {c}"
    return None


def _rank_problem(c: str) -> Optional[str]:
    if c not in RANKS:
        return f"rank must be a digit between 1-8, but got {c}"
    return None


def _promotion_problem(c: str) -> Optional[str]:
    if c.lower() not in PROMOTION_PIECES:
        return f"promotion must be one of q/r/b/n, but got {c.lower()}"
    return None


def check_coordinate(move: str) -> List[str]:
    """Positional check of a 4-5 character coordinate move."""
    if len(move) not in (4, 5):
        return [f"expected {move} to have length of 4 or 5"]

    checks = (_file_problem, _rank_problem, _file_problem, _rank_problem, _promotion_problem)
    problems = [check(c) for check, c in zip(checks, move)]
    return [p for p in problems if p]


def check_short_san(body: str) -> List[str]:
    """Shape check of a sanitized short SAN body such as ``f3``, ``bd7`` or ``ed8Q``."""
    problems = []
    if len(body) >= 3 and body[-2] in RANKS and body[-1].lower() in PROMOTION_PIECES:
        body = body[:-1]

    if not 2 <= len(body) <= 4:
        return [f"expected {body} to be a square, optionally disambiguated"]

    for c in body[:-2]:
        if c not in FILES and c not in RANKS:
            problems.append(f"disambiguation must be a file a-h or rank 1-8, but got {c}")
    problems.extend(p for p in (_file_problem(body[-2]), _rank_problem(body[-1])) if p)
    return problems


class NotationValidator:
    """Turns raw move text into a list of coordinate moves."""

    def check_token(self, token: str, side: chess.Color) -> _Checked:
        """Check one token's shape; castling is resolved from ``side``."""
        bare = token.rstrip("+#")
        if (side, bare) in CASTLING:
            return _Checked(coordinate=CASTLING[(side, bare)])
        if bare in BAD_CASTLING:
            return _Checked(problems=(f"expected O-O or O-O-O, got {token}",))

        sanitized = sanitize(token)
        if len(sanitized) in (4, 5) and sanitized[1].isdigit():
            problems = check_coordinate(sanitized)
            if problems:
                return _Checked(problems=tuple(problems))
            return _Checked(coordinate=sanitized.lower())

        if not sanitized:
            return _Checked(problems=(f"expected a move, got {token}",))
        problems = check_short_san(sanitized)
        if problems:
            return _Checked(problems=tuple(problems))
        return _Checked(san=token)

    def partition(self, raw_text: str) -> Tuple[List[Move], List[TokenError]]:
        """
        Check every token and split the outcome into moves and errors.

        Short SAN tokens are resolved against a board that replays the game.
        Coordinate moves are not legality checked; if one cannot be played the
        board stops tracking the game and later SAN tokens are unresolvable.
        """
        moves: List[Move] = []
        errors: List[TokenError] = []
        board: Optional[chess.Board] = chess.Board()
        lost_at: Optional[int] = None

        for idx, token in enumerate(tokenize(raw_text)):
            number = idx + 1
            side = chess.WHITE if idx % 2 == 0 else chess.BLACK
            checked = self.check_token(token.rstrip("!?"), side)

            for problem in checked.problems:
                errors.append(TokenError(number, token, problem))
            if checked.problems:
                board = None
                continue

            if checked.coordinate is not None:
                moves.append(Move.parse(checked.coordinate))
                if board is not None:
                    chess_move = to_chess_move(board, checked.coordinate)
                    if chess_move is None:
                        logger.debug(f"Move {number} ({token}) is not playable, board tracking stops")
                        board, lost_at = None, number
                    else:
                        board.push(chess_move)
                continue

            if board is None:
                if lost_at is not None:
                    errors.append(TokenError(
                        number, token,
                        f"cannot resolve SAN, position unknown after move {lost_at}"
                    ))
                continue

            try:
                chess_move = board.parse_san(checked.san)
            except ValueError as e:
                errors.append(TokenError(number, token, f"cannot resolve SAN: {e}"))
                board = None
                continue

            moves.append(Move.parse(chess_move.uci()))
            board.push(chess_move)

        return moves, errors

    def validate(self, raw_text: str) -> List[Move]:
        """
        Validate raw move text.

        Returns:
            The coordinate moves, White first

        Raises:
            NotationError: Listing every invalid token with its move number
        """
        moves, errors = self.partition(raw_text)
        if errors:
            raise NotationError(errors)
        logger.debug(f"Validated {len(moves)} moves")
        return moves


def validate(raw_text: str) -> List[Move]:
    """Validate raw move text with a default NotationValidator."""
    return NotationValidator().validate(raw_text)
