"""Move text in long algebraic form, checked against the legal move list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from chessbattle.core.exceptions import IllegalMoveError
from chessbattle.core.move import Move
from chessbattle.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessbattle.core.position import Position


def moves_to_uci(moves: Iterable[Move]) -> list[str]:
    """Move text for each move, order preserved."""
    return [move.uci for move in moves]


def find_legal_move(
    position: Position,
    text: str,
    legal_moves: list[Move] | None = None,
) -> Move:
    """Resolve move text to one of the legal moves of *position*.

    Args:
        position: Position the move is played in.
        text: Move text such as ``"e2e4"`` or ``"e7e8q"``.
        legal_moves: Precomputed legal moves, generated when omitted.

    Raises:
        IllegalMoveError: If *text* is malformed or not a legal move.
    """
    try:
        move = Move.from_uci(text.strip())
    except ValueError as exc:
        raise IllegalMoveError(str(exc)) from exc

    if legal_moves is None:
        legal_moves = MoveGenerator(position).generate_legal_moves()
    if move not in legal_moves:
        raise IllegalMoveError(f"Illegal move in this position: {text!r}")
    return move
