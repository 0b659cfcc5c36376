"""Notation package: FEN and move-text parsing and serialization."""

from chessbattle.core.notation.fen import (
    STARTING_FEN,
    position_from_fen,
    position_to_fen,
)
from chessbattle.core.notation.uci import find_legal_move, moves_to_uci

__all__ = [
    "STARTING_FEN",
    "find_legal_move",
    "moves_to_uci",
    "position_from_fen",
    "position_to_fen",
]
