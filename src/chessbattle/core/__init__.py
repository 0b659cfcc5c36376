"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessbattle.core import MoveGenerator, STARTING_FEN, position_from_fen

    pos = position_from_fen(STARTING_FEN)
    for move in MoveGenerator(pos).generate_legal_moves():
        print(move)
"""

from chessbattle.core.attacks import is_king_in_check, is_square_attacked
from chessbattle.core.board import Board
from chessbattle.core.enums import (
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    PieceType,
)
from chessbattle.core.exceptions import ChessError, FenFormatError, IllegalMoveError
from chessbattle.core.move import PROMOTION_TYPES, Move
from chessbattle.core.move_generator import MoveGenerator
from chessbattle.core.notation import (
    STARTING_FEN,
    find_legal_move,
    moves_to_uci,
    position_from_fen,
    position_to_fen,
)
from chessbattle.core.piece import Piece
from chessbattle.core.position import Position
from chessbattle.core.rules import Rules
from chessbattle.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameEndReason",
    "GameResult",
    "PieceType",
    # Errors
    "ChessError",
    "FenFormatError",
    "IllegalMoveError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "PROMOTION_TYPES",
    "Piece",
    "Position",
    "Rules",
    # Attack detection
    "is_king_in_check",
    "is_square_attacked",
    # Notation
    "STARTING_FEN",
    "find_legal_move",
    "moves_to_uci",
    "position_from_fen",
    "position_to_fen",
]
