"""Position keys for repetition detection.

Keys follow the Polyglot layout: one random number per (piece, square), one
per castling right, one per en-passant file and one for the side to move.

Two positions repeat when the same side is to move with the same placement,
the same castling rights and the same en-passant *possibilities*. An
en-passant square therefore only enters the key when a pawn of the side to
move stands beside the pawn that just advanced two squares; otherwise the
position compares equal to the same placement without it.
"""

from __future__ import annotations

import random
from typing import Final

from chessbattle.core.board import Board
from chessbattle.core.enums import CastlingRights, Color, PieceType
from chessbattle.core.piece import Piece
from chessbattle.core.types import Square, file_of, make_square, rank_of

# Fixed seed: keys must be stable across processes.
_rng = random.Random(0x5EC7B0A4)


def _draw() -> int:
    return _rng.getrandbits(64)


# [color][piece_type-1][square]
_PIECE_KEYS: Final = tuple(
    tuple(tuple(_draw() for _ in range(64)) for _ in PieceType) for _ in Color
)
_CASTLING_KEYS: Final = {
    right: _draw()
    for right in (
        CastlingRights.WHITE_KINGSIDE,
        CastlingRights.WHITE_QUEENSIDE,
        CastlingRights.BLACK_KINGSIDE,
        CastlingRights.BLACK_QUEENSIDE,
    )
}
_EN_PASSANT_FILE_KEYS: Final = tuple(_draw() for _ in range(8))
_BLACK_TO_MOVE_KEY: Final = _draw()

del _rng


def piece_key(piece: Piece, sq: Square) -> int:
    return _PIECE_KEYS[piece.color][piece.piece_type - 1][sq]


def side_to_move_key() -> int:
    """Toggled whenever the side to move changes."""
    return _BLACK_TO_MOVE_KEY


def castling_key(castling: CastlingRights) -> int:
    key = 0
    for right, right_key in _CASTLING_KEYS.items():
        if castling & right:
            key ^= right_key
    return key


def can_capture_en_passant(
    board: Board, ep_square: Square | None, side_to_move: Color
) -> bool:
    """Whether a pawn of *side_to_move* stands ready to capture on *ep_square*.

    Pins are not considered.
    """
    if ep_square is None:
        return False
    # The capturing pawn sits on the rank the enemy pawn landed on.
    capture_rank = rank_of(ep_square) + (-1 if side_to_move == Color.WHITE else 1)
    if not 0 <= capture_rank < 8:
        return False
    pawn = Piece(side_to_move, PieceType.PAWN)
    ep_file = file_of(ep_square)
    return any(
        0 <= f < 8 and board[make_square(f, capture_rank)] == pawn
        for f in (ep_file - 1, ep_file + 1)
    )


def en_passant_key(
    board: Board, ep_square: Square | None, side_to_move: Color
) -> int:
    """Key of the en-passant file, or 0 when no capture is possible there."""
    if ep_square is None:
        return 0
    if not can_capture_en_passant(board, ep_square, side_to_move):
        return 0
    return _EN_PASSANT_FILE_KEYS[file_of(ep_square)]


def placement_key(
    board: Board, side_to_move: Color, castling: CastlingRights
) -> int:
    """Key of everything except the en-passant square."""
    key = castling_key(castling)
    if side_to_move == Color.BLACK:
        key ^= _BLACK_TO_MOVE_KEY
    for sq, piece in board.items():
        if piece is not None:
            key ^= piece_key(piece, sq)
    return key
