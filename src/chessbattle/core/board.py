"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from chessbattle.core.enums import Color, PieceType
from chessbattle.core.piece import Piece
from chessbattle.core.types import Square, is_valid_coords, make_square

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _check_square(sq: Square) -> None:
    if not 0 <= sq < 64:
        raise IndexError(f"Square index out of range: {sq}")


class Board:
    """Mutable 64-square placement with per-piece occupancy bitboards.

    Indexing with a square outside ``0..63`` raises :class:`IndexError`;
    :meth:`piece_at` is the forgiving coordinate lookup.
    """

    __slots__ = ("_squares", "_piece_bitboards", "_color_bitboards")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._piece_bitboards: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> bitboard of all occupied squares for that color.
        self._color_bitboards: list[int] = [0] * _COLOR_COUNT

    @staticmethod
    def _squares_from_bitboard(bitboard: int) -> list[Square]:
        squares: list[Square] = []
        while bitboard:
            lsb = bitboard & -bitboard
            squares.append(lsb.bit_length() - 1)
            bitboard ^= lsb
        return squares

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        _check_square(sq)
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        _check_square(sq)
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            old_color_idx = int(old_piece.color)
            self._piece_bitboards[old_color_idx][old_piece.piece_type - 1] &= ~mask
            self._color_bitboards[old_color_idx] &= ~mask

        self._squares[sq] = piece

        if piece is None:
            return

        color_idx = int(piece.color)
        self._piece_bitboards[color_idx][piece.piece_type - 1] |= mask
        self._color_bitboards[color_idx] |= mask

    def piece_at(self, file: int, rank: int) -> Piece | None:
        """Piece on (*file*, *rank*), or ``None`` when empty or off the board."""
        if not is_valid_coords(file, rank):
            return None
        return self._squares[make_square(file, rank)]

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def items(self) -> Iterator[tuple[Square, Piece | None]]:
        """``(square, piece)`` pairs in board order: a1, b1, ... h8."""
        return iter(enumerate(self._squares))

    def snapshot(self) -> tuple[Piece | None, ...]:
        """Read-only copy of all 64 squares in board order."""
        return tuple(self._squares)

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return self._squares_from_bitboard(self.pieces_bitboard(color, piece_type))

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._piece_bitboards[int(color)][piece_type - 1]

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return bool(self.pieces_bitboard(color, piece_type))

    def all_pieces_bitboard(self, color: Color) -> int:
        """Bitboard of all squares occupied by *color*."""
        return self._color_bitboards[int(color)]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return self._squares_from_bitboard(self.all_pieces_bitboard(color))

    def king_square(self, color: Color) -> Square | None:
        """Square of *color*'s king, or ``None`` if it has none.

        With several kings of one color the lowest square wins.
        """
        kings = self.pieces_bitboard(color, PieceType.KING)
        if not kings:
            return None
        return (kings & -kings).bit_length() - 1

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._piece_bitboards = [row.copy() for row in self._piece_bitboards]
        b._color_bitboards = self._color_bitboards.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * 64
        self._piece_bitboards = [[0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)]
        self._color_bitboards = [0] * _COLOR_COUNT

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting placement."""
        b = cls()
        for file, ptype in enumerate(_BACK_RANK):
            b[make_square(file, 0)] = Piece(Color.WHITE, ptype)
            b[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(file, 7)] = Piece(Color.BLACK, ptype)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = [str(self.piece_at(file, rank) or ".") for file in range(8)]
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
