"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessbattle.core.enums import Color, PieceType

# Lowercase letter ↔ piece type; letter case encodes color in FEN.
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_LETTER_TYPES: dict[str, PieceType] = {v: k for k, v in PIECE_LETTERS.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable colored piece. An empty square holds ``None`` instead."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN letter (uppercase = white, lowercase = black)."""
        letter = PIECE_LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create a piece from its FEN letter, e.g. 'N' → white knight."""
        ptype = _LETTER_TYPES.get(char.lower()) if len(char) == 1 else None
        if ptype is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(Color.WHITE if char.isupper() else Color.BLACK, ptype)

    def promoted(self, piece_type: PieceType) -> Piece:
        """Same-colored piece of *piece_type*."""
        return Piece(self.color, piece_type)
