"""Move value object and move text (``e2e4``, ``e7e8q``)."""

from __future__ import annotations

from dataclasses import dataclass

from chessbattle.core.enums import PieceType
from chessbattle.core.types import Square, parse_square, square_name

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.QUEEN: "q",
    PieceType.ROOK: "r",
    PieceType.BISHOP: "b",
    PieceType.KNIGHT: "n",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """An intended transition from one square to another.

    Special moves are not flagged: the position infers en passant and
    castling from the moving piece when the move is applied.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base

    @property
    def uci(self) -> str:
        """Long-algebraic move text."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse move text such as ``"e2e4"`` or ``"a7a8q"``.

        Raises:
            ValueError: On a malformed string or unknown promotion letter.
        """
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid move text length: {text!r}")
        from_sq = parse_square(text[0:2])
        to_sq = parse_square(text[2:4])
        promotion: PieceType | None = None
        if len(text) == 5:
            promotion = _PROMO_TYPES.get(text[4])
            if promotion is None:
                raise ValueError(f"Invalid promotion piece: {text[4]!r}")
        return cls(from_sq, to_sq, promotion)
