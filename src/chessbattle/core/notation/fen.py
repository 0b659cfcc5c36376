"""FEN parsing and serialization."""

from __future__ import annotations

from chessbattle.core.board import Board
from chessbattle.core.enums import CastlingRights, Color
from chessbattle.core.exceptions import FenFormatError
from chessbattle.core.piece import Piece
from chessbattle.core.position import Position
from chessbattle.core.types import (
    Square,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    The half-move clock and full-move number are optional and default to
    ``0`` and ``1``.

    Raises:
        FenFormatError: If any field is malformed. No partial position is
            returned.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise FenFormatError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    board = _parse_placement(placement, fen)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise FenFormatError(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = _parse_castling(castling_part)
    ep = _parse_en_passant(ep_part, side)

    halfmove = _parse_counter(parts, 4, default=0, minimum=0, name="halfmove clock")
    fullmove = _parse_counter(parts, 5, default=1, minimum=1, name="fullmove number")

    return Position(board, side, castling, ep, halfmove, fullmove)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to six-field FEN."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)

    side_str = "w" if pos.side_to_move == Color.WHITE else "b"
    castling_str = (
        "".join(ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right)
        or "-"
    )
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return (
        f"{'/'.join(rows)} {side_str} {castling_str} {ep_str} "
        f"{pos.halfmove_clock} {pos.fullmove_number}"
    )


# ── Field parsers ───────────────────────────────────────────────────────────


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FenFormatError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")

    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if "0" <= ch <= "9":
                step = int(ch)
                if not (1 <= step <= 8):
                    raise FenFormatError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise FenFormatError(f"Invalid FEN rank width: {fen!r}")
                try:
                    piece = Piece.from_char(ch)
                except ValueError:
                    raise FenFormatError(
                        f"Invalid FEN piece character {ch!r}: {fen!r}"
                    ) from None
                board[make_square(file, rank)] = piece
                file += 1
            if file > 8:
                raise FenFormatError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise FenFormatError(f"Invalid FEN rank width: {fen!r}")
    return board


def _parse_castling(castling_part: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if castling_part == "-":
        return castling
    for ch in castling_part:
        right = _CASTLING_CHARS.get(ch)
        if right is None or castling & right:
            raise FenFormatError(f"Invalid FEN castling field: {castling_part!r}")
        castling |= right
    return castling


def _parse_en_passant(ep_part: str, side: Color) -> Square | None:
    if ep_part == "-":
        return None
    try:
        ep = parse_square(ep_part)
    except ValueError:
        raise FenFormatError(f"Invalid FEN en-passant square: {ep_part!r}") from None
    # White to move captures onto rank 6, black onto rank 3.
    expected_rank = 5 if side == Color.WHITE else 2
    if rank_of(ep) != expected_rank:
        raise FenFormatError(
            f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
        )
    return ep


def _parse_counter(
    parts: list[str], index: int, *, default: int, minimum: int, name: str
) -> int:
    if len(parts) <= index:
        return default
    text = parts[index]
    if not (text.isascii() and text.isdigit()):
        raise FenFormatError(f"Invalid FEN {name}: {text!r}")
    value = int(text)
    if value < minimum:
        raise FenFormatError(f"Invalid FEN {name}: {parts[index]!r}")
    return value
