"""Position — complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from chessbattle.core.board import Board
from chessbattle.core.enums import CastlingRights, Color, PieceType
from chessbattle.core.move import Move
from chessbattle.core.piece import Piece
from chessbattle.core.types import (
    A1,
    A8,
    H1,
    H8,
    Square,
    file_of,
    make_square,
    rank_of,
)
from chessbattle.core.zobrist import (
    castling_key,
    en_passant_key,
    piece_key,
    placement_key,
    side_to_move_key,
)

# Rook corner → castling right lost when anything moves from or onto it.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    H8: CastlingRights.BLACK_KINGSIDE,
}
_KING_RIGHTS: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_BOTH,
    Color.BLACK: CastlingRights.BLACK_BOTH,
}


@dataclass(slots=True)
class _UndoRecord:
    """Everything :meth:`Position.make_move` destroys."""

    moved_piece: Piece
    captured_piece: Piece | None
    capture_sq: Square
    rook_from: Square | None
    rook_to: Square | None
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    zobrist_hash: int


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    All mutation goes through :meth:`make_move` / :meth:`unmake_move`, which
    keep an undo stack (Command pattern). Neither validates legality; use
    :class:`~chessbattle.core.move_generator.MoveGenerator` for that.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_zobrist_hash",
        "_history",
        "_key_stack",
        "_key_counts",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        # Placement, castling and side; the en-passant part is added per key.
        self._zobrist_hash = placement_key(self.board, side_to_move, castling)
        self._history: list[_UndoRecord] = []
        key = self._repetition_key()
        self._key_stack: list[int] = [key]
        self._key_counts: dict[int, int] = {key: 1}

    @classmethod
    def initial(cls) -> Position:
        """The standard starting position."""
        return cls()

    # ── Square access ────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.board[sq]

    def set_piece_at(self, sq: Square, piece: Piece | None) -> None:
        """Place *piece* (or clear with ``None``) outside of move flow.

        Intended for setting up positions; hashes are kept in sync.
        """
        old = self.board[sq]
        if old is not None:
            self._toggle_piece_hash(old, sq)
        self.board[sq] = piece
        if piece is not None:
            self._toggle_piece_hash(piece, sq)
        self._reset_history()

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move* in place, pushing an undo record.

        Raises:
            ValueError: If the origin square is empty.
        """
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        captured = board[move.to_sq]
        capture_sq = move.to_sq
        is_pawn = piece.piece_type == PieceType.PAWN

        # En passant: the captured pawn sits behind the target square
        if is_pawn and move.to_sq == self.en_passant:
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            captured = board[capture_sq]

        rook_from: Square | None = None
        rook_to: Square | None = None
        if piece.piece_type == PieceType.KING:
            to_file = file_of(move.to_sq)
            if abs(to_file - file_of(move.from_sq)) == 2:
                home_rank = rank_of(move.from_sq)
                if to_file == 6:
                    rook_from = make_square(7, home_rank)
                    rook_to = make_square(5, home_rank)
                elif to_file == 2:
                    rook_from = make_square(0, home_rank)
                    rook_to = make_square(3, home_rank)

        self._history.append(
            _UndoRecord(
                moved_piece=piece,
                captured_piece=captured,
                capture_sq=capture_sq,
                rook_from=rook_from,
                rook_to=rook_to,
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                zobrist_hash=self._zobrist_hash,
            )
        )

        if captured is not None:
            self._toggle_piece_hash(captured, capture_sq)
            board[capture_sq] = None

        if rook_from is not None and rook_to is not None:
            rook = board[rook_from]
            if rook is not None:
                self._toggle_piece_hash(rook, rook_from)
                board[rook_from] = None
                board[rook_to] = rook
                self._toggle_piece_hash(rook, rook_to)

        placed = piece if move.promotion is None else piece.promoted(move.promotion)
        self._toggle_piece_hash(piece, move.from_sq)
        board[move.from_sq] = None
        board[move.to_sq] = placed
        self._toggle_piece_hash(placed, move.to_sq)

        # En passant target for the opponent
        next_en_passant: Square | None = None
        if is_pawn and abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2:
            next_en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        self.en_passant = next_en_passant

        self._update_castling(move, piece)

        if is_pawn or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._zobrist_hash ^= side_to_move_key()
        key = self._repetition_key()
        self._key_stack.append(key)
        self._key_counts[key] = self._key_counts.get(key, 0) + 1

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move` of *move*.

        Raises:
            IndexError: If there is nothing to undo.
        """
        record = self._history.pop()
        key = self._key_stack.pop()
        remaining = self._key_counts[key] - 1
        if remaining:
            self._key_counts[key] = remaining
        else:
            del self._key_counts[key]

        board = self.board
        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        board[move.to_sq] = None
        board[move.from_sq] = record.moved_piece
        if record.captured_piece is not None:
            board[record.capture_sq] = record.captured_piece

        if record.rook_from is not None and record.rook_to is not None:
            rook = board[record.rook_to]
            if rook is not None:
                board[record.rook_to] = None
                board[record.rook_from] = rook

        self.castling = record.castling
        self.en_passant = record.en_passant
        self.halfmove_clock = record.halfmove_clock
        self._zobrist_hash = record.zobrist_hash

    @property
    def can_unmake(self) -> bool:
        return bool(self._history)

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(self, move: Move, piece: Piece) -> None:
        next_castling = self.castling
        if piece.piece_type == PieceType.KING:
            next_castling &= ~_KING_RIGHTS[piece.color]

        for sq in (move.from_sq, move.to_sq):
            right = _ROOK_CORNERS.get(sq)
            if right is not None:
                next_castling &= ~right

        self._set_castling(next_castling)

    def _set_castling(self, castling: CastlingRights) -> None:
        if castling == self.castling:
            return
        self._zobrist_hash ^= castling_key(self.castling)
        self.castling = castling
        self._zobrist_hash ^= castling_key(self.castling)

    def _toggle_piece_hash(self, piece: Piece, sq: Square) -> None:
        self._zobrist_hash ^= piece_key(piece, sq)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent copy: same repetition history, empty undo stack."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )
        pos._key_stack = self._key_stack.copy()
        pos._key_counts = self._key_counts.copy()
        return pos

    def repetition_count(self) -> int:
        """How many times the current position occurred in the game history."""
        return self._key_counts.get(self._key_stack[-1], 0)

    @property
    def zobrist_hash(self) -> int:
        return self._key_stack[-1]

    def _reset_history(self) -> None:
        self._history.clear()
        key = self._repetition_key()
        self._key_stack = [key]
        self._key_counts = {key: 1}

    def _repetition_key(self) -> int:
        return self._zobrist_hash ^ en_passant_key(
            self.board, self.en_passant, self.side_to_move
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from chessbattle.core.notation.fen import position_to_fen

        return f"Position({position_to_fen(self)!r})"
