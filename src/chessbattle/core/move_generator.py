"""Legal and pseudo-legal move generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessbattle.core.attacks import (
    BISHOP_RAYS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    QUEEN_RAYS,
    ROOK_RAYS,
    is_king_in_check,
    is_square_attacked,
)
from chessbattle.core.enums import CastlingRights, Color, PieceType
from chessbattle.core.move import PROMOTION_TYPES, Move
from chessbattle.core.types import Square

if TYPE_CHECKING:
    from chessbattle.core.position import Position


_PAWN_PUSH: tuple[int, int] = (8, -8)
_PAWN_START_RANK: tuple[int, int] = (1, 6)
_PAWN_PROMOTION_RANK: tuple[int, int] = (6, 1)  # rank a promoting pawn leaves
# Capture steps per color, (file delta, square delta).
_PAWN_CAPTURES: tuple[tuple[tuple[int, int], ...], ...] = (
    ((-1, 7), (1, 9)),
    ((-1, -9), (1, -7)),
)

_KINGSIDE: tuple[CastlingRights, CastlingRights] = (
    CastlingRights.WHITE_KINGSIDE,
    CastlingRights.BLACK_KINGSIDE,
)
_QUEENSIDE: tuple[CastlingRights, CastlingRights] = (
    CastlingRights.WHITE_QUEENSIDE,
    CastlingRights.BLACK_QUEENSIDE,
)


class MoveGenerator:
    """Generates moves for the side to move of a :class:`Position`.

    The caller's position is never modified: legality filtering plays each
    candidate on a private working copy and takes it back again.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        moving_color = self._pos.side_to_move
        work = self._pos.copy()
        legal: list[Move] = []

        for move in self.generate_pseudo_legal_moves():
            work.make_move(move)
            if not is_king_in_check(work.board, moving_color):
                legal.append(move)
            work.unmake_move(move)
        return legal

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move

        for sq in self._board.all_pieces(color):
            piece = self._board[sq]
            assert piece is not None
            ptype = piece.piece_type
            if ptype == PieceType.PAWN:
                self._gen_pawn(sq, color, moves)
            elif ptype == PieceType.KNIGHT:
                self._gen_steps(sq, color, KNIGHT_TARGETS[sq], moves)
            elif ptype == PieceType.BISHOP:
                self._gen_sliding(sq, color, BISHOP_RAYS[sq], moves)
            elif ptype == PieceType.ROOK:
                self._gen_sliding(sq, color, ROOK_RAYS[sq], moves)
            elif ptype == PieceType.QUEEN:
                self._gen_sliding(sq, color, QUEEN_RAYS[sq], moves)
            elif ptype == PieceType.KING:
                self._gen_steps(sq, color, KING_TARGETS[sq], moves)
                self._gen_castling(sq, color, moves)

        return moves

    def has_legal_moves(self) -> bool:
        """Whether the side to move has at least one legal move."""
        return bool(self.generate_legal_moves())

    # -- Check status -------------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return is_king_in_check(self._board, color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return is_square_attacked(self._board, sq, by_color)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        color_idx = int(color)
        file_idx = sq & 7
        rank_idx = sq >> 3
        promotes = rank_idx == _PAWN_PROMOTION_RANK[color_idx]

        one_step = sq + _PAWN_PUSH[color_idx]
        if 0 <= one_step < 64 and board[one_step] is None:
            self._add_pawn_move(sq, one_step, promotes, moves)
            if rank_idx == _PAWN_START_RANK[color_idx]:
                two_step = one_step + _PAWN_PUSH[color_idx]
                if board[two_step] is None:
                    moves.append(Move(sq, two_step))

        for file_delta, sq_delta in _PAWN_CAPTURES[color_idx]:
            if not 0 <= file_idx + file_delta < 8:
                continue
            cap_sq = sq + sq_delta
            if not 0 <= cap_sq < 64:
                continue
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, promotes, moves)
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq))

    @staticmethod
    def _add_pawn_move(
        from_sq: Square, to_sq: Square, promotes: bool, moves: list[Move]
    ) -> None:
        if promotes:
            for pt in PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, pt))
        else:
            moves.append(Move(from_sq, to_sq))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        color_idx = int(color)
        offset = 0 if color == Color.WHITE else 56
        if king_sq != offset + 4:
            return
        if not self._pos.castling & (_KINGSIDE[color_idx] | _QUEENSIDE[color_idx]):
            return

        opponent = color.opposite
        if is_square_attacked(self._board, king_sq, opponent):
            return

        # Destination safety is also enforced by the legality filter.
        if self._pos.castling & _KINGSIDE[color_idx]:
            if self._castle_path_ok(
                color,
                rook_sq=offset + 7,
                empty=(offset + 5, offset + 6),
                safe=(offset + 5, offset + 6),
            ):
                moves.append(Move(king_sq, offset + 6))

        if self._pos.castling & _QUEENSIDE[color_idx]:
            if self._castle_path_ok(
                color,
                rook_sq=offset,
                empty=(offset + 1, offset + 2, offset + 3),
                safe=(offset + 3, offset + 2),
            ):
                moves.append(Move(king_sq, offset + 2))

    def _castle_path_ok(
        self,
        color: Color,
        *,
        rook_sq: Square,
        empty: tuple[Square, ...],
        safe: tuple[Square, ...],
    ) -> bool:
        board = self._board
        rook = board[rook_sq]
        if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
            return False
        if any(board[sq] is not None for sq in empty):
            return False
        opponent = color.opposite
        return not any(is_square_attacked(board, sq, opponent) for sq in safe)
