"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessbattle.core.enums import Color, GameEndReason, GameResult, PieceType
from chessbattle.core.move_generator import MoveGenerator
from chessbattle.core.types import file_of, rank_of

if TYPE_CHECKING:
    from chessbattle.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Product policy:
    # - Claim-based draws: 50-move rule, threefold repetition.
    # - Automatic draws: stalemate, insufficient material, 75-move rule,
    #   fivefold repetition.

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move) and not gen.has_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return not gen.is_in_check(position.side_to_move) and not gen.has_legal_moves()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        board = position.board
        occupied = board.all_pieces_bitboard(Color.WHITE) | board.all_pieces_bitboard(
            Color.BLACK
        )
        total = occupied.bit_count()

        if total == 2:
            return True

        if total == 3:
            return any(
                board.has_piece(color, ptype)
                for color in Color
                for ptype in (PieceType.KNIGHT, PieceType.BISHOP)
            )

        if total == 4:
            white_bishops = board.pieces(Color.WHITE, PieceType.BISHOP)
            black_bishops = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(white_bishops) == 1 and len(black_bishops) == 1:
                w_sq, b_sq = white_bishops[0], black_bishops[0]
                return (file_of(w_sq) + rank_of(w_sq)) % 2 == (
                    file_of(b_sq) + rank_of(b_sq)
                ) % 2

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def is_seventy_five_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 150

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= 3

    @staticmethod
    def is_fivefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= 5

    @staticmethod
    def is_claimable_draw(position: Position) -> bool:
        """Whether the side to move may claim an immediate draw by rule."""
        return Rules.is_fifty_move_rule(position) or Rules.is_threefold_repetition(
            position
        )

    @staticmethod
    def is_automatic_draw(position: Position) -> bool:
        """Whether the position is drawn without a player claim (stalemate aside)."""
        return (
            Rules.is_insufficient_material(position)
            or Rules.is_seventy_five_move_rule(position)
            or Rules.is_fivefold_repetition(position)
        )

    @staticmethod
    def end_reason(position: Position) -> GameEndReason | None:
        """Why the game is over in *position*, or ``None`` if it continues."""
        gen = MoveGenerator(position)
        if not gen.has_legal_moves():
            if gen.is_in_check(position.side_to_move):
                return GameEndReason.CHECKMATE
            return GameEndReason.STALEMATE
        if Rules.is_insufficient_material(position):
            return GameEndReason.INSUFFICIENT_MATERIAL
        if Rules.is_seventy_five_move_rule(position):
            return GameEndReason.SEVENTY_FIVE_MOVES
        if Rules.is_fivefold_repetition(position):
            return GameEndReason.FIVEFOLD_REPETITION
        return None

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Determine the current game result."""
        reason = Rules.end_reason(position)
        if reason is None:
            return GameResult.IN_PROGRESS
        if reason == GameEndReason.CHECKMATE:
            return (
                GameResult.BLACK_WINS
                if position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        return GameResult.DRAW
