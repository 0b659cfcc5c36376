"""Tests for Position make/unmake."""

import pytest

from chessbattle.core.enums import CastlingRights, Color, PieceType
from chessbattle.core.move import Move
from chessbattle.core.move_generator import MoveGenerator
from chessbattle.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessbattle.core.piece import Piece
from chessbattle.core.position import Position
from chessbattle.core.types import (
    A1, B1, C1, D1, D5, D6, D7, E1, E2, E3, E4, E5, E7, E8, F1, F3, F6, G1,
    G8, H1, H8,
)

CASTLING_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"


class TestMakeUnmake:
    def test_side_switches(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.side_to_move == Color.BLACK

    def test_unmake_restores_side(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        move = Move(E2, E4)
        pos.make_move(move)
        pos.unmake_move(move)
        assert pos.side_to_move == Color.WHITE

    def test_unmake_restores_fen(self) -> None:
        """After make+unmake of every legal move, FEN must match the starting one."""
        pos = position_from_fen(STARTING_FEN)
        fen_before = position_to_fen(pos)
        for move in MoveGenerator(pos).generate_legal_moves():
            pos.make_move(move)
            pos.unmake_move(move)
            assert position_to_fen(pos) == fen_before, f"Failed for {move}"

    def test_unmake_restores_hash(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        key_before = pos.zobrist_hash
        move = Move(E1, G1)
        pos.make_move(move)
        assert pos.zobrist_hash != key_before
        pos.unmake_move(move)
        assert pos.zobrist_hash == key_before

    def test_empty_origin_raises(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(ValueError, match="No piece"):
            pos.make_move(Move(E4, E5))

    def test_unmake_without_history_raises(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert not pos.can_unmake
        with pytest.raises(IndexError):
            pos.unmake_move(Move(E2, E4))

    def test_capture_restores_piece(self) -> None:
        fen = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2"
        pos = position_from_fen(fen)
        capture = Move(E4, D5)
        pos.make_move(capture)
        assert pos.board[D5] == Piece(Color.WHITE, PieceType.PAWN)
        pos.unmake_move(capture)
        assert position_to_fen(pos) == fen


class TestEnPassant:
    def test_double_push_sets_target(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.en_passant == E3

    def test_next_double_push_replaces_target(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        pos.make_move(Move(D7, D5))
        assert pos.en_passant == D6

    def test_single_push_clears_target(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        pos.make_move(Move(D7, D6))
        assert pos.en_passant is None

    def test_capture_removes_passed_pawn(self) -> None:
        fen = "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 3"
        pos = position_from_fen(fen)
        move = Move(E5, D6)
        pos.make_move(move)
        assert pos.board[D6] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.board[D5] is None
        assert pos.board[E5] is None
        assert pos.halfmove_clock == 0

        pos.unmake_move(move)
        assert position_to_fen(pos) == fen


class TestCastling:
    def test_kingside_moves_rook(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.make_move(Move(E1, G1))
        assert pos.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[H1] is None
        assert pos.board[E1] is None

    def test_queenside_moves_rook(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.make_move(Move(E1, C1))
        assert pos.board[C1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[D1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[A1] is None
        assert pos.board[B1] is None

    def test_black_kingside(self) -> None:
        fen = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R b KQkq - 0 1"
        pos = position_from_fen(fen)
        move = Move(E8, G8)
        pos.make_move(move)
        assert pos.board[G8] == Piece(Color.BLACK, PieceType.KING)
        assert pos.board[H8] is None
        assert pos.castling == CastlingRights.WHITE_BOTH
        pos.unmake_move(move)
        assert position_to_fen(pos) == fen


class TestCastlingRightsUpdate:
    def test_king_move_removes_rights(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.make_move(Move(E1, F1))
        assert not (pos.castling & CastlingRights.WHITE_BOTH)
        assert pos.castling & CastlingRights.BLACK_BOTH == CastlingRights.BLACK_BOTH

    def test_rook_move_removes_one_right(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.make_move(Move(A1, B1))
        assert not (pos.castling & CastlingRights.WHITE_QUEENSIDE)
        assert pos.castling & CastlingRights.WHITE_KINGSIDE

    def test_rook_captured_on_corner_removes_right(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        pos.make_move(Move(H1, H8))
        assert not (pos.castling & CastlingRights.BLACK_KINGSIDE)
        assert not (pos.castling & CastlingRights.WHITE_KINGSIDE)
        assert pos.castling & CastlingRights.BLACK_QUEENSIDE

    def test_unrelated_move_keeps_rights(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.castling == CastlingRights.ALL


class TestPromotion:
    def test_promote_to_queen(self) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/4k3/4K3 w - - 0 1")
        pos.make_move(Move(E7, E8, PieceType.QUEEN))
        assert pos.board[E8] == Piece(Color.WHITE, PieceType.QUEEN)
        assert pos.board[E7] is None

    def test_underpromotion(self) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/4k3/4K3 w - - 0 1")
        pos.make_move(Move(E7, E8, PieceType.KNIGHT))
        assert pos.board[E8] == Piece(Color.WHITE, PieceType.KNIGHT)

    def test_promote_unmake_restores_pawn(self) -> None:
        fen = "8/4P3/8/8/8/8/4k3/4K3 w - - 0 1"
        pos = position_from_fen(fen)
        move = Move(E7, E8, PieceType.QUEEN)
        pos.make_move(move)
        pos.unmake_move(move)
        assert position_to_fen(pos) == fen


class TestCounters:
    def test_quiet_piece_move_increments_halfmove_clock(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(G1, F3))
        assert pos.halfmove_clock == 1
        assert pos.fullmove_number == 1

    def test_pawn_move_resets_halfmove_clock(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 12 30")
        pos.make_move(Move(E2, E4))
        assert pos.halfmove_clock == 0

    def test_fullmove_increments_after_black(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.fullmove_number == 1
        pos.make_move(Move(E7, E5))
        assert pos.fullmove_number == 2

    def test_counters_restored_on_unmake(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 7 40")
        move = Move(H1, H8)
        pos.make_move(move)
        pos.make_move(Move(E8, D7))
        assert pos.halfmove_clock == 9
        assert pos.fullmove_number == 41
        pos.unmake_move(Move(E8, D7))
        pos.unmake_move(move)
        assert pos.halfmove_clock == 7
        assert pos.fullmove_number == 40


class TestRepetitionAndCopy:
    def test_knight_shuffle_repeats(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        shuffle = [
            Move(G1, F3), Move(G8, F6),  # Nf3 Nf6
            Move(F3, G1), Move(F6, G8),  # Ng1 Ng8
        ]
        assert pos.repetition_count() == 1
        for move in shuffle:
            pos.make_move(move)
        assert pos.repetition_count() == 2
        for move in shuffle:
            pos.make_move(move)
        assert pos.repetition_count() == 3

    def test_copy_is_independent(self) -> None:
        pos = Position.initial()
        clone = pos.copy()
        clone.make_move(Move(E2, E4))
        assert pos.board[E2] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.side_to_move == Color.WHITE
        assert clone != pos

    def test_copy_keeps_repetition_history(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(G1, F3))
        clone = pos.copy()
        assert clone == pos
        assert clone.zobrist_hash == pos.zobrist_hash
        assert not clone.can_unmake

    def test_set_piece_at_updates_hash(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        pos.set_piece_at(D1, Piece(Color.WHITE, PieceType.QUEEN))
        assert pos == position_from_fen("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
        assert pos.zobrist_hash == position_from_fen(
            "4k3/8/8/8/8/8/8/3QK3 w - - 0 1"
        ).zobrist_hash

    def test_unusable_en_passant_square_does_not_block_repetition(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.en_passant == E3
        shuffle = [Move.from_uci(t) for t in ("g8f6", "g1f3", "f6g8", "f3g1")]
        for move in shuffle:
            pos.make_move(move)
        assert pos.en_passant is None
        assert pos.repetition_count() == 2
        for move in shuffle:
            pos.make_move(move)
        assert pos.repetition_count() == 3

    def test_capturable_en_passant_square_is_a_different_position(self) -> None:
        pos = position_from_fen(
            "rnbqkbnr/ppp1pppp/8/8/3p4/8/PPPPPPPP/RNBQKBNR w KQkq - 0 3"
        )
        pos.make_move(Move(E2, E4))
        key_with_capture = pos.zobrist_hash
        for text in ("g8f6", "g1f3", "f6g8", "f3g1"):
            pos.make_move(Move.from_uci(text))
        assert pos.zobrist_hash != key_with_capture
        assert pos.repetition_count() == 1

    @pytest.mark.parametrize(
        ("with_ep", "without_ep", "same"),
        [
            (
                "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
                "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1",
                True,
            ),
            (
                "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1",
                "4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1",
                False,
            ),
        ],
        ids=["no-capturer", "capturer-beside"],
    )
    def test_en_passant_key_depends_on_capture(
        self, with_ep: str, without_ep: str, same: bool
    ) -> None:
        a = position_from_fen(with_ep).zobrist_hash
        b = position_from_fen(without_ep).zobrist_hash
        assert (a == b) is same
