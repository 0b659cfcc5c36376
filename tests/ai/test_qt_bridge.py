"""Tests for the Qt move-chooser worker."""

from __future__ import annotations

from PyQt6.QtTest import QSignalSpy

from chessbattle.ai.chooser import CancelCheck, MoveRequest
from chessbattle.ai.qt_bridge import MoveChooserWorker
from chessbattle.ai.resolver import ResolutionSource
from chessbattle.core.move import Move
from chessbattle.core.notation import STARTING_FEN, position_from_fen
from chessbattle.core.types import E2, E4

FOOLS_MATE_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class _ScriptedChooser:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.requests: list[MoveRequest] = []

    def choose_move(
        self, request: MoveRequest, is_cancelled: CancelCheck | None = None
    ) -> str:
        del is_cancelled
        self.requests.append(request)
        return self.reply


class _RaisingChooser:
    def choose_move(
        self, request: MoveRequest, is_cancelled: CancelCheck | None = None
    ) -> str:
        del request, is_cancelled
        raise RuntimeError("service unavailable")


class _CancellingChooser:
    def __init__(self) -> None:
        self.worker: MoveChooserWorker | None = None

    def choose_move(
        self, request: MoveRequest, is_cancelled: CancelCheck | None = None
    ) -> str:
        del request
        assert self.worker is not None and is_cancelled is not None
        self.worker.cancel()
        assert is_cancelled()
        return "e2e4"


def _capture_moves(worker: MoveChooserWorker) -> list[tuple[int, object, int]]:
    captured: list[tuple[int, object, int]] = []
    worker.move_ready.connect(
        lambda request_id, move, source: captured.append((request_id, move, source))
    )
    return captured


class TestMoveChooserWorker:
    def test_builds_request_and_emits_move(self) -> None:
        chooser = _ScriptedChooser("e2e4")
        worker = MoveChooserWorker(chooser)
        moves = _capture_moves(worker)

        worker.request_move(
            position_from_fen(STARTING_FEN), 5, "Aggressive Grandmaster"
        )

        assert len(chooser.requests) == 1
        request = chooser.requests[0]
        assert request.fen == STARTING_FEN
        assert request.personality == "Aggressive Grandmaster"
        assert len(request.legal_moves) == 20
        assert "e2e4" in request.legal_moves
        assert moves == [(5, Move(E2, E4), int(ResolutionSource.EXACT))]

    def test_raising_chooser_falls_back_to_legal_move(self) -> None:
        worker = MoveChooserWorker(_RaisingChooser())
        moves = _capture_moves(worker)
        failed = QSignalSpy(worker.request_failed)

        worker.request_move(position_from_fen(STARTING_FEN), 8, "")

        assert len(failed) == 0
        assert len(moves) == 1
        request_id, move, source = moves[0]
        assert request_id == 8
        assert isinstance(move, Move)
        assert source == int(ResolutionSource.FALLBACK)

    def test_emits_cancelled_when_request_is_cancelled(self) -> None:
        chooser = _CancellingChooser()
        worker = MoveChooserWorker(chooser)
        chooser.worker = worker
        cancelled = QSignalSpy(worker.request_cancelled)
        moves = _capture_moves(worker)

        worker.request_move(position_from_fen(STARTING_FEN), 7, "")

        assert len(cancelled) == 1
        assert cancelled[0][0] == 7
        assert moves == []

    def test_cancel_flag_resets_for_next_request(self) -> None:
        worker = MoveChooserWorker(_ScriptedChooser("e2e4"))
        moves = _capture_moves(worker)
        worker.cancel()

        worker.request_move(position_from_fen(STARTING_FEN), 1, "")

        assert len(moves) == 1

    def test_emits_no_legal_moves_when_mated(self) -> None:
        chooser = _ScriptedChooser("e2e4")
        worker = MoveChooserWorker(chooser)
        no_moves = QSignalSpy(worker.no_legal_moves)

        worker.request_move(position_from_fen(FOOLS_MATE_FEN), 11, "")

        assert len(no_moves) == 1
        assert no_moves[0][0] == 11
        assert chooser.requests == []

    def test_invalid_position_fails_request(self) -> None:
        worker = MoveChooserWorker(_ScriptedChooser("e2e4"))
        failed = QSignalSpy(worker.request_failed)

        worker.request_move("not a position", 3, "")

        assert len(failed) == 1
        assert failed[0][0] == 3
        assert "invalid position" in failed[0][1]
