"""Qt bridge to ask the AI collaborator for moves in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessbattle.ai.chooser import IMoveChooser, MoveRequest
from chessbattle.ai.resolver import MoveResolver
from chessbattle.core.move_generator import MoveGenerator
from chessbattle.core.notation import position_to_fen
from chessbattle.core.position import Position

_LOGGER = logging.getLogger(__name__)


class MoveChooserWorker(QObject):
    """Thread-affine worker that turns collaborator replies into moves.

    A chooser that raises is treated like one that answered nonsense: the
    resolver falls back to a random legal move and the game goes on.
    """

    move_ready = pyqtSignal(int, object, int)
    request_cancelled = pyqtSignal(int)
    no_legal_moves = pyqtSignal(int)
    request_failed = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_chooser", "_resolver")

    def __init__(
        self,
        chooser: IMoveChooser,
        resolver: MoveResolver | None = None,
    ) -> None:
        super().__init__()
        self._chooser = chooser
        self._resolver = resolver if resolver is not None else MoveResolver()
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int, str)
    def request_move(
        self, position_obj: object, request_id: int, personality: str
    ) -> None:
        """Ask the chooser for a move in *position_obj* and emit the result."""
        if not isinstance(position_obj, Position):
            self.request_failed.emit(request_id, "AI received invalid position")
            return

        self._cancel_event.clear()
        legal = MoveGenerator(position_obj).generate_legal_moves()
        if not legal:
            self.no_legal_moves.emit(request_id)
            return

        request = MoveRequest(
            fen=position_to_fen(position_obj),
            legal_moves=tuple(move.uci for move in legal),
            personality=personality,
        )
        try:
            reply: str | None = self._chooser.choose_move(
                request, is_cancelled=self._cancel_event.is_set
            )
        except Exception:
            _LOGGER.exception("Move chooser failed for request %d", request_id)
            reply = None

        if self._cancel_event.is_set():
            self.request_cancelled.emit(request_id)
            return

        resolution = self._resolver.resolve(reply, legal)
        if resolution is None:
            self.no_legal_moves.emit(request_id)
            return
        self.move_ready.emit(request_id, resolution.move, int(resolution.source))

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current request."""
        self._cancel_event.set()
