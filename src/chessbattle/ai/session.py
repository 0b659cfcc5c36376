"""AI move-request session orchestration for the main thread."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from chessbattle.ai.chooser import IMoveChooser
from chessbattle.ai.qt_bridge import MoveChooserWorker
from chessbattle.ai.resolver import MoveResolver, ResolutionSource
from chessbattle.core.enums import Color
from chessbattle.core.move import Move
from chessbattle.core.notation import position_to_fen
from chessbattle.game.config import GameConfig
from chessbattle.game.controller import GameController
from chessbattle.game.interfaces import GamePhase, IPlayer
from chessbattle.game.player import AIPlayer, HumanPlayer

if TYPE_CHECKING:
    from chessbattle.core.position import Position

_LOGGER = logging.getLogger(__name__)


class _AICommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    move_requested = pyqtSignal(object, int, str)
    cancel_requested = pyqtSignal()


class AISession:
    """Owns the worker-thread request lifecycle and move handoff to controller.

    Every request carries an id and the FEN it was made for; a reply that
    arrives for an older request or a position that has since changed is
    dropped.
    """

    _REQUEST_DELAY_MS = 50
    _MAX_FAILURE_RETRIES = 1

    __slots__ = (
        "__weakref__",
        "_controller",
        "_config",
        "_set_status",
        "_command_bus",
        "_dispatch_timer",
        "_move_apply_timer",
        "_pending_move",
        "_worker_thread",
        "_worker",
        "_request_id",
        "_pending_request",
        "_pending_position",
        "_pending_personality",
        "_pending_fen",
        "_remaining_failure_retries",
        "_is_shutting_down",
        "_is_started",
    )

    def __init__(
        self,
        *,
        controller: GameController,
        chooser: IMoveChooser,
        config: GameConfig | None = None,
        set_status: Callable[[str], None] | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._controller = controller
        self._config = config if config is not None else GameConfig()
        self._set_status = set_status

        self._command_bus = _AICommandBus(parent)
        self._dispatch_timer = QTimer(parent)
        self._dispatch_timer.setSingleShot(True)
        self._dispatch_timer.timeout.connect(self._emit_pending_request)

        self._move_apply_timer = QTimer(parent)
        self._move_apply_timer.setSingleShot(True)
        self._move_apply_timer.timeout.connect(self._apply_delayed_move)
        self._pending_move: Move | None = None

        self._worker_thread = QThread(parent)
        self._worker = MoveChooserWorker(
            chooser, MoveResolver(self._config.make_rng())
        )
        self._request_id = 0
        self._pending_request: int | None = None
        self._pending_position: Position | None = None
        self._pending_personality = ""
        self._pending_fen: str | None = None
        self._remaining_failure_retries = 0
        self._is_shutting_down = False
        self._is_started = False

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def ai_move_delay_ms(self) -> int:
        return self._config.ai_move_delay_ms

    def setup(self) -> None:
        """Start the worker in a dedicated thread and connect callbacks."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._worker.moveToThread(self._worker_thread)
        self._command_bus.move_requested.connect(self._worker.request_move)
        self._command_bus.cancel_requested.connect(self._worker.cancel)
        self._worker.move_ready.connect(self._on_move_ready)
        self._worker.request_cancelled.connect(self._on_request_cancelled)
        self._worker.no_legal_moves.connect(self._on_no_legal_moves)
        self._worker.request_failed.connect(self._on_request_failed)
        self._worker_thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Stop any pending request and shut down the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self.cancel_ai_request()
        self._worker_thread.quit()
        self._worker_thread.wait(2000)
        self._is_started = False

    def create_ai_player(self, color: Color) -> AIPlayer:
        """Create an AI player for *color* wired to this session."""
        personality = self._config.personality(color)
        return AIPlayer(
            color,
            personality or "AI",
            personality=personality,
            on_request_move=self.request_ai_move,
            on_cancel=self.cancel_ai_request,
        )

    def create_player(self, color: Color) -> IPlayer:
        """Player for *color* as the configured game mode assigns it."""
        if self._config.is_ai(color):
            return self.create_ai_player(color)
        return HumanPlayer(color)

    def start_game(self, fen: str | None = None) -> None:
        """Start a new controller game with players picked by the game mode.

        Call :meth:`setup` first, or opening AI requests are dropped.

        Raises:
            FenFormatError: If *fen* is malformed; the running game is kept.
        """
        white = self.create_player(Color.WHITE)
        black = self.create_player(Color.BLACK)
        self._controller.new_game(white, black, fen)

    def request_ai_move(self, position: Position, personality: str = "") -> None:
        """Queue a move request for *position*."""
        if not self._is_started or self._is_shutting_down:
            return
        self._queue_request(position.copy(), personality, reset_retry_budget=True)

    def cancel_ai_request(self) -> None:
        """Cancel any pending or active request."""
        self._dispatch_timer.stop()
        self._move_apply_timer.stop()
        self._clear_pending_request()
        self._pending_move = None
        if self._is_started:
            self._command_bus.cancel_requested.emit()

    # ── Worker callbacks ─────────────────────────────────────────────────

    def _on_move_ready(self, request_id: int, move_obj: object, source: int) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_request:
            return
        if not isinstance(move_obj, Move):
            return

        state = self._controller.state
        if state.phase != GamePhase.THINKING:
            return
        if self._pending_fen != position_to_fen(state.position):
            return

        _LOGGER.debug(
            "AI (%s) plays %s via %s",
            state.side_to_move,
            move_obj,
            ResolutionSource(source).name,
        )
        self._clear_pending_request()
        self._remaining_failure_retries = 0

        # Hold the move so each AI turn takes a visible beat
        self._pending_move = move_obj
        self._move_apply_timer.start(self._config.ai_move_delay_ms)

    def _on_request_cancelled(self, request_id: int) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_request:
            return
        self._clear_pending_request()
        self._remaining_failure_retries = 0

    def _on_no_legal_moves(self, request_id: int) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_request:
            return
        # The controller ends the game on mate or stalemate before asking.
        _LOGGER.warning("AI request %d found no legal moves", request_id)
        self._clear_pending_request()

    def _on_request_failed(self, request_id: int, message: str) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_request:
            return

        state = self._controller.state
        if state.phase != GamePhase.THINKING:
            self._clear_pending_request()
            return

        if self._remaining_failure_retries > 0:
            self._remaining_failure_retries -= 1
            self._queue_request(
                state.position.copy(),
                self._pending_personality,
                reset_retry_budget=False,
            )
            return

        _LOGGER.error("AI request %d failed: %s", request_id, message)
        self._clear_pending_request()
        if self._set_status is not None:
            self._set_status(f"AI error: {message}")
        self._controller.resign(state.side_to_move)

    def _apply_delayed_move(self) -> None:
        """Submit the pending move once the turn delay has elapsed."""
        if self._is_shutting_down or self._pending_move is None:
            return
        move = self._pending_move
        self._pending_move = None
        if not self._controller.submit_move(move):
            _LOGGER.warning("Controller rejected AI move %s", move)

    # ── Request bookkeeping ──────────────────────────────────────────────

    def _queue_request(
        self, position: Position, personality: str, *, reset_retry_budget: bool
    ) -> None:
        self.cancel_ai_request()
        if self._is_shutting_down:
            return

        self._request_id += 1
        self._pending_request = self._request_id
        self._pending_position = position
        self._pending_personality = personality
        self._pending_fen = position_to_fen(position)
        if reset_retry_budget:
            self._remaining_failure_retries = self._MAX_FAILURE_RETRIES
        self._dispatch_timer.start(self._REQUEST_DELAY_MS)

    def _emit_pending_request(self) -> None:
        if self._is_shutting_down:
            return

        request_id = self._pending_request
        position = self._pending_position
        if request_id is None or position is None:
            return
        self._command_bus.move_requested.emit(
            position, request_id, self._pending_personality
        )

    def _clear_pending_request(self) -> None:
        self._pending_request = None
        self._pending_position = None
        self._pending_personality = ""
        self._pending_fen = None
