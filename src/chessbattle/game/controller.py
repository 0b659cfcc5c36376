"""GameController — the central orchestrator of a chess game.

Coordinates: Players, GameState, MoveGenerator.
Emits events via simple callbacks so the view / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessbattle.core.enums import Color, GameResult
from chessbattle.core.exceptions import IllegalMoveError
from chessbattle.core.move import Move
from chessbattle.core.notation import find_legal_move
from chessbattle.game.interfaces import GamePhase, IGameController, IPlayer
from chessbattle.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameState], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Orchestrates a full chess game: validates moves, switches turns,
    notifies listeners.

    Thread-safety: methods are designed to be called from a single thread
    (the main/UI thread). AI results arrive through ``submit_move`` on that
    thread via a queued Qt signal.
    """

    __slots__ = ("_state", "_players", "events")

    def __init__(self) -> None:
        self._state = GameState()
        self._players: dict[Color, IPlayer] = {}
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def current_player(self) -> IPlayer | None:
        return self._players.get(self._state.side_to_move)

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    def legal_move_texts(self) -> list[str]:
        """Legal moves of the current position in move-text form."""
        return [move.uci for move in self._state.legal_moves()]

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self, white: IPlayer, black: IPlayer, fen: str | None = None) -> None:
        """Start a game between *white* and *black*.

        Raises:
            FenFormatError: If *fen* is malformed.
        """
        state = GameState()
        state.setup(fen)

        # Only a valid FEN replaces the running game and its players.
        for player in self._players.values():
            player.cancel()
        self._state = state
        self._players = {Color.WHITE: white, Color.BLACK: black}

        if state.is_game_over:
            self._emit_game_over(state.result)
            return
        self._prompt_current_player()

    def submit_move(self, move: Move) -> bool:
        if self._state.is_game_over:
            return False
        if self._state.phase not in (GamePhase.AWAITING_MOVE, GamePhase.THINKING):
            return False

        if move not in self._state.legal_moves():
            _LOGGER.debug("Rejected illegal move %s", move)
            return False

        record = self._state.apply_move(move)
        self._emit_move(record)

        if self._state.is_game_over:
            self._emit_game_over(self._state.result)
            return True

        self._prompt_current_player()
        return True

    def submit_uci(self, text: str) -> bool:
        """Submit a move given as move text (``"e2e4"``, ``"e7e8q"``)."""
        if self._state.is_game_over:
            return False
        try:
            move = find_legal_move(
                self._state.position, text, self._state.legal_moves()
            )
        except IllegalMoveError as exc:
            _LOGGER.debug("Rejected move text %r: %s", text, exc)
            return False
        return self.submit_move(move)

    def resign(self, color: Color) -> None:
        if self._state.is_game_over:
            return
        self._cancel_ai()
        self._state.resign(color)
        self._emit_game_over(self._state.result)

    def claim_draw(self, color: Color) -> bool:
        """Side to move claims a draw by the 50-move or threefold rule."""
        if self._state.is_game_over:
            return False
        if color != self._state.side_to_move:
            return False
        if not self._state.claim_draw_by_rule():
            return False
        self._cancel_ai()
        self._emit_game_over(GameResult.DRAW)
        return True

    def undo_move(self) -> bool:
        if self._state.is_game_over or not self._state.move_history:
            return False

        self._cancel_ai()
        self._state.undo_last_move()
        self._prompt_current_player()
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _cancel_ai(self) -> None:
        cp = self.current_player
        if cp is not None and not cp.is_human:
            cp.cancel()

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        cp = self.current_player
        if cp is None:
            return

        if cp.is_human:
            self._state.phase = GamePhase.AWAITING_MOVE
            self._emit_phase(GamePhase.AWAITING_MOVE)
        else:
            self._state.phase = GamePhase.THINKING
            self._emit_phase(GamePhase.THINKING)
            cp.request_move(self._state.position)

    def _emit_move(self, record: MoveRecord) -> None:
        for cb in self.events.on_move:
            cb(record, self._state)

    def _emit_game_over(self, result: GameResult) -> None:
        _LOGGER.info(
            "Game over: %s (%s) after %d plies",
            result.name,
            self._state.end_reason.name if self._state.end_reason else "unknown",
            self._state.ply_count,
        )
        self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
