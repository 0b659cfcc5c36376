"""Abstract interfaces for the game layer.

The :class:`~chessbattle.game.controller.GameController` depends on these
ABCs, not on concrete player implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chessbattle.core.enums import Color

if TYPE_CHECKING:
    from chessbattle.core.move import Move
    from chessbattle.core.position import Position


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    THINKING = auto()  # AI collaborator is choosing
    GAME_OVER = auto()


class IPlayer(ABC):
    """Interface for a game participant (human or AI)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, position: Position) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (they interact via the view).
        For AI this kicks off a background request.
        """

    @abstractmethod
    def cancel(self) -> None:
        """Cancel an ongoing move request (AI only, no-op for human)."""


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def new_game(self, white: IPlayer, black: IPlayer, fen: str | None = None) -> None:
        """Set up a new game."""

    @abstractmethod
    def submit_move(self, move: Move) -> bool:
        """Submit a move. Returns True if legal and applied."""

    @abstractmethod
    def resign(self, color: Color) -> None:
        """Player of *color* resigns."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Undo the last move. Returns True on success."""
