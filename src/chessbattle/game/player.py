"""Concrete player implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from chessbattle.core.enums import Color
from chessbattle.game.interfaces import IPlayer

if TYPE_CHECKING:
    from chessbattle.core.position import Position


class HumanPlayer(IPlayer):
    """A human participant — moves come from the view.

    ``request_move`` is a no-op because humans pick squares interactively.
    """

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str = "") -> None:
        self._color = color
        self._name = name or f"Player ({color})"

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, position: Position) -> None:
        pass  # Human moves arrive via controller.submit_move()

    def cancel(self) -> None:
        pass


class AIPlayer(IPlayer):
    """A participant whose moves come from the AI collaborator.

    ``AIPlayer`` only stores callbacks; the request itself is dispatched by
    an :class:`~chessbattle.ai.session.AISession` to a worker thread.

    Args:
        color: Side the AI plays.
        name: Display name.
        personality: Free-text style handed to the collaborator.
        on_request_move: ``(Position, personality) -> None`` — called when the
            game controller asks the AI to move. Receives a private copy.
        on_cancel: ``() -> None`` — called to abort a pending request.
    """

    __slots__ = ("_color", "_name", "_personality", "_on_request_move", "_on_cancel")

    def __init__(
        self,
        color: Color,
        name: str = "AI",
        personality: str = "",
        on_request_move: Callable[[Position, str], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self._color = color
        self._name = name
        self._personality = personality
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def personality(self) -> str:
        return self._personality

    @property
    def is_human(self) -> bool:
        return False

    def request_move(self, position: Position) -> None:
        if self._on_request_move is not None:
            self._on_request_move(position.copy(), self._personality)

    def cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()
