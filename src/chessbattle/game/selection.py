"""Turn square clicks from the view into moves."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto

from chessbattle.core.enums import PieceType
from chessbattle.core.move import Move
from chessbattle.core.types import Square
from chessbattle.game.state import GameState


class ClickOutcome(IntEnum):
    SELECTED = auto()
    MOVED = auto()
    CLEARED = auto()
    IGNORED = auto()


@dataclass(frozen=True, slots=True)
class ClickResult:
    outcome: ClickOutcome
    move: Move | None = None


class SquareSelection:
    """Two-click move entry against a :class:`GameState`.

    A first click on a piece of the side to move selects it. A second click on
    one of its legal destinations produces the move; when several moves differ
    only by promotion piece, *promotion* picks one and Queen is the default.
    Clicking another own piece re-selects, anything else clears.

    The selection never applies moves itself; the caller submits
    :attr:`ClickResult.move` to the controller.
    """

    __slots__ = ("_state", "_selected")

    def __init__(self, state: GameState) -> None:
        self._state = state
        self._selected: Square | None = None

    @property
    def selected(self) -> Square | None:
        return self._selected

    def bind(self, state: GameState) -> None:
        """Follow a new game state (e.g. after ``new_game``)."""
        self._state = state
        self._selected = None

    def clear(self) -> None:
        self._selected = None

    def legal_destinations(self) -> list[Square]:
        """Destination squares of the selected piece, for highlighting."""
        if self._selected is None:
            return []
        seen: list[Square] = []
        for move in self._state.legal_moves():
            if move.from_sq == self._selected and move.to_sq not in seen:
                seen.append(move.to_sq)
        return seen

    def click(self, sq: Square, promotion: PieceType | None = None) -> ClickResult:
        if self._state.is_game_over:
            self._selected = None
            return ClickResult(ClickOutcome.IGNORED)

        if self._selected is not None:
            move = self.find_move(self._selected, sq, promotion)
            if move is not None:
                self._selected = None
                return ClickResult(ClickOutcome.MOVED, move)

        piece = self._state.position.board[sq]
        if piece is not None and piece.color == self._state.side_to_move:
            self._selected = sq
            return ClickResult(ClickOutcome.SELECTED)

        self._selected = None
        return ClickResult(ClickOutcome.CLEARED)

    def find_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Move | None:
        """The legal move from *from_sq* to *to_sq*, if any.

        Among promotion variants, *promotion* wins when given, else Queen.
        """
        candidates = [
            m
            for m in self._state.legal_moves()
            if m.from_sq == from_sq and m.to_sq == to_sq
        ]
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]

        wanted = promotion if promotion is not None else PieceType.QUEEN
        for move in candidates:
            if move.promotion == wanted:
                return move
        return None
