"""Move-chooser protocol: the contract with the external AI collaborator."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class MoveRequest:
    """Everything the collaborator is given for one turn."""

    fen: str
    legal_moves: tuple[str, ...]
    personality: str


class IMoveChooser(Protocol):
    """Protocol for AI collaborators that propose a move.

    Implementations return free text; it is cleaned and matched against
    ``request.legal_moves`` by :class:`~chessbattle.ai.resolver.MoveResolver`,
    so an unusable reply is not an error.
    """

    def choose_move(
        self,
        request: MoveRequest,
        is_cancelled: CancelCheck | None = None,
    ) -> str: ...
