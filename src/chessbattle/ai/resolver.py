"""Turn a collaborator's free-text reply into a legal move."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum, auto

from chessbattle.core.move import Move

_LOGGER = logging.getLogger(__name__)

_STRIP_CHARS = ("\"", "'", ".")


class ResolutionSource(IntEnum):
    """How a reply was mapped to a move."""

    EXACT = auto()
    SUBSTRING = auto()
    FALLBACK = auto()


@dataclass(slots=True, frozen=True)
class MoveResolution:
    move: Move
    text: str
    source: ResolutionSource


def clean_response(text: str | None) -> str:
    """Trim the reply and drop quote and period characters."""
    if not text:
        return ""
    cleaned = text.strip()
    for ch in _STRIP_CHARS:
        cleaned = cleaned.replace(ch, "")
    return cleaned.strip()


def match_response(
    cleaned: str, legal_texts: Sequence[str]
) -> tuple[int, ResolutionSource] | None:
    """Index into *legal_texts* chosen by *cleaned*, with how it matched.

    An exact match wins; otherwise the first legal move contained in the
    reply is taken.
    """
    if not cleaned:
        return None
    for idx, text in enumerate(legal_texts):
        if text == cleaned:
            return idx, ResolutionSource.EXACT
    for idx, text in enumerate(legal_texts):
        if text in cleaned:
            return idx, ResolutionSource.SUBSTRING
    return None


class MoveResolver:
    """Maps replies onto legal moves, falling back to a random legal move.

    The fallback keeps a game moving when the collaborator answers with
    something unusable (or nothing at all).

    Args:
        rng: Random source for the fallback; seed it for reproducible games.
    """

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def resolve(
        self, response: str | None, legal_moves: Sequence[Move]
    ) -> MoveResolution | None:
        """Pick a move for *response*; ``None`` only when no legal move exists."""
        if not legal_moves:
            return None

        legal_texts = [move.uci for move in legal_moves]
        cleaned = clean_response(response)
        matched = match_response(cleaned, legal_texts)
        if matched is not None:
            idx, source = matched
            _LOGGER.debug(
                "Resolved reply %r to %s (%s)", response, legal_texts[idx], source.name
            )
            return MoveResolution(legal_moves[idx], legal_texts[idx], source)

        move = self._rng.choice(list(legal_moves))
        _LOGGER.warning(
            "Unusable AI reply %r; falling back to random legal move %s", response, move
        )
        return MoveResolution(move, move.uci, ResolutionSource.FALLBACK)
