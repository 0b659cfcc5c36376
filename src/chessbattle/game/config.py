"""Game configuration."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum, auto

from chessbattle.core.enums import Color


class GameMode(IntEnum):
    """Who plays which side."""

    HUMAN_VS_HUMAN = auto()
    HUMAN_VS_AI = auto()
    AI_VS_AI = auto()


@dataclass
class GameConfig:
    """All user-configurable game settings."""

    mode: GameMode = GameMode.HUMAN_VS_HUMAN
    # Side the human plays in HUMAN_VS_AI
    human_color: Color = Color.WHITE

    # AI collaborator
    white_personality: str = "Aggressive Grandmaster"
    black_personality: str = "Cautious Beginner"
    ai_move_delay_ms: int = 1000
    fallback_seed: int | None = None

    def personality(self, color: Color) -> str:
        """Personality text handed to the AI playing *color*."""
        if color == Color.WHITE:
            return self.white_personality
        return self.black_personality

    def is_ai(self, color: Color) -> bool:
        """Whether *color* is driven by the AI collaborator in this mode."""
        if self.mode == GameMode.AI_VS_AI:
            return True
        if self.mode == GameMode.HUMAN_VS_AI:
            return color != self.human_color
        return False

    def make_rng(self) -> random.Random:
        """Random source for the AI fallback, seeded when *fallback_seed* is set."""
        return random.Random(self.fallback_seed)
