"""Game management layer — controller, players, state machine, selection.

Quick start::

    from chessbattle.core import Color
    from chessbattle.game import GameController, HumanPlayer

    ctrl = GameController()
    ctrl.new_game(
        white=HumanPlayer(Color.WHITE, "Alice"),
        black=HumanPlayer(Color.BLACK, "Bob"),
    )
    ctrl.submit_uci("e2e4")
"""

from chessbattle.game.config import GameConfig, GameMode
from chessbattle.game.controller import GameController, GameEvents
from chessbattle.game.interfaces import GamePhase, IGameController, IPlayer
from chessbattle.game.player import AIPlayer, HumanPlayer
from chessbattle.game.selection import ClickOutcome, ClickResult, SquareSelection
from chessbattle.game.state import BoardSnapshot, GameState, MoveRecord

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    "IPlayer",
    # Configuration
    "GameConfig",
    "GameMode",
    # Concrete
    "AIPlayer",
    "BoardSnapshot",
    "ClickOutcome",
    "ClickResult",
    "GameController",
    "GameEvents",
    "GameState",
    "HumanPlayer",
    "MoveRecord",
    "SquareSelection",
]
