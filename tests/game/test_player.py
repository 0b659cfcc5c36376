"""Tests for Player implementations."""

from chessbattle.core.enums import Color
from chessbattle.core.move import Move
from chessbattle.core.notation import STARTING_FEN, position_from_fen
from chessbattle.core.position import Position
from chessbattle.core.types import E2, E4
from chessbattle.game.player import AIPlayer, HumanPlayer


class TestHumanPlayer:
    def test_properties(self) -> None:
        p = HumanPlayer(Color.WHITE, "Alice")
        assert p.color == Color.WHITE
        assert p.name == "Alice"
        assert p.is_human is True

    def test_default_name(self) -> None:
        p = HumanPlayer(Color.BLACK)
        assert "black" in p.name.lower()

    def test_request_move_noop(self) -> None:
        p = HumanPlayer(Color.WHITE)
        pos = position_from_fen(STARTING_FEN)
        p.request_move(pos)  # should not raise

    def test_cancel_noop(self) -> None:
        p = HumanPlayer(Color.WHITE)
        p.cancel()  # should not raise


class TestAIPlayer:
    def test_properties(self) -> None:
        p = AIPlayer(Color.BLACK, "Battle AI", personality="Cautious Beginner")
        assert p.color == Color.BLACK
        assert p.name == "Battle AI"
        assert p.personality == "Cautious Beginner"
        assert p.is_human is False

    def test_request_move_passes_copy_and_personality(self) -> None:
        called_with: list[tuple[Position, str]] = []
        p = AIPlayer(
            Color.BLACK,
            personality="Aggressive Grandmaster",
            on_request_move=lambda pos, style: called_with.append((pos, style)),
        )
        pos = position_from_fen(STARTING_FEN)
        p.request_move(pos)

        assert len(called_with) == 1
        received, style = called_with[0]
        assert style == "Aggressive Grandmaster"
        assert received == pos
        assert received is not pos

        received.make_move(Move(E2, E4))
        assert pos.board[E4] is None

    def test_cancel_calls_callback(self) -> None:
        cancelled = []
        p = AIPlayer(
            Color.BLACK,
            on_cancel=lambda: cancelled.append(True),
        )
        p.cancel()
        assert cancelled == [True]

    def test_no_callback_no_error(self) -> None:
        p = AIPlayer(Color.BLACK)
        pos = position_from_fen(STARTING_FEN)
        p.request_move(pos)
        p.cancel()
