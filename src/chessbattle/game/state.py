"""Game state machine — owns the position, tracks phase and move history."""

from __future__ import annotations

from dataclasses import dataclass, field

from chessbattle.core.enums import Color, GameEndReason, GameResult, PieceType
from chessbattle.core.move import Move
from chessbattle.core.move_generator import MoveGenerator
from chessbattle.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessbattle.core.piece import Piece
from chessbattle.core.position import Position
from chessbattle.core.rules import Rules
from chessbattle.game.interfaces import GamePhase


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    uci: str
    fen_after: str
    was_check: bool = False
    was_capture: bool = False


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Read-only view data: 64 squares in board order (a1..h8)."""

    squares: tuple[Piece | None, ...]
    side_to_move: Color
    in_check: bool
    fen: str


@dataclass
class GameState:
    """Manages game lifecycle: position, phase, result and move history.

    This is a pure data/logic class — no threading, no UI. It is the single
    owner of its :class:`Position`; other components receive copies or
    snapshots.
    """

    position: Position = field(default_factory=Position.initial, init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    end_reason: GameEndReason | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    _legal_cache: list[Move] | None = field(default=None, init=False, repr=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game.

        Raises:
            FenFormatError: If *fen* is malformed; the previous game is kept.
        """
        start_fen = STARTING_FEN if fen is None else fen
        position = position_from_fen(start_fen)
        self.start_fen = start_fen
        self.position = position
        self.phase = GamePhase.AWAITING_MOVE
        self.result = GameResult.IN_PROGRESS
        self.end_reason = None
        self.move_history.clear()
        self._legal_cache = None
        self._check_game_over()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for the legality check.
        """
        board = self.position.board
        piece = board[move.from_sq]
        was_capture = board[move.to_sq] is not None or (
            piece is not None
            and piece.piece_type == PieceType.PAWN
            and move.to_sq == self.position.en_passant
        )

        self.position.make_move(move)
        self._legal_cache = None

        record = MoveRecord(
            move=move,
            uci=move.uci,
            fen_after=position_to_fen(self.position),
            was_check=Rules.is_in_check(self.position),
            was_capture=was_capture,
        )
        self.move_history.append(record)
        self._check_game_over()
        return record

    def undo_last_move(self) -> Move | None:
        """Undo the last move. Returns the undone Move, or None if empty."""
        if not self.move_history:
            return None

        record = self.move_history.pop()
        self.position.unmake_move(record.move)
        self._legal_cache = None

        # Reset result if we un-did a game-ending move
        if self.result != GameResult.IN_PROGRESS:
            self.result = GameResult.IN_PROGRESS
            self.end_reason = None
            self.phase = GamePhase.AWAITING_MOVE

        return record.move

    # ── Resignation / draw ───────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        self.result = (
            GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS
        )
        self.end_reason = GameEndReason.RESIGNATION
        self.phase = GamePhase.GAME_OVER

    def claim_draw_by_rule(self) -> bool:
        """End the game as a draw if the 50-move or threefold rule allows it."""
        if Rules.is_threefold_repetition(self.position):
            reason = GameEndReason.THREEFOLD_CLAIMED
        elif Rules.is_fifty_move_rule(self.position):
            reason = GameEndReason.FIFTY_MOVES_CLAIMED
        else:
            return False
        self.result = GameResult.DRAW
        self.end_reason = reason
        self.phase = GamePhase.GAME_OVER
        return True

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1].move if self.move_history else None

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position (cached until the next move)."""
        if self._legal_cache is None:
            self._legal_cache = MoveGenerator(self.position).generate_legal_moves()
        return list(self._legal_cache)

    def is_in_check(self) -> bool:
        return Rules.is_in_check(self.position)

    def fen(self) -> str:
        return position_to_fen(self.position)

    def snapshot(self) -> BoardSnapshot:
        """Read-only data for the view collaborator."""
        return BoardSnapshot(
            squares=self.position.board.snapshot(),
            side_to_move=self.position.side_to_move,
            in_check=self.is_in_check(),
            fen=self.fen(),
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _check_game_over(self) -> None:
        reason = Rules.end_reason(self.position)
        if reason is None:
            return
        self.end_reason = reason
        if reason == GameEndReason.CHECKMATE:
            self.result = (
                GameResult.BLACK_WINS
                if self.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        else:
            self.result = GameResult.DRAW
        self.phase = GamePhase.GAME_OVER
