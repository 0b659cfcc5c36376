"""Exception hierarchy for the rules engine."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for chessbattle errors."""


class FenFormatError(ChessError, ValueError):
    """A FEN string could not be decoded into a position."""


class IllegalMoveError(ChessError, ValueError):
    """A requested move is not legal in the current position."""
