"""Tests for matching collaborator replies to legal moves."""

from __future__ import annotations

import logging
import random

import pytest

from chessbattle.ai.resolver import (
    MoveResolver,
    ResolutionSource,
    clean_response,
    match_response,
)
from chessbattle.core.move import Move
from chessbattle.core.move_generator import MoveGenerator
from chessbattle.core.position import Position
from chessbattle.core.types import E2, E4


@pytest.fixture
def start_moves() -> list[Move]:
    return MoveGenerator(Position.initial()).generate_legal_moves()


class TestCleanResponse:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("e2e4", "e2e4"),
            ("  e2e4\n", "e2e4"),
            ('"e2e4"', "e2e4"),
            ("'e2e4'.", "e2e4"),
            ("e2e4.", "e2e4"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_clean(self, raw: str | None, expected: str) -> None:
        assert clean_response(raw) == expected


class TestMatchResponse:
    def test_exact_beats_substring(self) -> None:
        texts = ["e7e8r", "e7e8"]
        assert match_response("e7e8", texts) == (1, ResolutionSource.EXACT)

    def test_first_contained_move_wins(self) -> None:
        texts = ["a2a3", "g1f3", "e2e4"]
        assert match_response("I like e2e4 or g1f3", texts) == (
            1,
            ResolutionSource.SUBSTRING,
        )

    def test_no_match(self) -> None:
        assert match_response("resign", ["e2e4"]) is None
        assert match_response("", ["e2e4"]) is None


class TestMoveResolver:
    def test_exact_reply(self, start_moves: list[Move]) -> None:
        resolution = MoveResolver().resolve('"e2e4"', start_moves)
        assert resolution is not None
        assert resolution.move == Move(E2, E4)
        assert resolution.text == "e2e4"
        assert resolution.source == ResolutionSource.EXACT

    def test_reply_wrapped_in_prose(self, start_moves: list[Move]) -> None:
        resolution = MoveResolver().resolve("I play e2e4.", start_moves)
        assert resolution is not None
        assert resolution.move == Move(E2, E4)
        assert resolution.source == ResolutionSource.SUBSTRING

    def test_unusable_reply_falls_back(
        self, start_moves: list[Move], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="chessbattle.ai.resolver"):
            resolution = MoveResolver().resolve("Knight to the moon!", start_moves)
        assert resolution is not None
        assert resolution.source == ResolutionSource.FALLBACK
        assert resolution.move in start_moves
        assert "falling back" in caplog.text

    def test_missing_reply_falls_back(self, start_moves: list[Move]) -> None:
        resolution = MoveResolver().resolve(None, start_moves)
        assert resolution is not None
        assert resolution.source == ResolutionSource.FALLBACK

    def test_seeded_fallback_is_reproducible(self, start_moves: list[Move]) -> None:
        picks = [
            MoveResolver(random.Random(42)).resolve("???", start_moves)
            for _ in range(3)
        ]
        assert all(p is not None for p in picks)
        assert len({p.move for p in picks if p is not None}) == 1

    def test_no_legal_moves(self) -> None:
        assert MoveResolver().resolve("e2e4", []) is None
