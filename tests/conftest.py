"""Shared fixtures: an in-memory USI channel and a recording render sink."""

from __future__ import annotations

from collections import deque

import pytest

from shogi_usi.game.types import PieceType, Player, Square


class FakeChannel:
    """Channel whose engine side is scripted by the test."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.stdout: deque[str] = deque()
        self.stderr: deque[str] = deque()

    def send_line(self, line: str) -> None:
        self.sent.append(line)

    def try_receive_line(self) -> str | None:
        return self.stdout.popleft() if self.stdout else None

    def try_receive_stderr(self) -> str | None:
        return self.stderr.popleft() if self.stderr else None


class RecordingSink:
    """RenderSink that stores every notification as a tuple."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_board_setup(self, board) -> None:
        self.events.append(("setup",))

    def on_piece_moved(self, from_square: Square, to_square: Square) -> None:
        self.events.append(("moved", from_square, to_square))

    def on_piece_dropped(self, piece_type: PieceType, square: Square, player: Player) -> None:
        self.events.append(("dropped", piece_type, square, player))

    def on_piece_captured(self, square: Square) -> None:
        self.events.append(("captured", square))

    def on_piece_promoted(self, square: Square) -> None:
        self.events.append(("promoted", square))

    def on_turn_changed(self, player: Player) -> None:
        self.events.append(("turn", player))

    def on_game_over(self, outcome, reason: str) -> None:
        self.events.append(("game_over", outcome))

    def on_promotion_choice_needed(self, square: Square) -> None:
        self.events.append(("promotion_choice", square))


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
