"""Tests for the tick-driven USI driver."""

from __future__ import annotations

import pytest

from shogi_usi.config import EngineSettings
from shogi_usi.errors import InvariantViolation
from shogi_usi.game.notation import STARTING_SFEN, BoardMove
from shogi_usi.usi.channel import Agent, Channel
from shogi_usi.usi.driver import UsiDriver


def _tick_n(driver: UsiDriver, n: int) -> list:
    return [driver.tick() for _ in range(n)]


class TestProtocols:
    def test_fake_channel_is_a_channel(self, channel) -> None:
        assert isinstance(channel, Channel)

    def test_driver_is_an_agent(self, channel) -> None:
        assert isinstance(UsiDriver(channel), Agent)


class TestOutboundQueue:
    def test_start_queues_handshake(self, channel) -> None:
        driver = UsiDriver(channel)
        driver.start()
        assert driver.pending_commands == ["usi", "isready", "usinewgame"]
        assert channel.sent == []

    def test_handshake_can_be_minimal(self, channel) -> None:
        driver = UsiDriver(channel, EngineSettings(new_game_handshake=False))
        driver.start()
        assert driver.pending_commands == ["usi"]

    def test_one_command_per_tick_in_order(self, channel) -> None:
        driver = UsiDriver(channel)
        driver.start()
        driver.tick()
        assert channel.sent == ["usi"]
        driver.tick()
        assert channel.sent == ["usi", "isready"]
        _tick_n(driver, 5)
        assert channel.sent == ["usi", "isready", "usinewgame"]

    def test_start_turn_sends_position_then_go(self, channel) -> None:
        driver = UsiDriver(channel, EngineSettings(movetime_ms=1500))
        driver.start_turn(STARTING_SFEN + " 1")
        _tick_n(driver, 2)
        assert channel.sent == [f"position sfen {STARTING_SFEN} 1", "go movetime 1500"]
        assert driver.thinking

    def test_start_turn_twice_is_invariant_violation(self, channel) -> None:
        driver = UsiDriver(channel)
        driver.start_turn(STARTING_SFEN)
        with pytest.raises(InvariantViolation):
            driver.start_turn(STARTING_SFEN)


class TestInbound:
    def test_idle_tick_returns_none(self, channel) -> None:
        assert UsiDriver(channel).tick() is None

    def test_identity_and_usiok(self, channel) -> None:
        driver = UsiDriver(channel)
        channel.stdout.extend(["id name MyEngine", "id author Someone", "usiok", "readyok"])
        assert _tick_n(driver, 4) == [None] * 4
        assert driver.engine_name == "MyEngine"
        assert driver.engine_author == "Someone"
        assert driver.usi_ok
        assert driver.ready

    def test_one_line_per_tick(self, channel) -> None:
        driver = UsiDriver(channel)
        channel.stdout.extend(["id name A", "usiok"])
        driver.tick()
        assert driver.engine_name == "A"
        assert not driver.usi_ok
        assert list(channel.stdout) == ["usiok"]

    def test_bestmove_returned_once(self, channel) -> None:
        driver = UsiDriver(channel)
        driver.start_turn(STARTING_SFEN)
        channel.stdout.extend(["info depth 1 score cp 0", "bestmove 7g7f"])
        assert driver.tick() is None
        assert driver.tick() == BoardMove((2, 2), (2, 3))
        assert not driver.thinking
        assert driver.tick() is None

    def test_bestmove_while_idle_is_ignored(self, channel) -> None:
        driver = UsiDriver(channel)
        channel.stdout.append("bestmove 7g7f")
        assert driver.tick() is None

    def test_resign(self, channel) -> None:
        driver = UsiDriver(channel)
        driver.start_turn(STARTING_SFEN)
        channel.stdout.append("bestmove resign")
        assert driver.tick() is None
        assert driver.resigned
        assert not driver.thinking

    def test_declared_win_ends_thinking(self, channel) -> None:
        driver = UsiDriver(channel)
        driver.start_turn(STARTING_SFEN)
        channel.stdout.append("bestmove win")
        assert _tick_n(driver, 5) == [None] * 5
        assert driver.declared_win
        assert not driver.resigned
        assert not driver.thinking

        driver.start_turn(STARTING_SFEN)
        assert not driver.declared_win

    def test_garbage_is_discarded(self, channel) -> None:
        driver = UsiDriver(channel)
        channel.stdout.extend(["foo bar", "", "usiok"])
        assert _tick_n(driver, 3) == [None, None, None]
        assert driver.usi_ok

    def test_stderr_is_drained_but_never_controls(self, channel) -> None:
        driver = UsiDriver(channel)
        channel.stderr.extend(["warning: low memory", "bestmove 7g7f"])
        driver.start_turn(STARTING_SFEN)
        assert _tick_n(driver, 2) == [None, None]
        assert not channel.stderr
        assert driver.thinking
