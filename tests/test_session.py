"""Integration tests: controller + USI driver through GameSession."""

from __future__ import annotations

import pytest

from shogi_usi.config import EngineSettings
from shogi_usi.game.controller import GameController, GameOver, Outcome
from shogi_usi.game.notation import parse_move
from shogi_usi.game.types import Player
from shogi_usi.session import GameSession
from shogi_usi.usi.driver import UsiDriver

S, G = Player.SENTE, Player.GOTE

_AFTER_7G7F = "lnsgkgsnl/1r5b1/ppppppppp/9/9/2P6/PP1PPPPPP/1B5R1/LNSGKGSNL w - 2"


def _session(channel) -> tuple[GameController, UsiDriver, GameSession]:
    controller = GameController(human_players=[S])
    driver = UsiDriver(channel, EngineSettings(movetime_ms=100, new_game_handshake=False))
    return controller, driver, GameSession(controller, {G: driver})


class TestGameSession:
    def test_engine_not_started_on_human_turn(self, channel) -> None:
        controller, driver, session = _session(channel)
        session.tick()
        assert not driver.thinking
        assert channel.sent == []

    def test_engine_reply_is_applied(self, channel) -> None:
        controller, driver, session = _session(channel)
        assert controller.make_move(parse_move("7g7f"))

        session.tick()
        session.tick()
        assert channel.sent == [f"position sfen {_AFTER_7G7F}", "go movetime 100"]

        channel.stdout.append("bestmove 3c3d")
        session.tick()
        assert controller.current_player == S
        assert controller.ply == 2
        assert controller.board.piece_at(6, 5) is not None

    def test_turn_started_once_per_ply(self, channel) -> None:
        controller, driver, session = _session(channel)
        controller.make_move(parse_move("7g7f"))
        for _ in range(5):
            session.tick()
        assert sum(line.startswith("go ") for line in channel.sent) == 1

    def test_engine_resignation_ends_game(self, channel) -> None:
        controller, driver, session = _session(channel)
        controller.make_move(parse_move("7g7f"))
        session.tick()
        channel.stdout.append("bestmove resign")
        session.tick()
        assert controller.phase == GameOver(Outcome.RESIGNATION, S, "GOTE resigned")

    def test_engine_declared_win_ends_game(self, channel) -> None:
        controller, driver, session = _session(channel)
        controller.make_move(parse_move("7g7f"))
        session.tick()
        channel.stdout.append("bestmove win")
        session.tick()
        assert controller.phase == GameOver(Outcome.DECLARATION, G, "GOTE declared a win")
        assert not driver.thinking

    def test_illegal_engine_move_forfeits(self, channel) -> None:
        controller, driver, session = _session(channel)
        controller.make_move(parse_move("7g7f"))
        session.tick()
        channel.stdout.append("bestmove 7g7e")
        session.tick()
        assert isinstance(controller.phase, GameOver)
        assert controller.phase.winner == S

    def test_tick_after_game_over_is_noop(self, channel) -> None:
        controller, driver, session = _session(channel)
        controller.resign(S)
        session.tick()
        assert channel.sent == []

    def test_player_cannot_be_human_and_engine(self, channel) -> None:
        controller = GameController(human_players=[S, G])
        with pytest.raises(ValueError):
            GameSession(controller, {G: UsiDriver(channel)})
