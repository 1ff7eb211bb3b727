"""Tests for USI message parsing."""

from __future__ import annotations

import pytest

from shogi_usi.errors import UsiParseError
from shogi_usi.game.notation import BoardMove, format_move
from shogi_usi.usi.messages import BestMove, Id, IdType, Info, ReadyOk, UsiMessage, UsiOk


class TestBestMove:
    def test_board_move(self) -> None:
        message = UsiMessage.parse("bestmove 7g7f")
        assert message == BestMove(BoardMove((2, 2), (2, 3)))
        assert isinstance(message, BestMove)
        assert message.move is not None
        assert format_move(message.move) == "7g7f"
        assert not message.resigned

    def test_ponder_is_ignored(self) -> None:
        assert UsiMessage.parse("bestmove 7g7f ponder 3c3d") == BestMove(BoardMove((2, 2), (2, 3)))

    def test_resign(self) -> None:
        message = UsiMessage.parse("bestmove resign")
        assert isinstance(message, BestMove)
        assert message.resigned

    def test_declared_win(self) -> None:
        message = UsiMessage.parse("bestmove win")
        assert message == BestMove(None, declared_win=True)
        assert isinstance(message, BestMove)
        assert not message.resigned

    def test_missing_move(self) -> None:
        with pytest.raises(UsiParseError):
            UsiMessage.parse("bestmove")

    def test_bad_move(self) -> None:
        with pytest.raises(UsiParseError):
            UsiMessage.parse("bestmove 7z7f")


class TestId:
    def test_name(self) -> None:
        assert UsiMessage.parse("id name MyEngine") == Id(IdType.NAME, "MyEngine")

    def test_author_keeps_all_tokens(self) -> None:
        assert UsiMessage.parse("id author Jane Q. Public") == Id(IdType.AUTHOR, "Jane Q. Public")

    def test_too_few_tokens(self) -> None:
        with pytest.raises(UsiParseError):
            UsiMessage.parse("id name")

    def test_unknown_kind(self) -> None:
        with pytest.raises(UsiParseError):
            UsiMessage.parse("id version 1.0")


class TestOtherMessages:
    def test_usiok(self) -> None:
        assert UsiMessage.parse("usiok") == UsiOk()

    def test_usiok_must_be_last_token(self) -> None:
        with pytest.raises(UsiParseError):
            UsiMessage.parse("usiok now")

    def test_readyok(self) -> None:
        assert UsiMessage.parse("readyok") == ReadyOk()

    def test_info_text(self) -> None:
        assert UsiMessage.parse("info depth 10 score cp 34 pv 7g7f") == Info("depth 10 score cp 34 pv 7g7f")

    def test_leading_noise_is_skipped(self) -> None:
        assert UsiMessage.parse("Engine v1.2 ready usiok") == UsiOk()
        assert UsiMessage.parse("banner id name X") == Id(IdType.NAME, "X")

    def test_trailing_newline(self) -> None:
        assert UsiMessage.parse("usiok\n") == UsiOk()

    @pytest.mark.parametrize("line", ["foo bar", "", "   ", "option name USI_Hash type spin"])
    def test_unrecognised(self, line: str) -> None:
        with pytest.raises(UsiParseError):
            UsiMessage.parse(line)
