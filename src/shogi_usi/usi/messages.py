"""Parsing of lines received from a USI engine.

エンジンから届く1行を解析してメッセージオブジェクトにする。
行頭にエンジンのバナーなど余計なトークンがあっても、最初に見つかった
コマンドキーワードから解釈する。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shogi_usi.errors import NotationError, UsiParseError
from shogi_usi.game.notation import Move, parse_move

_RESIGN = "resign"
_WIN = "win"


class UsiMessage:
    """Base class for every message an engine can send."""

    @staticmethod
    def parse(line: str) -> UsiMessage:
        """Parse one engine output line.

        Raises:
            UsiParseError: no recognised keyword, or wrong arguments for it.
        """
        tokens = line.split()
        if not tokens:
            raise UsiParseError("empty command")

        for i, token in enumerate(tokens):
            if token in _PARSERS:
                return _PARSERS[token](tokens[i + 1:])
        raise UsiParseError(f"unrecognised command {line!r}")


@dataclass(frozen=True)
class UsiOk(UsiMessage):
    pass


@dataclass(frozen=True)
class ReadyOk(UsiMessage):
    pass


class IdType(Enum):
    NAME = "name"
    AUTHOR = "author"


@dataclass(frozen=True)
class Id(UsiMessage):
    id_type: IdType
    value: str


@dataclass(frozen=True)
class Info(UsiMessage):
    """Free-form search diagnostics (depth, score, pv ...)."""

    text: str


@dataclass(frozen=True)
class BestMove(UsiMessage):
    """The engine's chosen move.

    move は投了（resign）と入玉宣言勝ち（win）のとき None になる。
    """

    move: Move | None
    declared_win: bool = False

    @property
    def resigned(self) -> bool:
        return self.move is None and not self.declared_win


def _parse_usiok(args: list[str]) -> UsiMessage:
    if args:
        raise UsiParseError(f"invalid argument for command \"usiok\": {' '.join(args)!r}")
    return UsiOk()


def _parse_readyok(args: list[str]) -> UsiMessage:
    if args:
        raise UsiParseError(f"invalid argument for command \"readyok\": {' '.join(args)!r}")
    return ReadyOk()


def _parse_id(args: list[str]) -> UsiMessage:
    if len(args) < 2:
        raise UsiParseError("not enough parameters for command \"id\"")
    try:
        id_type = IdType(args[0])
    except ValueError:
        raise UsiParseError(f"unrecognised parameter for command \"id\": {args[0]!r}") from None
    return Id(id_type, " ".join(args[1:]))


def _parse_info(args: list[str]) -> UsiMessage:
    return Info(" ".join(args))


def _parse_bestmove(args: list[str]) -> UsiMessage:
    if not args:
        raise UsiParseError("not enough parameters for command \"bestmove\"")
    # 2つ目以降（"ponder 3c3d" など）は使わない
    if args[0] == _RESIGN:
        return BestMove(None)
    if args[0] == _WIN:
        return BestMove(None, declared_win=True)
    try:
        return BestMove(parse_move(args[0]))
    except NotationError as e:
        raise UsiParseError(f"invalid move in bestmove: {e}") from e


_PARSERS = {
    "id": _parse_id,
    "usiok": _parse_usiok,
    "readyok": _parse_readyok,
    "bestmove": _parse_bestmove,
    "info": _parse_info,
}
