"""Boundaries between the game and an external engine process.

エンジンプロセスの起動やパイプの管理はこのパッケージの外側（I/O 層）が担う。
ここでは1行送る・1行受け取るだけの抽象的なチャネルを定義する。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shogi_usi.game.notation import Move


@runtime_checkable
class Channel(Protocol):
    """Non-blocking, line-oriented link to an engine process."""

    def send_line(self, line: str) -> None:
        """1行書き込む（改行は付けない）。"""
        ...

    def try_receive_line(self) -> str | None:
        """標準出力から読める行があれば返す。なければすぐに None を返す。"""
        ...

    def try_receive_stderr(self) -> str | None:
        """標準エラーの行（ログ用途のみ）。"""
        ...


@runtime_checkable
class Agent(Protocol):
    """A non-human player driven by polling."""

    @property
    def resigned(self) -> bool:
        ...

    @property
    def declared_win(self) -> bool:
        """入玉宣言で勝ちを主張したか。"""
        ...

    def start_turn(self, sfen: str) -> None:
        """sfen の局面で思考を始める（すぐに戻る）。"""
        ...

    def tick(self) -> Move | None:
        """1ティック分の処理。指し手が決まったらその手を1度だけ返す。"""
        ...
