"""USI protocol driver — talks to an external engine one line per tick.

USI エンジンとの通信を管理するクラス。

送信はキュー（FIFO）に積み、1ティックに1行だけ書き出す。
受信も1ティックに1行だけ読み、読める行がなければすぐに戻る。
呼び出し側のティック（フレーム更新など）を決してブロックしない。
"""

from __future__ import annotations

from collections import deque

from loguru import logger

from shogi_usi.config import EngineSettings
from shogi_usi.errors import InvariantViolation, UsiParseError
from shogi_usi.game.notation import Move, format_move
from shogi_usi.usi.channel import Channel
from shogi_usi.usi.messages import BestMove, Id, IdType, Info, ReadyOk, UsiMessage, UsiOk


class UsiDriver:
    """Drive a USI engine over a Channel; implements the Agent protocol.

    Example:
        driver = UsiDriver(channel, EngineSettings(movetime_ms=1000))
        driver.start()
        driver.start_turn(controller.sfen(with_move_number=True))
        while (move := driver.tick()) is None:
            ...  # one call per frame
    """

    def __init__(self, channel: Channel, settings: EngineSettings | None = None) -> None:
        self._channel = channel
        self.settings = settings if settings is not None else EngineSettings()
        self._queue: deque[str] = deque()
        self.engine_name: str | None = None
        self.engine_author: str | None = None
        self.usi_ok = False
        self.ready = False
        self.thinking = False
        self._resigned = False
        self._declared_win = False

    @property
    def resigned(self) -> bool:
        return self._resigned

    @property
    def declared_win(self) -> bool:
        return self._declared_win

    @property
    def pending_commands(self) -> list[str]:
        """まだ送信していないコマンド（送信順）。"""
        return list(self._queue)

    def send(self, command: str) -> None:
        """Queue a command; it is written on a later tick."""
        self._queue.append(command)

    def start(self) -> None:
        """Queue the opening handshake."""
        self.send("usi")
        if self.settings.new_game_handshake:
            self.send("isready")
            self.send("usinewgame")

    def start_turn(self, sfen: str) -> None:
        """Ask the engine to search the position given as SFEN."""
        if self.thinking:
            raise InvariantViolation("engine is already thinking")
        self._resigned = False
        self._declared_win = False
        self.thinking = True
        self.send(f"position sfen {sfen}")
        self.send(f"go movetime {self.settings.movetime_ms}")

    def tick(self) -> Move | None:
        """Flush at most one command, read at most one line of each stream.

        bestmove を受け取ったティックだけ指し手を返す。
        """
        self._flush_one()
        self._poll_stderr()

        line = self._channel.try_receive_line()
        if line is None:
            return None
        line = line.strip()
        if not line:
            return None
        logger.trace(f"USI recv: {line}")

        try:
            message = UsiMessage.parse(line)
        except UsiParseError as e:
            logger.warning(f"discarding engine line {line!r}: {e}")
            return None
        return self._handle(message)

    def _flush_one(self) -> None:
        if not self._queue:
            return
        command = self._queue.popleft()
        logger.trace(f"USI send: {command}")
        self._channel.send_line(command)

    def _poll_stderr(self) -> None:
        # 標準エラーはログに残すだけで、制御には使わない
        line = self._channel.try_receive_stderr()
        if line:
            logger.debug(f"engine stderr: {line.rstrip()}")

    def _handle(self, message: UsiMessage) -> Move | None:
        if isinstance(message, Id):
            if message.id_type == IdType.NAME:
                self.engine_name = message.value
            else:
                self.engine_author = message.value
            logger.info(f"engine {message.id_type.value}: {message.value}")
        elif isinstance(message, UsiOk):
            self.usi_ok = True
        elif isinstance(message, ReadyOk):
            self.ready = True
        elif isinstance(message, Info):
            logger.debug(f"engine info: {message.text}")
        elif isinstance(message, BestMove):
            if not self.thinking:
                logger.warning("ignoring bestmove received while not thinking")
                return None
            self.thinking = False
            if message.declared_win:
                logger.info("engine declared a win")
                self._declared_win = True
                return None
            if message.resigned:
                logger.info("engine resigned")
                self._resigned = True
                return None
            assert message.move is not None
            logger.info(f"engine bestmove {format_move(message.move)}")
            return message.move
        return None
