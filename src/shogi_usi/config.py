"""Settings for a game and for the external USI engine.

pydantic モデルで設定値を検証する。不正な値（movetime が 0 以下など）は
生成時に ValidationError になる。
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from shogi_usi.game.types import Player


class EngineSettings(BaseModel):
    """Options sent to (or used when talking to) a USI engine."""

    model_config = ConfigDict(frozen=True)

    movetime_ms: int = Field(default=5000, gt=0)  # "go movetime" に渡す思考時間（目安）
    new_game_handshake: bool = True  # start() で isready / usinewgame も送る


class GameSettings(BaseModel):
    """Top-level settings for a session."""

    model_config = ConfigDict(frozen=True)

    human_players: tuple[Player, ...] = (Player.SENTE, Player.GOTE)
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str | None = None
    engine: EngineSettings = Field(default_factory=EngineSettings)
