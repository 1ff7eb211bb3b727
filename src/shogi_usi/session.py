"""GameSession — connects a GameController to engine-driven players.

人間の手番では何もしない（UI が GameController の入力メソッドを直接呼ぶ）。
エンジンの手番になったら、その局面の SFEN で思考を開始させ、
返ってきた指し手を人間と同じ make_move() に渡す。
"""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from shogi_usi.game.controller import GameController, Playing
from shogi_usi.game.notation import format_move
from shogi_usi.game.types import Player
from shogi_usi.usi.channel import Agent


class GameSession:
    def __init__(self, controller: GameController, agents: Mapping[Player, Agent]) -> None:
        overlap = controller.human_players & set(agents)
        if overlap:
            raise ValueError(f"players cannot be both human and engine: {sorted(p.name for p in overlap)}")
        self.controller = controller
        self.agents = dict(agents)
        self._turn_started_at: int | None = None

    def tick(self) -> None:
        """Advance every agent by one tick and apply an engine move if one arrived."""
        controller = self.controller
        if controller.is_over:
            return

        player = controller.current_player
        for other, agent in self.agents.items():
            if other != player:
                stray = agent.tick()
                if stray is not None:
                    logger.warning(f"ignoring {other.name} engine move {format_move(stray)} out of turn")

        agent = self.agents.get(player)
        if agent is None or not isinstance(controller.phase, Playing):
            return

        if self._turn_started_at != controller.ply:
            self._turn_started_at = controller.ply
            agent.start_turn(controller.sfen(with_move_number=True))

        move = agent.tick()
        if agent.declared_win:
            controller.declare_win(player)
            return
        if agent.resigned:
            controller.resign(player)
            return
        if move is None:
            return
        if not controller.make_move(move, from_engine=True):
            logger.error(f"{player.name} engine played illegal move {format_move(move)}; forfeiting")
            controller.resign(player)
