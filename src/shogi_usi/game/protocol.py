"""RenderSink protocol — the interface the UI layer implements.

描画側（3D表示や端末表示）が実装するコールバックの集合。
コントローラは盤面の変化をこのインタフェース経由で通知するだけで、
描画の状態は一切持たない。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from shogi_usi.game.types import PieceType, Player, Square

if TYPE_CHECKING:
    from shogi_usi.game.board import Board
    from shogi_usi.game.controller import Outcome


@runtime_checkable
class RenderSink(Protocol):
    """Callbacks the game controller invokes as the position changes."""

    def on_board_setup(self, board: Board) -> None:
        """対局開始時、盤面全体を描き直す。"""
        ...

    def on_piece_moved(self, from_square: Square, to_square: Square) -> None:
        ...

    def on_piece_dropped(self, piece_type: PieceType, square: Square, player: Player) -> None:
        ...

    def on_piece_captured(self, square: Square) -> None:
        """square の駒が取られた（on_piece_moved より先に呼ばれる）。"""
        ...

    def on_piece_promoted(self, square: Square) -> None:
        ...

    def on_turn_changed(self, player: Player) -> None:
        ...

    def on_game_over(self, outcome: Outcome, reason: str) -> None:
        ...

    def on_promotion_choice_needed(self, square: Square) -> None:
        """成るかどうかの選択を UI に求める。"""
        ...


class NullRenderSink:
    """A RenderSink that ignores every notification."""

    def on_board_setup(self, board: Board) -> None:
        pass

    def on_piece_moved(self, from_square: Square, to_square: Square) -> None:
        pass

    def on_piece_dropped(self, piece_type: PieceType, square: Square, player: Player) -> None:
        pass

    def on_piece_captured(self, square: Square) -> None:
        pass

    def on_piece_promoted(self, square: Square) -> None:
        pass

    def on_turn_changed(self, player: Player) -> None:
        pass

    def on_game_over(self, outcome: Outcome, reason: str) -> None:
        pass

    def on_promotion_choice_needed(self, square: Square) -> None:
        pass
