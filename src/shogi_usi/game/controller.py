"""Turn and phase state machine for a game of 本将棋.

対局の進行を管理するコントローラ。

フェーズは3状態:
  Playing           : 手番のプレイヤーが指すのを待っている
  AwaitingPromotion : 人間が敵陣に駒を進め、成り/不成の選択を待っている
  GameOver          : 終局（詰み・合法手なし・投了）

盤面は GameController だけが更新する。人間の入力（マスのクリック・駒台の選択）
もエンジンの指し手も、最終的に make_move() を通る。
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from shogi_usi.errors import InvariantViolation
from shogi_usi.game.board import Board
from shogi_usi.game.moves import (
    apply_move,
    can_promote,
    has_legal_moves,
    is_in_check,
    is_legal,
    legal_destinations,
    legal_drop_squares,
)
from shogi_usi.game.notation import BoardMove, DropMove, Move, format_move, to_sfen
from shogi_usi.game.protocol import NullRenderSink, RenderSink
from shogi_usi.game.types import PieceType, Player, Square


class Outcome(Enum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    RESIGNATION = "resignation"
    DECLARATION = "declaration"


@dataclass(frozen=True)
class Playing:
    pass


@dataclass(frozen=True)
class AwaitingPromotion:
    """成り/不成の選択待ち。square は動かした駒の移動先。"""

    square: Square


@dataclass(frozen=True)
class GameOver:
    outcome: Outcome
    winner: Player | None
    reason: str


Phase = Playing | AwaitingPromotion | GameOver


class GameController:
    """Owns the live position and advances turns.

    Rejected actions (illegal moves, empty hand, wrong player) return False and
    leave every piece of state untouched. Calls that make no sense in the
    current phase raise InvariantViolation.
    """

    def __init__(
        self,
        sink: RenderSink | None = None,
        human_players: Iterable[Player] = (Player.SENTE, Player.GOTE),
        board: Board | None = None,
        current_player: Player = Player.SENTE,
    ) -> None:
        self._sink: RenderSink = sink if sink is not None else NullRenderSink()
        self.human_players = frozenset(human_players)
        self._board = board if board is not None else Board()
        self._current_player = current_player
        self._phase: Phase = Playing()
        self._ply = 0
        self._selected: Square | None = None
        self._selected_bench_piece: PieceType | None = None
        self._highlighted: list[Square] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self._board

    @property
    def current_player(self) -> Player:
        return self._current_player

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def ply(self) -> int:
        """これまでに完了した手数。"""
        return self._ply

    @property
    def selected(self) -> Square | None:
        return self._selected

    @property
    def selected_bench_piece(self) -> PieceType | None:
        return self._selected_bench_piece

    @property
    def highlighted(self) -> list[Square]:
        """選択中の駒（または持ち駒）の合法な移動先。"""
        return list(self._highlighted)

    @property
    def is_over(self) -> bool:
        return isinstance(self._phase, GameOver)

    def sfen(self, with_move_number: bool = False) -> str:
        move_number = self._ply + 1 if with_move_number else None
        return to_sfen(self._board, self._current_player, move_number)

    def start(self) -> None:
        """Announce the initial position to the sink."""
        self._sink.on_board_setup(self._board)
        self._sink.on_turn_changed(self._current_player)
        self._check_game_over()

    # ------------------------------------------------------------------
    # Input entry points
    # ------------------------------------------------------------------

    def select_or_move(self, square: Square) -> bool:
        """Handle a click on a board square.

        自分の駒をクリック → 選択（同じ駒なら選択解除）
        それ以外をクリック → 選択中の駒を動かす / 持ち駒を打つ。失敗したら選択解除。
        """
        if not self._accepts_human_input("select_or_move"):
            return False

        x, y = square
        piece = self._board.piece_at(x, y)
        if piece is not None and piece.owner == self._current_player:
            self._selected_bench_piece = None
            if self._selected == square:
                self._clear_selection()
            else:
                self._selected = square
                self._highlighted = legal_destinations(self._board, x, y)
            return True

        selected, bench_piece = self._selected, self._selected_bench_piece
        self._clear_selection()
        if selected is not None:
            return self.make_move(BoardMove(selected, square))
        if bench_piece is not None:
            return self.make_move(DropMove(bench_piece, square))
        return False

    def select_bench_piece(self, piece_type: PieceType) -> bool:
        """Select (or deselect) a piece type from the current player's hand."""
        if not self._accepts_human_input("select_bench_piece"):
            return False

        if self._selected_bench_piece == piece_type:
            self._clear_selection()
            return True

        self._clear_selection()
        if piece_type == PieceType.KING or self._board.hand_count(self._current_player, piece_type) <= 0:
            logger.warning(f"{self._current_player.name} holds no {piece_type.name}")
            return False

        self._selected_bench_piece = piece_type
        self._highlighted = legal_drop_squares(self._board, self._current_player, piece_type)
        return True

    def resolve_promotion_choice(self, promote: bool) -> None:
        """Finish a suspended human move with the player's promotion decision."""
        if not isinstance(self._phase, AwaitingPromotion):
            raise InvariantViolation(f"no promotion choice pending (phase={self._phase})")

        square = self._phase.square
        if promote:
            x, y = square
            piece = self._board.piece_at(x, y)
            assert piece is not None
            self._board = self._board.set_piece(x, y, piece.promote())
            self._sink.on_piece_promoted(square)
        self._phase = Playing()
        self._finish_turn()

    def make_move(self, move: Move, from_engine: bool = False) -> bool:
        """Validate and apply a move for the current player.

        人間の手で、成れるのに成り指定がない場合は AwaitingPromotion に移って
        resolve_promotion_choice() を待つ。エンジンの手は成りフラグをそのまま使う。
        """
        if isinstance(self._phase, GameOver):
            raise InvariantViolation("the game is already over")
        if isinstance(self._phase, AwaitingPromotion):
            logger.warning(f"rejected {format_move(move)}: promotion choice pending")
            return False
        if not is_legal(self._board, self._current_player, move):
            logger.warning(f"rejected illegal move {format_move(move)} for {self._current_player.name}")
            return False

        player = self._current_player
        logger.debug(f"{player.name} plays {format_move(move)}")
        self._board, captured = apply_move(self._board, player, move)
        self._clear_selection()

        if isinstance(move, DropMove):
            self._sink.on_piece_dropped(move.piece_type, move.to_square, player)
            self._finish_turn()
            return True

        if captured is not None:
            self._sink.on_piece_captured(move.to_square)
        self._sink.on_piece_moved(move.from_square, move.to_square)
        if move.promote:
            self._sink.on_piece_promoted(move.to_square)
        elif not from_engine:
            tx, ty = move.to_square
            piece = self._board.piece_at(tx, ty)
            assert piece is not None
            if can_promote(piece, ty):
                self._phase = AwaitingPromotion(move.to_square)
                self._sink.on_promotion_choice_needed(move.to_square)
                return True

        self._finish_turn()
        return True

    def resign(self, player: Player) -> None:
        if isinstance(self._phase, GameOver):
            raise InvariantViolation("the game is already over")
        self._end_game(Outcome.RESIGNATION, player.opponent, f"{player.name} resigned")

    def declare_win(self, player: Player) -> None:
        """入玉宣言による勝ち。宣言の条件（点数など）はここでは検証しない。"""
        if isinstance(self._phase, GameOver):
            raise InvariantViolation("the game is already over")
        self._end_game(Outcome.DECLARATION, player, f"{player.name} declared a win")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _accepts_human_input(self, action: str) -> bool:
        if isinstance(self._phase, GameOver):
            raise InvariantViolation(f"{action} called after the game ended")
        if isinstance(self._phase, AwaitingPromotion):
            logger.warning(f"{action} ignored: promotion choice pending")
            return False
        if self._current_player not in self.human_players:
            logger.warning(f"{action} ignored: {self._current_player.name} is not a human player")
            return False
        return True

    def _clear_selection(self) -> None:
        self._selected = None
        self._selected_bench_piece = None
        self._highlighted = []

    def _finish_turn(self) -> None:
        self._ply += 1
        self._current_player = self._current_player.opponent
        self._clear_selection()
        self._sink.on_turn_changed(self._current_player)
        self._check_game_over()

    def _check_game_over(self) -> None:
        """手番のプレイヤーに合法手がなければ終局にする。

        王手されていれば詰み、そうでなければ stalemate と報告する
        （本将棋では合法手なしは常に負けだが、ラベルは王手の有無で分ける）。
        """
        player = self._current_player
        if has_legal_moves(self._board, player):
            return
        if is_in_check(self._board, player):
            self._end_game(Outcome.CHECKMATE, player.opponent, f"{player.name} is checkmated")
        else:
            self._end_game(Outcome.STALEMATE, None, f"{player.name} has no legal moves")

    def _end_game(self, outcome: Outcome, winner: Player | None, reason: str) -> None:
        logger.info(f"game over: {outcome.value} ({reason})")
        self._phase = GameOver(outcome, winner, reason)
        self._clear_selection()
        self._sink.on_game_over(outcome, reason)
