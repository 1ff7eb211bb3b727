"""Board representation for 本将棋 (9x9).

9×9盤の盤面データ構造。イミュータブルなデータクラスで、
変更メソッドは新しいオブジェクトを返す。

イミュータブルにしておくと、王手判定のための「仮に指してみる」処理が
元の盤面を壊さない。元に戻す処理が不要になり、常に正確に復元される。
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from shogi_usi.errors import IllegalDropError, InvariantViolation
from shogi_usi.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    NUM_SQUARES,
    ROWS,
    PieceType,
    Player,
    Square,
)

_EMPTY_HAND: tuple[int, ...] = (0,) * len(HAND_PIECE_TYPES)

# 先手視点の初期配置 (x, y, 駒種)。後手は (8-x, 8-y) に鏡像で置く。
_STARTING_LAYOUT: list[tuple[int, int, PieceType]] = [
    *[(x, 2, PieceType.PAWN) for x in range(COLS)],
    (7, 1, PieceType.ROOK),
    (1, 1, PieceType.BISHOP),
    (0, 0, PieceType.LANCE),
    (8, 0, PieceType.LANCE),
    (1, 0, PieceType.KNIGHT),
    (7, 0, PieceType.KNIGHT),
    (2, 0, PieceType.SILVER),
    (6, 0, PieceType.SILVER),
    (3, 0, PieceType.GOLD),
    (5, 0, PieceType.GOLD),
    (4, 0, PieceType.KING),
]


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    盤面上の駒。種類・所有者・成りフラグを持つ。
    成りは一方通行で、金と玉は常に promoted=False。
    """

    piece_type: PieceType
    owner: Player
    promoted: bool = False

    def promote(self) -> Piece:
        if not self.piece_type.can_promote:
            raise InvariantViolation(f"{self.piece_type.name} cannot promote")
        return replace(self, promoted=True)


@dataclass(frozen=True)
class Board:
    """Immutable board state: 81 squares plus both players' hands.

    squares: 81要素のタプル。squares[y * COLS + x] でアクセス。
    hands:   hands[player][piece_type] が持ち駒の枚数（王を除く7種）。
    """

    squares: tuple[Piece | None, ...] = field(
        default_factory=lambda: Board._initial_squares()
    )
    hands: tuple[tuple[int, ...], tuple[int, ...]] = (_EMPTY_HAND, _EMPTY_HAND)

    @staticmethod
    def _initial_squares() -> tuple[Piece | None, ...]:
        """Return the standard starting position (平手)."""
        squares: list[Piece | None] = [None] * NUM_SQUARES
        for x, y, pt in _STARTING_LAYOUT:
            squares[y * COLS + x] = Piece(pt, Player.SENTE)
            squares[(ROWS - 1 - y) * COLS + (COLS - 1 - x)] = Piece(pt, Player.GOTE)
        return tuple(squares)

    @classmethod
    def empty(cls) -> Board:
        """駒が1枚もない盤面（局面の組み立てやテスト用）。"""
        return cls(squares=(None,) * NUM_SQUARES)

    def piece_at(self, x: int, y: int) -> Piece | None:
        """マス(x, y)の駒を返す。駒がなければ None。"""
        return self.squares[y * COLS + x]

    def set_piece(self, x: int, y: int, piece: Piece | None) -> Board:
        """マス(x, y)の駒を変更した新しい Board を返す。"""
        squares = list(self.squares)
        squares[y * COLS + x] = piece
        return replace(self, squares=tuple(squares))

    def hand_count(self, player: Player, piece_type: PieceType) -> int:
        if piece_type == PieceType.KING:
            return 0
        return self.hands[player.value][piece_type.value]

    def add_to_hand(self, player: Player, piece_type: PieceType) -> Board:
        """Add a captured piece to hand.

        取った駒を持ち駒に追加する。成り駒も元の駒種として数えるので、
        呼び出し側は駒種だけを渡せばよい。
        """
        if piece_type == PieceType.KING:
            raise InvariantViolation("a king cannot be held in hand")
        return self._with_hand_delta(player, piece_type, 1)

    def remove_from_hand(self, player: Player, piece_type: PieceType) -> Board:
        """持ち駒から1枚取り除いた新しい Board を返す。"""
        if self.hand_count(player, piece_type) <= 0:
            raise IllegalDropError(f"{player.name} holds no {piece_type.name}")
        return self._with_hand_delta(player, piece_type, -1)

    def _with_hand_delta(self, player: Player, piece_type: PieceType, delta: int) -> Board:
        hands = list(self.hands)
        hand = list(hands[player.value])
        hand[piece_type.value] += delta
        hands[player.value] = tuple(hand)
        return replace(self, hands=(hands[0], hands[1]))

    def pieces(self, player: Player | None = None) -> Iterator[tuple[Square, Piece]]:
        """盤上の駒を ((x, y), Piece) で列挙する。player を指定するとその駒だけ。"""
        for idx, piece in enumerate(self.squares):
            if piece is None:
                continue
            if player is not None and piece.owner != player:
                continue
            yield (idx % COLS, idx // COLS), piece

    def find_king(self, player: Player) -> Square | None:
        """プレイヤーの玉のマスを返す。玉がなければ None。"""
        for square, piece in self.pieces(player):
            if piece.piece_type == PieceType.KING:
                return square
        return None

    def has_unpromoted_pawn_in_file(self, player: Player, x: int) -> bool:
        """二歩判定: 筋 x にプレイヤーの未成の歩があれば True。

        と金（成った歩）は数えない。
        """
        for y in range(ROWS):
            p = self.piece_at(x, y)
            if (
                p is not None
                and p.owner == player
                and p.piece_type == PieceType.PAWN
                and not p.promoted
            ):
                return True
        return False
