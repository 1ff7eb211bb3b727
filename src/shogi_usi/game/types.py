"""Types and constants for 本将棋 (9x9).

本将棋の基本型・定数定義。
座標は (x, y) で表し、y=0 が先手の最下段（一段目の反対側、i段）。
先手は y が増える方向へ、後手は y が減る方向へ進む。
"""

from __future__ import annotations

from enum import IntEnum, unique

ROWS = 9
COLS = 9
NUM_SQUARES = ROWS * COLS  # 81マス

# 敵陣（成れる段）の深さ
PROMOTION_ZONE_DEPTH = 3

Square = tuple[int, int]


@unique
class Player(IntEnum):
    """Player identifiers.

    先手（SENTE）が最初に指す。SFEN の手番表記は先手 "b"、後手 "w"。
    """

    SENTE = 0  # 先手
    GOTE = 1   # 後手

    @property
    def opponent(self) -> Player:
        """相手プレイヤーを返す。"""
        return Player(1 - self.value)

    @property
    def forward(self) -> int:
        """前方向の y の増分（先手 +1、後手 -1）。"""
        return 1 if self == Player.SENTE else -1


@unique
class PieceType(IntEnum):
    """The eight base piece types.

    成りは駒種ではなく Piece.promoted フラグで表す。
    値の順序は SFEN の文字 "pbrlnsgk" と対応している。
    """

    PAWN = 0    # 歩
    BISHOP = 1  # 角
    ROOK = 2    # 飛
    LANCE = 3   # 香
    KNIGHT = 4  # 桂
    SILVER = 5  # 銀
    GOLD = 6    # 金
    KING = 7    # 玉

    @property
    def can_promote(self) -> bool:
        """成れる駒種なら True（金と玉は成れない）。"""
        return self not in (PieceType.GOLD, PieceType.KING)

    @property
    def letter(self) -> str:
        """SFEN の駒文字（小文字）。"""
        return PIECE_LETTERS[self.value]


PIECE_LETTERS = "pbrlnsgk"

LETTER_TO_PIECE: dict[str, PieceType] = {c: PieceType(i) for i, c in enumerate(PIECE_LETTERS)}

# 持ち駒として使える駒種（王以外の7種）
HAND_PIECE_TYPES = [pt for pt in PieceType if pt != PieceType.KING]

# SFEN の持ち駒を書き出す順序（飛角金銀桂香歩）
SFEN_HAND_ORDER = [
    PieceType.ROOK, PieceType.BISHOP, PieceType.GOLD, PieceType.SILVER,
    PieceType.KNIGHT, PieceType.LANCE, PieceType.PAWN,
]

# 1マス移動の方向定義（先手視点 (dx, dy)、前 = y 増加方向）
# 後手の場合は dy の符号を反転して使う
GOLD_STEPS: list[tuple[int, int]] = [(-1, 0), (1, 0), (0, 1), (0, -1), (-1, 1), (1, 1)]
DIAGONALS: list[tuple[int, int]] = [(-1, -1), (1, -1), (-1, 1), (1, 1)]
ORTHOGONALS: list[tuple[int, int]] = [(-1, 0), (1, 0), (0, -1), (0, 1)]

STEP_MOVES: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.PAWN: [(0, 1)],                                  # 歩: 1マス前のみ
    PieceType.SILVER: [(-1, 1), (1, 1), (-1, -1), (1, -1), (0, 1)],  # 銀: 斜め4方向+前
    PieceType.GOLD: GOLD_STEPS,                                # 金: 6方向
    PieceType.KING: [
        (-1, -1), (0, -1), (1, -1),
        (-1, 0), (1, 0),
        (-1, 1), (0, 1), (1, 1),
    ],  # 王: 全8方向1マス
}

# 桂馬のジャンプ（2マス前+左右1マス、間の駒を飛び越える）
KNIGHT_MOVES: list[tuple[int, int]] = [(1, 2), (-1, 2)]

# 遠距離移動の方向定義（最初に駒がある所で止まる）
SLIDE_MOVES: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.LANCE: [(0, 1)],     # 香: 前方向のみ
    PieceType.BISHOP: DIAGONALS,   # 角: 斜め4方向
    PieceType.ROOK: ORTHOGONALS,   # 飛: 縦横4方向
}

# 馬（成り角）の追加1マス移動と龍（成り飛）の追加1マス移動
PROMOTED_EXTRA_STEPS: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.BISHOP: ORTHOGONALS,
    PieceType.ROOK: DIAGONALS,
}

# 初期配置での各駒の枚数（片側）
PIECE_COUNTS: dict[PieceType, int] = {
    PieceType.PAWN: 9,
    PieceType.BISHOP: 1,
    PieceType.ROOK: 1,
    PieceType.LANCE: 2,
    PieceType.KNIGHT: 2,
    PieceType.SILVER: 2,
    PieceType.GOLD: 2,
    PieceType.KING: 1,
}


def on_board(x: int, y: int) -> bool:
    return 0 <= x < COLS and 0 <= y < ROWS
