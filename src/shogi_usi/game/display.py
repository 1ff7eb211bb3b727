"""Terminal display for 本将棋."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from shogi_usi.game.board import Board, Piece
from shogi_usi.game.notation import square_to_usi
from shogi_usi.game.types import COLS, ROWS, SFEN_HAND_ORDER, PieceType, Player, Square

if TYPE_CHECKING:
    from shogi_usi.game.controller import Outcome

# Display characters for pieces
_PIECE_CHARS: dict[PieceType, str] = {
    PieceType.PAWN: "歩",
    PieceType.LANCE: "香",
    PieceType.KNIGHT: "桂",
    PieceType.SILVER: "銀",
    PieceType.GOLD: "金",
    PieceType.BISHOP: "角",
    PieceType.ROOK: "飛",
    PieceType.KING: "玉",
}

# 成り駒の表示文字
_PROMOTED_CHARS: dict[PieceType, str] = {
    PieceType.PAWN: "と",
    PieceType.LANCE: "杏",
    PieceType.KNIGHT: "圭",
    PieceType.SILVER: "全",
    PieceType.BISHOP: "馬",
    PieceType.ROOK: "龍",
}

_PLAYER_NAMES = {Player.SENTE: "先手", Player.GOTE: "後手"}


def piece_char(piece: Piece) -> str:
    if piece.promoted:
        return _PROMOTED_CHARS[piece.piece_type]
    return _PIECE_CHARS[piece.piece_type]


def format_board(board: Board) -> str:
    """Format the board for terminal display.

    上端が a段（y=8、後手の陣）、左端が 9筋（x=0）。後手の駒には "v" を付ける。
    """
    lines: list[str] = []

    lines.append(f"後手持駒: {_format_hand(board, Player.GOTE)}")
    lines.append("  ９ ８ ７ ６ ５ ４ ３ ２ １")
    lines.append("+--+--+--+--+--+--+--+--+--+")

    for y in range(ROWS - 1, -1, -1):
        row_str = "|"
        for x in range(COLS):
            piece = board.piece_at(x, y)
            if piece is None:
                row_str += "  |"
            elif piece.owner == Player.GOTE:
                row_str += f"v{piece_char(piece)}|"
            else:
                row_str += f" {piece_char(piece)}|"
        lines.append(f"{row_str} {_rank_label(y)}")
        lines.append("+--+--+--+--+--+--+--+--+--+")

    lines.append(f"先手持駒: {_format_hand(board, Player.SENTE)}")

    return "\n".join(lines)


def _format_hand(board: Board, player: Player) -> str:
    pieces: list[str] = []
    for pt in SFEN_HAND_ORDER:
        count = board.hand_count(player, pt)
        if count == 0:
            continue
        char = _PIECE_CHARS[pt]
        pieces.append(char if count == 1 else f"{char}{count}")
    return " ".join(pieces) if pieces else "なし"


def _rank_label(y: int) -> str:
    labels = ["一", "二", "三", "四", "五", "六", "七", "八", "九"]
    return labels[ROWS - 1 - y]


class ConsoleRenderer:
    """RenderSink that narrates the game on stdout."""

    def __init__(self, echo: Callable[[str], None] = print) -> None:
        self._echo = echo

    def on_board_setup(self, board: Board) -> None:
        self._echo(format_board(board))

    def on_piece_moved(self, from_square: Square, to_square: Square) -> None:
        self._echo(f"{square_to_usi(from_square)} -> {square_to_usi(to_square)}")

    def on_piece_dropped(self, piece_type: PieceType, square: Square, player: Player) -> None:
        self._echo(f"{_PLAYER_NAMES[player]} drops {_PIECE_CHARS[piece_type]} on {square_to_usi(square)}")

    def on_piece_captured(self, square: Square) -> None:
        self._echo(f"capture on {square_to_usi(square)}")

    def on_piece_promoted(self, square: Square) -> None:
        self._echo(f"promoted on {square_to_usi(square)}")

    def on_turn_changed(self, player: Player) -> None:
        self._echo(f"{_PLAYER_NAMES[player]}の手番")

    def on_game_over(self, outcome: Outcome, reason: str) -> None:
        self._echo(f"Game over ({outcome.value}): {reason}")

    def on_promotion_choice_needed(self, square: Square) -> None:
        self._echo(f"Promote on {square_to_usi(square)}? [y/n]")
