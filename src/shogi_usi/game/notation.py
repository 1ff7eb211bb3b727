"""Move records, USI move notation and SFEN.

指し手のデータ型と文字列表記（USI 形式の指し手・SFEN 局面）。

座標の対応（盤面の内部座標 ⇔ 筋・段）は指し手でも打ち手でも同じ:
    x = 9 - 筋          y = 8 - 段インデックス（a=0 … i=8）
したがって "7g7f" は先手の歩が (2, 2) から (2, 3) へ進む手になる。
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_usi.errors import NotationError
from shogi_usi.game.board import Board, Piece
from shogi_usi.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    LETTER_TO_PIECE,
    ROWS,
    SFEN_HAND_ORDER,
    PieceType,
    Player,
    Square,
)

_FILES = "123456789"
_RANKS = "abcdefghi"
_DROP_LETTERS = "RBGSNLP"

STARTING_SFEN = "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b -"


@dataclass(frozen=True)
class BoardMove:
    """盤上の駒を動かす手。合法性はまだ保証されていない。"""

    from_square: Square
    to_square: Square
    promote: bool = False


@dataclass(frozen=True)
class DropMove:
    """持ち駒を打つ手。"""

    piece_type: PieceType
    to_square: Square


Move = BoardMove | DropMove


# ---------------------------------------------------------------------------
# USI move notation
# ---------------------------------------------------------------------------


def square_to_usi(square: Square) -> str:
    x, y = square
    return f"{COLS - x}{_RANKS[ROWS - 1 - y]}"


def usi_to_square(text: str) -> Square:
    """Decode a "<file><rank>" pair such as "7g"."""
    if len(text) != 2 or text[0] not in _FILES or text[1] not in _RANKS:
        raise NotationError(f"invalid square {text!r}")
    file = int(text[0])
    rank_index = _RANKS.index(text[1])
    return COLS - file, ROWS - 1 - rank_index


def parse_move(text: str) -> Move:
    """Parse a USI move string: "7g7f", "8h2b+" or "P*5e"."""
    if not text:
        raise NotationError("empty move string")

    if text[0] in _DROP_LETTERS:
        if len(text) != 4 or text[1] != "*":
            raise NotationError(f"invalid drop {text!r}")
        piece_type = LETTER_TO_PIECE[text[0].lower()]
        return DropMove(piece_type, usi_to_square(text[2:4]))

    if len(text) not in (4, 5):
        raise NotationError(f"invalid move length {text!r}")
    promote = False
    if len(text) == 5:
        if text[4] != "+":
            raise NotationError(f"invalid promotion marker {text[4:]!r}")
        promote = True
    return BoardMove(usi_to_square(text[0:2]), usi_to_square(text[2:4]), promote)


def format_move(move: Move) -> str:
    """Format a move in USI notation (parse_move の逆変換)."""
    if isinstance(move, DropMove):
        return f"{move.piece_type.letter.upper()}*{square_to_usi(move.to_square)}"
    suffix = "+" if move.promote else ""
    return f"{square_to_usi(move.from_square)}{square_to_usi(move.to_square)}{suffix}"


# ---------------------------------------------------------------------------
# SFEN
# ---------------------------------------------------------------------------


def _piece_to_sfen(piece: Piece) -> str:
    letter = piece.piece_type.letter
    if piece.owner == Player.SENTE:
        letter = letter.upper()
    return f"+{letter}" if piece.promoted else letter


def to_sfen(board: Board, side: Player, move_number: int | None = None) -> str:
    """Serialize a position to SFEN.

    段は y=8（a段）から y=0（i段）の順に "/" で区切って並べる。
    各段の中は x=0（9筋）から x=8（1筋）の順で、連続する空きマスは数字にまとめる。
    先手の駒は大文字、後手の駒は小文字。成り駒は文字の前に "+" を付ける（"+P"、"+r"）。
    """
    ranks: list[str] = []
    for y in range(ROWS - 1, -1, -1):
        rank = ""
        empty = 0
        for x in range(COLS):
            piece = board.piece_at(x, y)
            if piece is None:
                empty += 1
                continue
            if empty:
                rank += str(empty)
                empty = 0
            rank += _piece_to_sfen(piece)
        if empty:
            rank += str(empty)
        ranks.append(rank)

    hand = ""
    for player in Player:
        for pt in SFEN_HAND_ORDER:
            count = board.hand_count(player, pt)
            if count <= 0:
                continue
            letter = pt.letter.upper() if player == Player.SENTE else pt.letter
            hand += (str(count) if count > 1 else "") + letter

    side_char = "b" if side == Player.SENTE else "w"
    sfen = f"{'/'.join(ranks)} {side_char} {hand or '-'}"
    if move_number is not None:
        sfen += f" {move_number}"
    return sfen


def parse_sfen(text: str) -> tuple[Board, Player, int | None]:
    """Parse an SFEN string into (board, side to move, move number or None)."""
    fields = text.split()
    if len(fields) not in (3, 4):
        raise NotationError(f"SFEN needs 3 or 4 fields, got {text!r}")
    board_text, side_text, hand_text = fields[:3]

    board = Board.empty()
    ranks = board_text.split("/")
    if len(ranks) != ROWS:
        raise NotationError(f"SFEN board needs {ROWS} ranks, got {board_text!r}")
    for i, rank in enumerate(ranks):
        y = ROWS - 1 - i
        x = 0
        promoted = False
        for ch in rank:
            if ch.isdigit():
                if promoted:
                    raise NotationError(f"dangling '+' in rank {rank!r}")
                x += int(ch)
                continue
            if ch == "+":
                promoted = True
                continue
            pt = LETTER_TO_PIECE.get(ch.lower())
            if pt is None or x >= COLS:
                raise NotationError(f"invalid rank {rank!r}")
            if promoted and not pt.can_promote:
                raise NotationError(f"{pt.name} cannot be promoted in {rank!r}")
            owner = Player.SENTE if ch.isupper() else Player.GOTE
            board = board.set_piece(x, y, Piece(pt, owner, promoted))
            promoted = False
            x += 1
        if x != COLS or promoted:
            raise NotationError(f"rank {rank!r} does not span {COLS} files")

    if side_text not in ("b", "w"):
        raise NotationError(f"invalid side to move {side_text!r}")
    side = Player.SENTE if side_text == "b" else Player.GOTE

    if hand_text != "-":
        count = ""
        for ch in hand_text:
            if ch.isdigit():
                count += ch
                continue
            pt = LETTER_TO_PIECE.get(ch.lower())
            if pt is None or pt not in HAND_PIECE_TYPES:
                raise NotationError(f"invalid hand piece {ch!r} in {hand_text!r}")
            owner = Player.SENTE if ch.isupper() else Player.GOTE
            for _ in range(int(count) if count else 1):
                board = board.add_to_hand(owner, pt)
            count = ""
        if count:
            raise NotationError(f"dangling count in hand {hand_text!r}")

    move_number = None
    if len(fields) == 4:
        if not fields[3].isdigit():
            raise NotationError(f"invalid move number {fields[3]!r}")
        move_number = int(fields[3])
    return board, side, move_number
