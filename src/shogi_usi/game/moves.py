"""Move generation, check detection and legality filtering for 本将棋.

Two layers:
  raw:      reachable_squares / droppable_squares ignore whether the mover's
            king is left in check.
  filtered: legal_destinations / legal_drop_squares simulate every raw
            candidate on a copy of the board and drop those that leave the
            mover in check.

王手判定は raw の移動先だけを使う（filtered を使うと無限再帰になる）。
"""

from __future__ import annotations

from shogi_usi.errors import EmptySquareError, IllegalDropError, IllegalMoveError
from shogi_usi.game.board import Board, Piece
from shogi_usi.game.notation import BoardMove, DropMove, Move
from shogi_usi.game.types import (
    COLS,
    GOLD_STEPS,
    HAND_PIECE_TYPES,
    KNIGHT_MOVES,
    PROMOTED_EXTRA_STEPS,
    PROMOTION_ZONE_DEPTH,
    ROWS,
    SLIDE_MOVES,
    STEP_MOVES,
    PieceType,
    Player,
    Square,
    on_board,
)

# 成ると金と同じ動きになる駒種
_MOVES_AS_GOLD_WHEN_PROMOTED = (
    PieceType.PAWN, PieceType.LANCE, PieceType.KNIGHT, PieceType.SILVER,
)


def _movement_rules(piece: Piece) -> tuple[list[tuple[int, int]], list[tuple[int, int]]]:
    """Return (single-step offsets, slide directions) for a piece, Sente-relative."""
    pt = piece.piece_type
    if piece.promoted and pt in _MOVES_AS_GOLD_WHEN_PROMOTED:
        return GOLD_STEPS, []
    steps: list[tuple[int, int]] = []
    steps += STEP_MOVES.get(pt, [])
    if pt == PieceType.KNIGHT:
        steps += KNIGHT_MOVES
    if piece.promoted:
        # 馬は縦横1マス、龍は斜め1マスが加わる
        steps += PROMOTED_EXTRA_STEPS.get(pt, [])
    return steps, SLIDE_MOVES.get(pt, [])


def reachable_squares(board: Board, x: int, y: int) -> list[Square]:
    """Every square the piece on (x, y) could move to, ignoring check.

    移動先は盤内かつ自分の駒がないマスに限る。
    飛び駒は最初に駒があるマスで止まり、それが相手の駒なら取れる。
    """
    piece = board.piece_at(x, y)
    if piece is None:
        raise EmptySquareError(f"no piece on ({x}, {y})")

    owner = piece.owner
    forward = owner.forward
    steps, slides = _movement_rules(piece)
    squares: list[Square] = []

    for dx, dy in steps:
        nx, ny = x + dx, y + dy * forward
        if on_board(nx, ny):
            target = board.piece_at(nx, ny)
            if target is None or target.owner != owner:
                squares.append((nx, ny))

    for dx, dy in slides:
        dy *= forward
        nx, ny = x + dx, y + dy
        while on_board(nx, ny):
            target = board.piece_at(nx, ny)
            if target is not None and target.owner == owner:
                break
            squares.append((nx, ny))
            if target is not None:
                break  # 駒を取ったらそこで止まる
            nx, ny = nx + dx, ny + dy

    return squares


def droppable_squares(board: Board, player: Player, piece_type: PieceType) -> list[Square]:
    """Every empty square where piece_type could be dropped, ignoring check.

    二歩: 自分の未成の歩がある筋には歩を打てない。
    """
    if piece_type == PieceType.KING:
        raise IllegalDropError("a king cannot be dropped")

    squares: list[Square] = []
    for x in range(COLS):
        if piece_type == PieceType.PAWN and board.has_unpromoted_pawn_in_file(player, x):
            continue
        for y in range(ROWS):
            if board.piece_at(x, y) is None:
                squares.append((x, y))
    return squares


def is_in_check(board: Board, player: Player) -> bool:
    """True if any opponent piece can reach player's king square."""
    king = board.find_king(player)
    if king is None:
        return False
    for (x, y), _ in board.pieces(player.opponent):
        if king in reachable_squares(board, x, y):
            return True
    return False


def in_promotion_zone(player: Player, y: int) -> bool:
    """Check if a rank is in the player's promotion zone (enemy's 3 ranks)."""
    if player == Player.SENTE:
        return y >= ROWS - PROMOTION_ZONE_DEPTH
    return y < PROMOTION_ZONE_DEPTH


def can_promote(piece: Piece, to_y: int) -> bool:
    """True if piece landing on rank to_y may promote."""
    return (
        piece.piece_type.can_promote
        and not piece.promoted
        and in_promotion_zone(piece.owner, to_y)
    )


def apply_move(board: Board, player: Player, move: Move) -> tuple[Board, Piece | None]:
    """Apply a move without any legality check beyond basic shape.

    新しい盤面と取った駒（なければ None）を返す。元の盤面は変化しない。
    取った駒は成りを解除した元の駒種として持ち駒に加える。
    """
    if isinstance(move, DropMove):
        tx, ty = move.to_square
        if board.piece_at(tx, ty) is not None:
            raise IllegalDropError(f"square ({tx}, {ty}) is occupied")
        new_board = board.remove_from_hand(player, move.piece_type)
        return new_board.set_piece(tx, ty, Piece(move.piece_type, player)), None

    fx, fy = move.from_square
    tx, ty = move.to_square
    piece = board.piece_at(fx, fy)
    if piece is None:
        raise EmptySquareError(f"no piece on ({fx}, {fy})")
    if piece.owner != player:
        raise IllegalMoveError(f"piece on ({fx}, {fy}) belongs to {piece.owner.name}")

    captured = board.piece_at(tx, ty)
    new_board = board
    if captured is not None:
        new_board = new_board.add_to_hand(player, captured.piece_type)

    if move.promote:
        if not can_promote(piece, ty):
            raise IllegalMoveError(f"{piece.piece_type.name} cannot promote on rank {ty}")
        piece = piece.promote()

    new_board = new_board.set_piece(fx, fy, None)
    new_board = new_board.set_piece(tx, ty, piece)
    return new_board, captured


def _is_king(piece: Piece | None) -> bool:
    return piece is not None and piece.piece_type == PieceType.KING


def _leaves_king_safe(board: Board, player: Player, move: Move) -> bool:
    # 仮に指した盤面は新しいオブジェクトなので、元の盤面は常にそのまま残る
    simulated, _ = apply_move(board, player, move)
    return not is_in_check(simulated, player)


def legal_destinations(board: Board, x: int, y: int) -> list[Square]:
    """Raw reachable squares minus those that leave the mover in check.

    相手玉を取る手は候補に入れない（王手放置の局面を読み込んだ場合）。
    """
    piece = board.piece_at(x, y)
    if piece is None:
        raise EmptySquareError(f"no piece on ({x}, {y})")
    return [
        to
        for to in reachable_squares(board, x, y)
        if not _is_king(board.piece_at(*to))
        and _leaves_king_safe(board, piece.owner, BoardMove((x, y), to))
    ]


def legal_drop_squares(board: Board, player: Player, piece_type: PieceType) -> list[Square]:
    """Raw droppable squares minus those that leave the dropper in check.

    持ち駒がなければ空リストを返す。
    """
    if board.hand_count(player, piece_type) <= 0:
        if piece_type == PieceType.KING:
            raise IllegalDropError("a king cannot be dropped")
        return []
    return [
        to
        for to in droppable_squares(board, player, piece_type)
        if _leaves_king_safe(board, player, DropMove(piece_type, to))
    ]


def has_legal_moves(board: Board, player: Player) -> bool:
    """True if player has at least one legal board move or drop.

    終局判定に使う。打ち手は持ち駒が1枚以上ある駒種だけを調べる。
    """
    for (x, y), _ in board.pieces(player):
        if legal_destinations(board, x, y):
            return True
    for pt in HAND_PIECE_TYPES:
        if board.hand_count(player, pt) > 0 and legal_drop_squares(board, player, pt):
            return True
    return False


def legal_moves(board: Board, player: Player) -> list[Move]:
    """Generate all legal moves, with both promotion variants where allowed."""
    moves: list[Move] = []
    for (x, y), piece in board.pieces(player):
        for to in legal_destinations(board, x, y):
            if can_promote(piece, to[1]):
                moves.append(BoardMove((x, y), to, promote=True))
            moves.append(BoardMove((x, y), to))
    for pt in HAND_PIECE_TYPES:
        for to in legal_drop_squares(board, player, pt):
            moves.append(DropMove(pt, to))
    return moves


def is_legal(board: Board, player: Player, move: Move) -> bool:
    """True if move is in player's legal set on this board."""
    if isinstance(move, DropMove):
        if move.piece_type == PieceType.KING:
            return False
        return move.to_square in legal_drop_squares(board, player, move.piece_type)
    fx, fy = move.from_square
    piece = board.piece_at(fx, fy)
    if piece is None or piece.owner != player:
        return False
    if move.promote and not can_promote(piece, move.to_square[1]):
        return False
    return move.to_square in legal_destinations(board, fx, fy)
