"""本将棋 (9x9) rules engine: board, move generation, notation, game flow."""

from shogi_usi.game.board import Board, Piece
from shogi_usi.game.controller import AwaitingPromotion, GameController, GameOver, Outcome, Playing
from shogi_usi.game.notation import BoardMove, DropMove, Move, parse_move, parse_sfen, to_sfen
from shogi_usi.game.types import COLS, ROWS, PieceType, Player

__all__ = [
    "AwaitingPromotion",
    "Board",
    "BoardMove",
    "COLS",
    "DropMove",
    "GameController",
    "GameOver",
    "Move",
    "Outcome",
    "Piece",
    "PieceType",
    "Player",
    "Playing",
    "ROWS",
    "parse_move",
    "parse_sfen",
    "to_sfen",
]
