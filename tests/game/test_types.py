"""Tests for shogi types and movement tables."""

from __future__ import annotations

from shogi_usi.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    LETTER_TO_PIECE,
    ROWS,
    SFEN_HAND_ORDER,
    PieceType,
    Player,
    on_board,
)


def test_board_dimensions() -> None:
    assert ROWS == 9
    assert COLS == 9


def test_player_opponent() -> None:
    assert Player.SENTE.opponent == Player.GOTE
    assert Player.GOTE.opponent == Player.SENTE


def test_forward_direction() -> None:
    assert Player.SENTE.forward == 1
    assert Player.GOTE.forward == -1


def test_8_piece_types() -> None:
    assert len(PieceType) == 8


def test_promotable_types() -> None:
    assert not PieceType.GOLD.can_promote
    assert not PieceType.KING.can_promote
    assert PieceType.PAWN.can_promote
    assert PieceType.ROOK.can_promote


def test_letters_follow_enum_order() -> None:
    assert "".join(pt.letter for pt in PieceType) == "pbrlnsgk"
    assert LETTER_TO_PIECE["n"] == PieceType.KNIGHT


def test_hand_piece_types() -> None:
    assert len(HAND_PIECE_TYPES) == 7
    assert PieceType.KING not in HAND_PIECE_TYPES
    assert set(SFEN_HAND_ORDER) == set(HAND_PIECE_TYPES)
    assert SFEN_HAND_ORDER[0] == PieceType.ROOK


def test_on_board() -> None:
    assert on_board(0, 0)
    assert on_board(8, 8)
    assert not on_board(-1, 0)
    assert not on_board(0, 9)
