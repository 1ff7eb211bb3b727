"""Exception hierarchy for the rules engine and the USI client.

エラーは3種類に分類される:
1. 記法エラー（指し手・SFEN・USI 行の解析失敗）: 呼び出し側で破棄してログに残す
2. 非合法手（合法手集合にない手、持ち駒のない打ち手）: 拒否として扱い、状態は変えない
3. 不変条件違反（空きマスの移動先を問い合わせる等）: 呼び出し側のバグなので伝播させる
"""

from __future__ import annotations


class ShogiError(Exception):
    """Base class for all errors raised by shogi_usi."""


class NotationError(ShogiError, ValueError):
    """Malformed move notation or SFEN string."""


class UsiParseError(NotationError):
    """A USI line that is not a recognised, well-formed message."""


class IllegalMoveError(ShogiError):
    """A move or drop that is not in the legal set."""


class IllegalDropError(IllegalMoveError):
    """Dropping a king, or a piece type the player does not hold."""


class InvariantViolation(ShogiError, RuntimeError):
    """A caller broke the contract of the public entry points."""


class EmptySquareError(InvariantViolation):
    """Movement was requested for a square with no piece on it."""
