"""CLI entry point for shogi-usi — hot-seat 本将棋 in the terminal.

端末で2人対局（交互に入力）する。指し手は USI 形式で入力する。
例: 7g7f（盤上の手）、8h2b+（成る）、P*5e（歩を打つ）

起動方法: `shogi-cli` または `shogi-cli --sfen "<SFEN>"`
"""

from __future__ import annotations

import typer
from loguru import logger
from pydantic import ValidationError

from shogi_usi.config import GameSettings
from shogi_usi.errors import NotationError
from shogi_usi.game.controller import AwaitingPromotion, GameController
from shogi_usi.game.display import ConsoleRenderer, format_board
from shogi_usi.game.moves import legal_moves
from shogi_usi.game.notation import STARTING_SFEN, format_move, parse_move, parse_sfen
from shogi_usi.utils.logging import setup_logging

app = typer.Typer(
    name="shogi-cli",
    help="Play 本将棋 in the terminal (two humans, USI move notation).",
    add_completion=False,
)

_HELP = "Commands: <move> (7g7f, 8h2b+, P*5e), moves, sfen, resign, quit"


def _ask_promotion() -> bool | None:
    """成るかどうかを y/n で尋ねる。入力が打ち切られたら None。"""
    while True:
        try:
            answer = input("Promote? [y/n]: ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            return None
        if answer in ("y", "n"):
            return answer == "y"
        print("Enter y or n.")


@app.command()
def main(
    sfen: str = typer.Option(STARTING_SFEN, "--sfen", help="Starting position"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
    log_file: str | None = typer.Option(None, "--log-file", help="Optional log file"),
) -> None:
    """Run a two-player game until checkmate, resignation or quit."""
    try:
        settings = GameSettings(log_level=log_level.upper(), log_file=log_file)
    except ValidationError as e:
        raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level") from e
    setup_logging(settings.log_level, settings.log_file)

    try:
        board, side, _ = parse_sfen(sfen)
    except NotationError as e:
        raise typer.BadParameter(str(e), param_hint="--sfen") from e

    print("=== 本将棋 ===")
    print(_HELP)
    print()

    controller = GameController(
        sink=ConsoleRenderer(),
        human_players=settings.human_players,
        board=board,
        current_player=side,
    )
    controller.start()
    shown_ply = controller.ply

    while not controller.is_over:
        if controller.ply != shown_ply:
            print(format_board(controller.board))
            shown_ply = controller.ply

        if isinstance(controller.phase, AwaitingPromotion):
            promote = _ask_promotion()
            if promote is None:
                print("\nGame aborted.")
                return
            controller.resolve_promotion_choice(promote)
            continue

        try:
            command = input(f"{controller.current_player.name} > ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGame aborted.")
            return

        if command == "quit":
            print("Game aborted.")
            return
        if command == "sfen":
            print(controller.sfen(with_move_number=True))
        elif command == "moves":
            moves = legal_moves(controller.board, controller.current_player)
            print(" ".join(format_move(m) for m in moves))
        elif command == "resign":
            controller.resign(controller.current_player)
        elif command:
            try:
                move = parse_move(command)
            except NotationError as e:
                print(f"Invalid: {e}")
                continue
            if not controller.make_move(move):
                print(f"Illegal move: {command}")
        else:
            print(_HELP)

    logger.info(f"final position: {controller.sfen()}")
    print(format_board(controller.board))


if __name__ == "__main__":
    app()
