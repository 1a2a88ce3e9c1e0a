#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty {easy,medium,hard}] [--seed N]
    python main.py play --rows R --cols C --mines M
    python main.py simulate [--games N]
"""
import argparse
import logging
from typing import Union

import numpy as np

from src.minesweeper import (
    DIFFICULTIES,
    Difficulty,
    Dialog,
    GameController,
    GameEngine,
    InvalidConfiguration,
    MinesweeperEnv,
)


HELP = """Commands:
  r ROW COL        reveal a cell
  f ROW COL        toggle a flag
  n [DIFFICULTY]   new game (easy, medium, hard)
  q                quit"""


def get_difficulty(
    args: argparse.Namespace, parser: argparse.ArgumentParser
) -> Union[str, Difficulty]:
    """Build the difficulty from preset or explicit dimensions."""
    custom = (args.rows, args.cols, args.mines)
    if all(value is None for value in custom):
        return args.difficulty
    if any(value is None for value in custom):
        parser.error("--rows, --cols and --mines must be given together")
    try:
        return Difficulty(args.rows, args.cols, args.mines)
    except InvalidConfiguration as exc:
        parser.error(str(exc))


def show_dialog(dialog: Dialog) -> None:
    print(f"\n*** {dialog.title} *** {dialog.message}")


def play(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Play an interactive game in the terminal."""
    engine = GameEngine(get_difficulty(args, parser), seed=args.seed)
    controller = GameController(engine, on_dialog=show_dialog)
    print(HELP)

    try:
        while True:
            print()
            print(controller.render(coordinates=True))
            try:
                line = input("> ")
            except EOFError:
                break

            parts = line.split()
            if not parts:
                continue
            command = parts[0].lower()

            if command in ("q", "quit"):
                break
            if command in ("n", "new"):
                try:
                    controller.new_game(parts[1] if len(parts) > 1 else None)
                except InvalidConfiguration as exc:
                    print(exc)
                continue
            if command in ("r", "f") and len(parts) == 3:
                try:
                    row, col = int(parts[1]), int(parts[2])
                except ValueError:
                    print("ROW and COL must be integers")
                    continue
                if command == "r":
                    controller.reveal(row, col)
                else:
                    controller.toggle_flag(row, col)
                continue
            print(HELP)
    finally:
        controller.close()


def simulate(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Play games with a random player and report the results."""
    env = MinesweeperEnv(get_difficulty(args, parser))
    rng = np.random.default_rng(args.seed)
    cell_count = env.difficulty.total_cells

    wins = 0
    total_steps = 0
    total_revealed = 0

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        _, info = env.reset(seed=seed)
        done = False

        while not done:
            valid = np.flatnonzero(env.get_action_mask()[:cell_count])
            action = int(rng.choice(valid))
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        if info["game_state"] == "WON":
            wins += 1
        total_steps += info["steps"]
        total_revealed += info["revealed"]

    print(f"Results over {args.games} games:")
    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg steps: {total_steps / args.games:.1f}")
    print(f"  Avg revealed: {total_revealed / args.games:.1f} cells")


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--difficulty",
        choices=sorted(DIFFICULTIES),
        default="easy",
        help="Preset board",
    )
    parser.add_argument("--rows", type=int, help="Custom board rows")
    parser.add_argument("--cols", type=int, help="Custom board columns")
    parser.add_argument("--mines", type=int, help="Custom mine count")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper - Play in the terminal or simulate games"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_arguments(play_parser)

    simulate_parser = subparsers.add_parser(
        "simulate", help="Play random games and report the win rate"
    )
    add_board_arguments(simulate_parser)
    simulate_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        play(args, parser)
    elif args.command == "simulate":
        simulate(args, parser)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
