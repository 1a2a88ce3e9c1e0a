#!/usr/bin/env python3
"""Watch a random player play Minesweeper."""
import time
import os

import numpy as np

from src.minesweeper import Difficulty, MinesweeperEnv


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 5, size: int = 9, mines: int = 10):
    """Run demo games with visualization."""
    difficulty = Difficulty(rows=size, cols=size, mine_count=mines)
    env = MinesweeperEnv(difficulty, render_mode="ansi")
    rng = np.random.default_rng()
    cells = size * size

    print(f"Board: {size}x{size} with {mines} mines ({100*mines/cells:.1f}% density)")
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        env.reset()

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            valid = np.flatnonzero(env.get_action_mask()[:cells])
            action = int(rng.choice(valid))
            row, col = divmod(action, size)

            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: ({row}, {col})\n")
            print(env.render())

            if done:
                if info.get("game_state") == "WON":
                    wins += 1
                    print(f"\n*** WIN! ***")
                else:
                    print(f"\n*** LOST (hit mine) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--size", type=int, default=9, help="Board size (NxN)")
    parser.add_argument("--mines", type=int, default=None, help="Number of mines (default: ~12%% of cells)")
    args = parser.parse_args()

    # Default mines to ~12% of cells (beginner density)
    mines = args.mines if args.mines is not None else int(args.size * args.size * 0.12)

    demo(delay=args.delay, games=args.games, size=args.size, mines=mines)
