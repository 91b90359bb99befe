#!/usr/bin/env python3
"""
Play TicTacToe in the terminal, against the computer or a friend.

Usage:
    python play.py                          # you are X, computer plays O
    python play.py --ai-plays-as X          # computer opens
    python play.py --mode local             # two humans
    python play.py --difficulty easy        # computer plays random moves
"""

import sys
import time
import argparse
from pathlib import Path

# Add src to path
sys.path = [str(Path(__file__).parent / "src")] + sys.path

from tictactoe import (
    Difficulty,
    GameConfig,
    GameSession,
    IllegalMove,
    Mark,
    format_board,
)

HELP = """Commands:
  0-8   place your mark
  u     undo
  r     new game (keep scores)
  R     new game and reset scores
  m     switch between vs-computer and two-player mode
  s     switch which mark the computer plays
  q     quit
"""


def print_board(session: GameSession):
    """Pretty print board, winning line in brackets."""
    print(format_board(session.board, highlight=session.winning_line or ()))
    print()


def print_scores(session: GameSession):
    s = session.scores
    print(f"Score  X: {s.x}  O: {s.o}  Draws: {s.draws}")


def player_label(session: GameSession, mark: Mark) -> str:
    cfg = session.config
    if cfg.mode == "cpu" and mark == cfg.ai_plays_as:
        return "Computer"
    return "Human"


def print_opponent(session: GameSession):
    cfg = session.config
    if cfg.mode == "cpu":
        print(f"Computer plays {cfg.ai_plays_as.symbol} ({cfg.difficulty.value})")
    else:
        print("Local game: X and O take turns")


def play_interactive(session: GameSession):
    """Run the game loop until the user quits."""
    print("\n=== TicTacToe ===")
    print_opponent(session)
    print(HELP)

    while True:
        print_board(session)
        print(session.status())

        if session.is_over:
            print_scores(session)
            try:
                again = input("Play again? [Y/n/u] ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print()
                return
            if again == "u":
                session.undo()
                continue
            if again.startswith("n") or again == "q":
                return
            session.reset()
            continue

        if session.is_computer_turn():
            time.sleep(session.config.ai_delay)
            cell = session.computer_move()
            print(f"Computer plays: {cell}\n")
            continue

        mark = session.current_player
        try:
            cmd = input(f"{player_label(session, mark)} ({mark.symbol}) > ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGame aborted")
            return

        if cmd == "q":
            return
        if cmd == "u":
            if not session.undo():
                print("Nothing to undo")
            continue
        if cmd in ("r", "R"):
            session.reset(full=(cmd == "R"))
            continue
        if cmd == "m":
            session.set_mode("local" if session.config.mode == "cpu" else "cpu")
            print_opponent(session)
            continue
        if cmd == "s":
            session.set_ai_plays_as(session.config.ai_plays_as.opponent())
            print_opponent(session)
            continue

        try:
            session.play(int(cmd))
        except ValueError as e:
            # IllegalMove is a ValueError; so is a non-numeric entry
            if isinstance(e, IllegalMove):
                print(f"{e}. Invalid move, try again")
            else:
                print("Invalid move, try again")
        print()


def main():
    parser = argparse.ArgumentParser(description="Play TicTacToe")
    parser.add_argument("--mode", choices=["cpu", "local"], default="cpu", help="Opponent")
    parser.add_argument("--ai-plays-as", type=str, default="O", help="Computer's mark (X or O)")
    parser.add_argument("--difficulty", type=str, default="hard",
                        help="easy/random or hard/optimal")
    parser.add_argument("--ai-delay", type=float, default=0.35, help="Seconds before computer moves")
    parser.add_argument("--memoize", action="store_true", help="Cache search results")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (easy mode)")

    args = parser.parse_args()

    try:
        config = GameConfig(
            mode=args.mode,
            ai_plays_as=Mark.parse(args.ai_plays_as),
            difficulty=Difficulty.parse(args.difficulty),
            ai_delay=args.ai_delay,
            memoize=args.memoize,
            seed=args.seed,
        ).validate()
    except ValueError as e:
        parser.error(str(e))

    play_interactive(GameSession(config))


if __name__ == "__main__":
    main()
