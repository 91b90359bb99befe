#!/usr/bin/env python3
"""
Evaluate the TicTacToe search.

Usage:
    python eval.py                     # matches vs random and sampled perfect play
    python eval.py --games 1000 --seed 1
    python eval.py --exhaustive        # every opponent line, both sides
    python eval.py --board "X..|.O.|..." --exhaustive
    python eval.py --agreement         # plain vs memoized search on all states
"""

import sys
import time
import argparse
from pathlib import Path

# Add src to path
sys.path = [str(Path(__file__).parent / "src")] + sys.path

from tictactoe import (
    Mark,
    evaluate,
    parse_board,
    best_move,
    memoized_best_move,
    make_player,
    run_match,
    exhaustive_outcomes,
    eval_memo_agreement_all_states,
)
from tictactoe.game import is_legal_board
from tictactoe.minimax import cache_size


def print_rates(label: str, results: dict):
    print(f"\n{label} ({results['games']} games)...")
    print(f"  Wins:   {results['win']:.2%}")
    print(f"  Draws:  {results['draw']:.2%}")
    print(f"  Losses: {results['loss']:.2%}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate TicTacToe search")
    parser.add_argument("--player", choices=["optimal", "memo"], default="memo",
                        help="Searcher under test")
    parser.add_argument("--games", type=int, default=100, help="Number of games per match")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for opponents")
    parser.add_argument("--board", type=str, default=None,
                        help="Start position, e.g. \"X..|.O.|...\" (default: empty board)")
    parser.add_argument("--exhaustive", action="store_true",
                        help="Check every opponent line from the start position")
    parser.add_argument("--agreement", action="store_true",
                        help="Compare plain and memoized search on all states (slow)")

    args = parser.parse_args()

    board = None
    if args.board is not None:
        try:
            board = parse_board(args.board)
        except ValueError as e:
            parser.error(str(e))
        if not is_legal_board(board):
            parser.error(f"Not a reachable position: {args.board}")
        if evaluate(board).is_terminal:
            parser.error(f"Game is already over: {args.board}")

    player = make_player(args.player)

    print("\n=== Evaluation ===")
    t0 = time.perf_counter()

    results = run_match(player, make_player("random", args.seed), games=args.games,
                        progress=True, board=board)
    print_rates("vs Random", results)

    results = run_match(player, make_player("sampled", args.seed), games=args.games,
                        progress=True, board=board)
    print_rates("vs Sampled Perfect Play", results)

    if args.exhaustive:
        chooser = best_move if args.player == "optimal" else memoized_best_move
        print("\nExhaustive (every opponent reply)...")
        for side in (Mark.X, Mark.O):
            counts = exhaustive_outcomes(side, chooser, board=board)
            print(f"  As {side.symbol}: wins {counts['wins']}  draws {counts['draws']}  "
                  f"losses {counts['losses']}")

    if args.agreement:
        print("\nPlain vs memoized search (all states)...")
        res = eval_memo_agreement_all_states(progress=True)
        print(f"  States: {res['states']}")
        print(f"  Agree:  {res['agree']}")

    print(f"\nCache entries: {cache_size()}")
    print(f"Elapsed: {time.perf_counter() - t0:.1f}s")


if __name__ == "__main__":
    main()
