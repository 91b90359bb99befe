"""
Evaluation functions.

Plays move choosers against each other, checks that the optimal searcher
never loses against any line of play, and measures agreement between the
plain and the memoized searcher on all legal states.
"""

from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
import torch
from tqdm.auto import tqdm, trange

from .game import Mark, apply_move, empty_board, evaluate, legal_moves, side_to_move
from .minimax import best_move, iter_all_legal_nonterminal_states, memoized_best_move, optimal_policy
from .strategy import random_move

Player = Callable[[Sequence[int], Mark], int]

PLAYER_KINDS = ("random", "optimal", "memo", "sampled")


def make_player(kind: str, seed: Optional[int] = None) -> Player:
    """
    Build a move chooser.

    Kinds:
        random:  uniform over empty cells
        optimal: best_move (plain minimax, lowest-index tie-break)
        memo:    memoized search, same moves as optimal
        sampled: uniform over all optimal moves (varied perfect play)
    """
    if kind == "random":
        rng = np.random.default_rng(seed)
        return lambda board, side: random_move(board, rng)
    if kind == "optimal":
        return best_move
    if kind == "memo":
        return memoized_best_move
    if kind == "sampled":
        gen = torch.Generator()
        if seed is not None:
            gen.manual_seed(seed)
        else:
            gen.seed()

        def sampled(board, side):
            pi, _ = optimal_policy(board, side)
            return int(torch.multinomial(pi, 1, generator=gen).item())
        return sampled
    raise ValueError(f"Unknown player kind: {kind!r} (expected one of {PLAYER_KINDS})")


def play_game(
    x_player: Player,
    o_player: Player,
    board: Optional[Sequence[int]] = None,
) -> Tuple[Mark, Tuple[int, ...]]:
    """
    Play one game to the end.

    Returns:
        (winner, moves) where winner is Mark.EMPTY for a draw
    """
    board = tuple(board) if board is not None else empty_board()
    moves = []

    while True:
        verdict = evaluate(board)
        if verdict.is_terminal:
            winner = verdict.winner if verdict.is_win else Mark.EMPTY
            return winner, tuple(moves)

        stm = side_to_move(board)
        chooser = x_player if stm == Mark.X else o_player
        action = chooser(board, stm)
        if board[action] != Mark.EMPTY:
            raise ValueError(f"Player for {stm.symbol} chose occupied cell {action}")
        board = apply_move(board, stm, action)
        moves.append(action)


def run_match(
    player: Player,
    opponent: Player,
    games: int = 100,
    progress: bool = False,
    board: Optional[Sequence[int]] = None,
) -> Dict[str, float]:
    """
    Play `games` games, alternating which side `player` takes.

    Every game starts from `board` (the empty board by default).

    Returns:
        Dict with 'games', 'win', 'draw', 'loss' rates for `player`
    """
    # Outcome per game from player's perspective: +1 / 0 / -1
    results = np.zeros(games, dtype=np.int8)

    for g in trange(games, disable=not progress, desc="games", leave=False):
        player_side = Mark.X if g % 2 == 0 else Mark.O
        if player_side == Mark.X:
            winner, _ = play_game(player, opponent, board)
        else:
            winner, _ = play_game(opponent, player, board)
        results[g] = 0 if winner == Mark.EMPTY else (1 if winner == player_side else -1)

    total = max(1, games)
    return {
        "games": games,
        "win": float(np.count_nonzero(results == 1)) / total,
        "draw": float(np.count_nonzero(results == 0)) / total,
        "loss": float(np.count_nonzero(results == -1)) / total,
    }


def exhaustive_outcomes(
    side: Mark,
    chooser: Player = best_move,
    board: Optional[Sequence[int]] = None,
) -> Dict[str, int]:
    """
    Play `chooser` as `side` against every possible line of opponent replies.

    Every reply the opponent could make is followed, so the counts cover
    all games the chooser can end up in from `board`.

    Returns:
        Dict with 'wins', 'draws', 'losses' counted over finished games
    """
    side = Mark(side)
    counts = {"wins": 0, "draws": 0, "losses": 0}
    start = tuple(board) if board is not None else empty_board()

    def walk(bd):
        verdict = evaluate(bd)
        if verdict.is_terminal:
            if verdict.is_draw:
                counts["draws"] += 1
            elif verdict.winner == side:
                counts["wins"] += 1
            else:
                counts["losses"] += 1
            return

        stm = side_to_move(bd)
        if stm == side:
            walk(apply_move(bd, side, chooser(bd, side)))
        else:
            for action in legal_moves(bd):
                walk(apply_move(bd, stm, action))

    walk(start)
    return counts


def eval_memo_agreement_all_states(progress: bool = False) -> Dict[str, object]:
    """
    Compare best_move with the memoized solver on every legal non-terminal state.

    Runs the unpruned search once per state, so expect this to take a while.

    Returns:
        Dict with 'states', 'agree' and the list of '_mismatches'
    """
    states = list(iter_all_legal_nonterminal_states())
    mismatches = []

    for board, player in tqdm(states, disable=not progress, desc="states", leave=False):
        plain = best_move(board, player)
        memo = memoized_best_move(board, player)
        if plain != memo:
            mismatches.append((board, player, plain, memo))
            if progress:
                tqdm.write(f"Mismatch: {board} {player.symbol}: {plain} != {memo}")

    return {
        "states": len(states),
        "agree": len(states) - len(mismatches),
        "_mismatches": mismatches,
    }
