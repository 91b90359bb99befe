"""
Optimal move search for TicTacToe.

`best_move` is a plain full-depth minimax: every continuation is explored,
no pruning. `minimax_value_and_moves` is the same game value computed by a
negamax solver memoized on the board's symmetry class; it returns the
optimal moves in ascending order, so its first move always matches
`best_move`.
"""

import torch
from typing import Dict, List, Sequence, Tuple

from .errors import InvalidState
from .game import Mark, Verdict, apply_move, evaluate, legal_moves, winners_set
from .symmetries import canonical_form, map_move_from_canonical


def _check_side(side: int) -> Mark:
    side = Mark(side)
    if side is Mark.EMPTY:
        raise ValueError("Searching side must be X or O, not EMPTY")
    return side


def _leaf_score(verdict: Verdict, searching_side: Mark) -> int:
    """+1 / -1 / 0 for a terminal verdict, from the searching side's view."""
    if verdict.is_draw:
        return 0
    return +1 if verdict.winner == searching_side else -1


def minimax_score(board: Sequence[int], searching_side: int, turn: int) -> int:
    """
    Minimax value of a node from the searching side's perspective.

    Args:
        board: Position to score
        searching_side: Mark the search maximizes for
        turn: Mark to move at this node

    Returns:
        +1 (forced win), 0 (draw), -1 (forced loss)
    """
    verdict = evaluate(board)
    if verdict.is_terminal:
        return _leaf_score(verdict, searching_side)

    next_turn = Mark(turn).opponent()
    scores = [
        minimax_score(apply_move(board, turn, action), searching_side, next_turn)
        for action in legal_moves(board)
    ]
    # Alpha-beta pruning would cut this loop short; exhaustive is cheap enough at 3x3.
    return max(scores) if turn == searching_side else min(scores)


def best_move(board: Sequence[int], searching_side: int) -> int:
    """
    Compute the optimal move for the searching side, which is to move.

    Ties between equally good cells go to the lowest index.

    Args:
        board: Current board (not modified)
        searching_side: Mark.X or Mark.O

    Returns:
        Index (0-8) of an empty cell

    Raises:
        InvalidState: board is already won or drawn
    """
    side = _check_side(searching_side)
    verdict = evaluate(board)
    moves = legal_moves(board)
    if verdict.is_terminal or not moves:
        raise InvalidState(f"No move to search: position is {verdict.status.value}")

    best_action = moves[0]
    best_score = -2
    opponent = side.opponent()
    for action in moves:
        score = minimax_score(apply_move(board, side, action), side, opponent)
        if score > best_score:
            best_score = score
            best_action = action
    return best_action


# Cache: (canonical_board, player) -> (value, best_moves in canonical frame)
_MINIMAX_CACHE: Dict[Tuple[Tuple[int, ...], int], Tuple[int, Tuple[int, ...]]] = {}


def minimax_value_and_moves(board: Sequence[int], player: int) -> Tuple[int, List[int]]:
    """
    Compute minimax value and best moves from current state.

    Args:
        board: Current board state
        player: Current player (Mark.X or Mark.O)

    Returns:
        (value, best_moves) where:
        - value: +1 (win), 0 (draw), -1 (loss) from current player's perspective
        - best_moves: ascending list of actions achieving optimal value
    """
    player = _check_side(player)

    # Terminal boards are scored in their own frame: on a board with two
    # complete lines the first-line rule is not symmetry invariant.
    verdict = evaluate(board)
    if verdict.is_terminal:
        return _leaf_score(verdict, player), []

    canon, sym_id = canonical_form(board)
    key = (canon, int(player))
    if key not in _MINIMAX_CACHE:
        _MINIMAX_CACHE[key] = _solve(canon, player)
    v, best = _MINIMAX_CACHE[key]
    return v, sorted(map_move_from_canonical(a, sym_id) for a in best)


def _solve(board: Tuple[int, ...], player: Mark) -> Tuple[int, Tuple[int, ...]]:
    best_v = -2
    best_moves: List[int] = []

    for action in legal_moves(board):
        next_board = apply_move(board, player, action)
        child_v, _ = minimax_value_and_moves(next_board, player.opponent())
        v_here = -child_v  # Negate for opponent's perspective

        if v_here > best_v:
            best_v = v_here
            best_moves = [action]
        elif v_here == best_v:
            best_moves.append(action)

    return best_v, tuple(best_moves)


def memoized_best_move(board: Sequence[int], searching_side: int) -> int:
    """Same contract and result as best_move, served from the solver cache."""
    side = _check_side(searching_side)
    verdict = evaluate(board)
    if verdict.is_terminal:
        raise InvalidState(f"No move to search: position is {verdict.status.value}")
    _, moves = minimax_value_and_moves(board, side)
    return moves[0]


def optimal_policy(board: Sequence[int], player: int) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Compute the optimal policy and value of a position.

    Returns:
        pi: [9] tensor with uniform distribution over optimal moves
        v: scalar tensor in {-1, 0, +1}
    """
    v, moves = minimax_value_and_moves(board, player)

    pi = torch.zeros(9, dtype=torch.float32)
    if moves:
        pi[moves] = 1.0 / len(moves)

    return pi, torch.tensor(float(v), dtype=torch.float32)


def clear_cache():
    """Clear minimax cache (useful for memory management)."""
    _MINIMAX_CACHE.clear()


def cache_size() -> int:
    """Return current cache size."""
    return len(_MINIMAX_CACHE)


def iter_all_legal_nonterminal_states():
    """
    Iterate over all legal non-terminal board states.

    Yields:
        (board, player) tuples for exhaustive evaluation.
    """
    for n in range(3**9):
        # Decode base-3 representation
        x = n
        board = []
        for _ in range(9):
            d = x % 3
            board.append(Mark.X if d == 1 else Mark.O if d == 2 else Mark.EMPTY)
            x //= 3
        board = tuple(board)

        x_cnt = board.count(Mark.X)
        o_cnt = board.count(Mark.O)

        # Legal turn order: X starts
        if not (x_cnt == o_cnt or x_cnt == o_cnt + 1):
            continue

        # Skip terminal (a legal non-terminal board has no complete line)
        if winners_set(board) or Mark.EMPTY not in board:
            continue

        player = Mark.X if x_cnt == o_cnt else Mark.O
        yield board, player
