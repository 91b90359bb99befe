"""
Computer move selection.

The difficulty and the side being played are explicit arguments: nothing
here reads global toggles, so the same call always gives the same answer
(for RANDOM, the same answer for the same generator state).
"""

from enum import Enum
from typing import Optional, Sequence

import numpy as np

from .errors import InvalidState
from .game import Mark, evaluate, legal_moves
from .minimax import best_move, memoized_best_move


class Difficulty(Enum):
    RANDOM = "random"
    OPTIMAL = "optimal"

    @classmethod
    def parse(cls, text: str) -> "Difficulty":
        """Accept 'random'/'optimal' or the UI names 'easy'/'hard'."""
        key = text.strip().lower()
        aliases = {"easy": cls.RANDOM, "hard": cls.OPTIMAL}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {text!r}") from None


def random_move(board: Sequence[int], rng: Optional[np.random.Generator] = None) -> int:
    """Pick a uniformly random empty cell."""
    verdict = evaluate(board)
    if verdict.is_terminal:
        raise InvalidState(f"No move to pick: position is {verdict.status.value}")
    if rng is None:
        rng = np.random.default_rng()
    moves = legal_moves(board)
    return moves[int(rng.integers(0, len(moves)))]


def select_move(
    board: Sequence[int],
    side: int,
    difficulty: Difficulty = Difficulty.OPTIMAL,
    rng: Optional[np.random.Generator] = None,
    memoize: bool = False,
) -> int:
    """
    Choose the computer's move.

    Args:
        board: Current board (not modified)
        side: Mark the computer plays; must be the side to move
        difficulty: RANDOM (any empty cell) or OPTIMAL (minimax)
        rng: Generator for RANDOM play
        memoize: Serve OPTIMAL moves from the symmetry-keyed cache
            (same result as the plain search, faster on repeat calls)

    Returns:
        Index of an empty cell

    Raises:
        InvalidState: board is already won or drawn
    """
    if Mark(side) is Mark.EMPTY:
        raise ValueError("Side must be X or O, not EMPTY")
    if difficulty is Difficulty.RANDOM:
        return random_move(board, rng)
    if memoize:
        return memoized_best_move(board, side)
    return best_move(board, side)
