"""
D4 symmetries of the TicTacToe board (8 transforms).

Rotations: 0°, 90°, 180°, 270°
Reflections: horizontal, vertical, main diagonal, anti-diagonal

Transformed board convention: new_board[i] = board[SYM_MAPS[k][i]].
"""

import torch
from typing import List, Sequence, Tuple

from .game import Board, Mark

# (row, col) -> (row, col) of the moved cell, indexed by sym_id
_TRANSFORMS = (
    lambda r, c: (r, c),          # identity
    lambda r, c: (c, 2 - r),      # rotate 90
    lambda r, c: (2 - r, 2 - c),  # rotate 180
    lambda r, c: (2 - c, r),      # rotate 270
    lambda r, c: (r, 2 - c),      # mirror left/right
    lambda r, c: (2 - r, c),      # mirror top/bottom
    lambda r, c: (c, r),          # main diagonal
    lambda r, c: (2 - c, 2 - r),  # anti-diagonal
)


def _permutation(transform) -> torch.Tensor:
    """Gather map: entry i is the source cell that lands on cell i."""
    mp = [0] * 9
    for cell in range(9):
        rt, ct = transform(*divmod(cell, 3))
        mp[rt * 3 + ct] = cell
    return torch.tensor(mp, dtype=torch.long)


SYM_MAPS = [_permutation(t) for t in _TRANSFORMS]

# Plain-int copies for the hot path of the memoized solver
_SYM_LISTS: List[Tuple[int, ...]] = [tuple(mp.tolist()) for mp in SYM_MAPS]


def apply_symmetry_board(board: Sequence[int], sym_id: int) -> Board:
    """
    Apply symmetry transform to board.

    Args:
        board: [9] board values
        sym_id: symmetry ID (0-7)

    Returns:
        Transformed board
    """
    mp = _SYM_LISTS[sym_id]
    return tuple(Mark(board[mp[i]]) for i in range(9))


def get_all_symmetries(board: Sequence[int]) -> List[Board]:
    """Return all 8 symmetric versions of a board, in sym_id order."""
    return [apply_symmetry_board(board, k) for k in range(len(SYM_MAPS))]


def canonical_form(board: Sequence[int]) -> Tuple[Board, int]:
    """
    Return the canonical representative of a board's symmetry class.

    The canonical board is the lexicographically smallest of the 8
    transforms (ties resolved by lowest sym_id).

    Returns:
        (canonical_board, sym_id) with canonical_board == apply_symmetry_board(board, sym_id)
    """
    variants = get_all_symmetries(board)
    best_k = min(range(len(variants)), key=lambda k: variants[k])
    return variants[best_k], best_k


def map_move_from_canonical(move: int, sym_id: int) -> int:
    """Map a cell index in the canonical frame back to the original board."""
    return _SYM_LISTS[sym_id][move]
