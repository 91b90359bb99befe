"""
TicTacToe - 3x3 game engine with an unbeatable computer opponent.

The engine is two pure functions: `evaluate` classifies a board and
`best_move` finds the optimal cell for a side by full minimax search.
`GameSession` wraps them with the mutable state a front end needs.
"""

from .errors import InvalidState, IllegalMove
from .game import (
    Mark,
    Status,
    Verdict,
    WIN_LINES,
    evaluate,
    is_terminal,
    legal_moves,
    apply_move,
    side_to_move,
    empty_board,
    parse_board,
    format_board,
)
from .minimax import (
    best_move,
    minimax_score,
    minimax_value_and_moves,
    memoized_best_move,
    optimal_policy,
    iter_all_legal_nonterminal_states,
)
from .symmetries import apply_symmetry_board, canonical_form, SYM_MAPS
from .strategy import Difficulty, select_move, random_move
from .session import GameConfig, GameSession, Scoreboard
from .arena import (
    make_player,
    play_game,
    run_match,
    exhaustive_outcomes,
    eval_memo_agreement_all_states,
)

__version__ = "0.1.0"
__all__ = [
    "InvalidState",
    "IllegalMove",
    "Mark",
    "Status",
    "Verdict",
    "WIN_LINES",
    "evaluate",
    "is_terminal",
    "legal_moves",
    "apply_move",
    "side_to_move",
    "empty_board",
    "parse_board",
    "format_board",
    "best_move",
    "minimax_score",
    "minimax_value_and_moves",
    "memoized_best_move",
    "optimal_policy",
    "iter_all_legal_nonterminal_states",
    "apply_symmetry_board",
    "canonical_form",
    "SYM_MAPS",
    "Difficulty",
    "select_move",
    "random_move",
    "GameConfig",
    "GameSession",
    "Scoreboard",
    "make_player",
    "play_game",
    "run_match",
    "exhaustive_outcomes",
    "eval_memo_agreement_all_states",
]
