import pytest
import torch

from tictactoe.errors import InvalidState
from tictactoe.game import Mark, empty_board, legal_moves, parse_board
from tictactoe.minimax import (
    best_move,
    cache_size,
    clear_cache,
    iter_all_legal_nonterminal_states,
    memoized_best_move,
    minimax_score,
    minimax_value_and_moves,
    optimal_policy,
)

X, O, E = Mark.X, Mark.O, Mark.EMPTY


def test_takes_immediate_win():
    board = parse_board("XX.|OO.|...")
    assert best_move(board, X) == 2


def test_takes_immediate_win_as_o():
    board = parse_board("OO.|XX.|X..")
    assert best_move(board, O) == 2


def test_blocks_threat():
    board = parse_board("X..|OO.|...")
    assert best_move(board, X) == 5


def test_blocks_threat_as_o():
    board = parse_board("XX.|.O.|...")
    assert best_move(board, O) == 2


def test_empty_board_picks_lowest_index():
    # Every opening move draws under perfect play
    assert best_move(empty_board(), X) == 0


def test_tie_break_prefers_lowest_index():
    # X can win at 2 (top row) or 6 (left column)
    board = parse_board("XX.|XOO|.O.")
    assert best_move(board, X) == 2


def test_searching_side_o_on_its_turn():
    # Center opening must be answered in a corner; 0 is the first corner
    board = parse_board("...|.X.|...")
    assert best_move(board, O) == 0


def test_board_is_not_mutated():
    board = [X, E, E, E, O, E, E, E, E]
    snapshot = list(board)
    best_move(board, X)
    assert board == snapshot


def test_same_input_same_result():
    board = parse_board("X..|.O.|...")
    assert best_move(board, X) == best_move(list(board), X)


@pytest.mark.parametrize("text", ["XXX|OO.|...", "XOX|XOO|OXX", "OOO|XX.|X.."])
def test_terminal_board_raises(text):
    with pytest.raises(InvalidState):
        best_move(parse_board(text), X)
    with pytest.raises(InvalidState):
        memoized_best_move(parse_board(text), O)


def test_empty_side_rejected():
    with pytest.raises(ValueError):
        best_move(empty_board(), E)


def test_minimax_score():
    board = parse_board("XX.|OO.|...")
    assert minimax_score(board, X, X) == 1
    assert minimax_score(board, O, O) == 1
    assert minimax_score(board, X, O) == -1
    assert minimax_score(parse_board("XOX|XOO|OXX"), X, X) == 0


def test_value_and_moves_from_empty_board():
    clear_cache()
    v, moves = minimax_value_and_moves(empty_board(), X)
    assert v == 0
    assert moves == list(range(9))
    assert cache_size() > 0


def test_value_and_moves_forced_win():
    v, moves = minimax_value_and_moves(parse_board("XX.|OO.|..."), X)
    assert v == 1
    assert moves[0] == 2


def test_value_of_terminal_board():
    assert minimax_value_and_moves(parse_board("XXX|OO.|..."), X) == (1, [])
    assert minimax_value_and_moves(parse_board("XXX|OO.|..."), O) == (-1, [])


def test_clear_cache():
    minimax_value_and_moves(parse_board("X..|...|..."), O)
    assert cache_size() > 0
    clear_cache()
    assert cache_size() == 0


def test_all_legal_nonterminal_states():
    states = list(iter_all_legal_nonterminal_states())
    assert len(states) == 4520
    assert (empty_board(), X) in states


def test_memoized_matches_plain_search_late_positions():
    checked = 0
    for board, player in iter_all_legal_nonterminal_states():
        if len(legal_moves(board)) > 4:
            continue
        move = best_move(board, player)
        assert board[move] == E
        assert memoized_best_move(board, player) == move
        checked += 1
    assert checked > 1000


@pytest.mark.parametrize("text", ["X..|...|...", "..X|...|...", "...|.X.|...", "X..|.O.|..X"])
def test_memoized_matches_plain_search_early_positions(text):
    board = parse_board(text)
    side = O if text.count("X") > text.count("O") else X
    assert memoized_best_move(board, side) == best_move(board, side)


def test_optimal_policy():
    pi, v = optimal_policy(parse_board("XX.|OO.|..."), X)
    assert pi.shape == (9,)
    assert float(v) == 1.0
    assert torch.isclose(pi.sum(), torch.tensor(1.0))
    assert pi[2] > 0
    # Only empty cells get mass
    assert pi[0] == 0 and pi[3] == 0


def test_optimal_policy_empty_board_uniform():
    pi, v = optimal_policy(empty_board(), X)
    assert float(v) == 0.0
    assert torch.allclose(pi, torch.full((9,), 1.0 / 9))
