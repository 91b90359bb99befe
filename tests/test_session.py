import pytest

from tictactoe.errors import IllegalMove, InvalidState
from tictactoe.game import Mark, empty_board
from tictactoe.minimax import best_move
from tictactoe.session import GameConfig, GameSession, Scoreboard
from tictactoe.strategy import Difficulty

X, O, E = Mark.X, Mark.O, Mark.EMPTY


def local_session():
    return GameSession(GameConfig(mode="local"))


def play_all(session, cells):
    for c in cells:
        session.play(c)


def test_new_session():
    s = GameSession()
    assert s.board == empty_board()
    assert s.current_player == X
    assert s.status() == "Next: X"
    assert not s.is_computer_turn()


def test_local_game_win_is_scored():
    s = local_session()
    play_all(s, [0, 3, 1, 4, 2])
    assert s.is_over
    assert s.status() == "X wins!"
    assert s.winning_line == (0, 1, 2)
    assert s.scores.as_dict() == {"X": 1, "O": 0, "draws": 0}
    with pytest.raises(IllegalMove):
        s.play(5)


def test_local_game_draw_is_scored():
    s = local_session()
    # X O X / X O O / O X X
    play_all(s, [0, 1, 2, 4, 3, 5, 7, 6, 8])
    assert s.status() == "It's a draw"
    assert s.scores.draws == 1


@pytest.mark.parametrize("cell", [-1, 9, "4", True, False])
def test_bad_cell_rejected(cell):
    with pytest.raises(IllegalMove):
        local_session().play(cell)


def test_occupied_cell_rejected():
    s = local_session()
    s.play(4)
    with pytest.raises(IllegalMove):
        s.play(4)
    assert s.current_player == O


def test_computer_answers():
    s = GameSession(GameConfig(mode="cpu", ai_plays_as=O, ai_delay=0))
    s.play(4)
    assert s.is_computer_turn()
    with pytest.raises(IllegalMove):
        s.play(0)
    expected = best_move(s.board, O)
    assert s.computer_move() == expected
    assert s.board[expected] == O
    assert s.current_player == X


def test_computer_opens_when_playing_x():
    s = GameSession(GameConfig(mode="cpu", ai_plays_as=X, memoize=True))
    assert s.is_computer_turn()
    assert s.computer_move() == 0
    assert not s.is_computer_turn()


def test_computer_out_of_turn():
    s = GameSession(GameConfig(mode="cpu", ai_plays_as=O))
    with pytest.raises(InvalidState):
        s.computer_move()
    s = local_session()
    with pytest.raises(InvalidState):
        s.computer_move()


def test_random_difficulty_plays_legal_moves():
    s = GameSession(GameConfig(ai_plays_as=O, difficulty=Difficulty.RANDOM, seed=3))
    while not s.is_over:
        if s.is_computer_turn():
            cell = s.computer_move()
            assert s.board[cell] == O
        else:
            s.play(next(i for i, v in enumerate(s.board) if v == E))
    assert sum(s.scores.as_dict().values()) == 1


def test_undo_local_single_move():
    s = local_session()
    play_all(s, [4, 0])
    assert s.undo()
    assert s.board[0] == E and s.board[4] == X
    assert s.current_player == O


def test_undo_cpu_returns_to_human():
    s = GameSession(GameConfig(ai_plays_as=O, memoize=True))
    s.play(4)
    s.computer_move()
    assert s.undo()
    assert s.board == empty_board()
    assert s.current_player == X
    assert not s.undo()


def test_undo_finished_game_removes_score():
    s = local_session()
    play_all(s, [0, 3, 1, 4, 2])
    assert s.scores.x == 1
    s.undo()
    assert not s.is_over
    assert s.scores.x == 0
    s.play(2)
    assert s.scores.x == 1


def test_reset_keeps_or_clears_scores():
    s = local_session()
    play_all(s, [0, 3, 1, 4, 2])
    s.reset()
    assert s.board == empty_board() and s.history == []
    assert s.current_player == X
    assert s.scores.x == 1
    s.reset(full=True)
    assert s.scores.as_dict() == {"X": 0, "O": 0, "draws": 0}


def test_switching_mode_and_side():
    s = local_session()
    s.play(4)
    s.set_mode("cpu")
    s.set_ai_plays_as(O)
    assert s.is_computer_turn()
    with pytest.raises(ValueError):
        s.set_mode("network")
    assert s.config.mode == "cpu"


def test_switching_mode_keeps_scores_and_board():
    s = local_session()
    for c in [0, 3, 1, 4, 2]:
        s.play(c)
    s.reset()
    s.play(4)
    s.set_mode("cpu")
    s.set_ai_plays_as(X)
    assert s.scores.x == 1
    assert s.board[4] == X
    assert not s.is_computer_turn()
    s.set_ai_plays_as(X.opponent())
    assert s.is_computer_turn()


@pytest.mark.parametrize("kwargs", [
    {"mode": "online"},
    {"ai_plays_as": Mark.EMPTY},
    {"ai_delay": -1.0},
    {"difficulty": "hard"},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs).validate()


def test_scoreboard():
    from tictactoe.game import Verdict
    sb = Scoreboard()
    sb.record(Verdict.win(O, (2, 4, 6)))
    sb.record(Verdict.draw())
    sb.record(Verdict.in_progress())
    assert sb.as_dict() == {"X": 0, "O": 1, "draws": 1}
    sb.unrecord(Verdict.draw())
    assert sb.draws == 0
