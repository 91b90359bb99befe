"""
Game session: the mutable state a front end keeps between moves.

The engine functions only look at board snapshots. This module owns the
authoritative board, whose turn it is, the undo history and the running
score, and decides when the computer plays.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

import numpy as np

from .errors import IllegalMove, InvalidState
from .game import BOARD_SIZE, Board, Mark, Verdict, apply_move, empty_board, evaluate
from .strategy import Difficulty, select_move

MODES = ("cpu", "local")


@dataclass
class GameConfig:
    """Session configuration."""

    # "cpu": human vs computer, "local": two humans
    mode: str = "cpu"

    # Which mark the computer plays in cpu mode
    ai_plays_as: Mark = Mark.O

    difficulty: Difficulty = Difficulty.OPTIMAL

    # Pause before showing the computer's move (seconds, front end only)
    ai_delay: float = 0.35

    # Use the symmetry-keyed solver cache for OPTIMAL moves
    memoize: bool = False

    # Random seed for RANDOM difficulty
    seed: Optional[int] = None

    def validate(self) -> "GameConfig":
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: {self.mode!r} (expected one of {MODES})")
        if Mark(self.ai_plays_as) is Mark.EMPTY:
            raise ValueError("ai_plays_as must be X or O")
        if not isinstance(self.difficulty, Difficulty):
            raise ValueError(f"Unknown difficulty: {self.difficulty!r}")
        if self.ai_delay < 0:
            raise ValueError("ai_delay must be >= 0")
        return self


@dataclass
class Scoreboard:
    """Running tally across games of one session."""
    x: int = 0
    o: int = 0
    draws: int = 0

    def record(self, verdict: Verdict, delta: int = 1):
        """Count a finished game (delta=-1 takes it back)."""
        if verdict.is_draw:
            self.draws += delta
        elif verdict.winner == Mark.X:
            self.x += delta
        elif verdict.winner == Mark.O:
            self.o += delta

    def unrecord(self, verdict: Verdict):
        self.record(verdict, delta=-1)

    def reset(self):
        self.x = self.o = self.draws = 0

    def as_dict(self):
        return {"X": self.x, "O": self.o, "draws": self.draws}


@dataclass
class GameSession:
    """
    One board plus its history and score.

    X always moves first. In cpu mode the front end should call
    `computer_move()` whenever `is_computer_turn()` is true.
    """
    config: GameConfig = field(default_factory=GameConfig)
    board: Board = field(default_factory=empty_board)
    x_is_next: bool = True
    history: List[Tuple[Board, bool]] = field(default_factory=list)
    scores: Scoreboard = field(default_factory=Scoreboard)

    def __post_init__(self):
        self.config.validate()
        self.rng = np.random.default_rng(self.config.seed)

    @property
    def current_player(self) -> Mark:
        return Mark.X if self.x_is_next else Mark.O

    @property
    def verdict(self) -> Verdict:
        return evaluate(self.board)

    @property
    def is_over(self) -> bool:
        return self.verdict.is_terminal

    @property
    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return self.verdict.line

    def is_computer_turn(self) -> bool:
        return (
            self.config.mode == "cpu"
            and self.current_player == self.config.ai_plays_as
            and not self.is_over
        )

    def _place(self, cell: int):
        self.history.append((self.board, self.x_is_next))
        self.board = apply_move(self.board, self.current_player, cell)
        self.x_is_next = not self.x_is_next
        verdict = self.verdict
        if verdict.is_terminal:
            self.scores.record(verdict)

    def play(self, cell: int) -> Verdict:
        """
        Place the current player's mark for a human.

        Raises:
            IllegalMove: game over, bad cell, or the computer is to move
        """
        if self.is_over:
            raise IllegalMove("Game is already over")
        if (
            isinstance(cell, bool)
            or not isinstance(cell, (int, np.integer))
            or not 0 <= cell < BOARD_SIZE
        ):
            raise IllegalMove(f"Invalid cell {cell!r}. Must be 0-8.")
        if self.board[cell] != Mark.EMPTY:
            raise IllegalMove(f"Cell {cell} is already occupied by {self.board[cell].symbol}")
        if self.is_computer_turn():
            raise IllegalMove("It's the computer's turn")
        self._place(int(cell))
        return self.verdict

    def computer_move(self) -> int:
        """
        Let the computer play its move.

        Returns:
            The cell it played

        Raises:
            InvalidState: it is not the computer's turn or the game is over
        """
        if not self.is_computer_turn():
            raise InvalidState("Computer asked to move out of turn")
        cell = select_move(
            self.board,
            self.config.ai_plays_as,
            difficulty=self.config.difficulty,
            rng=self.rng,
            memoize=self.config.memoize,
        )
        self._place(cell)
        return cell

    def undo(self) -> bool:
        """
        Take back the last move.

        In cpu mode, keeps going until a human is to move, so the computer's
        reply is taken back together with the move it answered. A result
        that gets undone is removed from the scoreboard.

        Returns:
            True if the board changed
        """
        if not self.history:
            return False
        verdict = self.verdict
        if verdict.is_terminal:
            self.scores.unrecord(verdict)

        self.board, self.x_is_next = self.history.pop()
        while self.is_computer_turn() and self.history:
            self.board, self.x_is_next = self.history.pop()
        return True

    def reset(self, full: bool = False):
        """New game; full=True also clears the scores."""
        self.board = empty_board()
        self.history.clear()
        self.x_is_next = True
        if full:
            self.scores.reset()

    def set_mode(self, mode: str):
        self.config = replace(self.config, mode=mode).validate()

    def set_ai_plays_as(self, mark: Mark):
        self.config = replace(self.config, ai_plays_as=Mark(mark)).validate()

    def status(self) -> str:
        verdict = self.verdict
        if verdict.is_draw:
            return "It's a draw"
        if verdict.is_win:
            return f"{verdict.winner.symbol} wins!"
        return f"Next: {self.current_player.symbol}"
