"""
TicTacToe game rules and board evaluation.

Board representation: sequence of length 9, row-major
  - Mark.EMPTY (0): empty
  - Mark.X (+1): first mover
  - Mark.O (-1): second mover

Indices:
   0 | 1 | 2
  ---+---+---
   3 | 4 | 5
  ---+---+---
   6 | 7 | 8
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

BOARD_SIZE = 9

# Winning lines (rows, columns, diagonals), checked in this order
WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),              # diagonals
)

Board = Tuple["Mark", ...]
Line = Tuple[int, int, int]


class Mark(IntEnum):
    """Cell value / player symbol."""
    EMPTY = 0
    X = +1
    O = -1

    def opponent(self) -> "Mark":
        """Get the other playing mark."""
        if self is Mark.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Mark(-self.value)

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @classmethod
    def parse(cls, text: str) -> "Mark":
        """Parse 'X' / 'O' (case-insensitive) into a playing mark."""
        key = text.strip().upper()
        if key == "X":
            return cls.X
        if key == "O":
            return cls.O
        raise ValueError(f"Unknown mark: {text!r} (expected X or O)")


_SYMBOLS = {Mark.EMPTY: " ", Mark.X: "X", Mark.O: "O"}
_EMPTY_CHARS = {".", "-", "_", " "}


class Status(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Verdict:
    """
    Outcome classification of a board.

    Derived from a board by `evaluate`, never stored alongside it.
    `winner` and `line` are set only for a win.
    """
    status: Status
    winner: Optional[Mark] = None
    line: Optional[Line] = None

    @classmethod
    def in_progress(cls) -> "Verdict":
        return cls(Status.IN_PROGRESS)

    @classmethod
    def win(cls, mark: Mark, line: Line) -> "Verdict":
        return cls(Status.WIN, Mark(mark), tuple(line))

    @classmethod
    def draw(cls) -> "Verdict":
        return cls(Status.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.status is not Status.IN_PROGRESS

    @property
    def is_win(self) -> bool:
        return self.status is Status.WIN

    @property
    def is_draw(self) -> bool:
        return self.status is Status.DRAW


def _check_size(board: Sequence[int]) -> None:
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")


def evaluate(board: Sequence[int]) -> Verdict:
    """
    Classify a board as in progress, won, or drawn.

    Lines are checked in WIN_LINES order and the first complete line wins,
    so a board with two winners (unreachable in play) still gets a
    deterministic answer. Legality of the position is not checked.
    """
    _check_size(board)
    for line in WIN_LINES:
        a, b, c = line
        if board[a] != Mark.EMPTY and board[a] == board[b] == board[c]:
            return Verdict.win(board[a], line)
    if all(v != Mark.EMPTY for v in board):
        return Verdict.draw()
    return Verdict.in_progress()


def is_terminal(board: Sequence[int]) -> Tuple[bool, int]:
    """
    Check if board is terminal.

    Returns:
        (is_terminal, winner) where winner is Mark.X / Mark.O / Mark.EMPTY
    """
    verdict = evaluate(board)
    if verdict.is_win:
        return True, verdict.winner
    return verdict.is_terminal, Mark.EMPTY


def winners_set(board: Sequence[int]) -> set:
    """Return set of marks owning a complete line (both if illegal)."""
    wins = set()
    for a, b, c in WIN_LINES:
        if board[a] != Mark.EMPTY and board[a] == board[b] == board[c]:
            wins.add(Mark(board[a]))
    return wins


def empty_board() -> Board:
    return (Mark.EMPTY,) * BOARD_SIZE


def to_board(cells: Iterable[int]) -> Board:
    """Normalize any sequence of ints / marks into an immutable board."""
    board = tuple(Mark(v) for v in cells)
    _check_size(board)
    return board


def legal_moves(board: Sequence[int]) -> List[int]:
    """Return list of legal move indices (empty squares), ascending."""
    return [i for i, v in enumerate(board) if v == Mark.EMPTY]


def apply_move(board: Sequence[int], player: int, action: int) -> Board:
    """Apply move and return new board."""
    new_board = list(board)
    new_board[action] = Mark(player)
    return tuple(new_board)


def side_to_move(board: Sequence[int]) -> Mark:
    """Infer side to move from board state (X plays first)."""
    x_cnt = sum(1 for v in board if v == Mark.X)
    o_cnt = sum(1 for v in board if v == Mark.O)
    return Mark.X if x_cnt == o_cnt else Mark.O


def is_legal_board(board: Sequence[int]) -> bool:
    """Check if board respects game rules."""
    x_cnt = sum(1 for v in board if v == Mark.X)
    o_cnt = sum(1 for v in board if v == Mark.O)

    # X goes first, so x_cnt == o_cnt or x_cnt == o_cnt + 1
    if not (x_cnt == o_cnt or x_cnt == o_cnt + 1):
        return False

    wset = winners_set(board)
    if len(wset) >= 2:
        return False
    # The winner must have made the last move
    if Mark.X in wset and x_cnt != o_cnt + 1:
        return False
    if Mark.O in wset and x_cnt != o_cnt:
        return False

    return True


def parse_board(text: str) -> Board:
    """
    Parse a board from text such as "XX.|OO.|..." or "X O . / . . .".

    'X' and 'O' are marks; '.', '-', '_' and spaces inside a 9-char string
    are empty cells. '|', '/' and newlines are ignored.
    """
    cells = [ch for ch in text if ch not in "|/\n\r\t"]
    if len(cells) != BOARD_SIZE:
        # Allow space-separated cells: "X O . . . . . . ."
        cells = [ch for ch in cells if ch != " "]
    board = []
    for ch in cells:
        up = ch.upper()
        if up == "X":
            board.append(Mark.X)
        elif up == "O":
            board.append(Mark.O)
        elif ch in _EMPTY_CHARS:
            board.append(Mark.EMPTY)
        else:
            raise ValueError(f"Unexpected board character: {ch!r}")
    return to_board(board)


def format_board(board: Sequence[int], highlight: Iterable[int] = ()) -> str:
    """
    Render a board as three text rows.

    Cells in `highlight` (e.g. the winning line) are wrapped in brackets,
    empty cells show their index.
    """
    highlight = set(highlight)
    rows = []
    for r in range(3):
        cells = []
        for c in range(3):
            i = r * 3 + c
            v = Mark(board[i])
            text = v.symbol if v != Mark.EMPTY else str(i)
            cells.append(f"[{text}]" if i in highlight else f" {text} ")
        rows.append("|".join(cells))
    return "\n---+---+---\n".join(rows)
