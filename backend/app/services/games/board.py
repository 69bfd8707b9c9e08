from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

BOARD_SIZE = 9

# Rows, then columns, then diagonals. The first complete line found wins.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Marker(str, Enum):
    X = 'X'
    O = 'O'

    @property
    def other(self) -> 'Marker':
        return Marker.O if self is Marker.X else Marker.X


Board = List[Optional[Marker]]

IN_PROGRESS = 'in_progress'
WIN = 'win'
DRAW = 'draw'


@dataclass(frozen=True)
class Outcome:
    kind: str
    winner: Optional[Marker] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind != IN_PROGRESS


def empty_board() -> Board:
    return [None] * BOARD_SIZE


def evaluate(board: Sequence[Optional[Marker]]) -> Outcome:
    """Evaluate a 3x3 board.

    Returns a win for the first complete line of identical marks, a draw when
    every cell is occupied without a winning line, and in-progress otherwise.
    Works on any combination of cells, reachable in play or not.
    """
    if len(board) != BOARD_SIZE:
        raise ValueError(f'board must have {BOARD_SIZE} cells, got {len(board)}')
    for line in WINNING_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Outcome(WIN, winner=Marker(board[a]), line=line)
    if all(cell is not None for cell in board):
        return Outcome(DRAW)
    return Outcome(IN_PROGRESS)


def serialize_board(board: Sequence[Optional[Marker]]) -> List[Optional[str]]:
    return [Marker(cell).value if cell is not None else None for cell in board]
