"""3x3 tic-tac-toe board. Moves are cell indices 0..8, row by row."""

from typing import List, Optional

from treemate.core.board import Board, GameOutcome, Player
from treemate.errors import IllegalMoveError

X = "X"
O = "O"

LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

CELL_CODES = {None: 0, X: 1, O: 2}


def _other(mark: str) -> str:
    return O if mark == X else X


class TicTacToeBoard(Board):
    """X always moves first. ``root_player`` is the mark the search plays for."""

    __slots__ = ("root_player", "to_move", "cells", "_outcome")

    def __init__(self, root_player: str = X):
        if root_player not in (X, O):
            raise ValueError(f"root player must be 'X' or 'O', got {root_player!r}")
        self.root_player = root_player
        self.to_move = X
        self.cells: List[Optional[str]] = [None] * 9
        self._outcome = GameOutcome.IN_PROGRESS

    @classmethod
    def from_cells(cls, layout: str, root_player: str = X) -> "TicTacToeBoard":
        """Build a position from nine characters of 'X', 'O' and '.'."""
        layout = layout.replace(" ", "").replace("\n", "")
        if len(layout) != 9 or any(c not in "XO." for c in layout):
            raise ValueError(f"invalid tic-tac-toe layout: {layout!r}")
        board = cls(root_player)
        board.cells = [None if c == "." else c for c in layout]
        x_count = layout.count(X)
        o_count = layout.count(O)
        if x_count - o_count not in (0, 1):
            raise ValueError(f"unreachable tic-tac-toe layout: {layout!r}")
        board.to_move = X if x_count == o_count else O
        board._outcome = board._evaluate()
        return board

    def _winner(self) -> Optional[str]:
        cells = self.cells
        for a, b, c in LINES:
            if cells[a] is not None and cells[a] == cells[b] == cells[c]:
                return cells[a]
        return None

    def _evaluate(self) -> GameOutcome:
        winner = self._winner()
        if winner is not None:
            return GameOutcome.WIN if winner == self.root_player else GameOutcome.LOSE
        if None in self.cells:
            return GameOutcome.IN_PROGRESS
        return GameOutcome.DRAW

    def current_player(self) -> Player:
        return Player.ME if self.to_move == self.root_player else Player.OTHER

    def outcome(self) -> GameOutcome:
        return self._outcome

    def available_moves(self) -> List[int]:
        if self._outcome is not GameOutcome.IN_PROGRESS:
            return []
        return [i for i, cell in enumerate(self.cells) if cell is None]

    def apply_move(self, move: int) -> None:
        if (self._outcome is not GameOutcome.IN_PROGRESS
                or not 0 <= move < 9 or self.cells[move] is not None):
            raise IllegalMoveError("illegal tic-tac-toe move", context={"move": move})
        self.cells[move] = self.to_move
        self.to_move = _other(self.to_move)
        self._outcome = self._evaluate()

    def fingerprint(self) -> int:
        key = 0
        for i, cell in enumerate(self.cells):
            key += CELL_CODES[cell] * 3 ** i
        return key

    def copy(self) -> "TicTacToeBoard":
        board = TicTacToeBoard.__new__(TicTacToeBoard)
        board.root_player = self.root_player
        board.to_move = self.to_move
        board.cells = self.cells[:]
        board._outcome = self._outcome
        return board

    def rerooted(self) -> "TicTacToeBoard":
        board = self.copy()
        board.root_player = self.to_move
        board._outcome = board._evaluate()
        return board

    def winner(self) -> Optional[str]:
        return self._winner()

    def render(self) -> str:
        rows = []
        for r in range(3):
            rows.append(" ".join(c or "." for c in self.cells[r * 3:r * 3 + 3]))
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.render()
