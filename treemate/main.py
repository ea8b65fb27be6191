import logging
from typing import Any, List, Optional, Tuple

from treemate.boards.tic_tac_toe import TicTacToeBoard
from treemate.config import CONFIG, SearchConfig
from treemate.core.board import Board
from treemate.core.random_source import make_random_source
from treemate.core.search import SearchEngine
from treemate.core.tree import NodeView

logger = logging.getLogger(__name__)


class Engine:
    """Plays a game: keeps the position and runs a fresh search per move."""

    def __init__(self, board: Optional[Board] = None, config: Optional[SearchConfig] = None):
        self.board = board or TicTacToeBoard()
        self.config = config or CONFIG.search
        self.search: Optional[SearchEngine] = None
        self.move_history: List[Any] = []
        self._start = self.board.copy()

    def new_search(self, pruning: Optional[bool] = None) -> SearchEngine:
        """Search tree rooted at the current position, favouring the side to move."""
        return SearchEngine(
            self.board.rerooted(),
            make_random_source(self.config.seed),
            pruning=self.config.pruning if pruning is None else pruning,
            capacity_hint=self.config.capacity_hint,
        )

    def get_best_move(
        self, iterations: Optional[int] = None, pruning: Optional[bool] = None
    ) -> Tuple[Optional[Any], Optional[NodeView]]:
        if self.is_game_over():
            return None, None
        self.search = self.new_search(pruning)
        budget = self.config.iterations if iterations is None else iterations
        ran = self.search.run_iterations(budget)
        best = self.search.best_move()
        logger.debug("Searched %d iterations, best %r", ran, best)
        if best is None:
            return None, None
        return best.move, best

    def make_move(self, move: Any) -> None:
        """Play ``move``; raises IllegalMoveError if it is not legal here."""
        self.board.apply_move(move)
        self.move_history.append(move)

    def is_game_over(self) -> bool:
        return self.board.outcome().is_terminal

    def reset(self):
        self.board = self._start.copy()
        self.move_history.clear()
        self.search = None

    def print_board(self):
        print(self.board)
