# treemate/analyzer.py
from typing import Any, Dict, List

from treemate.core.board import Bound
from treemate.core.search import SearchEngine
from treemate.core.tree import NodeView

# thresholds on win rate lost against the best move (0..1). Tune these later.
TH_BEST = 0.02        # within 2 points of best => "Best"
TH_GOOD = 0.10        # within 10 points => "Good"
TH_INACCURACY = 0.25  # 10..25 => "Inaccuracy"
# > TH_INACCURACY => "Mistake"


class Analyzer:
    def __init__(self, search: SearchEngine):
        self.search = search

    def _child_for(self, move: Any) -> NodeView:
        for child in self.search.root().children:
            if child.move == move:
                return child
        raise KeyError(f"move {move!r} is not a root move of this search")

    def _label(self, child: NodeView, best: NodeView) -> str:
        if child.bound is Bound.DEFINITE_WIN:
            return "Proven win"
        if child.bound is Bound.DEFINITE_LOSE:
            return "Proven loss"
        if child == best:
            return "Best"
        d = best.win_rate - child.win_rate
        if d <= TH_BEST:
            return "Best"
        elif d <= TH_GOOD:
            return "Good"
        elif d <= TH_INACCURACY:
            return "Inaccuracy"
        return "Mistake"

    def classify_move(self, move: Any) -> Dict[str, Any]:
        """
        Classify one root move of the finished search.
        Returns a dict with the move's statistics and a label.
        Raises KeyError when ``move`` was not a root move.
        """
        child = self._child_for(move)
        best = self.search.best_move()
        return {
            "move": child.move,
            "visits": child.visits,
            "win_rate": child.win_rate,
            "draw_rate": child.draw_rate,
            "bound": child.bound.name,
            "delta_vs_best": best.win_rate - child.win_rate,
            "label": self._label(child, best),
        }

    def move_report(self) -> List[Dict[str, Any]]:
        """All root moves in the order the search created them."""
        return [self.classify_move(child.move) for child in self.search.root().children]
