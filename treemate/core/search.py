import logging
import math
from typing import List, Optional, Tuple

from treemate.errors import NodeAlreadyExpandedError

from .board import Board, Bound, GameOutcome
from .bounds import compute_bound, is_fully_calculated
from .fingerprint import tree_fingerprint
from .node import MctsNode
from .phases import Backpropagation, Done, Expansion, Phase, Selection, Simulation
from .random_source import INT32_MAX, RandomSource, StandardRandomSource
from .tree import NodeView, SearchTree

logger = logging.getLogger(__name__)

EXPLORATION = math.sqrt(2)
UNVISITED_SCORE = float(INT32_MAX)
# Node count the arena expects up front. Growth past it is always allowed.
DEFAULT_CAPACITY_HINT = 10000


def ucb_value(parent_visits: int, wins: int, visits: int) -> float:
    """UCB1 score of a child. Unvisited children always come first."""
    if visits == 0:
        return UNVISITED_SCORE
    return wins / visits + EXPLORATION * math.sqrt(math.log(parent_visits) / visits)


class SearchEngine:
    """Monte Carlo tree search driven as an explicit phase state machine.

    Every call to ``step_phase`` performs exactly one of selection, expansion,
    simulation or backpropagation and stores the phase that follows, so a
    search can be watched one step at a time. ``run_iteration`` chains phases
    until the engine is back at selection or has solved the whole tree.

    With ``pruning`` enabled, proven wins and losses are propagated up the
    tree and solved subtrees are no longer sampled; once nothing below the
    root is left to sample the engine stops in the ``Done`` phase.
    """

    def __init__(
        self,
        board: Board,
        random_source: Optional[RandomSource] = None,
        pruning: bool = True,
        capacity_hint: Optional[int] = DEFAULT_CAPACITY_HINT,
    ):
        self.random = random_source or StandardRandomSource()
        self.pruning = pruning
        self.tree = SearchTree(board, capacity_hint)
        self.phase: Phase = Selection(self.tree.root_index)

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    @property
    def is_done(self) -> bool:
        return isinstance(self.phase, Done)

    @property
    def node_count(self) -> int:
        return len(self.tree)

    def step_phase(self) -> Phase:
        phase = self.phase
        if isinstance(phase, Selection):
            leaf = self._select(phase.at)
            if leaf is None:
                logger.info(
                    "Search fully calculated after %d visits (%d nodes)",
                    self.tree.node(self.tree.root_index).visits, len(self.tree),
                )
                self.phase = Done()
            else:
                self.phase = Expansion(leaf)
        elif isinstance(phase, Expansion):
            children, chosen = self._expand(phase.leaf)
            self.phase = Simulation(chosen, children)
        elif isinstance(phase, Simulation):
            outcome = self._simulate(phase.child)
            self.phase = Backpropagation(phase.child, outcome)
        elif isinstance(phase, Backpropagation):
            path = self._backpropagate(phase.child, phase.outcome)
            self.phase = Selection(self.tree.root_index, tuple(path))
        return self.phase

    def run_iteration(self) -> List[NodeView]:
        """Run phases until selection comes round again (or the search is done).

        Returns the nodes touched by the last backpropagation, child first.
        """
        self.step_phase()
        while not isinstance(self.phase, (Selection, Done)):
            self.step_phase()
        if isinstance(self.phase, Selection):
            return [NodeView(self.tree, i) for i in self.phase.affected]
        return []

    def run_iterations(self, count: int) -> int:
        """Run up to ``count`` iterations; returns how many actually ran."""
        completed = 0
        while completed < count and not self.is_done:
            self.run_iteration()
            if self.is_done:
                break
            completed += 1
        logger.debug("Ran %d/%d iterations, %d nodes", completed, count, len(self.tree))
        return completed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def root(self) -> NodeView:
        return NodeView(self.tree, self.tree.root_index)

    def node(self, index: int) -> NodeView:
        return NodeView(self.tree, index)

    def best_move(self) -> Optional[NodeView]:
        """Root child with the best win rate, preferring proven wins."""
        candidates = self.tree.children(self.tree.root_index)
        if not candidates:
            return None
        if self.pruning:
            proven = [c for c in candidates
                      if self.tree.node(c).bound is Bound.DEFINITE_WIN]
            if proven:
                candidates = proven
        best = max(candidates, key=lambda c: self.tree.node(c).win_rate)
        return NodeView(self.tree, best)

    def tree_fingerprint(self) -> str:
        return tree_fingerprint(self.tree)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _select(self, start: int) -> Optional[int]:
        tree = self.tree
        current = start
        moved = False
        while True:
            best_child = None
            best_score = -math.inf
            parent_visits = tree.node(current).visits
            for child in tree.children(current):
                node = tree.node(child)
                if node.is_fully_calculated:
                    continue
                score = ucb_value(parent_visits, node.wins, node.visits)
                if score > best_score:
                    best_score = score
                    best_child = child
            if best_child is None:
                break
            current = best_child
            moved = True

        if moved:
            return current
        if not tree.children(start):
            return start
        return None

    def _expand(self, leaf: int) -> Tuple[Tuple[int, ...], int]:
        tree = self.tree
        if tree.children(leaf):
            raise NodeAlreadyExpandedError(leaf)

        node = tree.node(leaf)
        if node.outcome.is_terminal:
            return (), leaf

        created = []
        for move in node.board.available_moves():
            board = node.board.copy()
            board.apply_move(move)
            child = MctsNode.from_board(
                self.random.next(), board, depth=node.depth + 1, move=move
            )
            created.append(tree.add_child(leaf, child))

        if not created:
            return (), leaf
        return tuple(created), self.random.choose(created)

    def _simulate(self, index: int) -> GameOutcome:
        board = self.tree.node(index).board.copy()
        seen = {board.fingerprint()}
        outcome = board.outcome()
        while outcome is GameOutcome.IN_PROGRESS:
            candidates = list(board.available_moves())
            while True:
                if not candidates:
                    # every move revisits a position of this playout
                    return GameOutcome.DRAW
                pick = self.random.next_range(0, len(candidates))
                scratch = board.copy()
                scratch.apply_move(candidates[pick])
                key = scratch.fingerprint()
                if key not in seen:
                    break
                del candidates[pick]
            seen.add(key)
            board = scratch
            outcome = board.outcome()
        return outcome

    def _backpropagate(self, index: int, outcome: GameOutcome) -> List[int]:
        tree = self.tree
        path = tree.path_to_root(index)
        for i in path:
            bound = compute_bound(tree, i, self.pruning)
            solved = is_fully_calculated(tree, i, bound, self.pruning)
            node = tree.node(i)
            node.visits += 1
            if outcome is GameOutcome.WIN:
                node.wins += 1
            elif outcome is GameOutcome.DRAW:
                node.draws += 1
            if bound is not Bound.NONE:
                node.bound = bound
            if solved:
                node.is_fully_calculated = True
        return path
