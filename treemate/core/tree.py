"""Append-only arena holding the search tree.

Nodes are addressed by their arena index. Children keep insertion order and
nothing is ever removed, so an index stays valid for the life of the tree.

Usage (example):

    tree = SearchTree(TicTacToeBoard())
    root = tree.root_index
    child = tree.add_child(root, MctsNode.from_board(17, board, depth=1, move=4))
    assert tree.parent(child) == root
"""
from __future__ import annotations

from typing import Any, List, Optional

from treemate.errors import UnknownNodeError

from .board import Board, Bound, GameOutcome, Player
from .node import MctsNode


class SearchTree:
    def __init__(self, root_board: Board, capacity_hint: Optional[int] = None):
        # capacity_hint only sizes expectations; the arena always grows past it
        self.capacity_hint = capacity_hint
        self._nodes: List[MctsNode] = []
        self._parents: List[Optional[int]] = []
        self._children: List[List[int]] = []
        self.root_index = self._append(MctsNode.from_board(0, root_board), None)

    def _append(self, node: MctsNode, parent: Optional[int]) -> int:
        index = len(self._nodes)
        self._nodes.append(node)
        self._parents.append(parent)
        self._children.append([])
        return index

    def _check(self, index: int) -> None:
        if not isinstance(index, int) or not 0 <= index < len(self._nodes):
            raise UnknownNodeError(index)

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> MctsNode:
        self._check(index)
        return self._nodes[index]

    def parent(self, index: int) -> Optional[int]:
        self._check(index)
        return self._parents[index]

    def children(self, index: int) -> List[int]:
        self._check(index)
        return self._children[index]

    def add_child(self, parent: int, node: MctsNode) -> int:
        self._check(parent)
        index = self._append(node, parent)
        self._children[parent].append(index)
        return index

    def path_to_root(self, index: int) -> List[int]:
        """Indices from ``index`` up to the root, inclusive."""
        path = [index]
        parent = self.parent(index)
        while parent is not None:
            path.append(parent)
            parent = self._parents[parent]
        return path


class NodeView:
    """Read-only window onto one node of a SearchTree."""

    __slots__ = ("_tree", "index")

    def __init__(self, tree: SearchTree, index: int):
        tree._check(index)
        self._tree = tree
        self.index = index

    @property
    def _node(self) -> MctsNode:
        return self._tree._nodes[self.index]

    @property
    def id(self) -> int:
        return self._node.id

    @property
    def depth(self) -> int:
        return self._node.depth

    @property
    def move(self) -> Optional[Any]:
        return self._node.move

    @property
    def current_player(self) -> Player:
        return self._node.current_player

    @property
    def outcome(self) -> GameOutcome:
        return self._node.outcome

    @property
    def visits(self) -> int:
        return self._node.visits

    @property
    def wins(self) -> int:
        return self._node.wins

    @property
    def draws(self) -> int:
        return self._node.draws

    @property
    def win_rate(self) -> float:
        return self._node.win_rate

    @property
    def draw_rate(self) -> float:
        return self._node.draw_rate

    @property
    def bound(self) -> Bound:
        return self._node.bound

    @property
    def is_fully_calculated(self) -> bool:
        return self._node.is_fully_calculated

    @property
    def board(self) -> Board:
        """A copy of the position; the tree's own snapshot stays untouched."""
        return self._node.board.copy()

    @property
    def parent(self) -> Optional["NodeView"]:
        parent = self._tree.parent(self.index)
        return None if parent is None else NodeView(self._tree, parent)

    @property
    def children(self) -> List["NodeView"]:
        return [NodeView(self._tree, c) for c in self._tree.children(self.index)]

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, NodeView)
            and other._tree is self._tree
            and other.index == self.index
        )

    def __hash__(self) -> int:
        return hash((id(self._tree), self.index))

    def __repr__(self) -> str:
        return f"NodeView(index={self.index}, {self._node!r})"
