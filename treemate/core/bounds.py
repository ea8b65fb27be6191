"""Proof propagation over the search tree.

A bound is a minimax certainty about a subtree, derived from the node's own
terminal outcome or from its children. Once resolved it is permanent, and a
resolved node is never sampled again.
"""

from .board import Bound, GameOutcome, Player
from .tree import SearchTree


def compute_bound(tree: SearchTree, index: int, pruning: bool) -> Bound:
    if not pruning:
        return Bound.NONE

    node = tree.node(index)
    if node.bound is not Bound.NONE:
        return node.bound

    if node.outcome is GameOutcome.WIN:
        return Bound.DEFINITE_WIN
    if node.outcome is GameOutcome.LOSE:
        return Bound.DEFINITE_LOSE

    children = tree.children(index)
    if not children:
        return Bound.NONE

    bounds = [tree.node(c).bound for c in children]
    if node.current_player is Player.ME:
        # one forced win is enough; a loss needs every option to lose
        if any(b is Bound.DEFINITE_WIN for b in bounds):
            return Bound.DEFINITE_WIN
        if all(b is Bound.DEFINITE_LOSE for b in bounds):
            return Bound.DEFINITE_LOSE
    else:
        if all(b is Bound.DEFINITE_WIN for b in bounds):
            return Bound.DEFINITE_WIN
        if any(b is Bound.DEFINITE_LOSE for b in bounds):
            return Bound.DEFINITE_LOSE

    return Bound.NONE


def is_fully_calculated(tree: SearchTree, index: int, bound: Bound,
                        pruning: bool) -> bool:
    if pruning and bound is not Bound.NONE:
        return True

    node = tree.node(index)
    if node.outcome.is_terminal:
        return True

    children = tree.children(index)
    if not children:
        return False
    return all(tree.node(c).is_fully_calculated for c in children)
