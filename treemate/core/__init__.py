"""Core search components: board capability, random sources, tree, and MCTS engine."""

from .board import Board, Bound, GameOutcome, Player
from .random_source import LcgRandomSource, RandomSource, StandardRandomSource
from .search import SearchEngine
from .tree import NodeView, SearchTree
