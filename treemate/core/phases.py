"""
The four MCTS phases, stored on the engine as its next action.

    Selection:        start from ``at`` and follow the best UCB1 child until a
                      node with no eligible child is reached.
    Expansion:        create one child per legal move of ``leaf`` and pick one.
    Simulation:       play random moves from ``child`` to a terminal state.
    Backpropagation:  record ``outcome`` on every node from ``child`` to root.
    Done:             nothing left to search below the root.
"""
from dataclasses import dataclass
from typing import Tuple, Union

from .board import GameOutcome


@dataclass(frozen=True)
class Selection:
    at: int
    affected: Tuple[int, ...] = ()  # path touched by the previous backpropagation

    name = "Selection"


@dataclass(frozen=True)
class Expansion:
    leaf: int

    name = "Expansion"


@dataclass(frozen=True)
class Simulation:
    child: int
    children: Tuple[int, ...] = ()  # everything the expansion created

    name = "Simulation"


@dataclass(frozen=True)
class Backpropagation:
    child: int
    outcome: GameOutcome

    name = "Backpropagation"


@dataclass(frozen=True)
class Done:
    name = "Done"


Phase = Union[Selection, Expansion, Simulation, Backpropagation, Done]
