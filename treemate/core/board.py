"""Game capability the search consumes, plus the viewpoint enums it reports in."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List


class GameOutcome(Enum):
    """Result of a position, always from the root player's point of view."""
    IN_PROGRESS = 0
    WIN = 1
    LOSE = 2
    DRAW = 3

    @property
    def is_terminal(self) -> bool:
        return self is not GameOutcome.IN_PROGRESS


class Player(Enum):
    ME = 1  # the player the search favours
    OTHER = 2


class Bound(Enum):
    """Proven result of a subtree under optimal play."""
    NONE = 0
    DEFINITE_WIN = 1
    DEFINITE_LOSE = 2


class Board(ABC):
    """A game state the engine can search.

    Implementations pick a root player when constructed; ``current_player``
    and ``outcome`` are reported relative to it. A default-constructed board
    is the game's canonical start position.
    """

    @abstractmethod
    def current_player(self) -> Player:
        """Player to move in this state."""

    @abstractmethod
    def outcome(self) -> GameOutcome:
        """Terminal classification of this state."""

    @abstractmethod
    def available_moves(self) -> List[Any]:
        """Legal moves, empty once the game is over."""

    @abstractmethod
    def apply_move(self, move: Any) -> None:
        """Play ``move`` in place."""

    @abstractmethod
    def fingerprint(self) -> int:
        """Integer summary of the full state. Equal states must agree."""

    @abstractmethod
    def copy(self) -> "Board":
        """Independent value copy."""

    @abstractmethod
    def rerooted(self) -> "Board":
        """Copy whose root player is the side to move in this state."""
