from dataclasses import dataclass
from typing import Any, Optional

from .board import Board, Bound, GameOutcome, Player


@dataclass(eq=False)
class MctsNode:
    """A single position in the search tree and the statistics gathered for it.

    ``id`` is minted by the random source and is display metadata only; the
    arena index held by SearchTree is what identifies a node.
    """

    id: int
    board: Board
    depth: int = 0
    move: Optional[Any] = None
    current_player: Player = Player.ME
    outcome: GameOutcome = GameOutcome.IN_PROGRESS
    visits: int = 0
    wins: int = 0
    draws: int = 0
    bound: Bound = Bound.NONE
    is_fully_calculated: bool = False

    @classmethod
    def from_board(cls, node_id: int, board: Board, depth: int = 0,
                   move: Optional[Any] = None) -> "MctsNode":
        return cls(
            id=node_id,
            board=board,
            depth=depth,
            move=move,
            current_player=board.current_player(),
            outcome=board.outcome(),
        )

    @property
    def win_rate(self) -> float:
        if self.visits == 0:
            return 0.0
        return self.wins / self.visits

    @property
    def draw_rate(self) -> float:
        if self.visits == 0:
            return 0.0
        return self.draws / self.visits

    def __repr__(self) -> str:
        return (
            f"MctsNode(id={self.id}, depth={self.depth}, move={self.move!r}, "
            f"visits={self.visits}, wins={self.wins}, draws={self.draws}, "
            f"bound={self.bound.name}, solved={self.is_fully_calculated})"
        )
