"""Board adapter over python-chess.

The side to move when the adapter is built becomes the root player. Positions
are fingerprinted with the polyglot zobrist key, which python-chess computes
from pieces, side to move, castling rights and en-passant file.
"""

from typing import List, Optional, Union

import chess
from chess import polyglot

from treemate.core.board import Board, GameOutcome, Player
from treemate.errors import IllegalMoveError


class ChessBoard(Board):
    def __init__(self, fen: Optional[str] = None, root_color: Optional[chess.Color] = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.root_color = self.board.turn if root_color is None else root_color
        self._outcome = self._evaluate()

    def _evaluate(self) -> GameOutcome:
        result = self.board.outcome()
        if result is None:
            return GameOutcome.IN_PROGRESS
        if result.winner is None:
            return GameOutcome.DRAW
        return GameOutcome.WIN if result.winner == self.root_color else GameOutcome.LOSE

    def current_player(self) -> Player:
        return Player.ME if self.board.turn == self.root_color else Player.OTHER

    def outcome(self) -> GameOutcome:
        return self._outcome

    def available_moves(self) -> List[chess.Move]:
        if self._outcome is not GameOutcome.IN_PROGRESS:
            return []
        return list(self.board.legal_moves)

    def apply_move(self, move: Union[chess.Move, str]) -> None:
        """Push a chess.Move or a UCI string (e.g. 'e2e4')."""
        if isinstance(move, str):
            try:
                move = chess.Move.from_uci(move)
            except ValueError:
                raise IllegalMoveError("invalid UCI move", context={"move": move})
        if self._outcome is not GameOutcome.IN_PROGRESS or not self.board.is_legal(move):
            raise IllegalMoveError("illegal chess move", context={"move": move.uci()})
        self.board.push(move)
        self._outcome = self._evaluate()

    def fingerprint(self) -> int:
        return polyglot.zobrist_hash(self.board)

    def copy(self) -> "ChessBoard":
        clone = ChessBoard.__new__(ChessBoard)
        clone.board = self.board.copy()
        clone.root_color = self.root_color
        clone._outcome = self._outcome
        return clone

    def rerooted(self) -> "ChessBoard":
        clone = self.copy()
        clone.root_color = self.board.turn
        clone._outcome = clone._evaluate()
        return clone

    def fen(self) -> str:
        return self.board.fen()

    def __str__(self) -> str:
        return str(self.board)
