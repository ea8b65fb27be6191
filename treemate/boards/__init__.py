"""Ready-made boards: tic-tac-toe and a python-chess adapter."""

from .chess_board import ChessBoard
from .tic_tac_toe import TicTacToeBoard
