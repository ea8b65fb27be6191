"""Play tic-tac-toe against the engine on the terminal."""

import logging
import time

from treemate.boards.tic_tac_toe import X, TicTacToeBoard
from treemate.config import CONFIG
from treemate.core.utils import print_info
from treemate.errors import IllegalMoveError
from treemate.main import Engine


def play(read=input, iterations=None):
    engine = Engine(TicTacToeBoard())
    human = X if CONFIG.ui.human_first else "O"

    while not engine.is_game_over():
        engine.print_board()
        print("----------------------------")

        if engine.board.to_move == human:
            user_move = read("Enter your move (cell 0-8): ")
            try:
                engine.make_move(int(user_move))
            except (ValueError, IllegalMoveError):
                print("Illegal move, try again.")
                continue
        else:
            start = time.time()
            move, node = engine.get_best_move(iterations)
            search = engine.search
            print_info(search.root().visits, search.root(), node,
                       search.node_count, time.time() - start)
            print(f"Engine plays: {move} | Win rate: {node.win_rate:.2f}")
            engine.make_move(move)

    engine.print_board()
    print("Game Over")
    winner = engine.board.winner()
    print(f"Result: {winner + ' wins' if winner else 'draw'}")
    return engine


if __name__ == "__main__":
    logging.basicConfig(level=CONFIG.log_level)
    play()
