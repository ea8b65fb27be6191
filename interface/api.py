"""FastAPI REST interface over one shared tic-tac-toe game."""

import logging
import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from treemate.analyzer import Analyzer
from treemate.boards.tic_tac_toe import TicTacToeBoard
from treemate.config import CONFIG
from treemate.errors import IllegalMoveError
from treemate.main import Engine

logger = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game; the search engine itself is not thread-safe.
engine = Engine(TicTacToeBoard())
_board_lock = threading.Lock()


class MoveRequest(BaseModel):
    move: int = Field(ge=0, le=8)


class SearchRequest(BaseModel):
    iterations: Optional[int] = Field(default=None, gt=0)
    pruning: Optional[bool] = None


def _board_state():
    board = engine.board
    winner = board.winner()
    return {
        "cells": "".join(c or "." for c in board.cells),
        "to_move": board.to_move,
        "legal_moves": board.available_moves(),
        "is_game_over": engine.is_game_over(),
        "winner": winner,
    }


@app.get("/board")
def get_board():
    with _board_lock:
        return _board_state()


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        try:
            engine.make_move(req.move)
        except IllegalMoveError as e:
            raise HTTPException(status_code=400, detail=e.to_dict())
        return {**_board_state(), "move": req.move}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        if engine.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        move, node = engine.get_best_move(req.iterations, req.pruning)
        root = engine.search.root()
        logger.info("Search from %s picked %s", _board_state()["cells"], move)
        return {
            "best_move": move,
            "win_rate": node.win_rate,
            "solved": root.is_fully_calculated,
            "root": {
                "visits": root.visits,
                "wins": root.wins,
                "draws": root.draws,
                "bound": root.bound.name,
            },
            "moves": Analyzer(engine.search).move_report(),
        }


@app.post("/reset")
def reset_board():
    with _board_lock:
        engine.reset()
        return _board_state()
