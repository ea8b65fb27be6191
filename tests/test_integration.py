"""
Integration test suite for the TreeMate engine.

Tests components working together end-to-end:
- Full game simulations (engine vs engine, engine vs scripted human)
- Engine wrapper re-rooting and move handling
- python-chess board adapter inside a search
- Analyzer pipeline
- Configuration loading and environment overrides
- Terminal CLI loop
- FastAPI REST API integration
"""

import itertools

import chess
import pytest
from chess import polyglot

from treemate.analyzer import Analyzer
from treemate.boards.chess_board import ChessBoard
from treemate.boards.tic_tac_toe import TicTacToeBoard, X, O
from treemate.config import CONFIG, Config, SearchConfig, apply_env_overrides
from treemate.core.board import Bound, GameOutcome, Player
from treemate.core.random_source import LcgRandomSource
from treemate.core.search import SearchEngine
from treemate.core.utils import print_info
from treemate.errors import ConfigurationError, IllegalMoveError, TreeMateError
from treemate.main import Engine

PRE_MATE_FEN = "rnbqkbnr/pppp1ppp/4p3/8/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2"
MATED_FEN = "rnb1kbnr/pppp1ppp/4p3/8/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
BARE_KINGS_FEN = "8/8/8/4k3/8/8/8/4K3 w - - 0 1"


def seeded(iterations=2000, pruning=True, seed=7):
    return SearchConfig(iterations=iterations, pruning=pruning, seed=seed)


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """Tests that the engine can play complete games without crashing."""

    @pytest.mark.parametrize("pruning", [True, False])
    def test_engine_vs_engine_completes(self, pruning):
        """Engine plays both sides; every move is legal and the game ends."""
        engine = Engine(TicTacToeBoard(), seeded(1500, pruning))
        while not engine.is_game_over():
            legal = engine.board.available_moves()
            move, node = engine.get_best_move()
            assert move in legal
            assert node.move == move
            engine.make_move(move)

        assert 5 <= len(engine.move_history) <= 9
        assert engine.get_best_move() == (None, None)

    def test_engine_takes_immediate_win_as_x(self):
        engine = Engine(TicTacToeBoard.from_cells("XX.OO...."), seeded(300))
        move, node = engine.get_best_move()
        assert move == 2
        assert node.bound is Bound.DEFINITE_WIN

    def test_engine_takes_immediate_win_as_o(self):
        """The search is re-rooted so O's win counts as a win."""
        engine = Engine(TicTacToeBoard.from_cells("XX.OO...X"), seeded(300))
        assert engine.board.to_move == O
        move, _node = engine.get_best_move()
        assert move == 5
        assert engine.search.root().current_player is Player.ME

    def test_same_seed_same_game(self):
        a = Engine(TicTacToeBoard(), seeded(500, seed=11))
        b = Engine(TicTacToeBoard(), seeded(500, seed=11))
        for _ in range(3):
            move_a, _ = a.get_best_move()
            move_b, _ = b.get_best_move()
            assert move_a == move_b
            a.make_move(move_a)
            b.make_move(move_b)

    def test_explicit_iterations_override_config(self):
        engine = Engine(TicTacToeBoard(), seeded(5000))
        engine.get_best_move(iterations=50)
        assert engine.search.root().visits == 50

    def test_pruning_override(self):
        engine = Engine(TicTacToeBoard(), seeded(50, pruning=True))
        engine.get_best_move(pruning=False)
        assert engine.search.pruning is False

    def test_illegal_move_leaves_history(self):
        engine = Engine(TicTacToeBoard(), seeded())
        engine.make_move(4)
        with pytest.raises(IllegalMoveError):
            engine.make_move(4)
        assert engine.move_history == [4]

    def test_reset(self):
        engine = Engine(TicTacToeBoard.from_cells("X...O...."), seeded(100))
        engine.make_move(8)
        engine.get_best_move()
        engine.reset()
        assert engine.board.render() == "X . .\n. O .\n. . ."
        assert engine.move_history == []
        assert engine.search is None


# ════════════════════════════════════════════════════════════════════════════
#  CHESS ADAPTER
# ════════════════════════════════════════════════════════════════════════════


class TestChessAdapter:
    def test_start_position(self):
        board = ChessBoard()
        assert len(board.available_moves()) == 20
        assert board.outcome() is GameOutcome.IN_PROGRESS
        assert board.current_player() is Player.ME

    def test_fingerprint_is_zobrist(self):
        board = ChessBoard()
        board.apply_move("e2e4")
        assert board.fingerprint() == polyglot.zobrist_hash(board.board)
        assert board.fingerprint() != ChessBoard().fingerprint()

    def test_transposition_same_fingerprint(self):
        a, b = ChessBoard(), ChessBoard()
        for uci in ("g1f3", "g8f6", "b1c3"):
            a.apply_move(uci)
        for uci in ("b1c3", "g8f6", "g1f3"):
            b.apply_move(uci)
        assert a.fingerprint() == b.fingerprint()

    def test_illegal_and_malformed_moves(self):
        board = ChessBoard()
        with pytest.raises(IllegalMoveError):
            board.apply_move("e2e5")
        with pytest.raises(IllegalMoveError):
            board.apply_move("zzzz")
        assert board.fen() == chess.STARTING_FEN

    def test_checkmate_outcome_relative_to_root(self):
        mated = ChessBoard(MATED_FEN)
        assert mated.outcome() is GameOutcome.LOSE
        assert mated.available_moves() == []
        assert ChessBoard(MATED_FEN, root_color=chess.BLACK).outcome() is GameOutcome.WIN

    def test_insufficient_material_is_draw(self):
        assert ChessBoard(BARE_KINGS_FEN).outcome() is GameOutcome.DRAW

    def test_copy_keeps_history(self):
        board = ChessBoard()
        board.apply_move("e2e4")
        clone = board.copy()
        clone.apply_move("e7e5")
        assert len(board.board.move_stack) == 1
        assert len(clone.board.move_stack) == 2

    def test_rerooted(self):
        board = ChessBoard()
        board.apply_move("e2e4")
        assert board.current_player() is Player.OTHER
        assert board.rerooted().current_player() is Player.ME

    def test_search_proves_mate_in_one(self):
        engine = SearchEngine(ChessBoard(PRE_MATE_FEN), LcgRandomSource(), pruning=True)
        engine.step_phase()
        engine.step_phase()
        mate = chess.Move.from_uci("d8h4")
        root = engine.root()
        mate_child = next(c for c in root.children if c.move == mate)
        assert mate_child.outcome is GameOutcome.WIN

        outcome = engine._simulate(mate_child.index)
        assert outcome is GameOutcome.WIN
        engine._backpropagate(mate_child.index, outcome)
        assert engine.root().bound is Bound.DEFINITE_WIN
        assert engine.best_move().move == mate

    def test_terminal_chess_root(self):
        engine = SearchEngine(ChessBoard(BARE_KINGS_FEN), LcgRandomSource())
        engine.run_iterations(3)
        assert engine.root().draws == 3
        assert engine.best_move() is None

    def test_engine_wrapper_on_finished_game(self):
        engine = Engine(ChessBoard(MATED_FEN), seeded(10))
        assert engine.is_game_over()
        assert engine.get_best_move() == (None, None)


# ════════════════════════════════════════════════════════════════════════════
#  ANALYZER INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAnalyzerIntegration:
    def setup_method(self):
        self.engine = Engine(TicTacToeBoard.from_cells("XX.OO...."), seeded(400))
        self.engine.get_best_move()
        self.analyzer = Analyzer(self.engine.search)

    def test_proven_win_label(self):
        result = self.analyzer.classify_move(2)
        assert result["label"] == "Proven win"
        assert result["bound"] == "DEFINITE_WIN"
        assert result["delta_vs_best"] == 0.0

    def test_report_covers_root_moves(self):
        report = self.analyzer.move_report()
        assert [r["move"] for r in report] == [2, 5, 6, 7, 8]
        labels = {"Proven win", "Proven loss", "Best", "Good", "Inaccuracy", "Mistake"}
        for r in report:
            assert r["label"] in labels
            assert 0.0 <= r["win_rate"] <= 1.0
            assert r["win_rate"] + r["draw_rate"] <= 1.0 + 1e-9

    def test_unknown_move(self):
        with pytest.raises(KeyError):
            self.analyzer.classify_move(0)


# ════════════════════════════════════════════════════════════════════════════
#  CONFIGURATION AND ERRORS
# ════════════════════════════════════════════════════════════════════════════


class TestConfiguration:
    def test_defaults_when_file_missing(self, tmp_path):
        cfg = Config.load_from_toml(str(tmp_path / "missing.toml"))
        assert cfg.search.iterations == 20000
        assert cfg.search.pruning is True
        assert cfg.search.capacity_hint == 10000
        assert cfg.search.seed is None
        assert cfg.ui.engine_name == "TreeMate"
        assert cfg.log_level == "INFO"

    def test_load_from_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'log_level = "debug"\n'
            "[search]\n"
            "iterations = 500\n"
            "seed = 42\n"
            "unknown_key = 1\n"
            "[ui]\n"
            'engine_name = "Test"\n'
        )
        cfg = Config.load_from_toml(str(path))
        assert cfg.search.iterations == 500
        assert cfg.search.seed == 42
        assert cfg.search.pruning is True
        assert not hasattr(cfg.search, "unknown_key")
        assert cfg.ui.engine_name == "Test"
        assert cfg.log_level == "DEBUG"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ENGINE_SEARCH_ITERATIONS", "123")
        monkeypatch.setenv("ENGINE_LOG_LEVEL", "warning")
        cfg = apply_env_overrides(Config())
        assert cfg.search.iterations == 123
        assert cfg.log_level == "WARNING"

    def test_bad_env_iterations(self, monkeypatch):
        monkeypatch.setenv("ENGINE_SEARCH_ITERATIONS", "lots")
        with pytest.raises(ConfigurationError) as exc:
            apply_env_overrides(Config())
        assert exc.value.context == {"value": "lots"}

    def test_error_formatting(self):
        err = IllegalMoveError("illegal tic-tac-toe move", context={"move": 4})
        assert isinstance(err, TreeMateError)
        assert str(err) == "[ILLEGAL_MOVE] illegal tic-tac-toe move (move=4)"
        assert err.to_dict() == {
            "code": "ILLEGAL_MOVE",
            "message": "illegal tic-tac-toe move",
            "context": {"move": 4},
        }


# ════════════════════════════════════════════════════════════════════════════
#  CLI
# ════════════════════════════════════════════════════════════════════════════


class TestCli:
    def test_print_info_solved(self, capsys):
        engine = Engine(TicTacToeBoard.from_cells("XOXOOX.X."), seeded(100))
        _move, best = engine.get_best_move()
        root = engine.search.root()
        print_info(root.visits, root, best, engine.search.node_count, 0.5)
        out = capsys.readouterr().out
        assert out.startswith("info iterations")
        assert "solved" in out
        assert f"nodes {engine.search.node_count}" in out

    def test_scripted_game(self, capsys, monkeypatch):
        from interface.cli import play

        monkeypatch.setattr(CONFIG.ui, "human_first", True)
        monkeypatch.setattr(CONFIG.search, "seed", 5)
        # garbage first, then keep cycling cells until one is free
        inputs = itertools.chain(["abc"], itertools.cycle(str(i) for i in range(9)))
        engine = play(read=lambda _prompt: next(inputs), iterations=300)

        out = capsys.readouterr().out
        assert engine.is_game_over()
        assert "Illegal move, try again." in out
        assert "Engine plays:" in out
        assert "Game Over" in out
        assert "Result:" in out
        assert engine.move_history[0] == 0


# ════════════════════════════════════════════════════════════════════════════
#  REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, engine

        self.client = TestClient(app)
        # Reset state before each test
        engine.reset()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["cells"] == "........."
        assert data["to_move"] == X
        assert data["legal_moves"] == list(range(9))
        assert data["is_game_over"] is False
        assert data["winner"] is None

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": 4})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == 4
        assert data["cells"] == "....X...."
        assert data["to_move"] == O

    def test_post_move_occupied(self):
        self.client.post("/move", json={"move": 4})
        response = self.client.post("/move", json={"move": 4})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "ILLEGAL_MOVE"

    def test_post_move_out_of_range(self):
        response = self.client.post("/move", json={"move": 9})
        assert response.status_code == 422

    def test_search_returns_move(self):
        response = self.client.post("/search", json={"iterations": 300})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] in range(9)
        assert data["root"]["visits"] == 300
        assert len(data["moves"]) == 9
        assert data["solved"] is False

    def test_search_rejects_bad_iterations(self):
        response = self.client.post("/search", json={"iterations": 0})
        assert response.status_code == 422

    def test_search_game_over_returns_400(self):
        for move in (0, 3, 1, 4, 2):
            self.client.post("/move", json={"move": move})
        board = self.client.get("/board").json()
        assert board["is_game_over"] is True
        assert board["winner"] == X
        response = self.client.post("/search", json={"iterations": 10})
        assert response.status_code == 400

    def test_reset_board(self):
        self.client.post("/move", json={"move": 0})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["cells"] == "........."

    def test_full_api_game_flow(self):
        """Human and engine alternate through the API until the game ends."""
        human_turn = True
        while not self.client.get("/board").json()["is_game_over"]:
            if human_turn:
                move = self.client.get("/board").json()["legal_moves"][0]
            else:
                move = self.client.post("/search", json={"iterations": 200}).json()["best_move"]
            assert self.client.post("/move", json={"move": move}).status_code == 200
            human_turn = not human_turn
        assert self.client.post("/search", json={"iterations": 10}).status_code == 400


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
