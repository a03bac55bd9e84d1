"""Tests for the parallel MCTS coordinator."""

import pytest

from reversi_agent.config import FULL_MASK
from reversi_agent.errors import ConfigurationError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color, RolloutPolicy, SelectionPolicy
from reversi_agent.models.move import Move
from reversi_agent.engine.actions import apply_move
from reversi_agent.engine.rules import legal_moves
from reversi_agent.engine_search import EngineConfig, search_best_move
from reversi_agent.engine_search.mcts import MctsCoordinator, worker_rng
from reversi_agent.engine_search.time_manager import SearchBudget, TimeManager, turn_time_budget


OVERSHOOT_MARGIN_MS = 400


@pytest.fixture
def board():
    return Board.initial()


def fixed(iterations: int, **kwargs) -> EngineConfig:
    return EngineConfig(time_budget_ms=None, max_iterations=iterations, **kwargs)


class TestSearch:
    def test_returns_legal_move(self, board):
        result = search_best_move(board, fixed(200, seed=1))
        assert result.best_move in legal_moves(board)
        assert result.iterations == 200
        assert result.nodes > 1
        assert 0.0 <= result.win_rate <= 1.0

    def test_top_k_sorted_by_visits(self, board):
        result = search_best_move(board, fixed(300, seed=2, top_k=3))
        visits = [s.visit_count for s in result.top_k_moves]
        assert len(visits) == 3
        assert visits == sorted(visits, reverse=True)
        assert result.top_k_moves[0].move == result.best_move

    def test_deterministic_single_thread(self, board):
        a = search_best_move(board, fixed(150, seed=11))
        b = search_best_move(board, fixed(150, seed=11))
        assert a.best_move == b.best_move
        assert [(s.move, s.visit_count) for s in a.top_k_moves] == \
            [(s.move, s.visit_count) for s in b.top_k_moves]

    def test_pass_without_search(self):
        board = Board(black=1 << 1, white=1, to_move=Color.BLACK)
        result = search_best_move(board, fixed(100))
        assert result.is_pass
        assert result.iterations == 0

    def test_terminal_board_passes(self):
        result = search_best_move(Board(black=1, white=1 << 2), fixed(10))
        assert result.is_pass

    def test_single_legal_move(self):
        board = Board(black=FULL_MASK ^ 1 ^ (1 << 63), white=1 << 63, to_move=Color.WHITE)
        result = search_best_move(board, fixed(20))
        assert result.best_move == Move(0)

    def test_zero_budget_still_moves(self, board):
        result = search_best_move(board, EngineConfig(time_budget_ms=0, seed=3))
        assert result.iterations >= 1
        assert result.best_move in legal_moves(board)

    def test_negative_budget_still_moves(self, board):
        result = search_best_move(board, EngineConfig(time_budget_ms=-50))
        assert result.best_move in legal_moves(board)

    @pytest.mark.parametrize("threads", [1, 3])
    def test_time_budget(self, board, threads):
        result = search_best_move(
            board, EngineConfig(time_budget_ms=100, thread_count=threads, seed=4))
        assert result.iterations >= 1
        assert result.elapsed_ms >= 100
        # Workers finish their current rollout, a few milliseconds from the opening.
        assert result.elapsed_ms < 100 + OVERSHOOT_MARGIN_MS
        assert 0.0 <= result.overshoot_ms < OVERSHOOT_MARGIN_MS

    @pytest.mark.parametrize("policy", list(SelectionPolicy))
    def test_selection_policies(self, board, policy):
        result = search_best_move(board, fixed(200, seed=5, selection_policy=policy))
        assert result.best_move in legal_moves(board)
        scores = [s.score for s in result.top_k_moves]
        assert scores == sorted(scores, reverse=True)

    def test_heuristic_rollouts(self, board):
        result = search_best_move(
            board, fixed(100, seed=6, rollout_policy=RolloutPolicy.HEURISTIC))
        assert result.best_move in legal_moves(board)

    def test_invalid_config(self, board):
        with pytest.raises(ConfigurationError):
            search_best_move(board, EngineConfig(thread_count=0))


class TestParallelSearch:
    def test_threads_share_one_tree(self, board):
        coordinator = MctsCoordinator()
        result = coordinator.search(board, fixed(400, thread_count=4, seed=7))
        assert result.iterations == 400
        assert sum(result.thread_iterations) == 400
        assert len(result.thread_iterations) == 4
        assert coordinator.tree.root_node.visits == 400
        coordinator.tree.check_invariants()

    def test_timed_parallel_search(self, board):
        result = search_best_move(board, EngineConfig(time_budget_ms=150, thread_count=3))
        assert result.iterations == sum(result.thread_iterations)
        assert result.best_move in legal_moves(board)

    def test_worker_rngs_differ(self):
        assert worker_rng(1, 0).random() != worker_rng(1, 1).random()
        assert worker_rng(1, 0).random() == worker_rng(1, 0).random()


class TestTreeReuse:
    def test_reuse_same_position(self, board):
        coordinator = MctsCoordinator()
        coordinator.search(board, fixed(100, seed=8))
        coordinator.search(board, fixed(100, seed=9))
        assert coordinator.tree.root_node.visits == 200
        assert coordinator.total_iterations == 200

    def test_notify_move_reroots(self, board):
        coordinator = MctsCoordinator()
        coordinator.search(board, fixed(200, seed=10))
        move = Move.parse("f5")
        kept = coordinator.tree.node(coordinator.tree.child_for(coordinator.tree.root, move)).visits
        coordinator.notify_move(board, move)
        assert coordinator.tree.root_board == apply_move(board, move)
        assert coordinator.tree.root_node.visits == kept

    def test_notify_from_unknown_position_drops_tree(self, board):
        coordinator = MctsCoordinator()
        coordinator.search(board, fixed(50, seed=12))
        other = apply_move(board, Move.parse("d3"))
        coordinator.notify_move(other, legal_moves(other)[0])
        assert coordinator.tree is None

    def test_new_position_builds_fresh_tree(self, board):
        coordinator = MctsCoordinator()
        coordinator.search(board, fixed(50, seed=13))
        other = apply_move(board, Move.parse("d3"))
        coordinator.search(other, fixed(30, seed=13))
        assert coordinator.tree.root_board == other
        assert coordinator.tree.root_node.visits == 30


class TestBudget:
    def test_first_start_always_allowed(self):
        budget = SearchBudget(0, None)
        assert budget.try_start()
        assert not budget.try_start()

    def test_iteration_cap(self):
        budget = SearchBudget(None, 3)
        assert [budget.try_start() for _ in range(5)] == [True, True, True, False, False]
        assert budget.started == 3

    def test_time_manager_without_deadline(self):
        clock = TimeManager(None)
        assert not clock.expired()
        assert clock.time_left_ms() == float("inf")
        assert clock.overshoot_ms() == 0.0

    def test_turn_budget(self):
        assert turn_time_budget(100.0, 0) == pytest.approx(1.5)
        assert turn_time_budget(100.0, 40) == pytest.approx(16.7)
        assert turn_time_budget(100.0, 500) == pytest.approx(6.0)
        assert turn_time_budget(-5.0, 3) == 0.0
