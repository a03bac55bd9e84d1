"""Parallel Monte Carlo Tree Search over one shared tree.

Every worker thread runs complete select -> expand -> simulate ->
backpropagate iterations against the same SearchTree until the episode
budget is spent. Workers only check the budget between iterations, so a
rollout in flight at the deadline still finishes and is counted.
"""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor

from reversi_agent.models.board import Board
from reversi_agent.models.enums import SelectionPolicy, StrategyKind
from reversi_agent.models.move import Move
from reversi_agent.engine.rules import has_legal_move, is_terminal, legal_moves
from reversi_agent.engine_search.time_manager import SearchBudget, TimeManager
from reversi_agent.engine_search.tree import SearchNode, SearchTree
from reversi_agent.engine_search.types import (
    EngineConfig, EngineMoveStat, EngineResult, SearchStrategy,
)
from reversi_agent.solver.heuristics import blended_value, order_moves
from reversi_agent.solver.simulation import rollout

logger = logging.getLogger(__name__)


def worker_rng(seed: int | None, index: int) -> random.Random:
    """Independent, reproducible RNG per worker."""
    if seed is None:
        return random.Random()
    return random.Random(seed * 1_000_003 + index)


def _rank_children(children: list[SearchNode],
                   policy: SelectionPolicy) -> list[tuple[float, SearchNode]]:
    """Children best-first under `policy`; ties fall back to square order."""
    if policy is SelectionPolicy.MAX_WIN_RATE:
        scored = [(c.win_rate, c) for c in children]
        key = lambda t: (-t[0], -t[1].visits, t[1].move.sort_key)
    elif policy is SelectionPolicy.BLENDED:
        scored = [(blended_value(c.board, c.visits, c.win_rate), c) for c in children]
        key = lambda t: (-t[0], t[1].move.sort_key)
    else:
        scored = [(float(c.visits), c) for c in children]
        key = lambda t: (-t[0], -t[1].win_rate, t[1].move.sort_key)
    return sorted(scored, key=key)


class MctsCoordinator(SearchStrategy):
    kind = StrategyKind.MCTS

    def __init__(self) -> None:
        self.tree: SearchTree | None = None
        self.total_iterations = 0

    def reset(self) -> None:
        self.tree = None

    def notify_move(self, board: Board, move: Move) -> None:
        """Keep the subtree reached by `move` played from `board`, if we have it."""
        tree = self.tree
        if tree is None:
            return
        if tree.root_board.position_key != board.position_key:
            self.tree = None
            return
        child = tree.child_for(tree.root, move)
        self.tree = tree.subtree(child) if child is not None else None

    def _tree_for(self, board: Board, exploration: float) -> SearchTree:
        tree = self.tree
        if tree is not None and tree.root_board.position_key == board.position_key:
            logger.debug("MCTS: reusing tree with %d nodes, %d root visits",
                         len(tree), tree.root_node.visits)
            tree.exploration_constant = exploration
        else:
            tree = SearchTree(board, exploration)
        self.tree = tree
        return tree

    def search(self, board: Board, config: EngineConfig) -> EngineResult:
        config.validate()
        clock = TimeManager(config.time_budget_ms)
        if is_terminal(board) or not has_legal_move(board):
            logger.debug("MCTS: no legal move for %s, passing", board.to_move.name)
            return EngineResult.pass_result(self.kind, clock.elapsed_ms())

        tree = self._tree_for(board, config.exploration_constant)
        budget = SearchBudget(config.time_budget_ms, config.max_iterations)
        abort = threading.Event()

        with ThreadPoolExecutor(max_workers=config.thread_count,
                                thread_name_prefix="mcts-worker") as pool:
            futures = [
                pool.submit(self._work, tree, budget, abort, config, worker_rng(config.seed, i))
                for i in range(config.thread_count)
            ]
            counts = tuple(f.result() for f in futures)

        iterations = sum(counts)
        self.total_iterations += iterations
        overshoot = budget.clock.overshoot_ms()
        for i, count in enumerate(counts):
            logger.debug("MCTS: thread %d completed %d iterations", i, count)
        if overshoot > 0:
            logger.info("MCTS: deadline overshoot %.1fms", overshoot)

        if config.verify_invariants:
            tree.check_invariants()
        return self._result(board, tree, config, counts, clock.elapsed_ms(), overshoot)

    def _work(self, tree: SearchTree, budget: SearchBudget, abort: threading.Event,
              config: EngineConfig, rng: random.Random) -> int:
        done = 0
        try:
            while not abort.is_set() and budget.try_start():
                path = tree.select(rng)
                outcome = rollout(tree.node(path[-1]).board, rng, config.rollout_policy)
                tree.backpropagate(path, outcome)
                done += 1
        except BaseException:
            abort.set()
            raise
        return done

    def _result(self, board: Board, tree: SearchTree, config: EngineConfig,
                counts: tuple[int, ...], elapsed_ms: float, overshoot_ms: float) -> EngineResult:
        ranked = _rank_children(tree.root_children(), config.selection_policy)
        stats = [
            EngineMoveStat(
                move=child.move,
                visit_count=child.visits,
                win_rate=round(child.win_rate, 4),
                score=round(value, 4),
            )
            for value, child in ranked
        ]
        for st in stats:
            logger.debug("MCTS: considering %s visits=%d win_rate=%.3f",
                         st.move, st.visit_count, st.win_rate)

        if stats:
            best, win_rate = stats[0].move, stats[0].win_rate
        else:
            # Budget ran out before any child was expanded
            best, win_rate = order_moves(board, legal_moves(board))[0], 0.5

        logger.info("MCTS: %d iterations on %d threads in %.1fms, %d nodes, best %s (%.3f)",
                    sum(counts), len(counts), elapsed_ms, len(tree), best, win_rate)
        return EngineResult(
            best_move=best,
            top_k_moves=stats[:config.top_k],
            win_rate=win_rate,
            iterations=sum(counts),
            nodes=len(tree),
            elapsed_ms=round(elapsed_ms, 1),
            overshoot_ms=round(overshoot_ms, 1),
            thread_iterations=counts,
            strategy=self.kind,
        )
