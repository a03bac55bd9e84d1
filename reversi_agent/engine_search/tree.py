"""Shared Monte Carlo search tree.

Nodes live in an append-only arena and refer to each other by integer
handle. Each node carries its own lock guarding its statistics, its
untried-move list and its child map; the arena has a separate lock used
only for appends. Lock order is always node -> arena.

Statistics are stored from the point of view of the side that moved into
the node (`perspective`), so a parent picks the child with the best
reward/visits for itself.
"""

from __future__ import annotations

import math
import random
import threading
from collections import deque
from dataclasses import dataclass, field

from reversi_agent.config import DEFAULT_EXPLORATION
from reversi_agent.errors import EmptySearchError, SearchInvariantError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move
from reversi_agent.engine.actions import advance
from reversi_agent.engine.rules import candidate_moves, is_terminal
from reversi_agent.solver.simulation import RolloutOutcome


@dataclass(eq=False)
class SearchNode:
    board: Board
    parent: int | None
    move: Move | None  # edge from the parent; None at the root
    perspective: Color
    terminal: bool
    untried: list[Move]
    children: dict[int | None, int] = field(default_factory=dict)  # square -> handle
    visits: int = 0
    reward: float = 0.0
    # Set once some iteration has committed to simulating from this node
    claimed: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def win_rate(self) -> float:
        return self.reward / self.visits if self.visits > 0 else 0.0

    def uct(self, log_parent_visits: float, exploration: float) -> float:
        if self.visits == 0:
            return math.inf
        return self.reward / self.visits + exploration * math.sqrt(log_parent_visits / self.visits)


class SearchTree:
    def __init__(self, root_board: Board, exploration_constant: float = DEFAULT_EXPLORATION):
        self.exploration_constant = exploration_constant
        self._nodes: list[SearchNode] = []
        self._arena_lock = threading.Lock()
        self.root = self._allocate(root_board, None, None, root_board.to_move.opponent)

    # --- arena ---

    def _allocate(self, board: Board, parent: int | None, move: Move | None,
                  perspective: Color) -> int:
        node = SearchNode(
            board=board,
            parent=parent,
            move=move,
            perspective=perspective,
            terminal=is_terminal(board),
            untried=candidate_moves(board),
        )
        with self._arena_lock:
            self._nodes.append(node)
            return len(self._nodes) - 1

    def node(self, handle: int) -> SearchNode:
        return self._nodes[handle]

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def root_node(self) -> SearchNode:
        return self._nodes[self.root]

    @property
    def root_board(self) -> Board:
        return self._nodes[self.root].board

    # --- one iteration: select + expand, then backpropagate ---

    def select(self, rng: random.Random) -> list[int]:
        """Descend from the root and return the path to the node to simulate from.

        The last handle on the path is either a freshly expanded child, a
        terminal node, or the root on its very first visit.
        """
        handle = self.root
        path = [handle]
        while True:
            node = self._nodes[handle]
            if node.terminal:
                return path
            with node.lock:
                if not node.claimed:
                    node.claimed = True
                    return path
                if node.untried:
                    move = node.untried.pop(rng.randrange(len(node.untried)))
                    path.append(self._expand(handle, node, move))
                    return path
                parent_visits = node.visits
                handles = list(node.children.values())
            handle = self._best_uct(handles, parent_visits)
            path.append(handle)

    def _expand(self, handle: int, node: SearchNode, move: Move) -> int:
        """Materialise the child for `move`. Caller holds node.lock.

        First writer wins: if the child already exists it is returned and
        no new node is created.
        """
        existing = node.children.get(move.square)
        if existing is not None:
            return existing
        child = self._allocate(advance(node.board, move), handle, move, node.board.to_move)
        self._nodes[child].claimed = True
        node.children[move.square] = child
        return child

    def _best_uct(self, handles: list[int], parent_visits: int) -> int:
        if not handles:
            raise SearchInvariantError("Fully expanded non-terminal node has no children")
        log_parent = math.log(max(1, parent_visits))
        best = handles[0]
        best_score = -math.inf
        for h in handles:
            s = self._nodes[h].uct(log_parent, self.exploration_constant)
            if s > best_score:
                best, best_score = h, s
        return best

    def backpropagate(self, path: list[int], outcome: RolloutOutcome) -> None:
        for handle in reversed(path):
            node = self._nodes[handle]
            reward = outcome.reward_for(node.perspective)
            with node.lock:
                node.visits += 1
                node.reward += reward
                if node.visits < 1 or not 0.0 <= node.reward <= node.visits:
                    raise SearchInvariantError(
                        f"Corrupt statistics at node {handle}: "
                        f"visits={node.visits} reward={node.reward}")

    # --- queries ---

    def root_children(self) -> list[SearchNode]:
        """Expanded children of the root, in square order (PASS last)."""
        root = self.root_node
        with root.lock:
            handles = list(root.children.values())
        children = [self._nodes[h] for h in handles]
        children.sort(key=lambda n: n.move.sort_key)
        if not children and not root.untried:
            raise EmptySearchError("Root position has no moves to search")
        return children

    def child_for(self, handle: int, move: Move) -> int | None:
        return self._nodes[handle].children.get(move.square)

    def check_invariants(self) -> None:
        """Verify visit bookkeeping over the whole tree.

        Must only be called when no worker is running.
        """
        for handle, node in enumerate(self._nodes):
            if node.visits < 0 or node.reward < 0 or node.reward > node.visits:
                raise SearchInvariantError(
                    f"Node {handle} has visits={node.visits} reward={node.reward}")
            child_visits = sum(self._nodes[h].visits for h in node.children.values())
            if node.terminal:
                if node.claimed and node.visits < 1:
                    raise SearchInvariantError(f"Terminal node {handle} was never visited")
            elif node.claimed and node.visits != child_visits + 1:
                raise SearchInvariantError(
                    f"Node {handle}: visits={node.visits} but children sum to {child_visits}")
            elif not node.claimed and (node.visits or node.children):
                raise SearchInvariantError(f"Unclaimed node {handle} has statistics")

    # --- reuse between moves ---

    def subtree(self, handle: int) -> "SearchTree":
        """Copy the subtree under `handle` into a new tree rooted there.

        Not thread-safe; call between search episodes only.
        """
        tree = SearchTree.__new__(SearchTree)
        tree.exploration_constant = self.exploration_constant
        tree._arena_lock = threading.Lock()
        tree._nodes = []
        tree.root = 0

        remap: dict[int, int] = {}
        queue = deque([handle])
        while queue:
            old = queue.popleft()
            src = self._nodes[old]
            remap[old] = len(tree._nodes)
            tree._nodes.append(SearchNode(
                board=src.board,
                parent=None if old == handle else remap[src.parent],
                move=None if old == handle else src.move,
                perspective=src.perspective,
                terminal=src.terminal,
                untried=list(src.untried),
                children=dict(src.children),
                visits=src.visits,
                reward=src.reward,
                claimed=src.claimed,
            ))
            queue.extend(src.children.values())
        for node in tree._nodes:
            node.children = {k: remap[h] for k, h in node.children.items()}
        return tree
