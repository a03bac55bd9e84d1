"""Tests for players and the game loops."""

import pytest

from reversi_agent.errors import ProtocolError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move, PASS
from reversi_agent.engine.actions import apply_move
from reversi_agent.engine.rules import is_terminal, legal_moves
from reversi_agent.engine_search import EngineConfig
from reversi_agent.agents.base import GameInterface, Player
from reversi_agent.agents.match import play_local, play_match
from reversi_agent.agents.mcts_agent import MctsAgent
from reversi_agent.agents.random_agent import RandomAgent
from reversi_agent.settings import AgentConfig


def quick_config(**kwargs) -> AgentConfig:
    search = EngineConfig(time_budget_ms=None, max_iterations=10, seed=5)
    kwargs.setdefault("dynamic_time", False)
    return AgentConfig(search=search, log=False, **kwargs)


class LocalReferee(GameInterface):
    """Plays the remote side with another Player on its own copy of the board."""

    def __init__(self, opponent: Player):
        self.opponent = opponent
        self.board = Board.initial()
        self.sent: list[Move] = []

    def send_move(self, move, color):
        assert color is not self.opponent.color
        self.sent.append(move)
        self.board = apply_move(self.board, move)

    def receive_move(self):
        move = self.opponent.request_move(self.board)
        self.board = apply_move(self.board, move)
        return move


class StubbornReferee(GameInterface):
    def send_move(self, move, color):
        pass

    def receive_move(self):
        return Move.parse("a1")


class CornerOnlyPlayer(Player):
    def request_move(self, board):
        return Move(0)


class TestRandomAgent:
    def test_plays_legal_moves(self):
        agent = RandomAgent(Color.BLACK, seed=1)
        board = Board.initial()
        assert agent.request_move(board) in legal_moves(board)

    def test_seeded(self):
        board = Board.initial()
        a = [RandomAgent(Color.BLACK, seed=9).request_move(board) for _ in range(3)]
        assert len(set(a)) == 1

    def test_passes_without_moves(self):
        board = Board(black=1 << 1, white=1, to_move=Color.BLACK)
        assert RandomAgent(Color.BLACK).request_move(board) is PASS


class TestMctsAgent:
    def test_request_move(self):
        agent = MctsAgent(Color.BLACK, quick_config())
        board = Board.initial()
        assert agent.request_move(board) in legal_moves(board)
        assert agent.search_iterations == 10

    def test_clock_runs_down(self):
        config = quick_config(dynamic_time=True, max_time=2.0)
        agent = MctsAgent(Color.BLACK, config)
        agent.request_move(Board.initial())
        # Turn 0 gets 1.5% of the clock
        assert 1.8 < agent.time_remaining_s <= 2.0 - 0.03 + 1e-9

    def test_forced_pass(self):
        board = Board(black=1 << 1, white=1, to_move=Color.BLACK)
        agent = MctsAgent(Color.BLACK, quick_config())
        assert agent.request_move(board) is PASS

    def test_keeps_tree_between_turns(self):
        agent = MctsAgent(Color.BLACK, quick_config())
        board = apply_move(Board.initial(), agent.request_move(Board.initial()))
        reply = legal_moves(board)[0]
        agent.notify_opponent_move(reply)
        board = apply_move(board, reply)
        assert agent.request_move(board) in legal_moves(board)
        assert agent.session.board.to_move is Color.WHITE


class TestPlayLocal:
    def test_full_game(self):
        final = play_local(MctsAgent(Color.BLACK, quick_config()), RandomAgent(Color.WHITE, seed=2))
        assert is_terminal(final)

    def test_random_vs_random(self):
        final = play_local(RandomAgent(Color.BLACK, seed=3), RandomAgent(Color.WHITE, seed=4))
        assert is_terminal(final)
        assert final.turn >= 9

    def test_colours_checked(self):
        with pytest.raises(ValueError):
            play_local(RandomAgent(Color.WHITE), RandomAgent(Color.BLACK))


class TestPlayMatch:
    def test_against_local_referee(self):
        referee = LocalReferee(RandomAgent(Color.WHITE, seed=6))
        final = play_match(MctsAgent(Color.BLACK, quick_config()), referee)
        assert is_terminal(final)
        assert final == referee.board
        assert referee.sent

    def test_engine_as_white(self):
        referee = LocalReferee(RandomAgent(Color.BLACK, seed=7))
        final = play_match(RandomAgent(Color.WHITE, seed=8), referee)
        assert final == referee.board

    def test_illegal_player_move_replaced(self):
        referee = LocalReferee(RandomAgent(Color.WHITE, seed=9))
        play_match(CornerOnlyPlayer(Color.BLACK), referee)
        assert referee.sent[0] == legal_moves(Board.initial())[0]

    def test_illegal_opponent_move(self):
        with pytest.raises(ProtocolError):
            play_match(RandomAgent(Color.WHITE), StubbornReferee())
