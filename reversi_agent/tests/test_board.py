"""Tests for the board engine: models, move generation, move application and scoring."""

import pytest

from reversi_agent.config import FULL_MASK
from reversi_agent.errors import GameOverError, InvalidMoveError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move, PASS
from reversi_agent.engine.actions import advance, apply_move
from reversi_agent.engine.rules import (
    candidate_moves, has_legal_move, is_legal, is_terminal, legal_moves, mobility,
)
from reversi_agent.engine.scoring import disc_difference, position_features, score, winner


def sq(notation: str) -> Move:
    return Move.parse(notation)


@pytest.fixture
def board():
    return Board.initial()


@pytest.fixture
def mid_game():
    return Board.from_rows([
        "........",
        "...BW...",
        "...WB...",
        "..BBBB..",
        "..BWWB..",
        "..BBBB..",
        "...BW...",
        "........",
    ])


@pytest.fixture
def one_move_left():
    # White owns h8, black everything except a1 and h8; a1 is white's only move
    return Board(black=FULL_MASK ^ 1 ^ (1 << 63), white=1 << 63, to_move=Color.WHITE)


# --- Models ---

class TestMove:
    def test_parse_notation(self):
        assert sq("d3") == Move(19)
        assert sq("D 3") == Move(19)
        assert sq("a1").square == 0
        assert sq("h8").square == 63

    def test_parse_pass(self):
        assert Move.parse("pass") is PASS
        assert PASS.is_pass
        assert PASS.to_notation() == "pass"

    def test_parse_rejects_garbage(self):
        for text in ("z9", "d9", "d", "d33"):
            with pytest.raises(InvalidMoveError):
                Move.parse(text)

    def test_row_col(self):
        mv = Move(27)
        assert (mv.row, mv.col) == (3, 3)
        assert mv.mask == 1 << 27
        assert str(mv) == "d4"

    def test_from_row_col_off_board(self):
        with pytest.raises(InvalidMoveError):
            Move.from_row_col(8, 0)

    def test_equality_ignores_flips(self):
        assert Move(19, flips=1 << 27) == Move(19)
        assert hash(Move(19, flips=1 << 27)) == hash(Move(19))

    def test_pass_sorts_last(self):
        assert PASS.sort_key > Move(63).sort_key


class TestBoard:
    def test_initial_setup(self, board):
        assert board.white == (1 << 27) | (1 << 36)
        assert board.black == (1 << 28) | (1 << 35)
        assert board.disc_count == 4
        assert board.to_move is Color.BLACK
        assert board.turn == 0

    def test_overlapping_discs_rejected(self):
        with pytest.raises(ValueError):
            Board(black=1, white=1)

    def test_rows_round_trip(self, mid_game):
        assert Board.from_rows(mid_game.to_rows()) == mid_game

    def test_from_rows_validates(self):
        with pytest.raises(ValueError):
            Board.from_rows(["........"] * 7)
        with pytest.raises(ValueError):
            Board.from_rows(["...X...."] + ["........"] * 7)

    def test_cell(self, board):
        assert board.cell(3, 3) is Color.WHITE
        assert board.cell(3, 4) is Color.BLACK
        assert board.cell(0, 0) is None

    def test_render(self, board):
        lines = board.render().splitlines()
        assert lines[0].split() == list("abcdefgh")
        assert lines[4] == "4 . . . W B . . ."


# --- Move generation ---

class TestLegalMoves:
    def test_initial_board(self, board):
        moves = legal_moves(board)
        assert [m.to_notation() for m in moves] == ["d3", "c4", "f5", "e6"]
        assert all(m.flip_count == 1 for m in moves)

    def test_ascending_square_order(self, mid_game):
        squares = [m.square for m in legal_moves(mid_game)]
        assert squares == sorted(squares)

    def test_mid_game(self, mid_game):
        moves = {m.to_notation() for m in legal_moves(mid_game)}
        assert moves == {"c2", "c3", "d8", "e1", "e8", "f1", "f2", "f7", "f8"}

    def test_mid_game_after_move(self, mid_game):
        after = apply_move(mid_game, sq("c3"))
        assert after.to_move is Color.WHITE
        assert after.to_rows() == [
            "........",
            "...BW...",
            "..BBB...",
            "..BBBB..",
            "..BWWB..",
            "..BBBB..",
            "...BW...",
            "........",
        ]
        moves = {m.to_notation() for m in legal_moves(after)}
        assert moves == {
            "b2", "b3", "b4", "b5", "b7", "c2", "c7",
            "d1", "d8", "f3", "f7", "g3", "g5", "g7",
        }

    def test_only_move_before_end(self, one_move_left):
        moves = legal_moves(one_move_left)
        assert moves == [sq("a1")]

    def test_known_late_game_without_moves(self):
        board = Board(black=44749019426896392, white=18374973456518217728)
        assert board.to_move is Color.BLACK
        assert legal_moves(board) == []

    def test_known_late_game_three_moves(self):
        board = Board(black=6863485832112635904, white=2323716670234820607,
                      to_move=Color.WHITE)
        assert len(legal_moves(board)) == 3

    def test_known_position_white_has_no_moves(self):
        board = Board(black=0x80F0BCD09E80, white=0x60007F0F432F617F, to_move=Color.WHITE)
        assert legal_moves(board) == []

    def test_forced_pass(self):
        # Black on b1 cannot flank white on a1, but white can capture b1 via c1
        board = Board(black=1 << 1, white=1, to_move=Color.BLACK)
        assert legal_moves(board) == []
        assert not has_legal_move(board)
        assert not is_terminal(board)
        assert candidate_moves(board) == [PASS]

    def test_mobility(self, board):
        assert mobility(board) == 4

    def test_is_legal(self, board):
        assert is_legal(board, sq("d3"))
        assert not is_legal(board, sq("a1"))
        assert not is_legal(board, PASS)


class TestTerminal:
    def test_initial_not_terminal(self, board):
        assert not is_terminal(board)

    def test_no_moves_for_either_side(self):
        assert is_terminal(Board(black=1, white=1 << 2))

    def test_full_board(self):
        full = Board(black=FULL_MASK ^ (1 << 63), white=1 << 63)
        assert full.is_full
        assert is_terminal(full)
        assert candidate_moves(full) == []

    def test_after_last_move(self, one_move_left):
        after = apply_move(one_move_left, sq("a1"))
        assert after.is_full
        assert is_terminal(after)

    def test_two_passes(self, board):
        assert is_terminal(Board(black=board.black, white=board.white, passes=2))


# --- Move application ---

class TestApplyMove:
    def test_known_move(self, board):
        after = apply_move(board, sq("d3"))
        assert after.black == (1 << 19) | (1 << 27) | (1 << 35) | (1 << 28)
        assert after.white == 1 << 36
        assert after.to_move is Color.WHITE
        assert after.turn == 1
        assert disc_difference(after, Color.BLACK) == 3

    def test_original_board_unchanged(self, board):
        apply_move(board, sq("d3"))
        assert board == Board.initial()

    def test_every_move_adds_at_least_two_discs(self, mid_game):
        for mv in legal_moves(mid_game):
            after = apply_move(mid_game, mv)
            own_before = bin(mid_game.own).count("1")
            own_after = bin(after.discs(mid_game.to_move)).count("1")
            assert own_after - own_before >= 2
            assert after.disc_count == mid_game.disc_count + 1

    def test_played_square_never_legal_again(self, mid_game):
        for mv in legal_moves(mid_game):
            after = apply_move(mid_game, mv)
            same_side = Board(black=after.black, white=after.white, to_move=mid_game.to_move)
            assert mv not in legal_moves(after)
            assert mv not in legal_moves(same_side)

    def test_play_first_moves(self, board):
        for i in range(1, 10):
            board = apply_move(board, legal_moves(board)[0])
            assert board.turn == i

    def test_illegal_move(self, board):
        with pytest.raises(InvalidMoveError):
            apply_move(board, sq("a1"))

    def test_occupied_square(self, board):
        with pytest.raises(InvalidMoveError):
            apply_move(board, sq("d4"))

    def test_pass_with_moves_available(self, board):
        with pytest.raises(InvalidMoveError):
            apply_move(board, PASS)

    def test_forced_pass(self):
        board = Board(black=1 << 1, white=1, to_move=Color.BLACK)
        after = apply_move(board, PASS)
        assert after.to_move is Color.WHITE
        assert after.passes == 1
        assert after.black == board.black and after.white == board.white

    def test_move_on_finished_game(self):
        with pytest.raises(GameOverError):
            apply_move(Board(black=1, white=1 << 2), PASS)

    def test_flips_are_recomputed(self, board):
        lying = Move(19, flips=FULL_MASK)
        assert apply_move(board, lying) == apply_move(board, sq("d3"))

    def test_advance_matches_apply(self, mid_game):
        for mv in legal_moves(mid_game):
            assert advance(mid_game, mv) == apply_move(mid_game, mv)


# --- Scoring ---

class TestScoring:
    def test_initial_score(self, board):
        assert score(board) == (2, 2)
        assert disc_difference(board, Color.BLACK) == 0
        assert winner(board) is None

    def test_winner(self, one_move_left):
        after = apply_move(one_move_left, sq("a1"))
        black, white = score(after)
        assert black + white == 64
        assert winner(after) is (Color.BLACK if black > white else Color.WHITE)

    def test_position_features(self):
        board = Board(black=(1 << 0) | (1 << 9) | (1 << 27), white=1 << 63)
        f = position_features(board, Color.BLACK)
        assert f.discs == 3
        assert f.corners == 1
        assert f.x_squares == 1
        assert f.diagonals == 3
        assert f.center_4 == 1
        assert f.inner_board == 1
        assert position_features(board, Color.WHITE).corners == 1
