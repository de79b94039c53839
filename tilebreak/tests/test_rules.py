"""
Tests for the stateless rule predicates.
"""

import pytest

from ..engine_core import rules
from ..engine_core.board import Board, CellState
from .conftest import break_cells


class TestMoveLegality:
    """A move needs an in-bounds, empty, adjacent target."""

    def test_adjacent_empty_is_legal(self, board):
        assert rules.is_legal_move_for_current(board, True, 7)   # (2,1)
        assert rules.is_legal_move_for_current(board, True, 1)   # (1,0)
        assert rules.is_legal_move_for_current(board, False, 17)  # (2,3)

    def test_non_adjacent_is_illegal(self, board):
        assert not rules.is_legal_move_for_current(board, True, 12)  # (2,2)
        assert not rules.is_legal_move_for_current(board, False, 7)

    def test_broken_target_is_illegal(self, board):
        break_cells(board, (2, 1))
        assert not rules.is_legal_move_for_current(board, True, 7)

    def test_occupied_target_is_illegal(self):
        board = Board.start(3, 3)
        # P1 stands on cell 1
        assert not rules.is_legal_move_for_current(board, True, 1)
        board.set(1, 1, CellState.P2)
        assert not rules.is_legal_move_for_current(board, True, 4)

    @pytest.mark.parametrize("index", [-1, -6, 25, 100])
    def test_out_of_bounds_is_illegal(self, board, index):
        assert not rules.index_in_bounds(board, index)
        assert not rules.is_legal_move_for_current(board, True, index)
        assert not rules.is_legal_break_at_index(board, index)


class TestBreakLegality:
    def test_empty_cell_is_breakable(self, board):
        assert rules.is_legal_break_at_index(board, 0)
        assert rules.is_legal_break_at_index(board, 12)

    def test_token_cells_are_not_breakable(self, board):
        assert not rules.is_legal_break_at_index(board, 2)
        assert not rules.is_legal_break_at_index(board, 22)

    def test_broken_cell_is_not_breakable(self, board):
        break_cells(board, (0, 0))
        assert not rules.is_legal_break_at_index(board, 0)


class TestEnumeration:
    def test_legal_move_indices_sorted(self, board):
        assert rules.legal_move_indices(board, True) == [1, 3, 6, 7, 8]
        assert rules.legal_move_indices(board, False) == [16, 17, 18, 21, 23]

    def test_legal_break_indices(self, board):
        breaks = rules.legal_break_indices(board)
        assert len(breaks) == 23
        assert 2 not in breaks
        assert 22 not in breaks

    def test_selectable_excludes_only_broken(self, board):
        break_cells(board, (0, 0), (1, 0))
        selectable = rules.selectable_indices(board)
        assert 0 not in selectable
        assert 1 not in selectable
        assert 2 in selectable  # token cell
        assert len(selectable) == 23

    def test_predicates_do_not_mutate(self, board):
        before = board.copy()
        rules.legal_move_indices(board, True)
        rules.legal_break_indices(board)
        rules.has_any_legal_move(board, False)
        rules.is_legal_move_for_current(board, True, 7)
        assert board == before

    def test_opponent_has_move(self, board):
        break_cells(board, (1, 4), (3, 4), (1, 3), (2, 3), (3, 3))
        assert not rules.has_any_legal_move(board, False)
        assert not rules.opponent_has_move(board, True)
        assert rules.opponent_has_move(board, False)
