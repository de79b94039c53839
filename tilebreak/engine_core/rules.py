"""
Rules - Stateless legality predicates over a Board.

Used by:
1. The local controller, to gate input
2. The receiving peer, to validate a replayed action
3. Opponent policies, to enumerate choices

Every function here is pure: it never mutates the board. Both peers
run the same predicate against their own copy of the board, so any
side effect would make the copies drift.
"""

from __future__ import annotations

from .board import Board, CellState, Position


def from_index(board: Board, index: int) -> Position:
    """Convert a flat cell index to (x, y)."""
    return board.from_index(index)


def index_in_bounds(board: Board, index: int) -> bool:
    if index < 0:
        return False
    pos = from_index(board, index)
    return board.in_bounds(pos.x, pos.y)


def is_index_empty(board: Board, index: int) -> bool:
    if not index_in_bounds(board, index):
        return False
    pos = from_index(board, index)
    return board.is_empty(pos.x, pos.y)


def token_position(board: Board, is_p1: bool) -> Position:
    return board.p1_pos if is_p1 else board.p2_pos


def is_legal_move_for_current(board: Board, is_p1: bool, index: int) -> bool:
    """A move is legal if the target is in bounds, empty and adjacent to the mover."""
    if not index_in_bounds(board, index):
        return False
    if not is_index_empty(board, index):
        return False
    target = from_index(board, index)
    return board.are_adjacent(token_position(board, is_p1), target)


def is_legal_break_at_index(board: Board, index: int) -> bool:
    """
    A break is legal if the target is empty.

    Both token cells are occupied, so neither can be broken.
    """
    return is_index_empty(board, index)


def has_any_legal_move(board: Board, is_p1: bool) -> bool:
    return board.has_any_move_from(token_position(board, is_p1))


def opponent_has_move(board: Board, is_p1: bool) -> bool:
    return has_any_legal_move(board, not is_p1)


def legal_move_indices(board: Board, is_p1: bool) -> list[int]:
    """Flat indices of every legal move for a token, ascending."""
    moves = board.get_legal_moves_from(token_position(board, is_p1))
    return sorted(board.to_index(pos) for pos in moves)


def legal_break_indices(board: Board) -> list[int]:
    """Flat indices of every legal break, ascending."""
    return [board.to_index(pos) for pos in board.get_all_empty_cells()]


def selectable_indices(board: Board) -> list[int]:
    """Cells that may accept input at all: everything that is not broken."""
    return [
        y * board.width + x
        for y in range(board.height)
        for x in range(board.width)
        if board.get(x, y) != CellState.BROKEN
    ]
