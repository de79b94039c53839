"""
Board - Grid cells and token positions.

The board is plain data plus geometric queries:
- Cells are EMPTY, P1, P2 or BROKEN
- BROKEN is terminal: a broken cell never changes again
- Exactly one P1 cell and one P2 cell exist (except mid-move)

Out-of-bounds reads return BROKEN so edge queries need no special-casing.
The board is only mutated by the match state machine.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

MIN_SIZE = 3
DEFAULT_SIZE = 5

# King-move neighbourhood, zero offset excluded
NEIGHBOUR_OFFSETS = tuple(
    (dx, dy)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    if not (dx == 0 and dy == 0)
)


class CellState(Enum):
    """State of a single board cell."""
    EMPTY = "empty"
    P1 = "p1"
    P2 = "p2"
    BROKEN = "broken"


@dataclass(frozen=True)
class Position:
    """A grid coordinate. x is the column, y is the row."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Position:
        return Position(self.x + dx, self.y + dy)


class Board:
    """
    Grid state and the two token positions.

    Dimensions are clamped to at least 3x3 on construction.
    A fresh board is all EMPTY with both tokens at (0, 0);
    call reset_start() to get the canonical starting layout.
    """

    def __init__(self, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE):
        self.width = max(MIN_SIZE, int(width))
        self.height = max(MIN_SIZE, int(height))
        self._cells: list[list[CellState]] = [
            [CellState.EMPTY for _ in range(self.width)]
            for _ in range(self.height)
        ]
        self._p1_pos = Position(0, 0)
        self._p2_pos = Position(0, 0)

    @classmethod
    def start(cls, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE) -> Board:
        """Create a board already in the starting configuration."""
        board = cls(width, height)
        board.reset_start()
        return board

    def reset_start(self):
        """
        Clear every cell and place both tokens.

        P1 goes to the horizontal center of row 0, P2 to the horizontal
        center of the last row. Every peer must produce this exact layout.
        """
        for row in self._cells:
            for x in range(self.width):
                row[x] = CellState.EMPTY

        self._p1_pos = Position(self.width // 2, 0)
        self.set(self._p1_pos.x, self._p1_pos.y, CellState.P1)

        self._p2_pos = Position(self.width // 2, self.height - 1)
        self.set(self._p2_pos.x, self._p2_pos.y, CellState.P2)

    # --- accessors ---

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> CellState:
        if not self.in_bounds(x, y):
            return CellState.BROKEN
        return self._cells[y][x]

    def set(self, x: int, y: int, state: CellState):
        if self.in_bounds(x, y):
            self._cells[y][x] = state

    def is_empty(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._cells[y][x] == CellState.EMPTY

    @property
    def p1_pos(self) -> Position:
        return self._p1_pos

    @p1_pos.setter
    def p1_pos(self, pos: Position):
        self._p1_pos = pos

    @property
    def p2_pos(self) -> Position:
        return self._p2_pos

    @p2_pos.setter
    def p2_pos(self, pos: Position):
        self._p2_pos = pos

    def position_of(self, participant) -> Position:
        """Token position of a Participant."""
        return self._p1_pos if participant.is_p1 else self._p2_pos

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def to_index(self, pos: Position) -> int:
        """Flat row-major index of a position."""
        return pos.y * self.width + pos.x

    def from_index(self, index: int) -> Position:
        """Position for a flat index. The result may be out of bounds."""
        return Position(index % self.width, index // self.width)

    # --- geometry ---

    @staticmethod
    def are_adjacent(a: Position, b: Position) -> bool:
        """
        King-move adjacency (diagonals included).

        A position is adjacent to itself; move enumeration excludes
        the zero offset explicitly.
        """
        return abs(a.x - b.x) <= 1 and abs(a.y - b.y) <= 1

    def get_legal_moves_from(self, pos: Position) -> list[Position]:
        """All empty cells among the 8 neighbours of pos."""
        moves = []
        for dx, dy in NEIGHBOUR_OFFSETS:
            target = pos.offset(dx, dy)
            if self.is_empty(target.x, target.y):
                moves.append(target)
        return moves

    def has_any_move_from(self, pos: Position) -> bool:
        for dx, dy in NEIGHBOUR_OFFSETS:
            if self.is_empty(pos.x + dx, pos.y + dy):
                return True
        return False

    def get_all_empty_cells(self) -> list[Position]:
        """All EMPTY cells in row-major order."""
        return [
            Position(x, y)
            for y in range(self.height)
            for x in range(self.width)
            if self._cells[y][x] == CellState.EMPTY
        ]

    # --- views ---

    def rows(self) -> tuple[tuple[CellState, ...], ...]:
        """Immutable row-major view of the cells."""
        return tuple(tuple(row) for row in self._cells)

    def copy(self) -> Board:
        clone = Board(self.width, self.height)
        clone._cells = [list(row) for row in self._cells]
        clone._p1_pos = self._p1_pos
        clone._p2_pos = self._p2_pos
        return clone

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self._cells == other._cells
            and self._p1_pos == other._p1_pos
            and self._p2_pos == other._p2_pos
        )

    def __repr__(self):
        return f"Board({self.width}x{self.height}, p1={self._p1_pos}, p2={self._p2_pos})"
