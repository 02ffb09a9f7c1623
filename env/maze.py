"""
env/maze.py

Pure task definition for 2D grid maze navigation.

This module defines ONLY the grid geometry and the move vocabulary.
It contains NO fitness logic, NO genomes, NO evolution.

Responsibilities:
- Tile and move vocabulary
- Start/end tile location (validated at construction)
- Bounds queries (would a move leave the grid?)
- Wall queries (would a move walk into a wall?)

Coordinates are (row, col). Row 0 is the bottom of the maze, so moving
UP increases the row index towards height - 1.
"""

from enum import IntEnum
from typing import Iterable, Tuple

from utils.exceptions import MazeInvalidError, OutOfRangeError


START_TILE = "S"
END_TILE = "E"
OPEN_TILE = " "
WALL_TILE = "x"


class Move(IntEnum):
    """
    One step of a path. Values are the genome codes (stored as int8).
    """

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def opposite(self) -> "Move":
        return _OPPOSITES[self]

    @property
    def delta(self) -> Tuple[int, int]:
        """(d_row, d_col) applied by this move."""
        return _DELTAS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Move":
        return _BY_SYMBOL[symbol]


_SYMBOLS = {Move.UP: "U", Move.DOWN: "D", Move.LEFT: "L", Move.RIGHT: "R"}
_BY_SYMBOL = {symbol: move for move, symbol in _SYMBOLS.items()}
_OPPOSITES = {
    Move.UP: Move.DOWN,
    Move.DOWN: Move.UP,
    Move.LEFT: Move.RIGHT,
    Move.RIGHT: Move.LEFT,
}
_DELTAS = {Move.UP: (1, 0), Move.DOWN: (-1, 0), Move.LEFT: (0, -1), Move.RIGHT: (0, 1)}

VALID_MOVES = tuple(Move)


class Maze:
    """
    Immutable grid maze built from a literal tile layout.

    Each row is a string of tile characters. Rows may differ in length;
    every (row, col) inside a row is addressable.

    This class provides:
    - Start/end coordinates
    - Tile lookup
    - Bounds and wall checks for a single move

    This class does NOT provide:
    - Movement state (see sim/walker.py)
    - Fitness computation (see evo/fitness.py)
    """

    def __init__(self, rows: Iterable[str]):
        """
        Build and validate a maze.

        Args:
            rows: Ordered row strings, row 0 first (bottom of the maze)

        Raises:
            MazeInvalidError: no rows, or not exactly one start and one end tile
        """
        self._rows = tuple(str(row) for row in rows)

        if not self._rows:
            raise MazeInvalidError("Maze must have at least one row")

        self._total_tile_count = sum(len(row) for row in self._rows)
        self._start = self._locate(START_TILE)
        self._end = self._locate(END_TILE)

    def _locate(self, tile: str) -> Tuple[int, int]:
        found = [
            (row_index, col_index)
            for row_index, row in enumerate(self._rows)
            for col_index, char in enumerate(row)
            if char == tile
        ]
        if not found:
            raise MazeInvalidError(f"Maze has no {tile!r} tile")
        if len(found) > 1:
            raise MazeInvalidError(
                f"Maze has {len(found)} {tile!r} tiles at {found}, expected exactly one"
            )
        return found[0]

    # --------------------------------------------------
    # Shape
    # --------------------------------------------------

    @property
    def rows(self) -> Tuple[str, ...]:
        return self._rows

    @property
    def height(self) -> int:
        return len(self._rows)

    @property
    def total_tile_count(self) -> int:
        return self._total_tile_count

    def row_width(self, row: int) -> int:
        if not 0 <= row < self.height:
            raise OutOfRangeError(f"Row {row} outside maze of height {self.height}")
        return len(self._rows[row])

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def start_position(self) -> Tuple[int, int]:
        """(row, col) of the start tile."""
        return self._start

    def end_position(self) -> Tuple[int, int]:
        """(row, col) of the end tile."""
        return self._end

    def tile_at(self, col: int, row: int) -> str:
        """
        Tile character at a cell.

        Raises:
            OutOfRangeError: (col, row) is not inside the grid
        """
        if not 0 <= row < self.height or not 0 <= col < len(self._rows[row]):
            raise OutOfRangeError(f"Position (row={row}, col={col}) outside maze")
        return self._rows[row][col]

    def is_end(self, row: int, col: int) -> bool:
        return (row, col) == self._end

    def is_within_bounds(self, col: int, row: int, move: Move) -> bool:
        """
        Check whether a move from (col, row) stays inside the grid.

        UP is blocked only on the top row, DOWN only on row 0, LEFT only on
        column 0 and RIGHT only on the last column of the current row. A
        vertical move into a shorter row that has no such column is also
        out of bounds.
        """
        if move == Move.UP:
            return row != self.height - 1 and col < len(self._rows[row + 1])
        if move == Move.DOWN:
            return row != 0 and col < len(self._rows[row - 1])
        if move == Move.LEFT:
            return col != 0
        if move == Move.RIGHT:
            return col != len(self._rows[row]) - 1
        raise ValueError(f"Unknown move {move!r}")

    def is_move_valid(self, col: int, row: int, move: Move) -> bool:
        """
        Check whether the tile one step in `move`'s direction is walkable.

        Only meaningful for in-bounds moves; call is_within_bounds() first.

        Raises:
            OutOfRangeError: the neighbouring cell is outside the grid
        """
        d_row, d_col = Move(move).delta
        return self.tile_at(col + d_col, row + d_row) != WALL_TILE

    def __str__(self) -> str:
        return "\n".join(self._rows)

    def __repr__(self) -> str:
        return (
            f"Maze(height={self.height}, tiles={self._total_tile_count}, "
            f"start={self._start}, end={self._end})"
        )
