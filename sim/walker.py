"""
Grid walker body.

This module implements the position state of a path follower and the
single-step movement rule. It contains NO genome logic, NO fitness,
NO randomness.

Key responsibilities:
- Position state (row, col)
- One-step movement with bounds and wall checks via maze queries
- Deterministic state updates
"""

from typing import Tuple

from env.maze import Maze, Move


class Walker:
    """
    A body standing on one maze cell.

    The walker does NOT:
    - Choose its own moves (the genome is external)
    - Score its path (see evo/fitness.py)
    """

    def __init__(self, maze: Maze, position: Tuple[int, int] = None):
        """
        Args:
            maze: Maze to walk in
            position: Initial (row, col); defaults to the maze start tile
        """
        self.maze = maze
        self.row, self.col = position if position is not None else maze.start_position()

    # --------------------------------------------------
    # Lifecycle
    # --------------------------------------------------

    def reset(self, position: Tuple[int, int] = None):
        """Put the walker back on the start tile (or a given cell)."""
        self.row, self.col = position if position is not None else self.maze.start_position()

    # --------------------------------------------------
    # Movement
    # --------------------------------------------------

    def can_move(self, move: Move) -> bool:
        if not self.maze.is_within_bounds(self.col, self.row, move):
            return False
        return self.maze.is_move_valid(self.col, self.row, move)

    def step(self, move: Move) -> bool:
        """
        Try to take one step.

        Returns:
            True if the walker moved, False if the move was blocked
            (out of bounds or into a wall) and the position is unchanged.
        """
        if not self.can_move(move):
            return False

        d_row, d_col = Move(move).delta
        self.row += d_row
        self.col += d_col
        return True

    # --------------------------------------------------
    # Introspection
    # --------------------------------------------------

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def on_end(self) -> bool:
        return self.maze.is_end(self.row, self.col)
