from typing import Iterable, Optional, Tuple

from env.maze import END_TILE, START_TILE, Maze
from eval.rollout import GenomeRollout


class MazeRenderer:
    def __init__(self, maze: Maze, trail: str = ".", walker: str = "@"):
        self.maze = maze
        self.trail = trail
        self.walker = walker

    # =====================
    # DRAW MAZE
    # =====================
    def draw(
        self,
        trace: Iterable[Tuple[int, int]] = (),
        final_position: Optional[Tuple[int, int]] = None,
    ) -> str:
        grid = [list(row) for row in self.maze.rows]

        for row, col in trace:
            if grid[row][col] not in (START_TILE, END_TILE):
                grid[row][col] = self.trail

        if final_position is not None:
            row, col = final_position
            if grid[row][col] not in (START_TILE, END_TILE):
                grid[row][col] = self.walker

        # row 0 is the bottom of the maze, so it is printed last
        return "\n".join("".join(row) for row in reversed(grid))

    # =====================
    # DRAW GENOME
    # =====================
    def draw_genome(self, genome) -> str:
        metrics = GenomeRollout(self.maze, record_trace=True).evaluate(genome)
        return self.draw(metrics['trace'], metrics['final_position'])
