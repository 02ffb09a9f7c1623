"""
eval/rollout.py

Pure genome rollout for grid maze navigation.

This module walks a genome through a maze, move by move, and collects the
raw counters fitness is built from. It does NOT compute fitness, mutate
genomes, or consume randomness.

Responsibilities:
- Genome execution (start tile -> one step per move)
- Counter collection (traveled, blocked, no_loop)
- Optional trace of visited cells (for rendering)

This is used by:
- Individual fitness evaluation
- The text renderer
"""

from typing import Dict, Sequence

import numpy as np

from env.maze import Maze, Move
from sim.walker import Walker


def count_no_loop(genome: Sequence[int]) -> int:
    """
    Count interior moves that neither repeat nor reverse a neighbour.

    A move at index i (not first, not last) counts when it differs from
    both genome[i - 1] and genome[i + 1] and is the opposite of neither.
    Only the symbols are inspected; whether the move executed is irrelevant.

    Args:
        genome: Move codes

    Returns:
        count: Number of non-looping interior moves
    """
    moves = [Move(code) for code in genome]
    count = 0

    for index in range(1, len(moves) - 1):
        move = moves[index]
        prev_move = moves[index - 1]
        next_move = moves[index + 1]

        if move == prev_move or move == next_move:
            continue
        if move.opposite == prev_move or move.opposite == next_move:
            continue
        count += 1

    return count


class GenomeRollout:
    """
    Genome evaluator for grid maze navigation.

    Executes a genome from the maze start tile and reports:
    - traveled: moves that changed the position
    - blocked: moves rejected by bounds or walls
    - no_loop: non-oscillating interior moves (see count_no_loop)
    - final_position / reached_end

    This class does NOT:
    - Turn counters into a fitness score (evo/fitness.py)
    - Store anything between calls
    """

    def __init__(self, maze: Maze, record_trace: bool = False):
        """
        Args:
            maze: Maze to evaluate in
            record_trace: Whether to return every visited (row, col)
        """
        self.maze = maze
        self.record_trace = record_trace
        self.walker = Walker(maze)

    def evaluate(self, genome: np.ndarray) -> Dict:
        """
        Execute a genome and return metrics.

        Args:
            genome: Array of Move codes

        Returns:
            metrics: Dictionary containing:
                - traveled (int)
                - blocked (int)
                - no_loop (int)
                - final_position ((row, col))
                - reached_end (bool)
                - trace (list of (row, col), only if record_trace)
        """
        self.walker.reset()

        traveled = 0
        blocked = 0
        trace = [self.walker.position]

        codes = np.asarray(genome).tolist()

        for code in codes:
            if self.walker.step(Move(code)):
                traveled += 1
                if self.record_trace:
                    trace.append(self.walker.position)
            else:
                blocked += 1

        metrics = {
            'traveled': traveled,
            'blocked': blocked,
            'no_loop': count_no_loop(codes),
            'final_position': self.walker.position,
            'reached_end': self.walker.on_end,
        }

        if self.record_trace:
            metrics['trace'] = trace

        return metrics
