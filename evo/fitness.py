import math
from typing import Dict, Tuple

import numpy as np

from env.maze import Maze
from eval.rollout import GenomeRollout

TRAVEL_WEIGHT = 0.01
EFFICIENCY_WEIGHT = 2
FITNESS_FLOOR = -1.0


def end_distance(maze: Maze, position: Tuple[int, int]) -> float:
    """Euclidean distance from (row, col) to the end tile."""
    end_row, end_col = maze.end_position()
    row, col = position
    return math.sqrt((end_col - col) ** 2 + (end_row - row) ** 2)


def score(maze: Maze, genome_length: int, metrics: Dict) -> Tuple[float, float]:
    """
    Combine rollout counters into a fitness value.

    fitness = traveled * 0.01 + efficiency * 2 + no_loop - blocked
              + (tile_count - end_distance)
              + genome_length if the walk ended on the end tile

    Anything below zero collapses to exactly -1.

    Returns:
        (fitness, end_distance)
    """
    tile_count = maze.total_tile_count
    efficiency = tile_count - genome_length

    fitness = (
        metrics['traveled'] * TRAVEL_WEIGHT
        + efficiency * EFFICIENCY_WEIGHT
        + metrics['no_loop']
        - metrics['blocked']
    )

    distance = end_distance(maze, metrics['final_position'])
    fitness += tile_count - distance

    if metrics['reached_end']:
        fitness += genome_length

    if fitness < 0:
        fitness = FITNESS_FLOOR

    return fitness, distance


class FitnessRunner:
    def __init__(self, maze: Maze):
        self.maze = maze
        self.rollout = GenomeRollout(maze)

    def run(self, genome: np.ndarray) -> Dict:
        metrics = self.rollout.evaluate(genome)
        fitness, distance = score(self.maze, len(genome), metrics)
        metrics['fitness'] = fitness
        metrics['end_distance'] = distance
        return metrics
