"""
experiments/run_mazes.py

Runs the genetic search on every bundled maze under identical settings
and prints a summary table.
"""

import os
import sys
from typing import Dict, List

import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def get_shared_config():
    from algo.config import GenerationConfig

    return GenerationConfig(
        population_size=100,
        max_evolutions=200,
        mutation_probability=0.6,
        seed=42,
    )


def run_maze(name: str, config, seed: int) -> Dict:
    from algo.generation import Generation
    from env.mazes import load_maze

    print("=" * 70)
    print(f"MAZE: {name}")
    print("=" * 70)

    maze = load_maze(name)
    print(maze)
    print()

    generation = Generation.from_config(maze, config, rng=np.random.RandomState(seed))
    result = generation.run()

    best = result['best']
    return {
        'maze': name,
        'solved': result['solved'],
        'generations': result['evolution_count'],
        'best_fitness': best.rounded_fitness if best is not None else None,
        'best_path': best.path if best is not None else "",
        'total_time': result['total_time'],
    }


def print_summary_table(results: List[Dict]):
    print()
    print("=" * 70)
    print("RESULTS SUMMARY")
    print("=" * 70)
    print(f"{'Maze':<12} | {'Solved':<7} | {'Generations':<11} | {'Best':<8} | {'Time (s)':<8}")
    print("-" * 70)

    for result in results:
        best = "-" if result['best_fitness'] is None else f"{result['best_fitness']:8.1f}"
        print(
            f"{result['maze']:<12} | {str(result['solved']):<7} | "
            f"{result['generations']:>11} | {best:<8} | {result['total_time']:8.2f}"
        )

    print("=" * 70)


def run_all_mazes(names=None) -> List[Dict]:
    from env.mazes import LAYOUTS

    config = get_shared_config()
    print("Shared configuration:")
    for key, value in config.model_dump().items():
        print(f"  {key}: {value}")
    print()

    results = [run_maze(name, config, seed=config.seed) for name in (names or LAYOUTS)]
    print_summary_table(results)
    return results


if __name__ == "__main__":
    from utils.logger_setup import setup_logger

    setup_logger(level="WARNING")
    run_all_mazes()
