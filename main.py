import argparse

from algo.config import GenerationConfig
from algo.generation import Generation
from env.mazes import LAYOUTS, load_maze
from render.renderer import MazeRenderer
from utils.logger_setup import setup_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Solve a grid maze with a genetic algorithm")
    parser.add_argument("--maze", default="default", choices=sorted(LAYOUTS))
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--population", type=int, default=100)
    parser.add_argument("--generations", type=int, default=5000)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-dir", default=None)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logger(level=args.log_level, log_dir=args.log_dir)

    config = GenerationConfig(
        population_size=args.population,
        max_evolutions=args.generations,
        seed=args.seed,
    )
    maze = load_maze(args.maze)
    generation = Generation.from_config(maze, config)

    result = generation.run()

    if result['solved']:
        print(f"Winner found at generation {result['generation']}")
    else:
        print(f"No winner after {result['evolution_count']} generations")

    best = result['best']
    if best is not None:
        print(f"Best individual: {best.rounded_fitness}, path: {best.path}, "
              f"row: {best.position[0]}, col: {best.position[1]}")
        print(MazeRenderer(maze).draw_genome(best.genome))

    print(f"Total time: {result['total_time']:.1f}s")
    return result


if __name__ == "__main__":
    main()
