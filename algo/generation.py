"""
algo/generation.py

Genetic algorithm over maze paths.

Implements a generational GA with full replacement (no elitism):
- Population of Individuals with random genomes
- Roulette-wheel selection over cumulative fitness weights
- Single-point crossover producing two children per breeding event
- Shuffle mutation on every child
- Offspring replace the whole population every generation

Algorithm:
    1. Initialize population randomly
    2. While evolution_count < max_evolutions:
        a. Score every individual
        b. Stop if any individual ends on the end tile
        c. Normalize rounded fitness into cumulative weights
        d. Breed floor(population_size / 2) pairs into offspring
        e. Mutate and score every child
        f. Replace the population with the offspring
    3. Report a winner, or "no winner" once the budget is exhausted

All randomness comes from the one RandomState handed to the constructor,
so a fixed seed reproduces an entire run.
"""

import math
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from algo.config import GenerationConfig
from env.maze import Maze
from evo.individual import DEFAULT_MUTATION_PROBABILITY, Individual
from utils.exceptions import SelectionError


class Generation:
    """
    Evolving population of maze paths.

    Hyperparameters:
    - population_size: Number of individuals per generation
    - max_evolutions: Generation budget
    - mutation_probability: Chance each child gets a shuffled window
    """

    def __init__(
        self,
        maze: Maze,
        rng: np.random.RandomState,
        population_size: int = 100,
        max_evolutions: int = 5000,
        mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
    ):
        """
        Initialize the first population.

        Args:
            maze: Maze every individual is evaluated in
            rng: Shared random source
            population_size: Number of individuals in population
            max_evolutions: Maximum number of generations to run
            mutation_probability: Passed on to every Individual
        """
        assert population_size > 1, "population_size must be at least 2"
        assert max_evolutions > 0, "max_evolutions must be positive"

        self.maze = maze
        self.rng = rng
        self.population_size = population_size
        self.max_evolutions = max_evolutions
        self.mutation_probability = mutation_probability

        self.evolution_count = 0
        self.population: List[Individual] = [
            Individual.new_random(maze, rng, mutation_probability=mutation_probability)
            for _ in range(population_size)
        ]
        self.offspring: List[Individual] = []

        # History for logging
        self.history = {
            'generation': [],
            'best_fitness': [],
            'mean_fitness': [],
            'best_end_distance': [],
        }

        logger.debug(
            "Generation init (population={}, max_evolutions={}, genome_length={})",
            population_size,
            max_evolutions,
            maze.total_tile_count,
        )

    @classmethod
    def from_config(
        cls,
        maze: Maze,
        config: GenerationConfig,
        rng: Optional[np.random.RandomState] = None,
    ) -> "Generation":
        """Build a generation from a GenerationConfig, seeding a RandomState if none is given."""
        if rng is None:
            rng = np.random.RandomState(config.seed)
        return cls(
            maze,
            rng,
            population_size=config.population_size,
            max_evolutions=config.max_evolutions,
            mutation_probability=config.mutation_probability,
        )

    # --------------------------------------------------
    # Scoring
    # --------------------------------------------------

    def evaluate_population(self) -> None:
        for individual in self.population:
            individual.calculate_fitness()

    def evaluate_offspring(self) -> None:
        for individual in self.offspring:
            individual.calculate_fitness()

    def fitness_scores(self) -> List[float]:
        """Rounded fitness of every individual in the population."""
        return [individual.rounded_fitness for individual in self.population]

    def find_winner(self) -> Optional[Individual]:
        """First individual whose walk ended on the end tile, if any."""
        for individual in self.population:
            if individual.reached_end:
                return individual
        return None

    def best_individual(self) -> Individual:
        """Highest rounded fitness in the population (first one on ties)."""
        scores = self.fitness_scores()
        return self.population[int(np.argmax(scores))]

    # --------------------------------------------------
    # Selection
    # --------------------------------------------------

    @staticmethod
    def normalize_weights(fitness_scores: Sequence[float]) -> np.ndarray:
        """
        Turn fitness scores into a cumulative weight array.

        Each score s becomes s / sum(scores) * 100 + 0.5, so every individual
        keeps a non-zero share, and the shares are accumulated.

        Negative scores count as zero. If nothing is left (every score <= 0)
        all individuals get the same share, 100 / n + 0.5.

        Raises:
            SelectionError: empty score list
        """
        scores = np.asarray(fitness_scores, dtype=float)
        if scores.size == 0:
            raise SelectionError("Cannot normalize an empty list of fitness scores")

        clipped = np.clip(scores, 0.0, None)
        total = clipped.sum()

        if total <= 0:
            logger.warning(
                "All {} fitness scores are non-positive, falling back to uniform weights",
                scores.size,
            )
            values = np.full(scores.size, 100.0 / scores.size + 0.5)
        else:
            values = clipped / total * 100 + 0.5

        return np.cumsum(values)

    def selection(self, weights: Sequence[float]) -> int:
        """
        Roulette-wheel pick over cumulative weights.

        Draws an integer in [0, ceil(weights[-1])) and returns the first
        index whose cumulative weight is >= the draw.

        Raises:
            SelectionError: weights are empty or inconsistent with the draw
        """
        weights = np.asarray(weights, dtype=float)
        if weights.size == 0:
            raise SelectionError("Cannot select from empty weights")

        if not np.isfinite(weights[-1]) or weights[-1] <= 0:
            raise SelectionError(f"Last cumulative weight must be positive, got {weights[-1]}")

        draw = self.rng.randint(0, int(math.ceil(weights[-1])))
        candidates = np.flatnonzero(weights >= draw)

        if candidates.size == 0:
            raise SelectionError(
                f"No cumulative weight >= {draw} (last weight {weights[-1]})"
            )

        return int(candidates[0])

    # --------------------------------------------------
    # Variation
    # --------------------------------------------------

    @staticmethod
    def crossover(
        genome_one: np.ndarray,
        genome_two: np.ndarray,
        split_point: int,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Single-point crossover.

        Returns:
            (one[:split] + two[split:], two[:split] + one[split:])
        """
        child_one = np.concatenate([genome_one[:split_point], genome_two[split_point:]])
        child_two = np.concatenate([genome_two[:split_point], genome_one[split_point:]])
        return child_one, child_two

    def breed(self, weights: Sequence[float]) -> List[Individual]:
        """
        Fill the offspring list from weighted parent pairs.

        Runs floor(population_size / 2) breeding events. Each picks two
        parents independently (they may be the same individual), a split
        point in [1, total_tile_count - 1], and appends both crossover
        children.

        Returns:
            offspring: The offspring list (also kept on self)
        """
        tile_count = self.maze.total_tile_count

        for _ in range(self.population_size // 2):
            parent_one = self.population[self.selection(weights)]
            parent_two = self.population[self.selection(weights)]

            split_point = self.rng.randint(1, tile_count)
            genome_one, genome_two = self.crossover(
                parent_one.genome, parent_two.genome, split_point
            )

            for genome in (genome_one, genome_two):
                self.offspring.append(
                    Individual.new_from_genome(
                        self.maze,
                        self.rng,
                        genome,
                        mutation_probability=self.mutation_probability,
                    )
                )

        return self.offspring

    def mutate_offspring(self) -> int:
        """Run mutate() on every child; returns how many were changed."""
        return sum(1 for child in self.offspring if child.mutate())

    def evolve(self) -> List[Individual]:
        """Replace the population with the offspring, dropping every parent."""
        self.population = self.offspring
        self.offspring = []
        return self.population

    # --------------------------------------------------
    # Loop
    # --------------------------------------------------

    def _summarize(self, individual: Individual, solved: bool) -> Dict:
        row, col = individual.position
        return {
            'generation': self.evolution_count,
            'solved': solved,
            'best_fitness': individual.rounded_fitness,
            'mean_fitness': float(np.mean(self.fitness_scores())),
            'best_path': individual.path,
            'best_length': len(individual),
            'best_row': row,
            'best_col': col,
            'best_end_distance': individual.end_distance,
        }

    def step(self) -> Dict:
        """
        Execute one generation.

        Steps:
        1. Score the current population
        2. Stop here if an individual reached the end tile
        3. Normalize fitness into weights and breed
        4. Mutate and score the offspring
        5. Replace the population and advance evolution_count

        Returns:
            summary: Generation statistics. On success 'solved' is True,
            'winner' holds the individual and 'generation' is the index of
            the population it was found in.
        """
        self.evaluate_population()

        winner = self.find_winner()
        if winner is not None:
            summary = self._summarize(winner, solved=True)
            summary['winner'] = winner
            return summary

        weights = self.normalize_weights(self.fitness_scores())
        self.breed(weights)

        mutated = self.mutate_offspring()
        self.evaluate_offspring()
        logger.debug("Generation {}: {} of {} children mutated",
                     self.evolution_count, mutated, len(self.offspring))

        self.evolve()
        self.evolution_count += 1

        return self._summarize(self.best_individual(), solved=False)

    def _record(self, summary: Dict) -> None:
        for key in self.history.keys():
            self.history[key].append(summary[key])

    def run(
        self,
        on_generation: Optional[Callable[[Dict], None]] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Dict:
        """
        Evolve until a winner appears or the budget runs out.

        Args:
            on_generation: Called with every step() summary
            should_stop: Checked once per generation; truthy ends the run

        Returns:
            result: Dictionary containing:
                - solved (bool): Whether a winner was found
                - winner (Individual or None)
                - generation (int or None): Index the winner was found at
                - evolution_count (int): Generations evolved
                - best (Individual or None): Winner, or best of the final population
                - history (dict): Per-generation statistics
                - total_time (float): Seconds spent
                - stopped (bool): Whether should_stop ended the run
        """
        logger.info(
            "Starting evolution: population={}, max_evolutions={}, tiles={}",
            self.population_size,
            self.max_evolutions,
            self.maze.total_tile_count,
        )

        start_time = time.time()
        winner = None
        stopped = False

        while self.evolution_count < self.max_evolutions:
            if should_stop is not None and should_stop():
                logger.info("Stop requested at generation {}", self.evolution_count)
                stopped = True
                break

            summary = self.step()
            self._record(summary)
            self._notify(on_generation, summary)

            if summary['solved']:
                winner = summary['winner']
                logger.info(
                    "Winner found at generation {} (fitness {}, path {})",
                    summary['generation'],
                    summary['best_fitness'],
                    summary['best_path'],
                )
                break

            logger.info(
                "Gen {:4d} | Best: {:7.1f} | Mean: {:7.2f} | Pos: ({}, {}) | Distance: {:.2f}",
                summary['generation'],
                summary['best_fitness'],
                summary['mean_fitness'],
                summary['best_row'],
                summary['best_col'],
                summary['best_end_distance'],
            )

        total_time = time.time() - start_time

        if winner is None and not stopped:
            logger.info("No winner after {} generations", self.evolution_count)

        if winner is not None:
            best = winner
        elif all(individual.is_evaluated for individual in self.population):
            best = self.best_individual()
        else:
            best = None

        return {
            'solved': winner is not None,
            'winner': winner,
            'generation': self.evolution_count if winner is not None else None,
            'evolution_count': self.evolution_count,
            'best': best,
            'history': self.history,
            'total_time': total_time,
            'stopped': stopped,
        }

    @staticmethod
    def _notify(callback: Optional[Callable[[Dict], None]], summary: Dict) -> None:
        if callback is None:
            return
        try:
            callback(summary)
        except Exception as exc:
            logger.warning("Generation observer failed: {}", exc)
