"""
evo/individual.py

One candidate path through a maze.

Genome form:
    genome ∈ {UP, DOWN, LEFT, RIGHT}^n   (int8 array of Move codes)

where n is normally maze.total_tile_count. The genome length is fixed at
construction; only its contents change (mutation, crossover children).

The individual:
- Scores itself by walking its genome through the maze
- Mutates itself by shuffling an interior window of its genome
- Draws randomness only from the shared RandomState it was given

This class does NOT:
- Choose parents or breed (algo/generation.py)
- Own the maze or the random source
"""

from typing import Optional, Sequence, Tuple, Union

import numpy as np

from env.maze import Maze, Move, VALID_MOVES
from evo.fitness import FitnessRunner
from utils.exceptions import GenomeError, NotEvaluatedError

GENOME_DTYPE = np.int8
DEFAULT_MUTATION_PROBABILITY = 0.6

GenomeLike = Union[np.ndarray, Sequence[Move], str]


def genome_from_string(path: str) -> np.ndarray:
    """Parse a 'UDLR' string into a genome array."""
    try:
        return np.array([Move.from_symbol(symbol) for symbol in path], dtype=GENOME_DTYPE)
    except KeyError as exc:
        raise GenomeError(f"Unknown move symbol {exc.args[0]!r} in path {path!r}") from exc


def genome_to_string(genome: np.ndarray) -> str:
    """Render a genome array as a 'UDLR' string."""
    return "".join(Move(code).symbol for code in np.asarray(genome).tolist())


def as_genome(genome: GenomeLike) -> np.ndarray:
    """
    Normalize any accepted genome form into a fresh int8 array.

    Raises:
        GenomeError: empty genome or values outside the move alphabet
    """
    if isinstance(genome, str):
        raw = genome_from_string(genome)
    else:
        raw = np.asarray(genome).reshape(-1)

    if raw.size == 0:
        raise GenomeError("Genome must contain at least one move")
    # checked before the int8 cast, which would wrap or truncate
    if not np.issubdtype(raw.dtype, np.integer):
        raise GenomeError(f"Genome must hold integer move codes, got dtype {raw.dtype}")
    if raw.min() < 0 or raw.max() >= len(VALID_MOVES):
        raise GenomeError(f"Genome contains codes outside 0..{len(VALID_MOVES) - 1}")

    return raw.astype(GENOME_DTYPE)


class Individual:
    """
    Candidate solution: a genome plus the outcome of its last evaluation.

    position, fitness and end_distance are None until calculate_fitness()
    runs, and are reset to None whenever a mutation changes the genome.
    """

    def __init__(
        self,
        maze: Maze,
        rng: np.random.RandomState,
        genome: GenomeLike,
        mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
    ):
        """
        Args:
            maze: Shared maze (not owned)
            rng: Shared random source (not owned)
            genome: Move codes, Move values or a 'UDLR' string
            mutation_probability: Chance that mutate() shuffles a window
        """
        assert 0.0 <= mutation_probability <= 1.0, \
            "mutation_probability must be in [0, 1]"

        self.maze = maze
        self.rng = rng
        self.genome = as_genome(genome)
        self.mutation_probability = mutation_probability

        self.position: Optional[Tuple[int, int]] = None
        self.fitness: Optional[float] = None
        self.end_distance: Optional[float] = None

    @classmethod
    def new_random(
        cls,
        maze: Maze,
        rng: np.random.RandomState,
        mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
    ) -> "Individual":
        """Individual with a uniformly random genome of maze.total_tile_count moves."""
        genome = rng.randint(0, len(VALID_MOVES), size=maze.total_tile_count)
        return cls(maze, rng, genome, mutation_probability=mutation_probability)

    @classmethod
    def new_from_genome(
        cls,
        maze: Maze,
        rng: np.random.RandomState,
        genome: GenomeLike,
        mutation_probability: float = DEFAULT_MUTATION_PROBABILITY,
    ) -> "Individual":
        """Individual with a given genome (crossover children)."""
        return cls(maze, rng, genome, mutation_probability=mutation_probability)

    # --------------------------------------------------
    # Evaluation
    # --------------------------------------------------

    def calculate_fitness(self) -> float:
        """
        Walk the genome from the start tile and score the outcome.

        Deterministic in (genome, maze); consumes no randomness. Updates
        position, fitness and end_distance.

        Returns:
            fitness: Unrounded fitness (see evo/fitness.py)
        """
        metrics = FitnessRunner(self.maze).run(self.genome)

        self.position = metrics['final_position']
        self.fitness = metrics['fitness']
        self.end_distance = metrics['end_distance']

        return self.fitness

    @property
    def is_evaluated(self) -> bool:
        return self.fitness is not None

    @property
    def rounded_fitness(self) -> float:
        """Fitness rounded to one decimal, as used for selection and reports."""
        if self.fitness is None:
            raise NotEvaluatedError("calculate_fitness() has not been run")
        return round(self.fitness, 1)

    @property
    def reached_end(self) -> bool:
        return self.position is not None and self.maze.is_end(*self.position)

    # --------------------------------------------------
    # Variation
    # --------------------------------------------------

    def mutate(self) -> bool:
        """
        Maybe shuffle a random interior window of the genome in place.

        With probability mutation_probability, picks lower in [1, n - 3] and
        upper in [lower + 1, n - 1] and shuffles genome[lower:upper]. The
        first and last moves never change, nor does the genome length or
        its multiset of moves. Genomes shorter than 4 moves have no interior
        window and are left alone.

        Returns:
            True if the genome was shuffled
        """
        if self.rng.random_sample() > self.mutation_probability:
            return False

        length = len(self.genome)
        if length < 4:
            return False

        lower = self.rng.randint(1, length - 2)
        upper = self.rng.randint(lower + 1, length)

        window = self.genome[lower:upper].copy()
        self.rng.shuffle(window)
        self.genome[lower:upper] = window

        self.position = None
        self.fitness = None
        self.end_distance = None
        return True

    # --------------------------------------------------
    # Introspection
    # --------------------------------------------------

    @property
    def path(self) -> str:
        return genome_to_string(self.genome)

    def __len__(self) -> int:
        return len(self.genome)

    def __repr__(self) -> str:
        fitness = "unevaluated" if self.fitness is None else f"{self.rounded_fitness}"
        return f"Individual(length={len(self.genome)}, fitness={fitness}, position={self.position})"
