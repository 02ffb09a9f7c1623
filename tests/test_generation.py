import numpy as np
import pytest
from pydantic import ValidationError

from algo.config import GenerationConfig
from algo.generation import Generation
from evo.individual import Individual, genome_from_string
from utils.exceptions import NotEvaluatedError, SelectionError


def test_initial_population(default_maze, rng):
    generation = Generation(default_maze, rng, population_size=12, max_evolutions=3)

    assert len(generation.population) == 12
    assert generation.offspring == []
    assert generation.evolution_count == 0
    assert all(len(individual) == default_maze.total_tile_count
               for individual in generation.population)


def test_fitness_scores_require_evaluation(default_maze, rng):
    generation = Generation(default_maze, rng, population_size=4)
    with pytest.raises(NotEvaluatedError):
        generation.fitness_scores()

    generation.evaluate_population()
    scores = generation.fitness_scores()
    assert len(scores) == 4
    assert scores == [round(individual.fitness, 1) for individual in generation.population]


def test_normalize_weights_accumulates_shares():
    weights = Generation.normalize_weights([10, 20, 30, 40])
    np.testing.assert_allclose(weights, [10.5, 31.0, 61.5, 102.0])


def test_zero_fitness_keeps_a_selection_share():
    weights = Generation.normalize_weights([0, 0, 10])
    np.testing.assert_allclose(weights, [0.5, 1.0, 101.5])


def test_all_non_positive_fitness_falls_back_to_uniform():
    weights = Generation.normalize_weights([-1, -1, 0, -1])
    np.testing.assert_allclose(weights, [25.5, 51.0, 76.5, 102.0])
    assert np.all(np.isfinite(weights))


def test_negative_scores_count_as_zero():
    weights = Generation.normalize_weights([-1, 3, 1])
    np.testing.assert_allclose(weights, [0.5, 76.0, 101.5])


@pytest.mark.parametrize("seed", range(20))
def test_normalized_weights_are_non_decreasing(seed):
    scores = np.random.RandomState(seed).uniform(-1, 150, size=25).round(1)
    weights = Generation.normalize_weights(scores)

    assert np.all(np.diff(weights) >= 0)
    clipped = np.clip(scores, 0, None)
    expected = np.sum(clipped / clipped.sum() * 100 + 0.5)
    assert weights[-1] == pytest.approx(expected)


def test_normalize_empty_scores():
    with pytest.raises(SelectionError):
        Generation.normalize_weights([])


def test_selection_stays_in_range(default_maze, rng):
    generation = Generation(default_maze, rng, population_size=6)
    weights = Generation.normalize_weights([5, 0, 12.5, 3, -1, 40])

    picks = [generation.selection(weights) for _ in range(2000)]

    assert min(picks) >= 0
    assert max(picks) < len(weights)
    # the fittest individual dominates
    assert np.bincount(picks).argmax() == 5


def test_selection_with_dominant_weight(default_maze, rng):
    generation = Generation(default_maze, rng, population_size=4)
    weights = Generation.normalize_weights([0, 0, 0, 100])
    counts = np.bincount([generation.selection(weights) for _ in range(1000)], minlength=4)
    assert counts[3] > 900


@pytest.mark.parametrize("weights", [[], [0.0], [-2.0], [float("nan")]])
def test_selection_rejects_malformed_weights(default_maze, rng, weights):
    generation = Generation(default_maze, rng, population_size=2)
    with pytest.raises(SelectionError):
        generation.selection(weights)


def test_crossover_swaps_prefix_and_suffix_at_every_split():
    one = genome_from_string("UUUUDDDDLLLL")
    two = genome_from_string("RRRRLLLLUUUU")

    for split in range(1, len(one)):
        child_one, child_two = Generation.crossover(one, two, split)

        assert len(child_one) == len(child_two) == len(one)
        np.testing.assert_array_equal(child_one[:split], one[:split])
        np.testing.assert_array_equal(child_one[split:], two[split:])
        np.testing.assert_array_equal(child_two[:split], two[:split])
        np.testing.assert_array_equal(child_two[split:], one[split:])
        np.testing.assert_array_equal(np.concatenate([child_one[:split], child_two[split:]]), one)
        np.testing.assert_array_equal(np.concatenate([child_two[:split], child_one[split:]]), two)


def test_crossover_children_do_not_alias_parents():
    one = genome_from_string("UUUU")
    two = genome_from_string("DDDD")
    child_one, _ = Generation.crossover(one, two, 2)
    child_one[0] = 3
    assert one[0] == 0


def test_breed_fills_offspring(default_maze, rng):
    generation = Generation(default_maze, rng, population_size=7)
    generation.evaluate_population()
    weights = Generation.normalize_weights(generation.fitness_scores())

    offspring = generation.breed(weights)

    assert offspring is generation.offspring
    assert len(offspring) == 6
    assert all(isinstance(child, Individual) for child in offspring)
    assert all(len(child) == default_maze.total_tile_count for child in offspring)
    assert all(not child.is_evaluated for child in offspring)


def _split_points(child_one, child_two, parent_one, parent_two):
    length = len(parent_one)
    return [
        split
        for split in range(1, length)
        if np.array_equal(child_one, np.concatenate([parent_one[:split], parent_two[split:]]))
        and np.array_equal(child_two, np.concatenate([parent_two[:split], parent_one[split:]]))
    ]


@pytest.mark.parametrize("seed", range(30))
def test_breed_children_are_crossovers_of_population_genomes(column_maze, seed):
    generation = Generation(column_maze, np.random.RandomState(seed), population_size=6)
    generation.evaluate_population()

    offspring = generation.breed(Generation.normalize_weights(generation.fitness_scores()))

    genomes = [individual.genome for individual in generation.population]
    for child_one, child_two in zip(offspring[::2], offspring[1::2]):
        assert any(
            _split_points(child_one.genome, child_two.genome, parent_one, parent_two)
            for parent_one in genomes
            for parent_two in genomes
        )


def test_breed_split_points_cover_the_whole_interior_range(column_maze):
    length = column_maze.total_tile_count
    ups = genome_from_string("U" * length)
    downs = genome_from_string("D" * length)
    splits = set()

    for seed in range(400):
        rng = np.random.RandomState(seed)
        generation = Generation(column_maze, rng, population_size=2)
        generation.population = [
            Individual.new_from_genome(column_maze, rng, ups),
            Individual.new_from_genome(column_maze, rng, downs),
        ]

        child_one, child_two = generation.breed(Generation.normalize_weights([1, 1]))

        if np.array_equal(child_one.genome, child_two.genome):
            # both parents were the same individual
            continue
        candidates = (
            _split_points(child_one.genome, child_two.genome, ups, downs)
            + _split_points(child_one.genome, child_two.genome, downs, ups)
        )
        assert len(candidates) == 1
        splits.add(candidates[0])

    assert splits == set(range(1, length))


def test_generation_requires_a_positive_budget(column_maze, rng):
    with pytest.raises(AssertionError):
        Generation(column_maze, rng, population_size=4, max_evolutions=0)


def test_evolve_replaces_population(default_maze, rng):
    generation = Generation(default_maze, rng, population_size=4)
    parents = list(generation.population)
    generation.evaluate_population()
    generation.breed(Generation.normalize_weights(generation.fitness_scores()))
    offspring = generation.offspring

    population = generation.evolve()

    assert population is offspring
    assert generation.population is offspring
    assert generation.offspring == []
    assert not any(child is parent for child in population for parent in parents)


def test_step_advances_one_generation(impossible_maze, rng):
    generation = Generation(impossible_maze, rng, population_size=10, max_evolutions=5)

    summary = generation.step()

    assert not summary['solved']
    assert summary['generation'] == 1
    assert generation.evolution_count == 1
    assert len(generation.population) == 10
    assert summary['best_length'] == impossible_maze.total_tile_count
    assert summary['best_fitness'] == max(generation.fitness_scores())
    assert len(summary['best_path']) == impossible_maze.total_tile_count


def test_single_generation_budget_without_winner(impossible_maze):
    generation = Generation(
        impossible_maze, np.random.RandomState(11), population_size=10, max_evolutions=1
    )

    result = generation.run()

    assert not result['solved']
    assert result['winner'] is None
    assert result['generation'] is None
    assert result['evolution_count'] == 1
    assert generation.evolution_count == 1
    assert result['best'] is not None
    assert result['best'].rounded_fitness == max(generation.fitness_scores())
    assert result['history']['generation'] == [1]
    assert not result['stopped']


def test_winner_is_reported_with_its_generation(column_maze):
    generation = Generation(
        column_maze, np.random.RandomState(3), population_size=10, max_evolutions=50
    )

    result = generation.run()

    assert result['solved']
    winner = result['winner']
    assert winner.position == column_maze.end_position()
    assert result['best'] is winner
    assert result['generation'] == result['evolution_count']
    assert winner in generation.population


@pytest.mark.parametrize("layout_fixture", ["column_maze", "simple_maze"])
def test_fixed_seed_reproduces_the_run(request, layout_fixture):
    maze = request.getfixturevalue(layout_fixture)

    def run_once():
        generation = Generation(maze, np.random.RandomState(7), population_size=20, max_evolutions=30)
        result = generation.run()
        return (
            result['solved'],
            result['generation'],
            result['evolution_count'],
            result['best'].path,
            result['history']['best_fitness'],
        )

    assert run_once() == run_once()


def test_observer_receives_every_generation(impossible_maze, rng):
    generation = Generation(impossible_maze, rng, population_size=6, max_evolutions=3)
    seen = []

    generation.run(on_generation=seen.append)

    assert [summary['generation'] for summary in seen] == [1, 2, 3]


def test_failing_observer_does_not_stop_the_run(impossible_maze, rng):
    generation = Generation(impossible_maze, rng, population_size=6, max_evolutions=2)

    def observer(summary):
        raise RuntimeError("observer down")

    result = generation.run(on_generation=observer)

    assert result['evolution_count'] == 2


def test_should_stop_is_checked_each_generation(impossible_maze, rng):
    generation = Generation(impossible_maze, rng, population_size=6, max_evolutions=100)
    calls = []

    def should_stop():
        calls.append(1)
        return len(calls) > 2

    result = generation.run(should_stop=should_stop)

    assert result['stopped']
    assert result['evolution_count'] == 2
    assert not result['solved']


def test_stop_before_first_generation_has_no_best(impossible_maze, rng):
    generation = Generation(impossible_maze, rng, population_size=4, max_evolutions=10)

    result = generation.run(should_stop=lambda: True)

    assert result['stopped']
    assert result['evolution_count'] == 0
    assert result['best'] is None


def test_from_config_seeds_the_random_source(simple_maze):
    config = GenerationConfig(population_size=8, max_evolutions=2, seed=99)

    first = Generation.from_config(simple_maze, config)
    second = Generation.from_config(simple_maze, config)

    assert first.population_size == 8
    assert first.max_evolutions == 2
    for a, b in zip(first.population, second.population):
        np.testing.assert_array_equal(a.genome, b.genome)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"population_size": 1},
        {"max_evolutions": 0},
        {"mutation_probability": 1.5},
        {"seed": -3},
    ],
)
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValidationError):
        GenerationConfig(**kwargs)
