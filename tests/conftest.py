import numpy as np
import pytest

from env.maze import Maze
from env.mazes import COLUMN_LAYOUT, DEFAULT_LAYOUT, IMPOSSIBLE_LAYOUT, SIMPLE_LAYOUT


@pytest.fixture
def rng():
    return np.random.RandomState(1234)


@pytest.fixture
def default_maze():
    return Maze(DEFAULT_LAYOUT)


@pytest.fixture
def simple_maze():
    return Maze(SIMPLE_LAYOUT)


@pytest.fixture
def impossible_maze():
    return Maze(IMPOSSIBLE_LAYOUT)


@pytest.fixture
def column_maze():
    return Maze(COLUMN_LAYOUT)
