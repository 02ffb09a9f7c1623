class MazeSolverError(Exception):
    """Base for all maze solver exceptions."""

    pass


class MazeInvalidError(MazeSolverError, ValueError):
    """Maze layout cannot be searched (missing or duplicated start/end)."""

    pass


class OutOfRangeError(MazeSolverError, IndexError):
    """Tile or position query outside the maze grid."""

    pass


class GenomeError(MazeSolverError, ValueError):
    """Genome contents are not made of known moves."""

    pass


class NotEvaluatedError(MazeSolverError, RuntimeError):
    """Fitness accessed before calculate_fitness() ran."""

    pass


class SelectionError(MazeSolverError, RuntimeError):
    """Weighted selection could not produce a parent index."""

    pass
