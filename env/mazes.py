"""
env/mazes.py

Hand-authored maze layouts.

Rows are listed in index order: the first string is row 0.
"""

from env.maze import Maze


DEFAULT_LAYOUT = [
    "xxxxxxxxxxx",
    "x        Sx",
    "xxxxxxx xxx",
    "x         x",
    "x xxxx x xx",
    "x x    x  x",
    "xxx xxxxx x",
    "x     xx  x",
    "x xxxxx  xx",
    "x  Ex   xxx",
    "xxxxxxxxxxx",
]

# Straight corridor, start and end on the same row
SIMPLE_LAYOUT = [
    "xxxxxxxx",
    "xS    Ex",
    "xxxxxxxx",
]

# Corridor cut by a wall; the end is unreachable
IMPOSSIBLE_LAYOUT = [
    "xxxxxxxx",
    "xS xx Ex",
    "xxxxxxxx",
]

# One open column, end one step up from the start
COLUMN_LAYOUT = [
    "xxx",
    "xSx",
    "xEx",
    "xxx",
]

LAYOUTS = {
    "default": DEFAULT_LAYOUT,
    "simple": SIMPLE_LAYOUT,
    "impossible": IMPOSSIBLE_LAYOUT,
    "column": COLUMN_LAYOUT,
}


def load_maze(name: str) -> Maze:
    """
    Build one of the bundled mazes by name.

    Raises:
        KeyError: unknown maze name
    """
    if name not in LAYOUTS:
        raise KeyError(f"Unknown maze {name!r}, choose from {sorted(LAYOUTS)}")
    return Maze(LAYOUTS[name])
