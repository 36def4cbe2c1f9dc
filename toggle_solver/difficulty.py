import statistics
from typing import Iterable

from toggle_solver.core import Coordinate, Grid, Level


def toggle_counts(level: Level, clicks: Iterable[Coordinate]) -> list[int]:
    """
    Replay ``clicks`` on a fresh grid and count how often each cell changed.

    Counts are indexed like the grid state vector (``x * height + y``).
    """
    grid = Grid.from_level(level)
    counts = [0] * (grid.width * grid.height)

    before = grid.get_states()
    for coord in clicks:
        grid.click(coord.x, coord.y)
        after = grid.get_states()
        for i in range(len(counts)):
            if before.get(i) != after.get(i):
                counts[i] += 1
        before = after

    return counts


def score_difficulty(level: Level, clicks: Iterable[Coordinate]) -> float:
    nonzero = [c for c in toggle_counts(level, clicks) if c > 0]
    if not nonzero:
        return 0.0
    return (statistics.geometric_mean(nonzero) - 1) * 10
