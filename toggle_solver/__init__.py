"""Solver for toggle-button grid puzzles."""

from toggle_solver.core import Coordinate, Grid, Level
from toggle_solver.difficulty import score_difficulty
from toggle_solver.reader import LevelFormatError, decode_level
from toggle_solver.search import Fail, SearchConfig, Success, run_search


def build_grid_from_level(level: Level) -> Grid:
    return Grid.from_level(level)


__all__ = [
    "Coordinate",
    "Fail",
    "Grid",
    "Level",
    "LevelFormatError",
    "SearchConfig",
    "Success",
    "build_grid_from_level",
    "decode_level",
    "run_search",
    "score_difficulty",
]
