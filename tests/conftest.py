"""
Pytest configuration and shared fixtures for the toggle solver tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from toggle_solver.bits import BitVector  # noqa: E402
from toggle_solver.core import Grid, Level, function_from_subtype  # noqa: E402


def make_level(width, height, subtypes, on=()):
    """Build a level from row-major subtypes and a set of lit (x, y) cells."""
    states = BitVector.zeros(width * height)
    for x, y in on:
        states.set(x * height + y, True)
    return Level(width=width, height=height, subtypes=bytes(subtypes), states=states)


def make_grid(width, height, subtype):
    grid = Grid.new(width, height)
    for btn in grid.buttons:
        btn.func = function_from_subtype(subtype)
    return grid


@pytest.fixture
def cross_level():
    """2x2 of four-arrow buttons lit as the cross of (0, 0)."""
    return make_level(2, 2, [11] * 4, on=[(0, 0), (1, 0), (0, 1)])
