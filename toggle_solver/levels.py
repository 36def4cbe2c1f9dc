from typing import Callable

from attrs import define

from toggle_solver.core import Coordinate, Grid, Level, function_from_subtype


@define
class LevelInfo:
    """Information about a built-in level."""

    description: str
    generator: Callable[[], Level]


def scrambled_level(rows: list[list[int]], clicks: list[Coordinate]) -> Level:
    """
    Build a level from subtype rows (top row first) by clicking ``clicks``
    on the all-off grid.

    Every click must land on a self-inverse button so that replaying the same
    clicks solves the level.
    """
    height = len(rows)
    width = len(rows[0])
    subtypes = bytes(
        rows[height - 1 - y][x] for y in range(height) for x in range(width)
    )

    grid = Grid.new(width, height)
    for y in range(height):
        for x in range(width):
            grid.at(x, y).func = function_from_subtype(subtypes[y * width + x])
    for coord in clicks:
        grid.click(coord.x, coord.y)

    return Level(
        width=width,
        height=height,
        subtypes=subtypes,
        states=grid.get_states(),
        min_clicks=len(clicks),
    )


def level_cross() -> Level:
    return scrambled_level(
        [
            [11, 11],
            [11, 11],
        ],
        [Coordinate(0, 0)],
    )


def level_arrows() -> Level:
    return scrambled_level(
        [
            [8, 2, 7],
            [4, 9, 3],
            [6, 10, 5],
        ],
        [Coordinate(1, 1), Coordinate(0, 2), Coordinate(2, 0)],
    )


def level_lights_out() -> Level:
    return scrambled_level(
        [
            [20, 20, 20],
            [20, 20, 20],
            [20, 20, 20],
        ],
        [Coordinate(0, 0), Coordinate(2, 2)],
    )


def level_rotor() -> Level:
    return scrambled_level(
        [
            [1, 14, 2],
            [4, 20, 3],
            [12, 15, 13],
        ],
        [Coordinate(1, 1), Coordinate(0, 2)],
    )


def level_mirror() -> Level:
    return scrambled_level(
        [
            [0, 16, 0, 11],
            [19, 0, 17, 0],
            [11, 0, 18, 1],
        ],
        [Coordinate(3, 2), Coordinate(0, 0)],
    )


def get_level_registry() -> dict[str, LevelInfo]:
    """Central registry of all built-in levels."""
    return {
        "cross": LevelInfo(
            description="2x2 of four-arrow buttons, solvable in one click",
            generator=level_cross,
        ),
        "arrows": LevelInfo(
            description="3x3 of one- and two-arrow buttons",
            generator=level_arrows,
        ),
        "lights-out": LevelInfo(
            description="Classic lights out on a 3x3 board",
            generator=level_lights_out,
        ),
        "rotor": LevelInfo(
            description="Arrows around a pair of rotating buttons",
            generator=level_rotor,
        ),
        "mirror": LevelInfo(
            description="Symmetry and shift buttons with sparse arrows",
            generator=level_mirror,
        ),
    }


def get_level(name: str) -> Level:
    registry = get_level_registry()
    if name not in registry:
        raise ValueError(f"Unknown level: {name}")
    return registry[name].generator()
