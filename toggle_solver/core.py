from enum import Enum

from attrs import define, field

from toggle_solver.bits import BitVector


@define(frozen=True)
class Coordinate:
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Direction(Enum):
    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    LEFT_UP = (-1, 1)
    RIGHT_UP = (1, 1)
    LEFT_DOWN = (-1, -1)
    RIGHT_DOWN = (1, -1)


class Axis(Enum):
    HORIZONTAL = (1, 0)
    VERTICAL = (0, 1)
    LEFT_UP_RIGHT_DOWN = (-1, 1)
    LEFT_DOWN_RIGHT_UP = (-1, -1)


@define(frozen=True)
class Nothing:
    pass


@define(frozen=True)
class OneArrow:
    direction: Direction


@define(frozen=True)
class TwoArrow:
    axis: Axis


@define(frozen=True)
class FourArrow:
    pass


@define(frozen=True)
class Rotate:
    clockwise: bool


@define(frozen=True)
class Shift:
    rightward: bool


@define(frozen=True)
class Symmetry:
    horizontal: bool


@define(frozen=True)
class AroundEight:
    pass


ButtonFunction = (
    Nothing | OneArrow | TwoArrow | FourArrow | Rotate | Shift | Symmetry | AroundEight
)

SUBTYPE_FUNCTIONS: dict[int, ButtonFunction] = {
    1: OneArrow(Direction.UP),
    2: OneArrow(Direction.DOWN),
    3: OneArrow(Direction.LEFT),
    4: OneArrow(Direction.RIGHT),
    5: OneArrow(Direction.LEFT_UP),
    6: OneArrow(Direction.RIGHT_UP),
    7: OneArrow(Direction.LEFT_DOWN),
    8: OneArrow(Direction.RIGHT_DOWN),
    9: TwoArrow(Axis.HORIZONTAL),
    10: TwoArrow(Axis.VERTICAL),
    11: FourArrow(),
    12: TwoArrow(Axis.LEFT_UP_RIGHT_DOWN),
    13: TwoArrow(Axis.LEFT_DOWN_RIGHT_UP),
    14: Rotate(clockwise=True),
    15: Rotate(clockwise=False),
    16: Symmetry(horizontal=True),
    17: Symmetry(horizontal=False),
    18: Shift(rightward=False),
    19: Shift(rightward=True),
    20: AroundEight(),
}
FUNCTION_SUBTYPES: dict[ButtonFunction, int] = {
    func: subtype for subtype, func in SUBTYPE_FUNCTIONS.items()
}

# N, NE, E, SE, S, SW, W, NW
NEIGHBOUR_OFFSETS = [
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
]


def function_from_subtype(subtype: int) -> ButtonFunction:
    return SUBTYPE_FUNCTIONS.get(subtype, Nothing())


def subtype_from_function(func: ButtonFunction) -> int:
    return FUNCTION_SUBTYPES.get(func, 0)


def is_arrow(func: ButtonFunction) -> bool:
    return isinstance(func, (OneArrow, TwoArrow, FourArrow))


@define
class Button:
    coord: Coordinate
    is_on: bool = False
    func: ButtonFunction = field(factory=Nothing)

    def toggle(self) -> None:
        self.is_on = not self.is_on


@define
class Level:
    """
    Decoded level description.

    ``subtypes`` is indexed ``y * width + x`` while ``states`` is indexed
    ``x * height + y``; both orders come from the wire format.
    """

    width: int
    height: int
    subtypes: bytes
    states: BitVector
    min_clicks: int = 0


@define
class Grid:
    width: int
    height: int
    buttons: list[Button]

    @classmethod
    def new(cls, width: int, height: int) -> "Grid":
        buttons = [
            Button(coord=Coordinate(x, y)) for y in range(height) for x in range(width)
        ]
        return cls(width=width, height=height, buttons=buttons)

    @classmethod
    def from_level(cls, level: Level) -> "Grid":
        total = level.width * level.height
        if len(level.subtypes) != total:
            raise ValueError(
                f"level has {len(level.subtypes)} subtypes, expected {total}"
            )
        if len(level.states) < total:
            raise ValueError(f"level has {len(level.states)} state bits, expected {total}")

        grid = cls.new(level.width, level.height)
        for y in range(level.height):
            for x in range(level.width):
                btn = grid.at(x, y)
                btn.is_on = level.states.get(x * level.height + y)
                btn.func = function_from_subtype(level.subtypes[y * level.width + x])
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> Button:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} grid")
        return self.buttons[y * self.width + x]

    def clickable(self) -> list[Coordinate]:
        return [
            btn.coord for btn in self.buttons if not isinstance(btn.func, Nothing)
        ]

    def get_states(self) -> BitVector:
        result = BitVector.zeros(self.width * self.height)
        i = 0
        for x in range(self.width):
            for y in range(self.height):
                result.set(i, self.at(x, y).is_on)
                i += 1
        return result

    def set_states(self, states: BitVector) -> None:
        if len(states) != self.width * self.height:
            raise ValueError(
                f"state vector has {len(states)} bits, grid has {self.width * self.height} buttons"
            )
        i = 0
        for x in range(self.width):
            for y in range(self.height):
                self.at(x, y).is_on = states.get(i)
                i += 1

    def set_all_state(self, value: bool) -> None:
        for btn in self.buttons:
            btn.is_on = value

    def is_solved(self) -> bool:
        return not any(btn.is_on for btn in self.buttons)

    def render(self) -> str:
        rows = []
        for y in reversed(range(self.height)):
            rows.append(
                " ".join("O" if self.at(x, y).is_on else "." for x in range(self.width))
            )
        return "\n".join(rows)

    def click(self, x: int, y: int) -> None:
        func = self.at(x, y).func

        if isinstance(func, Nothing):
            return
        elif isinstance(func, OneArrow):
            dx, dy = func.direction.value
            self._toggle_ray(x, y, dx, dy)
        elif isinstance(func, TwoArrow):
            dx, dy = func.axis.value
            self.at(x, y).toggle()
            self._toggle_ray(x + dx, y + dy, dx, dy)
            self._toggle_ray(x - dx, y - dy, -dx, -dy)
        elif isinstance(func, FourArrow):
            self._click_four_arrow(x, y)
        elif isinstance(func, Rotate):
            self._click_rotate(x, y, func.clockwise)
        elif isinstance(func, Shift):
            self._click_shift(y, func.rightward)
        elif isinstance(func, Symmetry):
            self._click_symmetry(x, y, func.horizontal)
        elif isinstance(func, AroundEight):
            self.at(x, y).toggle()
            for x2, y2 in self._neighbours(x, y):
                self.at(x2, y2).toggle()
        else:
            raise TypeError(f"unknown button function: {func!r}")

    def _neighbours(self, x: int, y: int) -> list[tuple[int, int]]:
        return [
            (x + dx, y + dy)
            for dx, dy in NEIGHBOUR_OFFSETS
            if self.in_bounds(x + dx, y + dy)
        ]

    def _toggle_ray(self, x: int, y: int, dx: int, dy: int) -> None:
        while self.in_bounds(x, y):
            self.at(x, y).toggle()
            x += dx
            y += dy

    def _click_four_arrow(self, x: int, y: int) -> None:
        self.at(x, y).toggle()
        for x2 in range(self.width):
            if x2 != x:
                self.at(x2, y).toggle()
        for y2 in range(self.height):
            if y2 != y:
                self.at(x, y2).toggle()

    def _click_rotate(self, x: int, y: int, clockwise: bool) -> None:
        self.at(x, y).toggle()

        ring = self._neighbours(x, y)
        if not ring:
            return
        values = [self.at(x2, y2).is_on for x2, y2 in ring]
        if clockwise:
            values = values[-1:] + values[:-1]
        else:
            values = values[1:] + values[:1]
        for (x2, y2), value in zip(ring, values):
            self.at(x2, y2).is_on = value

    def _click_shift(self, y: int, rightward: bool) -> None:
        values = [self.at(x, y).is_on for x in range(self.width)]
        if rightward:
            values = values[-1:] + values[:-1]
        else:
            values = values[1:] + values[:1]
        for x, value in enumerate(values):
            self.at(x, y).is_on = value

    def _click_symmetry(self, x: int, y: int, horizontal: bool) -> None:
        self.at(x, y).toggle()

        if horizontal:
            # mirror column x-1 and x+1 across every row
            lines = [
                ((x - 1, y2), (x + 1, y2)) for y2 in range(self.height)
            ]
        else:
            lines = [
                ((x2, y + 1), (x2, y - 1)) for x2 in range(self.width)
            ]

        for first, second in lines:
            has_first = self.in_bounds(*first)
            has_second = self.in_bounds(*second)
            if has_first and has_second:
                a = self.at(*first)
                b = self.at(*second)
                a.is_on, b.is_on = b.is_on, a.is_on
            elif has_first:
                self.at(*first).is_on = False
            elif has_second:
                self.at(*second).is_on = False
