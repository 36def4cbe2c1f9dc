"""
Weighted best-first search over grid states.

The search owns one mutable :class:`Grid`. Each expansion overwrites the grid
with the popped node's snapshot, clicks one button and reads the result back,
so nodes only ever hold :class:`BitVector` snapshots.
"""

import heapq
import itertools
import logging
import time

import networkx as nx
from attrs import define, field

from toggle_solver.bits import BitVector
from toggle_solver.core import Coordinate, Grid, Level, is_arrow

logger = logging.getLogger(__name__)


@define(frozen=True)
class SearchConfig:
    path_weight: int = 2
    prune_arrow_repeats: bool = True
    progress_interval: int = 10_000
    max_iterations: int | None = None
    record_tree: bool = False

    @classmethod
    def simple(cls, **kwargs) -> "SearchConfig":
        """Unit path weight and no pruning."""
        return cls(path_weight=1, prune_arrow_repeats=False, **kwargs)


@define(frozen=True, eq=False)
class SearchNode:
    state: BitVector
    clicks: tuple[Coordinate, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.clicks)

    @property
    def last_click(self) -> Coordinate | None:
        return self.clicks[-1] if self.clicks else None

    def key(self) -> str:
        return self.state.canonical_key()


@define(frozen=True)
class Success:
    clicks: tuple[Coordinate, ...]
    iterations: int = 0


@define(frozen=True)
class Fail:
    iterations: int = 0


SearchResult = Success | Fail


@define
class Solver:
    grid: Grid
    config: SearchConfig = field(factory=SearchConfig)
    start: BitVector = field(init=False)
    target: BitVector = field(init=False)
    tree: nx.DiGraph | None = field(init=False, default=None)
    _queue: list = field(init=False, factory=list)
    _visited: set[str] = field(init=False, factory=set)
    _counter: itertools.count = field(init=False, factory=itertools.count)
    _clickable: list[Coordinate] = field(init=False, factory=list)

    def __attrs_post_init__(self) -> None:
        self.start = self.grid.get_states()
        self.grid.set_all_state(False)
        self.target = self.grid.get_states()
        self.grid.set_states(self.start)
        self._clickable = self.grid.clickable()
        if self.config.record_tree:
            self.tree = nx.DiGraph()

    def distance(self, state: BitVector) -> int:
        return state.hamming_distance(self.target)

    def cost(self, node: SearchNode) -> int:
        d = self.distance(node.state)
        return d * d + self.config.path_weight * node.depth

    def is_pruned(self, node: SearchNode, coord: Coordinate) -> bool:
        """A repeated click on the same arrow button undoes itself."""
        if not self.config.prune_arrow_repeats or node.last_click != coord:
            return False
        previous = self.grid.at(node.last_click.x, node.last_click.y).func
        candidate = self.grid.at(coord.x, coord.y).func
        return is_arrow(previous) and is_arrow(candidate)

    def successors(self, node: SearchNode):
        """Yield the one-click successors of ``node`` that survive pruning."""
        for coord in self._clickable:
            if self.is_pruned(node, coord):
                continue
            self.grid.set_states(node.state)
            self.grid.click(coord.x, coord.y)
            yield SearchNode(state=self.grid.get_states(), clicks=node.clicks + (coord,))

    def _push(self, node: SearchNode, parent: SearchNode) -> bool:
        key = node.key()
        if key in self._visited:
            return False
        self._visited.add(key)

        cost = self.cost(node)
        heapq.heappush(self._queue, (cost, next(self._counter), node))

        if self.tree is not None:
            self.tree.add_node(
                key,
                depth=node.depth,
                distance=self.distance(node.state),
                cost=cost,
                clicks=node.clicks,
            )
            self.tree.add_edge(parent.key(), key, click=node.last_click)
        return True

    def _add_root(self, root: SearchNode) -> None:
        self._visited.add(root.key())
        if self.tree is not None:
            self.tree.add_node(
                root.key(),
                depth=0,
                distance=self.distance(root.state),
                cost=self.cost(root),
                clicks=(),
            )

    def _seed(self, root: SearchNode) -> None:
        # first ply
        for coord in self._clickable:
            self.grid.set_states(self.start)
            self.grid.click(coord.x, coord.y)
            node = SearchNode(state=self.grid.get_states(), clicks=(coord,))
            self._push(node, root)

    def run(self) -> SearchResult:
        root = SearchNode(state=self.start.copy())
        self._add_root(root)

        if self.distance(self.start) == 0:
            logger.info("Level is already solved")
            return Success(clicks=(), iterations=0)

        self._seed(root)

        stopwatch = time.perf_counter()
        iterations = 0
        while self._queue:
            if (
                self.config.max_iterations is not None
                and iterations >= self.config.max_iterations
            ):
                logger.warning(
                    "Gave up after %d iterations with %d nodes queued",
                    iterations,
                    len(self._queue),
                )
                return Fail(iterations=iterations)

            iterations += 1
            _, _, node = heapq.heappop(self._queue)
            diff = self.distance(node.state)

            if iterations % self.config.progress_interval == 0:
                logger.info(
                    "Iterations: %d / Best: %d / Queued: %d / Depth: %d",
                    iterations,
                    diff,
                    len(self._queue),
                    node.depth,
                )

            if diff == 0:
                elapsed_ms = (time.perf_counter() - stopwatch) * 1000
                logger.info(
                    "Solved with %d iterations, %d clicks (%.0f ms)",
                    iterations,
                    node.depth,
                    elapsed_ms,
                )
                self.grid.set_states(node.state)
                return Success(clicks=node.clicks, iterations=iterations)

            for successor in self.successors(node):
                self._push(successor, node)

        logger.info("Search space exhausted after %d iterations", iterations)
        return Fail(iterations=iterations)


def run_search(level: Level, config: SearchConfig | None = None) -> SearchResult:
    grid = Grid.from_level(level)
    return Solver(grid, config or SearchConfig()).run()


def solution_path(tree: nx.DiGraph, root: str, goal: str) -> list[Coordinate]:
    """Recover the clicks leading from ``root`` to ``goal`` in a recorded tree."""
    path = nx.shortest_path(tree, root, goal)
    return [tree.edges[u, v]["click"] for u, v in zip(path, path[1:])]
