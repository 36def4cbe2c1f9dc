import pytest

from conftest import make_level
from toggle_solver.core import Coordinate, Grid
from toggle_solver.levels import get_level_registry
from toggle_solver.search import (
    Fail,
    SearchConfig,
    SearchNode,
    Solver,
    Success,
    run_search,
    solution_path,
)


def replay(level, clicks):
    grid = Grid.from_level(level)
    for c in clicks:
        grid.click(c.x, c.y)
    return grid


def facing_arrows_level():
    # (0,0) points right, (1,0) points left
    return make_level(2, 1, [4, 3], on=[(0, 0)])


def test_cross_solves_in_one_click(cross_level):
    result = run_search(cross_level)
    assert isinstance(result, Success)
    assert len(result.clicks) == 1
    assert replay(cross_level, result.clicks).is_solved()


def test_all_nothing_fails():
    level = make_level(2, 2, [0, 0, 0, 0], on=[(1, 1)])
    result = run_search(level)
    assert isinstance(result, Fail)
    assert result.iterations == 0


def test_unreachable_cell_fails():
    # only (0,0) can change, (1,0) stays on
    level = make_level(2, 1, [1, 0], on=[(1, 0)])
    assert isinstance(run_search(level), Fail)


def test_already_solved_level():
    level = make_level(2, 2, [11] * 4)
    result = run_search(level)
    assert result == Success(clicks=(), iterations=0)


@pytest.mark.parametrize("name", sorted(get_level_registry()))
def test_builtin_levels_solve(name):
    level = get_level_registry()[name].generator()
    result = run_search(level)
    assert isinstance(result, Success)
    assert replay(level, result.clicks).is_solved()


@pytest.mark.parametrize("name", ["cross", "arrows", "lights-out"])
def test_simple_variant_solves(name):
    level = get_level_registry()[name].generator()
    result = run_search(level, SearchConfig.simple())
    assert isinstance(result, Success)
    assert replay(level, result.clicks).is_solved()


def test_cost_weights_distance_and_depth(cross_level):
    solver = Solver(Grid.from_level(cross_level), SearchConfig(path_weight=2))
    node = SearchNode(state=solver.start, clicks=(Coordinate(0, 0), Coordinate(1, 1)))
    assert solver.cost(node) == 3 * 3 + 2 * 2

    simple = Solver(Grid.from_level(cross_level), SearchConfig.simple())
    assert simple.cost(node) == 3 * 3 + 2


def test_solver_targets_all_off_and_keeps_start(cross_level):
    grid = Grid.from_level(cross_level)
    solver = Solver(grid)
    assert solver.distance(solver.start) == 3
    assert solver.distance(solver.target) == 0
    assert grid.get_states() == solver.start


def test_successors_skip_repeated_arrow():
    solver = Solver(Grid.from_level(facing_arrows_level()))
    node = SearchNode(state=solver.start, clicks=(Coordinate(0, 0),))
    clicks = [s.clicks for s in solver.successors(node)]
    assert clicks == [(Coordinate(0, 0), Coordinate(1, 0))]


def test_successors_keep_repeat_without_pruning():
    solver = Solver(Grid.from_level(facing_arrows_level()), SearchConfig.simple())
    node = SearchNode(state=solver.start, clicks=(Coordinate(0, 0),))
    assert len(list(solver.successors(node))) == 2


def test_repeat_rotate_is_not_pruned():
    level = make_level(3, 3, [0, 0, 0, 0, 14, 0, 0, 0, 0], on=[(1, 2)])
    solver = Solver(Grid.from_level(level))
    node = SearchNode(state=solver.start, clicks=(Coordinate(1, 1),))
    assert [s.last_click for s in solver.successors(node)] == [Coordinate(1, 1)]


def test_no_enqueued_node_repeats_an_arrow():
    level = make_level(2, 2, [4, 3, 1, 2], on=[(0, 0), (1, 1)])
    solver = Solver(Grid.from_level(level), SearchConfig(record_tree=True))
    solver.run()

    assert solver.tree.number_of_nodes() > 1
    for _, clicks in solver.tree.nodes(data="clicks"):
        assert len(clicks) < 2 or clicks[-1] != clicks[-2]


def test_successors_do_not_alias_grid(cross_level):
    grid = Grid.from_level(cross_level)
    solver = Solver(grid)
    root = SearchNode(state=solver.start)
    states = [s.state for s in solver.successors(root)]
    before = [solver.distance(s) for s in states]
    assert before[0] == 0
    grid.set_all_state(True)
    assert [solver.distance(s) for s in states] == before


def test_max_iterations_gives_up():
    # needs two clicks, so the first popped node cannot be solved
    level = get_level_registry()["lights-out"].generator()
    result = run_search(level, SearchConfig(max_iterations=1))
    assert result == Fail(iterations=1)


def test_recorded_tree_matches_solution():
    level = get_level_registry()["arrows"].generator()
    solver = Solver(Grid.from_level(level), SearchConfig(record_tree=True))
    result = solver.run()
    assert isinstance(result, Success)

    tree = solver.tree
    root = solver.start.canonical_key()
    goal = solver.target.canonical_key()
    assert tree.nodes[root]["depth"] == 0
    assert tree.nodes[goal]["distance"] == 0
    assert tuple(solution_path(tree, root, goal)) == result.clicks


def test_progress_is_logged(caplog):
    level = get_level_registry()["lights-out"].generator()
    with caplog.at_level("INFO", logger="toggle_solver.search"):
        run_search(level, SearchConfig(progress_interval=1))
    assert any("Iterations:" in r.getMessage() for r in caplog.records)
    assert any("Solved with" in r.getMessage() for r in caplog.records)


def test_already_solved_tree_keeps_root():
    level = make_level(2, 2, [11] * 4)
    solver = Solver(Grid.from_level(level), SearchConfig(record_tree=True))
    assert solver.run() == Success(clicks=(), iterations=0)
    assert list(solver.tree.nodes(data="distance")) == [
        (solver.start.canonical_key(), 0)
    ]
