import argparse
import logging
import os
import sys
from typing import List, Optional

from toggle_solver.core import Coordinate, Grid, Level
from toggle_solver.difficulty import score_difficulty
from toggle_solver.levels import get_level_registry
from toggle_solver.reader import decode_level
from toggle_solver.search import SearchConfig, Solver, Success


def load_level(source: str) -> Level:
    """Resolve a built-in level name, a level code, a file, or ``-`` for stdin."""
    registry = get_level_registry()
    if source in registry:
        return registry[source].generator()
    if source == "-":
        return decode_level(sys.stdin.read())
    if os.path.isfile(source):
        with open(source) as f:
            return decode_level(f.read())
    return decode_level(source)


def print_grid(grid: Grid) -> None:
    """Prints the grid with the top row first"""
    print("\n=== Current Grid ===")
    print(grid.render())
    lit = sum(btn.is_on for btn in grid.buttons)
    print(f"💡 {lit} of {grid.width * grid.height} buttons on")
    print("=" * 20)


def print_level(level: Level) -> None:
    print(f"📐 Size: {level.width}x{level.height}")
    print(f"🎯 Minimum clicks hint: {level.min_clicks}")
    print_grid(Grid.from_level(level))


def print_solution(level: Level, clicks: tuple[Coordinate, ...]) -> None:
    """Replays a solution, printing the grid after every click."""
    grid = Grid.from_level(level)
    for i, coord in enumerate(clicks, 1):
        func = grid.at(coord.x, coord.y).func
        print(f"\n🔄 Step {i}: click {coord} ({func.__class__.__name__})")
        grid.click(coord.x, coord.y)
        print_grid(grid)

    print(f"\n{'🎉 Success!' if grid.is_solved() else '❌ Failed!'}")


def build_config(args: argparse.Namespace, record_tree: bool = False) -> SearchConfig:
    if args.simple:
        base = SearchConfig.simple()
    else:
        base = SearchConfig(
            path_weight=args.weight, prune_arrow_repeats=not args.no_prune
        )
    return SearchConfig(
        path_weight=base.path_weight,
        prune_arrow_repeats=base.prune_arrow_repeats,
        progress_interval=args.progress_every,
        max_iterations=args.max_iterations,
        record_tree=record_tree,
    )


def solve_level(level: Level, config: SearchConfig, name: str) -> Optional[Solver]:
    print(f"\n🧩 Solving Level {name}:")
    print_level(level)

    solver = Solver(Grid.from_level(level), config)
    result = solver.run()

    if not isinstance(result, Success):
        print(f"❌ No solution found after {result.iterations} iterations!")
        return None

    print(
        f"\n✨ Found solution with {len(result.clicks)} clicks "
        f"in {result.iterations} iterations!\n"
    )
    print(", ".join(str(c) for c in result.clicks))
    print_solution(level, result.clicks)
    print(f"📊 Difficulty: {score_difficulty(level, result.clicks):.2f}")
    return solver


def solve_level_with_graph(
    level: Level, config: SearchConfig, name: str, filename: str
) -> None:
    """Solve a level and save an image of the explored search tree"""
    from toggle_solver.plot import save_search_tree_image

    solver = solve_level(level, config, name)
    if solver is None:
        return

    tree = solver.tree
    print("\n📊 Drawing search tree...")
    goal = next(node for node, distance in tree.nodes(data="distance") if distance == 0)
    save_search_tree_image(tree, filename, solution=tree.nodes[goal]["clicks"])
    print(
        f"Saved {filename} with {tree.number_of_nodes()} states "
        f"and {tree.number_of_edges()} clicks"
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Toggle puzzle solver and search tree renderer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Solve a built-in level
    python main.py solve arrows

    # Solve a level code read from stdin
    echo <code> | python main.py solve -

    # Draw the search tree of a level
    python main.py graph rotor --output rotor.png

    # Show available levels
    python main.py list
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log search progress in detail"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Show command
    show_parser = subparsers.add_parser("show", help="Decode and print a level")
    show_parser.add_argument("level", help="Level name, level code, file, or -")

    search_options = argparse.ArgumentParser(add_help=False)
    search_options.add_argument("level", help="Level name, level code, file, or -")
    search_options.add_argument(
        "--weight", type=int, default=2, help="Cost per click in the search"
    )
    search_options.add_argument(
        "--no-prune",
        action="store_true",
        help="Allow the same arrow button to be clicked twice in a row",
    )
    search_options.add_argument(
        "--simple",
        action="store_true",
        help="Use unit click cost and no pruning",
    )
    search_options.add_argument(
        "--max-iterations", type=int, default=None, help="Give up after N iterations"
    )
    search_options.add_argument(
        "--progress-every",
        type=int,
        default=10_000,
        help="Log progress every N iterations",
    )

    # Solve command
    subparsers.add_parser(
        "solve", parents=[search_options], help="Solve a level"
    )

    # Graph command
    graph_parser = subparsers.add_parser(
        "graph", parents=[search_options], help="Solve a level and draw its search tree"
    )
    graph_parser.add_argument(
        "--output", default="search_tree.png", help="Image file to write"
    )

    # List command
    subparsers.add_parser("list", help="List built-in levels")

    return parser.parse_args(args)


def list_levels() -> None:
    """Display built-in levels and their descriptions."""
    print("\nAvailable Levels:")
    print("-" * 50)

    registry = get_level_registry()
    for name, info in sorted(registry.items()):
        print(f"{name}: {info.description}")


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parsed_args = parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if parsed_args.command == "list":
        list_levels()
        return 0

    if parsed_args.command is None:
        print("Error: No command specified. Use --help for usage information.")
        return 1

    try:
        level = load_level(parsed_args.level)
        if parsed_args.command == "show":
            print_level(level)
        elif parsed_args.command == "solve":
            solve_level(level, build_config(parsed_args), parsed_args.level)
        elif parsed_args.command == "graph":
            solve_level_with_graph(
                level,
                build_config(parsed_args, record_tree=True),
                parsed_args.level,
                parsed_args.output,
            )
    except ValueError as e:
        print(f"Error: {str(e)}")
        return 1
    except Exception as e:
        print(f"Error solving level: {str(e)}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
