import matplotlib.pyplot as plt
import networkx as nx

from toggle_solver.core import Coordinate


def save_search_tree_image(
    tree: nx.DiGraph,
    filename: str = "search_tree.png",
    solution: tuple[Coordinate, ...] | None = None,
) -> None:
    plt.figure(figsize=(20, 12))
    pos = nx.multipartite_layout(tree, subset_key="depth", align="horizontal")
    # root on top
    pos = {node: (x, -y) for node, (x, y) in pos.items()}

    nx.draw_networkx_nodes(
        tree, pos, node_color="white", node_size=300, edgecolors="black", linewidths=1
    )

    root_nodes = [node for node, depth in tree.nodes(data="depth") if depth == 0]
    nx.draw_networkx_nodes(
        tree,
        pos,
        nodelist=root_nodes,
        node_color="lightgreen",
        node_size=450,
        edgecolors="darkgreen",
        linewidths=2,
    )

    path_nodes = []
    if solution is not None:
        path_nodes = [
            node
            for node, clicks in tree.nodes(data="clicks")
            if clicks is not None and clicks == solution[: len(clicks)]
        ]
    goal_nodes = [node for node, distance in tree.nodes(data="distance") if distance == 0]
    nx.draw_networkx_nodes(
        tree,
        pos,
        nodelist=[node for node in path_nodes if node not in root_nodes],
        node_color="lightcoral",
        node_size=450,
        edgecolors="darkred",
        linewidths=2,
    )

    nx.draw_networkx_edges(
        tree, pos, edge_color="gray", arrows=True, alpha=0.4, width=1, arrowsize=10
    )

    labels = {node: str(distance) for node, distance in tree.nodes(data="distance")}
    nx.draw_networkx_labels(tree, pos, labels, font_size=7, font_color="black")

    if len(tree) <= 200:
        edge_labels = {
            (u, v): f"{click.x},{click.y}" for u, v, click in tree.edges(data="click")
        }
        nx.draw_networkx_edge_labels(
            tree,
            pos,
            edge_labels,
            font_size=6,
            bbox=dict(facecolor="white", edgecolor="none", alpha=0.7),
        )

    plt.title(
        f"Search Tree ({len(tree)} states, {len(goal_nodes)} solved)\n"
        "Green: Start, Red: Solution path, labels: distance to solved",
        pad=20,
        fontsize=16,
    )
    plt.axis("off")

    plt.savefig(
        filename, dpi=150, bbox_inches="tight", facecolor="white", edgecolor="none"
    )
    plt.close()
