"""
Example demonstrating natural construction of a planar triangulated graph.
"""

import matplotlib.pyplot as plt
from py_ncg.core import (
    AleaPRNG, Bounds, start_graph,
    insert_by_command, insert_random, relayout,
    color_last_vertex, render_view, save_graph_file
)
from py_ncg.core.periphery import periphery_of


PALETTE_COLORS = {None: 'lightgray', 1: 'tomato', 2: 'gold', 3: 'mediumseagreen', 4: 'cornflowerblue'}


def draw(ax, graph, title):
    view = render_view(graph, label_mode="color")
    vertices = view["vertices"]
    for a, b in view["edges"]:
        ax.plot([vertices[a]["x"], vertices[b]["x"]], [vertices[a]["y"], vertices[b]["y"]],
                color='black', linewidth=0.8, zorder=1)
    for v in vertices:
        ax.scatter(v["x"], v["y"], s=260, zorder=2,
                   c=PALETTE_COLORS.get(v["color"], 'lightgray'),
                   edgecolors='red' if v["on_periphery"] else 'black')
        ax.annotate(v["label"], (v["x"], v["y"]), ha='center', va='center', fontsize=8, zorder=3)
    ax.set_title(title)
    ax.set_aspect('equal')
    ax.invert_yaxis()  # screen coordinates


def main():
    bounds = Bounds(800, 600)
    rng = AleaPRNG("construction_demo")

    # Seed triangle plus one explicit command insertion
    graph = start_graph(bounds)
    result = insert_by_command(graph, "A, 1-2", bounds)
    print(result.message)
    graph = result.graph

    # Grow at random, coloring each new vertex
    print("Growing graph...")
    for _ in range(20):
        result = insert_random(graph, bounds, rng=rng)
        if not result.ok:
            print(f"Stopped early: {result.message}")
            break
        graph = color_last_vertex(result.graph).graph

    print(f"Vertices: {len(graph.vertices)}")
    print(f"Edges: {len(graph.edges)} (maximal planar would be {3 * len(graph.vertices) - 6})")
    print(f"Periphery: {[graph.vertices[i].id for i in periphery_of(graph)]}")

    relaid = relayout(graph, bounds, rng=rng).graph
    assert relaid.edge_set() == graph.edge_set()

    # Visualize both layouts
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    draw(axes[0], graph, 'Constructed')
    draw(axes[1], relaid, 'After relayout')
    plt.tight_layout()
    plt.savefig('construction_demo.png', dpi=150)
    print("\nGraph visualization saved to construction_demo.png")

    path = save_graph_file(graph, 'construction_demo.json')
    print(f"Graph saved to {path}")


if __name__ == "__main__":
    main()
