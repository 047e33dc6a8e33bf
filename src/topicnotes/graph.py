"""Topic map: renders the topic forest as an Altair node-link chart.

Uses :mod:`networkx` for the spring layout and :mod:`altair` for rendering.
The resulting chart can be embedded directly in a Marimo cell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import altair as alt
    import networkx as nx

    from topicnotes.topics import TopicForest


def build_topic_graph(forest: "TopicForest") -> "nx.DiGraph":
    """Return the forest as a directed graph keyed by full path (edges parent → child)."""
    import networkx as nx

    G: nx.DiGraph = nx.DiGraph()
    for node in forest:
        G.add_node(node.path, name=node.name, count=node.count)
    for node in forest:
        parent = forest.parent(node)
        if parent is not None:
            G.add_edge(parent.path, node.path)
    return G


def build_topic_graph_spec(
    forest: "TopicForest",
    *,
    highlight: str | None = None,
    width: int = 640,
    height: int = 480,
    seed: int = 42,
) -> "alt.LayerChart":
    """Return an Altair chart of the topic hierarchy.

    Parameters
    ----------
    forest:
        A derived :class:`TopicForest`.
    highlight:
        Full path of the currently-selected topic (rendered in a distinct colour).
    width / height:
        Canvas dimensions in pixels.
    seed:
        Random seed passed to ``networkx.spring_layout`` for reproducible
        positioning.
    """
    import altair as alt
    import networkx as nx
    import polars as pl

    G = build_topic_graph(forest)
    pos: dict[str, Any] = nx.spring_layout(G, seed=seed, k=1.5) if len(G) else {}

    nodes_df = pl.DataFrame(
        [
            {
                "path": path,
                "name": G.nodes[path]["name"] or "(empty)",
                "x": float(pos[path][0]),
                "y": float(pos[path][1]),
                "count": int(G.nodes[path]["count"]),
                "highlighted": path == highlight,
            }
            for path in G.nodes()
        ]
        or [{"path": "", "name": "", "x": 0.0, "y": 0.0, "count": 0, "highlighted": False}]
    )

    edges_rows: list[dict[str, Any]] = [
        {
            "x": float(pos[src][0]),
            "y": float(pos[src][1]),
            "x2": float(pos[tgt][0]),
            "y2": float(pos[tgt][1]),
            "parent": src,
            "child": tgt,
        }
        for src, tgt in G.edges()
    ]

    if not edges_rows:
        edge_layer = alt.Chart(
            pl.DataFrame({"x": [0.0], "y": [0.0], "x2": [0.0], "y2": [0.0]})
        ).mark_rule(opacity=0)
    else:
        edge_layer = (
            alt.Chart(pl.DataFrame(edges_rows))
            .mark_rule(color="#888", strokeWidth=1, opacity=0.55)
            .encode(
                x=alt.X("x:Q", axis=None),
                y=alt.Y("y:Q", axis=None),
                x2="x2:Q",
                y2="y2:Q",
                tooltip=[alt.Tooltip("parent:N", title="topic"), alt.Tooltip("child:N", title="subtopic")],
            )
        )

    node_layer = (
        alt.Chart(nodes_df)
        .mark_circle(opacity=0.9)
        .encode(
            x=alt.X("x:Q", axis=None),
            y=alt.Y("y:Q", axis=None),
            size=alt.Size("count:Q", scale=alt.Scale(range=[80, 400]), legend=None),
            color=alt.condition(
                alt.datum["highlighted"],
                alt.value("#7C3AED"),  # violet for the selected topic
                alt.value("#4B90D9"),
            ),
            tooltip=[alt.Tooltip("path:N", title="topic"), alt.Tooltip("count:Q", title="notes")],
        )
    )

    label_layer = (
        alt.Chart(nodes_df)
        .mark_text(dy=-12, fontSize=11, fontWeight="bold")
        .encode(
            x=alt.X("x:Q", axis=None),
            y=alt.Y("y:Q", axis=None),
            text="name:N",
            opacity=alt.condition(alt.datum["highlighted"], alt.value(1.0), alt.value(0.65)),
        )
    )

    return (
        (edge_layer + node_layer + label_layer)
        .properties(width=width, height=height)
        .configure_view(strokeWidth=0)
    )
