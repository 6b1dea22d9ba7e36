"""Graphviz DOT rendering for :class:`~blocktrace.graph.AbstractGraph`."""

from __future__ import annotations

import logging
from pathlib import Path

from graphviz import Digraph

from .graph import AbstractGraph

logger = logging.getLogger(__name__)

NODE_SHAPE = "ellipse"
NODE_HEIGHT = "0.5"


def to_digraph(graph: AbstractGraph) -> Digraph:
    dot = Digraph(name=graph.name)
    for node in graph.nodes:
        attrs = {
            "label": node.label,
            "shape": NODE_SHAPE,
            "fontcolor": node.color,
            "height": NODE_HEIGHT,
        }
        if node.bold:
            attrs["style"] = "bold"
        dot.node(node.node_id, **attrs)
    for edge in graph.edges:
        attrs = {"label": edge.label}
        if edge.color is not None:
            attrs["color"] = edge.color
        dot.edge(edge.source, edge.target, **attrs)
    return dot


def render_dot(graph: AbstractGraph) -> str:
    """Return DOT source for ``graph``; no Graphviz binary is needed."""

    return to_digraph(graph).source


def write_dot(graph: AbstractGraph, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_dot(graph), "utf-8")
    logger.info("wrote graph with %d nodes to %s", len(graph.nodes), path)
    return path
