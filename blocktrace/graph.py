"""Renderer-agnostic call graph assembled from statistics and transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .call_stats import CallStatistics
from .functions import FunctionRecord
from .transitions import Edge

DEFAULT_GRAPH_NAME = "BlockTraceGraph"
DEFAULT_NODE_COLOR = "black"


def format_probability(value: float) -> str:
    """Round to two places and drop trailing zeros (``1``, ``0.5``, ``0.33``)."""

    return format(round(value, 2), "g")


@dataclass(frozen=True)
class GraphNode:
    node_id: str
    label: str
    color: str = DEFAULT_NODE_COLOR
    bold: bool = False


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    label: str
    color: Optional[str] = None


@dataclass
class AbstractGraph:
    """Nodes and directed edges ready to be handed to a renderer."""

    name: str = DEFAULT_GRAPH_NAME
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def edges_from(self, node_id: str) -> List[GraphEdge]:
        return [edge for edge in self.edges if edge.source == node_id]

    def summary_lines(self) -> List[str]:
        lines = [f"graph {self.name}: {len(self.nodes)} nodes, {len(self.edges)} edges"]
        highlighted = [node.node_id for node in self.nodes if node.bold]
        if highlighted:
            lines.append(f"- highlighted nodes: {', '.join(highlighted)}")
        return lines


def build_node(record: FunctionRecord, statistics: CallStatistics) -> GraphNode:
    calls = statistics.calls_for(record.short_id)
    band = statistics.band_for(record.short_id)
    return GraphNode(
        node_id=record.short_id,
        label=f"{record.short_id}({calls})",
        color=band.color if band is not None else DEFAULT_NODE_COLOR,
        bold=band is not None,
    )


def build_edge(edge: Edge) -> GraphEdge:
    return GraphEdge(
        source=edge.source,
        target=edge.target,
        label=format_probability(edge.probability),
        color=edge.color,
    )


def assemble(
    unique_functions: Sequence[FunctionRecord],
    statistics: CallStatistics,
    edge_map: Mapping[str, Sequence[Edge]],
    *,
    name: str = DEFAULT_GRAPH_NAME,
) -> AbstractGraph:
    """Combine nodes and classified edges into an :class:`AbstractGraph`.

    Self-loops and back-edges are kept as ordinary edges.
    """

    graph = AbstractGraph(name=name)
    for record in unique_functions:
        graph.nodes.append(build_node(record, statistics))
    for record in unique_functions:
        for edge in edge_map.get(record.short_id, ()):
            graph.edges.append(build_edge(edge))
    return graph


def edge_lookup(graph: AbstractGraph) -> Dict[Tuple[str, str], GraphEdge]:
    return {(edge.source, edge.target): edge for edge in graph.edges}
