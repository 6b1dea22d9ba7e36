"""One-shot trace analysis: functions + trace in, reports and graph out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .call_stats import CallStatistics, annotate
from .dot import write_dot
from .functions import DEFAULT_SEPARATOR, FunctionRecord, FunctionTable, parse_function_table
from .graph import DEFAULT_GRAPH_NAME, AbstractGraph, assemble
from .report import (
    render_adjacency_table,
    render_node_sequence,
    render_statistics,
    write_text,
)
from .trace import parse_trace, reduce_trace, unique_in_order
from .transitions import Edge, build_edges

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything derived from a single trace."""

    table: FunctionTable
    sequence: List[FunctionRecord]
    unique_functions: List[FunctionRecord]
    statistics: CallStatistics
    edges: Dict[str, List[Edge]]
    graph: AbstractGraph

    def node_sequence_text(self) -> str:
        return render_node_sequence(self.sequence)

    def statistics_text(self) -> str:
        return render_statistics(self.sequence, self.statistics)

    def adjacency_text(self) -> str:
        return render_adjacency_table(self.edges)


@dataclass(frozen=True)
class OutputPaths:
    graph: Path
    statistics: Path
    table: Path
    sequence: Path

    @classmethod
    def in_directory(cls, directory: Path) -> "OutputPaths":
        return cls(
            graph=directory / "graph.dot",
            statistics=directory / "node_stats.txt",
            table=directory / "node_table.txt",
            sequence=directory / "node_sequence.txt",
        )


def analyse(
    addresses: Sequence[int],
    table: FunctionTable,
    *,
    graph_name: str = DEFAULT_GRAPH_NAME,
) -> AnalysisResult:
    sequence = reduce_trace(addresses, table)
    unique_functions = unique_in_order(sequence)
    statistics = annotate(sequence)
    edges = build_edges(sequence)
    graph = assemble(unique_functions, statistics, edges, name=graph_name)
    logger.info(
        "%d samples -> %d occurrences of %d distinct nodes",
        len(addresses),
        len(sequence),
        len(unique_functions),
    )
    for line in graph.summary_lines():
        logger.debug("%s", line)
    return AnalysisResult(
        table=table,
        sequence=sequence,
        unique_functions=unique_functions,
        statistics=statistics,
        edges=edges,
        graph=graph,
    )


def analyse_text(
    function_text: str,
    trace_text: str,
    *,
    separator: str = DEFAULT_SEPARATOR,
    graph_name: str = DEFAULT_GRAPH_NAME,
) -> AnalysisResult:
    """Parse both inputs before any analysis so a bad line aborts the run."""

    table = parse_function_table(function_text, separator=separator)
    addresses = parse_trace(trace_text)
    return analyse(addresses, table, graph_name=graph_name)


def analyse_files(
    function_path: Path,
    trace_path: Path,
    *,
    separator: str = DEFAULT_SEPARATOR,
    graph_name: str = DEFAULT_GRAPH_NAME,
) -> AnalysisResult:
    logger.info("reading functions from %s and trace from %s", function_path, trace_path)
    return analyse_text(
        function_path.read_text("utf-8"),
        trace_path.read_text("utf-8"),
        separator=separator,
        graph_name=graph_name,
    )


def write_outputs(result: AnalysisResult, paths: OutputPaths) -> OutputPaths:
    write_text(paths.sequence, result.node_sequence_text())
    write_text(paths.statistics, result.statistics_text())
    write_text(paths.table, result.adjacency_text())
    write_dot(result.graph, paths.graph)
    return paths


def default_outputs(trace_path: Path, output_dir: Optional[Path] = None) -> OutputPaths:
    return OutputPaths.in_directory(output_dir or trace_path.parent)
