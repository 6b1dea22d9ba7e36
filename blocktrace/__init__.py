"""Public package exports for the block trace call-graph analyser."""

from .call_stats import CallStatistics, OutlierBand, annotate, mean_and_dispersion
from .dot import render_dot, write_dot
from .functions import (
    EXIT,
    START,
    AddressResolver,
    FunctionRecord,
    FunctionTable,
    ShortIdAllocator,
    parse_function_table,
)
from .graph import AbstractGraph, GraphEdge, GraphNode, assemble
from .pipeline import AnalysisResult, OutputPaths, analyse, analyse_files, analyse_text, write_outputs
from .trace import collapse_runs, parse_trace, reduce_trace
from .transitions import Edge, EdgeMark, build_edges

__all__ = [
    "AbstractGraph",
    "AddressResolver",
    "AnalysisResult",
    "CallStatistics",
    "Edge",
    "EdgeMark",
    "EXIT",
    "FunctionRecord",
    "FunctionTable",
    "GraphEdge",
    "GraphNode",
    "OutlierBand",
    "OutputPaths",
    "ShortIdAllocator",
    "START",
    "analyse",
    "analyse_files",
    "analyse_text",
    "annotate",
    "assemble",
    "build_edges",
    "collapse_runs",
    "mean_and_dispersion",
    "parse_function_table",
    "parse_trace",
    "reduce_trace",
    "render_dot",
    "write_dot",
    "write_outputs",
]
