#!/usr/bin/env python3
"""Build an annotated call graph from a basic-block trace and a function list."""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from blocktrace import OutputPaths, analyse_files, write_outputs
from blocktrace.functions import DEFAULT_SEPARATOR
from blocktrace.graph import DEFAULT_GRAPH_NAME
from blocktrace.pipeline import default_outputs


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "functions",
        type=Path,
        help="Function list with one <name><sep><start><sep><length> record per line (hex)",
    )
    parser.add_argument(
        "trace",
        type=Path,
        help="Block trace with one hexadecimal block address per line",
    )
    parser.add_argument(
        "--separator",
        default=DEFAULT_SEPARATOR,
        help="Token separating the function list columns",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for all outputs (defaults to the trace file's directory)",
    )
    parser.add_argument(
        "--graph-out",
        type=Path,
        default=None,
        help="Override the default <output-dir>/graph.dot output path",
    )
    parser.add_argument(
        "--stats-out",
        type=Path,
        default=None,
        help="Override the default <output-dir>/node_stats.txt output path",
    )
    parser.add_argument(
        "--table-out",
        type=Path,
        default=None,
        help="Override the default <output-dir>/node_table.txt output path",
    )
    parser.add_argument(
        "--sequence-out",
        type=Path,
        default=None,
        help="Override the default <output-dir>/node_sequence.txt output path",
    )
    parser.add_argument(
        "--graph-name",
        default=DEFAULT_GRAPH_NAME,
        help="Name given to the emitted digraph",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log analysis progress to stderr",
    )
    return parser.parse_args()


def validate_inputs(*paths: Path) -> None:
    for path in paths:
        if not path.exists():
            raise SystemExit(f"missing input file: {path}")


def resolve_output_paths(args: argparse.Namespace) -> OutputPaths:
    defaults = default_outputs(args.trace, args.output_dir)
    return OutputPaths(
        graph=args.graph_out or defaults.graph,
        statistics=args.stats_out or defaults.statistics,
        table=args.table_out or defaults.table,
        sequence=args.sequence_out or defaults.sequence,
    )


def main() -> None:
    start_time = time.perf_counter()
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    validate_inputs(args.functions, args.trace)

    try:
        result = analyse_files(
            args.functions,
            args.trace,
            separator=args.separator,
            graph_name=args.graph_name,
        )
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc

    paths = write_outputs(result, resolve_output_paths(args))
    print(f"node sequence written to {paths.sequence}")
    print(f"node statistics written to {paths.statistics}")
    print(f"node table written to {paths.table}")
    print(f"graph written to {paths.graph}")
    print(result.statistics.describe())

    total_time = time.perf_counter() - start_time
    print(f"total execution time: {total_time:.2f}s")


if __name__ == "__main__":
    main()
