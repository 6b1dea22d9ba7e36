"""Plain-text reports: occurrence order, call statistics, adjacency table."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Sequence

from .call_stats import CallStatistics
from .functions import FunctionRecord
from .graph import format_probability
from .trace import unique_in_order
from .transitions import Edge


def format_number(value: float) -> str:
    if value != value:  # nan
        return "nan"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def render_node_sequence(sequence: Sequence[FunctionRecord]) -> str:
    return "".join(f"{record.short_id}\n" for record in sequence)


def render_statistics(
    sequence: Sequence[FunctionRecord],
    statistics: CallStatistics,
) -> str:
    """Summary line, one call-count line per node, then the outlier notes."""

    unique = unique_in_order(sequence)
    lines: List[str] = [
        f"Average calls: {format_number(statistics.mean)},"
        f" standard deviation: {format_number(statistics.dispersion)}"
    ]
    for record in unique:
        lines.append(
            f"Node nr. {record.short_id} ({record.name}),"
            f" called count: {statistics.calls_for(record.short_id)}"
        )
    for record in unique:
        band = statistics.band_for(record.short_id)
        if band is None:
            continue
        lines.append(f"Node nr. {record.short_id} ({record.name}), is called {band.phrase}.")
    return "\n".join(lines) + "\n"


def render_adjacency_table(edge_map: Mapping[str, Sequence[Edge]]) -> str:
    lines: List[str] = []
    for source, edges in edge_map.items():
        lines.append(source)
        lines.append(
            "".join(f"{edge.target} {format_probability(edge.probability)} " for edge in edges)
        )
    return "\n".join(lines) + "\n" if lines else ""


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, "utf-8")
    return path
