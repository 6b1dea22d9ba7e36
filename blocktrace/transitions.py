"""Empirical transition probabilities between function nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .functions import FunctionRecord

logger = logging.getLogger(__name__)


class EdgeMark(Enum):
    """Highlight applied to an edge; higher priority wins when several apply."""

    NONE = (0, None)
    UNIFORM = (1, "blue")
    MAX_FAVORED = (2, "green3")
    MIN_DISFAVORED = (2, "red1")
    SOLE_EDGE = (3, "gray")

    def __init__(self, priority: int, color: Optional[str]) -> None:
        self.priority = priority
        self.color = color


@dataclass(frozen=True)
class Edge:
    """Directed transition observed between two consecutive occurrences."""

    source: str
    target: str
    count: int
    probability: float
    mark: EdgeMark = EdgeMark.NONE

    @property
    def color(self) -> Optional[str]:
        return self.mark.color


def collect_successors(sequence: Sequence[FunctionRecord]) -> Dict[str, List[str]]:
    """Return the ordered successor multiset of every node in ``sequence``.

    Every distinct node gets an entry, including ``Exit`` whose list stays
    empty.
    """

    successors: Dict[str, List[str]] = {}
    for record in sequence:
        successors.setdefault(record.short_id, [])
    for current, following in zip(sequence, sequence[1:]):
        successors[current.short_id].append(following.short_id)
    return successors


def _group_successors(source: str, targets: Sequence[str]) -> List[Edge]:
    counts: Dict[str, int] = {}
    for target in targets:
        counts[target] = counts.get(target, 0) + 1
    total = len(targets)
    return [
        Edge(source=source, target=target, count=count, probability=count / total)
        for target, count in counts.items()
    ]


def _candidate_marks(edges: Sequence[Edge]) -> List[List[EdgeMark]]:
    candidates: List[List[EdgeMark]] = [[] for _ in edges]
    if not edges:
        return candidates

    if len(edges) == 1:
        candidates[0].append(EdgeMark.SOLE_EDGE)

    # Probabilities within one source share a denominator, so comparing the
    # raw counts is equivalent and free of rounding.
    counts = [edge.count for edge in edges]
    if all(count == counts[0] for count in counts):
        for marks in candidates:
            marks.append(EdgeMark.UNIFORM)
        return candidates

    highest = max(counts)
    if counts.count(highest) == 1:
        candidates[counts.index(highest)].append(EdgeMark.MAX_FAVORED)
    lowest = min(counts)
    if counts.count(lowest) == 1:
        candidates[counts.index(lowest)].append(EdgeMark.MIN_DISFAVORED)
    return candidates


def classify_edges(edges: Sequence[Edge]) -> List[Edge]:
    """Return ``edges`` with their highlight resolved.

    A source whose edges are all equally likely is uniform.  Otherwise a
    unique most likely edge is favoured and a unique least likely edge is
    disfavoured.  A lone outgoing edge is always marked as such.
    """

    classified: List[Edge] = []
    for edge, marks in zip(edges, _candidate_marks(edges)):
        mark = max(marks, key=lambda item: item.priority, default=EdgeMark.NONE)
        classified.append(replace(edge, mark=mark))
    return classified


def build_edges(sequence: Sequence[FunctionRecord]) -> Dict[str, List[Edge]]:
    """Map every distinct node to its classified outgoing edges."""

    edge_map: Dict[str, List[Edge]] = {}
    for source, targets in collect_successors(sequence).items():
        edge_map[source] = classify_edges(_group_successors(source, targets))
    logger.debug(
        "built %d edges across %d nodes",
        sum(len(edges) for edges in edge_map.values()),
        len(edge_map),
    )
    return edge_map


def outgoing_probability(edges: Sequence[Edge]) -> float:
    return sum(edge.probability for edge in edges)
