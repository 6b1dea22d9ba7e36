"""Call-count statistics and outlier classification for reduced traces."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .functions import FunctionRecord

logger = logging.getLogger(__name__)


class OutlierBand(Enum):
    """How far a node's call count lies from the mean."""

    HIGH_2 = ("high-2σ", "2 STDEV more than AVG", "green4")
    HIGH_1 = ("high-1σ", "1 STDEV more than AVG", "olivedrab")
    LOW_2 = ("low-2σ", "2 STDEV less than AVG", "red1")
    LOW_1 = ("low-1σ", "1 STDEV less than AVG", "red4")

    def __init__(self, label: str, phrase: str, color: str) -> None:
        self.label = label
        self.phrase = phrase
        self.color = color


BandPredicate = Callable[[float, float, float], bool]

# Evaluated top to bottom; the first matching predicate decides the band.
BAND_RULES: Tuple[Tuple[BandPredicate, OutlierBand], ...] = (
    (lambda calls, mean, dispersion: calls > mean + 2 * dispersion, OutlierBand.HIGH_2),
    (lambda calls, mean, dispersion: calls > mean + 1 * dispersion, OutlierBand.HIGH_1),
    (lambda calls, mean, dispersion: calls < mean - 2 * dispersion, OutlierBand.LOW_2),
    (lambda calls, mean, dispersion: calls < mean - 1 * dispersion, OutlierBand.LOW_1),
)


def count_calls(sequence: Iterable[FunctionRecord]) -> Dict[str, int]:
    """Count occurrences per short id, keyed in first-occurrence order."""

    counts: Dict[str, int] = {}
    for record in sequence:
        counts[record.short_id] = counts.get(record.short_id, 0) + 1
    return counts


def mean_and_dispersion(values: Sequence[float]) -> Tuple[float, float]:
    """Return ``(mean, dispersion)`` for the supplied call counts.

    The dispersion is ``sqrt(sum(v**2) / (n - 1) - mean**2)``.  This is not the
    textbook sample standard deviation (the values are never centred before
    squaring) but it is what previously published reports were generated
    with, so it is reproduced exactly.
    """

    count = len(values)
    if count < 2:
        raise ValueError(
            f"dispersion needs at least two distinct nodes, got {count}"
        )
    mean = sum(float(value) for value in values) / count
    sum_of_squares = 0.0
    for value in values:
        sum_of_squares += float(value) * float(value)
    return mean, math.sqrt(sum_of_squares / (count - 1) - mean * mean)


def classify(calls: float, mean: float, dispersion: float) -> Optional[OutlierBand]:
    for predicate, band in BAND_RULES:
        if predicate(calls, mean, dispersion):
            return band
    return None


@dataclass
class CallStatistics:
    """Per-node call counts together with their distribution summary."""

    calls: Dict[str, int]
    mean: float
    dispersion: float
    bands: Dict[str, OutlierBand] = field(default_factory=dict)

    def band_for(self, short_id: str) -> Optional[OutlierBand]:
        return self.bands.get(short_id)

    def calls_for(self, short_id: str) -> int:
        return self.calls.get(short_id, 0)

    def outliers(self) -> List[str]:
        return [short_id for short_id in self.calls if short_id in self.bands]

    def describe(self) -> str:
        return (
            f"nodes={len(self.calls)} mean={self.mean:.3f}"
            f" dispersion={self.dispersion:.3f} outliers={len(self.bands)}"
        )

    def to_dict(self) -> dict:
        return {
            "mean": self.mean,
            "dispersion": self.dispersion,
            "nodes": [
                {
                    "id": short_id,
                    "calls": calls,
                    "band": self.bands[short_id].label if short_id in self.bands else None,
                }
                for short_id, calls in self.calls.items()
            ],
        }


def annotate(sequence: Sequence[FunctionRecord]) -> CallStatistics:
    """Count calls for every distinct node and flag the statistical outliers.

    Boundary nodes take part like any other node.
    """

    calls = count_calls(sequence)
    mean, dispersion = mean_and_dispersion(list(calls.values()))
    bands: Dict[str, OutlierBand] = {}
    for short_id, count in calls.items():
        band = classify(count, mean, dispersion)
        if band is not None:
            bands[short_id] = band
    statistics = CallStatistics(calls=calls, mean=mean, dispersion=dispersion, bands=bands)
    logger.debug("call statistics: %s", statistics.describe())
    return statistics
