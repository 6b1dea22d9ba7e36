import math
import statistics

import pytest

from blocktrace.call_stats import (
    BAND_RULES,
    OutlierBand,
    annotate,
    classify,
    count_calls,
    mean_and_dispersion,
)
from blocktrace.functions import EXIT, START, FunctionRecord


def _record(short_id):
    return FunctionRecord(short_id, f"fn_{short_id}", 0, 0)


def test_dispersion_uses_uncentred_sum_of_squares():
    mean, dispersion = mean_and_dispersion([10, 10, 10, 50])

    assert mean == 20.0
    assert dispersion == math.sqrt(2800 / 3 - 400)
    assert dispersion != pytest.approx(statistics.stdev([10, 10, 10, 50]))


def test_fifty_call_node_lands_in_a_high_band():
    mean, dispersion = mean_and_dispersion([10, 10, 10, 50])

    assert classify(50, mean, dispersion) is OutlierBand.HIGH_1
    assert classify(10, mean, dispersion) is None


@pytest.mark.parametrize("values", [[], [7]])
def test_dispersion_needs_two_values(values):
    with pytest.raises(ValueError, match="at least two"):
        mean_and_dispersion(values)


@pytest.mark.parametrize(
    "calls,expected",
    [
        (25, OutlierBand.HIGH_2),
        (15, OutlierBand.HIGH_1),
        (-25, OutlierBand.LOW_2),
        (-15, OutlierBand.LOW_1),
        (5, None),
        (10, None),
        (-10, None),
    ],
)
def test_classify_follows_band_priority(calls, expected):
    assert classify(calls, 0.0, 10.0) is expected


def test_band_rules_are_ordered_high_before_low():
    assert [band for _, band in BAND_RULES] == [
        OutlierBand.HIGH_2,
        OutlierBand.HIGH_1,
        OutlierBand.LOW_2,
        OutlierBand.LOW_1,
    ]


def test_count_calls_keeps_first_occurrence_order():
    a, b = _record("1"), _record("2")

    counts = count_calls([START, a, b, a, EXIT])

    assert list(counts) == ["Start", "1", "2", "Exit"]
    assert counts["1"] == 2


def test_annotate_flags_hot_node():
    hub = _record("1")
    leaves = [_record(str(index)) for index in range(2, 6)]
    sequence = [START]
    for leaf in leaves:
        sequence.extend([hub, leaf])
    sequence.extend([hub, EXIT])

    result = annotate(sequence)

    assert result.calls_for("1") == 5
    assert result.calls_for("Start") == 1
    assert result.mean == pytest.approx(11 / 7)
    assert result.dispersion == pytest.approx(math.sqrt(31 / 6 - (11 / 7) ** 2))
    assert result.band_for("1") is OutlierBand.HIGH_2
    assert result.outliers() == ["1"]
    assert result.band_for("2") is None


def test_statistics_to_dict_lists_every_node():
    a = _record("1")

    payload = annotate([START, a, EXIT]).to_dict()

    assert [node["id"] for node in payload["nodes"]] == ["Start", "1", "Exit"]
    assert all(node["band"] is None for node in payload["nodes"])


def test_band_metadata():
    assert OutlierBand.HIGH_2.color == "green4"
    assert OutlierBand.LOW_1.phrase == "1 STDEV less than AVG"
