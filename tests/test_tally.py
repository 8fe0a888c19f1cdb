from __future__ import annotations

import math
import random

import pytest

from tweet_sentiment.errors import UnknownLabelError
from tweet_sentiment.evaluation.tally import AccuracyReport, AccuracyTally, aggregate, tally_records
from tweet_sentiment.labels import Label
from tweet_sentiment.schemas import EvaluatedRecord


def _record(actual: Label, predicted: Label, text: str = "tweet") -> EvaluatedRecord:
    return EvaluatedRecord(actual_label=actual, predicted_label=predicted, text=text)


def _random_records(count: int, seed: int):
    rng = random.Random(seed)
    labels = [Label.HAPPY, Label.SAD]
    return [_record(rng.choice(labels), rng.choice(labels), f"t{i}") for i in range(count)]


def test_perfect_predictions(validation_set):
    records = [_record(item.label, item.label, item.text) for item in validation_set]

    tally = aggregate(records)

    assert tally == AccuracyTally(happy_correct=2, happy_total=2, sad_correct=2, sad_total=2)
    assert tally.test_error == 0.0
    assert tally.happy_accuracy == 1.0
    assert tally.sad_accuracy == 1.0


def test_each_cell_of_the_matrix():
    records = [
        _record(Label.HAPPY, Label.HAPPY),
        _record(Label.HAPPY, Label.SAD),
        _record(Label.SAD, Label.HAPPY),
        _record(Label.SAD, Label.SAD),
        _record(Label.SAD, Label.SAD),
    ]

    tally = aggregate(records)

    assert tally.as_tuple() == (1, 2, 2, 3)
    assert tally.test_error == pytest.approx(2 / 5)
    assert tally.happy_accuracy == 0.5
    assert tally.sad_accuracy == pytest.approx(2 / 3)


def test_empty_collection_is_all_zero():
    tally = aggregate([])

    assert tally == AccuracyTally.zero()
    assert tally.as_tuple() == (0, 0, 0, 0)
    assert math.isnan(tally.happy_accuracy)
    assert math.isnan(tally.sad_accuracy)
    assert math.isnan(tally.test_error)


def test_missing_class_is_undefined_not_zero():
    tally = aggregate([_record(Label.HAPPY, Label.HAPPY)])

    assert tally.happy_accuracy == 1.0
    assert math.isnan(tally.sad_accuracy)
    assert tally.test_error == 0.0


@pytest.mark.parametrize("seed", range(5))
def test_combine_over_any_partition_matches_whole(seed):
    records = _random_records(300, seed)
    cut = random.Random(seed).randint(0, len(records))
    left, right = records[:cut], records[cut:]

    whole = aggregate(records)

    assert aggregate(left) + aggregate(right) == whole
    assert aggregate(right) + aggregate(left) == whole


def test_combine_is_associative_with_identity():
    a, b, c = (tally_records(_random_records(50, seed)) for seed in (1, 2, 3))

    assert (a + b) + c == a + (b + c)
    assert a + AccuracyTally.zero() == a
    assert AccuracyTally.zero() + a == a


@pytest.mark.parametrize("chunk_size,num_workers", [(1, 1), (7, 3), (64, 4), (10000, 2)])
def test_chunking_and_workers_do_not_change_the_tally(chunk_size, num_workers):
    records = _random_records(500, 9)

    assert aggregate(records, num_workers=num_workers, chunk_size=chunk_size) == tally_records(records)


@pytest.mark.parametrize(
    "record",
    [
        EvaluatedRecord(actual_label="NEUTRAL", predicted_label=Label.HAPPY, text="x"),
        EvaluatedRecord(actual_label=Label.SAD, predicted_label=2.0, text="x"),
        EvaluatedRecord(actual_label=Label.SAD, predicted_label=None, text="x"),
    ],
)
def test_unknown_labels_abort_the_pass(record):
    records = _random_records(10, 0) + [record]

    with pytest.raises(UnknownLabelError):
        aggregate(records)


def test_failed_records_count_as_incorrect():
    records = [
        _record(Label.HAPPY, Label.HAPPY),
        EvaluatedRecord(actual_label=Label.HAPPY, predicted_label=None, text="x", failed=True),
        EvaluatedRecord(actual_label=Label.SAD, predicted_label=None, text="y", failed=True),
    ]

    tally = aggregate(records)

    assert tally.as_tuple() == (1, 2, 0, 1)
    assert tally.test_error == pytest.approx(2 / 3)


@pytest.mark.parametrize("values", [(-1, 0, 0, 0), (3, 2, 0, 0), (0, 0, 1, 0)])
def test_tally_invariants_are_enforced(values):
    with pytest.raises(ValueError):
        AccuracyTally(*values)


def test_report_summary_surfaces_dropped_records():
    report = AccuracyReport("GradientBoosting", AccuracyTally(1, 1, 0, 0), dropped=3)

    summary = report.summary()

    assert summary["dropped"] == 3
    assert summary["data_size"] == 1
    assert summary["happy_accuracy"] == 1.0
    assert math.isnan(summary["sad_accuracy"])
    report.log()
