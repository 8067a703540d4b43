import pytest

from replay_stats.formulas import f32
from replay_stats.graph import replay_length_seconds, score_graph
from replay_stats.timeline import build_timeline
from replay_stats.types import ScoringType, TimelineEntry, WallEvent

from conftest import failed_note, good_note


def _entry(time, accuracy):
    return TimelineEntry(
        time=time,
        is_block=True,
        raw_score=0,
        scoring_type=ScoringType.NORMAL,
        multiplier=1,
        cumulative_score=0,
        combo=0,
        running_accuracy=accuracy,
    )


def test_buckets_average_and_carry_forward():
    notes = [good_note(0.5), good_note(1.5), good_note(2.5), failed_note(3.5)]
    sim = build_timeline(notes, [WallEvent(time=4.5)])
    graph = score_graph(sim.entries, 6)
    drop = 575 / 805
    assert graph == pytest.approx([1.0, 1.0, 1.0, drop, drop, drop])


def test_each_entry_lands_in_exactly_one_bucket():
    entries = [_entry(0.2, 0.9), _entry(0.7, 0.7), _entry(1.0, 0.5), _entry(1.99, 0.3)]
    assert score_graph(entries, 2) == pytest.approx([0.8, 0.4])


def test_empty_first_bucket_defaults_to_one():
    entries = [_entry(1.5, 0.6)]
    assert score_graph(entries, 3) == pytest.approx([1.0, 0.6, 0.6])


def test_zero_average_repeats_previous_bucket():
    entries = [_entry(0.5, 0.8), _entry(1.5, 0.0)]
    assert score_graph(entries, 2) == pytest.approx([0.8, 0.8])


def test_entries_after_the_last_bucket_are_dropped():
    entries = [_entry(0.5, 0.8), _entry(9.0, 0.1)]
    assert score_graph(entries, 2) == pytest.approx([0.8, 0.8])


def test_no_entries():
    assert score_graph([], 4) == [1.0, 1.0, 1.0, 1.0]
    assert score_graph([], 0) == []


@pytest.mark.parametrize(
    "last_time,expected",
    [(4.7, 4), (4.0, 4), (0.3, 0), (-2.5, 0), (float("nan"), 0), (float("inf"), 0)],
)
def test_replay_length_seconds(last_time, expected):
    assert replay_length_seconds(last_time) == expected


def test_bucket_sums_and_means_are_single_precision():
    entries = [_entry(0.1, f32(0.1)), _entry(0.2, f32(0.2)), _entry(0.3, f32(0.7))]
    expected = f32(f32(f32(f32(0.1) + f32(0.2)) + f32(0.7)) / 3)
    assert score_graph(entries, 1) == [expected]
