import json

import pydantic
import pytest

from replay_stats.schemas import (
    AveragePosition,
    ScoreStatistic,
    WinTracker,
    dump_statistic_json,
    load_statistic_json,
)
from replay_stats.service import process_replay
from replay_stats.types import Replay

from conftest import frames_until, good_note


def test_dump_uses_camel_case_keys():
    stat = process_replay(Replay(notes=(good_note(0.5),), frames=frames_until(2.0)))
    doc = json.loads(dump_statistic_json(stat))

    assert set(doc) == {"winTracker", "hitTracker", "accuracyTracker", "scoreGraphTracker"}
    assert doc["winTracker"]["nbOfPause"] == 0
    assert doc["winTracker"]["totalScore"] == 115
    assert set(doc["winTracker"]["averageHeadPosition"]) == {"x", "y", "z"}
    assert doc["hitTracker"]["leftBadCuts"] == 0
    assert len(doc["accuracyTracker"]["gridAcc"]) == 12
    assert doc["accuracyTracker"]["leftAverageCut"] == [70.0, 15.0, 30.0]
    assert doc["scoreGraphTracker"]["graph"] == [1.0, 1.0]


def test_dump_then_load_is_equal():
    stat = process_replay(Replay(notes=(good_note(0.5), good_note(1.5)), frames=frames_until(3.0)))
    assert load_statistic_json(dump_statistic_json(stat)) == stat


def test_load_tolerates_legacy_nulls():
    blob = json.dumps(
        {
            "winTracker": {"won": True, "endTime": 10.0, "nbOfPause": 2, "averageHeadPosition": None},
            "hitTracker": {"maxCombo": 5},
            "accuracyTracker": {"gridAcc": None, "leftAverageCut": [1.0, 2.0, 3.0]},
            "scoreGraphTracker": {"graph": None},
        }
    )
    stat = load_statistic_json(blob.encode("utf-8"))
    assert stat.win_tracker.nb_of_pause == 2
    assert stat.win_tracker.average_head_position == AveragePosition()
    assert stat.accuracy_tracker.grid_acc == ()
    assert stat.accuracy_tracker.left_average_cut == (1.0, 2.0, 3.0)
    assert stat.score_graph_tracker.graph == ()
    assert stat.hit_tracker.max_combo == 5


def test_statistics_are_frozen():
    stat = ScoreStatistic(win_tracker=WinTracker(total_score=3))
    with pytest.raises(pydantic.ValidationError):
        stat.win_tracker.total_score = 4
