import threading

import pytest

from replay_stats.averaging import (
    average_list,
    average_statistic_fetches,
    average_statistics,
    fetch_statistics,
)
from replay_stats import config as rs_cfg
from replay_stats.errors import STATISTIC_NOT_FOUND, StatisticNotFoundError
from replay_stats.formulas import f32
from replay_stats.schemas import (
    AccuracyTracker,
    AveragePosition,
    HitTracker,
    ScoreGraphTracker,
    ScoreStatistic,
    WinTracker,
)


def _stat(*, won=True, total_score=1000, max_combo=10, left_miss=0, graph=(1.0, 0.9, 0.8), grid=None, acc_left=110.0):
    return ScoreStatistic(
        win_tracker=WinTracker(
            won=won,
            end_time=120.5,
            nb_of_pause=1,
            jump_distance=18.0,
            average_height=1.7,
            average_head_position=AveragePosition(x=0.1, y=1.6, z=-0.2),
            total_score=total_score,
        ),
        hit_tracker=HitTracker(max_combo=max_combo, left_miss=left_miss, right_bombs=2),
        accuracy_tracker=AccuracyTracker(
            acc_left=acc_left,
            acc_right=108.0,
            left_preswing=0.95,
            right_preswing=0.9,
            average_preswing=0.925,
            left_postswing=0.8,
            right_postswing=0.85,
            left_time_dependence=0.1,
            right_time_dependence=0.2,
            left_average_cut=(68.0, 14.0, 29.0),
            right_average_cut=(67.0, 13.5, 28.0),
            grid_acc=grid if grid is not None else tuple(100.0 + i for i in range(12)),
        ),
        score_graph_tracker=ScoreGraphTracker(graph=graph),
    )


def test_average_list_is_position_wise():
    assert average_list([[1.0, 1.0, 1.0], [0.5, 0.5, 0.5, 0.5, 0.5]]) == pytest.approx(
        [0.75, 0.75, 0.75, 0.5, 0.5]
    )
    assert average_list([]) == []
    assert average_list([[], []]) == []


def test_graphs_of_different_length():
    short = _stat(graph=(1.0, 1.0, 1.0))
    long = _stat(graph=(0.5, 0.5, 0.5, 0.5, 0.5))
    avg = average_statistics([short, long])
    assert avg.score_graph_tracker.graph == pytest.approx((0.75, 0.75, 0.75, 0.5, 0.5))


def test_averaging_copies_of_one_statistic_is_idempotent():
    stat = _stat()
    avg = average_statistics([stat] * 5)

    assert avg.win_tracker.won == stat.win_tracker.won
    assert avg.win_tracker.total_score == stat.win_tracker.total_score
    assert avg.win_tracker.nb_of_pause == stat.win_tracker.nb_of_pause
    assert avg.win_tracker.end_time == pytest.approx(stat.win_tracker.end_time)
    assert avg.win_tracker.average_head_position.z == pytest.approx(-0.2)
    assert avg.hit_tracker == stat.hit_tracker

    a, b = avg.accuracy_tracker, stat.accuracy_tracker
    for key in ("acc_left", "acc_right", "average_preswing", "left_postswing", "right_time_dependence"):
        assert getattr(a, key) == pytest.approx(getattr(b, key))
    assert a.grid_acc == pytest.approx(b.grid_acc)
    assert a.left_average_cut == pytest.approx(b.left_average_cut)
    assert avg.score_graph_tracker.graph == pytest.approx(stat.score_graph_tracker.graph)


def test_scalar_rounding_rules():
    avg = average_statistics(
        [
            _stat(total_score=1001, max_combo=3, left_miss=1),
            _stat(total_score=1002, max_combo=4, left_miss=2),
        ]
    )
    # mean 1001.5 truncates; 3.5 and 1.5 round half to even
    assert avg.win_tracker.total_score == 1001
    assert avg.hit_tracker.max_combo == 4
    assert avg.hit_tracker.left_miss == 2
    assert avg.accuracy_tracker.acc_left == pytest.approx(110.0)


@pytest.mark.parametrize(
    "flags,expected",
    [((True, True, False), True), ((True, False), False), ((False, False, True), False), ((True,), True)],
)
def test_won_needs_a_strict_majority(flags, expected):
    avg = average_statistics([_stat(won=w) for w in flags])
    assert avg.win_tracker.won is expected


def test_absent_statistics_are_skipped():
    stat = _stat(total_score=900)
    avg = average_statistics([None, stat, None])
    assert avg.win_tracker.total_score == 900


def test_all_absent_is_an_error():
    with pytest.raises(StatisticNotFoundError) as ei:
        average_statistics([None, None])
    assert ei.value.code == STATISTIC_NOT_FOUND

    with pytest.raises(StatisticNotFoundError):
        average_statistics([])


def test_fetch_failures_count_as_absent():
    def boom():
        raise OSError("blob unavailable")

    fetches = [lambda: _stat(total_score=800), boom, lambda: None, lambda: _stat(total_score=1000)]
    results = fetch_statistics(fetches, max_workers=2)
    assert [r is None for r in results] == [False, True, True, False]

    avg = average_statistic_fetches(fetches, max_workers=2)
    assert avg.win_tracker.total_score == 900


def test_fetch_results_keep_input_order():
    gate = threading.Event()

    def slow():
        gate.wait(timeout=5)
        return _stat(total_score=1)

    def fast():
        gate.set()
        return _stat(total_score=2)

    results = fetch_statistics([slow, fast], max_workers=2)
    assert [r.win_tracker.total_score for r in results] == [1, 2]


def test_all_fetches_failing_raises():
    with pytest.raises(StatisticNotFoundError):
        average_statistic_fetches([lambda: None, lambda: None])
    assert fetch_statistics([]) == []


@pytest.mark.parametrize("raw,expected", [("abc", 8), ("", 8), ("0", 1), ("-3", 1), ("4", 4), (" 6 ", 6)])
def test_fetch_workers_setting(monkeypatch, raw, expected):
    monkeypatch.setenv("REPLAY_STATS_FETCH_WORKERS", raw)
    assert rs_cfg.fetch_workers() == expected


def test_fetch_pool_honors_worker_setting(monkeypatch):
    monkeypatch.setenv("REPLAY_STATS_FETCH_WORKERS", "1")
    names = []

    def job():
        names.append(threading.current_thread().name)
        return _stat()

    results = fetch_statistics([job, job, job])
    assert len(results) == 3
    assert len(set(names)) == 1
    assert names[0].startswith("stat-fetch")


def test_sequence_means_are_single_precision():
    assert average_list([[0.1, 0.5], [0.2]]) == [f32(f32(f32(0.1) + f32(0.2)) / 2), 0.5]
