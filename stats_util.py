"""Compatibility facade for score statistics.

The leaderboard service historically exposed two operations:
- per-score statistics, computed from an uploaded replay
- per-leaderboard statistics, averaged over every cached per-score statistic

This file keeps those call sites stable while delegating to the replay_stats
package. Storage stays on the caller's side: `fetch_by_id` is whatever reads a
cached statistic for one score id and returns ``None`` when it is missing.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, Union

from replay_stats import (
    Replay,
    ScoreStatistic,
    average_statistic_fetches,
    process_replay,
    replay_from_mapping,
)

__all__ = [
    "compute_score_statistic",
    "refresh_leaderboard_statistic",
]


def compute_score_statistic(replay: Union[Replay, Mapping[str, Any]]) -> ScoreStatistic:
    """Compute the statistic of one play from a `Replay` or a decoded replay mapping."""
    if not isinstance(replay, Replay):
        replay = replay_from_mapping(replay)
    return process_replay(replay)


def refresh_leaderboard_statistic(
    score_ids: Iterable[Any],
    fetch_by_id: Callable[[Any], Optional[ScoreStatistic]],
    *,
    max_workers: Optional[int] = None,
) -> ScoreStatistic:
    """Average the cached statistics of every score on a leaderboard.

    Raises:
        StatisticNotFoundError: when no score has a statistic.
    """

    def _fetch(score_id: Any) -> Callable[[], Optional[ScoreStatistic]]:
        return lambda: fetch_by_id(score_id)

    return average_statistic_fetches((_fetch(sid) for sid in score_ids), max_workers=max_workers)
