from __future__ import annotations

"""Cross-replay averaging.

Reduces many per-play `ScoreStatistic` records to one leaderboard-wide record.

- Missing inputs (``None``) are skipped; if nothing is left the reduction fails
  with `StatisticNotFoundError` instead of returning zeros.
- Sequences (grid accuracy, average cuts, score graph) are averaged position by
  position. A position is divided by the number of inputs that reach it, so a
  short play does not drag down the tail of a long one.
- The reduction runs in input order. Fetch completion order never changes the
  result.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional, Sequence

from . import config as rs_cfg
from .errors import STATISTIC_NOT_FOUND, StatisticNotFoundError
from .formulas import f32, f32_div, f32_mean
from .schemas import (
    AccuracyTracker,
    AveragePosition,
    HitTracker,
    ScoreGraphTracker,
    ScoreStatistic,
    WinTracker,
)

logger = logging.getLogger(__name__)

StatisticFetch = Callable[[], Optional[ScoreStatistic]]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / (len(values) if values else 1)


def _mean_rounded(values: Sequence[float]) -> int:
    return int(round(_mean(values)))


def average_list(sequences: Sequence[Sequence[float]]) -> List[float]:
    """Position-wise single precision mean up to the longest sequence."""
    length = max((len(s) for s in sequences), default=0)
    out: List[float] = []
    for i in range(length):
        total = 0.0
        count = 0
        for seq in sequences:
            if i < len(seq):
                total = f32(total + f32(seq[i]))
                count += 1
        out.append(f32_div(total, count) if count > 0 else 0.0)
    return out


def _average_win(stats: Sequence[ScoreStatistic]) -> WinTracker:
    wins = [st.win_tracker for st in stats]
    return WinTracker(
        won=_mean([1.0 if w.won else 0.0 for w in wins]) > rs_cfg.WIN_RATIO_THRESHOLD,
        end_time=f32_mean([w.end_time for w in wins]),
        nb_of_pause=_mean_rounded([w.nb_of_pause for w in wins]),
        jump_distance=f32_mean([w.jump_distance for w in wins]),
        average_height=f32_mean([w.average_height for w in wins]),
        average_head_position=AveragePosition(
            x=f32_mean([w.average_head_position.x for w in wins]),
            y=f32_mean([w.average_head_position.y for w in wins]),
            z=f32_mean([w.average_head_position.z for w in wins]),
        ),
        # Truncated, not rounded.
        total_score=int(_mean([w.total_score for w in wins])),
    )


def _average_hits(stats: Sequence[ScoreStatistic]) -> HitTracker:
    hits = [st.hit_tracker for st in stats]
    return HitTracker(
        max_combo=_mean_rounded([h.max_combo for h in hits]),
        left_miss=_mean_rounded([h.left_miss for h in hits]),
        right_miss=_mean_rounded([h.right_miss for h in hits]),
        left_bad_cuts=_mean_rounded([h.left_bad_cuts for h in hits]),
        right_bad_cuts=_mean_rounded([h.right_bad_cuts for h in hits]),
        left_bombs=_mean_rounded([h.left_bombs for h in hits]),
        right_bombs=_mean_rounded([h.right_bombs for h in hits]),
    )


_ACCURACY_SCALARS = (
    "acc_right",
    "acc_left",
    "left_preswing",
    "right_preswing",
    "average_preswing",
    "left_postswing",
    "right_postswing",
    "left_time_dependence",
    "right_time_dependence",
)


def _average_accuracy(stats: Sequence[ScoreStatistic]) -> AccuracyTracker:
    accs = [st.accuracy_tracker for st in stats]
    scalars = {key: f32_mean([getattr(a, key) for a in accs]) for key in _ACCURACY_SCALARS}
    return AccuracyTracker(
        left_average_cut=tuple(average_list([a.left_average_cut for a in accs])),
        right_average_cut=tuple(average_list([a.right_average_cut for a in accs])),
        grid_acc=tuple(average_list([a.grid_acc for a in accs])),
        **scalars,
    )


def average_statistics(statistics: Iterable[Optional[ScoreStatistic]]) -> ScoreStatistic:
    """Average the present statistics into one record.

    Raises:
        StatisticNotFoundError: when every input is absent.
    """

    stats = [st for st in statistics if st is not None]
    if not stats:
        logger.warning("average_statistics: no statistics to aggregate")
        raise StatisticNotFoundError(STATISTIC_NOT_FOUND, "no score statistics available to average")

    return ScoreStatistic(
        win_tracker=_average_win(stats),
        hit_tracker=_average_hits(stats),
        accuracy_tracker=_average_accuracy(stats),
        score_graph_tracker=ScoreGraphTracker(
            graph=tuple(average_list([st.score_graph_tracker.graph for st in stats]))
        ),
    )


def fetch_statistics(
    fetches: Iterable[StatisticFetch],
    *,
    max_workers: Optional[int] = None,
) -> List[Optional[ScoreStatistic]]:
    """Run every fetch on a bounded pool and return outcomes in input order.

    A fetch that raises is logged and reported as ``None``.
    """

    jobs = list(fetches)
    if not jobs:
        return []
    workers = int(max_workers) if max_workers is not None else rs_cfg.fetch_workers()
    workers = max(1, min(workers, len(jobs)))

    results: List[Optional[ScoreStatistic]] = [None] * len(jobs)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="stat-fetch") as ex:
        futs = {ex.submit(job): i for i, job in enumerate(jobs)}
        for fut in as_completed(futs):
            i = futs[fut]
            try:
                results[i] = fut.result()
            except Exception:
                logger.warning("fetch_statistics: fetch #%s failed; treating as absent", i, exc_info=True)
                results[i] = None

    absent = sum(1 for r in results if r is None)
    if absent:
        logger.debug("fetch_statistics: %s of %s statistics absent", absent, len(results))
    return results


def average_statistic_fetches(
    fetches: Iterable[StatisticFetch],
    *,
    max_workers: Optional[int] = None,
) -> ScoreStatistic:
    """Fetch every per-play statistic concurrently, then average the ones found."""
    return average_statistics(fetch_statistics(fetches, max_workers=max_workers))
