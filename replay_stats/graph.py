from __future__ import annotations

from typing import List, Sequence

from . import config as rs_cfg
from .formulas import f32, f32_div
from .types import TimelineEntry


def replay_length_seconds(last_frame_time: float) -> int:
    """Whole seconds covered by a play whose last frame is at ``last_frame_time``."""
    try:
        n = int(last_frame_time)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, n)


def score_graph(entries: Sequence[TimelineEntry], length: int) -> List[float]:
    """Resample running accuracy to one value per second.

    Bucket ``i`` averages the entries not taken by an earlier bucket whose time
    is below ``i + 1``. A bucket that comes out as 0 (nothing in it) repeats the
    previous bucket; the first one falls back to 1.0. Sums and quotients are
    single precision.
    """

    graph = [0.0] * max(0, int(length))
    pos = 0
    for i in range(len(graph)):
        total = 0.0
        count = 0
        while pos < len(entries) and entries[pos].time < i + 1:
            total = f32(total + entries[pos].running_accuracy)
            pos += 1
            count += 1
        if count > 0:
            graph[i] = f32_div(total, count)
        if graph[i] == 0:
            graph[i] = rs_cfg.SCORE_GRAPH_DEFAULT if i == 0 else graph[i - 1]
    return graph
