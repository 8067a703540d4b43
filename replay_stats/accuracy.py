from __future__ import annotations

"""Per-play cut accuracy accumulation.

Only good cuts with a positive score count. Each average has its own count and
its own set of scoring types it skips: slider tails have no before-cut swing,
slider heads no after-cut swing, and burst pieces are kept out of the grid and
the center-distance averages.

Sums and quotients are kept in single precision, step by step, so cached
records stay bit-identical to the client's.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from . import config as rs_cfg
from .formulas import cut_scores, decode_note_id, f32, f32_div, grid_index, score_for_note
from .schemas import AccuracyTracker
from .types import NoteEvent, ScoringType, Side

_NO_BEFORE_CUT = frozenset({ScoringType.SLIDER_TAIL, ScoringType.BURST_SLIDER_ELEMENT})
_NO_CENTER = frozenset({ScoringType.BURST_SLIDER_HEAD, ScoringType.BURST_SLIDER_ELEMENT})
_NO_AFTER_CUT = frozenset(
    {ScoringType.SLIDER_HEAD, ScoringType.BURST_SLIDER_HEAD, ScoringType.BURST_SLIDER_ELEMENT}
)


def _add(total: float, value: float) -> float:
    return f32(total + f32(value))


@dataclass
class _SideSums:
    cut: List[float] = field(default_factory=lambda: [0.0] * rs_cfg.AVERAGE_CUT_SLOTS)
    counts: List[int] = field(default_factory=lambda: [0] * rs_cfg.AVERAGE_CUT_SLOTS)
    preswing: float = 0.0
    postswing: float = 0.0
    acc: float = 0.0
    time_dependence: float = 0.0

    def average_cut(self) -> tuple:
        return tuple(f32_div(s, c) for s, c in zip(self.cut, self.counts))


def accumulate_accuracy(notes: Iterable[NoteEvent]) -> AccuracyTracker:
    """Average the cut components of every positively scored note."""

    grid = [0.0] * rs_cfg.GRID_CELLS
    grid_counts = [0] * rs_cfg.GRID_CELLS
    left = _SideSums()
    right = _SideSums()

    for note in notes:
        params = decode_note_id(note.note_id)
        scoring_type = params.scoring_type
        value = score_for_note(note, scoring_type)
        if value <= 0:
            continue

        if scoring_type not in _NO_CENTER:
            idx = grid_index(params)
            grid[idx] = _add(grid[idx], value)
            grid_counts[idx] += 1

        before, after, center = cut_scores(note.cut_info, scoring_type)
        cut = note.cut_info
        side = left if params.side is Side.LEFT else right

        if scoring_type not in _NO_BEFORE_CUT:
            side.cut[0] = _add(side.cut[0], before)
            side.preswing = _add(side.preswing, cut.before_cut_rating)
            side.counts[0] += 1
        if scoring_type not in _NO_CENTER:
            side.cut[1] = _add(side.cut[1], center)
            side.acc = _add(side.acc, value)
            side.time_dependence = _add(side.time_dependence, abs(f32(cut.cut_normal.z)))
            side.counts[1] += 1
        if scoring_type not in _NO_AFTER_CUT:
            side.cut[2] = _add(side.cut[2], after)
            side.postswing = _add(side.postswing, cut.after_cut_rating)
            side.counts[2] += 1

    return AccuracyTracker(
        acc_left=f32_div(left.acc, left.counts[1]),
        acc_right=f32_div(right.acc, right.counts[1]),
        left_preswing=f32_div(left.preswing, left.counts[0]),
        right_preswing=f32_div(right.preswing, right.counts[0]),
        # Both hands pooled; older records carry 0 here.
        average_preswing=f32_div(_add(left.preswing, right.preswing), left.counts[0] + right.counts[0]),
        left_postswing=f32_div(left.postswing, left.counts[2]),
        right_postswing=f32_div(right.postswing, right.counts[2]),
        left_time_dependence=f32_div(left.time_dependence, left.counts[1]),
        right_time_dependence=f32_div(right.time_dependence, right.counts[1]),
        left_average_cut=left.average_cut(),
        right_average_cut=right.average_cut(),
        grid_acc=tuple(f32_div(s, c) for s, c in zip(grid, grid_counts)),
    )
