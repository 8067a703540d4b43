from __future__ import annotations

"""Scoring formulas (SSOT).

This module contains the *pure* math of the replay statistics engine:
note id unpacking, per-note cut scores, and the weights of the maximum score
track.

Design goals
------------
- **Client parity**: reproduce the game's scoring exactly. Swing products and
  the distance ratio are evaluated in single precision, and rounding is
  half-to-even, as in the client.
- **Total**: every integer decodes to some ``NoteParams`` and every event gets a
  score. Nothing here raises on odd input.
- **Deterministic**: no random, no wall-clock.
"""

import math
import struct
from typing import Tuple

from . import config as rs_cfg
from .types import CutInfo, NoteEvent, NoteEventType, NoteParams, ScoringType

_F32 = struct.Struct("<f")


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


def f32(x: float) -> float:
    """Round ``x`` to the nearest single precision value."""
    try:
        return _F32.unpack(_F32.pack(float(x)))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def f32_div(total: float, count: float) -> float:
    """Single precision ``total / count``; a zero count divides by 1."""
    return f32(f32(total) / f32(count if count else 1))


def f32_mean(values) -> float:
    """Mean accumulated in double, stored as single precision."""
    values = list(values)
    if not values:
        return 0.0
    return f32(sum(values) / len(values))


def _round_int(x: float) -> int:
    # Half-to-even; NaN scores nothing.
    if math.isnan(x):
        return 0
    return int(round(x))


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp ``x`` to the inclusive range [lo, hi]."""
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def clamp01(x: float) -> float:
    return clamp(x, 0.0, 1.0)


def _tdiv(a: int, b: int) -> int:
    # Integer division truncating toward zero.
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _scoring_type(value: int) -> ScoringType:
    try:
        return ScoringType(value)
    except ValueError:
        return ScoringType.DEFAULT


# ---------------------------------------------------------------------------
# Note id packing
# ---------------------------------------------------------------------------


def decode_note_id(note_id: int) -> NoteParams:
    """Unpack a note id into its scoring type, grid position, color and direction.

    Ids below 100000 pack every field as one decimal digit. Larger ids give
    scoring type, line index and line layer the wide place values; color and
    cut direction always share the last group as ``colorType * 10 + cutDirection``.
    """
    rest = int(note_id)
    if rest < rs_cfg.NOTE_ID_WIDE_THRESHOLD:
        st_place, li_place, ll_place = rs_cfg.NOTE_ID_SHORT_PLACES
    else:
        st_place, li_place, ll_place = rs_cfg.NOTE_ID_WIDE_PLACES

    raw_type = _tdiv(rest, st_place)
    rest -= raw_type * st_place

    line_index = _tdiv(rest, li_place)
    rest -= line_index * li_place

    line_layer = _tdiv(rest, ll_place)
    rest -= line_layer * ll_place

    color_type = _tdiv(rest, rs_cfg.NOTE_ID_COLOR_PLACE)
    cut_direction = rest - color_type * rs_cfg.NOTE_ID_COLOR_PLACE

    return NoteParams(
        scoring_type=_scoring_type(raw_type),
        line_index=line_index,
        line_layer=line_layer,
        color_type=color_type,
        cut_direction=cut_direction,
    )


def encode_note_id(params: NoteParams, *, wide: bool = False) -> int:
    """Pack ``params`` back into a note id (inverse of :func:`decode_note_id`)."""
    places = rs_cfg.NOTE_ID_WIDE_PLACES if wide else rs_cfg.NOTE_ID_SHORT_PLACES
    st_place, li_place, ll_place = places
    return (
        int(params.scoring_type) * st_place
        + int(params.line_index) * li_place
        + int(params.line_layer) * ll_place
        + int(params.color_type) * rs_cfg.NOTE_ID_COLOR_PLACE
        + int(params.cut_direction)
    )


def grid_index(params: NoteParams) -> int:
    """Cell of the 4x3 accuracy grid; out-of-range positions land in cell 0."""
    index = params.line_layer * rs_cfg.GRID_COLUMNS + params.line_index
    if index < 0 or index >= rs_cfg.GRID_CELLS:
        return 0
    return index


# ---------------------------------------------------------------------------
# Cut scores
# ---------------------------------------------------------------------------


def _rounded_swing(max_points: int, rating: float) -> int:
    raw = clamp(f32(max_points * f32(rating)), 0.0, float(max_points))
    return _round_int(raw)


def cut_scores(cut: CutInfo, scoring_type: ScoringType) -> Tuple[int, int, int]:
    """Return ``(before_cut, after_cut, center_distance)`` raw scores for a good cut."""

    if scoring_type == ScoringType.BURST_SLIDER_ELEMENT:
        before = 0
    elif scoring_type == ScoringType.SLIDER_TAIL:
        before = rs_cfg.BEFORE_CUT_MAX
    else:
        before = _rounded_swing(rs_cfg.BEFORE_CUT_MAX, cut.before_cut_rating)

    if scoring_type in (ScoringType.BURST_SLIDER_ELEMENT, ScoringType.BURST_SLIDER_HEAD):
        after = 0
    elif scoring_type == ScoringType.SLIDER_HEAD:
        after = rs_cfg.AFTER_CUT_MAX
    else:
        after = _rounded_swing(rs_cfg.AFTER_CUT_MAX, cut.after_cut_rating)

    if scoring_type == ScoringType.BURST_SLIDER_ELEMENT:
        center = rs_cfg.BURST_ELEMENT_CENTER_SCORE
    else:
        ratio = f32(f32(cut.cut_distance_to_center) / f32(rs_cfg.CENTER_DISTANCE_RANGE))
        closeness = f32(1.0 - clamp01(ratio))
        center = _round_int(rs_cfg.CENTER_DISTANCE_MAX * closeness)

    return before, after, center


def score_for_note(note: NoteEvent, scoring_type: ScoringType) -> int:
    """Signed raw score of one note event (before the multiplier)."""
    event_type = note.event_type
    if event_type == NoteEventType.GOOD:
        before, after, center = cut_scores(note.cut_info, scoring_type)
        return before + after + center
    if event_type == NoteEventType.BAD:
        return rs_cfg.BAD_CUT_SCORE
    if event_type == NoteEventType.MISS:
        return rs_cfg.MISS_SCORE
    if event_type == NoteEventType.BOMB:
        return rs_cfg.BOMB_SCORE
    return rs_cfg.UNKNOWN_EVENT_SCORE


def max_score_for(scoring_type: ScoringType) -> int:
    """Best possible raw score for an entry of ``scoring_type``."""
    if scoring_type == ScoringType.BURST_SLIDER_HEAD:
        return rs_cfg.MAX_BURST_HEAD_SCORE
    if scoring_type == ScoringType.BURST_SLIDER_ELEMENT:
        return rs_cfg.MAX_BURST_ELEMENT_SCORE
    return rs_cfg.MAX_NOTE_SCORE
