from __future__ import annotations

"""Timeline builder / replay simulator.

Merges note and wall events into one time-ordered sequence and replays the
client's scoring over it:

- a *max* multiplier track that ramps on every entry and prices each entry at
  its best possible score (used to normalize accuracy);
- an *actual* track that ramps on non-negative entries and decays on negative
  ones (bad cuts, misses, bombs, walls).

A negative entry resets the combo but never subtracts from the score.
"""

from typing import Iterable, List, Tuple

from . import config as rs_cfg
from .formulas import decode_note_id, f32_div, max_score_for, score_for_note
from .types import (
    MultiplierState,
    NoteEvent,
    ScoringType,
    SimulationResult,
    TimelineEntry,
    WallEvent,
)

# (time, is_block, raw_score, scoring_type)
_RawEntry = Tuple[float, bool, int, ScoringType]


def _raw_entries(notes: Iterable[NoteEvent], walls: Iterable[WallEvent]) -> List[_RawEntry]:
    raw: List[_RawEntry] = []
    for note in notes:
        params = decode_note_id(note.note_id)
        raw.append(
            (
                float(note.event_time),
                params.color_type != rs_cfg.NON_BLOCK_COLOR_TYPE,
                score_for_note(note, params.scoring_type),
                params.scoring_type,
            )
        )
    for wall in walls:
        raw.append((float(wall.time), False, rs_cfg.WALL_SCORE, ScoringType.DEFAULT))

    # Stable: ties keep notes before walls, in recording order.
    raw.sort(key=lambda e: e[0])
    return raw


def build_timeline(notes: Iterable[NoteEvent], walls: Iterable[WallEvent]) -> SimulationResult:
    """Simulate the play and return one entry per note/wall event, in time order."""

    entries: List[TimelineEntry] = []
    actual = MultiplierState()
    best = MultiplierState()

    score = 0
    max_score = 0
    combo = 0
    max_combo = 0
    accuracy = 0.0

    for time, is_block, raw_score, scoring_type in _raw_entries(notes, walls):
        best = best.increase()
        max_score += best.multiplier * max_score_for(scoring_type)

        actual = actual.apply(raw_score)
        if raw_score < 0:
            combo = 0
        else:
            combo += 1
            score += actual.multiplier * raw_score
        max_combo = max(max_combo, combo)

        # Walls carry the previous entry's accuracy forward.
        if is_block:
            accuracy = f32_div(score, max_score)

        entries.append(
            TimelineEntry(
                time=time,
                is_block=is_block,
                raw_score=raw_score,
                scoring_type=scoring_type,
                multiplier=actual.multiplier,
                cumulative_score=score,
                combo=combo,
                running_accuracy=accuracy,
            )
        )

    return SimulationResult(
        entries=tuple(entries),
        max_combo=max_combo,
        total_score=score,
        max_score=max_score,
    )
