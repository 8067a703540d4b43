from __future__ import annotations

"""Per-play statistics.

`process_replay` turns one decoded replay into a `ScoreStatistic`. It is a pure
function of the replay: no I/O, no clock, no shared state. Callers may run it
on as many threads as they like.
"""

import logging
from typing import Sequence, Tuple

from . import config as rs_cfg
from .accuracy import accumulate_accuracy
from .formulas import decode_note_id, f32_mean
from .graph import replay_length_seconds, score_graph
from .schemas import (
    AccuracyTracker,
    AveragePosition,
    HitTracker,
    ScoreGraphTracker,
    ScoreStatistic,
    WinTracker,
)
from .timeline import build_timeline
from .types import Frame, NoteEvent, NoteEventType, Replay, Side, SimulationResult

logger = logging.getLogger(__name__)


def _average_head_position(frames: Sequence[Frame]) -> AveragePosition:
    return AveragePosition(
        x=f32_mean([f.head_position.x for f in frames]),
        y=f32_mean([f.head_position.y for f in frames]),
        z=f32_mean([f.head_position.z for f in frames]),
    )


def _win_tracker(replay: Replay, *, total_score: int) -> WinTracker:
    notes = replay.notes
    first_note_time = notes[0].event_time if notes else 0.0
    last_note_time = notes[-1].event_time if notes else 0.0

    # Pauses before the first note or after the last one don't count.
    pauses = sum(1 for p in replay.pauses if first_note_time <= p.time <= last_note_time)

    if replay.heights:
        average_height = f32_mean([h.height for h in replay.heights])
    else:
        average_height = float(replay.info.height)

    return WinTracker(
        won=replay.info.fail_time < rs_cfg.WIN_FAIL_TIME_EPS,
        end_time=replay.frames[-1].time if replay.frames else 0.0,
        nb_of_pause=pauses,
        jump_distance=replay.info.jump_distance,
        average_height=average_height,
        average_head_position=_average_head_position(replay.frames),
        total_score=total_score,
    )


def count_hits(notes: Sequence[NoteEvent], *, max_combo: int = 0) -> HitTracker:
    """Per-side bad cuts (by saber), misses and bomb hits (by note color)."""
    counts = {
        "left_miss": 0,
        "right_miss": 0,
        "left_bad_cuts": 0,
        "right_bad_cuts": 0,
        "left_bombs": 0,
        "right_bombs": 0,
    }
    for note in notes:
        event_type = note.event_type
        if event_type == NoteEventType.BAD:
            key = "left_bad_cuts" if note.cut_info.saber_type == 0 else "right_bad_cuts"
        elif event_type == NoteEventType.MISS:
            key = "left_miss" if decode_note_id(note.note_id).side is Side.LEFT else "right_miss"
        elif event_type == NoteEventType.BOMB:
            key = "left_bombs" if decode_note_id(note.note_id).side is Side.LEFT else "right_bombs"
        else:
            continue
        counts[key] += 1
    return HitTracker(max_combo=max_combo, **counts)


def simulate_replay(replay: Replay) -> Tuple[AccuracyTracker, SimulationResult]:
    """Run the accuracy accumulation and the timeline simulation for one replay."""
    return accumulate_accuracy(replay.notes), build_timeline(replay.notes, replay.walls)


def process_replay(replay: Replay) -> ScoreStatistic:
    """Compute the full statistic record for one play."""

    accuracy, sim = simulate_replay(replay)
    length = replay_length_seconds(replay.frames[-1].time) if replay.frames else 0

    if not replay.notes and not replay.walls:
        logger.debug("process_replay: replay has no notes or walls")

    return ScoreStatistic(
        win_tracker=_win_tracker(replay, total_score=sim.total_score),
        hit_tracker=count_hits(replay.notes, max_combo=sim.max_combo),
        accuracy_tracker=accuracy,
        score_graph_tracker=ScoreGraphTracker(graph=tuple(score_graph(sim.entries, length))),
    )
