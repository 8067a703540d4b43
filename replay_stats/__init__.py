"""Replay statistics engine.

Re-derives the game's scoring state (combo, multiplier, per-note cut quality,
accuracy over time) from a decoded replay, and averages many per-play
statistics into one leaderboard-wide record.

Public API
----------
- process_replay
- replay_from_mapping
- average_statistics
- average_statistic_fetches
- dump_statistic_json / load_statistic_json

Implementation details live in replay_stats.formulas, replay_stats.timeline,
replay_stats.accuracy, replay_stats.graph and replay_stats.averaging.
"""

from .averaging import average_list, average_statistic_fetches, average_statistics, fetch_statistics
from .errors import ReplayPayloadError, ReplayStatsError, StatisticNotFoundError
from .formulas import decode_note_id, encode_note_id
from .normalize import replay_from_mapping
from .schemas import (
    AccuracyTracker,
    AveragePosition,
    HitTracker,
    ScoreGraphTracker,
    ScoreStatistic,
    WinTracker,
    dump_statistic_json,
    load_statistic_json,
)
from .service import process_replay
from .types import NoteEventType, NoteParams, Replay, ScoringType

__all__ = [
    "AccuracyTracker",
    "AveragePosition",
    "HitTracker",
    "NoteEventType",
    "NoteParams",
    "Replay",
    "ReplayPayloadError",
    "ReplayStatsError",
    "ScoreGraphTracker",
    "ScoreStatistic",
    "ScoringType",
    "StatisticNotFoundError",
    "WinTracker",
    "average_list",
    "average_statistic_fetches",
    "average_statistics",
    "decode_note_id",
    "dump_statistic_json",
    "encode_note_id",
    "fetch_statistics",
    "load_statistic_json",
    "process_replay",
    "replay_from_mapping",
]
