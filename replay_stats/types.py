from __future__ import annotations

"""Typed containers used by the replay statistics engine.

Inputs (`Replay` and its parts) are produced by an external replay decoder and
are treated as given. Derived values (`NoteParams`, `TimelineEntry`,
`MultiplierState`) are recomputed on every pass and never persisted.

Everything here is frozen: a simulation pass owns its own values, so passes can
run on any number of threads without coordination.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Tuple

from . import config as rs_cfg


# ----------------------------
# Enums
# ----------------------------


class ScoringType(IntEnum):
    DEFAULT = 0
    IGNORE = 1
    NO_SCORE = 2
    NORMAL = 3
    SLIDER_HEAD = 4
    SLIDER_TAIL = 5
    BURST_SLIDER_HEAD = 6
    BURST_SLIDER_ELEMENT = 7


class NoteEventType(IntEnum):
    GOOD = 0
    BAD = 1
    MISS = 2
    BOMB = 3


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


# ----------------------------
# Replay inputs
# ----------------------------


@dataclass(frozen=True, slots=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True, slots=True)
class CutInfo:
    """Swing data recorded for a cut note.

    `saber_type` is 0 for the left saber and 1 for the right one.
    """

    before_cut_rating: float = 0.0
    after_cut_rating: float = 0.0
    cut_distance_to_center: float = 0.0
    cut_normal: Vector3 = field(default_factory=Vector3)
    saber_type: int = 0


@dataclass(frozen=True, slots=True)
class NoteEvent:
    note_id: int
    event_type: int
    event_time: float
    spawn_time: float = 0.0
    cut_info: CutInfo = field(default_factory=CutInfo)


@dataclass(frozen=True, slots=True)
class WallEvent:
    time: float
    wall_id: int = 0
    energy: float = 0.0
    spawn_time: float = 0.0


@dataclass(frozen=True, slots=True)
class Frame:
    time: float
    fps: int = 0
    head_position: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True, slots=True)
class HeightEvent:
    height: float
    time: float = 0.0


@dataclass(frozen=True, slots=True)
class PauseEvent:
    time: float
    duration: float = 0.0


@dataclass(frozen=True, slots=True)
class ReplayInfo:
    fail_time: float = 0.0
    jump_distance: float = 0.0
    height: float = 0.0
    speed: float = 0.0


@dataclass(frozen=True, slots=True)
class Replay:
    """A decoded replay, in recording order."""

    info: ReplayInfo = field(default_factory=ReplayInfo)
    notes: Tuple[NoteEvent, ...] = ()
    walls: Tuple[WallEvent, ...] = ()
    frames: Tuple[Frame, ...] = ()
    heights: Tuple[HeightEvent, ...] = ()
    pauses: Tuple[PauseEvent, ...] = ()


# ----------------------------
# Derived values
# ----------------------------


@dataclass(frozen=True, slots=True)
class NoteParams:
    scoring_type: ScoringType
    line_index: int
    line_layer: int
    color_type: int
    cut_direction: int

    @property
    def side(self) -> Side:
        return Side.LEFT if self.color_type == 0 else Side.RIGHT


@dataclass(frozen=True, slots=True)
class MultiplierState:
    """The client's combo multiplier counter.

    Transitions return a new state; instances are never mutated. Two
    independent counters run per simulation: one for what actually happened
    and one for the theoretical maximum.
    """

    multiplier: int = rs_cfg.MULTIPLIER_MIN
    progress: int = 0
    threshold: int = rs_cfg.MULTIPLIER_INITIAL_THRESHOLD

    def increase(self) -> "MultiplierState":
        if self.multiplier >= rs_cfg.MULTIPLIER_MAX:
            return self
        progress = self.progress
        if progress < self.threshold:
            progress += 1
        if progress >= self.threshold:
            multiplier = self.multiplier * 2
            return MultiplierState(multiplier=multiplier, progress=0, threshold=multiplier * 2)
        return MultiplierState(multiplier=self.multiplier, progress=progress, threshold=self.threshold)

    def decrease(self) -> "MultiplierState":
        if self.multiplier > rs_cfg.MULTIPLIER_MIN:
            multiplier = self.multiplier // 2
            return MultiplierState(multiplier=multiplier, progress=0, threshold=multiplier * 2)
        return MultiplierState(multiplier=self.multiplier, progress=0, threshold=self.threshold)

    def apply(self, raw_score: int) -> "MultiplierState":
        """Advance for one timeline entry: negative scores decay, the rest ramp."""
        if raw_score < 0:
            return self.decrease()
        return self.increase()


@dataclass(frozen=True, slots=True)
class TimelineEntry:
    time: float
    is_block: bool
    raw_score: int
    scoring_type: ScoringType
    multiplier: int
    cumulative_score: int
    combo: int
    running_accuracy: float


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Outcome of one pass over the merged note/wall timeline."""

    entries: Tuple[TimelineEntry, ...]
    max_combo: int
    total_score: int
    max_score: int
