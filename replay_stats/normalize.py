from __future__ import annotations

"""Build typed `Replay` values from decoded replay payloads.

The binary decoder lives outside this package. It hands over a JSON-like
mapping shaped like the replay format itself:

    {
        "info":    {"failTime": float, "jumpDistance": float, "height": float, "speed": float, ...},
        "frames":  [{"time": float, "fps": int, "head": {"position": {"x", "y", "z"}}, ...}],
        "notes":   [{"noteID": int, "eventTime": float, "spawnTime": float,
                     "eventType": int | "good" | "bad" | "miss" | "bomb",
                     "noteCutInfo": {"beforeCutRating", "afterCutRating",
                                     "cutDistanceToCenter", "cutNormal", "saberType", ...}}],
        "walls":   [{"wallID": int, "energy": float, "time": float, "spawnTime": float}],
        "heights": [{"height": float, "time": float}],
        "pauses":  [{"duration": float, "time": float}],
    }

snake_case spellings of the same keys are accepted too. Normalization is
defensive: missing or malformed scalars fall back to defaults, and list items
that are not mappings are skipped. Only a payload that is not a mapping at all
is rejected.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple, TypeVar

from .errors import REPLAY_BAD_PAYLOAD, ReplayPayloadError
from .types import (
    CutInfo,
    Frame,
    HeightEvent,
    NoteEvent,
    NoteEventType,
    PauseEvent,
    Replay,
    ReplayInfo,
    Vector3,
    WallEvent,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EVENT_TYPE_NAMES = {t.name.lower(): int(t) for t in NoteEventType}


# ----------------------------
# Helpers
# ----------------------------


def coerce_int(value: Any, default: int = 0) -> int:
    try:
        if value is None:
            return default
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def coerce_float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def _get(m: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in m:
            return m[k]
    return None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _items(payload: Mapping[str, Any], key: str, build: Callable[[Mapping[str, Any]], T]) -> Tuple[T, ...]:
    raw = payload.get(key)
    if not isinstance(raw, (list, tuple)):
        return ()
    out: List[T] = []
    skipped = 0
    for item in raw:
        if not isinstance(item, Mapping):
            skipped += 1
            continue
        out.append(build(item))
    if skipped:
        logger.debug("replay_from_mapping: skipped %s malformed %s entries", skipped, key)
    return tuple(out)


# ----------------------------
# Builders
# ----------------------------


def _vector(value: Any) -> Vector3:
    m = _mapping(value)
    return Vector3(
        x=coerce_float(m.get("x")),
        y=coerce_float(m.get("y")),
        z=coerce_float(m.get("z")),
    )


def _event_type(value: Any) -> int:
    if isinstance(value, str):
        name = value.strip().lower()
        if name in _EVENT_TYPE_NAMES:
            return _EVENT_TYPE_NAMES[name]
    # Unknown values are kept as-is; they score as a generic penalty.
    return coerce_int(value, -1)


def _cut_info(value: Any) -> CutInfo:
    m = _mapping(value)
    return CutInfo(
        before_cut_rating=coerce_float(_get(m, "beforeCutRating", "before_cut_rating")),
        after_cut_rating=coerce_float(_get(m, "afterCutRating", "after_cut_rating")),
        cut_distance_to_center=coerce_float(_get(m, "cutDistanceToCenter", "cut_distance_to_center")),
        cut_normal=_vector(_get(m, "cutNormal", "cut_normal")),
        saber_type=coerce_int(_get(m, "saberType", "saber_type")),
    )


def _note(m: Mapping[str, Any]) -> NoteEvent:
    return NoteEvent(
        note_id=coerce_int(_get(m, "noteID", "noteId", "note_id")),
        event_type=_event_type(_get(m, "eventType", "event_type")),
        event_time=coerce_float(_get(m, "eventTime", "event_time")),
        spawn_time=coerce_float(_get(m, "spawnTime", "spawn_time")),
        cut_info=_cut_info(_get(m, "noteCutInfo", "cutInfo", "cut_info")),
    )


def _wall(m: Mapping[str, Any]) -> WallEvent:
    return WallEvent(
        time=coerce_float(m.get("time")),
        wall_id=coerce_int(_get(m, "wallID", "wallId", "wall_id")),
        energy=coerce_float(m.get("energy")),
        spawn_time=coerce_float(_get(m, "spawnTime", "spawn_time")),
    )


def _frame(m: Mapping[str, Any]) -> Frame:
    head = _mapping(m.get("head"))
    position: Optional[Any] = head.get("position") if head else _get(m, "headPosition", "head_position")
    return Frame(
        time=coerce_float(m.get("time")),
        fps=coerce_int(m.get("fps")),
        head_position=_vector(position),
    )


def _height(m: Mapping[str, Any]) -> HeightEvent:
    return HeightEvent(height=coerce_float(m.get("height")), time=coerce_float(m.get("time")))


def _pause(m: Mapping[str, Any]) -> PauseEvent:
    return PauseEvent(time=coerce_float(m.get("time")), duration=coerce_float(m.get("duration")))


def _info(value: Any) -> ReplayInfo:
    m = _mapping(value)
    return ReplayInfo(
        fail_time=coerce_float(_get(m, "failTime", "fail_time")),
        jump_distance=coerce_float(_get(m, "jumpDistance", "jump_distance")),
        height=coerce_float(m.get("height")),
        speed=coerce_float(m.get("speed")),
    )


def replay_from_mapping(payload: Any) -> Replay:
    """Normalize a decoded replay payload into a `Replay`.

    Raises:
        ReplayPayloadError: when ``payload`` is not a mapping.
    """

    if not isinstance(payload, Mapping):
        raise ReplayPayloadError(
            REPLAY_BAD_PAYLOAD,
            "decoded replay must be a mapping",
            details={"type": type(payload).__name__},
        )

    return Replay(
        info=_info(payload.get("info")),
        notes=_items(payload, "notes", _note),
        walls=_items(payload, "walls", _wall),
        frames=_items(payload, "frames", _frame),
        heights=_items(payload, "heights", _height),
        pauses=_items(payload, "pauses", _pause),
    )
