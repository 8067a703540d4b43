import sys
from pathlib import Path

# Ensure repository root is importable for `replay_stats`, `stats_util` and `tools`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from replay_stats.formulas import encode_note_id  # noqa: E402
from replay_stats.types import (  # noqa: E402
    CutInfo,
    Frame,
    NoteEvent,
    NoteEventType,
    NoteParams,
    ScoringType,
    Vector3,
)


def note_id(scoring_type=ScoringType.NORMAL, line_index=1, line_layer=0, color_type=0, cut_direction=1):
    return encode_note_id(
        NoteParams(
            scoring_type=scoring_type,
            line_index=line_index,
            line_layer=line_layer,
            color_type=color_type,
            cut_direction=cut_direction,
        )
    )


def good_note(time, *, before=1.0, after=1.0, distance=0.0, normal_z=0.0, saber=0, **id_fields):
    """A good cut; defaults to a perfect 115 on a normal left note."""
    return NoteEvent(
        note_id=note_id(**id_fields),
        event_type=NoteEventType.GOOD,
        event_time=time,
        cut_info=CutInfo(
            before_cut_rating=before,
            after_cut_rating=after,
            cut_distance_to_center=distance,
            cut_normal=Vector3(0.0, 0.0, normal_z),
            saber_type=saber,
        ),
    )


def failed_note(time, event_type=NoteEventType.MISS, *, saber=0, **id_fields):
    return NoteEvent(
        note_id=note_id(**id_fields),
        event_type=event_type,
        event_time=time,
        cut_info=CutInfo(saber_type=saber),
    )


def frames_until(last_time, head=(0.0, 1.6, 0.0)):
    return (
        Frame(time=0.0, head_position=Vector3(*head)),
        Frame(time=last_time, head_position=Vector3(*head)),
    )
