from __future__ import annotations

"""Output schemas for score statistics.

A `ScoreStatistic` is a value: plain numbers grouped into four trackers, with
no identity and no cross-references. The JSON form uses the camelCase keys the
leaderboard service has always served (``winTracker.nbOfPause``,
``accuracyTracker.gridAcc``, ...), so cached blobs from older builds still load.
"""

from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _StatModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AveragePosition(_StatModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class WinTracker(_StatModel):
    won: bool = False
    end_time: float = 0.0
    nb_of_pause: int = 0
    jump_distance: float = 0.0
    average_height: float = 0.0
    average_head_position: AveragePosition = AveragePosition()
    total_score: int = 0

    @field_validator("average_head_position", mode="before")
    @classmethod
    def _null_position(cls, v):
        # Older leaderboard aggregates stored null here.
        return AveragePosition() if v is None else v


class HitTracker(_StatModel):
    max_combo: int = 0
    left_miss: int = 0
    right_miss: int = 0
    left_bad_cuts: int = 0
    right_bad_cuts: int = 0
    left_bombs: int = 0
    right_bombs: int = 0


class AccuracyTracker(_StatModel):
    acc_right: float = 0.0
    acc_left: float = 0.0
    left_preswing: float = 0.0
    right_preswing: float = 0.0
    average_preswing: float = 0.0
    left_postswing: float = 0.0
    right_postswing: float = 0.0
    left_time_dependence: float = 0.0
    right_time_dependence: float = 0.0
    # [before-cut, center-distance, after-cut]
    left_average_cut: Tuple[float, ...] = ()
    right_average_cut: Tuple[float, ...] = ()
    # 4x3 grid, row-major from the bottom layer.
    grid_acc: Tuple[float, ...] = ()

    @field_validator("left_average_cut", "right_average_cut", "grid_acc", mode="before")
    @classmethod
    def _null_list(cls, v):
        return () if v is None else v


class ScoreGraphTracker(_StatModel):
    # One running accuracy sample per second of play.
    graph: Tuple[float, ...] = ()

    @field_validator("graph", mode="before")
    @classmethod
    def _null_graph(cls, v):
        return () if v is None else v


class ScoreStatistic(_StatModel):
    win_tracker: WinTracker = WinTracker()
    hit_tracker: HitTracker = HitTracker()
    accuracy_tracker: AccuracyTracker = AccuracyTracker()
    score_graph_tracker: ScoreGraphTracker = ScoreGraphTracker()


def dump_statistic_json(statistic: ScoreStatistic) -> str:
    """Serialize with the service's camelCase keys."""
    return statistic.model_dump_json(by_alias=True)


def load_statistic_json(data: Union[str, bytes, bytearray]) -> ScoreStatistic:
    """Parse a cached statistic blob (camelCase or snake_case keys)."""
    return ScoreStatistic.model_validate_json(data)
