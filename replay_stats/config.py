from __future__ import annotations

"""Tuning constants for the replay statistics engine.

This module is the single place that holds the scoring numbers the engine must
reproduce. They mirror the game client's scoring rules; changing any of them
changes recorded scores, so treat them as a compatibility surface rather than
as knobs.

Cut scoring
-----------
- A good cut scores up to 70 (before-cut swing) + 30 (after-cut swing) + 15
  (distance to center).
- Burst slider elements award a fixed center-distance score of 20, which is
  above the nominal 15 cap. The client does this, so we do too.

Multiplier
----------
- Ramp 1 -> 2 -> 4 -> 8. The progress needed for the next step is twice the
  current multiplier (initially 2).

All timestamps are replay-relative seconds; the engine never reads the host OS
clock.
"""

import os

# ---------------------------------------------------------------------------
# Note id packing
# ---------------------------------------------------------------------------

# Ids at or above this value use the wide layout.
NOTE_ID_WIDE_THRESHOLD: int = 100000

# (scoringType, lineIndex, lineLayer) place values for each layout.
NOTE_ID_SHORT_PLACES: tuple[int, int, int] = (10000, 1000, 100)
NOTE_ID_WIDE_PLACES: tuple[int, int, int] = (10000000, 1000000, 100000)

# colorType * 10 + cutDirection in both layouts.
NOTE_ID_COLOR_PLACE: int = 10

# ---------------------------------------------------------------------------
# Cut scoring
# ---------------------------------------------------------------------------

BEFORE_CUT_MAX: int = 70
AFTER_CUT_MAX: int = 30
CENTER_DISTANCE_MAX: int = 15

# Fixed center-distance award for burst slider elements (exceeds CENTER_DISTANCE_MAX).
BURST_ELEMENT_CENTER_SCORE: int = 20

# Cut distance (in note units) at which the center-distance score reaches 0.
CENTER_DISTANCE_RANGE: float = 0.3

# Signed raw scores for events that are not good cuts.
BAD_CUT_SCORE: int = -2
MISS_SCORE: int = -3
BOMB_SCORE: int = -4
UNKNOWN_EVENT_SCORE: int = -1
WALL_SCORE: int = -5

# ---------------------------------------------------------------------------
# Maximum score track
# ---------------------------------------------------------------------------

MAX_NOTE_SCORE: int = 115
MAX_BURST_HEAD_SCORE: int = 85
MAX_BURST_ELEMENT_SCORE: int = 20

# ---------------------------------------------------------------------------
# Multiplier
# ---------------------------------------------------------------------------

MULTIPLIER_MIN: int = 1
MULTIPLIER_MAX: int = 8
MULTIPLIER_INITIAL_THRESHOLD: int = 2

# ---------------------------------------------------------------------------
# Per-play aggregation
# ---------------------------------------------------------------------------

# 4 columns x 3 rows.
GRID_COLUMNS: int = 4
GRID_CELLS: int = 12

# Entries of [before-cut, center-distance, after-cut] in the average cut arrays.
AVERAGE_CUT_SLOTS: int = 3

# A replay counts as passed when its fail time is below this (seconds).
WIN_FAIL_TIME_EPS: float = 0.01

# colorType of notes that do not count as blocks for the accuracy timeline.
NON_BLOCK_COLOR_TYPE: int = 2

# Score graph value for a leading bucket that has nothing to show.
SCORE_GRAPH_DEFAULT: float = 1.0

# ---------------------------------------------------------------------------
# Cross-replay averaging
# ---------------------------------------------------------------------------

# Aggregated "won" flag is set when strictly more than this share of plays passed.
WIN_RATIO_THRESHOLD: float = 0.5

FETCH_WORKERS_DEFAULT: int = 8
FETCH_WORKERS_ENV: str = "REPLAY_STATS_FETCH_WORKERS"


def fetch_workers() -> int:
    """Return the fetch fan-out width, honoring ``REPLAY_STATS_FETCH_WORKERS``."""
    raw = (os.environ.get(FETCH_WORKERS_ENV) or "").strip()
    if not raw:
        return FETCH_WORKERS_DEFAULT
    try:
        n = int(raw)
    except ValueError:
        return FETCH_WORKERS_DEFAULT
    return max(1, n)
