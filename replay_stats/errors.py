from __future__ import annotations

"""Failures raised by the replay statistics engine.

Per-play processing never raises on odd replay content; it scores what it can.
Two situations do raise:

- a leaderboard aggregate is requested but none of its scores has a cached
  statistic (`StatisticNotFoundError`);
- the decoded replay payload is not a mapping at all (`ReplayPayloadError`).

Each error carries a stable `code` the caller can branch on and optional
`details` for logs.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ReplayStatsError(Exception):
    code: str
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class StatisticNotFoundError(ReplayStatsError):
    """The leaderboard has no per-play statistic to average."""


class ReplayPayloadError(ReplayStatsError):
    """The decoded replay is not a mapping."""


STATISTIC_NOT_FOUND = "STATISTIC_NOT_FOUND"
REPLAY_BAD_PAYLOAD = "REPLAY_BAD_PAYLOAD"
