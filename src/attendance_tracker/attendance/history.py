from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import to_local_naive
from ..core.enums import PunchType
from .model import PunchRecord


def filter_history(
    records: Sequence[PunchRecord],
    *,
    day: Optional[date] = None,
    punch_type: Optional[PunchType] = None,
) -> list[PunchRecord]:
    """Keep records on ``day`` and/or of ``punch_type``; ``None`` disables a filter."""
    out = []
    for r in records:
        if day is not None and to_local_naive(r.timestamp).date() != day:
            continue
        if punch_type is not None and r.punch_type != punch_type:
            continue
        out.append(r)
    return out


def group_by_day(records: Sequence[PunchRecord]) -> dict[date, list[PunchRecord]]:
    """Records per calendar day, newest day first, oldest punch first within a day."""
    grouped: dict[date, list[PunchRecord]] = {}
    for r in sorted(records, key=lambda r: to_local_naive(r.timestamp)):
        grouped.setdefault(to_local_naive(r.timestamp).date(), []).append(r)
    return {day: grouped[day] for day in sorted(grouped, reverse=True)}
