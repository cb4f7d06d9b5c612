from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List

from diary.schemas import ChartDataPoint, DailyStat, DiaryEntry
from diary.services.diary_repo import DiaryRepository
from diary.services.errors import ValidationError

GRANULARITIES = ("daily", "weekly", "monthly")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def week_start(iso_date: str) -> str:
    """ISO date of the Sunday that starts the week containing iso_date."""
    d = date.fromisoformat(iso_date)
    # weekday(): Mon=0 .. Sun=6
    return (d - timedelta(days=(d.weekday() + 1) % 7)).isoformat()


def _day_label(key: str) -> str:
    d = date.fromisoformat(key)
    return f"{d.month}/{d.day}"


def _month_label(key: str) -> str:
    year, month = key.split("-")
    return f"{_MONTHS[int(month) - 1]} {year}"


_BUCKETS: Dict[str, tuple[Callable[[str], str], Callable[[str], str]]] = {
    "daily": (lambda d: d, _day_label),
    "weekly": (week_start, _day_label),
    "monthly": (lambda d: d[:7], _month_label),
}


def aggregate_entries(
    entries: Iterable[DiaryEntry],
    start_date: str,
    end_date: str,
    granularity: str,
) -> List[ChartDataPoint]:
    """
    Per-category counts for every bucket that has at least one entry in
    [start_date, end_date]. Empty buckets are not emitted; the caller fills
    gaps if it wants a dense axis.
    """
    if granularity not in _BUCKETS:
        raise ValidationError(
            f"granularity must be one of {', '.join(GRANULARITIES)}, got {granularity!r}"
        )
    key_of, label_of = _BUCKETS[granularity]

    points: Dict[str, ChartDataPoint] = {}
    for e in entries:
        if not (start_date <= e.date <= end_date):
            continue
        key = key_of(e.date)
        p = points.get(key)
        if p is None:
            p = points[key] = ChartDataPoint(bucket_key=key, display_label=label_of(key))
        field = e.emotion_category.value
        setattr(p, field, getattr(p, field) + 1)
        p.total += 1

    return [points[k] for k in sorted(points)]


def daily_stats(entries: Iterable[DiaryEntry], year_month: str) -> List[DailyStat]:
    prefix = f"{year_month}-"
    out = [
        DailyStat(
            date=e.date,
            emotion_marker=e.emotion_marker,
            emotion_category=e.emotion_category,
            title=e.title,
        )
        for e in entries
        if e.date.startswith(prefix)
    ]
    out.sort(key=lambda s: s.date)
    return out


async def aggregate(
    repo: DiaryRepository,
    start_date: str,
    end_date: str,
    granularity: str,
) -> List[ChartDataPoint]:
    snapshot = await repo.list_all()
    return aggregate_entries(snapshot, start_date, end_date, granularity)


async def month_stats(repo: DiaryRepository, year_month: str) -> List[DailyStat]:
    snapshot = await repo.list_all()
    return daily_stats(snapshot, year_month)
