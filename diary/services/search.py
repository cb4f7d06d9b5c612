from __future__ import annotations

import math
from typing import Iterable, List

from diary.schemas import DiaryEntry, SearchParams, SearchResult
from diary.services.diary_repo import DiaryRepository
from diary.services.emotions import parse_category
from diary.services.errors import ValidationError


def _matches_keyword(entry: DiaryEntry, needle: str) -> bool:
    return needle in (entry.title or "").lower() or needle in (entry.note or "").lower()


def search_entries(entries: Iterable[DiaryEntry], params: SearchParams) -> SearchResult:
    """
    Filter by keyword / date range / category, newest first, then paginate.

    Pages are not clamped: a page past the end is just an empty slice.
    """
    if params.page < 1:
        raise ValidationError(f"page must be >= 1, got {params.page}")
    if params.limit < 1:
        raise ValidationError(f"limit must be >= 1, got {params.limit}")

    category = parse_category(params.emotion_category) if params.emotion_category else None

    found: List[DiaryEntry] = list(entries)

    # surrounding whitespace is not part of the needle
    keyword = (params.keyword or "").strip().lower()
    if keyword:
        found = [e for e in found if _matches_keyword(e, keyword)]

    # ISO dates: string order is date order
    if params.start_date:
        found = [e for e in found if e.date >= params.start_date]
    if params.end_date:
        found = [e for e in found if e.date <= params.end_date]

    if category is not None:
        found = [e for e in found if e.emotion_category is category]

    found.sort(key=lambda e: e.date, reverse=True)

    total = len(found)
    start = (params.page - 1) * params.limit
    return SearchResult(
        entries=found[start : start + params.limit],
        total=total,
        page=params.page,
        total_pages=math.ceil(total / params.limit),
    )


async def search(repo: DiaryRepository, params: SearchParams) -> SearchResult:
    snapshot = await repo.list_all()
    return search_entries(snapshot, params)
