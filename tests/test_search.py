from __future__ import annotations

import asyncio

import pytest

from diary.schemas import DiaryEntry, DiaryFields, SearchParams
from diary.services.diary_repo import MemoryDiaryRepository
from diary.services.emotions import EmotionCategory, classify
from diary.services.errors import DiaryError, ValidationError
from diary.services.search import search, search_entries


def _entry(date: str, title: str = "", note: str = "", marker: str = "😊") -> DiaryEntry:
    return DiaryEntry(
        id=f"d-{date}",
        date=date,
        title=title,
        note=note,
        emotion_marker=marker,
        emotion_category=classify(marker),
        mood="",
    )


ENTRIES = [
    _entry("2025-01-01", "Old Project", "kicked things off a while ago", "😴"),
    _entry("2025-01-03", "Lazy sunday", "nothing much", "😌"),
    _entry("2025-01-05", "Project Kickoff", "big meeting", "🎉"),
    _entry("2025-01-07", "Rain", "the PROJECT slipped again", "😢"),
    _entry("2025-01-09", "Walk", "park with friends", "😊"),
]


def test_keyword_project_newest_first_one_per_page():
    entries = ENTRIES[:3]  # only titles mention "project"
    p1 = search_entries(entries, SearchParams(keyword="project", limit=1, page=1))
    p2 = search_entries(entries, SearchParams(keyword="project", limit=1, page=2))

    assert p1.total == p2.total == 2
    assert p1.total_pages == p2.total_pages == 2
    assert [e.date for e in p1.entries] == ["2025-01-05"]
    assert [e.date for e in p2.entries] == ["2025-01-01"]


def test_keyword_matches_title_or_note_case_insensitively():
    res = search_entries(ENTRIES, SearchParams(keyword="PrOjEcT"))
    assert [e.date for e in res.entries] == ["2025-01-07", "2025-01-05", "2025-01-01"]


@pytest.mark.parametrize("keyword", [None, "", "   "])
def test_empty_keyword_means_no_filter(keyword):
    res = search_entries(ENTRIES, SearchParams(keyword=keyword))
    assert res.total == len(ENTRIES)


def test_date_range_is_inclusive():
    res = search_entries(ENTRIES, SearchParams(start_date="2025-01-03", end_date="2025-01-07"))
    assert [e.date for e in res.entries] == ["2025-01-07", "2025-01-05", "2025-01-03"]


def test_category_filter_is_exact():
    res = search_entries(ENTRIES, SearchParams(emotion_category=EmotionCategory.SAD))
    assert [e.title for e in res.entries] == ["Rain"]


def test_filters_combine():
    res = search_entries(
        ENTRIES,
        SearchParams(keyword="project", start_date="2025-01-02", emotion_category=EmotionCategory.EXCITED),
    )
    assert [e.title for e in res.entries] == ["Project Kickoff"]


def test_no_match_is_an_empty_result():
    res = search_entries(ENTRIES, SearchParams(keyword="zebra"))
    assert res.entries == []
    assert res.total == 0
    assert res.total_pages == 0
    assert res.page == 1


def test_page_past_the_end_is_empty_not_an_error():
    res = search_entries(ENTRIES, SearchParams(page=9, limit=2))
    assert res.entries == []
    assert res.total == 5
    assert res.total_pages == 3
    assert res.page == 9


@pytest.mark.parametrize("limit", [1, 2, 3, 5, 10])
def test_concatenated_pages_reproduce_the_full_match_set(limit):
    full = search_entries(ENTRIES, SearchParams(limit=100)).entries
    first = search_entries(ENTRIES, SearchParams(limit=limit))

    seen = []
    for page in range(1, first.total_pages + 1):
        seen.extend(search_entries(ENTRIES, SearchParams(limit=limit, page=page)).entries)

    assert [e.id for e in seen] == [e.id for e in full]
    assert len({e.id for e in seen}) == len(ENTRIES)


@pytest.mark.parametrize("params", [SearchParams(page=0), SearchParams(limit=0), SearchParams(limit=-3)])
def test_malformed_paging_is_rejected(params):
    with pytest.raises(ValidationError):
        search_entries(ENTRIES, params)


def test_search_reads_a_snapshot_from_the_repository():
    async def main():
        repo = MemoryDiaryRepository(commenter=None)
        for d, title in [("2025-01-01", "Old Project"), ("2025-01-05", "Project Kickoff"), ("2025-01-02", "Gym")]:
            await repo.create(d, DiaryFields(title=title, note="", emotion_marker="😊", mood=""))
        return await search(repo, SearchParams(keyword="project"))

    res = asyncio.run(main())
    assert [e.title for e in res.entries] == ["Project Kickoff", "Old Project"]


def test_category_filter_accepts_a_plain_name():
    res = search_entries(ENTRIES, SearchParams(emotion_category="sad"))
    assert [e.title for e in res.entries] == ["Rain"]


def test_unknown_category_name_is_a_service_validation_error():
    params = SearchParams(emotion_category="bogus")
    with pytest.raises(ValidationError) as ei:
        search_entries(ENTRIES, params)
    assert isinstance(ei.value, DiaryError)


def test_keyword_is_trimmed_before_matching():
    res = search_entries(ENTRIES, SearchParams(keyword="  kickoff "))
    assert [e.title for e in res.entries] == ["Project Kickoff"]
