"""
Diary storage boundary.

Both stores keep entries keyed by calendar date (one per date) and keep a
secondary date -> (marker, category) index for the calendar heatmap. The
index is derived on every write and never edited on its own.

Same-date writes:
  - create() always mints a new id; an existing entry at that date is
    superseded (removed) and the new one is appended at the end.
  - update() replaces fields in place and keeps id and position.
"""
from __future__ import annotations

import datetime as _dt
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from diary.models import DiaryEntryRow, EmotionMarkRow
from diary.schemas import DiaryEntry, DiaryFields, EmotionMark
from diary.services.comments import Commenter, pick_comment
from diary.services.emotions import classify
from diary.services.errors import EntryNotFound, RepositoryError, ValidationError

log = logging.getLogger(__name__)


class DiaryRepository(Protocol):
    async def create(self, date: str, fields: DiaryFields) -> DiaryEntry: ...

    async def get(self, date: str) -> Optional[DiaryEntry]: ...

    async def update(self, entry_id: str, date: str, fields: DiaryFields) -> DiaryEntry: ...

    async def delete(self, entry_id: str, date: str) -> None: ...

    async def list_all(self) -> List[DiaryEntry]: ...

    async def list_by_month(self, year_month: str) -> List[EmotionMark]: ...


def new_entry_id() -> str:
    return f"d{uuid.uuid4().hex[:24]}"


def checked_date(value: str) -> str:
    """Reject anything that is not a real zero-padded YYYY-MM-DD day."""
    try:
        parsed = _dt.date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"not a calendar date: {value!r}") from None
    if parsed.isoformat() != value:
        raise ValidationError(f"not a calendar date: {value!r}")
    return value


def _month_prefix(year_month: str) -> str:
    return f"{year_month.strip()}-"


class MemoryDiaryRepository:
    """In-process store. Construct one per application (or per test)."""

    def __init__(self, *, commenter: Optional[Commenter] = pick_comment) -> None:
        self._commenter = commenter
        # date -> entry, dict order == insertion order
        self._entries: Dict[str, DiaryEntry] = {}
        # date -> heatmap mark
        self._marks: Dict[str, EmotionMark] = {}

    def _comment(self, fields: DiaryFields) -> Optional[str]:
        return self._commenter(fields.mood, fields.note) if self._commenter else None

    def _build(self, entry_id: str, date: str, fields: DiaryFields) -> DiaryEntry:
        return DiaryEntry(
            id=entry_id,
            date=date,
            title=fields.title,
            note=fields.note,
            emotion_marker=fields.emotion_marker,
            emotion_category=classify(fields.emotion_marker),
            mood=fields.mood,
            weather=fields.weather or None,
            activities=list(fields.activities),
            ai_comment=self._comment(fields),
        )

    def _index(self, entry: DiaryEntry) -> None:
        self._marks[entry.date] = EmotionMark(
            date=entry.date,
            emotion_marker=entry.emotion_marker,
            emotion_category=entry.emotion_category,
        )

    async def create(self, date: str, fields: DiaryFields) -> DiaryEntry:
        checked_date(date)
        entry = self._build(new_entry_id(), date, fields)
        old = self._entries.pop(date, None)
        if old is not None:
            log.info("diary entry superseded", extra={"date": date, "entry_id": old.id})
        self._entries[date] = entry
        self._index(entry)
        return entry.model_copy(deep=True)

    async def get(self, date: str) -> Optional[DiaryEntry]:
        entry = self._entries.get(date)
        return entry.model_copy(deep=True) if entry else None

    async def update(self, entry_id: str, date: str, fields: DiaryFields) -> DiaryEntry:
        existing = self._entries.get(date)
        if existing is None or (entry_id and existing.id != entry_id):
            raise EntryNotFound(date, entry_id)
        entry = self._build(existing.id, date, fields)
        self._entries[date] = entry
        self._index(entry)
        return entry.model_copy(deep=True)

    async def delete(self, entry_id: str, date: str) -> None:
        self._entries.pop(date, None)
        self._marks.pop(date, None)

    async def list_all(self) -> List[DiaryEntry]:
        return [e.model_copy(deep=True) for e in self._entries.values()]

    async def list_by_month(self, year_month: str) -> List[EmotionMark]:
        prefix = _month_prefix(year_month)
        marks = [m.model_copy() for d, m in self._marks.items() if d.startswith(prefix)]
        marks.sort(key=lambda m: m.date)
        return marks


class SqlDiaryRepository:
    """SQLAlchemy (async) store, scoped to one owner."""

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        *,
        user_id: int = 1,
        commenter: Optional[Commenter] = pick_comment,
    ) -> None:
        self._sessions = sessions
        self._user_id = user_id
        self._commenter = commenter

    @asynccontextmanager
    async def _tx(self, op: str, date: Optional[str] = None) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessions() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            log.exception("diary store failed: %s", op, extra={"date": date})
            raise RepositoryError(f"{op} failed: {type(e).__name__}") from e

    def _to_entry(self, row: DiaryEntryRow) -> DiaryEntry:
        return DiaryEntry(
            id=row.id,
            date=row.entry_date,
            title=row.title or "",
            note=row.note or "",
            emotion_marker=row.emotion_marker,
            emotion_category=classify(row.emotion_marker),
            mood=row.mood or "",
            weather=row.weather,
            activities=list(row.activities or []),
            ai_comment=row.ai_comment,
        )

    def _apply(self, row: DiaryEntryRow, fields: DiaryFields) -> None:
        row.title = fields.title
        row.note = fields.note
        row.emotion_marker = fields.emotion_marker
        row.emotion_category = classify(fields.emotion_marker).value
        row.mood = fields.mood
        row.weather = fields.weather or None
        row.activities = list(fields.activities)
        row.ai_comment = self._commenter(fields.mood, fields.note) if self._commenter else None

    async def _put_mark(self, session: AsyncSession, row: DiaryEntryRow) -> None:
        await session.merge(
            EmotionMarkRow(
                user_id=self._user_id,
                entry_date=row.entry_date,
                emotion_marker=row.emotion_marker,
                emotion_category=row.emotion_category,
            )
        )

    def _by_date(self, date: str):
        return (
            select(DiaryEntryRow)
            .where(DiaryEntryRow.user_id == self._user_id)
            .where(DiaryEntryRow.entry_date == date)
        )

    async def create(self, date: str, fields: DiaryFields) -> DiaryEntry:
        checked_date(date)
        async with self._tx("create", date) as session:
            await session.execute(
                delete(DiaryEntryRow)
                .where(DiaryEntryRow.user_id == self._user_id)
                .where(DiaryEntryRow.entry_date == date)
            )
            row = DiaryEntryRow(id=new_entry_id(), user_id=self._user_id, entry_date=date)
            self._apply(row, fields)
            session.add(row)
            await session.flush()
            await self._put_mark(session, row)
            entry = self._to_entry(row)
        return entry

    async def get(self, date: str) -> Optional[DiaryEntry]:
        async with self._tx("get", date) as session:
            row = (await session.execute(self._by_date(date))).scalar_one_or_none()
            entry = self._to_entry(row) if row else None
        return entry

    async def update(self, entry_id: str, date: str, fields: DiaryFields) -> DiaryEntry:
        async with self._tx("update", date) as session:
            row = (await session.execute(self._by_date(date))).scalar_one_or_none()
            if row is None or (entry_id and row.id != entry_id):
                raise EntryNotFound(date, entry_id)
            self._apply(row, fields)
            await session.flush()
            await self._put_mark(session, row)
            entry = self._to_entry(row)
        return entry

    async def delete(self, entry_id: str, date: str) -> None:
        async with self._tx("delete", date) as session:
            await session.execute(
                delete(DiaryEntryRow)
                .where(DiaryEntryRow.user_id == self._user_id)
                .where(DiaryEntryRow.entry_date == date)
            )
            await session.execute(
                delete(EmotionMarkRow)
                .where(EmotionMarkRow.user_id == self._user_id)
                .where(EmotionMarkRow.entry_date == date)
            )

    async def list_all(self) -> List[DiaryEntry]:
        q = (
            select(DiaryEntryRow)
            .where(DiaryEntryRow.user_id == self._user_id)
            .order_by(DiaryEntryRow.pk.asc())
        )
        async with self._tx("list_all") as session:
            rows = (await session.execute(q)).scalars().all()
            entries = [self._to_entry(r) for r in rows]
        return entries

    async def list_by_month(self, year_month: str) -> List[EmotionMark]:
        prefix = _month_prefix(year_month)
        q = (
            select(EmotionMarkRow)
            .where(EmotionMarkRow.user_id == self._user_id)
            .where(EmotionMarkRow.entry_date.startswith(prefix, autoescape=True))
            .order_by(EmotionMarkRow.entry_date.asc())
        )
        async with self._tx("list_by_month") as session:
            rows = (await session.execute(q)).scalars().all()
            marks = [
                EmotionMark(
                    date=r.entry_date,
                    emotion_marker=r.emotion_marker,
                    emotion_category=classify(r.emotion_marker),
                )
                for r in rows
            ]
        return marks
