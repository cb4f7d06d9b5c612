from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import TEXT, TypeDecorator

from diary.db import Base


class JSONList(TypeDecorator):
    """
    List of strings stored as a JSON TEXT column (works the same on sqlite
    and postgres, no dialect-specific JSON needed).
    """
    impl = TEXT
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return "[]"
        if isinstance(value, (list, tuple)):
            return json.dumps(list(value), ensure_ascii=False)
        return value

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            data = json.loads(value)
        except ValueError:
            return []
        return [str(x) for x in data] if isinstance(data, list) else []


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )


class DiaryEntryRow(TimestampMixin, Base):
    __tablename__ = "diary_entries"

    # insertion order; the public id below is opaque
    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # YYYY-MM-DD, zero padded so string order == date order
    entry_date: Mapped[str] = mapped_column(String(10), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    emotion_marker: Mapped[str] = mapped_column(String(32), nullable=False)
    emotion_category: Mapped[str] = mapped_column(String(16), nullable=False, default="neutral")
    mood: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    weather: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    activities: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    ai_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "entry_date", name="uq_diary_entries_user_date"),
        Index("ix_diary_entries_user_created", "user_id", "created_at"),
    )


class EmotionMarkRow(Base):
    """date -> (marker, category) index backing the calendar heatmap."""

    __tablename__ = "emotion_marks"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entry_date: Mapped[str] = mapped_column(String(10), primary_key=True)
    emotion_marker: Mapped[str] = mapped_column(String(32), nullable=False)
    emotion_category: Mapped[str] = mapped_column(String(16), nullable=False)
