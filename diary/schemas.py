from __future__ import annotations

import datetime as _dt
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from diary.services.emotions import EmotionCategory

RiskLevel = Literal["none", "low", "medium", "high"]
Granularity = Literal["daily", "weekly", "monthly"]


class DiaryFields(BaseModel):
    """Write payload for create/update (everything except the date)."""

    title: str = Field(default="", max_length=200)
    note: str = ""
    emotion_marker: str = Field(..., min_length=1, max_length=32)
    mood: str = Field(default="", max_length=64)
    weather: Optional[str] = Field(default=None, max_length=20)
    activities: List[str] = Field(default_factory=list)


class DiaryCreateIn(DiaryFields):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")

    @field_validator("date")
    @classmethod
    def _real_calendar_day(cls, v: str) -> str:
        # the pattern lets 2025-02-30 through
        _dt.date.fromisoformat(v)
        return v


class DiaryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: str
    title: str
    note: str
    emotion_marker: str
    emotion_category: EmotionCategory
    mood: str
    weather: Optional[str] = None
    activities: List[str] = Field(default_factory=list)
    ai_comment: Optional[str] = None


class EmotionMark(BaseModel):
    """Heatmap projection of one entry."""

    model_config = ConfigDict(from_attributes=True)

    date: str
    emotion_marker: str
    emotion_category: EmotionCategory


class DailyStat(BaseModel):
    date: str
    emotion_marker: str
    emotion_category: EmotionCategory
    title: str


class SearchParams(BaseModel):
    keyword: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    # names are resolved by the search service, unknown ones are rejected there
    emotion_category: Optional[Union[EmotionCategory, str]] = None
    page: int = 1
    limit: int = 10


class SearchResult(BaseModel):
    entries: List[DiaryEntry]
    total: int
    page: int
    total_pages: int


class ChartDataPoint(BaseModel):
    bucket_key: str
    display_label: str
    happy: int = 0
    love: int = 0
    excited: int = 0
    calm: int = 0
    grateful: int = 0
    hopeful: int = 0
    tired: int = 0
    sad: int = 0
    angry: int = 0
    anxious: int = 0
    neutral: int = 0
    total: int = 0


class RiskAnalysis(BaseModel):
    is_at_risk: bool = False
    risk_level: RiskLevel = "none"
    reasons: List[str] = Field(default_factory=list)
    recent_negative_count: int = 0
    consecutive_negative_days: int = 0


class SupportResource(BaseModel):
    id: str
    name: str
    description: str
    phone: Optional[str] = None
    website: Optional[str] = None
    hours: Optional[str] = None
    category: Literal["emergency", "counseling", "hotline", "community"]


class SupportCategory(BaseModel):
    category: str
    label: str


class RiskOut(RiskAnalysis):
    window_days: int
    resources: List[SupportResource] = Field(default_factory=list)
