"""
Negative-mood risk detection over the most recent diary entries.

Three signals, each appending its own reason:

  ratio       share of NEGATIVE entries in the window
                >= 0.8 high, >= 0.6 medium (both flag the user),
                >= 0.4 low (level only);
              with 3 entries or fewer any negative entry flags the user
              and lifts the level to at least low.
  streak      current run of NEGATIVE entries counted from the newest one;
              >= 7 flags the user and escalates the level one step.
  pattern     HIGH_RISK entries in the window; >= 5 flags the user and
              escalates the level one step.

Escalation moves low -> medium and medium -> high; none and high stay put.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from diary.schemas import DiaryEntry, RiskAnalysis
from diary.services.diary_repo import DiaryRepository
from diary.services.emotions import is_high_risk, is_negative
from diary.services.errors import ValidationError

log = logging.getLogger(__name__)

DEFAULT_WINDOW = 14

RATIO_HIGH = 0.8
RATIO_MEDIUM = 0.6
RATIO_LOW = 0.4
SMALL_SAMPLE_MAX = 3
STREAK_DAYS = 7
HIGH_RISK_MIN = 5

LEVELS = ("none", "low", "medium", "high")

_ESCALATE = {"low": "medium", "medium": "high"}


def escalate(level: str) -> str:
    return _ESCALATE.get(level, level)


def leading_negative_run(window: Sequence[DiaryEntry]) -> int:
    run = 0
    for e in window:
        if not is_negative(e.emotion_category):
            break
        run += 1
    return run


def analyze(recent_entries: Sequence[DiaryEntry], window_size: int = DEFAULT_WINDOW) -> RiskAnalysis:
    """recent_entries must be ordered most recent first."""
    if window_size < 1:
        raise ValidationError(f"window_size must be >= 1, got {window_size}")

    window = list(recent_entries[:window_size])
    if not window:
        return RiskAnalysis()

    considered = len(window)
    negative = sum(1 for e in window if is_negative(e.emotion_category))
    high_risk = sum(1 for e in window if is_high_risk(e.emotion_category))
    streak = leading_negative_run(window)

    reasons: List[str] = []
    level = "none"
    at_risk = False

    ratio = negative / considered
    if ratio >= RATIO_HIGH:
        at_risk, level = True, "high"
        reasons.append("Negative emotions made up 80% or more of your recent entries.")
    elif ratio >= RATIO_MEDIUM:
        at_risk, level = True, "medium"
        reasons.append("Negative emotions made up 60% or more of your recent entries.")
    elif ratio >= RATIO_LOW:
        level = "low"
        reasons.append("Negative emotions made up 40% or more of your recent entries.")

    if considered <= SMALL_SAMPLE_MAX and negative > 0:
        at_risk = True
        if level == "none":
            level = "low"
        reasons.append("Negative emotions were detected in your latest entries.")

    if streak >= STREAK_DAYS:
        at_risk = True
        level = escalate(level)
        reasons.append(f"Negative emotions were recorded {streak} days in a row.")

    if high_risk >= HIGH_RISK_MIN:
        at_risk = True
        level = escalate(level)
        reasons.append("A high-risk emotion pattern was detected.")

    if at_risk:
        log.info(
            "risk signals fired: level=%s negative=%d/%d streak=%d high_risk=%d",
            level, negative, considered, streak, high_risk,
        )

    return RiskAnalysis(
        is_at_risk=at_risk,
        risk_level=level,
        reasons=reasons,
        recent_negative_count=negative,
        consecutive_negative_days=streak,
    )


async def collect_recent_window(
    repo: DiaryRepository,
    today: Optional[date] = None,
    days: int = DEFAULT_WINDOW,
) -> List[DiaryEntry]:
    """
    Entries for today, today-1, ... today-(days-1), newest first. Dates with
    no entry are skipped (they are not treated as neutral days).
    """
    if days < 1:
        raise ValidationError(f"days must be >= 1, got {days}")
    today = today or date.today()

    out: List[DiaryEntry] = []
    for i in range(days):
        entry = await repo.get((today - timedelta(days=i)).isoformat())
        if entry is not None:
            out.append(entry)
    return out


async def assess(
    repo: DiaryRepository,
    today: Optional[date] = None,
    days: int = DEFAULT_WINDOW,
) -> RiskAnalysis:
    window = await collect_recent_window(repo, today, days)
    return analyze(window, window_size=days)
