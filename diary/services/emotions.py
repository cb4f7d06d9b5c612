from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union

from diary.services.errors import ValidationError


class EmotionCategory(str, Enum):
    HAPPY = "happy"
    LOVE = "love"
    EXCITED = "excited"
    CALM = "calm"
    GRATEFUL = "grateful"
    HOPEFUL = "hopeful"
    TIRED = "tired"
    SAD = "sad"
    ANGRY = "angry"
    ANXIOUS = "anxious"
    NEUTRAL = "neutral"


# declaration order is the chart/series order
CATEGORIES = tuple(EmotionCategory)

NEGATIVE = frozenset(
    {EmotionCategory.SAD, EmotionCategory.ANGRY, EmotionCategory.ANXIOUS, EmotionCategory.TIRED}
)
HIGH_RISK = frozenset({EmotionCategory.SAD, EmotionCategory.ANGRY, EmotionCategory.ANXIOUS})


# marker -> category
_MARKER_ROWS = (
    (EmotionCategory.HAPPY, ("😊", "😄", "🌟", "😀", "😁", "🙂")),
    (EmotionCategory.LOVE, ("🥰", "💖", "😍", "❤️", "❤")),
    (EmotionCategory.EXCITED, ("✨", "🎉", "🤩")),
    (EmotionCategory.CALM, ("😌", "🍃")),
    (EmotionCategory.GRATEFUL, ("🤗", "🙏")),
    (EmotionCategory.HOPEFUL, ("🌈", "🌱")),
    (EmotionCategory.TIRED, ("😴", "🥱", "😪")),
    (EmotionCategory.SAD, ("😢", "😞", "😔", "😭")),
    (EmotionCategory.ANGRY, ("😠", "😡", "🤬")),
    (EmotionCategory.ANXIOUS, ("😰", "😟", "😨", "😥")),
    (EmotionCategory.NEUTRAL, ("😐", "😶")),
)

MARKER_TABLE: Dict[str, EmotionCategory] = {}
for _cat, _markers in _MARKER_ROWS:
    for _m in _markers:
        MARKER_TABLE[_m] = _cat
    # textual labels ("happy", "Sad", ...) name their own category
    MARKER_TABLE[_cat.value] = _cat


def classify(marker: Optional[str]) -> EmotionCategory:
    """Map a user-chosen marker to its category; unknown markers are neutral."""
    if not marker:
        return EmotionCategory.NEUTRAL
    key = marker.strip()
    hit = MARKER_TABLE.get(key)
    if hit is None:
        hit = MARKER_TABLE.get(key.lower())
    return hit or EmotionCategory.NEUTRAL


def parse_category(name: Union[EmotionCategory, str]) -> EmotionCategory:
    """Strict lookup of a category by name, for filters (classify is the lenient one)."""
    try:
        return EmotionCategory(name)
    except ValueError:
        raise ValidationError(f"unknown emotion category: {name!r}") from None


def is_negative(category: EmotionCategory) -> bool:
    return category in NEGATIVE


def is_high_risk(category: EmotionCategory) -> bool:
    return category in HIGH_RISK
