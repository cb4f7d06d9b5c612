from .diary_entry import DiaryEntryRow, EmotionMarkRow

__all__ = [
    "DiaryEntryRow",
    "EmotionMarkRow",
]
