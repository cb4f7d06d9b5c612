from __future__ import annotations


class DiaryError(Exception):
    """Base class for diary service errors."""


class EntryNotFound(DiaryError, LookupError):
    def __init__(self, date: str, entry_id: str | None = None) -> None:
        self.date = date
        self.entry_id = entry_id
        if entry_id:
            super().__init__(f"diary entry {entry_id!r} not found at {date}")
        else:
            super().__init__(f"no diary entry at {date}")


class ValidationError(DiaryError, ValueError):
    """Malformed input shape (not an empty result)."""


class RepositoryError(DiaryError):
    """Underlying storage failed; always chained from the original error."""
