from __future__ import annotations

import hashlib
from typing import Callable, Optional

# (mood, note) -> remark or None
Commenter = Callable[[str, str], Optional[str]]

SUPPORTIVE_COMMENTS = (
    "Thanks for taking the time to write today. Your feelings are worth recording.",
    "What a day! Moments like these are worth remembering.",
    "It's good to hear your story. Someone is always cheering for you!",
    "Putting feelings into words really matters. You're doing great.",
    "Today's experience will turn into tomorrow's growth. Keep going!",
)


def pick_comment(mood: str, note: str) -> str:
    """Stable pick: the same mood and note always get the same remark."""
    digest = hashlib.sha1(f"{mood}\n{note}".encode("utf-8")).digest()
    return SUPPORTIVE_COMMENTS[digest[0] % len(SUPPORTIVE_COMMENTS)]
