"""Demo month used by local runs (DIARY_SEED_DEMO=1)."""
from __future__ import annotations

import logging

from diary.schemas import DiaryFields
from diary.services.diary_repo import DiaryRepository

log = logging.getLogger(__name__)

# (date, marker, mood, title, note, weather, activities)
DEMO_ENTRIES = (
    ("2025-11-03", "🌟", "Inspired", "A new start",
     "Started a new project today. Feeling motivated and ready for new challenges!",
     "sunny", ["exercise", "reading"]),
    ("2025-11-05", "😊", "Content", "A peaceful morning",
     "Had a peaceful morning walk. The fresh air really cleared my mind.",
     "sunny", ["walk"]),
    ("2025-11-08", "🥰", "Loving", "Precious time",
     "Spent quality time with loved ones. These moments are precious.",
     "cloudy", ["family time"]),
    ("2025-11-10", "✨", "Magical", "An amazing discovery",
     "Discovered something amazing today. Life is full of surprises!",
     "sunny", ["study", "hobby"]),
    ("2025-11-12", "😌", "Peaceful", "A quiet day",
     "Just a quiet, restful day. Sometimes that's exactly what we need.",
     "sunny", ["rest"]),
    ("2025-11-13", "😢", "Sad", "A sad day",
     "Had a tough day. Feeling down but trying to stay positive.",
     "cloudy", ["reading"]),
    ("2025-11-14", "😰", "Anxious", "An anxious moment",
     "Feeling anxious about upcoming events. Need to find a way to relax.",
     "cloudy", ["meditation"]),
    ("2025-11-15", "😄", "Joyful", "Learning something new",
     "Started learning something new. The journey ahead looks promising and fun.",
     "sunny", ["study", "exercise"]),
    ("2025-11-16", "😔", "Sad", "Sad thoughts",
     "Thinking about past events that made me sad. Trying to move on.",
     "cloudy", ["walk"]),
    ("2025-11-17", "🎉", "Excited", "Good news",
     "Got some amazing news today! Can't wait to share with everyone.",
     "sunny", ["meetup"]),
    ("2025-11-18", "😢", "Sad", "Project finished",
     "Completed my project on time. Celebrated with friends at our favorite cafe!",
     "sunny", ["work", "friends"]),
    ("2025-11-19", "😰", "Anxious", "An anxious day",
     "Feeling anxious about the future. Need to find a way to relax.",
     "cloudy", ["meditation"]),
    ("2025-11-20", "😞", "Sad", "A thankful day",
     "Had a wonderful day with family. Feeling blessed and content. The weather was perfect.",
     "sunny", ["family time", "dinner out"]),
    ("2025-11-22", "🌈", "Hopeful", "A hopeful future",
     "Looking forward to the future. So many possibilities ahead!",
     "rainy", ["planning"]),
    ("2025-11-25", "😴", "Tired", "A long day",
     "Long day but productive. Need to get some rest tonight.",
     "cloudy", ["work"]),
)


async def seed_demo(repo: DiaryRepository) -> int:
    n = 0
    for day, marker, mood, title, note, weather, activities in DEMO_ENTRIES:
        fields = DiaryFields(
            title=title,
            note=note,
            emotion_marker=marker,
            mood=mood,
            weather=weather,
            activities=activities,
        )
        await repo.create(day, fields)
        n += 1
    log.info("seeded %d demo diary entries", n)
    return n
