# models/devotional.py
from dataclasses import dataclass, replace
import datetime


@dataclass(frozen=True)
class Devotional:
    verse_ref: str
    verse_text: str
    title: str
    content: str
    prayer: str
    date: str = ""

    def for_today(self):
        return replace(self, date=datetime.date.today().isoformat())

    def to_json(self):
        return {
            "date": self.date,
            "verseRef": self.verse_ref,
            "verseText": self.verse_text,
            "title": self.title,
            "content": self.content,
            "prayer": self.prayer,
        }


# Shown until (or instead of, when the AI call fails) a generated devotional
INITIAL_DEVOTIONAL = Devotional(
    verse_ref="Psalm 23:1",
    verse_text="The LORD is my shepherd; I shall not want.",
    title="The Shepherd Who Provides",
    content=(
        "God does not watch over us from a distance. He walks ahead, finds the green pastures "
        "and still waters, and leads us there. Whatever today lacks, the Shepherd does not."
    ),
    prayer="Lord, lead me today. Teach me to trust Your provision and rest in Your care. Amen.",
)
