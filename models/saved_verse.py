# models/saved_verse.py
from dataclasses import dataclass, replace
from typing import Optional

HIGHLIGHT_COLORS = ('yellow', 'green', 'blue', 'rose', 'purple')


def saved_key(book_id, chapter, verse_number):
    # Key omits language: English and Tamil share one entry per verse
    return f"{book_id}-{chapter}-{verse_number}"


@dataclass(frozen=True)
class VerseRef:
    """The verse an annotation is made on, before any flag is attached."""
    book_id: str
    book_name: str
    chapter: int
    verse_number: int
    text: str
    language: str

    @property
    def key(self):
        return saved_key(self.book_id, self.chapter, self.verse_number)


@dataclass(frozen=True)
class SavedVerse:
    book_id: str
    book_name: str
    chapter: int
    verse_number: int
    text: str
    language: str
    timestamp: int  # epoch milliseconds
    is_bookmarked: bool = False
    highlight_color: Optional[str] = None

    @property
    def key(self):
        return saved_key(self.book_id, self.chapter, self.verse_number)

    @property
    def is_empty(self):
        return not self.is_bookmarked and not self.highlight_color

    @classmethod
    def create(cls, ref, timestamp, **flags):
        return cls(
            book_id=ref.book_id,
            book_name=ref.book_name,
            chapter=ref.chapter,
            verse_number=ref.verse_number,
            text=ref.text,
            language=ref.language,
            timestamp=timestamp,
            **flags,
        )

    def evolve(self, **changes):
        return replace(self, **changes)

    def to_json(self):
        data = {
            "key": self.key,
            "bookId": self.book_id,
            "bookName": self.book_name,
            "chapter": self.chapter,
            "verseNumber": self.verse_number,
            "text": self.text,
            "lang": self.language,
            "timestamp": self.timestamp,
            "isBookmarked": self.is_bookmarked,
        }
        if self.highlight_color:
            data["highlightColor"] = self.highlight_color
        return data

    @classmethod
    def from_json(cls, data):
        return cls(
            book_id=data["bookId"],
            book_name=data["bookName"],
            chapter=int(data["chapter"]),
            verse_number=int(data["verseNumber"]),
            text=data.get("text", ""),
            language=data.get("lang", "en"),
            timestamp=int(data["timestamp"]),
            is_bookmarked=bool(data.get("isBookmarked", False)),
            highlight_color=data.get("highlightColor") or None,
        )

    def __repr__(self):
        flags = []
        if self.is_bookmarked:
            flags.append('bookmarked')
        if self.highlight_color:
            flags.append(self.highlight_color)
        return f'<SavedVerse {self.key} {"+".join(flags) or "empty"}>'


