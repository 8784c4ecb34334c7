# This file makes the models directory a Python package
from .kv_entry import KeyValueEntry
from .scripture import Book, Verse, Language, Testament, BIBLE_BOOKS
from .saved_verse import SavedVerse, VerseRef, HIGHLIGHT_COLORS
from .prayer import PrayerRequest
from .devotional import Devotional, INITIAL_DEVOTIONAL

__all__ = [
    'KeyValueEntry',
    'Book',
    'Verse',
    'Language',
    'Testament',
    'BIBLE_BOOKS',
    'SavedVerse',
    'VerseRef',
    'HIGHLIGHT_COLORS',
    'PrayerRequest',
    'Devotional',
    'INITIAL_DEVOTIONAL',
]
