from __future__ import annotations

import itertools
import json

import pytest

from models.saved_verse import VerseRef
from utils.annotations import SAVED_CONTENT_KEY, AnnotationStore


class Clock:
    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


JOHN_3_16 = VerseRef(
    book_id="JHN",
    book_name="John",
    chapter=3,
    verse_number=16,
    text="For God so loved the world, that he gave his only begotten Son...",
    language="en",
)


@pytest.fixture
def store(kv):
    return AnnotationStore(kv, clock=Clock())


def _persisted(kv) -> dict:
    return json.loads(kv.get(SAVED_CONTENT_KEY) or "{}")


def test_bookmark_highlight_clear_unbookmark_scenario(store, kv) -> None:
    entry = store.toggle_bookmark(JOHN_3_16)
    assert entry.key == "JHN-3-16"
    assert entry.is_bookmarked and entry.highlight_color is None

    entry = store.set_highlight(JOHN_3_16, "yellow")
    assert entry.is_bookmarked and entry.highlight_color == "yellow"
    assert _persisted(kv)["JHN-3-16"]["highlightColor"] == "yellow"

    entry = store.clear_highlight(JOHN_3_16)
    assert entry.is_bookmarked and entry.highlight_color is None
    assert "highlightColor" not in _persisted(kv)["JHN-3-16"]

    assert store.toggle_bookmark(JOHN_3_16) is None
    assert "JHN-3-16" not in store
    assert _persisted(kv) == {}


def test_toggle_bookmark_twice_returns_to_absent(store) -> None:
    store.toggle_bookmark(JOHN_3_16)
    store.toggle_bookmark(JOHN_3_16)
    assert store.get("JHN-3-16") is None
    assert len(store) == 0


def test_highlight_then_clear_on_fresh_verse_is_absent(store) -> None:
    store.set_highlight(JOHN_3_16, "rose")
    assert store.clear_highlight(JOHN_3_16) is None
    assert len(store) == 0


def test_unbookmarking_highlighted_verse_keeps_highlight(store) -> None:
    store.set_highlight(JOHN_3_16, "green")
    store.toggle_bookmark(JOHN_3_16)
    entry = store.toggle_bookmark(JOHN_3_16)
    assert entry is not None
    assert not entry.is_bookmarked
    assert entry.highlight_color == "green"


def test_timestamps(store) -> None:
    created = store.set_highlight(JOHN_3_16, "blue").timestamp
    # Recolouring keeps the original save time
    assert store.set_highlight(JOHN_3_16, "purple").timestamp == created
    # Bookmarking a highlighted verse is a fresh save
    bookmarked = store.toggle_bookmark(JOHN_3_16).timestamp
    assert bookmarked > created
    assert store.set_highlight(JOHN_3_16, "yellow").timestamp == bookmarked


def test_clear_highlight_leaves_absent_and_bookmarked_alone(store) -> None:
    assert store.clear_highlight(JOHN_3_16) is None
    store.toggle_bookmark(JOHN_3_16)
    before = store.get(JOHN_3_16)
    assert store.clear_highlight(JOHN_3_16) == before


def test_update_highlight_dispatches(store) -> None:
    assert store.update_highlight(JOHN_3_16, "yellow").highlight_color == "yellow"
    assert store.update_highlight(JOHN_3_16, None) is None


def test_unknown_colour_rejected(store) -> None:
    with pytest.raises(ValueError):
        store.set_highlight(JOHN_3_16, "orange")
    assert len(store) == 0


def test_delete_is_unconditional(store) -> None:
    store.toggle_bookmark(JOHN_3_16)
    store.set_highlight(JOHN_3_16, "yellow")
    assert store.delete("JHN-3-16") is True
    assert store.delete("JHN-3-16") is False
    assert len(store) == 0


def test_entry_present_iff_a_flag_is_set_for_every_sequence(kv) -> None:
    operations = {
        "bookmark": lambda s: s.toggle_bookmark(JOHN_3_16),
        "yellow": lambda s: s.set_highlight(JOHN_3_16, "yellow"),
        "blue": lambda s: s.set_highlight(JOHN_3_16, "blue"),
        "clear": lambda s: s.clear_highlight(JOHN_3_16),
    }
    for sequence in itertools.product(operations, repeat=4):
        kv.delete(SAVED_CONTENT_KEY)
        store = AnnotationStore(kv, clock=Clock())
        bookmarked, color = False, None
        for name in sequence:
            operations[name](store)
            if name == "bookmark":
                bookmarked = not bookmarked
            elif name == "clear":
                color = None
            else:
                color = name

            entry = store.get(JOHN_3_16)
            persisted = _persisted(kv)
            if bookmarked or color:
                assert entry is not None, sequence
                assert entry.is_bookmarked == bookmarked
                assert entry.highlight_color == color
                assert "JHN-3-16" in persisted
            else:
                assert entry is None, sequence
                assert persisted == {}


def test_state_survives_reload(store, kv) -> None:
    store.toggle_bookmark(JOHN_3_16)
    store.set_highlight(JOHN_3_16, "yellow")
    reloaded = AnnotationStore(kv)
    assert reloaded.get("JHN-3-16") == store.get("JHN-3-16")


def test_key_ignores_language(store) -> None:
    tamil = VerseRef("JHN", "யோவான்", 3, 16, "தேவன், தம்முடைய ஒரேபேறான குமாரனை...", "ta")
    store.toggle_bookmark(JOHN_3_16)
    # Same verse in Tamil hits the same entry and removes the bookmark
    assert store.toggle_bookmark(tamil) is None


def test_items_sorted_newest_first_and_filtered(store) -> None:
    psalm = VerseRef("PSA", "Psalms", 23, 1, "The LORD is my shepherd; I shall not want.", "en")
    romans = VerseRef("ROM", "Romans", 8, 28, "And we know that all things work together for good...", "en")
    store.toggle_bookmark(psalm)
    store.set_highlight(romans, "green")
    store.toggle_bookmark(JOHN_3_16)

    assert [e.key for e in store.items()] == ["JHN-3-16", "ROM-8-28", "PSA-23-1"]
    assert [e.key for e in store.items("bookmarks")] == ["JHN-3-16", "PSA-23-1"]
    assert [e.key for e in store.items("highlights")] == ["ROM-8-28"]
    assert store.highlight_for("ROM", 8, 28) == "green"
    assert store.highlight_for("ROM", 8, 29) is None
    with pytest.raises(ValueError):
        store.items("notes")


def test_corrupt_document_loads_empty(kv) -> None:
    kv.set(SAVED_CONTENT_KEY, "[not a map")
    assert len(AnnotationStore(kv)) == 0


def _fill_cache(cache, chapters: int = 4) -> None:
    from models.scripture import Verse

    for chapter in range(1, chapters + 1):
        assert cache.store("en", "Psalms", chapter, [Verse(1, "x" * 100)])


def test_full_cache_makes_room_for_a_bookmark(kv) -> None:
    from utils.chapter_cache import ChapterCache
    from utils.kv_store import KeyValueStore

    store = KeyValueStore(quota_bytes=600)
    cache = ChapterCache(store)
    _fill_cache(cache)

    annotations = AnnotationStore(store, clock=Clock(), make_room=cache.make_room)
    assert annotations.toggle_bookmark(JOHN_3_16).is_bookmarked
    assert "JHN-3-16" in _persisted(store)
    assert store.keys(prefix="bible_cache_") == ["bible_cache_en_Psalms_3", "bible_cache_en_Psalms_4"]


def test_oversized_annotation_still_fails_after_emptying_cache(kv) -> None:
    from utils.chapter_cache import ChapterCache
    from utils.errors import StorageQuotaExceeded
    from utils.kv_store import KeyValueStore

    store = KeyValueStore(quota_bytes=600)
    cache = ChapterCache(store)
    _fill_cache(cache, chapters=2)

    annotations = AnnotationStore(store, clock=Clock(), make_room=cache.make_room)
    huge = VerseRef("PSA", "Psalms", 119, 1, "y" * 700, "en")
    with pytest.raises(StorageQuotaExceeded):
        annotations.toggle_bookmark(huge)
    assert len(annotations) == 0
    assert store.get(SAVED_CONTENT_KEY) is None
    assert store.keys(prefix="bible_cache_") == []
