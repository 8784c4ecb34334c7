# utils/annotations.py
import json
import logging
import threading
import time
from models.saved_verse import HIGHLIGHT_COLORS, SavedVerse, saved_key

logger = logging.getLogger(__name__)

SAVED_CONTENT_KEY = 'bible_saved_content'

FILTERS = ('all', 'bookmarks', 'highlights')


def _now_ms():
    return int(time.time() * 1000)


def _key_of(item):
    return item if isinstance(item, str) else item.key


class AnnotationStore:
    """Bookmarks and highlights per verse, persisted as one JSON document.

    Each verse is in one of four states: absent, highlighted-only,
    bookmarked-only or bookmarked+highlighted. An entry with neither flag is
    removed, never stored.
    """

    def __init__(self, kv, clock=_now_ms, make_room=None):
        self.kv = kv
        self.clock = clock
        self.make_room = make_room
        self._lock = threading.Lock()
        self._items = self._load()

    def _load(self):
        raw = self.kv.get(SAVED_CONTENT_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
            return {key: SavedVerse.from_json(value) for key, value in data.items()}
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse saved content: {e}")
            return {}

    def _commit(self, key, entry):
        """Replace key's entry (None or empty removes it), flush, then swap in the new map."""
        nxt = dict(self._items)
        if entry is None or entry.is_empty:
            nxt.pop(key, None)
            entry = None
        else:
            nxt[key] = entry
        document = json.dumps({k: v.to_json() for k, v in nxt.items()}, ensure_ascii=False)
        self.kv.set(SAVED_CONTENT_KEY, document, make_room=self.make_room)
        self._items = nxt
        return entry

    def toggle_bookmark(self, ref):
        """Flip the bookmark on ref's verse. Returns the resulting entry or None."""
        with self._lock:
            existing = self._items.get(ref.key)
            if existing is None:
                entry = SavedVerse.create(ref, self.clock(), is_bookmarked=True)
            elif existing.is_bookmarked:
                entry = existing.evolve(is_bookmarked=False)
            else:
                # Highlighted verse gaining a bookmark counts as a fresh save
                entry = existing.evolve(is_bookmarked=True, timestamp=self.clock())
            return self._commit(ref.key, entry)

    def set_highlight(self, ref, color):
        if color not in HIGHLIGHT_COLORS:
            raise ValueError(f"Unknown highlight color: {color}")
        with self._lock:
            existing = self._items.get(ref.key)
            if existing is None:
                entry = SavedVerse.create(ref, self.clock(), highlight_color=color)
            else:
                # Keeps the original save time
                entry = existing.evolve(highlight_color=color)
            return self._commit(ref.key, entry)

    def clear_highlight(self, item):
        key = _key_of(item)
        with self._lock:
            existing = self._items.get(key)
            if existing is None or not existing.highlight_color:
                return existing
            return self._commit(key, existing.evolve(highlight_color=None))

    def update_highlight(self, ref, color):
        """Apply color, or remove the highlight when color is None."""
        if color:
            return self.set_highlight(ref, color)
        return self.clear_highlight(ref)

    def delete(self, item):
        key = _key_of(item)
        with self._lock:
            if key not in self._items:
                return False
            self._commit(key, None)
            return True

    def get(self, item):
        return self._items.get(_key_of(item))

    def highlight_for(self, book_id, chapter, verse_number):
        entry = self._items.get(saved_key(book_id, chapter, verse_number))
        return entry.highlight_color if entry else None

    def items(self, filter='all'):
        """Saved entries newest first, optionally only bookmarks or highlights."""
        if filter not in FILTERS:
            raise ValueError(f"Unknown filter: {filter}")
        entries = sorted(self._items.values(), key=lambda e: e.timestamp, reverse=True)
        if filter == 'bookmarks':
            return [e for e in entries if e.is_bookmarked]
        if filter == 'highlights':
            return [e for e in entries if e.highlight_color]
        return entries

    def __len__(self):
        return len(self._items)

    def __contains__(self, item):
        return _key_of(item) in self._items
