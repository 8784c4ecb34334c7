# utils/chapter_cache.py
import json
import logging
from models.scripture import Language, Verse
from utils.errors import StorageQuotaExceeded

logger = logging.getLogger(__name__)

# Cache key prefix
CACHE_PREFIX = 'bible_cache_'


def cache_key(language, book_name, chapter):
    return f"{CACHE_PREFIX}{Language(language).value}_{book_name}_{chapter}"


class ChapterCache:
    """Read-through cache of fetched chapters kept in the durable store."""

    def __init__(self, kv):
        self.kv = kv

    def lookup(self, language, book_name, chapter):
        """Cached verses for the chapter, or None."""
        raw = self.kv.get(cache_key(language, book_name, chapter))
        if raw is None:
            return None
        try:
            verses = [Verse.from_json(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable cache entry for {book_name} {chapter}: {e}")
            return None
        return verses or None

    def contains(self, language, book_name, chapter):
        return cache_key(language, book_name, chapter) in self.kv

    def store(self, language, book_name, chapter, verses):
        """Write verses for the chapter. Returns False if the write was dropped."""
        if not verses:
            raise ValueError("Refusing to cache an empty chapter")

        key = cache_key(language, book_name, chapter)
        value = json.dumps([verse.to_json() for verse in verses], ensure_ascii=False)
        try:
            self.kv.set(key, value)
            return True
        except StorageQuotaExceeded:
            evicted = self.evict_oldest_half()
            logger.warning(f"Storage quota hit caching {key}; evicted {evicted} chapters")

        # Retry once now that there is room
        try:
            self.kv.set(key, value)
            return True
        except StorageQuotaExceeded:
            logger.warning(f"Dropping cache write for {key}: still over quota after eviction")
            return False

    def evict_oldest_half(self):
        """Remove the first half of cached chapters in enumeration order."""
        keys = self.kv.keys(prefix=CACHE_PREFIX)
        return self._evict(keys[:len(keys) // 2])

    def make_room(self):
        """Free space for user data: the oldest half of the cache, at least one chapter."""
        keys = self.kv.keys(prefix=CACHE_PREFIX)
        evicted = self._evict(keys[:max(1, len(keys) // 2)])
        if evicted:
            logger.warning(f"Evicted {evicted} cached chapters to make room for user data")
        return evicted

    def _evict(self, keys):
        for key in keys:
            self.kv.delete(key)
        return len(keys)

    def clear(self):
        keys = self.kv.keys(prefix=CACHE_PREFIX)
        for key in keys:
            self.kv.delete(key)
        logger.info(f"Cleared {len(keys)} cached chapters")
        return len(keys)
