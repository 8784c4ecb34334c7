# utils/reader_session.py
import logging
import threading
from models.saved_verse import VerseRef
from models.scripture import (
    Language,
    Testament,
    first_book_of,
    get_book,
    next_chapter,
    prev_chapter,
)
from utils.errors import user_message_for

logger = logging.getLogger(__name__)


class ReaderSession:
    """Navigation state of the Bible reader.

    Every load(), navigation and language change takes a new request token;
    when a fetch finishes after the token moved on, its verses (or error) are
    dropped. Requests are never aborted, only ignored.

    After a chapter is shown, the next chapter is prefetched after
    prefetch_delay seconds unless it is cached already. The pending prefetch
    is cancelled when the reader navigates or the session is closed.
    """

    def __init__(self, content, cache, language=Language.ENGLISH, prefetch_delay=15.0):
        self.content = content
        self.cache = cache
        self.prefetch_delay = prefetch_delay

        self.language = Language(language)
        self.active_testament = Testament.NEW
        self.selected_book = first_book_of(Testament.NEW)
        self.current_chapter = 1

        self.verses = []
        self.error = None
        self.is_loading = False
        self.selected_verse = None

        self._lock = threading.RLock()
        self._request_token = 0
        self._prefetch_timer = None
        self._closed = False

    @property
    def request_token(self):
        return self._request_token

    @property
    def book_name(self):
        return self.selected_book.name_for(self.language)

    # Navigation

    def _supersede(self):
        """Invalidate whatever is shown or in flight; the caller changed what should be shown."""
        self._cancel_prefetch()
        self._request_token += 1
        self.verses = []
        self.error = None
        self.selected_verse = None
        self.is_loading = False

    def _move_to(self, book, chapter):
        self._supersede()
        self.selected_book = book
        self.active_testament = book.testament
        self.current_chapter = chapter

    def go_to_next_chapter(self):
        """Advance one chapter, crossing into the next book. False if nothing changed."""
        with self._lock:
            if self.is_loading:
                return False
            target = next_chapter(self.selected_book, self.current_chapter)
            if target is None:
                return False
            self._move_to(*target)
            return True

    def go_to_prev_chapter(self):
        with self._lock:
            if self.is_loading:
                return False
            target = prev_chapter(self.selected_book, self.current_chapter)
            if target is None:
                return False
            self._move_to(*target)
            return True

    def select_testament(self, testament):
        testament = Testament(testament)
        with self._lock:
            if testament == self.active_testament:
                return False
            self._move_to(first_book_of(testament), 1)
            return True

    def select_book(self, book_id):
        book = get_book(book_id)
        with self._lock:
            self._move_to(book, 1)
        return True

    def select_chapter(self, chapter):
        with self._lock:
            if not 1 <= chapter <= self.selected_book.chapters:
                raise ValueError(f"{self.selected_book.name_en} has no chapter {chapter}")
            self._move_to(self.selected_book, chapter)
        return True

    def set_language(self, language):
        language = Language(language)
        with self._lock:
            if language == self.language:
                return False
            self._supersede()
            self.language = language
            return True

    # Loading

    def load(self):
        """Show the current chapter, from cache or the provider.

        Returns True when this call's result was applied.
        """
        with self._lock:
            self._request_token += 1
            token = self._request_token
            book, chapter, language = self.selected_book, self.current_chapter, self.language
            book_name = book.name_for(language)

            self.verses = []
            self.error = None
            self.selected_verse = None

            cached = self.cache.lookup(language, book_name, chapter)
            if cached:
                self.verses = cached
                self.is_loading = False
                self._schedule_prefetch(book, chapter, language)
                return True

            self.is_loading = True

        try:
            verses = self.content.get_chapter_verses(book_name, chapter, language)
        except Exception as e:
            with self._lock:
                if token != self._request_token:
                    logger.info(f"Discarding stale error for {book_name} {chapter}: {e}")
                    return False
                logger.error(f"Bible fetch error for {book_name} {chapter}: {e}", exc_info=True)
                self.error = user_message_for(e)
                self.is_loading = False
                return False

        with self._lock:
            if token != self._request_token:
                logger.info(f"Discarding stale result for {book_name} {chapter}")
                return False
            self.verses = verses
            self.error = None
            self.is_loading = False
            self._schedule_prefetch(book, chapter, language)
            return True

    def retry(self):
        return self.load()

    # Verse selection

    def select_verse(self, verse_number):
        with self._lock:
            verse = next((v for v in self.verses if v.number == verse_number), None)
            if verse is None:
                raise LookupError(f"Verse {verse_number} is not loaded")
            self.selected_verse = verse
            return verse

    def verse_reference(self, verse):
        """English reference string such as 'John 3:16', used for commentary prompts."""
        return f"{self.selected_book.name_en} {self.current_chapter}:{verse.number}"

    def verse_ref(self, verse):
        return VerseRef(
            book_id=self.selected_book.id,
            book_name=self.book_name,
            chapter=self.current_chapter,
            verse_number=verse.number,
            text=verse.text,
            language=self.language.value,
        )

    # Prefetch

    def _schedule_prefetch(self, book, chapter, language):
        target = next_chapter(book, chapter)
        if target is None or self._closed:
            return
        next_book, next_number = target
        next_name = next_book.name_for(language)
        if self.cache.contains(language, next_name, next_number):
            return

        self._cancel_prefetch()
        timer = threading.Timer(self.prefetch_delay, self._prefetch, args=(next_name, next_number, language))
        timer.daemon = True
        self._prefetch_timer = timer
        timer.start()
        logger.debug(f"Prefetch of {next_name} {next_number} scheduled in {self.prefetch_delay}s")

    def _prefetch(self, book_name, chapter, language):
        try:
            self.content.get_chapter_verses(book_name, chapter, language)
            logger.info(f"Prefetched {book_name} {chapter}")
        except Exception as e:
            logger.debug(f"Prefetch of {book_name} {chapter} failed: {e}")

    def _cancel_prefetch(self):
        if self._prefetch_timer is not None:
            self._prefetch_timer.cancel()
            self._prefetch_timer = None

    @property
    def pending_prefetch(self):
        return self._prefetch_timer

    def close(self):
        with self._lock:
            self._closed = True
            self._cancel_prefetch()

    def to_json(self):
        with self._lock:
            selected = self.selected_verse.number if self.selected_verse else None
            return {
                "book": self.selected_book.to_json(self.language),
                "chapter": self.current_chapter,
                "testament": self.active_testament.value,
                "language": self.language.value,
                "isLoading": self.is_loading,
                "error": self.error,
                "selectedVerse": selected,
                "requestToken": self._request_token,
                "verses": [verse.to_json() for verse in self.verses],
            }
