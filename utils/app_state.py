# utils/app_state.py
import logging
import time
from dataclasses import dataclass
from flask import current_app
from utils.annotations import AnnotationStore
from utils.chapter_cache import ChapterCache
from utils.content import ContentService
from utils.gemini import GeminiProvider
from utils.kv_store import KeyValueStore
from utils.prayers import PrayerJournal
from utils.reader_session import ReaderSession
from utils.settings import SettingsStore

logger = logging.getLogger(__name__)

EXTENSION_NAME = 'holyword'


@dataclass
class AppState:
    """Everything the routes share: stores, the content service and the reader session."""
    kv: KeyValueStore
    cache: ChapterCache
    annotations: AnnotationStore
    prayers: PrayerJournal
    settings: SettingsStore
    content: ContentService
    session: ReaderSession

    def close(self):
        self.session.close()


def build_state(config, provider=None, sleep=time.sleep):
    """Wire the stores together. config is a mapping of the Config settings."""
    kv = KeyValueStore(quota_bytes=config.get('STORE_QUOTA_BYTES'))
    cache = ChapterCache(kv)

    if provider is None:
        provider = GeminiProvider(
            api_key=config.get('GEMINI_API_KEY'),
            text_model=config['TEXT_MODEL'],
            speech_model=config['SPEECH_MODEL'],
        )

    content = ContentService(
        provider,
        cache,
        retries=config['RETRY_ATTEMPTS'],
        delay=config['RETRY_DELAY'],
        sleep=sleep,
    )
    settings = SettingsStore(kv, make_room=cache.make_room)
    session = ReaderSession(
        content,
        cache,
        language=settings.language,
        prefetch_delay=config['PREFETCH_DELAY'],
    )
    logger.info(f"Application state ready (language={settings.language.value})")
    return AppState(
        kv=kv,
        cache=cache,
        annotations=AnnotationStore(kv, make_room=cache.make_room),
        prayers=PrayerJournal(kv, make_room=cache.make_room),
        settings=settings,
        content=content,
        session=session,
    )


def get_state():
    return current_app.extensions[EXTENSION_NAME]
