from __future__ import annotations

import json
import re

import pytest

from app import create_app
from database import init_db
from utils.app_state import get_state
from utils.chapter_cache import ChapterCache
from utils.content import ContentService
from utils.kv_store import KeyValueStore

CHAPTER_PROMPT = re.compile(r"for (?P<book>.+?) chapter (?P<chapter>\d+)\. Version")

DEVOTIONAL = {
    "verseRef": "John 3:16",
    "verseText": "For God so loved the world...",
    "title": "Loved First",
    "content": "Before we loved, we were loved.",
    "prayer": "Thank You, Father. Amen.",
}


def chapter_json(book: str, chapter: int, count: int = 3) -> str:
    return json.dumps([{"number": n, "text": f"{book} {chapter}:{n}"} for n in range(1, count + 1)])


class FakeProvider:
    """Stands in for GeminiProvider.

    Scripted responses (strings, bytes or exceptions) are consumed first;
    after that chapters, commentary and devotionals get canned answers.
    """

    def __init__(self) -> None:
        self.script: list = []
        self.prompts: list[str] = []
        self.speech_prompts: list[tuple[str, str]] = []
        self.audio: bytes | None = b"\x01\x00" * 240

    def _next_scripted(self):
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def generate_text(self, prompt, system_instruction=None, response_schema=None, max_output_tokens=None):
        self.prompts.append(prompt)
        if self.script:
            return self._next_scripted()
        match = CHAPTER_PROMPT.search(prompt)
        if match:
            return chapter_json(match.group("book"), int(match.group("chapter")))
        if prompt.startswith("Generate a short daily"):
            return json.dumps(DEVOTIONAL)
        return "A short reflection on grace."

    def generate_speech(self, prompt, voice_name):
        self.speech_prompts.append((prompt, voice_name))
        if self.script:
            return self._next_scripted()
        return self.audio

    def chapter_calls(self) -> list[str]:
        return [p for p in self.prompts if CHAPTER_PROMPT.search(p)]


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def kv():
    init_db("sqlite://")
    return KeyValueStore()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def cache(kv):
    return ChapterCache(kv)


@pytest.fixture
def content(provider, cache, sleeps):
    return ContentService(provider, cache, retries=3, delay=1.0, sleep=sleeps)


@pytest.fixture
def app(provider, sleeps):
    app = create_app(
        {
            "TESTING": True,
            "DATABASE_URL": "sqlite://",
            "STORE_QUOTA_BYTES": None,
            "PREFETCH_DELAY": 3600.0,
        },
        provider=provider,
        sleep=sleeps,
    )
    yield app
    with app.app_context():
        get_state().close()


@pytest.fixture
def client(app):
    return app.test_client()
