# utils/content.py
import datetime
import io
import json
import logging
import time
import wave
from typing import List
from pydantic import ValidationError
from models.devotional import Devotional, INITIAL_DEVOTIONAL
from models.scripture import Language, Verse
from schemas.content_schemas import DevotionalSchema, VerseSchema
from utils.errors import ChapterFormatError, EmptyResponseError, SpeechUnavailableError
from utils.retry import call_with_retry

logger = logging.getLogger(__name__)

COMMENTARY_FALLBACK = "Grace and peace be with you. (Commentary currently unavailable)"

CHAPTER_SYSTEM_INSTRUCTION = (
    "You are an expert Bible database. Provide the complete text for the requested chapter "
    "in JSON format. Do not skip verses. Do not truncate. Accuracy is paramount."
)

# Speech model output format
SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # 16-bit

VOICES = {Language.ENGLISH: 'Kore', Language.TAMIL: 'Puck'}


def _strip_code_fence(text):
    # The response might be wrapped in ```json ... ```
    text = text.strip()
    if text.startswith('```'):
        text = text.split('\n', 1)[1] if '\n' in text else ''
        text = text.rsplit('```', 1)[0]
    return text.strip()


def parse_chapter(response_text) -> List[Verse]:
    """Turn the model's JSON array into verses ordered by number.

    Raises ChapterFormatError for anything that is not a non-empty list of
    {number, text} objects.
    """
    try:
        payload = json.loads(_strip_code_fence(response_text))
    except json.JSONDecodeError as e:
        logger.error(f"Bible JSON parse error: {e}")
        raise ChapterFormatError("The chapter could not be formatted properly. Please try again.") from e

    if not isinstance(payload, list) or not payload:
        raise ChapterFormatError("Scripture data format error.")

    try:
        items = [VerseSchema.model_validate(item) for item in payload]
    except ValidationError as e:
        logger.error(f"Bible verse validation error: {e}")
        raise ChapterFormatError("The chapter could not be formatted properly. Please try again.") from e

    # sorted() is stable, duplicates keep the order the model gave them
    return [Verse(number=item.number, text=item.text) for item in sorted(items, key=lambda v: v.number)]


def pcm_to_wav(pcm, sample_rate=SAMPLE_RATE, channels=CHANNELS):
    """Wrap raw 16-bit PCM in a WAV container so clients can play it directly."""
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(SAMPLE_WIDTH)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()


class ContentService:
    """Scripture, commentary, devotionals and speech from the content provider.

    Every provider call goes through call_with_retry; chapters are read
    through and written back to the chapter cache.
    """

    def __init__(self, provider, cache, retries=3, delay=1.0, sleep=time.sleep):
        self.provider = provider
        self.cache = cache
        self.retries = retries
        self.delay = delay
        self.sleep = sleep
        self._devotionals = {}

    def _with_retry(self, fn):
        return call_with_retry(fn, retries=self.retries, delay=self.delay, sleep=self.sleep)

    def get_chapter_verses(self, book_name, chapter, language=Language.ENGLISH):
        language = Language(language)
        cached = self.cache.lookup(language, book_name, chapter)
        if cached:
            return cached

        version = 'Tamil Bible (BSI)' if language == Language.TAMIL else 'KJV English'
        prompt = (
            f"Provide the full scripture for {book_name} chapter {chapter}. Version: {version}. "
            f'Return only a JSON array of objects with "number" and "text" keys. Ensure no verses are skipped.'
        )

        def fetch():
            response_text = self.provider.generate_text(
                prompt,
                system_instruction=CHAPTER_SYSTEM_INSTRUCTION,
                response_schema=list[VerseSchema],
                max_output_tokens=12000,
            )
            if not response_text or not response_text.strip():
                raise EmptyResponseError("Empty response: no verses were generated")
            return parse_chapter(response_text)

        logger.info(f"Fetching {book_name} {chapter} ({language.value}) from provider")
        verses = self._with_retry(fetch)
        self.cache.store(language, book_name, chapter, verses)
        return verses

    def get_verse_commentary(self, verse_ref, text, language=Language.ENGLISH):
        """Short commentary on a verse; never raises, falls back to a blessing."""
        language = Language(language)
        prompt = (
            f'Provide a spiritual Christian commentary for {verse_ref}: "{text}". '
            f"Focus on CSI (Church of South India) values of faith, grace, and service. "
            f"{'Respond in Tamil.' if language == Language.TAMIL else 'Respond in English.'} Max 100 words."
        )
        try:
            response_text = self._with_retry(lambda: self.provider.generate_text(prompt))
        except Exception as e:
            logger.warning(f"Commentary unavailable for {verse_ref}: {e}")
            return COMMENTARY_FALLBACK
        return response_text or COMMENTARY_FALLBACK

    def generate_daily_devotion(self, language=Language.ENGLISH):
        language = Language(language)
        prompt = (
            "Generate a short daily Christian devotional message. Format your output as a pure JSON object. "
            f"Language: {'Tamil' if language == Language.TAMIL else 'English'}."
        )

        def fetch():
            response_text = self.provider.generate_text(prompt, response_schema=DevotionalSchema)
            if not response_text:
                raise EmptyResponseError("Empty response from AI for devotional")
            data = DevotionalSchema.model_validate_json(_strip_code_fence(response_text))
            return Devotional(
                verse_ref=data.verseRef,
                verse_text=data.verseText,
                title=data.title,
                content=data.content,
                prayer=data.prayer,
            ).for_today()

        return self._with_retry(fetch)

    def daily_devotion(self, language=Language.ENGLISH):
        """Today's devotional, or the built-in one when generation fails.

        A generated devotional is reused for the rest of the day so the
        audio endpoint reads the same verse the reader is looking at.
        """
        language = Language(language)
        today = datetime.date.today().isoformat()
        memo = self._devotionals.get(language)
        if memo is not None and memo.date == today:
            return memo
        try:
            devotional = self.generate_daily_devotion(language)
        except Exception as e:
            logger.error(f"Failed to load AI devotion: {e}")
            return INITIAL_DEVOTIONAL.for_today()
        self._devotionals[language] = devotional
        return devotional

    def generate_speech(self, text, language=Language.ENGLISH):
        """Raw PCM audio of text read aloud. Raises SpeechUnavailableError on empty output."""
        language = Language(language)
        prompt = f"வாசிக்கவும்: {text}" if language == Language.TAMIL else f"Read clearly: {text}"

        def fetch():
            audio = self.provider.generate_speech(prompt, VOICES[language])
            if not audio:
                raise SpeechUnavailableError("No audio data returned from API")
            return audio

        return self._with_retry(fetch)
