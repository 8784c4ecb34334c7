# utils/errors.py
"""Error taxonomy for content generation and local storage."""


class ContentError(Exception):
    """Base class for failures producing scripture, commentary, devotionals or speech."""


class EmptyResponseError(ContentError):
    """The provider answered without a payload. Transient: worth retrying."""

    def __init__(self, message="Empty response from AI"):
        super().__init__(message)


class ChapterFormatError(ContentError):
    """The chapter payload could not be parsed into verses. Not retried."""


class SpeechUnavailableError(ContentError):
    """No audio data came back from the speech model."""


class StorageQuotaExceeded(Exception):
    """A write would push the durable store past its byte budget."""

    def __init__(self, key, needed, quota):
        super().__init__(f"Writing {key!r} needs {needed} bytes, quota is {quota}")
        self.key = key
        self.needed = needed
        self.quota = quota


BUSY_MESSAGE = "The server is currently busy. Please wait a few seconds and try again."
RETRY_MESSAGE = "We encountered an issue opening this chapter. Please tap 'Try Again'."
UNAVAILABLE_MESSAGE = "The chapter is currently unavailable. Please check your connection or try again."


def user_message_for(error):
    """Map a failed chapter fetch to the notice shown to the reader."""
    text = str(error)
    if "quota" in text or "429" in text or getattr(error, "code", None) == 429:
        return BUSY_MESSAGE
    # Malformed chapters get the "Try Again" notice too, not the unavailable one
    if isinstance(error, (EmptyResponseError, ChapterFormatError)):
        return RETRY_MESSAGE
    return UNAVAILABLE_MESSAGE
