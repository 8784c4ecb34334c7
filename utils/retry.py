# utils/retry.py
import logging
import time
from google.genai import errors as genai_errors
from utils.errors import EmptyResponseError

logger = logging.getLogger(__name__)

# Markers for provider failures that only surface as text
TRANSIENT_MARKERS = ("429", "quota", "RESOURCE_EXHAUSTED", "500", "Empty response")


def is_transient(error):
    """True for rate limits / quota, server errors and empty responses."""
    if isinstance(error, EmptyResponseError):
        return True
    if isinstance(error, genai_errors.APIError):
        code = getattr(error, "code", None) or 0
        if code == 429 or code >= 500:
            return True
    message = str(error)
    return any(marker in message for marker in TRANSIENT_MARKERS)


def call_with_retry(fn, retries=3, delay=1.0, sleep=time.sleep):
    """Call fn(), retrying transient failures with exponential backoff.

    Waits delay seconds before the first retry and doubles it for each one
    after that. Non-transient errors, and the last transient one once the
    retries are spent, are re-raised unchanged.
    """
    while True:
        try:
            return fn()
        except Exception as e:
            if retries <= 0 or not is_transient(e):
                raise
            logger.warning(f"API error encountered. Retrying in {delay:.2f}s... ({retries} retries left): {e}")
            sleep(delay)
            retries -= 1
            delay *= 2
