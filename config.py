# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv()

class Config:
    DATABASE_URL = os.getenv('DATABASE_URL', f"sqlite:///{os.path.join(BASE_DIR, 'holyword.db')}")

    # Gemini settings
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('API_KEY')
    TEXT_MODEL = os.getenv('GEMINI_TEXT_MODEL', 'gemini-3-flash-preview')
    SPEECH_MODEL = os.getenv('GEMINI_SPEECH_MODEL', 'gemini-2.5-flash-preview-tts')

    # Durable store budget, roughly what a browser grants localStorage
    STORE_QUOTA_BYTES = int(os.getenv('STORE_QUOTA_BYTES', 5 * 1024 * 1024))

    RETRY_ATTEMPTS = int(os.getenv('RETRY_ATTEMPTS', 3))
    RETRY_DELAY = float(os.getenv('RETRY_DELAY', 1.0))  # seconds, doubled per retry
    PREFETCH_DELAY = float(os.getenv('PREFETCH_DELAY', 15.0))

    PORT = int(os.getenv('PORT', 5001))
