from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional

from models.saved_verse import HIGHLIGHT_COLORS

LanguageCode = Literal['en', 'ta']


class VerseRefPayload(BaseModel):
    bookId: str = Field(..., max_length=10)
    chapter: int = Field(..., gt=0)
    verseNumber: int = Field(..., gt=0)
    text: str
    lang: LanguageCode = 'en'
    bookName: Optional[str] = Field(None, max_length=100)


class HighlightPayload(VerseRefPayload):
    color: str

    @field_validator('color')
    @classmethod
    def check_color(cls, value):
        if value not in HIGHLIGHT_COLORS:
            raise ValueError(f"color must be one of {', '.join(HIGHLIGHT_COLORS)}")
        return value


class NavigatePayload(BaseModel):
    testament: Optional[Literal['Old', 'New']] = None
    bookId: Optional[str] = Field(None, max_length=10)
    chapter: Optional[int] = Field(None, gt=0)
    lang: Optional[LanguageCode] = None


class CommentaryPayload(BaseModel):
    verseNumber: int = Field(..., gt=0)


class SpeechPayload(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    lang: LanguageCode = 'en'


class PrayerCreate(BaseModel):
    title: str = Field(..., max_length=200)
    content: str = ''

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, value):
        if not value.strip():
            raise ValueError("title must not be blank")
        return value.strip()


class SettingsUpdate(BaseModel):
    language: Optional[LanguageCode] = None
    fontSize: Optional[int] = Field(None, ge=12, le=32)
    darkMode: Optional[bool] = None


def validation_message(error):
    """Flatten a pydantic ValidationError into one line for the JSON error body."""
    parts = []
    for item in error.errors():
        location = '.'.join(str(p) for p in item.get('loc', ())) or 'body'
        parts.append(f"{location}: {item.get('msg')}")
    return '; '.join(parts)
