# models/scripture.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Language(str, Enum):
    ENGLISH = "en"
    TAMIL = "ta"


class Testament(str, Enum):
    OLD = "Old"
    NEW = "New"


@dataclass(frozen=True)
class Verse:
    number: int
    text: str
    is_red_letter: Optional[bool] = None

    def to_json(self):
        data = {"number": self.number, "text": self.text}
        if self.is_red_letter is not None:
            data["isRedLetter"] = self.is_red_letter
        return data

    @classmethod
    def from_json(cls, data):
        return cls(
            number=int(data["number"]),
            text=data["text"],
            is_red_letter=data.get("isRedLetter"),
        )


@dataclass(frozen=True)
class Book:
    id: str
    name_en: str
    name_ta: str
    testament: Testament
    chapters: int

    def name_for(self, language):
        """Localized book name, also used in cache keys and prompts."""
        return self.name_ta if Language(language) == Language.TAMIL else self.name_en

    def to_json(self, language=None):
        data = {
            "id": self.id,
            "nameEn": self.name_en,
            "nameTa": self.name_ta,
            "testament": self.testament.value,
            "chapters": self.chapters,
        }
        if language is not None:
            data["name"] = self.name_for(language)
        return data


# (id, English name, Tamil name, testament, chapter count) in canonical order
_BOOK_TABLE = [
    ('GEN', 'Genesis', 'ஆதியாகமம்', Testament.OLD, 50),
    ('EXO', 'Exodus', 'யாத்திராகமம்', Testament.OLD, 40),
    ('LEV', 'Leviticus', 'லேவியராகமம்', Testament.OLD, 27),
    ('NUM', 'Numbers', 'எண்ணாகமம்', Testament.OLD, 36),
    ('DEU', 'Deuteronomy', 'உபாகமம்', Testament.OLD, 34),
    ('JOS', 'Joshua', 'யோசுவா', Testament.OLD, 24),
    ('JDG', 'Judges', 'நியாயாதிபதிகள்', Testament.OLD, 21),
    ('RUT', 'Ruth', 'ரூத்', Testament.OLD, 4),
    ('1SA', '1 Samuel', '1 சாமுவேல்', Testament.OLD, 31),
    ('2SA', '2 Samuel', '2 சாமுவேல்', Testament.OLD, 24),
    ('1KI', '1 Kings', '1 இராஜாக்கள்', Testament.OLD, 22),
    ('2KI', '2 Kings', '2 இராஜாக்கள்', Testament.OLD, 25),
    ('1CH', '1 Chronicles', '1 நாளாகமம்', Testament.OLD, 29),
    ('2CH', '2 Chronicles', '2 நாளாகமம்', Testament.OLD, 36),
    ('EZR', 'Ezra', 'எஸ்றா', Testament.OLD, 10),
    ('NEH', 'Nehemiah', 'நெகேமியா', Testament.OLD, 13),
    ('EST', 'Esther', 'எஸ்தர்', Testament.OLD, 10),
    ('JOB', 'Job', 'யோபு', Testament.OLD, 42),
    ('PSA', 'Psalms', 'சங்கீதம்', Testament.OLD, 150),
    ('PRO', 'Proverbs', 'நீதிமொழிகள்', Testament.OLD, 31),
    ('ECC', 'Ecclesiastes', 'பிரசங்கி', Testament.OLD, 12),
    ('SNG', 'Song of Solomon', 'உன்னதப்பாட்டு', Testament.OLD, 8),
    ('ISA', 'Isaiah', 'ஏசாயா', Testament.OLD, 66),
    ('JER', 'Jeremiah', 'எரேமியா', Testament.OLD, 52),
    ('LAM', 'Lamentations', 'புலம்பல்', Testament.OLD, 5),
    ('EZK', 'Ezekiel', 'எசேக்கியேல்', Testament.OLD, 48),
    ('DAN', 'Daniel', 'தானியேல்', Testament.OLD, 12),
    ('HOS', 'Hosea', 'ஓசியா', Testament.OLD, 14),
    ('JOL', 'Joel', 'யோவேல்', Testament.OLD, 3),
    ('AMO', 'Amos', 'ஆமோஸ்', Testament.OLD, 9),
    ('OBA', 'Obadiah', 'ஒபதியா', Testament.OLD, 1),
    ('JON', 'Jonah', 'யோனா', Testament.OLD, 4),
    ('MIC', 'Micah', 'மீகா', Testament.OLD, 7),
    ('NAM', 'Nahum', 'நாகூம்', Testament.OLD, 3),
    ('HAB', 'Habakkuk', 'ஆபகூக்', Testament.OLD, 3),
    ('ZEP', 'Zephaniah', 'செப்பனியா', Testament.OLD, 3),
    ('HAG', 'Haggai', 'ஆகாய்', Testament.OLD, 2),
    ('ZEC', 'Zechariah', 'சகரியா', Testament.OLD, 14),
    ('MAL', 'Malachi', 'மல்கியா', Testament.OLD, 4),
    ('MAT', 'Matthew', 'மத்தேயு', Testament.NEW, 28),
    ('MRK', 'Mark', 'மாற்கு', Testament.NEW, 16),
    ('LUK', 'Luke', 'லூக்கா', Testament.NEW, 24),
    ('JHN', 'John', 'யோவான்', Testament.NEW, 21),
    ('ACT', 'Acts', 'அப்போஸ்தலருடைய நடபடிகள்', Testament.NEW, 28),
    ('ROM', 'Romans', 'ரோமர்', Testament.NEW, 16),
    ('1CO', '1 Corinthians', '1 கொரிந்தியர்', Testament.NEW, 16),
    ('2CO', '2 Corinthians', '2 கொரிந்தியர்', Testament.NEW, 13),
    ('GAL', 'Galatians', 'கலாத்தியர்', Testament.NEW, 6),
    ('EPH', 'Ephesians', 'எபேசியர்', Testament.NEW, 6),
    ('PHP', 'Philippians', 'பிலிப்பியர்', Testament.NEW, 4),
    ('COL', 'Colossians', 'கொலோசெயர்', Testament.NEW, 4),
    ('1TH', '1 Thessalonians', '1 தெசலோனிக்கேயர்', Testament.NEW, 5),
    ('2TH', '2 Thessalonians', '2 தெசலோனிக்கேயர்', Testament.NEW, 3),
    ('1TI', '1 Timothy', '1 தீமோத்தேயு', Testament.NEW, 6),
    ('2TI', '2 Timothy', '2 தீமோத்தேயு', Testament.NEW, 4),
    ('TIT', 'Titus', 'தீத்து', Testament.NEW, 3),
    ('PHM', 'Philemon', 'பிலேமோன்', Testament.NEW, 1),
    ('HEB', 'Hebrews', 'எபிரெயர்', Testament.NEW, 13),
    ('JAS', 'James', 'யாக்கோபு', Testament.NEW, 5),
    ('1PE', '1 Peter', '1 பேதுரு', Testament.NEW, 5),
    ('2PE', '2 Peter', '2 பேதுரு', Testament.NEW, 3),
    ('1JN', '1 John', '1 யோவான்', Testament.NEW, 5),
    ('2JN', '2 John', '2 யோவான்', Testament.NEW, 1),
    ('3JN', '3 John', '3 யோவான்', Testament.NEW, 1),
    ('JUD', 'Jude', 'யூதா', Testament.NEW, 1),
    ('REV', 'Revelation', 'வெளிப்படுத்தின விசேஷம்', Testament.NEW, 22),
]

BIBLE_BOOKS = [Book(*row) for row in _BOOK_TABLE]

_BOOK_INDEX = {book.id: i for i, book in enumerate(BIBLE_BOOKS)}


def get_book(book_id):
    """Look up a book by id (case-insensitive). Raises KeyError if unknown."""
    return BIBLE_BOOKS[_BOOK_INDEX[book_id.upper()]]


def first_book_of(testament):
    testament = Testament(testament)
    return next(book for book in BIBLE_BOOKS if book.testament == testament)


def books_in(testament):
    testament = Testament(testament)
    return [book for book in BIBLE_BOOKS if book.testament == testament]


def next_chapter(book, chapter):
    """Return the (book, chapter) after the given one, or None at the end of the Bible."""
    if chapter < book.chapters:
        return book, chapter + 1
    index = _BOOK_INDEX[book.id]
    if index < len(BIBLE_BOOKS) - 1:
        return BIBLE_BOOKS[index + 1], 1
    return None


def prev_chapter(book, chapter):
    """Return the (book, chapter) before the given one, or None at Genesis 1."""
    if chapter > 1:
        return book, chapter - 1
    index = _BOOK_INDEX[book.id]
    if index > 0:
        prev_book = BIBLE_BOOKS[index - 1]
        return prev_book, prev_book.chapters
    return None
