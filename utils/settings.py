# utils/settings.py
from models.scripture import Language

DARK_MODE_KEY = 'bible_dark_mode'
LANGUAGE_KEY = 'bible_language'
FONT_SIZE_KEY = 'bible_font_size'

DEFAULT_FONT_SIZE = 18
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 32


class SettingsStore:
    """Reader preferences kept as individual keys in the durable store."""

    def __init__(self, kv, make_room=None):
        self.kv = kv
        self.make_room = make_room

    @property
    def dark_mode(self):
        return self.kv.get(DARK_MODE_KEY) == 'true'

    @dark_mode.setter
    def dark_mode(self, enabled):
        self.kv.set(DARK_MODE_KEY, 'true' if enabled else 'false', make_room=self.make_room)

    @property
    def language(self):
        try:
            return Language(self.kv.get(LANGUAGE_KEY, Language.ENGLISH.value))
        except ValueError:
            return Language.ENGLISH

    @language.setter
    def language(self, value):
        self.kv.set(LANGUAGE_KEY, Language(value).value, make_room=self.make_room)

    @property
    def font_size(self):
        try:
            return int(self.kv.get(FONT_SIZE_KEY, DEFAULT_FONT_SIZE))
        except ValueError:
            return DEFAULT_FONT_SIZE

    @font_size.setter
    def font_size(self, value):
        value = int(value)
        if not MIN_FONT_SIZE <= value <= MAX_FONT_SIZE:
            raise ValueError(f"Font size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}")
        self.kv.set(FONT_SIZE_KEY, str(value), make_room=self.make_room)

    def to_json(self):
        return {
            "language": self.language.value,
            "fontSize": self.font_size,
            "darkMode": self.dark_mode,
        }
