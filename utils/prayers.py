# utils/prayers.py
import json
import logging
import threading
import time
import uuid
from models.prayer import PrayerRequest

logger = logging.getLogger(__name__)

PRAYERS_KEY = 'bible_prayer_requests'


class PrayerJournal:
    """Prayer requests, newest first, written through to the durable store."""

    def __init__(self, kv, make_room=None):
        self.kv = kv
        self.make_room = make_room
        self._lock = threading.Lock()
        self._prayers = self._load()

    def _load(self):
        raw = self.kv.get(PRAYERS_KEY)
        if not raw:
            return []
        try:
            return [PrayerRequest.from_json(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to parse prayer journal: {e}")
            return []

    def _save(self, prayers):
        document = json.dumps([p.to_json() for p in prayers], ensure_ascii=False)
        self.kv.set(PRAYERS_KEY, document, make_room=self.make_room)
        self._prayers = prayers

    def list(self):
        return list(self._prayers)

    def get(self, prayer_id):
        return next((p for p in self._prayers if p.id == prayer_id), None)

    def add(self, title, content=''):
        title = title.strip()
        if not title:
            raise ValueError("A prayer needs a title")
        prayer = PrayerRequest(
            id=uuid.uuid4().hex,
            title=title,
            content=content,
            timestamp=int(time.time() * 1000),
        )
        with self._lock:
            self._save([prayer] + self._prayers)
        logger.info(f"Added prayer request {prayer.id}")
        return prayer

    def toggle_answered(self, prayer_id):
        with self._lock:
            updated = None
            prayers = []
            for prayer in self._prayers:
                if prayer.id == prayer_id:
                    prayer = updated = prayer.toggled()
                prayers.append(prayer)
            if updated is not None:
                self._save(prayers)
            return updated

    def delete(self, prayer_id):
        with self._lock:
            prayers = [p for p in self._prayers if p.id != prayer_id]
            if len(prayers) == len(self._prayers):
                return False
            self._save(prayers)
            return True
