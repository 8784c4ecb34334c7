# models/prayer.py
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PrayerRequest:
    id: str
    title: str
    content: str
    timestamp: int  # epoch milliseconds
    is_answered: bool = False

    def toggled(self):
        return replace(self, is_answered=not self.is_answered)

    def to_json(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "isAnswered": self.is_answered,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_json(cls, data):
        return cls(
            id=str(data["id"]),
            title=data["title"],
            content=data.get("content", ""),
            timestamp=int(data["timestamp"]),
            is_answered=bool(data.get("isAnswered", False)),
        )

    def __repr__(self):
        return f'<PrayerRequest {self.id} {self.title!r} answered={self.is_answered}>'
