# models/kv_entry.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from database import Base

class KeyValueEntry(Base):
    __tablename__ = 'kv_store'

    # Autoincrement id doubles as the enumeration order used for cache eviction
    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(255), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f'<KeyValueEntry {self.id} {self.key} ({len(self.value or "")} chars)>'
