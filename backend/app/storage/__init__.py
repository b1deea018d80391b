from app.storage.base import Storage, utcnow
from app.storage.memory import MemoryStorage
from app.storage.sql import SqlStorage

__all__ = ["Storage", "MemoryStorage", "SqlStorage", "utcnow"]
