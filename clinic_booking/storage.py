# clinic_booking/storage.py

import json
import threading
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from .models import StoredValue

# Serializes read-modify-write of the shared collections within the process
write_lock = threading.RLock()


class KeyValueStore:
    """Flat string -> JSON text store, shaped after browser local storage.

    Every read goes to the backend and every write replaces the whole value
    under the key; there is no caching and no merging.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def read_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        return json.loads(raw)

    def write_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[dict] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SqlStore(KeyValueStore):
    """Keys persisted as rows of the stored_values table."""

    def __init__(self, session: Session):
        self.session = session

    def get_item(self, key: str) -> Optional[str]:
        # always hit the database, never the session's identity map
        row = self.session.get(StoredValue, key, populate_existing=True)
        if row is None:
            return None
        return row.value

    def set_item(self, key: str, value: str) -> None:
        # upsert: one row per key
        row = self.session.get(StoredValue, key, populate_existing=True)
        if row is None:
            row = StoredValue(key=key, value=value)
        else:
            row.value = value
        self.session.add(row)
        try:
            self.session.commit()
        except IntegrityError:
            # another session inserted the key first; overwrite its value
            self.session.rollback()
            row = self.session.get(StoredValue, key, populate_existing=True)
            if row is None:
                row = StoredValue(key=key, value=value)
            row.value = value
            self.session.add(row)
            self.session.commit()

    def remove_item(self, key: str) -> None:
        row = self.session.get(StoredValue, key)
        if row is None:
            return
        self.session.delete(row)
        self.session.commit()
