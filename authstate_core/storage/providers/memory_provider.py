from contextlib import contextmanager
from typing import Any, Dict, Optional
from authstate_core.codec import encode_value, decode_value
from authstate_core.logger import get_logger
from authstate_core.storage.provider import StorageProvider

log = get_logger("AuthState.Store")


class InMemoryStorage(StorageProvider):
    """Dict-backed provider; rows hold encoded text, same as the SQLite table."""

    def __init__(self):
        self.rows: Dict[str, str] = {}
        self._in_tx = False

    def write_data(self, key: str, value: Any):
        self.rows[key] = encode_value(value)

    def read_data(self, key: str) -> Optional[Any]:
        text = self.rows.get(key)
        if text is None:
            return None
        try:
            return decode_value(text)
        except (TypeError, ValueError) as e:
            log.warning(f"[STORE CORRUPT] key={key} treated as absent: {e}")
            return None

    def remove_data(self, key: str):
        self.rows.pop(key, None)

    @contextmanager
    def transaction(self):
        if self._in_tx:
            yield self.rows
            return

        snapshot = dict(self.rows)
        self._in_tx = True
        try:
            yield self.rows
        except BaseException:
            self.rows = snapshot
            raise
        finally:
            self._in_tx = False

    def keys(self):
        return sorted(self.rows)

    def close(self): pass
