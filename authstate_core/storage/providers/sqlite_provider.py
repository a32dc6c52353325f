from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Iterator, Optional
import sqlite3, os
from authstate_core.codec import encode_value, decode_value
from authstate_core.errors import StoreOpenError
from authstate_core.logger import get_logger
from authstate_core.storage.provider import StorageProvider

log = get_logger("AuthState.Store")

DB_FILENAME = "db.sqlite"

# Fixed durability settings: WAL keeps small frequent writes cheap while
# committed transactions stay crash consistent.
PRAGMAS = (
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA temp_store = MEMORY",
    "PRAGMA mmap_size = 30000000000",
)


class SQLiteStorage(StorageProvider):
    def __init__(self, folder: str = "auth_info"):
        self.folder = str(folder)
        self.path = os.path.join(self.folder, DB_FILENAME)
        self.db: Optional[sqlite3.Connection] = None
        try:
            os.makedirs(self.folder, exist_ok=True)
            # autocommit; transaction() issues BEGIN/COMMIT itself
            self.db = sqlite3.connect(self.path, check_same_thread=False, isolation_level=None)
            self._init()
        except (OSError, sqlite3.Error) as e:
            if self.db is not None:
                self.db.close()
                self.db = None
            raise StoreOpenError(f"cannot open auth state at {self.path}: {e}") from e

        log.info(f"[STORE OPEN] {self.path}")

    def _init(self) -> None:
        for pragma in PRAGMAS:
            self.db.execute(pragma)
        self.db.execute("""CREATE TABLE IF NOT EXISTS auth_data(
            key TEXT PRIMARY KEY,
            value TEXT
        )""")

    def write_data(self, key: str, value: Any) -> None:
        self.db.execute(
            "INSERT OR REPLACE INTO auth_data(key, value) VALUES(?, ?)",
            (key, encode_value(value)),
        )

    def read_data(self, key: str) -> Optional[Any]:
        row = self.db.execute("SELECT value FROM auth_data WHERE key=?", (key,)).fetchone()
        if row is None:
            return None
        try:
            return decode_value(row[0])
        except (TypeError, ValueError) as e:
            log.warning(f"[STORE CORRUPT] key={key} treated as absent: {e}")
            return None

    def remove_data(self, key: str) -> None:
        self.db.execute("DELETE FROM auth_data WHERE key=?", (key,))

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Scoped write transaction.

        Commits when the block exits normally, rolls back and re-raises when
        it exits with an exception. Nested use joins the outer transaction.
        """
        if self.db.in_transaction:
            yield self.db
            return

        self.db.execute("BEGIN")
        try:
            yield self.db
            self.db.execute("COMMIT")
        except BaseException:
            if self.db.in_transaction:
                self.db.execute("ROLLBACK")
            raise

    def keys(self) -> list[str]:
        return [r[0] for r in self.db.execute("SELECT key FROM auth_data ORDER BY key")]

    def close(self) -> None:
        if self.db is not None:
            self.db.close()
            self.db = None
            log.debug(f"[STORE CLOSE] {self.path}")
