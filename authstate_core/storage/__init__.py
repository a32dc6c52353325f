# authstate_core/storage/__init__.py

from .provider import StorageProvider
from .providers.memory_provider import InMemoryStorage
from .providers.sqlite_provider import SQLiteStorage, DB_FILENAME
import os


def load_storage_provider(config: dict | None = None) -> StorageProvider:
    """
    Factory resolver for selecting the runtime storage backend.

    For now:
        - sqlite (default)
        - memory
    """
    config = config or {}
    provider = config.get("provider") or os.getenv("AUTHSTATE_STORAGE_PROVIDER", "sqlite")

    if provider == "memory":
        return InMemoryStorage()

    if provider == "sqlite":
        folder = config.get("folder") or os.getenv("AUTHSTATE_DIR", "auth_info")
        return SQLiteStorage(folder)

    raise ValueError(f"Unknown storage provider: {provider}")


__all__ = [
    "StorageProvider",
    "InMemoryStorage",
    "SQLiteStorage",
    "DB_FILENAME",
    "load_storage_provider",
]
