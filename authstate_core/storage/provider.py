# authstate_core/storage/provider.py
from __future__ import annotations
from contextlib import AbstractContextManager
from typing import Any, Optional


class StorageProvider:
    # Interface
    def read_data(self, key: str) -> Optional[Any]: ...
    def write_data(self, key: str, value: Any) -> None: ...
    def remove_data(self, key: str) -> None: ...
    def transaction(self) -> AbstractContextManager: ...
    def close(self) -> None: ...
