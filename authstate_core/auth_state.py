"""
authstate_core.auth_state
-------------------------
Async session view over a storage provider.

    handle = await use_sqlite_auth_state("sessions/main")
    creds = handle.state.creds
    keys = await handle.state.keys.get("pre-key", {"1", "2"})
    await handle.state.keys.set({"pre-key": {"1": None, "3": {...}}})
    await handle.save_creds()

Credentials are loaded once at open and cached on the handle; they are only
written back by save_creds(). Keyed records are read on demand.

Every storage call runs on a single worker thread owned by the handle, so the
SQLite connection never crosses threads and a batch set is one unit of work.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Iterable, Mapping, Optional
import asyncio, os, shutil

from .crypto import init_auth_creds
from .errors import BatchWriteError
from .logger import get_logger
from .models import CREDS_KEY, decoder_for
from .storage import StorageProvider, SQLiteStorage, load_storage_provider
from .utils import record_key

log = get_logger("AuthState.Keys")
teardown_log = get_logger("AuthState.Teardown")

KeyBatch = Mapping[str, Mapping[str, Any]]


def _new_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="authstate")


class SignalKeyStore:
    """Keyed-record accessor: ``<category>-<id>`` point reads and atomic batch writes."""

    def __init__(self, storage: StorageProvider, run: Callable[..., Any]):
        self._storage = storage
        self._run = run

    async def get(self, category: str, ids: Iterable[str]) -> Dict[str, Any]:
        decode = decoder_for(category)

        async def _one(record_id: str):
            key = record_key(category, record_id)
            value = await self._run(self._storage.read_data, key)
            if value is not None:
                try:
                    value = decode(value)
                except (AttributeError, TypeError, ValueError) as e:
                    log.warning(f"[KEYS GET] key={key} failed {category} decode: {e}")
                    value = None
            return record_id, value

        pairs = await asyncio.gather(*(_one(i) for i in ids))
        return dict(pairs)

    async def set(self, data: KeyBatch) -> None:
        await self._run(self._apply_batch, data)

    def _apply_batch(self, data: KeyBatch) -> None:
        written = removed = 0
        try:
            with self._storage.transaction():
                for category, entries in data.items():
                    for record_id, value in entries.items():
                        key = record_key(category, record_id)
                        if value is not None:
                            self._storage.write_data(key, value)
                            written += 1
                        else:
                            self._storage.remove_data(key)
                            removed += 1
        except Exception as e:
            log.error(f"[KEYS SET] batch rolled back: {e}")
            raise BatchWriteError(f"batch write rolled back: {e}") from e

        log.debug(f"[KEYS SET] written={written} removed={removed}")


@dataclass
class AuthenticationState:
    creds: Dict[str, Any]
    keys: SignalKeyStore


class AuthStateHandle:
    def __init__(self, storage: StorageProvider, creds: Dict[str, Any],
                 executor: ThreadPoolExecutor):
        self._storage = storage
        self._executor = executor
        self.state = AuthenticationState(creds=creds, keys=SignalKeyStore(storage, self._run))

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args))

    @property
    def creds(self) -> Dict[str, Any]:
        return self.state.creds

    @property
    def keys(self) -> SignalKeyStore:
        return self.state.keys

    async def save_creds(self) -> None:
        """Persist whatever credentials the caller currently holds under the reserved key."""
        await self._run(self._storage.write_data, CREDS_KEY, self.state.creds)
        log.debug("[CREDS SAVE] persisted")

    async def close(self) -> None:
        await self._run(self._storage.close)
        self._executor.shutdown(wait=True)

    async def __aenter__(self) -> "AuthStateHandle":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()


async def use_auth_state(storage: StorageProvider,
                         executor: Optional[ThreadPoolExecutor] = None) -> AuthStateHandle:
    executor = executor or _new_executor()
    loop = asyncio.get_running_loop()
    creds = await loop.run_in_executor(executor, storage.read_data, CREDS_KEY)
    if creds is None:
        creds = init_auth_creds()
        log.info("[CREDS INIT] fresh credentials, not yet saved")
    return AuthStateHandle(storage, creds, executor)


async def _open_on_worker(factory: Callable[[], StorageProvider]) -> AuthStateHandle:
    executor = _new_executor()
    loop = asyncio.get_running_loop()
    try:
        storage = await loop.run_in_executor(executor, factory)
    except BaseException:
        executor.shutdown(wait=False)
        raise
    try:
        return await use_auth_state(storage, executor)
    except BaseException:
        await loop.run_in_executor(executor, storage.close)
        executor.shutdown(wait=False)
        raise


async def use_sqlite_auth_state(folder: str) -> AuthStateHandle:
    """Open (creating if needed) the SQLite auth state in *folder*. Raises StoreOpenError."""
    return await _open_on_worker(partial(SQLiteStorage, str(folder)))


async def load_auth_state(config: dict | None = None) -> AuthStateHandle:
    """Same as use_sqlite_auth_state but resolves the provider via load_storage_provider()."""
    return await _open_on_worker(partial(load_storage_provider, config))


def _remove_tree(folder: str) -> bool:
    if not os.path.lexists(folder):
        return False
    if os.path.isdir(folder) and not os.path.islink(folder):
        shutil.rmtree(folder)
    else:
        os.remove(folder)
    return True


async def delete_sqlite_auth_state(folder: str) -> None:
    """Remove the whole session folder. Best-effort: failures are logged, never raised."""
    folder = str(folder)
    try:
        loop = asyncio.get_running_loop()
        removed = await loop.run_in_executor(None, _remove_tree, folder)
        if removed:
            teardown_log.debug(f"[TEARDOWN] removed session folder {folder}")
    except Exception:
        teardown_log.exception(f"[TEARDOWN] failed to remove session folder {folder}")
