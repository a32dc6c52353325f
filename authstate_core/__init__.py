"""
authstate_core
==============
Durable authentication state for a messaging session.

Provides:
- SQLite-backed key-value store with atomic batch writes
- Binary-safe JSON codec for stored records
- Default credentials generation (X25519 / Ed25519)
"""

from .auth_state import (
    AuthenticationState,
    AuthStateHandle,
    SignalKeyStore,
    delete_sqlite_auth_state,
    load_auth_state,
    use_auth_state,
    use_sqlite_auth_state,
)
from .errors import AuthStateError, BatchWriteError, StoreOpenError
from .models import CREDS_KEY, AppStateSyncKeyData, KeyCategory

__all__ = [
    "AuthenticationState",
    "AuthStateHandle",
    "SignalKeyStore",
    "delete_sqlite_auth_state",
    "load_auth_state",
    "use_auth_state",
    "use_sqlite_auth_state",
    "AuthStateError",
    "BatchWriteError",
    "StoreOpenError",
    "CREDS_KEY",
    "AppStateSyncKeyData",
    "KeyCategory",
]
