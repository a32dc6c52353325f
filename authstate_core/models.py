# authstate_core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


CREDS_KEY = "creds"


class KeyCategory:
    """Key-material classes the protocol layer stores under ``<category>-<id>``."""
    PRE_KEY = "pre-key"
    SESSION = "session"
    SENDER_KEY = "sender-key"
    SENDER_KEY_MEMORY = "sender-key-memory"
    APP_STATE_SYNC_KEY = "app-state-sync-key"
    APP_STATE_SYNC_VERSION = "app-state-sync-version"
    LID_MAPPING = "lid-mapping"
    DEVICE_LIST = "device-list"
    TCTOKEN = "tctoken"

    ALL = (
        PRE_KEY,
        SESSION,
        SENDER_KEY,
        SENDER_KEY_MEMORY,
        APP_STATE_SYNC_KEY,
        APP_STATE_SYNC_VERSION,
        LID_MAPPING,
        DEVICE_LIST,
        TCTOKEN,
    )


@dataclass
class AppStateSyncKeyData:
    """
    Typed view of an ``app-state-sync-key`` record.

    Stored on disk as the camelCase dict produced by ``to_dict`` so that
    records written by other clients of the same session folder still load.
    """
    key_data: bytes = b""
    fingerprint: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"keyData": self.key_data, "fingerprint": dict(self.fingerprint)}
        if self.timestamp is not None:
            d["timestamp"] = self.timestamp
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppStateSyncKeyData":
        ts = data.get("timestamp")
        return cls(
            key_data=bytes(data.get("keyData") or b""),
            fingerprint=dict(data.get("fingerprint") or {}),
            timestamp=long_to_int(ts) if ts is not None else None,
        )


def long_to_int(value: Any) -> int:
    """Accept plain ints, numeric strings and 64-bit {"low", "high", "unsigned"} longs."""
    if isinstance(value, dict):
        low = int(value.get("low", 0)) & 0xFFFFFFFF
        high = int(value.get("high", 0))
        if value.get("unsigned"):
            high &= 0xFFFFFFFF
        return (high << 32) | low
    return int(value)


def _identity(value: Any) -> Any:
    return value


def _app_state_sync_key(value: Any) -> Any:
    if isinstance(value, AppStateSyncKeyData):
        return value
    return AppStateSyncKeyData.from_dict(value)


# category -> post-decode transform; anything not listed is returned as stored
DECODERS: Dict[str, Callable[[Any], Any]] = {
    KeyCategory.APP_STATE_SYNC_KEY: _app_state_sync_key,
}


def decoder_for(category: str) -> Callable[[Any], Any]:
    return DECODERS.get(category, _identity)
