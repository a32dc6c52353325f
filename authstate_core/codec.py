"""
authstate_core.codec
--------------------
Text serialization for stored records.

Values are JSON documents that may carry raw binary leaves. Binary leaves are
written as a tagged object so they can be told apart from ordinary objects:

    {"type": "Buffer", "data": "<base64>"}

On the way back in, any object with that marker shape (or the legacy
``{"buffer": true, "value": ...}`` form) is turned back into ``bytes``. The
payload may be either base64 text or a list of byte values. The marker shape
is reserved: a caller object that happens to match it and carries a valid
payload comes back as ``bytes``. One whose payload is not valid base64 or a
byte list is left as a plain dict.

Output is ASCII-only JSON, so strings holding lone surrogates (e.g. a name
cut in the middle of an emoji) are stored as ``\\udXXX`` escapes instead of
failing the UTF-8 encode in SQLite.
"""

from __future__ import annotations
import binascii, json
from typing import Any, Dict
from .utils import b64e, b64d

BUFFER_TAG = "Buffer"


def _default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return {"type": BUFFER_TAG, "data": b64e(bytes(obj))}
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def _revive(obj: Dict[str, Any]) -> Any:
    if obj.get("type") == BUFFER_TAG or obj.get("buffer") is True:
        val = obj.get("data") or obj.get("value")
        try:
            if isinstance(val, str):
                return b64d(val, validate=True)
            if val is None or isinstance(val, list):
                return bytes(val or [])
        except (binascii.Error, TypeError, ValueError):
            pass
    return obj


def encode_value(value: Any) -> str:
    return json.dumps(value, default=_default, separators=(",", ":"))


def decode_value(text: str) -> Any:
    return json.loads(text, object_hook=_revive)
