"""
authstate_core.utils
--------------------
Lightweight helpers for base64 coding and composite record keys.
"""

from __future__ import annotations
import base64


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str, validate: bool = False) -> bytes:
    return base64.b64decode(s.encode("ascii"), validate=validate)

def record_key(category: str, record_id: str) -> str:
    return f"{category}-{record_id}"
