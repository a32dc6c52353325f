"""
authstate_core.crypto
---------------------
Key generation for a fresh credentials record:

- X25519 key pairs for the noise, pairing and identity keys
- Ed25519 signature binding the signed pre-key to the identity key
- init_auth_creds(): the default credentials document used when a session
  folder holds no ``creds`` record yet

Key pairs are plain dicts of raw bytes ({"private": ..., "public": ...}) so
they pass straight through the record codec.
"""

from __future__ import annotations
from typing import Any, Dict, Tuple
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519
import os, secrets
from .utils import b64e

# Signal-style type prefix prepended to a public key before signing
KEY_BUNDLE_TYPE = b"\x05"

KeyPair = Dict[str, bytes]


# --------- X25519 ----------
def x25519_generate() -> Tuple[bytes, bytes]:
    sk = x25519.X25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def generate_key_pair() -> KeyPair:
    priv, pub = x25519_generate()
    return {"private": priv, "public": pub}


# --------- Ed25519 (sign/verify) ----------
def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    return sk.sign(data)

def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(sig, data)
        return True
    except (InvalidSignature, ValueError):
        return False

def signing_public_key(identity: KeyPair) -> bytes:
    # The identity private scalar doubles as the Ed25519 seed.
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(identity["private"])
    return sk.public_key().public_bytes_raw()


# --------- Signed pre-key ----------
def signed_key_pair(identity: KeyPair, key_id: int) -> Dict[str, Any]:
    pre_key = generate_key_pair()
    signature = ed25519_sign(identity["private"], KEY_BUNDLE_TYPE + pre_key["public"])
    return {"keyPair": pre_key, "signature": signature, "keyId": key_id}

def verify_signed_pre_key(identity: KeyPair, signed: Dict[str, Any]) -> bool:
    return ed25519_verify(
        signing_public_key(identity),
        signed["signature"],
        KEY_BUNDLE_TYPE + signed["keyPair"]["public"],
    )


def generate_registration_id() -> int:
    return secrets.randbelow(16380) + 1


def init_auth_creds() -> Dict[str, Any]:
    """
    Build a brand-new, not yet persisted credentials document.

    The caller owns the returned dict; it only reaches disk through an
    explicit save.
    """
    identity = generate_key_pair()
    return {
        "noiseKey": generate_key_pair(),
        "pairingEphemeralKeyPair": generate_key_pair(),
        "signedIdentityKey": identity,
        "signedPreKey": signed_key_pair(identity, 1),
        "registrationId": generate_registration_id(),
        "advSecretKey": b64e(os.urandom(32)),
        "processedHistoryMessages": [],
        "nextPreKeyId": 1,
        "firstUnuploadedPreKeyId": 1,
        "accountSyncCounter": 0,
        "accountSettings": {"unarchiveChats": False},
        "registered": False,
    }
