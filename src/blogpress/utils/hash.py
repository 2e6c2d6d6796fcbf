# src/blogpress/utils/hash.py
"""Hashing helpers for passcodes and visitor addresses."""

from __future__ import annotations

import hmac

from blake3 import blake3

_IP_KEY_CONTEXT = "blogpress 2026-03 visitor address hashing"


def hash_otp(code: str) -> str:
    """Return the BLAKE3 hex digest stored in place of a passcode."""
    return blake3(code.encode("utf-8")).hexdigest()


def otp_matches(code: str, stored_hash: str) -> bool:
    """Compare a candidate passcode with a stored digest in constant time."""
    return hmac.compare_digest(hash_otp(code), stored_hash)


def _derive_key(salt: str) -> bytes:
    # BLAKE3 keyed mode requires exactly 32 bytes of key material.
    return blake3(salt.encode("utf-8"), derive_key_context=_IP_KEY_CONTEXT).digest()


def hash_ip(ip_address: str | None, salt: str) -> str | None:
    """Return a keyed BLAKE3 digest of a client address, or None when unknown."""
    if not ip_address:
        return None
    return blake3(ip_address.encode("utf-8"), key=_derive_key(salt)).hexdigest()
