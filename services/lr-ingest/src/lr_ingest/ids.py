"""Identifier generation for Lightroom assets, revisions and albums."""

from __future__ import annotations

import secrets


def create_uuid() -> str:
    """Return a random version 4 identifier as 32 lowercase hex characters."""

    raw = bytearray(secrets.token_bytes(16))
    raw[6] = (raw[6] & 0x0F) | 0x40
    raw[8] = (raw[8] & 0x3F) | 0x80
    return raw.hex()


__all__ = ["create_uuid"]
