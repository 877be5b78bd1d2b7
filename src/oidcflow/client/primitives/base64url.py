"""Unpadded URL-safe base64 (RFC 4648 Section 5) as used by PKCE and JOSE."""

from __future__ import annotations

import base64
import binascii
import re

from oidcflow.client.models.errors import DecodeError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def encode(data: bytes) -> str:
    """Encode bytes as base64url text with all trailing padding removed."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def decode(value: str) -> bytes:
    """Decode unpadded base64url text.

    Args:
        value: Text produced by :func:`encode` or an equivalent encoder

    Returns:
        The decoded bytes

    Raises:
        DecodeError: If the text contains characters outside the base64url
            alphabet (padding included) or has an impossible length
    """
    if not _ALPHABET.fullmatch(value):
        raise DecodeError("Invalid character in base64url input")

    # A single leftover character can never encode a whole byte
    if len(value) % 4 == 1:
        raise DecodeError(f"Invalid base64url length: {len(value)}")

    padded = value + "=" * (-len(value) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Malformed base64url input: {e}") from e
