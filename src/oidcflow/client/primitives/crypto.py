"""Cryptographic capability consumed by the login flow.

The flow never touches ``secrets`` or ``hashlib`` directly so hosts with their
own crypto stack (HSM, platform keychain) can supply an implementation.
"""

from __future__ import annotations

import hashlib
import secrets
import string
from typing import Protocol

# RFC 3986 unreserved characters, the alphabet RFC 7636 allows for verifiers
UNRESERVED_ALPHABET = string.ascii_letters + string.digits + "-._~"


class CryptoProvider(Protocol):
    """Source of secure randomness and SHA-256 digests."""

    def secure_random_string(self, min_len: int, max_len: int) -> str:
        """Return random unreserved-alphabet text of length in [min_len, max_len]."""
        ...

    def sha256(self, data: bytes) -> bytes:
        """Return the SHA-256 digest of data."""
        ...


class SystemCryptoProvider:
    """CryptoProvider backed by the operating system CSPRNG."""

    def secure_random_string(self, min_len: int, max_len: int) -> str:
        if min_len < 1 or max_len < min_len:
            raise ValueError(f"Invalid length range: {min_len}-{max_len}")

        length = min_len + secrets.randbelow(max_len - min_len + 1)
        return "".join(secrets.choice(UNRESERVED_ALPHABET) for _ in range(length))

    def sha256(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()
