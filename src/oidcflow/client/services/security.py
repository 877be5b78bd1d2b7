"""Security utilities for the OIDC login flow.

Provides nonce generation and validation of caller-supplied request
parameters.
"""

from __future__ import annotations

from typing import Mapping

from oidcflow.client.models.errors import InvalidParameterError
from oidcflow.client.primitives.crypto import CryptoProvider

NONCE_LENGTH = 32


def generate_nonce(crypto: CryptoProvider) -> str:
    """Generate a cryptographically secure nonce.

    The nonce is bound into the identity token and lets the token consumer
    detect replays. 32 unreserved characters carry about 190 bits.

    Returns:
        Random nonce (32 characters)
    """
    nonce = crypto.secure_random_string(NONCE_LENGTH, NONCE_LENGTH)
    if len(nonce) < NONCE_LENGTH:
        raise ValueError(f"Crypto provider returned a {len(nonce)}-character nonce")
    return nonce


def normalize_extra_parameters(
    extra_params: Mapping[str, str] | None,
) -> tuple[tuple[str, str], ...]:
    """Validate extra request parameters and freeze them in caller order.

    Args:
        extra_params: Mapping of parameter name to value, or None

    Returns:
        Ordered (name, value) pairs

    Raises:
        InvalidParameterError: If the argument is not a mapping or a key or
            value is not a string
    """
    if extra_params is None:
        return ()
    if not isinstance(extra_params, Mapping):
        raise InvalidParameterError(
            f"Extra parameters must be a mapping, got {type(extra_params).__name__}"
        )

    pairs = []
    for key, value in extra_params.items():
        if not isinstance(key, str) or not key:
            raise InvalidParameterError(f"Extra parameter name must be a string: {key!r}")
        if not isinstance(value, str):
            raise InvalidParameterError(
                f"Extra parameter {key!r} must be a string, "
                f"got {type(value).__name__}"
            )
        pairs.append((key, value))

    return tuple(pairs)
