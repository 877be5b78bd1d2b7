"""PKCE (Proof Key for Code Exchange) manager for the OIDC login flow.

Implements RFC 7636 verifier generation and S256 challenge derivation to
prevent authorization code interception attacks.
"""

from __future__ import annotations

import re

from oidcflow.client.models.errors import PKCEError
from oidcflow.client.models.security import (
    CODE_CHALLENGE_METHOD_S256,
    VERIFIER_MAX_LENGTH,
    VERIFIER_MIN_LENGTH,
    PKCEParameters,
)
from oidcflow.client.primitives import base64url
from oidcflow.client.primitives.crypto import CryptoProvider, SystemCryptoProvider

_VERIFIER_PATTERN = re.compile(r"^[A-Za-z0-9\-._~]+$")


class PKCEManager:
    """Generates PKCE verifiers and derives their S256 challenges.

    This implementation follows RFC 7636 requirements:
    - Verifiers are 43-128 characters from the unreserved alphabet, which
      gives at least 256 bits of entropy
    - Challenges are BASE64URL(SHA256(UTF8(verifier)))
    - Only the S256 method is produced
    """

    def __init__(self, crypto: CryptoProvider | None = None):
        self._crypto = crypto or SystemCryptoProvider()

    def generate_verifier(self) -> str:
        """Generate a cryptographically secure code verifier.

        RFC 7636 Section 4.1: code verifier must be 43-128 characters long
        and use only unreserved characters:
            [A-Z] / [a-z] / [0-9] / "-" / "." / "_" / "~"

        Raises:
            PKCEError: If the crypto provider returns text outside those bounds
        """
        verifier = self._crypto.secure_random_string(
            VERIFIER_MIN_LENGTH, VERIFIER_MAX_LENGTH
        )

        if not (VERIFIER_MIN_LENGTH <= len(verifier) <= VERIFIER_MAX_LENGTH):
            raise PKCEError(
                f"Code verifier length {len(verifier)} outside "
                f"{VERIFIER_MIN_LENGTH}-{VERIFIER_MAX_LENGTH}"
            )
        if not _VERIFIER_PATTERN.match(verifier):
            raise PKCEError("Code verifier contains characters outside unreserved set")

        return verifier

    def challenge_from_verifier(self, verifier: str) -> str:
        """Derive the S256 code challenge for a verifier.

        RFC 7636 Section 4.2: BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))
        """
        digest = self._crypto.sha256(verifier.encode("utf-8"))
        return base64url.encode(digest)

    def generate_parameters(self) -> PKCEParameters:
        """Generate a verifier and its challenge for one authorization attempt.

        Raises:
            PKCEError: If parameter generation fails
        """
        code_verifier = self.generate_verifier()
        try:
            return PKCEParameters(
                code_verifier=code_verifier,
                code_challenge=self.challenge_from_verifier(code_verifier),
                code_challenge_method=CODE_CHALLENGE_METHOD_S256,
            )
        except ValueError as e:
            raise PKCEError(f"Failed to generate PKCE parameters: {e}") from e
