"""Security-related models for the OIDC login flow.

Contains the PKCE parameters bound into a single authorization attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field

VERIFIER_MIN_LENGTH = 43
VERIFIER_MAX_LENGTH = 128
CODE_CHALLENGE_METHOD_S256 = "S256"


@dataclass(frozen=True)
class PKCEParameters:
    """PKCE (Proof Key for Code Exchange) parameters (RFC 7636).

    Generated fresh for each authorization attempt. The verifier stays with
    the client for the token exchange; only the challenge is sent to the
    authorization endpoint.
    """

    code_verifier: str = field(repr=False)
    code_challenge: str = field()
    code_challenge_method: str = field(default=CODE_CHALLENGE_METHOD_S256)

    def __post_init__(self) -> None:
        """Validate PKCE parameters meet RFC 7636 requirements."""
        if not (VERIFIER_MIN_LENGTH <= len(self.code_verifier) <= VERIFIER_MAX_LENGTH):
            raise ValueError(
                f"code_verifier must be {VERIFIER_MIN_LENGTH}-"
                f"{VERIFIER_MAX_LENGTH} characters"
            )
        # base64url of a SHA-256 digest is always 43 characters
        if len(self.code_challenge) != 43:
            raise ValueError("code_challenge must be 43 characters")
        if self.code_challenge_method != CODE_CHALLENGE_METHOD_S256:
            raise ValueError("Only S256 code challenge method is supported")
