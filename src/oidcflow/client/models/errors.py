"""Exception hierarchy for the OIDC interactive login client.

Only contract violations and primitive-level failures are raised. Outcomes of
an authorization or end-session attempt are returned as result values.
"""

from __future__ import annotations


class OidcClientError(Exception):
    """Base exception for all OIDC client errors."""

    pass


class DecodeError(OidcClientError, ValueError):
    """Raised when base64url input has an invalid length or character."""

    pass


class PKCEError(OidcClientError):
    """Raised when PKCE parameter generation or validation fails."""

    pass


class ProviderUnavailableError(OidcClientError):
    """Raised when provider metadata cannot be retrieved.

    Covers network failures, non-success HTTP statuses and invalid
    discovery documents.
    """

    pass


class InvalidParameterError(OidcClientError, ValueError):
    """Raised when caller-supplied request parameters are malformed.

    Extra parameters must map strings to strings and may not name a
    parameter the client sets itself.
    """

    pass


class EndSessionNotSupportedError(OidcClientError):
    """Raised when logout is requested but the provider has no end-session endpoint."""

    pass


class UserAuthCancelledError(OidcClientError):
    """Raised by surface callbacks when the user abandons the login."""

    pass
