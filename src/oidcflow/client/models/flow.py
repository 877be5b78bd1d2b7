"""Authorization flow models for the OIDC hybrid login.

Contains the per-attempt flow state, the authorize and end-session requests,
the decoded callback response and the typed results handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping
from urllib.parse import quote, urlencode

from oidcflow.client.models.errors import InvalidParameterError
from oidcflow.client.models.invocation import InvokeOptions
from oidcflow.client.models.security import CODE_CHALLENGE_METHOD_S256

RESPONSE_TYPE_CODE_ID_TOKEN = "code id_token"
RESPONSE_MODE_FORM_POST = "form_post"

# Parameters owned by the client; callers may not supply or override them
PROTOCOL_PARAMETERS = frozenset(
    {
        "response_type",
        "client_id",
        "scope",
        "redirect_uri",
        "nonce",
        "response_mode",
        "code_challenge",
        "code_challenge_method",
    }
)


def _append_query(endpoint: str, params: list[tuple[str, str]]) -> str:
    if not params:
        return endpoint
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}{urlencode(params, quote_via=quote)}"


@dataclass(frozen=True)
class FlowState:
    """State of one in-flight authorization attempt.

    Everything the caller needs afterwards for the token exchange: the nonce
    to check in the identity token, the redirect URI and the PKCE verifier.
    """

    nonce: str = field(repr=False)
    redirect_uri: str
    start_url: str
    code_verifier: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class AuthorizationRequest:
    """Authorization request parameters for the hybrid flow."""

    authorization_endpoint: str
    client_id: str
    scope: str
    redirect_uri: str
    nonce: str
    response_mode: str | None = None
    code_challenge: str | None = None
    extra: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        collisions = sorted(key for key, _ in self.extra if key in PROTOCOL_PARAMETERS)
        if collisions:
            raise InvalidParameterError(
                f"Extra parameters may not override protocol parameters: {collisions}"
            )

    def build_authorization_url(self) -> str:
        """Build the complete authorization URL.

        Protocol parameters come first in a fixed order, extra parameters
        follow in caller order.
        """
        params = [
            ("response_type", RESPONSE_TYPE_CODE_ID_TOKEN),
            ("client_id", self.client_id),
            ("scope", self.scope),
            ("redirect_uri", self.redirect_uri),
            ("nonce", self.nonce),
        ]

        if self.response_mode:
            params.append(("response_mode", self.response_mode))
        if self.code_challenge:
            params.append(("code_challenge", self.code_challenge))
            params.append(("code_challenge_method", CODE_CHALLENGE_METHOD_S256))

        params.extend(self.extra)

        return _append_query(self.authorization_endpoint, params)


@dataclass(frozen=True)
class EndSessionRequest:
    """RP-initiated logout request (OpenID Connect RP-Initiated Logout 1.0)."""

    end_session_endpoint: str
    post_logout_redirect_uri: str
    id_token_hint: str | None = None

    def build_end_session_url(self) -> str:
        params = []

        # Without a hint the provider cannot trust the post-logout redirect
        if self.id_token_hint and self.id_token_hint.strip():
            params.append(("id_token_hint", self.id_token_hint))
            params.append(("post_logout_redirect_uri", self.post_logout_redirect_uri))

        return _append_query(self.end_session_endpoint, params)


@dataclass(frozen=True)
class AuthorizeResponse:
    """Decoded authorization callback payload.

    ``values`` keeps every field the provider sent, including ones the client
    does not interpret (``session_state``, ``iss`` and so on).
    """

    code: str | None = None
    identity_token: str | None = field(default=None, repr=False)
    error: str | None = None
    error_description: str | None = None
    state: str | None = None
    values: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), repr=False
    )

    @classmethod
    def from_values(cls, values: Mapping[str, str]) -> AuthorizeResponse:
        return cls(
            code=values.get("code"),
            identity_token=values.get("id_token"),
            error=values.get("error"),
            error_description=values.get("error_description"),
            state=values.get("state"),
            values=MappingProxyType(dict(values)),
        )

    def is_error(self) -> bool:
        return bool(self.error)

    def get(self, key: str) -> str | None:
        return self.values.get(key)


class AuthorizeErrorKind(str, Enum):
    """Why an attempt failed."""

    PROVIDER_UNAVAILABLE = "provider_unavailable"
    USER_CANCELLED = "user_cancelled"
    TIMEOUT = "timeout"
    COMMUNICATION_ERROR = "communication_error"
    PROVIDER_ERROR = "provider_error"
    MISSING_AUTHORIZATION_CODE = "missing_authorization_code"
    MISSING_IDENTITY_TOKEN = "missing_identity_token"


@dataclass(frozen=True)
class AuthorizeResult:
    """Outcome of one authorization attempt.

    Either an error (``error`` and ``error_kind`` set) or a success carrying
    both the code and the identity token; nothing in between. For
    ``PROVIDER_ERROR`` the ``error`` is the provider's own error code, for every
    other kind it is the kind's value.

    ``state`` is the attempt's flow state. It is ``None`` only when the
    provider could not be reached and no state was created.
    """

    is_error: bool
    state: FlowState | None = None
    error: str | None = None
    error_kind: AuthorizeErrorKind | None = None
    error_description: str | None = None
    code: str | None = None
    identity_token: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.is_error:
            if not self.error or self.error_kind is None:
                raise ValueError("Error result requires error and error_kind")
            if self.code is not None or self.identity_token is not None:
                raise ValueError("Error result may not carry a code or identity token")
        else:
            if not self.code or not self.identity_token:
                raise ValueError("Successful result requires code and identity token")
            if self.error is not None or self.error_kind is not None:
                raise ValueError("Successful result may not carry an error")
            if self.state is None:
                raise ValueError("Successful result requires its flow state")

    @classmethod
    def success(
        cls, state: FlowState, code: str, identity_token: str
    ) -> AuthorizeResult:
        return cls(
            is_error=False, state=state, code=code, identity_token=identity_token
        )

    @classmethod
    def failure(
        cls,
        kind: AuthorizeErrorKind,
        state: FlowState | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> AuthorizeResult:
        return cls(
            is_error=True,
            state=state,
            error=error or kind.value,
            error_kind=kind,
            error_description=error_description,
        )


@dataclass(frozen=True)
class PreparedAuthorize:
    """A created flow state together with the options to invoke the surface with."""

    state: FlowState
    invoke_options: InvokeOptions


@dataclass(frozen=True)
class EndSessionResult:
    """Outcome of a logout invocation. The response itself is not interpreted."""

    is_error: bool
    url: str | None = None
    error: str | None = None
    error_kind: AuthorizeErrorKind | None = None
    error_description: str | None = None

    @classmethod
    def success(cls, url: str) -> EndSessionResult:
        return cls(is_error=False, url=url)

    @classmethod
    def failure(
        cls,
        kind: AuthorizeErrorKind,
        url: str | None = None,
        error_description: str | None = None,
    ) -> EndSessionResult:
        return cls(
            is_error=True,
            url=url,
            error=kind.value,
            error_kind=kind,
            error_description=error_description,
        )
