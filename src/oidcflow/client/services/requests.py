"""Authorize and end-session URL construction."""

from __future__ import annotations

from typing import Mapping

from oidcflow.client.models.flow import (
    RESPONSE_MODE_FORM_POST,
    AuthorizationRequest,
    EndSessionRequest,
)
from oidcflow.client.services.security import normalize_extra_parameters


def build_authorize_url(
    authorize_endpoint: str,
    client_id: str,
    scope: str,
    redirect_uri: str,
    response_mode: str | None,
    nonce: str,
    code_challenge: str | None,
    extra_params: Mapping[str, str] | None = None,
) -> str:
    """Compose the authorization endpoint URL for the hybrid flow.

    Args:
        authorize_endpoint: Provider authorization endpoint
        client_id: Registered client identifier
        scope: Space-delimited scopes, must include ``openid``
        redirect_uri: Redirect URI the surface watches for
        response_mode: ``"form_post"`` to request form posting, None for the
            provider default
        nonce: Attempt nonce
        code_challenge: S256 challenge, or None when PKCE is disabled
        extra_params: Additional parameters appended after the protocol ones

    Raises:
        InvalidParameterError: If extra parameters are malformed or name a
            protocol parameter
    """
    if response_mode is not None and response_mode != RESPONSE_MODE_FORM_POST:
        raise ValueError(f"Unsupported response_mode: {response_mode}")

    request = AuthorizationRequest(
        authorization_endpoint=authorize_endpoint,
        client_id=client_id,
        scope=scope,
        redirect_uri=redirect_uri,
        nonce=nonce,
        response_mode=response_mode,
        code_challenge=code_challenge,
        extra=normalize_extra_parameters(extra_params),
    )
    return request.build_authorization_url()


def build_end_session_url(
    end_session_endpoint: str,
    redirect_uri: str,
    identity_token: str | None = None,
) -> str:
    """Compose the logout URL, adding the token hint when one is given."""
    request = EndSessionRequest(
        end_session_endpoint=end_session_endpoint,
        post_logout_redirect_uri=redirect_uri,
        id_token_hint=identity_token,
    )
    return request.build_end_session_url()
