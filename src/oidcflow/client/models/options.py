"""Client configuration for the OIDC login flow."""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator


class OidcClientOptions(BaseModel):
    """Static configuration of a native OIDC client.

    Frozen so a configuration can be shared by concurrent attempts.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    redirect_uri: str
    scope: str = "openid profile"

    # PKCE is on by default (RFC 8252 Section 6)
    use_proof_keys: bool = True
    use_form_post: bool = False

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("client_id must not be empty")
        return v

    @field_validator("redirect_uri")
    @classmethod
    def validate_redirect_uri(cls, v: str) -> str:
        """Require an absolute URI; private-use schemes are valid for native apps."""
        parsed = urlparse(v)
        if not parsed.scheme:
            raise ValueError(f"redirect_uri must be an absolute URI: {v!r}")
        return v

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v: str) -> str:
        # The hybrid flow only returns an id_token for OpenID requests
        if "openid" not in v.split():
            raise ValueError("scope must include 'openid'")
        return v
