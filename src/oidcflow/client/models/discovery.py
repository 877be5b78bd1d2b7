"""Provider metadata models for the OIDC login flow.

Contains the OpenID Provider Metadata document (OpenID Connect Discovery 1.0)
and the reduced endpoint view the login flow actually consumes.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OpenIDProviderMetadata(BaseModel):
    """OpenID Provider Metadata (OpenID Connect Discovery 1.0 Section 3).

    Only the fields the login flow relies on are typed. Everything else the
    provider publishes is kept as extra data.
    """

    model_config = ConfigDict(extra="allow")

    # Required by OpenID Connect Discovery
    issuer: str
    authorization_endpoint: str
    response_types_supported: list[str] = Field(default=["code id_token"])

    # Optional but needed for logout and token exchange
    end_session_endpoint: str | None = None
    token_endpoint: str | None = None
    code_challenge_methods_supported: list[str] | None = None

    @field_validator("authorization_endpoint")
    @classmethod
    def validate_authorization_endpoint(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"authorization_endpoint must be an HTTP(S) URL: {v}")
        return v

    def to_provider_info(self) -> ProviderInfo:
        return ProviderInfo(
            authorize_endpoint=self.authorization_endpoint,
            end_session_endpoint=self.end_session_endpoint,
        )


@dataclass(frozen=True)
class ProviderInfo:
    """Endpoints the login flow needs from the provider."""

    authorize_endpoint: str
    end_session_endpoint: str | None = None
