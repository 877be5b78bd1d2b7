from unittest.mock import AsyncMock

import pytest

from oidcflow.client.authorize_client import AuthorizeClient
from oidcflow.client.models.discovery import ProviderInfo
from oidcflow.client.models.errors import (
    EndSessionNotSupportedError,
    ProviderUnavailableError,
)
from oidcflow.client.models.flow import AuthorizeErrorKind
from oidcflow.client.models.invocation import DisplayMode, InvokeResult, ResponseMode
from oidcflow.client.models.options import OidcClientOptions
from oidcflow.client.primitives.discovery import StaticProviderInfoSource

END_SESSION_ENDPOINT = "https://idp.example.com/connect/endsession"
ENCODED_REDIRECT = "com.example.app%3A%2Foauth2redirect"


class TestEndSession:
    async def test_with_identity_token(self, client, surface):
        # Act
        result = await client.end_session(identity_token="tok")

        # Assert
        assert not result.is_error
        options = surface.invocations[0]
        assert options.start_url == (
            f"{END_SESSION_ENDPOINT}?id_token_hint=tok"
            f"&post_logout_redirect_uri={ENCODED_REDIRECT}"
        )
        assert result.url == options.start_url

    async def test_without_identity_token(self, client, surface):
        result = await client.end_session()

        assert not result.is_error
        assert surface.invocations[0].start_url == END_SESSION_ENDPOINT

    async def test_always_redirect_mode_and_silent_by_default(self, provider, surface):
        # Arrange - form post configured for login must not leak into logout
        options = OidcClientOptions(
            client_id="native-client",
            redirect_uri="com.example.app:/oauth2redirect",
            use_form_post=True,
        )
        client = AuthorizeClient(options, surface, provider)

        # Act
        await client.end_session(identity_token="tok")
        await client.end_session(identity_token="tok", try_silent=False)

        # Assert
        assert surface.invocations[0].response_mode is ResponseMode.REDIRECT
        assert surface.invocations[0].display_mode is DisplayMode.HIDDEN
        assert surface.invocations[1].display_mode is DisplayMode.NORMAL
        assert surface.invocations[0].expected_redirect_uri == options.redirect_uri

    @pytest.mark.parametrize(
        "invoke_result, expected_kind",
        [
            (InvokeResult.cancelled(), AuthorizeErrorKind.USER_CANCELLED),
            (InvokeResult.timed_out(), AuthorizeErrorKind.TIMEOUT),
            (InvokeResult.communication_error(), AuthorizeErrorKind.COMMUNICATION_ERROR),
        ],
    )
    async def test_invocation_failure_reported(
        self, options, provider, make_surface, invoke_result, expected_kind
    ):
        # Arrange
        client = AuthorizeClient(options, make_surface(lambda o: invoke_result), provider)

        # Act
        result = await client.end_session(identity_token="tok")

        # Assert
        assert result.is_error
        assert result.error_kind is expected_kind
        assert result.error == expected_kind.value
        assert result.url.startswith(END_SESSION_ENDPOINT)

    async def test_invocation_failure_detail_kept(self, options, provider, make_surface):
        # Arrange
        surface = make_surface(lambda o: InvokeResult.communication_error("pipe closed"))
        client = AuthorizeClient(options, surface, provider)

        # Act
        result = await client.end_session(identity_token="tok")

        # Assert
        assert result.error_kind is AuthorizeErrorKind.COMMUNICATION_ERROR
        assert result.error_description == "pipe closed"

    async def test_response_not_interpreted(self, options, provider, make_surface):
        # A logout callback carrying no code or token is still a success
        surface = make_surface(lambda o: InvokeResult.success("state=whatever"))
        client = AuthorizeClient(options, surface, provider)

        result = await client.end_session()

        assert not result.is_error

    async def test_provider_unavailable(self, options, surface):
        # Arrange
        provider = AsyncMock()
        provider.get_provider_information.side_effect = ProviderUnavailableError("dns")
        client = AuthorizeClient(options, surface, provider)

        # Act
        result = await client.end_session(identity_token="tok")

        # Assert
        assert result.is_error
        assert result.error_kind is AuthorizeErrorKind.PROVIDER_UNAVAILABLE
        assert result.error_description == "dns"
        assert surface.invocations == []

    async def test_missing_endpoint_is_contract_violation(self, options, surface):
        # Arrange
        provider = StaticProviderInfoSource(
            ProviderInfo(authorize_endpoint="https://idp.example.com/authorize")
        )
        client = AuthorizeClient(options, surface, provider)

        # Act & Assert
        with pytest.raises(EndSessionNotSupportedError):
            await client.end_session(identity_token="tok")
        assert surface.invocations == []
