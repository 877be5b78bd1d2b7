import asyncio

import pytest

from oidcflow.client.authorize_client import AuthorizeClient
from oidcflow.client.models.discovery import ProviderInfo
from oidcflow.client.models.invocation import InvokeOptions, InvokeResult
from oidcflow.client.models.options import OidcClientOptions
from oidcflow.client.primitives.discovery import StaticProviderInfoSource

AUTHORIZE_ENDPOINT = "https://idp.example.com/connect/authorize"
END_SESSION_ENDPOINT = "https://idp.example.com/connect/endsession"
REDIRECT_URI = "com.example.app:/oauth2redirect"


class RecordingSurface:
    """Interactive surface double that records invocations.

    ``responder`` builds the result from the options, so tests can echo the
    nonce or answer differently per call.
    """

    def __init__(self, responder=None, delay: float = 0.0):
        self.invocations: list[InvokeOptions] = []
        self.responder = responder or (
            lambda options: InvokeResult.success("code=abc123&id_token=xyz")
        )
        self.delay = delay

    async def invoke(self, options: InvokeOptions) -> InvokeResult:
        self.invocations.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.responder(options)


@pytest.fixture
def options() -> OidcClientOptions:
    return OidcClientOptions(
        client_id="native-client",
        redirect_uri=REDIRECT_URI,
        scope="openid profile email",
    )


@pytest.fixture
def provider_info() -> ProviderInfo:
    return ProviderInfo(
        authorize_endpoint=AUTHORIZE_ENDPOINT,
        end_session_endpoint=END_SESSION_ENDPOINT,
    )


@pytest.fixture
def provider(provider_info) -> StaticProviderInfoSource:
    return StaticProviderInfoSource(provider_info)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def make_surface():
    return RecordingSurface


@pytest.fixture
def client(options, surface, provider) -> AuthorizeClient:
    return AuthorizeClient(options, surface, provider)
