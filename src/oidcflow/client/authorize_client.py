"""OIDC interactive login client for native applications.

Coordinates provider resolution, flow-state creation, the interactive-auth
surface and response validation to provide the hybrid code + id_token login
and RP-initiated logout.
"""

from __future__ import annotations

import logging
from typing import Mapping

from oidcflow.client.models.discovery import ProviderInfo
from oidcflow.client.models.errors import (
    EndSessionNotSupportedError,
    ProviderUnavailableError,
)
from oidcflow.client.models.flow import (
    AuthorizeErrorKind,
    AuthorizeResult,
    EndSessionResult,
    FlowState,
    PreparedAuthorize,
)
from oidcflow.client.models.invocation import (
    DisplayMode,
    InvokeOptions,
    InvokeResult,
    InvokeResultType,
    ResponseMode,
)
from oidcflow.client.models.options import OidcClientOptions
from oidcflow.client.primitives.crypto import CryptoProvider
from oidcflow.client.primitives.discovery import ProviderInfoSource
from oidcflow.client.services.flow import OidcFlowManager
from oidcflow.client.services.requests import build_end_session_url
from oidcflow.client.surfaces import InteractiveAuthSurface

logger = logging.getLogger(__name__)

_INVOCATION_ERROR_KINDS = {
    InvokeResultType.USER_CANCELLED: AuthorizeErrorKind.USER_CANCELLED,
    InvokeResultType.TIMEOUT: AuthorizeErrorKind.TIMEOUT,
    InvokeResultType.COMMUNICATION_ERROR: AuthorizeErrorKind.COMMUNICATION_ERROR,
}


class AuthorizeClient:
    """Interactive OIDC login and logout for native applications.

    Every call works on its own FlowState; the client keeps no per-attempt
    state, so concurrent calls are independent. Failures of an attempt are
    returned as result values, never raised.
    """

    def __init__(
        self,
        options: OidcClientOptions,
        surface: InteractiveAuthSurface,
        provider: ProviderInfoSource,
        crypto: CryptoProvider | None = None,
    ):
        """Initialize the authorize client.

        Args:
            options: Client configuration
            surface: Interactive-auth surface that renders the provider pages
            provider: Source of the provider endpoints
            crypto: Randomness and hashing; defaults to the system CSPRNG
        """
        self.options = options
        self.surface = surface
        self.provider = provider
        self.flow_manager = OidcFlowManager(options, crypto)

    async def prepare_authorize(
        self,
        try_silent: bool = False,
        extra_params: Mapping[str, str] | None = None,
    ) -> PreparedAuthorize:
        """Create a flow state and the options to invoke a surface with.

        For hosts that drive the surface themselves and later hand the
        payload to :meth:`process_response`.

        Raises:
            ProviderUnavailableError: If provider endpoints cannot be resolved
            InvalidParameterError: If extra parameters are malformed
        """
        provider_info = await self.provider.get_provider_information()
        state = self.flow_manager.create_flow_state(provider_info, extra_params)

        invoke_options = InvokeOptions(
            start_url=state.start_url,
            expected_redirect_uri=self.options.redirect_uri,
            display_mode=DisplayMode.HIDDEN if try_silent else DisplayMode.NORMAL,
            response_mode=(
                ResponseMode.FORM_POST
                if self.options.use_form_post
                else ResponseMode.REDIRECT
            ),
        )
        return PreparedAuthorize(state=state, invoke_options=invoke_options)

    async def authorize(
        self,
        try_silent: bool = False,
        extra_params: Mapping[str, str] | None = None,
    ) -> AuthorizeResult:
        """Run one interactive authorization attempt.

        Args:
            try_silent: Ask the surface to start hidden, for prompt-less
                re-authentication
            extra_params: Additional authorize request parameters such as
                ``login_hint`` or ``acr_values``

        Returns:
            AuthorizeResult with code and identity token, or the error kind

        Raises:
            InvalidParameterError: If extra parameters are malformed
        """
        try:
            prepared = await self.prepare_authorize(try_silent, extra_params)
        except ProviderUnavailableError as e:
            logger.warning(f"Provider information unavailable: {e}")
            return AuthorizeResult.failure(
                AuthorizeErrorKind.PROVIDER_UNAVAILABLE, error_description=str(e)
            )

        logger.debug(
            f"Invoking authorization surface for client {self.options.client_id} "
            f"(display={prepared.invoke_options.display_mode.value}, "
            f"response_mode={prepared.invoke_options.response_mode.value})"
        )

        invoke_result = await self._invoke(prepared.invoke_options)

        if not invoke_result.is_success():
            kind = _INVOCATION_ERROR_KINDS[invoke_result.result_type]
            logger.warning(f"Authorization interaction did not complete: {kind.value}")
            return AuthorizeResult.failure(
                kind, state=prepared.state, error_description=invoke_result.error
            )

        return self.process_response(invoke_result.response, prepared.state)

    def process_response(self, raw_response: str, state: FlowState) -> AuthorizeResult:
        """Validate a callback payload against the attempt that produced it."""
        return self.flow_manager.process_response(raw_response, state)

    async def end_session(
        self,
        identity_token: str | None = None,
        try_silent: bool = True,
    ) -> EndSessionResult:
        """Log the user out at the provider.

        The logout response is not interpreted; only whether the surface
        completed is reported.

        Args:
            identity_token: Identity token from the login, sent as
                ``id_token_hint`` together with the post-logout redirect
            try_silent: Ask the surface to start hidden

        Raises:
            EndSessionNotSupportedError: If the provider has no end-session
                endpoint
        """
        try:
            provider_info: ProviderInfo = await self.provider.get_provider_information()
        except ProviderUnavailableError as e:
            logger.warning(f"Provider information unavailable: {e}")
            return EndSessionResult.failure(
                AuthorizeErrorKind.PROVIDER_UNAVAILABLE, error_description=str(e)
            )

        if not provider_info.end_session_endpoint:
            raise EndSessionNotSupportedError(
                "Provider does not publish an end_session_endpoint"
            )

        url = build_end_session_url(
            provider_info.end_session_endpoint,
            self.options.redirect_uri,
            identity_token,
        )

        invoke_options = InvokeOptions(
            start_url=url,
            expected_redirect_uri=self.options.redirect_uri,
            display_mode=DisplayMode.HIDDEN if try_silent else DisplayMode.NORMAL,
            response_mode=ResponseMode.REDIRECT,
        )

        invoke_result = await self._invoke(invoke_options)

        if not invoke_result.is_success():
            kind = _INVOCATION_ERROR_KINDS[invoke_result.result_type]
            logger.warning(f"End-session interaction did not complete: {kind.value}")
            return EndSessionResult.failure(
                kind, url=url, error_description=invoke_result.error
            )

        logger.info("End-session interaction completed")
        return EndSessionResult.success(url)

    async def _invoke(self, options: InvokeOptions) -> InvokeResult:
        """Call the surface, reporting unexpected exceptions as communication errors."""
        try:
            return await self.surface.invoke(options)
        except Exception as e:
            logger.error(f"Interactive surface raised {type(e).__name__}: {e}")
            return InvokeResult.communication_error(str(e))
