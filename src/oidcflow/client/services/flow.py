"""OIDC hybrid authorization flow service.

Creates the per-attempt flow state (nonce, PKCE, start URL) and turns the
callback payload into a typed result.
"""

from __future__ import annotations

import logging
from typing import Mapping

from oidcflow.client.models.discovery import ProviderInfo
from oidcflow.client.models.flow import (
    RESPONSE_MODE_FORM_POST,
    AuthorizeResult,
    FlowState,
)
from oidcflow.client.models.options import OidcClientOptions
from oidcflow.client.primitives.crypto import CryptoProvider, SystemCryptoProvider
from oidcflow.client.primitives.pkce import PKCEManager
from oidcflow.client.services.requests import build_authorize_url
from oidcflow.client.services.responses import (
    classify_authorize_response,
    parse_authorize_response,
)
from oidcflow.client.services.security import generate_nonce

logger = logging.getLogger(__name__)


class OidcFlowManager:
    """Builds and completes individual authorization attempts.

    Holds only immutable configuration and stateless collaborators, so one
    manager can serve any number of concurrent attempts.
    """

    def __init__(self, options: OidcClientOptions, crypto: CryptoProvider | None = None):
        self._options = options
        self._crypto = crypto or SystemCryptoProvider()
        self._pkce_manager = PKCEManager(self._crypto)

    def create_flow_state(
        self,
        provider_info: ProviderInfo,
        extra_params: Mapping[str, str] | None = None,
    ) -> FlowState:
        """Create the state for a new authorization attempt.

        Args:
            provider_info: Resolved provider endpoints
            extra_params: Additional authorize request parameters

        Returns:
            Fully populated FlowState whose start URL binds its nonce and
            code challenge

        Raises:
            InvalidParameterError: If extra parameters are malformed
            PKCEError: If verifier generation fails
        """
        nonce = generate_nonce(self._crypto)
        redirect_uri = self._options.redirect_uri

        code_verifier = None
        code_challenge = None
        if self._options.use_proof_keys:
            pkce_params = self._pkce_manager.generate_parameters()
            code_verifier = pkce_params.code_verifier
            code_challenge = pkce_params.code_challenge

        start_url = build_authorize_url(
            authorize_endpoint=provider_info.authorize_endpoint,
            client_id=self._options.client_id,
            scope=self._options.scope,
            redirect_uri=redirect_uri,
            response_mode=RESPONSE_MODE_FORM_POST if self._options.use_form_post else None,
            nonce=nonce,
            code_challenge=code_challenge,
            extra_params=extra_params,
        )

        logger.debug(
            f"Created authorization state for client {self._options.client_id} "
            f"(pkce={'on' if code_verifier else 'off'})"
        )

        return FlowState(
            nonce=nonce,
            redirect_uri=redirect_uri,
            start_url=start_url,
            code_verifier=code_verifier,
        )

    def process_response(self, raw_response: str, state: FlowState) -> AuthorizeResult:
        """Parse and classify a callback payload for the given attempt."""
        response = parse_authorize_response(raw_response)
        result = classify_authorize_response(response, state)

        if result.is_error:
            logger.warning(
                f"Authorization response rejected: {result.error}"
                + (f" - {result.error_description}" if result.error_description else "")
            )
        else:
            logger.info("Authorization response contained code and identity token")

        return result
