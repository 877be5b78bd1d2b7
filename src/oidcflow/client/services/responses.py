"""Authorization callback parsing and classification.

The surface may hand back a full redirect URL (query or fragment) or the raw
``application/x-www-form-urlencoded`` body of a form post. All three decode to
the same flat key-value map; when a key repeats, the last occurrence wins.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import parse_qsl, urlsplit

from oidcflow.client.models.flow import (
    AuthorizeErrorKind,
    AuthorizeResponse,
    AuthorizeResult,
    FlowState,
)

logger = logging.getLogger(__name__)

_URL_PREFIX = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.\-]*:|//)")


def _is_url(payload: str) -> bool:
    # Bare bodies may hold an unencoded '?' or '#' inside a value; only one
    # ahead of the first '=' marks a URL
    if _URL_PREFIX.match(payload):
        return True
    first_equals = payload.find("=")
    head = payload if first_equals < 0 else payload[:first_equals]
    return "?" in head or "#" in head


def _extract_parameter_string(raw: str) -> str:
    payload = raw.strip()

    if not _is_url(payload):
        return payload

    parts = urlsplit(payload)
    return parts.fragment or parts.query


def parse_authorize_response(raw: str) -> AuthorizeResponse:
    """Decode a callback payload into an AuthorizeResponse.

    Args:
        raw: Redirect URL, fragment, query string or form-post body

    Returns:
        AuthorizeResponse with every decoded field retained
    """
    pairs = parse_qsl(_extract_parameter_string(raw), keep_blank_values=True)

    # dict() keeps the last value for a repeated key
    values = dict(pairs)
    if len(values) != len(pairs):
        logger.debug("Authorization response repeated keys; using last occurrence")

    return AuthorizeResponse.from_values(values)


def classify_authorize_response(
    response: AuthorizeResponse, state: FlowState
) -> AuthorizeResult:
    """Turn a decoded response into a typed result.

    A provider-reported error always wins over locally detected missing
    fields, then the code is checked before the identity token.
    """
    if response.is_error():
        return AuthorizeResult.failure(
            AuthorizeErrorKind.PROVIDER_ERROR,
            state=state,
            error=response.error,
            error_description=response.error_description or None,
        )

    if not response.code:
        return AuthorizeResult.failure(
            AuthorizeErrorKind.MISSING_AUTHORIZATION_CODE, state=state
        )

    if not response.identity_token:
        return AuthorizeResult.failure(
            AuthorizeErrorKind.MISSING_IDENTITY_TOKEN, state=state
        )

    return AuthorizeResult.success(
        state=state, code=response.code, identity_token=response.identity_token
    )
