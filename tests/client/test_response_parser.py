"""Tests for callback payload decoding and classification."""

import pytest

from oidcflow.client.models.flow import AuthorizeErrorKind, FlowState
from oidcflow.client.services.responses import (
    classify_authorize_response,
    parse_authorize_response,
)


@pytest.fixture
def state() -> FlowState:
    return FlowState(
        nonce="nonce-123",
        redirect_uri="com.example.app:/oauth2redirect",
        start_url="https://idp.example.com/connect/authorize?client_id=x",
        code_verifier="v" * 43,
    )


class TestParseAuthorizeResponse:
    @pytest.mark.parametrize(
        "raw",
        [
            "code=abc123&id_token=xyz&state=s1",
            "?code=abc123&id_token=xyz&state=s1",
            "#code=abc123&id_token=xyz&state=s1",
            "com.example.app:/oauth2redirect#code=abc123&id_token=xyz&state=s1",
            "https://app.example.com/callback?code=abc123&id_token=xyz&state=s1",
            "  code=abc123&id_token=xyz&state=s1\n",
        ],
    )
    def test_all_payload_shapes_decode(self, raw):
        # Act
        response = parse_authorize_response(raw)

        # Assert
        assert response.code == "abc123"
        assert response.identity_token == "xyz"
        assert response.state == "s1"

    def test_fragment_preferred_over_query(self):
        response = parse_authorize_response(
            "https://app.example.com/callback?code=from-query#code=from-fragment"
        )

        assert response.code == "from-fragment"

    def test_duplicate_keys_last_occurrence_wins(self):
        response = parse_authorize_response("code=first&id_token=t&code=second")

        assert response.code == "second"

    def test_percent_and_plus_decoding(self):
        response = parse_authorize_response(
            "error=access_denied&error_description=User+denied%20access"
        )

        assert response.error_description == "User denied access"

    def test_unknown_fields_retained(self):
        # Act
        response = parse_authorize_response(
            "code=a&id_token=b&session_state=xyz.123&iss=https%3A%2F%2Fidp"
        )

        # Assert
        assert response.get("session_state") == "xyz.123"
        assert response.values["iss"] == "https://idp"
        assert response.get("missing") is None

    def test_bare_body_with_question_mark_in_value(self):
        # Act
        response = parse_authorize_response("code=abc&id_token=xyz&state=a?b")

        # Assert
        assert response.code == "abc"
        assert response.identity_token == "xyz"
        assert response.state == "a?b"

    def test_url_with_question_mark_in_fragment_value(self):
        response = parse_authorize_response(
            "com.example.app:/oauth2redirect#code=abc&id_token=xyz&state=a?b"
        )

        assert response.code == "abc"
        assert response.state == "a?b"

    def test_empty_payload(self):
        response = parse_authorize_response("")

        assert response.code is None
        assert response.error is None
        assert dict(response.values) == {}


class TestClassifyAuthorizeResponse:
    def test_provider_error(self, state):
        # Act
        result = classify_authorize_response(
            parse_authorize_response("error=access_denied"), state
        )

        # Assert
        assert result.is_error
        assert result.error == "access_denied"
        assert result.error_kind is AuthorizeErrorKind.PROVIDER_ERROR
        assert result.error_description is None
        assert result.state is state

    def test_provider_error_description_attached(self, state):
        result = classify_authorize_response(
            parse_authorize_response(
                "error=login_required&error_description=Session+expired"
            ),
            state,
        )

        assert result.error == "login_required"
        assert result.error_description == "Session expired"

    def test_provider_error_with_question_mark_in_description(self, state):
        result = classify_authorize_response(
            parse_authorize_response("error=login_required&error_description=Sign in?"),
            state,
        )

        assert result.error == "login_required"
        assert result.error_kind is AuthorizeErrorKind.PROVIDER_ERROR
        assert result.error_description == "Sign in?"

    def test_provider_error_takes_precedence_over_missing_fields(self, state):
        # Code and token present but the provider still reported an error
        result = classify_authorize_response(
            parse_authorize_response("code=abc&id_token=xyz&error=server_error"), state
        )

        assert result.is_error
        assert result.error == "server_error"
        assert result.code is None
        assert result.identity_token is None

    @pytest.mark.parametrize("raw", ["id_token=xyz", "code=&id_token=xyz", ""])
    def test_missing_authorization_code(self, state, raw):
        result = classify_authorize_response(parse_authorize_response(raw), state)

        assert result.is_error
        assert result.error == "missing_authorization_code"
        assert result.error_kind is AuthorizeErrorKind.MISSING_AUTHORIZATION_CODE

    @pytest.mark.parametrize("raw", ["code=abc123", "code=abc123&id_token="])
    def test_missing_identity_token(self, state, raw):
        result = classify_authorize_response(parse_authorize_response(raw), state)

        assert result.is_error
        assert result.error == "missing_identity_token"
        assert result.error_kind is AuthorizeErrorKind.MISSING_IDENTITY_TOKEN

    def test_success(self, state):
        # Act
        result = classify_authorize_response(
            parse_authorize_response("code=abc123&id_token=xyz"), state
        )

        # Assert
        assert not result.is_error
        assert result.code == "abc123"
        assert result.identity_token == "xyz"
        assert result.error is None
        assert result.error_kind is None
        assert result.state is state
