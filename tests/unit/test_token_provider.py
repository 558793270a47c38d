from unittest.mock import Mock

import pytest

from booker_suite.api.booker_client import BookerAPIError
from booker_suite.auth.token_provider import BookerAuthenticator, basic_auth_header
from booker_suite.config.settings import SecretRedactionFilter
from tests.http_factory import make_settings, mock_response


@pytest.fixture
def client():
    client = Mock()
    client.settings = make_settings()
    return client


def _authenticator(client, redaction_filter=None):
    return BookerAuthenticator(client, redaction_filter=redaction_filter)


def test_basic_auth_header_matches_known_value():
    assert basic_auth_header("admin", "password123") == "Basic YWRtaW46cGFzc3dvcmQxMjM="


def test_basic_auth_uses_configured_credentials(client):
    client.settings = make_settings(username="tester", password="s3cret-pass")

    assert _authenticator(client).basic_auth == basic_auth_header("tester", "s3cret-pass")


def test_obtain_token_returns_token_on_success(client):
    client.create_token.return_value = mock_response(200, {"token": "abc123def456"})

    token = _authenticator(client).obtain_token()

    assert token.is_authenticated
    assert token.value == "abc123def456"
    # Credentials come from the client's settings
    client.create_token.assert_called_once_with()


def test_bad_credentials_yield_degraded_token(client):
    client.create_token.return_value = mock_response(200, {"reason": "Bad credentials"})

    token = _authenticator(client).obtain_token()

    assert not token.is_authenticated
    assert token.failure_reason == "Bad credentials"


@pytest.mark.parametrize(
    "body",
    [{"token": ""}, {"token": 12345}, ["abc123def456"]],
    ids=["empty-token", "numeric-token", "not-an-object"],
)
def test_body_violating_token_schema_yields_degraded_token(client, body):
    client.create_token.return_value = mock_response(200, body)

    token = _authenticator(client).obtain_token()

    assert token.value is None
    assert token.failure_reason.startswith("invalid auth response")


def test_unexpected_status_yields_degraded_token(client):
    client.create_token.return_value = mock_response(503, text="Service Unavailable")

    token = _authenticator(client).obtain_token()

    assert token.value is None
    assert "503" in token.failure_reason


def test_transport_error_yields_degraded_token(client):
    client.create_token.side_effect = BookerAPIError("POST", "https://x/auth", "timed out")

    token = _authenticator(client).obtain_token()

    assert token.value is None
    assert "timed out" in token.failure_reason


def test_non_json_body_yields_degraded_token(client):
    client.create_token.return_value = mock_response(200, text="<html>oops</html>")

    token = _authenticator(client).obtain_token()

    assert token.value is None
    assert token.failure_reason.startswith("invalid auth response")


def test_get_token_requests_only_once(client):
    client.create_token.return_value = mock_response(200, {"token": "abc123def456"})
    auth = _authenticator(client)

    first = auth.get_token()
    second = auth.get_token()

    assert first is second
    assert client.create_token.call_count == 1


def test_get_token_caches_degraded_result(client):
    client.create_token.side_effect = BookerAPIError("POST", "https://x/auth", "refused")
    auth = _authenticator(client)

    auth.get_token()
    auth.get_token()

    assert client.create_token.call_count == 1


def test_obtained_token_is_registered_for_redaction(client):
    client.create_token.return_value = mock_response(200, {"token": "abc123def456"})
    redaction_filter = SecretRedactionFilter({"password": "password123"})

    _authenticator(client, redaction_filter).obtain_token()

    assert "abc123def456" in redaction_filter.redacted_values
