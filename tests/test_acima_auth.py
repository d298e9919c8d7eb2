"""
Bearer token acquisition tests.
"""

import pytest
import requests
from unittest.mock import patch

from payments.acima_client import AcimaClient, authenticate
from payments.acima_gateway import AcimaGateway
from payments.errors import AcimaServerResponseError
from tests.conftest import MockResponse


@patch("payments.acima_client.requests.post")
def test_authenticate_returns_token_verbatim(mock_post, acima_config):
    mock_post.return_value = MockResponse(200, {"token": "abc"})

    assert authenticate(acima_config) == "abc"

    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == "https://sandbox.acima.test/oauth/token"
    assert kwargs["data"] == {
        "client_id": "sandbox_client_id",
        "client_secret": "sandbox_secret",
        "grant_type": "client_credentials",
    }
    assert kwargs["timeout"] is None


@patch("payments.acima_client.requests.post")
def test_gateway_caches_token_from_construction(mock_post, acima_config):
    """The token field of a 200 response is cached on the gateway."""
    mock_post.return_value = MockResponse(200, {"token": "abc"})

    gateway = AcimaGateway(acima_config)

    assert gateway.bearer_token == "abc"
    assert gateway.test_mode is True
    assert mock_post.call_count == 1


@patch("payments.acima_client.requests.post")
def test_missing_token_field_yields_none(mock_post, acima_config):
    mock_post.return_value = MockResponse(200, {"token_type": "bearer"})

    assert AcimaClient(acima_config).bearer_token is None


@patch("payments.acima_client.requests.post")
def test_live_mode_uses_production_url_and_credentials(mock_post, mock_settings):
    mock_post.return_value = MockResponse(200, {"access_token": "live"})

    gateway = AcimaGateway(mock_settings.acima_config(test_mode=False))

    assert gateway.bearer_token == "live"
    assert gateway.test_mode is False
    args, kwargs = mock_post.call_args
    assert args[0] == "https://live.acima.test/oauth/token"
    assert kwargs["data"]["client_id"] == "live_client_id"


@pytest.mark.parametrize("status_code", [401, 415, 500])
@patch("payments.acima_client.requests.post")
def test_failed_authentication_aborts_construction(mock_post, status_code, acima_config):
    mock_post.return_value = MockResponse(
        status_code, {"error": "invalid_client"}, text='{"error": "invalid_client"}'
    )

    with pytest.raises(RuntimeError, match="Acima Server Response Error:") as exc_info:
        AcimaGateway(acima_config)

    assert exc_info.value.status_code == status_code
    assert str(status_code) in str(exc_info.value)
    assert "invalid_client" in str(exc_info.value)
    # Single attempt, no retry
    assert mock_post.call_count == 1


@patch("payments.acima_client.requests.post")
def test_success_flag_false_fails_authentication(mock_post, acima_config):
    mock_post.return_value = MockResponse(200, {"success": False, "access_token": "x"})

    with pytest.raises(AcimaServerResponseError):
        AcimaGateway(acima_config)


@patch("payments.acima_client.requests.post")
def test_transport_error_propagates(mock_post, acima_config):
    mock_post.side_effect = requests.ConnectionError("acima unreachable")

    with pytest.raises(requests.ConnectionError):
        AcimaGateway(acima_config)


@patch("payments.acima_client.requests.post")
def test_oauth_style_access_token_is_accepted(mock_post, acima_config):
    mock_post.return_value = MockResponse(200, {"access_token": "oauth-abc"})

    assert authenticate(acima_config) == "oauth-abc"


@patch("payments.acima_client.requests.post")
def test_token_survives_unexpected_sibling_fields(mock_post, acima_config):
    mock_post.return_value = MockResponse(200, {"token": "abc", "message": {"detail": "ok"}})

    assert authenticate(acima_config) == "abc"
