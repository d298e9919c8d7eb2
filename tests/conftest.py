"""Test configuration and fixtures."""

import os
from dataclasses import dataclass
from decimal import Decimal
from unittest.mock import patch

import pytest

from core.settings import Settings
from payments.acima_gateway import AcimaGateway
from payments.schemas import AcimaConfig, PaymentSource


class MockResponse:
    """Stand-in for requests.Response with an explicit integer status_code."""

    def __init__(self, status_code, json_data=None, text=""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data

    def raise_for_status(self):
        pass


@dataclass
class Payment:
    """Minimal host payment record."""

    amount: Decimal
    currency: str | None = "USD"


@dataclass
class Refund:
    """Minimal host refund record; currency is usually left to the payment."""

    amount: Decimal
    payment: Payment
    currency: str | None = None


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "ACIMA_CLIENT_ID": "test_client_id",
            "ACIMA_CLIENT_SECRET": "test_secret",
            "ENVIRONMENT": "development",
            "DISABLE_TRACING": "true",
        }
    )

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings():
    return Settings(
        ACIMA_CLIENT_ID="live_client_id",
        ACIMA_CLIENT_SECRET="live_secret",
        ACIMA_SANDBOX_CLIENT_ID="sandbox_client_id",
        ACIMA_SANDBOX_CLIENT_SECRET="sandbox_secret",
        ACIMA_SANDBOX_URL="https://sandbox.acima.test/",
        ACIMA_PRODUCTION_URL="https://live.acima.test",
        ENVIRONMENT="test",
    )


@pytest.fixture
def acima_config(mock_settings) -> AcimaConfig:
    return mock_settings.acima_config(test_mode=True)


@pytest.fixture
def gateway(acima_config):
    """Gateway in test mode whose authentication returned the token "abc"."""
    with patch(
        "payments.acima_client.requests.post",
        return_value=MockResponse(200, {"token": "abc"}),
    ):
        return AcimaGateway(acima_config)


@pytest.fixture
def payment_source():
    return PaymentSource(lease_id=4242, lease_number="L-000123", checkout_token="chk_123")


@pytest.fixture
def payment():
    return Payment(amount=Decimal("25.00"), currency="USD")


@pytest.fixture
def refund():
    return Refund(amount=Decimal("10.50"), payment=Payment(Decimal("25.00"), "CAD"))
