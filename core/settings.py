from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from payments.schemas import AcimaConfig

# Load .env file automatically
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Acima credentials (production)
    ACIMA_CLIENT_ID: str = ""
    ACIMA_CLIENT_SECRET: str = ""

    # Optional sandbox credentials; fall back to the production pair when unset
    ACIMA_SANDBOX_CLIENT_ID: str | None = None
    ACIMA_SANDBOX_CLIENT_SECRET: str | None = None

    # Acima endpoints
    ACIMA_SANDBOX_URL: str = "https://sandbox-api.acimacredit.com"
    ACIMA_PRODUCTION_URL: str = "https://api.acimacredit.com"

    # Transport
    ACIMA_TIMEOUT: float | None = None
    ACIMA_DEFAULT_CURRENCY: str = "USD"

    # App settings
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # Observability (Optional)
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_SERVICE_NAME: str = "acima-gateway"

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def acima_config(self, test_mode: bool) -> AcimaConfig:
        """Build the explicit gateway configuration for sandbox or live mode."""
        if test_mode:
            client_id = self.ACIMA_SANDBOX_CLIENT_ID or self.ACIMA_CLIENT_ID
            client_secret = self.ACIMA_SANDBOX_CLIENT_SECRET or self.ACIMA_CLIENT_SECRET
            base_url = self.ACIMA_SANDBOX_URL
        else:
            client_id = self.ACIMA_CLIENT_ID
            client_secret = self.ACIMA_CLIENT_SECRET
            base_url = self.ACIMA_PRODUCTION_URL

        return AcimaConfig(
            client_id=client_id,
            client_secret=client_secret,
            base_url=base_url,
            test_mode=test_mode,
            timeout=self.ACIMA_TIMEOUT,
            default_currency=self.ACIMA_DEFAULT_CURRENCY,
        )
