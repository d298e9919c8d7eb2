from core.logging import configure_logging
from core.settings import Settings
from core.tracing import init_tracer
from payments.acima_gateway import AcimaGateway

# Settings singleton
_settings = None


def get_settings() -> Settings:
    """Dependency that provides application settings."""
    assert (
        _settings is not None
    ), "Settings not initialized. Make sure init_settings() was called."
    return _settings


def init_settings():
    """Initialize settings singleton."""
    global _settings
    _settings = Settings()


def clear_settings():
    """Clear settings singleton."""
    global _settings
    _settings = None


def startup():
    """Load settings and wire logging and tracing from them."""
    init_settings()
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
    init_tracer(settings.OTEL_SERVICE_NAME, settings.OTEL_EXPORTER_OTLP_ENDPOINT)
    return settings


def build_gateway(test_mode: bool) -> AcimaGateway:
    """Construct an authenticated gateway from the process settings."""
    return AcimaGateway(get_settings().acima_config(test_mode))
