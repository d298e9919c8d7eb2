import logging
import sys
import structlog
import os
from opentelemetry.instrumentation.logging import LoggingInstrumentor


def get_log_level():
    """Get log level from environment or default to INFO"""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_environment():
    return os.getenv("ENVIRONMENT", "development")


def get_log_renderer(environment: str):
    """Get log renderer based on environment"""
    # Use JSON format for tests and production
    if environment in ["test", "production"]:
        return structlog.processors.JSONRenderer()
    # Pretty printing for local development
    return structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)


def configure_logging(log_level: str | None = None, environment: str | None = None):
    """Set up structlog + OTEL context injection.

    Falls back to LOG_LEVEL / ENVIRONMENT from the process environment when
    called before settings are loaded.
    """
    log_level = (log_level or get_log_level()).upper()
    environment = environment or get_environment()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.ExceptionPrettyPrinter(),
            get_log_renderer(environment),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Tests read stdout; everything else logs to stderr
    handler = logging.StreamHandler(sys.stdout if environment == "test" else None)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    # urllib3 logs every connection at DEBUG; keep it out of the payment stream
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    instrumentor = LoggingInstrumentor()
    if not instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.instrument(set_logging_format=False)


# Business Event Log Names
class BusinessEvents:
    """Standard names for business event logs"""

    ACIMA_AUTH_SUCCESS = "acima.auth.success"
    ACIMA_AUTH_FAILURE = "acima.auth.failure"
    ACIMA_REQUEST = "acima.request"
    ACIMA_RESPONSE = "acima.response"
    PAYMENT_AUTHORIZED = "payment.authorized"
    PAYMENT_ATTEMPT = "payment.attempt"
    PAYMENT_SUCCESS = "payment.success"
    PAYMENT_FAILURE = "payment.failure"
    LEASE_STATUS_CHECK = "lease.status_check"


# Configure logging when module is imported
configure_logging()
