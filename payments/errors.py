"""Exceptions raised by the Acima gateway adapter."""

RESPONSE_ERROR_LABEL = "Acima Server Response Error:"


class AcimaServerResponseError(RuntimeError):
    """Raised when Acima rejects an authentication, void or credit call.

    Carries the remote HTTP status code and raw body so the caller can log it
    or flag the payment for manual reconciliation.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(response_error_message(status_code, body))


def response_error_message(status_code: int, body: str) -> str:
    return f"{RESPONSE_ERROR_LABEL} {status_code} - {body}"
