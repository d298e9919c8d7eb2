"""
Acima API Client

Acquires the bearer token once per gateway instance and sends every later
request over the authenticated channel. No retries: a failed call is
reported to the caller exactly as Acima returned it.
"""

from typing import Any, Callable
from urllib.parse import quote

import requests
import structlog

from core.logging import BusinessEvents
from core.metrics import acima_request_latency, record_outcome
from core.tracing import remote_call_span
from payments.errors import AcimaServerResponseError
from payments.schemas import AcimaConfig, RemoteResponse, TokenResponse, parse_body

log = structlog.get_logger(__name__)

AUTH_PATH = "/oauth/token"


def path_segment(value: Any) -> str:
    """Escape an identifier for use as a single URL path segment."""
    return quote(str(value), safe="")


def decode_body(response: requests.Response) -> dict[str, Any]:
    """Decode a JSON body; anything else is kept under a "body" key."""
    try:
        data = response.json()
    except ValueError:
        return {"body": response.text} if response.text else {}
    if isinstance(data, dict):
        return {str(key): value for key, value in data.items()}
    return {"body": data}


def to_remote_response(response: requests.Response) -> RemoteResponse:
    body = decode_body(response)
    # Acima reports some rejections as 2xx with "success": false
    ok = 200 <= response.status_code < 300 and body.get("success") is not False
    return RemoteResponse(
        status_code=response.status_code,
        ok=ok,
        body=body,
        text=response.text or str(body),
    )


def authenticate(config: AcimaConfig) -> str | None:
    """Exchange client credentials for a bearer token.

    A single attempt. Raises AcimaServerResponseError when Acima refuses the
    credentials; a missing token field yields None.
    """
    url = f"{config.base_url}{AUTH_PATH}"
    with remote_call_span("authenticate", "POST", url):
        with acima_request_latency.labels(operation="authenticate").time():
            r = requests.post(
                url,
                data={
                    "client_id": config.client_id,
                    "client_secret": config.client_secret.get_secret_value(),
                    "grant_type": "client_credentials",
                },
                headers={"Accept": "application/json"},
                timeout=config.timeout,
            )

    result = to_remote_response(r)
    if not result.ok:
        record_outcome("authenticate", "failure")
        log.error(
            BusinessEvents.ACIMA_AUTH_FAILURE,
            status_code=result.status_code,
            test_mode=config.test_mode,
        )
        raise AcimaServerResponseError(result.status_code, result.text)

    record_outcome("authenticate", "success")
    log.info(BusinessEvents.ACIMA_AUTH_SUCCESS, test_mode=config.test_mode)
    return parse_body(TokenResponse, result.body).token


class AcimaClient:
    """Authenticated channel to the Acima API."""

    def __init__(self, config: AcimaConfig):
        self.config = config
        self._bearer_token = authenticate(config)

    @property
    def bearer_token(self) -> str | None:
        return self._bearer_token

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._bearer_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _send(
        self,
        send: Callable[..., requests.Response],
        method: str,
        operation: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> RemoteResponse:
        url = f"{self.config.base_url}{path}"
        log.info(BusinessEvents.ACIMA_REQUEST, operation=operation, method=method, path=path)

        kwargs: dict[str, Any] = {"headers": self._headers(), "timeout": self.config.timeout}
        if json is not None:
            kwargs["json"] = json

        try:
            with remote_call_span(operation, method, url) as span:
                with acima_request_latency.labels(operation=operation).time():
                    r = send(url, **kwargs)
                span.set_attribute("http.response.status_code", r.status_code)
        except requests.RequestException:
            record_outcome(operation, "error")
            raise

        result = to_remote_response(r)
        record_outcome(operation, "success" if result.ok else "failure")
        log.info(
            BusinessEvents.ACIMA_RESPONSE,
            operation=operation,
            status_code=result.status_code,
            ok=result.ok,
        )
        return result

    def get(self, operation: str, path: str) -> RemoteResponse:
        return self._send(requests.get, "GET", operation, path)

    def put(self, operation: str, path: str, json: dict[str, Any] | None = None) -> RemoteResponse:
        return self._send(requests.put, "PUT", operation, path, json=json)

    def post(self, operation: str, path: str, json: dict[str, Any] | None = None) -> RemoteResponse:
        return self._send(requests.post, "POST", operation, path, json=json)
