"""
Acima Gateway Adapter

Exposes the payment operations a host commerce platform expects from a
gateway and maps them onto the Acima lease API:
- authorize (local only; the signed lease already stands as authorization)
- capture / purchase (failures come back as unsuccessful responses)
- void / credit (failures raise AcimaServerResponseError)
- acima_payment_captured (best-effort lease status lookup)

Amounts are sent in major currency units. See build_amount_body.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

import requests
import structlog

from core.logging import BusinessEvents
from payments.acima_client import AcimaClient, path_segment
from payments.errors import response_error_message
from payments.schemas import (
    AcimaConfig,
    BillingResponse,
    GatewayOutcome,
    LeaseStatusResponse,
    Ok,
    PaymentRecord,
    RefundRecord,
    RemoteRejected,
    RemoteResponse,
    TransactionResponse,
    parse_body,
)

log = structlog.get_logger(__name__)

CENTS = Decimal("0.01")


def minor_to_major(money: int) -> Decimal:
    """Convert a minor-unit amount (cents) into major units (dollars)."""
    return (Decimal(int(money)) / 100).quantize(CENTS)


def format_amount(amount: Any) -> str:
    return str(Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP))


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def originator_currency(originator: PaymentRecord | RefundRecord | None) -> str | None:
    """Currency of a payment, or of a refund's payment when the refund has none."""
    currency = _field(originator, "currency")
    if currency:
        return currency
    return _field(_field(originator, "payment"), "currency")


def build_amount_body(
    money: int | None, options: Mapping[str, Any] | None, default_currency: str
) -> dict[str, str]:
    """Request body carrying the amount and currency of an operation.

    The originator's amount is already in major units. The positional money
    argument is in minor units and is only used without an originator.
    """
    originator = (options or {}).get("originator")
    if originator is not None:
        amount = _field(originator, "amount")
    elif money is not None:
        amount = minor_to_major(money)
    else:
        amount = None
    if amount is None:
        raise ValueError("an originator with an amount, or money, is required")

    return {
        "amount": format_amount(amount),
        "currency": originator_currency(originator) or default_currency,
    }


class AcimaGateway:
    """Payment gateway backed by Acima lease financing."""

    def __init__(self, config: AcimaConfig):
        # Authenticates immediately; raises if Acima refuses the credentials
        self.config = config
        self._client = AcimaClient(config)

    @property
    def bearer_token(self) -> str | None:
        return self._client.bearer_token

    @property
    def test_mode(self) -> bool:
        return self.config.test_mode

    # ---- Normalization ----

    def _response(self, success: bool, message: str, reference=None, params=None):
        return BillingResponse(
            success=success,
            message=message,
            authorization_reference=reference if success else None,
            raw_response_params=params or {},
            test=self.test_mode,
        )

    def _normalize(
        self, operation: str, result: RemoteResponse, checkout_token: str
    ) -> BillingResponse:
        if not result.ok:
            log.error(
                BusinessEvents.PAYMENT_FAILURE,
                operation=operation,
                checkout_token=checkout_token,
                status_code=result.status_code,
            )
            return self._response(
                False,
                response_error_message(result.status_code, result.text),
                params=result.body,
            )

        parsed = parse_body(TransactionResponse, result.body)
        reference = parsed.transaction_id
        log.info(
            BusinessEvents.PAYMENT_SUCCESS,
            operation=operation,
            checkout_token=checkout_token,
            transaction_id=reference,
        )
        return self._response(
            True,
            parsed.message or f"Acima {operation} succeeded",
            reference=str(reference if reference is not None else checkout_token),
            params=result.body,
        )

    def _outcome(
        self, operation: str, result: RemoteResponse, checkout_token: str
    ) -> GatewayOutcome:
        if not result.ok:
            log.error(
                BusinessEvents.PAYMENT_FAILURE,
                operation=operation,
                checkout_token=checkout_token,
                status_code=result.status_code,
            )
            return RemoteRejected(
                status_code=result.status_code,
                body=result.text,
                raw_response_params=result.body,
            )
        return Ok(response=self._normalize(operation, result, checkout_token))

    # ---- Operations ----

    def authorize(self, money, payment_source, options=None) -> BillingResponse:
        """Accept the lease as authorized without contacting Acima.

        The reference is the checkout token, which is what capture expects.
        """
        checkout_token = _field(payment_source, "checkout_token")
        lease_id = _field(payment_source, "lease_id")
        lease_number = _field(payment_source, "lease_number")

        if checkout_token:
            reference = str(checkout_token)
        elif lease_id is not None:
            reference = f"lease-{lease_id}"
        else:
            reference = "acima-authorized"

        lease_label = lease_number or lease_id
        log.info(
            BusinessEvents.PAYMENT_AUTHORIZED,
            lease_id=lease_id,
            lease_number=lease_number,
        )
        return self._response(
            True,
            f"Acima lease {lease_label} authorized" if lease_label else "Acima lease authorized",
            reference=reference,
            params={
                "lease_id": lease_id,
                "lease_number": lease_number,
                "checkout_token": checkout_token,
            },
        )

    def _settle(self, operation, money, checkout_token, options) -> BillingResponse:
        body = build_amount_body(money, options, self.config.default_currency)
        log.info(
            BusinessEvents.PAYMENT_ATTEMPT,
            operation=operation,
            checkout_token=checkout_token,
            amount=body["amount"],
            currency=body["currency"],
        )
        path = f"/checkouts/{path_segment(checkout_token)}/{operation}"
        try:
            result = self._client.put(operation, path, json=body)
        except requests.RequestException as e:
            log.error(
                BusinessEvents.PAYMENT_FAILURE,
                operation=operation,
                checkout_token=checkout_token,
                error=str(e),
            )
            return self._response(
                False, f"Acima request failed: {e}", params={"error": str(e)}
            )
        return self._normalize(operation, result, checkout_token)

    def capture(self, money, checkout_token, options=None) -> BillingResponse:
        return self._settle("capture", money, checkout_token, options)

    def purchase(self, money, checkout_token, options=None) -> BillingResponse:
        return self._settle("purchase", money, checkout_token, options)

    def void_outcome(self, checkout_token, options=None) -> GatewayOutcome:
        log.info(
            BusinessEvents.PAYMENT_ATTEMPT,
            operation="void",
            checkout_token=checkout_token,
        )
        result = self._client.post(
            "void", f"/checkouts/{path_segment(checkout_token)}/void"
        )
        return self._outcome("void", result, checkout_token)

    def void(self, checkout_token, options=None) -> BillingResponse:
        """Void a checkout. Raises AcimaServerResponseError if Acima refuses."""
        return self.void_outcome(checkout_token, options).unwrap()

    def credit_outcome(self, money, checkout_token, options=None) -> GatewayOutcome:
        body = build_amount_body(money, options, self.config.default_currency)
        log.info(
            BusinessEvents.PAYMENT_ATTEMPT,
            operation="credit",
            checkout_token=checkout_token,
            amount=body["amount"],
            currency=body["currency"],
        )
        result = self._client.post(
            "credit", f"/checkouts/{path_segment(checkout_token)}/refund", json=body
        )
        return self._outcome("credit", result, checkout_token)

    def credit(self, money, checkout_token, options=None) -> BillingResponse:
        """Refund a checkout. Raises AcimaServerResponseError if Acima refuses."""
        return self.credit_outcome(money, checkout_token, options).unwrap()

    def acima_payment_captured(self, lease_id) -> bool:
        """Whether Acima reports the lease as captured. Never raises."""
        try:
            result = self._client.get("lease_status", f"/leases/{path_segment(lease_id)}")
        except requests.RequestException as e:
            log.warning(BusinessEvents.LEASE_STATUS_CHECK, lease_id=lease_id, error=str(e))
            return False

        lease = parse_body(LeaseStatusResponse, result.body)
        log.info(
            BusinessEvents.LEASE_STATUS_CHECK,
            lease_id=lease_id,
            status_code=result.status_code,
            lease_status=lease.status,
            captured=result.ok,
        )
        return result.ok
