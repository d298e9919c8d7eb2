"""
Acima Gateway Schemas

This module defines Pydantic models for:
- Gateway configuration
- Payment sources and host-platform records
- Remote Acima response bodies
- Normalized billing responses and tagged void/credit outcomes
"""

from decimal import Decimal
from typing import Annotated, Any, Literal, Protocol, Union

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from payments.errors import AcimaServerResponseError

log = structlog.get_logger(__name__)


class AcimaConfig(BaseModel):
    """Explicit, immutable configuration for one gateway instance."""

    client_id: str
    client_secret: SecretStr
    base_url: str
    test_mode: bool = False
    timeout: float | None = None  # None: no adapter-imposed deadline
    default_currency: str = "USD"

    model_config = ConfigDict(frozen=True)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class PaymentSource(BaseModel):
    """The remote lease a host payment is attached to."""

    lease_id: str | int
    lease_number: str | None = None
    checkout_token: str | None = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


# Host-platform records. The adapter only reads these attributes.


class PaymentRecord(Protocol):
    amount: Decimal | float | int | str
    currency: str | None


class RefundRecord(Protocol):
    amount: Decimal | float | int | str
    payment: PaymentRecord


# Remote response bodies


class AcimaResponse(BaseModel):
    """Common shape of an Acima JSON body; unknown fields are kept."""

    success: bool | None = None
    message: str | None = None

    model_config = ConfigDict(extra="allow")


class TokenResponse(AcimaResponse):
    token: str | None = Field(
        default=None, validation_alias=AliasChoices("token", "access_token")
    )


class TransactionResponse(AcimaResponse):
    transaction_id: str | int | None = None


class LeaseStatusResponse(AcimaResponse):
    lease_id: str | int | None = None
    status: str | None = None


def parse_body(schema: type[AcimaResponse], body: dict[str, Any]) -> AcimaResponse:
    """Validate a remote body, discarding fields whose type drifted."""
    try:
        return schema.model_validate(body)
    except ValidationError as e:
        invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        log.warning(
            "acima.response_schema_mismatch",
            schema=schema.__name__,
            fields=sorted(invalid),
        )

    # Drop only the offending fields so valid ones (e.g. transaction_id) survive
    try:
        return schema.model_validate(
            {key: value for key, value in body.items() if key not in invalid}
        )
    except ValidationError:
        return schema()


class RemoteResponse(BaseModel):
    """One decoded HTTP exchange with Acima."""

    status_code: int
    ok: bool
    body: dict[str, Any] = Field(default_factory=dict)
    text: str = ""


# Normalized output


class BillingResponse(BaseModel):
    """Uniform result handed back to the host order/payment pipeline."""

    success: bool
    message: str = ""
    authorization_reference: str | None = None
    raw_response_params: dict[str, Any] = Field(default_factory=dict)
    test: bool = False

    @model_validator(mode="after")
    def _reference_only_on_success(self):
        if not self.success and self.authorization_reference is not None:
            raise ValueError("authorization_reference is only set on success")
        return self


class Ok(BaseModel):
    kind: Literal["ok"] = "ok"
    response: BillingResponse

    def unwrap(self) -> BillingResponse:
        return self.response


class RemoteRejected(BaseModel):
    kind: Literal["remote_rejected"] = "remote_rejected"
    status_code: int
    body: str
    raw_response_params: dict[str, Any] = Field(default_factory=dict)

    def unwrap(self) -> BillingResponse:
        raise AcimaServerResponseError(self.status_code, self.body)


GatewayOutcome = Annotated[Union[Ok, RemoteRejected], Field(discriminator="kind")]
