"""Core types for the Ripple SDK.

All public-facing data structures are Pydantic v2 models. Request-side
models are frozen; response-side records accept unknown keys so that new
server fields do not break parsing, but a missing required key always
raises :class:`~ripple_sdk.errors.MalformedResponse`.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ripple_sdk.errors import MalformedResponse, SigningFailed

UINT32_MAX = 2**32 - 1

M = TypeVar("M", bound=BaseModel)


def parse_record(model: type[M], data: Any) -> M:
    """Validate *data* into *model* or raise :class:`MalformedResponse`."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponse(
            f"unexpected {model.__name__} shape ({exc.error_count()} error(s)): {exc}",
            data,
        ) from exc


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TransactionType(str, Enum):
    """Transaction types the builder knows how to finalize."""

    PAYMENT = "Payment"
    ACCOUNT_SET = "AccountSet"


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------


class TransactionFields(BaseModel):
    """Immutable snapshot produced by :meth:`TransactionRequest.sign`."""

    model_config = ConfigDict(frozen=True)

    account: Annotated[str, Field(min_length=1)]
    secret: Annotated[str, Field(min_length=1, repr=False)]
    transaction_type: TransactionType
    amount_drops: Annotated[int, Field(ge=0)] | None = None
    destination: Annotated[str, Field(min_length=1)] | None = None
    destination_tag: Annotated[int, Field(ge=0, le=UINT32_MAX)] | None = None

    def to_params(self) -> dict[str, Any]:
        """Parameter object for the node's ``sign`` method."""
        tx_json: dict[str, Any] = {
            "TransactionType": self.transaction_type.value,
            "Account": self.account,
        }
        if self.destination is not None:
            tx_json["Destination"] = self.destination
        if self.amount_drops is not None:
            tx_json["Amount"] = str(self.amount_drops)
        if self.destination_tag is not None:
            tx_json["DestinationTag"] = self.destination_tag
        return {"secret": self.secret, "tx_json": tx_json}


# ---------------------------------------------------------------------------
# Signing result
# ---------------------------------------------------------------------------


class SigningResult(BaseModel):
    """The ``result`` object returned by the node's ``sign`` method."""

    model_config = ConfigDict(frozen=True, extra="allow")

    status: str
    tx_blob: str | None = None
    tx_json: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    error_message: str | None = None

    @model_validator(mode="after")
    def _blob_present_on_success(self) -> "SigningResult":
        if self.status == "success" and not self.tx_blob:
            raise ValueError("successful signing result carries no tx_blob")
        return self

    @classmethod
    def from_response(cls, response: Any) -> "SigningResult":
        result = response.get("result") if isinstance(response, dict) else None
        if not isinstance(result, dict):
            raise MalformedResponse("sign response has no 'result' object", response)
        return parse_record(cls, result)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @property
    def blob(self) -> str:
        """The signed transaction blob.

        Raises:
            SigningFailed: If the signer did not report success.
        """
        if not self.succeeded:
            raise SigningFailed(self.status, self.error_message or self.error)
        return self.tx_blob  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Data API records
# ---------------------------------------------------------------------------


class AccountObject(BaseModel):
    """Account creation record from ``/accounts/{address}``."""

    model_config = ConfigDict(extra="allow")

    account: str
    ledger_index: int
    parent: str | None = None
    initial_balance: Decimal | None = None
    inception: str | None = None
    tx_hash: str | None = None


class PaymentObject(BaseModel):
    """A single payment from ``/accounts/{address}/payments``."""

    model_config = ConfigDict(extra="allow")

    amount: Decimal
    currency: str
    source: str
    destination: str
    tx_hash: str
    ledger_index: int
    executed_time: str
    delivered_amount: Decimal | None = None
    issuer: str | None = None
    source_currency: str | None = None
    destination_tag: Annotated[int, Field(ge=0, le=UINT32_MAX)] | None = None
    source_tag: Annotated[int, Field(ge=0, le=UINT32_MAX)] | None = None
    transaction_cost: Decimal | None = None
    source_balance_changes: list[dict[str, Any]] = Field(default_factory=list)
    destination_balance_changes: list[dict[str, Any]] = Field(default_factory=list)


class TransactionObject(BaseModel):
    """A transaction as returned by the data API."""

    model_config = ConfigDict(extra="allow")

    hash: str
    ledger_index: int
    tx: dict[str, Any]
    date: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @property
    def transaction_type(self) -> str | None:
        return self.tx.get("TransactionType")

    @property
    def result(self) -> str | None:
        """Engine result code, e.g. ``"tesSUCCESS"``."""
        return self.meta.get("TransactionResult")
