"""Transaction construction for remote signing.

Provides a fluent builder that accumulates the fields of a ledger
transaction and finalizes them into an immutable
:class:`~ripple_sdk.types.TransactionFields` snapshot. No signature is
computed locally: the snapshot is what gets shipped to the node's
``sign`` method.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Self

from pydantic import ValidationError

from ripple_sdk.errors import IncompleteTransaction, InvalidTransaction, TransactionError
from ripple_sdk.types import UINT32_MAX, TransactionFields, TransactionType

DROPS_PER_XRP = 1_000_000

# Fields each transaction type needs on top of account and secret.
_REQUIRED_FIELDS: dict[TransactionType, tuple[str, ...]] = {
    TransactionType.PAYMENT: ("destination", "amount"),
    TransactionType.ACCOUNT_SET: (),
}

# Fields that are emitted for each transaction type.
_ALLOWED_FIELDS: dict[TransactionType, frozenset[str]] = {
    TransactionType.PAYMENT: frozenset({"destination", "amount", "destination_tag"}),
    TransactionType.ACCOUNT_SET: frozenset(),
}


def xrp_to_drops(value: Decimal | int | float | str) -> int:
    """Convert an XRP amount to integer drops.

    Raises:
        InvalidTransaction: If *value* is not a finite number, is negative,
            or has more precision than one drop.
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidTransaction(f"amount {value!r} is not a number") from exc
    if not amount.is_finite():
        raise InvalidTransaction(f"amount {value!r} is not a finite number")
    if amount < 0:
        raise InvalidTransaction(f"amount must be non-negative, got {value}")

    drops = amount * DROPS_PER_XRP
    if drops != drops.to_integral_value():
        raise InvalidTransaction(f"amount {value} is finer than one drop")
    return int(drops)


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TransactionRequest:
    """Fluent builder for a transaction to be signed remotely.

    Setters do no validation; everything is checked in :meth:`sign`.
    Once finalized the builder is frozen and :meth:`sign` keeps returning
    the same snapshot.

    Example::

        fields = (
            TransactionRequest()
            .set_account("rSOURCE...")
            .set_secret("s...")
            .set_transaction_type(TransactionType.PAYMENT)
            .set_destination("rDEST...")
            .set_amount("0.004")
            .set_destination_tag(1)
            .sign()
        )
    """

    def __init__(self) -> None:
        self._account: str | None = None
        self._secret: str | None = None
        self._transaction_type: TransactionType | str | None = None
        self._amount: Decimal | int | float | str | None = None
        self._destination: str | None = None
        self._destination_tag: int | None = None
        self._snapshot: TransactionFields | None = None

    def __repr__(self) -> str:
        return (
            f"TransactionRequest(account={self._account!r}, "
            f"transaction_type={self._transaction_type!r}, "
            f"destination={self._destination!r}, amount={self._amount!r})"
        )

    @property
    def finalized(self) -> bool:
        return self._snapshot is not None

    def _check_mutable(self) -> None:
        if self._snapshot is not None:
            raise TransactionError("transaction request is already finalized")

    def set_account(self, account: str) -> Self:
        """Set the source account that funds the transaction."""
        self._check_mutable()
        self._account = account
        return self

    def set_secret(self, secret: str) -> Self:
        """Set the secret forwarded to the remote signer."""
        self._check_mutable()
        self._secret = secret
        return self

    def set_transaction_type(self, transaction_type: TransactionType | str) -> Self:
        self._check_mutable()
        self._transaction_type = transaction_type
        return self

    def set_amount(self, amount: Decimal | int | float | str) -> Self:
        """Set the amount in XRP (not drops)."""
        self._check_mutable()
        self._amount = amount
        return self

    def set_destination(self, destination: str) -> Self:
        self._check_mutable()
        self._destination = destination
        return self

    def set_destination_tag(self, tag: int) -> Self:
        self._check_mutable()
        self._destination_tag = tag
        return self

    def sign(self) -> TransactionFields:
        """Validate the accumulated fields and return the frozen snapshot.

        Nothing is signed here; the name mirrors the node method the
        snapshot is sent to.

        Raises:
            IncompleteTransaction: If a field required by the transaction
                type is missing.
            InvalidTransaction: If a field holds an unusable value.
        """
        if self._snapshot is not None:
            return self._snapshot

        tx_type: TransactionType | None = None
        if self._transaction_type is not None:
            try:
                tx_type = TransactionType(self._transaction_type)
            except ValueError as exc:
                raise InvalidTransaction(
                    f"unsupported transaction type {self._transaction_type!r}"
                ) from exc

        missing: list[str] = []
        if _blank(self._account):
            missing.append("account")
        if _blank(self._secret):
            missing.append("secret")
        if tx_type is None:
            missing.append("transaction_type")
        else:
            values = {"destination": self._destination, "amount": self._amount}
            missing.extend(name for name in _REQUIRED_FIELDS[tx_type] if _blank(values[name]))
        if missing:
            raise IncompleteTransaction(missing)

        allowed = _ALLOWED_FIELDS[tx_type]  # type: ignore[index]
        tag = self._destination_tag if "destination_tag" in allowed else None
        if tag is not None and (
            isinstance(tag, bool) or not isinstance(tag, int) or not 0 <= tag <= UINT32_MAX
        ):
            raise InvalidTransaction(f"destination tag must be a uint32, got {tag!r}")

        try:
            self._snapshot = TransactionFields(
                account=self._account,  # type: ignore[arg-type]
                secret=self._secret,  # type: ignore[arg-type]
                transaction_type=tx_type,  # type: ignore[arg-type]
                amount_drops=xrp_to_drops(self._amount) if "amount" in allowed else None,  # type: ignore[arg-type]
                destination=self._destination if "destination" in allowed else None,
                destination_tag=tag,
            )
        except ValidationError as exc:
            raise InvalidTransaction(str(exc)) from exc
        return self._snapshot


TransactionConfigurator = Callable[[TransactionRequest], TransactionRequest | TransactionFields]
"""A pure function that fills in a :class:`TransactionRequest`. It must not do I/O.

It may return the builder or the snapshot from calling ``sign()`` on it.
"""
