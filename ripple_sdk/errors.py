"""Exception hierarchy for the Ripple SDK.

Every error raised by the library derives from :class:`RippleError`, so
callers can catch everything at once or branch on the specific class.
"""

from __future__ import annotations

from typing import Any


class RippleError(Exception):
    """Base class for all SDK errors."""


# ---------------------------------------------------------------------------
# Transport and response errors
# ---------------------------------------------------------------------------


class TransportFailure(RippleError):
    """Raised when an HTTP call fails at the network or protocol level."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedResponse(RippleError):
    """Raised when a decoded response does not have the expected shape."""

    def __init__(self, message: str, data: Any = None) -> None:
        self.data = data
        super().__init__(message)


class ConfigurationError(RippleError):
    """Raised when an operation needs an endpoint that was not configured."""


# ---------------------------------------------------------------------------
# Transaction pipeline errors
# ---------------------------------------------------------------------------


class TransactionError(RippleError):
    """Base class for errors raised while building or submitting a transaction."""


class InvalidTransaction(TransactionError):
    """Raised when a transaction field holds an unusable value."""


class IncompleteTransaction(InvalidTransaction):
    """Raised at finalize when a required field is missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"missing required fields: {', '.join(missing)}")


class SigningFailed(TransactionError):
    """Raised when the remote signer does not report success."""

    def __init__(self, status: str | None, message: str | None = None) -> None:
        self.status = status
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"signing failed with status {status!r}{detail}")


class NoSignedTransaction(TransactionError):
    """Raised when ``submit()`` is called without a successfully signed blob."""

    def __init__(self) -> None:
        super().__init__("no signed transaction to submit; call build_transaction() first")


class TransactionNotSubmitted(TransactionError):
    """Raised when the node returns an empty body for a submission."""


class TransactionNotSent(TransactionError):
    """Raised when the delegated-send server returns an empty body."""
