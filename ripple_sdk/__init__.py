"""Ripple Python SDK.

Provides a blocking client for the Ripple data API and JSON-RPC node API:
account, transaction, gateway and statistics lookups, plus a pipeline
that builds a transaction, has it signed by the node and submits the
signed blob.

Quick start::

    from ripple_sdk import RippleClient, TransactionType

    with RippleClient("rSOURCE...", "s...") as ripple:
        result = ripple.build_transaction(
            lambda tx: tx.set_transaction_type(TransactionType.PAYMENT)
            .set_destination("rDEST...")
            .set_destination_tag(1)
            .set_amount("0.004")
        ).submit()
"""

from ripple_sdk.client import RippleClient
from ripple_sdk.config import DATA_API_URL, RPC_URL, TESTNET_RPC_URL, NodeEndpoints
from ripple_sdk.errors import (
    ConfigurationError,
    IncompleteTransaction,
    InvalidTransaction,
    MalformedResponse,
    NoSignedTransaction,
    RippleError,
    SigningFailed,
    TransactionError,
    TransactionNotSent,
    TransactionNotSubmitted,
    TransportFailure,
)
from ripple_sdk.pipeline import TransactionPipeline
from ripple_sdk.transaction import (
    DROPS_PER_XRP,
    TransactionConfigurator,
    TransactionRequest,
    xrp_to_drops,
)
from ripple_sdk.transport import RippleTransport, RpcEnvelope, Transport, decode_body
from ripple_sdk.types import (
    AccountObject,
    PaymentObject,
    SigningResult,
    TransactionFields,
    TransactionObject,
    TransactionType,
)

__all__ = [
    # Client
    "RippleClient",
    "TransactionPipeline",
    # Configuration
    "NodeEndpoints",
    "DATA_API_URL",
    "RPC_URL",
    "TESTNET_RPC_URL",
    # Errors
    "RippleError",
    "TransportFailure",
    "MalformedResponse",
    "ConfigurationError",
    "TransactionError",
    "InvalidTransaction",
    "IncompleteTransaction",
    "SigningFailed",
    "NoSignedTransaction",
    "TransactionNotSubmitted",
    "TransactionNotSent",
    # Transaction
    "TransactionRequest",
    "TransactionConfigurator",
    "DROPS_PER_XRP",
    "xrp_to_drops",
    # Transport
    "RippleTransport",
    "RpcEnvelope",
    "Transport",
    "decode_body",
    # Types
    "AccountObject",
    "PaymentObject",
    "SigningResult",
    "TransactionFields",
    "TransactionObject",
    "TransactionType",
]

__version__ = "0.1.0"
