"""Build, sign and submit pipeline.

:class:`TransactionPipeline` turns a caller-supplied configurator into a
signing request, keeps the returned blob, and submits it. The pending
blob is the only state it holds, and :meth:`TransactionPipeline.submit`
refuses to touch the network without one.

The pipeline is not thread-safe. Use one instance per concurrent
transaction flow.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ripple_sdk.errors import NoSignedTransaction, SigningFailed, TransactionNotSent, TransactionNotSubmitted
from ripple_sdk.transaction import TransactionConfigurator, TransactionRequest
from ripple_sdk.transport import Decoded, Transport
from ripple_sdk.types import SigningResult, TransactionFields

logger = logging.getLogger(__name__)


class TransactionPipeline:
    """Drives ``build_transaction()`` → ``submit()`` for one source account.

    Args:
        transport: Where signing and submission requests are sent.
        address: Source account pre-filled into every request.
        secret: Signing secret pre-filled into every request. May be
            ``None``, in which case the configurator must set one.
    """

    def __init__(self, transport: Transport, address: str, secret: str | None = None) -> None:
        self._transport = transport
        self._address = address
        self._secret = secret
        self._pending_blob: str | None = None

    def __repr__(self) -> str:
        return f"TransactionPipeline(address={self._address!r}, signed={self.has_pending})"

    @property
    def pending_blob(self) -> str | None:
        """The signed blob waiting for :meth:`submit`, or ``None``."""
        return self._pending_blob

    @property
    def has_pending(self) -> bool:
        return self._pending_blob is not None

    def new_request(self) -> TransactionRequest:
        """A fresh builder pre-populated with this pipeline's account and secret."""
        request = TransactionRequest().set_account(self._address)
        if self._secret is not None:
            request.set_secret(self._secret)
        return request

    def build_transaction(self, configure: TransactionConfigurator) -> "TransactionPipeline":
        """Configure, finalize and remotely sign a new transaction.

        Any blob left over from an earlier cycle is discarded first. On
        success the new blob is held for :meth:`submit` and the pipeline
        is returned so the two calls can be chained.

        Raises:
            IncompleteTransaction: If the configured request lacks a required
                field. No request is sent.
            InvalidTransaction: If a field holds an unusable value.
            SigningFailed: If the signer reports anything but success.
            MalformedResponse: If the sign response has the wrong shape.
            TransportFailure: On HTTP-level failures.
        """
        self._pending_blob = None

        configured = configure(self.new_request())
        fields = configured if isinstance(configured, TransactionFields) else configured.sign()
        response = self._transport.send("sign", "/", fields.to_params(), use_data_api=False)
        result = SigningResult.from_response(response)

        if not result.succeeded:
            logger.warning(
                "signer rejected %s from %s: %s",
                fields.transaction_type.value,
                fields.account,
                result.error_message or result.error or result.status,
            )
            raise SigningFailed(result.status, result.error_message or result.error)

        self._pending_blob = result.blob
        logger.info("signed %s from %s (%d byte blob)", fields.transaction_type.value, fields.account, len(result.blob))
        return self

    def submit(self) -> dict[str, Any]:
        """Submit the pending blob and return the node's decoded response.

        The blob is consumed before the request goes out, whatever the
        outcome. Ledger-level results (``engine_result`` and friends) are
        returned uninterpreted.

        Raises:
            NoSignedTransaction: If nothing is pending. No request is sent.
            TransactionNotSubmitted: If the node returns an empty body.
            TransportFailure: On HTTP-level failures.
        """
        if self._pending_blob is None:
            raise NoSignedTransaction()

        blob, self._pending_blob = self._pending_blob, None
        result = self._transport.send("submit", "/", {"tx_blob": blob}, use_data_api=False)
        if not result:
            raise TransactionNotSubmitted("node returned an empty response to submit")

        engine_result = None
        if isinstance(result, dict) and isinstance(result.get("result"), dict):
            engine_result = result["result"].get("engine_result")
        logger.info("submitted transaction from %s: %s", self._address, engine_result or "no engine result")
        return result  # type: ignore[return-value]

    def send_and_submit_for_server(self, options: Mapping[str, Any]) -> Decoded:
        """Have the delegated-send server sign and submit a payment.

        Independent of :meth:`build_transaction`: the pending blob is
        neither read nor changed.

        Raises:
            ConfigurationError: If no ``wss_node`` endpoint is configured.
            TransactionNotSent: If the server returns an empty body.
            TransportFailure: On HTTP-level failures.
        """
        result = self._transport.send_wss("POST", "/send-xrp", options)
        if not result:
            raise TransactionNotSent("delegated send returned an empty response")
        return result
