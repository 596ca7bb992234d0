"""Tests for the build → sign → submit pipeline.

A fake transport records every call so the tests can assert not only on
results but on which network calls were (or were not) made.
"""

from __future__ import annotations

from typing import Any

import pytest

from ripple_sdk.errors import (
    ConfigurationError,
    IncompleteTransaction,
    MalformedResponse,
    NoSignedTransaction,
    SigningFailed,
    TransactionNotSent,
    TransactionNotSubmitted,
    TransportFailure,
)
from ripple_sdk.pipeline import TransactionPipeline
from ripple_sdk.transaction import TransactionRequest
from ripple_sdk.transport import Transport
from ripple_sdk.types import TransactionType


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------

_SIGN_OK = {"result": {"status": "success", "tx_blob": "ABCD1234", "tx_json": {"hash": "FF" * 32}}}
_SIGN_FAILED = {"result": {"status": "failure"}}
_SUBMIT_OK = {
    "result": {
        "status": "success",
        "engine_result": "tesSUCCESS",
        "engine_result_message": "The transaction was applied.",
        "tx_blob": "ABCD1234",
    }
}


class FakeTransport:
    """Records calls and answers from a per-method table of responses."""

    def __init__(self, responses: dict[str, Any] | None = None, wss_response: Any = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.wss_response = wss_response if wss_response is not None else {}
        self.calls: list[tuple[str, str, dict[str, Any] | None, bool]] = []
        self.wss_calls: list[tuple[str, str, dict[str, Any] | None]] = []

    def send(self, method, path, params=None, *, use_data_api=True, allow_sequence=False):
        self.calls.append((method, path, dict(params) if params else None, use_data_api))
        response = self.responses.get(method, {})
        if isinstance(response, Exception):
            raise response
        return response

    def send_wss(self, method, path, params=None):
        self.wss_calls.append((method, path, dict(params) if params else None))
        return self.wss_response

    def methods(self) -> list[str]:
        return [call[0] for call in self.calls]


def _payment(tx: TransactionRequest) -> TransactionRequest:
    return (
        tx.set_amount(0.004)
        .set_destination("rDEST")
        .set_destination_tag(1)
        .set_transaction_type(TransactionType.PAYMENT)
    )


def _pipeline(**responses: Any) -> tuple[TransactionPipeline, FakeTransport]:
    transport = FakeTransport(responses)
    return TransactionPipeline(transport, "rSOURCE", "sSECRET"), transport


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestSubmitOrdering:
    def test_submit_without_sign_makes_no_calls(self) -> None:
        pipeline, transport = _pipeline(submit=_SUBMIT_OK)
        with pytest.raises(NoSignedTransaction):
            pipeline.submit()
        assert transport.calls == []

    def test_initial_state_has_no_pending_blob(self) -> None:
        pipeline, _ = _pipeline()
        assert pipeline.pending_blob is None
        assert not pipeline.has_pending

    def test_blob_consumed_by_submit(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_OK, submit=_SUBMIT_OK)
        pipeline.build_transaction(_payment).submit()
        assert pipeline.pending_blob is None
        with pytest.raises(NoSignedTransaction):
            pipeline.submit()
        assert transport.methods() == ["sign", "submit"]

    def test_pipeline_is_reusable_after_submit(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_OK, submit=_SUBMIT_OK)
        pipeline.build_transaction(_payment).submit()
        pipeline.build_transaction(_payment).submit()
        assert transport.methods() == ["sign", "submit", "sign", "submit"]


# ---------------------------------------------------------------------------
# build_transaction
# ---------------------------------------------------------------------------


class TestBuildTransaction:
    def test_validation_precedes_transport(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_OK)

        def no_destination(tx: TransactionRequest) -> TransactionRequest:
            return tx.set_amount(1).set_transaction_type(TransactionType.PAYMENT)

        with pytest.raises(IncompleteTransaction) as exc_info:
            pipeline.build_transaction(no_destination)
        assert exc_info.value.missing == ["destination"]
        assert transport.calls == []

    def test_sign_request_contents(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_OK)
        pipeline.build_transaction(_payment)
        assert transport.calls == [
            (
                "sign",
                "/",
                {
                    "secret": "sSECRET",
                    "tx_json": {
                        "TransactionType": "Payment",
                        "Account": "rSOURCE",
                        "Destination": "rDEST",
                        "Amount": "4000",
                        "DestinationTag": 1,
                    },
                },
                False,
            )
        ]

    def test_success_stores_blob_and_returns_pipeline(self) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_OK)
        assert pipeline.build_transaction(_payment) is pipeline
        assert pipeline.pending_blob == "ABCD1234"

    def test_configurator_receives_prefilled_request(self) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_OK)
        seen: list[TransactionRequest] = []

        def capture(tx: TransactionRequest) -> TransactionRequest:
            seen.append(tx)
            return _payment(tx)

        pipeline.build_transaction(capture)
        fields = seen[0].sign()
        assert fields.account == "rSOURCE"
        assert fields.secret == "sSECRET"

    def test_fresh_request_per_call(self) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_OK)
        seen: list[TransactionRequest] = []

        def capture(tx: TransactionRequest) -> TransactionRequest:
            seen.append(tx)
            return _payment(tx)

        pipeline.build_transaction(capture)
        pipeline.build_transaction(capture)
        assert seen[0] is not seen[1]

    def test_configurator_may_finalize_itself(self) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_OK)

        def finalize_early(tx: TransactionRequest) -> TransactionRequest:
            _payment(tx).sign()
            return tx

        pipeline.build_transaction(finalize_early)
        assert pipeline.pending_blob == "ABCD1234"

    def test_configurator_may_return_signed_snapshot(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_OK)
        pipeline.build_transaction(
            lambda tx: tx.set_amount("0.004")
            .set_destination("rDEST")
            .set_transaction_type(TransactionType.PAYMENT)
            .sign()
        )
        assert pipeline.pending_blob == "ABCD1234"
        assert transport.calls[0][2]["tx_json"]["Amount"] == "4000"

    def test_missing_secret_is_reported(self) -> None:
        transport = FakeTransport({"sign": _SIGN_OK})
        pipeline = TransactionPipeline(transport, "rSOURCE")
        with pytest.raises(IncompleteTransaction) as exc_info:
            pipeline.build_transaction(_payment)
        assert exc_info.value.missing == ["secret"]
        assert transport.calls == []

    def test_configurator_can_supply_secret(self) -> None:
        transport = FakeTransport({"sign": _SIGN_OK})
        pipeline = TransactionPipeline(transport, "rSOURCE")
        pipeline.build_transaction(lambda tx: _payment(tx).set_secret("sOTHER"))
        assert transport.calls[0][2]["secret"] == "sOTHER"


# ---------------------------------------------------------------------------
# Signing failures
# ---------------------------------------------------------------------------


class TestSigningFailures:
    def test_failed_sign_blocks_submit(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_FAILED, submit=_SUBMIT_OK)
        with pytest.raises(SigningFailed) as exc_info:
            pipeline.build_transaction(_payment)
        assert exc_info.value.status == "failure"
        assert pipeline.pending_blob is None

        with pytest.raises(NoSignedTransaction):
            pipeline.submit()
        assert transport.methods() == ["sign"]

    def test_error_message_reported(self) -> None:
        pipeline, _ = _pipeline(
            sign={"result": {"status": "error", "error": "badSecret", "error_message": "Secret does not match account."}}
        )
        with pytest.raises(SigningFailed) as exc_info:
            pipeline.build_transaction(_payment)
        assert exc_info.value.status == "error"
        assert exc_info.value.message == "Secret does not match account."

    def test_failed_sign_discards_earlier_blob(self) -> None:
        transport = FakeTransport({"sign": _SIGN_OK})
        pipeline = TransactionPipeline(transport, "rSOURCE", "sSECRET")
        pipeline.build_transaction(_payment)
        assert pipeline.pending_blob == "ABCD1234"

        transport.responses["sign"] = _SIGN_FAILED
        with pytest.raises(SigningFailed):
            pipeline.build_transaction(_payment)
        assert pipeline.pending_blob is None

    def test_invalid_request_discards_earlier_blob(self) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_OK)
        pipeline.build_transaction(_payment)
        with pytest.raises(IncompleteTransaction):
            pipeline.build_transaction(lambda tx: tx)
        assert pipeline.pending_blob is None

    def test_missing_result_object(self) -> None:
        pipeline, _ = _pipeline(sign={})
        with pytest.raises(MalformedResponse):
            pipeline.build_transaction(_payment)
        assert pipeline.pending_blob is None

    def test_success_without_blob(self) -> None:
        pipeline, _ = _pipeline(sign={"result": {"status": "success"}})
        with pytest.raises(MalformedResponse):
            pipeline.build_transaction(_payment)
        assert pipeline.pending_blob is None

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_FAILED)
        with caplog.at_level("WARNING", logger="ripple_sdk.pipeline"), pytest.raises(SigningFailed):
            pipeline.build_transaction(_payment)
        assert "signer rejected Payment" in caplog.text
        assert "sSECRET" not in caplog.text


# ---------------------------------------------------------------------------
# submit
# ---------------------------------------------------------------------------


class TestSubmit:
    def test_submits_exactly_the_blob(self) -> None:
        pipeline, transport = _pipeline(sign=_SIGN_OK, submit=_SUBMIT_OK)
        result = pipeline.build_transaction(_payment).submit()
        assert transport.calls[-1] == ("submit", "/", {"tx_blob": "ABCD1234"}, False)
        assert result == _SUBMIT_OK

    def test_ledger_rejection_passed_through(self) -> None:
        rejected = {"result": {"status": "success", "engine_result": "tecUNFUNDED_PAYMENT"}}
        pipeline, _ = _pipeline(sign=_SIGN_OK, submit=rejected)
        assert pipeline.build_transaction(_payment).submit() == rejected
        assert pipeline.pending_blob is None

    def test_empty_response(self) -> None:
        pipeline, _ = _pipeline(sign=_SIGN_OK, submit={})
        pipeline.build_transaction(_payment)
        with pytest.raises(TransactionNotSubmitted):
            pipeline.submit()
        assert pipeline.pending_blob is None

    def test_transport_failure_consumes_blob(self) -> None:
        failure = TransportFailure("boom", url="https://s1.ripple.com:51234/", status_code=502)
        pipeline, transport = _pipeline(sign=_SIGN_OK, submit=failure)
        pipeline.build_transaction(_payment)
        with pytest.raises(TransportFailure):
            pipeline.submit()
        assert pipeline.pending_blob is None
        assert transport.methods() == ["sign", "submit"]


# ---------------------------------------------------------------------------
# Delegated send
# ---------------------------------------------------------------------------


class TestSendAndSubmitForServer:
    def test_returns_server_response(self) -> None:
        transport = FakeTransport(wss_response={"result": "success", "hash": "AB" * 32})
        pipeline = TransactionPipeline(transport, "rSOURCE", "sSECRET")
        options = {"amount": "1", "destination": "rDEST"}
        assert pipeline.send_and_submit_for_server(options) == {"result": "success", "hash": "AB" * 32}
        assert transport.wss_calls == [("POST", "/send-xrp", options)]
        assert transport.calls == []

    def test_empty_response(self) -> None:
        pipeline = TransactionPipeline(FakeTransport(), "rSOURCE", "sSECRET")
        with pytest.raises(TransactionNotSent):
            pipeline.send_and_submit_for_server({"amount": "1"})

    def test_does_not_touch_pending_blob(self) -> None:
        transport = FakeTransport({"sign": _SIGN_OK}, wss_response={"result": "success"})
        pipeline = TransactionPipeline(transport, "rSOURCE", "sSECRET")
        pipeline.build_transaction(_payment)
        pipeline.send_and_submit_for_server({"amount": "1"})
        assert pipeline.pending_blob == "ABCD1234"

    def test_missing_endpoint_propagates(self) -> None:
        class NoWss(FakeTransport):
            def send_wss(self, method, path, params=None):
                raise ConfigurationError("wss_node is not configured")

        pipeline = TransactionPipeline(NoWss(), "rSOURCE")
        with pytest.raises(ConfigurationError):
            pipeline.send_and_submit_for_server({"amount": "1"})


def test_fake_transport_satisfies_protocol() -> None:
    assert isinstance(FakeTransport(), Transport)
