"""Client for the Ripple data API and JSON-RPC node API.

:class:`RippleClient` is the single entry point: typed methods for the
public read endpoints, plus the build → sign → submit pipeline for the
account it was created with. All I/O goes through
:class:`~ripple_sdk.transport.RippleTransport` and is blocking.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from ripple_sdk.config import NodeEndpoints
from ripple_sdk.errors import MalformedResponse
from ripple_sdk.pipeline import TransactionPipeline
from ripple_sdk.transaction import TransactionConfigurator
from ripple_sdk.transport import Decoded, Params, RippleTransport, Transport
from ripple_sdk.types import AccountObject, PaymentObject, TransactionObject, parse_record

_HTTP_VERBS = frozenset({"GET", "POST", "PUT", "DELETE"})


class RippleClient:
    """Client bound to one ledger address.

    Args:
        address: The account used as the default for lookups and as the
            source of built transactions.
        secret: Optional signing secret, forwarded to the remote signer.
        nodes: Endpoint configuration, either a :class:`NodeEndpoints` or a
            mapping of its fields (e.g. ``{"wss_node": "https://..."}``).
        transport: Optional transport override, mainly for tests. When
            given, *nodes* and *http_client* are ignored.
        http_client: Optional :class:`httpx.Client` for the default
            transport.

    Example::

        with RippleClient("rSOURCE...", "s...") as ripple:
            result = ripple.build_transaction(
                lambda tx: tx.set_transaction_type(TransactionType.PAYMENT)
                .set_destination("rDEST...")
                .set_amount("0.004")
            ).submit()
    """

    def __init__(
        self,
        address: str,
        secret: str | None = None,
        nodes: NodeEndpoints | Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._address = address
        self._transport = transport or RippleTransport(nodes, http_client=http_client)
        self._pipeline = TransactionPipeline(self._transport, address, secret)

    @property
    def address(self) -> str:
        return self._address

    @property
    def pipeline(self) -> TransactionPipeline:
        return self._pipeline

    # ----- lifecycle -------------------------------------------------------

    def close(self) -> None:
        """Close the underlying transport if it holds connections."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "RippleClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ----- internal helpers ------------------------------------------------

    def _call(self, method: str, path: str, params: Params | None = None, *, allow_sequence: bool = False) -> Any:
        """HTTP verbs go to the data API; anything else is a JSON-RPC method."""
        return self._transport.send(
            method,
            path,
            params,
            use_data_api=method in _HTTP_VERBS,
            allow_sequence=allow_sequence,
        )

    def _account_path(self, template: str, address: str | None) -> str:
        return template % (address or self._address)

    @staticmethod
    def _field(response: Decoded, key: str) -> Any:
        if not isinstance(response, dict) or key not in response:
            raise MalformedResponse(f"response has no {key!r} field", response)
        return response[key]

    # ----- node (JSON-RPC) -------------------------------------------------

    def get_ping(self) -> dict[str, Any]:
        return self._call("ping", "/")

    def get_server_info(self) -> dict[str, Any]:
        return self._call("server_info", "/")

    def get_random(self) -> dict[str, Any]:
        """Ask the node for a random 256-bit digest."""
        return self._call("random", "/")

    def get_fee(self) -> dict[str, Any]:
        """Current transaction cost as reported by the node."""
        return self._call("fee", "/")

    def verify_transaction(self, tx_hash: str) -> dict[str, Any]:
        """Look up a transaction on the node by hash."""
        return self._call("tx", "/", {"transaction": tx_hash})

    # ----- accounts (data API) ---------------------------------------------

    def get_accounts(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/accounts", params)

    def get_account(self, address: str | None = None) -> AccountObject:
        """Fetch the creation record of an account.

        Raises:
            MalformedResponse: If the response lacks ``account_data`` or the
                record is missing required fields.
        """
        response = self._call("GET", self._account_path("/accounts/%s", address))
        return parse_record(AccountObject, self._field(response, "account_data"))

    def get_account_balances(self, address: str | None = None, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", self._account_path("/accounts/%s/balances", address), params)

    def get_account_payments(self, address: str | None = None, params: Params | None = None) -> list[PaymentObject]:
        """Fetch payments sent or received by an account, most recent last."""
        response = self._call("GET", self._account_path("/accounts/%s/payments", address), params)
        payments = self._field(response, "payments")
        if not isinstance(payments, list):
            raise MalformedResponse("'payments' is not a list", response)
        return [parse_record(PaymentObject, p) for p in payments]

    def get_account_orders(self, address: str | None = None, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", self._account_path("/accounts/%s/orders", address), params)

    def get_account_transaction_history(
        self, address: str | None = None, params: Params | None = None
    ) -> list[TransactionObject]:
        response = self._call("GET", self._account_path("/accounts/%s/transactions", address), params)
        transactions = self._field(response, "transactions")
        if not isinstance(transactions, list):
            raise MalformedResponse("'transactions' is not a list", response)
        return [parse_record(TransactionObject, t) for t in transactions]

    def get_transaction_by_account_and_sequence(
        self, sequence: int, address: str | None = None, params: Params | None = None
    ) -> dict[str, Any]:
        path = "%s/%d" % (self._account_path("/accounts/%s/transactions", address), sequence)
        return self._call("GET", path, params)

    def get_account_transaction_stats(self, address: str | None = None, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", self._account_path("/accounts/%s/stats/transactions", address), params)

    def get_account_value_stats(self, address: str | None = None, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", self._account_path("/accounts/%s/stats/value", address), params)

    def get_exchange_rates(
        self,
        params: Params | None = None,
        counter: str = "XRP",
        currency: str = "USD",
        address: str | None = None,
    ) -> dict[str, Any]:
        """Exchange rate of ``currency`` issued by *address* against *counter*."""
        path = "/exchange_rates/%s+%s/%s" % (currency, address or self._address, counter)
        return self._call("GET", path, params)

    # ----- transactions (data API) -----------------------------------------

    def get_transaction(self, tx_hash: str, params: Params | None = None) -> TransactionObject | list[Any]:
        """Fetch a transaction by hash.

        Returns the raw ``transactions`` list instead when the server
        reports more than one match.
        """
        response = self._call("GET", f"/transactions/{tx_hash}", params)
        count = response.get("count") if isinstance(response, dict) else None
        if isinstance(count, int) and not isinstance(count, bool) and count > 1:
            return self._field(response, "transactions")
        return parse_record(TransactionObject, self._field(response, "transaction"))

    def get_transactions(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/transactions", params)

    # ----- network, gateways, stats (data API) -----------------------------

    def get_stats(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/stats", params)

    def get_rippled_versions(self) -> Decoded:
        return self._call("GET", "/network/rippled_versions", allow_sequence=True)

    def get_gateways(self) -> Decoded:
        return self._call("GET", "/gateways", allow_sequence=True)

    def get_gateway(self, gateway: str) -> dict[str, Any]:
        return self._call("GET", f"/gateways/{gateway}")

    # ----- health (data API) -----------------------------------------------

    def get_health_check(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/health/api", params)

    def get_health_importer(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/health/importer", params)

    def get_health_nodes_etl(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/health/nodes_etl", params)

    def get_health_validations_etl(self, params: Params | None = None) -> dict[str, Any]:
        return self._call("GET", "/health/validations_etl", params)

    # ----- transaction pipeline --------------------------------------------

    def build_transaction(self, configure: TransactionConfigurator) -> TransactionPipeline:
        """Sign a new transaction from this client's account.

        See :meth:`TransactionPipeline.build_transaction`. Returns the
        pipeline so ``.submit()`` can be chained.
        """
        return self._pipeline.build_transaction(configure)

    def submit(self) -> dict[str, Any]:
        """Submit the transaction signed by the last :meth:`build_transaction`."""
        return self._pipeline.submit()

    def send_and_submit_for_server(self, options: Mapping[str, Any]) -> Decoded:
        """Delegate signing and submission to the configured ``wss_node`` server."""
        return self._pipeline.send_and_submit_for_server(options)
