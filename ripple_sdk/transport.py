"""HTTP transport for the Ripple data API, JSON-RPC node and delegated-send server.

:class:`RippleTransport` is the only place the SDK touches the network.
Everything above it depends on the :class:`Transport` protocol, so tests
can swap in an :class:`httpx.MockTransport` or a hand-written fake.

Response decoding follows one rule set for every endpoint:

* an empty or non-JSON body (or JSON ``null``) becomes ``{}``
* a JSON boolean becomes ``{"success": <bool>}``
* any other non-object value becomes ``{}``, except that list endpoints
  may ask for arrays to be passed through with ``allow_sequence=True``
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ripple_sdk.config import NodeEndpoints
from ripple_sdk.errors import ConfigurationError, TransportFailure

logger = logging.getLogger(__name__)

Params = Mapping[str, Any]
Decoded = dict[str, Any] | list[Any]


@runtime_checkable
class Transport(Protocol):
    """What the client and the transaction pipeline need from the network."""

    def send(
        self,
        method: str,
        path: str,
        params: Params | None = None,
        *,
        use_data_api: bool = True,
        allow_sequence: bool = False,
    ) -> Decoded:
        ...

    def send_wss(self, method: str, path: str, params: Params | None = None) -> Decoded:
        ...


class RpcEnvelope(BaseModel):
    """JSON-RPC request framing used by the node API."""

    model_config = ConfigDict(frozen=True)

    id: Annotated[int, Field(ge=1)]
    method: Annotated[str, Field(min_length=1)]
    json_rpc: Literal["2.0"] = "2.0"
    params: Annotated[list[dict[str, Any]], Field(max_length=1)] | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def decode_body(content: bytes | str, *, allow_sequence: bool = False) -> Decoded:
    """Decode a response body into a mapping (or a list when allowed)."""
    decoded: Any = None
    if content:
        try:
            decoded = json.loads(content)
        except ValueError:
            logger.warning("response body is not valid JSON; treating it as empty")

    if decoded is None:
        return {}
    if isinstance(decoded, bool):
        return {"success": decoded}
    if isinstance(decoded, list) and allow_sequence:
        return decoded
    if not isinstance(decoded, dict):
        return {}
    return decoded


def _masked(params: Params | None) -> dict[str, Any]:
    if not params:
        return {}
    return {k: ("***" if k == "secret" else v) for k, v in params.items()}


class RippleTransport:
    """Blocking HTTP transport built on :class:`httpx.Client`.

    Args:
        endpoints: Base URLs and timeout. Defaults to the public mainnet
            endpoints.
        http_client: Optional pre-built :class:`httpx.Client`, mainly for
            injecting an :class:`httpx.MockTransport` in tests.

    JSON-RPC ids start at 1 and increase by one per RPC call for the
    lifetime of the instance. The transport is not thread-safe.
    """

    def __init__(
        self,
        endpoints: NodeEndpoints | Mapping[str, Any] | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._endpoints = NodeEndpoints.coerce(endpoints)
        self._client = http_client
        self._request_id = 0

    @property
    def endpoints(self) -> NodeEndpoints:
        return self._endpoints

    # ----- lifecycle -------------------------------------------------------

    def _ensure_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self._endpoints.timeout)
        return self._client

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "RippleTransport":
        self._ensure_client()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ----- internal helpers ------------------------------------------------

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    def _request(self, method: str, url: str, *, allow_sequence: bool, **kwargs: Any) -> Decoded:
        client = self._ensure_client()
        try:
            resp = client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportFailure(
                f"{method} {url} returned HTTP {status}", url=url, status_code=status
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportFailure(f"{method} {url} failed: {exc}", url=url) from exc

        decoded = decode_body(resp.content, allow_sequence=allow_sequence)
        logger.debug("%s %s -> %d top-level entries", method, url, len(decoded))
        return decoded

    # ----- public API ------------------------------------------------------

    def send(
        self,
        method: str,
        path: str,
        params: Params | None = None,
        *,
        use_data_api: bool = True,
        allow_sequence: bool = False,
    ) -> Decoded:
        """Send one request and return the decoded body.

        With ``use_data_api`` the call is an HTTP request of verb *method*
        against the data API, with *params* as the query string. Otherwise
        *method* is a JSON-RPC method name posted to the node API.

        Raises:
            TransportFailure: On connection errors, timeouts and non-2xx
                responses. Nothing is retried.
        """
        path = path.strip()
        if use_data_api:
            url = f"{self._endpoints.data_api_url}{path}"
            logger.debug("data API %s %s params=%s", method, url, _masked(params))
            return self._request(
                method, url, allow_sequence=allow_sequence, params=dict(params) if params else None
            )

        envelope = RpcEnvelope(
            id=self._next_id(),
            method=method,
            params=[dict(params)] if params else None,
        )
        url = f"{self._endpoints.rpc_url}{path}"
        logger.debug("rpc %s id=%d params=%s", method, envelope.id, _masked(params))
        return self._request("POST", url, allow_sequence=allow_sequence, json=envelope.to_body())

    def send_wss(self, method: str, path: str, params: Params | None = None) -> Decoded:
        """Send a request to the delegated-send server configured as ``wss_node``.

        Raises:
            ConfigurationError: If no ``wss_node`` is configured. No request
                is made in that case.
            TransportFailure: On any HTTP-level failure.
        """
        if self._endpoints.wss_node is None:
            raise ConfigurationError("wss_node is not configured")
        url = f"{self._endpoints.wss_node}{path.strip()}"
        logger.debug("wss %s %s params=%s", method, url, _masked(params))
        return self._request(method, url, allow_sequence=False, params=dict(params) if params else None)
