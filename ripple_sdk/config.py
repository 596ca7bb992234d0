"""Endpoint configuration for the Ripple SDK."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATA_API_URL = "https://data.ripple.com/v2"
RPC_URL = "https://s1.ripple.com:51234"
TESTNET_RPC_URL = "https://s.altnet.rippletest.net:51234"


class NodeEndpoints(BaseModel):
    """Base URLs and HTTP settings used by :class:`~ripple_sdk.transport.RippleTransport`.

    Example::

        endpoints = NodeEndpoints(wss_node="https://relay.example.com")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    data_api_url: Annotated[str, Field(min_length=1)] = DATA_API_URL
    rpc_url: Annotated[str, Field(min_length=1)] = RPC_URL
    wss_node: str | None = None
    timeout: Annotated[float, Field(gt=0)] = 15.0

    @field_validator("data_api_url", "rpc_url", "wss_node")
    @classmethod
    def _strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.rstrip("/")
        if not v:
            raise ValueError("endpoint URL must not be empty")
        return v

    @classmethod
    def testnet(cls, **overrides: Any) -> "NodeEndpoints":
        """Endpoints pointing at the public test network."""
        overrides.setdefault("rpc_url", TESTNET_RPC_URL)
        return cls(**overrides)

    @classmethod
    def coerce(cls, nodes: "NodeEndpoints | Mapping[str, Any] | None") -> "NodeEndpoints":
        """Accept an existing instance, a plain mapping, or ``None`` for defaults."""
        if nodes is None:
            return cls()
        if isinstance(nodes, cls):
            return nodes
        return cls.model_validate(dict(nodes))
