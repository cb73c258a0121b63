"""One request object that reaches every REST endpoint group."""

from __future__ import annotations

from typing import Any, Mapping

from .account import AccountEndpoints
from .asset import AssetEndpoints
from .broker import BrokerEndpoints
from .client import BybitHttpClient
from .lending import LendingEndpoints
from .market import MarketEndpoints


class BybitClientRequest(
    AccountEndpoints,
    AssetEndpoints,
    BrokerEndpoints,
    LendingEndpoints,
    MarketEndpoints,
):
    """A parameter set bound to a client, with account, asset, broker,
    lending and market calls available on it."""


def new_uta_service(
    client: BybitHttpClient, params: Mapping[str, Any] | None = None
) -> BybitClientRequest:
    """A request for a unified trading account, optionally with parameters."""
    return BybitClientRequest(client, params, is_uta=True)


def new_classical_service(
    client: BybitHttpClient, params: Mapping[str, Any] | None = None
) -> BybitClientRequest:
    """A request for a classic account, optionally with parameters."""
    return BybitClientRequest(client, params, is_uta=False)