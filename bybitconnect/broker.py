"""Broker endpoints."""

from __future__ import annotations

from .client import ClientRequest, ServerResponse


class BrokerEndpoints(ClientRequest):
    """Broker earnings, account and sub-member deposit queries."""

    def get_broker_earning(self) -> ServerResponse:
        return self._send("GET", "/v5/broker/earnings-info", validate=True)

    def get_broker_account_info(self) -> ServerResponse:
        return self._send("GET", "/v5/broker/account-info", validate=True)

    def get_all_sub_members_deposit_records(self) -> ServerResponse:
        return self._send(
            "GET", "/v5/broker/asset/query-sub-member-deposit-record", validate=True
        )