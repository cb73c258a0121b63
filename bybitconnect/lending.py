"""Institutional loan and C2C lending endpoints."""

from __future__ import annotations

import warnings

from .client import ClientRequest, ServerResponse


def _warn_deprecated(name: str) -> None:
    warnings.warn(f"{name} is deprecated", DeprecationWarning, stacklevel=3)


class LendingEndpoints(ClientRequest):
    """Institutional loans and the deprecated C2C lending calls."""

    def get_ins_loan_info(self) -> ServerResponse:
        return self._send("GET", "/v5/ins-loan/product-infos", validate=True)

    def get_ins_margin_coin_info(self) -> ServerResponse:
        return self._send("GET", "/v5/ins-loan/ensure-tokens-convert", validate=True)

    def get_ins_loan_orders(self) -> ServerResponse:
        return self._send("GET", "/v5/ins-loan/loan-order", validate=True)

    def get_ins_repay_orders(self) -> ServerResponse:
        return self._send("GET", "/v5/ins-loan/repaid-history", validate=True)

    def get_ins_loan_to_value(self) -> ServerResponse:
        return self._send("GET", "/v5/ins-loan/ltv-convert")

    def associate_ins_loan(self) -> ServerResponse:
        return self._send("POST", "/v5/ins-loan/association-uid")

    def get_c2c_lending_coin_info(self) -> ServerResponse:
        """Deprecated."""
        _warn_deprecated("get_c2c_lending_coin_info")
        return self._send("GET", "/v5/lending/info", validate=True)

    def get_c2c_lending_orders(self) -> ServerResponse:
        """Deprecated."""
        _warn_deprecated("get_c2c_lending_orders")
        return self._send("GET", "/v5/lending/history-order", validate=True)

    def get_c2c_lending_account_info(self) -> ServerResponse:
        """Deprecated."""
        _warn_deprecated("get_c2c_lending_account_info")
        return self._send("GET", "/v5/lending/account", validate=True)

    def c2c_deposit_funds(self) -> ServerResponse:
        """Deprecated."""
        _warn_deprecated("c2c_deposit_funds")
        return self._send("POST", "/v5/lending/purchase", validate=True)

    def c2c_redeem_funds(self) -> ServerResponse:
        """Deprecated."""
        _warn_deprecated("c2c_redeem_funds")
        return self._send("POST", "/v5/lending/redeem", validate=True)

    def c2c_cancel_redeem_funds(self) -> ServerResponse:
        """Deprecated."""
        _warn_deprecated("c2c_cancel_redeem_funds")
        return self._send("POST", "/v5/lending/redeem-cancel", validate=True)