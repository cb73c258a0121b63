"""Account endpoints."""

from __future__ import annotations

from .client import ClientRequest, ServerResponse


class AccountEndpoints(ClientRequest):
    """Wallet, fee, margin and protection settings of an account."""

    def get_transaction_log(self) -> ServerResponse:
        """Transaction log; unified accounts and classic accounts use different paths."""
        if self.is_uta:
            endpoint = "/v5/account/transaction-log"
        else:
            endpoint = "/v5/account/contract-transaction-log"
        return self._send("GET", endpoint, validate=True)

    def get_fee_rates(self) -> ServerResponse:
        return self._send("GET", "/v5/account/fee-rate", validate=True)

    def get_account_wallet(self) -> ServerResponse:
        return self._send("GET", "/v5/account/wallet-balance", validate=True)

    def get_borrow_history(self) -> ServerResponse:
        return self._send("GET", "/v5/account/borrow-history", validate=True)

    def get_coin_greeks(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/coin-greeks", validate=True)

    def get_collateral_info(self) -> ServerResponse:
        return self._send("GET", "/v5/account/collateral-info", validate=True)

    def get_account_info(self) -> ServerResponse:
        return self._send("GET", "/v5/account/info")

    def get_mmp_state(self) -> ServerResponse:
        return self._send("GET", "/v5/account/mmp-state")

    def set_spot_hedge_mode(self) -> ServerResponse:
        return self._send("GET", "/v5/account/set-hedging-mode")

    def upgrade_to_uta(self) -> ServerResponse:
        return self._send("POST", "/v5/account/upgrade-to-uta")

    def set_collateral_coin(self) -> ServerResponse:
        return self._send("POST", "/v5/account/set-collateral-switch")

    def set_margin_mode(self) -> ServerResponse:
        return self._send("POST", "/v5/account/set-margin-mode")

    def set_market_maker_protection(self) -> ServerResponse:
        return self._send("POST", "/v5/account/mmp-modify")

    def reset_market_maker_protection(self) -> ServerResponse:
        return self._send("POST", "/v5/account/mmp-reset")

    def get_disconnect_protection_info(self) -> ServerResponse:
        return self._send("GET", "/v5/account/query-dcp-info")

    def get_self_market_protection_group(self) -> ServerResponse:
        return self._send("GET", "/v5/account/smp-group")