"""Asset endpoints: balances, transfers, deposits, withdrawals and conversion."""

from __future__ import annotations

from .client import ClientRequest, ServerResponse


class AssetEndpoints(ClientRequest):
    """Asset records, transfers, deposits, withdrawals and coin conversion."""

    def get_asset_order_record(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/exchange/order-record")

    def get_asset_info(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/transfer/query-asset-info")

    def get_delivery_record(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/delivery-record")

    def get_usdc_settlement(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/settlement-record")

    def get_all_coins_balance(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/transfer/query-account-coins-balance")

    def get_single_coin_balance(self) -> ServerResponse:
        return self._send(
            "GET", "/v5/asset/transfer/query-account-coin-balance", validate=True
        )

    def get_transferable_coin(self) -> ServerResponse:
        return self._send(
            "GET", "/v5/asset/transfer/query-transfer-coin-list", validate=True
        )

    def create_internal_transfer(self) -> ServerResponse:
        return self._send("POST", "/v5/asset/transfer/inter-transfer", validate=True)

    def create_universal_transfer(self) -> ServerResponse:
        return self._send(
            "POST", "/v5/asset/transfer/universal-transfer", validate=True
        )

    def set_deposit_account(self) -> ServerResponse:
        return self._send(
            "POST", "/v5/asset/deposit/deposit-to-account", validate=True
        )

    def create_withdraw(self) -> ServerResponse:
        return self._send("POST", "/v5/asset/withdraw/create", validate=True)

    def cancel_withdraw(self) -> ServerResponse:
        return self._send("POST", "/v5/asset/withdraw/cancel", validate=True)

    def get_internal_transfer_records(self) -> ServerResponse:
        return self._send(
            "GET", "/v5/asset/transfer/query-inter-transfer-list", validate=True
        )

    def get_universal_transfer_records(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/transfer/query-universal-transfer-list")

    def get_sub_account_uids(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/transfer/query-sub-member-list")

    def get_allowed_deposit_coin(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/deposit/query-allowed-list")

    def get_deposit_records(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/deposit/query-record")

    def get_sub_member_deposit_records(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/deposit/query-sub-member-record")

    def get_internal_deposit_records(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/deposit/query-internal-record")

    def get_master_deposit_address(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/deposit/query-address")

    def get_sub_deposit_address(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/deposit/query-sub-member-address")

    def get_coin_info(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/coin/query-info")

    def get_withdrawal_amount(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/withdraw/withdrawable-amount")

    def get_withdrawal_records(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/withdraw/query-record")

    def get_convert_coin_list(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/exchange/query-coin-list")

    def get_convert_status(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/exchange/convert-result-query")

    def get_convert_history(self) -> ServerResponse:
        return self._send("GET", "/v5/asset/exchange/query-convert-history")

    def request_convert_quote(self) -> ServerResponse:
        return self._send("POST", "/v5/asset/exchange/quote-apply")

    def confirm_convert_quote(self) -> ServerResponse:
        return self._send("POST", "/v5/asset/exchange/convert-execute")