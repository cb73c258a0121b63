import json
from urllib.parse import parse_qs, urlsplit

import pytest

from bybitconnect.asset import AssetEndpoints
from bybitconnect.client import BybitHttpClient, sign
from bybitconnect.constants import (
    API_REQUEST_KEY,
    RECV_WINDOW_KEY,
    SIGNATURE_KEY,
    TESTNET,
    TIMESTAMP_KEY,
)
from bybitconnect.errors import APIError

OK_BODY = b'{"retCode":0,"retMsg":"OK","result":{"list":[]},"retExtInfo":{},"time":1672025956592}'


class FakeTransport:
    def __init__(self, status=200, body=OK_BODY):
        self.status = status
        self.body = body
        self.requests = []

    def __call__(self, prepared):
        self.requests.append(prepared)
        return self.status, self.body


def make_client(transport):
    return BybitHttpClient(
        "placeholder", "secret", base_url=TESTNET, transport=transport
    )


ENDPOINTS = [
    ("get_asset_order_record", "GET", "/v5/asset/exchange/order-record", False),
    ("get_asset_info", "GET", "/v5/asset/transfer/query-asset-info", False),
    ("get_delivery_record", "GET", "/v5/asset/delivery-record", False),
    ("get_usdc_settlement", "GET", "/v5/asset/settlement-record", False),
    ("get_all_coins_balance", "GET", "/v5/asset/transfer/query-account-coins-balance", False),
    ("get_single_coin_balance", "GET", "/v5/asset/transfer/query-account-coin-balance", True),
    ("get_transferable_coin", "GET", "/v5/asset/transfer/query-transfer-coin-list", True),
    ("create_internal_transfer", "POST", "/v5/asset/transfer/inter-transfer", True),
    ("create_universal_transfer", "POST", "/v5/asset/transfer/universal-transfer", True),
    ("set_deposit_account", "POST", "/v5/asset/deposit/deposit-to-account", True),
    ("create_withdraw", "POST", "/v5/asset/withdraw/create", True),
    ("cancel_withdraw", "POST", "/v5/asset/withdraw/cancel", True),
    ("get_internal_transfer_records", "GET", "/v5/asset/transfer/query-inter-transfer-list", True),
    ("get_universal_transfer_records", "GET", "/v5/asset/transfer/query-universal-transfer-list", False),
    ("get_sub_account_uids", "GET", "/v5/asset/transfer/query-sub-member-list", False),
    ("get_allowed_deposit_coin", "GET", "/v5/asset/deposit/query-allowed-list", False),
    ("get_deposit_records", "GET", "/v5/asset/deposit/query-record", False),
    ("get_sub_member_deposit_records", "GET", "/v5/asset/deposit/query-sub-member-record", False),
    ("get_internal_deposit_records", "GET", "/v5/asset/deposit/query-internal-record", False),
    ("get_master_deposit_address", "GET", "/v5/asset/deposit/query-address", False),
    ("get_sub_deposit_address", "GET", "/v5/asset/deposit/query-sub-member-address", False),
    ("get_coin_info", "GET", "/v5/asset/coin/query-info", False),
    ("get_withdrawal_amount", "GET", "/v5/asset/withdraw/withdrawable-amount", False),
    ("get_withdrawal_records", "GET", "/v5/asset/withdraw/query-record", False),
    ("get_convert_coin_list", "GET", "/v5/asset/exchange/query-coin-list", False),
    ("get_convert_status", "GET", "/v5/asset/exchange/convert-result-query", False),
    ("get_convert_history", "GET", "/v5/asset/exchange/query-convert-history", False),
    ("request_convert_quote", "POST", "/v5/asset/exchange/quote-apply", False),
    ("confirm_convert_quote", "POST", "/v5/asset/exchange/convert-execute", False),
]


@pytest.mark.parametrize("name, method, endpoint, validates", ENDPOINTS)
def test_endpoint_method_and_path(name, method, endpoint, validates):
    transport = FakeTransport()
    service = AssetEndpoints(make_client(transport), {"coin": "USDT"})
    response = getattr(service, name)()
    assert len(transport.requests) == 1
    sent = transport.requests[0]
    assert sent.method == method
    assert urlsplit(sent.url).path == endpoint
    assert sent.url.startswith(TESTNET + endpoint)
    assert response.ret_code == 0
    assert response.ret_msg == "OK"
    assert response.result == {"list": []}


@pytest.mark.parametrize("name, method, endpoint, validates", ENDPOINTS)
def test_none_parameter_validation(name, method, endpoint, validates):
    transport = FakeTransport()
    service = AssetEndpoints(make_client(transport), {"coin": None})
    if validates:
        with pytest.raises(ValueError, match="coin"):
            getattr(service, name)()
        assert transport.requests == []
    else:
        response = getattr(service, name)()
        assert len(transport.requests) == 1
        assert response.ret_msg == "OK"


def test_get_request_carries_params_in_query_and_signature():
    transport = FakeTransport()
    params = {"fromAccountType": "UNIFIED", "toAccountType": "CONTRACT"}
    AssetEndpoints(make_client(transport), params).get_transferable_coin()
    sent = transport.requests[0]
    query = urlsplit(sent.url).query
    assert parse_qs(query) == {"fromAccountType": ["UNIFIED"], "toAccountType": ["CONTRACT"]}
    assert sent.body == ""
    assert sent.headers[API_REQUEST_KEY] == "placeholder"
    assert sent.headers[RECV_WINDOW_KEY] == "5000"
    expected = sign(
        "secret",
        sent.headers[TIMESTAMP_KEY] + "placeholder" + "5000" + query,
    )
    assert sent.headers[SIGNATURE_KEY] == expected


def test_post_request_carries_params_in_json_body():
    transport = FakeTransport()
    params = {"coin": "USDT", "amount": "109"}
    AssetEndpoints(make_client(transport), params).create_withdraw()
    sent = transport.requests[0]
    assert json.loads(sent.body) == params
    assert urlsplit(sent.url).query == ""
    assert sent.headers["Content-Type"] == "application/json"
    expected = sign(
        "secret",
        sent.headers[TIMESTAMP_KEY] + "placeholder" + "5000" + sent.body,
    )
    assert sent.headers[SIGNATURE_KEY] == expected


def test_no_params_sends_bare_url():
    transport = FakeTransport()
    AssetEndpoints(make_client(transport)).get_coin_info()
    sent = transport.requests[0]
    assert sent.url == TESTNET + "/v5/asset/coin/query-info"


def test_empty_key_rejected():
    transport = FakeTransport()
    service = AssetEndpoints(make_client(transport), {"": "USDT"})
    with pytest.raises(ValueError, match="empty key"):
        service.cancel_withdraw()
    assert transport.requests == []


def test_error_status_raises_api_error():
    transport = FakeTransport(status=403, body=b'{"retCode":10003,"retMsg":"invalid api key"}')
    service = AssetEndpoints(make_client(transport), {"coin": "USDT"})
    with pytest.raises(APIError) as info:
        service.get_coin_info()
    assert info.value.code == 10003
    assert info.value.message == "invalid api key"


def test_params_are_copied():
    transport = FakeTransport()
    params = {"coin": "USDT"}
    service = AssetEndpoints(make_client(transport), params)
    params["coin"] = "BTC"
    service.get_coin_info()
    assert parse_qs(urlsplit(transport.requests[0].url).query) == {"coin": ["USDT"]}