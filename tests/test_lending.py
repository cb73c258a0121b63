import json
from urllib.parse import urlsplit

import pytest

from bybitconnect.client import BybitHttpClient
from bybitconnect.constants import TESTNET
from bybitconnect.errors import APIError
from bybitconnect.lending import LendingEndpoints

OK_BODY = b'{"retCode":0,"retMsg":"OK","result":{"list":[]},"retExtInfo":{},"time":1672053548579}'


class Recorder:
    def __init__(self, status=200, body=OK_BODY):
        self.status = status
        self.body = body
        self.requests = []

    def __call__(self, prepared):
        self.requests.append(prepared)
        return self.status, self.body


def make(params=None, status=200, body=OK_BODY):
    transport = Recorder(status, body)
    client = BybitHttpClient(
        api_key="placeholder", api_secret="secret", base_url=TESTNET, transport=transport
    )
    return LendingEndpoints(client, params), transport


CURRENT = [
    ("get_ins_loan_info", "GET", "/v5/ins-loan/product-infos"),
    ("get_ins_margin_coin_info", "GET", "/v5/ins-loan/ensure-tokens-convert"),
    ("get_ins_loan_orders", "GET", "/v5/ins-loan/loan-order"),
    ("get_ins_repay_orders", "GET", "/v5/ins-loan/repaid-history"),
    ("get_ins_loan_to_value", "GET", "/v5/ins-loan/ltv-convert"),
    ("associate_ins_loan", "POST", "/v5/ins-loan/association-uid"),
]

DEPRECATED = [
    ("get_c2c_lending_coin_info", "GET", "/v5/lending/info"),
    ("get_c2c_lending_orders", "GET", "/v5/lending/history-order"),
    ("get_c2c_lending_account_info", "GET", "/v5/lending/account"),
    ("c2c_deposit_funds", "POST", "/v5/lending/purchase"),
    ("c2c_redeem_funds", "POST", "/v5/lending/redeem"),
    ("c2c_cancel_redeem_funds", "POST", "/v5/lending/redeem-cancel"),
]

VALIDATED = [
    "get_ins_loan_info",
    "get_ins_margin_coin_info",
    "get_ins_loan_orders",
    "get_ins_repay_orders",
]


@pytest.mark.parametrize("name, method, path", CURRENT)
def test_current_endpoints(name, method, path):
    endpoints, transport = make({"productId": "91"})
    response = getattr(endpoints, name)()
    assert response.ret_msg == "OK"
    sent = transport.requests[0]
    assert sent.method == method
    assert urlsplit(sent.url).path == path


@pytest.mark.parametrize("name, method, path", DEPRECATED)
def test_deprecated_endpoints_warn_and_send(name, method, path):
    endpoints, transport = make({"coin": "USDT"})
    with pytest.warns(DeprecationWarning, match=name):
        response = getattr(endpoints, name)()
    assert response.ret_code == 0
    sent = transport.requests[0]
    assert sent.method == method
    assert urlsplit(sent.url).path == path


@pytest.mark.parametrize("name", VALIDATED)
def test_validated_reject_none(name):
    endpoints, transport = make({"productId": None})
    with pytest.raises(ValueError, match="productId"):
        getattr(endpoints, name)()
    assert transport.requests == []


@pytest.mark.parametrize("name", [entry[0] for entry in DEPRECATED])
def test_deprecated_validate_params(name):
    endpoints, transport = make({"": "USDT"})
    with pytest.warns(DeprecationWarning):
        with pytest.raises(ValueError, match="empty key"):
            getattr(endpoints, name)()
    assert transport.requests == []


def test_unvalidated_loan_to_value_sends_none_value():
    endpoints, transport = make({"orderId": None})
    endpoints.get_ins_loan_to_value()
    assert len(transport.requests) == 1


def test_post_body_holds_params():
    params = {"uid": "592324", "operate": "0"}
    endpoints, transport = make(params)
    endpoints.associate_ins_loan()
    assert json.loads(transport.requests[0].body) == params


def test_get_params_go_into_query():
    endpoints, transport = make({"productId": "91"})
    endpoints.get_ins_loan_info()
    assert urlsplit(transport.requests[0].url).query == "productId=91"


def test_error_status_raises_api_error():
    body = b'{"retCode":10003,"retMsg":"invalid api key"}'
    endpoints, _ = make({"productId": "91"}, status=401, body=body)
    with pytest.raises(APIError) as info:
        endpoints.get_ins_loan_info()
    assert info.value.code == 10003
    assert str(info.value) == "<APIError> code=10003, msg=invalid api key"