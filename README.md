# bybitconnect

A small client for the Bybit V5 API: signed and public REST calls over
HTTP, plus WebSocket streams for public market data and private account
channels.

## Installation

```
pip install bybitconnect
```

For running the test suite:

```
pip install "bybitconnect[test]"
pytest
```

## REST calls

Create a `BybitHttpClient`, wrap it in a service together with the request
parameters, and call the endpoint you need. Every endpoint returns a
`ServerResponse` (`ret_code`, `ret_msg`, `result`, `ret_ext_info`, `time`)
decoded from the server's JSON reply.

```python
from bybitconnect.client import BybitHttpClient, pretty_print
from bybitconnect.constants import TESTNET
from bybitconnect.service import new_uta_service

client = BybitHttpClient(api_key="placeholder", api_secret="secret", base_url=TESTNET)

service = new_uta_service(client, {"category": "linear", "symbol": "BTCUSDT"})
response = service.get_market_tickers()
print(pretty_print(response))
```

`new_uta_service` builds a request for a unified trading account and
`new_classical_service` one for a classic account. Both return a
`BybitClientRequest`, which carries every endpoint group. The account kind
matters for `get_transaction_log`, which uses
`/v5/account/transaction-log` for unified accounts and
`/v5/account/contract-transaction-log` for classic ones.

The endpoint groups are also available on their own classes, each built
as `Class(client, params, is_uta)`:

* `bybitconnect.market.MarketEndpoints` — `get_server_time`,
  `get_market_kline`, `get_mark_price_kline`, `get_index_price_kline`,
  `get_premium_index_price_kline`, `get_instrument_info`,
  `get_order_book_info`, `get_market_tickers`, `get_funding_rate_history`,
  `get_public_recent_trades`, `get_open_interests`,
  `get_history_volatility`, `get_market_insurance`,
  `get_market_risk_limits`, `get_delivery_price`, `get_long_short_ratio`.
  These are sent unsigned. The index and premium-index kline calls request
  the same `/v5/market/mark-price-kline` path as the mark-price call.
* `bybitconnect.account.AccountEndpoints` — wallet balance, fee rates,
  borrow history, collateral, margin mode, market maker protection and
  more.
* `bybitconnect.asset.AssetEndpoints` — balances, internal and universal
  transfers, deposits, withdrawals and coin conversion.
* `bybitconnect.lending.LendingEndpoints` — institutional loans and the
  C2C lending calls; the C2C calls emit a `DeprecationWarning`.
* `bybitconnect.broker.BrokerEndpoints` — earnings, account info and
  sub-member deposit records.

### Signing and transport

All endpoints outside the market group are signed: they carry the
`X-BAPI-*` headers with a hex HMAC-SHA256 signature (see
`bybitconnect.client.sign`). The receive window defaults to 5000 ms. GET
parameters go into the query string in key order; POST parameters are
sent as a JSON body.

`BybitHttpClient` also takes `debug` (log URLs, bodies and status codes),
`proxy_url`, `logger`, and `transport`: any callable that takes a
`PreparedRequest` and returns `(status_code, body_bytes)`. Without one,
requests go through a `requests` session. `prepare_request` builds the
signed request without sending it; `call_api` sends it and returns the
raw body.

Other helpers in `bybitconnect.client`: `parse_server_response`,
`pretty_print` (indented JSON), `format_timestamp` (milliseconds since the
epoch for a `datetime`) and `current_time_ms`.

### Parsing kline data

The kline helpers in `bybitconnect.market` turn a raw JSON reply into
typed candles:

```python
from bybitconnect.market import parse_market_kline

kline = parse_market_kline(raw_bytes)
for candle in kline.candles:
    print(candle.start_time, candle.close_price)
```

`parse_market_kline` returns a `KlineResponse` of `KlineCandle`s (seven
fields each); `parse_mark_price_kline`, `parse_index_price_kline` and
`parse_premium_index_kline` return a `PriceKlineResponse` of
`PriceKlineCandle`s (five fields each). A row shorter than that raises
`ValueError`.

### Errors

Many signed endpoints check their parameters first with
`bybitconnect.errors.validate_params`, which raises `ValueError` for an
empty key or a `None` value. An HTTP status of 400 or above raises
`bybitconnect.errors.APIError`, carrying the `retCode` and `retMsg` the
server returned as `code` and `message`. `is_api_error` tells such an
error apart from other failures.

## WebSocket streams

```python
from bybitconnect.constants import SPOT_MAINNET
from bybitconnect.websocket import BybitWebSocket

def on_message(message):
    print("Received:", message)

ws = BybitWebSocket(SPOT_MAINNET, on_message)
ws.connect()
ws.send_subscription(["orderbook.1.BTCUSDT", "orderbook.1.ETHUSDT"])
```

For the private and trade streams (`WEBSOCKET_PRIVATE_*`,
`WEBSOCKET_TRADE_*` in `bybitconnect.constants`) pass `api_key` and
`api_secret`; the connection sends a signed authentication request right
after opening, and `connect()` returns `None` if that cannot be sent.

Once connected, messages are read on a background thread, a ping is sent
every `ping_interval` seconds (20 by default), and a dropped connection is
reopened, checked every five seconds. `max_alive_time` is added to the URL
when set. `send_request(op, args, headers)` sends a custom operation, and
`disconnect()` stops the background work and closes the connection. A
`connector` callable can replace the default `websocket-client`
connection.

The message builders `build_subscription_message`, `build_auth_message`,
`build_ping_message` and `auth_signature` are available on their own.

## What this package does not do

It has no order placement, batch orders or position endpoints, and no
typed models for replies other than klines. It is a library only and
installs no command-line tool.