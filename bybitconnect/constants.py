"""Endpoints, identification and header names used by the client."""

NAME = "bybitconnect"
VERSION = "1.0.5"

# REST base URLs
MAINNET = "https://api.bybit.com"
MAINNET_BACKT = "https://api.bytick.com"
TESTNET = "https://api-testnet.bybit.com"
DEMO_ENV = "https://api-demo.bybit.com"

_STREAM_MAIN = "wss://stream.bybit.com"
_STREAM_TEST = "wss://stream-testnet.bybit.com"
_STREAM_DEMO = "wss://stream-demo.bybit.com"


def _public(host: str, market: str) -> str:
    return f"{host}/v5/public/{market}"


# Public WebSocket streams
SPOT_MAINNET = _public(_STREAM_MAIN, "spot")
LINEAR_MAINNET = _public(_STREAM_MAIN, "linear")
INVERSE_MAINNET = _public(_STREAM_MAIN, "inverse")
OPTION_MAINNET = _public(_STREAM_MAIN, "option")

SPOT_TESTNET = _public(_STREAM_TEST, "spot")
LINEAR_TESTNET = _public(_STREAM_TEST, "linear")
INVERSE_TESTNET = _public(_STREAM_TEST, "inverse")
OPTION_TESTNET = _public(_STREAM_TEST, "option")

# Private and trade WebSocket streams
WEBSOCKET_PRIVATE_MAINNET = f"{_STREAM_MAIN}/v5/private"
WEBSOCKET_TRADE_MAINNET = f"{_STREAM_MAIN}/v5/trade"
WEBSOCKET_PRIVATE_TESTNET = f"{_STREAM_TEST}/v5/private"
WEBSOCKET_TRADE_TESTNET = f"{_STREAM_TEST}/v5/trade"
WEBSOCKET_PRIVATE_DEMO = f"{_STREAM_DEMO}/v5/private"
WEBSOCKET_TRADE_DEMO = f"{_STREAM_DEMO}/v5/trade"

# Deprecated v3 private streams, superseded by v5.
V3_CONTRACT_PRIVATE = f"{_STREAM_MAIN}/contract/private/v3"
V3_UNIFIED_PRIVATE = f"{_STREAM_MAIN}/unified/private/v3"
V3_SPOT_PRIVATE = f"{_STREAM_MAIN}/spot/private/v3"

# Request signing headers
_HEADER_PREFIX = "X-BAPI-"
TIMESTAMP_KEY = _HEADER_PREFIX + "TIMESTAMP"
SIGNATURE_KEY = _HEADER_PREFIX + "SIGN"
API_REQUEST_KEY = _HEADER_PREFIX + "API-KEY"
RECV_WINDOW_KEY = _HEADER_PREFIX + "RECV-WINDOW"
SIGN_TYPE_KEY = _HEADER_PREFIX + "SIGN-TYPE"

DEFAULT_RECV_WINDOW = "5000"