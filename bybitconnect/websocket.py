"""Streaming client with authentication, keep-alive pings and reconnection."""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from typing import Any, Callable, Protocol

from .client import current_time_ms, sign
from .constants import (
    WEBSOCKET_PRIVATE_DEMO,
    WEBSOCKET_PRIVATE_MAINNET,
    WEBSOCKET_PRIVATE_TESTNET,
    WEBSOCKET_TRADE_DEMO,
    WEBSOCKET_TRADE_MAINNET,
    WEBSOCKET_TRADE_TESTNET,
)

logger = logging.getLogger(__name__)

MONITOR_INTERVAL = 5.0
AUTH_EXPIRY_MS = 10_000

_AUTHENTICATED_URLS = frozenset(
    {
        WEBSOCKET_PRIVATE_MAINNET,
        WEBSOCKET_PRIVATE_TESTNET,
        WEBSOCKET_TRADE_MAINNET,
        WEBSOCKET_TRADE_TESTNET,
        WEBSOCKET_TRADE_DEMO,
        WEBSOCKET_PRIVATE_DEMO,
    }
)


class Connection(Protocol):
    def send(self, data: str) -> Any: ...

    def recv(self) -> str | bytes: ...

    def close(self) -> Any: ...


MessageHandler = Callable[[str], None]
Connector = Callable[[str], Connection]


def _default_connector(url: str) -> Connection:
    from websocket import create_connection

    return create_connection(url)


def _dumps(message: Any) -> str:
    return json.dumps(message, separators=(",", ":"), sort_keys=True)


def auth_signature(api_secret: str, expires: int) -> str:
    """Hex signature of the stream authentication request."""
    return sign(api_secret, f"GET/realtime{expires}")


def build_auth_message(
    api_key: str, api_secret: str, expires: int, req_id: str | None = None
) -> dict[str, Any]:
    """The authentication request sent right after connecting to a private stream."""
    return {
        "req_id": req_id or str(uuid.uuid4()),
        "op": "auth",
        "args": [api_key, expires, auth_signature(api_secret, expires)],
    }


def build_subscription_message(
    args: list[str], req_id: str | None = None
) -> dict[str, Any]:
    """A request subscribing to the given topics."""
    return {"req_id": req_id or str(uuid.uuid4()), "op": "subscribe", "args": list(args)}


def build_ping_message(now: float | None = None) -> dict[str, str]:
    """A keep-alive ping tagged with the current Unix time in whole seconds."""
    if now is None:
        now = time.time()
    return {"op": "ping", "req_id": str(int(now))}


class BybitWebSocket:
    """A stream connection; messages are passed to ``on_message`` as text."""

    def __init__(
        self,
        url: str,
        on_message: MessageHandler | None = None,
        api_key: str = "",
        api_secret: str = "",
        max_alive_time: str = "",
        ping_interval: float = 20,
        connector: Connector | None = None,
    ) -> None:
        self.url = url
        self.on_message = on_message
        self.api_key = api_key
        self.api_secret = api_secret
        self.max_alive_time = max_alive_time
        self.ping_interval = ping_interval
        self.is_connected = False
        self._connector = connector or _default_connector
        self._conn: Connection | None = None
        self._stop = threading.Event()
        self._send_lock = threading.Lock()

    @property
    def connection_url(self) -> str:
        if self.max_alive_time:
            return f"{self.url}?max_alive_time={self.max_alive_time}"
        return self.url

    def requires_authentication(self) -> bool:
        """Whether the stream is private or a trade stream and needs signing in."""
        return self.url in _AUTHENTICATED_URLS

    def _open(self) -> bool:
        self._conn = self._connector(self.connection_url)
        if self.requires_authentication():
            try:
                self.send_auth()
            except Exception as exc:
                logger.error("failed connection: %s", exc)
                return False
        return True

    def _start(self, target: Callable[..., None], *args: Any) -> None:
        threading.Thread(target=target, args=args, daemon=True).start()

    def connect(self) -> "BybitWebSocket | None":
        """Open the connection and start reading, monitoring and pinging.

        Returns ``None`` when authentication could not be sent.
        """
        self._stop = threading.Event()
        if not self._open():
            return None
        self.is_connected = True
        self._start(self._handle_incoming, self._conn, self._stop)
        self._start(self._monitor, self._stop)
        self._start(self._ping, self._stop)
        return self

    def _handle_incoming(self, conn: Connection, stop: threading.Event) -> None:
        while True:
            try:
                message = conn.recv()
            except Exception as exc:
                if not stop.is_set():
                    logger.error("error reading: %s", exc)
                self.is_connected = False
                return
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            if self.on_message is not None:
                try:
                    self.on_message(message)
                except Exception as exc:
                    logger.error("error handling message: %s", exc)
                    return

    def _monitor(self, stop: threading.Event) -> None:
        while not stop.wait(MONITOR_INTERVAL):
            if self.is_connected:
                continue
            logger.info("attempting to reconnect")
            try:
                reopened = self._open()
            except Exception as exc:
                logger.error("reconnection failed: %s", exc)
                continue
            if not reopened:
                logger.error("reconnection failed")
                continue
            self.is_connected = True
            self._start(self._handle_incoming, self._conn, stop)

    def _ping(self, stop: threading.Event) -> None:
        if self.ping_interval <= 0:
            logger.warning("ping interval is set to a non-positive value")
            return
        while not stop.wait(self.ping_interval):
            message = build_ping_message()
            try:
                self._send_json(message)
            except Exception as exc:
                logger.error("failed to send ping: %s", exc)
                return
            logger.debug("ping sent with time %s", message["req_id"])
        logger.debug("ping stopped")

    def _send_json(self, message: Any) -> None:
        if self._conn is None:
            raise ConnectionError("not connected")
        with self._send_lock:
            self._conn.send(_dumps(message))

    def send_subscription(self, args: list[str]) -> "BybitWebSocket":
        """Subscribe to the given topics."""
        message = build_subscription_message(args)
        logger.info("subscribe msg: %s", message["args"])
        self._send_json(message)
        return self

    def send_request(
        self,
        op: str,
        args: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> None:
        """Send a custom operation with one argument map and optional headers."""
        message = {
            "reqId": str(uuid.uuid4()),
            "header": dict(headers or {}),
            "op": op,
            "args": [args],
        }
        logger.info("request op %s: %s", op, message["args"])
        self._send_json(message)

    def send_auth(self) -> None:
        """Send the signed authentication request, valid for ten seconds."""
        expires = current_time_ms() + AUTH_EXPIRY_MS
        self._send_json(build_auth_message(self.api_key, self.api_secret, expires))

    def disconnect(self) -> None:
        """Stop background work and close the connection."""
        self._stop.set()
        self.is_connected = False
        if self._conn is not None:
            self._conn.close()