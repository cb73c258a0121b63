"""HTTP client: request signing, transport and response decoding."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping
from urllib.parse import urlencode, urlsplit

import requests

from .constants import (
    API_REQUEST_KEY,
    DEFAULT_RECV_WINDOW,
    MAINNET,
    NAME,
    RECV_WINDOW_KEY,
    SIGN_TYPE_KEY,
    SIGNATURE_KEY,
    TIMESTAMP_KEY,
    VERSION,
)
from .errors import APIError, validate_params

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class ServerResponse:
    """The common envelope of every API reply."""

    ret_code: Any = 0
    ret_msg: str = ""
    result: Any = None
    ret_ext_info: Any = field(default_factory=dict)
    time: Any = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "retCode": self.ret_code,
            "retMsg": self.ret_msg,
            "result": self.result,
            "retExtInfo": self.ret_ext_info,
            "time": self.time,
        }


@dataclass
class PreparedRequest:
    """A request ready to be handed to a transport."""

    method: str
    url: str
    headers: dict[str, str]
    body: str = ""


Transport = Callable[[PreparedRequest], "tuple[int, bytes]"]


class _RequestsTransport:
    """Send prepared requests through a ``requests`` session."""

    def __init__(self, proxy_url: str = "") -> None:
        self._session = requests.Session()
        if proxy_url:
            self._session.proxies = {"http": proxy_url, "https": proxy_url}

    def __call__(self, prepared: PreparedRequest) -> tuple[int, bytes]:
        response = self._session.request(
            prepared.method,
            prepared.url,
            headers=prepared.headers,
            data=prepared.body.encode("utf-8") if prepared.body else None,
        )
        return response.status_code, response.content


def sign(secret: str, payload: str) -> str:
    """Hex HMAC-SHA256 of ``payload`` keyed by ``secret``."""
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def format_timestamp(moment: datetime) -> int:
    """Milliseconds since the Unix epoch; naive datetimes are taken as local time."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def current_time_ms() -> int:
    """The current time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def pretty_print(obj: Any) -> str:
    """Indented JSON rendering of a response or plain value; empty on failure."""
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    elif is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    try:
        return json.dumps(obj, indent=1, ensure_ascii=False)
    except (TypeError, ValueError):
        return ""


def parse_server_response(data: bytes | str) -> ServerResponse:
    """Decode a JSON response body into a :class:`ServerResponse`."""
    payload = json.loads(data)
    if not isinstance(payload, dict):
        raise ValueError("server response is not a JSON object")
    return ServerResponse(
        ret_code=payload.get("retCode", 0),
        ret_msg=payload.get("retMsg", ""),
        result=payload.get("result"),
        ret_ext_info=payload.get("retExtInfo", {}),
        time=payload.get("time", 0),
    )


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _encode_query(params: Mapping[str, Any] | None) -> str:
    if not params:
        return ""
    return urlencode([(key, _format_value(params[key])) for key in sorted(params)])


class BybitHttpClient:
    """Signs and sends REST requests."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = MAINNET,
        debug: bool = False,
        proxy_url: str = "",
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if proxy_url:
            urlsplit(proxy_url)  # raises ValueError on a malformed URL
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url
        self.debug = debug
        self.proxy_url = proxy_url
        self.logger = logger or logging.getLogger(NAME)
        self.transport: Transport = transport or _RequestsTransport(proxy_url)

    def _log(self, message: str, *args: Any) -> None:
        if self.debug:
            self.logger.info(message, *args)

    def prepare_request(
        self,
        method: str,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        signed: bool = True,
        recv_window: str | None = None,
    ) -> PreparedRequest:
        """Build the URL, headers and body, signing them if asked."""
        method = method.upper()
        url = f"{self.base_url}{endpoint}"
        if method == "GET":
            query = _encode_query(params)
            body = ""
        else:
            query = ""
            body = "" if params is None else json.dumps(params, separators=(",", ":"))

        headers = {"User-Agent": f"{NAME}/{VERSION}"}
        if signed:
            timestamp = str(current_time_ms())
            window = recv_window or DEFAULT_RECV_WINDOW
            headers[SIGN_TYPE_KEY] = "2"
            headers[API_REQUEST_KEY] = self.api_key
            headers[TIMESTAMP_KEY] = timestamp
            headers[RECV_WINDOW_KEY] = window
            if method == "POST":
                headers["Content-Type"] = "application/json"
                signed_part = body
            else:
                signed_part = query
            headers[SIGNATURE_KEY] = sign(
                self.api_secret, timestamp + self.api_key + window + signed_part
            )
        if query:
            url = f"{url}?{query}"
        self._log("full url: %s, body: %s", url, body)
        return PreparedRequest(method=method, url=url, headers=headers, body=body)

    def call_api(
        self,
        method: str,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        signed: bool = True,
        recv_window: str | None = None,
    ) -> bytes:
        """Send a request and return the raw body; raise APIError on 4xx/5xx."""
        prepared = self.prepare_request(method, endpoint, params, signed, recv_window)
        self._log("request: %r", prepared)
        status, data = self.transport(prepared)
        self._log("response body: %s", data)
        self._log("response status code: %d", status)
        if status >= 400:
            raise APIError.from_json(data)
        return data


class ClientRequest:
    """A parameter set bound to a client, on which endpoint calls are made."""

    def __init__(
        self,
        client: BybitHttpClient,
        params: Mapping[str, Any] | None = None,
        is_uta: bool = True,
    ) -> None:
        self.client = client
        self.params = dict(params) if params is not None else None
        self.is_uta = is_uta

    def _send(
        self, method: str, endpoint: str, *, signed: bool = True, validate: bool = False
    ) -> ServerResponse:
        if validate:
            validate_params(self.params)
        data = self.client.call_api(method, endpoint, self.params, signed)
        return parse_server_response(data)