"""Errors reported by the API and checks on request parameters."""

from __future__ import annotations

import json
from typing import Any, Mapping


class APIError(Exception):
    """An error returned by the API with a 4xx or 5xx status."""

    def __init__(self, code: int = 0, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"<APIError> code={self.code}, msg={self.message}"

    @classmethod
    def from_json(cls, data: bytes | str) -> "APIError":
        """Build an error from a response body; unreadable bodies give an empty error."""
        try:
            payload = json.loads(data)
        except (TypeError, ValueError):
            return cls()
        if not isinstance(payload, dict):
            return cls()
        code = payload.get("retCode", 0)
        message = payload.get("retMsg", "")
        if not isinstance(code, int) or isinstance(code, bool):
            code = 0
        if not isinstance(message, str):
            message = ""
        return cls(code, message)


def is_api_error(error: BaseException | None) -> bool:
    """Tell whether ``error`` is an :class:`APIError`."""
    return isinstance(error, APIError)


def validate_params(params: Mapping[str, Any] | None) -> None:
    """Reject parameter maps with empty keys or missing values."""
    if not params:
        return
    for key, value in params.items():
        if key == "":
            raise ValueError("empty key found in parameters")
        if value is None:
            raise ValueError(f"parameter for key '{key}' is None")