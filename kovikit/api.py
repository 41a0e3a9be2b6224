"""Requests to a OneBot endpoint and the replies that come back."""

from __future__ import annotations

import dataclasses
import os
import secrets
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .segments import Message, Segment


@dataclass
class ApiRequest:
    """One API call: the action name, its parameters and an echo tag."""

    action: str
    params: dict[str, Any] = field(default_factory=dict)
    echo: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the request."""
        return {"action": self.action, "params": self.params, "echo": self.echo}


@dataclass
class ApiReturn:
    """The reply to an API call."""

    status: str
    retcode: int
    data: Any = None
    echo: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ApiReturn:
        """Build a reply from its wire form."""
        if not isinstance(data, Mapping):
            raise ValueError("an API reply must be a mapping")
        try:
            status = data["status"]
            retcode = data["retcode"]
        except KeyError as exc:
            raise ValueError(f"an API reply needs {exc.args[0]!r}") from None
        return cls(
            status=str(status),
            retcode=int(retcode),
            data=data.get("data"),
            echo=str(data.get("echo") or ""),
        )

    @property
    def ok(self) -> bool:
        return self.status.lower() == "ok"


class ApiError(Exception):
    """Raised when the endpoint answers a call with a failure."""

    def __init__(self, reply: ApiReturn) -> None:
        super().__init__(f"API call failed: status={reply.status} retcode={reply.retcode}")
        self.reply = reply


def rand_echo() -> str:
    """Return a fresh random echo tag."""
    return secrets.token_hex(10)


def to_json_value(value: Any) -> Any:
    """Convert segments, messages, paths and containers into plain JSON values."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Message):
        return value.to_list()
    if isinstance(value, Segment):
        return value.to_dict()
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    if isinstance(value, Mapping):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_json_value(to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_json_value(dataclasses.asdict(value))
    raise TypeError(f"cannot convert {type(value).__name__} to JSON")


Transport = Callable[[ApiRequest], Awaitable[Union[ApiReturn, Mapping[str, Any]]]]


class ApiClient:
    """Sends API requests through an async transport and checks the replies."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def call(self, action: str, params: Mapping[str, Any] | None = None) -> ApiReturn:
        """Send ``action`` with ``params``; raise ApiError unless the reply is ok."""
        request = ApiRequest(action, to_json_value(dict(params or {})), rand_echo())
        raw = await self.transport(request)
        reply = raw if isinstance(raw, ApiReturn) else ApiReturn.from_dict(raw)
        if not reply.ok:
            raise ApiError(reply)
        return reply