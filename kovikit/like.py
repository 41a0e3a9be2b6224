"""A plugin that sends profile likes on request, once per user per day."""

from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Union

from .api import ApiError

log = logging.getLogger(__name__)

_DAY = 86400
_LIKES_PER_REQUEST = 10

PathLike = Union[str, "os.PathLike[str]"]
SendLike = Callable[[int, int], Awaitable[Any]]


@dataclass
class LikeMessages:
    """The trigger text and the replies of the plugin."""

    cmd: str = "赞我"
    like: str = "已为你点赞10次"
    today: str = "今天赞过了，一边呆着去！"
    do_not_like_you: str = "就不给你点，略略略"


def _require_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{key!r} must be an integer")
    return value


@dataclass
class LikeConfig:
    """Persistent state: who was liked today and when the day started."""

    today: list[int] = field(default_factory=list)
    data_time: int = 1
    like_times: int = 10
    msg: LikeMessages = field(default_factory=LikeMessages)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the configuration."""
        return {
            "today": list(self.today),
            "data_time": self.data_time,
            "like_times": self.like_times,
            "msg": asdict(self.msg),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LikeConfig:
        """Build a configuration from its JSON form; raise ValueError if malformed."""
        if not isinstance(data, Mapping):
            raise ValueError("configuration must be an object")
        today = data.get("today")
        if not isinstance(today, list) or any(
            not isinstance(v, int) or isinstance(v, bool) for v in today
        ):
            raise ValueError("'today' must be a list of integers")
        data_time = _require_int(data, "data_time")
        like_times = _require_int(data, "like_times")
        if data_time < 0 or like_times < 0:
            raise ValueError("'data_time' and 'like_times' must not be negative")
        msg = data.get("msg")
        if not isinstance(msg, Mapping):
            raise ValueError("'msg' must be an object")
        texts = {}
        for key in ("cmd", "like", "today", "do_not_like_you"):
            value = msg.get(key)
            if not isinstance(value, str):
                raise ValueError(f"'msg.{key}' must be a string")
            texts[key] = value
        return cls(list(today), data_time, like_times, LikeMessages(**texts))


def save_config(config: LikeConfig, path: PathLike) -> None:
    """Write ``config`` to ``path`` as JSON, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(config.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )


def load_config(path: PathLike, now: int | None = None) -> LikeConfig:
    """Load the configuration, falling back to defaults when missing or malformed.

    A configuration from an earlier day has its list of liked users cleared.
    """
    target = Path(path)
    now = int(time.time()) if now is None else now
    try:
        raw = target.read_text(encoding="utf-8")
    except FileNotFoundError:
        config = LikeConfig()
        save_config(config, target)
    else:
        try:
            config = LikeConfig.from_dict(json.loads(raw))
        except ValueError:
            config = LikeConfig()
            save_config(config, target)

    if config.data_time // _DAY != now // _DAY:
        config.today = []
        config.data_time = now
        save_config(config, target)
    return config


class LikePlugin:
    """Sends likes to users who ask with the trigger text."""

    def __init__(self, path: PathLike, send_like: SendLike, now: int | None = None) -> None:
        self.path = Path(path)
        self.send_like = send_like
        self.config = load_config(self.path, now)

    async def handle(
        self, user_id: int, text: str | None, reply: Callable[[str], Any]
    ) -> str | None:
        """Answer one message; return the reply sent, or None if it was not a request."""
        msg = self.config.msg
        if text != msg.cmd:
            return None
        if user_id in self.config.today:
            reply(msg.today)
            return msg.today
        try:
            await self.send_like(user_id, _LIKES_PER_REQUEST)
        except ApiError:
            reply(msg.do_not_like_you)
            return msg.do_not_like_you
        reply(msg.like)
        self.config.today.append(user_id)
        save_config(self.config, self.path)
        return msg.like

    def reset(self, now: int | None = None) -> None:
        """Start a new day: forget who was liked and save."""
        log.info("like插件正在清理")
        self.config.today.clear()
        self.config.data_time = int(time.time()) if now is None else now
        save_config(self.config, self.path)