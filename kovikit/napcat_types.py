"""Data types and forward-node builders used by the NapCat actions."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .api import to_json_value
from .segments import Message, Segment


@dataclass
class InvitedRequest:
    """A pending invitation of the bot into a group."""

    request_id: int
    invitor_uin: int
    invitor_nick: str
    group_id: int
    group_name: str
    checked: bool
    actor: int

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the request."""
        return asdict(self)


@dataclass
class JoinRequest:
    """A pending request of a user to join a group."""

    request_id: int
    requester_uin: int
    requester_nick: str
    message: str
    group_id: int
    group_name: str
    checked: bool
    actor: int

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the request."""
        return asdict(self)


def fake_node_from_content(user_id: str, nickname: str, content: Message) -> Segment:
    """Build a forward node that shows ``content`` as sent by the given user."""
    return Segment(
        "node",
        {"user_id": user_id, "nickname": nickname, "content": to_json_value(content)},
    )


def fake_node_from_id(user_id: str, nickname: str, id: str) -> Segment:
    """Build a forward node that shows message ``id`` as sent by the given user."""
    return Segment("node", {"id": id, "user_id": user_id, "nickname": nickname})


def node_from_id(id: str) -> Segment:
    """Build a forward node that refers to an existing message."""
    return Segment("node", {"id": id})


def node_from_content(content: Message) -> Segment:
    """Build a forward node that carries ``content`` directly."""
    return Segment("node", {"content": to_json_value(content)})