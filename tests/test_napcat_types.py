import json

from kovikit.api import to_json_value
from kovikit.napcat_types import (
    InvitedRequest,
    JoinRequest,
    fake_node_from_content,
    fake_node_from_id,
    node_from_content,
    node_from_id,
)
from kovikit.segments import Message, Segment


def test_invited_request_to_dict_keys_and_values():
    req = InvitedRequest(1, 2, "nick", 3, "group", False, 4)
    assert req.to_dict() == {
        "request_id": 1,
        "invitor_uin": 2,
        "invitor_nick": "nick",
        "group_id": 3,
        "group_name": "group",
        "checked": False,
        "actor": 4,
    }


def test_join_request_to_dict_keys_and_values():
    req = JoinRequest(5, 6, "who", "let me in", 7, "club", True, 8)
    assert req.to_dict() == {
        "request_id": 5,
        "requester_uin": 6,
        "requester_nick": "who",
        "message": "let me in",
        "group_id": 7,
        "group_name": "club",
        "checked": True,
        "actor": 8,
    }


def test_requests_round_trip_through_json():
    req = JoinRequest(5, 6, "who", "hi", 7, "club", True, 8)
    restored = JoinRequest(**json.loads(json.dumps(to_json_value(req))))
    assert restored == req


def test_fake_node_from_content():
    node = fake_node_from_content("10000", "测试", Message.from_text("some"))
    assert node.type == "node"
    assert node.data == {
        "user_id": "10000",
        "nickname": "测试",
        "content": [{"type": "text", "data": {"text": "some"}}],
    }


def test_fake_node_from_id():
    node = fake_node_from_id("10000", "测试", "10001")
    assert node == Segment("node", {"id": "10001", "user_id": "10000", "nickname": "测试"})


def test_node_from_id():
    assert node_from_id("10000").to_dict() == {"type": "node", "data": {"id": "10000"}}


def test_node_from_content_matches_message_wire_form():
    msg = Message.from_text("Hello, world!")
    node = node_from_content(msg)
    assert node.type == "node"
    assert node.data["content"] == msg.to_list()
    assert set(node.data) == {"content"}