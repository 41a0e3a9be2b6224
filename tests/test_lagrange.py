from pathlib import Path

import pytest

from kovikit.api import ApiError
from kovikit.lagrange import LagrangeApi, forward_node, forward_resid
from kovikit.segments import Message


class _Recorder:
    def __init__(self, status="ok"):
        self.status = status
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        return {"status": self.status, "retcode": 0, "data": "resid", "echo": request.echo}


def test_forward_node_shape():
    content = Message.from_text("some")
    node = forward_node("10000", "测试", content)
    assert node.type == "node"
    assert node.data == {"name": "测试", "uin": "10000", "content": content.to_list()}


def test_forward_resid_shape():
    seg = forward_resid("abc")
    assert seg.to_dict() == {"type": "forward", "data": {"id": "abc"}}


def test_forward_resid_appends_to_message():
    msg = Message.from_text("x")
    msg.push(forward_resid("r"))
    assert [s.type for s in msg] == ["text", "forward"]


NODES = [forward_node("10000", "测试", Message.from_text("some"))]
FILE = Path("files") / "a.txt"


@pytest.mark.parametrize(
    "method, args, action, params",
    [
        ("fetch_custom_face", (), "fetch_custom_face", {}),
        ("get_friend_msg_history", (1, 2, 3), "get_friend_msg_history",
         {"user_id": 1, "message_id": 2, "count": 3}),
        ("get_group_msg_history", (1, 2, 3), "get_group_msg_history",
         {"group_id": 1, "message_id": 2, "count": 3}),
        ("send_forward_msg", (NODES,), "send_forward_msg",
         {"messages": [n.to_dict() for n in NODES]}),
        ("send_group_forward_msg", (5, NODES), "send_group_forward_msg",
         {"group_id": 5, "messages": [n.to_dict() for n in NODES]}),
        ("send_private_forward_msg", (6, NODES), "send_private_forward_msg",
         {"user_id": 6, "messages": [n.to_dict() for n in NODES]}),
        ("upload_group_file", (5, FILE, "a.txt", None), "upload_group_file",
         {"group_id": 5, "file": str(FILE), "name": "a.txt"}),
        ("upload_group_file", (5, FILE, "a.txt", "dir"), "upload_group_file",
         {"group_id": 5, "file": str(FILE), "name": "a.txt", "folder": "dir"}),
        ("upload_private_file", (6, FILE, "a.txt"), "upload_private_file",
         {"user_id": 6, "file": str(FILE), "name": "a.txt"}),
        ("get_group_root_files", (5,), "get_group_root_files", {"group_id": 5}),
        ("get_group_files_by_folder", (5, "f"), "get_group_files_by_folder",
         {"group_id": 5, "folder_id": "f"}),
        ("get_group_file_url", (5, "id", 102), "get_group_file_url",
         {"group_id": 5, "file_id": "id", "busid": 102}),
        ("friend_poke", (6,), "friend_poke", {"user_id": 6}),
        ("group_poke", (5, 6), "group_poke", {"group_id": 5, "user_id": 6}),
        ("friend_poke_return", (6,), "friend_poke", {"user_id": 6}),
        ("group_poke_return", (5, 6), "group_poke", {"group_id": 5, "user_id": 6}),
        ("set_group_reaction", (5, 7, "66", True), "set_group_reaction",
         {"group_id": 5, "message_id": 7, "code": "66", "is_add": True}),
    ],
)
@pytest.mark.asyncio
async def test_actions(method, args, action, params):
    transport = _Recorder()
    api = LagrangeApi(transport)
    ret = await getattr(api, method)(*args)
    (req,) = transport.requests
    assert req.action == action
    assert req.params == params
    assert ret.echo == req.echo


@pytest.mark.asyncio
async def test_failure_raises():
    api = LagrangeApi(_Recorder(status="failed"))
    with pytest.raises(ApiError):
        await api.friend_poke(1)