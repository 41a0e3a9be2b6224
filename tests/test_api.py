from pathlib import Path

import pytest

from kovikit.api import (
    ApiClient,
    ApiError,
    ApiRequest,
    ApiReturn,
    rand_echo,
    to_json_value,
)
from kovikit.segments import Message, Segment


def test_request_wire_form():
    req = ApiRequest("get_status", {"a": 1}, "e1")
    assert req.to_dict() == {"action": "get_status", "params": {"a": 1}, "echo": "e1"}


def test_return_from_dict():
    ret = ApiReturn.from_dict({"status": "ok", "retcode": 0, "data": [1, 2], "echo": "x"})
    assert ret == ApiReturn("ok", 0, [1, 2], "x")
    assert ret.ok


def test_return_from_dict_missing_key():
    with pytest.raises(ValueError):
        ApiReturn.from_dict({"status": "ok"})


def test_return_failed_is_not_ok():
    assert not ApiReturn.from_dict({"status": "failed", "retcode": 100}).ok


def test_rand_echo_is_fresh():
    echoes = {rand_echo() for _ in range(50)}
    assert len(echoes) == 50
    assert all(echoes)


def test_to_json_value_converts_nested():
    msg = Message.from_text("hi")
    value = {"p": Path("dir") / "f.txt", "m": msg, "s": [Segment("x", {"k": 1})], "t": (1, None)}
    assert to_json_value(value) == {
        "p": str(Path("dir") / "f.txt"),
        "m": msg.to_list(),
        "s": [{"type": "x", "data": {"k": 1}}],
        "t": [1, None],
    }


def test_to_json_value_rejects_unknown():
    with pytest.raises(TypeError):
        to_json_value(object())


class _Recorder:
    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        return dict(self.reply, echo=request.echo)


@pytest.mark.asyncio
async def test_call_sends_request_and_returns_reply():
    transport = _Recorder({"status": "ok", "retcode": 0, "data": {"v": 1}})
    client = ApiClient(transport)
    ret = await client.call("get_version_info", {"m": Message.from_text("a")})
    assert ret.data == {"v": 1}
    (req,) = transport.requests
    assert req.action == "get_version_info"
    assert req.params == {"m": [{"type": "text", "data": {"text": "a"}}]}
    assert ret.echo == req.echo


@pytest.mark.asyncio
async def test_call_raises_on_failure():
    transport = _Recorder({"status": "failed", "retcode": 1404, "data": None})
    client = ApiClient(transport)
    with pytest.raises(ApiError) as info:
        await client.call("nothing")
    assert info.value.reply.retcode == 1404