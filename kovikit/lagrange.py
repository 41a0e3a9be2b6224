"""Extra API calls and message helpers of the Lagrange OneBot implementation."""

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import Union

from .api import ApiClient, ApiReturn, to_json_value
from .segments import Message, Segment

PathLike = Union[str, "os.PathLike[str]"]


def forward_node(uin: str, name: str, content: Message) -> Segment:
    """Build a forward node carrying ``content`` under the given sender."""
    return Segment(
        "node",
        {"name": name, "uin": uin, "content": to_json_value(content)},
    )


def forward_resid(resid: str) -> Segment:
    """Build a segment that refers to an already built forward message."""
    return Segment("forward", {"id": resid})


def _nodes(messages: Iterable[Segment]) -> list:
    return [to_json_value(seg) for seg in messages]


class LagrangeApi(ApiClient):
    """Client for the Lagrange-specific actions."""

    async def fetch_custom_face(self) -> ApiReturn:
        return await self.call("fetch_custom_face", {})

    async def get_friend_msg_history(self, user_id: int, message_id: int, count: int) -> ApiReturn:
        return await self.call(
            "get_friend_msg_history",
            {"user_id": user_id, "message_id": message_id, "count": count},
        )

    async def get_group_msg_history(self, group_id: int, message_id: int, count: int) -> ApiReturn:
        return await self.call(
            "get_group_msg_history",
            {"group_id": group_id, "message_id": message_id, "count": count},
        )

    async def send_forward_msg(self, messages: Iterable[Segment]) -> ApiReturn:
        """Build (not send) a forward message; the reply data is its resid."""
        return await self.call("send_forward_msg", {"messages": _nodes(messages)})

    async def send_group_forward_msg(self, group_id: int, messages: Iterable[Segment]) -> ApiReturn:
        return await self.call(
            "send_group_forward_msg",
            {"group_id": group_id, "messages": _nodes(messages)},
        )

    async def send_private_forward_msg(self, user_id: int, messages: Iterable[Segment]) -> ApiReturn:
        return await self.call(
            "send_private_forward_msg",
            {"user_id": user_id, "messages": _nodes(messages)},
        )

    async def upload_group_file(
        self, group_id: int, file: PathLike, name: str, folder: str | None = None
    ) -> ApiReturn:
        params = {"group_id": group_id, "file": os.fspath(file), "name": name}
        if folder is not None:
            params["folder"] = folder
        return await self.call("upload_group_file", params)

    async def upload_private_file(self, user_id: int, file: PathLike, name: str) -> ApiReturn:
        return await self.call(
            "upload_private_file",
            {"user_id": user_id, "file": os.fspath(file), "name": name},
        )

    async def get_group_root_files(self, group_id: int) -> ApiReturn:
        return await self.call("get_group_root_files", {"group_id": group_id})

    async def get_group_files_by_folder(self, group_id: int, folder_id: str) -> ApiReturn:
        return await self.call(
            "get_group_files_by_folder", {"group_id": group_id, "folder_id": folder_id}
        )

    async def get_group_file_url(self, group_id: int, file_id: str, busid: int) -> ApiReturn:
        return await self.call(
            "get_group_file_url",
            {"group_id": group_id, "file_id": file_id, "busid": busid},
        )

    async def friend_poke(self, user_id: int) -> ApiReturn:
        return await self.call("friend_poke", {"user_id": user_id})

    async def group_poke(self, group_id: int, user_id: int) -> ApiReturn:
        return await self.call("group_poke", {"group_id": group_id, "user_id": user_id})

    async def friend_poke_return(self, user_id: int) -> ApiReturn:
        return await self.friend_poke(user_id)

    async def group_poke_return(self, group_id: int, user_id: int) -> ApiReturn:
        return await self.group_poke(group_id, user_id)

    async def set_group_reaction(
        self, group_id: int, message_id: int, code: str, is_add: bool
    ) -> ApiReturn:
        return await self.call(
            "set_group_reaction",
            {"group_id": group_id, "message_id": message_id, "code": code, "is_add": is_add},
        )