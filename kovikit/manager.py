"""The ``.kovi`` management plugin: plugin control, access control and status."""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import psutil

from .api import ApiError, ApiReturn
from .cmd import (
    AccAction,
    AccChange,
    AccCmd,
    AccEnable,
    AccessControlMode,
    AccGroupIsEnable,
    AccSetMode,
    AccStatus,
    HelpCmd,
    HelpItem,
    PluginRestartCmd,
    PluginStartCmd,
    PluginStatusCmd,
    PluginStopCmd,
    StatusCmd,
    parse,
)

log = logging.getLogger(__name__)

_PREFIX = ".kovi"
_DEFAULT_SELF_NAME = "kovi-plugin-cmd"
_INTEGER = re.compile(r"[+-]?[0-9]+")
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

HELP_MSG = """┄ 📜 帮助列表 ┄
.kovi plugin <T>: 插件管理
.kovi acc <name> <T>: 访问控制
.kovi status: 状态信息
部分命令可缩写为第一个字母"""

HELP_PLUGIN = """┄ 📜 插件管理 ┄:
.kovi plugin <T>

<T>:
list: 列出所有插件
start <name>: 启动插件
stop <name>: 停止插件
restart <name>: 重载插件"""

HELP_ACC = """┄ 📜 访问控制 ┄:
.kovi acc <name> <T>

<T>:
status: 列出插件访问控制信息
enable: 启用插件访问控制
disable: 禁用插件访问控制
mode <white | black>: 插件访问控制模式
on: 添加本群到列表
off: 移除本群到列表
add <friend | group> [id]: 添加多个
remove <friend | group> [id]: 移除多个"""

_SERVER_UNKNOWN = "服务端: 信息获取失败"


@dataclass
class AccessList:
    """The group and friend ids on a plugin's access list."""

    groups: list[int] = field(default_factory=list)
    friends: list[int] = field(default_factory=list)


@dataclass
class PluginInfo:
    """What the host reports about one plugin."""

    name: str
    version: str
    enabled: bool = True
    access_control: bool = False
    list_mode: AccessControlMode = AccessControlMode.WHITE_LIST
    access_list: AccessList = field(default_factory=AccessList)


class PluginNotFoundError(LookupError):
    """Raised by the host when a named plugin does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"plugin {name!r} not found")
        self.name = name


@dataclass
class MessageEvent:
    """An incoming admin message; replies are collected and forwarded to ``sender``."""

    text: str | None
    user_id: int = 0
    group_id: int | None = None
    sender: Callable[[str], Any] | None = None
    replies: list[str] = field(default_factory=list)

    @property
    def is_private(self) -> bool:
        return self.group_id is None

    def reply(self, text: str) -> None:
        """Answer the message with ``text``."""
        self.replies.append(text)
        if self.sender is not None:
            self.sender(text)


class _PluginHost(Protocol):
    def get_plugin_info(self) -> Sequence[PluginInfo]: ...

    def enable_plugin(self, name: str) -> None: ...

    def disable_plugin(self, name: str) -> None: ...

    async def restart_plugin(self, name: str) -> None: ...

    def set_plugin_access_control(self, name: str, enabled: bool) -> None: ...

    def set_plugin_access_control_mode(self, name: str, mode: AccessControlMode) -> None: ...

    def set_plugin_access_control_list(
        self, name: str, is_group: bool, ids: list[int], is_add: bool
    ) -> None: ...

    async def get_version_info(self) -> ApiReturn: ...


def format_uptime(seconds: int) -> str:
    """Render a duration as ``XdXhXmXs``, dropping leading zero units."""
    if seconds < 0:
        raise ValueError("uptime cannot be negative")
    days, rest = divmod(int(seconds), 24 * 3600)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    if days > 0:
        return f"{days}d{hours}h{minutes}m{secs}s"
    if hours > 0:
        return f"{hours}h{minutes}m{secs}s"
    if minutes > 0:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def help_text(item: HelpItem) -> str:
    """Return the help page for ``item``."""
    if item is HelpItem.PLUGIN:
        return HELP_PLUGIN
    if item is HelpItem.ACC:
        return HELP_ACC
    return HELP_MSG


def format_server_info(version_info: Any) -> str:
    """Describe the OneBot server from its version info, or say it is unknown."""
    if not isinstance(version_info, Mapping):
        return _SERVER_UNKNOWN
    name = version_info.get("app_name")
    version = version_info.get("app_version")
    if any(v is not None and not isinstance(v, str) for v in (name, version)):
        return _SERVER_UNKNOWN
    msg = "服务端:\n  "
    if name is not None:
        msg += name
    if version is not None:
        msg += f"（{version}）"
    return msg


def _parse_ids(words: Sequence[str]) -> list[int] | None:
    ids = []
    for word in words:
        if not _INTEGER.fullmatch(word):
            return None
        value = int(word)
        if not _I64_MIN <= value <= _I64_MAX:
            return None
        ids.append(value)
    return ids


def _join_ids(ids: Sequence[int]) -> str:
    return ", ".join(str(v) for v in ids) if ids else "无"


class CmdPlugin:
    """Answers ``.kovi`` admin commands by driving the plugin host."""

    def __init__(
        self,
        bot: _PluginHost,
        self_name: str = _DEFAULT_SELF_NAME,
        start_time: int | None = None,
    ) -> None:
        self.bot = bot
        self.self_name = self_name
        self.start_time = int(time.time()) if start_time is None else start_time

    async def handle(self, event: MessageEvent) -> None:
        """Act on one admin message; messages not starting with ``.kovi`` are ignored."""
        text = event.text
        if text is None or not text.startswith(_PREFIX):
            return
        command = parse(text.split())
        if isinstance(command, HelpCmd):
            event.reply(help_text(command.item))
        elif isinstance(command, PluginStatusCmd):
            self._plugin_status(event)
        elif isinstance(command, PluginStartCmd):
            self._plugin_start(event, command.name)
        elif isinstance(command, PluginStopCmd):
            self._plugin_stop(event, command.name)
        elif isinstance(command, PluginRestartCmd):
            await self._plugin_restart(event, command.name)
        elif isinstance(command, StatusCmd):
            event.reply(await self.status_text())
        elif isinstance(command, AccCmd):
            self._acc(event, command.name, command.action)

    def find_plugins(self, name: str) -> list[str]:
        """Return the names of all plugins whose name contains ``name``."""
        return [info.name for info in self.bot.get_plugin_info() if name in info.name]

    async def status_text(self, now: int | None = None) -> str:
        """Build the status report: uptime, plugins, memory and server."""
        now = int(time.time()) if now is None else now
        uptime = format_uptime(int(now - self.start_time))

        self_mb = psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024
        memory = psutil.virtual_memory()
        total_gb = memory.total / 1024 / 1024 / 1024
        used_gb = memory.used / 1024 / 1024 / 1024
        percent = used_gb / total_gb * 100 if total_gb else 0.0

        plugins = list(self.bot.get_plugin_info())
        enabled = sum(1 for info in plugins if info.enabled)

        try:
            reply = await self.bot.get_version_info()
        except ApiError:
            info = None
        else:
            info = reply.data if isinstance(reply, ApiReturn) else reply

        return (
            "┄ 📑 状态 ┄\n"
            f"🕑 运行时间: {uptime}\n"
            f"📦 插件数量: {len(plugins)} 启用 {enabled} 个\n"
            f"🔋 内存使用: {self_mb:.2f}MB\n"
            f"💻 系统内存:\n  {used_gb:.2f}GB/{total_gb:.2f}GB({percent:.0f}%)\n"
            f"🔗 {format_server_info(info)}"
        )

    def _is_self(self, name: str) -> bool:
        return name == self.self_name

    def _resolve(self, event: MessageEvent, name: str) -> str | None:
        names = self.find_plugins(name)
        if not names:
            event.reply("🔎 插件列表为空")
            return None
        if len(names) > 1:
            event.reply("┄ 🔎 寻找到多个插件 ┄\n" + "\n".join(names))
            return None
        return names[0]

    def _plugin_status(self, event: MessageEvent) -> None:
        plugins = list(self.bot.get_plugin_info())
        if not plugins:
            event.reply("🔎 插件列表为空")
            return
        lines = [
            f"{'✅' if info.enabled else '❎'} {info.name}(v{info.version})"
            for info in plugins
        ]
        event.reply(("┄ 📑 插件列表 ┄\n" + "\n".join(lines)).strip())

    def _plugin_start(self, event: MessageEvent, name: str) -> None:
        resolved = self._resolve(event, name)
        if resolved is None:
            return
        if self._is_self(resolved):
            event.reply("🏳️ 这么做...，你想干嘛")
            return
        try:
            self.bot.enable_plugin(resolved)
        except PluginNotFoundError:
            event.reply(f"🔎 插件{resolved}不存在")
        else:
            event.reply(f"✅ 插件{resolved}启动成功")

    def _plugin_stop(self, event: MessageEvent, name: str) -> None:
        resolved = self._resolve(event, name)
        if resolved is None:
            return
        if self._is_self(resolved):
            event.reply("⛔ 不允许关闭CMD插件")
            return
        try:
            self.bot.disable_plugin(resolved)
        except PluginNotFoundError:
            event.reply(f"🔎 插件{resolved}不存在")
        else:
            event.reply(f"✅ 插件{resolved}关闭成功")

    async def _plugin_restart(self, event: MessageEvent, name: str) -> None:
        resolved = self._resolve(event, name)
        if resolved is None:
            return
        if self._is_self(resolved):
            event.reply("⛔ 不允许重载CMD插件")
            return
        try:
            await self.bot.restart_plugin(resolved)
        except PluginNotFoundError:
            event.reply(f"🔎 插件{resolved}不存在")
        else:
            event.reply(f"✅ 插件{resolved}重载成功")

    def _acc(self, event: MessageEvent, name: str, action: AccAction) -> None:
        resolved = self._resolve(event, name)
        if resolved is None:
            return
        if self._is_self(resolved) and not isinstance(action, AccStatus):
            event.reply("⛔ 不允许修改CMD插件")
            return

        if isinstance(action, AccStatus):
            self._acc_status(event, resolved)
            return
        if isinstance(action, AccChange):
            self._change_list(event, resolved, action)
            return
        if isinstance(action, AccGroupIsEnable):
            self._toggle_group(event, resolved, action.enabled)
            return
        try:
            if isinstance(action, AccEnable):
                self.bot.set_plugin_access_control(resolved, action.enabled)
            elif isinstance(action, AccSetMode):
                self.bot.set_plugin_access_control_mode(resolved, action.mode)
        except PluginNotFoundError:
            event.reply(f"🔎 插件{resolved}不存在")
        else:
            event.reply("✅ 设置成功")

    def _acc_status(self, event: MessageEvent, name: str) -> None:
        for info in self.bot.get_plugin_info():
            if info.name != name:
                continue
            enabled = "✅" if info.access_control else "❎"
            mode = "黑名单" if info.list_mode is AccessControlMode.BLACK_LIST else "白名单"
            event.reply(
                f"📦 插件{name}\n访问控制：{enabled}\n模式：{mode}\n"
                f"群组：{_join_ids(info.access_list.groups)}\n"
                f"好友列表：{_join_ids(info.access_list.friends)}"
            )
            return
        event.reply("🔎 插件不存在")

    def _change_list(self, event: MessageEvent, name: str, change: AccChange) -> None:
        ids = _parse_ids(change.ids)
        if ids is None:
            event.reply("❎ 设置失败")
            return
        try:
            self.bot.set_plugin_access_control_list(
                name, change.kind.is_group, ids, change.kind.is_add
            )
        except PluginNotFoundError:
            event.reply(f"🔎 插件{name}不存在")
        else:
            event.reply("✅ 设置成功")

    def _toggle_group(self, event: MessageEvent, name: str, add: bool) -> None:
        if event.is_private:
            event.reply("⛔ 只能在群聊中使用")
            return
        group_id = event.group_id
        try:
            self.bot.set_plugin_access_control_list(name, True, [group_id], add)
        except PluginNotFoundError:
            event.reply(f"🔎 插件{name}不存在")
            return
        if add:
            event.reply(f"✅ 插件{name}访问控制已添加{group_id}")
        else:
            event.reply(f"✅ 插件{name}访问控制已移除{group_id}")