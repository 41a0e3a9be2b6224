"""Parsing of the ``.kovi`` management command into typed command objects."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union


class AccessControlMode(enum.Enum):
    """Whether a plugin's access list allows or denies its entries."""

    WHITE_LIST = "white"
    BLACK_LIST = "black"


class HelpItem(enum.Enum):
    """Which help page to show."""

    NONE = "none"
    PLUGIN = "plugin"
    ACC = "acc"


class ListChangeKind(enum.Enum):
    """Which access list is changed, and how."""

    GROUP_ADDS = "group_adds"
    GROUP_REMOVES = "group_removes"
    FRIEND_ADDS = "friend_adds"
    FRIEND_REMOVES = "friend_removes"

    @property
    def is_group(self) -> bool:
        return self in (ListChangeKind.GROUP_ADDS, ListChangeKind.GROUP_REMOVES)

    @property
    def is_add(self) -> bool:
        return self in (ListChangeKind.GROUP_ADDS, ListChangeKind.FRIEND_ADDS)


@dataclass(frozen=True)
class HelpCmd:
    """Show a help page."""

    item: HelpItem = HelpItem.NONE


@dataclass(frozen=True)
class StatusCmd:
    """Show the bot's status."""


@dataclass(frozen=True)
class PluginStatusCmd:
    """List all plugins."""


@dataclass(frozen=True)
class PluginStartCmd:
    """Enable a plugin."""

    name: str


@dataclass(frozen=True)
class PluginStopCmd:
    """Disable a plugin."""

    name: str


@dataclass(frozen=True)
class PluginRestartCmd:
    """Reload a plugin."""

    name: str


@dataclass(frozen=True)
class AccStatus:
    """Show a plugin's access control settings."""


@dataclass(frozen=True)
class AccEnable:
    """Turn a plugin's access control on or off."""

    enabled: bool


@dataclass(frozen=True)
class AccSetMode:
    """Set a plugin's access control mode."""

    mode: AccessControlMode


@dataclass(frozen=True)
class AccGroupIsEnable:
    """Add the current group to, or remove it from, a plugin's access list."""

    enabled: bool


@dataclass(frozen=True)
class AccChange:
    """Add ids to, or remove ids from, one of a plugin's access lists."""

    kind: ListChangeKind
    ids: tuple[str, ...]


AccAction = Union[AccStatus, AccEnable, AccSetMode, AccGroupIsEnable, AccChange]


@dataclass(frozen=True)
class AccCmd:
    """An access control command aimed at the plugin called ``name``."""

    name: str
    action: AccAction


Command = Union[
    HelpCmd,
    StatusCmd,
    PluginStatusCmd,
    PluginStartCmd,
    PluginStopCmd,
    PluginRestartCmd,
    AccCmd,
]

_HELP_PLUGIN = HelpCmd(HelpItem.PLUGIN)
_HELP_ACC = HelpCmd(HelpItem.ACC)

_PLUGIN_NAMED = {
    "start": PluginStartCmd,
    "stop": PluginStopCmd,
    "restart": PluginRestartCmd,
    "r": PluginRestartCmd,
}

_MODES = {
    "w": AccessControlMode.WHITE_LIST,
    "white": AccessControlMode.WHITE_LIST,
    "b": AccessControlMode.BLACK_LIST,
    "black": AccessControlMode.BLACK_LIST,
}

_SIMPLE_ACC = {
    "status": AccStatus(),
    "s": AccStatus(),
    "on": AccGroupIsEnable(True),
    "off": AccGroupIsEnable(False),
    "enable": AccEnable(True),
    "e": AccEnable(True),
    "disable": AccEnable(False),
    "d": AccEnable(False),
}

_LIST_CHANGES = {
    ("add", "friend"): ListChangeKind.FRIEND_ADDS,
    ("add", "group"): ListChangeKind.GROUP_ADDS,
    ("remove", "friend"): ListChangeKind.FRIEND_REMOVES,
    ("remove", "group"): ListChangeKind.GROUP_REMOVES,
}

_VERB_ALIASES = {"add": "add", "a": "add", "remove": "remove", "r": "remove"}
_TARGET_ALIASES = {"friend": "friend", "f": "friend", "group": "group", "g": "group"}


def _parse_help(args: Iterator[str]) -> Command:
    sub = next(args, None)
    if sub in ("plugin", "p"):
        return _HELP_PLUGIN
    if sub in ("acc", "a"):
        return _HELP_ACC
    return HelpCmd(HelpItem.NONE)


def _parse_plugin(args: Iterator[str]) -> Command:
    sub = next(args, None)
    if sub in ("list", "status", "l"):
        return PluginStatusCmd()
    factory = _PLUGIN_NAMED.get(sub) if sub is not None else None
    if factory is None:
        return _HELP_PLUGIN
    name = next(args, None)
    if name is None:
        return _HELP_PLUGIN
    return factory(name)


def _parse_acc(args: Iterator[str]) -> Command:
    plugin_name = next(args, None)
    if plugin_name is None:
        return _HELP_ACC
    sub = next(args, None)
    if sub is None:
        return _HELP_ACC

    if sub in _SIMPLE_ACC:
        return AccCmd(plugin_name, _SIMPLE_ACC[sub])

    if sub in ("mode", "m"):
        mode = _MODES.get(next(args, None) or "")
        if mode is None:
            return _HELP_ACC
        return AccCmd(plugin_name, AccSetMode(mode))

    verb = _VERB_ALIASES.get(sub)
    if verb is None:
        return _HELP_ACC
    target = _TARGET_ALIASES.get(next(args, None) or "")
    if target is None:
        return _HELP_ACC
    ids = tuple(args)
    if not ids:
        return _HELP_ACC
    return AccCmd(plugin_name, AccChange(_LIST_CHANGES[(verb, target)], ids))


def parse(args: Iterable[str]) -> Command:
    """Parse the words of a ``.kovi`` command, the leading ``.kovi`` included.

    Anything incomplete or unknown yields the matching help page.
    """
    words = (word.strip() for word in list(args)[1:])
    command = next(words, None)
    if command is None:
        return HelpCmd(HelpItem.NONE)

    command = command.lower()
    if command in ("status", "s"):
        return StatusCmd()
    if command in ("help", "h"):
        return _parse_help(words)
    if command in ("plugin", "p"):
        return _parse_plugin(words)
    if command in ("acc", "a"):
        return _parse_acc(words)
    return HelpCmd(HelpItem.NONE)