# kovikit

Building blocks for OneBot chat bots.

| Module | What it holds |
| --- | --- |
| `kovikit.segments` | `Segment` and `Message`, the OneBot array message format |
| `kovikit.api` | `ApiClient`, `ApiRequest`, `ApiReturn`, `ApiError`, `rand_echo`, `to_json_value` |
| `kovikit.lagrange` | `LagrangeApi` (Lagrange-specific actions), `forward_node`, `forward_resid` |
| `kovikit.napcat_types` | `InvitedRequest`, `JoinRequest` and the forward-node builders `node_from_id`, `node_from_content`, `fake_node_from_id`, `fake_node_from_content` |
| `kovikit.cmd` | `parse`, which turns `.kovi ...` words into a typed command object |
| `kovikit.manager` | `CmdPlugin`, which carries out those commands against a plugin host |
| `kovikit.like` | `LikePlugin`, `LikeConfig`, `load_config`, `save_config` |

## Installation

```
pip install kovikit
```

## Messages

```python
from kovikit.segments import Message, Segment

msg = Message.from_text("hello")
msg.push(Segment("face", {"id": "1"}))
msg.text()      # "hello"
msg.to_list()   # [{"type": "text", "data": {"text": "hello"}}, {"type": "face", ...}]
```

## Sending API calls

`ApiClient` (and `LagrangeApi`, which extends it) takes a transport: an async callable that
receives an `ApiRequest` and returns either an `ApiReturn` or the reply as a dictionary
(`status`, `retcode`, optionally `data` and `echo`). Parameters are converted to plain JSON
values first (messages, segments, paths and dataclasses included), and every request gets a
fresh random echo tag. A reply whose status is not `ok` raises `ApiError`, which keeps the
reply in its `reply` attribute.

```python
from kovikit.api import ApiRequest
from kovikit.lagrange import LagrangeApi, forward_node, forward_resid
from kovikit.segments import Message

async def transport(request: ApiRequest) -> dict:
    payload = request.to_dict()   # {"action": ..., "params": ..., "echo": ...}
    # send payload over your websocket / HTTP connection and return the reply
    ...

bot = LagrangeApi(transport)
nodes = [
    forward_node("10000", "Alice", Message.from_text("hello")),
    forward_node("10000", "Bob", Message.from_text("hi")),
]
built = await bot.send_forward_msg(nodes)   # builds the forward message, does not send it
reference = Message()
reference.push(forward_resid(built.data))
```

`LagrangeApi` also offers message history, forward messages to groups and friends, group and
private file upload and listing, file URLs, pokes and group reactions.

## NapCat

`kovikit.napcat_types` builds the forward nodes NapCat expects (real or faked sender, by
message id or by content) and the `InvitedRequest` / `JoinRequest` records with their
`to_dict` wire forms. The package has no client class for NapCat-specific actions; send them
with `ApiClient.call(action, params)`, for example
`await client.call("send_forward_msg", {"message_type": "private", "user_id": 10000, "message": nodes})`.

## Admin commands

```python
from kovikit.cmd import parse

parse(".kovi plugin start like".split())   # PluginStartCmd(name="like")
parse([".kovi"])                            # HelpCmd(HelpItem.NONE)
```

Recognised commands; most keywords may be shortened to their first letter:

- `.kovi status`
- `.kovi help [plugin|acc]`
- `.kovi plugin list|start <name>|stop <name>|restart <name>`
- `.kovi acc <name> status|enable|disable|mode <white|black>|on|off`
- `.kovi acc <name> add|remove <friend|group> <id>...`

Anything incomplete or unknown yields the matching help command.

`CmdPlugin(bot, self_name="kovi-plugin-cmd", start_time=None)` answers a `MessageEvent` whose
text starts with `.kovi`. `bot` is your plugin host and must provide `get_plugin_info`,
`enable_plugin`, `disable_plugin`, `restart_plugin` (async), `set_plugin_access_control`,
`set_plugin_access_control_mode`, `set_plugin_access_control_list(name, is_group, ids, is_add)`
and `get_version_info` (async), raising `PluginNotFoundError` for unknown plugins. Plugin
names match by substring; an ambiguous name lists the candidates. The plugin refuses to stop,
restart or change the access control of itself. `.kovi status` reports uptime, plugin counts,
process and system memory (through psutil) and the OneBot server's name and version.

Replies are appended to `MessageEvent.replies` and passed to its `sender` callable, if given.

## Daily likes

```python
from kovikit.like import LikePlugin

plugin = LikePlugin("data/like/config.json", send_like)   # send_like: async (user_id, times)
await plugin.handle(user_id, text, reply)
plugin.reset()   # call once a day
```

The configuration is JSON; a missing or malformed file is replaced by the defaults (trigger
`赞我`). A user gets 10 likes per request and at most one request per day; if `send_like`
raises `ApiError` the refusal text is sent instead. The list of users liked today is cleared
on load when the stored day differs from the current one, and on every `reset`.

## What the package does not do

It holds no connection to a OneBot server, no event loop, no scheduler and no command-line
program: you supply the transport, feed messages to `CmdPlugin.handle` and `LikePlugin.handle`,
and call `LikePlugin.reset` at midnight yourself.

## Tests

```
pip install -e ".[test]"
pytest
```