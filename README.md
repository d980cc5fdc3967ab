# slacktui

The pieces a Slack client for the terminal is built from: typed Web API
payloads, an async API client, the real-time socket loop, the events that
flow between them, background API jobs and notification text.

## What is inside

| Module | What it gives you |
| --- | --- |
| `slacktui.types` | Dataclasses for Slack API payloads (`Channel`, `Message`, `User`, `SlackFile`, …), each built with `from_dict`, plus `parse_ws_event` for real-time frames |
| `slacktui.events` | The events an application reacts to: `HistoryLoaded`, `ThreadLoaded`, `SearchResultsLoaded`, `ApiError`, `WsPing`, `Tick`, … |
| `slacktui.client` | `SlackClient`, an async Web API client authenticated with a token and a `d` cookie |
| `slacktui.websocket` | `run_websocket`, which keeps a real-time connection open and reconnects with backoff |
| `slacktui.tasks` | Coroutines that call the API and put the result, or an `ApiError`, on an event queue |
| `slacktui.notify` | Text for desktop notifications and image URLs for standard emoji |

## Talking to Slack

The client needs a session token and the value of the `d` cookie from a
signed-in Slack session.

```python
import asyncio

from slacktui.client import Credentials, SlackClient


async def show_channels() -> None:
    credentials = Credentials(token="token", cookie="placeholder")
    async with SlackClient(credentials) as client:
        auth = await client.auth_test()
        print(f"Signed in as {auth.user} on {auth.team}")
        for channel in await client.conversations_list_all():
            print(channel.display_name())


asyncio.run(show_channels())
```

Failures are raised: `SlackApiError` when Slack answers with `ok: false`, an
HTTP error or a body that cannot be parsed, and `RateLimitedError` (with its
`retry_after` seconds) when Slack answers with HTTP 429. `SlackClient` takes
an optional `base_url` and an `httpx` transport, which is handy in tests.

## Real-time updates

`run_websocket` connects through `rtm.connect`, turns each text frame into an
event and puts it on the queue you hand it. A `goodbye` or `error` frame ends
the session; frames of unknown types are logged and skipped. After a clean
close it reconnects a second later; after failures the delay doubles each time,
up to 30 seconds.

Every 30 seconds a `WsPing` event is queued. The loop does not send it by
itself: pass `ping.payload()` to the writer queue carried by `WsWriterReady`,
and it is written to the socket.

```python
import asyncio

from slacktui.events import ApiError, SlackWsEvent, WsPing, WsWriterReady
from slacktui.websocket import run_websocket


async def follow(client) -> None:
    events: asyncio.Queue = asyncio.Queue()
    listener = asyncio.create_task(run_websocket(client, events))
    writer = None
    while True:
        event = await events.get()
        if isinstance(event, WsWriterReady):
            writer = event.writer
        elif isinstance(event, WsPing) and writer is not None:
            writer.put_nowait(event.payload())
        elif isinstance(event, SlackWsEvent):
            print(event.event)
        elif isinstance(event, ApiError):
            print("error:", event.message)
```

## Background jobs

The coroutines in `slacktui.tasks` never raise on API failure; they put an
event on the queue instead, so they can be started with
`asyncio.create_task` and forgotten.

```python
from slacktui import tasks

asyncio.create_task(tasks.load_history(client, "C123", events))        # HistoryLoaded or ApiError
asyncio.create_task(tasks.send_message(client, "C123", "hi", None, events))
filename, data = tasks.read_upload("~/notes.txt")
asyncio.create_task(tasks.upload_file(client, "C123", None, filename, data, events))
```

`mark_read` only logs failures, and `add_reaction` / `remove_reaction` post
an event only when they fail.

## Notifications

```python
from slacktui.notify import (
    notification_channel_label,
    notification_summary,
    truncate_notification,
    twemoji_url,
)

notification_summary("alice", notification_channel_label("general", False))  # "alice in #general"
truncate_notification("x" * 150)  # 97 characters followed by "..."
twemoji_url("👍")                  # ".../72x72/1f44d.png"
```

## What this package does not do

There is no command to run and no terminal screen: nothing draws channels or
messages, reads keys, or edits the message input. It does not find
credentials on its own, does not show desktop notifications (it only formats
their text), and keeps no cache of downloaded images. Those are left to the
application that uses these pieces.

## Running the tests

Install the package with its `test` extra and run pytest from the project
directory.