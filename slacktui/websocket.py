"""Real-time connection: reads Slack events and writes outgoing frames."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed

from .events import (
    ApiError,
    SlackConnected,
    SlackDisconnected,
    SlackWsEvent,
    WsPing,
    WsWriterReady,
)
from .types import UnknownWsEvent, WsError, WsGoodbye, parse_ws_event

log = logging.getLogger(__name__)

PING_INTERVAL = 30.0
MAX_BACKOFF = 30


def next_backoff(seconds: int) -> int:
    """Double the reconnect delay, capped at thirty seconds."""
    return min(seconds * 2, MAX_BACKOFF)


def dispatch_frame(text: str, events: asyncio.Queue) -> bool:
    """Turn one text frame into queued events; return False when reading should stop."""
    try:
        event = parse_ws_event(text)
    except (UnknownWsEvent, ValueError) as exc:
        log.warning("Unknown WS event: %s (raw: %s)", exc, text[:200])
        return True

    if isinstance(event, WsGoodbye):
        log.info("Received goodbye, reconnecting...")
        return False
    if isinstance(event, WsError):
        detail = event.error
        message = detail.msg if detail is not None and detail.msg is not None else "unknown"
        log.error("WebSocket error from Slack: %s", message)
        events.put_nowait(ApiError(f"WS: {message}"))
        return False

    events.put_nowait(SlackWsEvent(event))
    return True


async def _send_pings(events: asyncio.Queue) -> None:
    ping_id = 1
    while True:
        events.put_nowait(WsPing(ping_id))
        ping_id += 1
        await asyncio.sleep(PING_INTERVAL)


async def _forward_writes(connection: Any, writer: asyncio.Queue) -> None:
    while True:
        text = await writer.get()
        try:
            await connection.send(text)
        except ConnectionClosed:
            return


async def connect_and_run(client: Any, events: asyncio.Queue) -> None:
    """Open one real-time session and pump its events until it ends."""
    rtm = await client.rtm_connect()
    log.info("RTM connected, url obtained")

    headers = {"Cookie": f"d={client.cookie}"}
    async with ws_connect(rtm.url, additional_headers=headers) as connection:
        events.put_nowait(SlackConnected(self_id=rtm.self_info.id, team=rtm.team.name))

        writer: asyncio.Queue = asyncio.Queue()
        ping_task = asyncio.create_task(_send_pings(events))
        write_task = asyncio.create_task(_forward_writes(connection, writer))
        events.put_nowait(WsWriterReady(writer))

        try:
            async for frame in connection:
                if isinstance(frame, str) and not dispatch_frame(frame, events):
                    break
            else:
                log.info("WebSocket close frame received")
        except ConnectionClosed as exc:
            log.error("WebSocket read error: %s", exc)
        finally:
            for task in (ping_task, write_task):
                task.cancel()
            for task in (ping_task, write_task):
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    events.put_nowait(SlackDisconnected())


async def run_websocket(client: Any, events: asyncio.Queue) -> None:
    """Keep a real-time session open forever, reconnecting with backoff."""
    backoff = 1
    while True:
        try:
            await connect_and_run(client, events)
        except Exception as exc:
            log.error("WebSocket error: %s", exc)
            events.put_nowait(SlackDisconnected())
        else:
            log.info("WebSocket closed cleanly, reconnecting...")
            backoff = 1

        log.info("Reconnecting in %ss...", backoff)
        await asyncio.sleep(backoff)
        backoff = next_backoff(backoff)