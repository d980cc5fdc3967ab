"""Background API calls whose results are posted to the event queue."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from .events import (
    ApiError,
    ChannelMarked,
    FileUploaded,
    HistoryLoaded,
    MessageSent,
    OlderHistoryLoaded,
    SearchResultsLoaded,
    ThreadLoaded,
)

log = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 50
THREAD_PAGE_SIZE = 100
SEARCH_PAGE = 1
SEARCH_PAGE_SIZE = 20


async def load_history(client: Any, channel_id: str, events: asyncio.Queue) -> None:
    """Fetch the latest page of a channel's history."""
    try:
        data = await client.conversations_history(channel_id, HISTORY_PAGE_SIZE, None, None)
    except Exception as exc:
        log.error("Failed to load history: %s", exc)
        events.put_nowait(ApiError(f"History: {exc}"))
        return
    events.put_nowait(
        HistoryLoaded(channel_id=channel_id, messages=data.messages, has_more=data.has_more)
    )


async def load_older_history(
    client: Any, channel_id: str, oldest_ts: str, events: asyncio.Queue
) -> None:
    """Fetch the page of history that comes before ``oldest_ts``."""
    try:
        data = await client.conversations_history(
            channel_id, HISTORY_PAGE_SIZE, None, oldest_ts
        )
    except Exception as exc:
        log.error("Failed to load older history: %s", exc)
        events.put_nowait(ApiError(f"Older history: {exc}"))
        return
    events.put_nowait(
        OlderHistoryLoaded(
            channel_id=channel_id, messages=data.messages, has_more=data.has_more
        )
    )


async def load_thread(
    client: Any, channel_id: str, thread_ts: str, events: asyncio.Queue
) -> None:
    """Fetch the replies of a thread."""
    try:
        data = await client.conversations_replies(channel_id, thread_ts, THREAD_PAGE_SIZE)
    except Exception as exc:
        log.error("Failed to load thread: %s", exc)
        events.put_nowait(ApiError(f"Thread: {exc}"))
        return
    events.put_nowait(
        ThreadLoaded(channel_id=channel_id, thread_ts=thread_ts, messages=data.messages)
    )


async def send_message(
    client: Any,
    channel_id: str,
    text: str,
    thread_ts: str | None,
    events: asyncio.Queue,
) -> None:
    """Post a message, optionally as a thread reply."""
    try:
        data = await client.chat_post_message(channel_id, text, thread_ts)
    except Exception as exc:
        log.error("Failed to send message: %s", exc)
        events.put_nowait(ApiError(f"Send: {exc}"))
        return
    events.put_nowait(MessageSent(channel_id=channel_id, ts=data.ts or ""))


async def mark_read(client: Any, channel_id: str, ts: str, events: asyncio.Queue) -> None:
    """Move the channel's read marker to ``ts``; failures are only logged."""
    try:
        await client.conversations_mark(channel_id, ts)
    except Exception as exc:
        log.error("Failed to mark channel: %s", exc)
        return
    events.put_nowait(ChannelMarked(channel_id=channel_id))


async def search_messages(client: Any, query: str, events: asyncio.Queue) -> None:
    """Run a workspace-wide message search, newest first."""
    try:
        data = await client.search_messages(query, SEARCH_PAGE, SEARCH_PAGE_SIZE)
    except Exception as exc:
        log.error("Search failed: %s", exc)
        events.put_nowait(ApiError(f"Search: {exc}"))
        return
    paging = data.messages.paging
    total = paging.total if paging is not None and paging.total is not None else 0
    events.put_nowait(
        SearchResultsLoaded(query=query, matches=data.messages.matches, total=total)
    )


async def add_reaction(
    client: Any, channel_id: str, ts: str, emoji: str, events: asyncio.Queue
) -> None:
    """Add a reaction; only a failure produces an event."""
    try:
        await client.reactions_add(channel_id, ts, emoji)
    except Exception as exc:
        log.error("Failed to add reaction: %s", exc)
        events.put_nowait(ApiError(f"Reaction: {exc}"))


async def remove_reaction(
    client: Any, channel_id: str, ts: str, emoji: str, events: asyncio.Queue
) -> None:
    """Remove a reaction; only a failure produces an event."""
    try:
        await client.reactions_remove(channel_id, ts, emoji)
    except Exception as exc:
        log.error("Failed to remove reaction: %s", exc)
        events.put_nowait(ApiError(f"Reaction remove: {exc}"))


def read_upload(raw_path: str) -> tuple[str, bytes]:
    """Read a file named by the user, expanding a leading ``~``.

    Returns the file name and its contents. Raises ValueError for a blank
    path and OSError when the file cannot be read.
    """
    trimmed = raw_path.strip()
    if not trimmed:
        raise ValueError("no file path given")
    path = Path(os.path.expanduser(trimmed))
    data = path.read_bytes()
    return path.name or "file", data


async def upload_file(
    client: Any,
    channel_id: str,
    thread_ts: str | None,
    filename: str,
    data: bytes,
    events: asyncio.Queue,
) -> None:
    """Upload a file to a channel or thread."""
    try:
        await client.files_upload(channel_id, thread_ts, filename, data)
    except Exception as exc:
        log.error("Failed to upload file: %s", exc)
        events.put_nowait(ApiError(f"Upload: {exc}"))
        return
    events.put_nowait(FileUploaded(channel_id=channel_id, filename=filename))