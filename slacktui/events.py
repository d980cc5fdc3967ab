"""Events delivered to the application's main loop."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field

from .types import Channel, ChannelSection, Message, SearchMatch, User, WsEvent


@dataclass(frozen=True)
class Event:
    """Base class of everything sent through the event queue."""


# ── Terminal ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Resize(Event):
    width: int
    height: int


# ── Slack real-time ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SlackConnected(Event):
    self_id: str
    team: str


@dataclass(frozen=True)
class SlackDisconnected(Event):
    pass


@dataclass(frozen=True)
class SlackWsEvent(Event):
    event: WsEvent


# ── WebSocket plumbing ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class WsPing(Event):
    id: int

    def payload(self) -> str:
        """The JSON text of the ping frame to send to the server."""
        return json.dumps({"id": self.id, "type": "ping"}, separators=(",", ":"))


@dataclass(frozen=True)
class WsWriterReady(Event):
    """Carries the queue whose strings are written out on the open socket."""

    writer: asyncio.Queue


# ── API results ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChannelsLoaded(Event):
    channels: list[Channel]


@dataclass(frozen=True)
class HistoryLoaded(Event):
    channel_id: str
    messages: list[Message]
    has_more: bool


@dataclass(frozen=True)
class OlderHistoryLoaded(Event):
    channel_id: str
    messages: list[Message]
    has_more: bool


@dataclass(frozen=True)
class ThreadLoaded(Event):
    channel_id: str
    thread_ts: str
    messages: list[Message]


@dataclass(frozen=True)
class UsersLoaded(Event):
    users: list[User]


@dataclass(frozen=True)
class MessageSent(Event):
    channel_id: str
    ts: str


@dataclass(frozen=True)
class ChannelMarked(Event):
    channel_id: str


@dataclass(frozen=True)
class ImageLoaded(Event):
    url: str
    png_data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class CustomEmojiLoaded(Event):
    emoji: dict[str, str]


@dataclass(frozen=True)
class StandardEmojiLoaded(Event):
    emoji: dict[str, str]


@dataclass(frozen=True)
class ChannelSectionsLoaded(Event):
    sections: list[ChannelSection]


@dataclass(frozen=True)
class CustomEmojiImageLoaded(Event):
    name: str
    png_data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class CustomEmojiImageFailed(Event):
    name: str


@dataclass(frozen=True)
class AvatarImageLoaded(Event):
    user_id: str
    png_data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class AvatarImageFailed(Event):
    user_id: str


@dataclass(frozen=True)
class FileUploaded(Event):
    channel_id: str
    filename: str


@dataclass(frozen=True)
class ApiError(Event):
    message: str


@dataclass(frozen=True)
class SearchResultsLoaded(Event):
    query: str
    matches: list[SearchMatch]
    total: int


@dataclass(frozen=True)
class EmojiPreviewImageLoaded(Event):
    """Decoded preview frames; each frame is a list of RGBA pixels."""

    frames: list[list[tuple[int, int, int, int]]] = field(default_factory=list)
    frame_delays: list[int] = field(default_factory=list)
    width: int = 0
    height: int = 0


# ── Internal ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Tick(Event):
    pass