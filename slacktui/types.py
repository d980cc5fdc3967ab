"""Data types for Slack Web API responses and real-time events."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union


class UnknownWsEvent(ValueError):
    """Raised when a real-time frame has no type or one that is not understood."""


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what}: expected an object, got {type(data).__name__}")
    return data


def _opt_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r}: expected a string")
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    value = _opt_str(data, key)
    return "" if value is None else value


def _required_str(data: Mapping[str, Any], key: str, what: str) -> str:
    value = _opt_str(data, key)
    if value is None:
        raise ValueError(f"{what}: missing field {key!r}")
    return value


def _opt_int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r}: expected an integer")
    return value


def _int(data: Mapping[str, Any], key: str) -> int:
    value = _opt_int(data, key)
    return 0 if value is None else value


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r}: expected a boolean")
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r}: expected a list")
    return value


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    items = _list(data, key)
    if not all(isinstance(item, str) for item in items):
        raise ValueError(f"field {key!r}: expected a list of strings")
    return list(items)


def _nested(data: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    return _mapping(value, key)


# ── Channels ────────────────────────────────────────────────────────────────


@dataclass
class TopicOrPurpose:
    value: str

    @classmethod
    def from_dict(cls, data: Any) -> TopicOrPurpose:
        data = _mapping(data, "topic")
        return cls(value=_required_str(data, "value", "topic"))


@dataclass
class Channel:
    id: str
    name: str | None = None
    is_channel: bool = False
    is_im: bool = False
    is_mpim: bool = False
    is_private: bool = False
    is_member: bool = False
    user: str | None = None
    topic: TopicOrPurpose | None = None
    purpose: TopicOrPurpose | None = None
    last_read: str | None = None
    unread_count: int = 0
    unread_count_display: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> Channel:
        data = _mapping(data, "channel")
        topic = _nested(data, "topic")
        purpose = _nested(data, "purpose")
        return cls(
            id=_required_str(data, "id", "channel"),
            name=_opt_str(data, "name"),
            is_channel=_bool(data, "is_channel"),
            is_im=_bool(data, "is_im"),
            is_mpim=_bool(data, "is_mpim"),
            is_private=_bool(data, "is_private"),
            is_member=_bool(data, "is_member"),
            user=_opt_str(data, "user"),
            topic=TopicOrPurpose.from_dict(topic) if topic is not None else None,
            purpose=TopicOrPurpose.from_dict(purpose) if purpose is not None else None,
            last_read=_opt_str(data, "last_read"),
            unread_count=_int(data, "unread_count"),
            unread_count_display=_int(data, "unread_count_display"),
        )

    def display_name(self) -> str:
        """The channel name, or "unknown" when it has none."""
        return self.name if self.name is not None else "unknown"


# ── Messages ────────────────────────────────────────────────────────────────


@dataclass
class Reaction:
    name: str
    count: int = 0
    users: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Reaction:
        data = _mapping(data, "reaction")
        return cls(
            name=_required_str(data, "name", "reaction"),
            count=_int(data, "count"),
            users=_str_list(data, "users"),
        )


@dataclass
class Edited:
    user: str | None = None
    ts: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Edited:
        data = _mapping(data, "edited")
        return cls(user=_opt_str(data, "user"), ts=_opt_str(data, "ts"))


@dataclass
class SlackFile:
    id: str = ""
    name: str = ""
    mimetype: str | None = None
    filetype: str | None = None
    url_private: str | None = None
    thumb_360: str | None = None
    thumb_480: str | None = None
    thumb_160: str | None = None
    thumb_360_w: int = 0
    thumb_360_h: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> SlackFile:
        data = _mapping(data, "file")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            mimetype=_opt_str(data, "mimetype"),
            filetype=_opt_str(data, "filetype"),
            url_private=_opt_str(data, "url_private"),
            thumb_360=_opt_str(data, "thumb_360"),
            thumb_480=_opt_str(data, "thumb_480"),
            thumb_160=_opt_str(data, "thumb_160"),
            thumb_360_w=_int(data, "thumb_360_w"),
            thumb_360_h=_int(data, "thumb_360_h"),
        )

    def best_thumb_url(self) -> str | None:
        """The largest thumbnail available: 480, then 360, then 160."""
        for url in (self.thumb_480, self.thumb_360, self.thumb_160):
            if url is not None:
                return url
        return None

    def is_image(self) -> bool:
        return self.mimetype is not None and self.mimetype.startswith("image/")


@dataclass
class Message:
    user: str | None = None
    text: str = ""
    ts: str = ""
    thread_ts: str | None = None
    reply_count: int | None = None
    reactions: list[Reaction] = field(default_factory=list)
    edited: Edited | None = None
    subtype: str | None = None
    bot_id: str | None = None
    username: str | None = None
    files: list[SlackFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Message:
        data = _mapping(data, "message")
        edited = _nested(data, "edited")
        return cls(
            user=_opt_str(data, "user"),
            text=_str(data, "text"),
            ts=_str(data, "ts"),
            thread_ts=_opt_str(data, "thread_ts"),
            reply_count=_opt_int(data, "reply_count"),
            reactions=[Reaction.from_dict(r) for r in _list(data, "reactions")],
            edited=Edited.from_dict(edited) if edited is not None else None,
            subtype=_opt_str(data, "subtype"),
            bot_id=_opt_str(data, "bot_id"),
            username=_opt_str(data, "username"),
            files=[SlackFile.from_dict(f) for f in _list(data, "files")],
        )


# ── Users ───────────────────────────────────────────────────────────────────


@dataclass
class UserProfile:
    display_name: str | None = None
    real_name: str | None = None
    image_48: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UserProfile:
        data = _mapping(data, "profile")
        return cls(
            display_name=_opt_str(data, "display_name"),
            real_name=_opt_str(data, "real_name"),
            image_48=_opt_str(data, "image_48"),
        )


@dataclass
class User:
    id: str
    name: str = ""
    real_name: str | None = None
    profile: UserProfile | None = None
    is_bot: bool = False
    deleted: bool = False
    color: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> User:
        data = _mapping(data, "user")
        profile = _nested(data, "profile")
        return cls(
            id=_required_str(data, "id", "user"),
            name=_str(data, "name"),
            real_name=_opt_str(data, "real_name"),
            profile=UserProfile.from_dict(profile) if profile is not None else None,
            is_bot=_bool(data, "is_bot"),
            deleted=_bool(data, "deleted"),
            color=_opt_str(data, "color"),
        )

    def display_name(self) -> str:
        """Profile display name if set and non-empty, else real name, else handle."""
        if self.profile is not None and self.profile.display_name:
            return self.profile.display_name
        if self.real_name is not None:
            return self.real_name
        return self.name


# ── Shared ──────────────────────────────────────────────────────────────────


@dataclass
class ResponseMetadata:
    next_cursor: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ResponseMetadata:
        data = _mapping(data, "response_metadata")
        return cls(next_cursor=_opt_str(data, "next_cursor"))


def _metadata(data: Mapping[str, Any]) -> ResponseMetadata | None:
    meta = _nested(data, "response_metadata")
    return ResponseMetadata.from_dict(meta) if meta is not None else None


# ── API method payloads ─────────────────────────────────────────────────────


@dataclass
class AuthTestData:
    user_id: str = ""
    user: str = ""
    team_id: str = ""
    team: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> AuthTestData:
        data = _mapping(data, "auth.test")
        return cls(
            user_id=_str(data, "user_id"),
            user=_str(data, "user"),
            team_id=_str(data, "team_id"),
            team=_str(data, "team"),
            url=_str(data, "url"),
        )


@dataclass
class ConversationsListData:
    channels: list[Channel] = field(default_factory=list)
    response_metadata: ResponseMetadata | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ConversationsListData:
        data = _mapping(data, "conversations.list")
        return cls(
            channels=[Channel.from_dict(c) for c in _list(data, "channels")],
            response_metadata=_metadata(data),
        )


@dataclass
class ConversationsHistoryData:
    messages: list[Message] = field(default_factory=list)
    has_more: bool = False
    response_metadata: ResponseMetadata | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ConversationsHistoryData:
        data = _mapping(data, "conversations.history")
        return cls(
            messages=[Message.from_dict(m) for m in _list(data, "messages")],
            has_more=_bool(data, "has_more"),
            response_metadata=_metadata(data),
        )


@dataclass
class UsersListData:
    members: list[User] = field(default_factory=list)
    response_metadata: ResponseMetadata | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UsersListData:
        data = _mapping(data, "users.list")
        return cls(
            members=[User.from_dict(u) for u in _list(data, "members")],
            response_metadata=_metadata(data),
        )


@dataclass
class UserInfoData:
    user: User | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UserInfoData:
        data = _mapping(data, "users.info")
        user = _nested(data, "user")
        return cls(user=User.from_dict(user) if user is not None else None)


@dataclass
class RtmSelf:
    id: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> RtmSelf:
        data = _mapping(data, "self")
        return cls(id=_str(data, "id"), name=_str(data, "name"))


@dataclass
class RtmTeam:
    id: str = ""
    name: str = ""
    domain: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> RtmTeam:
        data = _mapping(data, "team")
        return cls(id=_str(data, "id"), name=_str(data, "name"), domain=_str(data, "domain"))


@dataclass
class RtmConnectData:
    url: str = ""
    self_info: RtmSelf = field(default_factory=RtmSelf)
    team: RtmTeam = field(default_factory=RtmTeam)

    @classmethod
    def from_dict(cls, data: Any) -> RtmConnectData:
        data = _mapping(data, "rtm.connect")
        self_info = _nested(data, "self")
        team = _nested(data, "team")
        return cls(
            url=_str(data, "url"),
            self_info=RtmSelf.from_dict(self_info) if self_info is not None else RtmSelf(),
            team=RtmTeam.from_dict(team) if team is not None else RtmTeam(),
        )


@dataclass
class ChatPostMessageData:
    ts: str | None = None
    channel: str | None = None
    message: Message | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ChatPostMessageData:
        data = _mapping(data, "chat.postMessage")
        message = _nested(data, "message")
        return cls(
            ts=_opt_str(data, "ts"),
            channel=_opt_str(data, "channel"),
            message=Message.from_dict(message) if message is not None else None,
        )


@dataclass
class ReactionsData:
    @classmethod
    def from_dict(cls, data: Any) -> ReactionsData:
        _mapping(data, "reactions")
        return cls()


@dataclass
class ConversationsMarkData:
    @classmethod
    def from_dict(cls, data: Any) -> ConversationsMarkData:
        _mapping(data, "conversations.mark")
        return cls()


@dataclass
class FilesGetUploadURLData:
    upload_url: str = ""
    file_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> FilesGetUploadURLData:
        data = _mapping(data, "files.getUploadURLExternal")
        return cls(upload_url=_str(data, "upload_url"), file_id=_str(data, "file_id"))


@dataclass
class FilesCompleteUploadData:
    files: list[SlackFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> FilesCompleteUploadData:
        data = _mapping(data, "files.completeUploadExternal")
        return cls(files=[SlackFile.from_dict(f) for f in _list(data, "files")])


@dataclass
class EmojiListData:
    # name -> image URL, or "alias:<target>"
    emoji: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> EmojiListData:
        data = _mapping(data, "emoji.list")
        emoji = _nested(data, "emoji") or {}
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in emoji.items()):
            raise ValueError("field 'emoji': expected a map of strings")
        return cls(emoji=dict(emoji))


@dataclass
class ChannelSection:
    channel_section_id: str = ""
    name: str = ""
    emoji: str = ""
    channel_ids: list[str] = field(default_factory=list)
    is_collapsed: bool = False
    sort_order: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ChannelSection:
        data = _mapping(data, "channel_section")
        page = _nested(data, "channel_ids_page") or {}
        return cls(
            channel_section_id=_str(data, "channel_section_id"),
            name=_str(data, "name"),
            emoji=_str(data, "emoji"),
            channel_ids=_str_list(page, "channel_ids"),
            is_collapsed=_bool(data, "is_collapsed"),
            sort_order=_int(data, "sort_order"),
        )


@dataclass
class ChannelSectionsListData:
    channel_sections: list[ChannelSection] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ChannelSectionsListData:
        data = _mapping(data, "users.channelSections.list")
        return cls(
            channel_sections=[
                ChannelSection.from_dict(s) for s in _list(data, "channel_sections")
            ]
        )


# ── search.messages ─────────────────────────────────────────────────────────


@dataclass
class SearchChannel:
    id: str
    name: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SearchChannel:
        data = _mapping(data, "search channel")
        return cls(id=_required_str(data, "id", "search channel"), name=_opt_str(data, "name"))


@dataclass
class SearchMatch:
    text: str
    ts: str
    user: str | None = None
    username: str | None = None
    channel: SearchChannel | None = None
    permalink: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SearchMatch:
        data = _mapping(data, "search match")
        channel = _nested(data, "channel")
        return cls(
            text=_required_str(data, "text", "search match"),
            ts=_required_str(data, "ts", "search match"),
            user=_opt_str(data, "user"),
            username=_opt_str(data, "username"),
            channel=SearchChannel.from_dict(channel) if channel is not None else None,
            permalink=_opt_str(data, "permalink"),
        )


@dataclass
class SearchPaging:
    count: int | None = None
    total: int | None = None
    page: int | None = None
    pages: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SearchPaging:
        data = _mapping(data, "paging")
        return cls(
            count=_opt_int(data, "count"),
            total=_opt_int(data, "total"),
            page=_opt_int(data, "page"),
            pages=_opt_int(data, "pages"),
        )


@dataclass
class SearchMessages:
    matches: list[SearchMatch] = field(default_factory=list)
    paging: SearchPaging | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SearchMessages:
        data = _mapping(data, "search messages")
        paging = _nested(data, "paging")
        return cls(
            matches=[SearchMatch.from_dict(m) for m in _list(data, "matches")],
            paging=SearchPaging.from_dict(paging) if paging is not None else None,
        )


@dataclass
class SearchMessagesData:
    messages: SearchMessages = field(default_factory=SearchMessages)

    @classmethod
    def from_dict(cls, data: Any) -> SearchMessagesData:
        data = _mapping(data, "search.messages")
        messages = _nested(data, "messages")
        return cls(
            messages=SearchMessages.from_dict(messages)
            if messages is not None
            else SearchMessages()
        )


# ── Real-time events ────────────────────────────────────────────────────────


@dataclass
class WsHello:
    """The server greeting sent once a connection is established."""


@dataclass
class WsGoodbye:
    """The server's notice that it is about to close the connection."""


@dataclass
class WsMessage:
    channel: str | None = None
    user: str | None = None
    text: str = ""
    ts: str = ""
    thread_ts: str | None = None
    subtype: str | None = None
    # Set on message_changed / message_deleted subtypes.
    message: WsMessage | None = None
    previous_message: WsMessage | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsMessage:
        data = _mapping(data, "message event")
        message = _nested(data, "message")
        previous = _nested(data, "previous_message")
        return cls(
            channel=_opt_str(data, "channel"),
            user=_opt_str(data, "user"),
            text=_str(data, "text"),
            ts=_str(data, "ts"),
            thread_ts=_opt_str(data, "thread_ts"),
            subtype=_opt_str(data, "subtype"),
            message=WsMessage.from_dict(message) if message is not None else None,
            previous_message=WsMessage.from_dict(previous) if previous is not None else None,
        )


@dataclass
class WsReactionItem:
    channel: str | None = None
    ts: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsReactionItem:
        data = _mapping(data, "reaction item")
        return cls(channel=_opt_str(data, "channel"), ts=_opt_str(data, "ts"))


@dataclass
class WsReaction:
    user: str | None = None
    reaction: str | None = None
    item: WsReactionItem | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsReaction:
        data = _mapping(data, "reaction event")
        item = _nested(data, "item")
        return cls(
            user=_opt_str(data, "user"),
            reaction=_opt_str(data, "reaction"),
            item=WsReactionItem.from_dict(item) if item is not None else None,
        )


@dataclass
class WsReactionAdded(WsReaction):
    """A reaction_added event."""


@dataclass
class WsReactionRemoved(WsReaction):
    """A reaction_removed event."""


@dataclass
class WsChannelMarked:
    channel: str | None = None
    ts: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsChannelMarked:
        data = _mapping(data, "channel_marked event")
        return cls(channel=_opt_str(data, "channel"), ts=_opt_str(data, "ts"))


@dataclass
class WsUserTyping:
    channel: str | None = None
    user: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsUserTyping:
        data = _mapping(data, "user_typing event")
        return cls(channel=_opt_str(data, "channel"), user=_opt_str(data, "user"))


@dataclass
class WsPresenceChange:
    user: str | None = None
    presence: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsPresenceChange:
        data = _mapping(data, "presence_change event")
        return cls(user=_opt_str(data, "user"), presence=_opt_str(data, "presence"))


@dataclass
class WsErrorDetail:
    msg: str | None = None
    code: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsErrorDetail:
        data = _mapping(data, "error detail")
        return cls(msg=_opt_str(data, "msg"), code=_opt_int(data, "code"))


@dataclass
class WsError:
    error: WsErrorDetail | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WsError:
        data = _mapping(data, "error event")
        detail = _nested(data, "error")
        return cls(error=WsErrorDetail.from_dict(detail) if detail is not None else None)


WsEvent = Union[
    WsHello,
    WsGoodbye,
    WsMessage,
    WsReactionAdded,
    WsReactionRemoved,
    WsChannelMarked,
    WsUserTyping,
    WsPresenceChange,
    WsError,
]

_WS_EVENT_TYPES: dict[str, type] = {
    "hello": WsHello,
    "goodbye": WsGoodbye,
    "message": WsMessage,
    "reaction_added": WsReactionAdded,
    "reaction_removed": WsReactionRemoved,
    "channel_marked": WsChannelMarked,
    "user_typing": WsUserTyping,
    "presence_change": WsPresenceChange,
    "error": WsError,
}


def parse_ws_event(data: Any) -> WsEvent:
    """Build a real-time event from a decoded frame or its JSON text.

    Raises UnknownWsEvent when the frame's "type" is missing or not recognised.
    """
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    data = _mapping(data, "event")
    kind = data.get("type")
    if kind is None:
        raise UnknownWsEvent("event has no 'type' field")
    event_cls = _WS_EVENT_TYPES.get(kind) if isinstance(kind, str) else None
    if event_cls is None:
        raise UnknownWsEvent(f"unknown event type {kind!r}")
    if event_cls in (WsHello, WsGoodbye):
        return event_cls()
    return event_cls.from_dict(data)