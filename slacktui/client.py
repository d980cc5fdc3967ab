"""Asynchronous client for the Slack Web API, authenticated with a token and cookie."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

from .types import (
    AuthTestData,
    Channel,
    ChannelSectionsListData,
    ChatPostMessageData,
    ConversationsHistoryData,
    ConversationsListData,
    ConversationsMarkData,
    EmojiListData,
    FilesCompleteUploadData,
    FilesGetUploadURLData,
    ReactionsData,
    RtmConnectData,
    SearchMessagesData,
    UserInfoData,
    UsersListData,
)

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://slack.com/api"
DEFAULT_RETRY_AFTER = 5
ALL_CONVERSATION_TYPES = "public_channel,private_channel,mpim,im"

T = TypeVar("T")


@dataclass(frozen=True)
class Credentials:
    """A user token together with the session cookie ("d") that goes with it."""

    token: str
    cookie: str


class SlackApiError(Exception):
    """Raised when a Slack API call fails or returns something unusable."""


class RateLimitedError(SlackApiError):
    """Raised when Slack answers with HTTP 429."""

    def __init__(self, retry_after: int) -> None:
        super().__init__(f"Rate limited, retry after {retry_after}s")
        self.retry_after = retry_after


def _status_text(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


def _retry_after(response: httpx.Response) -> int:
    value = response.headers.get("retry-after")
    if value is not None and value.isascii() and value.isdigit():
        return int(value)
    return DEFAULT_RETRY_AFTER


class SlackClient:
    """Calls Slack Web API methods and downloads files with cookie authentication."""

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = credentials.token
        self.cookie = credentials.cookie
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            headers={"Cookie": f"d={credentials.cookie}"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> SlackClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _post(
        self,
        method: str,
        params: Mapping[str, str],
        parse: Callable[[Any], T],
    ) -> T:
        form = {"token": self.token, **params}
        response = await self._http.post(f"{self.base_url}/{method}", data=form)

        if response.status_code == 429:
            raise RateLimitedError(_retry_after(response))
        if not response.is_success:
            raise SlackApiError(f"HTTP {_status_text(response)} from {method}")

        body = response.text
        try:
            payload = json.loads(body)
            if not isinstance(payload, dict):
                raise ValueError("response is not an object")
            ok = payload.get("ok")
            if not isinstance(ok, bool):
                raise ValueError("missing or invalid field 'ok'")
            error = payload.get("error")
            if error is not None and not isinstance(error, str):
                raise ValueError("field 'error': expected a string")
            data = parse(payload)
        except ValueError as exc:
            raise SlackApiError(
                f"Failed to parse {method} response: {exc}\nBody: {body[:500]}"
            ) from exc

        if not ok:
            raise SlackApiError(f"Slack API error from {method}: {error or 'unknown'}")
        return data

    # ── API methods ─────────────────────────────────────────────────────────

    async def auth_test(self) -> AuthTestData:
        return await self._post("auth.test", {}, AuthTestData.from_dict)

    async def conversations_list(
        self, types: str, cursor: str | None = None, limit: int = 200
    ) -> ConversationsListData:
        params = {"types": types, "limit": str(limit), "exclude_archived": "true"}
        if cursor is not None:
            params["cursor"] = cursor
        return await self._post("conversations.list", params, ConversationsListData.from_dict)

    async def conversations_list_all(self) -> list[Channel]:
        """Fetch every conversation the user belongs to, following page cursors."""
        channels: list[Channel] = []
        cursor: str | None = None
        while True:
            data = await self.conversations_list(ALL_CONVERSATION_TYPES, cursor, 200)
            channels.extend(data.channels)
            meta = data.response_metadata
            cursor = meta.next_cursor if meta is not None else None
            if not cursor:
                return channels

    async def conversations_history(
        self,
        channel: str,
        limit: int = 50,
        oldest: str | None = None,
        latest: str | None = None,
    ) -> ConversationsHistoryData:
        params = {"channel": channel, "limit": str(limit)}
        if oldest is not None:
            params["oldest"] = oldest
        if latest is not None:
            params["latest"] = latest
        return await self._post(
            "conversations.history", params, ConversationsHistoryData.from_dict
        )

    async def conversations_replies(
        self, channel: str, thread_ts: str, limit: int = 100
    ) -> ConversationsHistoryData:
        params = {"channel": channel, "ts": thread_ts, "limit": str(limit)}
        return await self._post(
            "conversations.replies", params, ConversationsHistoryData.from_dict
        )

    async def conversations_mark(self, channel: str, ts: str) -> ConversationsMarkData:
        return await self._post(
            "conversations.mark",
            {"channel": channel, "ts": ts},
            ConversationsMarkData.from_dict,
        )

    async def chat_post_message(
        self, channel: str, text: str, thread_ts: str | None = None
    ) -> ChatPostMessageData:
        params = {"channel": channel, "text": text}
        if thread_ts is not None:
            params["thread_ts"] = thread_ts
        return await self._post("chat.postMessage", params, ChatPostMessageData.from_dict)

    async def reactions_add(self, channel: str, timestamp: str, name: str) -> ReactionsData:
        return await self._post(
            "reactions.add",
            {"channel": channel, "timestamp": timestamp, "name": name},
            ReactionsData.from_dict,
        )

    async def reactions_remove(self, channel: str, timestamp: str, name: str) -> ReactionsData:
        return await self._post(
            "reactions.remove",
            {"channel": channel, "timestamp": timestamp, "name": name},
            ReactionsData.from_dict,
        )

    async def users_list(self, cursor: str | None = None, limit: int = 200) -> UsersListData:
        params = {"limit": str(limit)}
        if cursor is not None:
            params["cursor"] = cursor
        return await self._post("users.list", params, UsersListData.from_dict)

    async def users_info(self, user_id: str) -> UserInfoData:
        return await self._post("users.info", {"user": user_id}, UserInfoData.from_dict)

    async def rtm_connect(self) -> RtmConnectData:
        return await self._post("rtm.connect", {}, RtmConnectData.from_dict)

    async def emoji_list(self) -> EmojiListData:
        return await self._post("emoji.list", {}, EmojiListData.from_dict)

    async def channel_sections_list(self) -> ChannelSectionsListData:
        """Fetch the user's sidebar sections (an undocumented method)."""
        return await self._post(
            "users.channelSections.list", {}, ChannelSectionsListData.from_dict
        )

    async def search_messages(
        self, query: str, page: int = 1, count: int = 20
    ) -> SearchMessagesData:
        params = {
            "query": query,
            "page": str(page),
            "count": str(count),
            "sort": "timestamp",
            "sort_dir": "desc",
        }
        return await self._post("search.messages", params, SearchMessagesData.from_dict)

    async def files_get_upload_url(self, filename: str, length: int) -> FilesGetUploadURLData:
        return await self._post(
            "files.getUploadURLExternal",
            {"filename": filename, "length": str(length)},
            FilesGetUploadURLData.from_dict,
        )

    async def files_complete_upload(
        self, file_id: str, channel_id: str, thread_ts: str | None = None
    ) -> FilesCompleteUploadData:
        files_json = json.dumps([{"id": file_id}], separators=(",", ":"))
        params = {"files": files_json, "channel_id": channel_id}
        if thread_ts is not None:
            params["thread_ts"] = thread_ts
        return await self._post(
            "files.completeUploadExternal", params, FilesCompleteUploadData.from_dict
        )

    async def files_upload(
        self, channel: str, thread_ts: str | None, filename: str, data: bytes
    ) -> FilesCompleteUploadData:
        """Upload a file in three steps: reserve a URL, send the bytes, share it."""
        target = await self.files_get_upload_url(filename, len(data))
        response = await self._http.post(target.upload_url, content=bytes(data))
        if not response.is_success:
            raise SlackApiError(f"HTTP {_status_text(response)} uploading file")
        return await self.files_complete_upload(target.file_id, channel, thread_ts)

    async def download_file(self, url: str) -> bytes:
        """Download a private file URL using the session cookie."""
        response = await self._http.get(url)
        if not response.is_success:
            raise SlackApiError(f"HTTP {_status_text(response)} downloading {url}")
        return response.content