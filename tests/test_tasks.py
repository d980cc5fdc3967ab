import asyncio

import pytest

from slacktui import tasks
from slacktui.client import SlackApiError
from slacktui.events import (
    ApiError,
    ChannelMarked,
    FileUploaded,
    HistoryLoaded,
    MessageSent,
    OlderHistoryLoaded,
    SearchResultsLoaded,
    ThreadLoaded,
)
from slacktui.types import (
    ChatPostMessageData,
    ConversationsHistoryData,
    ConversationsMarkData,
    FilesCompleteUploadData,
    Message,
    ReactionsData,
    SearchMatch,
    SearchMessages,
    SearchMessagesData,
    SearchPaging,
)


class FakeClient:
    def __init__(self, fail=None, post_ts="1.5", paging=None):
        self.calls = []
        self.fail = fail
        self.post_ts = post_ts
        self.paging = paging

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.fail is not None:
            raise SlackApiError(self.fail)

    async def conversations_history(self, channel, limit, oldest, latest):
        self._record("history", channel, limit, oldest, latest)
        return ConversationsHistoryData(messages=[Message(text="hi", ts="1.0")], has_more=True)

    async def conversations_replies(self, channel, thread_ts, limit):
        self._record("replies", channel, thread_ts, limit)
        return ConversationsHistoryData(messages=[Message(text="reply", ts="2.0")])

    async def chat_post_message(self, channel, text, thread_ts):
        self._record("post", channel, text, thread_ts)
        return ChatPostMessageData(ts=self.post_ts)

    async def conversations_mark(self, channel, ts):
        self._record("mark", channel, ts)
        return ConversationsMarkData()

    async def search_messages(self, query, page, count):
        self._record("search", query, page, count)
        return SearchMessagesData(
            messages=SearchMessages(
                matches=[SearchMatch(text="found", ts="3.0")], paging=self.paging
            )
        )

    async def reactions_add(self, channel, timestamp, name):
        self._record("react_add", channel, timestamp, name)
        return ReactionsData()

    async def reactions_remove(self, channel, timestamp, name):
        self._record("react_remove", channel, timestamp, name)
        return ReactionsData()

    async def files_upload(self, channel, thread_ts, filename, data):
        self._record("upload", channel, thread_ts, filename, data)
        return FilesCompleteUploadData()


def drain(queue):
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


@pytest.mark.asyncio
async def test_load_history_posts_loaded_event():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.load_history(client, "C1", events)
    assert client.calls == [("history", ("C1", 50, None, None))]
    [event] = drain(events)
    assert isinstance(event, HistoryLoaded)
    assert event.channel_id == "C1"
    assert event.has_more is True
    assert [m.text for m in event.messages] == ["hi"]


@pytest.mark.asyncio
async def test_load_history_failure_posts_api_error():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.load_history(client, "C1", events)
    assert drain(events) == [ApiError("History: boom")]


@pytest.mark.asyncio
async def test_load_older_history_passes_latest():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.load_older_history(client, "C1", "1.0", events)
    assert client.calls == [("history", ("C1", 50, None, "1.0"))]
    [event] = drain(events)
    assert isinstance(event, OlderHistoryLoaded)
    assert event.channel_id == "C1"


@pytest.mark.asyncio
async def test_load_older_history_failure():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.load_older_history(client, "C1", "1.0", events)
    assert drain(events) == [ApiError("Older history: boom")]


@pytest.mark.asyncio
async def test_load_thread():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.load_thread(client, "C1", "1.0", events)
    assert client.calls == [("replies", ("C1", "1.0", 100))]
    [event] = drain(events)
    assert isinstance(event, ThreadLoaded)
    assert event.thread_ts == "1.0"
    assert [m.text for m in event.messages] == ["reply"]


@pytest.mark.asyncio
async def test_load_thread_failure():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.load_thread(client, "C1", "1.0", events)
    assert drain(events) == [ApiError("Thread: boom")]


@pytest.mark.asyncio
async def test_send_message_in_thread():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.send_message(client, "C1", "hello", "1.0", events)
    assert client.calls == [("post", ("C1", "hello", "1.0"))]
    assert drain(events) == [MessageSent(channel_id="C1", ts="1.5")]


@pytest.mark.asyncio
async def test_send_message_without_ts_uses_empty_string():
    client, events = FakeClient(post_ts=None), asyncio.Queue()
    await tasks.send_message(client, "C1", "hello", None, events)
    assert drain(events) == [MessageSent(channel_id="C1", ts="")]


@pytest.mark.asyncio
async def test_send_message_failure():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.send_message(client, "C1", "hello", None, events)
    assert drain(events) == [ApiError("Send: boom")]


@pytest.mark.asyncio
async def test_mark_read():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.mark_read(client, "C1", "1.0", events)
    assert client.calls == [("mark", ("C1", "1.0"))]
    assert drain(events) == [ChannelMarked(channel_id="C1")]


@pytest.mark.asyncio
async def test_mark_read_failure_posts_nothing():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.mark_read(client, "C1", "1.0", events)
    assert drain(events) == []


@pytest.mark.asyncio
async def test_search_uses_paging_total():
    client, events = FakeClient(paging=SearchPaging(total=7)), asyncio.Queue()
    await tasks.search_messages(client, "needle", events)
    assert client.calls == [("search", ("needle", 1, 20))]
    [event] = drain(events)
    assert isinstance(event, SearchResultsLoaded)
    assert event.query == "needle"
    assert event.total == 7
    assert [m.text for m in event.matches] == ["found"]


@pytest.mark.asyncio
async def test_search_without_paging_totals_zero():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.search_messages(client, "needle", events)
    [event] = drain(events)
    assert event.total == 0


@pytest.mark.asyncio
async def test_search_failure():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.search_messages(client, "needle", events)
    assert drain(events) == [ApiError("Search: boom")]


@pytest.mark.asyncio
async def test_add_reaction_success_is_silent():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.add_reaction(client, "C1", "1.0", "thumbsup", events)
    assert client.calls == [("react_add", ("C1", "1.0", "thumbsup"))]
    assert drain(events) == []


@pytest.mark.asyncio
async def test_reaction_failures():
    events = asyncio.Queue()
    await tasks.add_reaction(FakeClient(fail="boom"), "C1", "1.0", "x", events)
    await tasks.remove_reaction(FakeClient(fail="boom"), "C1", "1.0", "x", events)
    assert drain(events) == [ApiError("Reaction: boom"), ApiError("Reaction remove: boom")]


@pytest.mark.asyncio
async def test_remove_reaction_calls_client():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.remove_reaction(client, "C1", "1.0", "thumbsup", events)
    assert client.calls == [("react_remove", ("C1", "1.0", "thumbsup"))]
    assert drain(events) == []


def test_read_upload_reads_file(tmp_path):
    path = tmp_path / "note.txt"
    path.write_bytes(b"contents")
    assert tasks.read_upload(f"  {path}  ") == ("note.txt", b"contents")


def test_read_upload_expands_tilde(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    (tmp_path / "pic.png").write_bytes(b"data")
    assert tasks.read_upload("~/pic.png") == ("pic.png", b"data")


def test_read_upload_blank_path():
    with pytest.raises(ValueError):
        tasks.read_upload("   ")


def test_read_upload_missing_file(tmp_path):
    with pytest.raises(OSError):
        tasks.read_upload(str(tmp_path / "missing.bin"))


@pytest.mark.asyncio
async def test_upload_file():
    client, events = FakeClient(), asyncio.Queue()
    await tasks.upload_file(client, "C1", None, "note.txt", b"abc", events)
    assert client.calls == [("upload", ("C1", None, "note.txt", b"abc"))]
    assert drain(events) == [FileUploaded(channel_id="C1", filename="note.txt")]


@pytest.mark.asyncio
async def test_upload_file_failure():
    client, events = FakeClient(fail="boom"), asyncio.Queue()
    await tasks.upload_file(client, "C1", "1.0", "note.txt", b"abc", events)
    assert drain(events) == [ApiError("Upload: boom")]