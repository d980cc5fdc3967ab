import asyncio
import json

import pytest
from websockets.asyncio.server import serve

from slacktui.events import (
    ApiError,
    SlackConnected,
    SlackDisconnected,
    SlackWsEvent,
    WsPing,
    WsWriterReady,
)
from slacktui.types import RtmConnectData, RtmSelf, RtmTeam, WsHello, WsMessage
from slacktui.websocket import connect_and_run, dispatch_frame, next_backoff, run_websocket


def drain(queue):
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


class FakeClient:
    cookie = "secret"

    def __init__(self, url):
        self.url = url

    async def rtm_connect(self):
        return RtmConnectData(
            url=self.url,
            self_info=RtmSelf(id="U1", name="me"),
            team=RtmTeam(id="T1", name="Acme"),
        )


class FailingClient:
    cookie = "secret"

    async def rtm_connect(self):
        raise RuntimeError("no network")


@pytest.mark.parametrize("seconds,expected", [(1, 2), (2, 4), (16, 30), (30, 30)])
def test_next_backoff(seconds, expected):
    assert next_backoff(seconds) == expected


def test_dispatch_hello_is_forwarded():
    queue = asyncio.Queue()
    assert dispatch_frame('{"type": "hello"}', queue) is True
    assert drain(queue) == [SlackWsEvent(WsHello())]


def test_dispatch_message_is_forwarded():
    queue = asyncio.Queue()
    frame = json.dumps({"type": "message", "channel": "C1", "user": "U2", "text": "hi", "ts": "1.0"})
    assert dispatch_frame(frame, queue) is True
    (event,) = drain(queue)
    assert event.event == WsMessage(channel="C1", user="U2", text="hi", ts="1.0")


def test_dispatch_goodbye_stops():
    queue = asyncio.Queue()
    assert dispatch_frame('{"type": "goodbye"}', queue) is False
    assert drain(queue) == []


def test_dispatch_error_stops_and_reports():
    queue = asyncio.Queue()
    frame = json.dumps({"type": "error", "error": {"msg": "bad", "code": 1}})
    assert dispatch_frame(frame, queue) is False
    assert drain(queue) == [ApiError("WS: bad")]


def test_dispatch_error_without_detail():
    queue = asyncio.Queue()
    assert dispatch_frame('{"type": "error"}', queue) is False
    assert drain(queue) == [ApiError("WS: unknown")]


@pytest.mark.parametrize("frame", ['{"type": "pong"}', "not json", '{"no_type": 1}'])
def test_dispatch_ignores_unknown(frame):
    queue = asyncio.Queue()
    assert dispatch_frame(frame, queue) is True
    assert drain(queue) == []


@pytest.mark.asyncio
async def test_connect_and_run_session():
    cookies = []
    received = []

    async def handler(connection):
        cookies.append(connection.request.headers["Cookie"])
        await connection.send('{"type": "hello"}')
        received.append(await connection.recv())
        await connection.send('{"type": "mystery"}')
        await connection.send('{"type": "goodbye"}')
        await connection.wait_closed()

    async with serve(handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        events = asyncio.Queue()
        task = asyncio.create_task(connect_and_run(FakeClient(f"ws://127.0.0.1:{port}"), events))

        seen = []
        while True:
            event = await asyncio.wait_for(events.get(), 5)
            seen.append(event)
            if isinstance(event, WsWriterReady):
                event.writer.put_nowait('{"type": "ping", "id": 9}')
                break

        await asyncio.wait_for(task, 5)
        seen.extend(drain(events))

    assert cookies == ["d=secret"]
    assert received == ['{"type": "ping", "id": 9}']
    others = [e for e in seen if not isinstance(e, (WsPing, WsWriterReady))]
    assert others == [
        SlackConnected(self_id="U1", team="Acme"),
        SlackWsEvent(WsHello()),
        SlackDisconnected(),
    ]
    pings = [e for e in seen if isinstance(e, WsPing)]
    assert all(p.id == 1 for p in pings)


@pytest.mark.asyncio
async def test_run_websocket_reports_failed_connection():
    events = asyncio.Queue()
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(run_websocket(FailingClient(), events), 0.3)
    assert drain(events) == [SlackDisconnected()]