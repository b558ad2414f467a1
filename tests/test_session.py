"""Tests for the chat session lifecycle."""
import asyncio
import json

import httpx
import pytest

from ollachat.chat import Role, Severity
from ollachat.chat.session import SEND_FAILED_DESCRIPTION

from helpers import byte_stream, ndjson_line, wait_until


class LoadingRecorder:
    """Session listener that records every change of the loading flag."""

    def __init__(self):
        self.values: list[bool] = []

    def __call__(self, session):
        if not self.values or self.values[-1] != session.is_loading:
            self.values.append(session.is_loading)


def streaming_handler(chunks, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(json.loads(request.content))
        return httpx.Response(200, content=byte_stream(chunks))
    return handler


class TestPreconditions:
    """Tests for sends that must not reach the server."""

    @pytest.mark.asyncio
    async def test_no_model_selected(self, make_session, notices):
        def handler(request):
            raise AssertionError("no request expected")

        session = make_session(handler, model=None)

        await session.send_message("hello")

        assert session.messages == ()
        assert session.is_loading is False
        assert len(notices) == 1
        assert notices[0].title == "No Model Selected"
        assert notices[0].description == "Please select a model before sending a message."
        assert notices[0].severity == Severity.ERROR

    @pytest.mark.asyncio
    async def test_second_send_rejected_while_in_flight(self, make_session, notices):
        release = asyncio.Event()

        async def body():
            yield ndjson_line("partial")
            await release.wait()
            yield ndjson_line("", done=True)

        session = make_session(lambda request: httpx.Response(200, content=body()))
        first = asyncio.create_task(session.send_message("one"))
        await wait_until(lambda: session.is_loading and len(session.messages) == 2)

        await session.send_message("two")

        assert [m.content for m in session.messages if m.role == Role.USER] == ["one"]
        assert notices[-1].title == "Request In Progress"
        assert notices[-1].severity == Severity.WARNING

        release.set()
        await first
        assert session.is_loading is False


class TestStreaming:
    """Tests for streamed replies."""

    @pytest.mark.asyncio
    async def test_deltas_build_one_assistant_message(self, make_session, notices):
        chunks = [ndjson_line("Hel"), ndjson_line("lo wor"), ndjson_line("ld"), ndjson_line("", done=True)]
        session = make_session(streaming_handler(chunks))

        await session.send_message("hi")

        user, assistant = session.messages
        assert user.role == Role.USER
        assert user.content == "hi"
        assert assistant.role == Role.ASSISTANT
        assert assistant.content == "Hello world"
        assert assistant.thinking is None
        assert session.is_loading is False
        assert notices == []

    @pytest.mark.asyncio
    async def test_message_id_stable_across_updates(self, make_session):
        chunks = [ndjson_line("a"), ndjson_line("b"), ndjson_line("c")]
        session = make_session(streaming_handler(chunks))
        assistant_ids = set()

        def listener(s):
            for message in s.messages:
                if message.role == Role.ASSISTANT:
                    assistant_ids.add(message.id)

        session.subscribe(listener)
        await session.send_message("hi")

        assert len(assistant_ids) == 1
        assert session.messages[-1].content == "abc"

    @pytest.mark.asyncio
    async def test_malformed_line_does_not_fail_request(self, make_session, notices):
        chunks = [ndjson_line("ok "), b"{broken\n", ndjson_line("then more")]
        session = make_session(streaming_handler(chunks))

        await session.send_message("hi")

        assert session.messages[-1].content == "ok then more"
        assert notices == []

    @pytest.mark.asyncio
    async def test_thinking_collected_when_enabled(self, make_session, settings):
        settings.thinking_mode = True
        chunks = [ndjson_line(thinking="Let me "), ndjson_line(thinking="think"), ndjson_line("4")]
        session = make_session(streaming_handler(chunks))

        await session.send_message("2+2?")

        assert session.messages[-1].thinking == "Let me think"
        assert session.messages[-1].content == "4"

    @pytest.mark.asyncio
    async def test_thinking_dropped_when_disabled(self, make_session):
        chunks = [ndjson_line(thinking="hidden"), ndjson_line("4")]
        session = make_session(streaming_handler(chunks))

        await session.send_message("2+2?")

        assert session.messages[-1].thinking is None
        assert session.messages[-1].content == "4"

    @pytest.mark.asyncio
    async def test_empty_stream_leaves_empty_reply(self, make_session, notices):
        session = make_session(streaming_handler([]))

        await session.send_message("hi")

        assert session.messages[-1].role == Role.ASSISTANT
        assert session.messages[-1].content == ""
        assert notices == []


class TestRequestPayload:
    """Tests for what is sent to /api/chat."""

    @pytest.mark.asyncio
    async def test_history_and_flags_without_thinking(self, make_session):
        seen = []
        session = make_session(streaming_handler([ndjson_line("one")], seen))

        await session.send_message("first")
        await session.send_message("second")

        payload = seen[-1]
        assert payload["model"] == "test-model"
        assert payload["stream"] is True
        assert "think" not in payload
        assert payload["messages"] == [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "one"},
            {"role": "user", "content": "second"},
        ]

    @pytest.mark.asyncio
    async def test_think_flag_sent_when_enabled(self, make_session, settings):
        settings.thinking_mode = True
        seen = []
        session = make_session(streaming_handler([ndjson_line("x")], seen))

        await session.send_message("hi")

        assert seen[0]["think"] is True

    @pytest.mark.asyncio
    async def test_thinking_never_sent_back(self, make_session, settings):
        settings.thinking_mode = True
        seen = []
        session = make_session(streaming_handler([ndjson_line(thinking="t"), ndjson_line("a")], seen))

        await session.send_message("one")
        await session.send_message("two")

        assert all(set(m) == {"role", "content"} for m in seen[-1]["messages"])


class TestNonStreaming:
    """Tests for whole-body replies."""

    @pytest.mark.asyncio
    async def test_message_content(self, make_session, settings):
        settings.streaming_mode = False
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={
                "model": "test-model",
                "message": {"role": "assistant", "content": "Paris"},
                "done": True,
            })

        session = make_session(handler)
        await session.send_message("Capital of France?")

        assert seen[0]["stream"] is False
        assert session.messages[-1].content == "Paris"
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_response_field_fallback(self, make_session, settings):
        settings.streaming_mode = False
        session = make_session(lambda request: httpx.Response(200, json={"response": "hi"}))

        await session.send_message("hello")

        assert session.messages[-1].role == Role.ASSISTANT
        assert session.messages[-1].content == "hi"

    @pytest.mark.asyncio
    async def test_thinking_kept_when_enabled(self, make_session, settings):
        settings.streaming_mode = False
        settings.thinking_mode = True
        body = {"message": {"role": "assistant", "content": "4", "thinking": "2+2"}}
        session = make_session(lambda request: httpx.Response(200, json=body))

        await session.send_message("2+2?")

        assert session.messages[-1].thinking == "2+2"


class TestFailures:
    """Tests for transport failures."""

    @pytest.mark.asyncio
    async def test_http_error_status(self, make_session, notices):
        session = make_session(lambda request: httpx.Response(500, text="boom"))
        recorder = LoadingRecorder()
        session.subscribe(recorder)

        await session.send_message("hi")

        assert [m.role for m in session.messages] == [Role.USER]
        assert session.is_loading is False
        assert recorder.values == [False, True, False]
        assert notices[-1].title == "Error"
        assert notices[-1].description == SEND_FAILED_DESCRIPTION

    @pytest.mark.parametrize(
        "body",
        [b"not json", b"[1, 2]", b'\x80{"response": "hi"}'],
        ids=["invalid-json", "not-an-object", "invalid-utf8"],
    )
    @pytest.mark.asyncio
    async def test_undecodable_whole_body(self, make_session, settings, notices, body):
        settings.streaming_mode = False
        session = make_session(lambda request: httpx.Response(200, content=body))

        await session.send_message("hi")

        assert [m.role for m in session.messages] == [Role.USER]
        assert session.is_loading is False
        assert notices[-1].description == SEND_FAILED_DESCRIPTION

    @pytest.mark.asyncio
    async def test_connection_refused(self, make_session, notices):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        session = make_session(handler)
        await session.send_message("hi")

        assert len(session.messages) == 1
        assert session.is_loading is False
        assert notices[-1].description == SEND_FAILED_DESCRIPTION

    @pytest.mark.asyncio
    async def test_stream_interrupted_keeps_partial_reply(self, make_session, notices):
        async def body():
            yield ndjson_line("partial")
            raise httpx.ReadError("connection reset")

        session = make_session(lambda request: httpx.Response(200, content=body()))
        await session.send_message("hi")

        assert session.messages[-1].content == "partial"
        assert session.is_loading is False
        assert notices[-1].title == "Error"

    @pytest.mark.asyncio
    async def test_session_usable_after_failure(self, make_session, notices):
        responses = iter([httpx.Response(503), None])

        def handler(request):
            response = next(responses)
            return response or httpx.Response(200, content=byte_stream([ndjson_line("back")]))

        session = make_session(handler)
        await session.send_message("one")
        await session.send_message("two")

        assert session.messages[-1].content == "back"


class TestStopGeneration:
    """Tests for aborting the in-flight request."""

    @pytest.mark.asyncio
    async def test_abort_keeps_partial_content(self, make_session, notices):
        release = asyncio.Event()

        async def body():
            yield ndjson_line("Hel")
            yield ndjson_line("lo")
            await release.wait()
            yield ndjson_line(" never")

        session = make_session(lambda request: httpx.Response(200, content=body()))
        recorder = LoadingRecorder()
        session.subscribe(recorder)

        task = asyncio.create_task(session.send_message("hi"))
        await wait_until(lambda: len(session.messages) == 2 and session.messages[-1].content == "Hello")
        session.stop_generation()
        await task

        assert session.messages[-1].content == "Hello"
        assert session.is_loading is False
        assert recorder.values == [False, True, False]
        assert notices == []

    @pytest.mark.asyncio
    async def test_stop_without_request_is_noop(self, make_session):
        session = make_session(streaming_handler([]))

        session.stop_generation()

        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_can_send_again_after_abort(self, make_session):
        release = asyncio.Event()
        calls = []

        async def hanging():
            yield ndjson_line("first")
            await release.wait()

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(200, content=hanging())
            return httpx.Response(200, content=byte_stream([ndjson_line("second")]))

        session = make_session(handler)
        task = asyncio.create_task(session.send_message("one"))
        await wait_until(lambda: bool(session.messages) and session.messages[-1].content == "first")
        session.stop_generation()
        await task

        await session.send_message("two")

        assert [m.content for m in session.messages] == ["one", "first", "two", "second"]


class TestClearChat:
    """Tests for clearing the conversation."""

    @pytest.mark.asyncio
    async def test_clear_removes_all_messages(self, make_session):
        session = make_session(streaming_handler([ndjson_line("reply")]))
        await session.send_message("hi")
        changes = []
        session.subscribe(lambda s: changes.append(len(s.messages)))

        session.clear_chat()

        assert session.messages == ()
        assert changes == [0]

    @pytest.mark.asyncio
    async def test_clear_then_send_starts_fresh_history(self, make_session):
        seen = []
        session = make_session(streaming_handler([ndjson_line("reply")], seen))
        await session.send_message("old")

        session.clear_chat()
        await session.send_message("new")

        assert seen[-1]["messages"] == [{"role": "user", "content": "new"}]

    def test_unsubscribe(self, make_session):
        session = make_session(streaming_handler([]))
        calls = []
        unsubscribe = session.subscribe(lambda s: calls.append(s))

        unsubscribe()
        session.clear_chat()

        assert calls == []
