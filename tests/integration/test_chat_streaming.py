"""Integration tests for the SSE streaming chat endpoint.

Tests real streaming behavior with httpx AsyncClient and ASGITransport
against the actual FastAPI app. Only the model service is replaced, by a
scripted fake, so failures and timing can be reproduced.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import pytest_check as check
from agno.run.agent import RunEvent
from httpx import ASGITransport, AsyncClient

from curriculum_assistant.agent import chat_agent
from curriculum_assistant.agent.prompts import GENERIC_ERRORS, SYSTEM_PROMPT_EN
from curriculum_assistant.api.app import create_app
from curriculum_assistant.api.routes import agent_service_factory
from curriculum_assistant.attachments import decode_data_url, encode_data_url
from curriculum_assistant.models.schemas import FilePart, Role, StreamChunk
from tests.conftest import FakeAgentService, build_app

CHAT_URL = "/api/chat"


def conversation(*texts: str) -> dict:
    """Build a request body alternating user and assistant turns."""
    roles = ["user", "assistant"]
    return {
        "messages": [
            {"id": f"m{i}", "role": roles[i % 2], "parts": [{"type": "text", "text": text}]}
            for i, text in enumerate(texts)
        ]
    }


async def read_events(client: AsyncClient, body: dict) -> list[str]:
    """POST to the chat endpoint and collect the raw data payloads."""
    events: list[str] = []
    async with client.stream("POST", CHAT_URL, json=body) as response:
        assert response.status_code == 200
        async for line in response.aiter_lines():
            if line.startswith("data: "):
                events.append(line.removeprefix("data: "))
    return events


def parse_chunks(events: list[str]) -> list[StreamChunk]:
    return [StreamChunk.model_validate_json(event) for event in events if event != "[DONE]"]


@pytest.fixture
async def client_for():
    """Create clients for apps built around a given fake service."""
    clients: list[AsyncClient] = []

    def make(service: FakeAgentService, max_duration_seconds: float = 30.0) -> AsyncClient:
        client = AsyncClient(
            transport=ASGITransport(app=build_app(service, max_duration_seconds)),
            base_url="http://test",
        )
        clients.append(client)
        return client

    yield make

    for client in clients:
        await client.aclose()


class TestStreamingEndpoint:
    """Tests for a reply that streams successfully."""

    async def test_stream_returns_sse_content_type(self, async_client: AsyncClient) -> None:
        """Streaming endpoint returns text/event-stream and the stream protocol header."""
        async with async_client.stream("POST", CHAT_URL, json=conversation("Hi")) as response:
            check.equal(response.status_code, 200)
            check.is_in("text/event-stream", response.headers["content-type"])
            check.equal(response.headers["x-vercel-ai-ui-message-stream"], "v1")
            check.equal(response.headers["cache-control"], "no-cache")

    async def test_event_sequence(self, async_client: AsyncClient) -> None:
        """Events follow start, text and finish framing and end with [DONE]."""
        events = await read_events(async_client, conversation("Hi"))
        chunks = parse_chunks(events)

        assert events[-1] == "[DONE]"
        assert [c.type.value for c in chunks] == [
            "start",
            "start-step",
            "text-start",
            "text-delta",
            "text-delta",
            "text-delta",
            "text-end",
            "finish-step",
            "finish",
        ]

    async def test_deltas_join_to_reply(self, async_client: AsyncClient) -> None:
        """Concatenated deltas equal the model's full reply."""
        chunks = parse_chunks(await read_events(async_client, conversation("Hi")))

        text = "".join(c.delta for c in chunks if c.type.value == "text-delta")

        assert text == "Hello, world"

    async def test_text_events_share_one_id(self, async_client: AsyncClient) -> None:
        """text-start, deltas and text-end reference the same text id."""
        chunks = parse_chunks(await read_events(async_client, conversation("Hi")))

        ids = {c.id for c in chunks if c.type.value.startswith("text-")}
        start = chunks[0]

        check.equal(len(ids), 1)
        check.is_not_none(start.message_id)

    async def test_events_are_valid_json(self, async_client: AsyncClient) -> None:
        """Every event other than [DONE] is a JSON object with a type."""
        events = await read_events(async_client, conversation("Hi"))

        for event in events[:-1]:
            check.is_in("type", json.loads(event))

    async def test_service_receives_whole_conversation(
        self, async_client: AsyncClient, fake_service: FakeAgentService
    ) -> None:
        """The full history is forwarded in order."""
        await read_events(async_client, conversation("First", "Answer", "Second"))

        assert len(fake_service.calls) == 1
        received = fake_service.calls[0]
        assert [m.role for m in received] == [Role.USER, Role.ASSISTANT, Role.USER]
        assert [m.text for m in received] == ["First", "Answer", "Second"]

    async def test_file_part_is_forwarded(
        self, async_client: AsyncClient, fake_service: FakeAgentService, pdf_bytes: bytes
    ) -> None:
        """Inline attachments reach the model service intact."""
        body = {
            "messages": [{
                "id": "m1",
                "role": "user",
                "parts": [
                    {"type": "text", "text": "Summarize"},
                    {
                        "type": "file",
                        "filename": "unit.pdf",
                        "mediaType": "application/pdf",
                        "url": encode_data_url(pdf_bytes, "application/pdf"),
                    },
                ],
            }]
        }

        await read_events(async_client, body)

        file_part = fake_service.calls[0][0].parts[1]
        assert isinstance(file_part, FilePart)
        assert decode_data_url(file_part.url) == ("application/pdf", pdf_bytes)

    async def test_non_ascii_reply_is_preserved(self, client_for) -> None:
        """Arabic text streams through unchanged."""
        client = client_for(FakeAgentService(fragments=("مرحبا", " بك")))

        chunks = parse_chunks(await read_events(client, conversation("أهلا")))

        assert "".join(c.delta for c in chunks if c.delta) == "مرحبا بك"

    async def test_empty_reply_still_finishes(self, client_for) -> None:
        """A model that produces nothing still gets a complete stream."""
        client = client_for(FakeAgentService(fragments=()))

        events = await read_events(client, conversation("Hi"))
        types = [c.type.value for c in parse_chunks(events)]

        check.equal(events[-1], "[DONE]")
        check.is_not_in("text-delta", types)
        check.equal(types[-1], "finish")


class TestRequestErrors:
    """Tests for failures reported before the stream starts."""

    def assert_generic_error(self, response, language: str = "en") -> None:
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": GENERIC_ERRORS[language]}

    async def test_malformed_json(self, async_client: AsyncClient) -> None:
        """A body that is not JSON gets the generic error."""
        response = await async_client.post(
            CHAT_URL, content=b"{not json", headers={"content-type": "application/json"}
        )

        self.assert_generic_error(response)

    @pytest.mark.parametrize(
        "body",
        [
            {"message": "hi"},
            {"messages": []},
            {"messages": [{"role": "system", "parts": []}]},
            {"messages": "hello"},
        ],
        ids=["missing-messages", "empty-messages", "bad-role", "wrong-type"],
    )
    async def test_invalid_shape(self, async_client: AsyncClient, body: dict) -> None:
        """Bodies that are not a conversation get the generic error."""
        response = await async_client.post(CHAT_URL, json=body)

        self.assert_generic_error(response)

    async def test_invalid_request_does_not_reach_model(
        self, async_client: AsyncClient, fake_service: FakeAgentService
    ) -> None:
        """The model is never called for malformed input."""
        await async_client.post(CHAT_URL, json={"messages": []})

        assert fake_service.calls == []

    async def test_model_failure_before_first_fragment(self, client_for) -> None:
        """An upstream failure before any output is a 500."""
        client = client_for(FakeAgentService(error=RuntimeError("upstream down"), fail_at=0))

        response = await client.post(CHAT_URL, json=conversation("Hi"))

        self.assert_generic_error(response)

    async def test_service_construction_failure(self) -> None:
        """Missing model configuration is reported like any other failure."""

        def missing_credentials():
            raise ValueError("API key required")

        app = build_app(FakeAgentService())
        app.dependency_overrides[agent_service_factory] = lambda: missing_credentials

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(CHAT_URL, json=conversation("Hi"))

        self.assert_generic_error(response)

    async def test_timeout_before_first_fragment(self, client_for) -> None:
        """A model that never starts within the limit is a 500."""
        client = client_for(FakeAgentService(first_delay=1.0), max_duration_seconds=0.05)

        response = await client.post(CHAT_URL, json=conversation("Hi"))

        self.assert_generic_error(response)

    async def test_error_is_localized(
        self, async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The error message follows the configured language."""
        monkeypatch.setenv("CHAT_LANGUAGE", "ar")

        response = await async_client.post(CHAT_URL, json={"messages": []})

        self.assert_generic_error(response, language="ar")

    async def test_get_not_allowed(self, async_client: AsyncClient) -> None:
        """Only POST is routed."""
        response = await async_client.get(CHAT_URL)

        assert response.status_code == 405


class TestMidStreamErrors:
    """Tests for failures after the stream has started."""

    async def test_failure_sends_error_event(self, client_for) -> None:
        """A model failure mid-reply ends the stream with an error event."""
        client = client_for(FakeAgentService(error=RuntimeError("connection reset"), fail_at=1))

        events = await read_events(client, conversation("Hi"))
        chunks = parse_chunks(events)
        types = [c.type.value for c in chunks]

        check.equal(events[-1], "[DONE]")
        check.equal(types[-1], "error")
        check.equal(chunks[-1].error_text, GENERIC_ERRORS["en"])
        check.is_not_in("finish", types)
        check.equal([c.delta for c in chunks if c.delta], ["Hello"])

    async def test_failure_after_last_fragment(self, client_for) -> None:
        """A failure after all text still reports an error rather than finishing."""
        client = client_for(FakeAgentService(error=RuntimeError("late failure")))

        chunks = parse_chunks(await read_events(client, conversation("Hi")))

        assert chunks[-1].type.value == "error"

    async def test_timeout_mid_stream(self, client_for) -> None:
        """A reply that exceeds the duration limit is cut off with an error."""
        client = client_for(
            FakeAgentService(fragments=("Part one", "Part two"), delay=1.0),
            max_duration_seconds=0.2,
        )

        events = await read_events(client, conversation("Hi"))
        chunks = parse_chunks(events)

        check.equal(events[-1], "[DONE]")
        check.equal(chunks[-1].type.value, "error")
        check.equal([c.delta for c in chunks if c.delta], ["Part one"])


class TestApplication:
    """Tests for app-level routes and middleware."""

    async def test_health(self, async_client: AsyncClient) -> None:
        """Health endpoint reports the service as up."""
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "curriculum-assistant"}

    async def test_cors_allows_browser_origin(self, async_client: AsyncClient) -> None:
        """Cross-origin browser requests are allowed."""
        response = await async_client.options(
            CHAT_URL,
            headers={
                "Origin": "http://localhost:8080",
                "Access-Control-Request-Method": "POST",
            },
        )

        check.equal(response.status_code, 200)
        check.is_in("access-control-allow-origin", response.headers)

    def test_cors_origins_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CORS_ORIGINS restricts allowed origins to a comma-separated list."""
        from curriculum_assistant.api.app import _cors_origins

        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:8080, http://school.example ,")

        assert _cors_origins() == ["http://localhost:8080", "http://school.example"]


class TestUnsupportedLanguage:
    """Tests for a CHAT_LANGUAGE value that is neither English nor Arabic."""

    @pytest.fixture
    def fresh_agent_service(self):
        """Reset the agent singleton around the test."""
        chat_agent._agent_service = None
        yield
        chat_agent._agent_service = None

    @patch("curriculum_assistant.agent.chat_agent.Gemini")
    @patch("curriculum_assistant.agent.chat_agent.Agent")
    async def test_chat_streams_in_english(
        self,
        mock_agent_class: MagicMock,
        mock_gemini: MagicMock,
        fresh_agent_service: None,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The real agent service still builds and answers with the English prompt."""
        monkeypatch.setenv("CHAT_LANGUAGE", "fr")
        monkeypatch.setenv("GOOGLE_API_KEY", "test-key")

        async def arun(messages, stream=False):
            yield SimpleNamespace(event=RunEvent.run_content, content="Bonjour")

        mock_agent_class.return_value.arun = arun

        async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as client:
            chunks = parse_chunks(await read_events(client, conversation("Salut")))

        check.equal([c.delta for c in chunks if c.delta], ["Bonjour"])
        check.equal(chunks[-1].type.value, "finish")
        check.equal(mock_agent_class.call_args.kwargs["system_message"], SYSTEM_PROMPT_EN)
