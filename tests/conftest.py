"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_service: Scripted stand-in for the Gemini agent service
    - app: FastAPI app wired to the fake service
    - async_client: HTTPX client for API testing
    - pdf_bytes: Small PDF-looking payload for attachments

No live model calls are made: the agent service dependency is overridden.
"""

import asyncio
from collections.abc import AsyncGenerator, Sequence

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from curriculum_assistant.api.app import create_app
from curriculum_assistant.api.routes import agent_service_factory
from curriculum_assistant.models.schemas import UIMessage


class FakeAgentService:
    """Streams scripted fragments and records every conversation it receives.

    Attributes:
        fragments: Text fragments yielded in order.
        error: Exception raised once ``fail_at`` fragments have been yielded.
        fail_at: Number of fragments yielded before ``error`` is raised.
        delay: Pause before every fragment after the first.
        first_delay: Pause before the first fragment.
    """

    def __init__(
        self,
        fragments: Sequence[str] = ("Hello", ", ", "world"),
        error: Exception | None = None,
        fail_at: int | None = None,
        delay: float = 0.0,
        first_delay: float = 0.0,
    ) -> None:
        self.fragments = list(fragments)
        self.error = error
        self.fail_at = fail_at
        self.delay = delay
        self.first_delay = first_delay
        self.calls: list[list[UIMessage]] = []

    async def stream_response(self, messages: Sequence[UIMessage]) -> AsyncGenerator[str]:
        self.calls.append(list(messages))
        for index, fragment in enumerate(self.fragments):
            if self.error is not None and self.fail_at == index:
                raise self.error
            pause = self.first_delay if index == 0 else self.delay
            if pause:
                await asyncio.sleep(pause)
            yield fragment
        if self.error is not None and (self.fail_at is None or self.fail_at >= len(self.fragments)):
            raise self.error


def build_app(service: FakeAgentService, max_duration_seconds: float = 30.0) -> FastAPI:
    """Create an app whose chat route streams from ``service``."""
    application = create_app(max_duration_seconds=max_duration_seconds)
    application.dependency_overrides[agent_service_factory] = lambda: lambda: service
    return application


@pytest.fixture(autouse=True)
def english_language(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the chat language so user-facing messages are predictable."""
    monkeypatch.setenv("CHAT_LANGUAGE", "en")


@pytest.fixture
def fake_service() -> FakeAgentService:
    """Return a service streaming "Hello, world" in three fragments."""
    return FakeAgentService()


@pytest.fixture
def app(fake_service: FakeAgentService) -> FastAPI:
    """Return the API wired to the fake service."""
    return build_app(fake_service)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def pdf_bytes() -> bytes:
    """Return a small payload with a PDF header."""
    return b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"
