"""Shared test configuration, pytest markers and an offline LLM stand-in."""

import asyncio

import pytest

from services.extraction.knowledge_base import build_default_snapshot


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: exercises the full extraction engine end to end"
    )


class StubLLMClient:
    """Async ``generate(model, prompt)`` returning a canned reply.

    ``error`` is raised instead when set; ``delay`` seconds are slept first.
    """

    def __init__(self, reply: str = "[]", error: Exception | None = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    async def generate(self, model: str, prompt: str) -> str:
        self.calls.append((model, prompt))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def snapshot():
    return build_default_snapshot()


@pytest.fixture
def ontology(snapshot):
    return snapshot.ontology
