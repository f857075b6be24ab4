"""Shared fixtures for all test levels."""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from content_factory.agents.registry import AgentRegistry
from content_factory.core.types import AgentContext, Preflight, Settings


# ---------------------------------------------------------------------------
# Fake agent
# ---------------------------------------------------------------------------

class FakeAgent:
    """Scriptable stand-in for an AgentDefinition.

    *output* may be a value or a callable taking the step input.
    """

    def __init__(
        self,
        agent_id: str,
        output: Any = None,
        *,
        error: Exception | None = None,
        preflight: Preflight | None = None,
        preflight_error: Exception | None = None,
        steps: tuple[str, ...] = (),
        during: Callable[[], None] | None = None,
    ) -> None:
        self.id = agent_id
        self.name = agent_id.title()
        self.description = f"fake {agent_id}"
        self._output = output
        self._error = error
        self._preflight = preflight or Preflight(ok=True)
        self._preflight_error = preflight_error
        self._steps = steps
        self._during = during
        self.inputs: list[Any] = []

    def can_run(self, context: AgentContext) -> Preflight:
        if self._preflight_error is not None:
            raise self._preflight_error
        return self._preflight

    async def execute(self, input: Any, context: AgentContext, callbacks: Any) -> Any:
        self.inputs.append(input)
        for step in self._steps:
            callbacks.on_step_start(step, step.replace("-", " "))
            callbacks.on_step_complete(step, {"ok": True})
        if self._during is not None:
            self._during()
        if self._error is not None:
            raise self._error
        if callable(self._output):
            return self._output(input)
        return self._output


@pytest.fixture()
def make_agent() -> type[FakeAgent]:
    return FakeAgent


# ---------------------------------------------------------------------------
# Settings / context
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings() -> Settings:
    return Settings(
        platforms=("tiktok", "shorts", "reels"),
        levels=("GCSE", "A-Level"),
        subjects=("Biology", "Maths"),
        batch_size=6,
        model="llama3.2:latest",
        temperature=0.2,
    )


@pytest.fixture()
def context(settings: Settings) -> AgentContext:
    return AgentContext(settings=settings)


@pytest.fixture()
def registry() -> AgentRegistry:
    return AgentRegistry()


# ---------------------------------------------------------------------------
# Mock Ollama responses
# ---------------------------------------------------------------------------

def draft(platform: str = "tiktok", day: str = "Monday", **overrides: Any) -> dict[str, Any]:
    item = {
        "day": day,
        "time": "7am",
        "platform": platform,
        "contentType": "video",
        "hook": f"Nobody tells you this about {platform}",
        "caption": "Hook\n\nValue\n\nSave this!",
        "hashtags": ["gcse", "revision"],
        "topic": "Photosynthesis",
        "subject": "Biology",
        "level": "GCSE",
        "pillar": "teach",
    }
    item.update(overrides)
    return item


@pytest.fixture()
def ollama_response() -> Callable[[Any], MagicMock]:
    """Build an object shaped like ``ollama.chat``'s return value."""

    def _make(payload: Any) -> MagicMock:
        content = payload if isinstance(payload, str) else json.dumps(payload)
        response = MagicMock()
        response.message.content = content
        return response

    return _make


@pytest.fixture()
def sample_drafts() -> dict[str, Any]:
    return {
        "contentItems": [
            draft("tiktok", "Monday"),
            draft("shorts", "Monday"),
            draft("reels", "Wednesday"),
            draft("tiktok", "Someday"),
        ]
    }


@pytest.fixture()
def make_draft() -> Callable[..., dict[str, Any]]:
    return draft
