"""Tests for WriterAgent (mock Ollama)."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from content_factory.agents.models import DraftItem
from content_factory.agents.writer_agent import (
    WriterAgent,
    _parse_llm_response,
    build_gap_directives,
)
from content_factory.core.types import (
    AgentContext,
    CancelSignal,
    ContentGap,
    GapAnalysis,
    RunStatus,
    Settings,
    WriterConstraints,
    WriterInput,
    WriterOutput,
)
from content_factory.orchestration.executor import AgentExecutor

OLLAMA = "content_factory.agents.writer_agent.ollama"


def _write(agent, input, context, cancel_signal=None):
    return asyncio.run(
        AgentExecutor().execute(
            agent,
            input,
            context,
            on_run_update=lambda run: None,
            cancel_signal=cancel_signal or CancelSignal(),
        )
    )


class TestParseResponse:
    def test_plain_json(self):
        assert _parse_llm_response('{"contentItems": []}') == {"contentItems": []}

    def test_strips_code_fences(self):
        raw = '```json\n{"contentItems": []}\n```'
        assert _parse_llm_response(raw) == {"contentItems": []}

    def test_extracts_object_from_prose(self):
        raw = 'Here you go!\n{"contentItems": [{"a": 1}]}\nEnjoy.'
        assert _parse_llm_response(raw) == {"contentItems": [{"a": 1}]}


class TestGapDirectives:
    def test_only_high_and_medium(self):
        analysis = GapAnalysis(
            gaps=(
                ContentGap("subject", "Physics", "high", current_count=1, recommended_count=4),
                ContentGap("platform", "reels", "medium", current_count=3, recommended_count=3),
                ContentGap("level", "IB", "low", current_count=0, recommended_count=2),
            )
        )
        assert build_gap_directives(analysis) == [
            {"type": "subject", "value": "Physics", "minimum_posts": 3},
            {"type": "platform", "value": "reels", "minimum_posts": 1},
        ]

    def test_none(self):
        assert build_gap_directives(None) == []


class TestWriterAgent:
    def test_generates_validated_drafts(self, context, ollama_response, sample_drafts):
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response(sample_drafts)
            run = _write(WriterAgent(), WriterInput(), context)

        assert run.status is RunStatus.COMPLETED
        output = run.output
        assert isinstance(output, WriterOutput)
        assert len(output.content_items) == 4
        assert all(isinstance(i, DraftItem) for i in output.content_items)
        assert output.summary.startswith("Generated 4 content items.")
        assert "tiktok: 2" in output.summary
        assert [s.id for s in run.steps] == ["prepare-brief", "generate-content", "validate-output"]

    def test_brief_falls_back_to_settings(self, context, ollama_response):
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response({"contentItems": []})
            run = _write(WriterAgent(), WriterInput(), context)

        kwargs = mock_ollama.chat.call_args.kwargs
        assert kwargs["model"] == "llama3.2:latest"
        assert kwargs["options"] == {"temperature": 0.2}
        assert "Generate exactly 6 content pieces" in kwargs["messages"][1]["content"]
        assert run.steps[0].data["platforms"] == ["tiktok", "shorts", "reels"]

    def test_constraints_and_count_override_settings(self, context, ollama_response):
        input = WriterInput(count=2, constraints=WriterConstraints(platforms=("linkedin",)))
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response({"contentItems": []})
            run = _write(WriterAgent(model="mistral", temperature=0.9), input, context)

        kwargs = mock_ollama.chat.call_args.kwargs
        assert kwargs["model"] == "mistral"
        assert kwargs["options"] == {"temperature": 0.9}
        assert run.steps[0].data["count"] == 2
        assert run.steps[0].data["platforms"] == ["linkedin"]

    def test_explicit_zero_count_kept(self, context, ollama_response):
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response({"contentItems": []})
            run = _write(WriterAgent(), WriterInput(count=0), context)

        assert run.steps[0].data["count"] == 0
        assert "Generate exactly 0 content pieces" in mock_ollama.chat.call_args.kwargs["messages"][1]["content"]

    def test_content_type_normalised(self, context, ollama_response, make_draft):
        payload = {
            "contentItems": [
                make_draft("tiktok", contentType="text"),
                make_draft("linkedin", contentType="text"),
            ]
        }
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response(payload)
            run = _write(WriterAgent(), WriterInput(), context)

        assert [i.content_type for i in run.output.content_items] == ["video", "text"]

    def test_validation_warnings_reported(self, context, ollama_response, make_draft):
        payload = {"contentItems": [make_draft("shorts", caption="x" * 150)]}
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response(payload)
            run = _write(WriterAgent(), WriterInput(), context)

        assert run.status is RunStatus.COMPLETED
        assert run.steps[2].data["items_with_warnings"] == 1

    def test_invalid_json_fails_run(self, context, ollama_response):
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response("not json at all")
            run = _write(WriterAgent(), WriterInput(), context)

        assert run.status is RunStatus.FAILED
        assert run.error == "Failed to parse JSON response from LLM"
        assert run.steps[1].status is RunStatus.FAILED

    def test_schema_mismatch_fails_run(self, context, ollama_response):
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.return_value = ollama_response({"contentItems": [{"day": "Monday"}]})
            run = _write(WriterAgent(), WriterInput(), context)

        assert run.status is RunStatus.FAILED
        assert "failed validation" in run.error

    def test_ollama_error_fails_run(self, context):
        with patch(OLLAMA) as mock_ollama:
            mock_ollama.chat.side_effect = ConnectionError("connection refused")
            run = _write(WriterAgent(), WriterInput(), context)

        assert run.status is RunStatus.FAILED
        assert run.error == "LLM error: connection refused"

    def test_cancel_after_brief_skips_llm(self, context):
        signal = CancelSignal()
        signal.cancel()
        with patch(OLLAMA) as mock_ollama:
            run = _write(WriterAgent(), WriterInput(), context, cancel_signal=signal)

        mock_ollama.chat.assert_not_called()
        assert run.status is RunStatus.CANCELLED

    @pytest.mark.parametrize(
        "settings, reason",
        [
            (Settings(platforms=("tiktok",), model=""), "Ollama model"),
            (Settings(platforms=(), model="llama3.2:latest"), "platforms"),
        ],
    )
    def test_preflight(self, settings, reason):
        check = WriterAgent().can_run(AgentContext(settings=settings))
        assert check.ok is False
        assert reason in check.reason

    def test_explicit_model_satisfies_preflight(self):
        ctx = AgentContext(settings=Settings(platforms=("tiktok",), model=""))
        assert WriterAgent(model="mistral").can_run(ctx).ok is True
