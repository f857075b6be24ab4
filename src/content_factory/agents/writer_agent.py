"""Writer agent: drafts a week of social posts with an LLM via Ollama.

The agent:
  1. Builds a generation brief from its input constraints, falling back to
     the user's settings, plus directives from any gap analysis.
  2. Sends the brief to Ollama and parses the JSON drafts it returns.
  3. Checks every draft against its platform's caption and hashtag limits.

Drafts come back as ``DraftItem`` models and flow on to the scheduler.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import Counter
from typing import Any

import ollama
from pydantic import ValidationError

from content_factory.agents.models import DraftBatch, DraftItem
from content_factory.agents.prompts import WRITER_SYSTEM_PROMPT, build_writer_user_prompt
from content_factory.content.platforms import PILLARS, resolve_content_type, validate_content
from content_factory.core.errors import GenerationError
from content_factory.core.protocols import AgentCallbacks
from content_factory.core.types import (
    AgentContext,
    GapAnalysis,
    Preflight,
    WriterInput,
    WriterOutput,
)

log = logging.getLogger(__name__)


def _parse_llm_response(raw: str) -> dict[str, Any]:
    """Extract the JSON object from the LLM response, handling common quirks."""
    text = raw.strip()

    # Strip markdown code fences if the LLM added them
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines).strip()

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        text = text[start : end + 1]

    return json.loads(text)


def build_gap_directives(gap_analysis: GapAnalysis | None) -> list[dict[str, Any]]:
    """Turn high and medium priority gaps into minimum-post directives."""
    if gap_analysis is None:
        return []
    return [
        {
            "type": g.type,
            "value": g.value,
            "minimum_posts": max(1, g.recommended_count - g.current_count),
        }
        for g in gap_analysis.gaps
        if g.priority in ("high", "medium")
    ]


def summarize(items: list[DraftItem]) -> str:
    counts = Counter(item.platform for item in items)
    breakdown = ", ".join(f"{p}: {c}" for p, c in counts.items()) or "none"
    return f"Generated {len(items)} content items. Platform breakdown: {breakdown}."


class WriterAgent:
    """LLM-powered drafting agent.

    Satisfies the ``AgentDefinition`` protocol.  The model name and
    temperature come from ``Settings`` unless given explicitly.
    """

    id = "writer"
    name = "Writer"
    description = "Generates educational social content with an LLM, guided by gap analysis."

    def __init__(self, model: str | None = None, temperature: float | None = None) -> None:
        self._model = model
        self._temperature = temperature

    def can_run(self, context: AgentContext) -> Preflight:
        if not (self._model or context.settings.model):
            return Preflight(ok=False, reason="An Ollama model is required. Set 'model' in settings.")
        if not context.settings.platforms:
            return Preflight(ok=False, reason="No target platforms configured in settings.")
        return Preflight(ok=True)

    async def execute(
        self,
        input: WriterInput,
        context: AgentContext,
        callbacks: AgentCallbacks,
    ) -> WriterOutput:
        settings = context.settings
        constraints = input.constraints

        callbacks.on_step_start("prepare-brief", "Preparing content generation brief")
        brief = {
            "subjects": list(constraints.subjects or settings.subjects),
            "levels": list(constraints.levels or settings.levels),
            "platforms": list(constraints.platforms or settings.platforms),
            "pillars": list(constraints.pillars or PILLARS),
            "gap_directives": build_gap_directives(input.gap_analysis or context.gap_analysis),
            "count": input.count if input.count is not None else settings.batch_size,
        }
        callbacks.on_step_complete(
            "prepare-brief",
            {
                "subjects": brief["subjects"],
                "platforms": brief["platforms"],
                "count": brief["count"],
                "gap_directive_count": len(brief["gap_directives"]),
            },
        )
        if callbacks.should_cancel():
            return WriterOutput(summary="Cancelled.")

        callbacks.on_step_start("generate-content", "Generating content with AI")
        try:
            items = await self._generate(brief, settings.model, settings.temperature)
        except GenerationError as exc:
            callbacks.on_step_error("generate-content", str(exc))
            raise
        callbacks.on_step_complete("generate-content", {"item_count": len(items)})
        if callbacks.should_cancel():
            return WriterOutput(content_items=tuple(items), summary="Cancelled.")

        callbacks.on_step_start("validate-output", "Validating content against platform rules")
        warnings: list[str] = []
        for i, item in enumerate(items):
            valid, item_warnings = validate_content(item)
            if not valid:
                warnings.append(
                    f"Item {i} ({item.platform}, \"{item.hook[:30]}...\"): "
                    + "; ".join(item_warnings)
                )
        callbacks.on_step_complete(
            "validate-output",
            {"total_items": len(items), "items_with_warnings": len(warnings), "warnings": warnings},
        )

        return WriterOutput(content_items=tuple(items), summary=summarize(items))

    async def _generate(
        self, brief: dict[str, Any], model: str, temperature: float
    ) -> list[DraftItem]:
        user_prompt = build_writer_user_prompt(**brief)
        model = self._model or model
        temperature = self._temperature if self._temperature is not None else temperature

        try:
            result = await asyncio.to_thread(
                ollama.chat,
                model=model,
                messages=[
                    {"role": "system", "content": WRITER_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                options={"temperature": temperature},
            )
        except Exception as exc:
            log.error("Ollama call failed: %s", exc)
            raise GenerationError(f"LLM error: {exc}") from exc

        raw = result.message.content
        log.debug("LLM raw response: %s", raw)

        try:
            batch = DraftBatch.model_validate(_parse_llm_response(raw))
        except json.JSONDecodeError as exc:
            log.warning("LLM returned invalid JSON: %s", exc)
            raise GenerationError("Failed to parse JSON response from LLM") from exc
        except ValidationError as exc:
            log.warning("LLM drafts failed validation: %s", exc)
            raise GenerationError(f"LLM drafts failed validation: {exc}") from exc

        return [
            item.model_copy(
                update={"content_type": resolve_content_type(item.platform, item.content_type)}
            )
            for item in batch.content_items
        ]
