"""Pipeline catalogue: built-in definitions, named input mappers, YAML loading.

Pipeline YAML files look like::

    id: full-content
    name: Generate Content
    description: Generate content and schedule optimal posting times.
    steps:
      - agent: writer
      - agent: scheduler
        mapper: writer_to_scheduler
      - agent: tagger
        optional: true

Mappers are referenced by name and resolved against ``MAPPERS``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from content_factory.core.errors import PipelineError
from content_factory.core.types import (
    AgentContext,
    InputMapper,
    PipelineDefinition,
    PipelineStep,
    SchedulerInput,
    WriterOutput,
)

log = logging.getLogger(__name__)

_DEFAULT_PIPELINES_DIR = Path(__file__).resolve().parents[3] / "configs" / "pipelines"


# ── Input mappers ─────────────────────────────────────────────────────────


def writer_to_scheduler(previous_output: Any, context: AgentContext) -> SchedulerInput:
    """Hand the writer's drafts to the scheduler."""
    if isinstance(previous_output, WriterOutput):
        items = previous_output.content_items
    elif isinstance(previous_output, dict) and "content_items" in previous_output:
        items = previous_output["content_items"]
    else:
        raise TypeError(
            "expected writer output with content items, "
            f"got {type(previous_output).__name__}"
        )
    return SchedulerInput(content_items=tuple(items))


MAPPERS: dict[str, InputMapper] = {
    "writer_to_scheduler": writer_to_scheduler,
}


# ── Built-in pipelines ────────────────────────────────────────────────────

FULL_CONTENT = PipelineDefinition(
    id="full-content",
    name="Generate Content",
    description="Generate content and schedule optimal posting times.",
    icon="sparkles",
    steps=(
        PipelineStep(agent_id="writer"),
        PipelineStep(agent_id="scheduler", input_mapper=writer_to_scheduler),
    ),
)

PIPELINES: dict[str, PipelineDefinition] = {FULL_CONTENT.id: FULL_CONTENT}


# ── Parsing ───────────────────────────────────────────────────────────────


def pipeline_from_dict(
    data: dict[str, Any],
    known_agents: frozenset[str] | None = None,
) -> PipelineDefinition:
    """Parse a pipeline config dict into a ``PipelineDefinition``.

    When *known_agents* is given, mandatory steps must name one of them.
    Optional steps may reference agents that are not registered; the
    orchestrator records and skips those at run time.
    """
    if not isinstance(data, dict):
        raise PipelineError("Pipeline definition must be a mapping")

    pipeline_id = data.get("id")
    if not pipeline_id or not isinstance(pipeline_id, str):
        raise PipelineError("Pipeline must have a non-empty 'id' string")

    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise PipelineError(f"Pipeline '{pipeline_id}' 'steps' must be a list")

    steps = []
    for n, raw in enumerate(raw_steps):
        if isinstance(raw, str):
            raw = {"agent": raw}
        if not isinstance(raw, dict):
            raise PipelineError(
                f"Step {n} of pipeline '{pipeline_id}' must be an agent id or a mapping"
            )
        agent_id = raw.get("agent", raw.get("agent_id"))
        if not agent_id:
            raise PipelineError(f"Step {n} of pipeline '{pipeline_id}' has no 'agent'")
        if not isinstance(agent_id, str):
            raise PipelineError(f"Step {n} of pipeline '{pipeline_id}': 'agent' must be a string")

        optional = raw.get("optional", False)
        if not isinstance(optional, bool):
            raise PipelineError(
                f"Step {n} of pipeline '{pipeline_id}': 'optional' must be true or false"
            )
        if known_agents is not None and not optional and agent_id not in known_agents:
            raise PipelineError(
                f"Step {n} of pipeline '{pipeline_id}' references unknown agent "
                f"'{agent_id}'. Known agents: {sorted(known_agents)}"
            )

        mapper_name = raw.get("mapper")
        mapper = None
        if mapper_name is not None:
            if not isinstance(mapper_name, str) or mapper_name not in MAPPERS:
                raise PipelineError(
                    f"Unknown input mapper '{mapper_name}' in pipeline '{pipeline_id}'. "
                    f"Available: {sorted(MAPPERS)}"
                )
            mapper = MAPPERS[mapper_name]

        steps.append(PipelineStep(agent_id=agent_id, optional=optional, input_mapper=mapper))

    return PipelineDefinition(
        id=pipeline_id,
        name=data.get("name", pipeline_id),
        description=data.get("description", ""),
        icon=data.get("icon", ""),
        steps=tuple(steps),
    )


def load_pipeline(
    path: str | Path, known_agents: frozenset[str] | None = None
) -> PipelineDefinition:
    """Read one pipeline YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise PipelineError(f"Failed to load pipeline {path}: {exc}") from exc
    return pipeline_from_dict(data, known_agents)


class PipelineCatalogue:
    """Built-in pipelines plus any YAML pipelines found in a directory.

    A YAML pipeline with the same id as a built-in replaces it.
    """

    def __init__(self, pipelines_dir: str | Path | None = None) -> None:
        self._dir = Path(pipelines_dir) if pipelines_dir else _DEFAULT_PIPELINES_DIR
        self._pipelines: dict[str, PipelineDefinition] = dict(PIPELINES)

    def load(self, known_agents: frozenset[str] | None = None) -> None:
        """Scan the pipelines directory and load all YAML files.

        A missing directory leaves only the built-ins; a broken file is
        skipped with a warning.
        """
        if not self._dir.is_dir():
            log.debug("No pipelines directory at %s", self._dir)
            return

        for path in sorted(self._dir.glob("*.yaml")):
            try:
                pipeline = load_pipeline(path, known_agents)
            except PipelineError as exc:
                log.warning("Skipping %s: %s", path.name, exc)
                continue
            self._pipelines[pipeline.id] = pipeline
            log.info("Loaded pipeline '%s' from %s", pipeline.id, path.name)

    def add(self, pipeline: PipelineDefinition) -> None:
        self._pipelines[pipeline.id] = pipeline

    def get(self, pipeline_id: str) -> PipelineDefinition:
        if pipeline_id not in self._pipelines:
            raise PipelineError(
                f"Pipeline '{pipeline_id}' not found. "
                f"Available: {list(self._pipelines)}"
            )
        return self._pipelines[pipeline_id]

    def list_pipelines(self) -> list[str]:
        return list(self._pipelines)

    def __contains__(self, pipeline_id: str) -> bool:
        return pipeline_id in self._pipelines
