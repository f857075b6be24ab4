"""Core data types for ContentFactory.

Everything except ``CancelSignal`` is a frozen dataclass: immutable value
objects that flow between the registry, the executor, the orchestrator and
whoever observes a run.  ``CancelSignal`` is the one shared mutable object,
passed by reference so any holder can request cooperative cancellation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable


class RunStatus(str, enum.Enum):
    """Lifecycle status shared by agent runs, agent steps and pipeline runs."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED)


# ── Cancellation ──────────────────────────────────────────────────────────


@dataclass
class CancelSignal:
    """Cooperative cancellation flag shared by the caller, orchestrator and executor.

    Setting it never preempts anything.  The orchestrator checks it before
    each step and agents poll it through ``AgentCallbacks.should_cancel``.
    """

    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


# ── Agent runs ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AgentStep:
    """One sub-progress entry inside an agent run."""

    id: str
    label: str
    status: RunStatus
    started_at: str | None = None
    completed_at: str | None = None
    error: str | None = None
    data: Any = None


@dataclass(frozen=True)
class AgentRun:
    """Record of one agent execution attempt.

    ``output`` is only set when ``status`` is completed; ``error`` only
    when it is failed or cancelled.
    """

    id: str
    agent_id: str
    status: RunStatus
    input: Any
    started_at: str
    output: Any = None
    error: str | None = None
    completed_at: str | None = None
    duration_ms: int | None = None
    steps: tuple[AgentStep, ...] = ()


@dataclass(frozen=True)
class Preflight:
    """Answer of ``AgentDefinition.can_run``."""

    ok: bool
    reason: str | None = None


# ── Pipelines ─────────────────────────────────────────────────────────────

InputMapper = Callable[[Any, "AgentContext"], Any]


@dataclass(frozen=True)
class PipelineStep:
    """A single step in a pipeline: one agent, optionally fed through a mapper."""

    agent_id: str
    optional: bool = False
    input_mapper: InputMapper | None = None


@dataclass(frozen=True)
class PipelineDefinition:
    """Ordered, immutable pipeline configuration."""

    id: str
    name: str
    description: str = ""
    steps: tuple[PipelineStep, ...] = ()
    icon: str = ""


@dataclass(frozen=True)
class PipelineRun:
    """Snapshot of one pipeline execution.

    The orchestrator emits a fresh instance after every state change, so a
    captured snapshot never changes afterwards.
    """

    id: str
    pipeline_id: str
    status: RunStatus
    started_at: str
    agent_runs: tuple[AgentRun, ...] = ()
    current_step_index: int = 0
    completed_at: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def final_output(self) -> Any:
        """Output of the last completed agent run, or None if none completed.

        Failed optional steps never change the value threaded forward, so
        this is the output the pipeline actually delivered.
        """
        for run in reversed(self.agent_runs):
            if run.status is RunStatus.COMPLETED:
                return run.output
        return None

    @property
    def failed_runs(self) -> tuple[AgentRun, ...]:
        return tuple(r for r in self.agent_runs if r.status is RunStatus.FAILED)

    def error_summary(self) -> str:
        errors = [r.error for r in self.failed_runs if r.error]
        return "; ".join(errors) or "Pipeline failed with unknown error"


# ── Context ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Settings:
    """User settings visible to every agent through the context."""

    platforms: tuple[str, ...] = ()
    levels: tuple[str, ...] = ()
    subjects: tuple[str, ...] = ()
    batch_day: str = "Friday"
    batch_size: int = 40
    model: str = ""
    temperature: float = 0.7


@dataclass(frozen=True)
class ContentGap:
    """One under-covered dimension reported by gap analysis."""

    type: str
    value: str
    priority: str
    current_count: int = 0
    recommended_count: int = 0


@dataclass(frozen=True)
class GapAnalysis:
    gaps: tuple[ContentGap, ...] = ()


@dataclass(frozen=True)
class AgentContext:
    """Read-only snapshot of application state handed to agents and mappers."""

    settings: Settings = field(default_factory=Settings)
    content_items: tuple[Any, ...] = ()
    performance_items: tuple[Any, ...] = ()
    gap_analysis: GapAnalysis | None = None
    scheduling_analysis: Any = None


# ── Agent I/O ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class WriterConstraints:
    platforms: tuple[str, ...] = ()
    subjects: tuple[str, ...] = ()
    levels: tuple[str, ...] = ()
    pillars: tuple[str, ...] = ()


@dataclass(frozen=True)
class WriterInput:
    """Input of the writer agent.  Empty constraints fall back to settings."""

    count: int | None = None
    constraints: WriterConstraints = field(default_factory=WriterConstraints)
    gap_analysis: GapAnalysis | None = None


@dataclass(frozen=True)
class WriterOutput:
    content_items: tuple[Any, ...] = ()
    summary: str = ""


@dataclass(frozen=True)
class SchedulerInput:
    content_items: tuple[Any, ...] = ()


@dataclass(frozen=True)
class SchedulerOutput:
    scheduled_items: tuple[Any, ...] = ()
    summary: str = ""


# ── Content batches ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ContentBatchItem:
    temp_id: str
    status: str
    content: Any


@dataclass(frozen=True)
class ContentBatch:
    """Scheduled drafts produced by one content pipeline run, pending review."""

    id: str
    created_at: str
    trigger: str
    status: str = "pending"
    items: tuple[ContentBatchItem, ...] = ()
    pipeline_summary: str = ""
    pipeline_run_id: str = ""
