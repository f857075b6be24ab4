"""Core types, protocols, and errors for ContentFactory."""

from content_factory.core.errors import (
    AgentNotFoundError,
    AgentPreconditionError,
    ContentFactoryError,
    GenerationError,
    PipelineError,
    SettingsError,
)
from content_factory.core.protocols import (
    AgentCallbacks,
    AgentDefinition,
    AgentExecutorLike,
    AgentLookup,
)
from content_factory.core.types import (
    AgentContext,
    AgentRun,
    AgentStep,
    CancelSignal,
    ContentBatch,
    ContentBatchItem,
    ContentGap,
    GapAnalysis,
    PipelineDefinition,
    PipelineRun,
    PipelineStep,
    Preflight,
    RunStatus,
    SchedulerInput,
    SchedulerOutput,
    Settings,
    WriterConstraints,
    WriterInput,
    WriterOutput,
)

__all__ = [
    "AgentCallbacks",
    "AgentContext",
    "AgentDefinition",
    "AgentExecutorLike",
    "AgentLookup",
    "AgentNotFoundError",
    "AgentPreconditionError",
    "AgentRun",
    "AgentStep",
    "CancelSignal",
    "ContentBatch",
    "ContentBatchItem",
    "ContentFactoryError",
    "ContentGap",
    "GapAnalysis",
    "GenerationError",
    "PipelineDefinition",
    "PipelineError",
    "PipelineRun",
    "PipelineStep",
    "Preflight",
    "RunStatus",
    "SchedulerInput",
    "SchedulerOutput",
    "Settings",
    "SettingsError",
    "WriterConstraints",
    "WriterInput",
    "WriterOutput",
]
