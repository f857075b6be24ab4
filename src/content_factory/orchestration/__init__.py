"""Pipeline orchestration for multi-agent content generation."""

from content_factory.orchestration.batch import run_content_pipeline
from content_factory.orchestration.executor import AgentExecutor
from content_factory.orchestration.orchestrator import PipelineOrchestrator
from content_factory.orchestration.pipelines import (
    MAPPERS,
    PIPELINES,
    PipelineCatalogue,
    load_pipeline,
    pipeline_from_dict,
)

__all__ = [
    "MAPPERS",
    "PIPELINES",
    "AgentExecutor",
    "PipelineCatalogue",
    "PipelineOrchestrator",
    "load_pipeline",
    "pipeline_from_dict",
    "run_content_pipeline",
]
