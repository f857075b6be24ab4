"""Content pipeline runner: turns a full-content run into a reviewable batch."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from content_factory.core.errors import PipelineError
from content_factory.core.ids import new_id, utc_now
from content_factory.core.types import (
    AgentContext,
    CancelSignal,
    ContentBatch,
    ContentBatchItem,
    PipelineDefinition,
    RunStatus,
    SchedulerOutput,
    WriterInput,
)
from content_factory.orchestration.orchestrator import PipelineObserver, PipelineOrchestrator
from content_factory.orchestration.pipelines import FULL_CONTENT

log = logging.getLogger(__name__)


def batch_id(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"batch-{now.strftime('%Y-%m-%dT%H-%M-%S')}"


async def run_content_pipeline(
    orchestrator: PipelineOrchestrator,
    context: AgentContext,
    *,
    trigger: str = "manual",
    pipeline: PipelineDefinition | None = None,
    writer_input: WriterInput | None = None,
    on_pipeline_update: PipelineObserver | None = None,
    cancel_signal: CancelSignal | None = None,
) -> ContentBatch:
    """Run the writer + scheduler pipeline and package the result as a batch.

    Raises PipelineError when the run does not complete or the scheduler
    produced nothing.  Storing the batch is left to the caller.
    """
    pipeline = pipeline or FULL_CONTENT
    log.info("Starting content generation (trigger: %s)", trigger)

    run = await orchestrator.run(
        pipeline,
        writer_input or WriterInput(),
        context,
        on_pipeline_update=on_pipeline_update,
        cancel_signal=cancel_signal,
    )

    if run.status is not RunStatus.COMPLETED:
        if run.status is RunStatus.CANCELLED:
            raise PipelineError("Content pipeline was cancelled")
        raise PipelineError(run.error_summary())

    scheduler_run = next(
        (
            r for r in run.agent_runs
            if r.agent_id == "scheduler" and r.status is RunStatus.COMPLETED
        ),
        None,
    )
    if scheduler_run is None or not isinstance(scheduler_run.output, SchedulerOutput):
        raise PipelineError("Scheduler agent did not produce output")

    output = scheduler_run.output
    batch = ContentBatch(
        id=batch_id(),
        created_at=utc_now(),
        trigger=trigger,
        items=tuple(
            ContentBatchItem(temp_id=new_id(), status="pending", content=item)
            for item in output.scheduled_items
        ),
        pipeline_summary=output.summary,
        pipeline_run_id=run.id,
    )
    log.info("Batch %s created with %d items", batch.id, len(batch.items))
    return batch
