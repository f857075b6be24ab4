"""PipelineOrchestrator: runs a pipeline's agents in sequence.

Each step:
  1. Stops the run as cancelled if the cancel signal is already set.
  2. Moves ``current_step_index`` to the step and emits.
  3. Looks the step's agent up in the registry.
  4. Builds the step input: the initial input for step 0, otherwise the
     previous output, passed through the step's mapper if it has one.
  5. Delegates to the executor, merging every streamed ``AgentRun`` into
     the pipeline run by id.
  6. Continues, skips or stops depending on the outcome and on whether the
     step is optional.

Lookup, mapping and execution failures all end up as failed ``AgentRun``
entries, so the run history shows which phase broke.  A failed optional
step leaves the previous output untouched.  Cancellation, from the signal
or from inside an agent, always ends the whole run.

Nothing documented here raises out of ``run()``; callers read
``PipelineRun.status`` and the ``AgentRun.error`` fields instead.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from content_factory.core.ids import duration_ms, new_pipeline_run_id, new_run_id, utc_now
from content_factory.core.protocols import AgentExecutorLike, AgentLookup
from content_factory.core.types import (
    AgentContext,
    AgentRun,
    CancelSignal,
    PipelineDefinition,
    PipelineRun,
    PipelineStep,
    RunStatus,
)
from content_factory.orchestration.executor import AgentExecutor

log = logging.getLogger(__name__)

PipelineObserver = Callable[[PipelineRun], None]


def agent_not_found_message(agent_id: str) -> str:
    return f'Agent "{agent_id}" not found in registry'


def input_mapping_message(exc: Exception) -> str:
    return f"Input mapping failed: {exc}"


def failed_agent_run(agent_id: str, input: Any, error: str) -> AgentRun:
    """Failure record for a step whose agent never produced a run of its own."""
    now = utc_now()
    return AgentRun(
        id=new_run_id(agent_id),
        agent_id=agent_id,
        status=RunStatus.FAILED,
        input=input,
        error=error,
        started_at=now,
        completed_at=now,
        duration_ms=0,
    )


def settle_as_failed(run: AgentRun, error: str) -> AgentRun:
    """Close a run the executor left unfinished, keeping its id."""
    now = utc_now()
    return dataclasses.replace(
        run,
        status=RunStatus.FAILED,
        error=error,
        completed_at=now,
        duration_ms=duration_ms(run.started_at, now),
    )


@dataclass
class _RunState:
    """Orchestrator-owned mutable state behind the emitted snapshots."""

    id: str
    pipeline_id: str
    started_at: str
    status: RunStatus = RunStatus.RUNNING
    agent_runs: list[AgentRun] = field(default_factory=list)
    current_step_index: int = 0
    completed_at: str | None = None

    def upsert(self, run: AgentRun) -> None:
        for i, existing in enumerate(self.agent_runs):
            if existing.id == run.id:
                self.agent_runs[i] = run
                return
        self.agent_runs.append(run)

    def snapshot(self) -> PipelineRun:
        return PipelineRun(
            id=self.id,
            pipeline_id=self.pipeline_id,
            status=self.status,
            started_at=self.started_at,
            agent_runs=tuple(self.agent_runs),
            current_step_index=self.current_step_index,
            completed_at=self.completed_at,
        )


class _Emitter:
    def __init__(self, state: _RunState, observer: PipelineObserver | None) -> None:
        self._state = state
        self._observer = observer

    def __call__(self) -> PipelineRun:
        snapshot = self._state.snapshot()
        if self._observer is not None:
            self._observer(snapshot)
        return snapshot

    def finish(self, status: RunStatus) -> PipelineRun:
        self._state.status = status
        self._state.completed_at = utc_now()
        log.info("Pipeline run %s %s", self._state.id, status.value)
        return self()


class PipelineOrchestrator:
    """Drives one ``PipelineDefinition`` per ``run()`` call.

    The registry and executor are injected; both are only read, so one
    orchestrator can serve several concurrent runs.
    """

    def __init__(
        self,
        registry: AgentLookup,
        executor: AgentExecutorLike | None = None,
    ) -> None:
        self._registry = registry
        self._executor = executor if executor is not None else AgentExecutor()

    async def run(
        self,
        pipeline: PipelineDefinition,
        initial_input: Any,
        context: AgentContext,
        *,
        on_pipeline_update: PipelineObserver | None = None,
        cancel_signal: CancelSignal | None = None,
    ) -> PipelineRun:
        """Execute *pipeline* and return its terminal ``PipelineRun``.

        *on_pipeline_update* receives a frozen snapshot after every state
        change, starting before the first step; the returned run is the
        last snapshot it received.
        """
        if cancel_signal is None:
            cancel_signal = CancelSignal()

        state = _RunState(
            id=new_pipeline_run_id(pipeline.id),
            pipeline_id=pipeline.id,
            started_at=utc_now(),
        )
        emit = _Emitter(state, on_pipeline_update)
        log.info(
            "Starting pipeline '%s' (%d steps) as %s",
            pipeline.id, len(pipeline.steps), state.id,
        )
        emit()

        previous_output = initial_input
        total = len(pipeline.steps)

        for i, step in enumerate(pipeline.steps):
            if cancel_signal.cancelled:
                log.info("Pipeline '%s' cancelled before step %d", pipeline.id, i)
                return emit.finish(RunStatus.CANCELLED)

            state.current_step_index = i
            emit()
            log.info("Pipeline step %d/%d: %s", i + 1, total, step.agent_id)

            agent = self._registry.lookup(step.agent_id)
            if agent is None:
                state.upsert(
                    failed_agent_run(step.agent_id, None, agent_not_found_message(step.agent_id))
                )
                if self._skip_optional(step, "agent not found"):
                    emit()
                    continue
                return emit.finish(RunStatus.FAILED)

            if i == 0:
                step_input = initial_input
            elif step.input_mapper is None:
                step_input = previous_output
            else:
                try:
                    step_input = step.input_mapper(previous_output, context)
                except Exception as exc:
                    state.upsert(
                        failed_agent_run(step.agent_id, None, input_mapping_message(exc))
                    )
                    if self._skip_optional(step, f"input mapping failed: {exc}"):
                        emit()
                        continue
                    return emit.finish(RunStatus.FAILED)

            reported: dict[str, AgentRun] = {}

            def on_run_update(run: AgentRun) -> None:
                reported[run.id] = run
                state.upsert(run)
                emit()

            try:
                agent_run = await self._executor.execute(
                    agent,
                    step_input,
                    context,
                    on_run_update=on_run_update,
                    cancel_signal=cancel_signal,
                )
            except Exception as exc:
                # Only this attempt's own reports count as "already recorded",
                # so an agent reused by an earlier failed step still gets its entry.
                live = [r for r in reported.values() if not r.status.is_terminal]
                if live:
                    for live_run in live:
                        state.upsert(settle_as_failed(live_run, str(exc)))
                elif not any(r.status is RunStatus.FAILED for r in reported.values()):
                    state.upsert(failed_agent_run(step.agent_id, step_input, str(exc)))
                if self._skip_optional(step, str(exc)):
                    emit()
                    continue
                log.error("Step %d (%s) could not run: %s", i, step.agent_id, exc)
                return emit.finish(RunStatus.FAILED)

            if reported.get(agent_run.id) is not agent_run:
                state.upsert(agent_run)
                emit()

            if agent_run.status is RunStatus.COMPLETED:
                previous_output = agent_run.output
            elif agent_run.status is RunStatus.CANCELLED:
                return emit.finish(RunStatus.CANCELLED)
            elif self._skip_optional(step, agent_run.error):
                continue
            else:
                log.error("Step %d (%s) failed: %s", i, step.agent_id, agent_run.error)
                return emit.finish(RunStatus.FAILED)

        return emit.finish(RunStatus.COMPLETED)

    @staticmethod
    def _skip_optional(step: PipelineStep, reason: str | None) -> bool:
        if step.optional:
            log.warning("Skipping optional step '%s': %s", step.agent_id, reason)
        return step.optional
