"""AgentExecutor: runs a single agent and records the attempt as an AgentRun.

Not part of any pipeline logic.  The orchestrator hands it one agent at a
time and listens to the run snapshots it streams through ``on_run_update``.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable

from content_factory.core.errors import AgentPreconditionError
from content_factory.core.ids import duration_ms, new_run_id, utc_now
from content_factory.core.protocols import AgentDefinition
from content_factory.core.types import (
    AgentContext,
    AgentRun,
    AgentStep,
    CancelSignal,
    RunStatus,
)

log = logging.getLogger(__name__)

_CANCELLED_MESSAGE = "Agent execution was cancelled"
_CANNOT_RUN_MESSAGE = "Agent cannot run in the current context"


class _RunRecorder:
    """Mutable working copy of one AgentRun.

    Implements ``AgentCallbacks`` for the agent and publishes a frozen
    ``AgentRun`` snapshot after every change.
    """

    def __init__(
        self,
        agent_id: str,
        input: Any,
        on_run_update: Callable[[AgentRun], None],
        cancel_signal: CancelSignal,
    ) -> None:
        self._on_run_update = on_run_update
        self._cancel_signal = cancel_signal
        self._steps: list[AgentStep] = []
        self.run = AgentRun(
            id=new_run_id(agent_id),
            agent_id=agent_id,
            status=RunStatus.RUNNING,
            input=input,
            started_at=utc_now(),
        )

    def emit(self) -> None:
        self.run = dataclasses.replace(self.run, steps=tuple(self._steps))
        self._on_run_update(self.run)

    def finish(self, status: RunStatus, *, output: Any = None, error: str | None = None) -> AgentRun:
        completed_at = utc_now()
        self.run = dataclasses.replace(
            self.run,
            status=status,
            output=output,
            error=error,
            completed_at=completed_at,
            duration_ms=duration_ms(self.run.started_at, completed_at),
        )
        self.emit()
        return self.run

    def _update_step(self, step_id: str, **changes: Any) -> None:
        for i, step in enumerate(self._steps):
            if step.id == step_id:
                self._steps[i] = dataclasses.replace(step, completed_at=utc_now(), **changes)
                return

    # ── AgentCallbacks ────────────────────────────────────────────────────

    def on_step_start(self, step_id: str, label: str) -> None:
        self._steps.append(
            AgentStep(id=step_id, label=label, status=RunStatus.RUNNING, started_at=utc_now())
        )
        self.emit()

    def on_step_complete(self, step_id: str, data: Any = None) -> None:
        self._update_step(step_id, status=RunStatus.COMPLETED, data=data)
        self.emit()

    def on_step_error(self, step_id: str, error: str) -> None:
        self._update_step(step_id, status=RunStatus.FAILED, error=error)
        self.emit()

    def on_progress(self, message: str) -> None:
        log.debug("[%s] %s", self.run.agent_id, message)
        self.emit()

    def should_cancel(self) -> bool:
        return self._cancel_signal.cancelled


class AgentExecutor:
    """Executes one agent definition against an input.

    ``execute`` resolves to a completed, failed or cancelled ``AgentRun``.
    The one exception is a failed pre-flight check: the failed run is still
    reported through ``on_run_update``, then ``AgentPreconditionError`` is
    raised because the agent never started.  A ``can_run`` that raises is
    reported the same way and its exception propagates.
    """

    async def execute(
        self,
        agent: AgentDefinition,
        input: Any,
        context: AgentContext,
        *,
        on_run_update: Callable[[AgentRun], None],
        cancel_signal: CancelSignal,
    ) -> AgentRun:
        recorder = _RunRecorder(agent.id, input, on_run_update, cancel_signal)
        recorder.emit()

        try:
            preflight = agent.can_run(context)
        except Exception as exc:
            log.error("Pre-flight check for agent '%s' raised: %s", agent.id, exc)
            recorder.finish(RunStatus.FAILED, error=str(exc) or type(exc).__name__)
            raise
        if not preflight.ok:
            reason = preflight.reason or _CANNOT_RUN_MESSAGE
            log.warning("Agent '%s' declined to run: %s", agent.id, reason)
            recorder.finish(RunStatus.FAILED, error=reason)
            raise AgentPreconditionError(reason)

        log.info("Running agent '%s'", agent.id)
        try:
            output = await agent.execute(input, context, recorder)
        except Exception as exc:
            log.error("Agent '%s' failed: %s", agent.id, exc)
            return recorder.finish(RunStatus.FAILED, error=str(exc) or type(exc).__name__)

        if cancel_signal.cancelled:
            log.info("Agent '%s' cancelled", agent.id)
            return recorder.finish(RunStatus.CANCELLED, error=_CANCELLED_MESSAGE)

        run = recorder.finish(RunStatus.COMPLETED, output=output)
        log.info("Agent '%s' completed in %d ms", agent.id, run.duration_ms)
        return run
