"""PEP 544 structural protocols for ContentFactory components."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from content_factory.core.types import AgentContext, AgentRun, CancelSignal, Preflight


@runtime_checkable
class AgentCallbacks(Protocol):
    """Progress hooks an agent uses while it executes."""

    def on_step_start(self, step_id: str, label: str) -> None:
        ...

    def on_step_complete(self, step_id: str, data: Any = None) -> None:
        ...

    def on_step_error(self, step_id: str, error: str) -> None:
        ...

    def on_progress(self, message: str) -> None:
        ...

    def should_cancel(self) -> bool:
        """Return True once cancellation has been requested."""
        ...


@runtime_checkable
class AgentDefinition(Protocol):
    """A registered unit of work: writer, scheduler, etc."""

    id: str
    name: str
    description: str

    def can_run(self, context: AgentContext) -> Preflight:
        """Check whether the agent can run given the current context."""
        ...

    async def execute(
        self, input: Any, context: AgentContext, callbacks: AgentCallbacks
    ) -> Any:
        """Do the work and return the agent's output."""
        ...


@runtime_checkable
class AgentLookup(Protocol):
    """Read side of the agent registry, as seen by the orchestrator."""

    def lookup(self, agent_id: str) -> AgentDefinition | None:
        ...


@runtime_checkable
class AgentExecutorLike(Protocol):
    """Runs one agent to a terminal ``AgentRun``.

    Returns a completed, failed or cancelled run for every normal outcome
    and raises only when the agent cannot be started at all.
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
        ...
