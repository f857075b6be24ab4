"""AgentRegistry: the catalogue of agent definitions pipelines refer to by id."""

from __future__ import annotations

import logging

from content_factory.core.errors import AgentNotFoundError
from content_factory.core.protocols import AgentDefinition

log = logging.getLogger(__name__)


class AgentRegistry:
    """Mapping from agent id to agent definition.

    Registering an id that already exists replaces the previous definition,
    which is how a deployment swaps in its own writer implementation.
    Registration is not synchronised against concurrent lookups; finish
    registering before starting any pipeline run.
    """

    def __init__(self, agents: list[AgentDefinition] | None = None) -> None:
        self._agents: dict[str, AgentDefinition] = {}
        for agent in agents or []:
            self.register(agent)

    def register(self, agent: AgentDefinition) -> None:
        """Add *agent*, overriding any earlier registration with the same id."""
        if agent.id in self._agents:
            log.info("Overriding agent '%s' with %s", agent.id, type(agent).__name__)
        else:
            log.debug("Registered agent '%s'", agent.id)
        self._agents[agent.id] = agent

    def unregister(self, agent_id: str) -> None:
        if agent_id not in self._agents:
            raise AgentNotFoundError(self._missing_message(agent_id))
        del self._agents[agent_id]
        log.debug("Unregistered agent '%s'", agent_id)

    def lookup(self, agent_id: str) -> AgentDefinition | None:
        """Return the agent registered as *agent_id*, or None."""
        return self._agents.get(agent_id)

    def get(self, agent_id: str) -> AgentDefinition:
        """Return the agent registered as *agent_id* or raise AgentNotFoundError."""
        agent = self._agents.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(self._missing_message(agent_id))
        return agent

    def list_agents(self) -> list[AgentDefinition]:
        return list(self._agents.values())

    def agent_ids(self) -> frozenset[str]:
        return frozenset(self._agents)

    def __contains__(self, agent_id: str) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def _missing_message(self, agent_id: str) -> str:
        return (
            f"Agent '{agent_id}' not found. "
            f"Available: {sorted(self._agents)}"
        )


def default_registry() -> AgentRegistry:
    """Registry pre-loaded with the built-in writer and scheduler agents."""
    from content_factory.agents.scheduler_agent import SchedulerAgent
    from content_factory.agents.writer_agent import WriterAgent

    return AgentRegistry([WriterAgent(), SchedulerAgent()])
