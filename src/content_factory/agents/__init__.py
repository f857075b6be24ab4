"""Agent implementations and the agent registry."""

from content_factory.agents.registry import AgentRegistry, default_registry
from content_factory.agents.scheduler_agent import SchedulerAgent
from content_factory.agents.writer_agent import WriterAgent

__all__ = [
    "AgentRegistry",
    "SchedulerAgent",
    "WriterAgent",
    "default_registry",
]
