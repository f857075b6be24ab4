"""Identifier and timestamp helpers shared by the executor and orchestrator."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Return a random collision-resistant hex id."""
    return uuid.uuid4().hex


def new_run_id(agent_id: str) -> str:
    return f"run-{agent_id}-{new_id()}"


def new_pipeline_run_id(pipeline_id: str) -> str:
    return f"pipeline-{pipeline_id}-{new_id()}"


def utc_now() -> str:
    """ISO-8601 timestamp for the current instant (UTC)."""
    return datetime.now(timezone.utc).isoformat()


def duration_ms(started_at: str, completed_at: str) -> int:
    """Milliseconds between two timestamps produced by ``utc_now``."""
    start = datetime.fromisoformat(started_at)
    end = datetime.fromisoformat(completed_at)
    return max(0, int((end - start).total_seconds() * 1000))
