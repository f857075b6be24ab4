"""Scheduler agent: assigns posting slots to drafted content.

Pure algorithmic, no LLM calls.  Three passes, each reported as an agent
step:

  1. ``assign-times``      every item gets a valid day and its platform's
                           optimal time for that day.
  2. ``resolve-conflicts`` items sharing a day+time slot are moved to a free
                           alternative best time, or pushed back by hours.
  3. ``distribute``        overloaded days hand excess items to the least
                           loaded day.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from content_factory.content.platforms import DAYS, PLATFORM_OPTIMAL_TIMES
from content_factory.content.scheduling import (
    get_optimal_time_for_platform,
    minutes_to_time_string,
    parse_time_to_minutes,
    slot_key,
)
from content_factory.core.protocols import AgentCallbacks
from content_factory.core.types import AgentContext, Preflight, SchedulerInput, SchedulerOutput

log = logging.getLogger(__name__)


def assign_times(items: list[Any]) -> int:
    for i, item in enumerate(items):
        day = item.day if item.day in DAYS else DAYS[i % len(DAYS)]
        items[i] = item.model_copy(
            update={"day": day, "time": get_optimal_time_for_platform(item.platform, day)}
        )
    return len(items)


def resolve_conflicts(items: list[Any]) -> int:
    """Spread items that share a slot; the first item in a slot keeps it."""
    slots: dict[tuple[str, int], list[int]] = {}
    for i, item in enumerate(items):
        slots.setdefault(slot_key(item.day, item.time), []).append(i)

    resolved = 0
    for indices in list(slots.values()):
        if len(indices) <= 1:
            continue
        for j, idx in enumerate(indices[1:], start=1):
            item = items[idx]
            alt_times = PLATFORM_OPTIMAL_TIMES.get(item.platform, {}).get("best_times", ())
            new_time = None
            for alt in alt_times:
                key = slot_key(item.day, alt)
                if not slots.get(key):
                    slots[key] = [idx]
                    new_time = alt
                    break
            if new_time is None:
                new_time = minutes_to_time_string(parse_time_to_minutes(item.time) + j * 60)
            items[idx] = item.model_copy(update={"time": new_time})
            resolved += 1
    return resolved


def day_counts(items: list[Any]) -> dict[str, int]:
    counts = {day: 0 for day in DAYS}
    for item in items:
        counts[item.day] = counts.get(item.day, 0) + 1
    return counts


def distribute(items: list[Any]) -> tuple[int, dict[str, int]]:
    """Move excess items off overloaded days.  Returns (moved, final counts)."""
    counts = day_counts(items)
    if not items:
        return 0, counts

    target = math.ceil(len(items) / len(DAYS))
    max_per_day = target + 1
    overloaded = sorted(
        (day for day, count in counts.items() if count > max_per_day),
        key=lambda d: counts[d],
        reverse=True,
    )

    moved_total = 0
    for over_day in overloaded:
        on_day = [idx for idx, item in enumerate(items) if item.day == over_day]
        excess = counts[over_day] - target
        moved = 0
        for idx in reversed(on_day):
            if moved >= excess:
                break
            under_day = min(DAYS, key=lambda d: counts[d])
            if counts[under_day] >= target:
                break
            item = items[idx]
            items[idx] = item.model_copy(
                update={
                    "day": under_day,
                    "time": get_optimal_time_for_platform(item.platform, under_day),
                }
            )
            counts[over_day] -= 1
            counts[under_day] += 1
            moved += 1
        moved_total += moved
    return moved_total, counts


def summarize(items: list[Any]) -> str:
    counts = day_counts(items)
    distribution = ", ".join(f"{day}: {counts.get(day, 0)}" for day in DAYS)
    return f"Scheduled {len(items)} items across the week. Distribution: {distribution}."


class SchedulerAgent:
    """Assigns optimal posting times and spreads content across the week.

    Satisfies the ``AgentDefinition`` protocol.
    """

    id = "scheduler"
    name = "Scheduler"
    description = (
        "Assigns optimal posting times, resolves conflicts, and distributes "
        "content evenly across the week."
    )

    def can_run(self, context: AgentContext) -> Preflight:
        return Preflight(ok=True)

    async def execute(
        self,
        input: SchedulerInput,
        context: AgentContext,
        callbacks: AgentCallbacks,
    ) -> SchedulerOutput:
        items = list(input.content_items)

        passes = (
            ("assign-times", "Assigning optimal posting times",
             lambda: {"assigned_count": assign_times(items)}),
            ("resolve-conflicts", "Resolving scheduling conflicts",
             lambda: {"conflicts_resolved": resolve_conflicts(items)}),
            ("distribute", "Distributing content across the week", lambda: _distribute_data(items)),
        )

        for i, (step_id, label, run_pass) in enumerate(passes):
            if i and callbacks.should_cancel():
                return SchedulerOutput(scheduled_items=tuple(items), summary="Cancelled.")
            callbacks.on_step_start(step_id, label)
            try:
                callbacks.on_step_complete(step_id, run_pass())
            except Exception as exc:
                log.warning("Scheduler pass '%s' failed: %s", step_id, exc)
                callbacks.on_step_error(step_id, str(exc))

        return SchedulerOutput(scheduled_items=tuple(items), summary=summarize(items))


def _distribute_data(items: list[Any]) -> dict[str, Any]:
    redistributed, counts = distribute(items)
    return {"redistributed": redistributed, "final_distribution": dict(counts)}
