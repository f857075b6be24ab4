#!/usr/bin/env python3
"""
ContentFactory CLI
==================

Runs content pipelines from the terminal and shows live progress:
  - List registered agents and available pipelines
  - Run a pipeline step by step, watching each agent's sub-steps
  - Generate a reviewable content batch (writer + scheduler)

Subcommands:
    python3 cli.py agents
    python3 cli.py pipelines
    python3 cli.py show full-content
    python3 cli.py run full-content --count 10
    python3 cli.py batch --settings configs/settings.yaml

Press Ctrl-C during a run to cancel it cooperatively.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from typing import Any, Awaitable, Callable

# ─── ANSI color constants ────────────────────────────────────────────────

BOLD = "\033[1m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"

EXIT_FAILED = 1
EXIT_CANCELLED = 130

# ─── Print helpers ───────────────────────────────────────────────────────


def ok(msg: str) -> None:
    print(f"    {GREEN}✓{RESET} {msg}")


def err(msg: str) -> None:
    print(f"    {RED}✗{RESET} {msg}")


def info(msg: str) -> None:
    print(f"    {DIM}{msg}{RESET}")


def show_data(label: str, value: object) -> None:
    print(f"    {CYAN}{label}:{RESET} {value}")


STATUS_COLORS = {
    "running": YELLOW,
    "completed": GREEN,
    "failed": RED,
    "cancelled": YELLOW,
}


def status_label(status: Any) -> str:
    value = getattr(status, "value", status)
    return f"{STATUS_COLORS.get(value, DIM)}{value.upper()}{RESET}"


# ─── Live progress ───────────────────────────────────────────────────────


class ProgressPrinter:
    """Pipeline observer that prints one line per visible change."""

    def __init__(self, pipeline: Any) -> None:
        self._total = len(pipeline.steps)
        self._seen: dict[str, tuple[str, int]] = {}
        self._step = -1

    def __call__(self, run: Any) -> None:
        if run.current_step_index != self._step and run.status.value == "running" and self._total:
            self._step = run.current_step_index
            print(f"  {BOLD}Step {self._step + 1}/{self._total}{RESET}")

        for agent_run in run.agent_runs:
            key = (agent_run.status.value, len(agent_run.steps))
            if self._seen.get(agent_run.id) == key:
                continue
            self._seen[agent_run.id] = key
            latest = agent_run.steps[-1].label if agent_run.steps else ""
            print(f"    [{status_label(agent_run.status)}] {CYAN}{agent_run.agent_id}{RESET} "
                  f"{DIM}{latest}{RESET}")


def show_run(run: Any) -> None:
    """Summarise a finished pipeline run."""
    print()
    print(f"  {BOLD}Pipeline run:{RESET} {run.id}  [{status_label(run.status)}]")
    for agent_run in run.agent_runs:
        duration = f"{agent_run.duration_ms} ms" if agent_run.duration_ms is not None else "-"
        print(f"    [{status_label(agent_run.status)}] {CYAN}{agent_run.agent_id:12s}{RESET} "
              f"{DIM}{duration}{RESET}")
        for step in agent_run.steps:
            info(f"   {step.label}: {step.status.value}")
        if agent_run.error:
            err(agent_run.error)
        summary = getattr(agent_run.output, "summary", None)
        if summary:
            show_data("  Summary", summary)
    print()


async def with_cancel_on_sigint(func: Callable[[Any], Awaitable[Any]]) -> Any:
    """Run ``func(cancel_signal)``, turning Ctrl-C into a cooperative cancel."""
    from content_factory.core.types import CancelSignal

    cancel_signal = CancelSignal()
    loop = asyncio.get_running_loop()

    def _on_sigint() -> None:
        print(f"\n  {YELLOW}Cancelling after the current step...{RESET}")
        cancel_signal.cancel()

    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, _on_sigint)
    try:
        return await func(cancel_signal)
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)


# ─── Stack assembly ──────────────────────────────────────────────────────


def build_stack(args) -> tuple[Any, Any, Any]:
    """Return (registry, catalogue, context) for the given CLI args."""
    from content_factory.agents.registry import default_registry
    from content_factory.config.settings import build_context, load_settings
    from content_factory.orchestration.pipelines import PipelineCatalogue

    registry = default_registry()
    catalogue = PipelineCatalogue(getattr(args, "pipelines_dir", None))
    catalogue.load(known_agents=registry.agent_ids())
    settings = load_settings(getattr(args, "settings", None))
    return registry, catalogue, build_context(settings)


# ─── Subcommand handlers ─────────────────────────────────────────────────


def cmd_agents(args) -> None:
    """Handle 'cli.py agents' subcommand."""
    registry, _, context = build_stack(args)

    print(f"\n  {BOLD}Registered agents:{RESET}")
    for agent in registry.list_agents():
        preflight = agent.can_run(context)
        state = f"{GREEN}ready{RESET}" if preflight.ok else f"{RED}{preflight.reason}{RESET}"
        print(f"    {CYAN}{agent.id:12s}{RESET}  {agent.description}")
        info(f"   {state}")
    print()


def cmd_pipelines(args) -> None:
    """Handle 'cli.py pipelines' subcommand."""
    _, catalogue, _ = build_stack(args)

    names = catalogue.list_pipelines()
    if not names:
        info("No pipelines found.")
        return

    print(f"\n  {BOLD}Available pipelines:{RESET}")
    for name in names:
        pipeline = catalogue.get(name)
        print(f"    {CYAN}{name:20s}{RESET}  steps={len(pipeline.steps)}  {pipeline.name}")
    print()


def cmd_show(args) -> None:
    """Handle 'cli.py show <pipeline>' subcommand."""
    from content_factory.core.errors import PipelineError

    _, catalogue, _ = build_stack(args)

    try:
        pipeline = catalogue.get(args.name)
    except PipelineError as exc:
        err(str(exc))
        sys.exit(EXIT_FAILED)

    print(f"\n  {BOLD}Pipeline: {pipeline.id}{RESET}")
    if pipeline.description:
        info(pipeline.description)
    print()
    for i, step in enumerate(pipeline.steps, 1):
        mapper = step.input_mapper.__name__ if step.input_mapper else "none"
        flag = f" {YELLOW}(optional){RESET}" if step.optional else ""
        print(f"    {DIM}{i}.{RESET} {CYAN}{step.agent_id:16s}{RESET} mapper={mapper}{flag}")
    print()


def cmd_run(args) -> None:
    """Handle 'cli.py run <pipeline>' subcommand."""
    from content_factory.core.errors import PipelineError
    from content_factory.core.types import RunStatus, WriterInput
    from content_factory.orchestration.orchestrator import PipelineOrchestrator

    registry, catalogue, context = build_stack(args)
    try:
        pipeline = catalogue.get(args.name)
    except PipelineError as exc:
        err(str(exc))
        sys.exit(EXIT_FAILED)

    orchestrator = PipelineOrchestrator(registry)
    initial_input = WriterInput(count=args.count)

    print(f"\n  {BOLD}Executing pipeline '{pipeline.id}'...{RESET}\n")
    run = asyncio.run(with_cancel_on_sigint(
        lambda cancel_signal: orchestrator.run(
            pipeline,
            initial_input,
            context,
            on_pipeline_update=ProgressPrinter(pipeline),
            cancel_signal=cancel_signal,
        )
    ))
    show_run(run)

    if run.status is RunStatus.COMPLETED:
        ok("Pipeline execution complete.")
    elif run.status is RunStatus.CANCELLED:
        err("Pipeline cancelled.")
        sys.exit(EXIT_CANCELLED)
    else:
        err(f"Pipeline failed: {run.error_summary()}")
        sys.exit(EXIT_FAILED)


def cmd_batch(args) -> None:
    """Handle 'cli.py batch' subcommand: writer + scheduler into a content batch."""
    from content_factory.core.errors import PipelineError
    from content_factory.orchestration.batch import run_content_pipeline
    from content_factory.orchestration.orchestrator import PipelineOrchestrator
    from content_factory.orchestration.pipelines import FULL_CONTENT

    registry, _, context = build_stack(args)
    orchestrator = PipelineOrchestrator(registry)

    try:
        batch = asyncio.run(with_cancel_on_sigint(
            lambda cancel_signal: run_content_pipeline(
                orchestrator,
                context,
                trigger="manual",
                on_pipeline_update=ProgressPrinter(FULL_CONTENT),
                cancel_signal=cancel_signal,
            )
        ))
    except PipelineError as exc:
        err(str(exc))
        sys.exit(EXIT_FAILED)

    print()
    ok(f"Batch {batch.id} created with {len(batch.items)} items")
    show_data("Summary", batch.pipeline_summary)
    for item in batch.items:
        post = item.content
        print(f"    {DIM}{post.day:10s} {post.time:9s}{RESET} {CYAN}{post.platform:9s}{RESET} {post.hook}")
    print()


# ─── Argparse ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli.py",
        description="ContentFactory CLI: run agent pipelines that plan social content.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--settings", default=None, metavar="PATH",
        help="Settings YAML (default: configs/settings.yaml)",
    )
    parser.add_argument(
        "--pipelines-dir", default=None, metavar="PATH",
        help="Directory of pipeline YAML files (default: configs/pipelines)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("agents", help="List registered agents")
    sub.add_parser("pipelines", help="List available pipelines")

    p_show = sub.add_parser("show", help="Show a pipeline's steps")
    p_show.add_argument("name", help="Pipeline id")

    p_run = sub.add_parser("run", help="Run a pipeline with live progress")
    p_run.add_argument("name", help="Pipeline id")
    p_run.add_argument(
        "--count", type=int, default=None,
        help="Number of posts to draft (default: settings batch_size)",
    )

    sub.add_parser("batch", help="Generate and schedule a content batch")

    return parser


# ─── Main ───────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "agents": cmd_agents,
        "pipelines": cmd_pipelines,
        "show": cmd_show,
        "run": cmd_run,
        "batch": cmd_batch,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except KeyboardInterrupt:
        print()
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        # SettingsError and friends: report, don't dump a traceback
        from content_factory.core.errors import ContentFactoryError

        if not isinstance(exc, ContentFactoryError):
            raise
        err(str(exc))
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
