"""Settings loading: YAML file deep-merged over built-in defaults."""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from content_factory.content.platforms import KNOWN_PLATFORMS
from content_factory.core.errors import SettingsError
from content_factory.core.types import AgentContext, GapAnalysis, Settings

log = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "CONTENT_FACTORY_SETTINGS"

_DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[3] / "configs" / "settings.yaml"

_LIST_FIELDS = ("platforms", "levels", "subjects")

_DEFAULT_SETTINGS: dict[str, Any] = {
    "content": {
        "platforms": ["tiktok", "shorts", "reels"],
        "levels": ["GCSE", "A-Level"],
        "subjects": ["Biology", "Chemistry", "Physics", "Maths"],
        "batch_day": "Friday",
        "batch_size": 21,
    },
    "llm": {
        "model": "llama3.2:latest",
        "temperature": 0.7,
    },
}


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a deep copy of *base*."""
    result = copy.deepcopy(base)
    for key, val in overrides.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = copy.deepcopy(val)
    return result


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build ``Settings`` from a (possibly partial) settings dict."""
    merged = _deep_merge(_DEFAULT_SETTINGS, data)
    content = merged["content"]
    llm = merged["llm"]

    for section, value in (("content", content), ("llm", llm)):
        if not isinstance(value, dict):
            raise SettingsError(f"Settings section '{section}' must be a mapping")
    for key in _LIST_FIELDS:
        if not isinstance(content.get(key), list):
            raise SettingsError(f"'content.{key}' must be a list")

    try:
        unknown = set(content["platforms"]) - KNOWN_PLATFORMS
        if unknown:
            raise SettingsError(
                f"Unknown platform(s) {sorted(unknown)}. "
                f"Valid platforms: {', '.join(sorted(KNOWN_PLATFORMS))}"
            )
        return Settings(
            platforms=tuple(content["platforms"]),
            levels=tuple(content["levels"]),
            subjects=tuple(content["subjects"]),
            batch_day=str(content["batch_day"]),
            batch_size=int(content["batch_size"]),
            model=str(llm.get("model") or ""),
            temperature=float(llm["temperature"]),
        )
    except (TypeError, ValueError, KeyError) as exc:
        raise SettingsError(f"Invalid settings value: {exc}") from exc


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from *path*, ``$CONTENT_FACTORY_SETTINGS`` or the default file.

    A missing file yields the defaults.
    """
    if path is None:
        path = os.environ.get(SETTINGS_ENV_VAR) or _DEFAULT_SETTINGS_PATH
    path = Path(path)

    if not path.is_file():
        log.info("No settings file at %s, using defaults", path)
        return settings_from_dict({})

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")

    log.info("Loaded settings from %s", path)
    return settings_from_dict(data)


def build_context(
    settings: Settings,
    *,
    content_items: tuple[Any, ...] = (),
    performance_items: tuple[Any, ...] = (),
    gap_analysis: GapAnalysis | None = None,
    scheduling_analysis: Any = None,
) -> AgentContext:
    """Assemble the read-only context handed to every agent in a run."""
    return AgentContext(
        settings=settings,
        content_items=tuple(content_items),
        performance_items=tuple(performance_items),
        gap_analysis=gap_analysis,
        scheduling_analysis=scheduling_analysis,
    )
