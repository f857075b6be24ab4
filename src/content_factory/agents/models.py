"""Pydantic models for the JSON drafts returned by the writer's LLM."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DraftItem(BaseModel):
    """One drafted post, not yet scheduled or stored."""

    day: str = ""
    time: str = ""
    platform: str
    hook: str
    caption: str = ""
    hashtags: list[str] = Field(default_factory=list)
    topic: str = ""
    subject: str = ""
    level: str = ""
    pillar: str = ""
    content_type: str = Field(default="video", alias="contentType")
    script: str | None = None
    body: str | None = None
    subreddit: str | None = None
    estimated_duration: str | None = Field(default=None, alias="estimatedDuration")

    model_config = {"populate_by_name": True}


class DraftBatch(BaseModel):
    """Top-level object the writer prompt asks the LLM to return."""

    content_items: list[DraftItem] = Field(default_factory=list, alias="contentItems")

    model_config = {"populate_by_name": True}
