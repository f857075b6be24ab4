"""Tests for pipeline definitions, mappers and the YAML catalogue."""

from __future__ import annotations

import pytest

from content_factory.agents.models import DraftItem
from content_factory.core.errors import PipelineError
from content_factory.core.types import SchedulerInput, WriterOutput
from content_factory.orchestration.pipelines import (
    FULL_CONTENT,
    PipelineCatalogue,
    load_pipeline,
    pipeline_from_dict,
    writer_to_scheduler,
)

AGENTS = frozenset({"writer", "scheduler"})


class TestWriterToScheduler:
    def test_from_writer_output(self, context):
        item = DraftItem(platform="tiktok", hook="h")
        mapped = writer_to_scheduler(WriterOutput(content_items=(item,)), context)
        assert mapped == SchedulerInput(content_items=(item,))

    def test_from_dict(self, context):
        mapped = writer_to_scheduler({"content_items": ["a", "b"]}, context)
        assert mapped.content_items == ("a", "b")

    def test_rejects_other_shapes(self, context):
        with pytest.raises(TypeError, match="got int"):
            writer_to_scheduler(42, context)


class TestFullContent:
    def test_shape(self):
        assert FULL_CONTENT.id == "full-content"
        assert [s.agent_id for s in FULL_CONTENT.steps] == ["writer", "scheduler"]
        assert FULL_CONTENT.steps[0].input_mapper is None
        assert FULL_CONTENT.steps[1].input_mapper is writer_to_scheduler
        assert not any(s.optional for s in FULL_CONTENT.steps)


class TestPipelineFromDict:
    def test_full_definition(self):
        p = pipeline_from_dict(
            {
                "id": "p",
                "name": "P",
                "steps": [
                    "writer",
                    {"agent": "scheduler", "mapper": "writer_to_scheduler"},
                    {"agent_id": "tagger", "optional": True},
                ],
            },
            AGENTS,
        )
        assert [s.agent_id for s in p.steps] == ["writer", "scheduler", "tagger"]
        assert p.steps[1].input_mapper is writer_to_scheduler
        assert p.steps[2].optional is True

    def test_name_defaults_to_id(self):
        assert pipeline_from_dict({"id": "p"}).name == "p"

    @pytest.mark.parametrize(
        "data, match",
        [
            (["writer"], "mapping"),
            ({"steps": []}, "'id'"),
            ({"id": "p", "steps": [{"optional": True}]}, "no 'agent'"),
            ({"id": "p", "steps": ["ghost"]}, "unknown agent 'ghost'"),
            ({"id": "p", "steps": [{"agent": "writer", "mapper": "nope"}]}, "Unknown input mapper"),
            ({"id": "p", "steps": [42]}, "must be an agent id or a mapping"),
            ({"id": "p", "steps": "writer"}, "'steps' must be a list"),
            ({"id": "p", "steps": [{"agent": ["writer"]}]}, "'agent' must be a string"),
            ({"id": "p", "steps": [{"agent": "writer", "optional": "false"}]}, "'optional' must be"),
            ({"id": "p", "steps": [{"agent": "writer", "mapper": ["x"]}]}, "Unknown input mapper"),
        ],
    )
    def test_invalid(self, data, match):
        with pytest.raises(PipelineError, match=match):
            pipeline_from_dict(data, AGENTS)

    def test_unknown_agent_allowed_without_registry(self):
        assert pipeline_from_dict({"id": "p", "steps": ["ghost"]}).steps[0].agent_id == "ghost"


class TestCatalogue:
    def test_load_yaml_files(self, tmp_path):
        (tmp_path / "draft.yaml").write_text("id: draft-only\nname: Drafts\nsteps:\n  - agent: writer\n")
        catalogue = PipelineCatalogue(tmp_path)
        catalogue.load(AGENTS)

        assert "draft-only" in catalogue
        assert "full-content" in catalogue
        assert catalogue.get("draft-only").name == "Drafts"

    def test_broken_file_skipped(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("id: [unclosed\n")
        (tmp_path / "ghost.yaml").write_text("id: ghost\nsteps: [ghost]\n")
        catalogue = PipelineCatalogue(tmp_path)
        catalogue.load(AGENTS)
        assert catalogue.list_pipelines() == ["full-content"]

    def test_malformed_step_file_skipped(self, tmp_path):
        (tmp_path / "numbers.yaml").write_text("id: numbers\nsteps: [42]\n")
        (tmp_path / "quoted.yaml").write_text(
            "id: quoted\nsteps:\n  - agent: writer\n    optional: \"false\"\n"
        )
        (tmp_path / "good.yaml").write_text("id: good\nsteps: [writer]\n")
        catalogue = PipelineCatalogue(tmp_path)
        catalogue.load(AGENTS)
        assert catalogue.list_pipelines() == ["full-content", "good"]

    def test_yaml_replaces_builtin(self, tmp_path):
        (tmp_path / "full.yaml").write_text("id: full-content\nname: Custom\nsteps: [writer]\n")
        catalogue = PipelineCatalogue(tmp_path)
        catalogue.load(AGENTS)
        assert catalogue.get("full-content").name == "Custom"

    def test_missing_dir_keeps_builtins(self, tmp_path):
        catalogue = PipelineCatalogue(tmp_path / "nope")
        catalogue.load()
        assert catalogue.list_pipelines() == ["full-content"]

    def test_get_missing_raises(self, tmp_path):
        with pytest.raises(PipelineError, match="Available"):
            PipelineCatalogue(tmp_path).get("nope")

    def test_load_pipeline_missing_file(self, tmp_path):
        with pytest.raises(PipelineError, match="Failed to load"):
            load_pipeline(tmp_path / "missing.yaml")

    def test_shipped_pipelines_load(self):
        catalogue = PipelineCatalogue()
        catalogue.load(AGENTS)
        assert "draft-only" in catalogue
