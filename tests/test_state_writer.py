"""
Tests for state/writer.py, utils/files.py and operations.recompute_progress.

Covers:
- Feature, phase and dashboard record shapes
- Dashboard markdown rendering
- One timestamp per run, full replacement of previous records
- Idempotence apart from updated_at
- Dry run writes nothing
- Atomic write failure reports the path and leaves no temp file
"""

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from doplan.config import PlanConfig
from doplan.errors import StateFileError, StateWriteError
from doplan.operations import recompute_progress
from doplan.progress.pipeline import build_dashboard
from doplan.state.writer import (
    StateWriter,
    dashboard_record,
    feature_record,
    phase_record,
    render_dashboard_markdown,
)
from doplan.utils.files import atomic_write_text, read_json
from plan_fixtures import make_sample_plan

MOMENT = datetime(2025, 3, 14, 9, 26, 53, tzinfo=timezone.utc)
LATER = datetime(2025, 3, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path):
    make_sample_plan(tmp_path)
    return PlanConfig(root=tmp_path)


def _load(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def _strip_timestamps(data):
    if isinstance(data, dict):
        return {k: _strip_timestamps(v) for k, v in data.items() if k != "updated_at"}
    if isinstance(data, list):
        return [_strip_timestamps(v) for v in data]
    return data


class TestRecords:
    def test_feature_record(self, config):
        auth = build_dashboard(config).phases[0].features[1]
        record = feature_record(auth, "2025-03-14T09:26:53+00:00")
        assert record["feature"] == "user auth"
        assert record["priority"] == "medium"
        assert record["status"] == "in_progress"
        assert record["progress"] == pytest.approx(33.333, abs=0.01)
        assert record["tasks"] == {
            "total": 3, "completed": 1, "in_progress": 1, "not_started": 1, "blocked": 0,
        }
        assert record["updated_at"] == "2025-03-14T09:26:53+00:00"

    def test_phase_record(self, config):
        foundation = build_dashboard(config).phases[0]
        record = phase_record(foundation, "t")
        assert record["phase"] == "foundation"
        assert record["status"] == "in_progress"
        assert record["progress"] == pytest.approx(66.667, abs=0.01)
        assert record["features"] == {
            "total": 2, "completed": 1, "in_progress": 1, "not_started": 0, "blocked": 0,
        }

    def test_dashboard_record(self, config):
        record = dashboard_record(build_dashboard(config))
        assert record["project_name"] == "Untitled Project"
        assert [p["name"] for p in record["phases"]] == ["foundation", "core features"]
        assert record["phases"][1]["status"] == "blocked"
        catalog = record["phases"][1]["features"][0]
        assert catalog["name"] == "catalog"
        assert catalog["priority"] == "low"
        assert catalog["tasks"]["blocked"] == 1


class TestMarkdown:
    def test_sections(self, config):
        md = render_dashboard_markdown(build_dashboard(config), MOMENT)
        assert md.startswith("# Project Dashboard\n")
        assert "**Project:** Untitled Project" in md
        assert "**Last Updated:** 2025-03-14 09:26:53 UTC" in md
        assert "**33.3%** Complete" in md
        assert "### foundation" in md
        assert "- **user auth** (medium) - 33.3% - in_progress" in md
        assert "- **Total Tasks:** 7" in md
        assert "- **Blocked:** 1" in md

    def test_progress_bar_width(self, config):
        md = render_dashboard_markdown(build_dashboard(config), MOMENT)
        bars = [line for line in md.splitlines() if line.startswith("[")]
        assert bars
        assert all(len(bar) == 32 for bar in bars)
        # core features phase sits at 0%
        assert bars[-1] == "[" + "░" * 30 + "]"

    def test_blocked_line_omitted_when_zero(self, tmp_path):
        from plan_fixtures import make_feature, task_block, tasks_doc

        make_feature(tmp_path, "01-a", "01-b", tasks_doc(task_block("1", "Completed")))
        md = render_dashboard_markdown(build_dashboard(PlanConfig(root=tmp_path)), MOMENT)
        assert "**Blocked:**" not in md


class TestStateWriter:
    def test_stages_every_file(self, config):
        writer = StateWriter(config)
        writer.stage_dashboard(build_dashboard(config), MOMENT)
        plan = config.plan_dir
        assert set(writer.staged_paths) == {
            plan / "01-foundation" / "01-project-setup" / "progress.json",
            plan / "01-foundation" / "02-user-auth" / "progress.json",
            plan / "02-core-features" / "01-catalog" / "progress.json",
            plan / "01-foundation" / "phase-progress.json",
            plan / "02-core-features" / "phase-progress.json",
            config.dashboard_json,
            config.dashboard_md,
        }

    def test_nothing_written_before_commit(self, config):
        writer = StateWriter(config)
        writer.stage_dashboard(build_dashboard(config), MOMENT)
        assert not config.dashboard_json.exists()
        assert not config.dashboard_md.exists()

    def test_commit_writes_and_clears(self, config):
        writer = StateWriter(config)
        writer.stage_dashboard(build_dashboard(config), MOMENT)
        written = writer.commit()
        assert len(written) == 7
        assert all(p.is_file() for p in written)
        assert writer.staged_paths == []

    def test_one_timestamp_per_run(self, config):
        writer = StateWriter(config)
        writer.stage_dashboard(build_dashboard(config), MOMENT)
        stamps = {
            _load(p)["updated_at"]
            for p in writer.commit()
            if p.suffix == ".json"
        }
        assert stamps == {"2025-03-14T09:26:53+00:00"}


class TestRecomputeProgress:
    def test_no_plan_returns_none(self, tmp_path):
        assert recompute_progress(PlanConfig(root=tmp_path)) is None
        assert not (tmp_path / ".doplan").exists()

    def test_writes_records(self, config):
        result = recompute_progress(config, moment=MOMENT)
        assert result.dry_run is False
        assert len(result.files) == 7
        dashboard = _load(config.dashboard_json)
        assert dashboard["overall_progress"] == pytest.approx(33.333, abs=0.01)
        assert dashboard["updated_at"] == "2025-03-14T09:26:53+00:00"

    def test_dry_run_writes_nothing(self, config):
        before = sorted(p for p in config.root.rglob("*"))
        result = recompute_progress(config, dry_run=True, moment=MOMENT)
        assert result.dry_run is True
        assert len(result.files) == 7
        assert sorted(p for p in config.root.rglob("*")) == before

    def test_idempotent_apart_from_timestamps(self, config):
        recompute_progress(config, moment=MOMENT)
        first = {p: _load(p) for p in config.root.rglob("*.json")}
        recompute_progress(config, moment=LATER)
        second = {p: _load(p) for p in config.root.rglob("*.json")}
        assert first.keys() == second.keys()
        for path in first:
            assert _strip_timestamps(first[path]) == _strip_timestamps(second[path])
        assert second[config.dashboard_json]["updated_at"] == "2025-03-15T10:00:00+00:00"

    def test_full_replacement(self, config):
        feature_file = config.plan_dir / "01-foundation" / "01-project-setup" / "progress.json"
        feature_file.write_text(json.dumps({"priority": "high", "stale": True, "notes": "x"}))
        recompute_progress(config, moment=MOMENT)
        record = _load(feature_file)
        assert "stale" not in record
        assert "notes" not in record
        assert record["priority"] == "high"

    def test_priority_survives_rewrite(self, config):
        recompute_progress(config, moment=MOMENT)
        recompute_progress(config, moment=LATER)
        catalog = _load(config.plan_dir / "02-core-features" / "01-catalog" / "progress.json")
        assert catalog["priority"] == "low"

    def test_no_temp_files_left(self, config):
        recompute_progress(config, moment=MOMENT)
        assert not [p for p in config.root.rglob("*.tmp")]


class TestFiles:
    def test_atomic_write_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "out.json"
        atomic_write_text(target, "{}\n")
        assert target.read_text() == "{}\n"

    def test_atomic_write_replaces(self, tmp_path):
        target = tmp_path / "out.json"
        target.write_text("old")
        atomic_write_text(target, "new")
        assert target.read_text() == "new"

    def test_failure_reports_path_and_cleans_up(self, tmp_path, monkeypatch):
        target = tmp_path / "out.json"
        target.write_text("old")

        def fail_replace(src, dst):
            raise PermissionError("read-only")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(StateWriteError) as exc_info:
            atomic_write_text(target, "new")
        assert exc_info.value.path == target
        assert str(target) in str(exc_info.value)
        assert target.read_text() == "old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.json"]

    def test_read_json_malformed(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops")
        with pytest.raises(StateFileError) as exc_info:
            read_json(path)
        assert exc_info.value.path == path

    def test_read_json_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_bytes(b'{"priority": "\xff\xfe"}')
        with pytest.raises(StateFileError) as exc_info:
            read_json(path)
        assert exc_info.value.path == path

    def test_read_json_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_json(tmp_path / "missing.json")
