"""
Tests for parsers/plan_scanner.py and display name derivation.

Covers:
- Features discovered at <phase>/<feature>/tasks.md only
- Absent plan root yields nothing
- Deterministic ordering, restartable scans
- Hidden and non-feature directories skipped
- display_name for NN-name and non-conforming directory names
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from doplan.models.plan import display_name
from doplan.parsers.plan_scanner import is_feature_dir, plan_exists, scan_plan


def _make_feature(plan: Path, phase: str, feature: str) -> Path:
    d = plan / phase / feature
    d.mkdir(parents=True, exist_ok=True)
    (d / "tasks.md").write_text("#### Task 1\n", encoding="utf-8")
    return d


class TestDisplayName:
    def test_phase_name(self):
        assert display_name("02-user-auth") == "user auth"

    def test_single_word(self):
        assert display_name("01-foundation") == "foundation"

    def test_underscores(self):
        assert display_name("03_payment_flow") == "payment flow"

    def test_multi_digit_ordinal(self):
        assert display_name("120-final-polish") == "final polish"

    def test_no_ordinal_kept_verbatim(self):
        assert display_name("misc-notes") == "misc-notes"

    def test_leading_separators_removed(self):
        assert display_name("--draft") == "draft"

    def test_digits_only(self):
        assert display_name("07") == "07"


class TestIsFeatureDir:
    def test_true_with_tasks_md(self, tmp_path):
        d = _make_feature(tmp_path, "01-a", "01-b")
        assert is_feature_dir(d) is True

    def test_false_without_tasks_md(self, tmp_path):
        d = tmp_path / "empty"
        d.mkdir()
        assert is_feature_dir(d) is False

    def test_false_for_file(self, tmp_path):
        f = tmp_path / "tasks.md"
        f.write_text("")
        assert is_feature_dir(f) is False


class TestScanPlan:
    def test_nonexistent_plan_dir(self, tmp_path):
        plan = tmp_path / "doplan" / "plan"
        assert plan_exists(plan) is False
        assert list(scan_plan(plan)) == []

    def test_empty_plan_dir(self, tmp_path):
        assert plan_exists(tmp_path) is True
        assert list(scan_plan(tmp_path)) == []

    def test_single_feature(self, tmp_path):
        feature = _make_feature(tmp_path, "01-foundation", "02-user-auth")
        [loc] = list(scan_plan(tmp_path))
        assert loc.phase_dir == tmp_path / "01-foundation"
        assert loc.feature_dir == feature
        assert loc.tasks_file == feature / "tasks.md"
        assert loc.phase_name == "foundation"
        assert loc.feature_name == "user auth"

    def test_sorted_by_phase_then_feature(self, tmp_path):
        _make_feature(tmp_path, "02-core", "02-search")
        _make_feature(tmp_path, "01-base", "02-auth")
        _make_feature(tmp_path, "02-core", "01-catalog")
        _make_feature(tmp_path, "01-base", "01-setup")
        names = [(l.phase_dir.name, l.feature_dir.name) for l in scan_plan(tmp_path)]
        assert names == [
            ("01-base", "01-setup"),
            ("01-base", "02-auth"),
            ("02-core", "01-catalog"),
            ("02-core", "02-search"),
        ]

    def test_restartable(self, tmp_path):
        _make_feature(tmp_path, "01-a", "01-b")
        _make_feature(tmp_path, "01-a", "02-c")
        assert list(scan_plan(tmp_path)) == list(scan_plan(tmp_path))

    def test_lazy(self, tmp_path):
        _make_feature(tmp_path, "01-a", "01-b")
        it = scan_plan(tmp_path)
        assert next(it).feature_dir.name == "01-b"
        with pytest.raises(StopIteration):
            next(it)

    def test_dir_without_tasks_skipped(self, tmp_path):
        _make_feature(tmp_path, "01-a", "01-real")
        (tmp_path / "01-a" / "02-docs").mkdir()
        assert [l.feature_dir.name for l in scan_plan(tmp_path)] == ["01-real"]

    def test_tasks_md_at_phase_level_ignored(self, tmp_path):
        phase = tmp_path / "01-a"
        phase.mkdir()
        (phase / "tasks.md").write_text("#### Task 1\n")
        assert list(scan_plan(tmp_path)) == []

    def test_nested_deeper_tasks_md_ignored(self, tmp_path):
        _make_feature(tmp_path / "01-a", "01-b", "notes")
        assert list(scan_plan(tmp_path)) == []

    def test_hidden_dirs_skipped(self, tmp_path):
        _make_feature(tmp_path, ".git", "01-b")
        _make_feature(tmp_path, "01-a", ".scratch")
        assert list(scan_plan(tmp_path)) == []

    def test_files_at_phase_level_skipped(self, tmp_path):
        (tmp_path / "phase-progress.json").write_text("{}")
        _make_feature(tmp_path, "01-a", "01-b")
        assert len(list(scan_plan(tmp_path))) == 1

    def test_unreadable_phase_skipped(self, tmp_path, monkeypatch, caplog):
        _make_feature(tmp_path, "01-locked", "01-b")
        _make_feature(tmp_path, "02-open", "01-c")
        locked = tmp_path / "01-locked"
        real_iterdir = Path.iterdir

        def iterdir(self):
            if self == locked:
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)
        with caplog.at_level(logging.WARNING):
            names = [l.feature_dir.name for l in scan_plan(tmp_path)]
        assert names == ["01-c"]
        assert "Skipping unreadable directory" in caplog.text

    def test_unreadable_feature_skipped(self, tmp_path, monkeypatch):
        _make_feature(tmp_path, "01-a", "01-locked")
        _make_feature(tmp_path, "01-a", "02-open")
        locked_tasks = tmp_path / "01-a" / "01-locked" / "tasks.md"
        real_is_file = Path.is_file

        def is_file(self):
            if self == locked_tasks:
                raise PermissionError(13, "Permission denied", str(self))
            return real_is_file(self)

        monkeypatch.setattr(Path, "is_file", is_file)
        assert [l.feature_dir.name for l in scan_plan(tmp_path)] == ["02-open"]

    def test_non_conforming_names_still_scanned(self, tmp_path):
        _make_feature(tmp_path, "backlog", "ideas")
        [loc] = list(scan_plan(tmp_path))
        assert loc.phase_name == "backlog"
        assert loc.feature_name == "ideas"
