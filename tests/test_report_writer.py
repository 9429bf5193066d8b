"""Tests for epic_status_report.core.report_writer."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from epic_status_report.core.data_models import IssueRole, ReportFragment
from epic_status_report.core.errors import FileIOError
from epic_status_report.core.report_writer import ReportWriter, report_path


def _fragment(key: str, *lines: str) -> ReportFragment:
    return ReportFragment(key, IssueRole.STORY, lines)


class TestReportPath:
    def test_staging_layout(self, tmp_path: Path) -> None:
        assert report_path(tmp_path, "status.md") == tmp_path / "staging" / "status.md"


class TestInitialize:
    def test_writes_dated_header(self, tmp_path: Path) -> None:
        writer = ReportWriter(tmp_path / "report.md", title="Weekly Report")
        writer.initialize("2024-03-01")
        assert writer.read_text() == "# [2024-03-01] Weekly Report\n\n\n"

    def test_is_destructive(self, tmp_path: Path) -> None:
        path = tmp_path / "report.md"
        path.write_text("old content\nfrom last week\n", encoding="utf-8")
        writer = ReportWriter(path)
        writer.initialize("2024-03-01")
        assert path.read_text(encoding="utf-8") == writer.header("2024-03-01")

    def test_creates_missing_directories(self, tmp_path: Path) -> None:
        writer = ReportWriter(report_path(tmp_path, "report.md"))
        writer.initialize("2024-03-01")
        assert (tmp_path / "staging" / "report.md").is_file()

    def test_sets_file_mode(self, tmp_path: Path) -> None:
        path = tmp_path / "report.md"
        ReportWriter(path, file_mode=0o640).initialize("2024-03-01")
        assert stat.S_IMODE(path.stat().st_mode) == 0o640

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(FileIOError):
            ReportWriter(blocker / "report.md").initialize("2024-03-01")


class TestAppend:
    def test_appends_in_call_order(self, tmp_path: Path) -> None:
        writer = ReportWriter(tmp_path / "report.md", title="T")
        writer.initialize("2024-03-01")
        writer.append(_fragment("A-1", "first"))
        writer.append(_fragment("A-2", "second"))
        assert writer.read_text() == "# [2024-03-01] T\n\n\nfirst\nsecond\n"

    def test_empty_fragment_writes_nothing(self, tmp_path: Path) -> None:
        writer = ReportWriter(tmp_path / "report.md", title="T")
        writer.initialize("2024-03-01")
        writer.append(_fragment("A-1"))
        assert writer.read_text() == writer.header("2024-03-01")

    def test_append_failure_raises(self, tmp_path: Path) -> None:
        writer = ReportWriter(tmp_path / "missing-dir" / "report.md")
        with pytest.raises(FileIOError):
            writer.append(_fragment("A-1", "x"))
