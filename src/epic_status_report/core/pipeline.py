"""Fetch epics and their linked stories and write them to the report."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from epic_status_report.core.data_models import IssueRecord, IssueRole, RunSummary
from epic_status_report.core.errors import DecodeError, FileIOError, TransportError
from epic_status_report.core.jira_client import JiraClient
from epic_status_report.core.links import linked_story_ids
from epic_status_report.core.markdown_renderer import DEFAULT_PROFILE, RenderProfile, render
from epic_status_report.core.report_writer import ReportWriter

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def parse_issue_ids(text: str) -> list[str]:
    """Split a comma-separated list of issue keys, dropping blanks."""
    return [part.strip() for part in text.split(",") if part.strip()]


def today_label() -> str:
    return datetime.now(timezone.utc).strftime(DATE_FORMAT)


class ReportPipeline:
    """Sequential epic → stories pipeline.

    By default the first failure aborts the run and whatever was already
    appended stays in the report. With ``isolate_failures`` a failing
    story (or a link without an outward issue) is logged, recorded in
    :attr:`RunSummary.errors` and skipped; epic failures still abort.
    """

    def __init__(
        self,
        client: JiraClient,
        writer: ReportWriter,
        profile: RenderProfile = DEFAULT_PROFILE,
        isolate_failures: bool = False,
    ) -> None:
        self._client = client
        self._writer = writer
        self._profile = profile
        self._isolate = isolate_failures

    def run(
        self,
        issue_ids: Iterable[str],
        *,
        date_label: str | None = None,
        initialize: bool = True,
    ) -> RunSummary:
        """Render every epic in *issue_ids* followed by its linked stories."""
        summary = RunSummary(report_path=self._writer.path)
        if initialize:
            self._writer.initialize(date_label or today_label())
        elif not self._writer.path.is_file():
            raise FileIOError(f"Cannot append to missing report {self._writer.path}")

        for raw_id in issue_ids:
            epic_id = raw_id.strip()
            if not epic_id:
                continue
            self._run_epic(epic_id, summary)

        logger.info(
            "Report %s: %d epics, %d stories, %d skipped",
            summary.report_path, len(summary.epics), len(summary.stories), len(summary.errors),
        )
        return summary

    def run_test_mode(self, fixture_path: str | Path) -> IssueRecord:
        """Decode a saved issue instead of fetching; nothing is rendered."""
        logger.info("mode        : testing")
        record = self._client.load_fixture(fixture_path)
        logger.info("response from test %r", record)
        return record

    # -- internals ------------------------------------------------------------

    def _run_epic(self, epic_id: str, summary: RunSummary) -> None:
        logger.info("Processing epic %s", epic_id)
        epic = self._client.fetch(epic_id)
        self._writer.append(render(epic, IssueRole.EPIC, self._profile))
        summary.epics.append(epic.key)

        story_ids = linked_story_ids(
            epic, strict=not self._isolate, skipped=summary.errors,
        )
        for story_id in story_ids:
            try:
                story = self._client.fetch(story_id)
            except (TransportError, DecodeError) as exc:
                if not self._isolate:
                    raise
                logger.warning("Skipping story %s of %s: %s", story_id, epic.key, exc)
                summary.errors.append(f"{story_id}: {exc}")
                continue
            self._writer.append(render(story, IssueRole.STORY, self._profile))
            summary.stories.append(story.key)
