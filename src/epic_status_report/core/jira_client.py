"""Jira REST client: one authenticated GET per issue key."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import requests

from epic_status_report.core.data_models import IssueRecord
from epic_status_report.core.errors import DecodeError, FileIOError, TransportError

logger = logging.getLogger(__name__)


class JiraClient:
    """Fetch single issues from ``<base_url><issue key>``.

    There is no retry: any transport or decode failure is raised to the
    caller straight away.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token.strip()}",
            "Accept": "application/json",
        })

    @property
    def base_url(self) -> str:
        return self._base_url

    def issue_url(self, issue_id: str) -> str:
        """Return the request URL for *issue_id* (plain concatenation)."""
        return f"{self._base_url}{issue_id}"

    def fetch(self, issue_id: str) -> IssueRecord:
        """Fetch and decode one issue.

        Raises:
            TransportError: On connection failures and non-2xx responses.
            DecodeError: If the body is not an issue document.
        """
        url = self.issue_url(issue_id)
        logger.debug("Fetching %s", url)
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

        if not resp.ok:
            raise TransportError(
                f"GET {url} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        logger.debug("Raw response for %s: %s", issue_id, resp.text)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(f"{issue_id}: response is not valid JSON: {exc}") from exc

        record = IssueRecord.from_api(payload)
        logger.info("Fetched %s (%s)", record.key, record.status.category)
        return record

    @staticmethod
    def load_fixture(path: str | Path) -> IssueRecord:
        """Decode a saved issue document instead of calling the API."""
        fixture = Path(path)
        logger.debug("Loading fixture %s", fixture)
        try:
            raw = fixture.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileIOError(f"Cannot read fixture {fixture}: {exc}") from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"{fixture}: not valid JSON: {exc}") from exc
        return IssueRecord.from_api(payload)

    def close(self) -> None:
        self._session.close()
