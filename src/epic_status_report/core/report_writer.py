"""Append-only markdown report file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from epic_status_report.core.data_models import ReportFragment
from epic_status_report.core.errors import FileIOError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Bi-Weekly Status Report"


def report_path(working_dir: str | Path, document_name: str) -> Path:
    """Return ``<working_dir>/staging/<document_name>``."""
    return Path(working_dir) / "staging" / document_name


class ReportWriter:
    """Write the dated header once, then append fragments in fetch order.

    Each write is flushed and synced before returning so the file order
    always matches the order fragments were handed in.
    """

    def __init__(
        self, path: str | Path, title: str = DEFAULT_TITLE, file_mode: int = 0o777,
    ) -> None:
        self._path = Path(path)
        self._title = title
        self._file_mode = file_mode

    @property
    def path(self) -> Path:
        return self._path

    def header(self, date_label: str) -> str:
        return f"# [{date_label}] {self._title}\n\n\n"

    def initialize(self, date_label: str) -> None:
        """Truncate (or create) the report and write the dated header."""
        logger.info("Initialising report %s", self._path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as fh:
                fh.write(self.header(date_label))
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(self._path, self._file_mode)
        except OSError as exc:
            raise FileIOError(f"Cannot initialise report {self._path}: {exc}") from exc

    def append(self, fragment: ReportFragment) -> None:
        """Append *fragment* to the end of the report."""
        text = fragment.text
        if not text:
            logger.debug("Nothing to append for %s", fragment.key)
            return
        logger.debug("Appending %s %s to %s", fragment.role.value, fragment.key, self._path)
        try:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write(text)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as exc:
            raise FileIOError(f"Cannot append to report {self._path}: {exc}") from exc

    def read_text(self) -> str:
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileIOError(f"Cannot read report {self._path}: {exc}") from exc
