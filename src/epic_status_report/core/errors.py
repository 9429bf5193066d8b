"""Exceptions raised while building a status report.

Every error aborts the run unless failure isolation is switched on; the CLI
is the only place that turns them into an exit status.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for all report generation failures."""


class CredentialReadError(ReportError):
    """The bearer token could not be read."""


class TransportError(ReportError):
    """The issue tracker could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ReportError):
    """A response body does not have the expected issue shape."""


class MalformedLinkError(ReportError):
    """An epic link entry has no outward issue."""


class FileIOError(ReportError):
    """The report file could not be created, truncated or appended to."""
