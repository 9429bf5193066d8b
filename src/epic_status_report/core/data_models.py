"""Data models for Epic Status Report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from epic_status_report.core.errors import DecodeError


class IssueRole(str, Enum):
    """How an issue is rendered; assigned by the pipeline, not by Jira."""

    EPIC = "EPIC"
    STORY = "STORY"


@dataclass(frozen=True)
class IssueComment:
    """A single comment on an issue."""

    author: str
    created: str  # verbatim from the API
    body: str


@dataclass(frozen=True)
class IssueLink:
    """An entry of ``fields.issuelinks``."""

    link_id: str
    outward_key: str | None


@dataclass(frozen=True)
class IssueStatus:
    """Workflow status and its coarse category ("To Do", "In Progress", "Done")."""

    name: str
    category: str


@dataclass(frozen=True)
class IssueRecord:
    """The subset of a Jira issue response the report needs."""

    key: str
    summary: str
    status: IssueStatus
    description: str | None = None
    comments: tuple[IssueComment, ...] = ()
    links: tuple[IssueLink, ...] = ()
    # Raw ``fields`` payload; never read by the renderer.
    fields: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, payload: Any) -> IssueRecord:
        """Strictly decode a Jira ``issue`` JSON document.

        Raises:
            DecodeError: If a required field is missing or any field the
                report reads has the wrong type.
        """
        root = _as_mapping(payload, "$")
        key = _require_str(root, "key", "$")
        fields = _as_mapping(root.get("fields"), "$.fields")

        summary = _require_str(fields, "summary", "$.fields")
        status_raw = _as_mapping(fields.get("status"), "$.fields.status")
        category_raw = _as_mapping(
            status_raw.get("statusCategory"), "$.fields.status.statusCategory",
        )
        status = IssueStatus(
            name=_optional_str(status_raw, "name", "$.fields.status") or "",
            category=_require_str(category_raw, "name", "$.fields.status.statusCategory"),
        )

        return cls(
            key=key,
            summary=summary,
            status=status,
            description=_optional_str(fields, "description", "$.fields"),
            comments=_decode_comments(fields.get("comment")),
            links=_decode_links(fields.get("issuelinks")),
            fields=fields,
        )


@dataclass(frozen=True)
class ReportFragment:
    """Rendered markdown for one issue, written to the report exactly once."""

    key: str
    role: IssueRole
    lines: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


@dataclass
class RunConfig:
    """Configuration for a report generation run."""

    base_url: str = ""
    api_key_path: str = ""
    working_dir: str = "."
    document_name: str = "weekly-status-report.md"
    test: bool = False
    fixture_path: str = "docs/test-example.json"
    report_title: str = "Bi-Weekly Status Report"
    render_profile: str = "plain"
    browse_url: str = ""
    request_timeout: float | None = None
    isolate_failures: bool = False
    file_mode: int = 0o777


@dataclass
class RunSummary:
    """What a run wrote, in fetch order."""

    report_path: Path
    epics: list[str] = field(default_factory=list)
    stories: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


# -- decoding helpers ---------------------------------------------------------


def _as_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(f"{path}: expected an object, got {type(value).__name__}")
    return value


def _require_str(obj: Mapping[str, Any], name: str, path: str) -> str:
    if name not in obj:
        raise DecodeError(f"{path}.{name}: missing required field")
    value = obj[name]
    if not isinstance(value, str):
        raise DecodeError(f"{path}.{name}: expected a string, got {type(value).__name__}")
    return value


def _optional_str(obj: Mapping[str, Any], name: str, path: str) -> str | None:
    value = obj.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{path}.{name}: expected a string, got {type(value).__name__}")
    return value


def _decode_comments(raw: Any) -> tuple[IssueComment, ...]:
    if raw is None:
        return ()
    container = _as_mapping(raw, "$.fields.comment")
    entries = container.get("comments")
    if entries is None:
        return ()
    if not isinstance(entries, list):
        raise DecodeError("$.fields.comment.comments: expected a list")

    comments: list[IssueComment] = []
    for i, entry in enumerate(entries):
        path = f"$.fields.comment.comments[{i}]"
        obj = _as_mapping(entry, path)
        author = _as_mapping(obj.get("author"), f"{path}.author")
        name = _optional_str(author, "name", f"{path}.author") or _optional_str(
            author, "displayName", f"{path}.author",
        )
        if name is None:
            raise DecodeError(f"{path}.author: missing name and displayName")
        comments.append(
            IssueComment(
                author=name,
                created=_require_str(obj, "created", path),
                body=_require_str(obj, "body", path),
            )
        )
    return tuple(comments)


def _decode_links(raw: Any) -> tuple[IssueLink, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DecodeError("$.fields.issuelinks: expected a list")

    links: list[IssueLink] = []
    for i, entry in enumerate(raw):
        path = f"$.fields.issuelinks[{i}]"
        obj = _as_mapping(entry, path)
        outward = obj.get("outwardIssue")
        outward_key = None
        if outward is not None:
            outward_key = _require_str(
                _as_mapping(outward, f"{path}.outwardIssue"), "key", f"{path}.outwardIssue",
            )
        links.append(IssueLink(link_id=str(obj.get("id", "")), outward_key=outward_key))
    return tuple(links)
