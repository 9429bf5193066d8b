"""Shared fixtures: Jira issue payload builders."""

from __future__ import annotations

from typing import Any, Callable

import pytest


def make_issue_payload(
    key: str = "PROJ-1",
    summary: str = "Do the thing",
    category: str = "In Progress",
    status_name: str = "In Progress",
    description: str | None = None,
    comments: list[dict[str, Any]] | None = None,
    links: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a Jira ``issue`` document with the fields the report reads."""
    return {
        "expand": "renderedFields",
        "id": "10000",
        "self": f"https://issues.example.com/rest/api/2/issue/{key}",
        "key": key,
        "fields": {
            "summary": summary,
            "status": {
                "name": status_name,
                "statusCategory": {"id": 4, "key": "indeterminate", "name": category},
            },
            "description": description,
            "comment": {
                "comments": comments or [],
                "maxResults": len(comments or []),
                "total": len(comments or []),
                "startAt": 0,
            },
            "issuelinks": links or [],
            "labels": ["backend"],
            "timeestimate": None,
        },
    }


def make_comment(author: str = "ann", created: str = "2024-01-01T00:00:00Z", body: str = "ok") -> dict[str, Any]:
    return {
        "id": "1",
        "author": {"name": author, "displayName": author.title()},
        "created": created,
        "updated": created,
        "body": body,
    }


@pytest.fixture
def issue_payload() -> Callable[..., dict[str, Any]]:
    return make_issue_payload


@pytest.fixture
def comment_payload() -> Callable[..., dict[str, Any]]:
    return make_comment
