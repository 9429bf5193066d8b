"""Markdown rendering of epics and stories for the status report.

An epic always renders its heading, status, description and a ``Stories``
heading that the following story fragments land under. A story always gets
a bold heading and status line (unless the profile hides inactive stories);
its description and comments are only rendered while its status category
contains ``"In Progress"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from epic_status_report.core.data_models import IssueRecord, IssueRole, ReportFragment

logger = logging.getLogger(__name__)

IN_PROGRESS = "In Progress"


@dataclass(frozen=True)
class RenderProfile:
    """Formatting conventions for one report flavour."""

    name: str
    browse_url: str = ""  # empty renders plain keys
    indent: str = ""  # prefix for story description and comment lines
    show_inactive_stories: bool = True


PROFILES: dict[str, RenderProfile] = {
    "plain": RenderProfile(name="plain"),
    "linked": RenderProfile(
        name="linked",
        browse_url="https://issues.redhat.com/browse/",
        indent="\t",
    ),
    "compact": RenderProfile(name="compact", indent="\t", show_inactive_stories=False),
}

DEFAULT_PROFILE = PROFILES["plain"]


def get_profile(name: str, browse_url: str | None = None) -> RenderProfile:
    """Look up a built-in profile.

    *browse_url* only replaces the link target of profiles that already
    hyperlink keys; plain-key profiles ignore it.
    """
    try:
        profile = PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown render profile {name!r} (known: {known})") from None
    if browse_url and profile.browse_url:
        profile = replace(profile, browse_url=browse_url)
    return profile


# -- line normalisation -------------------------------------------------------


def normalize_line(line: str) -> str:
    """Strip carriage returns, turn ``* `` bullets into ``- `` and trim."""
    return line.replace("\r", "").replace("* ", "- ").strip()


def normalize_comment_line(line: str) -> str:
    """Like :func:`normalize_line` but keeps indentation and converts code blocks."""
    return (
        line.replace("\r", "")
        .replace("* ", "- ")
        .replace("{code:java}", "```bash")
        .replace("{code}", "```")
        .rstrip()
    )


def description_lines(description: str | None) -> list[str]:
    if description is None:
        return []
    return [normalize_line(line) for line in description.split("\n")]


# -- rendering ----------------------------------------------------------------


def render(
    issue: IssueRecord, role: IssueRole, profile: RenderProfile = DEFAULT_PROFILE,
) -> ReportFragment:
    """Render *issue* as an epic or story fragment."""
    if role is IssueRole.EPIC:
        lines = _render_epic(issue, profile)
    else:
        lines = _render_story(issue, profile)
    logger.debug("Rendered %s %s (%d lines)", role.value, issue.key, len(lines))
    return ReportFragment(key=issue.key, role=role, lines=tuple(lines))


def _key_ref(key: str, profile: RenderProfile) -> str:
    if profile.browse_url:
        return f"[{key}]({profile.browse_url}{key})"
    return f"[{key}]"


def _render_epic(issue: IssueRecord, profile: RenderProfile) -> list[str]:
    lines = [
        f"## [EPIC] {_key_ref(issue.key, profile)} {issue.summary.strip()}",
        "",
        f"### Status : {issue.status.category.strip()}",
        "",
        "### Description",
        "",
    ]
    lines.extend(description_lines(issue.description))
    lines.extend(["", "", "### Stories", ""])
    return lines


def _render_story(issue: IssueRecord, profile: RenderProfile) -> list[str]:
    active = IN_PROGRESS in issue.status.category
    if not active and not profile.show_inactive_stories:
        return []

    lines = [
        "",
        f"**{_key_ref(issue.key, profile)} {issue.summary.strip()}**",
        "",
        f"- **Status : {issue.status.category.strip()}**",
    ]
    if not active:
        return lines

    lines.extend(["", "- **Description**", ""])
    lines.extend(profile.indent + line for line in description_lines(issue.description))
    lines.extend(["", "- **Comments**"])
    for comment in issue.comments:
        lines.append("")
        lines.append(f"{profile.indent}- {comment.author} {comment.created}")
        lines.extend(
            profile.indent + normalize_comment_line(line)
            for line in comment.body.strip().split("\n")
        )
    lines.append("")
    return lines
