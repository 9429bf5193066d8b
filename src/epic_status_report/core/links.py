"""Derive the stories to fetch from an epic's outward links."""

from __future__ import annotations

import logging

from epic_status_report.core.data_models import IssueRecord
from epic_status_report.core.errors import MalformedLinkError

logger = logging.getLogger(__name__)


def linked_story_ids(
    epic: IssueRecord,
    *,
    strict: bool = True,
    skipped: list[str] | None = None,
) -> list[str]:
    """Return outward issue keys in the order Jira lists them.

    A link without an outward issue raises :class:`MalformedLinkError`.
    With ``strict=False`` it is logged and skipped instead, and the message
    is appended to *skipped* when given.
    """
    keys: list[str] = []
    for index, link in enumerate(epic.links):
        if link.outward_key is None:
            msg = f"{epic.key}: issue link #{index} (id={link.link_id or '?'}) has no outward issue"
            if strict:
                raise MalformedLinkError(msg)
            logger.warning("Skipping %s", msg)
            if skipped is not None:
                skipped.append(msg)
            continue
        keys.append(link.outward_key)
    logger.debug("Epic %s links to %d stories", epic.key, len(keys))
    return keys
