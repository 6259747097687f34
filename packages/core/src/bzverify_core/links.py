"""Resolve bugs to the GitHub pull requests linked from them."""

from __future__ import annotations

import logging
from typing import Iterable

from bzverify_core.models import PullRef
from bzverify_core.tracker.base import BaseTracker
from bzverify_core.tracker.errors import TrackerError, is_access_denied

logger = logging.getLogger(__name__)


def resolve_links(
    bug_ids: Iterable[int],
    tracker: BaseTracker,
    github_url: str = "https://github.com/",
) -> tuple[dict[int, list[PullRef]], list[str]]:
    """Map each bug ID to its linked pull requests.

    Bugs without a GitHub pull link are left out of the mapping; people sometimes
    fix up the tracker by hand and drop the link. Link fetch failures are returned
    as error strings, except access-denied ones, which are only logged.
    """
    bug_prs: dict[int, list[PullRef]] = {}
    errors: list[str] = []
    seen: set[int] = set()

    for bug_id in bug_ids:
        if bug_id in seen:
            continue
        seen.add(bug_id)

        try:
            ext_bugs = tracker.get_external_bugs(bug_id)
        except TrackerError as e:
            if is_access_denied(e):
                logger.debug("Access denied getting external bugs for bugzilla bug %d: %s", bug_id, e)
            else:
                errors.append(f"Failed to get external bugs for bugzilla bug {bug_id}: {e}")
            continue

        prs = [PullRef(org=ext.org, repo=ext.repo, number=ext.number) for ext in ext_bugs if ext.type_url == github_url]
        if not prs:
            logger.debug("Failed to identify associated GitHub PR for bugzilla bug %d", bug_id)
            continue
        bug_prs[bug_id] = prs

    return bug_prs, errors
