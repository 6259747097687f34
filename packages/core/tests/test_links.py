"""Tests for resolving bugs to their linked pull requests."""

from unittest.mock import MagicMock

from bzverify_core.links import resolve_links
from bzverify_core.models import ExternalBug, PullRef
from bzverify_core.tracker.errors import AccessDeniedError, TrackerError

GITHUB = "https://github.com/"


def _tracker(links_by_bug):
    """Tracker whose get_external_bugs returns (or raises) the entry for each bug."""
    tracker = MagicMock()

    def get_external_bugs(bug_id):
        value = links_by_bug[bug_id]
        if isinstance(value, Exception):
            raise value
        return value

    tracker.get_external_bugs.side_effect = get_external_bugs
    return tracker


class TestResolveLinks:
    def test_github_links_mapped_in_order(self):
        tracker = _tracker(
            {
                1: [
                    ExternalBug("openshift", "origin", 10, GITHUB),
                    ExternalBug("openshift", "installer", 20, GITHUB),
                ]
            }
        )
        bug_prs, errors = resolve_links([1], tracker)
        assert bug_prs == {1: [PullRef("openshift", "origin", 10), PullRef("openshift", "installer", 20)]}
        assert errors == []

    def test_non_github_links_filtered(self):
        tracker = _tracker(
            {
                1: [
                    ExternalBug("openshift", "origin", 10, "https://gitlab.example.com/"),
                    ExternalBug("openshift", "api", 3, GITHUB),
                ]
            }
        )
        bug_prs, _ = resolve_links([1], tracker)
        assert bug_prs == {1: [PullRef("openshift", "api", 3)]}

    def test_bug_without_pr_omitted_without_error(self):
        tracker = _tracker({1: [], 2: [ExternalBug("o", "r", 1, "https://other/")]})
        bug_prs, errors = resolve_links([1, 2], tracker)
        assert bug_prs == {}
        assert errors == []

    def test_access_denied_suppressed(self):
        tracker = _tracker({1: AccessDeniedError("not authorized", code=102), 2: [ExternalBug("o", "r", 1, GITHUB)]})
        bug_prs, errors = resolve_links([1, 2], tracker)
        assert bug_prs == {2: [PullRef("o", "r", 1)]}
        assert errors == []

    def test_other_failures_recorded_and_batch_continues(self):
        tracker = _tracker({1: TrackerError("HTTP 500"), 2: [ExternalBug("o", "r", 1, GITHUB)]})
        bug_prs, errors = resolve_links([1, 2], tracker)
        assert bug_prs == {2: [PullRef("o", "r", 1)]}
        assert errors == ["Failed to get external bugs for bugzilla bug 1: HTTP 500"]

    def test_duplicate_ids_resolved_once(self):
        tracker = _tracker({1: [ExternalBug("o", "r", 1, GITHUB)]})
        bug_prs, _ = resolve_links([1, 1], tracker)
        assert bug_prs == {1: [PullRef("o", "r", 1)]}
        assert tracker.get_external_bugs.call_count == 1

    def test_custom_github_url(self):
        tracker = _tracker({1: [ExternalBug("o", "r", 1, "https://ghe.example.com/")]})
        bug_prs, _ = resolve_links([1], tracker, github_url="https://ghe.example.com/")
        assert bug_prs == {1: [PullRef("o", "r", 1)]}
