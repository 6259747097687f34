"""Build the tracker and label clients from CLI config.

These factories live in the CLI package so bzverify_core never needs to know
the config file format.
"""

from __future__ import annotations

from bzverify_core.gh.labels import GitHubLabels
from bzverify_core.tracker.bugzilla import BugzillaClient


def build_tracker(config: dict) -> BugzillaClient:
    return BugzillaClient(
        base_url=config["bugzilla_url"],
        api_key=config.get("bugzilla_api_key"),
        timeout=config.get("request_timeout", 30),
    )


def build_labels(config: dict) -> GitHubLabels:
    return GitHubLabels(token=config.get("github_token"))
