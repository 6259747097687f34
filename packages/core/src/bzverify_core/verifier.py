"""Verify bugs fixed in a release against their QA contact's pull request approval."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import requests
from github import GithubException

from bzverify_core.links import resolve_links
from bzverify_core.models import (
    Bug,
    BugResult,
    BugStatus,
    Comment,
    Outcome,
    PullRef,
    QAContact,
    VerificationReport,
    has_label,
)
from bzverify_core.release import ReleaseTagError, parse_semver, target_release_stream, to_major_minor
from bzverify_core.tracker.base import BaseTracker
from bzverify_core.tracker.errors import TrackerError

logger = logging.getLogger(__name__)

NOT_ON_QA_REASON = "Bug is not in ON_QA status"
NO_PRS_REASON = "No linked GitHub PRs found"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _as_accounts(value) -> tuple[str, ...]:
    """Normalise robot_accounts; a single YAML scalar means one account."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ValueError(f"robot_accounts must be a string or a list of strings, got {value!r}")


def _as_bool(key: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class VerificationPolicy:
    """Constants the decision procedure depends on."""

    approval_label: str = "qe-approved"
    robot_accounts: tuple[str, ...] = ("openshift-bugzilla-robot", "openshift-bugzilla-robot@redhat.com")
    unset_target_release: str = "---"
    github_url: str = "https://github.com/"
    private_comments: bool = True

    @classmethod
    def from_config(cls, config: dict) -> VerificationPolicy:
        defaults = cls()
        return cls(
            approval_label=config.get("approval_label", defaults.approval_label),
            robot_accounts=_as_accounts(config.get("robot_accounts", defaults.robot_accounts)),
            unset_target_release=config.get("unset_target_release", defaults.unset_target_release),
            github_url=config.get("github_url", defaults.github_url),
            private_comments=_as_bool("private_comments", config.get("private_comments", defaults.private_comments)),
        )


def compose_message(
    tag: str,
    unapproved: Sequence[PullRef],
    reasons: Sequence[str],
    qa_contact: QAContact | None = None,
) -> str:
    """Build the bug comment explaining the verification outcome.

    The text depends only on the arguments, so a rerun against unchanged bugs and
    PRs produces a comment already_commented() recognises.
    """
    lines = [f"Bugfix included in accepted release {tag}"]
    if unapproved or reasons:
        lines.append("Bug will not be automatically moved to VERIFIED for the following reasons:")
        for pr in unapproved:
            lines.append(f"- PR {pr} not approved by QA contact")
        for reason in reasons:
            lines.append(f"- {reason}")
        closing = "\nThis bug must now be manually moved to VERIFIED"
        # qa_contact_detail is missing on some bugs.
        if qa_contact is not None:
            closing = f"{closing} by {qa_contact.name}"
        lines.append(closing)
    else:
        lines.append("All linked GitHub PRs have been approved by a QA contact; updating bug status to VERIFIED")
    return "\n".join(lines)


def already_commented(comments: Iterable[Comment], message: str, robot_accounts: Iterable[str]) -> bool:
    """Return True if the bot already left exactly this comment on the bug."""
    robots = set(robot_accounts)
    return any(c.text == message and c.creator in robots for c in comments)


class Verifier:
    """Moves ON_QA bugs to VERIFIED when every linked PR carries the QA approval label.

    Bugs are processed one at a time and independently: a failure on one bug is
    recorded in the report and the batch continues. With ``shadow=True`` every read
    still happens but no comment is posted and no status is changed.
    """

    def __init__(self, tracker: BaseTracker, labels, policy: VerificationPolicy | None = None, shadow: bool = False):
        self.tracker = tracker
        self.labels = labels
        self.policy = policy or VerificationPolicy()
        self.shadow = shadow

    def verify_bugs(self, bug_ids: Iterable[int], tag: str) -> list[str]:
        """Verify the given bugs against release ``tag`` and return every recorded error."""
        return self.run(bug_ids, tag).errors

    def run(self, bug_ids: Iterable[int], tag: str) -> VerificationReport:
        """Resolve linked PRs for ``bug_ids`` and verify them against ``tag``."""
        try:
            target_release = to_major_minor(parse_semver(tag))
        except ReleaseTagError as e:
            return VerificationReport(errors=[str(e)])

        bug_prs, link_errors = resolve_links(bug_ids, self.tracker, self.policy.github_url)
        report = self._verify_all(bug_prs, tag, target_release)
        report.errors[:0] = link_errors
        return report

    def verify(self, bug_prs: Mapping[int, Sequence[PullRef]], tag: str) -> VerificationReport:
        """Verify bugs whose pull requests have already been resolved.

        An ON_QA bug mapped to an empty PR list is not treated as approved: it is
        left for manual verification with a "No linked GitHub PRs found" reason.
        resolve_links() never produces such an entry, so this only applies to
        callers building ``bug_prs`` themselves.
        """
        try:
            target_release = to_major_minor(parse_semver(tag))
        except ReleaseTagError as e:
            return VerificationReport(errors=[str(e)])
        return self._verify_all(bug_prs, tag, target_release)

    def _verify_all(
        self, bug_prs: Mapping[int, Sequence[PullRef]], tag: str, target_release: str
    ) -> VerificationReport:
        report = VerificationReport()
        for bug_id, prs in bug_prs.items():
            result = self.verify_bug(bug_id, prs, tag, target_release)
            report.results.append(result)
            report.errors.extend(result.errors)
        return report

    def verify_bug(self, bug_id: int, prs: Sequence[PullRef], tag: str, target_release: str) -> BugResult:
        try:
            bug = self.tracker.get_bug(bug_id)
        except TrackerError as e:
            return BugResult(bug_id, Outcome.FAILED, errors=(f"Unable to get bugzilla number {bug_id}: {e}",))

        skipped = self._check_release(bug, tag, target_release)
        if skipped is not None:
            return skipped

        if bug.state is BugStatus.VERIFIED:
            logger.debug("Bug %d already in VERIFIED status", bug.id)
            return BugResult(bug_id, Outcome.SKIPPED)

        errors: list[str] = []
        unapproved: list[PullRef] = []
        reasons: list[str] = []

        if bug.state is not BugStatus.ON_QA:
            reasons.append(NOT_ON_QA_REASON)
        elif not prs:
            reasons.append(NO_PRS_REASON)
        else:
            for pr in prs:
                try:
                    labels = self.labels.get_labels(pr.org, pr.repo, pr.number)
                except (GithubException, requests.RequestException) as e:
                    err = f"Unable to get labels for github pull {pr}: {e}"
                    errors.append(err)
                    reasons.append(err)
                    labels = []
                if not has_label(labels, self.policy.approval_label):
                    unapproved.append(pr)

        success = not unapproved and not reasons
        message = compose_message(tag, unapproved, reasons, bug.qa_contact)

        try:
            comments = self.tracker.get_comments(bug.id)
        except TrackerError as e:
            errors.append(f"Failed to get comments on bug {bug.id}: {e}")
            return BugResult(bug_id, Outcome.FAILED, message, errors=tuple(errors))

        commented = self._post_comment(bug, message, comments, errors)

        if not success:
            logger.info("Bug %d (current status %s) not approved by QA contact", bug.id, bug.status)
            return BugResult(bug_id, Outcome.NOT_VERIFIED, message, commented, errors=tuple(errors))

        if self.shadow:
            logger.info("Shadow mode: would update bug %d (current status %s) to VERIFIED", bug.id, bug.status)
            return BugResult(bug_id, Outcome.VERIFIED, message, commented, errors=tuple(errors))

        logger.info("Updating bug %d (current status %s) to VERIFIED status", bug.id, bug.status)
        try:
            self.tracker.update_bug_status(bug.id, BugStatus.VERIFIED.value)
        except TrackerError as e:
            errors.append(f"Failed to update status for bug {bug.id}: {e}")
            return BugResult(bug_id, Outcome.FAILED, message, commented, errors=tuple(errors))
        return BugResult(bug_id, Outcome.VERIFIED, message, commented, transitioned=True, errors=tuple(errors))

    def _check_release(self, bug: Bug, tag: str, target_release: str) -> BugResult | None:
        """Return a result for bugs outside the tag's release stream, or None if the bug belongs to it."""
        if not bug.target_release or bug.target_release[0] == self.policy.unset_target_release:
            logger.warning("Bug %d does not have a target release", bug.id)
            return BugResult(bug.id, Outcome.SKIPPED)
        try:
            bug_release = target_release_stream(bug.target_release[0])
        except ReleaseTagError as e:
            return BugResult(bug.id, Outcome.FAILED, errors=(f"Bug {bug.id}: {e}",))
        if bug_release != target_release:
            # bugfix shipped in a different stream than the tag; not ours to judge
            logger.info("Bug %d is in different release (%s) than tag %s", bug.id, bug_release, tag)
            return BugResult(bug.id, Outcome.SKIPPED)
        return None

    def _post_comment(self, bug: Bug, message: str, comments: list[Comment], errors: list[str]) -> bool:
        if already_commented(comments, message, self.policy.robot_accounts):
            logger.debug("Bug %d already has this comment; not posting again", bug.id)
            return False
        if self.shadow:
            logger.info("Shadow mode: would comment on bug %d", bug.id)
            return False
        try:
            self.tracker.create_comment(bug.id, message, is_private=self.policy.private_comments)
        except TrackerError as e:
            errors.append(f"Failed to comment on bug {bug.id}: {e}")
            return False
        return True
