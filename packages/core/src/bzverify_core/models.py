"""Value types shared by the link resolver and the verification engine.

Kept free of any client imports so tests (and alternative trackers) can build
these directly without touching Bugzilla or GitHub.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BugStatus(str, Enum):
    """The only bug states the verifier distinguishes."""

    ON_QA = "ON_QA"
    VERIFIED = "VERIFIED"
    OTHER = "OTHER"

    @classmethod
    def of(cls, raw: str | None) -> BugStatus:
        if raw == cls.ON_QA.value:
            return cls.ON_QA
        if raw == cls.VERIFIED.value:
            return cls.VERIFIED
        return cls.OTHER


class Outcome(str, Enum):
    SKIPPED = "SKIPPED"  # not applicable to this release, or already verified
    VERIFIED = "VERIFIED"  # moved (or would be moved, in shadow mode) to VERIFIED
    NOT_VERIFIED = "NOT_VERIFIED"  # left for manual verification, explanation posted
    FAILED = "FAILED"  # could not be evaluated; see errors


@dataclass(frozen=True)
class QAContact:
    name: str
    real_name: str = ""
    email: str = ""


@dataclass(frozen=True)
class Bug:
    id: int
    status: str
    target_release: tuple[str, ...] = ()
    qa_contact: QAContact | None = None

    @property
    def state(self) -> BugStatus:
        return BugStatus.of(self.status)


@dataclass(frozen=True)
class PullRef:
    """A GitHub pull request linked from a bug."""

    org: str
    repo: str
    number: int

    def __str__(self) -> str:
        return f"{self.org}/{self.repo}#{self.number}"


@dataclass(frozen=True)
class ExternalBug:
    """An external tracker link on a bug, as reported by the defect tracker."""

    org: str
    repo: str
    number: int
    type_url: str


@dataclass(frozen=True)
class Comment:
    text: str
    creator: str
    is_private: bool = False


@dataclass(frozen=True)
class BugResult:
    """Result of evaluating a single bug against a release tag."""

    bug_id: int
    outcome: Outcome
    message: str = ""
    commented: bool = False
    transitioned: bool = False
    errors: tuple[str, ...] = ()


@dataclass
class VerificationReport:
    """Aggregate of a batch run. ``errors`` holds every recorded (non-policy) failure."""

    results: list[BugResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def by_outcome(self, outcome: Outcome) -> list[BugResult]:
        return [r for r in self.results if r.outcome == outcome]


def has_label(labels, name: str) -> bool:
    """Return True if ``name`` is among ``labels``."""
    return any(label == name for label in labels)
