"""Abstract defect tracker interface.

The verifier depends on BaseTracker, not on Bugzilla, so the decision procedure
can be driven by an in-memory tracker in tests or pointed at another tracker.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bzverify_core.models import Bug, Comment, ExternalBug


class BaseTracker(ABC):
    """Read and write access to bugs.

    Every method raises TrackerError (or a subclass) on failure. Implementations
    must raise AccessDeniedError when the tracker refuses access to a bug.
    """

    @abstractmethod
    def get_bug(self, bug_id: int) -> Bug:
        """Fetch a bug with its status, target release and QA contact."""

    @abstractmethod
    def get_external_bugs(self, bug_id: int) -> list[ExternalBug]:
        """Return the external tracker links (pull requests) attached to a bug."""

    @abstractmethod
    def get_comments(self, bug_id: int) -> list[Comment]:
        """Return all comments on a bug, oldest first."""

    @abstractmethod
    def create_comment(self, bug_id: int, text: str, is_private: bool = False) -> int:
        """Add a comment to a bug and return the new comment's ID."""

    @abstractmethod
    def update_bug_status(self, bug_id: int, status: str) -> None:
        """Move a bug to a new status."""
