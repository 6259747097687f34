from __future__ import annotations

from github import Github


def get_repo(gh: Github, org: str, repo: str):
    return gh.get_repo(f"{org}/{repo}")


def get_labels(repo, number: int) -> list[str]:
    """Return the label names on an issue or pull request."""
    return [label.name for label in repo.get_issue(number).get_labels()]


class GitHubLabels:
    """Label lookups for pull requests linked from bugs.

    Raises ``github.GithubException`` on API failures; the verifier records those
    per pull request.
    """

    def __init__(self, token: str | None = None, gh: Github | None = None):
        self._gh = gh if gh is not None else Github(token)

    def get_labels(self, org: str, repo: str, number: int) -> list[str]:
        return get_labels(get_repo(self._gh, org, repo), number)
