"""Tests for GitHub label helpers."""

from unittest.mock import MagicMock

from bzverify_core.gh.labels import GitHubLabels, get_labels


def _label(name):
    label = MagicMock()
    label.name = name
    return label


class TestGetLabels:
    def test_returns_label_names(self):
        repo = MagicMock()
        repo.get_issue.return_value.get_labels.return_value = [_label("lgtm"), _label("qe-approved")]

        assert get_labels(repo, 5) == ["lgtm", "qe-approved"]
        repo.get_issue.assert_called_once_with(5)

    def test_no_labels(self):
        repo = MagicMock()
        repo.get_issue.return_value.get_labels.return_value = []
        assert get_labels(repo, 5) == []


class TestGitHubLabels:
    def test_looks_up_repo_by_full_name(self):
        gh = MagicMock()
        gh.get_repo.return_value.get_issue.return_value.get_labels.return_value = [_label("qe-approved")]

        labels = GitHubLabels(gh=gh).get_labels("openshift", "origin", 12)

        gh.get_repo.assert_called_once_with("openshift/origin")
        gh.get_repo.return_value.get_issue.assert_called_once_with(12)
        assert labels == ["qe-approved"]

    def test_builds_client_from_token(self, mocker):
        mock_github = mocker.patch("bzverify_core.gh.labels.Github")
        GitHubLabels(token="tok")
        mock_github.assert_called_once_with("tok")
