"""Credential resolution for the Bugzilla and GitHub clients.

Both credentials are read from the environment first. GitHub additionally
falls back to the token of a logged-in `gh` CLI session.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

BUGZILLA_API_KEY_ENV = "BUGZILLA_API_KEY"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"


def _from_env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _from_gh_cli() -> str | None:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI token lookup unavailable: %s", e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return a GitHub token, or None when neither GITHUB_TOKEN nor `gh auth token` yields one."""
    token = _from_env(GITHUB_TOKEN_ENV)
    if token:
        return token
    token = _from_gh_cli()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token


def resolve_bugzilla_api_key() -> str | None:
    return _from_env(BUGZILLA_API_KEY_ENV)
