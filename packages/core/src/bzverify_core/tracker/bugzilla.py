"""Bugzilla 5 REST client.

Only the handful of endpoints the verifier needs are implemented. All failures,
including transport errors, surface as TrackerError so callers handle a single
exception family.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import requests

from bzverify_core.models import Bug, Comment, ExternalBug, QAContact
from bzverify_core.tracker.base import BaseTracker
from bzverify_core.tracker.errors import AccessDeniedError, TrackerError

logger = logging.getLogger(__name__)

# Bugzilla's fault code for "you are not authorized to access bug #N".
ACCESS_DENIED_CODE = 102

# GitHub pull links are stored as `org/repo/pull/N` in ext_bz_bug_id.
_PULL_ID_RE = re.compile(r"^([^/]+)/([^/]+)/pull/(\d+)$")


class BugzillaClient(BaseTracker):
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})
        if api_key:
            self._session.headers["X-BUGZILLA-API-KEY"] = api_key

    def _url(self, path: str) -> str:
        return f"{self.base_url}/rest/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            resp = self._session.request(method.upper(), self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TrackerError(f"Bugzilla {method.upper()} {path} request failed: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("error"):
            code = payload.get("code")
            message = payload.get("message") or f"HTTP {resp.status_code}"
            if code == ACCESS_DENIED_CODE:
                raise AccessDeniedError(message, code=code, status_code=resp.status_code)
            raise TrackerError(f"code {code}: {message}", code=code, status_code=resp.status_code)

        if resp.status_code in (401, 403):
            raise AccessDeniedError(f"HTTP {resp.status_code} for {path}", status_code=resp.status_code)
        if resp.status_code >= 400:
            raise TrackerError(f"HTTP {resp.status_code} for {path}", status_code=resp.status_code)
        if payload is None:
            raise TrackerError(f"Bugzilla {method.upper()} {path} returned a non-JSON response")
        return payload

    def _get_bug_fields(self, bug_id: int, **params) -> dict:
        payload = self._request("GET", f"bug/{bug_id}", params=params or None)
        bugs = payload.get("bugs") or []
        if not bugs:
            raise TrackerError(f"bug {bug_id} not found")
        return bugs[0]

    def get_bug(self, bug_id: int) -> Bug:
        raw = self._get_bug_fields(bug_id)
        target_release = raw.get("target_release") or []
        if isinstance(target_release, str):
            target_release = [target_release]
        qa = raw.get("qa_contact_detail")
        qa_contact = None
        if qa:
            qa_contact = QAContact(
                name=qa.get("name", ""),
                real_name=qa.get("real_name", ""),
                email=qa.get("email", ""),
            )
        return Bug(
            id=raw.get("id", bug_id),
            status=raw.get("status", ""),
            target_release=tuple(target_release),
            qa_contact=qa_contact,
        )

    def get_external_bugs(self, bug_id: int) -> list[ExternalBug]:
        raw = self._get_bug_fields(bug_id, include_fields="external_bugs")
        links = []
        for ext in raw.get("external_bugs") or []:
            ext_id = str(ext.get("ext_bz_bug_id", ""))
            match = _PULL_ID_RE.match(ext_id)
            if not match:
                logger.debug("Bug %d: ignoring external bug %r (not a pull request link)", bug_id, ext_id)
                continue
            links.append(
                ExternalBug(
                    org=match.group(1),
                    repo=match.group(2),
                    number=int(match.group(3)),
                    type_url=(ext.get("type") or {}).get("url", ""),
                )
            )
        return links

    def get_comments(self, bug_id: int) -> list[Comment]:
        payload = self._request("GET", f"bug/{bug_id}/comment")
        raw_comments = ((payload.get("bugs") or {}).get(str(bug_id)) or {}).get("comments") or []
        return [
            Comment(
                text=c.get("text", ""),
                creator=c.get("creator", ""),
                is_private=bool(c.get("is_private", False)),
            )
            for c in raw_comments
        ]

    def create_comment(self, bug_id: int, text: str, is_private: bool = False) -> int:
        payload = self._request("POST", f"bug/{bug_id}/comment", json={"comment": text, "is_private": is_private})
        return int(payload.get("id", 0))

    def update_bug_status(self, bug_id: int, status: str) -> None:
        self._request("PUT", f"bug/{bug_id}", json={"ids": [bug_id], "status": status})
