"""Defect tracker error hierarchy."""

from __future__ import annotations


class TrackerError(RuntimeError):
    """Base error for defect tracker calls."""

    def __init__(self, message: str, code: int | None = None, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class AccessDeniedError(TrackerError):
    """The tracker refused access to the requested bug."""


def is_access_denied(exc: BaseException) -> bool:
    return isinstance(exc, AccessDeniedError)
