"""Release tag and target release parsing."""

from __future__ import annotations

import semver


class ReleaseTagError(ValueError):
    """Raised when a release tag or a bug's target release cannot be parsed."""


def parse_semver(tag: str) -> semver.Version:
    """Parse a release tag leniently.

    Surrounding whitespace and a leading ``v`` are ignored, and a missing minor or
    patch component is treated as zero, so ``v4.14`` parses as ``4.14.0``.
    """
    cleaned = (tag or "").strip()
    if cleaned[:1] in ("v", "V"):
        cleaned = cleaned[1:]
    try:
        return semver.Version.parse(cleaned, optional_minor_and_patch=True)
    except (ValueError, TypeError) as e:
        raise ReleaseTagError(f"failed to parse tag `{tag}` semver: {e}") from e


def to_major_minor(version: semver.Version) -> str:
    return f"{version.major}.{version.minor}"


def target_release_stream(target_release: str) -> str:
    """Return the ``major.minor`` stream of a target release such as ``4.14.0`` or ``4.14.z``."""
    parts = target_release.split(".")
    if len(parts) < 2:
        raise ReleaseTagError(
            f"length of target release `{target_release}` after split by `.` is less than 2"
        )
    return f"{parts[0]}.{parts[1]}"
