"""Prerelease detection for version strings.

This is a heuristic, not a version parser. A marker (alpha, beta, rc, dev,
pre, canary, next, snapshot, preview, nightly, or the PEP 440 style ``a``/``b``)
counts when it is not glued to other letters, optionally carries a numeric
suffix, and is followed by a separator or the end of the string:

    1.0.0-alpha1   -> True
    2.0.0-rc.3     -> True
    1.4.0b2        -> True
    1.0.0-final    -> False

Known limitation: a stable version with a build tag like ``1.0.0+a1`` is
reported as a prerelease.
"""

import re

PRERELEASE_MARKERS = (
    "alpha",
    "beta",
    "rc",
    "dev",
    "preview",
    "pre",
    "canary",
    "next",
    "snapshot",
    "nightly",
    "a",
    "b",
)

PRERELEASE_PATTERN = re.compile(
    r"(?<![a-z])(?:" + "|".join(PRERELEASE_MARKERS) + r")\d*(?![a-z\d])",
    re.IGNORECASE,
)


def is_prerelease(version: str) -> bool:
    """Return True if the version string carries a prerelease marker."""
    if not version:
        return False
    return PRERELEASE_PATTERN.search(version) is not None
