"""Version and release helpers for the command line client."""

from __future__ import annotations

import re

REPOSITORY_URL = "https://example.com/vulncheck/cli"

_RELEASE_VERSION = re.compile(r"v?\d+\.\d+\.\d+(-[\w.]+)?", re.ASCII)


def _strip_v(version: str) -> str:
    return version[1:] if version.startswith("v") else version


def changelog_url(version: str) -> str:
    """Return the release page for a version, or the latest release."""
    if not _RELEASE_VERSION.fullmatch(version):
        return f"{REPOSITORY_URL}/releases/latest"
    return f"{REPOSITORY_URL}/releases/tag/v{_strip_v(version)}"


def version_format(version: str, build_date: str) -> str:
    """Return the text printed by the version command."""
    version = _strip_v(version)
    date_part = f" ({build_date})" if build_date else ""
    return f"vulncheck version {version}{date_part}\n{changelog_url(version)}\n"