"""External collaborators: release feed (HTTP), build tool and git.

Each one is a thin adapter over a process or a network call; the decisions
about when to call them live in `aurmaint.workflow`.
"""

from __future__ import annotations

from .git import Git
from .github import GitHubReleases
from .makepkg import Makepkg

__all__ = [
    "Git",
    "GitHubReleases",
    "Makepkg",
]
