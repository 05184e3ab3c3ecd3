"""Upstream release resolution and version comparison.

The HTTP fetch itself lives in `aurmaint.io.github`; this module only:
- derives the releases API endpoint from a forge URL
- picks the first published release from a feed (feed order is preserved)
- normalizes the tag into a `ReleaseVersion`
- decides whether an update is needed

The version sanity check is loose: a version is accepted when it contains at
least one digit, dot or hyphen *anywhere* (unanchored search), so strings like
"beta-" pass.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from aurmaint.core.errors import InvalidUpstreamURL, UnparseableVersion
from aurmaint.core.model import ReleaseVersion

DEFAULT_FORGE_HOST = "github.com"

_VERSION_CHAR_RE = re.compile(r"[0-9\-.]+")
_TAG_PREFIXES = ("v", "r")


def releases_api_url(url: str, *, host: str = DEFAULT_FORGE_HOST) -> str:
    """Map `https://<host>/<owner>/<repo>` to its releases API endpoint.

    Example:
        https://github.com/foo/bar -> https://api.github.com/repos/foo/bar/releases
    """
    prefix = f"https://{host}/"
    if not isinstance(url, str) or not url.startswith(prefix):
        raise InvalidUpstreamURL(str(url), host=host)
    rest = url[len(prefix):].strip("/")
    if rest.endswith(".git"):
        rest = rest[: -len(".git")]
    if not rest:
        raise InvalidUpstreamURL(url, host=host)
    return f"https://api.{host}/repos/{rest}/releases"


def select_release_tag(entries: Iterable[Mapping[str, Any]]) -> str:
    """Return the tag of the first non-draft, non-prerelease entry, or "" if none qualify.

    Only an explicit `false` qualifies; a missing flag does not.
    """
    for entry in entries:
        if entry.get("draft") is False and entry.get("prerelease") is False:
            tag = entry.get("tag_name")
            return "" if tag is None else str(tag)
    return ""


def normalize_tag(tag: str) -> str:
    """Strip a single leading `v` or `r`."""
    if tag[:1] in _TAG_PREFIXES:
        return tag[1:]
    return tag


def parse_release_version(tag: str) -> ReleaseVersion:
    value = normalize_tag(tag)
    if not _VERSION_CHAR_RE.search(value):
        raise UnparseableVersion(value)
    return ReleaseVersion(value=value, tag=tag)


def resolve_release(entries: Iterable[Mapping[str, Any]]) -> ReleaseVersion:
    """Select and normalize the latest published release from a feed.

    Raises:
        UnparseableVersion: when no entry qualifies or the tag has no version characters.
    """
    return parse_release_version(select_release_tag(entries))


def needs_update(current: str | None, resolved: str | ReleaseVersion, *, force: bool = False) -> bool:
    """True iff the resolved version differs from the current one, or `force` is set."""
    if force:
        return True
    return str(resolved) != (current or "")
