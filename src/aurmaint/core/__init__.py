"""aurmaint core: value types, validation and decision logic.

This package is intentionally standalone and must not import CLI/codecs/io
to avoid circular dependencies.
"""

from __future__ import annotations

from .errors import (
    BuildFailure,
    CommitFailure,
    DescriptorNotFound,
    InvalidUpstreamURL,
    InvariantViolation,
    MaintenanceError,
    MetadataFailure,
    MissingField,
    NamingMismatch,
    NoVersionFieldFound,
    ParseError,
    PushFailure,
    UnparseableVersion,
    UpstreamFetchError,
    VersionFieldTypeError,
)
from .hashes import check_hash_invariant, decide_hash_policy
from .model import Descriptor, HashPolicy, PackageKind, ReleaseVersion, RewriteResult
from .resolve import needs_update, releases_api_url, resolve_release
from .validate import classify_package, validate_descriptor

__all__ = [
    "Descriptor",
    "HashPolicy",
    "PackageKind",
    "ReleaseVersion",
    "RewriteResult",
    "classify_package",
    "validate_descriptor",
    "check_hash_invariant",
    "decide_hash_policy",
    "releases_api_url",
    "resolve_release",
    "needs_update",
    "MaintenanceError",
    "DescriptorNotFound",
    "ParseError",
    "MissingField",
    "NamingMismatch",
    "VersionFieldTypeError",
    "InvalidUpstreamURL",
    "UnparseableVersion",
    "UpstreamFetchError",
    "NoVersionFieldFound",
    "InvariantViolation",
    "BuildFailure",
    "MetadataFailure",
    "CommitFailure",
    "PushFailure",
]
