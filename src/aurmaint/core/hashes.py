"""Checksum policy for a PKGBUILD.

A checksum array is *pinned* when it holds at least one entry that is neither
the `SKIP` placeholder nor empty. Version-controlled packages build from a
moving branch, so pinned checksums on them are always an error; fixed-version
packages with pinned checksums need them regenerated after a version bump.
"""

from __future__ import annotations

from aurmaint.core.errors import InvariantViolation
from aurmaint.core.model import HASH_PLACEHOLDER, Descriptor, HashPolicy, PackageKind


def is_pinned(items: tuple[str, ...]) -> bool:
    return any(item not in (HASH_PLACEHOLDER, "") for item in items)


def pinned_hash_fields(desc: Descriptor) -> tuple[str, ...]:
    return tuple(name for name, items in desc.hash_fields.items() if is_pinned(items))


def check_hash_invariant(desc: Descriptor, kind: PackageKind) -> tuple[str, ...]:
    """Raise `InvariantViolation` if a version-controlled package pins checksums.

    Returns the pinned field names (empty for a clean descriptor).
    """
    pinned = pinned_hash_fields(desc)
    if kind.is_vcs and pinned:
        raise InvariantViolation(
            f"Should NOT update hash for git packages. But values set in: {', '.join(pinned)}"
        )
    return pinned


def decide_hash_policy(desc: Descriptor, kind: PackageKind) -> HashPolicy:
    pinned = check_hash_invariant(desc, kind)
    return HashPolicy(pinned_fields=pinned, regenerate=bool(pinned) and not kind.is_vcs)
