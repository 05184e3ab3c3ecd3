"""Error taxonomy for a maintenance run.

Every failure is fatal to the run: nothing here is caught and retried by the
core. Messages are stable and name both the violated expectation and the
offending value so tests can assert on them.

Validation-shaped errors also subclass `ValueError`; failures reported by an
external collaborator (build tool, git, network) also subclass `RuntimeError`.
"""

from __future__ import annotations


class MaintenanceError(Exception):
    """Base class for every error raised by aurmaint."""


# ----------------------------
# Descriptor / validation
# ----------------------------


class DescriptorNotFound(MaintenanceError, ValueError):
    """Repository path is not a directory or has no descriptor file."""


class ParseError(MaintenanceError, ValueError):
    """Descriptor text could not be tokenized (eg. unterminated quote or array)."""

    def __init__(self, message: str, *, lineno: int | None = None) -> None:
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class MissingField(ParseError):
    """A field a consumer requires is not set in the descriptor."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"PKGBUILD does not contain {field}")


class NamingMismatch(MaintenanceError, ValueError):
    def __init__(self, *, package_name: str | None, dirname: str) -> None:
        self.package_name = package_name
        self.dirname = dirname
        super().__init__(
            f"PKGBUILD indicated package name is {package_name or '<unset>'} "
            f"but lives in directory {dirname}"
        )


class VersionFieldTypeError(MaintenanceError, ValueError):
    """`pkgver` is a literal where a routine is required, or vice versa."""


class InvariantViolation(MaintenanceError, ValueError):
    """A standing invariant of the descriptor does not hold."""


# ----------------------------
# Upstream resolution
# ----------------------------


class InvalidUpstreamURL(MaintenanceError, ValueError):
    def __init__(self, url: str, *, host: str) -> None:
        self.url = url
        super().__init__(f"Invalid repository URL format or not a https://{host}/ URL. Got {url}")


class UnparseableVersion(MaintenanceError, ValueError):
    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"Weird version string: '{version}'. Manual handle needed")


class UpstreamFetchError(MaintenanceError, RuntimeError):
    """The release feed could not be fetched or decoded."""


# ----------------------------
# Rewrite
# ----------------------------


class NoVersionFieldFound(MaintenanceError, ValueError):
    def __init__(self) -> None:
        super().__init__("No replacement happened: no 'pkgver=' line found in PKGBUILD")


# ----------------------------
# Collaborators
# ----------------------------


class BuildFailure(MaintenanceError, RuntimeError):
    pass


class MetadataFailure(BuildFailure):
    pass


class CommitFailure(MaintenanceError, RuntimeError):
    pass


class PushFailure(MaintenanceError, RuntimeError):
    pass
