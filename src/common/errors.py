"""Resolution error taxonomy.

Every failure surfaces as a ``ResolutionError`` subclass carrying a
human-readable message; the pipeline adapter forwards ``str(error)``.
"""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for failures while resolving a specifier."""


class DependencyNotDeclaredError(ResolutionError):
    """An installed package requested a dependency it does not declare."""

    def __init__(self, package_name: str, context_name: str | None = None):
        self.package_name = package_name
        self.context_name = context_name
        super().__init__(f"module {package_name} not found")


class VersionNotSatisfiedError(ResolutionError):
    """No installed version satisfies the requested range."""

    def __init__(self, package_name: str, version_range: str):
        self.package_name = package_name
        self.version_range = version_range
        super().__init__(f"version {version_range} not found for {package_name}")


class MalformedSpecifierError(ResolutionError):
    """Specifier cannot name a package."""


class MalformedRequesterError(ResolutionError):
    """Requester lies in the modules tree but not inside a ``name/version`` dir."""


class ManifestError(ResolutionError):
    """A package.json could not be read or is not a JSON object."""


class InvalidVersionRangeError(ResolutionError):
    """Version range expression could not be parsed."""


class DuplicateVersionError(ResolutionError):
    """Two install directories declare the same version."""

    def __init__(self, version: str, first: str, second: str):
        self.version = version
        self.paths = (first, second)
        super().__init__(
            f"version {version} is declared by both {first} and {second}"
        )
