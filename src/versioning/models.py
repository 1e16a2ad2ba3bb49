"""Data models for version selection."""

from dataclasses import dataclass

import semantic_version

from .manifest import Manifest


@dataclass(frozen=True)
class InstalledVersion:
    """One installed version of a package: its version, directory and manifest."""
    version: semantic_version.Version
    path: str
    manifest: Manifest

    @property
    def version_string(self) -> str:
        return str(self.version)
