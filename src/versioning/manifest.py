"""package.json loading for installed spm packages.

Manifests are read explicitly from disk and turned into frozen ``Manifest``
snapshots. ``ManifestCache`` memoizes them per file for the duration of one
build run.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from common.errors import ManifestError
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Manifest:
    """Immutable view of the fields resolution cares about."""

    name: Optional[str] = None
    version: Optional[str] = None
    main: Optional[str] = None
    entry: Optional[str] = None
    dependencies: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    output: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        """Build a Manifest from parsed package.json content.

        Non-string scalars and malformed ``spm`` sub-fields are ignored rather
        than rejected; only the top-level shape is validated by the loader.
        """
        block = data.get(Constants.MANIFEST_BLOCK)
        if not isinstance(block, dict):
            block = {}

        deps = block.get("dependencies")
        dependencies: Dict[str, str] = {}
        if isinstance(deps, dict):
            dependencies = {str(k): str(v) for k, v in deps.items() if v is not None}

        output = block.get("output")
        if not isinstance(output, list):
            output = []

        return cls(
            name=_as_str(data.get("name")),
            version=_as_str(data.get("version")),
            main=_as_str(data.get("main")),
            entry=_as_str(block.get("main")),
            dependencies=MappingProxyType(dependencies),
            output=tuple(str(o) for o in output),
        )

    def dependency_range(self, package_name: str) -> Optional[str]:
        """Return the declared range for ``package_name`` or None."""
        return self.dependencies.get(package_name) or None


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def manifest_path(directory: str) -> str:
    return os.path.join(directory, Constants.PACKAGE_JSON_FILE)


def load_manifest(directory: str) -> Optional[Manifest]:
    """Read ``<directory>/package.json``.

    Returns:
        The parsed Manifest, or None when the file does not exist.

    Raises:
        ManifestError: the file exists but cannot be read or is not a JSON object.
    """
    path = manifest_path(directory)
    if not os.path.isfile(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object")

    return Manifest.from_dict(data)


class ManifestCache:
    """Per-build memo of parsed manifests keyed by directory.

    Manifests are assumed not to change mid-build, so entries are never
    invalidated. Missing manifests are cached as None. Concurrent writers for
    the same key compute the same value, so last write wins.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Optional[Manifest]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def load(self, directory: str) -> Optional[Manifest]:
        """Return the manifest for ``directory``, reading it on first use."""
        key = os.path.normpath(os.path.abspath(directory))
        with self._lock:
            if key in self._entries:
                self._hits += 1
                return self._entries[key]
            self._misses += 1

        manifest = load_manifest(key)
        if is_debug_enabled(logger):
            logger.debug(
                "Manifest cache miss",
                extra=extra_context(
                    event="cache_miss",
                    component="manifest_cache",
                    target=key,
                    outcome="found" if manifest is not None else "absent",
                ),
            )
        with self._lock:
            self._entries[key] = manifest
        return manifest

    def clear(self) -> None:
        """Drop all cached manifests."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        return len(self._entries)


def read_manifest(directory: str, cache: Optional[ManifestCache] = None) -> Optional[Manifest]:
    """Load a manifest through ``cache`` when one is given."""
    if cache is not None:
        return cache.load(directory)
    return load_manifest(directory)
