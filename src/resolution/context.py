"""Work out which package a requesting file belongs to."""

from __future__ import annotations

import os
from typing import Iterable, List, Optional

from common.errors import MalformedRequesterError, ManifestError
from constants import Constants, ContextKind
from versioning.manifest import ManifestCache, read_manifest

from .models import ResolutionContext


def _normalize(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def relative_parts(path: str, root: str) -> Optional[List[str]]:
    """Return the segments of ``path`` below ``root``, or None when outside it."""
    path, root = _normalize(path), _normalize(root)
    try:
        if os.path.commonpath([path, root]) != root:
            return None
    except ValueError:
        # different drives on Windows
        return None
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return []
    return rel.split(os.sep)


def find_shim_root(requester_path: str, markers: Iterable[str]) -> Optional[str]:
    """Return the requester path cut after the first shim marker segment."""
    marker_set = set(markers)
    if not marker_set:
        return None
    path = _normalize(requester_path)
    drive, tail = os.path.splitdrive(path)
    parts = tail.split(os.sep)
    for index, part in enumerate(parts):
        if part in marker_set:
            return drive + os.sep.join(parts[: index + 1])
    return None


def detect_context(
    requester_path: str,
    project_root: str,
    cache: Optional[ManifestCache] = None,
    modules_dir: Optional[str] = None,
) -> ResolutionContext:
    """Classify the requester as the root project or an installed package.

    Files outside ``<project_root>/spm_modules`` belong to the root project,
    whose package.json is optional. Files inside it belong to
    ``spm_modules/<name>/<version>``, whose package.json is required.

    Raises:
        MalformedRequesterError: requester sits in the modules tree without a
            ``<name>/<version>`` prefix.
        ManifestError: the installed package has no readable package.json.
    """
    root = _normalize(project_root)
    modules_root = os.path.join(root, modules_dir or Constants.SPM_MODULES_DIR)

    parts = relative_parts(requester_path, modules_root)
    if parts is None:
        return ResolutionContext(
            kind=ContextKind.ROOT,
            directory=root,
            manifest=read_manifest(root, cache),
        )

    if len(parts) < 2:
        raise MalformedRequesterError(
            f"{requester_path} is inside {modules_root} but not inside an installed package"
        )

    package_dir = os.path.join(modules_root, parts[0], parts[1])
    manifest = read_manifest(package_dir, cache)
    if manifest is None:
        raise ManifestError(
            f"installed package {parts[0]}@{parts[1]} has no {Constants.PACKAGE_JSON_FILE}"
        )
    return ResolutionContext(kind=ContextKind.DEPENDENCY, directory=package_dir, manifest=manifest)
