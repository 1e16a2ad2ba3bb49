"""Pick the highest installed version of a package that satisfies a range.

Installed versions live under ``spm_modules/<name>/<dir>/package.json``. The
directory name is not trusted; only the manifest's ``version`` field counts.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, List, Optional

import semantic_version

from common.errors import DuplicateVersionError, InvalidVersionRangeError
from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

from .manifest import ManifestCache, read_manifest
from .models import InstalledVersion

logger = logging.getLogger(__name__)

_ANY_ALIASES = {"", "*", "x", "X", "latest"}

# operator, optional whitespace, optional v/= prefix, then the version
_COMPARATOR_PATTERN = re.compile(r"(~>|>=|<=|>|<|=|~|\^)\s*(?:[v=]\s*)?(?=[0-9xX*])")


def parse_version(raw: Optional[str]) -> Optional[semantic_version.Version]:
    """Parse a manifest version the way npm's ``semver.valid`` does.

    Surrounding whitespace and a single leading ``v`` are tolerated. Anything
    that is not a strict ``MAJOR.MINOR.PATCH[-pre][+build]`` returns None.
    """
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text.startswith("v"):
        text = text[1:]
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None


def _normalize_range(text: str) -> str:
    """Rewrite loose npm comparator syntax into NpmSpec-compatible form.

    ``>= 1.2.0`` -> ``>=1.2.0``, ``~> 1.2`` -> ``~1.2``, ``^v1.2.0`` -> ``^1.2.0``.
    """
    def _operator(match: re.Match) -> str:
        op = match.group(1)
        return "~" if op == "~>" else op

    return _COMPARATOR_PATTERN.sub(_operator, text)


def parse_range(version_range: Optional[str]) -> semantic_version.NpmSpec:
    """Compile an npm-style range expression.

    Raises:
        InvalidVersionRangeError: the expression is not a valid npm range.
    """
    text = (version_range or "").strip()
    if text in _ANY_ALIASES:
        text = Constants.ANY_RANGE
    else:
        text = _normalize_range(text)
    try:
        return semantic_version.NpmSpec(text)
    except ValueError as e:
        raise InvalidVersionRangeError(f"invalid version range {version_range!r}: {e}") from e


def list_installed(install_dir: str, cache: Optional[ManifestCache] = None) -> Dict[str, InstalledVersion]:
    """Map each valid declared version (build metadata dropped) to its installed copy.

    Subdirectories without a manifest or with an invalid version are skipped.

    Raises:
        DuplicateVersionError: two subdirectories declare the same version.
    """
    installed: Dict[str, InstalledVersion] = {}
    if not os.path.isdir(install_dir):
        return installed

    for entry in sorted(os.listdir(install_dir)):
        path = os.path.join(install_dir, entry)
        if not os.path.isdir(path):
            continue
        manifest = read_manifest(path, cache)
        if manifest is None:
            continue
        version = parse_version(manifest.version)
        if version is None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Skipping install dir with invalid version",
                    extra=extra_context(
                        event="version_skip",
                        component="version_selector",
                        target=path,
                        version=manifest.version,
                    ),
                )
            continue
        # build metadata does not affect precedence
        key = str(version.truncate("prerelease"))
        if key in installed:
            raise DuplicateVersionError(key, installed[key].path, path)
        installed[key] = InstalledVersion(version=version, path=path, manifest=manifest)

    return installed


def select_version(
    version_range: Optional[str],
    install_dir: str,
    cache: Optional[ManifestCache] = None,
) -> Optional[InstalledVersion]:
    """Return the highest installed version in ``install_dir`` matching the range.

    Args:
        version_range: npm range expression; empty, ``*``, ``x`` and ``latest`` match anything
        install_dir: directory holding one subdirectory per installed version
        cache: optional per-build manifest cache

    Returns:
        The selected InstalledVersion, or None when nothing satisfies the range
        (including a missing ``install_dir``).
    """
    spec = parse_range(version_range)
    with Timer() as t:
        installed = list_installed(install_dir, cache)
        candidates: List[InstalledVersion] = [
            iv for iv in installed.values() if spec.match(iv.version)
        ]
        selected = max(candidates, key=lambda iv: iv.version) if candidates else None

    if is_debug_enabled(logger):
        logger.debug(
            "Version selection",
            extra=extra_context(
                event="version_select",
                component="version_selector",
                target=install_dir,
                range=version_range,
                candidate_count=len(installed),
                matched=len(candidates),
                selected=selected.version_string if selected else None,
                duration_ms=t.duration_ms(),
            ),
        )
    return selected
