"""Resolve import specifiers against the spm package layout.

Resolution runs through four ordered states and the first match wins:

1. Shim shortcut: requesters inside a shim tree (``node-libs-browser``) load
   flat, unversioned modules from the shim's own ``node_modules``.
2. Context detection: the requester belongs either to the root project or to
   an installed ``spm_modules/<name>/<version>`` package.
3. Self reference: a package importing its own name resolves inside itself.
4. Dependency reference: the declared range picks an installed version.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional

from common.errors import (
    DependencyNotDeclaredError,
    InvalidVersionRangeError,
    VersionNotSatisfiedError,
)
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.manifest import Manifest, ManifestCache, read_manifest
from versioning.selector import select_version

from .context import detect_context, find_shim_root
from .models import ResolutionContext, ResolvedTarget, Specifier

logger = logging.getLogger(__name__)


class SpecifierResolver:
    """Resolver bound to one project root and, optionally, one build's cache.

    Settings default to the current ``Constants`` values at construction time.
    """

    def __init__(
        self,
        project_root: str,
        *,
        shim_markers: Optional[Iterable[str]] = None,
        extensions: Optional[Iterable[str]] = None,
        modules_dir: Optional[str] = None,
        default_entry: Optional[str] = None,
        cache: Optional[ManifestCache] = None,
    ):
        self.project_root = os.path.normpath(os.path.abspath(project_root))
        self.shim_markers: List[str] = list(
            Constants.SHIM_MARKERS if shim_markers is None else shim_markers
        )
        self.extensions: List[str] = list(
            Constants.RESOLVE_EXTENSIONS if extensions is None else extensions
        )
        self.modules_dir = modules_dir or Constants.SPM_MODULES_DIR
        self.default_entry = default_entry or Constants.DEFAULT_ENTRY
        if cache is None and Constants.MANIFEST_CACHE_ENABLED:
            cache = ManifestCache()
        self.cache = cache

    @property
    def modules_root(self) -> str:
        return os.path.join(self.project_root, self.modules_dir)

    def resolve(self, specifier: str, requester_path: str, query: str = "") -> ResolvedTarget:
        """Resolve ``specifier`` issued from ``requester_path``.

        Raises:
            ResolutionError: any subclass, see ``common.errors``.
        """
        spec = Specifier.parse(specifier)

        shim_root = find_shim_root(requester_path, self.shim_markers)
        if shim_root is not None:
            path = self._resolve_shim(spec, shim_root)
            return self._finish(spec, requester_path, path, query, "shim")

        context = detect_context(requester_path, self.project_root, self.cache, self.modules_dir)

        if context.manifest is not None and context.name == spec.package_name:
            path = self._compose(context.directory, spec.sub_path, context.manifest)
            return self._finish(spec, requester_path, path, query, "self")

        path = self._resolve_dependency(spec, context)
        return self._finish(spec, requester_path, path, query, "dependency")

    def _resolve_shim(self, spec: Specifier, shim_root: str) -> str:
        package_dir = os.path.join(shim_root, Constants.SHIM_MODULES_DIR, spec.package_name)
        manifest = read_manifest(package_dir, self.cache)
        # shims are plain node packages, so use the top-level "main"
        entry = spec.sub_path or (manifest.main if manifest else None) or self.default_entry
        return self._with_extension(os.path.join(package_dir, entry))

    def _resolve_dependency(self, spec: Specifier, context: ResolutionContext) -> str:
        version_range = context.manifest.dependency_range(spec.package_name) if context.manifest else None
        if version_range is None:
            if not context.is_root:
                raise DependencyNotDeclaredError(spec.package_name, context.name)
            version_range = Constants.ANY_RANGE

        install_dir = os.path.join(self.modules_root, spec.package_name)
        try:
            selected = select_version(version_range, install_dir, self.cache)
        except InvalidVersionRangeError as e:
            # an unparsable range can never be satisfied
            raise VersionNotSatisfiedError(spec.package_name, version_range) from e
        if selected is None:
            raise VersionNotSatisfiedError(spec.package_name, version_range)

        if is_debug_enabled(logger):
            logger.debug(
                "Selected %s@%s for range %s",
                spec.package_name,
                selected.version_string,
                version_range,
                extra=extra_context(
                    event="dependency_selected",
                    component="resolver",
                    context_kind=context.kind.value,
                    target=selected.path,
                ),
            )
        return self._compose(selected.path, spec.sub_path, selected.manifest)

    def _compose(self, directory: str, sub_path: Optional[str], manifest: Optional[Manifest]) -> str:
        entry = sub_path or (manifest.entry if manifest else None) or self.default_entry
        return self._with_extension(os.path.join(directory, entry))

    def _with_extension(self, path: str) -> str:
        """Append the first configured extension that names an existing file.

        Only applies when ``path`` is missing, so ``jquery.min`` still finds
        ``jquery.min.js``.
        """
        path = os.path.normpath(path)
        if os.path.exists(path):
            return path
        for ext in self.extensions:
            candidate = path + ext
            if os.path.isfile(candidate):
                return candidate
        return path

    def _finish(
        self, spec: Specifier, requester_path: str, path: str, query: str, state: str
    ) -> ResolvedTarget:
        logger.debug(
            "filepath %s",
            path,
            extra=extra_context(
                event="resolved",
                component="resolver",
                action=state,
                specifier=spec.raw,
                requester=requester_path,
            ),
        )
        return ResolvedTarget(path=path, query=query, resolved=True)


def resolve(specifier: str, requester_path: str, project_root: str, query: str = "") -> ResolvedTarget:
    """One-shot resolution with a fresh resolver and cache."""
    return SpecifierResolver(project_root).resolve(specifier, requester_path, query)
