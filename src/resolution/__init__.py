"""spm module-specifier resolution package.

Resolves import specifiers issued by source files to concrete files inside the
project or its ``spm_modules`` tree, honoring declared semver ranges.
"""

from .models import ResolutionContext, ResolvedTarget, Specifier
from .context import detect_context, find_shim_root
from .resolver import SpecifierResolver, resolve
from .adapter import make_resolver_plugin, resolve_request

__all__ = [
    "ResolutionContext",
    "ResolvedTarget",
    "Specifier",
    "detect_context",
    "find_shim_root",
    "SpecifierResolver",
    "resolve",
    "make_resolver_plugin",
    "resolve_request",
]
