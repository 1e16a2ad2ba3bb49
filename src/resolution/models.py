"""Data models for specifier resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from common.errors import MalformedSpecifierError
from constants import ContextKind
from versioning.manifest import Manifest


@dataclass(frozen=True)
class Specifier:
    """An import specifier split into package name and optional sub-path."""

    raw: str
    package_name: str
    sub_path: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "Specifier":
        """Split ``raw`` on the first ``/``.

        ``foo`` -> (foo, None); ``foo/lib/bar.js`` -> (foo, lib/bar.js).

        Raises:
            MalformedSpecifierError: empty, absolute or relative specifiers.
        """
        if not isinstance(raw, str) or not raw.strip():
            raise MalformedSpecifierError("empty module specifier")
        text = raw.strip()
        if text.startswith("/"):
            raise MalformedSpecifierError(f"absolute specifier {raw!r} does not name a package")
        name, _, rest = text.partition("/")
        if name in (".", ".."):
            raise MalformedSpecifierError(f"relative specifier {raw!r} does not name a package")
        return cls(raw=raw, package_name=name, sub_path=rest or None)


@dataclass(frozen=True)
class ResolutionContext:
    """The package a specifier is being resolved on behalf of."""

    kind: ContextKind
    directory: str
    manifest: Optional[Manifest] = None

    @property
    def is_root(self) -> bool:
        return self.kind is ContextKind.ROOT

    @property
    def name(self) -> Optional[str]:
        return self.manifest.name if self.manifest else None


@dataclass(frozen=True)
class ResolvedTarget:
    """Successful resolution handed back to the build pipeline."""

    path: str
    query: str = ""
    resolved: bool = True

    def as_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "query": self.query, "resolved": self.resolved}
