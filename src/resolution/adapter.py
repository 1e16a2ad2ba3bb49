"""Callback-style entry point for bundler resolver plugins.

A plugin hands over a request mapping with ``request`` (the specifier),
``path`` (the requesting file or its directory) and an optional ``query``,
and receives ``callback(error, result)``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from common.errors import ResolutionError
from common.logging_utils import Timer, extra_context, is_debug_enabled

from .resolver import SpecifierResolver

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[str], Optional[Dict[str, Any]]], Any]


def resolve_request(
    project_root: str,
    request: Mapping[str, Any],
    callback: Callback,
    resolver: Optional[SpecifierResolver] = None,
) -> Any:
    """Resolve one plugin request and report through ``callback``.

    Resolution failures are passed to the callback as their message; they are
    not raised.
    """
    resolver = resolver or SpecifierResolver(project_root)
    if is_debug_enabled(logger):
        logger.debug(
            "request %s",
            dict(request),
            extra=extra_context(event="function_entry", component="adapter", action="resolve_request"),
        )

    missing = [key for key in ("request", "path") if not request.get(key)]
    if missing:
        return callback(f"malformed resolve request: missing {', '.join(missing)}", None)

    with Timer() as t:
        try:
            target = resolver.resolve(request["request"], request["path"], request.get("query") or "")
        except ResolutionError as e:
            logger.debug(
                "Resolution failed: %s",
                e,
                extra=extra_context(
                    event="resolve_failed",
                    component="adapter",
                    outcome=type(e).__name__,
                    duration_ms=t.duration_ms(),
                ),
            )
            return callback(str(e), None)

    return callback(None, target.as_dict())


def make_resolver_plugin(project_root: str, resolver: Optional[SpecifierResolver] = None):
    """Bind a single resolver (and its manifest cache) to one build run.

    Returns:
        ``plugin(request, callback)`` suitable for registering with a bundler.
    """
    bound = resolver or SpecifierResolver(project_root)

    def plugin(request: Mapping[str, Any], callback: Callback) -> Any:
        return resolve_request(project_root, request, callback, resolver=bound)

    plugin.resolver = bound  # type: ignore[attr-defined]
    return plugin
