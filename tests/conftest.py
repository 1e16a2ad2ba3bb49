"""Shared fixtures for building spm project layouts on disk."""

import json

import pytest

from constants import Constants

_CONFIG_ATTRS = (
    "SPM_MODULES_DIR",
    "DEFAULT_ENTRY",
    "SHIM_MARKERS",
    "RESOLVE_EXTENSIONS",
    "MANIFEST_CACHE_ENABLED",
)


def write_manifest(directory, name=None, version=None, main=None, dependencies=None, node_main=None):
    """Write a package.json into ``directory`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    data = {}
    if name is not None:
        data["name"] = name
    if version is not None:
        data["version"] = version
    if node_main is not None:
        data["main"] = node_main
    spm = {}
    if main is not None:
        spm["main"] = main
    if dependencies is not None:
        spm["dependencies"] = dependencies
    if spm:
        data["spm"] = spm
    path = directory / "package.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def install(root, name, version, dir_name=None, **kwargs):
    """Create ``spm_modules/<name>/<dir_name or version>`` with a manifest."""
    directory = root / "spm_modules" / name / (dir_name or version)
    write_manifest(directory, name=name, version=version, **kwargs)
    return directory


@pytest.fixture
def project(tmp_path):
    """An empty project root."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants overrides applied by config loading."""
    saved = {attr: getattr(Constants, attr) for attr in _CONFIG_ATTRS}
    yield
    for attr, value in saved.items():
        setattr(Constants, attr, value)
