"""Tests for specifier parsing and requester context detection."""

import os

import pytest

from common.errors import MalformedRequesterError, MalformedSpecifierError, ManifestError
from conftest import install, write_manifest
from constants import ContextKind
from resolution.context import detect_context, find_shim_root, relative_parts
from resolution.models import ResolvedTarget, Specifier


class TestSpecifierParse:
    """Split on the first separator."""

    def test_bare_name(self):
        spec = Specifier.parse("foo")
        assert spec.package_name == "foo"
        assert spec.sub_path is None

    def test_name_with_file(self):
        spec = Specifier.parse("foo/bar.js")
        assert spec.package_name == "foo"
        assert spec.sub_path == "bar.js"

    def test_deep_sub_path_is_kept_whole(self):
        assert Specifier.parse("foo/lib/util/bar.js").sub_path == "lib/util/bar.js"

    def test_trailing_slash(self):
        spec = Specifier.parse("foo/")
        assert spec.package_name == "foo"
        assert spec.sub_path is None

    @pytest.mark.parametrize("raw", ["", "   ", "/abs/path.js", "./local", "../up", ".", None])
    def test_malformed(self, raw):
        with pytest.raises(MalformedSpecifierError):
            Specifier.parse(raw)


class TestResolvedTarget:

    def test_as_dict(self):
        target = ResolvedTarget(path="/p/index.js", query="?x=1")
        assert target.as_dict() == {"path": "/p/index.js", "query": "?x=1", "resolved": True}


class TestRelativeParts:

    def test_outside(self, tmp_path):
        assert relative_parts(str(tmp_path / "a"), str(tmp_path / "b")) is None

    def test_sibling_with_common_prefix_is_outside(self, tmp_path):
        assert relative_parts(str(tmp_path / "spm_modules2" / "x"), str(tmp_path / "spm_modules")) is None

    def test_inside(self, tmp_path):
        parts = relative_parts(str(tmp_path / "m" / "foo" / "1.0.0" / "a.js"), str(tmp_path / "m"))
        assert parts == ["foo", "1.0.0", "a.js"]

    def test_same_dir(self, tmp_path):
        assert relative_parts(str(tmp_path), str(tmp_path)) == []


class TestFindShimRoot:

    def test_marker_found(self, tmp_path):
        requester = tmp_path / "node_modules" / "node-libs-browser" / "lib" / "x.js"
        assert find_shim_root(str(requester), ["node-libs-browser"]) == str(
            tmp_path / "node_modules" / "node-libs-browser"
        )

    def test_marker_must_be_whole_segment(self, tmp_path):
        requester = tmp_path / "my-node-libs-browser-fork" / "x.js"
        assert find_shim_root(str(requester), ["node-libs-browser"]) is None

    def test_no_markers(self, tmp_path):
        assert find_shim_root(str(tmp_path / "node-libs-browser"), []) is None


class TestDetectContext:
    """Root project vs. installed package."""

    def test_root_with_manifest(self, project):
        write_manifest(project, name="app")
        context = detect_context(str(project / "src" / "main.js"), str(project))
        assert context.kind is ContextKind.ROOT
        assert context.is_root
        assert context.name == "app"
        assert context.directory == str(project)

    def test_root_without_manifest(self, project):
        context = detect_context(str(project / "main.js"), str(project))
        assert context.is_root
        assert context.manifest is None
        assert context.name is None

    def test_installed_package(self, project):
        directory = install(project, "bar", "1.0.0", dir_name="1.0.0")
        requester = directory / "lib" / "index.js"
        context = detect_context(str(requester), str(project))
        assert context.kind is ContextKind.DEPENDENCY
        assert context.name == "bar"
        assert context.directory == str(directory)

    def test_requester_directory_also_works(self, project):
        directory = install(project, "bar", "1.0.0")
        context = detect_context(str(directory), str(project))
        assert context.directory == str(directory)

    def test_custom_modules_dir(self, project):
        directory = project / "vendor" / "bar" / "1.0.0"
        write_manifest(directory, name="bar", version="1.0.0")
        context = detect_context(str(directory / "a.js"), str(project), modules_dir="vendor")
        assert context.kind is ContextKind.DEPENDENCY

    def test_requester_too_shallow(self, project):
        (project / "spm_modules" / "bar").mkdir(parents=True)
        with pytest.raises(MalformedRequesterError):
            detect_context(str(project / "spm_modules" / "bar"), str(project))

    def test_installed_package_without_manifest(self, project):
        directory = project / "spm_modules" / "bar" / "1.0.0"
        directory.mkdir(parents=True)
        with pytest.raises(ManifestError):
            detect_context(os.path.join(str(directory), "a.js"), str(project))
