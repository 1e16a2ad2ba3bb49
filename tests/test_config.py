"""Tests for YAML configuration overrides."""

import logging

from constants import Constants, _load_yaml_config


def test_applies_resolver_section(tmp_path):
    config = tmp_path / "cfg.yml"
    config.write_text(
        "resolver:\n"
        "  modules_dir: vendor\n"
        "  default_entry: main.js\n"
        "  shim_markers: [shims, node-libs-browser]\n"
        "  extensions: ['.js', '.json']\n"
        "  manifest_cache: false\n"
    )
    data = _load_yaml_config(str(config))
    assert "resolver" in data
    assert Constants.SPM_MODULES_DIR == "vendor"
    assert Constants.DEFAULT_ENTRY == "main.js"
    assert Constants.SHIM_MARKERS == ["shims", "node-libs-browser"]
    assert Constants.RESOLVE_EXTENSIONS == [".js", ".json"]
    assert Constants.MANIFEST_CACHE_ENABLED is False


def test_env_var_points_at_config(tmp_path, monkeypatch):
    config = tmp_path / "env.yml"
    config.write_text("resolver:\n  default_entry: env.js\n")
    monkeypatch.setenv(Constants.ENV_CONFIG, str(config))
    _load_yaml_config()
    assert Constants.DEFAULT_ENTRY == "env.js"


def test_missing_explicit_file_is_ignored(tmp_path, caplog, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    with caplog.at_level(logging.WARNING):
        assert _load_yaml_config(str(tmp_path / "nope.yml")) == {}
    assert "Config file not found" in caplog.text


def test_unknown_and_mistyped_keys_are_skipped(tmp_path, caplog):
    config = tmp_path / "cfg.yml"
    config.write_text("resolver:\n  colour: blue\n  extensions: .js\n  default_entry: ok.js\n")
    with caplog.at_level(logging.WARNING):
        _load_yaml_config(str(config))
    assert Constants.DEFAULT_ENTRY == "ok.js"
    assert Constants.RESOLVE_EXTENSIONS == [".js"]
    assert "colour" in caplog.text
    assert "extensions" in caplog.text


def test_malformed_yaml_is_logged(tmp_path, caplog):
    config = tmp_path / "bad.yml"
    config.write_text("resolver: [unclosed\n")
    with caplog.at_level(logging.ERROR):
        assert _load_yaml_config(str(config)) == {}
    assert "Failed to load config" in caplog.text


def test_non_mapping_document(tmp_path):
    config = tmp_path / "list.yml"
    config.write_text("- a\n- b\n")
    assert _load_yaml_config(str(config)) == {}
