"""Tests for configuration loading."""

import json

import pytest
from flowcanvas.config import (
    CONFIG_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    CanvasConfig,
    get_config_path,
    load_config,
    save_config,
)
from flowcanvas.editor import FlowEditor


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_file():
    assert load_config() == CanvasConfig()


def test_path_lookup_order(monkeypatch, tmp_path):
    assert get_config_path() == tmp_path / "flowcanvas.json"

    monkeypatch.setenv(CONFIG_ENV_VAR, "/etc/flowcanvas.json")
    assert str(get_config_path()) == "/etc/flowcanvas.json"
    assert str(get_config_path("custom.json")) == "custom.json"


def test_load_from_cwd(tmp_path):
    (tmp_path / "flowcanvas.json").write_text(json.dumps({"indent": 4, "strict_export": True}))

    config = load_config()
    assert config.indent == 4
    assert config.strict_export is True
    assert config.mermaid_direction == "TD"


def test_load_from_env_path(monkeypatch, tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"mermaid_direction": "LR"}))
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_config().mermaid_direction == "LR"


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"indent": 0, "theme": "dark"}))

    assert load_config(path) == CanvasConfig(indent=0)
    assert "Ignoring unknown config keys: theme" in caplog.text


@pytest.mark.parametrize("key, value", [
    ("log_level", 10),
    ("indent", "4"),
    ("strict_export", 1),
    ("indent", True),
    ("mermaid_direction", None),
])
def test_wrong_value_types_fall_back(tmp_path, key, value, caplog):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({key: value, "seed_welcome": False}))

    config = load_config(path)
    assert getattr(config, key) == getattr(CanvasConfig(), key)
    assert config.seed_welcome is False
    assert f"Ignoring config key {key}" in caplog.text


def test_null_indent_is_accepted(tmp_path):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"indent": None}))

    assert load_config(path).indent is None


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_bad_file_means_defaults(tmp_path, content, caplog):
    path = tmp_path / "c.json"
    path.write_text(content)

    assert load_config(path) == CanvasConfig()
    assert str(path) in caplog.text


def test_env_log_level_overrides(monkeypatch, tmp_path):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"log_level": "INFO"}))
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "DEBUG")

    assert load_config(path).log_level == "DEBUG"


def test_save_and_reload(tmp_path):
    config = CanvasConfig(indent=4, seed_welcome=False)
    path = save_config(config, tmp_path / "saved.json")

    assert load_config(path) == config


def test_editor_from_config():
    assert FlowEditor.from_config(CanvasConfig()).graph.node_ids == ["welcome"]
    assert len(FlowEditor.from_config(CanvasConfig(seed_welcome=False)).graph) == 0
