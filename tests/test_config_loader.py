"""Tests for config_loader.py."""

import logging
import os

import pytest

from vosksrt.config_loader import DEFAULT_CONFIG, ConfigLoader, validate_config
from vosksrt.exceptions import ConfigurationError


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_without_file():
    config = ConfigLoader().load_config(None)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_values_override_defaults(tmp_path):
    path = write_config(tmp_path, "max_words_per_cue: 8\nmax_cue_duration: 5\non_write_error: ignore\n")
    config = ConfigLoader().load_config(path)
    assert config["max_words_per_cue"] == 8
    assert config["max_cue_duration"] == 5
    assert config["on_write_error"] == "ignore"
    assert config["sample_rate"] == 16000


def test_empty_file_gives_defaults(tmp_path):
    assert ConfigLoader().load_config(write_config(tmp_path, "")) == DEFAULT_CONFIG


def test_unknown_keys_are_ignored(tmp_path, caplog):
    caplog.set_level(logging.WARNING)
    config = ConfigLoader().load_config(write_config(tmp_path, "whisper_model: medium.en\n"))
    assert "whisper_model" not in config
    assert "Ignoring unknown configuration key 'whisper_model'" in caplog.text


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigLoader().load_config(str(tmp_path / "absent.yaml"))


def test_directory_instead_of_file(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigLoader().load_config(str(tmp_path))


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigurationError, match="Invalid YAML format"):
        ConfigLoader().load_config(write_config(tmp_path, "max_words_per_cue: [6\n"))


def test_root_must_be_mapping(tmp_path):
    with pytest.raises(ConfigurationError, match="Root must be a mapping"):
        ConfigLoader().load_config(write_config(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize("key, value", [
    ("max_words_per_cue", 0),
    ("max_words_per_cue", "six"),
    ("max_words_per_cue", True),
    ("sample_rate", -16000),
    ("chunk_size", 4095),
    ("frames_per_buffer", 0),
    ("max_cue_duration", 0),
    ("max_cue_duration", "4s"),
    ("on_write_error", "explode"),
    ("vosk_log_level", "quiet"),
    ("ffmpeg_path", 42),
])
def test_invalid_values(key, value):
    config = dict(DEFAULT_CONFIG)
    config[key] = value
    with pytest.raises(ConfigurationError):
        validate_config(config)


def test_shipped_config_is_valid():
    path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.yaml")
    assert ConfigLoader().load_config(path) == DEFAULT_CONFIG
