"""Tests for file reading helpers."""

import pytest

from convman.shared.exceptions import (
    FileIOException,
    FileNotFoundException,
    YamlSyntaxException,
)
from convman.shared.utils import io as io_utils


def test_read_yaml_config(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("debug: true\nlistening_port: 8080\nfb_verify_token: 'abc'\n")

    assert io_utils.read_config_file(path) == {
        "debug": True,
        "listening_port": 8080,
        "fb_verify_token": "abc",
    }


def test_json_is_valid_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"repository": "mongo", "db_host": "db"}')

    assert io_utils.read_config_file(path) == {"repository": "mongo", "db_host": "db"}


def test_empty_config(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("")

    assert io_utils.read_config_file(path) == {}


def test_config_must_be_a_mapping(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("- debug\n- listening_port\n")

    with pytest.raises(YamlSyntaxException, match="key value mapping"):
        io_utils.read_config_file(path)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("debug: [true\n")

    with pytest.raises(YamlSyntaxException):
        io_utils.read_config_file(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundException):
        io_utils.read_config_file(tmp_path / "missing.yml")


def test_read_json_file(tmp_path):
    path = tmp_path / "payload.json"
    path.write_text("{not json")

    with pytest.raises(FileIOException):
        io_utils.read_json_file(path)


def test_json_to_string_keeps_unicode():
    assert io_utils.json_to_string({"text": "你好"}, indent=None) == '{"text": "你好"}'


def test_raise_warning_with_docs():
    with pytest.warns(UserWarning, match="More info at https://example.com"):
        io_utils.raise_warning("careful", docs="https://example.com")
