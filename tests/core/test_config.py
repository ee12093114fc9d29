"""Tests for startup configuration."""

from __future__ import annotations

import errno
import os

import pytest

from vdebug.core.config import (
    DEFAULT_PORT,
    DebuggerConfig,
    load_env_file,
    parse_port,
    parse_silent,
    parse_timeout,
    read_on_connected,
)
from vdebug.core.errors import ConfigError


class TestParseSilent:
    @pytest.mark.parametrize("value", ["0", "1", "2", 2, " 1 "])
    def test_valid(self, value):
        assert parse_silent(value) == int(str(value).strip())

    def test_not_a_number(self):
        with pytest.raises(ConfigError, match="should be a number"):
            parse_silent("loud")

    @pytest.mark.parametrize("value", ["3", "-1", 7])
    def test_out_of_range(self, value):
        with pytest.raises(ConfigError, match="range 0-2"):
            parse_silent(value)


class TestParsePort:
    def test_valid(self):
        assert parse_port("9090") == 9090
        assert parse_port(0) == 0

    def test_not_a_number(self):
        with pytest.raises(ConfigError, match='"port" should be a number'):
            parse_port("ninety")

    def test_out_of_range(self):
        with pytest.raises(ConfigError, match="range"):
            parse_port("70000")


class TestParseTimeout:
    @pytest.mark.parametrize("value", [None, "", "0", 0])
    def test_disabled(self, value):
        assert parse_timeout(value) is None

    def test_seconds(self):
        assert parse_timeout("2.5") == 2.5

    def test_negative(self):
        with pytest.raises(ConfigError, match="negative"):
            parse_timeout("-1")

    def test_not_a_number(self):
        with pytest.raises(ConfigError, match="should be a number"):
            parse_timeout("soon")

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan")])
    def test_not_finite(self, value):
        with pytest.raises(ConfigError, match="finite"):
            parse_timeout(value)


class TestReadOnConnected:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "init.js"
        path.write_text("init()", encoding="utf-8")

        assert read_on_connected(str(path)) == "init()"

    def test_missing_file_carries_errno(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            read_on_connected(str(tmp_path / "missing.js"))

        assert exc_info.value.errno == errno.ENOENT
        assert "onConnectedPath" in str(exc_info.value)


class TestFromOptions:
    """Tests for DebuggerConfig.from_options."""

    def test_defaults(self):
        config = DebuggerConfig.from_options(env={})

        assert config.port == DEFAULT_PORT
        assert config.silent == 0
        assert config.host == "0.0.0.0"
        assert config.on_connected_path is None
        assert config.on_connected_payload is None
        assert config.reply_timeout is None
        assert config.eval_mode == "inspect"

    def test_environment_defaults(self, tmp_path):
        path = tmp_path / "init.js"
        path.write_text("init()", encoding="utf-8")
        env = {
            "VDEBUG_PORT": "9191",
            "VDEBUG_SILENT": "1",
            "VDEBUG_HOST": "127.0.0.1",
            "VDEBUG_ON_CONNECTED_PATH": str(path),
        }

        config = DebuggerConfig.from_options(env=env)

        assert config.port == 9191
        assert config.silent == 1
        assert config.host == "127.0.0.1"
        assert config.on_connected_payload == "init()"

    def test_options_override_environment(self):
        env = {"VDEBUG_PORT": "9191", "VDEBUG_SILENT": "1"}

        config = DebuggerConfig.from_options(port="8080", silent="2", env=env)

        assert config.port == 8080
        assert config.silent == 2

    def test_invalid_environment_value(self):
        with pytest.raises(ConfigError, match="silent"):
            DebuggerConfig.from_options(env={"VDEBUG_SILENT": "9"})

    def test_empty_path_means_no_payload(self):
        config = DebuggerConfig.from_options(on_connected_path="", env={})

        assert config.on_connected_path is None
        assert config.on_connected_payload is None

    def test_empty_file_kept_as_empty_payload(self, tmp_path):
        path = tmp_path / "empty.js"
        path.write_text("", encoding="utf-8")

        config = DebuggerConfig.from_options(on_connected_path=str(path), env={})

        assert config.on_connected_path == str(path)
        assert config.on_connected_payload == ""

    def test_bad_silent_reported_before_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="silent") as exc_info:
            DebuggerConfig.from_options(
                silent="9", on_connected_path=str(tmp_path / "missing.js"), env={}
            )

        assert exc_info.value.errno is None

    def test_bad_port_reported_before_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="port"):
            DebuggerConfig.from_options(
                port="ninety", on_connected_path=str(tmp_path / "missing.js"), env={}
            )

    def test_bad_timeout_never_reaches_config(self):
        with pytest.raises(ConfigError, match="timeout"):
            DebuggerConfig.from_options(reply_timeout="nan", env={})

    def test_unknown_eval_mode(self):
        with pytest.raises(ConfigError, match="eval-mode"):
            DebuggerConfig.from_options(eval_mode="pickle", env={})


class TestLoadEnvFile:
    def test_missing_file(self, tmp_path):
        assert load_env_file(tmp_path / ".env") is False

    def test_loads_without_overriding(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("VDEBUG_PORT=9999\nVDEBUG_HOST=127.0.0.1\n", encoding="utf-8")
        monkeypatch.setenv("VDEBUG_PORT", "1234")
        # Registered so the value loaded below is removed afterwards
        monkeypatch.setenv("VDEBUG_HOST", "placeholder")
        monkeypatch.delenv("VDEBUG_HOST")

        assert load_env_file(env_file) is True

        assert os.environ["VDEBUG_PORT"] == "1234"
        assert os.environ["VDEBUG_HOST"] == "127.0.0.1"
