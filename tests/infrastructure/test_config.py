"""Tests for configuration module."""

import dataclasses
import json
import os
import pytest
from unittest.mock import patch

from parrot.application.use_cases.execute_command import DEFAULT_INTERACTIVE_COMMANDS
from parrot.infrastructure.config import (
    DisplayConfig,
    LimitsConfig,
    ParrotConfig,
    ShellConfig,
    load_config,
)


class TestDefaultConfig:
    def test_defaults(self):
        config = load_config(path="/nonexistent/parrot.json")
        assert config.log_level == "WARNING"
        assert config.log_file == ""
        assert config.shell.path == "/bin/sh"
        assert config.shell.interactive_commands == DEFAULT_INTERACTIVE_COMMANDS
        assert config.limits.max_sessions == 8
        assert config.limits.queue_capacity == 10
        assert config.limits.recall_capacity == 256
        assert config.limits.input_capacity == 512
        assert config.limits.history_capacity == 500
        assert config.display.tick_interval == 0.1
        assert config.display.escape_timeout == 0.1

    def test_all_sections_present(self):
        config = load_config(path="/nonexistent/parrot.json")
        assert isinstance(config, ParrotConfig)
        assert isinstance(config.shell, ShellConfig)
        assert isinstance(config.limits, LimitsConfig)
        assert isinstance(config.display, DisplayConfig)


class TestFileConfig:
    def test_load_from_file(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text(json.dumps({
            "log_level": "DEBUG",
            "shell": {"path": "/bin/bash", "interactive_commands": ["vim", "emacs"]},
            "limits": {"queue_capacity": 20},
            "display": {"time_format": "12h", "line_break_enabled": False},
        }))

        config = load_config(path=str(config_file))
        assert config.log_level == "DEBUG"
        assert config.shell.path == "/bin/bash"
        assert config.shell.interactive_commands == ("vim", "emacs")
        assert config.limits.queue_capacity == 20
        assert config.limits.max_sessions == 8  # default preserved
        assert config.display.time_format == "12h"
        assert config.display.line_break_enabled is False

    def test_invalid_json_returns_defaults(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text("not valid json{{{")

        config = load_config(path=str(config_file))
        assert config.limits.queue_capacity == 10

    def test_non_object_returns_defaults(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text("[1, 2, 3]")

        config = load_config(path=str(config_file))
        assert config.shell.path == "/bin/sh"

    def test_unknown_keys_ignored(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text(json.dumps({"limits": {"max_sessions": 4, "colour": "red"}}))

        config = load_config(path=str(config_file))
        assert config.limits.max_sessions == 4

    def test_invalid_limit_rejected(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text(json.dumps({"limits": {"queue_capacity": 0}}))

        with pytest.raises(ValueError):
            load_config(path=str(config_file))

    def test_unknown_time_format_rejected(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text(json.dumps({"display": {"time_format": "25h"}}))

        with pytest.raises(ValueError, match="time_format"):
            load_config(path=str(config_file))


class TestEnvOverride:
    def test_env_overrides_file(self, tmp_path):
        config_file = tmp_path / "parrot.json"
        config_file.write_text(json.dumps({"limits": {"queue_capacity": 20}}))

        with patch.dict(os.environ, {"PARROT_LIMITS_QUEUE_CAPACITY": "30"}):
            config = load_config(path=str(config_file))

        assert config.limits.queue_capacity == 30

    def test_env_float_and_bool(self):
        with patch.dict(os.environ, {
            "PARROT_DISPLAY_TICK_INTERVAL": "0.25",
            "PARROT_DISPLAY_LINE_BREAK_ENABLED": "false",
        }):
            config = load_config(path="/nonexistent/parrot.json")

        assert config.display.tick_interval == 0.25
        assert config.display.line_break_enabled is False

    def test_env_interactive_commands_comma_separated(self):
        with patch.dict(os.environ, {"PARROT_SHELL_INTERACTIVE_COMMANDS": "vim, mc"}):
            config = load_config(path="/nonexistent/parrot.json")

        assert config.shell.interactive_commands == ("vim", "mc")

    def test_env_top_level_keys(self):
        with patch.dict(os.environ, {"PARROT_LOG_LEVEL": "DEBUG", "PARROT_LOG_FILE": "/tmp/p.log"}):
            config = load_config(path="/nonexistent/parrot.json")

        assert config.log_level == "DEBUG"
        assert config.log_file == "/tmp/p.log"

    def test_custom_prefix(self):
        with patch.dict(os.environ, {"MYTERM_SHELL_PATH": "/bin/zsh"}):
            config = load_config(path="/nonexistent/parrot.json", env_prefix="MYTERM")

        assert config.shell.path == "/bin/zsh"


class TestConfigImmutability:
    def test_frozen(self):
        config = load_config(path="/nonexistent/parrot.json")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.log_level = "DEBUG"

    def test_sub_config_frozen(self):
        config = load_config(path="/nonexistent/parrot.json")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.limits.max_sessions = 99
