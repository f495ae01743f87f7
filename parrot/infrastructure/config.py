"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from JSON files
- Provides typed access to all Parrot settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
- Defaults reproduce the classic limits: 8 sessions, 10 queued commands,
  256 recalled commands, 512-byte input, 500-line initial history
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

from parrot.application.use_cases.execute_command import DEFAULT_INTERACTIVE_COMMANDS
from parrot.domain.entities.display_options import TIME_FORMAT_12H, TIME_FORMAT_24H
from parrot.infrastructure.adapters.shell_adapter import DEFAULT_SHELL

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "parrot.json"


@dataclass(frozen=True)
class ShellConfig:
    """Platform shell configuration."""
    path: str = DEFAULT_SHELL
    interactive_commands: tuple[str, ...] = DEFAULT_INTERACTIVE_COMMANDS


@dataclass(frozen=True)
class LimitsConfig:
    """Capacity limits for sessions and their components."""
    max_sessions: int = 8
    queue_capacity: int = 10
    recall_capacity: int = 256
    input_capacity: int = 512
    history_capacity: int = 500

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            if getattr(self, f.name) < 1:
                raise ValueError(f"{f.name} must be at least 1")
        if self.input_capacity < 2:
            raise ValueError("input_capacity must be at least 2")


@dataclass(frozen=True)
class DisplayConfig:
    """Terminal display configuration."""
    line_break_enabled: bool = True
    time_format: str = TIME_FORMAT_24H
    tick_interval: float = 0.1
    escape_timeout: float = 0.1

    def __post_init__(self) -> None:
        if self.time_format not in (TIME_FORMAT_24H, TIME_FORMAT_12H):
            raise ValueError(
                f"time_format must be '{TIME_FORMAT_24H}' or '{TIME_FORMAT_12H}', "
                f"got {self.time_format!r}"
            )
        if self.tick_interval <= 0 or self.escape_timeout <= 0:
            raise ValueError("tick_interval and escape_timeout must be positive")


@dataclass(frozen=True)
class ParrotConfig:
    """Root configuration for the Parrot application."""
    shell: ShellConfig = field(default_factory=ShellConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    log_level: str = "WARNING"
    log_file: str = ""
    log_json: bool = False


_TOP_LEVEL_KEYS = ("log_level", "log_file", "log_json")


def _env_override(data: dict, prefix: str = "PARROT") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern PARROT_SECTION_KEY.
    For example: PARROT_SHELL_PATH=/bin/bash, PARROT_LIMITS_QUEUE_CAPACITY=20.
    Top-level keys keep their full name: PARROT_LOG_LEVEL=DEBUG.
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        rest = key[len(prefix) + 1:].lower()
        if rest in _TOP_LEVEL_KEYS:
            data[rest] = value
            continue
        parts = rest.split("_", 1)
        if len(parts) == 2:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object", path)
        return {}
    return data


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    for f in dataclasses.fields(cls):
        if f.name not in filtered:
            continue
        val = filtered[f.name]

        # Convert comma-separated strings to tuples for tuple fields
        if f.type == "tuple[str, ...]":
            if isinstance(val, str):
                filtered[f.name] = tuple(v.strip() for v in val.split(",") if v.strip())
            elif isinstance(val, list):
                filtered[f.name] = tuple(val)
        elif f.type == "int":
            filtered[f.name] = int(val)
        elif f.type == "float":
            filtered[f.name] = float(val)
        elif f.type == "bool":
            filtered[f.name] = _to_bool(val)

    return cls(**filtered)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "PARROT",
) -> ParrotConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (PARROT_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to parrot.json in CWD.
        env_prefix: Environment variable prefix. Defaults to PARROT.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return ParrotConfig(
        shell=_build_sub_config(ShellConfig, data.get("shell", {})),
        limits=_build_sub_config(LimitsConfig, data.get("limits", {})),
        display=_build_sub_config(DisplayConfig, data.get("display", {})),
        log_level=str(data.get("log_level", "WARNING")),
        log_file=str(data.get("log_file", "")),
        log_json=_to_bool(data.get("log_json", False)),
    )
