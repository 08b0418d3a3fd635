"""Configuration schema and defaults."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from .security_levels import DEFAULT_SECURITY_LEVEL


FailOnLevel = Literal["low", "medium", "high", "critical", "never"]

CONFIG_VERSION = "1.0.0"

FAIL_ON_CHOICES: tuple[str, ...] = ("low", "medium", "high", "critical", "never")

LEVEL_ENV_VAR = "PAKKY_SECURITY_LEVEL"


@dataclass
class SecurityConfig:
    level: str = DEFAULT_SECURITY_LEVEL
    fail_on: FailOnLevel = "high"


@dataclass
class PakkyGuardConfig:
    version: str = CONFIG_VERSION
    initialized: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    security: SecurityConfig = field(default_factory=SecurityConfig)


def get_default_config() -> PakkyGuardConfig:
    return PakkyGuardConfig()


def get_pakky_dir() -> Path:
    return Path.home() / ".pakky"


def get_config_path() -> Path:
    return get_pakky_dir() / "config.json"
