"""Configuration manager: load, save, merge, dot-path access."""
from __future__ import annotations

import json
import re as _re
import sys
from dataclasses import asdict, fields as _fields
from pathlib import Path

from .config_schema import (
    CONFIG_VERSION,
    FAIL_ON_CHOICES,
    PakkyGuardConfig,
    SecurityConfig,
    get_config_path,
    get_default_config,
)
from .security_levels import DEFAULT_SECURITY_LEVEL, is_valid_security_level

_VALID_FAIL_ON = frozenset(FAIL_ON_CHOICES)


class ConfigManager:
    def __init__(self, config_path: Path | None = None):
        self._path = config_path or get_config_path()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Load / Save
    # ------------------------------------------------------------------

    def load(self) -> PakkyGuardConfig:
        if not self._path.exists():
            return get_default_config()
        try:
            raw = json.loads(self._path.read_text())
            if not isinstance(raw, dict):
                raise ValueError("top-level value must be an object")
            return self._validate(self._from_dict(raw))
        except (json.JSONDecodeError, ValueError, TypeError) as exc:
            print(f"pakky-guard: malformed config, using defaults: {exc}", file=sys.stderr)
            return get_default_config()
        except OSError as exc:
            print(f"pakky-guard: cannot read config, using defaults: {exc}", file=sys.stderr)
            return get_default_config()

    def save(self, config: PakkyGuardConfig) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._to_dict(config), indent=2))

    def exists(self) -> bool:
        return self._path.exists()

    # ------------------------------------------------------------------
    # CRUD helpers
    # ------------------------------------------------------------------

    def update(self, updates: dict) -> PakkyGuardConfig:
        d = self._to_dict(self.load())
        merged = self._deep_merge(d, updates)
        cfg = self._validate(self._from_dict(merged))
        self.save(cfg)
        return cfg

    def get(self, key_path: str):
        """Get a config value by dot-path (e.g. 'security.level')."""
        node = self._to_dict(self.load())
        for key in key_path.split("."):
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        return node

    def set(self, key_path: str, value) -> None:
        """Set a config value by dot-path.

        Raises ValueError for values the schema does not accept.
        """
        if key_path == "security.level":
            if not is_valid_security_level(value):
                raise ValueError(f"Invalid security level: {value!r}")
            value = value.strip().upper()
        if key_path == "security.fail_on" and (not isinstance(value, str) or value not in _VALID_FAIL_ON):
            raise ValueError(f"Invalid fail_on value: {value!r}")

        *parents, leaf = key_path.split(".")
        updates: dict = {}
        node = updates
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
        self.update(updates)

    # ------------------------------------------------------------------

    def _validate(self, config: PakkyGuardConfig) -> PakkyGuardConfig:
        """Reset values the scanner would reject instead of failing later."""
        security = config.security
        if is_valid_security_level(security.level):
            security.level = security.level.strip().upper()
        else:
            print(
                f"pakky-guard: unknown security level {security.level!r} in config, "
                f"using {DEFAULT_SECURITY_LEVEL}",
                file=sys.stderr,
            )
            security.level = DEFAULT_SECURITY_LEVEL
        if not isinstance(security.fail_on, str) or security.fail_on not in _VALID_FAIL_ON:
            print(f"pakky-guard: invalid fail_on {security.fail_on!r} in config, using high", file=sys.stderr)
            security.fail_on = "high"
        return config

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_dict(config: PakkyGuardConfig) -> dict:
        return asdict(config)

    @staticmethod
    def _camel_to_snake(name: str) -> str:
        """Convert camelCase to snake_case."""
        return _re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()

    @classmethod
    def _pick_fields(cls, dc_class: type, raw: dict) -> dict:
        """Filter and remap a dict to only valid dataclass fields, handling camelCase."""
        valid = {f.name for f in _fields(dc_class)}
        out: dict = {}
        for k, v in raw.items():
            snake = cls._camel_to_snake(k)
            if snake in valid:
                out[snake] = v
        return out

    @classmethod
    def _from_dict(cls, d: dict) -> PakkyGuardConfig:
        security_raw = d.get("security") or {}
        if not isinstance(security_raw, dict):
            raise ValueError('"security" must be an object')
        return PakkyGuardConfig(
            version=d.get("version", CONFIG_VERSION),
            initialized=d.get("initialized", ""),
            security=SecurityConfig(**cls._pick_fields(SecurityConfig, security_raw)),
        )

    @staticmethod
    def _deep_merge(target: dict, source: dict) -> dict:
        out = {**target}
        for k, v in source.items():
            if isinstance(v, dict) and isinstance(out.get(k), dict):
                out[k] = ConfigManager._deep_merge(out[k], v)
            else:
                out[k] = v
        return out
