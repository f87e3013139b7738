"""
Config system - Layered triage configuration with validation.

Sources, later overriding earlier:
config files (JSON/YAML) > .env file > environment variables > overrides
"""

from __future__ import annotations

import json
import os
from dataclasses import MISSING, dataclass, field, fields
from glob import glob
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values

from .collaborators import DebugConfig
from .exceptions import ConfigError
from .rules import DEFAULT_CRITICAL_KINDS, DEFAULT_IGNORABLE_KINDS, RuleSet


def _default_names(kinds) -> list[str]:
    return sorted(kind.name for kind in kinds)


@dataclass
class TriageConfig:
    """Settings for the undeliverable-error sink."""
    debug_reporting: bool = False
    ignorable_kinds: list = field(default_factory=lambda: _default_names(DEFAULT_IGNORABLE_KINDS))
    critical_kinds: list = field(default_factory=lambda: _default_names(DEFAULT_CRITICAL_KINDS))
    log_tag: str = "faultsink.sink"

    def rule_set(self) -> RuleSet:
        """Build the (immutable) rule set named by this config."""
        return RuleSet.from_names(
            ignorable=self.ignorable_kinds,
            critical=self.critical_kinds,
        )


class DebugReportingToggle(DebugConfig):
    """
    Process-wide debug reporting flag.

    Read by every triage call without locking. A change is picked up by
    calls that start after it; in-flight calls may still see the old value.
    """

    def __init__(self, enabled: bool = False):
        self._enabled = bool(enabled)

    def is_debug_reporting_enabled(self) -> bool:
        return self._enabled

    def set(self, enabled: bool):
        self._enabled = bool(enabled)

    def enable(self):
        self.set(True)

    def disable(self):
        self.set(False)

    def __repr__(self) -> str:
        return f"DebugReportingToggle(enabled={self._enabled})"


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > config files > defaults

    Triage settings live under the ``triage`` key, e.g. in YAML:

        triage:
          debug_reporting: true
          critical_kinds: [null_reference, invalid_state]

    or in the environment as ``FAULTSINK_TRIAGE__DEBUG_REPORTING=true``.
    """

    def __init__(self, env_prefix: str = "FAULTSINK_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}
        # Unparsed strings from .env and the environment, by key path
        self._raw_env: Dict[tuple, str] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "FAULTSINK_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources.

        Args:
            paths: Config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        for path_str in sorted(glob(pattern)):
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)
            else:
                raise ConfigError(f"Unsupported config file type: {path}")

    def _load_json_file(self, path: Path):
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
        self._merge_source(path, data)

    def _load_yaml_file(self, path: Path):
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        if data:
            self._merge_source(path, data)

    def _merge_source(self, path: Path, data: Any):
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from .env file."""
        if not Path(path).exists():
            return

        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert FAULTSINK_TRIAGE__DEBUG_REPORTING to nested dict."""
        key = key[len(self.env_prefix):]

        # Split by double underscore for nested keys
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)
        self._raw_env[tuple(parts)] = value

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        # Boolean
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
            return False

        # Number
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # JSON
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        # Comma-separated list
        if "," in value:
            return [item.strip() for item in value.split(",") if item.strip()]

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current = self.config_data

        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def get_triage_config(self) -> TriageConfig:
        """
        Get and validate the triage configuration.

        Raises:
            ConfigError: If a field has the wrong type or is unknown
        """
        data = self.get("triage", {})
        if not isinstance(data, dict):
            raise ConfigError("Config section 'triage' must be a mapping")

        known = {f.name for f in fields(TriageConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown triage config keys: {', '.join(unknown)}")

        kwargs = {}
        for field_info in fields(TriageConfig):
            if field_info.name not in data:
                continue
            value = data[field_info.name]
            if field_info.name.endswith("_kinds"):
                kwargs[field_info.name] = self._kind_names(field_info.name, value)
                continue
            if isinstance(field_info.default, str):
                value = self._as_str(("triage", field_info.name), value)
            if not self._check_type(value, field_info):
                raise ConfigError(
                    f"Config field '{field_info.name}' expected {field_info.type}, "
                    f"got {type(value).__name__}"
                )
            kwargs[field_info.name] = value

        return TriageConfig(**kwargs)

    def _kind_names(self, name: str, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value] if value else []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"Config field '{name}' must be a list of kind names")
        return value

    def _as_str(self, path: tuple, value: Any) -> Any:
        """Undo scalar coercion for string fields set from the environment."""
        raw = self._raw_env.get(path)
        if isinstance(value, str) or raw is None:
            return value
        # Only if the env value was not replaced by overrides
        if self._parse_value(raw) == value and type(self._parse_value(raw)) is type(value):
            return raw
        return value

    def _check_type(self, value: Any, field_info) -> bool:
        """Basic type checking against the field's default."""
        if field_info.default is MISSING:
            return True
        return isinstance(value, type(field_info.default))

    def to_dict(self) -> dict:
        """Export all config as dictionary."""
        return self.config_data.copy()
