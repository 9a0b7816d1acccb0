"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    ApiParams,
    CompareParams,
    DefaultConfig,
    ExitPlanParams,
    LoggingParams,
    SegmentParams,
    StorageParams,
    ViewParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILENAME = "coinscope.yaml"

_SECTIONS = {
    "api": ApiParams,
    "segments": SegmentParams,
    "view": ViewParams,
    "compare": CompareParams,
    "exit_plan": ExitPlanParams,
    "storage": StorageParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML file in the config directory."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping")

        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. coinscope.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """Merge, validate and build the typed configuration."""
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
            raise ConfigurationError(f"Invalid configuration: {summary}", errors=errors)

        sections = {}
        for name, params_cls in _SECTIONS.items():
            section = merged.get(name, {})
            known = {f.name for f in fields(params_cls)}
            unknown = set(section) - known
            if unknown:
                raise ConfigurationError(
                    f"Unknown keys in section '{name}': {', '.join(sorted(unknown))}"
                )
            sections[name] = params_cls(**{k: self._freeze(v) for k, v in section.items()})

        return DefaultConfig(**sections)

    def _freeze(self, value: Any) -> Any:
        """Lists from YAML become tuples so the dataclasses stay hashable."""
        if isinstance(value, (list, tuple)):
            return tuple(self._freeze(v) for v in value)
        return value

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(config_dir: Optional[Path] = None,
                overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
    """Shortcut for ConfigLoader.create(config_dir).load(overrides)."""
    return ConfigLoader.create(config_dir).load(overrides)
