"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import AnalyticsConfig, get_default_config

PROFILES_FILE = "analytics.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: AnalyticsConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_profile_config(self, profile_id: Optional[str]) -> dict[str, Any]:
        """Load brokerage-profile configuration overrides."""
        if not profile_id:
            return {}

        profiles_file = self.config_dir / PROFILES_FILE

        if not profiles_file.exists():
            return {}

        with open(profiles_file, encoding="utf-8") as f:
            profiles_config = yaml.safe_load(f) or {}

        return profiles_config.get("profiles", {}).get(profile_id, {}) or {}  # type: ignore[no-any-return]

    def list_profiles(self) -> list[str]:
        """List profile identifiers declared in the profiles file."""
        profiles_file = self.config_dir / PROFILES_FILE

        if not profiles_file.exists():
            return []

        with open(profiles_file, encoding="utf-8") as f:
            profiles_config = yaml.safe_load(f) or {}

        return sorted((profiles_config.get("profiles") or {}).keys())

    def merge_config(
        self,
        profile_id: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. Profile-specific overrides
        3. Global defaults (lowest priority)
        """
        # Start with global defaults
        config = self._dataclass_to_dict(self.defaults)

        # Apply profile-specific overrides
        profile_config = self.load_profile_config(profile_id)
        config = self._deep_merge(config, profile_config)

        # Apply per-call overrides
        if overrides:
            config = self._deep_merge(config, overrides)

        return config

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


def _freeze(value: Any) -> Any:
    """Turn YAML lists into tuples so sections stay hashable and immutable."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def build_config(config: dict[str, Any]) -> AnalyticsConfig:
    """
    Build a typed configuration from a merged configuration dict.

    Unknown keys are ignored here; ConfigValidator reports them.
    """
    defaults = get_default_config()
    sections = {}

    for section in fields(AnalyticsConfig):
        default_section = getattr(defaults, section.name)
        values = config.get(section.name) or {}
        known = {f.name for f in fields(default_section)}
        kwargs = {key: _freeze(value) for key, value in values.items() if key in known}
        sections[section.name] = type(default_section)(**kwargs)

    return AnalyticsConfig(**sections)
