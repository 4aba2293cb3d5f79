"""Configuration defaults, profile loading and validation."""
from .defaults import AnalyticsConfig, get_default_config
from .loader import ConfigLoader, build_config
from .validation import ConfigValidator, ValidationError

__all__ = [
    "AnalyticsConfig",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationError",
    "build_config",
    "get_default_config",
]
