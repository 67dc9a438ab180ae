"""
Configuration system with Pydantic models and validation.

Provides configuration management with type safety, validation, and
support for JSON, YAML and TOML configuration files.
"""

from .models import (
    Config,
    ProcessingOptions,
    ProcessingConfig,
    OutputConfig,
    LoggingConfig,
    LogLevel,
    MAX_SENSITIVITY,
)
from .loader import (
    load_config,
    load_config_from_dict,
    build_options,
    update_config,
    save_config,
    get_default_config,
    validate_config_file,
)

__all__ = [
    # Configuration models
    "Config",
    "ProcessingOptions",
    "ProcessingConfig",
    "OutputConfig",
    "LoggingConfig",
    "LogLevel",
    "MAX_SENSITIVITY",
    # Configuration loading
    "load_config",
    "load_config_from_dict",
    "build_options",
    "update_config",
    "save_config",
    "get_default_config",
    "validate_config_file",
]
