"""dirlens Infrastructure.

Services shared by the walker, classifier and listing layers:
- ConfigManager: Hierarchical configuration (defaults, YAML files, env, CLI)
- Logger: Structured logging with thread-local context
"""

from .config_manager import ConfigError
from .config_manager import ConfigManager as Config
from .config_manager import (
    ConfigManager,
    ConfigSource,
    get_config_manager,
    set_global_config,
)
from .logger import Logger, LogLevel, configure_logging, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigError",
    "Config",
    "ConfigManager",
    "get_config_manager",
    "set_global_config",
]
