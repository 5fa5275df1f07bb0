"""Configuration management for mdtail.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/mdtail/ or %PROGRAMDATA%)
- User-level config (~/.config/mdtail/ or %APPDATA%)
- Project-level config (<cwd>/.mdtail/)
- Environment variable and command-line overrides (highest priority)

Example usage:
    from mdtail.config import load_config

    config = load_config(project_root="/path/to/notes")
    print(config.watch.poll_interval)
"""

from mdtail.config.loader import dict_to_config, load_config
from mdtail.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from mdtail.config.schema import (
    Config,
    DisplayConfig,
    DocumentsConfig,
    LoggingConfig,
    WatchConfig,
)

__all__ = [
    "Config",
    "load_config",
    "dict_to_config",
    "WatchConfig",
    "DocumentsConfig",
    "DisplayConfig",
    "LoggingConfig",
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
