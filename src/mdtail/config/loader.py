"""Configuration file loading.

Handles:
- YAML file parsing
- Environment variable overrides
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import codecs
import logging
import math
import os
from pathlib import Path
from typing import Any

import yaml

from mdtail.config.merge import merge_configs
from mdtail.config.paths import get_config_paths
from mdtail.config.schema import (
    DEFAULT_FILE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SETTLE_DELAY,
    Config,
    DisplayConfig,
    DocumentsConfig,
    LoggingConfig,
    WatchConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("mdtail.config")

_KNOWN_KEYS = {"watch", "documents", "display", "logging"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML as dict, or empty dict on error.
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("MDTAIL_LOG")
    if log_path:
        overrides["logging"] = {"file": log_path}

    return overrides


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        _log.warning("Ignoring config section %r: expected a mapping", key)
        return {}
    return value


def _invalid(section: str, key: str, value: Any, expected: str, default: Any) -> Any:
    _log.warning(
        "Invalid %s.%s %r (expected %s), using %r", section, key, value, expected, default
    )
    return default


def _number(
    data: dict[str, Any],
    section: str,
    key: str,
    default: float,
    allow_zero: bool = False,
) -> float:
    """Read a float setting; bad or out-of-range values fall back to the default."""
    value = data.get(key)
    if value is None:
        return default
    expected = "a number >= 0" if allow_zero else "a number > 0"
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return _invalid(section, key, value, expected, default)
    try:
        number = float(value)
    except ValueError:
        return _invalid(section, key, value, expected, default)
    if not math.isfinite(number) or number < 0 or (number == 0 and not allow_zero):
        return _invalid(section, key, value, expected, default)
    return number


def _string(
    data: dict[str, Any], section: str, key: str, default: str | None
) -> str | None:
    if key not in data or data[key] is None:
        return default
    value = data[key]
    if not isinstance(value, str) or not value:
        return _invalid(section, key, value, "a non-empty string", default)
    return value


def _extensions(data: dict[str, Any]) -> list[str]:
    default = [".md"]
    if "extensions" not in data:
        return default
    value = data["extensions"]
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return _invalid("documents", "extensions", value, "a list of strings", default)
    extensions = [e for e in value if isinstance(e, str) and e]
    if len(extensions) != len(value):
        _log.warning("Ignoring non-string entries in documents.extensions")
    return extensions or default


def _encoding(data: dict[str, Any]) -> str:
    encoding = _string(data, "documents", "encoding", "utf-8")
    try:
        codecs.lookup(encoding)
    except LookupError:
        return _invalid("documents", "encoding", encoding, "a known codec", "utf-8")
    return encoding


def _width(data: dict[str, Any]) -> int | None:
    value = data.get("width")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return _invalid("display", "width", value, "a positive integer", None)
    return value


def _verbosity(data: dict[str, Any]) -> int | None:
    value = data.get("verbose")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return _invalid("logging", "verbose", value, "a count >= 0", None)
    return value


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass.

    Values of the wrong type or out of range are reported with a warning and
    replaced by their defaults, so a bad config file never stops the viewer.

    Args:
        data: Merged configuration dictionary.

    Returns:
        Typed Config object.
    """
    watch_data = _section(data, "watch")
    watch = WatchConfig(
        poll_interval=_number(watch_data, "watch", "poll_interval", DEFAULT_POLL_INTERVAL),
        settle_delay=_number(
            watch_data, "watch", "settle_delay", DEFAULT_SETTLE_DELAY, allow_zero=True
        ),
    )

    docs_data = _section(data, "documents")
    documents = DocumentsConfig(
        default_file=_string(docs_data, "documents", "default_file", DEFAULT_FILE),
        extensions=_extensions(docs_data),
        encoding=_encoding(docs_data),
    )

    display_data = _section(data, "display")
    display = DisplayConfig(width=_width(display_data))

    log_data = _section(data, "logging")
    logging_config = LoggingConfig(
        level=_string(log_data, "logging", "level", None),
        verbose=_verbosity(log_data),
        file=_string(log_data, "logging", "file", None),
    )

    extra = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}

    return Config(
        watch=watch,
        documents=documents,
        display=display,
        logging=logging_config,
        extra=extra,
    )


def load_config(
    project_root: str | Path | None = None,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Explicit overrides (command-line flags)
    2. Environment variables
    3. Explicit config file (--config)
    4. Project config (<project_root>/.mdtail/config.yaml)
    5. User config (~/.config/mdtail/config.yaml or %APPDATA%)
    6. System config (/etc/mdtail/ or %PROGRAMDATA%)

    Args:
        project_root: Directory for project-level config.
        config_path: Extra config file layered above the project config.
        overrides: Values that beat every file and the environment.

    Returns:
        Merged Config object.
    """
    paths = get_config_paths(project_root)
    if config_path is not None:
        paths.append(config_path)

    configs: list[dict[str, Any]] = []
    for path in paths:
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    configs.append(env_overrides())
    if overrides:
        configs.append(overrides)

    return dict_to_config(merge_configs(*configs))
