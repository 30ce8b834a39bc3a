"""Vista configuration system.

Configuration is YAML-based with CLI overrides (--path, --layout, --format).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.vista/config.yaml
3. ./vista.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from vista.errors import ConfigurationError

FORMAT_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class ViewConfig:
    """View configuration applied to controller classes.

    Attributes:
        paths: View root directories, searched in order
        layout: Layout name under layouts/ (False disables, None leaves unset)
        template: Template name
        default_format: Output format used when none is requested
        engine_options: Jinja2 Environment options (trim_blocks, ...)
    """

    paths: list[str] = field(default_factory=list)
    layout: str | bool | None = None
    template: str | None = None
    default_format: str = "html"
    engine_options: dict[str, Any] = field(default_factory=dict)

    # Runtime overrides (set by load_config)
    _config_path: Path | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate view configuration."""
        if isinstance(self.paths, (str, Path)):
            self.paths = [str(self.paths)]

        if not FORMAT_PATTERN.match(self.default_format or ""):
            raise ConfigurationError(f"Invalid default format: {self.default_format!r}")

        if self.layout is True:
            raise ConfigurationError("layout must be a layout name or false")

        if not isinstance(self.engine_options, dict):
            raise ConfigurationError("engine_options must be a mapping")

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    def to_settings(self) -> dict[str, Any]:
        """Return controller settings, skipping values left unset."""
        settings: dict[str, Any] = {
            "default_format": self.default_format,
            "engine_options": dict(self.engine_options),
        }
        if self.paths:
            settings["paths"] = list(self.paths)
        if self.layout is not None:
            settings["layout"] = self.layout or None
        if self.template is not None:
            settings["template"] = self.template
        return settings


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${VIEWS_ROOT} -> value of VIEWS_ROOT

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigurationError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.vista/config.yaml
    2. ./vista.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".vista" / "config.yaml",
        start_path / "vista.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any], base_dir: Path | None = None) -> ViewConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary
        base_dir: Directory relative view paths are resolved against

    Returns:
        ViewConfig instance
    """
    data = substitute_env_vars(data)

    unknown = sorted(set(data) - {"paths", "layout", "template", "default_format", "engine"})
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {unknown}")

    paths = data.get("paths") or []
    if isinstance(paths, str):
        paths = [paths]
    if base_dir is not None:
        paths = [str(base_dir / path) for path in paths]

    return ViewConfig(
        paths=[str(path) for path in paths],
        layout=data.get("layout"),
        template=data.get("template"),
        default_format=str(data.get("default_format", "html")),
        engine_options=data.get("engine") or {},
    )


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ViewConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ViewConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data, base_dir=found_path.resolve().parent)
        config._config_path = found_path
    else:
        config = ViewConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Vista Configuration

# View roots, searched in order (relative to this file)
paths:
  - "views"

# Layout rendered around every template (under views/layouts/), or false
layout: "app"

# Default template for `vista render` when none is given
# template: "index"

# Output format: selects <name>.<format>.j2 templates
default_format: "html"

# Jinja2 environment options
engine:
  trim_blocks: true
  lstrip_blocks: true
'''
