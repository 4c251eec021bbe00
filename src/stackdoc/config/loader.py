"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.stackdoc.yml)
- Global config (~/.stackdoc/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from stackdoc.config.models import (
    DEFAULT_OUTPUT_FILE,
    GuidelinesConfig,
    ModulesConfig,
    OutputConfig,
    PipelineConfig,
    ScanConfig,
    StackdocConfig,
)
from stackdoc.config.paths import get_stackdoc_home
from stackdoc.config.validation import ValidationSeverity, validate_config
from stackdoc.core.errors import StackdocError
from stackdoc.core.logging import get_logger
from stackdoc.detection.scanner import DEFAULT_MAX_FILES
from stackdoc.pipeline.parallel import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".stackdoc.yml", ".stackdoc.yaml", "stackdoc.yml", "stackdoc.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(StackdocError):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> StackdocConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.stackdoc.yml)
    3. Global config (~/.stackdoc/config.yml)
    4. Built-in defaults

    Args:
        project_root: Project root directory for finding .stackdoc.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged StackdocConfig instance.

    Raises:
        ConfigError: If specified config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path and global_path.exists():
        try:
            global_dict = load_yaml_file(global_path)
            _check_errors(global_dict, global_path)
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (OSError, yaml.YAMLError, ConfigError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = _load_layer(merged, cli_config_path, "custom", sources)
    else:
        project_path = find_project_config(project_root)
        if project_path and project_path.exists():
            merged = _load_layer(merged, project_path, "project", sources)

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_layer(
    merged: Dict[str, Any],
    path: Path,
    label: str,
    sources: List[str],
) -> Dict[str, Any]:
    try:
        layer = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    _check_errors(layer, path)

    sources.append(f"{label}:{path}")
    LOGGER.debug(f"Loaded {label} config from {path}")
    return merge_configs(merged, layer)


def _check_errors(layer: Dict[str, Any], path: Path) -> None:
    """Raise ConfigError on the first ERROR-severity validation issue."""
    errors = [
        warning for warning in validate_config(layer, source=str(path))
        if warning.severity == ValidationSeverity.ERROR
    ]
    if errors:
        raise ConfigError(f"Invalid config in {path}: {errors[0].message}")


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Searches for .stackdoc.yml, .stackdoc.yaml, stackdoc.yml, stackdoc.yaml
    in the project root directory.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.stackdoc/config.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = get_stackdoc_home() / GLOBAL_CONFIG_NAME
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> StackdocConfig:
    """Convert validated dict to typed StackdocConfig."""
    output_data = data.get("output") or {}
    modules_data = data.get("modules") or {}
    guidelines_data = data.get("guidelines") or {}
    pipeline_data = data.get("pipeline") or {}
    scan_data = data.get("scan") or {}

    return StackdocConfig(
        version=data.get("version", 1),
        output=OutputConfig(file=output_data.get("file", DEFAULT_OUTPUT_FILE)),
        modules=ModulesConfig(
            enabled=list(modules_data.get("enabled") or []),
            disabled=list(modules_data.get("disabled") or []),
        ),
        guidelines=GuidelinesConfig(paths=list(guidelines_data.get("paths") or [])),
        pipeline=PipelineConfig(
            max_workers=pipeline_data.get("max_workers", DEFAULT_MAX_WORKERS),
            timeout=pipeline_data.get("timeout", DEFAULT_TIMEOUT),
            sequential=pipeline_data.get("sequential", False),
        ),
        scan=ScanConfig(max_files=scan_data.get("max_files", DEFAULT_MAX_FILES)),
        ignore=list(data.get("ignore") or []),
    )


def get_default_config() -> StackdocConfig:
    """Get default configuration."""
    return StackdocConfig()
