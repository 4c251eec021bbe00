"""Configuration validation for stackdoc.

Validates configuration keys and value types, and warns on unknown keys
and unknown module ids. Validation never raises; it returns warnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import yaml

from stackdoc.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None
    severity: ValidationSeverity = ValidationSeverity.WARNING


# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "output",
    "modules",
    "guidelines",
    "pipeline",
    "scan",
    "ignore",
}

VALID_OUTPUT_KEYS: Set[str] = {"file"}

VALID_MODULES_KEYS: Set[str] = {"enabled", "disabled"}

VALID_GUIDELINES_KEYS: Set[str] = {"paths"}

VALID_PIPELINE_KEYS: Set[str] = {"max_workers", "timeout", "sequential"}

VALID_SCAN_KEYS: Set[str] = {"max_files"}

SECTION_KEYS: Dict[str, Set[str]] = {
    "output": VALID_OUTPUT_KEYS,
    "modules": VALID_MODULES_KEYS,
    "guidelines": VALID_GUIDELINES_KEYS,
    "pipeline": VALID_PIPELINE_KEYS,
    "scan": VALID_SCAN_KEYS,
}


def _builtin_module_ids() -> Set[str]:
    # Imported lazily so config loading does not pull in every module class.
    from stackdoc.modules.registry import BUILTIN_MODULES

    return {module_class.id for module_class in BUILTIN_MODULES}


def validate_config(
    data: Dict[str, Any],
    source: str,
    known_modules: Optional[Iterable[str]] = None,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.
        known_modules: Module ids accepted under ``modules.*``. Defaults to
            the built-in modules.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return warnings  # type: ignore[unreachable]

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            _unknown_key(warnings, key, VALID_TOP_LEVEL_KEYS, source, "top-level key")

    version = data.get("version")
    if version is not None and (not isinstance(version, int) or isinstance(version, bool)):
        _type_error(warnings, "version", "an integer", version, source)

    for section, valid_keys in SECTION_KEYS.items():
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, dict):
            _type_error(warnings, section, "a mapping", value, source)
            continue
        for key in value.keys():
            if key not in valid_keys:
                _unknown_key(warnings, key, valid_keys, source, f"key in '{section}'", prefix=f"{section}.")

    output = data.get("output")
    if isinstance(output, dict) and "file" in output:
        if not isinstance(output["file"], str) or not output["file"].strip():
            _type_error(warnings, "output.file", "a non-empty string", output["file"], source)

    modules = data.get("modules")
    if isinstance(modules, dict):
        module_ids = set(known_modules) if known_modules is not None else _builtin_module_ids()
        for list_key in ("enabled", "disabled"):
            entries = modules.get(list_key)
            if entries is None:
                continue
            if not _is_string_list(entries):
                _type_error(warnings, f"modules.{list_key}", "a list of strings", entries, source)
                continue
            for module_id in entries:
                if module_id not in module_ids:
                    _unknown_key(
                        warnings, module_id, module_ids, source,
                        f"module id in 'modules.{list_key}'", prefix=f"modules.{list_key}.",
                    )

    guidelines = data.get("guidelines")
    if isinstance(guidelines, dict) and guidelines.get("paths") is not None:
        if not _is_string_list(guidelines["paths"]):
            _type_error(warnings, "guidelines.paths", "a list of strings", guidelines["paths"], source)

    pipeline = data.get("pipeline")
    if isinstance(pipeline, dict):
        max_workers = pipeline.get("max_workers")
        if max_workers is not None and not _is_positive_int(max_workers):
            _type_error(warnings, "pipeline.max_workers", "a positive integer", max_workers, source)
        timeout = pipeline.get("timeout")
        if timeout is not None and not _is_positive_number(timeout):
            _type_error(warnings, "pipeline.timeout", "a positive number", timeout, source)
        sequential = pipeline.get("sequential")
        if sequential is not None and not isinstance(sequential, bool):
            _type_error(warnings, "pipeline.sequential", "a boolean", sequential, source)

    scan = data.get("scan")
    if isinstance(scan, dict):
        max_files = scan.get("max_files")
        if max_files is not None and not _is_positive_int(max_files):
            _type_error(warnings, "scan.max_files", "a positive integer", max_files, source)

    ignore = data.get("ignore")
    if ignore is not None and not _is_string_list(ignore):
        _type_error(warnings, "ignore", "a list of strings", ignore, source)

    return warnings


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _unknown_key(
    warnings: List[ConfigValidationWarning],
    key: str,
    valid_keys: Set[str],
    source: str,
    what: str,
    prefix: str = "",
) -> None:
    warning = ConfigValidationWarning(
        message=f"Unknown {what} '{key}'",
        source=source,
        key=f"{prefix}{key}",
        suggestion=_suggest_key(str(key), valid_keys),
    )
    warnings.append(warning)
    _log_warning(warning)


def _type_error(
    warnings: List[ConfigValidationWarning],
    key: str,
    expected: str,
    value: Any,
    source: str,
) -> None:
    warnings.append(ConfigValidationWarning(
        message=f"'{key}' must be {expected}, got {type(value).__name__}",
        source=source,
        key=key,
        severity=ValidationSeverity.ERROR,
    ))


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)


def validate_config_file(config_path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a configuration file from disk.

    Checks file existence, YAML syntax, and configuration semantics.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Tuple of (is_valid, issues) where is_valid is False if any errors exist.
    """
    issues: List[ConfigValidationIssue] = []
    source = str(config_path)

    if not config_path.exists():
        issues.append(ConfigValidationIssue(
            message=f"Configuration file not found: {config_path}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return False, issues

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        issues.append(ConfigValidationIssue(
            message=f"Invalid YAML syntax: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return False, issues

    if data is None:
        issues.append(ConfigValidationIssue(
            message="Configuration file is empty",
            source=source,
            severity=ValidationSeverity.WARNING,
        ))
        return True, issues

    for warning in validate_config(data, source):
        issues.append(ConfigValidationIssue(
            message=warning.message,
            source=warning.source,
            severity=warning.severity,
            key=warning.key,
            suggestion=warning.suggestion,
        ))

    has_errors = any(issue.severity == ValidationSeverity.ERROR for issue in issues)
    return not has_errors, issues
