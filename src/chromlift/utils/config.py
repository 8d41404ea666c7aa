"""Configuration management and validation."""

import yaml
import json
from pathlib import Path
from typing import Dict, Any, Union

from chromlift.core.types import ValidationResult
from chromlift.core.exceptions import ConfigurationError


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def create_default_configuration() -> Dict[str, Any]:
    """
    Create the default configuration.

    Returns:
        Default configuration dictionary
    """
    return {
        "provider": {
            "server": "https://rest.ensembl.org",
            "species": "human",
            "coord_system": "chromosome",
            "target_coord_system": "chromosome",
            "timeout": None,
            "check_connection": True
        },
        "assembly": {
            "source": "GRCh37",
            "target": "GRCh38"
        },
        "output": {
            "format": "json",
            "indent": 2
        },
        "logging": {
            "level": "INFO",
            "file": None
        }
    }


def load_configuration(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and validate configuration from file.

    Values missing from the file fall back to the defaults.

    Args:
        config_path: Path to configuration file (YAML or JSON)

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: Missing, unreadable or invalid configuration
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}", config_path)

    try:
        with open(config_path, 'r') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                config = yaml.safe_load(f)
            elif config_path.suffix.lower() == '.json':
                config = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config file format: {config_path.suffix}", config_path
                )

    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error parsing configuration file: {e}", config_path)

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a mapping", config_path)

    try:
        return merge_configurations(create_default_configuration(), config)
    except ConfigurationError as e:
        e.config_path = config_path
        raise


def validate_configuration_schema(config: Dict[str, Any]) -> ValidationResult:
    """
    Check configuration structure and value types.

    Args:
        config: Configuration dictionary

    Returns:
        ValidationResult with validation status
    """
    errors = []
    warnings = []

    for section in ["provider", "assembly", "output", "logging"]:
        if section not in config:
            warnings.append(f"Missing '{section}' configuration - using defaults")
        elif not isinstance(config[section], dict):
            errors.append(f"'{section}' must be a dictionary")

    provider = config.get("provider", {})
    if isinstance(provider, dict):
        timeout = provider.get("timeout")
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            errors.append(f"'provider.timeout' must be a positive number or null, got {timeout!r}")
        server = provider.get("server")
        if server is not None and not isinstance(server, str):
            errors.append("'provider.server' must be a string")

    assembly = config.get("assembly", {})
    if isinstance(assembly, dict):
        for key in ["source", "target"]:
            value = assembly.get(key)
            if value is not None and (not isinstance(value, str) or not value):
                errors.append(f"'assembly.{key}' must be a non-empty string")
        if assembly.get("source") and assembly.get("source") == assembly.get("target"):
            warnings.append("Source and target assemblies are identical")

    logging_config = config.get("logging", {})
    if isinstance(logging_config, dict):
        level = logging_config.get("level")
        if level is not None and str(level).upper() not in LOG_LEVELS:
            errors.append(f"'logging.level' must be one of {LOG_LEVELS}, got {level!r}")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        details={"validation": "basic_checks_completed"}
    )


def merge_configurations(
    base_config: Dict[str, Any],
    override_config: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Merge configuration dictionaries with validation.

    Args:
        base_config: Base configuration
        override_config: Override parameters

    Returns:
        Merged configuration
    """
    def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    merged = merge_dicts(base_config, override_config)

    validation_result = validate_configuration_schema(merged)
    if not validation_result.is_valid:
        raise ConfigurationError(
            f"Configuration validation failed: {validation_result.errors}"
        )

    return merged


def save_configuration(config: Dict[str, Any], output_path: Union[str, Path]) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration dictionary
        output_path: Output file path

    Raises:
        ConfigurationError: Error saving configuration
    """
    output_path = Path(output_path)

    if output_path.suffix.lower() not in ['.yaml', '.yml', '.json']:
        raise ConfigurationError(f"Unsupported output format: {output_path.suffix}", output_path)

    try:
        with open(output_path, 'w') as f:
            if output_path.suffix.lower() in ['.yaml', '.yml']:
                yaml.dump(config, f, default_flow_style=False, indent=2)
            else:
                json.dump(config, f, indent=2)

    except (yaml.YAMLError, TypeError, IOError) as e:
        raise ConfigurationError(f"Error saving configuration: {e}", output_path)
