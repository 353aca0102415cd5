"""Default configuration values for license-validator."""

from __future__ import annotations

from license_validator.models.config import ValidatorConfig

# Configuration file names searched for, in order. JSON is read by the YAML loader.
DEFAULT_CONFIG_NAMES = [
    ".license-validator.yaml",
    ".license-validator.yml",
    "license-validator.json",
]


def get_default_config() -> ValidatorConfig:
    """Get the default configuration.

    Returns:
        ValidatorConfig with empty allow-lists and every flag off.
    """
    return ValidatorConfig()
