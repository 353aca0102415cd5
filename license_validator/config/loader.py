"""Policy file discovery and loading.

A project keeps its allow-lists next to its ``pyproject.toml`` in
``.license-validator.yaml``, ``.license-validator.yml`` or
``license-validator.json``. All three are read with the YAML loader, which
also accepts JSON documents.
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from license_validator.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from license_validator.exceptions import ConfigurationError
from license_validator.models.config import ValidatorConfig


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate the policy file of a project.

    Only ``start_dir`` itself is searched, not its parents; the first
    existing name in DEFAULT_CONFIG_NAMES wins.

    Args:
        start_dir: Project directory. Defaults to the working directory.

    Returns:
        Path to the policy file, or None if the project has none.
    """
    project_dir = start_dir or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> ValidatorConfig:
    """Read allow-lists and flags from a YAML or JSON policy file.

    A file that is empty or holds only comments yields the defaults, so a
    placeholder policy file does not break a run.

    Args:
        path: Policy file to read.

    Returns:
        ValidatorConfig built from the file.

    Raises:
        ConfigurationError: If the file is unreadable, is not YAML/JSON,
            has a non-mapping root, or has unknown or mistyped keys.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e

    try:
        document = yaml.safe_load(text) if text.strip() else None
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid configuration syntax in '{path}': {e}"
        ) from e

    if document is None:
        return get_default_config()

    if not isinstance(document, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping of options, got {type(document).__name__}"
        )

    try:
        return ValidatorConfig.model_validate(document)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_describe_errors(e)}"
        ) from e


def _describe_errors(error: ValidationError) -> str:
    """Render validation errors as ``option: problem`` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def load_config(
    config_path: str | None = None,
    start_dir: Path | None = None,
) -> ValidatorConfig:
    """Resolve the policy for a run before command-line values are layered on.

    Args:
        config_path: Policy file named with ``--config``; always used when given.
        start_dir: Project directory searched when no file is named.

    Returns:
        ValidatorConfig from the chosen file, or the defaults if none exists.

    Raises:
        ConfigurationError: If the chosen policy file is invalid.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    found = find_config_file(start_dir)
    return load_config_file(found) if found is not None else get_default_config()
