#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/config.py
"""Session configuration: discovery, loading and validation.

Configuration is read, in increasing priority, from:

1. built-in defaults (:class:`SessionConfig`)
2. a configuration file: ``.cleanstate.toml``, ``.cleanstate.yaml``,
   ``.cleanstate.yml``, ``.cleanstate.json``, or the ``[tool.cleanstate]``
   table of ``pyproject.toml``, found by walking up from the working directory
3. ``CLEANSTATE_<FIELD>`` environment variables
4. explicit keyword overrides

Examples
--------
    >>> config = load_config()
    >>> config.debounce_seconds
    1.0
    >>> config.create_updated(storage_key="draft").storage_key
    'draft'

"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from cleanstate.constants import (
    CONFIG_FILENAMES,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_STORAGE_DIRNAME,
    DEFAULT_STORAGE_KEY,
    ENV_PREFIX,
)
from cleanstate.exceptions import ValidationError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class SessionConfig:
    """Settings for an editing session.

    Parameters
    ----------
    storage_key : str, default = "lexical-editor-state"
        Key of the persisted slot
    debounce_seconds : float, default = 1.0
        Quiet period before a change is saved
    storage_dir : str, default = ".cleanstate"
        Directory used by the file store
    strict_deserialization : bool, default = True
        Treat unknown node types in stored JSON as corruption
    backup_corrupt : bool, default = True
        Preserve unparseable stored JSON under ``<key>.corrupt``
    log_level : str, default = "WARNING"
        Logging level name

    """

    storage_key: str = field(default=DEFAULT_STORAGE_KEY, metadata={"help": "Key of the persisted slot"})
    debounce_seconds: float = field(
        default=DEFAULT_DEBOUNCE_SECONDS, metadata={"help": "Quiet period in seconds before saving"}
    )
    storage_dir: str = field(default=DEFAULT_STORAGE_DIRNAME, metadata={"help": "Directory of the file store"})
    strict_deserialization: bool = field(
        default=True, metadata={"help": "Reject stored JSON containing unknown node types"}
    )
    backup_corrupt: bool = field(default=True, metadata={"help": "Keep a copy of corrupt stored JSON"})
    log_level: str = field(default="WARNING", metadata={"help": "Logging level"})

    def __post_init__(self) -> None:
        if not isinstance(self.storage_key, str) or not self.storage_key:
            raise ValidationError(
                "storage_key must be a non-empty string",
                parameter_name="storage_key",
                parameter_value=self.storage_key,
            )
        if isinstance(self.debounce_seconds, bool) or not isinstance(self.debounce_seconds, (int, float)):
            raise ValidationError(
                "debounce_seconds must be a number",
                parameter_name="debounce_seconds",
                parameter_value=self.debounce_seconds,
            )
        if self.debounce_seconds < 0:
            raise ValidationError(
                "debounce_seconds must not be negative",
                parameter_name="debounce_seconds",
                parameter_value=self.debounce_seconds,
            )
        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise ValidationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}",
                parameter_name="log_level",
                parameter_value=self.log_level,
            )

    def create_updated(self, **kwargs: Any) -> SessionConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionConfig:
        """Build a config from a mapping, rejecting unknown keys.

        Keys may use dashes or underscores (``debounce-seconds``).
        """
        known = {f.name for f in fields(cls)}
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise ValidationError(f"Unknown configuration key: {key}", parameter_name=str(key))
            normalized[name] = value
        return cls(**normalized)


# ============================================================================
# File loading
# ============================================================================


def _load_toml_config(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in config file {config_path}: {e}", original_error=e) from e


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in config file {config_path}: {e}", original_error=e) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Config file {config_path} must contain a mapping, got {type(data).__name__}")
    return data


def _load_json_config(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in config file {config_path}: {e}", original_error=e) from e
    if not isinstance(data, dict):
        raise ValidationError(f"Config file {config_path} must contain an object, got {type(data).__name__}")
    return data


def _load_pyproject_section(pyproject_path: Path) -> dict[str, Any]:
    """Return the ``[tool.cleanstate]`` table, or an empty dict."""
    data = _load_toml_config(pyproject_path)
    section = data.get("tool", {}).get("cleanstate", {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"[tool.cleanstate] section in {pyproject_path} must be a table, got {type(section).__name__}"
        )
    return section


def load_config_file(config_path: Path | str) -> dict[str, Any]:
    """Load a configuration file by extension.

    Parameters
    ----------
    config_path : Path or str
        Path to a ``.toml``, ``.yaml``/``.yml`` or ``.json`` file, or a
        ``pyproject.toml``

    Returns
    -------
    dict
        Raw configuration mapping

    Raises
    ------
    ValidationError
        If the file is missing, has an unsupported extension or cannot be parsed

    """
    path = Path(config_path)
    if not path.is_file():
        raise ValidationError(f"Config file not found: {path}", parameter_name="config", parameter_value=str(path))

    if path.name == "pyproject.toml":
        return _load_pyproject_section(path)

    suffix = path.suffix.lower()
    if suffix == ".toml":
        return _load_toml_config(path)
    if suffix in (".yaml", ".yml"):
        return _load_yaml_config(path)
    if suffix == ".json":
        return _load_json_config(path)

    raise ValidationError(
        f"Unsupported config file format: {suffix or path.name}",
        parameter_name="config",
        parameter_value=str(path),
    )


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by walking up from ``start_dir``.

    Dedicated config files are preferred over ``pyproject.toml`` in the same
    directory; a ``pyproject.toml`` only counts if it has a
    ``[tool.cleanstate]`` table.

    Returns
    -------
    Path or None
        First configuration file found, or None

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                return candidate

        pyproject = current / "pyproject.toml"
        if pyproject.is_file():
            try:
                if _load_pyproject_section(pyproject):
                    return pyproject
            except ValidationError:
                logger.debug(f"Skipping unreadable {pyproject}")

        if current.parent == current:
            return None
        current = current.parent


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect ``CLEANSTATE_<FIELD>`` overrides, converted to field types.

    Raises
    ------
    ValidationError
        If a value cannot be converted
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    for f in fields(SessionConfig):
        raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None:
            continue
        if f.type in ("bool", bool):
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                overrides[f.name] = True
            elif lowered in _FALSE_VALUES:
                overrides[f.name] = False
            else:
                raise ValidationError(
                    f"Invalid boolean for {ENV_PREFIX}{f.name.upper()}: {raw}",
                    parameter_name=f.name,
                    parameter_value=raw,
                )
        elif f.type in ("float", float):
            try:
                overrides[f.name] = float(raw)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid number for {ENV_PREFIX}{f.name.upper()}: {raw}",
                    parameter_name=f.name,
                    parameter_value=raw,
                    original_error=e,
                ) from e
        else:
            overrides[f.name] = raw

    return overrides


def load_config(
    config_path: Optional[Path | str] = None,
    start_dir: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> SessionConfig:
    """Resolve the session configuration.

    Parameters
    ----------
    config_path : Path, str or None, default = None
        Explicit config file; discovered from ``start_dir`` when None
    start_dir : Path or None, default = None
        Directory where discovery starts (working directory when None)
    environ : mapping or None, default = None
        Environment to read overrides from (``os.environ`` when None)
    **overrides
        Field values that take precedence over everything else; None values
        are ignored

    Returns
    -------
    SessionConfig
        Validated configuration

    """
    data: dict[str, Any] = {}

    path = Path(config_path) if config_path is not None else find_config_in_parents(start_dir)
    if path is not None:
        data.update(load_config_file(path))
        logger.debug(f"Loaded configuration from {path}")

    data.update(env_overrides(environ))
    data.update({k: v for k, v in overrides.items() if v is not None})
    return SessionConfig.from_dict(data)


__all__ = [
    "SessionConfig",
    "load_config",
    "load_config_file",
    "find_config_in_parents",
    "env_overrides",
]
