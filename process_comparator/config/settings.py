"""
Configuration loader for the comparator.

Reads runtime settings from the environment and comparator configuration /
batch descriptions from YAML (or JSON) files, validating configuration
against the bundled JSON schema.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import jsonschema
import yaml

from ..domain.item import ComparisonUnit
from ..exceptions import ConfigurationError
from .configuration import ComparatorConfiguration

logger = logging.getLogger(__name__)

DEFAULT_PARALLEL_THRESHOLD = 10
DEFAULT_MAX_WORKERS = 100

PARALLEL_THRESHOLD_ENV = "PC_PARALLEL_THRESHOLD"
MAX_WORKERS_ENV = "PC_MAX_WORKERS"

SCHEMA_PATH = Path(__file__).resolve().parent / "configuration.schema.json"


def _read_positive_int(env_name: str, default: int) -> int:
    """Return a positive integer from the environment, or the default when unset."""
    raw = os.getenv(env_name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{env_name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigurationError(f"{env_name} must be >= 1, got {value}")
    return value


@dataclass(frozen=True)
class ComparatorSettings:
    """
    Runtime settings passed explicitly to the orchestrator.

    Attributes:
        parallel_threshold: Minimum number of flat units in a batch that
            switches execution to the worker pool
        max_workers: Upper bound on worker threads per batch
    """

    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self):
        if self.parallel_threshold < 1:
            raise ConfigurationError(
                f"parallel_threshold must be >= 1, got {self.parallel_threshold}"
            )
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_env(cls) -> "ComparatorSettings":
        """
        Build settings from PC_PARALLEL_THRESHOLD / PC_MAX_WORKERS.

        Raises:
            ConfigurationError: If a variable is set to a non-positive or non-integer value
        """
        settings = cls(
            parallel_threshold=_read_positive_int(
                PARALLEL_THRESHOLD_ENV, DEFAULT_PARALLEL_THRESHOLD
            ),
            max_workers=_read_positive_int(MAX_WORKERS_ENV, DEFAULT_MAX_WORKERS),
        )
        logger.debug(
            f"Loaded comparator settings: parallel_threshold={settings.parallel_threshold}, "
            f"max_workers={settings.max_workers}"
        )
        return settings


def _read_document(path: Union[str, Path]) -> Any:
    """
    Parse a YAML or JSON file (JSON is valid YAML, so one parser covers both).

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error(f"Configuration file not found: {path}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in {path}: {e}")
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_schema(schema_path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """Load the configuration JSON schema (bundled schema by default)."""
    path = Path(schema_path) if schema_path is not None else SCHEMA_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"Configuration schema file not found: {path}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in configuration schema: {e}")
        raise ValueError(f"Invalid JSON in {path}: {e}") from e


def validate_configuration(
    data: Dict[str, Any], schema: Optional[Dict[str, Any]] = None
) -> None:
    """
    Validate a configuration dictionary against the schema.

    Raises:
        ValueError: If the configuration or the schema is invalid
    """
    schema = schema if schema is not None else load_schema()
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        logger.error(f"Comparator configuration failed schema validation: {e.message}")
        raise ValueError(f"Comparator configuration validation failed: {e.message}") from e
    except jsonschema.SchemaError as e:
        logger.error(f"Configuration schema is invalid: {e.message}")
        raise ValueError(f"Configuration schema is invalid: {e.message}") from e


def load_configuration(
    config_path: Union[str, Path], schema_path: Union[str, Path, None] = None
) -> ComparatorConfiguration:
    """
    Load comparator configuration from YAML and validate it against the schema.

    Args:
        config_path: Path to the configuration YAML file
        schema_path: Optional path to an alternative JSON schema

    Returns:
        ComparatorConfiguration (empty when the file is empty)

    Raises:
        FileNotFoundError: If a file is missing
        ValueError: If parsing or schema validation fails
    """
    data = _read_document(config_path)
    if not data:
        logger.warning(f"Empty comparator configuration: {config_path}")
        return ComparatorConfiguration()

    validate_configuration(data, load_schema(schema_path))
    configuration = ComparatorConfiguration.from_dict(data)
    logger.info(
        f"Loaded comparator configuration from {config_path} "
        f"({len(configuration.sets)} test case set(s))"
    )
    return configuration


def load_batch(
    batch_path: Union[str, Path], schema_path: Union[str, Path, None] = None
) -> List[ComparisonUnit]:
    """
    Load a batch of comparison units from a YAML/JSON file.

    Expected layout::

        configuration: {...}      # optional, shared by every unit
        units:
          - er: {...}
            ar: [{...}]
            configuration: {...}  # optional, replaces the shared one

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the batch is malformed
    """
    data = _read_document(batch_path)
    if not isinstance(data, dict) or not isinstance(data.get("units"), list):
        raise ValueError(f"Batch file {batch_path} must contain a 'units' list")

    schema = load_schema(schema_path)
    shared = data.get("configuration") or {}
    if shared:
        validate_configuration(shared, schema)

    units: List[ComparisonUnit] = []
    for unit_idx, unit_data in enumerate(data["units"]):
        if not isinstance(unit_data, dict):
            raise ValueError(f"Unit [{unit_idx}] must be a dictionary")
        unit_config = unit_data.get("configuration")
        if unit_config:
            validate_configuration(unit_config, schema)
        else:
            unit_data = {**unit_data, "configuration": shared}
        units.append(ComparisonUnit.from_dict(unit_data))

    logger.info(f"Loaded {len(units)} comparison unit(s) from {batch_path}")
    return units
