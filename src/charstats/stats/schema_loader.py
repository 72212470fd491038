"""
Schema loader module for charstats.

Handles loading attribute schemas and modifier lists from YAML files.

Schema files hold a top-level ``attributes`` list::

    attributes:
      - id: health
        min: 0
        max: 100
        default: 100
        integral: true

Modifier files hold a top-level ``modifiers`` list::

    modifiers:
      - target: speed
        kind: multiply
        value: 2.0
        order: 0
        source: boots_of_haste
"""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from .errors import NullModifierError, SchemaLoadError, SchemaValidationError
from .modifiers import Modifier, modifier_from_data
from .schema import AttributeDefinition, AttributeSchema

logger = structlog.get_logger(__name__)


def load_yaml_list(file_path: Path, key: str) -> list[dict[str, Any]]:
    """
    Load a YAML file and return the list stored under a top-level key.

    Args:
        file_path: Path to the YAML file
        key: Top-level key holding the list (e.g., "attributes")

    Returns:
        List of entry dictionaries

    Raises:
        SchemaLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"YAML parsing error in {file_path}: {e}")
    except FileNotFoundError:
        raise SchemaLoadError(f"File not found: {file_path}")
    except OSError as e:
        raise SchemaLoadError(f"Error loading {file_path}: {e}")

    if not data:
        raise SchemaLoadError(f"Empty YAML file: {file_path}")

    if not isinstance(data, dict) or key not in data:
        raise SchemaLoadError(f"Missing '{key}' key in {file_path}")

    entries = data[key]
    if not isinstance(entries, list):
        raise SchemaLoadError(f"'{key}' must be a list in {file_path}")

    for entry in entries:
        if not isinstance(entry, dict):
            raise SchemaLoadError(f"Every entry under '{key}' must be a mapping in {file_path}")

    return entries


def create_definition_from_data(data: dict[str, Any], file_path: Path) -> AttributeDefinition:
    """
    Create an AttributeDefinition from dictionary data.

    Args:
        data: Dictionary containing attribute data
        file_path: Path to the source file (for error messages)

    Returns:
        AttributeDefinition instance

    Raises:
        SchemaValidationError: If Pydantic validation fails
    """
    try:
        return AttributeDefinition.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError(
            f"Attribute '{data.get('id', 'unknown')}' in {file_path} is invalid: {e}"
        )


def load_definitions(file_path: Path) -> list[AttributeDefinition]:
    """
    Load attribute definitions from one YAML file.

    Args:
        file_path: Path to the YAML file

    Returns:
        Definitions in file order

    Raises:
        SchemaLoadError: If the file cannot be loaded
        SchemaValidationError: If an entry is invalid
    """
    return [
        create_definition_from_data(entry, file_path)
        for entry in load_yaml_list(file_path, "attributes")
    ]


def load_schema(file_path: Path) -> AttributeSchema:
    """
    Load an attribute schema from a YAML file.

    Args:
        file_path: Path to the schema file

    Returns:
        Validated AttributeSchema

    Raises:
        SchemaLoadError: If the file cannot be loaded
        SchemaValidationError: If an entry is invalid or an id is duplicated
        InvalidRangeError: If an attribute has min > max
    """
    schema = AttributeSchema(load_definitions(file_path))
    logger.info("attribute_schema_loaded", path=str(file_path), attributes=len(schema))
    return schema


def load_schema_from_directory(directory: Path) -> AttributeSchema:
    """
    Load and merge every schema YAML file in a directory.

    Files are read in name order so the resulting attribute order is stable.

    Args:
        directory: Path to the directory containing YAML files

    Returns:
        Validated AttributeSchema spanning all files

    Raises:
        SchemaLoadError: If the directory is missing, empty, or a file can't be loaded
        SchemaValidationError: If an entry is invalid or an id is duplicated
        InvalidRangeError: If an attribute has min > max
    """
    if not directory.exists():
        raise SchemaLoadError(f"Directory does not exist: {directory}")

    if not directory.is_dir():
        raise SchemaLoadError(f"Not a directory: {directory}")

    yaml_files = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))

    if not yaml_files:
        raise SchemaLoadError(f"No YAML files found in {directory}")

    definitions: list[AttributeDefinition] = []
    seen_ids: dict[str, Path] = {}

    for yaml_file in yaml_files:
        for definition in load_definitions(yaml_file):
            if definition.id in seen_ids:
                raise SchemaValidationError(
                    f"Duplicate attribute ID '{definition.id}' found in {yaml_file} "
                    f"(first defined in {seen_ids[definition.id]})"
                )
            seen_ids[definition.id] = yaml_file
            definitions.append(definition)

    schema = AttributeSchema(definitions)
    logger.info(
        "attribute_schema_loaded",
        path=str(directory),
        files=len(yaml_files),
        attributes=len(schema),
    )
    return schema


def load_modifiers(file_path: Path) -> list[Modifier]:
    """
    Load modifiers from a YAML file.

    Target ids are not checked here; the engine rejects modifiers for unknown
    attributes when they are added.

    Args:
        file_path: Path to the modifiers file

    Returns:
        Modifier instances in file order

    Raises:
        SchemaLoadError: If the file cannot be loaded
        SchemaValidationError: If an entry is not a valid modifier
    """
    modifiers: list[Modifier] = []
    for index, entry in enumerate(load_yaml_list(file_path, "modifiers")):
        try:
            modifiers.append(modifier_from_data(entry))
        except NullModifierError as e:
            raise SchemaValidationError(f"Modifier #{index} in {file_path} is invalid: {e}")

    logger.info("modifiers_loaded", path=str(file_path), modifiers=len(modifiers))
    return modifiers
