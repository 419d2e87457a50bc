"""
Configuration field definitions and validation.

Zotodo settings (and the action plugin's config) are declared as a list of
FieldDefinition objects:
- FieldDefinition: one setting, its type, default and constraints
- ValidationResult: result of validating a config dict
- FieldType: supported value types
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class FieldType(Enum):
    """Supported setting types."""

    TEXT = "text"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LIST = "list"  # comma-separated string or list of strings
    JSON = "json"  # structured value passed through as-is


TEXT_TYPES = (FieldType.TEXT, FieldType.PASSWORD, FieldType.TEXTAREA)

TRUE_STRINGS = ("true", "1", "yes", "on")
FALSE_STRINGS = ("false", "0", "no", "off")


@dataclass
class FieldDefinition:
    """
    Declares one configuration field.

    Attributes:
        name: Key in the config dict
        label: Human-readable label
        field_type: Value type
        required: Whether the field must have a non-empty value
        default: Value used when the field is missing
        help_text: Longer description
        depends_on: Only validated when all {"field": value} conditions hold,
            e.g. note_format only matters when include_note is true
        min_value/max_value: Bounds for integer fields
        max_length: Limit for text fields
        pattern: Regex text fields must match
        env_var: Environment variable consulted when the field is missing
    """

    name: str
    label: str
    field_type: FieldType
    required: bool = False
    default: Any = None
    help_text: str = ""
    depends_on: dict = field(default_factory=dict)
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    env_var: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "label": self.label,
            "field_type": self.field_type.value,
            "required": self.required,
            "help_text": self.help_text,
        }
        if self.default is not None:
            result["default"] = self.default
        if self.depends_on:
            result["depends_on"] = self.depends_on
        for attr in ["min_value", "max_value", "max_length", "pattern", "env_var"]:
            val = getattr(self, attr)
            if val is not None:
                result[attr] = val
        return result


@dataclass
class ValidationError:
    """Validation error for a specific field."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def error_message(self) -> str:
        """Combined error message for logging/display."""
        return "; ".join(f"{e.field}: {e.message}" for e in self.errors)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
        }


def validate_field_value(
    field_def: FieldDefinition, value: Any
) -> list[ValidationError]:
    """
    Validate a single field value against its definition.

    Returns a list of ValidationErrors (empty if valid).
    """
    errors = []

    if field_def.required and (value is None or value == "" or value == []):
        errors.append(ValidationError(field_def.name, "This field is required"))
        return errors

    if value is None or value == "":
        return errors

    field_type = field_def.field_type

    if field_type == FieldType.INTEGER:
        if isinstance(value, bool):
            errors.append(ValidationError(field_def.name, "Must be an integer"))
            return errors
        try:
            int_val = int(value)
        except (ValueError, TypeError):
            errors.append(ValidationError(field_def.name, "Must be an integer"))
            return errors
        if field_def.min_value is not None and int_val < field_def.min_value:
            errors.append(
                ValidationError(
                    field_def.name, f"Minimum value is {field_def.min_value}"
                )
            )
        if field_def.max_value is not None and int_val > field_def.max_value:
            errors.append(
                ValidationError(
                    field_def.name, f"Maximum value is {field_def.max_value}"
                )
            )

    elif field_type in TEXT_TYPES:
        if not isinstance(value, str):
            errors.append(ValidationError(field_def.name, "Must be text"))
            return errors
        if field_def.max_length is not None and len(value) > field_def.max_length:
            errors.append(
                ValidationError(
                    field_def.name, f"Maximum length is {field_def.max_length}"
                )
            )
        if field_def.pattern is not None and not re.match(field_def.pattern, value):
            errors.append(
                ValidationError(
                    field_def.name, f"Must match pattern: {field_def.pattern}"
                )
            )

    elif field_type == FieldType.LIST:
        if isinstance(value, (list, tuple)):
            if not all(isinstance(v, str) for v in value):
                errors.append(ValidationError(field_def.name, "Must be a list of text"))
        elif not isinstance(value, str):
            errors.append(
                ValidationError(
                    field_def.name, "Must be a comma-separated string or a list"
                )
            )

    elif field_type == FieldType.BOOLEAN:
        if not isinstance(value, bool):
            if str(value).lower() not in TRUE_STRINGS + FALSE_STRINGS:
                errors.append(ValidationError(field_def.name, "Must be a boolean"))

    return errors


def coerce_field_value(field_def: FieldDefinition, value: Any) -> Any:
    """
    Convert an already validated value to its Python type.

    Missing values fall back to the field default. Lists come back as tuples
    with blank entries dropped.
    """
    field_type = field_def.field_type

    if value is None or (
        value == "" and field_type in (FieldType.INTEGER, FieldType.BOOLEAN)
    ):
        value = field_def.default

    if field_type == FieldType.INTEGER:
        return None if value in (None, "") else int(value)
    if field_type == FieldType.BOOLEAN:
        if value is None or isinstance(value, bool):
            return bool(value)
        return str(value).lower() in TRUE_STRINGS
    if field_type == FieldType.LIST:
        if value is None:
            return ()
        parts = value.split(",") if isinstance(value, str) else value
        return tuple(p.strip() for p in parts if p and p.strip())
    return "" if value is None else value


def validate_config(
    field_definitions: list[FieldDefinition], config: dict
) -> ValidationResult:
    """
    Validate a config dict against a list of field definitions.

    Fields whose depends_on conditions are not met are skipped.
    """
    all_errors = []

    for field_def in field_definitions:
        if not is_field_active(field_definitions, config, field_def):
            continue

        errors = validate_field_value(field_def, config.get(field_def.name))
        all_errors.extend(errors)

    return ValidationResult(valid=len(all_errors) == 0, errors=all_errors)


def is_field_active(
    field_definitions: list[FieldDefinition], config: dict, field_def: FieldDefinition
) -> bool:
    """True if all of the field's depends_on conditions hold for config."""
    return all(
        _current_value(field_definitions, config, dep_field) == dep_value
        for dep_field, dep_value in field_def.depends_on.items()
    )


def _current_value(
    field_definitions: list[FieldDefinition], config: dict, name: str
) -> Any:
    # Booleans arrive as "true"/"false" from YAML strings and env vars
    dep_def = next((f for f in field_definitions if f.name == name), None)
    value = config.get(name)
    if dep_def is not None and dep_def.field_type == FieldType.BOOLEAN:
        return coerce_field_value(dep_def, value)
    return value
