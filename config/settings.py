"""
Zotodo settings.

Settings are declared as FieldDefinitions (the same schema the action plugin
exposes) and loaded from, in increasing precedence:

1. config/defaults.yaml
2. an optional user YAML file
3. environment variables named by a field's env_var (only for missing values)
4. explicit overrides passed by the caller

The merged dict is validated and frozen into a ZotodoSettings.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from plugin_base.common import (
    FieldDefinition,
    FieldType,
    ValidationError,
    coerce_field_value,
    is_field_active,
    validate_config,
)
from templating import find_tokens
from zotodo.errors import ConfigurationInvalid

logger = logging.getLogger(__name__)

DEFAULTS_FILE = Path(__file__).parent / "defaults.yaml"

# Todoist priorities run 1..4 with 4 the most urgent; users pick p1..p4
MAX_PRIORITY = 4

TOKEN_NAMES = frozenset(
    {
        "title",
        "abstract",
        "url",
        "doi",
        "pdf_path",
        "pdf_id",
        "et_al",
        "authors",
        "library_path",
        "item_id",
        "select_uri",
        "open_uri",
        "citekey",
    }
)

SETTINGS_FIELDS: list[FieldDefinition] = [
    FieldDefinition(
        name="todoist_token",
        label="Todoist API Token",
        field_type=FieldType.PASSWORD,
        required=True,
        help_text="From Todoist Settings > Integrations > Developer > API token",
        env_var="ZOTODO_TODOIST_TOKEN",
    ),
    FieldDefinition(
        name="automatic_add",
        label="Create tasks for new items",
        field_type=FieldType.BOOLEAN,
        default=False,
    ),
    FieldDefinition(
        name="project",
        label="Project",
        field_type=FieldType.TEXT,
        required=True,
        default="Reading Queue",
        help_text="Created in Todoist if it does not exist",
    ),
    FieldDefinition(
        name="section",
        label="Section",
        field_type=FieldType.TEXT,
        default="",
        help_text="Optional section inside the project",
    ),
    FieldDefinition(
        name="labels",
        label="Labels (comma-separated)",
        field_type=FieldType.LIST,
        default="",
    ),
    FieldDefinition(
        name="priority",
        label="Priority (1=urgent, 4=low)",
        field_type=FieldType.INTEGER,
        default=1,
        min_value=1,
        max_value=MAX_PRIORITY,
    ),
    FieldDefinition(
        name="set_due",
        label="Set due date",
        field_type=FieldType.BOOLEAN,
        default=True,
    ),
    FieldDefinition(
        name="due_string",
        label="Due date (natural language)",
        field_type=FieldType.TEXT,
        default="in 2 weeks",
        help_text="e.g., 'tomorrow', 'in 2 weeks', 'next monday'",
        depends_on={"set_due": True},
    ),
    FieldDefinition(
        name="include_note",
        label="Add note as comment",
        field_type=FieldType.BOOLEAN,
        default=False,
    ),
    FieldDefinition(
        name="note_format",
        label="Note format",
        field_type=FieldType.TEXTAREA,
        default="",
        depends_on={"include_note": True},
    ),
    FieldDefinition(
        name="task_format",
        label="Task format",
        field_type=FieldType.TEXTAREA,
        required=True,
        default="${title}",
    ),
    FieldDefinition(
        name="ignore_collections",
        label="Ignored collections (comma-separated)",
        field_type=FieldType.LIST,
        default="",
        help_text="Items in these collections never get a task",
    ),
]


@dataclass(frozen=True)
class ZotodoSettings:
    """Validated settings for one session."""

    todoist_token: str
    project: str
    task_format: str
    automatic_add: bool = False
    section: str = ""
    labels: tuple[str, ...] = ()
    priority: int = 1
    set_due: bool = True
    due_string: str = "in 2 weeks"
    include_note: bool = False
    note_format: str = ""
    ignore_collections: tuple[str, ...] = ()

    @property
    def remote_priority(self) -> int:
        """Todoist priority for the configured user priority."""
        return to_remote_priority(self.priority)


def to_remote_priority(user_priority: int) -> int:
    """Map p1..p4 (1 most urgent) to Todoist's 4..1."""
    if not 1 <= user_priority <= MAX_PRIORITY:
        raise ConfigurationInvalid(
            [
                ValidationError(
                    "priority", f"Must be between 1 and {MAX_PRIORITY}"
                )
            ]
        )
    return (MAX_PRIORITY + 1) - user_priority


def load_yaml_file(path: str | Path) -> dict[str, Any]:
    """Load a settings YAML file into a dict."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationInvalid(
            [ValidationError("config", f"Settings file not found: {path}")]
        )

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationInvalid(
                [ValidationError("config", f"Invalid YAML in {path}: {e}")]
            ) from e

    if not isinstance(data, dict):
        raise ConfigurationInvalid(
            [ValidationError("config", f"{path} must contain a mapping")]
        )
    return data


def load_defaults() -> dict[str, Any]:
    if not DEFAULTS_FILE.exists():
        logger.warning(f"Settings defaults file not found: {DEFAULTS_FILE}")
        return {}
    return load_yaml_file(DEFAULTS_FILE)


def settings_from_dict(config: dict[str, Any]) -> ZotodoSettings:
    """
    Validate a raw config dict and build ZotodoSettings.

    Environment fallbacks are applied for fields missing from the dict.

    Raises:
        ConfigurationInvalid: if any field fails validation
    """
    config = dict(config)
    for field_def in SETTINGS_FIELDS:
        if field_def.env_var and config.get(field_def.name) in (None, ""):
            env_value = os.environ.get(field_def.env_var)
            if env_value:
                config[field_def.name] = env_value

    result = validate_config(SETTINGS_FIELDS, config)
    if not result.valid:
        raise ConfigurationInvalid(result.errors)

    # Inactive fields were not validated, so they take their defaults
    values = {
        f.name: coerce_field_value(
            f,
            config.get(f.name)
            if is_field_active(SETTINGS_FIELDS, config, f)
            else None,
        )
        for f in SETTINGS_FIELDS
    }
    settings = ZotodoSettings(**values)
    _warn_unknown_tokens(settings)
    return settings


def load_settings(
    path: Optional[str | Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> ZotodoSettings:
    """
    Load settings from defaults, an optional YAML file and overrides.

    Args:
        path: User settings YAML file
        overrides: Values taking precedence over both files (e.g. CLI flags)

    Raises:
        ConfigurationInvalid: on a missing/unreadable file or invalid values
    """
    config = load_defaults()
    if path:
        config.update(load_yaml_file(path))
        logger.debug(f"Loaded settings from {path}")
    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})
    return settings_from_dict(config)


def _warn_unknown_tokens(settings: ZotodoSettings) -> None:
    for name, template in (
        ("task_format", settings.task_format),
        ("note_format", settings.note_format),
    ):
        unknown = find_tokens(template) - TOKEN_NAMES
        if unknown:
            logger.warning(
                f"{name} refers to unknown tokens {sorted(unknown)}; "
                "they will be left as written"
            )
