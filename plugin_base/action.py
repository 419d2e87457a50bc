"""
Base class for action handler plugins.

An action handler exposes a set of named actions (e.g. "create") that a host
can invoke with a params dict. Handlers never raise from execute(); they
return an ActionResult the host shows to the user.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from plugin_base.common import (
    FieldDefinition,
    ValidationError,
    ValidationResult,
    validate_config,
)


class ActionRisk(Enum):
    """
    Risk level determines approval requirements.

    - READ_ONLY: No side effects
    - LOW: Creates things, never deletes
    - DESTRUCTIVE: Irreversible
    """

    READ_ONLY = "read_only"
    LOW = "low"
    DESTRUCTIVE = "destructive"


@dataclass
class ActionDefinition:
    """An action a handler offers, with its parameters."""

    name: str
    description: str
    risk: ActionRisk
    params: list[FieldDefinition]
    examples: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "risk": self.risk.value,
            "params": [p.to_dict() for p in self.params],
            "examples": self.examples,
        }


@dataclass
class ActionResult:
    """Result from action execution."""

    success: bool
    message: str  # Human-readable result message
    data: Any = None
    error: Optional[str] = None


@dataclass
class ActionContext:
    """Context passed to execute()."""

    session_key: Optional[str] = None
    source: str = ""  # e.g. "menu", "notifier", "cli"


class PluginActionHandler(ABC):
    """
    Base class for action handler plugins.

    Subclasses define:
    - action_type: Unique identifier (e.g., "zotodo")
    - display_name: Human-readable name
    - description: Help text
    - get_config_fields(): Configuration required (API token, defaults, etc.)
    - get_actions(): Available actions with parameters
    - execute(): Action execution logic
    """

    action_type: str
    display_name: str
    description: str

    @classmethod
    @abstractmethod
    def get_config_fields(cls) -> list[FieldDefinition]:
        """Configuration fields, set once per session."""

    @classmethod
    @abstractmethod
    def get_actions(cls) -> list[ActionDefinition]:
        """Available actions and their parameters."""

    @classmethod
    def get_action(cls, action_name: str) -> Optional[ActionDefinition]:
        """Get a specific action definition by name."""
        return next((a for a in cls.get_actions() if a.name == action_name), None)

    @classmethod
    def get_usage(cls) -> str:
        """
        Markdown help for the host's action list.

        ## Zotodo

        ### zotodo:create
        Create a Todoist task for one item
        Parameters: item (required)

        Example:
        ```json
        {"item": {"key": "ABCD1234", ...}}
        ```
        """
        actions = cls.get_actions()
        if not actions:
            return ""

        lines = [f"## {cls.display_name}", ""]

        for action in actions:
            lines.append(f"### {cls.action_type}:{action.name}")
            lines.append(action.description)

            param_parts = [
                f"{p.name} ({'required' if p.required else 'optional'})"
                for p in action.params
            ]
            if param_parts:
                lines.append(f"Parameters: {', '.join(param_parts)}")

            if action.examples:
                lines.append("")
                lines.append("Example:")
                lines.append("```json")
                lines.append(json.dumps(action.examples[0], indent=2))
                lines.append("```")

            lines.append("")

        return "\n".join(lines)

    @classmethod
    def validate_config(cls, config: dict) -> ValidationResult:
        return validate_config(cls.get_config_fields(), config)

    @abstractmethod
    def __init__(self, config: dict):
        """
        Initialize with configuration.

        Args:
            config: Dict matching get_config_fields() definitions
        """

    @abstractmethod
    def execute(
        self, action: str, params: dict, context: ActionContext
    ) -> ActionResult:
        """
        Execute an action.

        Args:
            action: Action name (from get_actions())
            params: Parameters for the action
            context: Execution context

        Returns:
            ActionResult with success/failure and message
        """

    def validate_action_params(self, action: str, params: dict) -> ValidationResult:
        """Check that an action exists and its required params are present."""
        action_def = self.get_action(action)
        if not action_def:
            return ValidationResult(
                valid=False,
                errors=[ValidationError("action", f"Unknown action: {action}")],
            )

        errors = [
            ValidationError(p.name, "Required parameter missing")
            for p in action_def.params
            if p.required and params.get(p.name) is None
        ]
        return ValidationResult(valid=len(errors) == 0, errors=errors)

    def get_approval_summary(self, action: str, params: dict) -> str:
        """Human-readable summary of what an action call will do."""
        action_def = self.get_action(action)
        if action_def and action_def.risk == ActionRisk.DESTRUCTIVE:
            return f"⚠️ DESTRUCTIVE: {self.action_type}:{action}"
        return f"{self.action_type}:{action} with {len(params)} parameters"

    def is_available(self) -> bool:
        """Check if plugin is properly configured and available."""
        return True

    def test_connection(self) -> tuple[bool, str]:
        """Test the plugin configuration."""
        return True, "OK"
