# Plugin framework public exports

from plugin_base.action import (
    ActionContext,
    ActionDefinition,
    ActionResult,
    ActionRisk,
    PluginActionHandler,
)
from plugin_base.common import (
    FieldDefinition,
    FieldType,
    ValidationError,
    ValidationResult,
    coerce_field_value,
    is_field_active,
    validate_config,
    validate_field_value,
)

__all__ = [
    # Common types
    "FieldType",
    "FieldDefinition",
    "ValidationError",
    "ValidationResult",
    "validate_field_value",
    "validate_config",
    "coerce_field_value",
    "is_field_active",
    # Action
    "PluginActionHandler",
    "ActionRisk",
    "ActionDefinition",
    "ActionResult",
    "ActionContext",
]
