"""
Config package: Zotodo settings schema, defaults and loading.
"""

from .settings import (
    MAX_PRIORITY,
    SETTINGS_FIELDS,
    TOKEN_NAMES,
    ZotodoSettings,
    load_settings,
    settings_from_dict,
    to_remote_priority,
)

__all__ = [
    "MAX_PRIORITY",
    "SETTINGS_FIELDS",
    "TOKEN_NAMES",
    "ZotodoSettings",
    "load_settings",
    "settings_from_dict",
    "to_remote_priority",
]
