"""
Zotodo action plugin - create Todoist tasks for library items.

Wraps ZotodoService behind the action handler contract so a host can invoke
"create", "create_batch" or "preview" with item metadata dicts.
"""

import logging

from config.settings import SETTINGS_FIELDS, load_defaults, load_settings
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
    ValidationResult,
    validate_config,
)
from zotodo.errors import ZotodoError
from zotodo.items import ItemMetadata
from zotodo.service import OutcomeStatus, ZotodoService

logger = logging.getLogger(__name__)

EXAMPLE_ITEM = {
    "key": "ABCD1234",
    "title": "Attention Is All You Need",
    "doi": "10.48550/arXiv.1706.03762",
    "creators": [{"first_name": "Ashish", "last_name": "Vaswani"}],
}


class ZotodoActionHandler(PluginActionHandler):
    """Create Todoist tasks for reference manager items."""

    action_type = "zotodo"
    display_name = "Zotodo"
    description = "Create Todoist reading tasks for library items"

    @classmethod
    def get_config_fields(cls) -> list[FieldDefinition]:
        return list(SETTINGS_FIELDS)

    @classmethod
    def validate_config(cls, config: dict) -> ValidationResult:
        # Missing keys fall back to the shipped defaults
        return validate_config(cls.get_config_fields(), {**load_defaults(), **config})

    @classmethod
    def get_actions(cls) -> list[ActionDefinition]:
        return [
            ActionDefinition(
                name="create",
                description="Create a Todoist task for one item",
                risk=ActionRisk.LOW,
                params=[
                    FieldDefinition(
                        name="item",
                        label="Item metadata",
                        field_type=FieldType.JSON,
                        required=True,
                    ),
                ],
                examples=[{"item": EXAMPLE_ITEM}],
            ),
            ActionDefinition(
                name="create_batch",
                description="Create Todoist tasks for several items, one at a time",
                risk=ActionRisk.LOW,
                params=[
                    FieldDefinition(
                        name="items",
                        label="Item metadata list",
                        field_type=FieldType.JSON,
                        required=True,
                    ),
                ],
                examples=[{"items": [EXAMPLE_ITEM]}],
            ),
            ActionDefinition(
                name="preview",
                description="Compose the task for an item without creating it",
                risk=ActionRisk.READ_ONLY,
                params=[
                    FieldDefinition(
                        name="item",
                        label="Item metadata",
                        field_type=FieldType.JSON,
                        required=True,
                    ),
                ],
                examples=[{"item": EXAMPLE_ITEM}],
            ),
        ]

    def __init__(self, config: dict):
        self.settings = load_settings(overrides=config)
        self.service = ZotodoService(self.settings)

    def execute(
        self, action: str, params: dict, context: ActionContext
    ) -> ActionResult:
        validation = self.validate_action_params(action, params)
        if not validation.valid:
            return ActionResult(
                success=False, message="", error=validation.error_message
            )

        try:
            if action == "create":
                return self._create(params)
            elif action == "create_batch":
                return self._create_batch(params)
            else:
                return self._preview(params)
        except (ValueError, TypeError) as e:
            return ActionResult(success=False, message="", error=f"Invalid item: {e}")
        except ZotodoError as e:
            logger.error(f"Zotodo action error: {e}")
            return ActionResult(success=False, message="", error=str(e))

    def _create(self, params: dict) -> ActionResult:
        item = ItemMetadata.from_dict(params["item"])
        outcome = self.service.make_task_for_item(item)
        return ActionResult(
            success=outcome.success,
            message=outcome.message,
            data=outcome.to_dict(),
            error=outcome.error,
        )

    def _create_batch(self, params: dict) -> ActionResult:
        if not isinstance(params["items"], list):
            raise TypeError("items must be a list")
        items = [ItemMetadata.from_dict(data) for data in params["items"]]
        outcomes = self.service.make_tasks_for_items(items)

        created = [o for o in outcomes if o.status == OutcomeStatus.CREATED]
        failed = [o for o in outcomes if not o.success]
        lines = [f"- {o.item_key}: {o.message}" for o in outcomes]

        message = f"Created {len(created)} of {len(outcomes)} task(s)"
        if lines:
            message += ":\n" + "\n".join(lines)

        return ActionResult(
            success=not failed,
            message=message,
            data={"outcomes": [o.to_dict() for o in outcomes]},
            error=(
                "; ".join(f"{o.item_key}: {o.error}" for o in failed) if failed else None
            ),
        )

    def _preview(self, params: dict) -> ActionResult:
        item = ItemMetadata.from_dict(params["item"])
        draft = self.service.composer.compose(item)
        if draft is None:
            return ActionResult(
                success=True, message="Item is in an ignored collection", data=None
            )
        return ActionResult(
            success=True, message=f'Task: "{draft.contents}"', data=draft.to_dict()
        )

    def get_approval_summary(self, action: str, params: dict) -> str:
        project = self.settings.project
        if action == "create":
            item = params.get("item")
            title = item.get("title", "?") if isinstance(item, dict) else "?"
            return f'Create Todoist task for "{title}" in {project}'
        elif action == "create_batch":
            items = params.get("items")
            count = len(items) if isinstance(items, list) else 0
            return f"Create {count} Todoist task(s) in {project}"
        elif action == "preview":
            return "Preview Todoist task"
        return super().get_approval_summary(action, params)

    def test_connection(self) -> tuple[bool, str]:
        return self.service.test_connection()

    def is_available(self) -> bool:
        return bool(self.settings.todoist_token)

    def close(self) -> None:
        self.service.close()

    def __enter__(self) -> "ZotodoActionHandler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
