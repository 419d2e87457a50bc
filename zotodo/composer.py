"""
Task composition: item metadata + settings -> TaskDraft.
"""

import logging
from typing import Optional

from config.settings import ZotodoSettings, to_remote_priority
from templating import render
from zotodo.drafts import TaskDraft
from zotodo.items import ItemMetadata, build_tokens

logger = logging.getLogger(__name__)


class TaskComposer:
    """Builds drafts from items according to the session settings."""

    def __init__(self, settings: ZotodoSettings):
        self.settings = settings

    def is_ignored(self, item: ItemMetadata) -> bool:
        """True if the item sits in one of the ignored collections."""
        ignored = set(self.settings.ignore_collections)
        return any(name in ignored for name in item.collections)

    def compose(self, item: ItemMetadata) -> Optional[TaskDraft]:
        """
        Compose the draft for one item.

        Returns None when the item is in an ignored collection.

        Raises:
            ConfigurationInvalid: if the configured priority is out of range
        """
        if self.is_ignored(item):
            logger.info(f"Skipping item {item.key}: in an ignored collection")
            return None

        settings = self.settings
        tokens = build_tokens(item)

        draft = TaskDraft(
            contents=render(settings.task_format, tokens),
            priority=to_remote_priority(settings.priority),
            project_name=settings.project,
            label_names=tuple(settings.labels),
            note=render(settings.note_format, tokens) if settings.include_note else None,
            due_string=settings.due_string if settings.set_due else None,
            section_name=settings.section or None,
            item_key=item.key,
        )
        logger.debug(f"Composed draft {draft.draft_id} for item {item.key}")
        return draft
