"""
Zotodo service: the host-facing entry points.

One ZotodoService is built per session from the settings. It owns the Todoist
client, the resource cache shared by every task of the session, the composer
and the submitter. Hosts call:

- make_task_for_item(item): one item, e.g. from a context menu
- make_tasks_for_items(items): a selection, processed one item at a time
- on_item_added(item): subscription callback for newly added items
- notify(event, item_type, items): adapter for notifier-style callbacks

None of these raise for remote or configuration failures; each item gets a
TaskOutcome the host can show to the user.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from config.settings import ZotodoSettings
from todoist_client import ResourceCache, TaskSubmitter, TodoistClient
from zotodo.composer import TaskComposer
from zotodo.drafts import TaskDraft
from zotodo.errors import NoteAttachmentFailed, ZotodoError
from zotodo.items import ItemMetadata

logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    """What happened to one item."""

    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"
    NOTE_FAILED = "note_failed"  # task created, comment not


@dataclass
class TaskOutcome:
    """Result of creating a task for one item."""

    status: OutcomeStatus
    item_key: str
    message: str
    draft: Optional[TaskDraft] = None
    task_id: Any = None
    error: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status in (OutcomeStatus.CREATED, OutcomeStatus.SKIPPED)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "item_key": self.item_key,
            "message": self.message,
            "task_id": self.task_id,
            "error": self.error,
        }


class ZotodoService:
    """Creates Todoist tasks for library items."""

    def __init__(
        self,
        settings: ZotodoSettings,
        client: Optional[TodoistClient] = None,
        cache: Optional[ResourceCache] = None,
    ):
        self.settings = settings
        self.client = client or TodoistClient(settings.todoist_token)
        self.cache = cache or ResourceCache(self.client)
        self.composer = TaskComposer(settings)
        self.submitter = TaskSubmitter(self.cache, self.client)

    def make_task_for_item(self, item: ItemMetadata) -> TaskOutcome:
        """Compose and submit the task for one item."""
        try:
            draft = self.composer.compose(item)
        except ZotodoError as e:
            logger.error(f"Failed to compose task for item {item.key}: {e}")
            return TaskOutcome(
                status=OutcomeStatus.FAILED,
                item_key=item.key,
                message="Failed to make task for item!",
                error=str(e),
            )

        if draft is None:
            return TaskOutcome(
                status=OutcomeStatus.SKIPPED,
                item_key=item.key,
                message="Item is in an ignored collection",
            )

        return self.submit_draft(draft)

    def submit_draft(self, draft: TaskDraft) -> TaskOutcome:
        item_key = draft.item_key or ""
        try:
            submitted = self.submitter.submit(draft)
        except NoteAttachmentFailed as e:
            logger.error(f"Error adding comment for item {item_key}: {e}")
            return TaskOutcome(
                status=OutcomeStatus.NOTE_FAILED,
                item_key=item_key,
                message=f'Created task "{draft.contents}" but could not add its note',
                draft=draft,
                task_id=e.task_id,
                error=str(e),
            )
        except ZotodoError as e:
            logger.error(f"Failed to make task for item {item_key}: {e}")
            return TaskOutcome(
                status=OutcomeStatus.FAILED,
                item_key=item_key,
                message="Failed to make task for item!",
                draft=draft,
                error=str(e),
            )

        return TaskOutcome(
            status=OutcomeStatus.CREATED,
            item_key=item_key,
            message=(
                f'Created task "{draft.contents}" in project {draft.project_name}'
            ),
            draft=draft,
            task_id=submitted.task_id,
            details={"task": submitted.task, "comment": submitted.comment},
        )

    def make_tasks_for_items(self, items: Iterable[ItemMetadata]) -> list[TaskOutcome]:
        """
        Create tasks for several items, strictly one after another.

        Attachments and notes are left out. A failed item does not stop the
        remaining ones.
        """
        outcomes = []
        for item in items:
            if not item.is_regular:
                logger.debug(f"Ignoring {item.item_type} item {item.key}")
                continue
            outcomes.append(self.make_task_for_item(item))

        created = sum(1 for o in outcomes if o.status == OutcomeStatus.CREATED)
        logger.info(f"Created {created} of {len(outcomes)} task(s)")
        return outcomes

    def on_item_added(self, item: ItemMetadata) -> Optional[TaskOutcome]:
        """Subscription callback for a newly added item."""
        if not self.settings.automatic_add or not item.is_regular:
            return None
        logger.info(f"Making task for new item {item.key}")
        return self.make_task_for_item(item)

    def notify(
        self, event: str, item_type: str, items: Iterable[ItemMetadata]
    ) -> list[TaskOutcome]:
        """Notifier-style callback: only ("add", "item") events are handled."""
        if event != "add" or item_type != "item":
            return []
        outcomes = []
        for item in items:
            outcome = self.on_item_added(item)
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes

    def test_connection(self) -> tuple[bool, str]:
        return self.client.test_connection()

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "ZotodoService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
