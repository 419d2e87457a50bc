"""
Task submission pipeline.

For one draft: project id -> section id (optional) -> label ids -> create task
-> attach note as a comment (optional). Each step raises on failure and stops
the pipeline. Nothing is rolled back: if the comment fails the task stays
created and NoteAttachmentFailed carries it.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from todoist_client.client import TodoistClient
from todoist_client.resources import ResourceCache
from zotodo.drafts import TaskDraft
from zotodo.errors import DraftAlreadySubmitted, NoteAttachmentFailed, RemoteUnavailable

logger = logging.getLogger(__name__)


@dataclass
class SubmittedTask:
    """Remote task (and optional comment) created for a draft."""

    task: dict[str, Any]
    comment: Optional[dict[str, Any]] = None

    @property
    def task_id(self) -> Any:
        return self.task.get("id")


class TaskSubmitter:
    """Turns drafts into Todoist tasks, resolving names through the cache."""

    def __init__(self, cache: ResourceCache, client: TodoistClient):
        self.cache = cache
        self.client = client
        # draft_id -> task id, for drafts whose task exists remotely
        self._submitted: dict[str, Any] = {}
        self._lock = threading.Lock()

    def build_payload(self, draft: TaskDraft) -> dict:
        """Resolve every name in the draft and build the /tasks request body."""
        project_id = self.cache.project_id(draft.project_name)

        section_id = None
        if draft.section_name:
            section_id = self.cache.section_id(draft.section_name, draft.project_name)

        label_ids = [self.cache.label_id(name) for name in draft.label_names]

        payload = {
            "content": draft.contents,
            "project_id": project_id,
            "priority": draft.priority,
        }
        if label_ids:
            payload["label_ids"] = label_ids
        if section_id is not None:
            payload["section_id"] = section_id
        if draft.due_string is not None:
            payload["due_string"] = draft.due_string
        return payload

    def submit(self, draft: TaskDraft) -> SubmittedTask:
        """
        Create the task for a draft, then its note comment.

        Raises:
            DraftAlreadySubmitted: the draft already produced a task
            RemoteUnavailable: resolving a resource or creating the task failed
            NoteAttachmentFailed: the task exists but the comment failed
        """
        with self._lock:
            if draft.draft_id in self._submitted:
                raise DraftAlreadySubmitted(
                    draft.draft_id, self._submitted[draft.draft_id]
                )

            payload = self.build_payload(draft)
            task = self.client.create_task(payload)
            self._submitted[draft.draft_id] = task.get("id")
            logger.info(
                f"Created task {task.get('id')} '{draft.contents}' "
                f"in project '{draft.project_name}'"
            )

        if draft.note is None:
            return SubmittedTask(task=task)

        try:
            comment = self.client.create_comment(task["id"], draft.note)
        except RemoteUnavailable as e:
            raise NoteAttachmentFailed(task, e.endpoint, e.status, e.body) from e

        logger.debug(f"Attached note {comment.get('id')} to task {task.get('id')}")
        return SubmittedTask(task=task, comment=comment)

    def was_submitted(self, draft: TaskDraft) -> bool:
        return draft.draft_id in self._submitted
