"""Task drafts: the composed, not yet submitted form of one Todoist task."""

import uuid
from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class TaskDraft:
    """
    Everything needed to create one task, still referring to resources by name.

    Built once per item by TaskComposer and consumed once by TaskSubmitter.
    draft_id is the identity the submitter uses to refuse a second submission.
    """

    contents: str
    priority: int  # Todoist scale: 4 is most urgent
    project_name: str
    label_names: tuple[str, ...] = ()
    note: Optional[str] = None
    due_string: Optional[str] = None
    section_name: Optional[str] = None
    item_key: Optional[str] = None
    draft_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def renew(self) -> "TaskDraft":
        """Same content under a fresh identity, so it can be submitted again."""
        return replace(self, draft_id=uuid.uuid4().hex)

    def to_dict(self) -> dict:
        return {
            "draft_id": self.draft_id,
            "item_key": self.item_key,
            "contents": self.contents,
            "note": self.note,
            "due_string": self.due_string,
            "priority": self.priority,
            "project_name": self.project_name,
            "section_name": self.section_name,
            "label_names": list(self.label_names),
        }
