"""
Exceptions raised by the Zotodo core.

Library layers (Todoist client, resource cache, submitter, composer, settings)
raise these. The service facade and the action plugin catch them per item and
turn them into outcomes for the host to display.
"""

from typing import Any, Optional


class ZotodoError(RuntimeError):
    """Base error for task creation."""


class RemoteUnavailable(ZotodoError):
    """A Todoist request failed (non-2xx response or network error)."""

    def __init__(self, endpoint: str, status: Optional[int], body: str = ""):
        self.endpoint = endpoint
        self.status = status
        self.body = body
        if status is None:
            detail = f"Error requesting {endpoint}: {body}"
        else:
            detail = f"Error requesting {endpoint}: HTTP {status} {body}".rstrip()
        super().__init__(detail)


class NoteAttachmentFailed(RemoteUnavailable):
    """The task was created but adding its note as a comment failed."""

    def __init__(
        self, task: dict[str, Any], endpoint: str, status: Optional[int], body: str = ""
    ):
        super().__init__(endpoint, status, body)
        self.task = task

    @property
    def task_id(self) -> Any:
        return self.task.get("id")

    def __str__(self) -> str:
        return f"Task {self.task_id} created but adding note failed: {super().__str__()}"


class ConfigurationInvalid(ZotodoError):
    """Settings or templates failed validation."""

    def __init__(self, errors: list):
        self.errors = list(errors)
        super().__init__(
            "; ".join(f"{e.field}: {e.message}" for e in self.errors)
            or "Invalid configuration"
        )


class DraftAlreadySubmitted(ZotodoError):
    """A draft that already produced a remote task was submitted again."""

    def __init__(self, draft_id: str, task_id: Any):
        self.draft_id = draft_id
        self.task_id = task_id
        super().__init__(f"Draft {draft_id} already created task {task_id}")
