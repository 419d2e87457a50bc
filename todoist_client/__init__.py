"""
Todoist integration: REST client, resource id cache and task submission.
"""

from .client import TODOIST_API_URL, TodoistClient
from .resources import ResourceCache, ResourceKind
from .submitter import SubmittedTask, TaskSubmitter

__all__ = [
    "TODOIST_API_URL",
    "TodoistClient",
    "ResourceCache",
    "ResourceKind",
    "TaskSubmitter",
    "SubmittedTask",
]
