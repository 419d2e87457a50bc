"""
Name -> id resolution for Todoist projects, labels and sections.

Tasks reference projects, sections and labels by id, while users configure them
by name. ResourceCache bridges the two:

1. The first lookup in a namespace fetches the full listing from Todoist.
2. Known names are answered from the cache with no remote call.
3. Unknown names are created remotely and the returned id is cached.

Sections are scoped by project, so a section lookup always resolves (and if
needed creates) its project first.

One cache is meant to live for the whole session and be shared by every task
created in it. That way a batch of items sharing a new project name creates
that project once. The read-check-create sequence runs under a lock so callers
on different threads cannot both miss and both create.

Entries are never invalidated: a resource renamed or deleted in Todoist after
it was cached keeps resolving to its old id until the process restarts.
"""

import logging
import threading
from enum import Enum
from typing import Optional

from todoist_client.client import TodoistClient

logger = logging.getLogger(__name__)


class ResourceKind(Enum):
    """Resource namespaces, valued by their REST endpoint name."""

    PROJECT = "projects"
    LABEL = "labels"
    SECTION = "sections"


class ResourceCache:
    """Lazily populated, create-on-miss cache of Todoist resource ids."""

    def __init__(self, client: TodoistClient):
        self.client = client
        # None until the listing has been fetched
        self._projects: Optional[dict[str, str]] = None
        self._labels: Optional[dict[str, str]] = None
        # project name -> (section name -> id), keyed only once fetched
        self._sections: dict[str, dict[str, str]] = {}
        self._lock = threading.RLock()

    def resolve(
        self,
        kind: ResourceKind | str,
        name: str,
        project_name: Optional[str] = None,
    ) -> str:
        """
        Resolve a resource name to its Todoist id, creating it if missing.

        Args:
            kind: Namespace (ResourceKind or its value, e.g. "labels")
            name: Case-sensitive resource name
            project_name: Owning project, required for sections

        Returns:
            The resource id

        Raises:
            RemoteUnavailable: if fetching the listing or creating fails
            ValueError: for a section lookup without a project
        """
        kind = ResourceKind(kind)

        if kind == ResourceKind.PROJECT:
            return self.project_id(name)
        if kind == ResourceKind.LABEL:
            return self.label_id(name)
        if not project_name:
            raise ValueError("Section lookups need the owning project name")
        return self.section_id(name, project_name)

    def project_id(self, name: str) -> str:
        with self._lock:
            if self._projects is None:
                self._projects = self._fetch_all(ResourceKind.PROJECT)

            if name in self._projects:
                logger.debug(f"Project cache hit: {name}")
                return self._projects[name]

            created = self.client.create_project(name)
            logger.info(f"Created Todoist project '{name}' ({created['id']})")
            self._remember(self._projects, name, created)
            return created["id"]

    def label_id(self, name: str) -> str:
        with self._lock:
            if self._labels is None:
                self._labels = self._fetch_all(ResourceKind.LABEL)

            if name in self._labels:
                logger.debug(f"Label cache hit: {name}")
                return self._labels[name]

            created = self.client.create_label(name)
            logger.info(f"Created Todoist label '{name}' ({created['id']})")
            self._remember(self._labels, name, created)
            return created["id"]

    def section_id(self, name: str, project_name: str) -> str:
        with self._lock:
            project_id = self.project_id(project_name)

            if project_name not in self._sections:
                self._sections[project_name] = self._fetch_all(
                    ResourceKind.SECTION, project_id=project_id
                )
            sections = self._sections[project_name]

            if name in sections:
                logger.debug(f"Section cache hit: {project_name}/{name}")
                return sections[name]

            created = self.client.create_section(name, project_id)
            logger.info(
                f"Created Todoist section '{name}' in project '{project_name}' "
                f"({created['id']})"
            )
            self._remember(sections, name, created)
            return created["id"]

    def is_cached(
        self,
        kind: ResourceKind | str,
        name: str,
        project_name: Optional[str] = None,
    ) -> bool:
        """Check whether a name is known without touching the remote service."""
        kind = ResourceKind(kind)
        with self._lock:
            if kind == ResourceKind.PROJECT:
                return self._projects is not None and name in self._projects
            if kind == ResourceKind.LABEL:
                return self._labels is not None and name in self._labels
            return name in self._sections.get(project_name, {})

    def snapshot(self) -> dict:
        """Copy of the cached mappings, for diagnostics."""
        with self._lock:
            return {
                "projects": dict(self._projects or {}),
                "labels": dict(self._labels or {}),
                "sections": {p: dict(s) for p, s in self._sections.items()},
            }

    def _fetch_all(
        self, kind: ResourceKind, project_id: Optional[str] = None
    ) -> dict[str, str]:
        if kind == ResourceKind.PROJECT:
            items = self.client.list_projects()
        elif kind == ResourceKind.LABEL:
            items = self.client.list_labels()
        else:
            items = self.client.list_sections(project_id)

        mapping = {item["name"]: item["id"] for item in items}
        logger.debug(f"Fetched {len(mapping)} {kind.value}")
        return mapping

    @staticmethod
    def _remember(mapping: dict[str, str], requested: str, created: dict) -> None:
        mapping[created.get("name", requested)] = created["id"]
        # Todoist may normalize the name; keep the requested one resolvable too
        mapping[requested] = created["id"]
