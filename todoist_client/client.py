"""
Todoist REST client.

Thin wrapper over httpx that speaks the handful of REST v2 endpoints Zotodo
needs. Every non-2xx response, every network error and every 2xx reply whose
body is not what the endpoint returns (not JSON, a listing that is not a list,
a created resource without an id) is raised as RemoteUnavailable, carrying
the endpoint, status and response body verbatim.
"""

import logging
from typing import Any, Optional

import httpx

from zotodo.errors import RemoteUnavailable

logger = logging.getLogger(__name__)

TODOIST_API_URL = "https://api.todoist.com/rest/v2"
DEFAULT_TIMEOUT = 15


class TodoistClient:
    """Logical transport for projects, sections, labels, tasks and comments."""

    def __init__(
        self,
        api_token: str,
        base_url: str = TODOIST_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_token = api_token
        self.client = http_client or httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = e.response.text
            logger.error(
                f"Todoist API error on {method} {endpoint}: "
                f"{e.response.status_code} {body}"
            )
            raise RemoteUnavailable(endpoint, e.response.status_code, body) from e
        except httpx.RequestError as e:
            logger.error(f"Todoist request failed on {method} {endpoint}: {e}")
            raise RemoteUnavailable(endpoint, None, str(e)) from e
        return response

    def _decode(self, response: httpx.Response, method: str, endpoint: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Todoist returned a non-JSON body on {method} {endpoint}: {e}"
            )
            raise RemoteUnavailable(
                endpoint, response.status_code, response.text
            ) from e

    def _list(self, endpoint: str, **kwargs) -> list[dict]:
        response = self._send("GET", endpoint, **kwargs)
        listing = self._decode(response, "GET", endpoint)
        if listing is None:
            return []
        if not isinstance(listing, list):
            logger.error(f"Todoist reply to GET {endpoint} is not a list")
            raise RemoteUnavailable(endpoint, response.status_code, response.text)
        return listing

    def _create(self, endpoint: str, payload: dict) -> dict:
        response = self._send("POST", endpoint, json=payload)
        created = self._decode(response, "POST", endpoint)
        if not isinstance(created, dict) or "id" not in created:
            logger.error(f"Todoist reply to POST {endpoint} has no id")
            raise RemoteUnavailable(
                endpoint, response.status_code, response.text or "Empty response"
            )
        return created

    # --- listings ---

    def list_projects(self) -> list[dict]:
        return self._list("/projects")

    def list_labels(self) -> list[dict]:
        return self._list("/labels")

    def list_sections(self, project_id: str) -> list[dict]:
        return self._list("/sections", params={"project_id": project_id})

    # --- creation ---

    def create_project(self, name: str) -> dict:
        return self._create("/projects", {"name": name})

    def create_label(self, name: str) -> dict:
        return self._create("/labels", {"name": name})

    def create_section(self, name: str, project_id: str) -> dict:
        return self._create("/sections", {"name": name, "project_id": project_id})

    def create_task(self, payload: dict) -> dict:
        return self._create("/tasks", payload)

    def create_comment(self, task_id: str, content: str) -> dict:
        return self._create("/comments", {"task_id": task_id, "content": content})

    def test_connection(self) -> tuple[bool, str]:
        """Check the token by listing projects."""
        try:
            projects = self.list_projects()
            return True, f"Connected. Found {len(projects)} projects."
        except RemoteUnavailable as e:
            if e.status is not None:
                return False, f"API error: {e.status}"
            return False, str(e)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "TodoistClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
