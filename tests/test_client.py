"""
Tests for todoist_client/client.py against httpx.MockTransport.
"""

import json

import httpx
import pytest

from todoist_client.client import TODOIST_API_URL, TodoistClient
from zotodo.errors import RemoteUnavailable


def make_client(handler) -> TodoistClient:
    http_client = httpx.Client(
        base_url=TODOIST_API_URL,
        headers={"Authorization": "Bearer test-token"},
        transport=httpx.MockTransport(handler),
    )
    return TodoistClient("test-token", http_client=http_client)


class TestRequests:
    def test_bearer_token_sent(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json=[])

        make_client(handler).list_projects()

        assert seen["auth"] == "Bearer test-token"
        assert seen["path"] == "/rest/v2/projects"

    def test_default_client_headers(self):
        client = TodoistClient("abc")
        try:
            assert client.client.headers["Authorization"] == "Bearer abc"
            assert str(client.client.base_url).rstrip("/") == TODOIST_API_URL
        finally:
            client.close()

    def test_list_sections_passes_project_id(self):
        def handler(request):
            assert request.url.params["project_id"] == "p1"
            return httpx.Response(200, json=[{"id": "s1", "name": "Papers"}])

        assert make_client(handler).list_sections("p1") == [
            {"id": "s1", "name": "Papers"}
        ]

    def test_create_task_posts_payload(self):
        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/rest/v2/tasks"
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "t1", **body})

        task = make_client(handler).create_task(
            {"content": "Read", "project_id": "p1", "priority": 4}
        )
        assert task["id"] == "t1"
        assert task["priority"] == 4

    def test_create_comment_body(self):
        def handler(request):
            body = json.loads(request.content)
            assert body == {"task_id": "t1", "content": "note"}
            return httpx.Response(200, json={"id": "c1", **body})

        assert make_client(handler).create_comment("t1", "note")["id"] == "c1"


class TestErrors:
    def test_non_2xx_raises_remote_unavailable(self):
        def handler(request):
            return httpx.Response(403, text="Forbidden token")

        with pytest.raises(RemoteUnavailable) as exc_info:
            make_client(handler).create_label("x")

        error = exc_info.value
        assert error.endpoint == "/labels"
        assert error.status == 403
        assert error.body == "Forbidden token"
        assert "403" in str(error)

    def test_network_error_raises_remote_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RemoteUnavailable) as exc_info:
            make_client(handler).list_labels()

        assert exc_info.value.status is None
        assert "connection refused" in exc_info.value.body

    def test_timeout_raises_remote_unavailable(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RemoteUnavailable):
            make_client(handler).list_projects()


class TestMalformedReplies:
    def test_non_json_body_raises_remote_unavailable(self):
        def handler(request):
            return httpx.Response(200, text="<html>proxy</html>")

        with pytest.raises(RemoteUnavailable) as exc_info:
            make_client(handler).list_projects()

        assert exc_info.value.status == 200
        assert exc_info.value.body == "<html>proxy</html>"

    def test_non_json_create_raises_remote_unavailable(self):
        def handler(request):
            return httpx.Response(200, text="<html>proxy</html>")

        with pytest.raises(RemoteUnavailable):
            make_client(handler).create_task({"content": "x", "project_id": "p1"})

    def test_empty_create_reply_raises_remote_unavailable(self):
        def handler(request):
            return httpx.Response(204)

        with pytest.raises(RemoteUnavailable) as exc_info:
            make_client(handler).create_project("Reading")

        assert exc_info.value.endpoint == "/projects"
        assert exc_info.value.status == 204

    def test_create_reply_without_id(self):
        def handler(request):
            return httpx.Response(200, json={"name": "Reading"})

        with pytest.raises(RemoteUnavailable):
            make_client(handler).create_label("Reading")

    def test_listing_that_is_not_a_list(self):
        def handler(request):
            return httpx.Response(200, json={"error": "unexpected"})

        with pytest.raises(RemoteUnavailable):
            make_client(handler).list_labels()

    def test_empty_listing_is_empty(self):
        def handler(request):
            return httpx.Response(200)

        assert make_client(handler).list_sections("p1") == []


class TestConnection:
    def test_connection_success(self):
        def handler(request):
            return httpx.Response(
                200, json=[{"id": "1", "name": "Inbox"}, {"id": "2", "name": "Work"}]
            )

        success, message = make_client(handler).test_connection()

        assert success is True
        assert "2 projects" in message

    def test_connection_failure(self):
        def handler(request):
            return httpx.Response(401, text="Unauthorized")

        success, message = make_client(handler).test_connection()

        assert success is False
        assert "401" in message
