"""
Integration tests for the Zotodo action plugin.

The handler's service is rebuilt over the in-memory FakeTodoist so actions run
the whole pipeline without a real Todoist account.
"""

import pytest

from builtin_plugins.actions.zotodo import ZotodoActionHandler
from plugin_base.action import (
    ActionContext,
    ActionDefinition,
    ActionResult,
    ActionRisk,
    PluginActionHandler,
)
from tests.fixtures.fake_todoist import FakeTodoist
from zotodo.errors import ConfigurationInvalid
from zotodo.service import ZotodoService

ITEM = {
    "key": "K1",
    "title": "Paper One",
    "creators": [{"first_name": "Ada", "last_name": "Lovelace"}],
}


@pytest.fixture(autouse=True)
def no_token_env(monkeypatch):
    monkeypatch.delenv("ZOTODO_TODOIST_TOKEN", raising=False)


@pytest.fixture
def todoist():
    return FakeTodoist(projects=[{"id": "p1", "name": "Reading Queue"}])


def make_handler(todoist, **config) -> ZotodoActionHandler:
    config.setdefault("todoist_token", "test-token")
    handler = ZotodoActionHandler(config)
    handler.service = ZotodoService(handler.settings, client=todoist.client())
    return handler


class TestZotodoPluginMetadata:
    """Tests for plugin metadata."""

    def test_identity(self):
        assert ZotodoActionHandler.action_type == "zotodo"
        assert ZotodoActionHandler.display_name == "Zotodo"
        assert ZotodoActionHandler.description

    def test_config_fields(self):
        fields = {f.name: f for f in ZotodoActionHandler.get_config_fields()}
        assert fields["todoist_token"].required is True
        assert fields["todoist_token"].env_var == "ZOTODO_TODOIST_TOKEN"
        assert fields["note_format"].depends_on == {"include_note": True}

    def test_action_risks(self):
        actions = {a.name: a for a in ZotodoActionHandler.get_actions()}
        assert actions["create"].risk == ActionRisk.LOW
        assert actions["create_batch"].risk == ActionRisk.LOW
        assert actions["preview"].risk == ActionRisk.READ_ONLY

    def test_action_to_dict(self):
        data = ZotodoActionHandler.get_action("create").to_dict()
        assert data["risk"] == "low"
        assert data["params"][0]["name"] == "item"
        assert data["params"][0]["field_type"] == "json"
        assert data["examples"][0]["item"]["key"] == "ABCD1234"

    def test_get_action_not_found(self):
        assert ZotodoActionHandler.get_action("delete") is None

    def test_usage(self):
        usage = ZotodoActionHandler.get_usage()
        assert usage.startswith("## Zotodo")
        assert "### zotodo:create\n" in usage
        assert "### zotodo:create_batch\n" in usage
        assert "### zotodo:preview\n" in usage
        assert "Parameters: item (required)" in usage
        assert '"key": "ABCD1234"' in usage


class TestZotodoPluginValidation:
    """Tests for config validation."""

    def test_valid_config(self):
        result = ZotodoActionHandler.validate_config({"todoist_token": "test-token"})
        assert result.valid is True

    def test_missing_token(self):
        result = ZotodoActionHandler.validate_config({})
        assert result.valid is False
        assert [e.field for e in result.errors] == ["todoist_token"]

    def test_invalid_priority(self):
        result = ZotodoActionHandler.validate_config(
            {"todoist_token": "t", "priority": 7}
        )
        assert result.errors[0].field == "priority"

    def test_invalid_config_rejected_on_init(self):
        with pytest.raises(ConfigurationInvalid):
            ZotodoActionHandler({"todoist_token": "t", "priority": 0})

    def test_is_available(self, todoist):
        assert make_handler(todoist).is_available() is True

    def test_action_params(self, todoist):
        handler = make_handler(todoist)
        assert handler.validate_action_params("create", {"item": ITEM}).valid is True

        missing = handler.validate_action_params("create", {})
        assert missing.errors[0].field == "item"

        unknown = handler.validate_action_params("delete", {})
        assert unknown.errors[0].field == "action"


class TestZotodoCreate:
    """Tests for the create action."""

    def test_create_task(self, todoist):
        handler = make_handler(todoist, labels="")

        result = handler.execute("create", {"item": ITEM}, ActionContext())

        assert result.success is True
        assert result.message == (
            'Created task "Read Ada Lovelace et al. - Paper One" in project Reading Queue'
        )
        assert result.data["status"] == "created"
        assert result.data["task_id"] == todoist.tasks[0]["id"]
        assert todoist.tasks[0]["project_id"] == "p1"
        assert todoist.calls("POST", "/projects") == []

    def test_create_remote_failure(self, todoist):
        todoist.fail("POST", "/tasks", 500, "server error")
        handler = make_handler(todoist)

        result = handler.execute("create", {"item": ITEM}, ActionContext())

        assert result.success is False
        assert result.message == "Failed to make task for item!"
        assert "server error" in result.error

    def test_create_invalid_item(self, todoist):
        handler = make_handler(todoist)

        result = handler.execute("create", {"item": {"title": "No key"}}, ActionContext())

        assert result.success is False
        assert result.error.startswith("Invalid item:")
        assert todoist.requests == []

    def test_create_missing_param(self, todoist):
        result = make_handler(todoist).execute("create", {}, ActionContext())
        assert result.success is False
        assert "item" in result.error

    def test_unknown_action(self, todoist):
        result = make_handler(todoist).execute("delete", {}, ActionContext())
        assert result.success is False
        assert "Unknown action" in result.error


class TestZotodoBatch:
    """Tests for the create_batch action."""

    def test_batch(self, todoist):
        handler = make_handler(todoist, labels="")
        items = [ITEM, {"key": "K2", "title": "Two"}, {"key": "A1", "item_type": "attachment"}]

        result = handler.execute("create_batch", {"items": items}, ActionContext())

        assert result.success is True
        assert result.message.startswith("Created 2 of 2 task(s):")
        assert "- K2: Created task" in result.message
        assert len(todoist.tasks) == 2
        assert result.error is None

    def test_batch_items_must_be_list(self, todoist):
        result = make_handler(todoist).execute(
            "create_batch", {"items": {"key": "K1"}}, ActionContext()
        )
        assert result.success is False
        assert result.error == "Invalid item: items must be a list"

    def test_batch_partial_failure(self, todoist):
        handler = make_handler(todoist, labels="", ignore_collections="Done")
        items = [ITEM, {"key": "K2", "collections": ["Done"]}]
        todoist.fail("POST", "/tasks", 503, "busy")

        result = handler.execute("create_batch", {"items": items}, ActionContext())

        assert result.success is False
        assert result.message.startswith("Created 0 of 2 task(s):")
        assert result.error.startswith("K1:")
        statuses = [o["status"] for o in result.data["outcomes"]]
        assert statuses == ["failed", "skipped"]


class TestZotodoPreview:
    """Tests for the preview action."""

    def test_preview(self, todoist):
        handler = make_handler(todoist, include_note=True, note_format="${title}")

        result = handler.execute("preview", {"item": ITEM}, ActionContext())

        assert result.success is True
        assert result.data["contents"] == "Read Ada Lovelace et al. - Paper One"
        assert result.data["note"] == "Paper One"
        assert result.data["priority"] == 4
        assert todoist.requests == []

    def test_preview_ignored(self, todoist):
        handler = make_handler(todoist, ignore_collections="Done")
        item = dict(ITEM, collections=["Done"])

        result = handler.execute("preview", {"item": item}, ActionContext())

        assert result.success is True
        assert result.data is None


class TestZotodoApprovalSummary:
    def test_summaries(self, todoist):
        handler = make_handler(todoist, project="Papers")
        assert handler.get_approval_summary("create", {"item": ITEM}) == (
            'Create Todoist task for "Paper One" in Papers'
        )
        assert handler.get_approval_summary("create_batch", {"items": [ITEM, ITEM]}) == (
            "Create 2 Todoist task(s) in Papers"
        )

    def test_summary_tolerates_malformed_params(self, todoist):
        handler = make_handler(todoist, project="Papers")
        assert handler.get_approval_summary("create", {"item": "x"}) == (
            'Create Todoist task for "?" in Papers'
        )
        assert handler.get_approval_summary("create", {}) == (
            'Create Todoist task for "?" in Papers'
        )
        assert handler.get_approval_summary("create_batch", {"items": "x"}) == (
            "Create 0 Todoist task(s) in Papers"
        )

    def test_destructive_summary_from_base_class(self):
        class PurgeHandler(PluginActionHandler):
            action_type = "purge"
            display_name = "Purge"
            description = "Deletes things"

            @classmethod
            def get_config_fields(cls):
                return []

            @classmethod
            def get_actions(cls):
                return [ActionDefinition("purge", "Purge", ActionRisk.DESTRUCTIVE, [])]

            def __init__(self, config):
                pass

            def execute(self, action, params, context):
                return ActionResult(success=True, message="")

        handler = PurgeHandler({})
        assert "DESTRUCTIVE" in handler.get_approval_summary("purge", {})
        assert handler.test_connection() == (True, "OK")


class TestZotodoConnection:
    def test_connection(self, todoist):
        success, message = make_handler(todoist).test_connection()
        assert success is True
        assert "1 projects" in message

    def test_connection_failure(self, todoist):
        todoist.fail("GET", "/projects", 401, "Unauthorized")
        success, message = make_handler(todoist).test_connection()
        assert success is False
        assert message == "API error: 401"

    def test_close_releases_http_client(self, todoist):
        handler = make_handler(todoist)

        handler.close()

        assert handler.service.client.client.is_closed is True

    def test_context_manager_closes(self, todoist):
        with make_handler(todoist) as handler:
            assert handler.is_available() is True

        assert handler.service.client.client.is_closed is True
