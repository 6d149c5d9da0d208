"""Tests for ClickUpClient against an in-memory ClickUp (see conftest.FakeClickUp)."""

import pytest

from clickup_mcp import config
from clickup_mcp.cache import WorkspaceCache
from clickup_mcp.client import ClickUpClient, _priority_id
from clickup_mcp.exceptions import (
    AmbiguousReferenceError,
    NotFoundError,
    SetupError,
    ValidationFailure,
)


@pytest.fixture
def client(clickup):
    return ClickUpClient(cache=WorkspaceCache(), http=clickup.http())


def _names(payload):
    return [item["name"] for item in payload["items"]]


class TestPriority:
    def test_labels_and_numbers(self):
        assert _priority_id("Urgent") == 1
        assert _priority_id("3") == 3

    def test_invalid(self):
        with pytest.raises(ValidationFailure, match="urgent, high, normal, low"):
            _priority_id("critical")


class TestSetup:
    @pytest.mark.asyncio
    async def test_missing_team_id(self, clickup, monkeypatch):
        monkeypatch.setattr(config, "TEAM_ID", "")
        client = ClickUpClient(http=clickup.http())
        with pytest.raises(SetupError, match="CLICKUP_TEAM_ID"):
            await client.list_task_types()
        assert clickup.calls == []


class TestResolution:
    @pytest.mark.asyncio
    async def test_space_by_name(self, client):
        assert await client.resolve_space("engineering") == "901"

    @pytest.mark.asyncio
    async def test_list_exact_name_beats_substring(self, client):
        assert await client.resolve_list("Bug") == "1001"

    @pytest.mark.asyncio
    async def test_ambiguous_list(self, client):
        with pytest.raises(AmbiguousReferenceError) as exc_info:
            await client.resolve_list("bug")
        assert {c["id"] for c in exc_info.value.candidates} == {"1001", "1002"}

    @pytest.mark.asyncio
    async def test_list_scoped_to_space(self, client):
        with pytest.raises(NotFoundError):
            await client.resolve_list("Roadmap", space="Marketing")
        assert await client.resolve_list("Campaigns", space="Marketing") == "1004"

    @pytest.mark.asyncio
    async def test_hierarchy_fetched_once(self, client, clickup):
        await client.resolve_list("Roadmap")
        await client.resolve_folder("Backend")
        await client.resolve_space("Marketing")
        assert clickup.count("GET", "/team/9000/space") == 1
        assert clickup.count("GET", "/space/901/folder") == 1

    @pytest.mark.asyncio
    async def test_id_needs_no_lookup(self, client, clickup):
        assert await client.resolve_list("1003") == "1003"
        assert clickup.calls == []

    @pytest.mark.asyncio
    async def test_task_name_requires_list(self, client):
        with pytest.raises(ValidationFailure, match="Pass list"):
            await client.resolve_task("Task 7")

    @pytest.mark.asyncio
    async def test_task_name_within_list(self, client, clickup):
        assert await client.resolve_task("Task 7", "Roadmap") == "t00007"
        params, _ = clickup.last("GET", "/list/1003/task")
        assert params["include_closed"] == "true"

    @pytest.mark.asyncio
    async def test_assignees(self, client):
        assert await client.resolve_assignees(["bob@example.com", "Alice Smith", "13"]) == [
            12,
            11,
            13,
        ]


class TestContainers:
    @pytest.mark.asyncio
    async def test_get_list(self, client):
        payload = await client.get_list(list="Roadmap", detail_level="detailed")
        assert payload["data"]["content"] == "Quarterly plan"
        assert payload["metadata"]["detailLevel"] == "detailed"

    @pytest.mark.asyncio
    async def test_create_list_invalidates_hierarchy(self, client, clickup):
        await client.resolve_list("Roadmap")
        result = await client.create_list(name="Sprint 1", space="Engineering")
        assert result["list"] == {"id": "1099", "name": "Sprint 1"}
        _, body = clickup.last("POST", "/space/901/list")
        assert body == {"name": "Sprint 1"}
        assert await client.resolve_list("Sprint 1") == "1099"
        assert clickup.count("GET", "/team/9000/space") == 2

    @pytest.mark.asyncio
    async def test_create_list_in_folder(self, client, clickup):
        await client.create_list(name="Sprint 2", folder="Backend", content="Two weeks")
        _, body = clickup.last("POST", "/folder/501/list")
        assert body == {"name": "Sprint 2", "content": "Two weeks"}

    @pytest.mark.asyncio
    async def test_delete_list(self, client, clickup):
        result = await client.delete_list(list="Roadmap")
        assert result == {"ok": True, "action": "deleted", "kind": "list", "list_id": "1003"}
        assert clickup.count("DELETE", "/list/1003") == 1


class TestSpaceTags:
    @pytest.mark.asyncio
    async def test_list_is_cached(self, client, clickup):
        first = await client.list_space_tags(space="Engineering")
        second = await client.list_space_tags(space="901")
        assert _names(first) == _names(second) == ["urgent"]
        assert clickup.count("GET", "/space/901/tag") == 1

    @pytest.mark.asyncio
    async def test_create_then_list_then_delete(self, client, clickup):
        await client.list_space_tags(space="Engineering")
        created = await client.create_space_tag(
            space="Engineering", tag_name="qa", color_command="blue"
        )
        assert created["tag"] == {"name": "qa"}
        _, body = clickup.last("POST", "/space/901/tag")
        assert body["tag"]["tag_bg"] == "#1e88e5"
        assert "qa" in _names(await client.list_space_tags(space="Engineering"))

        await client.delete_space_tag(space="Engineering", tag_name="qa")
        fetches_before = clickup.count("GET", "/space/901/tag")
        listed = await client.list_space_tags(space="Engineering")
        assert "qa" not in _names(listed)
        assert clickup.count("GET", "/space/901/tag") == fetches_before + 1

    @pytest.mark.asyncio
    async def test_mutation_leaves_other_spaces_cached(self, client, clickup):
        await client.list_space_tags(space="Marketing")
        await client.create_space_tag(space="Engineering", tag_name="qa")
        await client.list_space_tags(space="Marketing")
        assert clickup.count("GET", "/space/902/tag") == 1

    @pytest.mark.asyncio
    async def test_duplicate_create_rejected(self, client):
        with pytest.raises(ValidationFailure, match="already exists"):
            await client.create_space_tag(space="901", tag_name="URGENT")

    @pytest.mark.asyncio
    async def test_update_keeps_unchanged_color(self, client, clickup):
        await client.update_space_tag(space="901", tag_name="urgent", new_tag_name="p0")
        _, body = clickup.last("PUT", "/space/901/tag/urgent")
        assert body == {"tag": {"name": "p0", "tag_fg": "#ffffff", "tag_bg": "#e53935"}}
        assert _names(await client.list_space_tags(space="901")) == ["p0"]

    @pytest.mark.asyncio
    async def test_delete_unknown_tag(self, client):
        with pytest.raises(NotFoundError, match="Available: urgent"):
            await client.delete_space_tag(space="901", tag_name="nope")


class TestTaskTags:
    @pytest.mark.asyncio
    async def test_add_existing_space_tag(self, client, clickup):
        result = await client.add_tag_to_task(task="t00001", tag_name="Urgent")
        assert result["tag"] == {"name": "urgent"}
        assert clickup.count("POST", "/task/t00001/tag/urgent") == 1

    @pytest.mark.asyncio
    async def test_add_unknown_tag_makes_no_write(self, client, clickup):
        with pytest.raises(NotFoundError):
            await client.add_tag_to_task(task="t00001", tag_name="nope")
        assert clickup.count("POST", "/task/t00001/tag/nope") == 0

    @pytest.mark.asyncio
    async def test_remove_tag_not_on_task(self, client):
        with pytest.raises(NotFoundError, match="does not have tag"):
            await client.remove_tag_from_task(task="t00001", tag_name="urgent")


class TestSearchTasks:
    @pytest.mark.asyncio
    async def test_limit_and_has_more(self, client):
        payload = await client.search_tasks(limit=5)
        assert len(payload["items"]) == 5
        meta = payload["metadata"]
        assert meta["count"] == 5
        assert meta["hasMore"] is True
        assert meta["limit"] == 5
        assert "No filters given" in meta["note"]

    @pytest.mark.asyncio
    async def test_default_limit(self, client):
        payload = await client.search_tasks()
        assert payload["metadata"]["count"] == config.SEARCH_DEFAULT_LIMIT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 101])
    async def test_limit_out_of_range(self, client, limit):
        with pytest.raises(ValidationFailure, match="limit"):
            await client.search_tasks(limit=limit)

    @pytest.mark.asyncio
    async def test_filters_are_sent_and_assignees_resolved(self, client, clickup):
        payload = await client.search_tasks(
            statuses="open, in progress", assignees=["bob@example.com"], tags=["urgent"]
        )
        params, _ = clickup.last("GET", "/team/9000/task")
        assert params["statuses[]"] == ["open", "in progress"]
        assert params["assignees[]"] == ["12"]
        assert params["tags[]"] == ["urgent"]
        assert params["include_closed"] == "false"
        assert "note" not in payload["metadata"]

    @pytest.mark.asyncio
    async def test_single_list(self, client, clickup):
        await client.search_tasks(list_name="Roadmap", limit=3)
        assert clickup.count("GET", "/list/1003/task") == 1
        assert clickup.count("GET", "/team/9000/task") == 0


class TestTasks:
    @pytest.mark.asyncio
    async def test_get_task_minimal(self, client):
        payload = await client.get_task(task="t00002", detail_level="minimal")
        assert payload["data"] == {"id": "t00002", "name": "Task 2", "status": "open"}

    @pytest.mark.asyncio
    async def test_custom_task_id_params(self, client, clickup):
        with pytest.raises(NotFoundError):
            await client.get_task(task="DEV-42")
        params, _ = clickup.last("GET", "/task/DEV-42")
        assert params["custom_task_ids"] == "true"
        assert params["team_id"] == "9000"

    @pytest.mark.asyncio
    async def test_create_task_body(self, client, clickup):
        result = await client.create_task(
            list="Roadmap",
            name="Ship it",
            priority="high",
            due_date="2024-01-31",
            assignees=["Alice Smith"],
            task_type="milestone",
        )
        assert result["task"]["id"] == "newtask1"
        _, body = clickup.last("POST", "/list/1003/task")
        assert body == {
            "name": "Ship it",
            "priority": 2,
            "due_date": 1706659200000,
            "assignees": [11],
            "custom_item_id": 2,
        }

    @pytest.mark.asyncio
    async def test_unknown_task_type(self, client):
        with pytest.raises(NotFoundError, match="Available: Bug, Milestone"):
            await client.create_task(list="1003", name="x", task_type="Epic")

    @pytest.mark.asyncio
    async def test_update_assignee_delta(self, client, clickup):
        result = await client.update_task(task="t00003", add_assignees=["bob"])
        _, body = clickup.last("PUT", "/task/t00003")
        assert body == {"assignees": {"add": [12], "rem": []}}
        assert result["changed"] == ["assignees"]

    @pytest.mark.asyncio
    async def test_update_with_nothing_to_change(self, client):
        with pytest.raises(ValidationFailure, match="nothing to change"):
            await client.update_task(task="t00003")


class TestMembers:
    @pytest.mark.asyncio
    async def test_query(self, client):
        payload = await client.find_members(query="ali")
        assert [m["username"] for m in payload["items"]] == ["Alice Smith", "Alicia Keys"]

    @pytest.mark.asyncio
    async def test_assignee_batch_reports_each_reference(self, client):
        result = await client.find_members(assignees="bob@example.com, ali, carol")
        assert result["resolved"] == [
            {"input": "bob@example.com", "id": 12, "username": "Bob Jones", "matchedBy": "email"}
        ]
        assert [u["input"] for u in result["unresolved"]] == ["ali", "carol"]
        assert len(result["unresolved"][0]["candidates"]) == 2

    @pytest.mark.asyncio
    async def test_members_cached(self, client, clickup):
        await client.find_members()
        await client.find_members(query="bob")
        assert clickup.count("GET", "/team") == 1


class TestTimeTracking:
    @pytest.mark.asyncio
    async def test_add_entry(self, client, clickup):
        result = await client.add_time_entry(
            task="t00001", duration_minutes=90, start_date="2024-01-31"
        )
        _, body = clickup.last("POST", "/team/9000/time_entries")
        assert body["tid"] == "t00001"
        assert body["duration"] == 5400000
        assert body["start"] == 1706659200000
        assert result["time_entry"]["duration_minutes"] == 90.0


class TestDocuments:
    @pytest.mark.asyncio
    async def test_disabled_by_default(self, client, clickup):
        with pytest.raises(SetupError, match="CLICKUP_DOCUMENT_SUPPORT"):
            await client.list_documents()
        assert clickup.calls == []

    @pytest.mark.asyncio
    async def test_list_when_enabled(self, client, clickup, monkeypatch):
        monkeypatch.setattr(config, "DOCUMENT_SUPPORT", True)
        payload = await client.list_documents(parent_id="901", parent_type="space")
        assert _names(payload) == ["Runbook"]
        params, _ = clickup.last("GET", "/workspaces/9000/docs")
        assert params == {"parent_id": "901", "parent_type": "4"}

    @pytest.mark.asyncio
    async def test_invalid_parent_type(self, client, monkeypatch):
        monkeypatch.setattr(config, "DOCUMENT_SUPPORT", True)
        with pytest.raises(ValidationFailure, match="parent_type"):
            await client.list_documents(parent_type="board")


class TestWorkspace:
    @pytest.mark.asyncio
    async def test_task_types_cached(self, client, clickup):
        await client.list_task_types()
        payload = await client.list_task_types(detail_level="minimal")
        assert payload["items"] == [{"id": 1, "name": "Bug"}, {"id": 2, "name": "Milestone"}]
        assert clickup.count("GET", "/team/9000/custom_item") == 1

    @pytest.mark.asyncio
    async def test_cache_stats(self, client):
        await client.list_task_types()
        await client.list_task_types()
        stats = await client.cache_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["entries"] == 1
        assert stats["ttl_seconds"]["space_tags"] == config.TAG_CACHE_TTL
