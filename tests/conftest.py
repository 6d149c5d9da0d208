"""
Shared test fixtures for clickup-mcp tests.
Patches config module to avoid loading a real .env and making API calls.
"""

import json
import re

import httpx
import pytest


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Ensure every test starts with a clean config state.
    Prevents tests from reading the real .env or enabling logs."""
    from clickup_mcp import config

    monkeypatch.setattr(config, "env", {})
    monkeypatch.setattr(config, "API_TOKEN", "fake-token")
    monkeypatch.setattr(config, "TEAM_ID", "9000")
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_LOG_SAMPLE_RATE", 1.0)
    monkeypatch.setattr(config, "CACHE_LOG_ENABLED", False)
    monkeypatch.setattr(config, "DEFAULT_DETAIL_LEVEL", "standard")
    monkeypatch.setattr(config, "DOCUMENT_SUPPORT", False)


class FakeClickUp:
    """In-memory ClickUp workspace answering through httpx.MockTransport.

    Every request is recorded in ``calls`` as ``(method, path, params, body)``;
    paths are relative to the API version prefix.
    """

    def __init__(self):
        self.calls = []
        self.spaces = [
            {"id": "901", "name": "Engineering", "private": False},
            {"id": "902", "name": "Marketing", "private": False},
        ]
        self.folders = {
            "901": [
                {
                    "id": "501",
                    "name": "Backend",
                    "lists": [
                        {"id": "1001", "name": "Bug"},
                        {"id": "1002", "name": "bug-fix"},
                    ],
                }
            ],
            "902": [],
        }
        self.folderless = {
            "901": [{"id": "1003", "name": "Roadmap"}],
            "902": [{"id": "1004", "name": "Campaigns"}],
        }
        self.tags = {
            "901": [{"name": "urgent", "tag_fg": "#ffffff", "tag_bg": "#e53935"}],
            "902": [],
        }
        self.members = [
            {"user": {"id": 11, "username": "Alice Smith", "email": "alice@example.com"}},
            {"user": {"id": 12, "username": "Bob Jones", "email": "bob@example.com"}},
            {"user": {"id": 13, "username": "Alicia Keys", "email": "alicia@example.com"}},
        ]
        self.tasks = {
            f"t{i:05d}": {
                "id": f"t{i:05d}",
                "name": f"Task {i}",
                "status": {"status": "open"},
                "priority": None,
                "list": {"id": "1003", "name": "Roadmap"},
                "space": {"id": "901"},
                "tags": [],
                "date_updated": "1700000000000",
            }
            for i in range(1, 31)
        }
        self.task_types = [
            {"id": 1, "name": "Bug", "name_plural": "Bugs"},
            {"id": 2, "name": "Milestone", "name_plural": "Milestones"},
        ]
        self.docs = [{"id": "doc-1", "name": "Runbook", "parent": {"id": "901", "type": 4}}]
        self.errors = {}
        self._routes = [
            ("GET", r"/team", self._get_teams),
            ("GET", r"/team/9000/space", self._get_spaces),
            ("GET", r"/space/(\w+)/folder", self._get_folders),
            ("GET", r"/space/(\w+)/list", self._get_folderless),
            ("POST", r"/space/(\w+)/list", self._create_list),
            ("POST", r"/folder/(\w+)/list", self._create_list),
            ("DELETE", r"/list/(\w+)", self._ok),
            ("GET", r"/list/(\w+)", self._get_list),
            ("GET", r"/space/(\w+)/tag", self._get_tags),
            ("POST", r"/space/(\w+)/tag", self._create_tag),
            ("PUT", r"/space/(\w+)/tag/(.+)", self._update_tag),
            ("DELETE", r"/space/(\w+)/tag/(.+)", self._delete_tag),
            ("GET", r"/team/9000/task", self._search_tasks),
            ("GET", r"/list/(\w+)/task", self._list_tasks),
            ("POST", r"/list/(\w+)/task", self._create_task),
            ("GET", r"/task/([\w-]+)", self._get_task),
            ("PUT", r"/task/([\w-]+)", self._update_task),
            ("POST", r"/task/([\w-]+)/tag/(.+)", self._ok),
            ("DELETE", r"/task/([\w-]+)/tag/(.+)", self._ok),
            ("GET", r"/team/9000/custom_item", self._get_task_types),
            ("POST", r"/team/9000/time_entries", self._add_time_entry),
            ("GET", r"/workspaces/9000/docs", self._get_docs),
        ]

    # -- transport -------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = re.sub(r"^/api/v[23]", "", request.url.path)
        params = {}
        for key, value in request.url.params.multi_items():
            params.setdefault(key, []).append(value)
        params = {k: v[0] if len(v) == 1 and not k.endswith("[]") else v for k, v in params.items()}
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, params, body))
        if (request.method, path) in self.errors:
            status = self.errors[(request.method, path)]
            return httpx.Response(status, json={"err": "Injected failure", "ECODE": "TEST_001"})
        for method, pattern, fn in self._routes:
            match = re.fullmatch(pattern, path)
            if method == request.method and match:
                return fn(*match.groups(), params=params, body=body)
        return httpx.Response(404, json={"err": "Route not found", "ECODE": "APP_001"})

    def http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def count(self, method, path):
        return sum(1 for m, p, _, _ in self.calls if m == method and p == path)

    def last(self, method, path):
        for m, p, params, body in reversed(self.calls):
            if m == method and p == path:
                return params, body
        raise AssertionError(f"no {method} {path} call recorded")

    # -- routes ----------------------------------------------------------

    def _ok(self, *groups, params, body):
        return httpx.Response(200, json={})

    def _get_teams(self, params, body):
        return httpx.Response(
            200, json={"teams": [{"id": "9000", "name": "Acme", "members": self.members}]}
        )

    def _get_spaces(self, params, body):
        return httpx.Response(200, json={"spaces": self.spaces})

    def _get_folders(self, space_id, params, body):
        return httpx.Response(200, json={"folders": self.folders.get(space_id, [])})

    def _get_folderless(self, space_id, params, body):
        return httpx.Response(200, json={"lists": self.folderless.get(space_id, [])})

    def _create_list(self, parent_id, params, body):
        new = {"id": "1099", "name": body["name"]}
        self.folderless.setdefault(parent_id, []).append(new)
        return httpx.Response(200, json=new)

    def _get_list(self, list_id, params, body):
        return httpx.Response(
            200,
            json={
                "id": list_id,
                "name": "Roadmap",
                "folder": {"id": "0", "name": "hidden"},
                "space": {"id": "901", "name": "Engineering"},
                "task_count": 3,
                "content": "Quarterly plan",
            },
        )

    def _get_tags(self, space_id, params, body):
        return httpx.Response(200, json={"tags": list(self.tags.get(space_id, []))})

    def _create_tag(self, space_id, params, body):
        self.tags.setdefault(space_id, []).append(dict(body["tag"]))
        return httpx.Response(200, json={})

    def _update_tag(self, space_id, name, params, body):
        tags = self.tags.get(space_id, [])
        for i, tag in enumerate(tags):
            if tag["name"] == name:
                tags[i] = dict(body["tag"])
                return httpx.Response(200, json={"tag": body["tag"]})
        return httpx.Response(404, json={"err": "Tag not found"})

    def _delete_tag(self, space_id, name, params, body):
        self.tags[space_id] = [t for t in self.tags.get(space_id, []) if t["name"] != name]
        return httpx.Response(200, json={})

    def _search_tasks(self, params, body):
        tasks = list(self.tasks.values())
        return httpx.Response(200, json={"tasks": tasks, "last_page": True})

    def _list_tasks(self, list_id, params, body):
        tasks = [t for t in self.tasks.values() if t["list"]["id"] == list_id]
        return httpx.Response(200, json={"tasks": tasks, "last_page": True})

    def _create_task(self, list_id, params, body):
        created = {
            "id": "newtask1",
            "name": body["name"],
            "status": {"status": body.get("status", "to do")},
        }
        return httpx.Response(200, json=created)

    def _get_task(self, task_id, params, body):
        task = self.tasks.get(task_id)
        if task is None:
            return httpx.Response(404, json={"err": "Task not found", "ECODE": "ITEM_013"})
        return httpx.Response(200, json=task)

    def _update_task(self, task_id, params, body):
        task = dict(self.tasks.get(task_id, {"id": task_id}))
        task.update({k: v for k, v in body.items() if k == "name"})
        return httpx.Response(200, json=task)

    def _get_task_types(self, params, body):
        return httpx.Response(200, json={"custom_items": self.task_types})

    def _add_time_entry(self, params, body):
        return httpx.Response(
            200, json={"data": {"id": "te1", "task": {"id": body["tid"]}, **body}}
        )

    def _get_docs(self, params, body):
        return httpx.Response(200, json={"docs": self.docs, "next_cursor": None})


@pytest.fixture
def clickup():
    """A fresh fake ClickUp workspace."""
    return FakeClickUp()


@pytest.fixture
def fake_clock():
    class _Clock:
        def __init__(self):
            self.now = 1000.0

        def __call__(self):
            return self.now

        def advance(self, seconds):
            self.now += seconds

    return _Clock()
