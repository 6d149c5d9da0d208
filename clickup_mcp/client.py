"""
ClickUpClient - async Python API behind every clickup-mcp tool.

All methods return plain dicts suitable for JSON serialization: read methods
return shaped payloads (``{"items", "metadata"}`` or ``{"data", "metadata"}``),
write methods return a ``mutation_response`` confirmation.

Slow-changing lookups (spaces/folders/lists, members, space tags, task types)
go through the WorkspaceCache. Every write that changes one of them
invalidates the matching key before returning.
"""

from __future__ import annotations

import asyncio
import time
import urllib.parse
from typing import Any

import httpx

from clickup_mcp import api, config
from clickup_mcp._utils import _parse_date_ms, _split_refs
from clickup_mcp.cache import (
    KIND_HIERARCHY,
    KIND_MEMBERS,
    KIND_SPACE_TAGS,
    KIND_TASK_TYPES,
    WorkspaceCache,
    cache_key,
)
from clickup_mcp.colors import parse_color_command
from clickup_mcp.exceptions import (
    AmbiguousReferenceError,
    NotFoundError,
    SetupError,
    ValidationFailure,
)
from clickup_mcp.formatters import (
    mutation_response,
    parse_detail_level,
    shape_collection,
    shape_single,
)
from clickup_mcp.resolver import (
    ReferenceKind,
    is_custom_task_id,
    looks_like_id,
    match_user,
    resolve,
)

_DEFAULT_TAG_FG = "#ffffff"
_DEFAULT_TAG_BG = "#000000"
_DOC_VISIBILITY = ("PRIVATE", "PUBLIC", "PERSONAL", "HIDDEN")


def _priority_id(value):
    """Map a priority label (or 1-4) to ClickUp's numeric priority."""
    text = str(value).strip().lower()
    if text in config.PRIORITY_IDS:
        return config.PRIORITY_IDS[text]
    if text.isdigit() and int(text) in config.PRIORITY_LABELS:
        return int(text)
    raise ValidationFailure(
        f"[ERROR] Invalid priority '{value}'. Valid: {', '.join(config.PRIORITY_IDS)}"
    )


def _member_record(raw):
    user = raw.get("user", raw)
    return {
        "id": user.get("id"),
        "username": user.get("username"),
        "email": user.get("email"),
        "initials": user.get("initials"),
        "role": user.get("role"),
    }


def _find_tag(tags, tag_name):
    """Return the tag named *tag_name* (exact, then case-insensitive)."""
    for tag in tags:
        if tag.get("name") == tag_name:
            return tag
    lowered = tag_name.lower()
    for tag in tags:
        if str(tag.get("name", "")).lower() == lowered:
            return tag
    names = [t.get("name") for t in tags if t.get("name")]
    hint = f" Available: {', '.join(names)}" if names else " The space has no tags yet."
    raise NotFoundError(f"[ERROR] Tag '{tag_name}' not found.{hint}")


class ClickUpClient:
    """Async client bound to one workspace, one HTTP pool and one cache.

    Args:
        cache: Shared WorkspaceCache. A private one is created if omitted.
        http: httpx.AsyncClient to send requests with. Created (and closed by
            ``aclose``) if omitted.
        team_id: Workspace id; defaults to ``CLICKUP_TEAM_ID``.
    """

    def __init__(
        self,
        *,
        cache: WorkspaceCache | None = None,
        http: httpx.AsyncClient | None = None,
        team_id: str | None = None,
    ):
        self.cache = cache if cache is not None else WorkspaceCache()
        self._owns_http = http is None
        self._http = http if http is not None else httpx.AsyncClient()
        self._team_id = str(team_id) if team_id is not None else config.TEAM_ID

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def team_id(self) -> str:
        if not self._team_id:
            raise SetupError(
                "[SETUP_NEEDED] CLICKUP_TEAM_ID is not set. "
                "Use the numeric workspace id from your ClickUp URL."
            )
        return self._team_id

    async def _request(self, method, path, params=None, data=None, api_version="v2"):
        return await api.request(
            self._http, method, path, params=params, data=data, api_version=api_version
        )

    async def _get(self, path, params=None, api_version="v2"):
        return await api.get_object(self._http, path, params=params, api_version=api_version)

    # -------------------------------------------------------------------
    # Cached lookups
    # -------------------------------------------------------------------

    async def _fetch_hierarchy(self):
        spaces = (await self._get(f"/team/{self.team_id}/space", {"archived": "false"})).get(
            "spaces", []
        )

        async def _expand(space):
            folders, lists = await asyncio.gather(
                self._get(f"/space/{space['id']}/folder", {"archived": "false"}),
                self._get(f"/space/{space['id']}/list", {"archived": "false"}),
            )
            return {
                **space,
                "folders": folders.get("folders", []),
                "lists": lists.get("lists", []),
            }

        return {"spaces": list(await asyncio.gather(*(_expand(s) for s in spaces)))}

    async def hierarchy(self) -> dict[str, Any]:
        """Spaces with their folders (and folder lists) and folderless lists."""
        return await self.cache.get_or_fetch(
            cache_key(KIND_HIERARCHY, self.team_id),
            self._fetch_hierarchy,
            config.HIERARCHY_CACHE_TTL,
        )

    async def _spaces(self):
        return (await self.hierarchy())["spaces"]

    async def _folders(self, space_id=None):
        out = []
        for space in await self._spaces():
            if space_id is not None and str(space["id"]) != str(space_id):
                continue
            for folder in space.get("folders", []):
                out.append({**folder, "space": {"id": space["id"], "name": space.get("name")}})
        return out

    async def _lists(self, space_id=None, folder_id=None):
        out = []
        for space in await self._spaces():
            if space_id is not None and str(space["id"]) != str(space_id):
                continue
            space_ref = {"id": space["id"], "name": space.get("name")}
            if folder_id is None:
                for lst in space.get("lists", []):
                    out.append({**lst, "space": space_ref})
            for folder in space.get("folders", []):
                if folder_id is not None and str(folder["id"]) != str(folder_id):
                    continue
                folder_ref = {"id": folder["id"], "name": folder.get("name")}
                for lst in folder.get("lists", []):
                    out.append({**lst, "space": space_ref, "folder": folder_ref})
        return out

    async def _fetch_members(self):
        data = await self._get("/team")
        for team in data.get("teams", []):
            if str(team.get("id")) == self.team_id:
                return [_member_record(m) for m in team.get("members", [])]
        raise NotFoundError(
            f"[ERROR] Workspace {self.team_id} is not visible to this token. "
            "Check CLICKUP_TEAM_ID."
        )

    async def members(self) -> list[dict[str, Any]]:
        return await self.cache.get_or_fetch(
            cache_key(KIND_MEMBERS, self.team_id), self._fetch_members, config.MEMBER_CACHE_TTL
        )

    async def space_tags(self, space_id: str) -> list[dict[str, Any]]:
        async def _fetch():
            return (await self._get(f"/space/{space_id}/tag")).get("tags", [])

        return await self.cache.get_or_fetch(
            cache_key(KIND_SPACE_TAGS, space_id), _fetch, config.TAG_CACHE_TTL
        )

    async def task_types(self) -> list[dict[str, Any]]:
        async def _fetch():
            return (await self._get(f"/team/{self.team_id}/custom_item")).get("custom_items", [])

        return await self.cache.get_or_fetch(
            cache_key(KIND_TASK_TYPES, self.team_id), _fetch, config.HIERARCHY_CACHE_TTL
        )

    # -------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------

    async def resolve_space(self, space: str) -> str:
        return (await resolve(space, ReferenceKind.SPACE, self._spaces)).id

    async def _resolve_scope(self, space):
        return await self.resolve_space(space) if space is not None else None

    async def resolve_folder(self, folder: str, space: str | None = None) -> str:
        space_id = await self._resolve_scope(space)

        async def _lookup():
            return await self._folders(space_id)

        return (await resolve(folder, ReferenceKind.FOLDER, _lookup)).id

    async def resolve_list(self, lst: str, space: str | None = None) -> str:
        space_id = await self._resolve_scope(space)

        async def _lookup():
            return await self._lists(space_id)

        return (await resolve(lst, ReferenceKind.LIST, _lookup)).id

    async def resolve_task(self, task: str, lst: str | None = None) -> str:
        """Task IDs pass through; task names resolve only within a list."""
        text = str(task).strip()
        if looks_like_id(text, ReferenceKind.TASK):
            return text
        if lst is None:
            raise ValidationFailure(
                f"[ERROR] '{text}' is not a task ID. Pass list to find a task by name."
            )
        list_id = await self.resolve_list(lst)

        async def _lookup():
            data = await self._get(f"/list/{list_id}/task", {"include_closed": "true"})
            return data.get("tasks", [])

        return (await resolve(text, ReferenceKind.TASK, _lookup)).id

    def _task_params(self, task_id, params=None):
        out = dict(params or {})
        if is_custom_task_id(task_id):
            out.update({"custom_task_ids": "true", "team_id": self.team_id})
        return out

    async def resolve_assignees(self, refs) -> list[int]:
        """Resolve user references (ID, username, email) to numeric user IDs."""
        ids = []
        for ref in _split_refs(refs):
            resolved = await resolve(ref, ReferenceKind.USER, self.members)
            ids.append(int(resolved.id))
        return ids

    async def _resolve_task_type(self, task_type):
        text = str(task_type).strip()
        types = await self.task_types()
        for t in types:
            if str(t.get("id")) == text or str(t.get("name", "")).lower() == text.lower():
                return t["id"]
        names = [t.get("name") for t in types if t.get("name")]
        hint = f" Available: {', '.join(names)}" if names else ""
        raise NotFoundError(f"[ERROR] Task type '{task_type}' not found.{hint}")

    # -------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------

    async def find_members(
        self,
        *,
        query: str | None = None,
        assignees: list[str] | str | None = None,
        detail_level: str | None = None,
    ) -> dict[str, Any]:
        """List members, search them by a fragment, or resolve an assignee batch."""
        level = parse_detail_level(detail_level)
        members = await self.members()
        refs = _split_refs(assignees)
        if refs:
            resolved, unresolved = [], []
            for ref in refs:
                try:
                    hit = match_user(ref, members)
                except (NotFoundError, AmbiguousReferenceError) as e:
                    entry = {"input": ref, "error": str(e)}
                    if isinstance(e, AmbiguousReferenceError):
                        entry["candidates"] = e.candidates
                    unresolved.append(entry)
                    continue
                resolved.append(
                    {
                        "input": ref,
                        "id": int(hit.id),
                        "username": hit.name,
                        "matchedBy": hit.matched_by.value,
                    }
                )
            return {"resolved": resolved, "unresolved": unresolved}

        if query:
            needle = query.strip().lower()
            members = [
                m
                for m in members
                if needle in str(m.get("username") or "").lower()
                or needle in str(m.get("email") or "").lower()
            ]
        return shape_collection(members, "member", level, query=query or None)

    # -------------------------------------------------------------------
    # Containers
    # -------------------------------------------------------------------

    async def get_list(
        self, *, list: str, space: str | None = None, detail_level: str | None = None
    ) -> dict[str, Any]:
        list_id = await self.resolve_list(list, space)
        return shape_single(await self._get(f"/list/{list_id}"), "list", detail_level)

    async def get_folder(
        self, *, folder: str, space: str | None = None, detail_level: str | None = None
    ) -> dict[str, Any]:
        folder_id = await self.resolve_folder(folder, space)
        return shape_single(await self._get(f"/folder/{folder_id}"), "folder", detail_level)

    def _hierarchy_changed(self):
        self.cache.invalidate_prefix(cache_key(KIND_HIERARCHY) + ":")

    async def create_list(
        self,
        *,
        name: str,
        space: str | None = None,
        folder: str | None = None,
        content: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"name": name}
        if content is not None:
            body["content"] = content
        if folder is not None:
            folder_id = await self.resolve_folder(folder, space)
            result = await self._request("POST", f"/folder/{folder_id}/list", data=body)
        else:
            space_id = await self.resolve_space(space)
            result = await self._request("POST", f"/space/{space_id}/list", data=body)
        self._hierarchy_changed()
        return mutation_response("created", "list", result)

    async def update_list(
        self,
        *,
        list: str,
        space: str | None = None,
        name: str | None = None,
        content: str | None = None,
    ) -> dict[str, Any]:
        list_id = await self.resolve_list(list, space)
        body = {k: v for k, v in (("name", name), ("content", content)) if v is not None}
        result = await self._request("PUT", f"/list/{list_id}", data=body)
        self._hierarchy_changed()
        return mutation_response("updated", "list", result)

    async def delete_list(self, *, list: str, space: str | None = None) -> dict[str, Any]:
        list_id = await self.resolve_list(list, space)
        await self._request("DELETE", f"/list/{list_id}")
        self._hierarchy_changed()
        return mutation_response("deleted", "list", list_id=list_id)

    async def create_folder(self, *, space: str, name: str) -> dict[str, Any]:
        space_id = await self.resolve_space(space)
        result = await self._request("POST", f"/space/{space_id}/folder", data={"name": name})
        self._hierarchy_changed()
        return mutation_response("created", "folder", result)

    async def update_folder(
        self, *, folder: str, name: str, space: str | None = None
    ) -> dict[str, Any]:
        folder_id = await self.resolve_folder(folder, space)
        result = await self._request("PUT", f"/folder/{folder_id}", data={"name": name})
        self._hierarchy_changed()
        return mutation_response("updated", "folder", result)

    async def delete_folder(self, *, folder: str, space: str | None = None) -> dict[str, Any]:
        folder_id = await self.resolve_folder(folder, space)
        await self._request("DELETE", f"/folder/{folder_id}")
        self._hierarchy_changed()
        return mutation_response("deleted", "folder", folder_id=folder_id)

    # -------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------

    async def list_space_tags(
        self, *, space: str, detail_level: str | None = None
    ) -> dict[str, Any]:
        space_id = await self.resolve_space(space)
        tags = await self.space_tags(space_id)
        return shape_collection(tags, "tag", detail_level, spaceId=space_id)

    def _tags_changed(self, space_id):
        self.cache.invalidate(cache_key(KIND_SPACE_TAGS, space_id))

    async def create_space_tag(
        self, *, space: str, tag_name: str, color_command: str | None = None
    ) -> dict[str, Any]:
        space_id = await self.resolve_space(space)
        lowered = tag_name.lower()
        if any(str(t.get("name", "")).lower() == lowered for t in await self.space_tags(space_id)):
            raise ValidationFailure(f"[ERROR] Tag '{tag_name}' already exists in this space.")
        fg, bg = _DEFAULT_TAG_FG, _DEFAULT_TAG_BG
        if color_command:
            new_fg, new_bg = parse_color_command(color_command)
            fg, bg = new_fg or fg, new_bg or bg
        tag = {"name": tag_name, "tag_fg": fg, "tag_bg": bg}
        try:
            await self._request("POST", f"/space/{space_id}/tag", data={"tag": tag})
        finally:
            # A failed create may still have landed remotely.
            self._tags_changed(space_id)
        return mutation_response("created", "tag", tag, space_id=space_id)

    async def update_space_tag(
        self,
        *,
        space: str,
        tag_name: str,
        new_tag_name: str | None = None,
        color_command: str | None = None,
    ) -> dict[str, Any]:
        space_id = await self.resolve_space(space)
        current = _find_tag(await self.space_tags(space_id), tag_name)
        fg = current.get("tag_fg") or _DEFAULT_TAG_FG
        bg = current.get("tag_bg") or _DEFAULT_TAG_BG
        if color_command:
            new_fg, new_bg = parse_color_command(color_command)
            fg, bg = new_fg or fg, new_bg or bg
        tag = {"name": new_tag_name or current["name"], "tag_fg": fg, "tag_bg": bg}
        path = f"/space/{space_id}/tag/{urllib.parse.quote(current['name'], safe='')}"
        try:
            await self._request("PUT", path, data={"tag": tag})
        finally:
            self._tags_changed(space_id)
        return mutation_response(
            "updated", "tag", tag, space_id=space_id, previous_name=current["name"]
        )

    async def delete_space_tag(self, *, space: str, tag_name: str) -> dict[str, Any]:
        space_id = await self.resolve_space(space)
        current = _find_tag(await self.space_tags(space_id), tag_name)
        path = f"/space/{space_id}/tag/{urllib.parse.quote(current['name'], safe='')}"
        try:
            await self._request("DELETE", path, data={"tag": current})
        finally:
            self._tags_changed(space_id)
        return mutation_response("deleted", "tag", {"name": current["name"]}, space_id=space_id)

    async def _task_space_tag(self, task_id, tag_name):
        task = await self._get(f"/task/{task_id}", self._task_params(task_id))
        space_id = (task.get("space") or {}).get("id")
        if space_id is None:
            raise NotFoundError(f"[ERROR] Could not determine the space of task {task_id}.")
        return task, _find_tag(await self.space_tags(str(space_id)), tag_name)

    async def add_tag_to_task(
        self, *, task: str, tag_name: str, list: str | None = None
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        _, tag = await self._task_space_tag(task_id, tag_name)
        path = f"/task/{task_id}/tag/{urllib.parse.quote(tag['name'], safe='')}"
        await self._request("POST", path, params=self._task_params(task_id))
        return mutation_response("added", "tag", {"name": tag["name"]}, task_id=task_id)

    async def remove_tag_from_task(
        self, *, task: str, tag_name: str, list: str | None = None
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        task_data, tag = await self._task_space_tag(task_id, tag_name)
        on_task = {str(t.get("name", "")).lower() for t in task_data.get("tags") or []}
        if tag["name"].lower() not in on_task:
            raise NotFoundError(f"[ERROR] Task {task_id} does not have tag '{tag['name']}'.")
        path = f"/task/{task_id}/tag/{urllib.parse.quote(tag['name'], safe='')}"
        await self._request("DELETE", path, params=self._task_params(task_id))
        return mutation_response("removed", "tag", {"name": tag["name"]}, task_id=task_id)

    # -------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------

    async def search_tasks(
        self,
        *,
        list_id: str | None = None,
        list_name: str | None = None,
        statuses: list[str] | str | None = None,
        assignees: list[str] | str | None = None,
        tags: list[str] | str | None = None,
        include_closed: bool = False,
        limit: int | None = None,
        page: int = 0,
        detail_level: str | None = None,
    ) -> dict[str, Any]:
        """Search tasks across the workspace, or within one list."""
        level = parse_detail_level(detail_level)
        if limit is None:
            limit = config.SEARCH_DEFAULT_LIMIT
        if not 1 <= limit <= config.SEARCH_MAX_LIMIT:
            raise ValidationFailure(
                f"[ERROR] limit must be between 1 and {config.SEARCH_MAX_LIMIT}, got {limit}."
            )
        status_list = _split_refs(statuses)
        tag_list = _split_refs(tags)
        assignee_ids = await self.resolve_assignees(assignees)

        params: dict[str, Any] = {
            "page": page,
            "include_closed": "true" if include_closed else "false",
            "subtasks": "true",
            "order_by": "updated",
        }
        if status_list:
            params["statuses[]"] = status_list
        if assignee_ids:
            params["assignees[]"] = [str(i) for i in assignee_ids]
        if tag_list:
            params["tags[]"] = tag_list

        list_ref = list_id or list_name
        if list_ref is not None:
            resolved_list = await self.resolve_list(list_ref)
            data = await self._get(f"/list/{resolved_list}/task", params)
            scope = f"list {resolved_list}"
        else:
            data = await self._get(f"/team/{self.team_id}/task", params)
            scope = "workspace"

        tasks = data.get("tasks", [])
        has_more = len(tasks) > limit or data.get("last_page") is False
        note = None
        if not (status_list or assignee_ids or tag_list):
            note = (
                f"No filters given: showing up to {limit} "
                f"{'open and closed' if include_closed else 'open'} tasks in the {scope}, "
                "most recently updated first. Add statuses, assignees or tags to narrow down."
            )
        return shape_collection(
            tasks[:limit], "task", level, hasMore=has_more, limit=limit, page=page, note=note
        )

    async def get_task(
        self,
        *,
        task: str,
        list: str | None = None,
        include_subtasks: bool = False,
        detail_level: str | None = None,
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        params = self._task_params(task_id, {"include_subtasks": str(include_subtasks).lower()})
        return shape_single(await self._get(f"/task/{task_id}", params), "task", detail_level)

    async def create_task(
        self,
        *,
        list: str,
        name: str,
        description: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
        assignees: list[str] | str | None = None,
        tags: list[str] | str | None = None,
        task_type: str | None = None,
        parent: str | None = None,
    ) -> dict[str, Any]:
        list_id = await self.resolve_list(list)
        body: dict[str, Any] = {"name": name}
        if description is not None:
            body["markdown_description"] = description
        if status is not None:
            body["status"] = status
        if priority is not None:
            body["priority"] = _priority_id(priority)
        if due_date is not None:
            body["due_date"] = _parse_date_ms(due_date)
        assignee_ids = await self.resolve_assignees(assignees)
        if assignee_ids:
            body["assignees"] = assignee_ids
        tag_list = _split_refs(tags)
        if tag_list:
            body["tags"] = tag_list
        if task_type is not None:
            body["custom_item_id"] = await self._resolve_task_type(task_type)
        if parent is not None:
            body["parent"] = await self.resolve_task(parent, list_id)
        result = await self._request("POST", f"/list/{list_id}/task", data=body)
        return mutation_response("created", "task", result, list_id=list_id)

    async def update_task(
        self,
        *,
        task: str,
        list: str | None = None,
        name: str | None = None,
        description: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
        add_assignees: list[str] | str | None = None,
        remove_assignees: list[str] | str | None = None,
        task_type: str | None = None,
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if description is not None:
            body["markdown_description"] = description
        if status is not None:
            body["status"] = status
        if priority is not None:
            body["priority"] = _priority_id(priority)
        if due_date is not None:
            body["due_date"] = _parse_date_ms(due_date)
        add_ids = await self.resolve_assignees(add_assignees)
        rem_ids = await self.resolve_assignees(remove_assignees)
        if add_ids or rem_ids:
            body["assignees"] = {"add": add_ids, "rem": rem_ids}
        if task_type is not None:
            body["custom_item_id"] = await self._resolve_task_type(task_type)
        if not body:
            raise ValidationFailure("[ERROR] manage_task update: nothing to change.")
        result = await self._request(
            "PUT", f"/task/{task_id}", params=self._task_params(task_id), data=body
        )
        return mutation_response("updated", "task", result, changed=sorted(body))

    async def delete_task(self, *, task: str, list: str | None = None) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        await self._request("DELETE", f"/task/{task_id}", params=self._task_params(task_id))
        return mutation_response("deleted", "task", task_id=task_id)

    # -------------------------------------------------------------------
    # Comments and time tracking
    # -------------------------------------------------------------------

    async def get_task_comments(
        self, *, task: str, list: str | None = None, detail_level: str | None = None
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        data = await self._get(f"/task/{task_id}/comment", self._task_params(task_id))
        return shape_collection(data.get("comments", []), "comment", detail_level, taskId=task_id)

    async def create_task_comment(
        self,
        *,
        task: str,
        comment_text: str,
        list: str | None = None,
        notify_all: bool = False,
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        result = await self._request(
            "POST",
            f"/task/{task_id}/comment",
            params=self._task_params(task_id),
            data={"comment_text": comment_text, "notify_all": notify_all},
        )
        comment = {"id": result.get("id"), "comment_text": comment_text}
        return mutation_response("created", "comment", comment, task_id=task_id)

    async def get_time_entries(
        self, *, task: str, list: str | None = None, detail_level: str | None = None
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        params = self._task_params(task_id, {"task_id": task_id})
        data = await self._get(f"/team/{self.team_id}/time_entries", params)
        entries = data.get("data", [])
        total_ms = sum(max(0, int(e.get("duration") or 0)) for e in entries)
        return shape_collection(
            entries,
            "time_entry",
            detail_level,
            taskId=task_id,
            totalMinutes=round(total_ms / 60000, 1),
        )

    async def start_timer(
        self,
        *,
        task: str,
        list: str | None = None,
        description: str | None = None,
        billable: bool = False,
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        body: dict[str, Any] = {"tid": task_id, "billable": billable}
        if description:
            body["description"] = description
        result = await self._request(
            "POST",
            f"/team/{self.team_id}/time_entries/start",
            params=self._task_params(task_id),
            data=body,
        )
        return mutation_response("started", "time_entry", result.get("data"), task_id=task_id)

    async def stop_timer(self) -> dict[str, Any]:
        result = await self._request("POST", f"/team/{self.team_id}/time_entries/stop")
        return mutation_response("stopped", "time_entry", result.get("data"))

    async def add_time_entry(
        self,
        *,
        task: str,
        duration_minutes: int,
        list: str | None = None,
        start_date: str | None = None,
        description: str | None = None,
        billable: bool = False,
    ) -> dict[str, Any]:
        task_id = await self.resolve_task(task, list)
        duration_ms = duration_minutes * 60000
        if start_date is not None:
            start_ms = _parse_date_ms(start_date)
        else:
            start_ms = int(time.time() * 1000) - duration_ms
        body: dict[str, Any] = {
            "tid": task_id,
            "start": start_ms,
            "duration": duration_ms,
            "billable": billable,
        }
        if description:
            body["description"] = description
        result = await self._request(
            "POST",
            f"/team/{self.team_id}/time_entries",
            params=self._task_params(task_id),
            data=body,
        )
        return mutation_response("added", "time_entry", result.get("data"), task_id=task_id)

    # -------------------------------------------------------------------
    # Documents (v3)
    # -------------------------------------------------------------------

    def _require_documents(self):
        if not config.DOCUMENT_SUPPORT:
            raise SetupError(
                "[SETUP_NEEDED] Document tools are disabled. "
                "Set CLICKUP_DOCUMENT_SUPPORT=true to enable them."
            )
        return f"/workspaces/{self.team_id}/docs"

    async def list_documents(
        self,
        *,
        parent_id: str | None = None,
        parent_type: str | None = None,
        detail_level: str | None = None,
    ) -> dict[str, Any]:
        base = self._require_documents()
        params: dict[str, Any] = {}
        if parent_id is not None:
            params["parent_id"] = parent_id
        if parent_type is not None:
            params["parent_type"] = _doc_parent_type(parent_type)
        data = await self._get(base, params, api_version="v3")
        return shape_collection(
            data.get("docs", []),
            "document",
            detail_level,
            hasMore=bool(data.get("next_cursor")),
        )

    async def get_document(
        self, *, document_id: str, detail_level: str | None = None
    ) -> dict[str, Any]:
        base = self._require_documents()
        data = await self._get(f"{base}/{document_id}", api_version="v3")
        return shape_single(data, "document", detail_level)

    async def create_document(
        self,
        *,
        name: str,
        parent_id: str | None = None,
        parent_type: str | None = None,
        visibility: str = "PRIVATE",
        create_page: bool = True,
    ) -> dict[str, Any]:
        base = self._require_documents()
        visibility = visibility.upper()
        if visibility not in _DOC_VISIBILITY:
            raise ValidationFailure(
                f"[ERROR] Invalid visibility '{visibility}'. Valid: {', '.join(_DOC_VISIBILITY)}"
            )
        body: dict[str, Any] = {
            "name": name,
            "visibility": visibility,
            "create_page": create_page,
        }
        if parent_id is not None:
            body["parent"] = {"id": parent_id, "type": _doc_parent_type(parent_type)}
        result = await self._request("POST", base, data=body, api_version="v3")
        return mutation_response("created", "document", result)

    async def list_document_pages(
        self, *, document_id: str, detail_level: str | None = None
    ) -> dict[str, Any]:
        base = self._require_documents()
        result = await self._request(
            "GET", f"{base}/{document_id}/page_listing", api_version="v3"
        )
        pages = result if isinstance(result, list) else result.get("pages", [])
        return shape_collection(pages, "document_page", detail_level, documentId=document_id)

    async def get_document_page(
        self, *, document_id: str, page_id: str, detail_level: str | None = None
    ) -> dict[str, Any]:
        base = self._require_documents()
        data = await self._get(
            f"{base}/{document_id}/pages/{page_id}",
            {"content_format": "text/md"},
            api_version="v3",
        )
        return shape_single(data, "document_page", detail_level)

    async def create_document_page(
        self,
        *,
        document_id: str,
        name: str,
        content: str | None = None,
        parent_page_id: str | None = None,
    ) -> dict[str, Any]:
        base = self._require_documents()
        body: dict[str, Any] = {"name": name, "content_format": "text/md"}
        if content is not None:
            body["content"] = content
        if parent_page_id is not None:
            body["parent_page_id"] = parent_page_id
        result = await self._request(
            "POST", f"{base}/{document_id}/pages", data=body, api_version="v3"
        )
        return mutation_response("created", "document_page", result, document_id=document_id)

    async def update_document_page(
        self,
        *,
        document_id: str,
        page_id: str,
        name: str | None = None,
        content: str | None = None,
        content_edit_mode: str = "replace",
    ) -> dict[str, Any]:
        base = self._require_documents()
        body: dict[str, Any] = {"content_format": "text/md", "content_edit_mode": content_edit_mode}
        if name is not None:
            body["name"] = name
        if content is not None:
            body["content"] = content
        await self._request(
            "PUT", f"{base}/{document_id}/pages/{page_id}", data=body, api_version="v3"
        )
        page = {"id": page_id, "name": name}
        return mutation_response("updated", "document_page", page, document_id=document_id)

    # -------------------------------------------------------------------
    # Workspace
    # -------------------------------------------------------------------

    async def list_task_types(self, *, detail_level: str | None = None) -> dict[str, Any]:
        return shape_collection(await self.task_types(), "task_type", detail_level)

    async def cache_stats(self) -> dict[str, Any]:
        return {
            **self.cache.get_stats(),
            "ttl_seconds": {
                KIND_SPACE_TAGS: config.TAG_CACHE_TTL,
                KIND_HIERARCHY: config.HIERARCHY_CACHE_TTL,
                KIND_MEMBERS: config.MEMBER_CACHE_TTL,
                KIND_TASK_TYPES: config.HIERARCHY_CACHE_TTL,
            },
        }


def _doc_parent_type(value):
    key = str(value or "").strip().upper()
    if key.isdigit() and int(key) in config.DOC_PARENT_TYPES.values():
        return int(key)
    if key not in config.DOC_PARENT_TYPES:
        raise ValidationFailure(
            f"[ERROR] Invalid parent_type '{value}'. "
            f"Valid: {', '.join(config.DOC_PARENT_TYPES)}"
        )
    return config.DOC_PARENT_TYPES[key]
