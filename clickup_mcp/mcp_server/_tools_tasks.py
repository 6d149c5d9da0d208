"""Task tools: search, read, mutations, comments, time tracking (5 tools)."""

from __future__ import annotations

from clickup_mcp import ToolResult
from clickup_mcp.mcp_server._core import _add_tool, _call, _dispatch
from clickup_mcp.models import COMMENT_REQUESTS, TASK_REQUESTS, TIME_REQUESTS


async def search_tasks(
    list_id: str | None = None,
    list_name: str | None = None,
    statuses: list[str] | None = None,
    assignees: list[str] | None = None,
    tags: list[str] | None = None,
    include_closed: bool = False,
    limit: int | None = None,
    page: int = 0,
    detail_level: str | None = None,
) -> ToolResult:
    """Search tasks across the workspace, or in one list (list_id / list_name).

    Args:
        assignees: User IDs, usernames or emails.
        limit: Max tasks to return (default 25, max 100). metadata.hasMore
            tells if more matched.
        detail_level: minimal | standard | detailed.
    """
    return await _call(
        "search_tasks",
        list_id=list_id,
        list_name=list_name,
        statuses=statuses,
        assignees=assignees,
        tags=tags,
        include_closed=include_closed,
        limit=limit,
        page=page,
        detail_level=detail_level,
    )


async def get_task(
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    include_subtasks: bool = False,
    detail_level: str | None = None,
) -> ToolResult:
    """Get one task by ID (or custom ID like DEV-42), or by name within a list."""
    task = task_id or task_name
    if not task:
        return ToolResult.failure("[ERROR] get_task requires task_id or task_name.")
    return await _call(
        "get_task",
        task=task,
        list=list_id or list_name,
        include_subtasks=include_subtasks,
        detail_level=detail_level,
    )


async def manage_task(
    action: str,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    name: str | None = None,
    description: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    due_date: str | None = None,
    assignees: list[str] | None = None,
    add_assignees: list[str] | None = None,
    remove_assignees: list[str] | None = None,
    tags: list[str] | None = None,
    task_type: str | None = None,
    parent: str | None = None,
) -> ToolResult:
    """Create, update or delete a task.

    Args:
        action: create | update | delete.
        list_id / list_name: Target list (create), or scope for task_name lookups.
        priority: urgent | high | normal | low.
        due_date: YYYY-MM-DD.
        assignees: On create. Use add_assignees / remove_assignees on update.
        task_type: Custom task type name (see list_task_types).
    """
    params = {
        "task": task_id or task_name,
        "list": list_id or list_name,
        "name": name,
        "description": description,
        "status": status,
        "priority": priority,
        "due_date": due_date,
        "assignees": assignees,
        "add_assignees": add_assignees,
        "remove_assignees": remove_assignees,
        "tags": tags,
        "task_type": task_type,
        "parent": parent,
    }
    return await _dispatch(TASK_REQUESTS, action, params, "manage_task")


async def task_comments(
    action: str,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    comment_text: str | None = None,
    notify_all: bool = False,
    detail_level: str | None = None,
) -> ToolResult:
    """Read (action='get') or add (action='create') comments on a task."""
    params = {
        "task": task_id or task_name,
        "list": list_id or list_name,
        "comment_text": comment_text,
        "notify_all": notify_all,
        "detail_level": detail_level,
    }
    return await _dispatch(COMMENT_REQUESTS, action, params, "task_comments")


async def task_time_tracking(
    action: str,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    duration_minutes: int | None = None,
    start_date: str | None = None,
    description: str | None = None,
    billable: bool = False,
    detail_level: str | None = None,
) -> ToolResult:
    """Time tracking on a task.

    Args:
        action: get_entries | start | stop | add.
        duration_minutes: Required for add.
        start_date: YYYY-MM-DD for add; defaults to ending now.
    """
    params = {
        "task": task_id or task_name,
        "list": list_id or list_name,
        "duration_minutes": duration_minutes,
        "start_date": start_date,
        "description": description,
        "billable": billable,
        "detail_level": detail_level,
    }
    return await _dispatch(TIME_REQUESTS, action, params, "task_time_tracking")


def register(mcp):
    """Register all task tools with the FastMCP instance."""
    _add_tool(mcp, search_tasks)
    _add_tool(mcp, get_task)
    _add_tool(mcp, manage_task)
    _add_tool(mcp, task_comments)
    _add_tool(mcp, task_time_tracking)
