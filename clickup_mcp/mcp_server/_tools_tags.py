"""Tag tools: space tag CRUD and task tagging (1 tool)."""

from __future__ import annotations

from clickup_mcp import ToolResult
from clickup_mcp.mcp_server._core import _add_tool, _dispatch
from clickup_mcp.models import TAG_REQUESTS


async def manage_tags(
    scope: str,
    action: str,
    space_id: str | None = None,
    space_name: str | None = None,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    tag_name: str | None = None,
    new_tag_name: str | None = None,
    color_command: str | None = None,
    detail_level: str | None = None,
) -> ToolResult:
    """Manage tags in a space, or on a task.

    Args:
        scope: 'space' or 'task'.
        action: space: list | create | update | delete. task: add | remove.
        space_id / space_name: Space by ID or name (scope=space).
        task_id / task_name: Task by ID, or by name together with list_id/list_name.
        tag_name: Tag to create, update, delete, add or remove.
        new_tag_name: Rename target (space/update).
        color_command: e.g. 'blue', 'bright green', 'white text on red', '#1e90ff'.
        detail_level: minimal | standard | detailed (space/list).

    Tags added to a task must already exist in the task's space.
    """
    params = {
        "space": space_id or space_name,
        "task": task_id or task_name,
        "list": list_id or list_name,
        "tag_name": tag_name,
        "new_tag_name": new_tag_name,
        "color_command": color_command,
        "detail_level": detail_level,
    }
    return await _dispatch(TAG_REQUESTS, (scope, action), params, "manage_tags")


def register(mcp):
    """Register all tag tools with the FastMCP instance."""
    _add_tool(mcp, manage_tags)
