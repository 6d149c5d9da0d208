"""Container tools: list and folder reads and mutations (2 tools)."""

from __future__ import annotations

from clickup_mcp import ToolResult
from clickup_mcp.mcp_server._core import _add_tool, _dispatch
from clickup_mcp.models import CONTAINER_READS, CONTAINER_REQUESTS


def _container_params(**kwargs) -> dict:
    return {
        "list": kwargs.get("list_id") or kwargs.get("list_name"),
        "folder": kwargs.get("folder_id") or kwargs.get("folder_name"),
        "space": kwargs.get("space_id") or kwargs.get("space_name"),
        "name": kwargs.get("name"),
        "content": kwargs.get("content"),
        "detail_level": kwargs.get("detail_level"),
    }


async def get_container(
    type: str,
    list_id: str | None = None,
    list_name: str | None = None,
    folder_id: str | None = None,
    folder_name: str | None = None,
    space_id: str | None = None,
    space_name: str | None = None,
    detail_level: str | None = None,
) -> ToolResult:
    """Get a list or folder by ID or name.

    Args:
        type: 'list' or 'folder'.
        space_id / space_name: Optional, narrows name lookups to one space.
    """
    params = _container_params(
        list_id=list_id,
        list_name=list_name,
        folder_id=folder_id,
        folder_name=folder_name,
        space_id=space_id,
        space_name=space_name,
        detail_level=detail_level,
    )
    return await _dispatch(CONTAINER_READS, type, params, "get_container")


async def manage_container(
    type: str,
    action: str,
    name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    folder_id: str | None = None,
    folder_name: str | None = None,
    space_id: str | None = None,
    space_name: str | None = None,
    content: str | None = None,
) -> ToolResult:
    """Create, update or delete a list or folder.

    Args:
        type: 'list' or 'folder'.
        action: create | update | delete.
        name: New name (create, rename).
        space_id / space_name: Parent space for create; narrows name lookups otherwise.
        folder_id / folder_name: Parent folder for list/create (omit for a folderless list).
        content: List description.
    """
    params = _container_params(
        name=name,
        list_id=list_id,
        list_name=list_name,
        folder_id=folder_id,
        folder_name=folder_name,
        space_id=space_id,
        space_name=space_name,
        content=content,
    )
    return await _dispatch(CONTAINER_REQUESTS, (type, action), params, "manage_container")


def register(mcp):
    """Register all container tools with the FastMCP instance."""
    _add_tool(mcp, get_container)
    _add_tool(mcp, manage_container)
