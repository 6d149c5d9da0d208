"""Document tools: ClickUp Docs and their pages (3 tools).

Enabled with CLICKUP_DOCUMENT_SUPPORT=true; otherwise every call reports a
setup error.
"""

from __future__ import annotations

from clickup_mcp import ToolResult
from clickup_mcp.mcp_server._core import _add_tool, _call, _dispatch
from clickup_mcp.models import DOCUMENT_REQUESTS, PAGE_REQUESTS


async def list_documents(
    parent_id: str | None = None,
    parent_type: str | None = None,
    detail_level: str | None = None,
) -> ToolResult:
    """List Docs in the workspace, optionally under one parent.

    Args:
        parent_type: SPACE | FOLDER | LIST | WORKSPACE | EVERYTHING.
    """
    return await _call(
        "list_documents",
        parent_id=parent_id,
        parent_type=parent_type,
        detail_level=detail_level,
    )


async def manage_document(
    action: str,
    document_id: str | None = None,
    name: str | None = None,
    parent_id: str | None = None,
    parent_type: str | None = None,
    visibility: str | None = None,
    create_page: bool = True,
    detail_level: str | None = None,
) -> ToolResult:
    """Get (action='get') or create (action='create') a Doc."""
    params = {
        "document_id": document_id,
        "name": name,
        "parent_id": parent_id,
        "parent_type": parent_type,
        "visibility": visibility,
        "create_page": create_page,
        "detail_level": detail_level,
    }
    return await _dispatch(DOCUMENT_REQUESTS, action, params, "manage_document")


async def manage_document_page(
    action: str,
    document_id: str,
    page_id: str | None = None,
    name: str | None = None,
    content: str | None = None,
    parent_page_id: str | None = None,
    content_edit_mode: str | None = None,
    detail_level: str | None = None,
) -> ToolResult:
    """Pages of a Doc: list | get | create | update. Content is markdown.

    Args:
        content_edit_mode: replace (default) | append | prepend, for update.
    """
    params = {
        "document_id": document_id,
        "page_id": page_id,
        "name": name,
        "content": content,
        "parent_page_id": parent_page_id,
        "content_edit_mode": content_edit_mode,
        "detail_level": detail_level,
    }
    return await _dispatch(PAGE_REQUESTS, action, params, "manage_document_page")


def register(mcp):
    """Register all document tools with the FastMCP instance."""
    _add_tool(mcp, list_documents)
    _add_tool(mcp, manage_document)
    _add_tool(mcp, manage_document_page)
