"""Workspace tools: members, task types, cache statistics (3 tools)."""

from __future__ import annotations

from clickup_mcp import ToolResult
from clickup_mcp.mcp_server._core import _add_tool, _call


async def find_members(
    query: str | None = None,
    assignees: list[str] | None = None,
    detail_level: str | None = None,
) -> ToolResult:
    """Find workspace members.

    No arguments lists everyone; query filters by username/email fragment;
    assignees resolves a batch of IDs, usernames or emails to user IDs.
    """
    return await _call(
        "find_members", query=query, assignees=assignees, detail_level=detail_level
    )


async def list_task_types(detail_level: str | None = None) -> ToolResult:
    """List the workspace's custom task types (names usable as task_type)."""
    return await _call("list_task_types", detail_level=detail_level)


async def cache_stats() -> ToolResult:
    """Workspace cache hit/miss counters, entry count and TTLs."""
    return await _call("cache_stats")


def register(mcp):
    """Register all workspace tools with the FastMCP instance."""
    _add_tool(mcp, find_members)
    _add_tool(mcp, list_task_types)
    _add_tool(mcp, cache_stats)
