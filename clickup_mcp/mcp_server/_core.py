"""Core helpers: client ownership, _call dispatcher, failure messages, tool exposure."""

from __future__ import annotations

import inspect
from contextlib import asynccontextmanager

from mcp.server.fastmcp.exceptions import ToolError as MCPToolError
from mcp.types import TextContent

from clickup_mcp import ClickUpClient, ToolResult, WorkspaceCache
from clickup_mcp.exceptions import AmbiguousReferenceError, RemoteFailure, ToolError
from clickup_mcp.models import parse_request, request_kwargs

_cache: WorkspaceCache | None = None
_client: ClickUpClient | None = None
_open_sessions = 0


def _get_client() -> ClickUpClient:
    """Return the server's ClickUpClient, creating it (and its cache) on first use."""
    global _cache, _client
    if _client is None:
        _cache = WorkspaceCache()
        _client = ClickUpClient(cache=_cache)
    return _client


async def _close_client() -> None:
    """Close the server's ClickUpClient, if one was created, and forget it."""
    global _cache, _client
    client, _client, _cache = _client, None, None
    if client is not None:
        await client.aclose()


@asynccontextmanager
async def _lifespan(server):
    """FastMCP lifespan: release the HTTP pool once the last session ends.

    Streamable HTTP enters the lifespan once per session, and every session
    shares the same client.
    """
    global _open_sessions
    _open_sessions += 1
    try:
        yield {}
    finally:
        _open_sessions -= 1
        if _open_sessions == 0:
            await _close_client()


_ALLOWED_METHODS = {
    "find_members",
    "get_list",
    "get_folder",
    "create_list",
    "update_list",
    "delete_list",
    "create_folder",
    "update_folder",
    "delete_folder",
    "list_space_tags",
    "create_space_tag",
    "update_space_tag",
    "delete_space_tag",
    "add_tag_to_task",
    "remove_tag_from_task",
    "search_tasks",
    "get_task",
    "create_task",
    "update_task",
    "delete_task",
    "get_task_comments",
    "create_task_comment",
    "get_time_entries",
    "start_timer",
    "stop_timer",
    "add_time_entry",
    "list_documents",
    "get_document",
    "create_document",
    "list_document_pages",
    "get_document_page",
    "create_document_page",
    "update_document_page",
    "list_task_types",
    "cache_stats",
}


def _failure_message(exc: Exception) -> str:
    """Human-readable failure text for any exception raised by an operation."""
    if isinstance(exc, AmbiguousReferenceError):
        return str(exc)
    if isinstance(exc, RemoteFailure):
        hint = (
            "Retrying later may succeed."
            if exc.retryable
            else "Retrying the same request will not help."
        )
        return f"{exc} {hint}"
    if isinstance(exc, ToolError):
        return str(exc)
    return f"[ERROR] Unexpected error: {type(exc).__name__}: {exc}"


async def _call(method_name: str, **kwargs) -> ToolResult:
    """Call a ClickUpClient method, converting every exception to a failure result."""
    if method_name not in _ALLOWED_METHODS:
        return ToolResult.failure(f"[ERROR] Unknown method: {method_name}")
    try:
        client = _get_client()
        payload = await getattr(client, method_name)(**kwargs)
    except Exception as e:
        return ToolResult.failure(_failure_message(e))
    return ToolResult.success(payload)


async def _dispatch(table: dict, key, params: dict, tool: str) -> ToolResult:
    """Parse *params* into the request variant for *key*, then run it."""
    try:
        request = parse_request(table, key, params, tool)
    except ToolError as e:
        return ToolResult.failure(_failure_message(e))
    return await _call(request.operation, **request_kwargs(request))


def _expose(fn):
    """Adapt a ToolResult-returning tool to FastMCP.

    Success becomes a single text content item. Failure is raised as
    FastMCP's ToolError, which it reports with ``isError: true``.
    """
    signature = inspect.signature(fn, eval_str=True)

    async def tool(**kwargs):
        result = await fn(**kwargs)
        if result.is_error:
            raise MCPToolError(result.text)
        return [TextContent(type="text", text=result.text)]

    tool.__name__ = fn.__name__
    tool.__qualname__ = fn.__qualname__
    tool.__doc__ = fn.__doc__
    tool.__module__ = fn.__module__
    tool.__signature__ = signature.replace(return_annotation=inspect.Signature.empty)
    tool.__annotations__ = {
        name: p.annotation
        for name, p in signature.parameters.items()
        if p.annotation is not inspect.Parameter.empty
    }
    return tool


def _add_tool(mcp, fn) -> None:
    mcp.add_tool(_expose(fn), name=fn.__name__, description=fn.__doc__, structured_output=False)
