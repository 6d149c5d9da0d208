"""MCP server exposing ClickUpClient operations as tools.

Package structure:
  __init__.py            - FastMCP init, register() calls, re-exports, main()
  _core.py               - Client/cache ownership, _call dispatcher, tool exposure
  _tools_workspace.py    - find_members, list_task_types, cache_stats
  _tools_containers.py   - get_container, manage_container
  _tools_tasks.py        - search_tasks, get_task, manage_task, task_comments,
                           task_time_tracking
  _tools_tags.py         - manage_tags
  _tools_docs.py         - list_documents, manage_document, manage_document_page

Run: clickup-mcp   (or: python -m clickup_mcp.mcp_server)
Transport: stdio by default; set MCP_TRANSPORT=streamable-http for HTTP.
"""

from __future__ import annotations

import os

from mcp.server.fastmcp import FastMCP

from clickup_mcp.mcp_server import (
    _tools_containers,
    _tools_docs,
    _tools_tags,
    _tools_tasks,
    _tools_workspace,
)
from clickup_mcp.mcp_server._core import _lifespan

mcp = FastMCP(
    "clickup",
    lifespan=_lifespan,
    instructions=(
        "ClickUp workspace tools. "
        "Lists, spaces, folders and users may be given by ID or by name; "
        "a name that matches several entities fails and lists the candidates, "
        "so retry with one of their IDs. "
        "Task names resolve only within a list; prefer task IDs.\n"
        "Efficiency: detail_level='minimal' returns ids and names only. "
        "Every collection result carries metadata.estimatedTokens and "
        "metadata.hasMore where truncation applies."
    ),
)

for _mod in [_tools_workspace, _tools_containers, _tools_tasks, _tools_tags, _tools_docs]:
    _mod.register(mcp)

# ---------------------------------------------------------------------------
# Re-exports (tests import via mcp_mod.xxx)
# ---------------------------------------------------------------------------

# _core
from clickup_mcp.mcp_server._core import (  # noqa: E402, F401
    _ALLOWED_METHODS,
    _call,
    _close_client,
    _dispatch,
    _expose,
    _failure_message,
    _get_client,
)

# _tools_containers
from clickup_mcp.mcp_server._tools_containers import (  # noqa: E402, F401
    get_container,
    manage_container,
)

# _tools_docs
from clickup_mcp.mcp_server._tools_docs import (  # noqa: E402, F401
    list_documents,
    manage_document,
    manage_document_page,
)

# _tools_tags
from clickup_mcp.mcp_server._tools_tags import manage_tags  # noqa: E402, F401

# _tools_tasks
from clickup_mcp.mcp_server._tools_tasks import (  # noqa: E402, F401
    get_task,
    manage_task,
    search_tasks,
    task_comments,
    task_time_tracking,
)

# _tools_workspace
from clickup_mcp.mcp_server._tools_workspace import (  # noqa: E402, F401
    cache_stats,
    find_members,
    list_task_types,
)


def main():
    """Run the MCP server (stdio, or streamable-http when MCP_TRANSPORT says so)."""
    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    if transport == "streamable-http":
        mcp.settings.host = os.environ.get("MCP_HTTP_HOST", "127.0.0.1")
        mcp.settings.port = int(os.environ.get("MCP_HTTP_PORT", "8808"))
    mcp.run(transport=transport)
