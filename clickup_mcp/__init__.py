"""clickup-mcp - MCP tool server for ClickUp workspaces."""

from clickup_mcp.cache import WorkspaceCache
from clickup_mcp.client import ClickUpClient
from clickup_mcp.config import VERSION
from clickup_mcp.exceptions import (
    AmbiguousReferenceError,
    NotFoundError,
    RemoteFailure,
    SetupError,
    ToolError,
    ValidationFailure,
)
from clickup_mcp.models import ToolResult
from clickup_mcp.resolver import MatchedBy, ReferenceKind, ResolvedReference
from clickup_mcp.types import (
    CacheStats,
    CollectionPayload,
    SinglePayload,
    ToolEnvelope,
)

__all__ = [
    "VERSION",
    "ClickUpClient",
    "WorkspaceCache",
    "ToolResult",
    "ToolError",
    "NotFoundError",
    "AmbiguousReferenceError",
    "RemoteFailure",
    "ValidationFailure",
    "SetupError",
    "ReferenceKind",
    "MatchedBy",
    "ResolvedReference",
    "CacheStats",
    "CollectionPayload",
    "SinglePayload",
    "ToolEnvelope",
]
