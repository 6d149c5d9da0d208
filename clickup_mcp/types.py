"""
TypedDict definitions for clickup-mcp payloads.

These describe the JSON shapes tools return. Client methods keep
``dict[str, Any]`` signatures; the types here are for documentation and
for the few places that build a payload by hand.
"""

from __future__ import annotations

from typing import Any, TypedDict


class ContentItemDict(TypedDict):
    type: str
    text: str


class ToolEnvelope(TypedDict):
    """The wire shape of a tool result."""

    content: list[ContentItemDict]
    isError: bool


class CollectionMetadata(TypedDict, total=False):
    detailLevel: str
    count: int
    estimatedTokens: int
    hasMore: bool
    limit: int
    note: str


class CollectionPayload(TypedDict):
    items: list[dict[str, Any]]
    metadata: CollectionMetadata


class SinglePayload(TypedDict):
    data: dict[str, Any]
    metadata: CollectionMetadata


class CacheStats(TypedDict):
    hits: int
    misses: int
    coalesced: int
    entries: int
    in_flight: int
