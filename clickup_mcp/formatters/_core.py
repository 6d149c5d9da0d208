"""Core shaping: detail levels, field-set registry, and payload wrappers.

Every entity kind registers an ordered tuple of ``Field``s, each introduced
at some detail level. A field is emitted at its level and every level above
it, so the fields at ``minimal`` are a subset of ``standard``, which are a
subset of ``detailed``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from clickup_mcp import config
from clickup_mcp._utils import estimate_tokens
from clickup_mcp.exceptions import ValidationFailure
from clickup_mcp.types import CollectionPayload, SinglePayload


class DetailLevel(IntEnum):
    MINIMAL = 0
    STANDARD = 1
    DETAILED = 2

    @property
    def label(self) -> str:
        return self.name.lower()


def parse_detail_level(value: str | DetailLevel | None) -> DetailLevel:
    """Accept a DetailLevel, its label, or None (configured default)."""
    if isinstance(value, DetailLevel):
        return value
    if value is None or value == "":
        value = config.DEFAULT_DETAIL_LEVEL
    try:
        return DetailLevel[str(value).strip().upper()]
    except KeyError:
        raise ValidationFailure(
            f"[ERROR] Invalid detail_level '{value}'. "
            f"Valid: {', '.join(config.VALID_DETAIL_LEVELS)}"
        ) from None


# Marker for "leave this field out"; never emitted.
ABSENT = object()


@dataclass(frozen=True)
class Field:
    """One output field: its name, the level it appears at, and where it comes from.

    ``source`` is either a key in the raw entity or a callable
    ``(entity, level) -> value`` that returns ABSENT when there is nothing to show.
    """

    name: str
    level: DetailLevel
    source: str | Callable[[dict, DetailLevel], Any]

    def extract(self, entity: dict, level: DetailLevel) -> Any:
        if callable(self.source):
            return self.source(entity, level)
        value = entity.get(self.source, ABSENT)
        return ABSENT if value is None else value


_REGISTRY: dict[str, tuple[Field, ...]] = {}


def register_kind(kind: str, fields: Iterable[Field]) -> None:
    fields = tuple(fields)
    names = [f.name for f in fields]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate field names for kind {kind!r}")
    _REGISTRY[kind] = fields


def entity_kinds() -> tuple[str, ...]:
    return tuple(_REGISTRY)


def field_names(kind: str, level: DetailLevel | str) -> tuple[str, ...]:
    """Names of every field *kind* may emit at *level*."""
    lvl = parse_detail_level(level)
    return tuple(f.name for f in _fields_for(kind) if f.level <= lvl)


def _fields_for(kind: str) -> tuple[Field, ...]:
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise ValidationFailure(f"[ERROR] No response shape for entity kind '{kind}'.") from None


def shape(entity: dict, kind: str, level: DetailLevel | str | None = None) -> dict:
    """Project *entity* down to the fields of *kind* at *level*. Pure."""
    lvl = parse_detail_level(level)
    out: dict[str, Any] = {}
    for f in _fields_for(kind):
        if f.level > lvl:
            continue
        value = f.extract(entity, lvl)
        if value is not ABSENT:
            out[f.name] = value
    return out


def _metadata(payload, level: DetailLevel, extra: dict) -> dict:
    meta: dict[str, Any] = {"detailLevel": level.label}
    meta.update({k: v for k, v in extra.items() if v is not None})
    meta["estimatedTokens"] = estimate_tokens(payload)
    return meta


def shape_collection(
    items: Iterable[dict], kind: str, level: DetailLevel | str | None = None, **extra: Any
) -> CollectionPayload:
    """Shape each item and wrap with a ``metadata`` block (count, size estimate)."""
    lvl = parse_detail_level(level)
    shaped = [shape(item, kind, lvl) for item in items]
    meta = {"count": len(shaped), **extra}
    return {"items": shaped, "metadata": _metadata(shaped, lvl, meta)}


def shape_single(
    entity: dict, kind: str, level: DetailLevel | str | None = None, **extra: Any
) -> SinglePayload:
    """Shape one entity as ``{"data": ..., "metadata": ...}``."""
    lvl = parse_detail_level(level)
    shaped = shape(entity, kind, lvl)
    return {"data": shaped, "metadata": _metadata(shaped, lvl, extra)}


def mutation_response(action: str, kind: str, entity: dict | None = None, **details: Any) -> dict:
    """Confirmation payload for a write. The entity is shaped at ``minimal``."""
    data: dict[str, Any] = {"ok": True, "action": action, "kind": kind}
    if entity:
        data[kind] = shape(entity, kind, DetailLevel.MINIMAL)
    data.update({k: v for k, v in details.items() if v is not None})
    return data
