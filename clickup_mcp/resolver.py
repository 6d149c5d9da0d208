"""
Identifier resolution: turn a human reference (ID, name, email, fragment)
into the canonical ID the ClickUp API expects.

Matching tiers for names:
  1. the raw value already has the ID shape for its kind -> used verbatim
  2. exactly one candidate spelled exactly like the raw value
  3. candidates containing the raw value, ignoring case; one hit resolves,
     several hits are ambiguous and are all reported back

Users additionally match by email (case-insensitive, exact) before tier 2.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from clickup_mcp.exceptions import AmbiguousReferenceError, NotFoundError, ValidationFailure


class ReferenceKind(str, Enum):
    LIST = "list"
    SPACE = "space"
    FOLDER = "folder"
    USER = "user"
    TASK = "task"


class MatchedBy(str, Enum):
    ID = "id"
    NAME = "name"
    EMAIL = "email"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class ResolvedReference:
    """Outcome of a successful resolution. Used once, never stored."""

    kind: ReferenceKind
    id: str
    matched_by: MatchedBy
    name: str | None = None


_NUMERIC_ID_RE = re.compile(r"^\d+$")
_TASK_ID_RE = re.compile(r"^(?=[a-z]*\d)[a-z0-9]{6,12}$")
_CUSTOM_TASK_ID_RE = re.compile(r"^[A-Z][A-Z0-9]*-\d+$")

_HINT_LIMIT = 10


def looks_like_id(raw: str, kind: ReferenceKind) -> bool:
    """True if *raw* already has the shape of a *kind* ID."""
    if kind is ReferenceKind.TASK:
        return bool(_TASK_ID_RE.match(raw) or _CUSTOM_TASK_ID_RE.match(raw))
    return bool(_NUMERIC_ID_RE.match(raw))


def is_custom_task_id(raw: str) -> bool:
    """True for workspace custom task IDs such as ``DEV-42``."""
    return bool(_CUSTOM_TASK_ID_RE.match(raw))


def _describe(candidate: dict, name_key: str) -> dict:
    return {"id": str(candidate.get("id")), "name": candidate.get(name_key)}


def _ambiguous(raw, kind, hits, name_key):
    described = [_describe(c, name_key) for c in hits]
    listing = ", ".join(f"'{d['name']}' ({d['id']})" for d in described)
    return AmbiguousReferenceError(
        f"[ERROR] '{raw}' matches {len(hits)} {kind.value}s: {listing}. "
        "Retry with the ID or the exact name.",
        candidates=described,
    )


def _not_found(raw, kind, candidates, name_key):
    names = [str(c.get(name_key)) for c in candidates if c.get(name_key)]
    hint = ""
    if names:
        shown = ", ".join(names[:_HINT_LIMIT])
        more = f" (+{len(names) - _HINT_LIMIT} more)" if len(names) > _HINT_LIMIT else ""
        hint = f" Available: {shown}{more}"
    return NotFoundError(f"[ERROR] No {kind.value} matching '{raw}'.{hint}")


def _match_name_tiers(raw, candidates, kind, name_keys):
    primary = name_keys[0]
    exact = [c for c in candidates if any(c.get(k) == raw for k in name_keys)]
    if len(exact) == 1:
        return exact[0], MatchedBy.NAME
    if len(exact) > 1:
        raise _ambiguous(raw, kind, exact, primary)

    needle = raw.lower()
    hits = [
        c
        for c in candidates
        if any(needle in str(c.get(k) or "").lower() for k in name_keys)
    ]
    if not hits:
        raise _not_found(raw, kind, candidates, primary)
    if len(hits) > 1:
        raise _ambiguous(raw, kind, hits, primary)
    hit = hits[0]
    same = any(str(hit.get(k) or "").lower() == needle for k in name_keys)
    return hit, MatchedBy.NAME if same else MatchedBy.FUZZY


def match_by_name(raw: str, candidates: Sequence[dict], kind: ReferenceKind) -> ResolvedReference:
    """Resolve *raw* against ``{"id", "name"}`` candidates."""
    hit, how = _match_name_tiers(raw, candidates, kind, ("name",))
    return ResolvedReference(kind, str(hit["id"]), how, hit.get("name"))


def match_user(raw: str, members: Sequence[dict]) -> ResolvedReference:
    """Resolve *raw* against ``{"id", "username", "email"}`` member records."""
    if "@" in raw:
        lowered = raw.lower()
        by_email = [m for m in members if str(m.get("email") or "").lower() == lowered]
        if len(by_email) == 1:
            m = by_email[0]
            return ResolvedReference(
                ReferenceKind.USER, str(m["id"]), MatchedBy.EMAIL, m.get("username")
            )
    hit, how = _match_name_tiers(raw, members, ReferenceKind.USER, ("username", "email"))
    return ResolvedReference(ReferenceKind.USER, str(hit["id"]), how, hit.get("username"))


async def resolve(
    raw: object,
    kind: ReferenceKind,
    lookup: Callable[[], Awaitable[Sequence[dict]]],
) -> ResolvedReference:
    """Resolve one reference, calling *lookup* only when *raw* is not ID-shaped."""
    text = str(raw).strip() if raw is not None else ""
    if not text:
        raise ValidationFailure(f"[ERROR] A {kind.value} reference cannot be empty.")
    if looks_like_id(text, kind):
        return ResolvedReference(kind, text, MatchedBy.ID)
    candidates = await lookup()
    if kind is ReferenceKind.USER:
        return match_user(text, candidates)
    return match_by_name(text, candidates, kind)
