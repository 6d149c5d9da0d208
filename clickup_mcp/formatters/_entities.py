"""Shapes for containers, tags, members, documents, comments, and time entries."""

from clickup_mcp.formatters._core import ABSENT, DetailLevel, Field, register_kind
from clickup_mcp.formatters._tasks import _ref, _timestamp

M, S, D = DetailLevel.MINIMAL, DetailLevel.STANDARD, DetailLevel.DETAILED


def _status_names(entity, level):
    statuses = entity.get("statuses")
    if not statuses:
        return ABSENT
    return [s.get("status") for s in statuses if isinstance(s, dict)]


def _nested_names(key):
    def extract(entity, level):
        children = entity.get(key)
        if children is None:
            return ABSENT
        if level >= D:
            return [{"id": c.get("id"), "name": c.get("name")} for c in children]
        return [c.get("name") for c in children]

    return extract


def _user_ref(key):
    def extract(entity, level):
        user = entity.get(key)
        if isinstance(user, dict):
            out = {"id": user.get("id"), "username": user.get("username")}
            if level >= D and user.get("email"):
                out["email"] = user["email"]
            return out
        return ABSENT if user is None else user

    return extract


def _duration_minutes(entry, level):
    raw = entry.get("duration")
    try:
        ms = int(raw)
    except (TypeError, ValueError):
        return ABSENT
    # Running timers report a negative duration.
    return round(ms / 60000, 1) if ms >= 0 else ABSENT


def _page_children(page, level):
    pages = page.get("pages")
    if not pages:
        return ABSENT
    return [{"id": p.get("id"), "name": p.get("name")} for p in pages]


def _page_content(page, level):
    content = page.get("content")
    if not content:
        return ABSENT
    return content


register_kind(
    "space",
    (
        Field("id", M, "id"),
        Field("name", M, "name"),
        Field("private", S, "private"),
        Field("archived", S, "archived"),
        Field("statuses", D, _status_names),
        Field("folders", D, _nested_names("folders")),
        Field("lists", D, _nested_names("lists")),
    ),
)

register_kind(
    "folder",
    (
        Field("id", M, "id"),
        Field("name", M, "name"),
        Field("space", S, _ref("space")),
        Field("task_count", S, "task_count"),
        Field("lists", S, _nested_names("lists")),
        Field("hidden", D, "hidden"),
        Field("archived", D, "archived"),
    ),
)

register_kind(
    "list",
    (
        Field("id", M, "id"),
        Field("name", M, "name"),
        Field("folder", S, _ref("folder")),
        Field("space", S, _ref("space")),
        Field("task_count", S, "task_count"),
        Field("content", D, "content"),
        Field("statuses", D, _status_names),
        Field("due_date", D, _timestamp("due_date")),
        Field("start_date", D, _timestamp("start_date")),
        Field("assignee", D, _user_ref("assignee")),
        Field("archived", D, "archived"),
    ),
)

register_kind(
    "tag",
    (
        Field("name", M, "name"),
        Field("tag_fg", S, "tag_fg"),
        Field("tag_bg", S, "tag_bg"),
        Field("creator", D, "creator"),
    ),
)

register_kind(
    "member",
    (
        Field("id", M, "id"),
        Field("username", M, "username"),
        Field("email", S, "email"),
        Field("role", D, "role"),
        Field("initials", D, "initials"),
    ),
)

register_kind(
    "task_type",
    (
        Field("id", M, "id"),
        Field("name", M, "name"),
        Field("name_plural", S, "name_plural"),
        Field("description", S, "description"),
    ),
)

register_kind(
    "document",
    (
        Field("id", M, "id"),
        Field("name", M, "name"),
        Field("parent", S, "parent"),
        Field("date_updated", S, _timestamp("date_updated")),
        Field("creator", D, "creator"),
        Field("date_created", D, _timestamp("date_created")),
        Field("public", D, "public"),
        Field("archived", D, "archived"),
    ),
)

register_kind(
    "document_page",
    (
        Field("id", M, "id"),
        Field("name", M, "name"),
        Field("parent_page_id", S, "parent_page_id"),
        Field("date_edited", S, _timestamp("date_edited")),
        Field("pages", S, _page_children),
        Field("content", D, _page_content),
        Field("doc_id", D, "doc_id"),
        Field("date_created", D, _timestamp("date_created")),
    ),
)

register_kind(
    "comment",
    (
        Field("id", M, "id"),
        Field("text", M, "comment_text"),
        Field("user", S, _user_ref("user")),
        Field("date", S, _timestamp("date")),
        Field("resolved", D, "resolved"),
        Field("reply_count", D, "reply_count"),
    ),
)

register_kind(
    "time_entry",
    (
        Field("id", M, "id"),
        Field("task", M, _ref("task")),
        Field("duration_minutes", M, _duration_minutes),
        Field("user", S, _user_ref("user")),
        Field("start", S, _timestamp("start")),
        Field("end", S, _timestamp("end")),
        Field("description", D, "description"),
        Field("billable", D, "billable"),
    ),
)
