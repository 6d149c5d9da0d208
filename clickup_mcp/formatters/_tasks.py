"""Task shape: which task fields survive at each detail level."""

from clickup_mcp import config
from clickup_mcp._utils import _iso_from_ms
from clickup_mcp.formatters._core import ABSENT, DetailLevel, Field, register_kind

M, S, D = DetailLevel.MINIMAL, DetailLevel.STANDARD, DetailLevel.DETAILED


def _status(task, level):
    status = task.get("status")
    if isinstance(status, dict):
        return status.get("status", ABSENT)
    return ABSENT if status is None else status


def _priority(task, level):
    pri = task.get("priority")
    if isinstance(pri, dict):
        label = pri.get("priority")
        if label:
            return label
        pid = pri.get("id")
        try:
            return config.PRIORITY_LABELS.get(int(pid), ABSENT)
        except (TypeError, ValueError):
            return ABSENT
    return ABSENT if pri is None else pri


def _user(user, level):
    out = {"id": user.get("id"), "username": user.get("username")}
    if level >= D and user.get("email"):
        out["email"] = user["email"]
    return out


def _assignees(task, level):
    people = task.get("assignees")
    if people is None:
        return ABSENT
    return [_user(u, level) for u in people if isinstance(u, dict)]


def _creator(task, level):
    creator = task.get("creator")
    if not isinstance(creator, dict):
        return ABSENT
    return _user(creator, level)


def _ref(key):
    def extract(task, level):
        ref = task.get(key)
        if not isinstance(ref, dict) or ref.get("id") is None:
            return ABSENT
        out = {"id": ref["id"]}
        if ref.get("name"):
            out["name"] = ref["name"]
        return out

    return extract


def _timestamp(key):
    def extract(task, level):
        iso = _iso_from_ms(task.get(key))
        return ABSENT if iso is None else iso

    return extract


def _tags(task, level):
    tags = task.get("tags")
    if tags is None:
        return ABSENT
    return [t.get("name") if isinstance(t, dict) else t for t in tags]


def _description(task, level):
    text = task.get("text_content") or task.get("description")
    return text if text else ABSENT


def _custom_fields(task, level):
    fields = task.get("custom_fields")
    if not fields:
        return ABSENT
    out = [
        {"name": f.get("name"), "value": f["value"]}
        for f in fields
        if isinstance(f, dict) and f.get("value") is not None
    ]
    return out or ABSENT


def _checklists(task, level):
    lists = task.get("checklists")
    if not lists:
        return ABSENT
    out = []
    for cl in lists:
        items = cl.get("items") or []
        done = sum(1 for i in items if i.get("resolved"))
        out.append({"name": cl.get("name"), "done": done, "total": len(items)})
    return out


def _subtask_count(task, level):
    subs = task.get("subtasks")
    return ABSENT if subs is None else len(subs)


TASK_FIELDS = (
    Field("id", M, "id"),
    Field("name", M, "name"),
    Field("status", M, _status),
    Field("custom_id", S, "custom_id"),
    Field("assignees", S, _assignees),
    Field("priority", S, _priority),
    Field("due_date", S, _timestamp("due_date")),
    Field("list", S, _ref("list")),
    Field("tags", S, _tags),
    Field("date_updated", S, _timestamp("date_updated")),
    Field("url", D, "url"),
    Field("description", D, _description),
    Field("parent", D, "parent"),
    Field("folder", D, _ref("folder")),
    Field("space", D, _ref("space")),
    Field("creator", D, _creator),
    Field("date_created", D, _timestamp("date_created")),
    Field("date_closed", D, _timestamp("date_closed")),
    Field("start_date", D, _timestamp("start_date")),
    Field("time_estimate", D, "time_estimate"),
    Field("points", D, "points"),
    Field("custom_item_id", D, "custom_item_id"),
    Field("custom_fields", D, _custom_fields),
    Field("checklists", D, _checklists),
    Field("subtask_count", D, _subtask_count),
)

register_kind("task", TASK_FIELDS)
