"""
Typed models for tool requests and the tool result envelope.

Each tool parameter object is parsed into one request variant, chosen by its
(scope, action) or action key. Anything that does not match a known variant
is a ValidationFailure. Every variant names the ClickUpClient method that
executes it; the variant's fields are that method's keyword arguments.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import MISSING, dataclass
from typing import Any, ClassVar

from clickup_mcp._utils import _to_json
from clickup_mcp.exceptions import ValidationFailure
from clickup_mcp.types import ToolEnvelope

# ---------------------------------------------------------------------------
# Result envelope
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContentItem:
    type: str
    text: str


@dataclass(frozen=True)
class ToolResult:
    """What every tool returns: one content item, plus the error flag."""

    content: tuple[ContentItem, ...]
    is_error: bool = False

    @classmethod
    def success(cls, payload: Any) -> ToolResult:
        text = payload if isinstance(payload, str) else _to_json(payload)
        return cls(content=(ContentItem("text", text),))

    @classmethod
    def failure(cls, message: str) -> ToolResult:
        return cls(content=(ContentItem("text", message),), is_error=True)

    @property
    def text(self) -> str:
        return self.content[0].text

    def to_dict(self) -> ToolEnvelope:
        return {
            "content": [{"type": c.type, "text": c.text} for c in self.content],
            "isError": self.is_error,
        }


# ---------------------------------------------------------------------------
# Request parsing
# ---------------------------------------------------------------------------


def _is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return not value
    return False


def _from_params(cls, params: dict, context: str):
    """Build *cls* from *params*, dropping blanks and enforcing required fields."""
    kwargs = {}
    missing = []
    for f in dataclasses.fields(cls):
        value = params.get(f.name)
        if _is_blank(value):
            if f.default is MISSING and f.default_factory is MISSING:
                missing.append(f.name)
            continue
        kwargs[f.name] = value.strip() if isinstance(value, str) else value
    if missing:
        raise ValidationFailure(f"[ERROR] {context} requires: {', '.join(missing)}.")
    return cls(**kwargs)


def parse_request(table: dict, key, params: dict, tool: str):
    """Pick the variant for *key* from *table* and build it from *params*."""
    cls = table.get(key)
    if cls is None:
        valid = sorted("/".join(k) if isinstance(k, tuple) else k for k in table)
        shown = "/".join(key) if isinstance(key, tuple) else key
        raise ValidationFailure(
            f"[ERROR] {tool}: unsupported '{shown}'. Valid: {', '.join(valid)}"
        )
    shown = "/".join(key) if isinstance(key, tuple) else key
    return _from_params(cls, params, f"{tool} {shown}")


def request_kwargs(request) -> dict:
    """Keyword arguments for the client method a request variant names."""
    return {f.name: getattr(request, f.name) for f in dataclasses.fields(request)}


# ---------------------------------------------------------------------------
# manage_tags: (scope, action)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListSpaceTags:
    operation: ClassVar[str] = "list_space_tags"
    space: str
    detail_level: str | None = None


@dataclass(frozen=True)
class CreateSpaceTag:
    operation: ClassVar[str] = "create_space_tag"
    space: str
    tag_name: str
    color_command: str | None = None


@dataclass(frozen=True)
class UpdateSpaceTag:
    operation: ClassVar[str] = "update_space_tag"
    space: str
    tag_name: str
    new_tag_name: str | None = None
    color_command: str | None = None

    def __post_init__(self):
        if self.new_tag_name is None and self.color_command is None:
            raise ValidationFailure(
                "[ERROR] manage_tags space/update needs new_tag_name or color_command."
            )


@dataclass(frozen=True)
class DeleteSpaceTag:
    operation: ClassVar[str] = "delete_space_tag"
    space: str
    tag_name: str


@dataclass(frozen=True)
class AddTaskTag:
    operation: ClassVar[str] = "add_tag_to_task"
    task: str
    tag_name: str
    list: str | None = None


@dataclass(frozen=True)
class RemoveTaskTag:
    operation: ClassVar[str] = "remove_tag_from_task"
    task: str
    tag_name: str
    list: str | None = None


TAG_REQUESTS = {
    ("space", "list"): ListSpaceTags,
    ("space", "create"): CreateSpaceTag,
    ("space", "update"): UpdateSpaceTag,
    ("space", "delete"): DeleteSpaceTag,
    ("task", "add"): AddTaskTag,
    ("task", "remove"): RemoveTaskTag,
}

# ---------------------------------------------------------------------------
# get_container: type; manage_container: (type, action)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GetList:
    operation: ClassVar[str] = "get_list"
    list: str
    space: str | None = None
    detail_level: str | None = None


@dataclass(frozen=True)
class GetFolder:
    operation: ClassVar[str] = "get_folder"
    folder: str
    space: str | None = None
    detail_level: str | None = None


@dataclass(frozen=True)
class CreateList:
    operation: ClassVar[str] = "create_list"
    name: str
    space: str | None = None
    folder: str | None = None
    content: str | None = None

    def __post_init__(self):
        if self.space is None and self.folder is None:
            raise ValidationFailure(
                "[ERROR] manage_container list/create needs a space or a folder."
            )


@dataclass(frozen=True)
class UpdateList:
    operation: ClassVar[str] = "update_list"
    list: str
    space: str | None = None
    name: str | None = None
    content: str | None = None

    def __post_init__(self):
        if self.name is None and self.content is None:
            raise ValidationFailure("[ERROR] manage_container list/update needs name or content.")


@dataclass(frozen=True)
class DeleteList:
    operation: ClassVar[str] = "delete_list"
    list: str
    space: str | None = None


@dataclass(frozen=True)
class CreateFolder:
    operation: ClassVar[str] = "create_folder"
    space: str
    name: str


@dataclass(frozen=True)
class UpdateFolder:
    operation: ClassVar[str] = "update_folder"
    folder: str
    name: str
    space: str | None = None


@dataclass(frozen=True)
class DeleteFolder:
    operation: ClassVar[str] = "delete_folder"
    folder: str
    space: str | None = None


CONTAINER_READS = {
    "list": GetList,
    "folder": GetFolder,
}

CONTAINER_REQUESTS = {
    ("list", "create"): CreateList,
    ("list", "update"): UpdateList,
    ("list", "delete"): DeleteList,
    ("folder", "create"): CreateFolder,
    ("folder", "update"): UpdateFolder,
    ("folder", "delete"): DeleteFolder,
}

# ---------------------------------------------------------------------------
# manage_task: action
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateTask:
    operation: ClassVar[str] = "create_task"
    list: str
    name: str
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: str | None = None
    assignees: Sequence[str] = ()
    tags: Sequence[str] = ()
    task_type: str | None = None
    parent: str | None = None


@dataclass(frozen=True)
class UpdateTask:
    operation: ClassVar[str] = "update_task"
    task: str
    list: str | None = None
    name: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: str | None = None
    add_assignees: Sequence[str] = ()
    remove_assignees: Sequence[str] = ()
    task_type: str | None = None


@dataclass(frozen=True)
class DeleteTask:
    operation: ClassVar[str] = "delete_task"
    task: str
    list: str | None = None


TASK_REQUESTS = {
    "create": CreateTask,
    "update": UpdateTask,
    "delete": DeleteTask,
}

# ---------------------------------------------------------------------------
# task_comments / task_time_tracking: action
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GetComments:
    operation: ClassVar[str] = "get_task_comments"
    task: str
    list: str | None = None
    detail_level: str | None = None


@dataclass(frozen=True)
class CreateComment:
    operation: ClassVar[str] = "create_task_comment"
    task: str
    comment_text: str
    list: str | None = None
    notify_all: bool = False


COMMENT_REQUESTS = {
    "get": GetComments,
    "create": CreateComment,
}


@dataclass(frozen=True)
class GetTimeEntries:
    operation: ClassVar[str] = "get_time_entries"
    task: str
    list: str | None = None
    detail_level: str | None = None


@dataclass(frozen=True)
class StartTimer:
    operation: ClassVar[str] = "start_timer"
    task: str
    list: str | None = None
    description: str | None = None
    billable: bool = False


@dataclass(frozen=True)
class StopTimer:
    operation: ClassVar[str] = "stop_timer"


@dataclass(frozen=True)
class AddTimeEntry:
    operation: ClassVar[str] = "add_time_entry"
    task: str
    duration_minutes: int
    list: str | None = None
    start_date: str | None = None
    description: str | None = None
    billable: bool = False

    def __post_init__(self):
        if not isinstance(self.duration_minutes, int) or self.duration_minutes <= 0:
            raise ValidationFailure("[ERROR] duration_minutes must be a positive integer.")


TIME_REQUESTS = {
    "get_entries": GetTimeEntries,
    "start": StartTimer,
    "stop": StopTimer,
    "add": AddTimeEntry,
}

# ---------------------------------------------------------------------------
# manage_document / manage_document_page: action
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GetDocument:
    operation: ClassVar[str] = "get_document"
    document_id: str
    detail_level: str | None = None


@dataclass(frozen=True)
class CreateDocument:
    operation: ClassVar[str] = "create_document"
    name: str
    parent_id: str | None = None
    parent_type: str | None = None
    visibility: str = "PRIVATE"
    create_page: bool = True

    def __post_init__(self):
        if (self.parent_id is None) != (self.parent_type is None):
            raise ValidationFailure(
                "[ERROR] manage_document create needs parent_id and parent_type together."
            )


DOCUMENT_REQUESTS = {
    "get": GetDocument,
    "create": CreateDocument,
}


@dataclass(frozen=True)
class ListPages:
    operation: ClassVar[str] = "list_document_pages"
    document_id: str
    detail_level: str | None = None


@dataclass(frozen=True)
class GetPage:
    operation: ClassVar[str] = "get_document_page"
    document_id: str
    page_id: str
    detail_level: str | None = None


@dataclass(frozen=True)
class CreatePage:
    operation: ClassVar[str] = "create_document_page"
    document_id: str
    name: str
    content: str | None = None
    parent_page_id: str | None = None


@dataclass(frozen=True)
class UpdatePage:
    operation: ClassVar[str] = "update_document_page"
    document_id: str
    page_id: str
    name: str | None = None
    content: str | None = None
    content_edit_mode: str = "replace"

    def __post_init__(self):
        if self.name is None and self.content is None:
            raise ValidationFailure("[ERROR] manage_document_page update needs name or content.")
        if self.content_edit_mode not in ("replace", "append", "prepend"):
            raise ValidationFailure(
                "[ERROR] content_edit_mode must be one of: replace, append, prepend."
            )


PAGE_REQUESTS = {
    "list": ListPages,
    "get": GetPage,
    "create": CreatePage,
    "update": UpdatePage,
}
