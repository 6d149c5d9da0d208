"""Response shaping package for clickup-mcp.

Re-exports all public names so consumers can do:
    from clickup_mcp.formatters import shape_collection

Importing the package registers every entity shape.
"""

from clickup_mcp.formatters import _entities, _tasks  # noqa: F401  (registers shapes)
from clickup_mcp.formatters._core import (
    ABSENT,
    DetailLevel,
    Field,
    entity_kinds,
    field_names,
    mutation_response,
    parse_detail_level,
    register_kind,
    shape,
    shape_collection,
    shape_single,
)
from clickup_mcp.formatters._tasks import TASK_FIELDS

__all__ = [
    "ABSENT",
    "DetailLevel",
    "Field",
    "TASK_FIELDS",
    "entity_kinds",
    "field_names",
    "mutation_response",
    "parse_detail_level",
    "register_kind",
    "shape",
    "shape_collection",
    "shape_single",
]
