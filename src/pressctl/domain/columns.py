"""List-view column declarations and accessor resolution."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from pressctl.domain.types import Align, FilterKind

RenderFn = Callable[[Any], Any]


class ColumnSpec(BaseModel):
    """One column of an entity's list view.

    ``render`` must be a pure function of the record.  When it is absent
    the cell value is read from ``accessor`` (a dotted path), which
    defaults to the column name.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    name: str
    label: str = ""
    accessor: str | None = None
    render: RenderFn | None = Field(default=None, exclude=True)
    sortable: bool = False
    filter: FilterKind | None = None
    align: Align = Align.LEFT
    width: str | None = None

    @property
    def path(self) -> str:
        """Dotted path the raw cell value is read from."""
        return self.accessor or self.name

    @property
    def display_label(self) -> str:
        return self.label or self.name.replace("_", " ").capitalize()


def resolve_path(record: Any, path: str) -> Any:
    """Read a dotted *path* from nested mappings and attributes.

    Missing segments resolve to ``None``.  Integer segments index into
    sequences, so ``"attachments.0"`` reads the first attachment.

    Examples:
        >>> resolve_path({"content": {"name": "x"}}, "content.name")
        'x'
        >>> resolve_path({"content": {}}, "content.name") is None
        True
    """
    current = record
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            current = getattr(current, segment, None)
    return current
