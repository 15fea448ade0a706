"""List-view query parameters.

The list endpoint recognizes three filters (``status``, free-text
``search`` and a ``created`` date range) plus sort and pagination.
Filtering and ordering are carried out by the persistence layer; this
module only parses and checks the request.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, model_validator


class ListQuery(BaseModel):
    """Filter/sort/page parameters of one list request.

    ``sort`` names a sortable column; a leading ``-`` sorts descending.
    """

    model_config = {"frozen": True}

    status: str | None = None
    search: str | None = None
    created_from: date | None = None
    created_to: date | None = None
    sort: str | None = None
    limit: int = Field(default=20, ge=1)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> ListQuery:
        if self.created_from and self.created_to and self.created_from > self.created_to:
            msg = "created_from must not be after created_to"
            raise ValueError(msg)
        return self

    @property
    def sort_column(self) -> str | None:
        if not self.sort:
            return None
        return self.sort.lstrip("-")

    @property
    def descending(self) -> bool:
        return bool(self.sort) and self.sort.startswith("-")  # type: ignore[union-attr]
