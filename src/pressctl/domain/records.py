"""Record and Comment — the mutable content instances an admin edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pressctl.domain.types import RecordStatus


@dataclass
class Record:
    """One stored instance of an entity.

    Declared form fields live in ``content``; ``associations`` maps an
    association name to its member set.  Attribute access falls through
    to ``content`` so column accessors can say ``name`` instead of
    ``content.name``.
    """

    entity: str
    id: int | None = None
    status: str = RecordStatus.DRAFT
    content: dict[str, Any] = field(default_factory=dict)
    associations: dict[str, set[str]] = field(default_factory=dict)
    publish_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails.
        content = self.__dict__.get("content")
        if content is not None and name in content:
            return content[name]
        raise AttributeError(name)

    @property
    def is_new(self) -> bool:
        return self.id is None

    def members(self, name: str) -> list[str]:
        """Sorted members of association *name*."""
        return sorted(self.associations.get(name, set()), key=_member_sort_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "entity": self.entity,
            "status": str(self.status),
            "content": dict(self.content),
            "associations": {name: self.members(name) for name in sorted(self.associations)},
            "publish_at": self.publish_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Comment:
    """A reader comment attached to a record."""

    content: str
    user_id: int | None = None
    post_id: int | None = None
    id: int | None = None
    approved: bool = False
    post: Record | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "post_id": self.post_id,
            "user_id": self.user_id,
            "content": self.content,
            "approved": self.approved,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def _member_sort_key(member: str) -> tuple[int, str]:
    # Numeric ids sort numerically, free-text tags alphabetically after them.
    return (0, member.zfill(20)) if member.isdigit() else (1, member)
