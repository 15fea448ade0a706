"""CategoryService — the category list that feeds post select options."""

from __future__ import annotations

import re

from sqlalchemy.exc import IntegrityError

from pressctl.infrastructure.repositories.records import RecordRepository
from pressctl.services.base import BaseService
from pressctl.services.result import ServiceResult, failure


def slugify(name: str) -> str:
    """Lowercase, hyphen-separated slug.

    Examples:
        >>> slugify("Breaking News!")
        'breaking-news'
    """
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class CategoryService(BaseService):
    """Create and list categories."""

    def add(self, name: str, *, slug: str | None = None) -> ServiceResult:
        op = "add_category"
        name = name.strip()
        slug = slug or slugify(name)
        if not name or not slug:
            return failure(op, "VALIDATION_FAILED", "Category name must not be empty")
        try:
            with self._site.transaction() as txn:
                category_id = txn.add_category(name, slug)
        except IntegrityError:
            return failure(op, "CONSTRAINT_VIOLATION", f"Category slug {slug!r} already exists")
        return ServiceResult(ok=True, op=op, data={"id": category_id, "name": name, "slug": slug})

    def list(self) -> ServiceResult:
        categories = RecordRepository(self._site.engine).list_categories()
        items = [{"id": cid, "name": name} for cid, name in categories.items()]
        return ServiceResult(
            ok=True,
            op="list_categories",
            data={"items": items, "count": len(items)},
        )
