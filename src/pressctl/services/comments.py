"""CommentService — comment intake and the moderation list."""

from __future__ import annotations

from pressctl.domain.projection import project
from pressctl.domain.validation import validate
from pressctl.entities.comment import ENTITY
from pressctl.infrastructure.repositories.records import CommentRepository
from pressctl.services.base import BaseService
from pressctl.services.result import ServiceResult, failure


class CommentService(BaseService):
    """Add, approve and list reader comments."""

    def add(
        self,
        content: str,
        *,
        post_id: int | None = None,
        user_id: int | None = None,
        approved: bool = False,
    ) -> ServiceResult:
        op = "add_comment"
        schema = self._site.registry.get_schema(ENTITY)
        vr = validate(schema, {"content": content, "approved": approved})
        if not vr.ok:
            message = "; ".join(f"{e.field}: {e.message}" for e in vr.errors)
            return failure(op, "VALIDATION_FAILED", message)

        with self._site.transaction() as txn:
            if post_id is not None and txn.load_record("post", post_id) is None:
                return failure(op, "NOT_FOUND", f"No post found with ID: {post_id}")
            comment = txn.add_comment(
                vr.data["content"],
                post_id=post_id,
                user_id=user_id,
                approved=vr.data["approved"],
            )
        return ServiceResult(ok=True, op=op, data=comment.to_dict())

    def set_approval(self, comment_id: int, approved: bool = True) -> ServiceResult:
        op = "approve_comment"
        with self._site.transaction() as txn:
            comment = txn.set_comment_approval(comment_id, approved)
        if comment is None:
            return failure(op, "NOT_FOUND", f"No comment found with ID: {comment_id}")
        return ServiceResult(ok=True, op=op, data=comment.to_dict())

    def list(
        self,
        *,
        approved: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> ServiceResult:
        """Moderation list, most recently edited first."""
        op = "list_comments"
        listing = self._site.settings.listing
        limit = min(limit or listing.default_limit, listing.max_limit)
        schema = self._site.registry.get_schema(ENTITY)

        repo = CommentRepository(self._site.engine)
        comments = repo.list_comments(approved=approved, limit=limit, offset=offset)
        rows = project(schema.columns, comments)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "entity": ENTITY,
                "columns": [
                    {"name": c.name, "label": c.display_label, "align": str(c.align)}
                    for c in schema.columns
                ],
                "items": rows.to_dicts(),
                "count": len(comments),
                "total": repo.count_comments(approved=approved),
            },
            warnings=[
                f"Row {e.row}: column {e.column!r} failed to render: {e.message}"
                for e in rows.errors()
            ],
        )
