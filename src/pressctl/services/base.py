"""BaseService — abstract foundation for all pressctl services.

Every service receives a :class:`Site` at construction time. The Site
provides transactional access to the database and the schema registry.
Services own their transaction boundaries via ``self._site.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pressctl.infrastructure.site import Site


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class ResourceService(BaseService):
            def create(self, submitted: dict) -> ServiceResult:
                with self._site.transaction() as txn:
                    ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site
