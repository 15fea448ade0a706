"""List Projector — turn records into display rows.

:func:`project` is stateless per call.  It returns a :class:`Projection`,
a lazy sequence that evaluates render functions only while it is
iterated, and can be iterated again from the start.  Record order is
whatever the caller supplied; sorting belongs to the persistence layer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, overload

from pressctl.domain.columns import ColumnSpec, resolve_path
from pressctl.domain.errors import RenderError

logger = logging.getLogger(__name__)


class _RenderErrorMarker:
    """Sentinel cell value for a column whose render function raised."""

    _instance: _RenderErrorMarker | None = None

    def __new__(cls) -> _RenderErrorMarker:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "RENDER_ERROR"

    def __str__(self) -> str:
        return "#ERROR"


RENDER_ERROR = _RenderErrorMarker()


class RowView(Mapping[str, Any]):
    """Display-ready cells of one record, keyed by column name.

    Compares equal to a plain ``dict`` with the same cells.
    """

    __slots__ = ("_cells", "error", "record")

    def __init__(
        self,
        cells: dict[str, Any],
        *,
        record: Any = None,
        error: RenderError | None = None,
    ) -> None:
        self._cells = cells
        self.record = record
        self.error = error

    def __getitem__(self, key: str) -> Any:
        return self._cells[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        suffix = f", error={self.error.message!r}" if self.error else ""
        return f"RowView({self._cells!r}{suffix})"

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of cells; error markers become their string form."""
        return {k: (str(v) if v is RENDER_ERROR else v) for k, v in self._cells.items()}


def project_row(columns: Sequence[ColumnSpec], record: Any, index: int = 0) -> RowView:
    """Project one *record*.  A raising render function aborts the row."""
    cells: dict[str, Any] = {}
    for position, column in enumerate(columns):
        if column.render is None:
            cells[column.name] = resolve_path(record, column.path)
            continue
        try:
            cells[column.name] = column.render(record)
        except Exception as exc:
            logger.warning(
                "Render failed for column %r on row %d: %s", column.name, index, exc
            )
            cells[column.name] = RENDER_ERROR
            for skipped in columns[position + 1 :]:
                cells[skipped.name] = None
            error = RenderError(column=column.name, row=index, message=str(exc))
            return RowView(cells, record=record, error=error)
    return RowView(cells, record=record)


class _Replayable:
    """Cache a one-shot iterator so it can be walked more than once."""

    def __init__(self, source: Iterator[Any]) -> None:
        self._source = source
        self._seen: list[Any] = []
        self._exhausted = False

    def __iter__(self) -> Iterator[Any]:
        index = 0
        while True:
            if index < len(self._seen):
                yield self._seen[index]
                index += 1
                continue
            if self._exhausted:
                return
            try:
                item = next(self._source)
            except StopIteration:
                self._exhausted = True
                return
            self._seen.append(item)


class Projection(Sequence[RowView]):
    """Lazy, restartable sequence of :class:`RowView`.

    Iteration re-runs the projection from the first record.  Indexing
    and ``len()`` materialize the records (not the rows) as needed.
    """

    def __init__(self, columns: Iterable[ColumnSpec], records: Iterable[Any]) -> None:
        self.columns: tuple[ColumnSpec, ...] = tuple(columns)
        if iter(records) is records:
            records = _Replayable(records)  # type: ignore[arg-type]
        self._records = records

    def __iter__(self) -> Iterator[RowView]:
        for index, record in enumerate(self._records):
            yield project_row(self.columns, record, index)

    def _materialized(self) -> list[Any]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._materialized())

    @overload
    def __getitem__(self, index: int) -> RowView: ...

    @overload
    def __getitem__(self, index: slice) -> list[RowView]: ...

    def __getitem__(self, index: int | slice) -> RowView | list[RowView]:
        records = self._materialized()
        if isinstance(index, slice):
            positions = range(len(records))[index]
            return [project_row(self.columns, records[i], i) for i in positions]
        if index < 0:
            index += len(records)
        return project_row(self.columns, records[index], index)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Projection, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def errors(self) -> list[RenderError]:
        """Render errors of every failed row."""
        return [row.error for row in self if row.error is not None]

    def to_dicts(self) -> list[dict[str, Any]]:
        return [row.to_dict() for row in self]


def project(columns: Iterable[ColumnSpec], records: Iterable[Any]) -> Projection:
    """Apply *columns* to *records*, returning a lazy row sequence."""
    return Projection(columns, records)
