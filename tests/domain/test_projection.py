"""Tests for the list projector and column accessors."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from pressctl.domain.columns import ColumnSpec, resolve_path
from pressctl.domain.projection import RENDER_ERROR, RowView, project, project_row
from pressctl.domain.records import Record
from pressctl.domain.registry import SchemaRegistry


def _boom(record: Any) -> str:
    if record["id"] == 2:
        msg = "bad row"
        raise ValueError(msg)
    return f"#{record['id']}"


COLUMNS = (
    ColumnSpec(name="id"),
    ColumnSpec(name="label", render=_boom),
    ColumnSpec(name="name", accessor="content.name"),
)

RECORDS = [
    {"id": 1, "content": {"name": "one"}},
    {"id": 2, "content": {"name": "two"}},
    {"id": 3, "content": {}},
]


class TestResolvePath:
    def test_nested_mapping(self) -> None:
        assert resolve_path({"content": {"name": "x"}}, "content.name") == "x"

    def test_missing_segment_is_none(self) -> None:
        assert resolve_path({"content": {}}, "content.name.first") is None

    def test_sequence_index(self) -> None:
        assert resolve_path({"files": ["a", "b"]}, "files.1") == "b"
        assert resolve_path({"files": ["a"]}, "files.5") is None

    def test_attribute_access(self) -> None:
        record = Record(entity="post", id=4, content={"name": "x"})
        assert resolve_path(record, "id") == 4
        assert resolve_path(record, "name") == "x"
        assert resolve_path(record, "content.name") == "x"


class TestProject:
    def test_identity_columns(self) -> None:
        columns = (ColumnSpec(name="a"), ColumnSpec(name="b"))
        rows = project(columns, [{"a": 1, "b": 2}])
        assert rows == [{"a": 1, "b": 2}]

    def test_preserves_record_order(self) -> None:
        rows = project((ColumnSpec(name="id"),), [{"id": 3}, {"id": 1}, {"id": 2}])
        assert [r["id"] for r in rows] == [3, 1, 2]

    def test_preserves_column_order(self) -> None:
        rows = project((ColumnSpec(name="b"), ColumnSpec(name="a")), [{"a": 1, "b": 2}])
        assert list(rows[0]) == ["b", "a"]

    def test_empty_records(self) -> None:
        assert project(COLUMNS, []) == []

    def test_restartable_over_iterator(self) -> None:
        rows = project((ColumnSpec(name="id"),), iter([{"id": 1}, {"id": 2}]))
        assert [r["id"] for r in rows] == [1, 2]
        assert [r["id"] for r in rows] == [1, 2]
        assert len(rows) == 2

    def test_lazy_render(self) -> None:
        calls: list[Any] = []

        def render(record: Any) -> Any:
            calls.append(record)
            return record["id"]

        rows = project((ColumnSpec(name="id", render=render),), [{"id": 1}])
        assert calls == []
        list(rows)
        assert len(calls) == 1

    def test_negative_index(self) -> None:
        rows = project((ColumnSpec(name="id"),), [{"id": 1}, {"id": 2}])
        assert rows[-1]["id"] == 2

    def test_slice_keeps_row_positions(self) -> None:
        rows = project(COLUMNS, RECORDS)
        tail = rows[1:]
        assert [row["id"] for row in tail] == [2, 3]
        assert tail[0].error is not None
        assert tail[0].error.row == 1
        assert rows[::-1][0]["id"] == 3
        assert rows[5:] == []


class TestRenderErrors:
    def test_failure_isolated_to_row(self) -> None:
        rows = list(project(COLUMNS, RECORDS))
        assert rows[0] == {"id": 1, "label": "#1", "name": "one"}
        assert rows[2] == {"id": 3, "label": "#3", "name": None}
        assert rows[1]["id"] == 2
        assert rows[1]["label"] is RENDER_ERROR
        assert rows[1]["name"] is None

    def test_error_attached(self) -> None:
        projection = project(COLUMNS, RECORDS)
        errors = projection.errors()
        assert len(errors) == 1
        assert errors[0].column == "label"
        assert errors[0].row == 1
        assert "bad row" in errors[0].message

    def test_to_dicts_uses_marker_text(self) -> None:
        dicts = project(COLUMNS, RECORDS).to_dicts()
        assert dicts[1]["label"] == "#ERROR"

    def test_warning_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pressctl.domain.projection"):
            project_row(COLUMNS, RECORDS[1], 1)
        assert "Render failed" in caplog.text


class TestRowView:
    def test_equals_dict(self) -> None:
        assert RowView({"a": 1}) == {"a": 1}
        assert RowView({"a": 1}).ok

    def test_record_kept(self) -> None:
        row = project_row(COLUMNS, RECORDS[0])
        assert row.record is RECORDS[0]


class TestBuiltinColumns:
    def test_post_columns(self, registry: SchemaRegistry) -> None:
        schema = registry.get_schema("post")
        record = Record(
            entity="post",
            id=5,
            status="publish",
            content={"name": "Concert", "phone": "(555) 000-0000"},
            publish_at="2026-05-01T10:00:00+00:00",
            created_at="2026-04-01T09:30:00+00:00",
        )
        row = project(schema.columns, [record])[0]
        assert row["id"] == "5 View </post/5>"
        assert row["name"] == "Concert"
        assert row["status"] == "publish"
        assert row["phone"] == "(555) 000-0000"
        assert row["publish_at"] == "2026-05-01"
        assert row["created_at"] == "2026-04-01"

    def test_post_columns_tolerate_missing_dates(self, registry: SchemaRegistry) -> None:
        schema = registry.get_schema("post")
        row = project(schema.columns, [Record(entity="post", id=1)])[0]
        assert row.ok
        assert row["publish_at"] is None
        assert row["name"] is None
