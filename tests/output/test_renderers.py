"""Tests for result formatting in human, quiet and JSON modes."""

from __future__ import annotations

import json

from pressctl.output.console import create_console, get_output, style_for_status
from pressctl.output.formatters import OutputSettings, format_result
from pressctl.output.renderers import render_quiet, render_result
from pressctl.services.result import ServiceResult, failure


def _listing() -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="list_records",
        data={
            "entity": "post",
            "columns": [
                {"name": "id", "label": "ID", "align": "center"},
                {"name": "name", "label": "Name", "align": "left"},
                {"name": "created_at", "label": "Date of creation", "align": "right"},
            ],
            "items": [
                {"id": "1 View </post/1>", "name": "Concert", "created_at": "2026-04-01"},
                {"id": "2 View </post/2>", "name": "Broken", "created_at": "#ERROR"},
            ],
            "count": 2,
            "total": 5,
        },
        meta={"limit": 2, "offset": 0, "sort": None},
    )


class TestConsole:
    def test_buffered_output(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_status_styles(self) -> None:
        assert style_for_status("publish") == "press.status.publish"
        assert style_for_status("archived") == ""


class TestRenderResult:
    def test_listing_uses_column_labels(self) -> None:
        output = render_result(_listing())
        assert "OK" in output
        assert "Date of creation" in output
        assert "Concert" in output
        assert "#ERROR" in output
        assert "2 of 5 shown" in output

    def test_listing_verbose_meta(self) -> None:
        assert "limit: 2" in render_result(_listing(), verbose=True)

    def test_empty_listing(self) -> None:
        result = ServiceResult(
            ok=True, op="list_comments", data={"columns": [], "items": [], "count": 0, "total": 0}
        )
        assert "0 of 0 shown" in render_result(result)

    def test_record(self) -> None:
        result = ServiceResult(
            ok=True,
            op="create_record",
            data={
                "id": 4,
                "entity": "post",
                "status": "draft",
                "content": {"name": "Concert"},
                "associations": {"tags": ["a", "b"], "category": []},
            },
        )
        output = render_result(result)
        assert "create_record" in output
        assert "name: Concert" in output
        assert "tags: a, b" in output
        assert "category: —" in output

    def test_error_lists_field_errors(self) -> None:
        result = failure(
            "create_record",
            "VALIDATION_FAILED",
            "name: is required",
            errors=[{"field": "name", "rule": "required", "message": "is required"}],
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "name: required (is required)" in output

    def test_form(self) -> None:
        result = ServiceResult(
            ok=True,
            op="edit_form",
            data={
                "entity": "post",
                "id": None,
                "sections": {
                    "main": [],
                    "fields": [
                        {"name": "name", "kind": "text", "required": True, "value": "x"},
                    ],
                    "options": [],
                },
            },
        )
        output = render_result(result)
        assert "[fields]" in output
        assert "[main]" not in output
        assert "*name (text): x" in output

    def test_schema(self) -> None:
        result = ServiceResult(
            ok=True,
            op="show_schema",
            data={
                "entity": "comment",
                "name": "Comments",
                "fields": [
                    {
                        "name": "content",
                        "kind": "textarea",
                        "section": "fields",
                        "required": True,
                        "max_length": None,
                    }
                ],
                "columns": [
                    {
                        "name": "approved",
                        "label": "Status",
                        "align": "left",
                        "sortable": False,
                        "filter": None,
                    }
                ],
            },
        )
        output = render_result(result)
        assert "Fields" in output
        assert "textarea" in output
        assert "Status" in output

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="init_site", data={"path": "/srv/site"})
        assert "path: /srv/site" in render_result(result)


class TestRenderQuiet:
    def test_ids_of_items(self) -> None:
        result = ServiceResult(
            ok=True, op="list_categories", data={"items": [{"id": "1"}, {"id": "2"}]}
        )
        assert render_quiet(result) == "1\n2"

    def test_single_id(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="create_record", data={"id": 7})) == "7"

    def test_no_id(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="init_site")) == "OK: init_site"

    def test_error(self) -> None:
        output = render_quiet(failure("get_record", "NOT_FOUND", "gone"))
        assert output.startswith("ERROR: get_record")
        assert "gone" in output


class TestFormatResult:
    def test_json_wins(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        parsed = json.loads(format_result(_listing(), settings=settings))
        assert parsed["op"] == "list_records"
        assert parsed["data"]["total"] == 5

    def test_quiet(self) -> None:
        result = ServiceResult(ok=True, op="create_record", data={"id": 3})
        assert format_result(result, settings=OutputSettings(quiet=True)) == "3"

    def test_default_is_rich(self) -> None:
        assert "2 of 5 shown" in format_result(_listing())
