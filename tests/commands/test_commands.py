"""End-to-end tests for the pressctl CLI via Click's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pressctl.cli import cli

_POST_ARGS = [
    "--set",
    "name=Opening night",
    "--set",
    "title=Opening night",
    "--set",
    "body=<p>Doors at seven</p>",
    "--set",
    "place=Moscow",
    "--set",
    "description=Short",
]


def _json(result) -> dict:
    return json.loads(result.output)


def _create_post(cli_runner: CliRunner, *extra: str) -> dict:
    result = cli_runner.invoke(cli, ["--json", "record", "create", "post", *_POST_ARGS, *extra])
    assert result.exit_code == 0, result.output
    return _json(result)["data"]


class TestRootGroup:
    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("record", "comment", "category", "schema", "init"):
            assert name in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert "0.1.0" in result.output

    def test_examples_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "--examples"])
        assert result.exit_code == 0
        assert "pressctl record create post" in result.output


@pytest.mark.usefixtures("_isolated_site")
class TestInitCommand:
    def test_init(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "init", "site", "--name", "City News"])
        assert result.exit_code == 0, result.output
        data = _json(result)["data"]
        assert data["name"] == "City News"
        assert (tmp_path / "site" / "pressctl.toml").is_file()

    def test_init_default_name(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "init", "blog"])
        assert result.exit_code == 0
        assert 'name = "blog"' in (tmp_path / "blog" / "pressctl.toml").read_text()


@pytest.mark.usefixtures("_isolated_site")
class TestRecordCommands:
    def test_create(self, cli_runner: CliRunner) -> None:
        data = _create_post(cli_runner, "--tag", "news", "--status", "publish")
        assert data["status"] == "publish"
        assert data["associations"]["tags"] == ["news"]

    def test_create_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "create", "post", *_POST_ARGS])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "name: Opening night" in result.output

    def test_create_invalid(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "record", "create", "post", "--set", "name="])
        assert result.exit_code == 1
        assert "VALIDATION_FAILED" in result.output

    def test_create_from_data_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        payload = {
            "name": "From file",
            "title": "From file",
            "body": "x",
            "place": {"lat": 1, "lng": 2},
            "description": "d",
            "tags": ["a", "b"],
        }
        path = tmp_path / "post.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        result = cli_runner.invoke(cli, ["--json", "record", "create", "post", "--data", str(path)])
        assert result.exit_code == 0, result.output
        data = _json(result)["data"]
        assert data["content"]["place"] == {"lat": 1, "lng": 2}
        assert data["associations"]["tags"] == ["a", "b"]

    def test_json_values_in_set(self, cli_runner: CliRunner) -> None:
        data = _create_post(cli_runner, "--set", "free=true")
        assert data["content"]["free"] is True

    def test_bad_assignment(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "create", "post", "--set", "novalue"])
        assert result.exit_code == 2

    def test_unknown_entity(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "list", "widget"])
        assert result.exit_code == 1

    def test_update_replaces_tags(self, cli_runner: CliRunner) -> None:
        created = _create_post(cli_runner, "--tag", "a", "--tag", "b")
        result = cli_runner.invoke(
            cli, ["--json", "record", "update", "post", str(created["id"]), "--tag", "c"]
        )
        assert result.exit_code == 0, result.output
        assert _json(result)["data"]["associations"]["tags"] == ["c"]

    def test_partial_update(self, cli_runner: CliRunner) -> None:
        created = _create_post(cli_runner, "--tag", "a")
        result = cli_runner.invoke(
            cli,
            ["--json", "record", "update", "post", str(created["id"]), "--set", "phone=123"],
        )
        assert result.exit_code == 0, result.output
        data = _json(result)["data"]
        assert data["fields_changed"] == ["phone"]
        assert data["content"]["name"] == "Opening night"
        assert data["associations"]["tags"] == ["a"]

    def test_get_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "get", "post", "99"])
        assert result.exit_code == 1

    def test_get(self, cli_runner: CliRunner) -> None:
        created = _create_post(cli_runner)
        result = cli_runner.invoke(cli, ["--json", "record", "get", "post", str(created["id"])])
        assert _json(result)["data"]["id"] == created["id"]

    def test_edit_blank_form(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "edit", "post"])
        assert result.exit_code == 0
        assert "[options]" in result.output
        assert "*description (textarea)" in result.output

    def test_list(self, cli_runner: CliRunner) -> None:
        _create_post(cli_runner, "--status", "publish")
        _create_post(cli_runner)
        result = cli_runner.invoke(
            cli, ["--json", "record", "list", "post", "--status", "publish"]
        )
        assert result.exit_code == 0, result.output
        data = _json(result)["data"]
        assert data["total"] == 1
        assert data["items"][0]["status"] == "publish"

    def test_list_table(self, cli_runner: CliRunner) -> None:
        _create_post(cli_runner)
        result = cli_runner.invoke(cli, ["record", "list", "post"])
        assert result.exit_code == 0
        assert "Date of creation" in result.output
        assert "1 of 1 shown" in result.output

    def test_list_quiet_ids(self, cli_runner: CliRunner) -> None:
        _create_post(cli_runner)
        result = cli_runner.invoke(cli, ["-q", "record", "list", "post"])
        assert result.output.strip().startswith("1 View")

    def test_list_bad_sort(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "list", "post", "--sort", "phone"])
        assert result.exit_code == 1


@pytest.mark.usefixtures("_isolated_site")
class TestCommentAndCategoryCommands:
    def test_comment_flow(self, cli_runner: CliRunner) -> None:
        post = _create_post(cli_runner)
        added = cli_runner.invoke(
            cli, ["--json", "comment", "add", "Nice", "--post", str(post["id"]), "--user", "2"]
        )
        assert added.exit_code == 0, added.output
        comment_id = _json(added)["data"]["id"]

        approved = cli_runner.invoke(cli, ["--json", "comment", "approve", str(comment_id)])
        assert _json(approved)["data"]["approved"] is True

        listing = cli_runner.invoke(cli, ["--json", "comment", "list", "--approved"])
        items = _json(listing)["data"]["items"]
        assert items[0]["approved"] == "✓"
        assert cli_runner.invoke(cli, ["--json", "comment", "list", "--pending"]).exit_code == 0

    def test_category_flow(self, cli_runner: CliRunner) -> None:
        added = cli_runner.invoke(cli, ["--json", "category", "add", "Live Music"])
        assert _json(added)["data"]["slug"] == "live-music"
        listing = cli_runner.invoke(cli, ["--json", "category", "list"])
        assert _json(listing)["data"]["count"] == 1

    def test_schema_commands(self, cli_runner: CliRunner) -> None:
        listing = cli_runner.invoke(cli, ["--json", "schema", "list"])
        assert _json(listing)["data"]["count"] == 2
        shown = cli_runner.invoke(cli, ["schema", "show", "post"])
        assert shown.exit_code == 0
        assert "Common Posts" in shown.output
        assert cli_runner.invoke(cli, ["schema", "show", "nope"]).exit_code == 1
