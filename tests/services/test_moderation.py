"""Tests for CommentService, CategoryService, SchemaService and InstallService."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pressctl.config.discovery import CONFIG_FILENAME
from pressctl.config.settings import PressSettings
from pressctl.infrastructure.site import Site
from pressctl.services.comments import CommentService
from pressctl.services.install import InstallService
from pressctl.services.result import ServiceError, ServiceResult, failure
from pressctl.services.schemas import SchemaService
from pressctl.services.taxonomy import CategoryService, slugify
from tests.conftest import create_post


class TestServiceResult:
    def test_failure_helper(self) -> None:
        result = failure("get_record", "NOT_FOUND", "missing", record_id=3)
        assert not result.ok
        assert result.error == ServiceError(
            code="NOT_FOUND", message="missing", detail={"record_id": 3}
        )

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="list_records", data={"items": []}, meta={"limit": 5})
        parsed = json.loads(result.model_dump_json())
        assert parsed["data"] == {"items": []}
        assert parsed["meta"]["limit"] == 5
        assert parsed["error"] is None


class TestCommentService:
    def test_add_and_list(self, site: Site) -> None:
        post = create_post(site)
        svc = CommentService(site)
        added = svc.add("Great show", post_id=post["id"], user_id=9)
        assert added.ok
        assert added.data["approved"] is False

        listing = svc.list()
        (row,) = listing.data["items"]
        assert row["approved"] == "✗"
        assert row["content"] == f"Great show </admin/comments/{added.data['id']}/edit>"
        assert row["post_id"] == f"/admin/entities/post/{post['id']}/edit"
        assert row["user_id"] == "/admin/users/9/edit"
        assert row["updated_at"] == added.data["updated_at"]

    def test_missing_links_use_placeholder(self, site: Site) -> None:
        svc = CommentService(site)
        svc.add("Orphan")
        (row,) = svc.list().data["items"]
        assert row["post_id"] == "—"
        assert row["user_id"] == "—"

    def test_long_content_truncated(self, site: Site) -> None:
        svc = CommentService(site)
        svc.add("word " * 40)
        (row,) = svc.list().data["items"]
        excerpt = row["content"].split(" <")[0]
        assert excerpt.endswith("...")
        assert len(excerpt) <= 73

    def test_blank_content_rejected(self, site: Site) -> None:
        result = CommentService(site).add("   ")
        assert result.error.code == "VALIDATION_FAILED"

    def test_unknown_post(self, site: Site) -> None:
        result = CommentService(site).add("hi", post_id=404)
        assert result.error.code == "NOT_FOUND"

    def test_approval_filter(self, site: Site) -> None:
        svc = CommentService(site)
        first = svc.add("one")
        svc.add("two")
        approved = svc.set_approval(first.data["id"])
        assert approved.data["approved"] is True

        only_approved = svc.list(approved=True)
        assert only_approved.data["total"] == 1
        assert only_approved.data["items"][0]["approved"] == "✓"
        assert svc.list(approved=False).data["total"] == 1

    def test_revoke(self, site: Site) -> None:
        svc = CommentService(site)
        added = svc.add("one", approved=True)
        assert svc.set_approval(added.data["id"], approved=False).data["approved"] is False

    def test_approve_missing(self, site: Site) -> None:
        assert CommentService(site).set_approval(999).error.code == "NOT_FOUND"


class TestCategoryService:
    def test_slugify(self) -> None:
        assert slugify("Breaking News!") == "breaking-news"

    def test_add_and_list(self, site: Site) -> None:
        svc = CategoryService(site)
        added = svc.add("Live Music")
        assert added.data["slug"] == "live-music"
        listing = svc.list()
        assert listing.data["items"] == [{"id": str(added.data["id"]), "name": "Live Music"}]

    def test_duplicate_slug(self, site: Site) -> None:
        svc = CategoryService(site)
        svc.add("Music")
        result = svc.add("MUSIC")
        assert result.error.code == "CONSTRAINT_VIOLATION"

    def test_empty_name(self, site: Site) -> None:
        assert CategoryService(site).add("  ").error.code == "VALIDATION_FAILED"


class TestSchemaService:
    def test_list(self, site: Site) -> None:
        result = SchemaService(site).list()
        ids = [item["id"] for item in result.data["items"]]
        assert ids == ["post", "comment"]

    def test_show(self, site: Site) -> None:
        data = SchemaService(site).show("post").data
        assert data["title"] == "Common Posts"
        assert data["associations"] == {
            "category": "replace",
            "tags": "replace",
            "attachment": "replace",
        }
        names = [f["name"] for f in data["fields"]]
        assert names.count("open") == 1
        assert "id: unique:post" in data["rules"]

    def test_show_is_json_ready(self, site: Site) -> None:
        result = SchemaService(site).show("comment")
        assert json.loads(result.model_dump_json())["data"]["columns"][0]["rendered"] is True

    def test_unknown(self, site: Site) -> None:
        assert SchemaService(site).show("nope").error.code == "UNKNOWN_ENTITY"


class TestInstallService:
    def test_init_site(self, tmp_path: Path) -> None:
        target = tmp_path / "blog"
        result = InstallService.init_site(target, name="Blog")
        assert result.ok
        assert (target / CONFIG_FILENAME).read_text(encoding="utf-8").startswith("[site]")
        assert Path(result.data["database"]).is_file()
        assert result.warnings == []

    def test_quoted_site_name(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PRESSCTL_CONFIG", raising=False)
        name = "Bob's \"Best\" Site"
        assert InstallService.init_site(tmp_path, name=name).ok
        assert PressSettings.from_cli(site_root=tmp_path).site.name == name

    def test_existing_config_kept(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("# mine\n", encoding="utf-8")
        result = InstallService.init_site(tmp_path, name="Blog")
        assert result.ok
        assert len(result.warnings) == 1
        assert (tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8") == "# mine\n"

    def test_not_a_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "file"
        target.write_text("x", encoding="utf-8")
        assert InstallService.init_site(target, name="x").error.code == "INVALID_PATH"
