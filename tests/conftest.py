"""Shared pytest fixtures and test helpers for pressctl tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from pressctl.config.settings import PressSettings
from pressctl.domain.registry import SchemaRegistry
from pressctl.entities import register_builtin_schemas
from pressctl.infrastructure.database.engine import init_database
from pressctl.infrastructure.site import Site


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Site:
    """Fully initialized site on a temp directory."""
    monkeypatch.delenv("PRESSCTL_CONFIG", raising=False)
    settings = PressSettings.from_cli(site_root=tmp_path)
    s = Site(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def registry() -> SchemaRegistry:
    """Unfrozen registry holding the built-in entities."""
    reg = SchemaRegistry()
    register_builtin_schemas(reg)
    return reg


@pytest.fixture
def _isolated_site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated site.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes.
    """
    monkeypatch.delenv("PRESSCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def post_submission(name: str = "Opening night", **overrides: Any) -> dict[str, Any]:
    """A post submission that passes every required rule."""
    data: dict[str, Any] = {
        "name": name,
        "title": f"{name} (SEO)",
        "body": "<p>Doors open at seven.</p>",
        "place": {"lat": 55.75, "lng": 37.61},
        "description": "Short description",
    }
    data.update(overrides)
    return data


def create_post(site: Site, name: str = "Opening night", **overrides: Any) -> dict[str, Any]:
    """Create a post via ResourceService, asserting success."""
    from pressctl.services.resource import ResourceService

    result = ResourceService.for_entity(site, "post").create(post_submission(name, **overrides))
    assert result.ok, result.error
    return result.data
