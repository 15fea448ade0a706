"""InstallService — set up a new site directory."""

from __future__ import annotations

import logging
from pathlib import Path

from pressctl.config.discovery import CONFIG_FILENAME, render_config
from pressctl.infrastructure.database.engine import DATA_DIRNAME, DB_FILENAME, init_database
from pressctl.services.result import ServiceResult, failure

logger = logging.getLogger(__name__)


class InstallService:
    """Writes ``pressctl.toml`` and creates the database."""

    @staticmethod
    def init_site(path: Path, *, name: str, locale: str = "en") -> ServiceResult:
        op = "init_site"
        warnings: list[str] = []
        if path.exists() and not path.is_dir():
            return failure(op, "INVALID_PATH", f"Not a directory: {path}")
        path.mkdir(parents=True, exist_ok=True)

        config_path = path / CONFIG_FILENAME
        if config_path.exists():
            warnings.append(f"{CONFIG_FILENAME} already exists; left unchanged")
        else:
            config_path.write_text(render_config(name, locale=locale), encoding="utf-8")

        engine = init_database(path)
        engine.dispose()
        logger.debug("Initialized site at %s", path)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(path),
                "name": name,
                "config": str(config_path),
                "database": str(path / DATA_DIRNAME / DB_FILENAME),
            },
            warnings=warnings,
        )
