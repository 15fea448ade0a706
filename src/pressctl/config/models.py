"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pressctl.toml only contains
overrides.  A fresh site needs only [site] name.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from pressctl.entities.routes import DEFAULT_ROUTES


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    name: str = "my-site"
    locale: str = "en"


class ListingConfig(BaseModel):
    """[listing] section."""

    model_config = {"frozen": True}

    default_limit: int = 20
    max_limit: int = 200
    excerpt_length: int = 70


class RoutesConfig(BaseModel):
    """[routes] section — URL patterns used by list-column links."""

    model_config = {"frozen": True}

    patterns: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ROUTES))


class PressConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    site: SiteConfig = Field(default_factory=SiteConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    routes: RoutesConfig = Field(default_factory=RoutesConfig)
