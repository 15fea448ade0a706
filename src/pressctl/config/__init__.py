"""Configuration: frozen section models, TOML discovery, settings, logging."""
