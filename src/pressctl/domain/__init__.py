"""Domain layer — schema declarations, validation and list projection.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
