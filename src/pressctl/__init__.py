"""pressctl — declarative content schemas for an admin panel."""

__version__ = "0.1.0"
