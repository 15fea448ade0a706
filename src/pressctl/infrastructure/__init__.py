"""Infrastructure layer — SQLite database and the Site unit of work.

This layer depends on stdlib, SQLAlchemy and the domain record types.
It must never import from services, commands, or output.
"""
