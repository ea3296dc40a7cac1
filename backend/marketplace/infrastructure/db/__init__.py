"""
Database Infrastructure Package for the Classifieds Marketplace

Exports database utilities and dependency providers.
"""

from marketplace.infrastructure.db.database import (
    DatabaseManager,
    get_db_manager,
    get_session,
    get_session_context,
    init_db,
    close_db,
)


__all__ = [
    "DatabaseManager",
    "get_db_manager",
    "get_session",
    "get_session_context",
    "init_db",
    "close_db",
]
