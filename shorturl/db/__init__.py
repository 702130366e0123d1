"""Database module for the URL shortener service."""
from shorturl.db.base import DatabaseHealthCheck, create_schema, get_engine
from shorturl.db.session import SessionManager
from shorturl.db.resilience import initialize_database_connection

__all__ = [
    "get_engine",
    "create_schema",
    "DatabaseHealthCheck",
    "SessionManager",
    "initialize_database_connection",
]
