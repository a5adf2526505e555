# src/comic_cms/db/__init__.py
"""Database configuration and utilities."""

from .gateway import BatchStatement, DataStore
from .session import SessionLocal, get_db, session_scope

__all__ = ["BatchStatement", "DataStore", "get_db", "SessionLocal", "session_scope"]
