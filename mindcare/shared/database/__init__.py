"""Database access for MindCare services.

Provides connection pooling, health checks, the schema readiness gate
and the repository base class for PostgreSQL integration.
"""

from .connection import (
    DatabaseConfig,
    ConnectionManager,
    database_enabled,
    get_connection_manager,
)
from .schema import ColumnSpec, SchemaGate, TableSpec
from .repository import BaseRepository, RepositoryError

__all__ = [
    "DatabaseConfig",
    "ConnectionManager",
    "database_enabled",
    "get_connection_manager",
    "ColumnSpec",
    "SchemaGate",
    "TableSpec",
    "BaseRepository",
    "RepositoryError",
]
