"""Base repository pattern for database operations.

Repositories talk to PostgreSQL when given a ConnectionManager and fall
back to a thread-safe in-memory store otherwise (local development and
tests). Both backends expose the same operations, so services never
know which one they are using.
"""
import dataclasses
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from mindcare.shared.errors import InternalError
from .connection import ConnectionManager
from .schema import SchemaGate, TableSpec

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RepositoryError(InternalError):
    """Base exception for repository errors."""
    pass


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository with common operations.

    Subclasses describe their table with a TableSpec and implement
    entity conversion, while inheriting:
    - Backend selection (PostgreSQL or memory)
    - The schema readiness gate
    - Insert, lookup and ordered listing
    """

    table: TableSpec

    def __init__(self, connection_manager: Optional[ConnectionManager] = None):
        """Initialize repository.

        Args:
            connection_manager: Database connection manager; None keeps
                entities in memory
        """
        self.connection_manager = connection_manager
        self.schema_gate = SchemaGate(connection_manager, self.table)

        self._memory_store: Dict[int, T] = {}
        self._memory_ids = itertools.count(1)
        self._memory_lock = threading.Lock()

        logger.info(
            "REPOSITORY_INITIALIZED",
            extra={
                "table_name": self.table.name,
                "backend": "memory" if self.uses_memory else "postgresql",
            }
        )

    @property
    def uses_memory(self) -> bool:
        return self.connection_manager is None

    @property
    def select_columns(self) -> str:
        return ", ".join(self.table.column_names)

    @abstractmethod
    def _row_to_entity(self, row: tuple) -> T:
        """Convert a row (columns in TableSpec order) to an entity."""
        pass

    @abstractmethod
    def _entity_to_params(self, entity: T) -> Dict[str, Any]:
        """Convert an entity to insert parameters, without the id."""
        pass

    def ensure_schema(self) -> None:
        """Run the one-time schema gate for this repository's table."""
        self.schema_gate.ensure()

    def insert(self, entity: T) -> T:
        """Insert a new entity and return it with its assigned id.

        Args:
            entity: Entity whose id is ignored

        Returns:
            Stored entity
        """
        if self.uses_memory:
            with self._memory_lock:
                stored = dataclasses.replace(entity, id=next(self._memory_ids))
                self._memory_store[stored.id] = stored
            return stored

        params = self._entity_to_params(entity)
        columns = list(params.keys())
        placeholders = ", ".join(["%s"] * len(columns))

        query = (
            f"INSERT INTO {self.table.name} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING {self.select_columns}"
        )

        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, list(params.values()))
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RepositoryError(f"Insert into {self.table.name} returned no row")
        return self._row_to_entity(row)

    def find_by_id(self, entity_id: int) -> Optional[T]:
        """Find entity by ID.

        Args:
            entity_id: Entity identifier

        Returns:
            Entity if found, None otherwise
        """
        if self.uses_memory:
            return self._memory_store.get(entity_id)

        rows = self._fetch(
            f"SELECT {self.select_columns} FROM {self.table.name} WHERE id = %s",
            (entity_id,)
        )
        return rows[0] if rows else None

    def count(self) -> int:
        """Count total entities."""
        if self.uses_memory:
            return len(self._memory_store)

        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT COUNT(*) FROM {self.table.name}")
                row = cur.fetchone()

        return row[0] if row else 0

    def _fetch(self, query: str, params: Sequence[Any]) -> List[T]:
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                rows = cur.fetchall()

        return [self._row_to_entity(row) for row in rows]

    def _memory_select(
        self,
        predicate: Callable[[T], bool],
        sort_key: Callable[[T], Any],
        limit: int,
    ) -> List[T]:
        with self._memory_lock:
            matches = [e for e in self._memory_store.values() if predicate(e)]
        matches.sort(key=sort_key, reverse=True)
        return matches[:limit]

    def _memory_replace(self, entity_id: int, **changes: Any) -> Optional[T]:
        with self._memory_lock:
            current = self._memory_store.get(entity_id)
            if current is None:
                return None
            updated = dataclasses.replace(current, **changes)
            self._memory_store[entity_id] = updated
        return updated
