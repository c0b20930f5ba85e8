"""One-time table readiness gate.

The first ensure() after process start creates the backing table if it
is missing and adds any expected column the table lacks. Later calls
return immediately. Every statement is idempotent (IF NOT EXISTS), so
two processes racing through their first ensure() cannot corrupt the
table or fail each other.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Set, Tuple

from .connection import ConnectionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnSpec:
    """Column name plus its PostgreSQL type/constraint clause."""
    name: str
    definition: str


@dataclass(frozen=True)
class TableSpec:
    """Expected shape of a table."""
    name: str
    columns: Tuple[ColumnSpec, ...]

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def create_statement(self) -> str:
        body = ", ".join(f"{c.name} {c.definition}" for c in self.columns)
        return f"CREATE TABLE IF NOT EXISTS {self.name} ({body})"

    def add_column_statement(self, column: ColumnSpec) -> str:
        # Constraints like PRIMARY KEY cannot be added this way; only the
        # type and default part of the definition is kept.
        definition = column.definition.replace("PRIMARY KEY", "").replace("NOT NULL", "")
        definition = " ".join(definition.split())
        return f"ALTER TABLE {self.name} ADD COLUMN IF NOT EXISTS {column.name} {definition}"


class SchemaGate:
    """Process-wide, at-most-once-successful schema check for one table.

    Without a connection manager (in-memory store) the gate is always
    open. A failed ensure() leaves the gate closed so the next caller
    retries.
    """

    def __init__(
        self,
        connection_manager: Optional[ConnectionManager],
        table: TableSpec,
    ):
        self.connection_manager = connection_manager
        self.table = table
        self._ready = connection_manager is None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._ready

    def ensure(self) -> None:
        """Make sure the table exists with every expected column.

        Raises:
            StoreUnavailableError: If the database cannot be reached
        """
        if self._ready:
            return

        with self._lock:
            if self._ready:
                return

            added = self._apply()
            self._ready = True

        logger.info(
            "SCHEMA_ENSURED",
            extra={"table": self.table.name, "added_columns": sorted(added)}
        )

    def _apply(self) -> Set[str]:
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(self.table.create_statement())
                cur.execute(
                    "SELECT column_name FROM information_schema.columns "
                    "WHERE table_schema = current_schema() AND table_name = %s",
                    (self.table.name,)
                )
                existing = {row[0] for row in cur.fetchall()}

                missing = [c for c in self.table.columns if c.name not in existing]
                for column in missing:
                    cur.execute(self.table.add_column_statement(column))

            conn.commit()

        return {c.name for c in missing}
