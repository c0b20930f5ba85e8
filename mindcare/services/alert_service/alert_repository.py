"""Emergency alert store.

Alerts are inserted once and afterwards only their status changes.
Nothing in this service deletes rows.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from psycopg2.extras import Json

from mindcare.shared.database import BaseRepository, ColumnSpec, TableSpec
from mindcare.shared.models import EmergencyAlert

logger = logging.getLogger(__name__)

ALERTS_TABLE = TableSpec(
    name="emergency_alerts",
    columns=(
        ColumnSpec("id", "SERIAL PRIMARY KEY"),
        ColumnSpec("user_id", "TEXT NOT NULL"),
        ColumnSpec("risk_level", "TEXT NOT NULL DEFAULT 'low'"),
        ColumnSpec("is_heavy", "BOOLEAN NOT NULL DEFAULT FALSE"),
        ColumnSpec("excerpt", "VARCHAR(240) NOT NULL DEFAULT ''"),
        ColumnSpec("full_text", "TEXT NOT NULL DEFAULT ''"),
        ColumnSpec("status", "TEXT NOT NULL DEFAULT 'new'"),
        ColumnSpec("metadata", "JSONB NOT NULL DEFAULT '{}'"),
        ColumnSpec("created_at", "TIMESTAMPTZ NOT NULL DEFAULT NOW()"),
        ColumnSpec("updated_at", "TIMESTAMPTZ NOT NULL DEFAULT NOW()"),
    ),
)


class AlertRepository(BaseRepository[EmergencyAlert]):
    """Persistence for EmergencyAlert rows in `emergency_alerts`."""

    table = ALERTS_TABLE

    def _row_to_entity(self, row: tuple) -> EmergencyAlert:
        return EmergencyAlert(
            id=row[0],
            user_id=row[1],
            risk_level=row[2],
            is_heavy=row[3],
            excerpt=row[4],
            full_text=row[5],
            status=row[6],
            metadata=row[7] or {},
            created_at=row[8],
            updated_at=row[9],
        )

    def _entity_to_params(self, entity: EmergencyAlert) -> Dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "risk_level": entity.risk_level,
            "is_heavy": entity.is_heavy,
            "excerpt": entity.excerpt,
            "full_text": entity.full_text,
            "status": entity.status,
            "metadata": Json(entity.metadata),
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    def list_recent(self, limit: int) -> List[EmergencyAlert]:
        """Newest alerts across all users.

        Args:
            limit: Maximum alerts to return

        Returns:
            Alerts ordered by created_at descending, ties by id descending
        """
        if self.uses_memory:
            return self._memory_select(
                lambda a: True,
                lambda a: (a.created_at, a.id),
                limit,
            )

        return self._fetch(
            f"SELECT {self.select_columns} FROM {self.table.name} "
            "ORDER BY created_at DESC, id DESC LIMIT %s",
            (limit,)
        )

    def update_status(
        self,
        alert_id: int,
        status: str,
        updated_at: datetime,
    ) -> Optional[EmergencyAlert]:
        """Overwrite an alert's status.

        Returns:
            Updated alert, or None if no alert has this id
        """
        if self.uses_memory:
            return self._memory_replace(alert_id, status=status, updated_at=updated_at)

        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"UPDATE {self.table.name} SET status = %s, updated_at = %s "
                    f"WHERE id = %s RETURNING {self.select_columns}",
                    (status, updated_at, alert_id)
                )
                row = cur.fetchone()
            conn.commit()

        return self._row_to_entity(row) if row else None
