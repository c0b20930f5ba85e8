"""Risk record store.

Append-only: rows are inserted by the intake service and only ever
read back afterwards.
"""
import logging
from typing import Any, Dict, List

from mindcare.shared.database import BaseRepository, ColumnSpec, TableSpec
from mindcare.shared.models import RiskRecord

logger = logging.getLogger(__name__)

RISKS_TABLE = TableSpec(
    name="risks",
    columns=(
        ColumnSpec("id", "SERIAL PRIMARY KEY"),
        ColumnSpec("user_id", "INTEGER NOT NULL"),
        ColumnSpec("risk_level", "TEXT NOT NULL DEFAULT 'low'"),
        ColumnSpec("risk_score", "DOUBLE PRECISION NOT NULL DEFAULT 1"),
        ColumnSpec("risk_type", "TEXT NOT NULL"),
        ColumnSpec("indicator", "TEXT"),
        ColumnSpec("action_taken", "TEXT"),
        ColumnSpec("detected_at", "TIMESTAMPTZ NOT NULL DEFAULT NOW()"),
    ),
)


class RiskRepository(BaseRepository[RiskRecord]):
    """Persistence for RiskRecord rows in the `risks` table."""

    table = RISKS_TABLE

    def _row_to_entity(self, row: tuple) -> RiskRecord:
        return RiskRecord(
            id=row[0],
            user_id=row[1],
            risk_level=row[2],
            risk_score=row[3],
            risk_type=row[4],
            indicator=row[5],
            action_taken=row[6],
            detected_at=row[7],
        )

    def _entity_to_params(self, entity: RiskRecord) -> Dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "risk_level": entity.risk_level,
            "risk_score": entity.risk_score,
            "risk_type": entity.risk_type,
            "indicator": entity.indicator,
            "action_taken": entity.action_taken,
            "detected_at": entity.detected_at,
        }

    def find_by_user(self, user_id: int, limit: int) -> List[RiskRecord]:
        """Most recent records for a user, newest first.

        Args:
            user_id: Subject user
            limit: Maximum records to return

        Returns:
            Records ordered by detected_at descending
        """
        if self.uses_memory:
            return self._memory_select(
                lambda r: r.user_id == user_id,
                lambda r: (r.detected_at, r.id),
                limit,
            )

        return self._fetch(
            f"SELECT {self.select_columns} FROM {self.table.name} "
            "WHERE user_id = %s ORDER BY detected_at DESC, id DESC LIMIT %s",
            (user_id, limit)
        )
