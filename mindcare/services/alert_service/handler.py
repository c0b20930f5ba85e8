"""Emergency alert intake and triage.

Intake turns canonical or legacy tracking payloads into a stored alert
with status "new". Triage lets reviewers move an alert's status; by
default any non-empty status is accepted, and strict mode enforces the
AlertStatus transition table instead.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from mindcare.shared.errors import InvalidTransitionError, NotFoundError, ValidationError
from mindcare.shared.models import AlertStatus, EmergencyAlert, can_transition, parse_positive_int
from mindcare.shared.utils import hash_pii
from .alert_repository import AlertRepository
from .config import AlertServiceConfig
from .payloads import adapt_payload

logger = logging.getLogger(__name__)


class AlertTriageService:
    """Creates, lists and triages emergency alerts."""

    def __init__(
        self,
        repository: Optional[AlertRepository] = None,
        config: Optional[AlertServiceConfig] = None,
    ):
        """Initialize service with dependencies.

        Args:
            repository: Alert store; defaults to an in-memory store
            config: Intake and triage settings
        """
        self.repository = repository or AlertRepository()
        self.config = config or AlertServiceConfig()

        logger.info(
            "ALERT_TRIAGE_SERVICE_INITIALIZED",
            extra={"strict_transitions": self.config.strict_transitions}
        )

    def create_alert(self, payload: Mapping[str, Any]) -> EmergencyAlert:
        """Normalize a tracking payload and store it as a new alert.

        Args:
            payload: Canonical or legacy request body

        Returns:
            Stored alert with status "new"

        Raises:
            ValidationError: If userId is missing
        """
        draft = adapt_payload(payload, self.config.excerpt_max_length)
        now = datetime.now(timezone.utc)

        alert = EmergencyAlert(
            user_id=draft.user_id,
            risk_level=draft.risk_level,
            is_heavy=draft.is_heavy,
            excerpt=draft.excerpt,
            full_text=draft.full_text,
            status=AlertStatus.NEW.value,
            metadata=draft.metadata,
            created_at=now,
            updated_at=now,
        )

        # Raises before the write when the salt is not configured
        user_id_hash = hash_pii(draft.user_id)

        self.repository.ensure_schema()
        stored = self.repository.insert(alert)

        log = logger.warning if stored.is_heavy else logger.info
        log(
            "ALERT_CREATED",
            extra={
                "alert_id": stored.id,
                "user_id_hash": user_id_hash,
                "risk_level": stored.risk_level,
                "is_heavy": stored.is_heavy,
                "payload_shape": draft.source_shape,
            }
        )

        return stored

    def list_alerts(self, limit: Optional[int] = None) -> List[EmergencyAlert]:
        """Newest alerts for all users, for the reviewer dashboard.

        Args:
            limit: Maximum alerts (default from config, 200)
        """
        resolved_limit = parse_positive_int(limit) or self.config.default_list_limit

        self.repository.ensure_schema()
        return self.repository.list_recent(resolved_limit)

    def update_status(self, alert_id: Any, status: Any) -> EmergencyAlert:
        """Set an alert's triage status.

        Args:
            alert_id: Alert identifier
            status: New status value

        Returns:
            Updated alert

        Raises:
            ValidationError: If id or status is missing
            InvalidTransitionError: In strict mode, for a disallowed change
            NotFoundError: If no alert has this id
        """
        if not alert_id or not status:
            raise ValidationError("Missing id or status")
        if not isinstance(status, str) or not status.strip():
            raise ValidationError("status must be a non-empty string")

        status = status.strip()
        parsed_id = parse_positive_int(alert_id)

        self.repository.ensure_schema()
        current = self.repository.find_by_id(parsed_id) if parsed_id else None
        if current is None:
            logger.warning("ALERT_STATUS_NOT_FOUND", extra={"alert_id": str(alert_id)})
            raise NotFoundError("Not found")

        if self.config.strict_transitions and not can_transition(current.status, status):
            logger.warning(
                "ALERT_TRANSITION_REJECTED",
                extra={
                    "alert_id": parsed_id,
                    "from_status": current.status,
                    "to_status": status,
                }
            )
            raise InvalidTransitionError(
                f"Cannot change status from '{current.status}' to '{status}'"
            )

        updated = self.repository.update_status(
            parsed_id, status, datetime.now(timezone.utc)
        )
        if updated is None:
            raise NotFoundError("Not found")

        logger.info(
            "ALERT_STATUS_UPDATED",
            extra={
                "alert_id": parsed_id,
                "from_status": current.status,
                "to_status": updated.status,
                "time_since_created_seconds": (
                    updated.updated_at - updated.created_at
                ).total_seconds(),
            }
        )

        return updated
